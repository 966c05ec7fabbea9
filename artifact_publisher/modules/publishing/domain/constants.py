"""Constants shared by the publishing stages."""

SOURCES_CLASSIFIER = "sources"
JAVADOC_CLASSIFIER = "javadoc"
JAR_EXTENSION = "jar"
POM_EXTENSION = "pom"

# Checksum sidecars uploaded next to every file, keyed by file suffix.
CHECKSUM_ALGORITHMS = ("md5", "sha1", "sha256", "sha512")

METADATA_FILE_NAME = "maven-metadata.xml"

# 1980-02-01 00:00:00, the timestamp reproducible jars are stamped with.
REPRODUCIBLE_ZIP_TIMESTAMP = (1980, 2, 1, 0, 0, 0)

AUTH_SCHEME_BASIC = "basic"
