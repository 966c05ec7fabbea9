import pytest

from artifact_publisher.modules.publishing.domain import ProjectCoordinates


def test_path_segments_follow_maven_layout():
    coords = ProjectCoordinates("me.thealgorithm476", "osfetch", "2.0.1")

    assert coords.path_segments() == [
        "me/thealgorithm476",
        "osfetch",
        "2.0.1",
        "osfetch-2.0.1.jar",
    ]
    assert coords.file_name("jar", "javadoc") == "osfetch-2.0.1-javadoc.jar"
    assert coords.file_name("pom") == "osfetch-2.0.1.pom"
    assert str(coords) == "me.thealgorithm476:osfetch:2.0.1"


def test_snapshot_detection():
    assert ProjectCoordinates("com.example", "demo", "1.0-SNAPSHOT").is_snapshot
    assert not ProjectCoordinates("com.example", "demo", "1.0").is_snapshot


@pytest.mark.parametrize(
    "group, artifact, version",
    [
        ("", "demo", "1.0"),
        ("com..example", "demo", "1.0"),
        ("com.example", "de/mo", "1.0"),
        ("com.example", "demo", ""),
        ("com.example", "demo", "1.0 beta"),
        ("com.example", "..", "1.0"),
        ("com.example", "demo", "."),
        ("com.example", "demo", ".."),
    ],
)
def test_invalid_coordinates_are_rejected(group, artifact, version):
    with pytest.raises(ValueError):
        ProjectCoordinates(group, artifact, version)


def test_coordinates_are_immutable():
    coords = ProjectCoordinates("com.example", "demo", "1.0")
    with pytest.raises(AttributeError):
        coords.version = "2.0"


def test_dots_inside_tokens_are_allowed():
    coords = ProjectCoordinates("com.example", "demo.core", "1.0.0-rc.1")

    assert coords.file_name("jar") == "demo.core-1.0.0-rc.1.jar"
