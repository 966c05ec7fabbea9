from .checksums import checksum_sidecars
from .maven_client import FileRepositoryClient, MavenRepositoryClient, create_repository_client
from .metadata import MetadataError, merge_metadata
from .uploader import ArtifactUploader

__all__ = [
    "ArtifactUploader",
    "FileRepositoryClient",
    "MavenRepositoryClient",
    "MetadataError",
    "checksum_sidecars",
    "create_repository_client",
    "merge_metadata",
]
