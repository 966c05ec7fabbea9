"""Dataclasses describing one publish run."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import SecretStr

from .artifact import ProjectCoordinates
from .constants import AUTH_SCHEME_BASIC


class PublishStage(str, Enum):
    IDLE = "idle"
    ASSEMBLING = "assembling"
    SIGNING = "signing"
    UPLOADING = "uploading"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class Artifact:
    """A single published file."""

    coordinates: ProjectCoordinates
    path: Path
    extension: str = "jar"
    classifier: Optional[str] = None

    @property
    def file_name(self) -> str:
        return self.coordinates.file_name(self.extension, self.classifier)

    @property
    def path_segments(self) -> List[str]:
        return self.coordinates.path_segments(self.extension, self.classifier)


@dataclass
class ArtifactSet:
    """The jar, sources jar and javadoc jar of one version, plus their POM."""

    coordinates: ProjectCoordinates
    binary: Artifact
    sources: Artifact
    docs: Artifact
    pom: Artifact

    @property
    def artifacts(self) -> List[Artifact]:
        return [self.binary, self.sources, self.docs]

    def files(self) -> List[Artifact]:
        """Every file of the publication; the POM comes last."""
        return self.artifacts + [self.pom]

    def classifiers(self) -> List[Optional[str]]:
        return [artifact.classifier for artifact in self.artifacts]


@dataclass
class SignedArtifactSet:
    artifact_set: ArtifactSet
    signature_extension: str
    signatures: Dict[Path, Path] = field(default_factory=dict)

    @property
    def coordinates(self) -> ProjectCoordinates:
        return self.artifact_set.coordinates

    def signature_for(self, artifact: Artifact) -> Path:
        try:
            return self.signatures[artifact.path]
        except KeyError:
            raise KeyError(f"no signature recorded for {artifact.file_name}") from None

    def is_complete(self) -> bool:
        return all(
            artifact.path in self.signatures and self.signatures[artifact.path].exists()
            for artifact in self.artifact_set.files()
        )


@dataclass(frozen=True)
class Credentials:
    username: str
    password: SecretStr

    def as_auth(self) -> tuple:
        return (self.username, self.password.get_secret_value())

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='**********')"


@dataclass(frozen=True)
class SigningKey:
    """Reference to the private key used for detached signatures.

    ``material`` holds an in-memory key (PEM text), ``path`` a key file; gpg
    keys may instead be selected purely by ``key_id`` from the keyring.
    """

    material: Optional[SecretStr] = None
    path: Optional[Path] = None
    passphrase: Optional[SecretStr] = None
    key_id: Optional[str] = None

    def __repr__(self) -> str:
        return f"SigningKey(path={self.path!r}, key_id={self.key_id!r})"


@dataclass(frozen=True)
class PublishTarget:
    name: str
    url: str
    auth_scheme: str = AUTH_SCHEME_BASIC

    @property
    def base_url(self) -> str:
        return self.url.rstrip("/")

    @property
    def is_local(self) -> bool:
        return self.url.startswith("file:")


@dataclass
class PublishReceipt:
    coordinates: ProjectCoordinates
    target: PublishTarget
    uploaded: List[str] = field(default_factory=list)
    dry_run: bool = False
    published_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def as_dict(self) -> Dict[str, object]:
        return {
            "coordinates": str(self.coordinates),
            "repository": self.target.name,
            "url": self.target.base_url,
            "dry_run": self.dry_run,
            "files": list(self.uploaded),
            "published_at": self.published_at.isoformat(),
        }
