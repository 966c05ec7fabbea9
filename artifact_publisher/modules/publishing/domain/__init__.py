from .artifact import ProjectCoordinates
from .models import (
    Artifact,
    ArtifactSet,
    Credentials,
    PublishReceipt,
    PublishStage,
    PublishTarget,
    SignedArtifactSet,
    SigningKey,
)

__all__ = [
    "ProjectCoordinates",
    "Artifact",
    "ArtifactSet",
    "Credentials",
    "PublishReceipt",
    "PublishStage",
    "PublishTarget",
    "SignedArtifactSet",
    "SigningKey",
]
