"""Detached signing of a whole publication."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from artifact_publisher.modules.publishing.domain import ArtifactSet, SignedArtifactSet
from artifact_publisher.modules.publishing.exceptions import SigningFailure

log = logging.getLogger(__name__)


class Signer:
    """Writes a detached signature next to a file."""

    extension = ".sig"

    def signature_path(self, path: Path) -> Path:
        return path.with_name(path.name + self.extension)

    def sign_file(self, path: Path) -> Path:
        raise NotImplementedError

    def close(self) -> None:
        return None

    def __enter__(self) -> "Signer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def sign_artifacts(artifact_set: ArtifactSet, signer: Signer) -> SignedArtifactSet:
    """Sign every file of ``artifact_set``; all of them or none of them."""
    signed = SignedArtifactSet(artifact_set=artifact_set, signature_extension=signer.extension)
    written: List[Path] = []
    try:
        for artifact in artifact_set.files():
            try:
                signature = signer.sign_file(artifact.path)
            except SigningFailure:
                raise
            except OSError as exc:
                raise SigningFailure(f"cannot sign {artifact.file_name}: {exc}") from exc
            if not signature.exists():
                raise SigningFailure(f"signer produced no signature for {artifact.file_name}")
            written.append(signature)
            signed.signatures[artifact.path] = signature
            log.info("Signed %s -> %s", artifact.file_name, signature.name)
    except BaseException:
        for signature in written:
            signature.unlink(missing_ok=True)
        log.warning("Signing %s aborted, removed %d signatures", artifact_set.coordinates, len(written))
        raise
    return signed
