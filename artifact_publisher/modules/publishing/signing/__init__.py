"""Signer backends and the factory choosing between them."""

from __future__ import annotations

from typing import Optional

from artifact_publisher.modules.publishing.domain import SigningKey
from artifact_publisher.modules.publishing.exceptions import ConfigurationError

from .base import Signer, sign_artifacts
from .gpg import GpgSigner
from .pem import PemSigner

SIGNING_BACKENDS = ("pem", "gpg")


def create_signer(
    backend: str,
    key: SigningKey,
    *,
    gpg_executable: str = "gpg",
    gpg_homedir: Optional[str] = None,
) -> Signer:
    name = (backend or "").lower()
    if name == "pem":
        return PemSigner(key)
    if name == "gpg":
        return GpgSigner(key, executable=gpg_executable, homedir=gpg_homedir)
    raise ConfigurationError(f"unknown signing backend {backend!r}, expected one of {SIGNING_BACKENDS}")


__all__ = [
    "GpgSigner",
    "PemSigner",
    "SIGNING_BACKENDS",
    "Signer",
    "create_signer",
    "sign_artifacts",
]
