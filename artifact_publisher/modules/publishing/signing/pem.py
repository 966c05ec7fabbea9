"""Signatures made with a PEM encoded private key."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, padding, rsa

from artifact_publisher.modules.publishing.domain import SigningKey
from artifact_publisher.modules.publishing.exceptions import SigningFailure

from .base import Signer


def load_private_key(key: SigningKey):
    if key.material is not None:
        data = key.material.get_secret_value().encode()
    elif key.path is not None:
        try:
            data = Path(key.path).read_bytes()
        except OSError as exc:
            raise SigningFailure(f"signing key not readable: {key.path}") from exc
    else:
        raise SigningFailure("no signing key configured")
    password: Optional[bytes] = None
    if key.passphrase is not None:
        password = key.passphrase.get_secret_value().encode()
    try:
        return serialization.load_pem_private_key(data, password=password)
    except TypeError as exc:
        # raised for an encrypted key without passphrase and vice versa
        raise SigningFailure(f"signing key passphrase rejected: {exc}") from exc
    except (ValueError, UnsupportedAlgorithm) as exc:
        raise SigningFailure("signing key invalid or passphrase rejected") from exc


class PemSigner(Signer):
    """Ed25519, RSA (PKCS#1 v1.5, SHA-256) or ECDSA (SHA-256) signatures."""

    extension = ".sig"

    def __init__(self, key: SigningKey) -> None:
        self.private_key = load_private_key(key)
        if not isinstance(
            self.private_key,
            (ed25519.Ed25519PrivateKey, rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey),
        ):
            raise SigningFailure(f"unsupported key type {type(self.private_key).__name__}")
        self.log = logging.getLogger(self.__class__.__name__)

    def sign_bytes(self, data: bytes) -> bytes:
        key = self.private_key
        if isinstance(key, ed25519.Ed25519PrivateKey):
            return key.sign(data)
        if isinstance(key, rsa.RSAPrivateKey):
            return key.sign(data, padding.PKCS1v15(), hashes.SHA256())
        return key.sign(data, ec.ECDSA(hashes.SHA256()))

    def sign_file(self, path: Path) -> Path:
        target = self.signature_path(path)
        target.write_bytes(self.sign_bytes(path.read_bytes()))
        return target

    def verify(self, path: Path, signature: Optional[Path] = None) -> bool:
        signature = signature or self.signature_path(path)
        public_key = self.private_key.public_key()
        data = path.read_bytes()
        sig = signature.read_bytes()
        try:
            if isinstance(public_key, ed25519.Ed25519PublicKey):
                public_key.verify(sig, data)
            elif isinstance(public_key, rsa.RSAPublicKey):
                public_key.verify(sig, data, padding.PKCS1v15(), hashes.SHA256())
            else:
                public_key.verify(sig, data, ec.ECDSA(hashes.SHA256()))
        except InvalidSignature:
            return False
        return True
