"""Failure kinds surfaced by the publish pipeline."""

from __future__ import annotations


class PublishError(RuntimeError):
    """Base class; ``exit_code`` is what the CLI returns for this kind."""

    exit_code = 1
    kind = "PublishError"


class ConfigurationError(PublishError):
    """Raised when required settings are missing or malformed."""

    exit_code = 1
    kind = "ConfigurationError"


class BuildFailure(PublishError):
    exit_code = 2
    kind = "BuildFailure"


class SigningFailure(PublishError):
    exit_code = 3
    kind = "SigningFailure"


class AuthFailure(PublishError):
    exit_code = 4
    kind = "AuthFailure"


class NetworkFailure(PublishError):
    """Transport errors and transient server answers; the only retried kind."""

    exit_code = 5
    kind = "NetworkFailure"

    def __init__(self, message: str, *, transient: bool = True) -> None:
        super().__init__(message)
        self.transient = transient


class ConflictFailure(PublishError):
    """The remote already holds this version."""

    exit_code = 6
    kind = "ConflictFailure"


INTERRUPTED_EXIT_CODE = 130
