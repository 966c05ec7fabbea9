"""Publishing module exports."""

from .exceptions import (
    AuthFailure,
    BuildFailure,
    ConfigurationError,
    ConflictFailure,
    NetworkFailure,
    PublishError,
    SigningFailure,
)
from .service import Publisher

__all__ = [
    "AuthFailure",
    "BuildFailure",
    "ConfigurationError",
    "ConflictFailure",
    "NetworkFailure",
    "PublishError",
    "Publisher",
    "SigningFailure",
]
