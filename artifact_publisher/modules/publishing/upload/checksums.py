"""Checksum sidecar files published next to every uploaded file."""

from __future__ import annotations

import hashlib
from typing import Dict, List

from artifact_publisher.modules.publishing.domain.constants import CHECKSUM_ALGORITHMS


def checksum_sidecars(data: bytes) -> Dict[str, bytes]:
    """Map each checksum suffix to the lowercase hex digest of ``data``."""
    return {algorithm: hashlib.new(algorithm, data).hexdigest().encode("ascii") for algorithm in CHECKSUM_ALGORITHMS}


def sidecar_segments(segments: List[str], algorithm: str) -> List[str]:
    return segments[:-1] + [f"{segments[-1]}.{algorithm}"]
