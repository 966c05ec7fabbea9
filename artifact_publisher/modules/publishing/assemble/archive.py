"""Reproducible jar writer."""

from __future__ import annotations

import logging
import os
import zipfile
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from artifact_publisher.modules.publishing.domain.constants import REPRODUCIBLE_ZIP_TIMESTAMP

MANIFEST_NAME = "META-INF/MANIFEST.MF"

log = logging.getLogger(__name__)


def render_manifest(attributes: Optional[Mapping[str, str]] = None) -> bytes:
    lines = ["Manifest-Version: 1.0"]
    for key, value in (attributes or {}).items():
        if key == "Manifest-Version":
            continue
        lines.append(f"{key}: {value}")
    return ("\r\n".join(lines) + "\r\n\r\n").encode("utf-8")


def collect_entries(roots: Sequence[Path]) -> List[Tuple[str, Path]]:
    """Return ``(archive name, file)`` pairs sorted by archive name.

    When two roots contain the same relative path the first root wins.
    """
    entries: Dict[str, Path] = {}
    for root in roots:
        for path in root.rglob("*"):
            if not path.is_file():
                continue
            name = path.relative_to(root).as_posix()
            if name in entries:
                log.warning("Duplicate archive entry %s from %s ignored", name, root)
                continue
            entries[name] = path
    return sorted(entries.items())


def _zip_info(name: str) -> zipfile.ZipInfo:
    info = zipfile.ZipInfo(name, date_time=REPRODUCIBLE_ZIP_TIMESTAMP)
    info.compress_type = zipfile.ZIP_DEFLATED
    info.external_attr = 0o644 << 16
    info.create_system = 3
    return info


def write_jar(
    target: Path,
    roots: Sequence[Path],
    manifest: Optional[Mapping[str, str]] = None,
) -> Path:
    """Write ``roots`` into ``target`` with a manifest as the first entry.

    Entry order and timestamps are fixed so identical inputs produce
    byte-identical archives.
    """
    target.parent.mkdir(parents=True, exist_ok=True)
    partial = target.with_name(target.name + ".part")
    entries = collect_entries(roots)
    with zipfile.ZipFile(partial, "w") as zf:
        zf.writestr(_zip_info(MANIFEST_NAME), render_manifest(manifest))
        for name, path in entries:
            if name == MANIFEST_NAME:
                continue
            zf.writestr(_zip_info(name), path.read_bytes())
    os.replace(partial, target)
    log.debug("Wrote %s (%d entries)", target, len(entries) + 1)
    return target
