"""Artifact level ``maven-metadata.xml`` maintenance."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from typing import List, Optional

from artifact_publisher.modules.publishing.domain import ProjectCoordinates
from artifact_publisher.modules.publishing.exceptions import PublishError

LAST_UPDATED_FORMAT = "%Y%m%d%H%M%S"


class MetadataError(PublishError):
    """The remote metadata exists but cannot be understood."""


def _child(parent: ET.Element, tag: str) -> ET.Element:
    found = parent.find(tag)
    if found is None:
        found = ET.SubElement(parent, tag)
    return found


def parse_versions(content: bytes) -> List[str]:
    root = ET.fromstring(content)
    return [el.text.strip() for el in root.findall("./versioning/versions/version") if el.text]


def merge_metadata(
    existing: Optional[bytes],
    coords: ProjectCoordinates,
    now: Optional[datetime] = None,
) -> bytes:
    """Return metadata listing ``coords.version`` on top of ``existing``."""
    now = now or datetime.now(timezone.utc)
    if existing:
        try:
            root = ET.fromstring(existing)
        except ET.ParseError as exc:
            raise MetadataError(f"remote maven-metadata.xml for {coords} is not valid XML: {exc}") from exc
        if root.tag != "metadata":
            raise MetadataError(f"unexpected root element <{root.tag}> in maven-metadata.xml")
    else:
        root = ET.Element("metadata")
    _child(root, "groupId").text = coords.group
    _child(root, "artifactId").text = coords.artifact_id

    versioning = _child(root, "versioning")
    _child(versioning, "latest").text = coords.version
    if not coords.is_snapshot:
        _child(versioning, "release").text = coords.version
    versions = _child(versioning, "versions")
    known = [el.text for el in versions.findall("version")]
    if coords.version not in known:
        ET.SubElement(versions, "version").text = coords.version
    _child(versioning, "lastUpdated").text = now.astimezone(timezone.utc).strftime(LAST_UPDATED_FORMAT)

    # Keep the conventional element order regardless of what the remote had.
    order = {"latest": 0, "release": 1, "versions": 2, "lastUpdated": 3}
    versioning[:] = sorted(versioning, key=lambda el: order.get(el.tag, len(order)))

    ET.indent(root, space="  ")
    return ET.tostring(root, encoding="UTF-8", xml_declaration=True) + b"\n"
