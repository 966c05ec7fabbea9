"""POM generation for the published library."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from artifact_publisher.modules.publishing.domain import ProjectCoordinates

POM_NAMESPACE = "http://maven.apache.org/POM/4.0.0"
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
POM_SCHEMA = "http://maven.apache.org/xsd/maven-4.0.0.xsd"


@dataclass
class PomDetails:
    name: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    license_name: Optional[str] = None
    license_url: Optional[str] = None
    developer_id: Optional[str] = None
    developer_name: Optional[str] = None
    developer_email: Optional[str] = None
    scm_url: Optional[str] = None


def _text(parent: ET.Element, tag: str, value: Optional[str]) -> None:
    if value:
        ET.SubElement(parent, tag).text = value


def render_pom(coords: ProjectCoordinates, details: Optional[PomDetails] = None) -> bytes:
    details = details or PomDetails()
    project = ET.Element(
        "project",
        {
            "xmlns": POM_NAMESPACE,
            "xmlns:xsi": XSI_NAMESPACE,
            "xsi:schemaLocation": f"{POM_NAMESPACE} {POM_SCHEMA}",
        },
    )
    _text(project, "modelVersion", "4.0.0")
    _text(project, "groupId", coords.group)
    _text(project, "artifactId", coords.artifact_id)
    _text(project, "version", coords.version)
    _text(project, "packaging", "jar")
    _text(project, "name", details.name)
    _text(project, "description", details.description)
    _text(project, "url", details.url)
    if details.license_name:
        licenses = ET.SubElement(project, "licenses")
        license_el = ET.SubElement(licenses, "license")
        _text(license_el, "name", details.license_name)
        _text(license_el, "url", details.license_url)
    if details.developer_id or details.developer_name:
        developers = ET.SubElement(project, "developers")
        developer = ET.SubElement(developers, "developer")
        _text(developer, "id", details.developer_id)
        _text(developer, "name", details.developer_name)
        _text(developer, "email", details.developer_email)
    if details.scm_url:
        scm = ET.SubElement(project, "scm")
        _text(scm, "url", details.scm_url)
    ET.indent(project, space="  ")
    return ET.tostring(project, encoding="utf-8", xml_declaration=True) + b"\n"


def write_pom(target: Path, coords: ProjectCoordinates, details: Optional[PomDetails] = None) -> Path:
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(render_pom(coords, details))
    return target
