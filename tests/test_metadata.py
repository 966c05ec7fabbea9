import xml.etree.ElementTree as ET
from datetime import datetime, timezone

import pytest

from artifact_publisher.modules.publishing.domain import ProjectCoordinates
from artifact_publisher.modules.publishing.upload import MetadataError, merge_metadata
from artifact_publisher.modules.publishing.upload.metadata import parse_versions

NOW = datetime(2024, 5, 1, 12, 30, 0, tzinfo=timezone.utc)


def test_new_metadata():
    content = merge_metadata(None, ProjectCoordinates("com.example", "demo", "1.0.0"), now=NOW)

    root = ET.fromstring(content)
    assert root.findtext("groupId") == "com.example"
    assert root.findtext("artifactId") == "demo"
    assert root.findtext("versioning/latest") == "1.0.0"
    assert root.findtext("versioning/release") == "1.0.0"
    assert root.findtext("versioning/lastUpdated") == "20240501123000"
    assert parse_versions(content) == ["1.0.0"]


def test_merge_keeps_existing_versions():
    existing = merge_metadata(None, ProjectCoordinates("com.example", "demo", "1.0.0"), now=NOW)

    content = merge_metadata(existing, ProjectCoordinates("com.example", "demo", "1.1.0"), now=NOW)

    root = ET.fromstring(content)
    assert parse_versions(content) == ["1.0.0", "1.1.0"]
    assert root.findtext("versioning/latest") == "1.1.0"
    assert root.findtext("versioning/release") == "1.1.0"
    assert [el.tag for el in root.find("versioning")] == ["latest", "release", "versions", "lastUpdated"]


def test_snapshot_does_not_move_release():
    existing = merge_metadata(None, ProjectCoordinates("com.example", "demo", "1.0.0"), now=NOW)

    content = merge_metadata(existing, ProjectCoordinates("com.example", "demo", "1.1.0-SNAPSHOT"), now=NOW)

    root = ET.fromstring(content)
    assert root.findtext("versioning/latest") == "1.1.0-SNAPSHOT"
    assert root.findtext("versioning/release") == "1.0.0"


def test_republishing_does_not_duplicate_version():
    coords = ProjectCoordinates("com.example", "demo", "1.0.0-SNAPSHOT")
    once = merge_metadata(None, coords, now=NOW)

    assert parse_versions(merge_metadata(once, coords, now=NOW)) == ["1.0.0-SNAPSHOT"]


@pytest.mark.parametrize("content", [b"<metadata>", b"<project/>"])
def test_unreadable_metadata_is_rejected(content):
    with pytest.raises(MetadataError):
        merge_metadata(content, ProjectCoordinates("com.example", "demo", "1.0.0"))
