"""Maven coordinates for the published library."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

_GROUP_RE = re.compile(r"^[A-Za-z0-9_\-]+(\.[A-Za-z0-9_\-]+)*$")
_TOKEN_RE = re.compile(r"^(?!\.+$)[A-Za-z0-9_\-.]+$")


@dataclass(frozen=True)
class ProjectCoordinates:
    """Represents a Maven groupId:artifactId:version triple."""

    group: str
    artifact_id: str
    version: str

    def __post_init__(self) -> None:
        if not self.group or not _GROUP_RE.match(self.group):
            raise ValueError(f"invalid group id: {self.group!r}")
        if not self.artifact_id or not _TOKEN_RE.match(self.artifact_id):
            raise ValueError(f"invalid artifact id: {self.artifact_id!r}")
        if not self.version or not _TOKEN_RE.match(self.version):
            raise ValueError(f"invalid version: {self.version!r}")

    @property
    def is_snapshot(self) -> bool:
        return self.version.endswith("-SNAPSHOT")

    @property
    def group_path(self) -> str:
        return self.group.replace(".", "/")

    @property
    def artifact_dir_segments(self) -> List[str]:
        return [self.group_path, self.artifact_id]

    @property
    def version_dir_segments(self) -> List[str]:
        return [self.group_path, self.artifact_id, self.version]

    def file_name(self, extension: str, classifier: Optional[str] = None) -> str:
        suffix = f"-{classifier}" if classifier else ""
        return f"{self.artifact_id}-{self.version}{suffix}.{extension}"

    def path_segments(self, extension: str = "jar", classifier: Optional[str] = None) -> List[str]:
        return self.version_dir_segments + [self.file_name(extension, classifier)]

    def __str__(self) -> str:
        return f"{self.group}:{self.artifact_id}:{self.version}"
