from .archive import write_jar
from .assembler import ArtifactAssembler, ProjectLayout
from .pom import PomDetails, render_pom

__all__ = [
    "ArtifactAssembler",
    "PomDetails",
    "ProjectLayout",
    "render_pom",
    "write_jar",
]
