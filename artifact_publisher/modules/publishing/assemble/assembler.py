"""Builds the jar, sources jar and javadoc jar of one version."""

from __future__ import annotations

import logging
import shlex
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from artifact_publisher.modules.publishing.domain import Artifact, ArtifactSet, ProjectCoordinates
from artifact_publisher.modules.publishing.domain.constants import (
    JAR_EXTENSION,
    JAVADOC_CLASSIFIER,
    POM_EXTENSION,
    SOURCES_CLASSIFIER,
)
from artifact_publisher.modules.publishing.exceptions import BuildFailure

from .archive import write_jar
from .pom import PomDetails, write_pom

Command = Union[str, Sequence[str], None]


@dataclass
class ProjectLayout:
    """Where the compiled classes, sources and docs of a project live."""

    project_dir: Path
    classes_dir: Path
    sources_dir: Path
    docs_dir: Path
    output_dir: Path
    resources_dir: Optional[Path] = None

    @classmethod
    def from_root(
        cls,
        project_dir: Path,
        *,
        classes_dir: str = "build/classes/java/main",
        sources_dir: str = "src/main/java",
        docs_dir: str = "build/docs/javadoc",
        output_dir: str = "build/libs",
        resources_dir: Optional[str] = "src/main/resources",
    ) -> "ProjectLayout":
        root = Path(project_dir)
        return cls(
            project_dir=root,
            classes_dir=root / classes_dir,
            sources_dir=root / sources_dir,
            docs_dir=root / docs_dir,
            output_dir=root / output_dir,
            resources_dir=root / resources_dir if resources_dir else None,
        )


def _split_command(command: Command) -> List[str]:
    if not command:
        return []
    if isinstance(command, str):
        return shlex.split(command)
    return list(command)


class ArtifactAssembler:
    """Runs the configured build steps and packages their output."""

    def __init__(
        self,
        layout: ProjectLayout,
        *,
        pom_details: Optional[PomDetails] = None,
        build_command: Command = None,
        docs_command: Command = None,
        timeout: Optional[int] = None,
    ) -> None:
        self.layout = layout
        self.pom_details = pom_details
        self.build_command = _split_command(build_command)
        self.docs_command = _split_command(docs_command)
        self.timeout = timeout
        self.log = logging.getLogger(self.__class__.__name__)

    def assemble_artifacts(self, coords: ProjectCoordinates) -> ArtifactSet:
        start = time.perf_counter()
        self.log.info("Assembling %s in %s", coords, self.layout.project_dir)
        if self.build_command:
            self._run_command("build", self.build_command)
        if self.docs_command:
            self._run_command("docs", self.docs_command)

        classes = self._require_dir("classes", self.layout.classes_dir)
        sources = self._require_dir("sources", self.layout.sources_dir)
        docs = self._require_dir("docs", self.layout.docs_dir)
        binary_roots = [classes]
        resources = self.layout.resources_dir
        if resources and resources.is_dir():
            binary_roots.append(resources)

        out = self.layout.output_dir
        try:
            binary = self._jar(coords, out, binary_roots, None)
            sources_jar = self._jar(coords, out, [sources], SOURCES_CLASSIFIER)
            docs_jar = self._jar(coords, out, [docs], JAVADOC_CLASSIFIER)
            pom_path = write_pom(
                out / coords.file_name(POM_EXTENSION),
                coords,
                self.pom_details,
            )
        except OSError as exc:
            raise BuildFailure(f"packaging {coords} failed: {exc}") from exc

        artifact_set = ArtifactSet(
            coordinates=coords,
            binary=binary,
            sources=sources_jar,
            docs=docs_jar,
            pom=Artifact(coords, pom_path, extension=POM_EXTENSION),
        )
        self.log.info(
            "Assembled %s -> %s (%.2fs)",
            coords,
            ", ".join(a.file_name for a in artifact_set.files()),
            time.perf_counter() - start,
        )
        return artifact_set

    def _jar(
        self,
        coords: ProjectCoordinates,
        out: Path,
        roots: List[Path],
        classifier: Optional[str],
    ) -> Artifact:
        target = out / coords.file_name(JAR_EXTENSION, classifier)
        manifest = {
            "Implementation-Title": coords.artifact_id,
            "Implementation-Version": coords.version,
            "Implementation-Vendor-Id": coords.group,
        }
        write_jar(target, roots, manifest)
        return Artifact(coords, target, extension=JAR_EXTENSION, classifier=classifier)

    @staticmethod
    def _require_dir(label: str, path: Path) -> Path:
        if not path.is_dir():
            raise BuildFailure(f"{label} directory not found: {path}")
        return path

    def _run_command(self, label: str, command: List[str]) -> str:
        timeout_desc = f"{self.timeout}s" if self.timeout else "none"
        self.log.info("Running %s command=%s cwd=%s timeout=%s", label, command, self.layout.project_dir, timeout_desc)
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                cwd=str(self.layout.project_dir),
                timeout=self.timeout or None,
                stdin=subprocess.DEVNULL,
            )
        except subprocess.TimeoutExpired as exc:
            raise BuildFailure(f"{label} command timed out after {self.timeout}s") from exc
        except OSError as exc:
            raise BuildFailure(f"{label} command could not start: {exc}") from exc
        if completed.stdout:
            self.log.debug("%s stdout: %s", label, completed.stdout.strip())
        if completed.stderr:
            self.log.warning("%s stderr: %s", label, completed.stderr.strip())
        try:
            completed.check_returncode()
        except subprocess.CalledProcessError as exc:
            raise BuildFailure(f"{label} command exited with status {exc.returncode}") from exc
        return completed.stdout or ""
