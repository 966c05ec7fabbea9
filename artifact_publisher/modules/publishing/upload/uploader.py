"""Uploads a signed publication, all of it or none of it."""

from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional, Tuple, TypeVar

from artifact_publisher.modules.publishing.domain import (
    ProjectCoordinates,
    PublishReceipt,
    SignedArtifactSet,
)
from artifact_publisher.modules.publishing.domain.constants import CHECKSUM_ALGORITHMS, METADATA_FILE_NAME
from artifact_publisher.modules.publishing.exceptions import (
    AuthFailure,
    ConflictFailure,
    NetworkFailure,
    SigningFailure,
)

from .checksums import checksum_sidecars, sidecar_segments
from .metadata import merge_metadata

T = TypeVar("T")

UploadItem = Tuple[List[str], bytes]
# a written path and what it held before this run, None when it was absent
Uploaded = Tuple[List[str], Optional[bytes]]


class ArtifactUploader:
    """Pushes files, signatures and checksums, then commits the metadata.

    Files land in the version directory first; ``maven-metadata.xml`` is
    written last, so a version only becomes visible to resolvers once
    everything else is in place. Any failure or interruption deletes what
    this run uploaded and restores the previous metadata before the
    original error propagates.
    """

    def __init__(
        self,
        client,
        *,
        attempts: int = 3,
        backoff_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.client = client
        self.attempts = max(1, attempts)
        self.backoff_seconds = backoff_seconds
        self._sleep = sleep
        self.log = logging.getLogger(self.__class__.__name__)

    def plan(self, signed: SignedArtifactSet) -> List[UploadItem]:
        """Files to upload in order, each followed by its signature."""
        items: List[UploadItem] = []
        for artifact in signed.artifact_set.files():
            segments = artifact.path_segments
            signature = signed.signature_for(artifact)
            items.append((segments, artifact.path.read_bytes()))
            sig_segments = segments[:-1] + [segments[-1] + signed.signature_extension]
            items.append((sig_segments, signature.read_bytes()))
        return items

    def planned_urls(self, signed: SignedArtifactSet) -> List[str]:
        coords = signed.coordinates
        urls = [self.client.url_for(segments) for segments, _ in self.plan(signed)]
        urls.append(self.client.url_for(self._metadata_segments(coords)))
        return urls

    def publish(self, signed: SignedArtifactSet) -> PublishReceipt:
        coords = signed.coordinates
        if not signed.is_complete():
            raise SigningFailure(f"refusing to upload {coords}: not every file is signed")
        start = time.perf_counter()
        overwriting = self._preflight(coords)
        metadata_segments = self._metadata_segments(coords)
        previous_metadata = self._retry("GET metadata", lambda: self.client.get(metadata_segments))
        new_metadata = merge_metadata(previous_metadata, coords)
        items = self.plan(signed)

        uploaded: List[Uploaded] = []
        receipt = PublishReceipt(coordinates=coords, target=self.client.target)
        metadata_touched = False
        try:
            for segments, content in items:
                receipt.uploaded.append(self._upload_with_checksums(segments, content, uploaded, overwriting))
            metadata_touched = True
            receipt.uploaded.append(self._upload_with_checksums(metadata_segments, new_metadata, []))
        except BaseException as exc:
            self.log.error("Publishing %s failed after %d uploads: %r", coords, len(uploaded), exc)
            self._rollback(uploaded, metadata_segments if metadata_touched else None, previous_metadata)
            raise
        self.log.info(
            "Published %s to %s (%d files, %.2fs)",
            coords,
            self.client.target.name,
            len(receipt.uploaded),
            time.perf_counter() - start,
        )
        return receipt

    @staticmethod
    def _metadata_segments(coords: ProjectCoordinates) -> List[str]:
        return coords.artifact_dir_segments + [METADATA_FILE_NAME]

    def _preflight(self, coords: ProjectCoordinates) -> bool:
        primary = coords.path_segments("jar")
        # An authenticated HEAD surfaces rejected credentials before any upload.
        exists = self._retry("HEAD primary", lambda: self.client.exists(primary))
        if exists and not coords.is_snapshot:
            raise ConflictFailure(f"{coords} already exists at {self.client.url_for(primary)}")
        if exists:
            self.log.info("Republishing snapshot %s in place", coords)
        return exists

    def _upload_with_checksums(
        self,
        segments: List[str],
        content: bytes,
        uploaded: List[Uploaded],
        overwriting: bool = False,
    ) -> str:
        url = self._put(segments, content, uploaded, overwriting)
        for algorithm, digest in checksum_sidecars(content).items():
            self._put(sidecar_segments(segments, algorithm), digest, uploaded, overwriting)
        return url

    def _put(self, segments: List[str], content: bytes, uploaded: List[Uploaded], overwriting: bool) -> str:
        previous = None
        if overwriting:
            previous = self._retry(f"GET {segments[-1]}", lambda: self.client.get(segments))
        # recorded before the request: the server may store a body whose reply never arrives
        uploaded.append((segments, previous))
        try:
            return self._retry(f"PUT {segments[-1]}", lambda: self.client.put(segments, content))
        except (AuthFailure, ConflictFailure):
            # rejected outright, so whatever is there was not written by this run
            uploaded.pop()
            raise

    def _retry(self, label: str, func: Callable[[], T]) -> T:
        attempt = 1
        while True:
            try:
                return func()
            except NetworkFailure as exc:
                if not exc.transient or attempt >= self.attempts:
                    raise
                delay = self.backoff_seconds * (2 ** (attempt - 1))
                self.log.warning(
                    "%s failed (%s), retry %d/%d in %.1fs",
                    label,
                    exc,
                    attempt,
                    self.attempts - 1,
                    delay,
                )
                self._sleep(delay)
                attempt += 1

    def _rollback(
        self,
        uploaded: List[Uploaded],
        metadata_segments: Optional[List[str]],
        previous_metadata: Optional[bytes],
    ) -> None:
        if metadata_segments is not None:
            self._restore_metadata(metadata_segments, previous_metadata)
        reverted = 0
        for segments, previous in reversed(uploaded):
            try:
                if previous is not None:
                    self.client.put(segments, previous)
                    reverted += 1
                elif self.client.delete(segments):
                    reverted += 1
            except Exception as exc:  # noqa: BLE001
                self.log.warning("Rollback could not revert %s: %s", self.client.url_for(segments), exc)
        self.log.warning("Rolled back %d of %d written files", reverted, len(uploaded))

    def _restore_metadata(self, segments: List[str], previous: Optional[bytes]) -> None:
        targets = [segments] + [sidecar_segments(segments, algorithm) for algorithm in CHECKSUM_ALGORITHMS]
        try:
            if previous is None:
                for target in targets:
                    self.client.delete(target)
            else:
                self.client.put(segments, previous)
                for algorithm, digest in checksum_sidecars(previous).items():
                    self.client.put(sidecar_segments(segments, algorithm), digest)
        except Exception as exc:  # noqa: BLE001
            self.log.warning("Rollback could not restore %s: %s", self.client.url_for(segments), exc)
