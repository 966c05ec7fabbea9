"""Build, sign and upload as one strictly ordered pipeline."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from artifact_publisher.modules.publishing.assemble import ArtifactAssembler
from artifact_publisher.modules.publishing.domain import (
    ArtifactSet,
    Credentials,
    ProjectCoordinates,
    PublishReceipt,
    PublishStage,
    PublishTarget,
    SignedArtifactSet,
    SigningKey,
)
from artifact_publisher.modules.publishing.signing import Signer, sign_artifacts
from artifact_publisher.modules.publishing.upload import ArtifactUploader

SignerFactory = Callable[[SigningKey], Signer]
ClientFactory = Callable[[PublishTarget, Optional[Credentials]], object]


class Publisher:
    """Runs Idle -> Assembling -> Signing -> Uploading -> Done.

    A failure in any stage moves the pipeline to ``FAILED`` and the
    remaining stages never start.
    """

    def __init__(
        self,
        assembler: ArtifactAssembler,
        signer_factory: SignerFactory,
        client_factory: ClientFactory,
        *,
        upload_attempts: int = 3,
        upload_backoff_seconds: float = 1.0,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        self.assembler = assembler
        self.signer_factory = signer_factory
        self.client_factory = client_factory
        self.upload_attempts = upload_attempts
        self.upload_backoff_seconds = upload_backoff_seconds
        self._sleep = sleep
        self.stage = PublishStage.IDLE
        self.history: List[PublishStage] = [PublishStage.IDLE]
        self.log = logging.getLogger(self.__class__.__name__)

    def _enter(self, stage: PublishStage) -> None:
        self.log.info("Stage %s -> %s", self.stage.value, stage.value)
        self.stage = stage
        self.history.append(stage)

    def assemble_artifacts(self, coords: ProjectCoordinates) -> ArtifactSet:
        return self.assembler.assemble_artifacts(coords)

    def sign_artifacts(self, artifact_set: ArtifactSet, key: SigningKey) -> SignedArtifactSet:
        with self.signer_factory(key) as signer:
            return sign_artifacts(artifact_set, signer)

    def _uploader(self, target: PublishTarget, credentials: Optional[Credentials]) -> ArtifactUploader:
        kwargs = {}
        if self._sleep is not None:
            kwargs["sleep"] = self._sleep
        return ArtifactUploader(
            self.client_factory(target, credentials),
            attempts=self.upload_attempts,
            backoff_seconds=self.upload_backoff_seconds,
            **kwargs,
        )

    def publish(
        self,
        signed: SignedArtifactSet,
        target: PublishTarget,
        credentials: Optional[Credentials],
    ) -> PublishReceipt:
        uploader = self._uploader(target, credentials)
        try:
            return uploader.publish(signed)
        finally:
            uploader.client.close()

    def run(
        self,
        coords: ProjectCoordinates,
        key: SigningKey,
        target: PublishTarget,
        credentials: Optional[Credentials],
        *,
        dry_run: bool = False,
    ) -> PublishReceipt:
        if self.stage is not PublishStage.IDLE:
            raise RuntimeError(f"publisher already used (stage={self.stage.value})")
        try:
            self._enter(PublishStage.ASSEMBLING)
            artifact_set = self.assemble_artifacts(coords)
            self._enter(PublishStage.SIGNING)
            signed = self.sign_artifacts(artifact_set, key)
            if dry_run:
                uploader = self._uploader(target, credentials)
                try:
                    receipt = PublishReceipt(
                        coordinates=coords,
                        target=target,
                        uploaded=uploader.planned_urls(signed),
                        dry_run=True,
                    )
                finally:
                    uploader.client.close()
                self.log.info("Dry run for %s, %d files would be uploaded", coords, len(receipt.uploaded))
            else:
                self._enter(PublishStage.UPLOADING)
                receipt = self.publish(signed, target, credentials)
        except BaseException:
            self._enter(PublishStage.FAILED)
            raise
        self._enter(PublishStage.DONE)
        return receipt
