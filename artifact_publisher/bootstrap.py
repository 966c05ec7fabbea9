"""Wires settings into a ready-to-run publisher."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

import httpx

from artifact_publisher.modules.publishing.assemble import ArtifactAssembler
from artifact_publisher.modules.publishing.domain import Credentials, PublishTarget, SigningKey
from artifact_publisher.modules.publishing.service import Publisher
from artifact_publisher.modules.publishing.signing import Signer, create_signer
from artifact_publisher.modules.publishing.upload import create_repository_client

from .settings import Settings

log = logging.getLogger(__name__)


@dataclass
class PublisherContainer:
    """Container that builds the pipeline stages from shared settings.

    ``http_client`` replaces the default httpx client, which is how tests
    point uploads at a mock transport.
    """

    settings: Settings
    http_client: Optional[httpx.Client] = None
    assembler: ArtifactAssembler = field(init=False)
    publisher: Publisher = field(init=False)

    def __post_init__(self) -> None:
        self.assembler = ArtifactAssembler(
            self.settings.layout(),
            pom_details=self.settings.pom_details(),
            build_command=self.settings.build_command,
            docs_command=self.settings.docs_command,
            timeout=self.settings.build_timeout or None,
        )
        self.publisher = Publisher(
            self.assembler,
            self.create_signer,
            self.create_client,
            upload_attempts=self.settings.upload_attempts,
            upload_backoff_seconds=self.settings.upload_backoff_seconds,
        )

    def create_signer(self, key: SigningKey) -> Signer:
        return create_signer(
            self.settings.signing_backend,
            key,
            gpg_executable=self.settings.gpg_executable,
            gpg_homedir=self.settings.gpg_homedir,
        )

    def create_client(self, target: PublishTarget, credentials: Optional[Credentials]):
        log.info("Publishing target %s at %s (auth=%s)", target.name, target.base_url, "yes" if credentials else "no")
        return create_repository_client(
            target,
            credentials,
            client=self.http_client,
            timeout=self.settings.http_timeout,
            verify=self.settings.verify_tls,
        )
