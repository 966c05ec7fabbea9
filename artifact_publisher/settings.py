"""Runtime configuration for the artifact publisher."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from pydantic import Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from artifact_publisher.modules.publishing.assemble import PomDetails, ProjectLayout
from artifact_publisher.modules.publishing.domain import (
    Credentials,
    ProjectCoordinates,
    PublishTarget,
    SigningKey,
)
from artifact_publisher.modules.publishing.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Configuration values mapped from ``PUBLISH_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PUBLISH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Project coordinates
    group: Optional[str] = None
    artifact_id: Optional[str] = None
    version: Optional[str] = None

    # Project layout, relative paths resolve against project_dir
    project_dir: Path = Path(".")
    classes_dir: str = "build/classes/java/main"
    resources_dir: Optional[str] = "src/main/resources"
    sources_dir: str = "src/main/java"
    docs_dir: str = "build/docs/javadoc"
    output_dir: str = "build/libs"
    build_command: Optional[str] = None
    docs_command: Optional[str] = None
    build_timeout: int = Field(600, ge=0)

    # POM details
    pom_name: Optional[str] = None
    pom_description: Optional[str] = None
    pom_url: Optional[str] = None
    pom_license_name: Optional[str] = None
    pom_license_url: Optional[str] = None
    pom_developer_id: Optional[str] = None
    pom_developer_name: Optional[str] = None
    pom_developer_email: Optional[str] = None
    pom_scm_url: Optional[str] = None

    # Publish target and credentials
    repository_name: str = "maven"
    repository_url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[SecretStr] = None

    # Signing
    signing_backend: str = "gpg"
    signing_key: Optional[SecretStr] = None
    signing_key_file: Optional[Path] = None
    signing_password: Optional[SecretStr] = None
    signing_key_id: Optional[str] = None
    gpg_executable: str = "gpg"
    gpg_homedir: Optional[str] = None

    # Transport
    upload_attempts: int = Field(3, ge=1)
    upload_backoff_seconds: float = Field(1.0, ge=0)
    http_timeout: float = Field(30.0, gt=0)
    verify_tls: bool = True

    log_level: str = "INFO"

    def coordinates(self) -> ProjectCoordinates:
        missing = [name for name in ("group", "artifact_id", "version") if not getattr(self, name)]
        if missing:
            raise ConfigurationError(
                "missing project coordinates: " + ", ".join(f"PUBLISH_{name.upper()}" for name in missing)
            )
        try:
            return ProjectCoordinates(self.group, self.artifact_id, self.version)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

    def target(self) -> PublishTarget:
        if not self.repository_url:
            raise ConfigurationError("PUBLISH_REPOSITORY_URL is not set")
        return PublishTarget(name=self.repository_name, url=self.repository_url)

    def credentials(self, environ: Optional[Mapping[str, str]] = None) -> Optional[Credentials]:
        """Resolve credentials, falling back to variables named after the repository.

        ``<NAME>_USERNAME``/``<NAME>_PASSWORD`` and Gradle's
        ``ORG_GRADLE_PROJECT_<name>Username``/``...Password`` are honoured so
        existing CI secrets keep working.
        """
        environ = os.environ if environ is None else environ
        name = self.repository_name
        username = self.username or environ.get(f"{name.upper()}_USERNAME") or environ.get(
            f"ORG_GRADLE_PROJECT_{name}Username"
        )
        password: Optional[str] = None
        if self.password is not None:
            password = self.password.get_secret_value()
        password = password or environ.get(f"{name.upper()}_PASSWORD") or environ.get(
            f"ORG_GRADLE_PROJECT_{name}Password"
        )
        if not username and not password:
            return None
        if not username or not password:
            raise ConfigurationError(f"incomplete credentials for repository {name!r}")
        return Credentials(username=username, password=SecretStr(password))

    def signing_key_ref(self) -> SigningKey:
        key_file = self.signing_key_file
        if key_file is not None and not key_file.is_absolute():
            key_file = self.project_dir / key_file
        if self.signing_backend == "pem" and self.signing_key is None and key_file is None:
            raise ConfigurationError("pem signing needs PUBLISH_SIGNING_KEY or PUBLISH_SIGNING_KEY_FILE")
        return SigningKey(
            material=self.signing_key,
            path=key_file,
            passphrase=self.signing_password,
            key_id=self.signing_key_id,
        )

    def layout(self) -> ProjectLayout:
        return ProjectLayout.from_root(
            self.project_dir,
            classes_dir=self.classes_dir,
            sources_dir=self.sources_dir,
            docs_dir=self.docs_dir,
            output_dir=self.output_dir,
            resources_dir=self.resources_dir,
        )

    def pom_details(self) -> PomDetails:
        return PomDetails(
            name=self.pom_name,
            description=self.pom_description,
            url=self.pom_url,
            license_name=self.pom_license_name,
            license_url=self.pom_license_url,
            developer_id=self.pom_developer_id,
            developer_name=self.pom_developer_name,
            developer_email=self.pom_developer_email,
            scm_url=self.pom_scm_url,
        )


def load_settings(env_file: Optional[str] = None, **overrides) -> Settings:
    try:
        if env_file is not None:
            return Settings(_env_file=env_file, **overrides)
        return Settings(**overrides)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid settings: {exc}") from exc

