import base64
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from pydantic import SecretStr

from artifact_publisher.modules.publishing.assemble import ArtifactAssembler, ProjectLayout
from artifact_publisher.modules.publishing.domain import (
    Credentials,
    ProjectCoordinates,
    PublishTarget,
    SigningKey,
)
from artifact_publisher.modules.publishing.signing import PemSigner, sign_artifacts

REPO_URL = "https://repo.example.com/releases"
USERNAME = "deployer"
PASSWORD = "s3cret"


class FakeRepository:
    """In-memory Maven repository behind an httpx.MockTransport."""

    def __init__(self, username: str = USERNAME, password: str = PASSWORD) -> None:
        token = base64.b64encode(f"{username}:{password}".encode()).decode()
        self.expected_auth = f"Basic {token}"
        self.files: Dict[str, bytes] = {}
        self.requests: List[Tuple[str, str]] = []
        self.on_put: Optional[Callable[[str], Optional[httpx.Response]]] = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.requests.append((request.method, path))
        if request.headers.get("authorization") != self.expected_auth:
            return httpx.Response(401)
        if request.method == "HEAD":
            return httpx.Response(200 if path in self.files else 404)
        if request.method == "GET":
            if path not in self.files:
                return httpx.Response(404)
            return httpx.Response(200, content=self.files[path])
        if request.method == "PUT":
            if self.on_put is not None:
                override = self.on_put(path)
                if override is not None:
                    return override
            if path in self.files and "maven-metadata.xml" not in path and "-SNAPSHOT" not in path:
                return httpx.Response(409)
            self.files[path] = request.read()
            return httpx.Response(201)
        if request.method == "DELETE":
            if self.files.pop(path, None) is None:
                return httpx.Response(404)
            return httpx.Response(204)
        return httpx.Response(405)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))

    @property
    def puts(self) -> List[str]:
        return [path for method, path in self.requests if method == "PUT"]


def write_project(root: Path) -> Path:
    (root / "build/classes/java/main/com/example").mkdir(parents=True)
    (root / "build/classes/java/main/com/example/Demo.class").write_bytes(b"\xca\xfe\xba\xbe")
    (root / "src/main/java/com/example").mkdir(parents=True)
    (root / "src/main/java/com/example/Demo.java").write_text("package com.example;\nclass Demo {}\n")
    (root / "src/main/resources").mkdir(parents=True)
    (root / "src/main/resources/demo.properties").write_text("name=demo\n")
    (root / "build/docs/javadoc").mkdir(parents=True)
    (root / "build/docs/javadoc/index.html").write_text("<html>Demo</html>")
    return root


def pem_key(passphrase: Optional[bytes] = None) -> str:
    encryption = (
        serialization.BestAvailableEncryption(passphrase) if passphrase else serialization.NoEncryption()
    )
    return (
        Ed25519PrivateKey.generate()
        .private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=encryption,
        )
        .decode()
    )


@pytest.fixture
def coords() -> ProjectCoordinates:
    return ProjectCoordinates("com.example", "demo", "1.2.0")


@pytest.fixture
def project(tmp_path) -> Path:
    return write_project(tmp_path / "project")


@pytest.fixture
def assembler(project) -> ArtifactAssembler:
    return ArtifactAssembler(ProjectLayout.from_root(project))


@pytest.fixture
def signing_key() -> SigningKey:
    return SigningKey(material=SecretStr(pem_key()))


@pytest.fixture
def signed_set(assembler, coords, signing_key):
    return sign_artifacts(assembler.assemble_artifacts(coords), PemSigner(signing_key))


@pytest.fixture
def fake_repo() -> FakeRepository:
    return FakeRepository()


@pytest.fixture
def target() -> PublishTarget:
    return PublishTarget(name="releases", url=REPO_URL)


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(username=USERNAME, password=SecretStr(PASSWORD))
