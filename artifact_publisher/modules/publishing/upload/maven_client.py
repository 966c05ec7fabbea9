"""Clients for Maven 2 layout repositories over HTTP or the local filesystem."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional
from urllib.parse import unquote, urlparse

import httpx

from artifact_publisher.modules.publishing.domain import Credentials, PublishTarget
from artifact_publisher.modules.publishing.exceptions import (
    AuthFailure,
    ConflictFailure,
    NetworkFailure,
)

TRANSIENT_STATUSES = {408, 429, 500, 502, 503, 504}


def raise_for_status(response: httpx.Response, method: str, url: str) -> None:
    status = response.status_code
    if status < 300:
        return
    if status in (401, 403):
        raise AuthFailure(f"{method} {url} rejected credentials (HTTP {status})")
    if status == 409 or (status == 400 and method == "PUT"):
        # Nexus answers 400 when a release asset already exists
        raise ConflictFailure(f"{method} {url} conflicts with an existing artifact (HTTP {status})")
    if status in TRANSIENT_STATUSES or status >= 500:
        raise NetworkFailure(f"{method} {url} failed with HTTP {status}")
    raise NetworkFailure(f"{method} {url} failed with HTTP {status}", transient=False)


class MavenRepositoryClient:
    """HTTP access to a remote repository with Basic authentication."""

    def __init__(
        self,
        target: PublishTarget,
        credentials: Optional[Credentials] = None,
        *,
        client: Optional[httpx.Client] = None,
        timeout: float = 30,
        verify: bool = True,
    ) -> None:
        self.target = target
        self.base_url = target.base_url
        self.log = logging.getLogger(self.__class__.__name__)
        self._auth = credentials.as_auth() if credentials else None
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout, verify=verify)

    def url_for(self, segments: List[str]) -> str:
        return f"{self.base_url}/{'/'.join(segments)}"

    def _send(self, method: str, segments: List[str], content: Optional[bytes] = None) -> httpx.Response:
        url = self.url_for(segments)
        try:
            response = self._client.request(method, url, content=content, auth=self._auth)
        except httpx.TransportError as exc:
            raise NetworkFailure(f"{method} {url} failed: {exc}") from exc
        if response.status_code == 404 and method in ("HEAD", "GET", "DELETE"):
            return response
        raise_for_status(response, method, url)
        return response

    def exists(self, segments: List[str]) -> bool:
        return self._send("HEAD", segments).status_code != 404

    def get(self, segments: List[str]) -> Optional[bytes]:
        response = self._send("GET", segments)
        if response.status_code == 404:
            return None
        return response.content

    def put(self, segments: List[str], content: bytes) -> str:
        self._send("PUT", segments, content=content)
        url = self.url_for(segments)
        self.log.debug("Uploaded %s (%d bytes)", url, len(content))
        return url

    def delete(self, segments: List[str]) -> bool:
        return self._send("DELETE", segments).status_code != 404

    def close(self) -> None:
        if self._owns_client:
            self._client.close()


class FileRepositoryClient:
    """Same operations against a ``file://`` repository directory."""

    def __init__(self, target: PublishTarget) -> None:
        self.target = target
        self.base_url = target.base_url
        self.root = Path(unquote(urlparse(self.base_url).path))
        self.log = logging.getLogger(self.__class__.__name__)

    def url_for(self, segments: List[str]) -> str:
        return f"{self.base_url}/{'/'.join(segments)}"

    def _path(self, segments: List[str]) -> Path:
        return self.root.joinpath(*segments)

    def exists(self, segments: List[str]) -> bool:
        return self._path(segments).is_file()

    def get(self, segments: List[str]) -> Optional[bytes]:
        path = self._path(segments)
        return path.read_bytes() if path.is_file() else None

    def put(self, segments: List[str], content: bytes) -> str:
        path = self._path(segments)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            partial = path.with_name(path.name + ".part")
            partial.write_bytes(content)
            os.replace(partial, path)
        except PermissionError as exc:
            raise AuthFailure(f"cannot write {path}: {exc}") from exc
        except OSError as exc:
            raise NetworkFailure(f"cannot write {path}: {exc}", transient=False) from exc
        return self.url_for(segments)

    def delete(self, segments: List[str]) -> bool:
        path = self._path(segments)
        if not path.is_file():
            return False
        path.unlink()
        self._prune(path.parent)
        return True

    def _prune(self, directory: Path) -> None:
        while directory != self.root and self.root in directory.parents:
            try:
                directory.rmdir()
            except OSError:
                return
            directory = directory.parent

    def close(self) -> None:
        return None


def create_repository_client(
    target: PublishTarget,
    credentials: Optional[Credentials] = None,
    *,
    client: Optional[httpx.Client] = None,
    timeout: float = 30,
    verify: bool = True,
):
    if target.is_local:
        return FileRepositoryClient(target)
    return MavenRepositoryClient(target, credentials, client=client, timeout=timeout, verify=verify)
