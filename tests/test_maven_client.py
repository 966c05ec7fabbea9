import httpx
import pytest
from pydantic import SecretStr

from artifact_publisher.modules.publishing.domain import Credentials, ProjectCoordinates, PublishTarget
from artifact_publisher.modules.publishing.exceptions import AuthFailure, ConflictFailure, NetworkFailure
from artifact_publisher.modules.publishing.upload import FileRepositoryClient, MavenRepositoryClient


def build_client(handler, **overrides) -> MavenRepositoryClient:
    target = PublishTarget(name="releases", url=overrides.pop("url", "https://repo.example.com/releases/"))
    creds = Credentials(username="deployer", password=SecretStr("s3cret"))
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return MavenRepositoryClient(target, creds, client=client)


def test_put_uses_maven_layout_and_basic_auth():
    coords = ProjectCoordinates("me.example", "osfetch", "2.0.1")
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["auth"] = request.headers.get("authorization")
        seen["body"] = request.read()
        return httpx.Response(201)

    client = build_client(handler)
    url = client.put(coords.path_segments("jar", "sources"), b"binary-data")

    assert seen["path"] == "/releases/me/example/osfetch/2.0.1/osfetch-2.0.1-sources.jar"
    assert seen["auth"].startswith("Basic ")
    assert seen["body"] == b"binary-data"
    assert url == "https://repo.example.com/releases/me/example/osfetch/2.0.1/osfetch-2.0.1-sources.jar"


def test_exists_and_get_treat_404_as_absent():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("present.jar"):
            return httpx.Response(200, content=b"x")
        return httpx.Response(404)

    client = build_client(handler)

    assert client.exists(["a", "present.jar"])
    assert not client.exists(["a", "missing.jar"])
    assert client.get(["a", "missing.jar"]) is None
    assert client.get(["a", "present.jar"]) == b"x"


@pytest.mark.parametrize(
    "status, method, expected",
    [
        (401, "put", AuthFailure),
        (403, "exists", AuthFailure),
        (409, "put", ConflictFailure),
        (400, "put", ConflictFailure),
        (503, "put", NetworkFailure),
        (500, "get", NetworkFailure),
    ],
)
def test_status_codes_map_to_failure_kinds(status, method, expected):
    client = build_client(lambda request: httpx.Response(status))

    with pytest.raises(expected):
        if method == "put":
            client.put(["a", "b.jar"], b"x")
        else:
            getattr(client, method)(["a", "b.jar"])


def test_transient_flag_on_network_failures():
    client = build_client(lambda request: httpx.Response(503))
    with pytest.raises(NetworkFailure) as transient:
        client.put(["a.jar"], b"x")
    assert transient.value.transient

    client = build_client(lambda request: httpx.Response(413))
    with pytest.raises(NetworkFailure) as permanent:
        client.put(["a.jar"], b"x")
    assert not permanent.value.transient


def test_transport_errors_become_network_failures():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = build_client(handler)

    with pytest.raises(NetworkFailure):
        client.exists(["a.jar"])


def test_file_repository_round_trip(tmp_path):
    target = PublishTarget(name="local", url=tmp_path.as_uri())
    client = FileRepositoryClient(target)
    segments = ["com", "example", "demo", "1.0", "demo-1.0.jar"]

    assert not client.exists(segments)
    client.put(segments, b"jar")
    assert (tmp_path / "com/example/demo/1.0/demo-1.0.jar").read_bytes() == b"jar"
    assert client.get(segments) == b"jar"
    assert client.delete(segments)
    assert not client.delete(segments)


def test_file_repository_delete_prunes_empty_directories(tmp_path):
    target = PublishTarget(name="local", url=tmp_path.as_uri())
    client = FileRepositoryClient(target)
    client.put(["com", "example", "demo", "maven-metadata.xml"], b"<metadata/>")
    client.put(["com", "example", "demo", "1.0", "demo-1.0.jar"], b"jar")

    client.delete(["com", "example", "demo", "1.0", "demo-1.0.jar"])

    assert not (tmp_path / "com/example/demo/1.0").exists()
    assert (tmp_path / "com/example/demo/maven-metadata.xml").is_file()
    assert tmp_path.is_dir()
