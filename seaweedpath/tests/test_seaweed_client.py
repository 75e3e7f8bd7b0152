from __future__ import annotations

import io

import httpx
import pytest
from seaweedpath.domain import BlobLocation
from seaweedpath.infrastructure.seaweed import UNKNOWN_VOLUME, SeaweedClient
from seaweedpath.shared.config import ResilienceConfig, SeaweedConfig
from seaweedpath.shared.errors import BlobStoreError


def _file_part(request: httpx.Request) -> tuple[bytes, bytes]:
    boundary = request.headers["content-type"].split("boundary=", 1)[1].encode()
    for part in request.read().split(b"--" + boundary):
        if b'name="file"' in part:
            head, _, body = part.partition(b"\r\n\r\n")
            return head, body[: -len(b"\r\n")]
    raise AssertionError("no file part in upload")


class FakeSeaweed:
    """Minimal master + single volume server speaking the SeaweedFS HTTP API."""

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}
        self.heads: dict[str, bytes] = {}
        self.calls: list[tuple[str, str]] = []
        self.headers: list[httpx.Headers] = []
        self.next_key = 1
        self.reject_upload = False
        self.delete_status: int | None = None
        self.refuse_connections = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls.append((request.method, f"{request.url.host}{path}"))
        self.headers.append(request.headers)
        if self.refuse_connections:
            self.refuse_connections -= 1
            raise httpx.ConnectError("connection refused", request=request)

        if request.url.host == "master":
            if path == "/dir/assign":
                fid = f"3,{self.next_key:04x}"
                self.next_key += 1
                return httpx.Response(
                    200, json={"fid": fid, "url": "vol1:8080", "publicUrl": "cdn.example", "count": 1}
                )
            if path == "/dir/lookup":
                volume_id = request.url.params["volumeId"]
                if volume_id != "3":
                    return httpx.Response(
                        404, json={"volumeId": volume_id, "error": f"volume id {volume_id} not found"}
                    )
                return httpx.Response(
                    200,
                    json={
                        "volumeId": "3",
                        "locations": [{"url": "vol1:8080", "publicUrl": "cdn.example"}],
                    },
                )
            if path == "/cluster/status":
                return httpx.Response(200, json={"IsLeader": True, "Leader": "master:9333"})
            return httpx.Response(404)

        fid = path.lstrip("/")
        if request.method == "POST":
            if self.reject_upload:
                return httpx.Response(200, json={"error": "volume is read only"})
            head, body = _file_part(request)
            self.files[fid] = body
            self.heads[fid] = head
            return httpx.Response(201, json={"name": "x", "size": len(body), "eTag": "abc123"})
        if request.method == "GET":
            if fid not in self.files:
                return httpx.Response(404)
            return httpx.Response(200, content=self.files[fid])
        if request.method == "HEAD":
            return httpx.Response(200 if fid in self.files else 404)
        if request.method == "DELETE":
            if self.delete_status is not None:
                return httpx.Response(self.delete_status)
            if self.files.pop(fid, None) is None:
                return httpx.Response(404)
            return httpx.Response(202, json={"size": 1})
        return httpx.Response(405)


@pytest.fixture
def server() -> FakeSeaweed:
    return FakeSeaweed()


def _client(server: FakeSeaweed, *, retries: int = 0, jwt: str | None = None) -> SeaweedClient:
    return SeaweedClient(
        SeaweedConfig(master_url="http://master:9333", jwt=jwt),
        ResilienceConfig(max_retries=retries, backoff_base=0.0, backoff_cap=0.1),
        http=httpx.Client(transport=httpx.MockTransport(server)),
    )


def test_upload_without_target_assigns_a_new_fid(server) -> None:
    with _client(server) as client:
        result = client.upload(b"\x89PNG...", "logo.png")

    assert result is not None
    assert result.fid == "3,0001"
    assert result.size == 7
    assert result.etag == "abc123"
    assert result.public_url == "cdn.example"
    assert server.calls[:2] == [("GET", "master/dir/assign"), ("POST", "vol1/3,0001")]
    assert b'filename="logo.png"' in server.heads["3,0001"]
    assert b"image/png" in server.heads["3,0001"]


def test_upload_with_target_replaces_in_place(server) -> None:
    target = BlobLocation(fid="3,00ff", url="vol1:8080", public_url="cdn.example")

    with _client(server) as client:
        result = client.upload("new text", "notes.txt", target)

    assert result.fid == "3,00ff"
    assert server.files["3,00ff"] == b"new text"
    assert ("GET", "master/dir/assign") not in server.calls


def test_upload_accepts_streams(server) -> None:
    with _client(server) as client:
        result = client.upload(io.BytesIO(b"streamed"), "s.bin")

    assert server.files[result.fid] == b"streamed"


def test_rejected_upload_returns_none(server) -> None:
    server.reject_upload = True

    with _client(server) as client:
        assert client.upload(b"x", "x.txt") is None


def test_lookup_resolves_first_location(server) -> None:
    with _client(server) as client:
        location = client.lookup("3,0abc")

    assert location == BlobLocation(fid="3,0abc", url="vol1:8080", public_url="cdn.example")


def test_lookup_of_unknown_volume_fails(server) -> None:
    with _client(server) as client, pytest.raises(BlobStoreError) as excinfo:
        client.lookup("9,0001")

    assert excinfo.value.context["reason"] == UNKNOWN_VOLUME
    assert excinfo.value.code == "blob_store_failure"


def test_lookup_of_malformed_fid_fails_without_network(server) -> None:
    with _client(server) as client, pytest.raises(BlobStoreError):
        client.lookup("not-a-fid")

    assert server.calls == []


def test_get_has_and_delete_round_trip(server) -> None:
    with _client(server) as client:
        fid = client.upload(b"payload", "p.bin").fid

        assert client.get(fid).read() == b"payload"
        assert client.has(fid) is True

        client.delete(fid)

        assert client.get(fid) is None
        assert client.has(fid) is False
        assert client.has("9,0001") is False


def test_delete_of_absent_blob_is_confirmed(server) -> None:
    with _client(server) as client:
        client.delete("3,dead")

    assert ("DELETE", "vol1/3,dead") in server.calls


def test_delete_on_vanished_volume_is_confirmed(server) -> None:
    with _client(server) as client:
        client.delete("9,0001")
        assert client.has("9,0001") is False

    assert [method for method, _ in server.calls] == ["GET", "GET"]


def test_delete_failure_is_store_error(server) -> None:
    server.delete_status = 500

    with _client(server) as client, pytest.raises(BlobStoreError) as excinfo:
        client.delete("3,0001")

    assert excinfo.value.context["status"] == 500


def test_transport_errors_are_retried_then_wrapped(server) -> None:
    server.refuse_connections = 1
    with _client(server, retries=2) as client:
        assert client.lookup("3,01").fid == "3,01"

    server.refuse_connections = 5
    with _client(server, retries=1) as client, pytest.raises(BlobStoreError) as excinfo:
        client.lookup("3,01")

    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


def test_stream_uploads_are_not_replayed(server) -> None:
    server.refuse_connections = 2
    target = BlobLocation(fid="3,0001", url="vol1:8080", public_url="cdn.example")

    with _client(server, retries=3) as client, pytest.raises(BlobStoreError):
        client.upload(io.BytesIO(b"once"), "once.bin", target)

    assert [method for method, _ in server.calls] == ["POST"]


def test_jwt_is_sent_on_volume_writes(server) -> None:
    with _client(server, jwt="header.payload.signature") as client:
        client.upload(b"x", "x.txt")

    assert server.headers[0].get("authorization") is None
    assert server.headers[1]["authorization"] == "Bearer header.payload.signature"


def test_build_volume_url(server) -> None:
    with _client(server) as client:
        assert client.build_volume_url("cdn.example:8080", "3,01") == "http://cdn.example:8080/3,01"
        assert client.build_volume_url("https://cdn.example/", "3,01") == "https://cdn.example/3,01"


def test_cluster_status_and_invalid_json(server) -> None:
    with _client(server) as client:
        assert client.cluster_status()["IsLeader"] is True

    def broken(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>oops</html>")

    client = SeaweedClient(
        SeaweedConfig(master_url="http://master:9333"),
        ResilienceConfig(max_retries=0),
        http=httpx.Client(transport=httpx.MockTransport(broken)),
    )
    with client, pytest.raises(BlobStoreError):
        client.cluster_status()
