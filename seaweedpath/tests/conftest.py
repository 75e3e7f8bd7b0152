from __future__ import annotations

import io
from collections.abc import Iterable, Iterator

import pytest
from seaweedpath.application import PathAdapter
from seaweedpath.domain import BlobLocation, UploadResult
from seaweedpath.infrastructure.repositories import InMemoryMappingStore
from seaweedpath.shared.errors import BlobStoreError


class FakeBlobStore:
    """In-memory stand-in for the SeaweedFS client with switchable failures."""

    def __init__(self, fids: Iterable[str] | None = None) -> None:
        self.blobs: dict[str, bytes] = {}
        self.uploads: list[tuple[str, str | None]] = []
        self.deleted: list[str] = []
        self.lookups: list[str] = []
        self.fail_upload = False
        self.upload_returns_none = False
        self.fail_delete = False
        self.unavailable = False
        self._fids: Iterator[str] = iter(fids) if fids is not None else self._counter()

    @staticmethod
    def _counter() -> Iterator[str]:
        n = 1
        while True:
            yield f"3,{n:08x}"
            n += 1

    def _check(self) -> None:
        if self.unavailable:
            raise BlobStoreError("blob store unreachable")

    def lookup(self, fid: str) -> BlobLocation:
        self._check()
        self.lookups.append(fid)
        if fid not in self.blobs:
            raise BlobStoreError(f"unknown fid {fid}")
        return BlobLocation(fid=fid, url="volume:8080", public_url="cdn.example:8080")

    def upload(self, contents, filename: str, target: BlobLocation | None = None):
        self._check()
        if self.fail_upload:
            raise BlobStoreError("upload failed")
        if self.upload_returns_none:
            return None
        if isinstance(contents, str):
            data = contents.encode("utf-8")
        elif isinstance(contents, bytes):
            data = contents
        else:
            data = contents.read()
        fid = target.fid if target is not None else next(self._fids)
        self.uploads.append((filename, target.fid if target is not None else None))
        self.blobs[fid] = data
        return UploadResult(
            fid=fid,
            size=len(data),
            url="volume:8080",
            public_url="cdn.example:8080",
            name=filename,
            etag="etag-" + fid,
        )

    def get(self, fid: str):
        self._check()
        data = self.blobs.get(fid)
        return None if data is None else io.BytesIO(data)

    def has(self, fid: str) -> bool:
        self._check()
        return fid in self.blobs

    def delete(self, fid: str) -> None:
        self._check()
        if self.fail_delete:
            raise BlobStoreError("delete failed")
        self.blobs.pop(fid, None)
        self.deleted.append(fid)

    def build_volume_url(self, base_url: str, fid: str) -> str:
        return f"http://{base_url}/{fid}"


class RecordingMetrics:
    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []

    def observe(self, operation: str, outcome: str, seconds: float) -> None:
        self.events.append((operation, outcome))


@pytest.fixture
def blobs() -> FakeBlobStore:
    return FakeBlobStore()


@pytest.fixture
def mappings() -> InMemoryMappingStore:
    return InMemoryMappingStore()


@pytest.fixture
def metrics() -> RecordingMetrics:
    return RecordingMetrics()


@pytest.fixture
def adapter(blobs: FakeBlobStore, mappings: InMemoryMappingStore, metrics: RecordingMetrics) -> PathAdapter:
    return PathAdapter(blobs, mappings, metrics=metrics)


@pytest.fixture
def make_blobs() -> type[FakeBlobStore]:
    return FakeBlobStore
