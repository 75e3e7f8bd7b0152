# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Synchronous SeaweedFS master/volume client."""

from __future__ import annotations

import io
from typing import Any, BinaryIO

import httpx

from seaweedpath.application import BlobStorePort, Contents
from seaweedpath.domain import (
    BlobLocation,
    InvariantViolation,
    UploadResult,
    content_type_for,
    volume_id_of,
)
from seaweedpath.infrastructure.resilience import CircuitBreaker, CircuitOpenError, resilient_call
from seaweedpath.shared.config import ResilienceConfig, SeaweedConfig
from seaweedpath.shared.errors import BlobStoreError
from seaweedpath.shared.logging import logger

UNKNOWN_VOLUME = "unknown_volume"


class SeaweedClient(BlobStorePort):
    def __init__(
        self,
        config: SeaweedConfig,
        resilience: ResilienceConfig,
        *,
        http: httpx.Client | None = None,
        breaker: CircuitBreaker | None = None,
    ) -> None:
        self._config = config
        self._resilience = resilience
        self._http = http or httpx.Client(timeout=config.timeout)
        self._breaker = breaker or CircuitBreaker.from_config(resilience)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> SeaweedClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -- master ---------------------------------------------------------

    def assign(self) -> BlobLocation:
        params = {
            key: value
            for key, value in (
                ("collection", self._config.collection),
                ("replication", self._config.replication),
                ("ttl", self._config.ttl),
            )
            if value
        }
        data = self._json(
            self._request("GET", f"{self._config.master_url}/dir/assign", op="assign", params=params),
            op="assign",
        )
        fid = data.get("fid")
        url = data.get("url")
        if data.get("error") or not fid or not url:
            raise BlobStoreError(
                f"assign failed: {data.get('error') or 'no fid in response'}",
                context={"operation": "assign"},
            )
        return BlobLocation(fid=fid, url=url, public_url=data.get("publicUrl") or url)

    def lookup(self, fid: str) -> BlobLocation:
        try:
            volume_id = volume_id_of(fid)
        except InvariantViolation as exc:
            raise BlobStoreError(str(exc), context={"fid": fid, "operation": "lookup"}) from exc

        response = self._request(
            "GET",
            f"{self._config.master_url}/dir/lookup",
            op="lookup",
            params={"volumeId": volume_id},
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            raise BlobStoreError(
                f"volume {volume_id} not found",
                context={"fid": fid, "operation": "lookup", "reason": UNKNOWN_VOLUME},
            )
        data = self._json(response, op="lookup")
        locations = data.get("locations") or []
        if data.get("error") or not locations:
            raise BlobStoreError(
                f"lookup failed: {data.get('error') or 'no locations'}",
                context={"fid": fid, "operation": "lookup", "reason": UNKNOWN_VOLUME},
            )
        first = locations[0]
        return BlobLocation(fid=fid, url=first["url"], public_url=first.get("publicUrl") or first["url"])

    def cluster_status(self) -> dict[str, Any]:
        return self._json(
            self._request("GET", f"{self._config.master_url}/cluster/status", op="status"),
            op="status",
        )

    # -- volumes --------------------------------------------------------

    def upload(
        self, contents: Contents, filename: str, target: BlobLocation | None = None
    ) -> UploadResult | None:
        """Upload a new blob, or replace ``target`` in place when given."""

        location = target or self.assign()
        payload = contents.encode("utf-8") if isinstance(contents, str) else contents
        url = self.build_volume_url(location.url, location.fid)

        response = self._request(
            "POST",
            url,
            op="upload",
            # a half-consumed stream cannot be replayed
            retry=isinstance(payload, bytes),
            files={"file": (filename, payload, content_type_for(filename))},
            headers=self._auth_headers(),
        )
        data = self._json(response, op="upload")
        if data.get("error") or data.get("size") is None:
            logger.warning(f"seaweed:upload rejected fid={location.fid} body={str(data)[:200]}")
            return None

        logger.debug(
            f"seaweed:upload fid={location.fid} size={data['size']} "
            f"replace={'yes' if target else 'no'}"
        )
        return UploadResult(
            fid=location.fid,
            size=int(data["size"]),
            url=location.url,
            public_url=location.public_url,
            name=data.get("name"),
            etag=data.get("eTag"),
        )

    def get(self, fid: str) -> BinaryIO | None:
        location = self.lookup(fid)
        response = self._request("GET", self.build_volume_url(location.url, fid), op="get")
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        self._raise_for_status(response, op="get")
        return io.BytesIO(response.content)

    def has(self, fid: str) -> bool:
        try:
            location = self.lookup(fid)
        except BlobStoreError as exc:
            if exc.context and exc.context.get("reason") == UNKNOWN_VOLUME:
                return False
            raise
        response = self._request("HEAD", self.build_volume_url(location.url, fid), op="has")
        if response.status_code == httpx.codes.NOT_FOUND:
            return False
        self._raise_for_status(response, op="has")
        return True

    def delete(self, fid: str) -> None:
        try:
            location = self.lookup(fid)
        except BlobStoreError as exc:
            if exc.context and exc.context.get("reason") == UNKNOWN_VOLUME:
                logger.info(f"seaweed:delete fid={fid} volume gone, treated as absent")
                return
            raise
        response = self._request(
            "DELETE",
            self.build_volume_url(location.url, fid),
            op="delete",
            headers=self._auth_headers(),
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            logger.info(f"seaweed:delete fid={fid} already absent")
            return
        self._raise_for_status(response, op="delete")

    def build_volume_url(self, base_url: str, fid: str) -> str:
        base = base_url.rstrip("/")
        if "://" not in base:
            base = f"{self._config.scheme}://{base}"
        return f"{base}/{fid}"

    # -- plumbing -------------------------------------------------------

    def _auth_headers(self) -> dict[str, str]:
        if not self._config.jwt:
            return {}
        return {"Authorization": f"Bearer {self._config.jwt}"}

    def _request(self, method: str, url: str, *, op: str, retry: bool = True, **kwargs: Any) -> httpx.Response:
        try:
            response = resilient_call(
                self._http.request,
                method,
                url,
                config=self._resilience,
                breaker=self._breaker,
                retry_on=httpx.TransportError if retry else (),
                **kwargs,
            )
        except CircuitOpenError as exc:
            raise BlobStoreError("blob store circuit is open", context={"operation": op}) from exc
        except httpx.HTTPError as exc:
            raise BlobStoreError(
                f"{op} request failed: {type(exc).__name__}",
                context={"operation": op, "url": url},
            ) from exc
        logger.debug(f"seaweed:{op} {method} {url} -> {response.status_code}")
        return response

    @staticmethod
    def _raise_for_status(response: httpx.Response, *, op: str) -> None:
        if response.is_success:
            return
        raise BlobStoreError(
            f"{op} answered HTTP {response.status_code}",
            context={"operation": op, "status": response.status_code},
        )

    def _json(self, response: httpx.Response, *, op: str) -> dict[str, Any]:
        self._raise_for_status(response, op=op)
        try:
            data = response.json()
        except ValueError as exc:
            raise BlobStoreError(f"{op} returned invalid JSON", context={"operation": op}) from exc
        if not isinstance(data, dict):
            raise BlobStoreError(f"{op} returned unexpected payload", context={"operation": op})
        return data


__all__ = ["SeaweedClient", "UNKNOWN_VOLUME"]
