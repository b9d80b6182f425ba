"""
Request Client — typed calls to the notes backend.

Every call returns a ``Result``: either the decoded value or one of
NetworkError / HttpError / DecodeError. Single attempt, no retries; the
timeout is whatever the caller configured (None leaves it to requests).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Generic, Mapping, Optional, TypeVar
from urllib.parse import quote, urlencode

import requests

from notemap.config import DEFAULT_API_BASE_URL
from notemap.errors import DecodeError, HttpError, NetworkError, RequestError
from notemap.logger import get_logger
from notemap.models import (
    LearningPath,
    MindMapGraph,
    SearchResponse,
    Stats,
    UploadAck,
    UploadedFile,
)

log = get_logger("api_client")

T = TypeVar("T")


class Endpoint(str, Enum):
    STATS = "/stats"
    SEARCH = "/search"
    UPLOAD = "/upload"
    LEARNING_PATH = "/learning-path"
    MINDMAP = "/mindmap"


@dataclass(frozen=True)
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[RequestError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: RequestError) -> "Result[T]":
        return cls(error=error)

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value


def build_url(base_url: str, endpoint: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """Join base + endpoint and percent-encode every query value (space → %20)."""
    if isinstance(endpoint, Endpoint):
        endpoint = endpoint.value
    url = base_url.rstrip("/") + "/" + endpoint.lstrip("/")
    if params:
        url += "?" + urlencode({k: str(v) for k, v in params.items()}, quote_via=quote, safe="")
    return url


class ApiClient:
    """
    Stateless across calls: nothing is cached, every method hits the backend.

    Usage
    -----
    client = ApiClient("http://localhost:8080/api")
    result = client.search("recursion")
    if result.ok:
        print(result.value.total)
    """

    def __init__(self, base_url: str = DEFAULT_API_BASE_URL, session=None, timeout: Optional[float] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def request(
        self,
        endpoint: str,
        params: Optional[Mapping[str, Any]] = None,
        parse: Optional[Callable[[Any], T]] = None,
        method: str = "GET",
        files: Optional[Dict[str, tuple]] = None,
    ) -> Result[T]:
        url = build_url(self.base_url, endpoint, params)
        log.debug(f"{method} {url}")

        try:
            if method == "POST":
                resp = self.session.post(url, files=files, timeout=self.timeout)
            else:
                resp = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            log.warning(f"{method} {url} → no response: {e}")
            return Result.failure(NetworkError(str(e)))

        if not 200 <= resp.status_code < 300:
            log.warning(f"{method} {url} → HTTP {resp.status_code}")
            return Result.failure(HttpError(resp.status_code))

        try:
            payload = resp.json()
            value = parse(payload) if parse is not None else payload
        except (ValueError, KeyError, TypeError) as e:
            log.warning(f"{method} {url} → undecodable body: {e}")
            return Result.failure(DecodeError(str(e)))

        log.info(f"{method} {endpoint} → {resp.status_code}")
        return Result.success(value)

    # ── Typed endpoints ───────────────────────────────────────────────────────

    def stats(self) -> Result[Stats]:
        return self.request(Endpoint.STATS.value, parse=Stats.from_payload)

    def search(self, query: str) -> Result[SearchResponse]:
        return self.request(Endpoint.SEARCH.value, {"q": query}, parse=SearchResponse.from_payload)

    def upload(self, file: UploadedFile) -> Result[UploadAck]:
        part = (file.name, file.content, file.content_type or "application/octet-stream")
        return self.request(
            Endpoint.UPLOAD.value, parse=UploadAck.from_payload, method="POST", files={"file": part}
        )

    def learning_path(self, topic: str) -> Result[LearningPath]:
        return self.request(Endpoint.LEARNING_PATH.value, {"topic": topic}, parse=LearningPath.from_payload)

    def mindmap(self, topic: str, depth: int) -> Result[MindMapGraph]:
        return self.request(
            Endpoint.MINDMAP.value, {"topic": topic, "depth": depth}, parse=MindMapGraph.from_payload
        )
