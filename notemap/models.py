"""
Data model for everything the backend sends back.

Every record is immutable and built through ``from_payload``, which raises
ValueError / KeyError / TypeError on malformed JSON. The request client turns
those into DecodeError, so nothing downstream ever sees a half-parsed payload.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


def _int(value: Any, name: str, minimum: int = 0) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def _str(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string, got {value!r}")
    return value


def _list(value: Any, name: str) -> list:
    if not isinstance(value, list):
        raise TypeError(f"{name} must be a list, got {type(value).__name__}")
    return value


def _obj(value: Any, name: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise TypeError(f"{name} must be an object, got {type(value).__name__}")
    return value


# ── Topic graph ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TopicConnection:
    topic: str
    weight: int        # co-occurrence strength with the centre topic, >= 1

    @classmethod
    def from_payload(cls, data: Any) -> "TopicConnection":
        data = _obj(data, "connection")
        return cls(
            topic=_str(data["topic"], "topic"),
            weight=_int(data["weight"], "weight", minimum=1),
        )


@dataclass(frozen=True)
class MindMapGraph:
    center: str
    connections: Tuple[TopicConnection, ...] = ()

    @classmethod
    def from_payload(cls, data: Any) -> "MindMapGraph":
        data = _obj(data, "mindmap")
        raw = data.get("connections") or []
        return cls(
            center=_str(data["center"], "center"),
            connections=tuple(
                TopicConnection.from_payload(c) for c in _list(raw, "connections")
            ),
        )


# ── Learning path ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class LearningPathStep:
    topic: str
    order: int

    @classmethod
    def from_payload(cls, data: Any) -> "LearningPathStep":
        data = _obj(data, "step")
        return cls(topic=_str(data["topic"], "topic"), order=_int(data["order"], "order", minimum=1))


@dataclass(frozen=True)
class LearningPath:
    topic: str
    steps: Tuple[LearningPathStep, ...] = ()

    @classmethod
    def from_payload(cls, data: Any) -> "LearningPath":
        data = _obj(data, "learning path")
        steps = tuple(
            LearningPathStep.from_payload(s) for s in _list(data.get("path") or [], "path")
        )
        # order must run 1, 2, 3, … in the sequence received
        for expected, step in enumerate(steps, start=1):
            if step.order != expected:
                raise ValueError(f"learning path order broken at {step.topic!r}: {step.order} != {expected}")
        return cls(topic=_str(data["topic"], "topic"), steps=steps)


# ── Search ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SearchResult:
    filename: str
    frequency: int
    snippet: Optional[str] = None

    @classmethod
    def from_payload(cls, data: Any) -> "SearchResult":
        data = _obj(data, "result")
        snippet = data.get("snippet")
        return cls(
            filename=_str(data["filename"], "filename"),
            frequency=_int(data["frequency"], "frequency"),
            snippet=_str(snippet, "snippet") if snippet is not None else None,
        )


@dataclass(frozen=True)
class SearchResponse:
    query: str
    total: int
    results: Tuple[SearchResult, ...] = ()
    related: Tuple[TopicConnection, ...] = ()

    @classmethod
    def from_payload(cls, data: Any) -> "SearchResponse":
        data = _obj(data, "search response")
        return cls(
            query=_str(data["query"], "query"),
            total=_int(data["total"], "total"),
            results=tuple(SearchResult.from_payload(r) for r in _list(data.get("results") or [], "results")),
            related=tuple(TopicConnection.from_payload(r) for r in _list(data.get("related") or [], "related")),
        )


# ── Stats / upload ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Stats:
    total_files: int = 0
    uploaded_files: Tuple[str, ...] = ()

    @classmethod
    def from_payload(cls, data: Any) -> "Stats":
        data = _obj(data, "stats")
        total = data.get("totalFiles") or 0
        files = data.get("uploadedFiles") or []
        return cls(
            total_files=_int(total, "totalFiles"),
            uploaded_files=tuple(_str(f, "uploadedFiles[]") for f in _list(files, "uploadedFiles")),
        )


@dataclass(frozen=True)
class UploadAck:
    """Whatever the backend acknowledges an upload with; kept verbatim."""
    payload: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, data: Any) -> "UploadAck":
        return cls(payload=dict(_obj(data, "upload ack")))

    @property
    def message(self) -> str:
        return str(self.payload.get("message", ""))


@dataclass(frozen=True)
class UploadedFile:
    """A file the user picked for upload, decoupled from the UI widget."""
    name: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


def first_file(files: Optional[List[UploadedFile]]) -> Optional[UploadedFile]:
    """Only one file is sent per submission; extras are ignored."""
    if not files:
        return None
    return files[0]
