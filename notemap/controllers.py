"""
View Controllers — one per view, each owning its request lifecycle and model.

Lifecycle of ``submit``:
1. Rejected outright while a request is in flight (the trigger is disabled, nothing is queued).
2. Input validated; empty required input raises a notice and sends nothing.
3. Control switches to its busy label, request issued.
4. Result rendered (success) or notice + failure view (error).
5. Control restored to its idle label, even if step 4 raises.

render() replaces the whole view model each call; there is no partial patching.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple, Union

from notemap.api_client import ApiClient, Result
from notemap.errors import RequestError, ValidationError
from notemap.logger import get_logger
from notemap.mindmap_layout import (
    DEFAULT_LAYOUT,
    DrawPlan,
    LayoutConfig,
    layout,
    rank_connections,
    weight_tier,
)
from notemap.models import (
    LearningPath,
    MindMapGraph,
    SearchResponse,
    Stats,
    UploadAck,
    UploadedFile,
    first_file,
)
from notemap.notifications import NotificationSink

log = get_logger("controllers")

KEYWORDS_PER_FILE = 50   # the stats endpoint has no keyword count; shown as an estimate


class RequestState(Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class ControlState:
    """The button that triggers a controller's request."""
    label: str
    disabled: bool = False
    busy: bool = False


@dataclass(frozen=True)
class EmptyState:
    icon: str
    title: str
    message: str = ""


Outcome = Union[Any, RequestError]


class ViewController:
    name = "view"
    idle_label = "Submit"
    busy_label = "Working…"
    failure_message: Optional[str] = "Request failed. Make sure the server is running."

    def __init__(self, client: ApiClient, notifier: NotificationSink):
        self.client = client
        self.notifier = notifier
        self.state = RequestState.IDLE
        self.control = ControlState(self.idle_label)
        self.last_error: Optional[RequestError] = None
        self.view = self.placeholder()

    @property
    def busy(self) -> bool:
        return self.state is RequestState.IN_FLIGHT

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def submit(self, *args, **kwargs) -> None:
        if self.busy:
            log.debug(f"{self.name}: submit ignored, request already in flight")
            return

        try:
            intent = self.validate(*args, **kwargs)
        except ValidationError as e:
            log.info(f"{self.name}: rejected input: {e}")
            self.notifier.error(str(e))
            return

        self.state = RequestState.IN_FLIGHT
        self.control = ControlState(self.busy_label, disabled=True, busy=True)
        try:
            result = self.fetch(intent)
            if result.ok:
                self.state = RequestState.SUCCEEDED
                self.last_error = None
                self.on_success(intent, result.value)
            else:
                self.state = RequestState.FAILED
                self.last_error = result.error
                self.on_failure(intent, result.error)
        finally:
            # a run interrupted mid-request (even by BaseException) leaves FAILED, never IN_FLIGHT
            if self.state is RequestState.IN_FLIGHT:
                self.state = RequestState.FAILED
            self.control = ControlState(self.idle_label)

    def render(self, outcome: Outcome) -> None:
        self.view = self.build_view(outcome)

    # ── Hooks ─────────────────────────────────────────────────────────────────

    def validate(self, *args, **kwargs) -> Any:
        return None

    def fetch(self, intent: Any) -> Result:
        raise NotImplementedError

    def on_success(self, intent: Any, value: Any) -> None:
        self.render(value)

    def on_failure(self, intent: Any, error: RequestError) -> None:
        log.warning(f"{self.name}: {error!r}")
        if self.failure_message:
            self.notifier.error(self.failure_message)
        self.render(error)

    def build_view(self, outcome: Outcome) -> Any:
        raise NotImplementedError

    def placeholder(self) -> Any:
        return None


def _required(value: Optional[str], prompt: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(prompt)
    return text


# ── Stats / file list ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class FileEntry:
    filename: str
    status: str = "Processed"
    note: str = "Uploaded recently"


@dataclass(frozen=True)
class StatsView:
    total_files: int = 0
    total_keywords: int = 0
    files: Tuple[FileEntry, ...] = ()
    files_empty: Optional[EmptyState] = None


NO_FILES = EmptyState("📄", "No files uploaded yet")


class StatsController(ViewController):
    """Counters + uploaded-file list. A failed refresh shows zeros, never a notice."""
    name = "stats"
    idle_label = "↻ Refresh"
    busy_label = "Refreshing…"
    failure_message = None

    def fetch(self, intent) -> Result[Stats]:
        return self.client.stats()

    def placeholder(self) -> StatsView:
        return StatsView(files_empty=NO_FILES)

    def build_view(self, outcome: Outcome) -> StatsView:
        if isinstance(outcome, RequestError):
            return StatsView(files_empty=NO_FILES)
        files = tuple(FileEntry(name) for name in outcome.uploaded_files)
        return StatsView(
            total_files=outcome.total_files,
            total_keywords=outcome.total_files * KEYWORDS_PER_FILE,
            files=files,
            files_empty=None if files else NO_FILES,
        )


# ── Search ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ResultCard:
    rank: int
    filename: str
    frequency: int
    snippet: str

    @property
    def title(self) -> str:
        return f"#{self.rank} {self.filename}"

    @property
    def badge(self) -> str:
        return f"{self.frequency} mentions"


@dataclass(frozen=True)
class SearchView:
    title: Optional[str] = None
    cards: Tuple[ResultCard, ...] = ()
    empty: Optional[EmptyState] = None
    related: Tuple[str, ...] = ()
    related_empty: Optional[str] = None


NO_RESULTS = EmptyState("🔍", "No Results Found", "Try a different search term or upload more notes")
SEARCH_FAILED = EmptyState("⚠️", "Search Unavailable", "The last search did not complete. Try again.")
NO_RELATED = "No related topics found"


class SearchController(ViewController):
    name = "search"
    idle_label = "🔍 Search"
    busy_label = "Searching…"
    failure_message = "Search failed. Make sure the server is running."

    def validate(self, query: Optional[str] = None) -> str:
        return _required(query, "Please enter a search term")

    def fetch(self, query: str) -> Result[SearchResponse]:
        return self.client.search(query)

    def placeholder(self) -> SearchView:
        return SearchView(empty=EmptyState("🔍", "Search your notes", "Results appear here, strongest match first"))

    def build_view(self, outcome: Outcome) -> SearchView:
        if isinstance(outcome, RequestError):
            return SearchView(empty=SEARCH_FAILED)
        # backend order is relevance order
        cards = tuple(
            ResultCard(
                rank=i,
                filename=r.filename,
                frequency=r.frequency,
                snippet=r.snippet or "No snippet available",
            )
            for i, r in enumerate(outcome.results, start=1)
        )
        related = tuple(f"{t.topic} ({t.weight})" for t in outcome.related)
        return SearchView(
            title=f'Search Results for "{outcome.query}" ({outcome.total} found)',
            cards=cards,
            empty=None if cards else NO_RESULTS,
            related=related,
            related_empty=None if related else NO_RELATED,
        )


# ── Upload ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class UploadView:
    selected: Optional[str] = None
    progress: Optional[int] = None       # None → progress bar hidden
    last_uploaded: Optional[str] = None


class UploadController(ViewController):
    """
    One file per submission. Progress is simulated: 0% when the request goes
    out, 100% when the response lands, then a short settle before hiding.
    The selection survives a failure so the user can retry without re-picking.
    """
    name = "upload"
    idle_label = "⬆ Upload"
    busy_label = "Uploading…"
    failure_message = "Upload failed. Make sure the server is running."

    def __init__(self, client: ApiClient, notifier: NotificationSink,
                 settle_delay: float = 0.5, sleep: Callable[[float], None] = time.sleep,
                 on_uploaded: Optional[Callable[[], None]] = None):
        self.selected: Optional[UploadedFile] = None
        self.progress: Optional[int] = None
        self.selection_generation = 0     # bumped to reset the file picker
        self.last_uploaded: Optional[str] = None
        self.progress_listener: Optional[Callable[[Optional[int]], None]] = None
        self.settle_delay = settle_delay
        self._sleep = sleep
        self._on_uploaded = on_uploaded
        super().__init__(client, notifier)

    def _set_progress(self, value: Optional[int]) -> None:
        self.progress = value
        self.render(None)
        if self.progress_listener is not None:
            self.progress_listener(value)

    def select(self, files: Optional[List[UploadedFile]]) -> Optional[UploadedFile]:
        if self.busy:
            return self.selected
        self.selected = first_file(files)
        if files and len(files) > 1:
            log.info(f"upload: {len(files)} files given, using {self.selected.name}")
        self.render(None)
        return self.selected

    def validate(self, files: Optional[List[UploadedFile]] = None) -> UploadedFile:
        if files:
            self.select(files)
        if self.selected is None:
            raise ValidationError("Please choose a file to upload")
        return self.selected

    def fetch(self, file: UploadedFile) -> Result[UploadAck]:
        self._set_progress(0)
        log.info(f"upload: sending {file.name} ({file.size:,} bytes)")
        return self.client.upload(file)

    def on_success(self, file: UploadedFile, ack: UploadAck) -> None:
        self._set_progress(100)
        self._sleep(self.settle_delay)
        self._set_progress(None)
        self.last_uploaded = file.name
        self.notifier.success(f'File "{file.name}" uploaded successfully!')
        self.selected = None
        self.selection_generation += 1
        self.render(ack)
        if self._on_uploaded is not None:
            self._on_uploaded()

    def on_failure(self, file: UploadedFile, error: RequestError) -> None:
        self._set_progress(None)
        super().on_failure(file, error)

    def placeholder(self) -> UploadView:
        return UploadView()

    def build_view(self, outcome: Outcome) -> UploadView:
        return UploadView(
            selected=self.selected.name if self.selected else None,
            progress=self.progress,
            last_uploaded=self.last_uploaded,
        )


# ── Learning path ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PathStepView:
    order: int
    topic: str
    next_topic: Optional[str] = None

    @property
    def is_final(self) -> bool:
        return self.next_topic is None

    @property
    def guidance(self) -> str:
        if self.next_topic:
            return f"Focus on understanding {self.topic} before moving to {self.next_topic}"
        return f"Focus on understanding {self.topic} (final topic in sequence)"


@dataclass(frozen=True)
class LearningView:
    title: Optional[str] = None
    steps: Tuple[PathStepView, ...] = ()
    empty: Optional[EmptyState] = None


NO_PATH_YET = EmptyState("🧭", "No learning path yet", "Enter a topic to get a suggested study order")
NO_PATH_FOUND = EmptyState("⚠️", "No Learning Path Found", "Try uploading notes containing this topic first")


class LearningPathController(ViewController):
    name = "learning"
    idle_label = "🧭 Generate Path"
    busy_label = "Generating…"
    failure_message = "Failed to generate learning path. Topic may not exist in database."

    def validate(self, topic: Optional[str] = None) -> str:
        return _required(topic, "Please enter a topic")

    def fetch(self, topic: str) -> Result[LearningPath]:
        return self.client.learning_path(topic)

    def placeholder(self) -> LearningView:
        return LearningView(empty=NO_PATH_YET)

    def build_view(self, outcome: Outcome) -> LearningView:
        if isinstance(outcome, RequestError):
            return LearningView(empty=NO_PATH_YET)
        steps = outcome.steps
        views = tuple(
            PathStepView(
                order=step.order,
                topic=step.topic,
                next_topic=steps[i + 1].topic if i + 1 < len(steps) else None,
            )
            for i, step in enumerate(steps)
        )
        return LearningView(
            title=f"Learning Path: {outcome.topic}",
            steps=views,
            empty=None if views else NO_PATH_FOUND,
        )


# ── Mind map ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class RankedConnection:
    topic: str
    weight: int
    tier: str           # strong | medium | weak

    @property
    def tag(self) -> str:
        return f"{self.topic} ({self.weight})"


@dataclass(frozen=True)
class MindMapView:
    plan: Optional[DrawPlan] = None
    summary: Optional[str] = None
    connections: Tuple[RankedConnection, ...] = ()
    connections_empty: Optional[str] = None
    empty: Optional[EmptyState] = None


NO_MINDMAP = EmptyState("🧠", "No mind map yet", "Enter a topic and generate a map of related topics")
NO_CONNECTIONS = "No connections found"


@dataclass(frozen=True)
class MindMapRequest:
    topic: str
    depth: int


class MindMapController(ViewController):
    name = "mindmap"
    idle_label = "🧠 Generate Map"
    busy_label = "Generating…"
    failure_message = "Failed to generate mind map. Topic may not exist in database."

    def __init__(self, client: ApiClient, notifier: NotificationSink,
                 canvas_width: float = 800, canvas_height: float = 600,
                 max_depth: int = 5, config: LayoutConfig = DEFAULT_LAYOUT):
        self.canvas_width = canvas_width
        self.canvas_height = canvas_height
        self.max_depth = max_depth
        self.config = config
        super().__init__(client, notifier)

    def validate(self, topic: Optional[str] = None, depth: int = 2) -> MindMapRequest:
        topic = _required(topic, "Please enter a topic")
        try:
            depth = int(depth)
        except (TypeError, ValueError):
            depth = 0
        if not 1 <= depth <= self.max_depth:
            raise ValidationError(f"Depth must be between 1 and {self.max_depth}")
        return MindMapRequest(topic=topic, depth=depth)

    def fetch(self, req: MindMapRequest) -> Result[MindMapGraph]:
        return self.client.mindmap(req.topic, req.depth)

    def placeholder(self) -> MindMapView:
        return MindMapView(empty=NO_MINDMAP)

    def build_view(self, outcome: Outcome) -> MindMapView:
        if isinstance(outcome, RequestError):
            return MindMapView(empty=NO_MINDMAP)
        plan = layout(outcome, self.canvas_width, self.canvas_height, self.config)
        # ranking is a separate list; the plan above keeps backend order
        ranked = tuple(
            RankedConnection(c.topic, c.weight, weight_tier(c.weight, self.config))
            for c in rank_connections(outcome.connections)
        )
        return MindMapView(
            plan=plan,
            summary=f"{outcome.center} connects to {len(outcome.connections)} topics.",
            connections=ranked,
            connections_empty=None if ranked else NO_CONNECTIONS,
        )
