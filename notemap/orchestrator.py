"""
Orchestrator — the single owner of UI state.

The page never pokes controller fields directly: every user action becomes a
command object handed to ``dispatch``.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from notemap.api_client import ApiClient
from notemap.config import Settings
from notemap.controllers import (
    LearningPathController,
    MindMapController,
    SearchController,
    StatsController,
    UploadController,
    ViewController,
)
from notemap.logger import get_logger
from notemap.mindmap_layout import DEFAULT_LAYOUT, LayoutConfig
from notemap.models import UploadedFile
from notemap.navigation import ActiveView, NavigationStateMachine
from notemap.notifications import NotificationSink

log = get_logger("orchestrator")


# ── Commands ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Navigate:
    view: ActiveView


@dataclass(frozen=True)
class ConfigureBackend:
    base_url: str


@dataclass(frozen=True)
class RefreshStats:
    pass


@dataclass(frozen=True)
class SubmitSearch:
    query: str


@dataclass(frozen=True)
class SelectFiles:
    files: List[UploadedFile]


@dataclass(frozen=True)
class SubmitUpload:
    files: Optional[List[UploadedFile]] = None


@dataclass(frozen=True)
class RequestLearningPath:
    topic: str


@dataclass(frozen=True)
class RequestMindMap:
    topic: str
    depth: int


class Orchestrator:
    def __init__(
        self,
        client: ApiClient,
        settings: Settings = Settings(),
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
        layout_config: LayoutConfig = DEFAULT_LAYOUT,
    ):
        self.settings = settings
        self.client = client
        self.notifications = NotificationSink(ttl=settings.notice_ttl, clock=clock,
                                              max_notices=settings.max_notices)

        self.stats = StatsController(client, self.notifications)
        self.search = SearchController(client, self.notifications)
        self.upload = UploadController(client, self.notifications,
                                       settle_delay=settings.upload_settle_delay,
                                       sleep=sleep, on_uploaded=self.stats.submit)
        self.learning = LearningPathController(client, self.notifications)
        self.mindmap = MindMapController(client, self.notifications,
                                         canvas_width=settings.canvas_width,
                                         canvas_height=settings.canvas_height,
                                         max_depth=settings.max_depth,
                                         config=layout_config)

        self.navigation = NavigationStateMachine()
        self.navigation.on_enter(ActiveView.SEARCH, self.stats.submit)
        self._started = False

        self._handlers = {
            Navigate: lambda c: self.navigation.navigate(c.view),
            ConfigureBackend: self._configure_backend,
            RefreshStats: lambda c: self.stats.submit(),
            SubmitSearch: lambda c: self.search.submit(c.query),
            SelectFiles: lambda c: self.upload.select(c.files),
            SubmitUpload: lambda c: self.upload.submit(c.files),
            RequestLearningPath: lambda c: self.learning.submit(c.topic),
            RequestMindMap: lambda c: self.mindmap.submit(c.topic, c.depth),
        }

    @property
    def active_view(self) -> ActiveView:
        return self.navigation.active

    @property
    def controllers(self) -> List[ViewController]:
        return [self.stats, self.search, self.upload, self.learning, self.mindmap]

    def start(self) -> None:
        """Initial stats load; later calls do nothing."""
        if self._started:
            return
        self._started = True
        log.info(f"Session started against {self.client.base_url}")
        self.stats.submit()

    def _configure_backend(self, command: ConfigureBackend) -> None:
        url = command.base_url.strip().rstrip("/")
        if not url or url == self.client.base_url:
            return
        log.info(f"Backend changed: {self.client.base_url} → {url}")
        self.client.base_url = url
        self.stats.submit()

    def dispatch(self, command) -> None:
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"unknown command: {command!r}")
        log.debug(f"dispatch {command!r}")
        handler(command)
