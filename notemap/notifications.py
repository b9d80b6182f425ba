"""
Notification Sink — transient success / error notices with timed expiry.
"""
from __future__ import annotations

import itertools
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from notemap.logger import get_logger

log = get_logger("notifications")


class NoticeKind(Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    id: int
    kind: NoticeKind
    message: str
    created_at: float
    ttl: float

    def expired(self, now: float) -> bool:
        return now - self.created_at >= self.ttl


class NotificationSink:
    """
    Every notify() creates one independent notice: no de-duplication, and
    no cap unless ``max_notices`` is set (then the oldest are evicted).
    """

    def __init__(self, ttl: float = 5.0, clock: Callable[[], float] = time.monotonic,
                 max_notices: Optional[int] = None):
        self.ttl = ttl
        self.max_notices = max_notices
        self._clock = clock
        self._ids = itertools.count(1)
        self._notices: List[Notice] = []

    def notify(self, kind: NoticeKind, message: str) -> Notice:
        notice = Notice(id=next(self._ids), kind=kind, message=message,
                        created_at=self._clock(), ttl=self.ttl)
        self._notices.append(notice)
        if self.max_notices is not None and len(self._notices) > self.max_notices:
            self._notices = self._notices[-self.max_notices:]
        if kind is NoticeKind.ERROR:
            log.warning(f"Notice: {message}")
        else:
            log.info(f"Notice: {message}")
        return notice

    def success(self, message: str) -> Notice:
        return self.notify(NoticeKind.SUCCESS, message)

    def error(self, message: str) -> Notice:
        return self.notify(NoticeKind.ERROR, message)

    def dismiss(self, notice_id: int) -> None:
        self._notices = [n for n in self._notices if n.id != notice_id]

    def active(self) -> List[Notice]:
        """Drop expired notices and return the rest, oldest first."""
        now = self._clock()
        self._notices = [n for n in self._notices if not n.expired(now)]
        return list(self._notices)
