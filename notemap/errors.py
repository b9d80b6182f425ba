"""
Error taxonomy shared by the request client and the view controllers.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    NETWORK = "network"   # no response received
    HTTP = "http"         # non-2xx status
    DECODE = "decode"     # response body did not match the expected shape


class NotemapError(Exception):
    """Base class for every error notemap raises on purpose."""


class ValidationError(NotemapError):
    """Required user input was empty; raised before any request is issued."""


class RequestError(NotemapError):
    kind: ErrorKind

    def __init__(self, message: str = "", status: Optional[int] = None):
        super().__init__(message)
        self.status = status

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value}, status={self.status}, message={str(self)!r})"


class NetworkError(RequestError):
    kind = ErrorKind.NETWORK


class HttpError(RequestError):
    kind = ErrorKind.HTTP

    def __init__(self, status: int, message: str = ""):
        super().__init__(message or f"HTTP {status}", status=status)


class DecodeError(RequestError):
    kind = ErrorKind.DECODE
