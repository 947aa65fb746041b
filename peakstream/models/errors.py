"""Exceptions raised across the server and the dashboard client"""
from typing import Any, Optional


class PeakStreamError(Exception):
    """Base class for application errors"""


class InvalidSensorError(PeakStreamError, ValueError):
    """The sensor selector is missing, malformed or outside the dataset"""

    def __init__(self, raw: Any, reason: str = "expected a positive integer"):
        self.raw = raw
        self.reason = reason
        super().__init__(f"Invalid sensor {raw!r}: {reason}")


class SessionExistsError(PeakStreamError):
    """A live session already uses this connection id"""

    def __init__(self, connection_id: str):
        self.connection_id = connection_id
        super().__init__(f"Session {connection_id} is already active")


class InvalidDisplayWidthError(PeakStreamError, ValueError):
    def __init__(self, width: Any, maximum: int):
        self.width = width
        self.maximum = maximum
        super().__init__(f"You cannot display {width!r} points, allowed range is 1..{maximum}")


class TransportError(PeakStreamError):
    """A transport error event surfaced to a dashboard"""

    def __init__(self, kind: str, cause: Optional[BaseException] = None):
        self.kind = kind
        self.cause = cause
        detail = str(cause) if cause is not None else "unknown error"
        super().__init__(f"{detail} | {kind}")
