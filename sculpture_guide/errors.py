from __future__ import annotations

from enum import Enum


class ErrorCategory(str, Enum):
    """Classification for error logging."""

    DATASET = "dataset"
    PROTOCOL = "protocol"
    UPSTREAM = "upstream"
    NETWORK = "network"


class UpstreamNotConnected(RuntimeError):
    """Raised when the upstream connection could not be used."""


class UpstreamError(Exception):
    """An ``error`` event reported by the realtime API."""

    def __init__(self, payload: dict):
        self.payload = payload
        error = payload.get("error") or {}
        super().__init__(error.get("message") or "upstream error")
