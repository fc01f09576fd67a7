"""Errors raised while talking to the Hacker News API."""

from __future__ import annotations

from typing import Optional


class FetchError(Exception):
    """Base class for failures fetching or decoding an API response."""

    prefix = "Fetch error"

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.url = url

    def describe(self) -> str:
        """Human-readable message for display."""
        return f"{self.prefix}: {self.message}"


class TransportError(FetchError):
    """DNS failure, timeout, refused connection and the like."""

    prefix = "Network error"


class BadStatusError(FetchError):
    """The server answered with a non-2xx status."""

    prefix = "Bad response"

    def __init__(self, status_code: int, url: Optional[str] = None, reason: str = ""):
        message = f"HTTP {status_code}"
        if reason:
            message = f"{message} {reason}"
        super().__init__(message, url)
        self.status_code = status_code


class DecodeError(FetchError):
    """The body does not have the expected shape."""

    prefix = "Decode error"


class LoadCancelled(Exception):
    """Raised when a load is abandoned because its consumer went away."""
