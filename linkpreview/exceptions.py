"""
Custom exceptions for linkpreview.

Error philosophy:
  - FetchError → FAIL HARD: the resolution stops and the caller sees the failure.
  - CacheError → NON-FATAL: an unreadable cache entry is reported as a miss
                 and the page is fetched again.

A missing cache entry, an absent cache directory and a missing custom
template are ordinary branches, not errors.
"""

from typing import Optional


class LinkPreviewError(Exception):
    """Base exception for all linkpreview errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


# --- FAIL HARD: aborts the resolution ---

class FetchError(LinkPreviewError):
    """
    Raised when the target page cannot be fetched or is not HTML.

    Covers connection errors, timeouts, HTTP error statuses and
    non-HTML content types. No retry is attempted.
    """

    def __init__(
        self,
        message: str,
        url: str,
        status_code: Optional[int] = None,
        details: Optional[dict] = None
    ):
        super().__init__(message, details)
        self.url = url
        self.status_code = status_code


# --- NON-FATAL: degrades to a cache miss ---

class CacheError(LinkPreviewError):
    """Raised when a cache entry exists but cannot be decoded."""

    def __init__(self, message: str, path: str, details: Optional[dict] = None):
        super().__init__(message, details)
        self.path = path
