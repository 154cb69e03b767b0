"""Error kinds raised by feed operations."""

from typing import Optional


class FeedError(Exception):
    """Base class for all caller-visible feed errors."""
    status_code = 500
    default_message = "Feed operation failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class MissingAlbumUrl(FeedError):
    status_code = 400
    default_message = "No album URL"


class UnknownSizeProfile(FeedError):
    status_code = 400
    default_message = "Unknown size profile"


class AlbumUnreachable(FeedError):
    """The album page could not be fetched."""
    status_code = 502
    default_message = "Cannot access album"

    def __init__(self, message: Optional[str] = None, upstream_status: Optional[int] = None):
        if message is None and upstream_status is not None:
            message = f"Cannot access album (HTTP {upstream_status})"
        super().__init__(message)
        self.upstream_status = upstream_status


class NoPhotosFound(FeedError):
    status_code = 422
    default_message = "No photos found. Make sure album is publicly shared."


class FeedNotFound(FeedError):
    status_code = 404
    default_message = "Feed not found"


class StoreUnavailable(FeedError):
    """Reading or writing the feed store failed."""
    status_code = 503
    default_message = "Feed store unavailable"
