"""Errors raised while talking to the content source."""


class ContentSourceError(Exception):
    """Base class for every failure coming from the content source."""


class SourceUnavailable(ContentSourceError):
    """Raised when the content source cannot be reached or answers with an error status."""


class NotFound(ContentSourceError):
    """Raised when no document matches the requested uid."""

    def __init__(self, uid: str):
        super().__init__(f"No document found for uid {uid!r}")
        self.uid = uid


class MalformedResponse(ContentSourceError):
    """Raised when the content source answers with an unexpected payload."""


class LoadInProgressError(Exception):
    """Raised when a listing load is requested while another one is outstanding."""


class InvalidCursor(ContentSourceError):
    """Raised when a pagination cursor does not point at the configured content source."""
