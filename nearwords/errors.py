from __future__ import annotations


class NearwordsError(Exception):
    """Base class for every error raised by nearwords."""


class FormatError(NearwordsError, ValueError):
    """The model file does not follow the expected layout."""


class ModelIOError(NearwordsError, OSError):
    """The model file could not be opened or read."""


class ValidationError(NearwordsError, ValueError):
    """A table or config violates its structural invariants."""


class InvalidQuery(NearwordsError, ValueError):
    pass


class TermIndexError(NearwordsError, IndexError):
    pass


class SearchCancelled(NearwordsError):
    pass


__all__ = [
    "NearwordsError",
    "FormatError",
    "ModelIOError",
    "ValidationError",
    "InvalidQuery",
    "TermIndexError",
    "SearchCancelled",
]
