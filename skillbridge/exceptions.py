"""Exceptions raised by the recommendation engine and its store adapters."""

from __future__ import annotations


class SkillBridgeError(Exception):
    """Base class for every error raised by skillbridge."""


class ConfigurationError(SkillBridgeError):
    """Raised when settings or catalog data files are invalid."""


class ProfileNotFoundError(SkillBridgeError):
    """Raised when the requested user has no stored profile."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__("Profile not found")


class UnsupportedRecommendationError(SkillBridgeError):
    """Raised for a recommendation kind the engine does not dispatch."""

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"Unsupported recommendation type: {kind!r}")


class StoreError(SkillBridgeError):
    """
    Raised when the backing store cannot be reached or returns bad data.

    Attributes:
        message: Error description
        status_code: HTTP status returned by the store, when there was one
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class PersistenceError(StoreError):
    """Raised when the store rejects an upsert."""
