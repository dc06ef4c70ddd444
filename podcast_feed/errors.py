"""Exceptions raised while building a podcast feed."""

from typing import Any


class PodcastFeedError(Exception):
    """Base class for all podcast feed errors."""


class InvalidDateError(PodcastFeedError):
    """A textual date could not be parsed into a datetime."""

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(f"Invalid date for '{field}': {value!r}")


class MissingRequiredFieldError(PodcastFeedError):
    """A required field resolved to None after defaults were applied."""

    def __init__(self, field: str, scope: str = "episode"):
        self.field = field
        self.scope = scope
        super().__init__(f"Missing required {scope} field: '{field}'")
