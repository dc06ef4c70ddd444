"""Podcast Feed - builds RSS 2.0 / iTunes podcast feeds from channel and episode data."""

from .errors import InvalidDateError, MissingRequiredFieldError, PodcastFeedError
from .feed import FeedBuilder
from .logging import setup_logging
from .rss import CategoryNode, Episode, FeedConfig

__all__ = [
    "CategoryNode",
    "Episode",
    "FeedBuilder",
    "FeedConfig",
    "InvalidDateError",
    "MissingRequiredFieldError",
    "PodcastFeedError",
    "setup_logging",
]
