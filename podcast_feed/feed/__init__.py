"""Feed assembly module for podcast RSS documents."""

from .builder import FeedBuilder

__all__ = ["FeedBuilder"]
