"""RSS records for podcast feeds: channel, episodes and categories."""

from .categories import CategoryNode, parse_categories
from .channel import FeedConfig
from .elements import NAMESPACES
from .episode import Episode

__all__ = ["NAMESPACES", "CategoryNode", "Episode", "FeedConfig", "parse_categories"]
