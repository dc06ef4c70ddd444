"""Assembly of the full podcast RSS document."""

import copy
import html
import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from lxml import etree

from podcast_feed.config import Settings, get_settings
from podcast_feed.rss.categories import append_categories
from podcast_feed.rss.channel import FeedConfig
from podcast_feed.rss.elements import NAMESPACES, cdata_element, sub_element
from podcast_feed.rss.episode import Episode
from podcast_feed.rss.fields import format_rfc2822

logger = logging.getLogger(__name__)


class FeedBuilder:
    """Collects channel metadata and episodes and renders the RSS document.

    Usage::

        builder = FeedBuilder()
        builder.set_header({"title": "My Show", ...})
        builder.add_episode({"title": "Ep1", "publish_at": "2024-01-01T00:00:00Z", ...})
        xml = builder.to_string()
    """

    def __init__(self, config: Settings | None = None):
        self.config = config or get_settings()
        self.episodes: list[Episode] = []
        self.set_header({})

    @property
    def defaults(self) -> dict[str, Any]:
        return self.config.defaults

    def set_header(self, data: Mapping[str, Any]) -> None:
        """Set the channel fields, falling back to the configured defaults."""
        self.header = FeedConfig.from_data(data, self.defaults)

    def add_episode(self, data: Mapping[str, Any]) -> Episode:
        """Add an episode to the feed; episodes render in the order added.

        Raises:
            MissingRequiredFieldError: If a required episode field is missing.
            InvalidDateError: If the publish date cannot be parsed.
        """
        episode = Episode.from_data(data, self.defaults)
        self.episodes.append(episode)
        logger.debug(f"Added episode '{episode.title}' ({episode.guid})")
        return episode

    @property
    def last_published(self) -> datetime | None:
        """Publish date of the most recent episode, if any."""
        if not self.episodes:
            return None
        return max(episode.publish_at for episode in self.episodes)

    def resolve_pub_date(self) -> datetime:
        """Channel <pubDate>: the newest of the configured date and all episodes.

        Falls back to the current time when neither exists.
        """
        candidates = [
            value
            for value in (self.header.pub_date, self.last_published)
            if value is not None
        ]
        if not candidates:
            return datetime.now(timezone.utc)
        return max(candidates)

    def generate(self) -> etree._ElementTree:
        """Render the RSS document.

        Derived values are resolved before any element is created, so a
        missing required field fails without producing a partial document.

        Raises:
            MissingRequiredFieldError: If a required channel field is missing.
        """
        header = self.header
        header.ensure_complete()
        pub_date = self.resolve_pub_date()

        rss = etree.Element("rss", nsmap=NAMESPACES)
        rss.set("version", "2.0")
        channel = sub_element(rss, "channel")

        sub_element(
            channel,
            "atom:link",
            attrib={
                "href": header.atom_link,
                "rel": "self",
                "type": "application/rss+xml",
            },
        )

        title = sub_element(channel, "title", header.title)

        if header.subtitle:
            sub_element(channel, "itunes:subtitle", header.subtitle)

        link = sub_element(channel, "link", header.link)

        cdata_element(channel, "description", html.unescape(header.description))

        sub_element(channel, "itunes:summary", header.summary)

        image = sub_element(channel, "image")
        image.append(copy.deepcopy(title))
        image.append(copy.deepcopy(link))
        sub_element(image, "url", header.image)

        sub_element(channel, "itunes:image", attrib={"href": header.image})

        sub_element(channel, "itunes:author", header.author)

        owner = sub_element(channel, "itunes:owner")
        sub_element(owner, "itunes:name", header.author)
        if header.email:
            sub_element(owner, "itunes:email", header.email)

        append_categories(channel, header.categories)

        if header.explicit is not None:
            sub_element(channel, "itunes:explicit", header.explicit)

        if header.language:
            sub_element(channel, "language", header.language)

        if header.copyright:
            sub_element(channel, "copyright", header.copyright)

        sub_element(channel, "pubDate", format_rfc2822(pub_date))

        for episode in self.episodes:
            episode.append_to_channel(channel)

        logger.info(
            f"Generated feed '{header.title}' "
            f"with {len(self.episodes)} episodes"
        )
        return etree.ElementTree(rss)

    def to_string(self, pretty_print: bool = False) -> str:
        """Return the rendered document serialized as UTF-8 XML."""
        return etree.tostring(
            self.generate(),
            xml_declaration=True,
            encoding="utf-8",
            pretty_print=pretty_print,
        ).decode("utf-8")

    def to_dom(self) -> etree._ElementTree:
        """Return the rendered document as an lxml element tree."""
        return self.generate()
