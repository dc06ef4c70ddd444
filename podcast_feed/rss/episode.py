"""Episode record and its <item> rendering."""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from lxml import etree
from pydantic import BaseModel, ConfigDict

from .elements import cdata_element, sub_element
from .fields import (
    flag_text,
    format_duration,
    format_rfc2822,
    parse_publish_date,
    positive_int,
    resolve_field,
)

# Raw explicit values that mark an episode as clean
CLEAN_EXPLICIT_VALUES = (None, False, "", "no")


class Episode(BaseModel):
    """One published podcast episode.

    Text fields hold entity-escaped values except ``description`` and
    ``content_encoded``, which keep their markup for CDATA output.
    """

    model_config = ConfigDict(frozen=True)

    # Required
    title: str
    publish_at: datetime
    url: str
    type: str
    length: str
    guid: str
    duration: str

    # Optional
    subtitle: str | None = None
    summary: str | None = None
    link: str | None = None
    description: str | None = None
    content_encoded: str | None = None
    author: str | None = None
    feed_season: int | None = None
    feed_episode: int | None = None
    explicit: Any = None
    image: str | None = None
    is_permalink: str | None = None

    @classmethod
    def from_data(
        cls, data: Mapping[str, Any], defaults: Mapping[str, Any] | None = None
    ) -> "Episode":
        """Create an Episode from an episode mapping and per-field defaults.

        Raises:
            MissingRequiredFieldError: If a required field resolves to None.
            InvalidDateError: If ``publish_at`` cannot be parsed.
        """
        defaults = defaults or {}

        def required(name: str, raw: bool = False) -> Any:
            return resolve_field(name, data, defaults, required=True, raw=raw)

        def optional(name: str, raw: bool = False) -> Any:
            return resolve_field(name, data, defaults, raw=raw)

        def text(name: str, raw: bool = False) -> str | None:
            value = optional(name, raw=raw)
            return None if value is None else str(value)

        return cls(
            title=str(required("title")),
            publish_at=parse_publish_date(required("publish_at", raw=True)),
            url=str(required("url")),
            type=str(required("type")),
            length=str(required("length")),
            guid=str(required("guid")),
            duration=str(format_duration(required("duration"))),
            subtitle=text("subtitle"),
            summary=text("summary"),
            link=text("link"),
            description=text("description", raw=True),
            content_encoded=text("content_encoded", raw=True),
            author=text("author"),
            feed_season=positive_int(optional("feed_season")),
            feed_episode=positive_int(optional("feed_episode")),
            explicit=optional("explicit"),
            image=text("image"),
            is_permalink=flag_text(optional("isPermaLink")),
        )

    @property
    def explicit_value(self) -> str:
        """The <itunes:explicit> value: ``clean`` or ``yes``."""
        return "clean" if self.explicit in CLEAN_EXPLICIT_VALUES else "yes"

    def append_to_channel(self, channel: etree._Element) -> etree._Element:
        """Append this episode as an <item> to the given <channel> element."""
        item = sub_element(channel, "item")

        sub_element(item, "title", self.title)

        if self.description:
            cdata_element(item, "description", self.description)

        if self.content_encoded:
            cdata_element(item, "content:encoded", self.content_encoded)

        sub_element(item, "pubDate", format_rfc2822(self.publish_at))

        sub_element(
            item,
            "enclosure",
            attrib={"url": self.url, "type": self.type, "length": self.length},
        )

        if self.author:
            sub_element(item, "author", self.author)
            sub_element(item, "itunes:author", self.author)

        if self.link:
            sub_element(item, "link", self.link)

        if self.feed_season:
            sub_element(item, "itunes:season", self.feed_season)

        if self.feed_episode:
            sub_element(item, "itunes:episode", self.feed_episode)

        sub_element(item, "itunes:duration", self.duration)
        sub_element(item, "itunes:explicit", self.explicit_value)
        sub_element(item, "guid", self.guid, attrib={"isPermaLink": self.is_permalink})

        if self.image:
            sub_element(item, "itunes:image", attrib={"href": self.image})

        return item
