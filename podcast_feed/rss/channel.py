"""Channel-level metadata of a podcast feed."""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from podcast_feed.errors import MissingRequiredFieldError

from .categories import CategoryNode, parse_categories
from .fields import flag_text, parse_publish_date, resolve_field

REQUIRED_FIELDS = (
    "title",
    "description",
    "summary",
    "link",
    "image",
    "author",
    "categories",
    "atom_link",
)

TEXT_FIELDS = (
    "title",
    "subtitle",
    "description",
    "summary",
    "link",
    "image",
    "author",
    "atom_link",
    "language",
    "email",
    "copyright",
)


class FeedConfig(BaseModel):
    """Escaped channel fields.

    Required fields may still be None here; ``ensure_complete`` is checked
    before a document is rendered.
    """

    model_config = ConfigDict(frozen=True)

    # Required
    title: str | None = None
    description: str | None = None
    summary: str | None = None
    link: str | None = None
    image: str | None = None
    author: str | None = None
    categories: tuple[CategoryNode, ...] | None = None
    atom_link: str | None = None

    # Optional
    subtitle: str | None = None
    explicit: str | None = None
    language: str | None = None
    email: str | None = None
    copyright: str | None = None
    pub_date: datetime | None = None

    @classmethod
    def from_data(
        cls, data: Mapping[str, Any], defaults: Mapping[str, Any] | None = None
    ) -> "FeedConfig":
        """Create a FeedConfig from a channel mapping and per-field defaults.

        Raises:
            InvalidDateError: If ``pub_date`` is given but cannot be parsed.
        """
        defaults = defaults or {}
        values: dict[str, Any] = {}

        for name in TEXT_FIELDS:
            value = resolve_field(name, data, defaults, scope="channel")
            values[name] = None if value is None else str(value)

        categories = resolve_field("categories", data, defaults, scope="channel")
        if categories is not None:
            categories = parse_categories(categories)
        values["categories"] = categories

        values["explicit"] = flag_text(
            resolve_field("explicit", data, defaults, scope="channel")
        )

        pub_date = resolve_field("pub_date", data, defaults, raw=True, scope="channel")
        if pub_date is not None:
            pub_date = parse_publish_date(pub_date, field="pub_date")
        values["pub_date"] = pub_date

        return cls(**values)

    def ensure_complete(self) -> None:
        """Raise MissingRequiredFieldError for the first unset required field."""
        for name in REQUIRED_FIELDS:
            if getattr(self, name) is None:
                raise MissingRequiredFieldError(name, scope="channel")
