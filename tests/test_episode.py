"""Tests for the Episode record and its <item> rendering."""

from datetime import datetime, timezone

import pytest
from lxml import etree
from pydantic import ValidationError

from podcast_feed.errors import InvalidDateError, MissingRequiredFieldError
from podcast_feed.rss.elements import NAMESPACES, qname
from podcast_feed.rss.episode import Episode

EPISODE_DATA = {
    "title": "Ep1",
    "publish_at": "2024-01-01T00:00:00Z",
    "url": "http://x.test/1.mp3",
    "type": "audio/mpeg",
    "length": "1000",
    "guid": "ep1",
    "duration": "12:34",
}


def make_episode(defaults=None, **overrides) -> Episode:
    """Helper to create an Episode for testing."""
    return Episode.from_data({**EPISODE_DATA, **overrides}, defaults)


def render(episode: Episode) -> etree._Element:
    channel = etree.Element("channel", nsmap=NAMESPACES)
    return episode.append_to_channel(channel)


def child_tags(item: etree._Element) -> list[str]:
    return [child.tag for child in item]


class TestEpisodeConstruction:
    """Tests for Episode.from_data."""

    def test_required_fields(self):
        episode = make_episode()

        assert episode.title == "Ep1"
        assert episode.publish_at == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert episode.url == "http://x.test/1.mp3"
        assert episode.type == "audio/mpeg"
        assert episode.length == "1000"
        assert episode.guid == "ep1"
        assert episode.duration == "12:34"

    def test_optional_fields_default_to_none(self):
        episode = make_episode()

        assert episode.subtitle is None
        assert episode.link is None
        assert episode.author is None
        assert episode.feed_season is None
        assert episode.explicit is None
        assert episode.is_permalink is None

    def test_text_fields_are_escaped(self):
        episode = make_episode(title="Q&A <live>", author='Jo "JJ" Smith')

        assert episode.title == "Q&amp;A &lt;live&gt;"
        assert episode.author == "Jo &quot;JJ&quot; Smith"

    def test_raw_fields_keep_markup(self):
        episode = make_episode(
            description="<p>Hello & welcome</p>",
            content_encoded="<ul><li>One</li></ul>",
        )

        assert episode.description == "<p>Hello & welcome</p>"
        assert episode.content_encoded == "<ul><li>One</li></ul>"

    def test_defaults_fill_missing_fields(self):
        episode = make_episode(
            defaults={"author": "Default Host", "isPermaLink": "false", "title": "Unused"}
        )

        assert episode.author == "Default Host"
        assert episode.is_permalink == "false"
        assert episode.title == "Ep1"

    def test_numeric_inputs_are_normalized(self):
        episode = make_episode(length=1000, duration=3725, feed_season="2", feed_episode=5.0)

        assert episode.length == "1000"
        assert episode.duration == "1:02:05"
        assert episode.feed_season == 2
        assert episode.feed_episode == 5

    def test_large_season_number_keeps_precision(self):
        episode = make_episode(feed_season=2**53 + 1, feed_episode=str(2**53 + 1))

        assert episode.feed_season == 2**53 + 1
        assert episode.feed_episode == 2**53 + 1

    def test_non_finite_duration_is_tolerated(self):
        assert make_episode(duration=float("nan")).duration == "nan"

    def test_permalink_flag_from_bool(self):
        assert make_episode(isPermaLink=True).is_permalink == "true"
        assert make_episode(isPermaLink=False).is_permalink == "false"

    @pytest.mark.parametrize(
        "field", ["title", "publish_at", "url", "type", "length", "guid", "duration"]
    )
    def test_missing_required_field_raises(self, field):
        data = {key: value for key, value in EPISODE_DATA.items() if key != field}

        with pytest.raises(MissingRequiredFieldError) as exc_info:
            Episode.from_data(data, {})

        assert exc_info.value.field == field

    def test_required_field_from_defaults(self):
        data = {key: value for key, value in EPISODE_DATA.items() if key != "duration"}

        episode = Episode.from_data(data, {"duration": "30:00"})

        assert episode.duration == "30:00"

    def test_invalid_date_raises(self):
        with pytest.raises(InvalidDateError) as exc_info:
            make_episode(publish_at="yesterday-ish")

        assert exc_info.value.field == "publish_at"

    def test_publish_at_accepts_datetime(self):
        published = datetime(2024, 5, 6, 7, 8, 9, tzinfo=timezone.utc)

        assert make_episode(publish_at=published).publish_at == published

    def test_episode_is_immutable(self):
        episode = make_episode()

        with pytest.raises(ValidationError):
            episode.title = "Changed"


class TestExplicitValue:
    """Tests for the two-valued explicit mapping."""

    @pytest.mark.parametrize("value", [None, False, "", "no"])
    def test_clean_values(self, value):
        assert make_episode(explicit=value).explicit_value == "clean"

    @pytest.mark.parametrize("value", ["yes", True, "explicit", "clean", "No"])
    def test_yes_values(self, value):
        assert make_episode(explicit=value).explicit_value == "yes"

    def test_omitted_explicit_renders_clean(self):
        item = render(make_episode())

        assert item.findtext("itunes:explicit", namespaces=NAMESPACES) == "clean"


class TestAppendToChannel:
    """Tests for Episode.append_to_channel."""

    def test_appends_single_item(self):
        channel = etree.Element("channel", nsmap=NAMESPACES)
        make_episode().append_to_channel(channel)
        make_episode(guid="ep2").append_to_channel(channel)

        items = channel.findall("item")
        assert [item.findtext("guid") for item in items] == ["ep1", "ep2"]

    def test_minimal_item_order(self):
        item = render(make_episode())

        assert child_tags(item) == [
            "title",
            "pubDate",
            "enclosure",
            qname("itunes:duration"),
            qname("itunes:explicit"),
            "guid",
        ]

    def test_full_item_order(self):
        item = render(
            make_episode(
                description="<p>Plain</p>",
                content_encoded="<p>Rich</p>",
                author="Host",
                link="http://x.test/ep1",
                feed_season=1,
                feed_episode=2,
                explicit="yes",
                image="http://x.test/ep1.jpg",
                isPermaLink="false",
            )
        )

        assert child_tags(item) == [
            "title",
            "description",
            qname("content:encoded"),
            "pubDate",
            "enclosure",
            "author",
            qname("itunes:author"),
            "link",
            qname("itunes:season"),
            qname("itunes:episode"),
            qname("itunes:duration"),
            qname("itunes:explicit"),
            "guid",
            qname("itunes:image"),
        ]

    def test_pub_date_is_rfc2822(self):
        item = render(make_episode())

        assert item.findtext("pubDate") == "Mon, 01 Jan 2024 00:00:00 +0000"

    def test_enclosure_attributes(self):
        enclosure = render(make_episode()).find("enclosure")

        assert dict(enclosure.attrib) == {
            "url": "http://x.test/1.mp3",
            "type": "audio/mpeg",
            "length": "1000",
        }
        assert enclosure.text is None

    def test_guid_permalink_attribute(self):
        guid = render(make_episode(isPermaLink="true")).find("guid")

        assert guid.text == "ep1"
        assert guid.get("isPermaLink") == "true"

    def test_guid_without_permalink_flag(self):
        guid = render(make_episode()).find("guid")

        assert "isPermaLink" not in guid.attrib

    def test_author_renders_both_elements(self):
        item = render(make_episode(author="Jo & Co"))

        assert item.findtext("author") == "Jo & Co"
        assert item.findtext("itunes:author", namespaces=NAMESPACES) == "Jo & Co"

    @pytest.mark.parametrize("season", [0, -2, "2.5", "abc", None])
    def test_season_omitted(self, season):
        item = render(make_episode(feed_season=season))

        assert item.find("itunes:season", NAMESPACES) is None

    def test_season_and_episode_rendered(self):
        item = render(make_episode(feed_season=3, feed_episode="12"))

        assert item.findtext("itunes:season", namespaces=NAMESPACES) == "3"
        assert item.findtext("itunes:episode", namespaces=NAMESPACES) == "12"

    def test_description_as_cdata(self):
        item = render(make_episode(description="<p>Hello & welcome</p>"))
        serialized = etree.tostring(item).decode("utf-8")

        assert "<description><![CDATA[<p>Hello & welcome</p>]]></description>" in serialized
        assert item.findtext("description") == "<p>Hello & welcome</p>"

    def test_content_encoded_as_cdata(self):
        item = render(make_episode(content_encoded="<b>Rich</b>"))
        serialized = etree.tostring(item).decode("utf-8")

        assert "<![CDATA[<b>Rich</b>]]>" in serialized

    def test_description_with_cdata_terminator_is_escaped_text(self):
        item = render(make_episode(description="a ]]> b"))
        serialized = etree.tostring(item).decode("utf-8")

        assert "CDATA" not in serialized
        assert item.findtext("description") == "a ]]> b"

    @pytest.mark.parametrize("field", ["description", "content_encoded", "link", "author", "image"])
    def test_empty_optional_fields_omitted(self, field):
        item = render(make_episode(**{field: ""}))

        assert child_tags(item) == [
            "title",
            "pubDate",
            "enclosure",
            qname("itunes:duration"),
            qname("itunes:explicit"),
            "guid",
        ]

    def test_image_has_href_only(self):
        image = render(make_episode(image="http://x.test/a.jpg?x=1&y=2")).find(
            "itunes:image", NAMESPACES
        )

        assert image.get("href") == "http://x.test/a.jpg?x=1&y=2"
        assert image.text is None

    def test_escaped_title_serializes_once(self):
        item = render(make_episode(title="Q&A <live>"))
        serialized = etree.tostring(item).decode("utf-8")

        assert "<title>Q&amp;A &lt;live&gt;</title>" in serialized
        assert item.findtext("title") == "Q&A <live>"

    def test_illegal_code_points_are_stripped_before_rendering(self):
        item = render(make_episode(title="a\ufffeb\ud800c"))

        assert item.findtext("title") == "abc"
        assert b"<title>abc</title>" in etree.tostring(item)
