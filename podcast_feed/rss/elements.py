"""Element helpers for writing RSS trees with lxml."""

import html
from typing import Any

from lxml import etree

# XML namespaces used by podcast RSS feeds
NAMESPACES = {
    "itunes": "http://www.itunes.com/dtds/podcast-1.0.dtd",
    "atom": "http://www.w3.org/2005/Atom",
    "content": "http://purl.org/rss/1.0/modules/content/",
}


def qname(tag: str) -> str:
    """Expand a prefixed tag such as ``itunes:author`` to Clark notation."""
    prefix, sep, local = tag.partition(":")
    if not sep:
        return tag
    return f"{{{NAMESPACES[prefix]}}}{local}"


def _decoded(value: Any) -> str:
    # Stored values are entity-escaped; lxml applies the escaping when serializing
    return html.unescape(str(value))


def sub_element(
    parent: etree._Element,
    tag: str,
    text: Any = None,
    attrib: dict[str, Any] | None = None,
) -> etree._Element:
    """Append a child element with optional text and attributes.

    Attributes whose value is None are left out.
    """
    element = etree.SubElement(parent, qname(tag))
    for name, value in (attrib or {}).items():
        if value is not None:
            element.set(name, _decoded(value))
    if text is not None:
        element.text = _decoded(text)
    return element


def cdata_element(parent: etree._Element, tag: str, text: str) -> etree._Element:
    """Append a child element whose text is wrapped in a CDATA section.

    Text containing ``]]>`` cannot live in a CDATA section and is written as
    ordinary escaped text instead.
    """
    element = etree.SubElement(parent, qname(tag))
    if "]]>" in text:
        element.text = text
    else:
        element.text = etree.CDATA(text)
    return element
