"""iTunes category taxonomy: parsing, escaping and rendering."""

import logging
from collections.abc import Mapping
from typing import Any

from lxml import etree
from pydantic import BaseModel, ConfigDict

from .elements import sub_element
from .fields import escape

logger = logging.getLogger(__name__)

# category -> subcategory -> sub-subcategory
MAX_CATEGORY_DEPTH = 3


class CategoryNode(BaseModel):
    """One iTunes category; a node without children is a leaf."""

    model_config = ConfigDict(frozen=True)

    name: str
    children: tuple["CategoryNode", ...] = ()

    @property
    def is_leaf(self) -> bool:
        return not self.children


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, (str, Mapping, list, tuple)) and not value


def _node(name: Any, children: Any, depth: int) -> CategoryNode:
    if depth >= MAX_CATEGORY_DEPTH and not _is_empty(children):
        logger.warning(
            f"Dropping categories nested below '{name}': "
            f"only {MAX_CATEGORY_DEPTH} levels are supported"
        )
        children = None
    return CategoryNode(
        name=escape(str(name)),
        children=parse_categories(children, depth + 1),
    )


def parse_categories(value: Any, depth: int = 1) -> tuple[CategoryNode, ...]:
    """Build the category tree from its mapping form.

    Keys name categories and values hold their subcategories, given as a
    mapping, a list of names or a single name. Empty values mark leaves.
    Every name is entity-escaped and input order is preserved.

    Example::

        {"Arts": ["Design"], "Society & Culture": {"Philosophy": []}}
    """
    if _is_empty(value):
        return ()

    if isinstance(value, Mapping):
        return tuple(_node(name, children, depth) for name, children in value.items())

    if isinstance(value, (list, tuple)):
        nodes: list[CategoryNode] = []
        for entry in value:
            if isinstance(entry, Mapping):
                nodes.extend(parse_categories(entry, depth))
            elif not _is_empty(entry):
                nodes.append(_node(entry, None, depth))
        return tuple(nodes)

    return (_node(value, None, depth),)


def append_categories(
    parent: etree._Element, categories: tuple[CategoryNode, ...]
) -> None:
    """Append nested <itunes:category> elements for each node."""
    for category in categories:
        element = sub_element(parent, "itunes:category", attrib={"text": category.name})
        if not category.is_leaf:
            append_categories(element, category.children)
