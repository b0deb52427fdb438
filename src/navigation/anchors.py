import re
from typing import Sequence
from urllib.parse import unquote

from src.navigation.dom import Element

HEADING_PREFIX = re.compile(r"^heading=", re.I)


def build_anchor_lookup(headings: Sequence[Element]) -> dict[str, str]:
    """Map every id that may point at a heading to the heading's current id.

    Covers the heading's own id, the original id preserved in
    ``data-original-id`` and the ids of elements nested inside the heading.
    A heading's own id always maps to itself, even if it also appears as an
    alias of another heading.
    """
    lookup: dict[str, str] = {}
    for heading in headings:
        if not heading.id:
            continue
        original_id = heading.data("original-id")
        if original_id:
            lookup[original_id] = heading.id
        for child in heading.query_selector_all("[id]"):
            if child.id and child.id != heading.id:
                lookup[child.id] = heading.id

    for heading in headings:
        if heading.id:
            lookup[heading.id] = heading.id
    return lookup


def resolve_anchor(fragment: str, lookup: dict[str, str]) -> str:
    """Resolve a raw fragment (without '#') to the id to scroll to."""
    value = HEADING_PREFIX.sub("", unquote(fragment or ""), count=1)
    return lookup.get(value, value)
