"""Fragment resolution: from a link in the minutes to the closest citable heading.

A fragment boundary is an ``h1``..``h4`` element carrying a non-empty ``id``.
The search walks outward from the link: for each of its ancestors (the link
itself first), that element and then its preceding siblings are inspected,
nearest first. The first boundary met is the most specific section that can
still be linked to.
"""

from __future__ import annotations

import re
from typing import Iterator, Optional

from bs4 import NavigableString, Tag

from core.models import Fragment
from core.sanitize import sanitize_excerpt

HEADING_RE = re.compile(r"^[hH][1-4]$")


def is_fragment_boundary(node) -> bool:
    """True for h1..h4 elements with a non-empty id."""

    if not isinstance(node, Tag):
        return False
    if not HEADING_RE.match(node.name or ""):
        return False
    return bool(node.get("id"))


def element_ancestors(tag: Tag) -> Iterator[Tag]:
    """Yield ``tag`` then each enclosing element, innermost first."""

    yield tag
    for parent in tag.parents:
        yield parent


def element_prev_siblings(tag: Tag) -> Iterator[Tag]:
    """Yield ``tag`` then each preceding sibling element, nearest first."""

    yield tag
    for sibling in tag.previous_siblings:
        if isinstance(sibling, Tag):
            yield sibling


def find_closest_heading(anchor: Tag) -> Optional[Tag]:
    candidates = (
        sibling
        for ancestor in element_ancestors(anchor)
        for sibling in element_prev_siblings(ancestor)
    )
    return next((node for node in candidates if is_fragment_boundary(node)), None)


def extract_excerpt(heading: Tag) -> str:
    """Return the sanitized markup of ``heading`` and the content it introduces."""

    parts = [str(heading)]
    for sibling in heading.next_siblings:
        if is_fragment_boundary(sibling):
            break
        if isinstance(sibling, Tag):
            parts.append(str(sibling))
        # Comments, doctypes and CDATA are NavigableString subclasses.
        elif type(sibling) is NavigableString:
            parts.append(sibling.output_ready(formatter="minimal"))
    return sanitize_excerpt("".join(parts))


def find_closest_fragment(anchor: Tag, with_excerpt: bool = True) -> Optional[Fragment]:
    """Resolve the fragment that ``anchor`` belongs to, if any."""

    heading = find_closest_heading(anchor)
    if heading is None:
        return None
    excerpt = extract_excerpt(heading) if with_excerpt else ""
    return Fragment(id=heading["id"], excerpt=excerpt)
