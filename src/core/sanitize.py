"""Sanitization of transcript excerpts before they are posted as comments."""

from __future__ import annotations

import re

import nh3
from bs4 import BeautifulSoup, NavigableString

# Chained handles such as @alice@bob form one token; splitting them would leave
# the tail right after </code>, where nothing suppresses it.
MENTION_RE = re.compile(r"(?<!\w)@\w+(?:@\w+)*")

# Text inside these elements is rendered literally, so mentions there are inert.
_LITERAL_TAGS = ["code", "pre"]


def _escape_mentions(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    for text in list(soup.find_all(string=MENTION_RE)):
        if type(text) is not NavigableString:
            continue
        if text.find_parent(_LITERAL_TAGS) is not None:
            continue
        pieces = []
        last = 0
        for match in MENTION_RE.finditer(text):
            if match.start() > last:
                pieces.append(NavigableString(text[last : match.start()]))
            code = soup.new_tag("code")
            code.string = match.group(0)
            pieces.append(code)
            last = match.end()
        if last < len(text):
            pieces.append(NavigableString(text[last:]))
        text.replace_with(*pieces)
    return str(soup)


def sanitize_excerpt(html: str) -> str:
    """Strip unsafe markup and neutralize @mentions.

    Scripts, styles and any tag or attribute outside the nh3 allow-list are
    removed; inline structure survives. Every ``@name`` outside code is wrapped
    in ``<code>`` so posting the excerpt does not ping GitHub users. The result
    is stable under a second pass.
    """

    if not html:
        return ""
    return _escape_mentions(nh3.clean(html))
