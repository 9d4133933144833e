"""Chat command grammar for the bot front end."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Union

LINK_ISSUES_RE = re.compile(
    r"^(please )?(back)?link (github )?issues( to minutes)?(?P<transcript> with transcript)?"
    r"( for (?P<groups>[^ ]+))?$",
    re.IGNORECASE,
)
HELP_RE = re.compile(r"^(please )?help$", re.IGNORECASE)
BYE_RE = re.compile(r"^(bye|out|(please )?(excuse us|leave|part))$", re.IGNORECASE)
DEBUG_RE = re.compile(r"^debug( date (?P<date>[^ ]+))?( groups (?P<groups>[^ ]+))?$", re.IGNORECASE)


@dataclass(frozen=True)
class LinkIssues:
    transcript: bool = False
    groups: Optional[str] = None


@dataclass(frozen=True)
class Debug:
    date: Optional[str] = None
    groups: Optional[str] = None


@dataclass(frozen=True)
class Help:
    pass


@dataclass(frozen=True)
class Bye:
    pass


@dataclass(frozen=True)
class Unrecognized:
    text: str


BotCommand = Union[LinkIssues, Debug, Help, Bye, Unrecognized]


def parse_command(text: str) -> BotCommand:
    """Parse the part of a chat message that follows the bot's name."""

    value = text.strip()
    match = LINK_ISSUES_RE.match(value)
    if match:
        return LinkIssues(transcript=match.group("transcript") is not None, groups=match.group("groups"))
    if HELP_RE.match(value):
        return Help()
    if BYE_RE.match(value):
        return Bye()
    match = DEBUG_RE.match(value)
    if match:
        return Debug(date=match.group("date"), groups=match.group("groups"))
    return Unrecognized(value)


def addressed_to(text: str, nickname: str) -> Optional[str]:
    """Return the command part if ``text`` addresses ``nickname``, else None.

    Accepts ``<nickname>, <command>`` and ``@<nickname> <command>``.
    """

    content = text.strip()
    if not nickname:
        return None
    lowered = content.lower()
    name = nickname.lower()
    for prefix in (f"{name}, ", f"@{name}, ", f"@{name} "):
        if lowered.startswith(prefix):
            return content[len(prefix) :].strip()
    return None
