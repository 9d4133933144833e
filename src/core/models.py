"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

DEFAULT_OWNER = "w3c"


@dataclass(frozen=True)
class IssueReference:
    """A GitHub issue or pull request cited by a hyperlink in the minutes."""

    source_url: str
    owner: str
    repo: str
    id: int

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}#{self.id}"


@dataclass(frozen=True)
class Fragment:
    """A heading id together with the (possibly empty) excerpt it introduces."""

    id: str
    excerpt: str


@dataclass(frozen=True)
class Repository:
    """A repository from an ownership list."""

    owner_login: str
    name: str

    @classmethod
    def from_spec(cls, spec: str) -> "Repository":
        """Build from ``org/repo``; a bare ``repo`` belongs to the default owner."""

        owner, sep, name = spec.strip().partition("/")
        if not sep:
            return cls(owner_login=DEFAULT_OWNER, name=owner)
        if not owner or not name:
            raise ValueError(f"Invalid repository: {spec!r}")
        return cls(owner_login=owner, name=name)

    def __str__(self) -> str:
        return f"{self.owner_login}/{self.name}"


@dataclass(frozen=True)
class IssueComment:
    """The part of an existing tracker comment the engine cares about."""

    html_url: str
    body: Optional[str]


@dataclass(frozen=True)
class Created:
    comment_url: str


@dataclass(frozen=True)
class Duplicate:
    comment_url: str


@dataclass(frozen=True)
class Faked:
    pass


@dataclass(frozen=True)
class NotOwned:
    pass


@dataclass(frozen=True)
class Error:
    cause: Exception


OutcomeKind = Union[Created, Duplicate, Faked, NotOwned, Error]


@dataclass(frozen=True)
class Outcome:
    """Result of processing one issue reference.

    ``issue`` is the URL of the referenced issue, kept for display.
    """

    kind: OutcomeKind
    issue: str


@dataclass(frozen=True)
class ChatMessage:
    """Minimal chat message context used by the bot front end."""

    source_key: str
    chat_id: int
    message_id: int
    sender_name: str
    text: str
    is_private: bool
