"""Core configuration dataclasses.

We keep argument parsing outside the core, but these dataclasses define the
shape the core expects so front ends can build engine runs safely.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from core.rate_limit import validate_interval

MINUTES_URL_TEMPLATE = "https://www.w3.org/{year}/{month:02d}/{day:02d}-{channel}-minutes.html"

MESSAGE_TEMPLATE = "This was discussed during the [{channel} meeting on {date}](%URL%)."

TRANSCRIPT_TEMPLATE = (
    "\n\n<details><summary><i>View the transcript</i></summary>\n\n%FRAGMENT%\n----\n</details>"
)


@dataclass(frozen=True)
class EngineArgs:
    """What a front end asks the engine to do."""

    channel: str
    date: date
    dry_run: bool = False
    transcript: bool = False
    rate_limit: float = 1.0
    url: Optional[str] = None
    file: Optional[str] = None
    groups: Optional[str] = None
    extra_repos: tuple[str, ...] = field(default_factory=tuple)
    check_ownership: bool = True

    @property
    def channel_name(self) -> str:
        """Channel without the leading IRC ``#``."""

        return self.channel.lstrip("#")

    def group_list(self) -> list[str]:
        """Groups whose repositories are considered owned, ``wg/<channel>`` by default."""

        raw = self.groups if self.groups else f"wg/{self.channel_name}"
        return [group.strip() for group in raw.split(",") if group.strip()]


@dataclass(frozen=True)
class EngineConfig:
    """Immutable settings for one engine run."""

    url: str
    min_date: datetime
    message_template: str
    transcript: bool
    rate_limit: float
    dry_run: bool

    @classmethod
    def from_args(cls, args: EngineArgs) -> "EngineConfig":
        channel = args.channel_name
        url = args.url or minutes_url(channel, args.date)
        # Comments older than the day before the meeting cannot point at its minutes.
        min_date = datetime.combine(args.date - timedelta(days=1), time.min, tzinfo=timezone.utc)
        return cls(
            url=url,
            min_date=min_date,
            message_template=message_template(channel, args.date, args.transcript),
            transcript=args.transcript,
            rate_limit=validate_interval(args.rate_limit),
            dry_run=args.dry_run,
        )


def minutes_url(channel: str, day: date) -> str:
    return MINUTES_URL_TEMPLATE.format(
        year=day.year,
        month=day.month,
        day=day.day,
        channel=channel.lstrip("#"),
    )


def message_template(channel: str, day: date, transcript: bool) -> str:
    """Comment body with ``%URL%`` (and ``%FRAGMENT%``) placeholders."""

    template = MESSAGE_TEMPLATE.format(channel=channel, date=day.strftime("%d %B %Y"))
    if transcript:
        template += TRANSCRIPT_TEMPLATE
    return template


@dataclass(frozen=True)
class ChannelBinding:
    """Minutes channel (and default groups) that a chat stands for."""

    channel: str
    groups: Optional[str] = None
