"""Shared outcome formatting helpers.

Keeping the wording here prevents drift between the chat bot and the batch
runner and keeps messages consistent regardless of front end.
"""

from __future__ import annotations

from typing import AsyncIterator, Awaitable, Callable

from core.models import Created, Duplicate, Error, Faked, NotOwned, Outcome

NOTHING_TO_DO = "nothing to do (no issue in the (sub)topics)"


def format_outcome(outcome: Outcome) -> str:
    """Return the one-line chat narration of an outcome."""

    kind = outcome.kind
    if isinstance(kind, Created):
        return f"comment created: {kind.comment_url}"
    if isinstance(kind, Faked):
        return f"comment would have been created for: {outcome.issue}"
    if isinstance(kind, Duplicate):
        return f"comment already there: {kind.comment_url}"
    if isinstance(kind, NotOwned):
        return f"issue {outcome.issue} not owned by current group(s)"
    if isinstance(kind, Error):
        return f"a problem occurred when processing {outcome.issue}"
    raise TypeError(f"Unsupported outcome kind: {kind!r}")


def format_outcome_log(outcome: Outcome) -> str:
    """Return the batch log line of an outcome; errors include their cause."""

    kind = outcome.kind
    if isinstance(kind, Error):
        return f"{format_outcome(outcome)}: {kind.cause}"
    return format_outcome(outcome)


async def narrate_outcomes(
    outcomes: AsyncIterator[Outcome],
    respond: Callable[[str], Awaitable[None]],
) -> int:
    """Send one response per outcome, in order; return how many were seen.

    Each response is awaited before the next outcome is requested, so a single
    invocation never interleaves its replies.
    """

    count = 0
    async for outcome in outcomes:
        count += 1
        await respond(format_outcome(outcome))
    if count == 0:
        await respond(NOTHING_TO_DO)
    return count
