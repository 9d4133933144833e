"""Minutes linking engine.

This module is integration-agnostic. It only relies on ports for the issue
tracker and the data sources, so front ends (batch run, chat bot) and tests
drive the exact same pipeline.

Per issue link found in the minutes, in document order:
1) Parse the href as a GitHub issue reference (skip silently if it is not one)
2) Resolve the closest identified heading (skip silently if there is none)
3) Wait for a rate-limiter permit
4) Ownership filter
5) Duplicate detection against existing comments
6) Compose the comment body
7) Dry run: stop here
8) Create the comment
"""

from __future__ import annotations

import logging
from typing import AsyncIterator, Iterator, Optional

from bs4 import BeautifulSoup

from core.config import EngineArgs, EngineConfig
from core.dedup import find_existing_comment
from core.errors import OwnershipListError, TrackerError
from core.fragments import find_closest_fragment
from core.issues import parse_issue_reference
from core.models import (
    Created,
    Duplicate,
    Error,
    Faked,
    Fragment,
    IssueReference,
    NotOwned,
    Outcome,
    Repository,
)
from core.ownership import owns
from core.ports import MinutesSourcePort, RepositorySourcePort, TrackerPort
from core.rate_limit import RateLimiter

LOGGER = logging.getLogger(__name__)


async def load_owned_repositories(
    args: EngineArgs,
    source: Optional[RepositorySourcePort],
) -> list[Repository]:
    """Collect repositories owned by the requested groups plus explicit extras."""

    repositories: list[Repository] = []
    if source is not None:
        for group in args.group_list():
            owned = await source.repositories_for(group)
            LOGGER.debug("%s repositories owned by %s", len(owned), group)
            repositories.extend(owned)
    for spec in args.extra_repos:
        try:
            repositories.append(Repository.from_spec(spec))
        except ValueError as err:
            raise OwnershipListError(str(err)) from err
    return repositories


class LinkingEngine:
    """Locates issue links in minutes and comments the issues back."""

    def __init__(
        self,
        config: EngineConfig,
        document: BeautifulSoup,
        tracker: TrackerPort,
        limiter: RateLimiter,
        repositories: Optional[list[Repository]] = None,
    ) -> None:
        self._config = config
        self._document = document
        self._tracker = tracker
        self._limiter = limiter
        self._repositories = repositories

    @classmethod
    async def create(
        cls,
        args: EngineArgs,
        tracker: TrackerPort,
        minutes_source: MinutesSourcePort,
        repository_source: Optional[RepositorySourcePort] = None,
    ) -> "LinkingEngine":
        """Load everything a run needs; raises EngineCreationError subclasses."""

        config = EngineConfig.from_args(args)
        LOGGER.debug("Minutes URL: %s", config.url)
        if args.file:
            LOGGER.debug("Reading from file %s instead of URL", args.file)
        html = await minutes_source.load(config.url, args.file)
        document = BeautifulSoup(html, "html.parser")

        repositories = None
        if args.check_ownership:
            repositories = await load_owned_repositories(args, repository_source)

        return cls(
            config=config,
            document=document,
            tracker=tracker,
            limiter=RateLimiter(config.rate_limit),
            repositories=repositories,
        )

    @property
    def config(self) -> EngineConfig:
        return self._config

    def references(self) -> Iterator[tuple[IssueReference, str, Fragment]]:
        """Yield (reference, deep link, fragment) for every citable issue link."""

        for anchor in self._document.find_all("a", href=True):
            reference = parse_issue_reference(anchor["href"])
            if reference is None:
                continue
            fragment = find_closest_fragment(anchor, with_excerpt=self._config.transcript)
            if fragment is None:
                continue
            yield reference, f"{self._config.url}#{fragment.id}", fragment

    async def run(self) -> AsyncIterator[Outcome]:
        """Yield one outcome per citable issue link, lazily and in document order."""

        for reference, link, fragment in self.references():
            LOGGER.debug("%s referenced in %s", reference.source_url, link)
            await self._limiter.acquire()
            yield await self._process(reference, link, fragment)

    async def _process(self, reference: IssueReference, link: str, fragment: Fragment) -> Outcome:
        if not owns(reference, self._repositories):
            LOGGER.info("Skipping %s, not owned by current group(s)", reference)
            return Outcome(kind=NotOwned(), issue=reference.source_url)

        try:
            existing = await find_existing_comment(
                self._tracker, reference, link, since=self._config.min_date
            )
        except TrackerError as err:
            LOGGER.warning("Could not list comments of %s: %s", reference, err)
            return Outcome(kind=Error(err), issue=reference.source_url)
        if existing is not None:
            LOGGER.info("Skipping %s, link to minutes already there: %s", reference, existing.html_url)
            return Outcome(kind=Duplicate(existing.html_url), issue=reference.source_url)

        body = self._config.message_template.replace("%URL%", link).replace("%FRAGMENT%", fragment.excerpt)
        LOGGER.debug("Comment message: %s", body)
        if self._config.dry_run:
            LOGGER.info("Comment posted on %s: (not really, running in dry mode)", reference)
            return Outcome(kind=Faked(), issue=reference.source_url)

        try:
            comment = await self._tracker.create_comment(reference.owner, reference.repo, reference.id, body)
        except TrackerError as err:
            LOGGER.warning("Could not comment on %s: %s", reference, err)
            return Outcome(kind=Error(err), issue=reference.source_url)
        LOGGER.info("Comment posted: %s", comment.html_url)
        return Outcome(kind=Created(comment.html_url), issue=reference.source_url)

    async def aclose(self) -> None:
        await self._tracker.aclose()

    async def __aenter__(self) -> "LinkingEngine":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
