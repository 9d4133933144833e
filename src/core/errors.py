"""Exception types raised by the core and its adapters."""

from __future__ import annotations


class MinutesToGhError(Exception):
    """Base class for all minutes2gh errors."""


class EngineCreationError(MinutesToGhError):
    """The engine could not be built; nothing was processed."""


class MinutesError(EngineCreationError):
    """The minutes document could not be loaded."""


class MinutesNotFound(MinutesError):
    def __init__(self, url: str) -> None:
        super().__init__(f"Minutes not found <{url}>")
        self.url = url


class MinutesHttpError(MinutesError):
    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Error loading minutes from <{url}>: {reason}")
        self.url = url


class MinutesFileError(MinutesError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed loading minutes from file {path}: {reason}")
        self.path = path


class OwnershipListError(EngineCreationError):
    """A repository ownership list could not be fetched or parsed."""


class TrackerError(MinutesToGhError):
    """A GitHub API call failed for a single issue."""
