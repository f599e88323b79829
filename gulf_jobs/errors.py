"""Exception types raised by the pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Union


class GulfJobsError(Exception):
    """Base class for every error raised by this package."""


class FetchError(GulfJobsError):
    """One source adapter could not fetch or parse its listings.

    Scoped to a single source: the scraper logs it and carries on with the
    remaining adapters.
    """

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source
        self.message = message


class ParseError(GulfJobsError):
    """A snapshot file is missing, is not JSON, or does not match the schema."""

    def __init__(self, path: Union[str, Path], message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = str(path)
        self.message = message


class BusyError(GulfJobsError):
    """A scrape cycle is already running.

    The scheduler reports this condition as a `CycleResult(busy=True)`; the
    exception exists for layers (HTTP, CLI) that need to turn it into a
    status code or exit code.
    """
