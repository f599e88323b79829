import threading
from typing import List, Optional

import pytest

from gulf_jobs.config import Settings
from gulf_jobs.models import ScrapedJob
from gulf_jobs.service import build_services
from gulf_jobs.sources.base import JobSource
from gulf_jobs.storage import JobStorage


def _make_job(
    title: str = "Software Engineer",
    company: str = "ADNOC",
    location: str = "Abu Dhabi, UAE",
    source: str = "Bayt.com",
    **fields,
) -> ScrapedJob:
    uid = fields.pop("uid", f"{source}|{title}|{company}|{location}")
    return ScrapedJob(uid=uid, title=title, company_name=company, location=location, source=source, **fields)


class FakeSource(JobSource):
    """In-memory source; `gate` blocks fetch until set, `started` signals entry."""

    def __init__(
        self,
        name: str,
        jobs: Optional[List[ScrapedJob]] = None,
        error: Optional[Exception] = None,
        gate: Optional[threading.Event] = None,
        started: Optional[threading.Event] = None,
        enabled: bool = True,
    ) -> None:
        self.name = name
        self.jobs = list(jobs or [])
        self.error = error
        self.gate = gate
        self.started = started
        self.calls = 0
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    def fetch(self, config=None):
        self.calls += 1
        if self.started is not None:
            self.started.set()
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.error is not None:
            raise self.error
        return list(self.jobs)


@pytest.fixture
def make_job():
    return _make_job


@pytest.fixture
def fake_source():
    return FakeSource


@pytest.fixture
def storage(tmp_path):
    return JobStorage(tmp_path / "gulf-jobs")


@pytest.fixture
def settings(tmp_path):
    return Settings(data_dir=tmp_path / "gulf-jobs", backup_enabled=False, scheduler_enabled=True)


@pytest.fixture
def build(settings):
    """Build a service bundle around the given fake sources."""

    def _build(sources):
        return build_services(settings, sources=sources)

    return _build
