"""Aggregate scraping across all enabled sources.

Sources are independent (separate sites, no shared state), so they are
fetched concurrently in a thread pool. All of them must finish before the
results are combined; results are then concatenated in source order, not
completion order, so deduplication precedence is stable between runs.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .dedupe import dedupe
from .errors import FetchError
from .models import ScrapedJob
from .sources.base import JobSource

logger = logging.getLogger(__name__)


@dataclass
class ScrapeReport:
    """Deduplicated jobs from one scrape plus per-source bookkeeping."""

    jobs: List[ScrapedJob] = field(default_factory=list)
    raw_count: int = 0
    attempted: List[str] = field(default_factory=list)
    failures: Dict[str, str] = field(default_factory=dict)

    @property
    def all_failed(self) -> bool:
        return bool(self.attempted) and len(self.failures) == len(self.attempted)

    @property
    def succeeded(self) -> List[str]:
        return [name for name in self.attempted if name not in self.failures]


class Scraper:
    """Runs every enabled `JobSource` and merges their output."""

    def __init__(self, sources: Sequence[JobSource], max_workers: Optional[int] = None) -> None:
        self.sources = list(sources)
        self._max_workers = max_workers

    def enabled_sources(self) -> List[JobSource]:
        return [s for s in self.sources if s.enabled]

    def scrape_all(self) -> ScrapeReport:
        """Fetch from all enabled sources, isolate per-source failures, dedupe.

        Never raises for a source failure: failures are logged and reported in
        `ScrapeReport.failures`, and the jobs of the remaining sources are kept.
        """
        sources = self.enabled_sources()
        report = ScrapeReport(attempted=[s.name for s in sources])
        if not sources:
            logger.warning("No enabled job sources; nothing to scrape")
            return report

        logger.info("Scraping %d source(s): %s", len(sources), ", ".join(report.attempted))
        workers = self._max_workers or len(sources)
        collected: List[ScrapedJob] = []

        with ThreadPoolExecutor(max_workers=max(1, workers)) as pool:
            futures = [pool.submit(source.fetch) for source in sources]
            for source, future in zip(sources, futures):
                try:
                    jobs = future.result()
                except FetchError as exc:
                    logger.error("Source %s failed: %s", source.name, exc.message)
                    report.failures[source.name] = exc.message
                    continue
                except Exception as exc:
                    logger.exception("Source %s raised an unexpected error", source.name)
                    report.failures[source.name] = f"{type(exc).__name__}: {exc}"
                    continue
                logger.info("Source %s returned %d jobs", source.name, len(jobs))
                collected.extend(jobs)

        report.raw_count = len(collected)
        report.jobs = dedupe(collected)
        logger.info(
            "Scraped %d jobs (%d unique) from %d/%d source(s)",
            report.raw_count,
            len(report.jobs),
            len(report.succeeded),
            len(report.attempted),
        )
        return report
