"""Statistics over the latest snapshot.

Recomputed on every call; the JSON parse in `JobStorage.load_latest` is the
dominant cost, so there is no cache.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta
from typing import Iterable, Optional

from .models import JobStatistics, ScrapedJob
from .normalize import extract_country
from .storage import JobStorage
from .utils import as_aware_utc, utc_now

RECENT_WINDOW = timedelta(days=7)


def summarize(jobs: Iterable[ScrapedJob], now: Optional[datetime] = None) -> JobStatistics:
    """Count jobs by country, source, category and type.

    `recent_jobs` counts jobs scraped within the last seven days. Locations
    that match no known region are counted under "Unknown".
    """
    cutoff = (as_aware_utc(now) if now else utc_now()) - RECENT_WINDOW
    by_country: Counter = Counter()
    by_source: Counter = Counter()
    by_category: Counter = Counter()
    by_type: Counter = Counter()
    total = recent = 0

    for job in jobs:
        total += 1
        by_country[extract_country(job.location)] += 1
        by_source[job.source] += 1
        by_category[job.company_industry] += 1
        by_type[job.type] += 1
        if as_aware_utc(job.scraped_at) > cutoff:
            recent += 1

    return JobStatistics(
        total_jobs=total,
        by_country=dict(by_country),
        by_source=dict(by_source),
        by_category=dict(by_category),
        by_type=dict(by_type),
        recent_jobs=recent,
    )


def compute_statistics(storage: JobStorage, now: Optional[datetime] = None) -> JobStatistics:
    """Statistics for the newest snapshot in `storage` (all zero when there is none)."""
    return summarize(storage.load_latest(), now=now)
