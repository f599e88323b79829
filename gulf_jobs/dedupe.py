"""Cross-source deduplication.

Two postings are the same job when their title, company name and location
match case-insensitively, whatever source they came from. The first record
in input order wins, so callers control precedence through ordering.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Tuple

from .models import ScrapedJob

logger = logging.getLogger(__name__)


def dedupe_key(job: ScrapedJob) -> Tuple[str, str, str]:
    return (job.title.lower(), job.company_name.lower(), job.location.lower())


def dedupe(jobs: Iterable[ScrapedJob]) -> List[ScrapedJob]:
    """Drop every record whose dedupe key was already seen earlier in `jobs`."""
    seen = set()
    out: List[ScrapedJob] = []
    total = 0
    for job in jobs:
        total += 1
        key = dedupe_key(job)
        if key in seen:
            continue
        seen.add(key)
        out.append(job)
    if total != len(out):
        logger.debug("dedupe: %d input -> %d unique (%d removed)", total, len(out), total - len(out))
    return out
