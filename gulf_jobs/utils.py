"""Utility helpers shared across the package."""

from __future__ import annotations

import hashlib
from datetime import datetime, timezone
from typing import Iterable, List, Optional


def stable_id(*parts: str) -> str:
    """Create a deterministic identifier from a set of string parts."""
    joined = "|".join(p.strip() for p in parts if p is not None)
    return hashlib.sha256(joined.encode("utf-8")).hexdigest()


def uniq_preserve_order(items: Iterable[Optional[str]]) -> List[str]:
    """Deduplicate (case-insensitively) while preserving first-seen order."""
    seen = set()
    out: List[str] = []
    for it in items:
        if not it:
            continue
        key = it.strip().lower()
        if key in seen:
            continue
        seen.add(key)
        out.append(it)
    return out


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_aware_utc(dt: datetime) -> datetime:
    """Naive datetimes are assumed to be UTC; aware ones are converted."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def filename_timestamp(dt: datetime) -> str:
    """ISO-8601 UTC timestamp with ':' and '.' replaced by '-'.

    Fields are fixed width, so names built from these sort chronologically
    as plain strings.
    """
    iso = as_aware_utc(dt).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return iso.replace(":", "-").replace(".", "-")
