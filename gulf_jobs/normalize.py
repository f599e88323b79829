"""Normalization & heuristics.

This module contains the deterministic field parsing every source adapter
shares:
- Gulf country / city reference data and country extraction from free text
- salary range parsing ("AED 5,000 - 8,000", "Up to 12k SAR", ...)
- employment type canonicalization
- remote detection
- category inference from a fixed category list
- posted-date parsing (ISO strings and "3 days ago" phrases)

Country extraction is a plain substring match against an ordered list of
region names. It is known to mis-bucket some strings ("Romania" contains
"oman"), and snapshot metadata and statistics depend on exactly this
behaviour, so it must not be swapped for a geocoder without a schema bump.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

from .models import JobType
from .utils import as_aware_utc, utc_now


GULF_COUNTRIES: Dict[str, Dict[str, object]] = {
    "AE": {
        "name": "United Arab Emirates",
        "cities": ["Dubai", "Abu Dhabi", "Sharjah", "Ajman", "Ras Al Khaimah", "Fujairah", "Umm Al Quwain"],
    },
    "SA": {
        "name": "Saudi Arabia",
        "cities": ["Riyadh", "Jeddah", "Mecca", "Medina", "Dammam", "Khobar", "Dhahran"],
    },
    "QA": {"name": "Qatar", "cities": ["Doha", "Al Rayyan", "Al Wakrah", "Al Khor"]},
    "KW": {"name": "Kuwait", "cities": ["Kuwait City", "Al Ahmadi", "Hawalli", "Farwaniya"]},
    "BH": {"name": "Bahrain", "cities": ["Manama", "Riffa", "Muharraq", "Hamad Town"]},
    "OM": {"name": "Oman", "cities": ["Muscat", "Salalah", "Sohar", "Nizwa"]},
}

# Order matters: the first entry contained in a location wins.
KNOWN_REGIONS: List[str] = [
    "United Arab Emirates",
    "UAE",
    "Dubai",
    "Abu Dhabi",
    "Saudi Arabia",
    "Riyadh",
    "Jeddah",
    "Qatar",
    "Doha",
    "Kuwait",
    "Kuwait City",
    "Bahrain",
    "Manama",
    "Oman",
    "Muscat",
]

UNKNOWN_COUNTRY = "Unknown"

JOB_CATEGORIES: List[str] = [
    "Engineering",
    "IT & Software",
    "Finance & Banking",
    "Healthcare",
    "Education",
    "Sales & Marketing",
    "Human Resources",
    "Administration",
    "Customer Service",
    "Hospitality",
    "Construction",
    "Oil & Gas",
    "Aviation",
    "Real Estate",
    "Retail",
    "Logistics",
    "Government",
    "Consulting",
]

DEFAULT_CATEGORY = "Other"

# Checked in order; first category with a whole-word keyword hit wins.
CATEGORY_KEYWORDS: List[Tuple[str, List[str]]] = [
    ("IT & Software", ["software", "developer", "devops", "data", "it", "programmer", "qa", "ux", "cloud", "cyber"]),
    ("Oil & Gas", ["oil", "gas", "petroleum", "drilling", "refinery", "offshore"]),
    ("Aviation", ["aviation", "pilot", "cabin crew", "aircraft", "airline"]),
    ("Finance & Banking", ["finance", "financial", "accountant", "accounting", "bank", "banking", "audit", "controller"]),
    ("Healthcare", ["nurse", "doctor", "physician", "pharmacist", "medical", "clinical", "healthcare"]),
    ("Education", ["teacher", "lecturer", "tutor", "education", "professor"]),
    ("Sales & Marketing", ["sales", "marketing", "business development", "seo", "brand"]),
    ("Human Resources", ["hr", "human resources", "recruiter", "recruitment", "talent acquisition"]),
    ("Customer Service", ["customer service", "customer success", "call center", "support representative"]),
    ("Hospitality", ["hotel", "chef", "restaurant", "hospitality", "barista", "housekeeping"]),
    ("Construction", ["construction", "site engineer", "civil", "quantity surveyor", "foreman"]),
    ("Real Estate", ["real estate", "property", "leasing", "broker"]),
    ("Retail", ["retail", "store", "cashier", "merchandiser"]),
    ("Logistics", ["logistics", "supply chain", "warehouse", "procurement", "driver"]),
    ("Government", ["government", "ministry", "public sector"]),
    ("Consulting", ["consultant", "consulting", "advisory"]),
    ("Administration", ["admin", "administrator", "administrative", "secretary", "receptionist", "office manager"]),
    ("Engineering", ["engineer", "engineering", "mechanical", "electrical", "technician"]),
]

JOB_TYPE_PATTERNS: List[Tuple[str, JobType]] = [
    (r"\bintern(ship)?\b|\btrainee\b", "internship"),
    (r"\bfree\s*-?\s*lance(r)?\b|\bfreelancing\b", "freelance"),
    (r"\bcontract(or|ual)?\b|\btemporary\b|\btemp\b|\bfixed[\s-]term\b", "contract"),
    (r"\bpart[\s-]*time\b", "part-time"),
    (r"\bfull[\s-]*time\b|\bpermanent\b", "full-time"),
]

CURRENCY_CODES = ["AED", "SAR", "QAR", "KWD", "BHD", "OMR", "USD", "EUR", "GBP", "INR"]
CURRENCY_SYMBOLS = {"$": "USD", "€": "EUR", "£": "GBP", "₹": "INR"}

_CURRENCY_RE = re.compile(r"\b(" + "|".join(CURRENCY_CODES) + r")\b", re.IGNORECASE)
_AMOUNT_RE = re.compile(r"(\d[\d,]*(?:\.\d+)?)\s*(k)?\b", re.IGNORECASE)
_REMOTE_RE = re.compile(r"\b(remote|work from home|wfh|home[\s-]based|telecommute)\b", re.IGNORECASE)
_RELATIVE_RE = re.compile(r"(\d+)\+?\s*(minute|hour|day|week|month)s?\s+ago", re.IGNORECASE)


def clean_text(text: Optional[str]) -> str:
    """Collapse runs of whitespace (including newlines) into single spaces."""
    return re.sub(r"\s+", " ", text or "").strip()


def extract_country(location: Optional[str]) -> str:
    """Return the first known region contained in `location`, else "Unknown"."""
    loc = (location or "").lower()
    for region in KNOWN_REGIONS:
        if region.lower() in loc:
            return region
    return UNKNOWN_COUNTRY


def country_name(code: str) -> Optional[str]:
    """Map an ISO country code (AE, SA, ...) to its full name."""
    country = GULF_COUNTRIES.get((code or "").strip().upper())
    return str(country["name"]) if country else None


def normalize_job_type(text: Optional[str], default: JobType = "full-time") -> JobType:
    """Canonicalize a free-text employment type ("Full Time", "Contractor", ...)."""
    t = (text or "").lower()
    for pat, label in JOB_TYPE_PATTERNS:
        if re.search(pat, t):
            return label
    return default


def is_remote(*texts: Optional[str]) -> bool:
    return any(_REMOTE_RE.search(t or "") for t in texts)


def _to_amount(number: str, k_suffix: Optional[str]) -> float:
    value = float(number.replace(",", ""))
    return value * 1000 if k_suffix else value


def parse_salary(
    text: Optional[str], default_currency: str = "AED"
) -> Tuple[Optional[float], Optional[float], str]:
    """Parse a salary string into (min, max, currency).

    Missing bounds are None; "Negotiable" and friends yield (None, None, default).
    A single figure is read as an exact amount unless phrased "up to" (max only)
    or "from"/"starting" (min only).
    """
    raw = text or ""
    currency = default_currency
    m = _CURRENCY_RE.search(raw)
    if m:
        currency = m.group(1).upper()
    else:
        for symbol, code in CURRENCY_SYMBOLS.items():
            if symbol in raw:
                currency = code
                break

    amounts = [_to_amount(num, k) for num, k in _AMOUNT_RE.findall(raw)]
    if not amounts:
        return None, None, currency

    if len(amounts) >= 2:
        low, high = amounts[0], amounts[1]
        return min(low, high), max(low, high), currency

    lowered = raw.lower()
    if "up to" in lowered or "max" in lowered:
        return None, amounts[0], currency
    if "from" in lowered or "starting" in lowered or "+" in raw:
        return amounts[0], None, currency
    return amounts[0], amounts[0], currency


def infer_category(title: Optional[str], description: Optional[str] = None) -> str:
    """Pick a category for a posting, looking at the title before the description."""
    for blob in ((title or "").lower(), (description or "").lower()):
        if not blob:
            continue
        for category, keywords in CATEGORY_KEYWORDS:
            if any(re.search(rf"\b{re.escape(kw)}\b", blob) for kw in keywords):
                return category
    return DEFAULT_CATEGORY


def parse_posted_date(text: Optional[str], now: Optional[datetime] = None) -> Optional[datetime]:
    """Parse listing dates: ISO strings, "today", "yesterday", "3 days ago", "30+ days ago"."""
    raw = clean_text(text)
    if not raw:
        return None
    now = as_aware_utc(now) if now else utc_now()

    try:
        return as_aware_utc(datetime.fromisoformat(raw.replace("Z", "+00:00")))
    except ValueError:
        pass

    lowered = raw.lower()
    if lowered in {"today", "just now", "new"} or lowered.startswith("posted today"):
        return now
    if "yesterday" in lowered:
        return now - timedelta(days=1)

    m = _RELATIVE_RE.search(lowered)
    if not m:
        return None
    count, unit = int(m.group(1)), m.group(2)
    if unit == "minute":
        return now - timedelta(minutes=count)
    if unit == "hour":
        return now - timedelta(hours=count)
    if unit == "day":
        return now - timedelta(days=count)
    if unit == "week":
        return now - timedelta(weeks=count)
    return now - timedelta(days=30 * count)
