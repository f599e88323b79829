"""Base classes for source connectors."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup
from bs4.element import Tag
from tenacity import Retrying, retry_if_exception, stop_after_attempt, wait_exponential

from ..errors import FetchError
from ..models import ScrapedJob, SourceConfig
from ..normalize import (
    clean_text,
    infer_category,
    is_remote,
    normalize_job_type,
    parse_posted_date,
    parse_salary,
)
from ..utils import stable_id, utc_now

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome Safari",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en,ar;q=0.8",
}


class JobSource(ABC):
    """Abstract base class for a job source connector."""

    name: str

    @abstractmethod
    def fetch(self, config: Optional[SourceConfig] = None) -> List[ScrapedJob]:
        """Fetch listings and return normalized jobs.

        Raises:
            FetchError: the source could not be reached or parsed at all.
        """
        raise NotImplementedError

    @property
    def enabled(self) -> bool:
        return True


def _is_retryable(exc: BaseException) -> bool:
    """Transport failures, rate limiting and server errors are worth another attempt."""
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return status == 429 or status >= 500
    return isinstance(exc, httpx.TransportError)


class HtmlJobSource(JobSource):
    """A listing-page scraper driven entirely by a `SourceConfig`.

    Subclasses provide `default_config()` (URLs and CSS selectors) and may
    override `parse_card` for site-specific quirks. Each listing page is
    fetched with a bounded timeout and a bounded number of retries; a page
    that still fails is logged and skipped. `FetchError` is raised only when
    every page attempted failed.
    """

    require_company = True
    fallback_company = "Not specified"

    def __init__(
        self,
        config: Optional[SourceConfig] = None,
        timeout_s: float = 20.0,
        max_retries: int = 3,
        backoff_s: float = 1.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.config = config or self.default_config()
        self._timeout = timeout_s
        self._max_retries = max(1, max_retries)
        self._backoff_s = backoff_s
        self._transport = transport

    @classmethod
    @abstractmethod
    def default_config(cls) -> SourceConfig:
        raise NotImplementedError

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    def page_urls(self, config: SourceConfig) -> List[Tuple[str, str]]:
        """Return (url, location hint) pairs, one per listing page to fetch."""
        if not config.locations:
            return [(config.search_url.format(period=config.period, location=""), "")]
        return [
            (config.search_url.format(period=config.period, location=slug), label)
            for slug, label in config.locations.items()
        ]

    @staticmethod
    def _request(client: httpx.Client, url: str) -> str:
        resp = client.get(url)
        resp.raise_for_status()
        return resp.text

    def _get_html(self, client: httpx.Client, url: str) -> str:
        retrying = Retrying(
            stop=stop_after_attempt(self._max_retries),
            wait=wait_exponential(multiplier=self._backoff_s, max=16),
            retry=retry_if_exception(_is_retryable),
            reraise=True,
        )
        return retrying(self._request, client, url)

    def fetch(self, config: Optional[SourceConfig] = None) -> List[ScrapedJob]:
        cfg = config or self.config
        out: List[ScrapedJob] = []
        attempted = 0
        errors: List[str] = []

        with httpx.Client(
            timeout=self._timeout,
            follow_redirects=True,
            headers=DEFAULT_HEADERS,
            transport=self._transport,
        ) as client:
            for url, hint in self.page_urls(cfg):
                if len(out) >= cfg.max_jobs:
                    break
                attempted += 1
                try:
                    html = self._get_html(client, url)
                except httpx.HTTPError as exc:
                    logger.warning("%s: failed to fetch %s: %s", cfg.name, url, exc)
                    errors.append(f"{url}: {exc}")
                    continue
                jobs = self.parse_listing(html, cfg, page_url=url, location_hint=hint)
                logger.info("%s: found %d jobs on %s", cfg.name, len(jobs), url)
                out.extend(jobs)

        if attempted and len(errors) == attempted:
            raise FetchError(cfg.name, f"all {attempted} listing page(s) failed; last error: {errors[-1]}")
        return out[: cfg.max_jobs]

    def parse_listing(
        self, html: str, config: SourceConfig, page_url: str = "", location_hint: str = ""
    ) -> List[ScrapedJob]:
        """Parse one listing page into jobs, skipping cards without the required fields."""
        card_selector = config.selectors.get("card")
        if not card_selector:
            raise FetchError(config.name, "no 'card' selector configured")

        soup = BeautifulSoup(html, "html.parser")
        out: List[ScrapedJob] = []
        for card in soup.select(card_selector):
            job = self.parse_card(card, config, page_url=page_url, location_hint=location_hint)
            if job is not None:
                out.append(job)
        return out

    @staticmethod
    def _text(card: Tag, selector: Optional[str]) -> str:
        if not selector:
            return ""
        el = card.select_one(selector)
        return clean_text(el.get_text(" ")) if el else ""

    def _link(self, card: Tag, config: SourceConfig) -> str:
        selector = config.selectors.get("link") or "a"
        el = card.select_one(selector)
        href = el.get("href") if el else None
        if not href or not isinstance(href, str):
            return ""
        return urljoin(config.base_url, href.strip())

    def parse_card(
        self, card: Tag, config: SourceConfig, page_url: str = "", location_hint: str = ""
    ) -> Optional[ScrapedJob]:
        sel = config.selectors
        title = self._text(card, sel.get("title"))
        company = self._text(card, sel.get("company"))
        if not title:
            return None
        if not company:
            if self.require_company:
                return None
            company = self.fallback_company

        location = self._text(card, sel.get("location")) or location_hint or "Unknown"
        description = self._text(card, sel.get("description"))
        job_type_text = self._text(card, sel.get("job_type"))
        category = self._text(card, sel.get("category")) or infer_category(title, description)
        salary_min, salary_max, currency = parse_salary(self._text(card, sel.get("salary")), config.currency)
        link = self._link(card, config)

        uid = stable_id(config.name, link) if link else stable_id(config.name, title, company, location)
        return ScrapedJob(
            uid=uid,
            title=title,
            description=description,
            location=location,
            company_name=company,
            company_industry=category,
            salary_min=salary_min,
            salary_max=salary_max,
            currency=currency,
            type=normalize_job_type(job_type_text or title),
            remote=is_remote(title, location, job_type_text),
            posted_date=parse_posted_date(self._text(card, sel.get("posted"))),
            source=config.name,
            source_url=link or page_url,
            scraped_at=utc_now(),
        )
