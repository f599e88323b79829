import threading
import time

from gulf_jobs.errors import FetchError
from gulf_jobs.scraper import Scraper


def test_failing_source_does_not_affect_others(make_job, fake_source):
    good = fake_source("Bayt.com", jobs=[make_job("A"), make_job("B")])
    bad = fake_source("GulfTalent", error=FetchError("GulfTalent", "all 6 listing page(s) failed"))
    report = Scraper([bad, good]).scrape_all()

    assert [j.title for j in report.jobs] == ["A", "B"]
    assert report.failures == {"GulfTalent": "all 6 listing page(s) failed"}
    assert report.succeeded == ["Bayt.com"]
    assert not report.all_failed


def test_unexpected_exception_is_isolated(make_job, fake_source):
    broken = fake_source("NaukriGulf", error=RuntimeError("selector exploded"))
    good = fake_source("Dubizzle", jobs=[make_job("A", source="Dubizzle")])
    report = Scraper([broken, good]).scrape_all()

    assert len(report.jobs) == 1
    assert report.failures["NaukriGulf"] == "RuntimeError: selector exploded"


def test_all_failed(fake_source):
    sources = [
        fake_source("Bayt.com", error=FetchError("Bayt.com", "down")),
        fake_source("GulfTalent", error=FetchError("GulfTalent", "down")),
    ]
    report = Scraper(sources).scrape_all()
    assert report.all_failed
    assert report.jobs == []


def test_no_enabled_sources(fake_source):
    source = fake_source("Bayt.com", enabled=False)
    report = Scraper([source]).scrape_all()
    assert report.attempted == []
    assert not report.all_failed
    assert source.calls == 0


def test_results_follow_source_order_not_completion_order(make_job, fake_source):
    gate = threading.Event()
    slow = fake_source("Bayt.com", jobs=[make_job("Data Analyst", "Emaar", "Dubai, UAE", source="Bayt.com")], gate=gate)
    fast = fake_source(
        "GulfTalent",
        jobs=[
            make_job("Data Analyst", "Emaar", "Dubai, UAE", source="GulfTalent"),
            make_job("Chef", "Jumeirah", "Dubai, UAE", source="GulfTalent"),
        ],
    )
    timer = threading.Timer(0.2, gate.set)
    timer.start()
    try:
        report = Scraper([slow, fast]).scrape_all()
    finally:
        timer.cancel()

    assert report.raw_count == 3
    assert [(j.title, j.source) for j in report.jobs] == [("Data Analyst", "Bayt.com"), ("Chef", "GulfTalent")]


def test_sources_run_concurrently(make_job, fake_source):
    started = threading.Event()
    # the first source waits for the second to start; run serially it would sit out the 5s timeout
    first = fake_source("Bayt.com", jobs=[make_job("A")], gate=started)
    second = fake_source("GulfTalent", jobs=[make_job("B")], started=started)

    t0 = time.monotonic()
    report = Scraper([first, second]).scrape_all()
    assert time.monotonic() - t0 < 4
    assert [j.title for j in report.jobs] == ["A", "B"]
