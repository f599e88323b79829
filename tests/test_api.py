import pytest
from fastapi.testclient import TestClient

from gulf_jobs.api import create_app
from gulf_jobs.errors import FetchError


@pytest.fixture
def services(build, make_job, fake_source):
    return build(
        [
            fake_source(
                "Bayt.com",
                jobs=[
                    make_job("Software Engineer", "Careem", "Dubai, United Arab Emirates", source="Bayt.com"),
                    make_job("Nurse", "Hamad Medical", "Doha, Qatar", source="Bayt.com", company_industry="Healthcare"),
                ],
            ),
            fake_source(
                "GulfTalent",
                jobs=[
                    make_job("Software Engineer", "Careem", "Dubai, United Arab Emirates", source="GulfTalent"),
                    make_job("Accountant", "STC", "Riyadh, Saudi Arabia", source="GulfTalent"),
                ],
            ),
        ]
    )


@pytest.fixture
def client(services):
    app = create_app(services)
    with TestClient(app) as c:
        yield c
    services.scheduler.stop()


def test_load_without_snapshots(client):
    r = client.get("/gulf-jobs")
    assert r.status_code == 200
    assert r.json() == {"success": True, "totalJobs": 0, "jobs": []}


def test_post_triggers_cycle_and_load_returns_it(client):
    r = client.post("/gulf-jobs")
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["totalJobs"] == 3
    assert body["metadata"]["sources"] == ["Bayt.com", "GulfTalent"]
    assert body["metadata"]["countries"] == ["United Arab Emirates", "Qatar", "Saudi Arabia"]
    assert body["metadata"]["scrapedAt"]

    r = client.get("/gulf-jobs", params={"action": "load"})
    body = r.json()
    assert body["totalJobs"] == 3
    assert body["jobs"][0]["companyName"] == "Careem"


def test_load_filters(client):
    client.post("/gulf-jobs")
    body = client.get("/gulf-jobs", params={"country": "AE"}).json()
    assert [j["title"] for j in body["jobs"]] == ["Software Engineer"]

    body = client.get("/gulf-jobs", params={"category": "healthcare"}).json()
    assert [j["title"] for j in body["jobs"]] == ["Nurse"]

    body = client.get("/gulf-jobs", params={"limit": 1}).json()
    assert body["totalJobs"] == 1


def test_scrape_action(client):
    body = client.get("/gulf-jobs", params={"action": "scrape", "limit": 2}).json()
    assert body["success"] is True
    assert body["totalJobs"] == 3
    assert len(body["jobs"]) == 2


def test_stats_and_files(client, services):
    client.post("/gulf-jobs")

    stats = client.get("/gulf-jobs", params={"action": "stats"}).json()["statistics"]
    assert stats["totalJobs"] == 3
    assert stats["byCountry"] == {"United Arab Emirates": 1, "Qatar": 1, "Saudi Arabia": 1}
    assert stats["bySource"] == {"Bayt.com": 2, "GulfTalent": 1}

    files = client.get("/gulf-jobs", params={"action": "files"}).json()["files"]
    assert files == services.storage.list_available()
    assert len(files) == 1


def test_invalid_action(client):
    r = client.get("/gulf-jobs", params={"action": "explode"})
    assert r.status_code == 400
    assert r.json() == {"success": False, "error": "Invalid action parameter"}


def test_corrupt_snapshot_is_a_server_error(client, services):
    services.storage.ensure_data_directory()
    (services.storage.data_dir / "gulf-jobs-2030-01-01T00-00-00-000000Z.json").write_text("oops", encoding="utf-8")
    r = client.get("/gulf-jobs")
    assert r.status_code == 500
    assert r.json()["success"] is False


def test_busy_trigger_returns_conflict(client, services):
    lock = services.scheduler._run_lock
    lock.acquire()
    try:
        r = client.post("/gulf-jobs")
    finally:
        lock.release()
    assert r.status_code == 409
    assert r.json() == {"success": False, "error": "Job scraping is already running"}


def test_failed_cycle_returns_500(build, fake_source):
    services = build([fake_source("Bayt.com", error=FetchError("Bayt.com", "down"))])
    with TestClient(create_app(services)) as client:
        r = client.post("/gulf-jobs")
    assert r.status_code == 500
    assert r.json()["success"] is False


def test_scheduler_status(client):
    body = client.get("/scheduler").json()
    assert body["success"] is True
    status = body["status"]
    assert status["state"] == "stopped"
    assert status["isRunning"] is False
    assert status["config"]["intervalHours"] == 6.0
    assert status["lastResult"] is None


def test_scheduler_start_stop(client):
    r = client.post("/scheduler", json={"action": "start"})
    assert r.json() == {"success": True, "message": "Scheduler started"}
    assert client.get("/scheduler").json()["status"]["state"] == "scheduled"

    r = client.post("/scheduler", json={"action": "stop"})
    assert r.json()["success"] is True
    assert client.get("/scheduler").json()["status"]["state"] == "stopped"


def test_scheduler_trigger(client):
    body = client.post("/scheduler", json={"action": "trigger"}).json()
    assert body == {"success": True, "message": "Successfully scraped and saved 3 jobs", "totalJobs": 3}
    status = client.get("/scheduler").json()["status"]
    assert status["lastResult"]["success"] is True
    assert status["lastRunAt"]


def test_scheduler_config(client):
    r = client.post("/scheduler", json={"action": "config", "config": {"intervalHours": 12, "keepLastFiles": 2}})
    assert r.status_code == 200
    assert r.json()["config"]["intervalHours"] == 12
    assert r.json()["config"]["keepLastFiles"] == 2


@pytest.mark.parametrize(
    "payload",
    [
        {"action": "config"},
        {"action": "config", "config": {"intervalHours": -1}},
        {"action": "config", "config": {"nope": True}},
        {"action": "config", "config": {"self": 1}},
        {"action": "config", "config": {"changes": {"enabled": False}}},
        {"action": "reboot"},
    ],
)
def test_scheduler_bad_requests(client, payload):
    r = client.post("/scheduler", json=payload)
    assert r.status_code == 400
    assert r.json()["success"] is False
