"""CLI entry point.

Scrapes Gulf job sites, dedupes the results, and writes timestamped JSON
snapshots under the data directory. Settings come from the environment (or a
`.env` file); see `gulf_jobs.config.Settings`.

Examples:
    python run_fetch.py init
    python run_fetch.py scrape
    python run_fetch.py scrape --sources Bayt.com,GulfTalent --keep-last 10
    python run_fetch.py stats
    python run_fetch.py files
    python run_fetch.py prune --keep-last 3
    python run_fetch.py schedule --interval-hours 6
    python run_fetch.py serve --port 8000
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import threading
from pathlib import Path
from typing import List, Optional

from gulf_jobs.config import Settings, configure_logging
from gulf_jobs.service import Services, build_services
from gulf_jobs.stats import compute_statistics


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Scrape, store and report Gulf job listings.")
    p.add_argument("--data-dir", type=str, default=None, help="Snapshot directory (overrides GULF_JOBS_DATA_DIR).")
    p.add_argument("--env-file", type=str, default=None, help="Path to a .env file.")
    p.add_argument("--log-level", type=str, default=None, help="Logging level (DEBUG, INFO, ...).")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("init", help="Create the data directory and the initial placeholder snapshot.")

    scrape = sub.add_parser("scrape", help="Run one scrape cycle now.")
    scrape.add_argument("--sources", type=str, default=None, help="Comma-separated source names to enable.")
    scrape.add_argument("--keep-last", type=int, default=None, help="Snapshots to keep after pruning.")
    scrape.add_argument("--no-backup", action="store_true", help="Skip backing up existing snapshots.")

    sub.add_parser("stats", help="Print statistics for the latest snapshot.")
    sub.add_parser("files", help="List available snapshots, newest first.")

    prune = sub.add_parser("prune", help="Delete old snapshots.")
    prune.add_argument("--keep-last", type=int, default=None, help="Snapshots to keep.")

    schedule = sub.add_parser("schedule", help="Run the scheduler in the foreground until interrupted.")
    schedule.add_argument("--interval-hours", type=float, default=None, help="Hours between cycles.")
    schedule.add_argument("--run-now", action="store_true", help="Run the first cycle immediately.")

    serve = sub.add_parser("serve", help="Serve the HTTP API with uvicorn.")
    serve.add_argument("--host", type=str, default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--start-scheduler", action="store_true", help="Arm the scheduler on startup.")
    return p.parse_args(argv)


def load_settings(args: argparse.Namespace) -> Settings:
    settings = Settings.from_env(args.env_file)
    overrides = {}
    if args.data_dir:
        overrides["data_dir"] = Path(args.data_dir)
    if args.log_level:
        overrides["log_level"] = args.log_level.upper()
    if getattr(args, "sources", None):
        overrides["sources"] = tuple(s.strip() for s in args.sources.split(",") if s.strip())
    if getattr(args, "keep_last", None) is not None:
        overrides["keep_last"] = max(1, args.keep_last)
    if getattr(args, "no_backup", False):
        overrides["backup_enabled"] = False
    if getattr(args, "interval_hours", None):
        overrides["interval_hours"] = args.interval_hours
    if getattr(args, "run_now", False):
        overrides["run_on_start"] = True
    return dataclasses.replace(settings, **overrides)


def cmd_scrape(services: Services) -> int:
    result = services.scheduler.trigger_manual_scraping()
    print(json.dumps(result.to_json_dict(), indent=2, ensure_ascii=False))
    return 0 if result.success else 1


def cmd_schedule(services: Services) -> int:
    if not services.scheduler.start():
        print("Scheduler did not start (disabled?)")
        return 1
    stop = threading.Event()
    try:
        stop.wait()
    except KeyboardInterrupt:
        pass
    finally:
        services.scheduler.stop()
    return 0


def cmd_serve(services: Services, host: str, port: int, start_scheduler: bool) -> int:
    import uvicorn

    from gulf_jobs.api import create_app

    if start_scheduler:
        services.scheduler.start()
    try:
        uvicorn.run(create_app(services), host=host, port=port)
    finally:
        services.scheduler.stop()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    settings = load_settings(args)
    configure_logging(settings.log_level)
    services = build_services(settings)
    storage = services.storage

    if args.command == "init":
        path = storage.initialize()
        print(f"Initialized data directory: {storage.data_dir} ({path.name})")
        return 0
    if args.command == "scrape":
        return cmd_scrape(services)
    if args.command == "stats":
        print(json.dumps(compute_statistics(storage).to_json_dict(), indent=2, ensure_ascii=False))
        return 0
    if args.command == "files":
        for name in storage.list_available():
            print(name)
        return 0
    if args.command == "prune":
        deleted = storage.prune(settings.keep_last)
        print(f"Deleted {len(deleted)} snapshot(s)")
        return 0
    if args.command == "schedule":
        return cmd_schedule(services)
    if args.command == "serve":
        return cmd_serve(services, args.host, args.port, args.start_scheduler)
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
