"""HTTP surface for the job board front-end.

A thin mapping of query parameters and JSON bodies onto the storage,
statistics and scheduler objects; no pipeline logic lives here.

    GET  /gulf-jobs?action=load|scrape|stats|files
    POST /gulf-jobs            trigger a scrape cycle
    GET  /scheduler            scheduler status
    POST /scheduler            {"action": "start|stop|trigger|config", "config": {...}}
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from .errors import BusyError, ParseError
from .models import SCHEMA_VERSION, CycleResult
from .query import filter_jobs
from .service import Services
from .stats import compute_statistics


class SchedulerCommand(BaseModel):
    action: str
    config: Optional[Dict[str, Any]] = None


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def create_app(services: Services) -> FastAPI:
    app = FastAPI(title="Gulf Jobs API", version=SCHEMA_VERSION)
    app.state.services = services
    storage = services.storage
    scheduler = services.scheduler

    @app.exception_handler(ParseError)
    async def _on_parse_error(request: Request, exc: ParseError) -> JSONResponse:
        return _error(500, str(exc))

    @app.exception_handler(BusyError)
    async def _on_busy(request: Request, exc: BusyError) -> JSONResponse:
        return _error(409, str(exc))

    def run_cycle() -> CycleResult:
        result = scheduler.trigger_manual_scraping()
        if result.busy:
            raise BusyError(result.message)
        return result

    @app.get("/gulf-jobs")
    def get_gulf_jobs(
        action: str = "load",
        country: Optional[str] = None,
        city: Optional[str] = None,
        category: Optional[str] = None,
        limit: int = 100,
    ):
        if action == "load":
            jobs = filter_jobs(storage.load_latest(), country=country, city=city, category=category, limit=limit)
            return {"success": True, "totalJobs": len(jobs), "jobs": [j.to_json_dict() for j in jobs]}

        if action == "scrape":
            result = run_cycle()
            if not result.success:
                return JSONResponse(status_code=500, content={"success": False, "error": result.message})
            jobs = storage.load(result.filename)[:limit] if result.filename else []
            return {
                "success": True,
                "message": result.message,
                "filename": result.filename,
                "totalJobs": result.total_jobs,
                "jobs": [j.to_json_dict() for j in jobs],
            }

        if action == "stats":
            return {"success": True, "statistics": compute_statistics(storage).to_json_dict()}

        if action == "files":
            return {"success": True, "files": storage.list_available()}

        return _error(400, "Invalid action parameter")

    @app.post("/gulf-jobs")
    def post_gulf_jobs():
        result = run_cycle()
        if not result.success:
            return JSONResponse(status_code=500, content={"success": False, "error": result.message})
        body: Dict[str, Any] = {
            "success": True,
            "message": result.message,
            "filename": result.filename,
            "totalJobs": result.total_jobs,
        }
        if result.filename:
            metadata = storage.load_snapshot(result.filename).metadata
            body["metadata"] = {
                "scrapedAt": metadata.to_json_dict()["scrapedAt"],
                "sources": metadata.sources,
                "countries": metadata.countries,
            }
        return body

    @app.get("/scheduler")
    def get_scheduler():
        return {"success": True, "status": scheduler.get_status().to_json_dict()}

    @app.post("/scheduler")
    def post_scheduler(command: SchedulerCommand):
        if command.action == "start":
            started = scheduler.start()
            message = "Scheduler started" if started else "Scheduler is already running or disabled"
            return {"success": True, "message": message}

        if command.action == "stop":
            scheduler.stop()
            return {"success": True, "message": "Scheduler stopped"}

        if command.action == "trigger":
            result = scheduler.trigger_manual_scraping()
            return {"success": result.success, "message": result.message, "totalJobs": result.total_jobs}

        if command.action == "config":
            if not command.config:
                return _error(400, "Configuration not provided")
            try:
                config = scheduler.update_config(command.config)
            except ValidationError as exc:
                return _error(400, f"Invalid configuration: {exc.errors()[0]['msg']}")
            return {
                "success": True,
                "message": "Scheduler configuration updated",
                "config": config.to_json_dict(),
            }

        return _error(400, "Invalid action")

    return app
