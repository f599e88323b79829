"""Snapshot file storage.

Each successful scrape is written as one immutable JSON snapshot:

    <data_dir>/<prefix>-<ISO timestamp, ':' and '.' replaced by '-'>.json

The newest snapshot is found by sorting names in reverse, which works
because the embedded timestamps are fixed width. `<prefix>-initial.json` is
an empty placeholder written at setup time; it is never listed, loaded as
latest, merged or pruned.

Writes go to a temporary file first and are moved into place with
`os.replace`, so a reader never sees a half-written snapshot. Backup, write
and prune are separate steps, not one transaction: after a crash the newest
complete snapshot simply stays the latest one.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
import threading
from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterable, List, Optional, Union

from pydantic import ValidationError

from .dedupe import dedupe
from .errors import ParseError
from .models import ScrapedJob, Snapshot, SnapshotMetadata
from .normalize import extract_country
from .utils import filename_timestamp, uniq_preserve_order, utc_now

logger = logging.getLogger(__name__)

BACKUP_DIRNAME = "backups"
INITIAL_MARKER = "initial"


class JobStorage:
    """Owns the snapshot files under `data_dir`."""

    def __init__(
        self,
        data_dir: Union[str, Path],
        file_prefix: str = "gulf-jobs",
        backup_enabled: bool = True,
    ) -> None:
        self.data_dir = Path(data_dir).expanduser().resolve()
        self.file_prefix = file_prefix
        self.backup_enabled = backup_enabled
        self._clock_lock = threading.Lock()
        self._last_stamp: Optional[datetime] = None

    @property
    def backup_dir(self) -> Path:
        return self.data_dir / BACKUP_DIRNAME

    @property
    def initial_filename(self) -> str:
        return f"{self.file_prefix}-{INITIAL_MARKER}.json"

    def ensure_data_directory(self) -> None:
        # exist_ok also covers another process creating it between check and create
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _is_snapshot_name(self, name: str, include_initial: bool = False) -> bool:
        if not (name.startswith(f"{self.file_prefix}-") and name.endswith(".json")):
            return False
        return include_initial or name != self.initial_filename

    def _snapshot_names(self, include_initial: bool = False, directory: Optional[Path] = None) -> List[str]:
        directory = directory or self.data_dir
        if not directory.is_dir():
            return []
        names = [
            p.name
            for p in directory.iterdir()
            if p.is_file() and self._is_snapshot_name(p.name, include_initial)
        ]
        return sorted(names, reverse=True)

    def _resolve(self, filename: Union[str, Path]) -> Path:
        path = Path(filename)
        return path if path.is_absolute() else self.data_dir / path

    def _next_timestamp(self) -> datetime:
        """Current UTC time, nudged forward so names never repeat within this store."""
        with self._clock_lock:
            now = utc_now()
            if self._last_stamp is not None and now <= self._last_stamp:
                now = self._last_stamp + timedelta(microseconds=1)
            self._last_stamp = now
            return now

    def build_metadata(self, jobs: List[ScrapedJob], scraped_at: datetime) -> SnapshotMetadata:
        return SnapshotMetadata(
            total_jobs=len(jobs),
            scraped_at=scraped_at,
            sources=uniq_preserve_order(j.source for j in jobs),
            countries=uniq_preserve_order(extract_country(j.location) for j in jobs),
            categories=uniq_preserve_order(j.company_industry for j in jobs),
        )

    @staticmethod
    def _serialize(snapshot: Snapshot) -> str:
        payload = {
            "metadata": snapshot.metadata.to_json_dict(exclude_none=True),
            "jobs": [job.to_json_dict() for job in snapshot.jobs],
        }
        return json.dumps(payload, indent=2, ensure_ascii=False)

    def _write_atomic(self, path: Path, content: str) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(content)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def save(self, jobs: Iterable[ScrapedJob], filename: Optional[str] = None) -> str:
        """Write a new snapshot and return its absolute path.

        Existing snapshots are copied to `backups/` first when backups are
        enabled. Write errors propagate to the caller.
        """
        job_list = list(jobs)
        self.ensure_data_directory()
        if self.backup_enabled:
            self.backup()

        scraped_at = self._next_timestamp()
        name = filename or f"{self.file_prefix}-{filename_timestamp(scraped_at)}.json"
        path = self._resolve(name)
        snapshot = Snapshot(metadata=self.build_metadata(job_list, scraped_at), jobs=job_list)
        self._write_atomic(path, self._serialize(snapshot))

        logger.info("Saved %d jobs to %s", len(job_list), path)
        return str(path)

    def load_snapshot(self, filename: Union[str, Path]) -> Snapshot:
        """Read one snapshot file including its metadata.

        Raises:
            ParseError: the file is missing, unreadable, not JSON, or not a snapshot.
        """
        path = self._resolve(filename)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ParseError(path, f"cannot read snapshot: {exc}") from exc
        try:
            return Snapshot.model_validate_json(text)
        except ValidationError as exc:
            raise ParseError(path, f"invalid snapshot: {exc.error_count()} error(s): {exc.errors()[0]['msg']}") from exc

    def load(self, filename: Union[str, Path]) -> List[ScrapedJob]:
        snapshot = self.load_snapshot(filename)
        logger.debug("Loaded %d jobs from %s", len(snapshot.jobs), filename)
        return snapshot.jobs

    def list_available(self) -> List[str]:
        """Snapshot filenames, newest first, excluding the initial placeholder."""
        return self._snapshot_names()

    def load_latest(self) -> List[ScrapedJob]:
        """Jobs of the newest snapshot; an empty list when there is none yet."""
        files = self.list_available()
        if not files:
            logger.info("No job snapshots found in %s", self.data_dir)
            return []
        logger.info("Loading latest jobs from %s", files[0])
        return self.load(files[0])

    def merge(self, filenames: Iterable[str]) -> List[ScrapedJob]:
        """Concatenate several snapshots (in the given order) and dedupe the result.

        The initial placeholder is skipped if it is passed in.
        """
        all_jobs: List[ScrapedJob] = []
        for name in filenames:
            if Path(name).name == self.initial_filename:
                continue
            all_jobs.extend(self.load(name))
        unique = dedupe(all_jobs)
        logger.info("Merged %d jobs, %d unique", len(all_jobs), len(unique))
        return unique

    def prune(self, keep_last: int = 5) -> List[str]:
        """Delete all but the `keep_last` newest snapshots; return the deleted names.

        The same retention is applied to `backups/`, so the backup set rolls
        instead of growing without bound. The placeholder is never deleted.
        """
        if keep_last < 0:
            raise ValueError("keep_last must be >= 0")
        self._prune_backups(keep_last)
        files = self.list_available()
        if len(files) <= keep_last:
            logger.debug("No snapshots to prune (%d <= %d)", len(files), keep_last)
            return []

        deleted = files[keep_last:]
        for name in deleted:
            (self.data_dir / name).unlink(missing_ok=True)
            logger.info("Deleted old snapshot: %s", name)
        logger.info("Pruned %d old snapshot(s), kept %d", len(deleted), keep_last)
        return deleted

    def _prune_backups(self, keep_last: int) -> None:
        stale = self._snapshot_names(directory=self.backup_dir)[keep_last:]
        for name in stale:
            (self.backup_dir / name).unlink(missing_ok=True)
        if stale:
            logger.info("Pruned %d old backup(s), kept %d", len(stale), keep_last)

    def backup(self) -> int:
        """Copy every snapshot (placeholder included) into `backups/`; return the count."""
        files = self._snapshot_names(include_initial=True)
        if not files:
            return 0
        self.backup_dir.mkdir(parents=True, exist_ok=True)
        for name in files:
            shutil.copy2(self.data_dir / name, self.backup_dir / name)
        logger.info("Backed up %d snapshot file(s) to %s", len(files), self.backup_dir)
        return len(files)

    def initialize(self) -> Path:
        """Create the data directory and the empty placeholder snapshot if missing."""
        self.ensure_data_directory()
        path = self.data_dir / self.initial_filename
        if path.exists():
            return path
        metadata = SnapshotMetadata(total_jobs=0, scraped_at=utc_now(), initialized=True)
        self._write_atomic(path, self._serialize(Snapshot(metadata=metadata)))
        logger.info("Created initial snapshot %s", path)
        return path
