"""Gulf jobs scraping pipeline.

The package is structured so each stage can be used on its own:
- `models.py` defines the snapshot schema the job board reads.
- `sources/` contains per-site connectors that fetch listings.
- `normalize.py` and `dedupe.py` hold the deterministic field heuristics.
- `storage.py` writes, lists, merges and prunes snapshot files.
- `stats.py` and `query.py` derive reports and filtered views.
- `scheduler.py` runs the whole cycle periodically or on demand.
- `service.py` wires the pieces together once per process.
"""

__version__ = "0.1.0"
