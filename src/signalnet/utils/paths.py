"""Where training runs write their artifacts."""
from datetime import datetime
from pathlib import Path

RUN_STAMP_FORMAT = "%Y%m%d_%H%M%S"


def get_runs_dir() -> Path:
    """The ``runs`` folder at the root of the checkout."""
    return Path(__file__).parents[3] / "runs"


def make_run_dir(kind: str, started: datetime | None = None) -> Path:
    """Create and return ``runs/<kind>/<timestamp>`` for one run.

    Args:
        kind: Name of the group of runs, e.g. ``training``.
        started: Start time of the run, now if not given.
    """
    assert kind and "/" not in kind, f"Invalid run kind {kind!r}."

    started = started if started is not None else datetime.now()
    run_dir = get_runs_dir() / kind / started.strftime(RUN_STAMP_FORMAT)
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir
