"""
Runtime settings read from the environment.

Values come from process environment variables, optionally loaded from a
``.env`` file at import.  Everything here is read lazily at call time so
tests can ``monkeypatch.setenv`` without reloading the module.

    SIMULATION_ITERATIONS  default replay count per game (100–10,000)
    SIMULATION_SEED        optional integer seed for reproducible runs
    SLATE_MAX_WORKERS      worker threads for batch (slate) simulation
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv

from nfl_edge.core.engine_config import EngineConfig

load_dotenv()

logger = logging.getLogger(__name__)

_DEFAULT_SLATE_WORKERS = 4


def default_iterations(config: Optional[EngineConfig] = None) -> int:
    """
    Iteration count to use when the caller does not pass one.

    Reads ``SIMULATION_ITERATIONS`` and clamps it into the config's
    ``[min_iterations, max_iterations]`` band, logging a warning when the
    environment value had to be clamped.

    Raises:
        ValueError: If the variable is set but is not an integer.
    """
    cfg = config or EngineConfig.nfl()
    raw = os.getenv("SIMULATION_ITERATIONS")
    if raw is None or raw.strip() == "":
        return cfg.default_iterations

    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"SIMULATION_ITERATIONS must be an integer, got {raw!r}") from None

    clamped = max(cfg.min_iterations, min(cfg.max_iterations, value))
    if clamped != value:
        logger.warning(
            "SIMULATION_ITERATIONS=%d outside [%d, %d]; using %d",
            value, cfg.min_iterations, cfg.max_iterations, clamped,
        )
    return clamped


def default_seed() -> Optional[int]:
    """``SIMULATION_SEED`` as an int, or None when unset (fresh entropy)."""
    raw = os.getenv("SIMULATION_SEED")
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"SIMULATION_SEED must be an integer, got {raw!r}") from None


def slate_max_workers() -> int:
    """Worker-thread count for slate simulation (``SLATE_MAX_WORKERS``, min 1)."""
    raw = os.getenv("SLATE_MAX_WORKERS", str(_DEFAULT_SLATE_WORKERS))
    try:
        workers = int(raw)
    except ValueError:
        raise ValueError(f"SLATE_MAX_WORKERS must be an integer, got {raw!r}") from None
    if workers < 1:
        logger.warning("SLATE_MAX_WORKERS=%d is below 1; using 1", workers)
        return 1
    return workers
