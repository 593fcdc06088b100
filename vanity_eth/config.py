"""
Runtime knobs, read from the environment:

  VANITY_WORKERS=8             -> worker processes (default: usable cpus)
  VANITY_REPORT_INTERVAL=1.0   -> seconds between throughput reports
  VANITY_START_METHOD=fork     -> multiprocessing start method (default: platform)
  VANITY_LOG_LEVEL=DEBUG       -> logging level (default: WARNING)
"""

import logging
import multiprocessing as mp
import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_REPORT_INTERVAL = 1.0
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    workers: int
    report_interval: float = DEFAULT_REPORT_INTERVAL
    start_method: Optional[str] = None
    log_level: str = DEFAULT_LOG_LEVEL


def available_cpus() -> int:
    """CPUs this process may run on (affinity aware where the OS supports it)."""
    if hasattr(os, "sched_getaffinity"):
        return len(os.sched_getaffinity(0)) or mp.cpu_count()
    return mp.cpu_count()


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from environment variables. Raises ValueError on bad values."""
    if environ is None:
        environ = os.environ

    workers = int(environ.get("VANITY_WORKERS", "").strip() or "0") or available_cpus()
    if workers < 1:
        raise ValueError(f"VANITY_WORKERS must be at least 1, got {workers}")

    interval = float(environ.get("VANITY_REPORT_INTERVAL", "").strip() or DEFAULT_REPORT_INTERVAL)
    if interval <= 0:
        raise ValueError(f"VANITY_REPORT_INTERVAL must be positive, got {interval}")

    start_method = environ.get("VANITY_START_METHOD", "").strip().lower() or None
    if start_method and start_method not in mp.get_all_start_methods():
        raise ValueError(
            f"VANITY_START_METHOD must be one of {mp.get_all_start_methods()}, got {start_method!r}"
        )

    log_level = environ.get("VANITY_LOG_LEVEL", "").strip().upper() or DEFAULT_LOG_LEVEL
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"Unknown VANITY_LOG_LEVEL: {log_level!r}")

    return Settings(
        workers=workers,
        report_interval=interval,
        start_method=start_method,
        log_level=log_level,
    )
