"""
Parallel brute-force search for an address starting with a hex prefix.

Every worker loops on the keypair generator and bumps one shared counter.
Roughly once per report interval one of them wins the report lock and
prints the throughput plus an ETA. The first worker to hit the prefix
pushes its keypair onto the result queue. Later hits are ignored.
"""

import logging
import multiprocessing as mp
import os
import queue
import sys
import time
from typing import Callable, NamedTuple, Optional, Tuple

from tqdm import tqdm

from .config import DEFAULT_REPORT_INTERVAL, available_cpus
from .errors import GenerationFailure, InvalidCharacter, InvalidPrefix
from .keys import ADDRESS_HEX_LEN, generate_keypair
from .prefix import HEX_DIGITS

logger = logging.getLogger(__name__)

# Outcome tags on the result queue
_FOUND = "found"
_FAILED = "failed"

# How long to wait for workers to wind down before terminating them
JOIN_TIMEOUT = 2.0
# How often the coordinator checks that any worker is still alive
POLL_INTERVAL = 0.5


class Match(NamedTuple):
    address: str
    private_key: str


class ProgressReport(NamedTuple):
    samples: int
    elapsed_ms: int
    rate: int  # addresses per second
    possible_choices: int
    eta_seconds: Optional[int]  # None when the rate is still zero


def compute_report(samples: int, elapsed_ms: int, prefix_len: int) -> ProgressReport:
    rate = samples * 1000 // elapsed_ms if elapsed_ms > 0 else 0
    possible_choices = 16 ** prefix_len
    eta_seconds = possible_choices // rate if rate else None
    return ProgressReport(samples, elapsed_ms, rate, possible_choices, eta_seconds)


def format_report(report: ProgressReport) -> str:
    if report.eta_seconds is None:
        eta = "unavailable"
    else:
        eta = tqdm.format_interval(report.eta_seconds)
    return (
        f"Addresses per second: {tqdm.format_sizeof(report.rate)}, "
        f"total time estimate: {eta}, possible choices: {report.possible_choices}"
    )


def print_report(report: ProgressReport) -> None:
    tqdm.write(format_report(report), file=sys.stdout)
    sys.stdout.flush()


class ThroughputSample:
    """
    Addresses generated since the last report, shared by all workers.

    The counter is a lock-protected Value('Q'); the window start sits next to
    it unlocked, it is only written from inside the report critical section.
    """

    def __init__(self, ctx=None, start: Optional[float] = None):
        ctx = ctx or mp
        self._count = ctx.Value("Q", 0)
        self._window_start = ctx.Value("d", time.time() if start is None else start, lock=False)

    def increment(self, n: int = 1) -> None:
        with self._count.get_lock():
            self._count.value += n

    @property
    def value(self) -> int:
        with self._count.get_lock():
            return self._count.value

    @property
    def window_start(self) -> float:
        return self._window_start.value

    def take(self, now: float) -> Tuple[int, float]:
        """Swap the counter to zero and restart the window. Returns (samples, elapsed seconds)."""
        with self._count.get_lock():
            samples = self._count.value
            self._count.value = 0
        elapsed = now - self._window_start.value
        self._window_start.value = now
        return samples, elapsed


def _maybe_report(sample, report_lock, interval, prefix_len, report):
    # Unlocked check first, most iterations stop here
    if time.time() - sample.window_start <= interval:
        return
    with report_lock:
        now = time.time()
        if now - sample.window_start <= interval:
            return  # another worker reported while we waited
        samples, elapsed = sample.take(now)
        report(compute_report(samples, int(elapsed * 1000), prefix_len))


def search_worker(
    prefix: str,
    generate: Callable[[], Tuple[str, str]],
    sample: ThroughputSample,
    report_lock,
    stop_event,
    result_queue,
    interval: float = DEFAULT_REPORT_INTERVAL,
    report: Callable[[ProgressReport], None] = print_report,
):
    """
    Worker loop: generate keypairs until one matches or stop_event is set.

    Args:
        prefix: canonical lowercase hex prefix.
        generate: callable returning (private_key_hex, address_hex).
        sample: shared ThroughputSample.
        report_lock: lock guarding the progress report.
        stop_event: set by whoever finishes first; checked once per iteration.
        result_queue: receives (_FOUND, Match) or (_FAILED, message).
    """
    pid = os.getpid()
    logger.debug("Worker %d started", pid)
    while not stop_event.is_set():
        try:
            private_key, address = generate()
        except Exception as e:
            # Nothing to retry, hand the failure to the coordinator
            result_queue.put((_FAILED, f"{type(e).__name__}: {e}"))
            stop_event.set()
            return

        sample.increment()
        _maybe_report(sample, report_lock, interval, len(prefix), report)

        if address.lower().startswith(prefix):
            result_queue.put((_FOUND, Match(address.lower(), private_key)))
            stop_event.set()
            logger.debug("Worker %d found 0x%s", pid, address)
            return
    logger.debug("Worker %d stopped", pid)


def validate_prefix(prefix: str) -> str:
    """Lowercase a canonical prefix, rejecting anything no address can start with."""
    prefix = prefix.lower()
    for ch in prefix:
        if ch not in HEX_DIGITS:
            raise InvalidCharacter(ch, "not a hex digit")
    if len(prefix) > ADDRESS_HEX_LEN:
        raise InvalidPrefix(
            f"Prefix has {len(prefix)} characters, addresses only have {ADDRESS_HEX_LEN}"
        )
    return prefix


def _wait_for_outcome(result_queue, processes):
    while True:
        try:
            return result_queue.get(timeout=POLL_INTERVAL)
        except queue.Empty:
            if any(p.is_alive() for p in processes):
                continue
        # Every worker exited; pick up a result posted just before the last one died
        try:
            return result_queue.get_nowait()
        except queue.Empty:
            codes = sorted({p.exitcode for p in processes}, key=str)
            raise GenerationFailure(f"All workers exited without a result (exit codes: {codes})")


def _stop_workers(processes):
    for p in processes:
        p.join(timeout=JOIN_TIMEOUT)
    stragglers = [p for p in processes if p.is_alive()]
    if stragglers:
        logger.warning("Terminating %d worker(s) that did not stop in time", len(stragglers))
    for p in stragglers:
        p.terminate()
        p.join()


def find_vanity_address(
    prefix: str,
    generate: Callable[[], Tuple[str, str]] = generate_keypair,
    workers: Optional[int] = None,
    report: Callable[[ProgressReport], None] = print_report,
    interval: float = DEFAULT_REPORT_INTERVAL,
    start_method: Optional[str] = None,
) -> Match:
    """
    Search until some address starts with `prefix` and return it with its key.

    `prefix` must already be canonical hex (see prefix.canonicalize).
    `workers` defaults to the usable cpu count; with 1 the loop runs in this process.
    Raises GenerationFailure if the generator raises in any worker.
    """
    prefix = validate_prefix(prefix)
    if workers is None:
        workers = available_cpus()
    if workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")

    ctx = mp.get_context(start_method)
    sample = ThroughputSample(ctx)
    report_lock = ctx.Lock()
    stop_event = ctx.Event()
    result_queue = ctx.Queue()
    args = (prefix, generate, sample, report_lock, stop_event, result_queue, interval, report)

    logger.info("Searching for prefix %r with %d worker(s)", prefix, workers)
    if workers == 1:
        search_worker(*args)
        kind, payload = result_queue.get()
    else:
        processes = [ctx.Process(target=search_worker, args=args, daemon=True) for _ in range(workers)]
        for p in processes:
            p.start()
        try:
            kind, payload = _wait_for_outcome(result_queue, processes)
        finally:
            # Wait until one process finds a match, then stop the rest
            stop_event.set()
            _stop_workers(processes)
    result_queue.close()

    if kind == _FAILED:
        raise GenerationFailure(payload)
    logger.info("Found 0x%s", payload.address)
    return payload
