"""Main module for worker tasks in the parallel solver."""

from collections.abc import Callable
from dataclasses import dataclass
from multiprocessing.sharedctypes import Synchronized
from multiprocessing.synchronize import Event

from autogram.letters import LetterCounts
from autogram.solver.config import config as solver_config
from autogram.solver.search import (
    SearchFrame,
    SearchStats,
    StopCheck,
    commit_candidate,
    search,
)
from autogram.solver.utils import Solution


@dataclass(kw_only=True)
class WorkerState:
    """Global state maintained by each worker process."""

    worker_idx: int
    """Index of the worker process."""

    start_time: float
    """Timestamp when the solver started, in seconds since the epoch."""

    base_counts: LetterCounts
    """Letter tally of the preamble plus the connective "and"."""

    stop_event: Event | None = None
    """Set by the parent process to stop every running search."""

    n_branches_searched: int = 0
    """Number of branches searched by this worker."""


worker_state: WorkerState | None = None
"""Global state for each worker process."""


def init_worker_globals(
    worker_ctr: "Synchronized[int]",
    start_time: float,
    base_counts: LetterCounts,
    stop_event: Event | None = None,
) -> None:
    """Initialize global variables for worker processes.

    Args:
        worker_ctr (Synchronized[int]): Shared counter for workers.
        start_time (float): UNIX timestamp when the solver started.
        base_counts (LetterCounts): Letter tally of the preamble plus "and".
        stop_event (Event | None): Event that stops running searches once set.
    """
    global worker_state  # noqa: PLW0603
    with worker_ctr.get_lock():
        # Get and set the shared worker counter atomically, using the obtained value
        # as the worker index
        worker_idx = worker_ctr.value
        worker_ctr.value += 1

    worker_state = WorkerState(
        worker_idx=worker_idx,
        start_time=start_time,
        base_counts=base_counts,
        stop_event=stop_event,
    )
    print(f"Worker {worker_state.worker_idx} initialized.", flush=True)


def search_branch(
    frame: SearchFrame,
    count: int,
    base_counts: LetterCounts,
    *,
    stats: SearchStats | None = None,
    should_stop: Callable[[], bool] | None = None,
) -> list[Solution]:
    """Commit `count` to the next pending letter of `frame` and search the resulting subtree.

    Returns:
        All solutions in the branch, in the order they were found.
    """
    child = commit_candidate(frame, count, stats=stats)
    if child is None:
        return []
    return list(search(child, base_counts, stats=stats, should_stop=should_stop))


def worker_task(count: int, frame: SearchFrame) -> tuple[list[Solution], SearchStats]:
    """Worker task to search the branch where the top pending letter has the given count.

    Args:
        count (int): Count to commit to the first pending letter of `frame`.
        frame (SearchFrame): The frame the branches are split from.

    Returns:
        The solutions found in the branch, and the search counters.
    """
    # Ensure worker_state is initialized
    if not worker_state:
        raise RuntimeError("Worker state not initialized. Call init_worker_globals first.")

    letter = frame.pending[0]
    label = f"W{worker_state.worker_idx}:{letter}={count}"
    print(f"Worker {worker_state.worker_idx} starting with {letter}={count}", flush=True)

    stats = SearchStats(
        label=label,
        report_interval=solver_config.report_interval,
        start_time=worker_state.start_time,
    )
    stop_event = worker_state.stop_event
    should_stop = StopCheck(stop_event) if stop_event is not None else None
    solutions = search_branch(
        frame, count, worker_state.base_counts, stats=stats, should_stop=should_stop
    )
    worker_state.n_branches_searched += 1

    if stats.cancelled:
        print(f"{label}: stopped early. {stats.summary()}", flush=True)
    elif solutions:
        print(f"{label}: {len(solutions)} solution(s) found! {stats.summary()}", flush=True)
    else:
        print(f"{label}: no solution found. {stats.summary()}", flush=True)

    return solutions, stats
