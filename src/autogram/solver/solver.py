"""Main solver module for autogram preambles."""

import os
import re
import sys
from concurrent.futures import ProcessPoolExecutor
from datetime import datetime
from multiprocessing import Event, Value
from multiprocessing.sharedctypes import Synchronized
from multiprocessing.synchronize import Event as EventType
from pathlib import Path
from time import time
from typing import TextIO

from autogram.letters import LetterCounts, letter_counts_to_dict
from autogram.preamble import Classification, classify_preamble
from autogram.solver.config import config as solver_config
from autogram.solver.parallel import solve_sequential, solve_with_parallel_branches
from autogram.solver.task_args import TaskArgs
from autogram.solver.utils import TIMESTAMP_FMT, Solution, time_str
from autogram.solver.worker import init_worker_globals


def get_executor(
    *,
    n_workers: int | None = None,
    start_time: float,
    base_counts: LetterCounts,
    stop_event: EventType | None = None,
) -> ProcessPoolExecutor:
    """Get a ProcessPoolExecutor.

    Args:
        n_workers (int | None): Number of worker processes to create.  If None,
            defaults to number of CPU cores minus one.
        start_time (float): UNIX timestamp when the solver started.
        base_counts (LetterCounts): Letter tally of the preamble plus "and", passed to workers.
        stop_event (Event | None): Event the workers poll to stop their searches early.

    Returns:
        A ProcessPoolExecutor instance for worker processes.
    """
    worker_ctr: Synchronized[int] = Value("i", 0)

    cpus = os.cpu_count() or 1  # Fallback to 1 if os.cpu_count() is None
    if n_workers is None:
        n_workers = max(1, cpus - 1)  # Leave one core free
    if n_workers > cpus:
        raise ValueError(
            f"Requested number of workers ({n_workers}) exceeds CPU count ({cpus})",
        )
    return ProcessPoolExecutor(
        max_workers=n_workers,
        initializer=init_worker_globals,
        initargs=(worker_ctr, start_time, base_counts, stop_event),
    )


def log_path(preamble: str) -> Path:
    """Return the log file for a preamble."""
    slug = re.sub(r"[^a-z]+", "_", preamble.lower()).strip("_")[:80] or "empty"
    return Path(solver_config.log_dir) / f"{slug}.log"


def run(preamble: str) -> list[Solution]:
    """Run the solver on the given preamble.

    Args:
        preamble (str): The opening words of the sentence.

    Returns:
        All solutions found.

    Raises:
        InvalidPreambleError: If the preamble is rejected, before any search starts.
        SearchFailedError: If some branches of the search failed.
    """
    classification = classify_preamble(preamble)
    print(f"preamble: {classification.preamble!r}")

    logfile = log_path(classification.preamble)
    print(f"Log file: {logfile}")
    logfile.parent.mkdir(parents=True, exist_ok=True)

    with open(logfile, "w", encoding="utf-8") as logf:
        try:
            solutions = solve_one(classification, logf=logf)
        except KeyboardInterrupt:
            print("Solver interrupted by user.", file=logf, flush=True)
            print("Solver interrupted by user.")
            sys.exit(1)
    print()
    return solutions


def solve_one(classification: Classification, *, logf: TextIO) -> list[Solution]:
    """Find every autogram for a classified preamble.

    Args:
        classification (Classification): The classified preamble.
        logf: File object to log the solving process.

    Raises:
        SearchFailedError: If some branches of the search failed.
    """
    print(f"Preamble: {classification.preamble!r}", file=logf, flush=True)
    print(
        f"Preamble letters (with 'and'): {letter_counts_to_dict(classification.raw_counts)}",
        file=logf,
        flush=True,
    )
    print(f"Solvable letters: {classification.solvable_counts()}", file=logf, flush=True)
    print("", file=logf, flush=True)

    task_args = TaskArgs(classification=classification)

    # Start time as formatted string (in local timezone)
    start_time_str = (
        datetime.fromtimestamp(task_args.start_time).astimezone().strftime(TIMESTAMP_FMT)
    )
    print(f"Start time: {start_time_str}", file=logf, flush=True)

    if solver_config.use_branch_parallelism:
        stop_event = Event()
        with get_executor(
            n_workers=solver_config.max_workers,
            start_time=task_args.start_time,
            base_counts=task_args.base_counts,
            stop_event=stop_event,
        ) as executor:
            try:
                print("Using branch-parallel solver...", file=logf, flush=True)
                solutions = solve_with_parallel_branches(
                    executor, task_args, logf, stop_event=stop_event
                )
            except BaseException:
                # Running branches stop at their next poll of the event
                stop_event.set()
                executor.shutdown(wait=False, cancel_futures=True)
                raise
    else:
        print("Using sequential solver...", file=logf, flush=True)
        solutions = solve_sequential(task_args, logf)

    print(f"Time taken: {time_str(time() - task_args.start_time)}", file=logf, flush=True)
    if solutions:
        print(f"{len(solutions)} solution(s) found.", file=logf, flush=True)
    else:
        print("No solution found.", file=logf, flush=True)
    return solutions
