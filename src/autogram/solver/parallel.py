"""Implementation of the parallel solver: branch distribution and worker management."""

import traceback
from collections.abc import Iterable
from concurrent.futures import Executor, as_completed
from dataclasses import dataclass
from multiprocessing.synchronize import Event
from operator import attrgetter
from pprint import pprint
from typing import Literal, TextIO, TypedDict

from sortedcontainers import SortedList

from autogram.sentence import render_sentence
from autogram.solver.config import config as solver_config
from autogram.solver.search import SearchFrame, SearchStats, candidate_counts
from autogram.solver.task_args import TaskArgs
from autogram.solver.utils import Solution, as_solution, validate_solution
from autogram.solver.worker import search_branch, worker_task


class SearchFailedError(RuntimeError):
    """Exception raised when some branches could not be searched.

    The solutions found in the other branches are kept in `solutions`; they are not
    the complete result.
    """

    def __init__(self, n_failed: int, solutions: list[Solution]) -> None:
        super().__init__(
            f"{n_failed} branch(es) failed; the search is incomplete "
            f"({len(solutions)} solution(s) found in the other branches)."
        )
        self.n_failed = n_failed
        self.solutions = solutions


class WorkerTaskPayload(TypedDict):
    """Payload submitted to worker processes."""

    count: int
    """Count to commit to the first pending letter of the frame."""
    frame: SearchFrame
    """Frame the branches are split from."""


BranchStatus = Literal["success", "no_solution", "cancelled", "error"]


@dataclass
class BranchResult:
    """Wrapper for worker task results."""

    count: int
    status: BranchStatus
    solutions: list[Solution]
    stats: SearchStats | None = None
    err_msg: str | None = None


def _branch_status(solutions: list[Solution], stats: SearchStats) -> BranchStatus:
    if stats.cancelled:
        return "cancelled"
    return "success" if solutions else "no_solution"


def _worker_task(args: WorkerTaskPayload) -> BranchResult:
    """Worker task to search one top-level branch.

    Args:
        args (dict): Dictionary received from `executor.submit` containing:
            - "count": The count for the first pending letter.
            - "frame": The frame to split.

    Returns:
        A BranchResult wrapper.
    """
    try:
        solutions, stats = worker_task(**args)
        return BranchResult(
            count=args["count"],
            status=_branch_status(solutions, stats),
            solutions=solutions,
            stats=stats,
        )
    except Exception as e:
        return BranchResult(
            count=args.get("count", -1),
            status="error",
            solutions=[],
            err_msg=f"Worker encountered an error: {str(e)}\n{traceback.format_exc()}",
        )


def log_header(task_args: TaskArgs, logf: TextIO) -> None:
    """Write the solver configuration and task summary to the log."""
    print("Solver config:", file=logf, flush=True)
    pprint(solver_config.model_dump(), stream=logf, width=120)
    print("Solver initialized with:", file=logf, flush=True)
    pprint(task_args.summary(), stream=logf, width=120)
    print("", file=logf, flush=True)
    print("#" * 80, file=logf, flush=True)
    print("", file=logf, flush=True)


class BranchCollector:
    """Collects branch results and logs their outcomes as they arrive."""

    def __init__(self, task_args: TaskArgs, logf: TextIO) -> None:
        self.task_args = task_args
        self.logf = logf
        self.letter = str(task_args.frame.pending[0])
        self.by_count: SortedList = SortedList(key=attrgetter("count"))
        self.arrival_order: list[BranchResult] = []
        self.stats = SearchStats()
        self.n_errors = 0

    def add(self, result: BranchResult) -> None:
        """Record a branch result."""
        if result.status == "error":
            self.n_errors += 1
            print(
                f"Worker for {self.letter}={result.count} encountered an error:",
                flush=True,
            )
            print(result.err_msg, file=self.logf, flush=True)
            return

        if result.stats is not None:
            self.stats.merge(result.stats)
        self.by_count.add(result)
        self.arrival_order.append(result)
        if not result.solutions:
            return

        # Output is only ever written here, in the parent process
        print(
            f"Branch {self.letter}={result.count}: {len(result.solutions)} solution(s).",
            file=self.logf,
            flush=True,
        )
        for solution in result.solutions:
            print(render_sentence(solution, self.task_args.preamble), file=self.logf, flush=True)

    def solutions(self) -> list[Solution]:
        """Return all solutions, ordered by branch count if configured to be deterministic."""
        results: Iterable[BranchResult] = (
            self.by_count if solver_config.deterministic else self.arrival_order
        )
        return [solution for result in results for solution in result.solutions]

    def log_summary(self) -> None:
        """Write the combined search counters to the log."""
        print(f"Search stats: {self.stats.summary()}", file=self.logf, flush=True)
        if self.stats.cancelled:
            print("Some branches were stopped early.", file=self.logf, flush=True)
        if self.n_errors:
            print(f"{self.n_errors} branch(es) failed.", file=self.logf, flush=True)


def _solve_leaf(task_args: TaskArgs, logf: TextIO) -> list[Solution]:
    """Handle a root frame without pending letters."""
    frame = task_args.frame
    if validate_solution(task_args.base_counts, frame.alphabet):
        solution = as_solution(frame.alphabet)
        print(render_sentence(solution, task_args.preamble), file=logf, flush=True)
        return [solution]
    return []


def solve_with_parallel_branches(
    executor: Executor,
    task_args: TaskArgs,
    logf: TextIO,
    *,
    stop_event: Event | None = None,
) -> list[Solution]:
    """Solve the preamble by splitting the first pending letter's counts across workers.

    Args:
        executor (Executor): Executor for managing worker processes.
        task_args (TaskArgs): The search task; its frame is split on the first pending letter.
        logf: File object to log the solving process.
        stop_event (Event | None): The event shared with the workers; set to stop the
            running branches once `first_solution_only` is satisfied.

    Returns:
        A list of solutions, empty if there are none.

    Raises:
        SearchFailedError: If some branch failed, unless the search was stopped at the
            first solution anyway.
    """
    log_header(task_args, logf)
    frame = task_args.frame
    if not frame.pending:
        return _solve_leaf(task_args, logf)

    counts = list(candidate_counts(frame))
    print(
        f"Splitting {len(counts)} branches on letter {frame.pending[0]}: "
        f"{counts[0] if counts else '-'}..{counts[-1] if counts else '-'}",
        file=logf,
        flush=True,
    )
    tasks: list[WorkerTaskPayload] = [{"count": count, "frame": frame} for count in counts]

    collector = BranchCollector(task_args, logf)
    futures = {executor.submit(_worker_task, task): task["count"] for task in tasks}
    stopped = False
    for future in as_completed(futures):
        try:
            result = future.result()
        except Exception as e:
            print(f"Error retrieving worker result: {str(e)}", flush=True)
            result = BranchResult(
                count=futures[future],
                status="error",
                solutions=[],
                err_msg=f"Error retrieving worker result: {str(e)}\n{traceback.format_exc()}",
            )
        collector.add(result)
        if solver_config.first_solution_only and result.solutions:
            print("Terminating remaining workers...", file=logf, flush=True)
            if stop_event is not None:
                stop_event.set()
            executor.shutdown(wait=False, cancel_futures=True)
            stopped = True
            break

    collector.log_summary()
    if collector.n_errors and not stopped:
        raise SearchFailedError(collector.n_errors, collector.solutions())
    return collector.solutions()


def solve_sequential(task_args: TaskArgs, logf: TextIO) -> list[Solution]:
    """Solve the preamble in this process, one top-level branch at a time.

    Same contract as `solve_with_parallel_branches`.
    """
    log_header(task_args, logf)
    frame = task_args.frame
    if not frame.pending:
        return _solve_leaf(task_args, logf)

    collector = BranchCollector(task_args, logf)
    for count in candidate_counts(frame):
        stats = SearchStats(
            label=f"{frame.pending[0]}={count}",
            report_interval=solver_config.report_interval,
        )
        solutions = search_branch(frame, count, task_args.base_counts, stats=stats)
        collector.add(
            BranchResult(
                count=count,
                status="success" if solutions else "no_solution",
                solutions=solutions,
                stats=stats,
            )
        )
        if solver_config.first_solution_only and solutions:
            break

    collector.log_summary()
    return collector.solutions()
