"""Backtracking search over the letter counts of an autogram.

The search assigns a count to one pending letter at a time.  Each assignment adds the
letters of that letter's clause to the running tally, and branches that can no longer
reach a fixed point are pruned by the bounds in `autogram.solver.bounds`.
"""

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from multiprocessing.synchronize import Event
from time import time
from typing import NamedTuple

import numpy as np

from autogram.letters import COUNT_DTYPE, LETTERS, N_LETTERS, LetterCounts, letter_index
from autogram.numbers import MAX_COUNT, NUMBER_WORD_LETTERS, projection
from autogram.preamble import Classification, LetterCategory
from autogram.solver.bounds import (
    count_pending,
    exceeds_upper_bounds,
    has_low_counts,
    remaining_reach,
)
from autogram.solver.utils import (
    UNASSIGNED,
    PendingLetter,
    Solution,
    as_solution,
    int_comma,
    tally_assignment,
    time_str,
    validate_solution,
)

UNCERTAIN_ORDER = "etoinsrhlufywgvx"
"""Search order of the uncertain letters: most frequent in English text first, so the
largest counts are fixed early and prune the most."""

assert frozenset(UNCERTAIN_ORDER) == NUMBER_WORD_LETTERS

STOP_CHECK_INTERVAL = 4096
"""Number of search nodes between polls of a stop event."""


class StopCheck:
    """Polls a shared event every `interval` calls, starting with the first.

    Once the event has been seen set, every later call returns True without polling.
    """

    def __init__(self, event: Event, interval: int = STOP_CHECK_INTERVAL) -> None:
        self.event = event
        self.interval = interval
        self.n_calls = 0
        self.stopped = False

    def __call__(self) -> bool:
        if not self.stopped and self.n_calls % self.interval == 0:
            self.stopped = self.event.is_set()
        self.n_calls += 1
        return self.stopped


class SearchFrame(NamedTuple):
    """A node of the search tree.

    The arrays are read-only; a child frame always owns new arrays, so sibling branches
    (and worker processes) never share mutable state.
    """

    alphabet: np.ndarray
    """Committed count of each letter, or `UNASSIGNED`."""

    pending: tuple[PendingLetter, ...]
    """Letters still to be assigned, in search order."""

    calculated: LetterCounts
    """Letters of the preamble and of every committed clause."""


@dataclass(kw_only=True)
class SearchStats:
    """Counters for a (sub)tree search."""

    label: str = ""
    """Prefix for progress lines, e.g. the worker and branch."""

    report_interval: int = 0
    """Print a progress line every this many nodes. 0 disables progress lines."""

    start_time: float = field(default_factory=time)

    nodes_examined: int = 0
    pruned_low: int = 0
    pruned_high: int = 0
    leaves: int = 0
    solutions: int = 0

    cancelled: bool = False
    """Whether the search was stopped before the subtree was exhausted."""

    def record_node(self, frame: SearchFrame) -> None:
        """Count a visited node and report progress if due."""
        self.nodes_examined += 1
        if self.report_interval and self.nodes_examined % self.report_interval == 0:
            print(
                f"{self.label} N:{int_comma(self.nodes_examined)} "
                f"T:{time_str(time() - self.start_time)} "
                f"#P:{len(frame.pending)} "
                f"A:{format_alphabet(frame.alphabet)}",
                flush=True,
            )

    def summary(self) -> str:
        """Return a one-line summary of the counters."""
        return (
            f"nodes={int_comma(self.nodes_examined)} "
            f"pruned_low={int_comma(self.pruned_low)} "
            f"pruned_high={int_comma(self.pruned_high)} "
            f"leaves={int_comma(self.leaves)} "
            f"solutions={self.solutions}"
        )

    def merge(self, other: "SearchStats") -> None:
        """Add the counters of another search to this one."""
        self.nodes_examined += other.nodes_examined
        self.pruned_low += other.pruned_low
        self.pruned_high += other.pruned_high
        self.leaves += other.leaves
        self.solutions += other.solutions
        self.cancelled = self.cancelled or other.cancelled


def format_alphabet(alphabet: np.ndarray) -> str:
    """Compact form of a partial assignment, e.g. "a2 c2 e28 z?"."""
    return " ".join(
        f"{ch}{'?' if count == UNASSIGNED else int(count)}" for ch, count in zip(LETTERS, alphabet)
    )


def _freeze(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


def make_frame(
    base_counts: LetterCounts,
    alphabet: Iterable[int],
    pending: Iterable[PendingLetter],
) -> SearchFrame:
    """Create a search frame for an arbitrary partial assignment.

    Args:
        base_counts: Letter tally of the preamble plus the connective "and".
        alphabet: Count of each letter, or `UNASSIGNED`.
        pending: The letters to search over, in order.  Exactly the unassigned letters.

    Raises:
        ValueError: If the pending letters do not match the unassigned letters.
    """
    alphabet = np.array(list(alphabet), dtype=COUNT_DTYPE)
    pending = tuple(pending)
    if alphabet.shape != (N_LETTERS,):
        raise ValueError(f"An alphabet needs {N_LETTERS} entries, got {alphabet.shape}.")
    unassigned = {int(i) for i in np.flatnonzero(alphabet == UNASSIGNED)}
    pending_indices = [letter.index for letter in pending]
    if len(set(pending_indices)) != len(pending_indices) or set(pending_indices) != unassigned:
        raise ValueError(
            f"Pending letters {''.join(map(str, pending))!r} must be exactly the "
            "unassigned letters."
        )
    calculated = tally_assignment(base_counts, alphabet)
    return SearchFrame(_freeze(alphabet), pending, _freeze(calculated))


def initial_frame(classification: Classification) -> SearchFrame:
    """Create the root of the search tree for a classified preamble.

    Solvable letters are committed; uncertain letters are pending in `UNCERTAIN_ORDER`,
    followed by the zero-or-one letters.
    """
    alphabet = [UNASSIGNED] * N_LETTERS
    for ch, count in classification.solvable_counts().items():
        alphabet[letter_index(ch)] = count

    pending = [PendingLetter(letter_index(ch), LetterCategory.UNCERTAIN) for ch in UNCERTAIN_ORDER]
    pending.extend(
        PendingLetter(letter_index(ch), LetterCategory.ZERO_OR_ONE)
        for ch in classification.letters(LetterCategory.ZERO_OR_ONE)
    )
    return make_frame(classification.raw_counts, alphabet, pending)


def candidate_counts(frame: SearchFrame) -> range:
    """Return the counts to try for the next pending letter, in increasing order.

    Counts below the letter's calculated count are impossible.  Above it, the letter can
    gain at most what the pending clauses can add, including its own clause, which also
    names the letter once.
    """
    letter = frame.pending[0]
    low = int(frame.calculated[letter.index])
    if letter.category is LetterCategory.ZERO_OR_ONE:
        reach = 1
    else:
        reach = int(remaining_reach(*count_pending(frame.pending))[letter.index]) + 1
    high = min(low + reach, MAX_COUNT)
    return range(low, high + 1)


def commit_candidate(
    frame: SearchFrame,
    count: int,
    *,
    prune: bool = True,
    stats: SearchStats | None = None,
) -> SearchFrame | None:
    """Commit a count to the next pending letter.

    Args:
        frame: The parent frame.
        count: The count to commit.
        prune: Whether to apply the bound checks.
        stats: Optional counters to update.

    Returns:
        The child frame, or None if the bounds show it cannot lead to a solution.
    """
    letter, rest = frame.pending[0], frame.pending[1:]
    alphabet = frame.alphabet.copy()
    alphabet[letter.index] = count
    calculated = frame.calculated + projection(count, letter.index)

    if prune:
        if has_low_counts(alphabet, calculated):
            if stats is not None:
                stats.pruned_low += 1
            return None
        if exceeds_upper_bounds(alphabet, calculated, *count_pending(rest)):
            if stats is not None:
                stats.pruned_high += 1
            return None

    return SearchFrame(_freeze(alphabet), rest, _freeze(calculated))


def expand_frame(
    frame: SearchFrame,
    *,
    prune: bool = True,
    stats: SearchStats | None = None,
) -> Iterator[tuple[int, SearchFrame]]:
    """Yield `(count, child)` for every surviving candidate count of the next letter."""
    for count in candidate_counts(frame):
        child = commit_candidate(frame, count, prune=prune, stats=stats)
        if child is not None:
            yield count, child


def search(
    frame: SearchFrame,
    base_counts: LetterCounts,
    *,
    prune: bool = True,
    stats: SearchStats | None = None,
    should_stop: Callable[[], bool] | None = None,
) -> Iterator[Solution]:
    """Depth-first search for solutions below a frame.

    Args:
        frame: Root of the subtree to search.
        base_counts: Letter tally of the preamble plus the connective "and", used to
            validate complete assignments from scratch.
        prune: Whether to apply the bound checks.  With `prune=False` every candidate
            combination is enumerated.
        stats: Optional counters to update.
        should_stop: Called once per node; when it returns True the search ends early
            and `stats.cancelled` is set.

    Yields:
        Every validated solution in the subtree, in increasing order of the counts
        committed along the way.
    """
    if should_stop is not None and should_stop():
        if stats is not None:
            stats.cancelled = True
        return
    if stats is not None:
        stats.record_node(frame)

    if not frame.pending:
        if stats is not None:
            stats.leaves += 1
        if validate_solution(base_counts, frame.alphabet):
            if stats is not None:
                stats.solutions += 1
            yield as_solution(frame.alphabet)
        return

    for _count, child in expand_frame(frame, prune=prune, stats=stats):
        yield from search(
            child, base_counts, prune=prune, stats=stats, should_stop=should_stop
        )
