"""Utility functions for the autogram solver."""

from typing import NamedTuple, TypeAlias

import numpy as np

from autogram.letters import LetterCounts, index_to_letter
from autogram.numbers import projection
from autogram.preamble import LetterCategory

TIMESTAMP_FMT = "%Y-%m-%d %H:%M:%S.%f %Z%z"

UNASSIGNED = -1
"""Sentinel for a letter whose count has not been committed yet."""

Solution: TypeAlias = tuple[int, ...]
"""A complete assignment of counts to the letters a-z that describes itself."""


class PendingLetter(NamedTuple):
    """A letter whose count is still to be chosen by the search."""

    index: int
    category: LetterCategory

    def __str__(self) -> str:
        return index_to_letter(self.index)


def tally_assignment(base_counts: LetterCounts, alphabet: np.ndarray) -> LetterCounts:
    """Count the letters of a sentence from scratch.

    Args:
        base_counts: Letter tally of the preamble plus the connective "and".
        alphabet: Count of each letter, or `UNASSIGNED`.  Only committed letters
            contribute a clause.

    Returns:
        The letter tally of the preamble and every committed clause.
    """
    alphabet = np.asarray(alphabet)
    total = base_counts.copy()
    for index, count in enumerate(alphabet):
        if count > 0:
            total += projection(int(count), index)
    return total


def validate_solution(base_counts: LetterCounts, alphabet: np.ndarray) -> bool:
    """Validate that an assignment is complete and that its sentence has exactly the
    counts it states."""
    alphabet = np.asarray(alphabet)
    if np.any(alphabet == UNASSIGNED):
        return False
    return bool(np.array_equal(tally_assignment(base_counts, alphabet), alphabet))


def as_solution(alphabet: np.ndarray) -> Solution:
    """Convert a complete alphabet to a hashable solution."""
    return tuple(int(count) for count in alphabet)


def time_str(seconds: float) -> str:
    """Convert a time duration in seconds to a human-readable string.

    Args:
        seconds: Time duration in seconds.

    Returns:
        A string formatted as "HH:MM:SS.ss".
    """
    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)
    return f"{int(hours):02}:{int(minutes):02}:{secs:05.2f}"


def int_comma(n: int) -> str:
    """Format an integer with commas as thousands separators."""
    return f"{n:,}"
