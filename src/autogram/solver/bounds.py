"""Feasibility bounds for partial assignments.

A partial assignment commits counts to some letters.  `calculated` holds the letters
of the preamble and of every committed clause; it only grows as more letters are
committed.  Two things can make a branch hopeless:

* a committed count is already below its calculated count (it can never catch up);
* a committed count is above the most its calculated count can still grow to, given
  the clauses of the letters that are still pending.
"""

from collections.abc import Iterable

import numpy as np

from autogram.letters import LetterCounts
from autogram.numbers import ONE_MASK, WORD_MAX
from autogram.preamble import LetterCategory
from autogram.solver.utils import PendingLetter


def count_pending(pending: Iterable[PendingLetter]) -> tuple[int, int]:
    """Return the number of pending uncertain and pending zero-or-one letters."""
    n_uncertain = 0
    n_zero_or_one = 0
    for letter in pending:
        if letter.category is LetterCategory.ZERO_OR_ONE:
            n_zero_or_one += 1
        else:
            n_uncertain += 1
    return n_uncertain, n_zero_or_one


def remaining_reach(n_uncertain: int, n_zero_or_one: int) -> np.ndarray:
    """Most copies of each letter that the pending clauses of *other* letters can add.

    Each pending uncertain clause adds at most `WORD_MAX` of a letter (number word plus
    plural "s"); each pending zero-or-one clause reads "one x" and adds one "e", "n"
    and "o".
    """
    return WORD_MAX * n_uncertain + ONE_MASK * n_zero_or_one


def has_low_counts(alphabet: np.ndarray, calculated: LetterCounts) -> bool:
    """Whether some committed count is lower than its calculated count."""
    return bool(np.any((alphabet >= 0) & (alphabet < calculated)))


def exceeds_upper_bounds(
    alphabet: np.ndarray,
    calculated: LetterCounts,
    n_uncertain: int,
    n_zero_or_one: int,
) -> bool:
    """Whether some committed count can no longer be reached by its calculated count."""
    ceiling = calculated + remaining_reach(n_uncertain, n_zero_or_one)
    return bool(np.any((alphabet >= 0) & (alphabet > ceiling)))
