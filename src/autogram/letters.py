"""Module for letter indexing and fixed-width letter count vectors."""

from string import ascii_lowercase
from typing import TypeAlias

import numpy as np

COUNT_DTYPE = np.int32
"""Integer width of every count vector.

Far wider than the largest tally a sentence of spellable counts can produce, so
additions cannot overflow.
"""

N_LETTERS = 26

LETTERS = ascii_lowercase
"""The letters a-z, in index order."""

LETTER_INDEX: dict[str, int] = {ch: i for i, ch in enumerate(LETTERS)}
"""Maps each lowercase letter to its offset in a count vector."""

LetterCounts: TypeAlias = np.ndarray
"""An array of 26 integers representing counts of the letters a-z."""


def letter_index(ch: str) -> int:
    """Return the offset of a lowercase letter.

    Raises:
        ValueError: If `ch` is not a single letter a-z.
    """
    try:
        return LETTER_INDEX[ch]
    except KeyError:
        raise ValueError(f"Invalid letter {ch!r}; only a-z (lowercase) are allowed.") from None


def index_to_letter(index: int) -> str:
    """Return the letter at the given offset."""
    if not 0 <= index < N_LETTERS:
        raise IndexError(f"Letter index out of range: {index}")
    return LETTERS[index]


def zero_counts() -> LetterCounts:
    """Create an all-zero count vector."""
    return np.zeros(N_LETTERS, dtype=COUNT_DTYPE)


def create_letter_counts(text: str, *, lenient: bool = False) -> LetterCounts:
    """Create a letter count vector from a string.

    Each letter a-z in the string is tallied; spaces are skipped.

    Args:
        text: The string to tally.
        lenient: If True, silently skip every character that is not a-z. Otherwise
            such characters (other than spaces) are an error.

    Returns:
        An array of 26 integers, where each index corresponds to a letter a-z
        and the value at that index is the count of that letter in the input string.

    Raises:
        ValueError: If the input string contains invalid characters and `lenient` is False.
    """
    counts = zero_counts()
    for ch in text:
        index = LETTER_INDEX.get(ch)
        if index is not None:
            counts[index] += 1
        elif ch != " " and not lenient:
            raise ValueError(f"Invalid character: {ch!r}")
    return counts



def letter_counts_to_dict(counts: LetterCounts) -> dict[str, int]:
    """Convert a count vector to a dict of its nonzero entries."""
    return {LETTERS[i]: int(count) for i, count in enumerate(counts) if count != 0}
