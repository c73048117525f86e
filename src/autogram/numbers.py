"""Number words and the letter projection table.

Every clause of an autogram has the form "<number> <letter>'s" (or "one <letter>"),
so the letters it contributes to the sentence depend only on the count and the named
letter.  All of those contributions are tabulated once, at import time.
"""

import numpy as np

from autogram.letters import COUNT_DTYPE, LETTERS, N_LETTERS, create_letter_counts

MIN_COUNT = 1
MAX_COUNT = 99
"""Largest count that can be spelled out by `spell_number`."""

_ONES = (
    "one",
    "two",
    "three",
    "four",
    "five",
    "six",
    "seven",
    "eight",
    "nine",
    "ten",
    "eleven",
    "twelve",
    "thirteen",
    "fourteen",
    "fifteen",
    "sixteen",
    "seventeen",
    "eighteen",
    "nineteen",
)

_TENS = ("twenty", "thirty", "forty", "fifty", "sixty", "seventy", "eighty", "ninety")


def spell_number(n: int) -> str:
    """Spell out a count between 1 and 99 as an English cardinal.

    Compounds are hyphenated, e.g. 21 -> "twenty-one".
    """
    if not MIN_COUNT <= n <= MAX_COUNT:
        raise ValueError(f"Cannot spell {n}; counts must be between {MIN_COUNT} and {MAX_COUNT}.")
    if n < 20:
        return _ONES[n - 1]
    tens, ones = divmod(n, 10)
    if ones == 0:
        return _TENS[tens - 2]
    return f"{_TENS[tens - 2]}-{_ONES[ones - 1]}"


def clause_text(n: int, letter: str) -> str:
    """Return the clause stating that a sentence has `n` copies of `letter`."""
    if n == 1:
        return f"one {letter}"
    return f"{spell_number(n)} {letter}'s"


NUMBER_WORDS = tuple(spell_number(n) for n in range(MIN_COUNT, MAX_COUNT + 1))

NUMBER_WORD_LETTERS = frozenset("efghilnorstuvwxy")
"""The 16 letters that occur in at least one spelled-out number."""

ONE_LETTERS = frozenset("one")
"""Letters of "one", the only number word a zero-or-one letter's clause can use."""


def _build_number_word_counts() -> np.ndarray:
    rows = []
    for n, word in enumerate(NUMBER_WORDS, start=MIN_COUNT):
        counts = create_letter_counts(word, lenient=True)
        if n > 1:
            counts[LETTERS.index("s")] += 1  # plural marker
        rows.append(counts)
    return np.stack(rows)


NUMBER_WORD_COUNTS = _build_number_word_counts()
"""Array of shape (99, 26); row n-1 holds the letters a clause for count n contributes,
excluding the named letter itself."""

PROJECTION_TABLE = np.repeat(NUMBER_WORD_COUNTS, N_LETTERS, axis=0) + np.tile(
    np.eye(N_LETTERS, dtype=COUNT_DTYPE), (MAX_COUNT, 1)
)
"""Array of shape (99 * 26, 26), indexed by `(n - 1) * 26 + letter_index`.

Each row is the letter tally of `clause_text(n, letter)`.
"""

WORD_MAX = NUMBER_WORD_COUNTS.max(axis=0)
"""Most copies of each letter that a single clause can add for some *other* letter."""

ONE_MASK = np.array([int(ch in ONE_LETTERS) for ch in LETTERS], dtype=COUNT_DTYPE)

_ZERO_ROW = np.zeros(N_LETTERS, dtype=COUNT_DTYPE)

for _table in (NUMBER_WORD_COUNTS, PROJECTION_TABLE, WORD_MAX, ONE_MASK, _ZERO_ROW):
    _table.setflags(write=False)
del _table


def projection(n: int, index: int) -> np.ndarray:
    """Return the letter counts contributed by the clause for `n` copies of letter `index`.

    A count of zero means the clause is omitted from the sentence and contributes nothing.
    The returned array is read-only.
    """
    if n == 0:
        return _ZERO_ROW
    if not MIN_COUNT <= n <= MAX_COUNT:
        raise ValueError(f"No clause for count {n}; counts must be between 0 and {MAX_COUNT}.")
    return PROJECTION_TABLE[(n - 1) * N_LETTERS + index]
