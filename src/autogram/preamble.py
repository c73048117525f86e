"""Preamble validation and letter classification."""

from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from autogram.letters import LETTERS, LetterCounts, create_letter_counts, letter_index
from autogram.numbers import MAX_COUNT, NUMBER_WORD_LETTERS
from autogram.solver.config import config as solver_config

CONNECTIVE = "and"
"""The word joining the last clause to the rest of the sentence."""

VALID_PREAMBLE_CHARS = frozenset(LETTERS + " ")


class InvalidPreambleError(ValueError):
    """Exception raised for preambles that cannot start an autogram."""

    pass


class LetterCategory(Enum):
    """How a letter's final count is determined."""

    SOLVABLE = "solvable"
    """Fixed by the preamble alone; the letter never appears in a number word."""

    ZERO_OR_ONE = "zero_or_one"
    """Absent from the preamble and from all number words, so either omitted or "one x"."""

    UNCERTAIN = "uncertain"
    """Appears in some number word; the count is a search variable."""


def validate_preamble(text: str, *, lenient: bool = False) -> str:
    """Check that a preamble contains only the letters a-z and spaces.

    Args:
        text: The preamble.
        lenient: If True, drop invalid characters instead of raising.

    Returns:
        The preamble, with invalid characters removed in lenient mode.

    Raises:
        InvalidPreambleError: If an invalid character is found and `lenient` is False.
    """
    if lenient:
        return "".join(ch for ch in text if ch in VALID_PREAMBLE_CHARS)
    for pos, ch in enumerate(text):
        if ch not in VALID_PREAMBLE_CHARS:
            raise InvalidPreambleError(
                f"Invalid character {ch!r} at position {pos} in preamble {text!r}; "
                "only a-z (lowercase) and spaces are allowed."
            )
    return text


def count_preamble_letters(preamble: str) -> LetterCounts:
    """Tally the letters of the preamble plus the connective "and"."""
    return create_letter_counts(f"{preamble} {CONNECTIVE}")


def add_minimum_s_count(counts: LetterCounts) -> LetterCounts:
    """Add one "s" for every letter that already occurs more than once.

    Such a letter is enumerated in the plural ("five r's"), while a letter with a
    count of one is not ("one r").
    """
    plural = counts.copy()
    plural[letter_index("s")] += int(np.count_nonzero(counts > 1))
    return plural


def categorize(plural_counts: LetterCounts) -> tuple[LetterCategory, ...]:
    """Assign each of the 26 letters to exactly one category."""
    categories = []
    for ch, count in zip(LETTERS, plural_counts):
        if ch in NUMBER_WORD_LETTERS:
            categories.append(LetterCategory.UNCERTAIN)
        elif count > 0:
            categories.append(LetterCategory.SOLVABLE)
        else:
            categories.append(LetterCategory.ZERO_OR_ONE)
    return tuple(categories)


@dataclass(frozen=True, eq=False)
class Classification:
    """The letters of a preamble, split by how their counts are found."""

    preamble: str
    """The validated preamble."""

    raw_counts: LetterCounts = field(repr=False)
    """Letter tally of the preamble plus the connective "and"."""

    plural_counts: LetterCounts = field(repr=False)
    """`raw_counts` with one extra "s" per letter that occurs more than once."""

    categories: tuple[LetterCategory, ...]
    """Category of each letter, in index order."""

    def __post_init__(self) -> None:
        """Validate the classification."""
        assert len(self.categories) == len(LETTERS), "Every letter needs a category."

        # A solvable letter's clause must be spellable
        for ch, count in self.solvable_counts().items():
            if count > MAX_COUNT:
                raise InvalidPreambleError(
                    f"Letter {ch!r} would need a count of {count}; "
                    f"counts above {MAX_COUNT} cannot be spelled."
                )

    def letters(self, category: LetterCategory) -> list[str]:
        """Return the letters in the given category, in alphabetical order."""
        return [ch for ch, cat in zip(LETTERS, self.categories) if cat is category]

    def solvable_counts(self) -> dict[str, int]:
        """Return the final count of every solvable letter.

        That is its (plural-adjusted) preamble count plus one for the letter named in
        its own clause.
        """
        return {
            ch: int(self.plural_counts[i]) + 1
            for i, (ch, cat) in enumerate(zip(LETTERS, self.categories))
            if cat is LetterCategory.SOLVABLE
        }

    def summary(self) -> dict[str, object]:
        """Return a dictionary-based summary of the classification."""
        return {
            "preamble": self.preamble,
            "solvable": self.solvable_counts(),
            "zero_or_one": "".join(self.letters(LetterCategory.ZERO_OR_ONE)),
            "uncertain": "".join(self.letters(LetterCategory.UNCERTAIN)),
        }


def classify_preamble(text: str, *, lenient: bool | None = None) -> Classification:
    """Validate a preamble and classify every letter.

    Args:
        text: The preamble, lowercase words separated by spaces.
        lenient: Whether to filter out invalid characters instead of rejecting them.
            Defaults to the `lenient_preamble` setting.

    Raises:
        InvalidPreambleError: If the preamble contains invalid characters (in strict mode),
            or forces a count that cannot be spelled.
    """
    if lenient is None:
        lenient = solver_config.lenient_preamble
    preamble = validate_preamble(text, lenient=lenient)
    raw_counts = count_preamble_letters(preamble)
    plural_counts = add_minimum_s_count(raw_counts)
    for counts in (raw_counts, plural_counts):
        counts.setflags(write=False)
    return Classification(
        preamble=preamble,
        raw_counts=raw_counts,
        plural_counts=plural_counts,
        categories=categorize(plural_counts),
    )
