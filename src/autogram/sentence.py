"""Rendering solutions as sentences."""

from collections.abc import Sequence

from autogram.letters import LETTERS, LetterCounts, create_letter_counts
from autogram.numbers import clause_text
from autogram.preamble import CONNECTIVE


def render_clauses(solution: Sequence[int]) -> list[str]:
    """Return the clause of every letter with a nonzero count, in alphabetical order."""
    return [clause_text(int(count), ch) for ch, count in zip(LETTERS, solution) if count > 0]


def render_sentence(solution: Sequence[int], preamble: str) -> str:
    """Render a complete assignment as a sentence.

    The clauses follow the preamble, separated by ", ", except the last, which is joined
    by " and " and followed by a full stop.

    Example:
        >>> render_sentence([2, 0, 1] + [0] * 23, "this has")
        "this has two a's and one c."
    """
    clauses = render_clauses(solution)
    if not clauses:
        raise ValueError("Cannot render a sentence without any letters.")
    head = ", ".join(clauses[:-1])
    words = [preamble] if preamble else []
    if head:
        words.append(head)
    words.extend([CONNECTIVE, f"{clauses[-1]}."])
    return " ".join(words)


def tally_sentence(sentence: str) -> LetterCounts:
    """Count the letters of a sentence, ignoring spaces and punctuation."""
    return create_letter_counts(sentence, lenient=True)
