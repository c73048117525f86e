from collections.abc import Callable, Iterable

import pytest

from autogram.letters import LETTERS, letter_index
from autogram.preamble import Classification, classify_preamble
from autogram.solver.search import SearchFrame, make_frame
from autogram.solver.utils import UNASSIGNED, PendingLetter, Solution

EXAMPLE_PREAMBLE = "this sentence employs"

EXAMPLE_COUNTS = {
    "a": 2,
    "c": 2,
    "d": 2,
    "e": 28,
    "f": 5,
    "g": 3,
    "h": 8,
    "i": 11,
    "l": 3,
    "m": 2,
    "n": 13,
    "o": 9,
    "p": 2,
    "r": 5,
    "s": 25,
    "t": 23,
    "v": 6,
    "w": 10,
    "x": 2,
    "y": 5,
    "z": 1,
}

EXAMPLE_SENTENCE = (
    "this sentence employs two a's, two c's, two d's, twenty-eight e's, five f's, "
    "three g's, eight h's, eleven i's, three l's, two m's, thirteen n's, nine o's, "
    "two p's, five r's, twenty-five s's, twenty-three t's, six v's, ten w's, two x's, "
    "five y's and one z."
)


@pytest.fixture
def example_sentence() -> str:
    return EXAMPLE_SENTENCE


@pytest.fixture
def example_solution() -> Solution:
    return tuple(EXAMPLE_COUNTS.get(ch, 0) for ch in LETTERS)


@pytest.fixture
def example_classification() -> Classification:
    return classify_preamble(EXAMPLE_PREAMBLE, lenient=False)


@pytest.fixture
def reduced_frame(
    example_classification: Classification, example_solution: Solution
) -> Callable[[Iterable[str]], SearchFrame]:
    """Factory for frames where every letter except `free` is fixed to the known solution."""

    def _make(free: Iterable[str]) -> SearchFrame:
        free = list(free)
        alphabet = list(example_solution)
        for ch in free:
            alphabet[letter_index(ch)] = UNASSIGNED
        pending = [
            PendingLetter(letter_index(ch), example_classification.categories[letter_index(ch)])
            for ch in free
        ]
        return make_frame(example_classification.raw_counts, alphabet, pending)

    return _make
