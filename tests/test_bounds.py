import numpy as np

from autogram.letters import COUNT_DTYPE, letter_index
from autogram.preamble import LetterCategory
from autogram.solver.bounds import (
    count_pending,
    exceeds_upper_bounds,
    has_low_counts,
    remaining_reach,
)
from autogram.solver.utils import UNASSIGNED, PendingLetter


def _alphabet(**counts: int) -> np.ndarray:
    alphabet = np.full(26, UNASSIGNED, dtype=COUNT_DTYPE)
    for ch, count in counts.items():
        alphabet[letter_index(ch)] = count
    return alphabet


def _counts(**counts: int) -> np.ndarray:
    calculated = np.zeros(26, dtype=COUNT_DTYPE)
    for ch, count in counts.items():
        calculated[letter_index(ch)] = count
    return calculated


def test_count_pending():
    pending = [
        PendingLetter(letter_index("e"), LetterCategory.UNCERTAIN),
        PendingLetter(letter_index("t"), LetterCategory.UNCERTAIN),
        PendingLetter(letter_index("z"), LetterCategory.ZERO_OR_ONE),
    ]
    assert count_pending(pending) == (2, 1)
    assert count_pending([]) == (0, 0)


def test_remaining_reach():
    assert not remaining_reach(0, 0).any()
    reach = remaining_reach(2, 3)
    assert reach[letter_index("e")] == 4 * 2 + 3
    assert reach[letter_index("o")] == 2 * 2 + 3
    assert reach[letter_index("t")] == 3 * 2
    assert reach[letter_index("s")] == 3 * 2
    assert reach[letter_index("z")] == 0


def test_has_low_counts():
    calculated = _counts(t=4, e=3)
    assert not has_low_counts(_alphabet(), calculated)
    assert not has_low_counts(_alphabet(t=4), calculated)
    assert has_low_counts(_alphabet(t=3), calculated)
    # Unassigned letters are never low, however large the calculated count
    assert not has_low_counts(_alphabet(t=4), _counts(t=4, e=50))


def test_exceeds_upper_bounds():
    calculated = _counts(t=4)
    assert not exceeds_upper_bounds(_alphabet(t=10), calculated, 2, 0)
    assert exceeds_upper_bounds(_alphabet(t=11), calculated, 2, 0)
    assert exceeds_upper_bounds(_alphabet(t=10), calculated, 1, 0)
    assert not exceeds_upper_bounds(_alphabet(), calculated, 0, 0)


def test_zero_or_one_letters_only_reach_e_n_o():
    calculated = _counts(e=4, t=4)
    assert not exceeds_upper_bounds(_alphabet(e=5), calculated, 0, 1)
    assert exceeds_upper_bounds(_alphabet(e=5), calculated, 0, 0)
    assert exceeds_upper_bounds(_alphabet(t=5), calculated, 0, 1)


def test_letters_outside_number_words_cannot_grow():
    calculated = _counts(a=2)
    assert not exceeds_upper_bounds(_alphabet(a=2), calculated, 16, 5)
    assert exceeds_upper_bounds(_alphabet(a=3), calculated, 16, 5)
