import pytest

from autogram.letters import LETTERS, letter_counts_to_dict, letter_index
from autogram.preamble import (
    InvalidPreambleError,
    LetterCategory,
    classify_preamble,
    validate_preamble,
)
from autogram.solver.config import config as solver_config


def test_example_classification(example_classification):
    c = example_classification
    assert c.letters(LetterCategory.SOLVABLE) == list("acdmp")
    assert c.letters(LetterCategory.ZERO_OR_ONE) == list("bjkqz")
    assert c.letters(LetterCategory.UNCERTAIN) == list("efghilnorstuvwxy")


def test_raw_and_plural_counts(example_classification):
    c = example_classification
    # "this sentence employs" plus "and"
    assert letter_counts_to_dict(c.raw_counts) == {
        "t": 2,
        "h": 1,
        "i": 1,
        "s": 3,
        "e": 4,
        "n": 3,
        "c": 1,
        "m": 1,
        "p": 1,
        "l": 1,
        "o": 1,
        "y": 1,
        "a": 1,
        "d": 1,
    }
    # t, s, e and n occur more than once, so their clauses will be plural
    assert c.plural_counts[letter_index("s")] == 3 + 4
    assert c.plural_counts[letter_index("t")] == 2


def test_solvable_counts(example_classification):
    assert example_classification.solvable_counts() == {"a": 2, "c": 2, "d": 2, "m": 2, "p": 2}


def test_repeated_solvable_letters():
    c = classify_preamble("a banana", lenient=False)
    assert c.solvable_counts() == {"a": 6, "b": 2, "d": 2}
    assert c.plural_counts[letter_index("s")] == 2


@pytest.mark.parametrize(
    "preamble",
    [
        "",
        "this sentence employs",
        "a banana",
        "the quick brown fox jumps over the lazy dog",
        "only",
        "jackdaws love my big sphinx of quartz",
    ],
)
def test_categories_partition_the_alphabet(preamble):
    c = classify_preamble(preamble, lenient=False)
    groups = [set(c.letters(category)) for category in LetterCategory]
    assert sum(len(group) for group in groups) == 26
    assert set().union(*groups) == set(LETTERS)
    assert len(c.categories) == 26


def test_connective_is_always_counted():
    c = classify_preamble("", lenient=False)
    assert letter_counts_to_dict(c.raw_counts) == {"a": 1, "n": 1, "d": 1}
    assert c.solvable_counts() == {"a": 2, "d": 2}


@pytest.mark.parametrize(
    "preamble, bad, pos",
    [
        ("This sentence", "T", 0),
        ("this 1 sentence", "1", 5),
        ("hello, world", ",", 5),
        ("tab\there", "\t", 3),
    ],
)
def test_invalid_characters_are_rejected(preamble, bad, pos):
    with pytest.raises(InvalidPreambleError) as exc_info:
        classify_preamble(preamble, lenient=False)
    assert repr(bad) in str(exc_info.value)
    assert f"position {pos}" in str(exc_info.value)
    assert isinstance(exc_info.value, ValueError)


def test_lenient_mode_filters_invalid_characters():
    assert validate_preamble("Th1s is", lenient=True) == "hs is"
    assert classify_preamble("Th1s is", lenient=True).preamble == "hs is"


def test_lenient_mode_defaults_to_config(monkeypatch):
    monkeypatch.setattr(solver_config, "lenient_preamble", True)
    assert classify_preamble("ABC x").preamble == " x"
    monkeypatch.setattr(solver_config, "lenient_preamble", False)
    with pytest.raises(InvalidPreambleError):
        classify_preamble("ABC x")


def test_unspellable_solvable_count_is_rejected():
    # 98 q's + 1 for the clause itself = 99, the largest spellable count
    assert classify_preamble("q" * 98, lenient=False).solvable_counts()["q"] == 99
    with pytest.raises(InvalidPreambleError):
        classify_preamble("q" * 99, lenient=False)
