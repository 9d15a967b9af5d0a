import dataclasses

import pytest

from models import COUNT_FIELDS, SortKey, TextStats


def test_text_stats_defaults_to_zero() -> None:
    stats = TextStats()
    assert all(getattr(stats, name) == 0 for name in COUNT_FIELDS)
    assert stats.path is None
    assert not stats.has_path()


def test_text_stats_from_counters() -> None:
    stats = TextStats(4, 10, 17, 0, 2, 2, 8, 2, path="batch.txt")
    assert stats.value(SortKey.NUMBER) == 2
    assert stats.value(SortKey.LOWER) == 8
    assert stats.has_path()


def test_text_stats_is_immutable() -> None:
    stats = TextStats(word_count=1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        stats.word_count = 2


@pytest.mark.parametrize("bad", [-1, 1.5, "3", True])
def test_text_stats_rejects_bad_counts(bad) -> None:
    with pytest.raises(ValueError):
        TextStats(word_count=bad)


def test_merge_sums_fields() -> None:
    left = TextStats(word_count=1, letter_count=4, capital_count=1, lower_count=3, path="same")
    right = TextStats(word_count=2, letter_count=2, lower_count=2, path="same")
    merged = left + right
    assert merged.word_count == 3
    assert merged.letter_count == 6
    assert merged.lower_count == 5
    assert merged.path == "same"


def test_merge_drops_conflicting_paths() -> None:
    merged = TextStats(path="a").merge(TextStats(path="b"))
    assert merged.path is None


def test_sort_key_parse() -> None:
    assert SortKey.parse("word") is SortKey.WORD
    assert SortKey.parse(" Capital ") is SortKey.CAPITAL
    with pytest.raises(ValueError):
        SortKey.parse("vowels")
