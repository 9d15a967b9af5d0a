import json
import logging
import random

import pytest

from models import CharCategory, InputUnavailableError, InvalidArgumentError, SortKey, TextStats
from utils import (
    DEFAULT_CONFIG,
    category_counts,
    classify_char,
    export_stats,
    is_palindrome,
    iter_file_lines,
    iter_text_lines,
    load_config,
    load_text_lines,
    most_common_letters,
    options_from_config,
    random_string,
    save_config,
    setup_logging,
    sort_key_from_config,
    word_count,
)


def test_classify_char_priority_order() -> None:
    assert classify_char("Q") is CharCategory.UPPER
    assert classify_char("q") is CharCategory.LOWER
    assert classify_char("\t") is CharCategory.SPACE
    assert classify_char("7") is CharCategory.DIGIT
    assert classify_char("!") is CharCategory.SYMBOL


def test_classify_char_non_ascii_letter_is_symbol() -> None:
    assert classify_char("é") is CharCategory.SYMBOL


def test_classify_char_rejects_multiple_characters() -> None:
    with pytest.raises(ValueError):
        classify_char("ab")


@pytest.mark.parametrize("c", ["\u00a0", "\u2007", "\u202f", "\x85"])
def test_classify_char_non_breaking_spaces_are_symbols(c: str) -> None:
    assert classify_char(c) is CharCategory.SYMBOL


@pytest.mark.parametrize("c", [" ", "\t", "\x0b", "\x0c", "\x1c", "\u2003"])
def test_classify_char_breaking_whitespace_is_space(c: str) -> None:
    assert classify_char(c) is CharCategory.SPACE


def test_category_counts_mixed_sample() -> None:
    counts = category_counts("Ab3 !")
    assert counts == {
        CharCategory.UPPER: 1,
        CharCategory.LOWER: 1,
        CharCategory.DIGIT: 1,
        CharCategory.SPACE: 1,
        CharCategory.SYMBOL: 1,
    }


@pytest.mark.parametrize("text", ["", "Hello, World!", "tab\there 123", "ÄÖÜ ß x"])
def test_category_counts_cover_every_character(text: str) -> None:
    assert sum(category_counts(text).values()) == len(text)


def test_word_count_heuristics() -> None:
    assert word_count("") == 0
    assert word_count("   ") == 0
    assert word_count("Hello World") == 2
    assert word_count("I saw a cat") == 4
    assert word_count("x y z") == 0
    assert word_count("foo 42 !!") == 1
    assert word_count("  spaced   out  ") == 2


def test_word_count_needs_a_letter_anywhere() -> None:
    assert word_count("4u 2b") == 2


def test_iter_file_lines_strips_separators(tmp_path) -> None:
    path = tmp_path / "sample.txt"
    path.write_text("first\r\nsecond\nthird", encoding="utf-8", newline="")
    assert list(iter_file_lines(path)) == ["first", "second", "third"]
    assert load_text_lines(path) == ["first", "second", "third"]


def test_iter_text_lines_matches_file_splitting(tmp_path) -> None:
    text = "one\x0cpage\r\ntwo\u2028still two\rthree\n"
    path = tmp_path / "mixed.txt"
    path.write_text(text, encoding="utf-8", newline="")
    assert list(iter_text_lines(text)) == ["one\x0cpage", "two\u2028still two", "three"]
    assert list(iter_text_lines(text)) == list(iter_file_lines(path))


def test_iter_file_lines_missing_file(tmp_path) -> None:
    with pytest.raises(InputUnavailableError):
        list(iter_file_lines(tmp_path / "missing.txt"))


def test_iter_file_lines_decode_failure(tmp_path) -> None:
    path = tmp_path / "binary.txt"
    path.write_bytes(b"ok\n\xff\xfe\xfa\n")
    with pytest.raises(InputUnavailableError):
        list(iter_file_lines(path, encoding="utf-8"))


def test_most_common_letters_orders_by_frequency() -> None:
    lines = ["banana", "Bandana!"]
    assert most_common_letters(lines, amount=3) == ["a", "n", "B"]


def test_most_common_letters_rejects_bad_amount() -> None:
    with pytest.raises(InvalidArgumentError):
        most_common_letters(["abc"], amount=0)
    with pytest.raises(InvalidArgumentError):
        most_common_letters(["abc"], amount=53)


def test_is_palindrome() -> None:
    assert is_palindrome("racecar")
    assert is_palindrome("")
    assert not is_palindrome("Racecar")
    with pytest.raises(TypeError):
        is_palindrome(None)


def test_random_string_respects_ranges() -> None:
    rng = random.Random(42)
    text = random_string(200, ranges=((48, 57), (65, 70)), rng=rng)
    assert len(text) == 200
    assert all("0" <= c <= "9" or "A" <= c <= "F" for c in text)


@pytest.mark.parametrize("ranges", [((10, 10),), ((50, 40),), ((0, 300),), ()])
def test_random_string_rejects_bad_ranges(ranges) -> None:
    with pytest.raises(InvalidArgumentError):
        random_string(5, ranges=ranges)


def test_random_string_rejects_non_positive_length() -> None:
    with pytest.raises(InvalidArgumentError):
        random_string(0)


def test_config_round_trip(tmp_path) -> None:
    path = tmp_path / "config.json"
    save_config({"sort_key": "LOWER", "max_lines": 10}, path=path)
    config = load_config(path=path)
    assert config["sort_key"] == "LOWER"
    assert config["max_lines"] == 10
    assert config["encoding"] == DEFAULT_CONFIG["encoding"]


def test_load_config_missing_file_gives_defaults(tmp_path) -> None:
    assert load_config(path=tmp_path / "absent.json") == DEFAULT_CONFIG


def test_load_config_bad_json_falls_back(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_config(path=path) == DEFAULT_CONFIG


def test_load_config_ignores_non_object(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    assert load_config(path=path) == DEFAULT_CONFIG


def test_setup_logging_writes_to_given_file(tmp_path) -> None:
    log_path = tmp_path / "logs" / "app.log"
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    root.handlers = []
    try:
        assert setup_logging(log_path=log_path) == log_path
        logging.getLogger("utils").warning("written to file")
        for handler in root.handlers:
            handler.flush()
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers = saved_handlers
        root.setLevel(saved_level)
    assert "WARNING utils: written to file" in log_path.read_text(encoding="utf-8")


def test_options_from_config() -> None:
    options = options_from_config({"max_lines": 5, "encoding": "latin-1"})
    assert options.max_lines == 5
    assert options.encoding == "latin-1"

    defaults = options_from_config({"max_lines": -1})
    assert defaults.max_lines is None
    assert defaults.encoding == "utf-8"


def test_sort_key_from_config() -> None:
    assert sort_key_from_config({"sort_key": "capital"}) is SortKey.CAPITAL
    assert sort_key_from_config({"sort_key": "bogus"}) is SortKey.WORD
    assert sort_key_from_config({}) is SortKey.WORD


def test_export_stats_writes_json_and_csv(tmp_path) -> None:
    records = [
        TextStats(word_count=2, letter_count=5, character_count=7, path="a.txt"),
        TextStats(word_count=1, letter_count=3, character_count=4, path="b.txt"),
    ]
    json_path = tmp_path / "out.json"
    csv_path = tmp_path / "out.csv"
    export_stats(json_path, csv_path, records, SortKey.WORD)

    payload = json.loads(json_path.read_text(encoding="utf-8"))
    assert payload["sort_key"] == "WORD"
    assert payload["totals"]["word_count"] == 3
    assert payload["totals"]["character_count"] == 11
    assert [row["path"] for row in payload["records"]] == ["a.txt", "b.txt"]

    csv_lines = csv_path.read_text(encoding="utf-8").splitlines()
    assert csv_lines[0].startswith("path,word_count,letter_count")
    assert csv_lines[1].startswith("a.txt,2,5,7")
    assert len(csv_lines) == 3
