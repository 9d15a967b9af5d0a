"""Utility helpers for classification, line sources, config, and exports."""

from __future__ import annotations

import csv
import io
import json
import logging
import os
import random
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Iterator, Sequence

from models import (
    COUNT_FIELDS,
    AnalyzeOptions,
    CharCategory,
    InputUnavailableError,
    InvalidArgumentError,
    SortKey,
    TextStats,
)

logger = logging.getLogger(__name__)


APP_DIR_NAME = ".text_tally_app"
HOME_ENV_VAR = "TEXT_TALLY_HOME"


def _choose_app_dir() -> Path:
    """
    Return the first writable app directory.

    `TEXT_TALLY_HOME` wins when set, then the user home, then the working directory.
    """
    override = os.environ.get(HOME_ENV_VAR)
    candidates = [Path(override)] if override else []
    candidates += [Path.home() / APP_DIR_NAME, Path(APP_DIR_NAME)]
    for candidate in candidates:
        try:
            candidate.mkdir(parents=True, exist_ok=True)
        except OSError:
            continue
        return candidate
    raise InputUnavailableError(f"No writable app directory among: {', '.join(map(str, candidates))}")


APP_DIR = _choose_app_dir()
CONFIG_PATH = APP_DIR / "config.json"
LOG_PATH = APP_DIR / "app.log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

DEFAULT_CONFIG: dict[str, Any] = {
    "last_directory": "",
    "sort_key": SortKey.WORD.name,
    "encoding": "utf-8",
    "max_lines": None,
}

SINGLE_LETTER_WORDS = frozenset({"a", "I"})
# isspace() is true for these, but they classify as SYMBOL.
NON_BREAKING_SPACES = frozenset({"\u00a0", "\u2007", "\u202f", "\x85"})
PRINTABLE_ASCII = ((32, 126),)
MAX_CODE_POINT = 255


def setup_logging(level: int = logging.INFO, log_path: Path | None = None) -> Path:
    """Send log records to the app log file; returns the file in use."""
    target = log_path or LOG_PATH
    target.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(filename=str(target), level=level, format=LOG_FORMAT)
    return target


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load the JSON config layered over `DEFAULT_CONFIG`."""
    config_path = path or CONFIG_PATH
    config = dict(DEFAULT_CONFIG)
    if not config_path.exists():
        return config
    try:
        stored = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        logger.exception("Failed to load config from %s", config_path)
        return config
    if not isinstance(stored, dict):
        logger.warning("Ignoring config %s: expected an object, got %s", config_path, type(stored).__name__)
        return config
    config.update(stored)
    return config


def save_config(config: dict[str, Any], path: Path | None = None) -> None:
    """Write config as JSON; failures are logged, the app keeps running."""
    config_path = path or CONFIG_PATH
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(config, indent=2, sort_keys=True), encoding="utf-8")
    except OSError:
        logger.exception("Failed to save config to %s", config_path)


def options_from_config(config: dict[str, Any]) -> AnalyzeOptions:
    """Build analysis options from a loaded config, ignoring bad entries."""
    options = AnalyzeOptions()
    encoding = config.get("encoding")
    if isinstance(encoding, str) and encoding:
        options.encoding = encoding

    max_lines = config.get("max_lines")
    if isinstance(max_lines, int) and not isinstance(max_lines, bool) and max_lines > 0:
        options.max_lines = max_lines
    elif max_lines is not None:
        logger.warning("Ignoring invalid max_lines in config: %r", max_lines)
    return options


def sort_key_from_config(config: dict[str, Any]) -> SortKey:
    """Sort key saved by the UI, or WORD when missing or unknown."""
    sort_key = config.get("sort_key")
    if not sort_key:
        return SortKey.WORD
    try:
        return SortKey.parse(str(sort_key))
    except ValueError:
        logger.warning("Ignoring invalid sort_key in config: %r", sort_key)
        return SortKey.WORD


def classify_char(c: str) -> CharCategory:
    """
    Classify a single character.

    Letters are ASCII only; any other alphabetic character falls through to
    SYMBOL unless it is whitespace or a decimal digit. Non-breaking spaces
    (U+00A0, U+2007, U+202F) and NEL (U+0085) are SYMBOL, not SPACE.
    """
    if len(c) != 1:
        raise ValueError(f"Expected a single character, got {c!r}")
    if "A" <= c <= "Z":
        return CharCategory.UPPER
    if "a" <= c <= "z":
        return CharCategory.LOWER
    if c.isspace() and c not in NON_BREAKING_SPACES:
        return CharCategory.SPACE
    if c.isdecimal():
        return CharCategory.DIGIT
    return CharCategory.SYMBOL


def category_counts(text: str) -> dict[CharCategory, int]:
    """Count every category in text; all five categories are always present."""
    counts = dict.fromkeys(CharCategory, 0)
    for c in text:
        counts[classify_char(c)] += 1
    return counts


def word_count(line: str) -> int:
    """
    Estimate the number of words on a line.

    Segments are split on single spaces. A segment counts when it is at least
    two characters long (or is "a" / "I") and contains a letter. There is no
    dictionary lookup, so this is only an approximation.
    """
    count = 0
    for segment in line.strip().split(" "):
        if len(segment) < 2 and segment not in SINGLE_LETTER_WORDS:
            continue
        if any(ch.isalpha() for ch in segment):
            count += 1
    return count


def iter_text_lines(text: str) -> Iterator[str]:
    """Yield the lines of in-memory text, split exactly as `iter_file_lines` splits a file."""
    for raw_line in io.StringIO(text, newline=None):
        yield raw_line.rstrip("\n")


def iter_file_lines(path: str | Path, encoding: str = "utf-8") -> Iterator[str]:
    """Lazily yield the lines of a file with line separators stripped."""
    file_path = Path(path)
    try:
        handle = file_path.open("r", encoding=encoding, newline=None)
    except OSError as exc:
        raise InputUnavailableError(f"Cannot open text file: {file_path}") from exc

    with handle:
        try:
            for raw_line in handle:
                yield raw_line.rstrip("\r\n")
        except (OSError, UnicodeDecodeError) as exc:
            raise InputUnavailableError(f"Failed reading text file: {file_path}") from exc


def load_text_lines(path: str | Path, encoding: str = "utf-8") -> list[str]:
    """Read every line of a file into memory. Not meant for big files."""
    return list(iter_file_lines(path, encoding=encoding))


def most_common_letters(lines: Iterable[str], amount: int = 3) -> list[str]:
    """
    Return up to `amount` ASCII letters ordered by descending frequency.

    Upper and lower case are ranked separately; ties are broken alphabetically.
    """
    if not 1 <= amount <= 52:
        raise InvalidArgumentError(f"amount must be between 1 and 52, got {amount}")

    counts: Counter[str] = Counter()
    for line in lines:
        counts.update(c for c in line if classify_char(c) in (CharCategory.UPPER, CharCategory.LOWER))

    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [letter for letter, _ in ranked[:amount]]


def is_palindrome(text: str) -> bool:
    """True when text reads the same in both directions."""
    if text is None:
        raise TypeError("text cannot be None")
    return text == text[::-1]


def random_string(
    length: int,
    ranges: Sequence[tuple[int, int]] = PRINTABLE_ASCII,
    rng: random.Random | None = None,
) -> str:
    """
    Build a random string from inclusive code point ranges.

    Each character first picks one of the ranges uniformly, then a code point
    inside it.
    """
    if length < 1:
        raise InvalidArgumentError(f"length must be positive, got {length}")
    if not ranges:
        raise InvalidArgumentError("at least one code point range is required")
    for low, high in ranges:
        if not 0 <= low < high <= MAX_CODE_POINT:
            raise InvalidArgumentError(f"invalid code point range: ({low}, {high})")

    source = rng or random.Random()
    chars = []
    for _ in range(length):
        low, high = source.choice(ranges)
        chars.append(chr(source.randint(low, high)))
    return "".join(chars)


def export_stats(json_path: Path, csv_path: Path, records: Sequence[TextStats], sort_key: SortKey) -> None:
    """Export statistics records to both JSON and CSV."""
    totals = TextStats()
    for record in records:
        totals = totals + record

    payload = {
        "generated_at_utc": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "sort_key": sort_key.name,
        "totals": {name: getattr(totals, name) for name in COUNT_FIELDS},
        "records": [record.as_dict() for record in records],
    }

    json_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    with csv_path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(["path", *COUNT_FIELDS])
        for record in records:
            writer.writerow([record.path or "", *(getattr(record, name) for name in COUNT_FIELDS)])
