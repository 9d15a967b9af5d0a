"""Data models for text statistics, sort keys, and analysis options."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from enum import Enum


class TextTallyError(Exception):
    """Base error for text analysis failures."""


class InputUnavailableError(TextTallyError, OSError):
    """A line source could not be opened or failed while reading."""


class InvalidArgumentError(TextTallyError, ValueError):
    """An argument was rejected before any work was done."""


class CharCategory(Enum):
    """Mutually exclusive character classes."""

    UPPER = "upper"
    LOWER = "lower"
    SPACE = "space"
    DIGIT = "digit"
    SYMBOL = "symbol"


class SortKey(Enum):
    """Field used to order statistics records."""

    WORD = "word_count"
    LETTER = "letter_count"
    CHARACTER = "character_count"
    SYMBOL = "symbol_count"
    NUMBER = "digit_count"
    SPACE = "space_count"
    CAPITAL = "capital_count"
    LOWER = "lower_count"

    @property
    def field_name(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> SortKey:
        """Resolve a key from its name, case-insensitively."""
        name = (text or "").strip().upper()
        try:
            return cls[name]
        except KeyError:
            valid = ", ".join(member.name for member in cls)
            raise ValueError(f"Unknown sort key {text!r}; expected one of: {valid}") from None


@dataclass(frozen=True, slots=True)
class TextStats:
    """
    Totals for one analyzed source.

    `character_count` is the raw length of every line and is tallied
    independently of the per-category buckets.
    """

    word_count: int = 0
    letter_count: int = 0
    character_count: int = 0
    symbol_count: int = 0
    space_count: int = 0
    capital_count: int = 0
    lower_count: int = 0
    digit_count: int = 0
    path: str | None = None

    def __post_init__(self) -> None:
        for name in COUNT_FIELDS:
            count = getattr(self, name)
            if isinstance(count, bool) or not isinstance(count, int) or count < 0:
                raise ValueError(f"{name} must be a non-negative integer, got {count!r}")

    def value(self, key: SortKey) -> int:
        return getattr(self, key.field_name)

    def has_path(self) -> bool:
        return bool(self.path)

    def merge(self, other: TextStats) -> TextStats:
        """Sum two records field by field; the path survives only if both agree."""
        totals = {name: getattr(self, name) + getattr(other, name) for name in COUNT_FIELDS}
        path = self.path if self.path == other.path else None
        return TextStats(path=path, **totals)

    def __add__(self, other: object) -> TextStats:
        if not isinstance(other, TextStats):
            return NotImplemented
        return self.merge(other)

    def as_dict(self) -> dict[str, int | str | None]:
        return asdict(self)


COUNT_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(TextStats) if f.name != "path")


@dataclass(slots=True)
class AnalyzeOptions:
    """Options applied when reading analyzed sources."""

    encoding: str = "utf-8"
    max_lines: int | None = None
