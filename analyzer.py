"""Text statistics accumulation, comparison, and sorting."""

from __future__ import annotations

import logging
from collections.abc import Generator
from itertools import islice
from pathlib import Path
from typing import Callable, Iterable, Sequence

from models import AnalyzeOptions, CharCategory, InputUnavailableError, InvalidArgumentError, SortKey, TextStats
from utils import category_counts, iter_file_lines, iter_text_lines, word_count

FieldExtractor = Callable[[TextStats], int]

logger = logging.getLogger(__name__)

SORT_FIELDS: dict[SortKey, FieldExtractor] = {
    SortKey.WORD: lambda stats: stats.word_count,
    SortKey.LETTER: lambda stats: stats.letter_count,
    SortKey.CHARACTER: lambda stats: stats.character_count,
    SortKey.SYMBOL: lambda stats: stats.symbol_count,
    SortKey.NUMBER: lambda stats: stats.digit_count,
    SortKey.SPACE: lambda stats: stats.space_count,
    SortKey.CAPITAL: lambda stats: stats.capital_count,
    SortKey.LOWER: lambda stats: stats.lower_count,
}


def compare_stats(a: TextStats, b: TextStats, key: SortKey = SortKey.WORD) -> int:
    """Compare the same field of two records, returning -1, 0 or 1."""
    extract = SORT_FIELDS[key]
    left, right = extract(a), extract(b)
    return (left > right) - (left < right)


def sort_stats(records: Iterable[TextStats], key: SortKey = SortKey.WORD, reverse: bool = False) -> list[TextStats]:
    """Stable sort of records by one field; ties keep their input order."""
    return sorted(records, key=SORT_FIELDS[key], reverse=reverse)


class TextAnalyzer:
    """Fold line sources into immutable statistics records."""

    def accumulate(
        self,
        lines: Iterable[str],
        source: str | None = None,
        max_lines: int | None = None,
    ) -> TextStats:
        """
        Consume lines in order and return their totals.

        Counters stay local until the source is exhausted, so an error raised
        by the line source propagates without producing a record. With
        `max_lines`, nothing past the limit is read and generator sources are
        closed once the loop ends.
        """
        if max_lines is not None and max_lines < 0:
            raise InvalidArgumentError(f"max_lines must be non-negative, got {max_lines}")

        words = characters = 0
        capitals = lowers = spaces = digits = symbols = 0

        source_iter = iter(lines)
        bounded = source_iter if max_lines is None else islice(source_iter, max_lines)
        try:
            for line in bounded:
                counts = category_counts(line)
                capitals += counts[CharCategory.UPPER]
                lowers += counts[CharCategory.LOWER]
                spaces += counts[CharCategory.SPACE]
                digits += counts[CharCategory.DIGIT]
                symbols += counts[CharCategory.SYMBOL]
                characters += len(line)
                words += word_count(line)
        finally:
            # Release file handles held by generator sources stopped early.
            if isinstance(source_iter, Generator):
                source_iter.close()

        return TextStats(
            word_count=words,
            letter_count=capitals + lowers,
            character_count=characters,
            symbol_count=symbols,
            space_count=spaces,
            capital_count=capitals,
            lower_count=lowers,
            digit_count=digits,
            path=source,
        )

    def analyze_text(self, text: str, source: str | None = None) -> TextStats:
        """Analyze an in-memory block of text."""
        return self.accumulate(iter_text_lines(text), source=source)

    def analyze_file(self, path: str | Path | None, options: AnalyzeOptions | None = None) -> TextStats:
        """Analyze one text file and tag the record with its absolute path."""
        if path is None or not str(path).strip():
            raise InvalidArgumentError("A file path is required")

        opts = options or AnalyzeOptions()
        resolved = Path(path).resolve()
        logger.info("Analyzing %s", resolved)
        try:
            stats = self.accumulate(
                iter_file_lines(resolved, encoding=opts.encoding),
                source=str(resolved),
                max_lines=opts.max_lines,
            )
        except InputUnavailableError:
            logger.error("Input unavailable: %s", resolved)
            raise
        logger.debug("Finished %s: %d words, %d characters", resolved, stats.word_count, stats.character_count)
        return stats

    def analyze_files(self, paths: Sequence[str | Path], options: AnalyzeOptions | None = None) -> list[TextStats]:
        """Analyze every path in order, stopping at the first unavailable input."""
        return [self.analyze_file(path, options) for path in paths]
