"""Distinct permutations of a string by iterative character insertion."""

from __future__ import annotations

import logging
from collections import Counter
from math import factorial, prod

from models import InvalidArgumentError

logger = logging.getLogger(__name__)

# Output grows factorially; beyond this length generation gets slow and memory hungry.
MAX_PRACTICAL_LENGTH = 10


def permutation_count(text: str) -> int:
    """Number of distinct permutations: n! over the product of repeat factorials."""
    if not text:
        return 0
    return factorial(len(text)) // prod(factorial(m) for m in Counter(text).values())


def permutations(text: str) -> set[str]:
    """
    Return every distinct rearrangement of the characters in text.

    Starting from the first character, each following character is inserted
    at every position of every partial permutation. Collecting into a set
    collapses duplicates produced by repeated characters.
    """
    if not isinstance(text, str):
        raise TypeError(f"text must be a string, got {type(text).__name__}")
    if not text:
        raise InvalidArgumentError("Cannot permute an empty string")
    if len(text) > MAX_PRACTICAL_LENGTH:
        logger.warning(
            "Permuting %d characters may produce up to %d strings",
            len(text),
            permutation_count(text),
        )

    partials = {text[0]}
    for c in text[1:]:
        partials = {p[:i] + c + p[i:] for p in partials for i in range(len(p) + 1)}
    return partials
