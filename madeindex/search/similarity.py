"""String and set similarity measures used for ranking."""

from __future__ import annotations

from typing import Iterable


def levenshtein(left: str, right: str) -> int:
    """Edit distance with unit cost insertions, deletions and substitutions."""
    if len(left) < len(right):
        left, right = right, left
    previous = list(range(len(right) + 1))
    for i, left_char in enumerate(left, start=1):
        current = [i]
        for j, right_char in enumerate(right, start=1):
            cost = 0 if left_char == right_char else 1
            current.append(min(current[j - 1] + 1, previous[j] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def similarity_ratio(left: str, right: str) -> float:
    """``(longer - distance) / longer``; two empty strings are identical."""
    longer = max(len(left), len(right))
    if longer == 0:
        return 1.0
    return (longer - levenshtein(left, right)) / longer


def jaccard(left: Iterable[str], right: Iterable[str]) -> float:
    """Overlap normalised by union size, treating an empty union as size 1."""
    left_set = set(left)
    right_set = set(right)
    union = len(left_set | right_set) or 1
    return len(left_set & right_set) / union


__all__ = ["jaccard", "levenshtein", "similarity_ratio"]
