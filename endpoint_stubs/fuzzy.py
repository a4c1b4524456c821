"""Similarity ranking for "did you mean" suggestions."""

import re
from typing import Iterable, Optional

from .config import FuzzyOptions

LEADING_NOISE = re.compile(r"^[^A-Za-z0-9]+")
MAX_PREFIX = 4
SMALL_POOL = 3


def normalize(value: object, ignore_case: bool = True) -> str:
    text = LEADING_NOISE.sub("", str(value))
    return text.lower() if ignore_case else text


def jaro(first: str, second: str) -> float:
    """Jaro similarity between two strings, from 0.0 to 1.0."""
    if first == second:
        return 1.0
    if not first or not second:
        return 0.0

    window = max(max(len(first), len(second)) // 2 - 1, 0)
    first_matched = [False] * len(first)
    second_matched = [False] * len(second)

    matches = 0
    for i, char in enumerate(first):
        start = max(0, i - window)
        end = min(i + window + 1, len(second))
        for j in range(start, end):
            if second_matched[j] or second[j] != char:
                continue
            first_matched[i] = second_matched[j] = True
            matches += 1
            break

    if matches == 0:
        return 0.0

    transpositions = 0
    j = 0
    for i, char in enumerate(first):
        if not first_matched[i]:
            continue
        while not second_matched[j]:
            j += 1
        if char != second[j]:
            transpositions += 1
        j += 1

    transpositions //= 2
    return (
        matches / len(first)
        + matches / len(second)
        + (matches - transpositions) / matches
    ) / 3


def jaro_winkler(first: str, second: str, options: Optional[FuzzyOptions] = None) -> float:
    """
    Jaro-Winkler similarity.

    The common prefix (up to 4 characters) boosts the Jaro score by
    options.weight per character, but only when the Jaro score is above
    options.threshold.
    """
    options = options or FuzzyOptions()
    first = normalize(first, options.ignore_case)
    second = normalize(second, options.ignore_case)

    score = jaro(first, second)
    if score <= options.threshold:
        return score

    prefix = 0
    for a, b in zip(first[:MAX_PREFIX], second[:MAX_PREFIX]):
        if a != b:
            break
        prefix += 1
    return score + prefix * options.weight * (1 - score)


def rank(target: str, candidates: Iterable[str], options: Optional[FuzzyOptions] = None) -> list[tuple[float, str]]:
    """Score every candidate against target, best first."""
    scored = [(jaro_winkler(target, candidate, options), candidate) for candidate in candidates]
    return sorted(scored, key=lambda pair: pair[0], reverse=True)


def match(target: str, candidates: Iterable[str], options: Optional[FuzzyOptions] = None) -> list[str]:
    """
    Find candidates similar to target, most similar first.

    With three candidates or fewer every candidate is returned so a lookup
    failure always lists what is available. Larger pools are cut down to the
    candidates scoring at least options.min_score.
    """
    options = options or FuzzyOptions()
    scored = rank(target, candidates, options)
    if len(scored) <= SMALL_POOL:
        return [candidate for _, candidate in scored]
    return [candidate for score, candidate in scored if score >= options.min_score]
