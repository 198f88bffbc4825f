"""Lenient parsing of the free-form strings found in movie metadata."""

from __future__ import annotations

import re

from ..schemas import Movie

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

HOUR_MARKER = "h"


def parse_leading_int(text: str | None) -> int | None:
    """Parse the integer at the start of ``text``.

    Leading whitespace and a sign are accepted and anything after the digits is
    ignored, so ``" 22min"`` gives 22 and ``"2010–2015"`` gives 2010. Returns
    ``None`` when the text does not start with a number.
    """
    if not text:
        return None
    match = _LEADING_INT.match(text)
    if match is None:
        return None
    return int(match.group(1))


def parse_year(movie: Movie) -> int | None:
    return parse_leading_int(movie.year)


def runtime_to_minutes(runtime: str | None) -> int:
    """Convert ``"2h 15min"`` style durations to minutes.

    Text before the hour marker is hours, text after it is minutes. Without an
    hour marker the whole string is read as minutes (``"45min"``, ``"142 min"``).
    Missing or unparseable parts count as zero.
    """
    if not runtime:
        return 0
    head, marker, tail = runtime.partition(HOUR_MARKER)
    if not marker:
        head, tail = "", head
    hours = parse_leading_int(head) or 0
    minutes = parse_leading_int(tail) or 0
    return hours * 60 + minutes


def critic_score(movie: Movie, source: str) -> int | None:
    """Extract the percentage score published by ``source``.

    A movie without a rating from ``source`` scores 0, the same as a movie rated
    0%. A rating that is present but not numeric (``"N/A"``) gives ``None``.
    """
    for rating in movie.ratings:
        if rating.source == source:
            return parse_leading_int(rating.value.replace("%", ""))
    return 0
