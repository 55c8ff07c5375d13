"""Canonical name keys and the single lookup index used for cross-dataset joins."""

from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Iterable, Optional, Sequence

import pandas as pd

from facility_coverage.models.records import Area, RepresentativePoint

LOGGER = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")

MATCH_EXACT = "exact"
MATCH_SUBSTRING = "substring"


@lru_cache(maxsize=8192)
def normalize_name(label: Optional[str]) -> str:
    """Lowercase, strip diacritics and collapse whitespace."""

    if label is None:
        return ""
    text = unicodedata.normalize("NFD", str(label).lower())
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    return _WHITESPACE.sub(" ", text).strip()


def normalize_name_series(series: pd.Series) -> pd.Series:
    """Vectorised :func:`normalize_name` for pandas columns."""

    return series.fillna("").astype(str).map(normalize_name)


@dataclass(frozen=True)
class NameMatch:
    item: Any
    key: str
    position: int
    match_type: str


class NameIndex:
    """Lookup from canonical keys to items, preserving insertion order.

    Exact canonical matches are preferred. When none exists the first entry
    whose key contains the query, or is contained by it, is returned.
    """

    def __init__(self, entries: Iterable[tuple[str, Any]]):
        self._entries: list[tuple[str, Any]] = []
        self._exact: dict[str, int] = {}
        for label, item in entries:
            key = normalize_name(label)
            self._exact.setdefault(key, len(self._entries))
            self._entries.append((key, item))

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, label: Optional[str]) -> Optional[NameMatch]:
        key = normalize_name(label)
        if key in self._exact:
            position = self._exact[key]
            return NameMatch(self._entries[position][1], key, position, MATCH_EXACT)
        if not key:
            return None
        for position, (candidate, item) in enumerate(self._entries):
            if candidate and (key in candidate or candidate in key):
                return NameMatch(item, candidate, position, MATCH_SUBSTRING)
        return None


def match_boundaries(
    areas: Sequence[Area], points: Sequence[RepresentativePoint]
) -> tuple[list[Optional[NameMatch]], list[str]]:
    """Join area records to boundary points by name.

    Returns one match (or ``None``) per area, in area order, plus the labels of
    boundary points that no area claimed.
    """

    index = NameIndex((point.name, point) for point in points)
    matches = [index.lookup(area.name) for area in areas]
    claimed = {match.position for match in matches if match is not None}
    unmatched = [point.name for position, point in enumerate(points) if position not in claimed]

    substring_hits = sum(1 for match in matches if match is not None and match.match_type == MATCH_SUBSTRING)
    LOGGER.info(
        "Boundary join: %d of %d areas matched (%d by substring), %d boundaries unclaimed",
        sum(1 for match in matches if match is not None),
        len(areas),
        substring_hits,
        len(unmatched),
    )
    return matches, unmatched
