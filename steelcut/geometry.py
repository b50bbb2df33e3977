# steelcut/geometry.py
# Profile ("geometry") helpers used for plan metadata:
# - dominant profile of a piece list
# - grouping by profile (one plan per profile, see run.optimize_by_profile)

from __future__ import annotations

from typing import Dict, List, Sequence

from .config import DEFAULTS
from .types import Piece

MIXED_GEOMETRY = DEFAULTS.mixed_geometry_label


def detect_geometry(pieces: Sequence[Piece], max_profiles: int = DEFAULTS.max_distinct_profiles) -> str:
    """
    Profile with the highest cumulative quantity.
    The running totals are scanned in input order and a profile only takes the lead
    by strictly exceeding the current best, so on equal totals the one that got
    there first wins. Too many distinct profiles, an empty list or no positive
    quantity give MIXED_GEOMETRY.
    """
    counts: Dict[str, int] = {}
    best = ""
    best_count = 0
    for p in pieces:
        counts[p.profile] = counts.get(p.profile, 0) + p.quantity
        if counts[p.profile] > best_count:
            best_count = counts[p.profile]
            best = p.profile

    if len(counts) > max_profiles or best_count == 0:
        return MIXED_GEOMETRY
    return best


def group_by_profile(pieces: Sequence[Piece]) -> Dict[str, List[Piece]]:
    groups: Dict[str, List[Piece]] = {}
    for p in pieces:
        groups.setdefault(p.profile, []).append(p)
    return groups
