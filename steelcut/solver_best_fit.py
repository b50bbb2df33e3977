# steelcut/solver_best_fit.py
# First-Fit-Decreasing ordering + Best-Fit bar choice for 1D stock bars.
#
# - Pieces are sorted longest first (stable: equal lengths keep input order).
# - Each piece goes to the open bar that would keep the smallest leftover.
# - Equal leftover: the lowest bar number wins.
# - No bar fits: a new bar of stock length is opened with the next number.
#
# Cost is O(n * b) for n unit pieces and b bars: packing keeps a running used
# length and a cut list per bar, and freezes them into Bars once at the end.

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from .errors import PieceTooLong
from .types import FIT_TOLERANCE_MM, Bar, BarOrigin, Piece, PlacedPiece, UnitPiece


def sort_pieces(pieces: Sequence[UnitPiece]) -> List[UnitPiece]:
    """Length descending; Python's sort is stable, so ties keep input order."""
    return sorted(pieces, key=lambda p: p.length_mm, reverse=True)


def choose_bar(used_mm: Sequence[float], stock_length_mm: float, piece: UnitPiece) -> Optional[int]:
    """
    Index of the bar with the smallest leftover after adding piece, or None.
    used_mm holds the raw (unrounded) used length of each open bar.
    Strict '<' keeps the earliest bar on ties.
    """
    best_idx: Optional[int] = None
    best_left = 0.0
    for idx, used in enumerate(used_mm):
        left = stock_length_mm - used - piece.length_mm
        if left < -FIT_TOLERANCE_MM:
            continue
        if best_idx is None or left < best_left:
            best_idx = idx
            best_left = left
    return best_idx


def pack_best_fit(pieces: Sequence[UnitPiece], stock_length_mm: float) -> Tuple[Bar, ...]:
    """
    Pack unit pieces in the given order. Callers normally pass sort_pieces(...) output.
    Raises PieceTooLong (one entry per request, listing all offenders) if any piece
    exceeds the stock bar.
    """
    too_long = [p for p in pieces if p.length_mm > stock_length_mm]
    if too_long:
        raise PieceTooLong(_group_requests(too_long), stock_length_mm)

    used: List[float] = []
    contents: List[List[UnitPiece]] = []
    for piece in pieces:
        idx = choose_bar(used, stock_length_mm, piece)
        if idx is None:
            used.append(piece.length_mm)
            contents.append([piece])
        else:
            used[idx] += piece.length_mm
            contents[idx].append(piece)

    return tuple(
        Bar(
            number=n,
            total_length_mm=stock_length_mm,
            origin=BarOrigin.NEW,
            cuts=tuple(PlacedPiece(piece=p, order=k) for k, p in enumerate(cut_list, start=1)),
        )
        for n, cut_list in enumerate(contents, start=1)
    )


def solve_ffd_best_fit(pieces: Sequence[UnitPiece], stock_length_mm: float) -> Tuple[Bar, ...]:
    """Sort (FFD) then pack (Best-Fit)."""
    return pack_best_fit(sort_pieces(pieces), stock_length_mm)


def _group_requests(units: Sequence[UnitPiece]) -> List[Tuple[int, Piece]]:
    """Collapse unit pieces back into one request per source row, in input order."""
    counts: Dict[int, int] = {}
    first: Dict[int, UnitPiece] = {}
    for u in units:
        counts[u.source_index] = counts.get(u.source_index, 0) + 1
        first.setdefault(u.source_index, u)
    return [(i, _as_request(first[i], counts[i])) for i in sorted(counts)]


def _as_request(p: UnitPiece, quantity: int) -> Piece:
    return Piece(
        position=p.position,
        tag=p.tag,
        phase=p.phase,
        profile=p.profile,
        length_mm=p.length_mm,
        quantity=quantity,
        material=p.material,
        unit_weight_kg=p.unit_weight_kg,
    )
