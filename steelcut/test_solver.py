# steelcut/test_solver.py
# FFD ordering and Best-Fit packing.
#   pytest steelcut/test_solver.py

from __future__ import annotations

from typing import List

import pytest

from steelcut.errors import PieceTooLong
from steelcut.solver_best_fit import choose_bar, pack_best_fit, solve_ffd_best_fit, sort_pieces
from steelcut.types import Piece, UnitPiece, expand_pieces
from steelcut.utils import timer


def _units(*lengths: float) -> List[UnitPiece]:
    pieces = [
        Piece(position=f"P{i + 1}", tag="", phase="", profile="L51X4.7", length_mm=L, quantity=1)
        for i, L in enumerate(lengths)
    ]
    return expand_pieces(pieces)


def _layout(bars) -> List[List[float]]:
    return [[c.piece.length_mm for c in b.cuts] for b in bars]


def test_sort_is_descending_and_stable() -> None:
    units = _units(1000, 3000, 1000, 2000, 3000)
    ordered = sort_pieces(units)

    assert [u.length_mm for u in ordered] == [3000, 3000, 2000, 1000, 1000]
    assert [u.position for u in ordered] == ["P2", "P5", "P4", "P1", "P3"]


def test_best_fit_prefers_tightest_bar_over_first_fitting_bar() -> None:
    # 700 fits bar 1 (leftover 300) and bar 2 (leftover 100): best fit picks bar 2
    bars = solve_ffd_best_fit(_units(5000, 3000, 2200, 700), 6000)

    assert _layout(bars) == [[5000], [3000, 2200, 700]]
    assert [b.leftover_mm for b in bars] == [1000, 100]


def test_equal_leftover_goes_to_lowest_bar_number() -> None:
    # after 5000 + 5000 both bars have 1000 left; the 1000 piece must land in bar 1
    bars = solve_ffd_best_fit(_units(5000, 5000, 1000), 6000)

    assert _layout(bars) == [[5000, 1000], [5000]]
    assert bars[0].leftover_mm == 0
    assert bars[1].leftover_mm == 1000


def test_choose_bar_tie_and_no_fit() -> None:
    unit = _units(500)[0]
    used = [2000.0, 2000.0, 5800.0]

    assert choose_bar(used, 6000, unit) == 0
    assert choose_bar(used[2:], 6000, unit) is None
    assert choose_bar([], 6000, unit) is None


def test_fit_is_decided_on_unrounded_lengths() -> None:
    # 3000.003 + 3000.003 overflows 6000 by 0.006 mm, which rounds away at 2 decimals
    units = expand_pieces([Piece("A1", "", "", "L51X4.7", 3000.003, 2)])
    bars = solve_ffd_best_fit(units, 6000)

    assert _layout(bars) == [[3000.003], [3000.003]]
    assert all(b.leftover_mm == 3000.0 for b in bars)
    with pytest.raises(ValueError):
        bars[0].with_piece(units[1])


def test_float_noise_still_fills_a_bar_exactly() -> None:
    bars = solve_ffd_best_fit(_units(0.1, 0.2, 5999.7), 6000)

    assert len(bars) == 1
    assert bars[0].leftover_mm == 0


def test_new_bars_are_numbered_in_creation_order() -> None:
    bars = solve_ffd_best_fit(_units(4000, 4000, 4000, 4000), 6000)

    assert [b.number for b in bars] == [1, 2, 3, 4]
    assert all(b.total_length_mm == 6000 for b in bars)
    assert all(b.origin.value == "New" for b in bars)


def test_cut_order_starts_at_one_per_bar() -> None:
    bars = solve_ffd_best_fit(_units(3000, 2000, 1000, 3000, 2000, 1000), 6000)

    for bar in bars:
        assert [c.order for c in bar.cuts] == list(range(1, len(bar.cuts) + 1))


def test_piece_equal_to_stock_fills_a_bar() -> None:
    bars = solve_ffd_best_fit(_units(6000, 1000), 6000)

    assert _layout(bars) == [[6000], [1000]]
    assert bars[0].leftover_mm == 0
    assert bars[0].utilization_pct == 100.00


def test_packer_rejects_every_too_long_piece() -> None:
    with pytest.raises(PieceTooLong) as exc:
        pack_best_fit(_units(7000, 1000, 6500), 6000)

    assert [i for i, _ in exc.value.pieces] == [0, 2]
    assert exc.value.stock_length_mm == 6000


def test_packer_on_empty_input() -> None:
    assert pack_best_fit([], 6000) == ()


def test_packing_respects_given_order() -> None:
    # unsorted input is packed as given (no hidden re-sort inside the packer)
    bars = pack_best_fit(_units(1000, 5000, 2000), 6000)

    assert _layout(bars) == [[1000, 5000], [2000]]


def test_twelve_metre_bars() -> None:
    bars = solve_ffd_best_fit(_units(7000, 5000, 6000, 6000), 12000)

    assert _layout(bars) == [[7000, 5000], [6000, 6000]]
    assert all(b.utilization_pct == 100.0 for b in bars)


def test_packer_reports_each_too_long_request_once() -> None:
    units = expand_pieces([
        Piece("A1", "", "", "W200X35.9", 7000, 3),
        Piece("A2", "", "", "W200X35.9", 1000, 2),
        Piece("A3", "", "", "W200X35.9", 6500, 1),
    ])
    with pytest.raises(PieceTooLong) as exc:
        pack_best_fit(sort_pieces(units), 6000)

    assert [(i, p.position, p.quantity) for i, p in exc.value.pieces] == [(0, "A1", 3), (2, "A3", 1)]
    assert str(exc.value).startswith("2 piece(s) longer than stock bar 6000 mm")


def test_large_run_packs_quickly() -> None:
    units = expand_pieces([Piece("S1", "", "", "L51X4.7", 1, 30000)])
    with timer("pack") as t:
        bars = solve_ffd_best_fit(units, 6000)

    assert [b.piece_count for b in bars] == [6000] * 5
    assert t["seconds"] < 5
