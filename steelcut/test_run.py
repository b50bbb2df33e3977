# steelcut/test_run.py
# End-to-end pipeline: scenarios, error order, determinism and invariants on random jobs.

from __future__ import annotations

import subprocess
import sys
from datetime import datetime, timezone

import pytest

from steelcut.config import make_config
from steelcut.errors import InvalidInput, PieceTooLong, TooManyPieces
from steelcut.geometry import MIXED_GEOMETRY
from steelcut.metrics import lower_bound_bars
from steelcut.run import optimize_by_profile, optimize_pieces, run_cut_plan
from steelcut.sample_data import RandomPiecesConfig, generate_random_pieces
from steelcut.types import Piece
from steelcut.utils import timer
from steelcut.validate import validate_plan

FIXED_TS = datetime(2024, 5, 2, 12, 0, tzinfo=timezone.utc)


def _p(length, qty=1, pos="", profile="W200X35.9", weight=0.0) -> Piece:
    return Piece(position=pos, tag="", phase="F1", profile=profile, length_mm=length, quantity=qty,
                 material="A572-50", unit_weight_kg=weight)


def test_scenario_a_three_pieces_two_bars() -> None:
    plan = optimize_pieces([_p(4000), _p(3000), _p(2000)], make_config(6000))

    assert plan.bar_count == 2
    assert plan.total_waste_mm == 3000
    assert plan.overall_utilization_pct == 75.00
    assert [[c.piece.length_mm for c in b.cuts] for b in plan.bars] == [[4000, 2000], [3000]]


def test_scenario_b_ten_equal_pieces() -> None:
    plan = optimize_pieces([_p(1000, qty=10)], make_config(6000))

    assert plan.bar_count == 2
    assert (plan.bars[0].piece_count, plan.bars[0].utilization_pct) == (6, 100.00)
    assert (plan.bars[1].piece_count, plan.bars[1].utilization_pct) == (4, 66.67)
    assert plan.economy.naive_bar_count == 10
    assert plan.economy.bars_saved == 8
    assert plan.economy.percent_saved == 80.00


def test_scenario_c_empty_input_is_an_empty_plan() -> None:
    plan = optimize_pieces([])

    assert plan.bar_count == 0
    assert plan.piece_count == 0
    assert plan.bars == ()
    assert plan.overall_utilization_pct == 0.0
    assert plan.geometry == MIXED_GEOMETRY
    assert plan.within_tolerance


def test_zero_quantities_only_is_an_empty_plan() -> None:
    plan = optimize_pieces([_p(1000, qty=0)])

    assert plan.bar_count == 0


def test_scenario_d_single_piece_too_long() -> None:
    with pytest.raises(PieceTooLong) as exc:
        optimize_pieces([_p(7000, pos="CE-17")], make_config(6000))

    assert [p.position for _, p in exc.value.pieces] == ["CE-17"]
    assert "CE-17" in str(exc.value)


def test_piece_equal_to_stock_occupies_a_bar_alone() -> None:
    plan = optimize_pieces([_p(12000), _p(500)], make_config(12000))

    assert plan.bars[0].piece_count == 1
    assert plan.bars[0].leftover_mm == 0
    assert plan.bars[0].utilization_pct == 100.00


def test_invalid_input_is_reported_before_too_long() -> None:
    with pytest.raises(InvalidInput):
        optimize_pieces([_p(9000), _p(-5)])


def test_too_many_pieces() -> None:
    cfg = make_config(6000, max_unit_pieces=50)

    assert optimize_pieces([_p(100, qty=50)], cfg).piece_count == 50
    with pytest.raises(TooManyPieces) as exc:
        optimize_pieces([_p(100, qty=30), _p(200, qty=21)], cfg)
    assert (exc.value.count, exc.value.limit) == (51, 50)


def test_plan_metadata() -> None:
    plan = optimize_pieces(
        [_p(2000, qty=2, weight=71.8), _p(1500, profile="L51X4.7", weight=5.45)],
        make_config(12000, waste_tolerance_pct=3),
        title="Lista F1",
        project="Galpao 3",
        client="ACME",
        site="Obra 12",
        created_at=FIXED_TS,
    )

    assert plan.title == "Lista F1"
    assert (plan.project, plan.client, plan.site) == ("Galpao 3", "ACME", "Obra 12")
    assert plan.geometry == "W200X35.9"
    assert plan.stock_length_mm == 12000
    assert plan.algorithm == "FFD_BestFit"
    assert plan.created_at == FIXED_TS
    assert plan.total_weight_kg == 149.05
    assert plan.overall_utilization_pct == 45.83
    assert plan.waste_pct == 54.17
    assert plan.within_tolerance is False


def test_tolerance_never_aborts() -> None:
    plan = optimize_pieces([_p(100)], make_config(6000, waste_tolerance_pct=0))

    assert plan.bar_count == 1
    assert not plan.within_tolerance


def test_determinism() -> None:
    pieces = generate_random_pieces(RandomPiecesConfig(seed=7, n_unique=30))
    a = optimize_pieces(pieces, make_config(6000), created_at=FIXED_TS)
    b = optimize_pieces(pieces, make_config(6000), created_at=FIXED_TS)

    assert a == b
    assert [[c.piece.uid for c in bar.cuts] for bar in a.bars] == [[c.piece.uid for c in bar.cuts] for bar in b.bars]


@pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
@pytest.mark.parametrize("stock", [6000, 12000])
def test_invariants_on_random_jobs(seed: int, stock: int) -> None:
    pieces = generate_random_pieces(RandomPiecesConfig(seed=seed, stock_length_mm=stock, n_unique=40))
    plan = optimize_pieces(pieces, make_config(stock))
    total_qty = sum(p.quantity for p in pieces)

    assert [i for i in validate_plan(plan, expected_pieces=total_qty) if i.level == "ERROR"] == []
    for bar in plan.bars:
        assert sum(c.piece.length_mm for c in bar.cuts) + bar.leftover_mm == stock
        assert 0 <= bar.utilization_pct <= 100
    uids = [c.piece.uid for _, c in plan.iter_cuts()]
    assert len(uids) == len(set(uids)) == total_qty
    assert [b.number for b in plan.bars] == list(range(1, plan.bar_count + 1))
    assert lower_bound_bars(pieces, stock) <= plan.bar_count <= total_qty


def test_optimize_by_profile_separates_profiles() -> None:
    pieces = [_p(3000, qty=2, profile="W200X35.9"), _p(3000, qty=2, profile="L51X4.7"), _p(2000, profile="W200X35.9")]
    plans = optimize_by_profile(pieces, make_config(6000), title="F1")

    assert list(plans) == ["W200X35.9", "L51X4.7"]
    assert plans["W200X35.9"].title == "F1 - W200X35.9"
    assert plans["W200X35.9"].piece_count == 3
    assert plans["L51X4.7"].bar_count == 1
    for profile, plan in plans.items():
        assert plan.geometry == profile
        assert {c.piece.profile for _, c in plan.iter_cuts()} == {profile}


def test_optimize_by_profile_reports_offenders_from_all_groups() -> None:
    pieces = [_p(7000, pos="a", profile="A"), _p(8000, pos="b", profile="B")]
    with pytest.raises(PieceTooLong) as exc:
        optimize_by_profile(pieces)

    assert [p.position for _, p in exc.value.pieces] == ["a", "b"]


def test_run_cut_plan_validates_and_exports(tmp_path) -> None:
    res = run_cut_plan([_p(1000, qty=10)], make_config(6000), out_dir=tmp_path, export_prefix="job")

    assert res.plan.bar_count == 2
    assert [i for i in res.issues if i.level == "ERROR"] == []
    assert res.figure is None
    assert (tmp_path / "job_bars.csv").exists()
    assert (tmp_path / "job_cuts.csv").exists()
    assert (tmp_path / "job.json").exists()


def test_three_decimal_lengths_never_overfill_a_bar() -> None:
    plan = optimize_pieces([_p(3000.003, qty=2)], make_config(6000))

    assert plan.bar_count == 2 == lower_bound_bars([_p(3000.003, qty=2)], 6000)
    assert all(b.leftover_mm >= 0 for b in plan.bars)
    assert validate_plan(plan, expected_pieces=2) == []

    res = run_cut_plan([_p(3000.003, qty=2), _p(1234.567, qty=3)], make_config(6000))
    assert [i for i in res.issues if i.level == "ERROR"] == []


def test_large_job_optimizes_quickly() -> None:
    with timer("optimize") as t:
        plan = optimize_pieces([_p(1, qty=30000)], make_config(6000))

    assert plan.bar_count == 5
    assert plan.overall_utilization_pct == 100.00
    assert t["seconds"] < 5


def test_importing_the_package_does_not_load_adapters() -> None:
    code = (
        "import sys, steelcut\n"
        "loaded = [m for m in ('steelcut.plotting', 'steelcut.io_csv', 'steelcut.io_json', 'matplotlib.pyplot')"
        " if m in sys.modules]\n"
        "print(','.join(loaded))\n"
    )
    out = subprocess.run([sys.executable, "-c", code], capture_output=True, text=True, check=True).stdout

    assert out.strip() == ""
