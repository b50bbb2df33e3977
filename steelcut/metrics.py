# steelcut/metrics.py
# Metrics for bar cutting:
# - per-bar snapshot (used length, leftover, utilization)
# - plan totals (bars, pieces, weight, waste, overall utilization)
# - economy vs. the naive one-bar-per-piece baseline
#
# Everything here is a pure reduction; values are rounded to 2 decimals where computed.

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from .types import Bar, Economy, Piece, PlanStats
from .utils import round2


@dataclass(frozen=True)
class BarMetrics:
    number: int
    piece_count: int
    used_length_mm: float
    leftover_mm: float
    utilization_pct: float
    weight_kg: float


def compute_bar_metrics(bar: Bar) -> BarMetrics:
    return BarMetrics(
        number=bar.number,
        piece_count=bar.piece_count,
        used_length_mm=bar.used_length_mm,
        leftover_mm=bar.leftover_mm,
        utilization_pct=bar.utilization_pct,
        weight_kg=bar.weight_kg,
    )


def compute_plan_stats(bars: Sequence[Bar]) -> PlanStats:
    """
    Aggregate over finished bars.
    overall utilization = (sum(total) - waste) / sum(total) * 100, 0.0 for no bars.
    """
    total_length = round2(sum(b.total_length_mm for b in bars))
    waste = round2(sum(b.leftover_mm for b in bars))
    weight = round2(sum(c.piece.unit_weight_kg for b in bars for c in b.cuts))
    utilization = round2((total_length - waste) / total_length * 100) if total_length > 0 else 0.0
    return PlanStats(
        bar_count=len(bars),
        piece_count=sum(b.piece_count for b in bars),
        total_weight_kg=weight,
        total_waste_mm=waste,
        overall_utilization_pct=utilization,
    )


def naive_bar_count(pieces: Iterable[Piece]) -> int:
    """Worst case: one bar per physical piece."""
    return sum(p.quantity for p in pieces)


def compute_economy(bars: Sequence[Bar], pieces: Sequence[Piece]) -> Economy:
    baseline = naive_bar_count(pieces)
    optimized = len(bars)
    saved = baseline - optimized
    percent = round2(saved / baseline * 100) if baseline > 0 else 0.0
    return Economy(
        naive_bar_count=baseline,
        optimized_bar_count=optimized,
        bars_saved=saved,
        percent_saved=percent,
    )


def lower_bound_bars(pieces: Iterable[Piece], stock_length_mm: float) -> int:
    """Trivial material bound ceil(sum(lengths) / stock); no plan can use fewer bars."""
    total = sum(p.length_mm * p.quantity for p in pieces)
    if total <= 0:
        return 0
    full, rest = divmod(total, stock_length_mm)
    return int(full) + (1 if rest > 1e-9 else 0)
