# steelcut/run.py
# High-level entry points that tie together:
# - validation (bad values, over-length pieces, safety bound)
# - expansion, FFD ordering, Best-Fit packing
# - plan statistics, economy and dominant geometry
# - optional plan validation, CSV/JSON export and matplotlib figure
#   (adapters are imported on demand; importing this module never loads matplotlib)
#
# This is meant to be called from import/upload code or report generation.
# Example:
#   from steelcut.run import optimize_pieces
#   plan = optimize_pieces(pieces, make_config(12000), title="Lista de corte F1")

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

from .config import OptimizationConfig
from .errors import InvalidInput, TooManyPieces
from .geometry import detect_geometry, group_by_profile
from .logger import get_logger
from .metrics import compute_economy, compute_plan_stats, lower_bound_bars, naive_bar_count
from .solver_best_fit import solve_ffd_best_fit
from .types import CutPlan, Piece, expand_pieces
from .utils import timer
from .validate import ValidationIssue, ensure_pieces_fit, find_invalid_pieces, raise_on_errors, validate_plan

if TYPE_CHECKING:
    from .plotting import PlotStyle


def precheck(pieces: Sequence[Piece], config: OptimizationConfig) -> None:
    """
    Raise before any bar exists:
    InvalidInput, then PieceTooLong (all offenders), then TooManyPieces.
    """
    invalid = find_invalid_pieces(pieces)
    if invalid:
        raise InvalidInput("Invalid piece request(s)", invalid)
    ensure_pieces_fit(pieces, config.stock_length_mm)
    count = naive_bar_count(pieces)
    if count > config.max_unit_pieces:
        raise TooManyPieces(count, config.max_unit_pieces)


def optimize_pieces(
    pieces: Sequence[Piece],
    config: Optional[OptimizationConfig] = None,
    *,
    title: str = "Cut plan",
    project: Optional[str] = None,
    client: Optional[str] = None,
    site: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> CutPlan:
    """
    Build a new CutPlan from piece requests. Empty input gives an empty plan.
    """
    config = config or OptimizationConfig()
    pieces = list(pieces)
    precheck(pieces, config)

    log = get_logger()
    with timer("optimize") as t:
        units = expand_pieces(pieces)
        bars = solve_ffd_best_fit(units, config.stock_length_mm)
        stats = compute_plan_stats(bars)

    meta: Dict[str, Any] = {}
    if created_at is not None:
        meta["created_at"] = created_at

    plan = CutPlan(
        title=title,
        stock_length_mm=config.stock_length_mm,
        bars=bars,
        stats=stats,
        economy=compute_economy(bars, pieces),
        geometry=detect_geometry(pieces),
        project=project,
        client=client,
        site=site,
        waste_tolerance_pct=config.waste_tolerance_pct,
        algorithm=config.algorithm.value,
        **meta,
    )

    log.info(
        f"{title}: {stats.piece_count} pieces -> {stats.bar_count} bars of {config.stock_length_mm} mm "
        f"(lower bound {lower_bound_bars(pieces, config.stock_length_mm)}), "
        f"utilization {stats.overall_utilization_pct:.2f}%, {t['seconds']:.3f}s"
    )
    if not plan.within_tolerance:
        log.warn(f"{title}: waste {plan.waste_pct:.2f}% exceeds tolerance {config.waste_tolerance_pct:.2f}%")
    return plan


def optimize_by_profile(
    pieces: Sequence[Piece],
    config: Optional[OptimizationConfig] = None,
    *,
    title: str = "Cut plan",
    project: Optional[str] = None,
    client: Optional[str] = None,
    site: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> Dict[str, CutPlan]:
    """
    One plan per profile (a bar of one profile cannot supply another).
    The whole list is checked first, so errors name offenders from every group.
    """
    config = config or OptimizationConfig()
    pieces = list(pieces)
    precheck(pieces, config)

    plans: Dict[str, CutPlan] = {}
    for profile, group in group_by_profile(pieces).items():
        plans[profile] = optimize_pieces(
            group,
            config,
            title=f"{title} - {profile}" if profile else title,
            project=project,
            client=client,
            site=site,
            created_at=created_at,
        )
    return plans


@dataclass(frozen=True)
class RunResult:
    plan: CutPlan
    issues: List[ValidationIssue] = field(default_factory=list)
    figure: Any = None  # matplotlib Figure when requested


def run_cut_plan(
    pieces: Sequence[Piece],
    config: Optional[OptimizationConfig] = None,
    *,
    title: str = "Cut plan",
    project: Optional[str] = None,
    client: Optional[str] = None,
    site: Optional[str] = None,
    validate: bool = True,
    out_dir: Optional[str | Path] = None,
    export_prefix: str = "cut_plan",
    show_plot: bool = False,
    plot_style: Optional[PlotStyle] = None,
) -> RunResult:
    """
    Optimize end-to-end; optionally validate, export CSV + JSON and build a figure.
    """
    plan = optimize_pieces(pieces, config, title=title, project=project, client=client, site=site)

    issues: List[ValidationIssue] = []
    if validate:
        issues = validate_plan(plan, expected_pieces=naive_bar_count(pieces))
        raise_on_errors(issues)

    if out_dir is not None:
        from .io_csv import export_all
        from .io_json import save_plan_json

        out = Path(out_dir)
        export_all(plan, out_dir=out, prefix=export_prefix)
        save_plan_json(plan, out / f"{export_prefix}.json")

    fig = None
    if show_plot and plan.bars:
        from .plotting import PlotStyle, plot_plan

        fig = plot_plan(plan, style=plot_style or PlotStyle())

    return RunResult(plan=plan, issues=issues, figure=fig)
