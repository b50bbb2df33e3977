# steelcut/__init__.py
"""
steelcut: 1D cutting-stock optimizer for structural profiles.

Takes a material takeoff (pieces with profile, length, quantity, weight) and
packs it onto 6000 mm or 12000 mm stock bars:
  - expand quantities into unit pieces
  - sort longest first (FFD, stable)
  - Best-Fit: each piece goes to the bar left with the smallest leftover,
    lowest bar number on ties, new bar when nothing fits
  - per-bar leftover / utilization and plan totals, rounded to 2 decimals
  - economy vs. one bar per piece, dominant profile for plan metadata

The engine is pure and deterministic; CSV/JSON, plotting and CLI live in
separate modules and are never needed to build a plan.
"""

from .types import (
    Piece,
    UnitPiece,
    expand_pieces,
    BarOrigin,
    PlacedPiece,
    Bar,
    PlanStats,
    Economy,
    CutPlan,
)

from .errors import (
    CutPlanError,
    InvalidInput,
    PieceTooLong,
    TooManyPieces,
)

from .config import (
    Algorithm,
    DEFAULTS,
    OptimizationConfig,
    make_config,
)

from .metrics import (
    BarMetrics,
    compute_bar_metrics,
    compute_plan_stats,
    compute_economy,
)

from .geometry import (
    MIXED_GEOMETRY,
    detect_geometry,
    group_by_profile,
)

from .validate import (
    ValidationIssue,
    check_pieces,
    ensure_pieces_fit,
    validate_plan,
)

from .solver_best_fit import (
    sort_pieces,
    pack_best_fit,
    solve_ffd_best_fit,
)

from .run import (
    RunResult,
    optimize_pieces,
    optimize_by_profile,
    run_cut_plan,
)

__all__ = [
    # types
    "Piece",
    "UnitPiece",
    "expand_pieces",
    "BarOrigin",
    "PlacedPiece",
    "Bar",
    "PlanStats",
    "Economy",
    "CutPlan",
    # errors
    "CutPlanError",
    "InvalidInput",
    "PieceTooLong",
    "TooManyPieces",
    # config
    "Algorithm",
    "DEFAULTS",
    "OptimizationConfig",
    "make_config",
    # metrics
    "BarMetrics",
    "compute_bar_metrics",
    "compute_plan_stats",
    "compute_economy",
    # geometry
    "MIXED_GEOMETRY",
    "detect_geometry",
    "group_by_profile",
    # validation
    "ValidationIssue",
    "check_pieces",
    "ensure_pieces_fit",
    "validate_plan",
    # solver
    "sort_pieces",
    "pack_best_fit",
    "solve_ffd_best_fit",
    # runner
    "RunResult",
    "optimize_pieces",
    "optimize_by_profile",
    "run_cut_plan",
]
