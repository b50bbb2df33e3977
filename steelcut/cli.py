# steelcut/cli.py
# Command line runner:
# - reads pieces from CSV or a JSON job
# - one plan for the whole list, or one per profile (--by-profile)
# - prints per-bar lines + totals + economy
# - optional CSV/JSON export folder and PNG bar diagram
#
# Run:
#   python -m steelcut --pieces pieces.csv --stock 12000 --out out/
#   python -m steelcut --pieces job.json --by-profile --png plan.png

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Dict, List, Optional

from .config import DEFAULTS, make_config, parse_stock_length
from .io_csv import export_all, read_pieces_csv
from .io_json import load_job_json, save_plan_json
from .logger import get_logger, set_enabled
from .run import optimize_by_profile, optimize_pieces
from .types import CutPlan


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="1D stock bar cutting optimizer (FFD + Best-Fit)")
    p.add_argument("--pieces", type=str, required=True, help="Path to pieces CSV or JSON job")
    p.add_argument("--stock", type=str, default="", help="Stock bar length, e.g. 6000 or 12m (overrides JSON settings)")
    p.add_argument("--tolerance", type=float, default=None, help="Acceptable waste in %% (descriptive)")
    p.add_argument("--title", type=str, default="", help="Plan title")
    p.add_argument("--by-profile", action="store_true", help="Optimize each profile separately")
    p.add_argument("--out", type=str, default="", help="Output directory for CSV + JSON exports (optional)")
    p.add_argument("--prefix", type=str, default="cut_plan", help="Export filename prefix")
    p.add_argument("--png", type=str, default="", help="Save bar diagram as PNG (optional)")
    p.add_argument("--no_labels", action="store_true", help="Hide piece labels in diagram")
    p.add_argument("--quiet", action="store_true", help="Silence run diagnostics")
    return p


def print_plan(plan: CutPlan) -> None:
    print(f"== {plan.title} [{plan.geometry}]")
    print(f"Bars used: {plan.bar_count} x {plan.stock_length_mm:g} mm, pieces: {plan.piece_count}")
    print(f"Total weight: {plan.total_weight_kg:,.2f} kg")
    print(f"Total waste: {plan.total_waste_mm:,.2f} mm ({plan.waste_pct:.2f}%)")
    print(f"Overall utilization: {plan.overall_utilization_pct:.2f}%")
    eco = plan.economy
    print(f"Economy: {eco.naive_bar_count} naive -> {eco.optimized_bar_count} bars, saved {eco.bars_saved} ({eco.percent_saved:.2f}%)")
    for bar in plan.bars:
        lengths = " + ".join(f"{c.piece.length_mm:g}" for c in bar.cuts)
        print(f"- Bar {bar.number}: {lengths} | leftover {bar.leftover_mm:g} mm | {bar.utilization_pct:.2f}%")


def _load(args: argparse.Namespace, src: Path):
    """Pieces, config, title and plan metadata from the input file plus CLI overrides."""
    title = args.title.strip()
    meta: Dict[str, Optional[str]] = {}
    if src.suffix.lower() == ".json":
        job = load_job_json(src)
        pieces = job.pieces
        stock = job.config.stock_length_mm
        tolerance = job.config.waste_tolerance_pct
        title = title or job.title
        meta = {"project": job.project, "client": job.client, "site": job.site}
    else:
        pieces = read_pieces_csv(src)
        stock = DEFAULTS.default_stock_length_mm
        tolerance = DEFAULTS.default_waste_tolerance_pct

    if args.stock.strip():
        stock = parse_stock_length(args.stock)
    if args.tolerance is not None:
        tolerance = args.tolerance

    config = make_config(stock, waste_tolerance_pct=tolerance)
    return pieces, config, title or "Cut plan", meta


def main(argv: Optional[List[str]] = None) -> None:
    args = build_argparser().parse_args(argv)
    if args.quiet:
        set_enabled(False)

    src = Path(args.pieces)
    if not src.exists():
        raise SystemExit(f"Pieces file not found: {src}")

    # CutPlanError is a ValueError: bad files, settings and --stock all exit with 2
    try:
        pieces, config, title, meta = _load(args, src)
        if args.by_profile:
            plans = optimize_by_profile(pieces, config, title=title, **meta)
        else:
            plan = optimize_pieces(pieces, config, title=title, **meta)
            plans = {plan.geometry: plan}
    except ValueError as e:
        get_logger().error(str(e))
        raise SystemExit(2)

    for i, plan in enumerate(plans.values(), start=1):
        print_plan(plan)
        suffix = f"_{i}" if len(plans) > 1 else ""

        if args.out.strip():
            outp = Path(args.out.strip())
            export_all(plan, out_dir=outp, prefix=args.prefix + suffix)
            save_plan_json(plan, outp / f"{args.prefix}{suffix}.json")
            print(f"Exported CSV + JSON to: {outp}")

        if args.png.strip() and plan.bars:
            from .plotting import PlotStyle, save_plan_png

            png = Path(args.png.strip())
            png_path = png.with_name(f"{png.stem}{suffix}{png.suffix}")
            save_plan_png(plan, str(png_path), style=PlotStyle(show_labels=not args.no_labels))
            print(f"Cut plan diagram saved to: {png_path}")


if __name__ == "__main__":
    main()
