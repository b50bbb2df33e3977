# steelcut/io_csv.py
# CSV import/export helpers:
# - read a piece list (takeoff) from CSV
# - export one-row-per-bar summary
# - export the cut list (one row per piece, in cut order)
#
# CSV pieces format (header required, extra columns ignored):
#   position,tag,phase,profile,length_mm,quantity,material,unit_weight_kg

from __future__ import annotations

import csv
from pathlib import Path
from typing import List

from .io_json import piece_from_dict
from .types import CutPlan, Piece

REQUIRED_PIECE_COLUMNS = ("profile", "length_mm", "quantity")


def read_pieces_csv(path: str | Path) -> List[Piece]:
    """
    Rows with an empty length are skipped; everything else is passed on as read
    so that the validator can report bad values together.
    """
    path = Path(path)
    pieces: List[Piece] = []
    with path.open("r", newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        header = [h.strip().lower() for h in (reader.fieldnames or [])]
        missing = [c for c in REQUIRED_PIECE_COLUMNS if c not in header]
        if missing:
            raise ValueError(f"CSV is missing required columns: {missing}")
        for row in reader:
            row = {(k or "").strip().lower(): (v or "").strip() for k, v in row.items()}
            if not row.get("length_mm"):
                continue
            if not row.get("quantity"):
                row["quantity"] = "1"
            if not row.get("unit_weight_kg"):
                row["unit_weight_kg"] = "0"
            pieces.append(piece_from_dict(row))
    return pieces


def export_bars_csv(plan: CutPlan, path: str | Path) -> None:
    """One row per bar (for purchasing / verification)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fieldnames = [
        "bar",
        "origin",
        "total_length_mm",
        "used_length_mm",
        "leftover_mm",
        "utilization_pct",
        "num_pieces",
        "weight_kg",
    ]

    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        for bar in plan.bars:
            w.writerow(
                {
                    "bar": bar.number,
                    "origin": bar.origin.value,
                    "total_length_mm": bar.total_length_mm,
                    "used_length_mm": bar.used_length_mm,
                    "leftover_mm": bar.leftover_mm,
                    "utilization_pct": f"{bar.utilization_pct:.2f}",
                    "num_pieces": bar.piece_count,
                    "weight_kg": f"{bar.weight_kg:.2f}",
                }
            )


def export_cuts_csv(plan: CutPlan, path: str | Path) -> None:
    """One row per cut piece, grouped by bar, in cut order (shop floor list)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fieldnames = [
        "bar",
        "order",
        "uid",
        "position",
        "tag",
        "phase",
        "profile",
        "length_mm",
        "material",
        "unit_weight_kg",
    ]

    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        for bar, cut in plan.iter_cuts():
            p = cut.piece
            w.writerow(
                {
                    "bar": bar.number,
                    "order": cut.order,
                    "uid": p.uid,
                    "position": p.position,
                    "tag": p.tag,
                    "phase": p.phase,
                    "profile": p.profile,
                    "length_mm": p.length_mm,
                    "material": p.material,
                    "unit_weight_kg": p.unit_weight_kg,
                }
            )


def export_all(plan: CutPlan, out_dir: str | Path, prefix: str = "cut_plan") -> None:
    """
    Export bar summary and cut list into out_dir.
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    export_bars_csv(plan, out_dir / f"{prefix}_bars.csv")
    export_cuts_csv(plan, out_dir / f"{prefix}_cuts.csv")
