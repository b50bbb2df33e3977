# steelcut/io_json.py
# Load a cutting job from JSON and dump finished plans back to JSON.
#
# Expected job shape:
# {
#   "title": "Lista F1", "project": "...", "client": "...", "site": "...",
#   "settings": {"stock_length_mm": 6000, "waste_tolerance_pct": 5},
#   "pieces": [
#     {"position": "189", "tag": "V1", "phase": "F1", "profile": "W200X35.9",
#      "length_mm": 4250, "quantity": 2, "material": "A572-50", "unit_weight_kg": 152.6},
#     ...
#   ]
# }
# "length", "qty"/"count" and "weight" are accepted as aliases.

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .config import OptimizationConfig, make_config, parse_stock_length
from .types import CutPlan, Piece
from .utils import to_jsonable


@dataclass(frozen=True)
class JsonLoadResult:
    pieces: List[Piece]
    config: OptimizationConfig
    title: str = "Cut plan"
    project: Optional[str] = None
    client: Optional[str] = None
    site: Optional[str] = None


def _number(value: Any) -> Any:
    """Numbers pass through, numeric strings become float, anything else stays (validator reports it)."""
    if isinstance(value, str):
        try:
            return float(value.replace(",", "."))
        except ValueError:
            return value
    return value


def _quantity(value: Any) -> Any:
    value = _number(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def piece_from_dict(item: Mapping[str, Any]) -> Piece:
    if "length_mm" in item:
        length = item["length_mm"]
    elif "length" in item:
        length = item["length"]
    else:
        raise ValueError(f"Piece missing length_mm: {dict(item)}")

    qty = item.get("quantity", item.get("qty", item.get("count", 1)))
    weight = item.get("unit_weight_kg", item.get("weight", 0.0))

    return Piece(
        position=str(item.get("position") or ""),
        tag=str(item.get("tag") or ""),
        phase=str(item.get("phase") or ""),
        profile=str(item.get("profile") or ""),
        length_mm=_number(length),
        quantity=_quantity(qty),
        material=str(item.get("material") or ""),
        unit_weight_kg=_number(weight) if weight is not None else 0.0,
    )


def load_job_dict(data: Mapping[str, Any]) -> JsonLoadResult:
    items = data.get("pieces")
    if not isinstance(items, list):
        raise ValueError("JSON job needs a 'pieces' list")

    settings = data.get("settings") or {}
    stock = settings.get("stock_length_mm")
    if isinstance(stock, str):
        stock = parse_stock_length(stock)
    config = make_config(
        stock,
        waste_tolerance_pct=settings.get("waste_tolerance_pct"),
        algorithm=settings.get("algorithm"),
        max_unit_pieces=settings.get("max_unit_pieces"),
    )

    return JsonLoadResult(
        pieces=[piece_from_dict(it) for it in items],
        config=config,
        title=str(data.get("title") or "Cut plan"),
        project=data.get("project"),
        client=data.get("client"),
        site=data.get("site"),
    )


def load_job_json(path: str | Path) -> JsonLoadResult:
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    return load_job_dict(data)


def plan_to_dict(plan: CutPlan) -> Dict[str, Any]:
    """
    Convert a CutPlan to a JSON-friendly dict for persistence / report generation.
    """
    out: Dict[str, Any] = {
        "title": plan.title,
        "project": plan.project,
        "client": plan.client,
        "site": plan.site,
        "geometry": plan.geometry,
        "stock_length_mm": plan.stock_length_mm,
        "algorithm": plan.algorithm,
        "waste_tolerance_pct": plan.waste_tolerance_pct,
        "created_at": plan.created_at,
        "totals": {
            "bar_count": plan.bar_count,
            "piece_count": plan.piece_count,
            "total_weight_kg": plan.total_weight_kg,
            "total_waste_mm": plan.total_waste_mm,
            "overall_utilization_pct": plan.overall_utilization_pct,
            "waste_pct": plan.waste_pct,
            "within_tolerance": plan.within_tolerance,
        },
        "economy": plan.economy,
        "bars": [],
    }

    for bar in plan.bars:
        out["bars"].append(
            {
                "number": bar.number,
                "origin": bar.origin,
                "total_length_mm": bar.total_length_mm,
                "used_length_mm": bar.used_length_mm,
                "leftover_mm": bar.leftover_mm,
                "utilization_pct": bar.utilization_pct,
                "pieces": [
                    {
                        "order": c.order,
                        "uid": c.piece.uid,
                        "position": c.piece.position,
                        "tag": c.piece.tag,
                        "phase": c.piece.phase,
                        "profile": c.piece.profile,
                        "length_mm": c.piece.length_mm,
                        "material": c.piece.material,
                        "unit_weight_kg": c.piece.unit_weight_kg,
                    }
                    for c in bar.cuts
                ],
            }
        )

    return to_jsonable(out)


def save_plan_json(plan: CutPlan, path: str | Path, *, indent: int = 2) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(plan_to_dict(plan), f, ensure_ascii=False, indent=indent)
