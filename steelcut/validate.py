# steelcut/validate.py
# Validation utilities:
# - pre-checks on piece requests (bad values, pieces longer than the stock bar)
# - post-checks on a finished plan (length balance, numbering, cut order)
#
# Pre-checks never mutate and never stop at the first problem: every offending
# piece is reported so a caller can show the full list before optimizing.

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Set, Tuple

from .errors import PieceTooLong
from .types import CutPlan, Piece, piece_is_valid

BALANCE_TOLERANCE_MM = 0.01


@dataclass(frozen=True)
class ValidationIssue:
    level: str   # "ERROR" or "WARN"
    message: str
    piece_index: Optional[int] = None
    piece_label: Optional[str] = None
    bar_number: Optional[int] = None


def find_invalid_pieces(pieces: Sequence[Piece]) -> List[Tuple[int, Piece]]:
    return [(i, p) for i, p in enumerate(pieces) if not piece_is_valid(p)]


def find_too_long_pieces(pieces: Sequence[Piece], stock_length_mm: float) -> List[Tuple[int, Piece]]:
    """Pieces with length strictly greater than the stock bar (equal length is fine)."""
    out: List[Tuple[int, Piece]] = []
    for i, p in enumerate(pieces):
        if piece_is_valid(p) and p.length_mm > stock_length_mm:
            out.append((i, p))
    return out


def check_pieces(pieces: Sequence[Piece], stock_length_mm: float) -> List[ValidationIssue]:
    """
    Non-raising pre-check of the whole piece list.
    Returns a list of issues (empty if OK).
    """
    issues: List[ValidationIssue] = []
    for i, p in find_invalid_pieces(pieces):
        issues.append(
            ValidationIssue(
                level="ERROR",
                message=f"Invalid values: length={p.length_mm!r}, quantity={p.quantity!r}, weight={p.unit_weight_kg!r}",
                piece_index=i,
                piece_label=p.label,
            )
        )
    for i, p in find_too_long_pieces(pieces, stock_length_mm):
        issues.append(
            ValidationIssue(
                level="ERROR",
                message=f"Length {p.length_mm} mm exceeds stock bar {stock_length_mm} mm",
                piece_index=i,
                piece_label=p.label,
            )
        )
    for i, p in enumerate(pieces):
        if piece_is_valid(p) and p.quantity == 0:
            issues.append(
                ValidationIssue(level="WARN", message="Quantity 0, piece will not be cut", piece_index=i, piece_label=p.label)
            )
    return issues


def ensure_pieces_fit(pieces: Sequence[Piece], stock_length_mm: float) -> None:
    too_long = find_too_long_pieces(pieces, stock_length_mm)
    if too_long:
        raise PieceTooLong(too_long, stock_length_mm)


def validate_plan(plan: CutPlan, expected_pieces: Optional[int] = None) -> List[ValidationIssue]:
    """
    Validate the invariants of a finished plan.
    Returns a list of issues (empty if OK).
    """
    issues: List[ValidationIssue] = []
    seen_uids: Set[Tuple[int, str]] = set()

    for idx, bar in enumerate(plan.bars, start=1):
        if bar.number != idx:
            issues.append(
                ValidationIssue(level="ERROR", message=f"Bar numbering broken: expected {idx}, got {bar.number}", bar_number=bar.number)
            )
        if bar.total_length_mm != plan.stock_length_mm:
            issues.append(
                ValidationIssue(
                    level="ERROR",
                    message=f"Bar length {bar.total_length_mm} differs from stock {plan.stock_length_mm}",
                    bar_number=bar.number,
                )
            )
        # leftover is reported to 0.01 mm
        balance = sum(c.piece.length_mm for c in bar.cuts) + bar.leftover_mm
        if not math.isclose(balance, bar.total_length_mm, abs_tol=BALANCE_TOLERANCE_MM):
            issues.append(
                ValidationIssue(
                    level="ERROR",
                    message=f"Length balance broken: pieces + leftover = {balance}, bar = {bar.total_length_mm}",
                    bar_number=bar.number,
                )
            )
        if bar.leftover_mm < 0:
            issues.append(ValidationIssue(level="ERROR", message=f"Negative leftover {bar.leftover_mm}", bar_number=bar.number))
        if not (0 <= bar.utilization_pct <= 100):
            issues.append(
                ValidationIssue(level="ERROR", message=f"Utilization out of range: {bar.utilization_pct}", bar_number=bar.number)
            )
        orders = [c.order for c in bar.cuts]
        if orders != list(range(1, len(orders) + 1)):
            issues.append(ValidationIssue(level="ERROR", message=f"Cut order not sequential: {orders}", bar_number=bar.number))
        for c in bar.cuts:
            # uid alone repeats when two rows share a label
            key = (c.piece.source_index, c.piece.uid)
            if key in seen_uids:
                issues.append(
                    ValidationIssue(level="ERROR", message=f"Piece {c.piece.uid} assigned twice", bar_number=bar.number)
                )
            seen_uids.add(key)
        if not bar.cuts:
            issues.append(ValidationIssue(level="WARN", message="Empty bar", bar_number=bar.number))

    if plan.stats.bar_count != len(plan.bars):
        issues.append(ValidationIssue(level="ERROR", message="Stats bar_count does not match bars"))
    if plan.stats.piece_count != len(seen_uids):
        issues.append(ValidationIssue(level="ERROR", message="Stats piece_count does not match placed pieces"))
    if expected_pieces is not None and len(seen_uids) != expected_pieces:
        issues.append(
            ValidationIssue(level="ERROR", message=f"Placed {len(seen_uids)} pieces, expected {expected_pieces}")
        )

    return issues


def raise_on_errors(issues: List[ValidationIssue]) -> None:
    errs = [i for i in issues if i.level.upper() == "ERROR"]
    if errs:
        msg = "\n".join(
            f"[{e.level}] bar={e.bar_number} piece={e.piece_label} :: {e.message}" for e in errs
        )
        raise ValueError("Validation failed:\n" + msg)
