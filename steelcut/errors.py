# steelcut/errors.py
# Error taxonomy for the cutting engine.
# All errors derive from ValueError: they describe bad input, never a broken process.

from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence, Tuple

if TYPE_CHECKING:
    from .types import Piece


def _describe(index: int, piece: "Piece") -> str:
    return f"#{index} {piece.label} ({piece.profile}, {piece.length_mm} mm x {piece.quantity})"


class CutPlanError(ValueError):
    """Base class for every error raised while building a cut plan."""


class InvalidInput(CutPlanError):
    """
    Non-positive length or negative / non-integer quantity in one or more piece requests.
    Also raised for an invalid OptimizationConfig (then `pieces` is empty).
    """

    def __init__(self, message: str, pieces: Sequence[Tuple[int, "Piece"]] = ()):
        self.pieces: List[Tuple[int, "Piece"]] = list(pieces)
        if self.pieces:
            message = message + ": " + "; ".join(_describe(i, p) for i, p in self.pieces)
        super().__init__(message)


class PieceTooLong(CutPlanError):
    """One or more pieces exceed the stock bar length. Lists every offender."""

    def __init__(self, pieces: Sequence[Tuple[int, "Piece"]], stock_length_mm: float):
        self.pieces: List[Tuple[int, "Piece"]] = list(pieces)
        self.stock_length_mm = stock_length_mm
        details = "; ".join(_describe(i, p) for i, p in self.pieces)
        super().__init__(
            f"{len(self.pieces)} piece(s) longer than stock bar {stock_length_mm} mm: {details}"
        )


class TooManyPieces(CutPlanError):
    """Expanded unit-piece count exceeds the configured safety bound."""

    def __init__(self, count: int, limit: int):
        self.count = count
        self.limit = limit
        super().__init__(f"Too many unit pieces: {count} > limit {limit}")
