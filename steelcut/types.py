# steelcut/types.py
# Core data structures for 1D bar cutting (structural profiles on stock bars).
# Keep this file dependency-light so it can be imported everywhere.

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from .errors import InvalidInput
from .utils import is_number, round2


# ----------------------------
# Inputs
# ----------------------------

@dataclass(frozen=True)
class Piece:
    """
    A requested piece (one row of a material takeoff).
    Values are not checked here: expand_pieces / validate.py report every bad row at once.
    """
    position: str
    tag: str
    phase: str
    profile: str
    length_mm: float
    quantity: int = 1
    material: str = ""
    unit_weight_kg: float = 0.0

    @property
    def label(self) -> str:
        return self.position or self.tag or self.profile or "piece"


@dataclass(frozen=True)
class UnitPiece:
    """A single physical piece (expanded from quantity)."""
    uid: str              # unique id, e.g. "189#3"
    source_index: int     # index of the originating Piece in the input list
    position: str
    tag: str
    phase: str
    profile: str
    length_mm: float
    material: str
    unit_weight_kg: float
    quantity: int = 1


def piece_is_valid(piece: Piece) -> bool:
    """Positive numeric length, non-negative int quantity, non-negative weight."""
    if not is_number(piece.length_mm) or piece.length_mm <= 0:
        return False
    if isinstance(piece.quantity, bool) or not isinstance(piece.quantity, int) or piece.quantity < 0:
        return False
    if not is_number(piece.unit_weight_kg) or piece.unit_weight_kg < 0:
        return False
    return True


def expand_pieces(pieces: Sequence[Piece]) -> List[UnitPiece]:
    """Expand quantity into unit pieces (stable order). Quantity 0 yields nothing."""
    bad = [(i, p) for i, p in enumerate(pieces) if not piece_is_valid(p)]
    if bad:
        raise InvalidInput("Invalid piece request(s)", bad)

    out: List[UnitPiece] = []
    for i, p in enumerate(pieces):
        for k in range(1, p.quantity + 1):
            out.append(
                UnitPiece(
                    uid=f"{p.label}#{k}",
                    source_index=i,
                    position=p.position,
                    tag=p.tag,
                    phase=p.phase,
                    profile=p.profile,
                    length_mm=p.length_mm,
                    material=p.material,
                    unit_weight_kg=p.unit_weight_kg,
                )
            )
    return out


# ----------------------------
# Outputs / plan objects
# ----------------------------

class BarOrigin(str, Enum):
    NEW = "New"
    STOCK = "Stock"


@dataclass(frozen=True)
class PlacedPiece:
    """A unit piece assigned to a bar; order is the 1-based cut sequence inside the bar."""
    piece: UnitPiece
    order: int


# Float noise allowed when deciding fit; real overflows (>= 0.001 mm) are rejected.
FIT_TOLERANCE_MM = 1e-6


@dataclass(frozen=True)
class Bar:
    """
    One stock bar and the pieces cut from it.
    used / leftover / utilization are always derived from the cuts. Fit is decided
    on raw lengths; only the reported fields are rounded to 2 decimals.
    """
    number: int
    total_length_mm: float
    origin: BarOrigin = BarOrigin.NEW
    cuts: Tuple[PlacedPiece, ...] = ()

    @property
    def raw_used_mm(self) -> float:
        return sum(c.piece.length_mm for c in self.cuts)

    @property
    def used_length_mm(self) -> float:
        return round2(self.raw_used_mm)

    @property
    def leftover_mm(self) -> float:
        return round2(self.total_length_mm - self.raw_used_mm)

    @property
    def utilization_pct(self) -> float:
        if self.total_length_mm <= 0:
            return 0.0
        return round2(self.raw_used_mm / self.total_length_mm * 100)

    @property
    def piece_count(self) -> int:
        return len(self.cuts)

    @property
    def weight_kg(self) -> float:
        return round2(sum(c.piece.unit_weight_kg for c in self.cuts))

    def fits(self, piece: UnitPiece) -> bool:
        return self.total_length_mm - self.raw_used_mm - piece.length_mm >= -FIT_TOLERANCE_MM

    def with_piece(self, piece: UnitPiece) -> "Bar":
        """Return a new Bar with piece appended as the next cut."""
        if not self.fits(piece):
            raise ValueError(
                f"Piece {piece.uid} ({piece.length_mm} mm) does not fit bar {self.number} "
                f"(leftover {self.leftover_mm} mm)"
            )
        placed = PlacedPiece(piece=piece, order=len(self.cuts) + 1)
        return replace(self, cuts=self.cuts + (placed,))


@dataclass(frozen=True)
class PlanStats:
    bar_count: int = 0
    piece_count: int = 0
    total_weight_kg: float = 0.0
    total_waste_mm: float = 0.0
    overall_utilization_pct: float = 0.0


@dataclass(frozen=True)
class Economy:
    """Optimized bar count vs. the naive one-bar-per-piece baseline."""
    naive_bar_count: int = 0
    optimized_bar_count: int = 0
    bars_saved: int = 0
    percent_saved: float = 0.0


@dataclass(frozen=True)
class CutPlan:
    """Full cut plan: bars + aggregate statistics + descriptive metadata."""
    title: str
    stock_length_mm: float
    bars: Tuple[Bar, ...] = ()
    stats: PlanStats = field(default_factory=PlanStats)
    economy: Economy = field(default_factory=Economy)
    geometry: str = ""
    project: Optional[str] = None
    client: Optional[str] = None
    site: Optional[str] = None
    waste_tolerance_pct: float = 5.0
    algorithm: str = "FFD_BestFit"
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def bar_count(self) -> int:
        return self.stats.bar_count

    @property
    def piece_count(self) -> int:
        return self.stats.piece_count

    @property
    def total_weight_kg(self) -> float:
        return self.stats.total_weight_kg

    @property
    def total_waste_mm(self) -> float:
        return self.stats.total_waste_mm

    @property
    def overall_utilization_pct(self) -> float:
        return self.stats.overall_utilization_pct

    @property
    def waste_pct(self) -> float:
        if not self.bars:
            return 0.0
        return round2(100 - self.stats.overall_utilization_pct)

    @property
    def within_tolerance(self) -> bool:
        return self.waste_pct <= self.waste_tolerance_pct

    def iter_cuts(self) -> Iterable[Tuple[Bar, PlacedPiece]]:
        for bar in self.bars:
            for cut in bar.cuts:
                yield bar, cut
