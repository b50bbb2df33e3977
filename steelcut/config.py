# steelcut/config.py
# Centralized defaults and configuration helpers.
# Keeps "magic numbers" (stock lengths, tolerance, safety bound) in one place.

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .errors import InvalidInput
from .utils import is_number


class Algorithm(str, Enum):
    FFD_BEST_FIT = "FFD_BestFit"


@dataclass(frozen=True)
class Defaults:
    # Commercial stock bar lengths for structural profiles (mm)
    stock_lengths_mm: Tuple[int, ...] = (6000, 12000)
    default_stock_length_mm: int = 6000

    # Acceptable waste (%), descriptive only
    default_waste_tolerance_pct: float = 5.0

    # Safety cap on expanded unit pieces per run
    default_max_unit_pieces: int = 100_000

    default_algorithm: Algorithm = Algorithm.FFD_BEST_FIT

    # Label used when a piece list has no representative profile
    mixed_geometry_label: str = "Mixed"
    max_distinct_profiles: int = 5


DEFAULTS = Defaults()


@dataclass(frozen=True)
class OptimizationConfig:
    stock_length_mm: int = DEFAULTS.default_stock_length_mm
    waste_tolerance_pct: float = DEFAULTS.default_waste_tolerance_pct
    algorithm: Algorithm = DEFAULTS.default_algorithm
    max_unit_pieces: int = field(default=DEFAULTS.default_max_unit_pieces)

    def __post_init__(self):
        if self.stock_length_mm not in DEFAULTS.stock_lengths_mm:
            raise InvalidInput(
                f"stock_length_mm must be one of {DEFAULTS.stock_lengths_mm}, got {self.stock_length_mm}"
            )
        if not is_number(self.waste_tolerance_pct) or self.waste_tolerance_pct < 0:
            raise InvalidInput(f"waste_tolerance_pct must be >= 0, got {self.waste_tolerance_pct}")
        try:
            algo = Algorithm(self.algorithm)
        except ValueError:
            raise InvalidInput(f"Unsupported algorithm: {self.algorithm}") from None
        # normalise plain strings like "FFD_BestFit" to the enum
        object.__setattr__(self, "algorithm", algo)
        if isinstance(self.max_unit_pieces, bool) or not isinstance(self.max_unit_pieces, int) or self.max_unit_pieces <= 0:
            raise InvalidInput(f"max_unit_pieces must be a positive int, got {self.max_unit_pieces}")


def make_config(
    stock_length_mm: Optional[int] = None,
    *,
    waste_tolerance_pct: Optional[float] = None,
    algorithm: Optional[str] = None,
    max_unit_pieces: Optional[int] = None,
) -> OptimizationConfig:
    """
    Convenience factory filling unset values from DEFAULTS.
    """
    return OptimizationConfig(
        stock_length_mm=int(stock_length_mm if stock_length_mm is not None else DEFAULTS.default_stock_length_mm),
        waste_tolerance_pct=float(
            waste_tolerance_pct if waste_tolerance_pct is not None else DEFAULTS.default_waste_tolerance_pct
        ),
        algorithm=algorithm if algorithm is not None else DEFAULTS.default_algorithm,
        max_unit_pieces=int(max_unit_pieces if max_unit_pieces is not None else DEFAULTS.default_max_unit_pieces),
    )


def parse_stock_length(text: str) -> int:
    """
    Parse '6000' / '6000mm' / '6m' / '12 m' -> length in mm.
    """
    s = str(text).strip().lower().replace(" ", "").replace(",", ".")
    try:
        if s.endswith("mm"):
            value = float(s[:-2])
        elif s.endswith("m"):
            value = float(s[:-1]) * 1000
        else:
            value = float(s)
    except ValueError:
        raise ValueError(f"Cannot parse stock length: {text!r}") from None
    if not is_number(value):
        raise ValueError(f"Cannot parse stock length: {text!r}")
    return int(round(value))
