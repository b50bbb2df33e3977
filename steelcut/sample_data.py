# steelcut/sample_data.py
# Seeded random piece lists for quick benchmarking and invariant checks.
# Mixes long members (columns / beams), medium braces and short clips.

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Tuple

from .types import Piece

PROFILES: Tuple[Tuple[str, float], ...] = (
    # (profile label, kg per metre)
    ("W200X35.9", 35.9),
    ("W150X13", 13.0),
    ("L51X4.7", 3.63),
    ("L102X102X6.35", 9.82),
    ("C152X12.2", 12.2),
)


@dataclass(frozen=True)
class RandomPiecesConfig:
    seed: int = 123
    n_unique: int = 25
    qty_range: Tuple[int, int] = (1, 6)
    stock_length_mm: int = 6000
    n_profiles: int = 3

    # probability a piece is "long" (beams / columns)
    p_long: float = 0.25
    long_range_pct: Tuple[float, float] = (0.55, 1.0)

    # probability a piece is a short clip / stiffener
    p_short: float = 0.30
    short_range_mm: Tuple[int, int] = (80, 450)

    mid_range_pct: Tuple[float, float] = (0.10, 0.55)


def generate_random_pieces(cfg: RandomPiecesConfig) -> List[Piece]:
    """
    Every length fits cfg.stock_length_mm, so the result is always a valid job.
    Lengths are whole millimetres, weights rounded to 2 decimals.
    """
    rnd = random.Random(cfg.seed)
    profiles = PROFILES[: max(1, min(cfg.n_profiles, len(PROFILES)))]
    L = cfg.stock_length_mm
    pieces: List[Piece] = []

    for i in range(cfg.n_unique):
        r = rnd.random()
        if r < cfg.p_long:
            length = rnd.randint(int(L * cfg.long_range_pct[0]), int(L * cfg.long_range_pct[1]))
        elif r < cfg.p_long + cfg.p_short:
            length = rnd.randint(*cfg.short_range_mm)
        else:
            length = rnd.randint(int(L * cfg.mid_range_pct[0]), int(L * cfg.mid_range_pct[1]))

        profile, kg_per_m = profiles[rnd.randrange(len(profiles))]
        pieces.append(
            Piece(
                position=f"P{i + 1:02d}",
                tag=f"T{i + 1:02d}",
                phase=f"F{rnd.randint(1, 3)}",
                profile=profile,
                length_mm=length,
                quantity=rnd.randint(*cfg.qty_range),
                material="A572-50",
                unit_weight_kg=round(length / 1000 * kg_per_m, 2),
            )
        )

    return pieces
