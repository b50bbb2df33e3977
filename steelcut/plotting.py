# steelcut/plotting.py
# Minimal matplotlib visualization: every bar of a plan as one horizontal strip,
# pieces in cut order from the left, leftover hatched at the right end.

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from .types import Bar, CutPlan


@dataclass(frozen=True)
class PlotStyle:
    show_labels: bool = True
    show_lengths: bool = True
    show_leftover: bool = True
    font_size: int = 7
    bar_height: float = 0.6
    row_height_in: float = 0.45  # figure inches per bar row
    width_in: float = 12.0


def _hash_color(key: str) -> Tuple[float, float, float]:
    """Deterministic pastel-ish color from a string (FNV-1a)."""
    h = 2166136261
    for ch in key.encode("utf-8"):
        h ^= ch
        h *= 16777619
        h &= 0xFFFFFFFF
    r = 0.45 + ((h >> 0) & 0xFF) / 255 * 0.5
    g = 0.45 + ((h >> 8) & 0xFF) / 255 * 0.5
    b = 0.45 + ((h >> 16) & 0xFF) / 255 * 0.5
    return (r, g, b)


def _bar_label(bar: Bar) -> str:
    return f"#{bar.number}  {bar.utilization_pct:.2f}%"


def plot_plan(
    plan: CutPlan,
    style: Optional[PlotStyle] = None,
    figsize: Optional[Tuple[float, float]] = None,
) -> plt.Figure:
    """
    Draw all bars of the plan in one figure (bar 1 on top).
    """
    style = style or PlotStyle()

    n = len(plan.bars)
    if n == 0:
        raise ValueError("Plan has no bars to plot")

    if figsize is None:
        figsize = (style.width_in, max(2.0, 1.0 + style.row_height_in * n))

    fig, ax = plt.subplots(figsize=figsize)
    L = plan.stock_length_mm
    h = style.bar_height

    for row, bar in enumerate(plan.bars):
        y = n - 1 - row - h / 2
        ax.add_patch(Rectangle((0, y), bar.total_length_mm, h, fill=False, linewidth=1.0))

        x = 0.0
        for cut in bar.cuts:
            p = cut.piece
            ax.add_patch(
                Rectangle((x, y), p.length_mm, h, facecolor=_hash_color(p.profile), edgecolor="black", linewidth=0.6)
            )
            lines = []
            if style.show_labels:
                lines.append(p.position or p.tag or p.uid)
            if style.show_lengths:
                lines.append(f"{p.length_mm:g}")
            if lines:
                ax.text(x + p.length_mm / 2, y + h / 2, "\n".join(lines), ha="center", va="center", fontsize=style.font_size)
            x += p.length_mm

        if style.show_leftover and bar.leftover_mm > 0:
            ax.add_patch(
                Rectangle((x, y), bar.leftover_mm, h, facecolor="white", edgecolor="gray", hatch="//", linewidth=0.4)
            )
            if style.show_lengths:
                ax.text(x + bar.leftover_mm / 2, y + h / 2, f"{bar.leftover_mm:g}", ha="center", va="center",
                        fontsize=style.font_size, color="gray")

    ax.set_yticks([n - 1 - i for i in range(n)])
    ax.set_yticklabels([_bar_label(b) for b in plan.bars], fontsize=style.font_size + 1)
    ax.set_xlim(0, L)
    ax.set_ylim(-1, n)
    ax.set_xlabel("mm")

    title = f"{plan.title} | {plan.geometry} | {plan.bar_count} x {L:g} mm | {plan.overall_utilization_pct:.2f}%"
    ax.set_title(title, fontsize=10)

    fig.tight_layout()
    return fig


def show_plan(plan: CutPlan, style: Optional[PlotStyle] = None) -> None:
    """Convenience wrapper: plot and show."""
    plot_plan(plan, style=style)
    plt.show()


def save_plan_png(
    plan: CutPlan,
    path: str,
    style: Optional[PlotStyle] = None,
    dpi: int = 200,
) -> None:
    fig = plot_plan(plan, style=style)
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
