from __future__ import annotations
import math


def safe_div(a: float, b: float | None) -> float:
    return float(a) / float(b) if b else 0.0


def round_half_up(x: float) -> int:
    """Round to the nearest integer, halves toward +inf (JS Math.round)."""
    return int(math.floor(x + 0.5))


def round_to(x: float, places: int) -> float:
    scale = 10 ** places
    return math.floor(x * scale + 0.5) / scale
