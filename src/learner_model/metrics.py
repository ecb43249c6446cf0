# ABOUTME: Pure numeric helpers shared by every profiler and predictor.
# ABOUTME: Guards empty and degenerate input so NaN or Inf never escapes.

from __future__ import annotations

import math
from typing import List, Sequence

import numpy as np


def _as_array(values: Sequence[float]) -> np.ndarray:
    return np.asarray(list(values), dtype=float)


def mean(values: Sequence[float]) -> float:
    arr = _as_array(values)
    if arr.size == 0:
        return 0.0
    return float(arr.mean())


def variance(values: Sequence[float]) -> float:
    """Population variance (ddof=0), 0.0 for empty input."""
    arr = _as_array(values)
    if arr.size == 0:
        return 0.0
    return float(arr.var(ddof=0))


def std_dev(values: Sequence[float]) -> float:
    return math.sqrt(variance(values))


def median(values: Sequence[float]) -> float:
    arr = _as_array(values)
    if arr.size == 0:
        return 0.0
    return float(np.median(arr))


def trend_slope(ys: Sequence[float]) -> float:
    """
    Ordinary least-squares slope of ``ys`` against positions 1..n.

    Returns 0.0 when fewer than two points are available.
    """

    y = _as_array(ys)
    n = y.size
    if n < 2:
        return 0.0
    x = np.arange(1, n + 1, dtype=float)
    denominator = n * float(np.dot(x, x)) - float(x.sum()) ** 2
    if denominator == 0:
        return 0.0
    slope = (n * float(np.dot(x, y)) - float(x.sum()) * float(y.sum())) / denominator
    return slope if math.isfinite(slope) else 0.0


def clamp(x: float, lo: float = 0.0, hi: float = 1.0) -> float:
    """Clamp into [lo, hi]; NaN collapses to ``lo``."""
    if x is None or math.isnan(x):
        return lo
    return max(lo, min(hi, float(x)))


def min_max_normalize(values: Sequence[float]) -> List[float]:
    """Scale into [0, 1]; a zero-width range maps every value to 0.0."""
    arr = _as_array(values)
    if arr.size == 0:
        return []
    lo, hi = float(arr.min()), float(arr.max())
    if hi - lo == 0:
        return [0.0] * int(arr.size)
    return [float(v) for v in (arr - lo) / (hi - lo)]
