from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple
import numpy as np

DEFAULT_BIT_PERIOD = 1.0   # Tb (s)
DEFAULT_AMPLITUDE = 1.0    # V
DEFAULT_DUTY = 0.5         # RZ pulse fraction

LOG_ENV_VAR = "LINECODE_SIM_LOG"


@dataclass(frozen=True)
class SignalSegment:
    start_time: float
    end_time: float
    level: float

    @property
    def width(self) -> float:
        return self.end_time - self.start_time


@dataclass
class SimResult:
    segments: List[SignalSegment]
    t: np.ndarray                      # step-plot x (s)
    signals: Dict[str, np.ndarray]     # named step-plot y values
    bits: Dict[str, List[int]]         # named bit lists
    meta: Dict[str, Any] = field(default_factory=dict)


def configure_logging(level: Optional[str] = None) -> None:
    name = (level or os.getenv(LOG_ENV_VAR) or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def bits_from_string(bitstr: str) -> List[int]:
    if not bitstr:
        raise ValueError("Bitstring is empty.")
    if any(c not in "01" for c in bitstr):
        raise ValueError("Bitstring must contain only 0 and 1.")
    return [1 if c == "1" else 0 for c in bitstr]


def bits_to_string(bits: Sequence[int]) -> str:
    return "".join("1" if b else "0" for b in bits)


def gen_random_bits(n: int, seed: Optional[int] = None) -> List[int]:
    rng = np.random.default_rng(seed)
    return [int(x) for x in rng.integers(0, 2, size=n)]


def segments_to_points(segments: Sequence[SignalSegment]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Vertices of the step waveform described by `segments`.

    Each segment contributes its end point; a vertical edge point
    (previous end, new level) is inserted only where the level changes,
    so runs of equal level stay a single horizontal line.
    """
    if not segments:
        return np.array([], dtype=float), np.array([], dtype=float)

    first = segments[0]
    ts = [first.start_time, first.end_time]
    xs = [first.level, first.level]
    for a, b in zip(segments, segments[1:]):
        if abs(b.level - a.level) > np.finfo(float).eps:
            ts.append(a.end_time)
            xs.append(b.level)
        ts.append(b.end_time)
        xs.append(b.level)
    return np.array(ts, dtype=float), np.array(xs, dtype=float)


def bits_to_points(bits: Sequence[int], tb: float) -> Tuple[np.ndarray, np.ndarray]:
    # Step plot helper for the raw 0/1 input, one point per bit edge (use with line_shape="hv")
    if len(bits) == 0:
        return np.array([], dtype=float), np.array([], dtype=float)
    t = np.arange(len(bits) + 1, dtype=float) * float(tb)
    x = np.array(list(bits) + [bits[-1]], dtype=float)
    return t, x


def axis_bounds(t: np.ndarray, x: np.ndarray) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    t = np.asarray(t, dtype=float)
    x = np.asarray(x, dtype=float)
    x0 = float(t[0]) if t.size else 0.0
    x1 = float(t[-1]) if t.size else 1.0

    if x.size:
        y_min, y_max = float(np.min(x)), float(np.max(x))
    else:
        y_min, y_max = np.inf, -np.inf
    if not np.isfinite(y_min) or not np.isfinite(y_max) or abs(y_max - y_min) < 1e-12:
        # flat signals span from zero to their level; empty or all-zero gets the unit box
        if np.isfinite(y_min) and y_min < 0.0:
            y_max = 0.0
        elif np.isfinite(y_max) and y_max > 0.0:
            y_min = 0.0
        else:
            y_min, y_max = 0.0, 1.0

    def pad(m: float) -> float:
        return max(m * 0.1, 1e-6)

    if y_min < 0.0:
        m = max(abs(y_min), abs(y_max), 1.0)
        return (x0, x1), (-(m + pad(m)), m + pad(m))

    top = 1.0 if y_max <= 0.0 else y_max
    return (x0, x1), (0.0, top + pad(max(top, 0.1)))
