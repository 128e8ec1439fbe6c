from __future__ import annotations

import logging
from enum import IntEnum
from typing import Any, Callable, Dict, List, Sequence, Tuple

from checks import (
    LineCodeError,
    check_amplitude_closed,
    check_amplitude_open,
    check_bit_period,
    check_duty,
)
from utils import DEFAULT_AMPLITUDE, DEFAULT_BIT_PERIOD, DEFAULT_DUTY, SignalSegment

logger = logging.getLogger(__name__)

HDB3_MAX_ZEROS = 4
MANCHESTER_DUTY = 0.5


class Symbol(IntEnum):
    NEGATIVE = -1
    SILENCE = 0
    POSITIVE = +1


# ---------- Encoding helpers (bit-level levels) ----------

def _nrzl_levels(bits: Sequence[int], v: float) -> List[float]:
    return [v if b == 1 else -v for b in bits]


def _nrzi_levels(bits: Sequence[int], v: float) -> List[float]:
    level = v
    out = []
    for b in bits:
        if b == 1:
            level = -level  # transition at start
        out.append(level)
    return out


def _ami_levels(bits: Sequence[int], v: float) -> List[float]:
    last = v  # polarity of the (virtual) mark before the sequence
    out = []
    for b in bits:
        if b == 1:
            last = -last
            out.append(last)
        else:
            out.append(0.0)
    return out


def _mlt3_levels(bits: Sequence[int], v: float) -> List[float]:
    cycle = (0.0, v, 0.0, -v)
    idx = 0
    out = []
    for b in bits:
        if b == 1:
            idx = (idx + 1) % 4
        out.append(cycle[idx])
    return out


def _mark(polarity: int) -> Symbol:
    return Symbol.POSITIVE if polarity > 0 else Symbol.NEGATIVE


def hdb3_symbols(bits: Sequence[int]) -> Tuple[List[Symbol], List[Dict[str, Any]]]:
    """
    First HDB3 pass: AMI marks with every run of four zeros replaced.

    The substitution depends on the number of marks sent since the
    previous substitution: odd -> 000V (V repeats the last mark's
    polarity), even -> B00V (B and V share a freshly inverted polarity).
    The run counter restarts on every 1, so only runs of consecutive
    zeros are replaced; a trailing run shorter than four stays silent.

    Returns the symbol list and one metadata dict per substitution.
    """
    syms: List[Symbol] = []
    subs: List[Dict[str, Any]] = []
    polarity = +1
    marks = 0
    zeros = 0

    for i, bit in enumerate(bits):
        if bit == 1:
            polarity = -polarity
            syms.append(_mark(polarity))
            marks += 1
            zeros = 0
            continue

        zeros += 1
        if zeros < HDB3_MAX_ZEROS:
            syms.append(Symbol.SILENCE)
            continue

        # drop the silences already emitted for this run
        del syms[len(syms) - (zeros - 1):]
        if marks % 2 == 1:
            rule = "000V"
            pattern = [Symbol.SILENCE] * (zeros - 1) + [_mark(polarity)]
        else:
            rule = "B00V"
            polarity = -polarity
            pattern = [_mark(polarity)] + [Symbol.SILENCE] * (zeros // 2) + [_mark(polarity)]
        syms.extend(pattern)
        subs.append({
            "pos": i - (zeros - 1),
            "rule": rule,
            "pattern": [int(s) for s in pattern],
            "count_since_last_sub": marks,
        })
        marks = 0
        zeros = 0

    return syms, subs


def _levels_to_segments(levels: Sequence[float], tb: float) -> List[SignalSegment]:
    out: List[SignalSegment] = []
    t = 0.0
    for level in levels:
        tf = t + tb
        if tf > t:
            out.append(SignalSegment(t, tf, level))
        t += tb
    return out


def _split_to_segments(halves: Sequence[Tuple[float, float]], tb: float, duty: float) -> List[SignalSegment]:
    # Each bit period becomes [t, t + duty*tb) at the first level, then the rest at the second.
    h = tb * duty
    out: List[SignalSegment] = []
    t = 0.0
    for first, second in halves:
        t0 = t + h
        if t0 > t:
            out.append(SignalSegment(t, t0, first))
        t1 = t + tb
        if t1 > t0:
            out.append(SignalSegment(t0, t1, second))
        t += tb
    return out


# ---------- Coders ----------

class LineCoder:
    """
    A line coding scheme bound to its current parameters.

    `encode` re-derives the whole waveform on every call; nothing carries
    over between calls. Setters validate first and only then assign, so
    a rejected value leaves the coder as it was.
    """

    name = "line coder"
    supports_duty = False
    _check_amplitude: Callable[[Any], float] = staticmethod(check_amplitude_closed)

    def __init__(self, tb: float = DEFAULT_BIT_PERIOD, v: float = DEFAULT_AMPLITUDE):
        self.tb = check_bit_period(tb)
        self.v = self._check_amplitude(v)

    def __repr__(self) -> str:
        args = ", ".join(f"{k}={val!r}" for k, val in self.params().items())
        return f"{type(self).__name__}({args})"

    def params(self) -> Dict[str, float]:
        return {"tb": self.tb, "v": self.v}

    def encode(self, bits: Sequence[int]) -> List[SignalSegment]:
        raise NotImplementedError

    def encode_with_meta(self, bits: Sequence[int]) -> Tuple[List[SignalSegment], Dict[str, Any]]:
        # Schemes with per-encode details (HDB3 substitutions) override this
        return self.encode(bits), {}

    def _update(self, attr: str, check: Callable[[Any], float], value: Any) -> None:
        try:
            checked = check(value)
        except LineCodeError as e:
            logger.warning("%s: rejected %s update: %s", self.name, attr, e)
            raise
        setattr(self, attr, checked)

    def set_bit_period(self, tb: float) -> None:
        self._update("tb", check_bit_period, tb)

    def set_amplitude(self, v: float) -> None:
        self._update("v", self._check_amplitude, v)


class Nrzl(LineCoder):
    name = "NRZ-L"

    def encode(self, bits: Sequence[int]) -> List[SignalSegment]:
        return _levels_to_segments(_nrzl_levels(bits, self.v), self.tb)


class Nrzi(LineCoder):
    name = "NRZI"
    _check_amplitude = staticmethod(check_amplitude_open)

    def encode(self, bits: Sequence[int]) -> List[SignalSegment]:
        return _levels_to_segments(_nrzi_levels(bits, self.v), self.tb)


class Rz(LineCoder):
    name = "RZ"
    supports_duty = True

    def __init__(self, tb: float = DEFAULT_BIT_PERIOD, v: float = DEFAULT_AMPLITUDE, duty: float = DEFAULT_DUTY):
        super().__init__(tb, v)
        self.duty = check_duty(duty)

    def params(self) -> Dict[str, float]:
        return {"tb": self.tb, "v": self.v, "duty": self.duty}

    def set_duty(self, duty: float) -> None:
        self._update("duty", check_duty, duty)

    def encode(self, bits: Sequence[int]) -> List[SignalSegment]:
        halves = [(self.v if b == 1 else -self.v, 0.0) for b in bits]
        return _split_to_segments(halves, self.tb, self.duty)


class Manchester(LineCoder):
    # IEEE 802.3: 0 = high->low, 1 = low->high
    name = "Manchester 802.3"

    def encode(self, bits: Sequence[int]) -> List[SignalSegment]:
        halves = [(-self.v, self.v) if b == 1 else (self.v, -self.v) for b in bits]
        return _split_to_segments(halves, self.tb, MANCHESTER_DUTY)


class Ami(LineCoder):
    name = "AMI"
    _check_amplitude = staticmethod(check_amplitude_open)

    def encode(self, bits: Sequence[int]) -> List[SignalSegment]:
        return _levels_to_segments(_ami_levels(bits, self.v), self.tb)


class Mlt3(LineCoder):
    name = "MLT-3"

    def encode(self, bits: Sequence[int]) -> List[SignalSegment]:
        return _levels_to_segments(_mlt3_levels(bits, self.v), self.tb)


class Hdb3(LineCoder):
    name = "HDB3"
    _check_amplitude = staticmethod(check_amplitude_open)

    def encode_with_meta(self, bits: Sequence[int]) -> Tuple[List[SignalSegment], Dict[str, Any]]:
        syms, subs = hdb3_symbols(bits)
        levels = {Symbol.POSITIVE: self.v, Symbol.NEGATIVE: -self.v, Symbol.SILENCE: 0.0}
        return _levels_to_segments([levels[s] for s in syms], self.tb), {"substitutions": subs}

    def encode(self, bits: Sequence[int]) -> List[SignalSegment]:
        segments, _ = self.encode_with_meta(bits)
        return segments
