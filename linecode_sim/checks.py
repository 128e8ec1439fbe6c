from __future__ import annotations

import math
from typing import Any


class LineCodeError(ValueError):
    """Base class for rejected coder parameters."""

    kind = "parameter"

    def __init__(self, value: Any, reason: str):
        self.value = value
        super().__init__(f"Invalid {self.kind} {value!r}: {reason}")


class InvalidBitPeriod(LineCodeError):
    kind = "bit period"


class BadAmplitude(LineCodeError):
    kind = "amplitude"


class WrongDuty(LineCodeError):
    kind = "duty cycle"


def _as_finite(value: Any, error: type) -> float:
    try:
        x = float(value)
    except (TypeError, ValueError):
        raise error(value, "must be a number") from None
    except OverflowError:
        raise error(value, "must be finite") from None
    if not math.isfinite(x):
        raise error(value, "must be finite")
    return x


def check_bit_period(tb: Any) -> float:
    x = _as_finite(tb, InvalidBitPeriod)
    if x <= 0.0:
        raise InvalidBitPeriod(tb, "must be > 0")
    return x


def check_amplitude_closed(v: Any) -> float:
    # NRZ-L, RZ, Manchester, MLT-3
    x = _as_finite(v, BadAmplitude)
    if x <= 0.0:
        raise BadAmplitude(v, "must be > 0")
    return x


def check_amplitude_open(v: Any) -> float:
    # NRZI, AMI, HDB3: the sign picks the initial polarity
    x = _as_finite(v, BadAmplitude)
    if x == 0.0:
        raise BadAmplitude(v, "must be non-zero")
    return x


def check_duty(duty: Any) -> float:
    x = _as_finite(duty, WrongDuty)
    if not 0.0 < x <= 1.0:
        raise WrongDuty(duty, "must be in (0, 1]")
    return x
