from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Type

from coders import Ami, Hdb3, LineCoder, Manchester, Mlt3, Nrzi, Nrzl, Rz
from utils import (
    DEFAULT_AMPLITUDE,
    DEFAULT_BIT_PERIOD,
    DEFAULT_DUTY,
    SignalSegment,
    SimResult,
    segments_to_points,
)

logger = logging.getLogger(__name__)

# Selector order used by the UI
SCHEMES: Dict[str, Type[LineCoder]] = {
    "NRZ-L": Nrzl,
    "NRZI": Nrzi,
    "RZ": Rz,
    "Manchester 802.3": Manchester,
    "HDB3": Hdb3,
    "MLT-3": Mlt3,
    "AMI": Ami,
}

SCHEME_ALIASES = {
    "NRZ-I": "NRZI",
    "Manchester": "Manchester 802.3",
    "Bipolar-AMI": "AMI",
}


def canonical_scheme(scheme: str) -> str:
    name = SCHEME_ALIASES.get(scheme, scheme)
    if name not in SCHEMES:
        raise ValueError(f"Unknown scheme: {scheme}")
    return name


def build_coder(
    scheme: str,
    tb: float = DEFAULT_BIT_PERIOD,
    v: float = DEFAULT_AMPLITUDE,
    duty: Optional[float] = None,
) -> LineCoder:
    cls = SCHEMES[canonical_scheme(scheme)]
    if cls.supports_duty:
        return cls(tb, v, DEFAULT_DUTY if duty is None else duty)
    return cls(tb, v)


def line_encode(
    bits: Sequence[int],
    scheme: str,
    *,
    tb: float = DEFAULT_BIT_PERIOD,
    v: float = DEFAULT_AMPLITUDE,
    duty: Optional[float] = None,
) -> List[SignalSegment]:
    return build_coder(scheme, tb, v, duty).encode(bits)


def simulate_linecode(bits: Sequence[int], coder: LineCoder) -> SimResult:
    segments, extra = coder.encode_with_meta(bits)
    t, tx = segments_to_points(segments)

    meta: Dict[str, Any] = {
        "scheme": coder.name,
        "params": coder.params(),
        "input_len": len(bits),
        "num_segments": len(segments),
    }
    meta.update(extra)

    logger.debug("%s: %d bits -> %d segments", coder.name, len(bits), len(segments))
    return SimResult(
        segments=segments,
        t=t,
        signals={"tx": tx},
        bits={"input": list(bits)},
        meta=meta,
    )
