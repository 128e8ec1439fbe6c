# test_hdb3.py
#
# HDB3 substitution rules: exact level sequences, parity bookkeeping,
# run boundaries and the substitution metadata reported by the first pass.

from __future__ import annotations

from typing import List

import pytest

from coders import Ami, Hdb3, Symbol, hdb3_symbols
from utils import SignalSegment


def bits_from_str(s: str) -> List[int]:
    return [1 if c == "1" else 0 for c in s]

def hdb3_levels(bitstr: str, v: float = -1.0) -> List[float]:
    return [s.level for s in Hdb3(1.0, v).encode(bits_from_str(bitstr))]


# ==================================================
# 1) Exact sequences (v = -1 so the first mark is +1)
# ==================================================

@pytest.mark.parametrize("bitstr, expected", [
    ("0", [0]),
    ("1", [1]),
    ("0000", [1, 0, 0, 1]),                                  # even parity -> B00V
    ("10000", [1, 0, 0, 0, 1]),                              # odd parity -> 000V
    ("11000011", [1, -1, 1, 0, 0, 1, -1, 1]),
    ("00000000", [1, 0, 0, 1, -1, 0, 0, -1]),
    ("00010000", [0, 0, 0, 1, 0, 0, 0, 1]),
    ("10000000010000", [1, 0, 0, 0, 1, -1, 0, 0, -1, 1, 0, 0, 0, 1]),
])
def test_hdb3_expected_levels(bitstr, expected):
    assert hdb3_levels(bitstr) == expected

def test_hdb3_segments_are_tb_wide():
    segs = Hdb3(0.5, -1.0).encode([0, 0, 0, 0])
    assert segs == [
        SignalSegment(0.0, 0.5, 1.0),
        SignalSegment(0.5, 1.0, 0.0),
        SignalSegment(1.0, 1.5, 0.0),
        SignalSegment(1.5, 2.0, 1.0),
    ]

def test_hdb3_positive_amplitude_mirrors_negative():
    bits = "1100001000010000"
    assert hdb3_levels(bits, v=1.0) == [-x for x in hdb3_levels(bits, v=-1.0)]


# ==================================================
# 2) Run boundaries
# ==================================================

@pytest.mark.parametrize("bitstr", ["000", "1000", "0001000", "10001000100"])
def test_hdb3_without_four_zero_run_matches_ami(bitstr):
    bits = bits_from_str(bitstr)
    assert Hdb3(1.0, -1.0).encode(bits) == Ami(1.0, -1.0).encode(bits)
    assert hdb3_symbols(bits)[1] == []

def test_hdb3_trailing_short_run_stays_silent():
    # 4 zeros substituted, the following 3 are left alone
    assert hdb3_levels("0000000") == [1, 0, 0, 1, 0, 0, 0]

@pytest.mark.parametrize("m", [0, 3, 4, 7, 8, 9, 12, 16, 17])
def test_hdb3_all_zeros_substitution_count(m):
    syms, subs = hdb3_symbols([0] * m)
    assert len(syms) == m
    assert len(subs) == m // 4

def test_hdb3_no_long_silence_runs():
    bits = bits_from_str("1000000000000000000010000000")
    syms, _ = hdb3_symbols(bits)
    run = 0
    for s in syms:
        run = run + 1 if s == Symbol.SILENCE else 0
        assert run <= 3


# ==================================================
# 3) Parity bookkeeping
# ==================================================

def test_hdb3_parity_counts_marks_since_last_substitution():
    # one mark before each block: odd both times, even though two marks were sent overall
    bits = bits_from_str("1000010000")
    _, subs = hdb3_symbols(bits)
    assert [s["rule"] for s in subs] == ["000V", "000V"]
    assert hdb3_levels("1000010000") == [1, 0, 0, 0, 1, -1, 0, 0, 0, -1]

def test_hdb3_even_then_odd():
    bits = bits_from_str("11000010000")
    _, subs = hdb3_symbols(bits)
    assert [s["rule"] for s in subs] == ["B00V", "000V"]
    assert [s["pos"] for s in subs] == [2, 7]
    assert [s["count_since_last_sub"] for s in subs] == [2, 1]
    assert hdb3_levels("11000010000", v=1.0) == [-1, 1, -1, 0, 0, -1, 1, 0, 0, 0, 1]

def test_hdb3_violation_repeats_previous_mark_polarity():
    syms, subs = hdb3_symbols(bits_from_str("10000"))
    assert subs == [{"pos": 1, "rule": "000V", "pattern": [0, 0, 0, -1], "count_since_last_sub": 1}]
    # V has the same polarity as the preceding mark
    assert syms[0] == syms[4] == Symbol.NEGATIVE

def test_hdb3_b00v_marks_share_new_polarity():
    syms, subs = hdb3_symbols(bits_from_str("110000"))
    assert subs[0]["rule"] == "B00V"
    # previous mark was POSITIVE; B and V both flip to NEGATIVE
    assert syms[1] == Symbol.POSITIVE
    assert syms[2] == syms[5] == Symbol.NEGATIVE
    assert syms[3] == syms[4] == Symbol.SILENCE

def test_hdb3_next_mark_alternates_after_substitution():
    # after B00V at NEGATIVE, the next 1 must be POSITIVE
    syms, _ = hdb3_symbols(bits_from_str("00001"))
    assert syms[3] == Symbol.NEGATIVE
    assert syms[4] == Symbol.POSITIVE

def test_hdb3_encode_with_meta_matches_encode():
    bits = bits_from_str("1010000110000000")
    coder = Hdb3(1.0, -1.0)
    segments, extra = coder.encode_with_meta(bits)
    assert segments == coder.encode(bits)
    assert extra == {"substitutions": hdb3_symbols(bits)[1]}
