from __future__ import annotations

import streamlit as st

from checks import LineCodeError
from linecode import SCHEMES, build_coder, simulate_linecode
from plotting import plot_bits, plot_segments
from utils import (
    DEFAULT_AMPLITUDE,
    DEFAULT_BIT_PERIOD,
    DEFAULT_DUTY,
    bits_from_string,
    bits_to_string,
    configure_logging,
    gen_random_bits,
)

configure_logging()
st.set_page_config(layout="wide")

st.title("Line Coding Simulator")


def apply_param(coder, setter: str, raw: str) -> bool:
    # Rejected values leave the coder untouched; the error is shown under the field.
    try:
        getattr(coder, setter)(raw)
    except LineCodeError as e:
        st.error(str(e))
        return False
    return True


with st.sidebar:
    st.header("Controls")

    scheme = st.selectbox("Line code", list(SCHEMES), key="scheme")
    show_grid = st.checkbox("Show grid", value=True)

    st.divider()
    st.subheader("Digital input")

    if "bitstr" not in st.session_state:
        st.session_state["bitstr"] = "10110000100001"
    st.text_input("Bitstring", key="bitstr")

    st.slider("Random bits N", 8, 256, 32, step=8, key="rand_n")
    st.text_input("Seed (optional)", value="", key="rand_seed")

    def _gen_bits_cb():
        seed_txt = st.session_state.get("rand_seed", "").strip()
        if seed_txt and (seed_txt == "-" or not seed_txt.lstrip("-").isdigit()):
            return  # invalid seed -> do nothing
        s = int(seed_txt) if seed_txt else None
        n = int(st.session_state.get("rand_n", 32))
        st.session_state["bitstr"] = bits_to_string(gen_random_bits(n, seed=s))

    st.button("Generate random bits", on_click=_gen_bits_cb)

    # Build a fresh coder whenever the scheme changes; parameters are then applied live.
    if st.session_state.get("coder_scheme") != scheme:
        st.session_state["coder"] = build_coder(scheme)
        st.session_state["coder_scheme"] = scheme
    coder = st.session_state["coder"]

    st.divider()
    st.subheader("Parameters")

    tb_raw = st.text_input("Bit period Tb (s)", value=str(DEFAULT_BIT_PERIOD), key="tb_raw")
    apply_param(coder, "set_bit_period", tb_raw)

    v_raw = st.text_input("Amplitude V", value=str(DEFAULT_AMPLITUDE), key="v_raw")
    apply_param(coder, "set_amplitude", v_raw)

    if coder.supports_duty:
        duty_raw = st.text_input("Duty cycle (0, 1]", value=str(DEFAULT_DUTY), key="duty_raw")
        apply_param(coder, "set_duty", duty_raw)

try:
    bits = bits_from_string(st.session_state["bitstr"].strip())
except ValueError as e:
    st.error(str(e))
    st.stop()

res = simulate_linecode(bits, coder)

st.subheader("Summary")
st.json({k: v for k, v in res.meta.items() if k != "substitutions"})

tab1, tab2, tab3 = st.tabs(["Waveforms", "Segments", "Details"])

with tab1:
    st.plotly_chart(plot_bits(bits, coder.tb, grid=show_grid), width="stretch")
    st.plotly_chart(
        plot_segments(res.segments, f"Encoded waveform ({coder.name})", grid=show_grid, x_dtick=coder.tb),
        width="stretch",
    )

with tab2:
    st.dataframe(
        [{"start": s.start_time, "end": s.end_time, "level": s.level} for s in res.segments],
        width="stretch",
    )

with tab3:
    subs = res.meta.get("substitutions")
    if subs is None:
        st.info("No substitutions for this scheme.")
    elif not subs:
        st.info("No runs of four zeros in the input.")
    else:
        st.json([dict(s, pattern=[p * coder.v for p in s["pattern"]]) for s in subs])
