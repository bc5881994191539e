import json
import time

import matplotlib.pyplot as plt
import pandas as pd
import streamlit as st

from e91_qkd.analysis import trials_to_dataframe
from e91_qkd.config import CoreParameters, DisplayDefaults
from e91_qkd.config_validator import InvalidArgumentError, validate_config
from e91_qkd.models import SimulationConfig
from e91_qkd.presets import get_preset_config, list_presets
from e91_qkd.protocol import E91Protocol
from e91_qkd.quantum_math import theoretical_correlation
from e91_qkd.styles import PROFESSIONAL_CSS
from e91_qkd.visualization import create_results_plots

st.set_page_config(
    page_title="E91 QKD Simulator",
    page_icon="🔐",
    layout="wide",
    initial_sidebar_state="expanded",
)
st.markdown(PROFESSIONAL_CSS, unsafe_allow_html=True)

st.title("E91 Quantum Key Distribution Simulator")

st.markdown(
    """
**Simulate entangled-pair key distribution and certify it with a CHSH Bell test.**

- Alice measures at 0, π/8 or π/4; Bob at π/8, π/4 or 3π/8
- Outcomes follow the singlet correlation E(a,b) = -cos(2(a-b))
- Matching bases give the sifted key; four mismatched settings give S

Use **Convergence Study** in the sidebar to watch S settle as the pair count grows.
"""
)

with st.sidebar:
    st.subheader("Run Inputs")
    preset = st.selectbox("Preset", list_presets(), index=1)
    base = get_preset_config(preset)
    num_pairs = st.number_input(
        "Entangled pairs", 0, CoreParameters.NUM_PAIRS_UI_MAX, int(base.num_pairs), 100,
        help="Number of entangled pairs to simulate. 0 is allowed and gives empty outputs.",
    )
    random_seed = st.checkbox("Fresh random seed", value=base.seed is None)
    default_seed = 42 if base.seed is None else int(base.seed)
    seed = None if random_seed else int(st.number_input("Seed", 0, CoreParameters.SEED_MAX, default_seed))
    run_clicked = st.button("Run E91", type="primary")

config = SimulationConfig(num_pairs=int(num_pairs), seed=seed, preset_name=preset)
errors, warns = validate_config(config)
for w in warns:
    st.warning(w)
for e in errors:
    st.error(e)

if run_clicked and not errors:
    progress = st.progress(0.0, text="Starting...")

    def _progress(p: float, message: str) -> None:
        progress.progress(min(max(p, 0.0), 1.0), text=message)

    try:
        results = E91Protocol(config).run(progress_callback=_progress)
    except InvalidArgumentError as e:
        st.error(str(e))
        st.stop()
    st.session_state["results"] = results
    st.session_state["ran_at"] = time.strftime("%Y-%m-%d %H:%M:%S")

results = st.session_state.get("results")
if results is None:
    st.info("Choose inputs in the sidebar and press **Run E91**.")
    st.stop()

st.caption(f"Last run: {st.session_state.get('ran_at')} | seed {results.seed}")

c1, c2, c3, c4 = st.columns(4)
c1.metric("Pairs", f"{results.num_pairs:,}")
c2.metric("Sifted key", f"{len(results.sifted_key):,} bits", f"{results.key_efficiency*100:.1f}%")
c3.metric("CHSH S", f"{results.chsh_S:.4f}", f"{results.chsh_S - results.bell_test.classical_bound:+.4f} vs 2.0")
c4.metric("Error rate", f"{results.error_rate*100:.2f}%", results.error_band.value, delta_color="off")

security = results.security
css_class = "verdict-secure" if security.secure else ("verdict-weak" if security.bell_violated else "verdict-insecure")
for line in security.messages:
    st.markdown(f'<div class="verdict-card {css_class}">{line}</div>', unsafe_allow_html=True)

preview = results.sifted_key.preview(DisplayDefaults.KEY_PREVIEW_BITS)
if preview:
    bits_html = "".join(f'<span class="key-bit-{b}">{b}</span>' for b in preview)
    st.markdown(f"First {len(preview)} key bits: <span class='key-bits'>{bits_html}</span>",
                unsafe_allow_html=True)

st.subheader("CHSH correlators")
st.dataframe(
    pd.DataFrame(
        [
            {
                "Setting": s.label,
                "Trials": s.total,
                "Measured E": s.value,
                "Model E": theoretical_correlation(s.alice_basis, s.bob_basis),
            }
            for s in results.bell_test.correlations
        ]
    ),
    width='stretch',
    hide_index=True,
)

fig = create_results_plots(results)
st.pyplot(fig)
plt.close(fig)

st.subheader("Downloads")
d1, d2 = st.columns(2)
d1.download_button(
    "Summary (JSON)",
    data=json.dumps(results.summary(), indent=2),
    file_name=f"e91_summary_seed{results.seed}.json",
    mime="application/json",
)
d2.download_button(
    "Trial history (CSV)",
    data=trials_to_dataframe(results.trials).to_csv(index=False),
    file_name=f"e91_trials_seed{results.seed}.csv",
    mime="text/csv",
)
