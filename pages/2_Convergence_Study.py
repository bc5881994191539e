import matplotlib.pyplot as plt
import streamlit as st

from e91_qkd.analysis import create_sweep_plots, default_pair_counts, run_parameter_sweep, sweep_to_dataframe
from e91_qkd.config import CoreParameters
from e91_qkd.models import SimulationConfig
from e91_qkd.quantum_math import theoretical_chsh_value

st.title("Convergence Study")
st.caption(
    f"How the measured CHSH S approaches the model value {theoretical_chsh_value():.4f} "
    "as the number of pairs grows, or how it scatters across seeds."
)

with st.sidebar:
    st.subheader("Sweep")
    mode = st.radio("Sweep over", ["num_pairs", "seed"], horizontal=True)
    if mode == "num_pairs":
        max_pairs = st.selectbox("Max pairs", [10000, 30000, 100000, CoreParameters.NUM_PAIRS_UI_MAX], index=2)
        points = st.slider("Points", 3, 10, 6)
        seed = st.number_input("Seed", 0, CoreParameters.SEED_MAX, 42)
        values = default_pair_counts(max_pairs, points)
        base = SimulationConfig(num_pairs=max_pairs, seed=int(seed), preset_name="Convergence")
    else:
        num_pairs = st.selectbox("Pairs per run", [1000, 5000, 20000], index=1)
        n_seeds = st.slider("Seeds", 3, 30, 10)
        values = list(range(n_seeds))
        base = SimulationConfig(num_pairs=num_pairs, seed=0, preset_name="Seed scatter")
    go = st.button("Run sweep", type="primary")


if go:
    progress = st.progress(0.0, text="Starting sweep...")

    def _progress(p: float, message: str) -> None:
        progress.progress(min(max(p, 0.0), 1.0), text=message)

    sweep = run_parameter_sweep(base, mode, values, progress_callback=_progress)
    st.session_state["sweep"] = (mode, sweep)

if "sweep" not in st.session_state:
    st.info("Configure the sweep in the sidebar and press **Run sweep**.")
    st.stop()

mode, sweep = st.session_state["sweep"]
df = sweep_to_dataframe(sweep, mode)
st.dataframe(df, width='stretch', hide_index=True)
st.download_button("Sweep (CSV)", data=df.to_csv(index=False), file_name=f"e91_sweep_{mode}.csv", mime="text/csv")

for fig in create_sweep_plots(sweep, mode).values():
    st.pyplot(fig)
    plt.close(fig)
