# main.py
import io
import json
import os
import tempfile
import zipfile

import pandas as pd
import streamlit as st

from errors import CfgError
from flowchart_generator import sink_name
from ir_loader import parse_program
from pipeline import RunConfig, run
from utils import explain_metrics


st.set_page_config(page_title="MIR CFG Viewer", layout="wide")
st.title("🔀 MIR Control-Flow Graph Viewer")

# ---------- Top instructions ----------
st.markdown(
    """
**How to use**

1. Upload a JSON IR dump OR paste one in the sidebar.
2. Click **Process Dump** to extract the control-flow graph of every function.
3. Explore results in the tabs: **Metrics**, **Explanations**, **Flowcharts**, **Raw DOT**.
"""
)

# ---------- Sidebar: input & process button ----------
st.sidebar.header("Input")
uploaded_file = st.sidebar.file_uploader("Upload an IR dump (.json)", type=["json"])
dump_area = st.sidebar.text_area("Or paste the JSON dump here", height=300)
keep_going = st.sidebar.checkbox("Skip functions that fail", value=True)
process_button = st.sidebar.button("▶ Process Dump")

if "last_dump" not in st.session_state:
    st.session_state["last_dump"] = ""

if uploaded_file is not None:
    raw = uploaded_file.read()
    st.session_state["last_dump"] = raw.decode("utf-8") if isinstance(raw, (bytes, bytearray)) else raw
elif dump_area and dump_area.strip():
    st.session_state["last_dump"] = dump_area

dump_text = st.session_state.get("last_dump", "").strip()

if process_button:
    st.session_state["run_analysis"] = True
    st.session_state.pop("flowcharts_zip", None)

if "run_analysis" not in st.session_state:
    st.info("Press **Process Dump** in the sidebar to extract control-flow graphs.")
    st.stop()

if not dump_text:
    st.error("No dump provided. Paste JSON in the sidebar or upload a .json file.")
    st.stop()

with st.spinner("Extracting control-flow graphs..."):
    try:
        program = parse_program(json.loads(dump_text))
        report = run(program, RunConfig(fail_fast=not keep_going, write_files=False))
    except (CfgError, ValueError) as e:
        st.error("Failed to process the dump: " + str(e))
        st.stop()

for unit, exc in report.failures:
    st.warning(f"Skipped `{unit.name}`: {exc}")

functions_metrics = {r.unit.name: r.metrics for r in report.results}
dot_sources = {r.unit.name: r.description for r in report.results}

if functions_metrics:
    df = pd.DataFrame.from_dict(functions_metrics, orient="index")
else:
    df = pd.DataFrame()

# ---------- Tabs ----------
tab_metrics, tab_explain, tab_flow, tab_raw = st.tabs(
    ["📊 Metrics", "📝 Explanations", "🔗 Flowcharts", "📦 Raw DOT"]
)

# ----- Metrics Tab -----
with tab_metrics:
    st.header("Function metrics")
    if df.empty:
        st.info("No functions found in the dump.")
    else:
        def _highlight_cc(val):
            if val > 10:
                return "background-color: #ff9999"
            if val > 5:
                return "background-color: #ffe599"
            return ""

        styled = df.style.map(_highlight_cc, subset=["cyclomatic_complexity"])
        st.dataframe(styled, width="stretch")
        st.download_button(
            "Download metrics CSV",
            df.to_csv().encode("utf-8"),
            file_name="cfg_metrics.csv",
            mime="text/csv",
            key="metrics_csv_dl",
        )

# ----- Explanations Tab -----
with tab_explain:
    st.header("Natural-language explanations")
    if not functions_metrics:
        st.info("No function explanations available.")
    else:
        for fname, text in explain_metrics(functions_metrics).items():
            st.markdown(f"### {fname}")
            st.markdown(text)

# ----- Flowcharts Tab -----
with tab_flow:
    st.header("Function flowcharts")
    if not dot_sources:
        st.info("No functions found for flowchart generation.")
    else:
        ncols = min(3, max(1, len(dot_sources)))
        cols = st.columns(ncols)
        for idx, (fname, dot_src) in enumerate(dot_sources.items()):
            with cols[idx % ncols]:
                st.markdown(f"**{fname}**")
                st.graphviz_chart(dot_src)

        # --- Download all flowcharts as ZIP ---
        if "flowcharts_zip" not in st.session_state:
            from graphviz import ExecutableNotFound, Source

            buf = io.BytesIO()
            with tempfile.TemporaryDirectory() as tmpdir, zipfile.ZipFile(buf, "w") as zipf:
                for result in report.results:
                    dot_name = sink_name(result.unit)
                    zipf.writestr(dot_name, result.description)
                    try:
                        out_path = os.path.join(tmpdir, dot_name[: -len(".dot")])
                        png_path = Source(result.description).render(out_path, format="png", cleanup=True)
                        zipf.write(png_path, arcname=os.path.basename(png_path))
                    except ExecutableNotFound:
                        # no dot binary; the .dot source is already archived
                        pass
            st.session_state["flowcharts_zip"] = buf.getvalue()

        st.download_button(
            "⬇️ Download All Flowcharts (ZIP)",
            st.session_state["flowcharts_zip"],
            file_name="flowcharts.zip",
            mime="application/zip",
            key="download_all_flowcharts",
        )

# ----- Raw DOT Tab -----
with tab_raw:
    st.header("Raw graph descriptions")
    for fname, dot_src in dot_sources.items():
        with st.expander(fname):
            st.code(dot_src, language="dot")

# ---------- End ----------
st.markdown("---")
st.markdown("Layout is done by Graphviz; block labels are printed as dumped.")
