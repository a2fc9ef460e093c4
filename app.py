# app.py
"""
Requirements & Run
------------------
1) Create/activate venv (optional but recommended)
   - Windows PowerShell:
       python -m venv venv
       .\\venv\\Scripts\\activate
   - macOS/Linux:
       python3 -m venv venv
       source venv/bin/activate

2) Install packages
   pip install -e .

3) Run
   streamlit run app.py
   (If PATH issues: python -m streamlit run app.py)

Notes:
- Parquet via pyarrow; Excel via openpyxl (for .xlsx).
- Runs saved under ./runs (or $PAN_RUNS_DIR) with masked CSV/Parquet + meta.json + report.md.
- UI defaults to MASKED display; unmask requires explicit user action.
"""

from __future__ import annotations
import io
import pandas as pd
import streamlit as st

import config
from ind_pan import validate_dataset, validate_series, profile_records, results_frame
from staging import read_staging_file, guess_pan_column, pan_records
from local_store import new_run_path, save_run, list_runs, load_run
from compliance import build_report
from logger import get_logger

log = get_logger(__name__)

# ---------------- Page ----------------
st.set_page_config(page_title="PAN Validation", page_icon="🪪", layout="wide")
st.title("PAN Number Validation")
st.caption("Clean, validate and mask Indian PAN numbers, with a summary report. No database required.")

# ---------------- Sidebar: Upload & Options ----------------
st.sidebar.header("Upload & Options")
uploaded_file = st.sidebar.file_uploader("Upload CSV or Excel (.xlsx)", type=["csv", "xlsx"])

encoding = st.sidebar.selectbox("CSV Encoding (CSV only)", ["utf-8", "utf-8-sig", "latin-1", "cp1252"], index=0)
mask_default = st.sidebar.checkbox("Mask values in UI (recommended)", value=config.MASK_DEFAULT)
source_label = st.sidebar.text_input("Run label", value="pan_validation")

st.sidebar.markdown("---")
st.sidebar.subheader("Saved Runs")
_runs = list_runs()
if _runs:
    _name_to_root = {r["name"]: r["root"] for r in _runs}
    _chosen = st.sidebar.selectbox("Reload a previous run", ["-- select --"] + list(_name_to_root.keys()), index=0)
    if _chosen and _chosen != "-- select --":
        full_df, valid_df, invalid_df, meta, report_md = load_run(_name_to_root[_chosen])
        st.success(f"Loaded run: {_chosen}")
        with st.expander("Run metadata"):
            st.json(meta, expanded=False)
        with st.expander("Report (preview)"):
            st.code(report_md or "(no report found)", language="markdown")
        st.subheader("Loaded: Processed (masked)")
        st.dataframe(full_df, height=400, width="stretch")
        st.stop()

st.markdown("---")

# ---------------- Ingest ----------------
df = None
read_err = None
if uploaded_file is not None:
    try:
        df = read_staging_file(uploaded_file, uploaded_file.name, encoding=encoding)
    except Exception as e:
        log.error("Failed to read staged file", extra={"file": uploaded_file.name, "error": str(e)})
        read_err = str(e)

if read_err:
    st.error(f"Failed to read file: {read_err}")

if df is None:
    st.info("Upload a CSV or Excel file to begin.")
    st.stop()

st.success(f"Loaded file with **{len(df):,}** rows and **{len(df.columns)}** columns.")
with st.expander("Preview (first 20 rows)"):
    st.dataframe(df.head(20), width="stretch")

# ---------------- Column selection ----------------
guessed = guess_pan_column(df, hint=config.PAN_COLUMN)
columns = list(df.columns)
pan_col = st.selectbox(
    "PAN column",
    options=columns,
    index=columns.index(guessed) if guessed in columns else 0,
)
if pan_col is None:
    st.error("The file has no columns.")
    st.stop()

# ---------------- Validate ----------------
raw = pan_records(df, pan_col)
results, summary = validate_dataset(raw)
profile = profile_records(raw)
distinct = results_frame(results)
rows = validate_series(pd.Series(raw, dtype=object))

# ---------------- Summary ----------------
st.subheader("📊 Summary")
c1, c2, c3, c4 = st.columns(4)
c1.metric("Total records", f"{summary['total_records']:,}")
c2.metric("Missing / blank", f"{summary['missing']:,}")
c3.metric("Distinct valid", f"{summary['valid']:,}")
c4.metric("Distinct invalid", f"{summary['invalid']:,}")
st.caption(
    f"Duplicated values: {profile['duplicated_values']:,} | "
    f"Untrimmed: {profile['untrimmed']:,} | Not upper-case: {profile['not_upper']:,}"
)

# ---------------- Insights ----------------
st.subheader("Insights")
left, right = st.columns(2)
with left:
    st.write("Invalid reasons (distinct values)")
    inv = distinct[distinct["category"] != "VALID"]
    if not inv.empty:
        st.bar_chart(inv["reason"].value_counts())
    else:
        st.info("No invalid PANs.")
with right:
    st.write("Row categories (all records)")
    st.bar_chart(rows["category"].value_counts())

# ---------------- Results ----------------
st.subheader("Results")
show_unmasked = st.checkbox("Show UNMASKED values in tables (sensitive!)", value=not mask_default)

def _pick_cols(masked: bool) -> list[str]:
    cols = ["status", "reason", "category"]
    return (["masked"] if masked else ["pan"]) + cols

masked_view = mask_default and not show_unmasked
tab_valid, tab_invalid, tab_all = st.tabs(["✅ Valid PANs", "❌ Invalid PANs", "📄 All distinct"])

with tab_valid:
    v = distinct[distinct["category"] == "VALID"]
    st.dataframe(v[_pick_cols(masked_view)], height=360, width="stretch")
    if not v.empty:
        b = io.StringIO(); v[_pick_cols(True)].to_csv(b, index=False)
        st.download_button("Download VALID (masked) CSV", b.getvalue().encode("utf-8"), "valid_masked.csv", "text/csv")

with tab_invalid:
    iv = distinct[distinct["category"] != "VALID"]
    st.dataframe(iv[_pick_cols(masked_view)], height=360, width="stretch")
    if not iv.empty:
        b2 = io.StringIO(); iv[_pick_cols(True)].to_csv(b2, index=False)
        st.download_button("Download INVALID (masked) CSV", b2.getvalue().encode("utf-8"), "invalid_masked.csv", "text/csv")

with tab_all:
    st.dataframe(distinct[_pick_cols(masked_view)], height=420, width="stretch")
    b3 = io.StringIO(); distinct[_pick_cols(True)].to_csv(b3, index=False)
    st.download_button("Download ALL (masked) CSV", b3.getvalue().encode("utf-8"), "processed_masked.csv", "text/csv")

# ---------------- Unmasked export (explicit action) ----------------
st.markdown("—")
st.markdown("**Unmasked export** (handle with care):")
if st.button("Prepare ALL (unmasked) CSV"):
    log.warning("Unmasked export prepared", extra={"rows": len(distinct)})
    bu = io.StringIO(); distinct[_pick_cols(False)].to_csv(bu, index=False)
    st.download_button("Save processed_unmasked.csv", bu.getvalue().encode("utf-8"), "processed_unmasked.csv", "text/csv")

# ---------------- Save run (masked artifacts + report) ----------------
st.subheader("💾 Save Run (masked artifacts)")
if st.button("Save run"):
    meta = {
        "label": source_label,
        "source_file": uploaded_file.name,
        "pan_column": str(pan_col),
        "mask_default": bool(mask_default),
    }
    report_md = build_report(meta, summary, profile)
    root = new_run_path(source_label)
    save_run(root, distinct, meta, report_md)
    st.success(f"Saved run at: {root}")
