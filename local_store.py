# local_store.py
# Local persistence for processed runs (no external DB).

from __future__ import annotations
import os
import json
import re
import time
import pandas as pd

import config
from logger import get_logger

log = get_logger(__name__)

try:
    import pyarrow  # noqa: F401
    _HAS_PARQUET = True
except ImportError:
    _HAS_PARQUET = False

RUNS_DIR = config.RUNS_DIR
MASKED_COLUMNS = ["masked", "status", "reason", "category"]

def _ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)

def _slug(s: str) -> str:
    s = (s or "run").strip().replace(" ", "_")
    return re.sub(r"[^a-zA-Z0-9_\-\.]", "", s)

def new_run_path(label: str) -> str:
    ts = time.strftime("%Y%m%d_%H%M%S")
    root = os.path.join(RUNS_DIR, f"{ts}_{_slug(label)}")
    _ensure_dir(root)
    return root

def _masked_only(df: pd.DataFrame) -> pd.DataFrame:
    return df[[c for c in MASKED_COLUMNS if c in df.columns]].copy()

def _read_meta(root: str) -> dict:
    mp = os.path.join(root, "meta.json")
    if not os.path.isfile(mp):
        return {}
    try:
        with open(mp, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        log.warning("Unreadable run metadata", extra={"path": mp, "error": str(e)})
        return {}

def save_run(root: str, results_df: pd.DataFrame, meta: dict, report_md: str) -> dict:
    """
    Write meta.json, report.md and masked CSV (plus Parquet when available)
    for all / valid / invalid distinct values.
    """
    _ensure_dir(root)
    with open(os.path.join(root, "meta.json"), "w", encoding="utf-8") as f:
        json.dump(meta, f, indent=2)
    with open(os.path.join(root, "report.md"), "w", encoding="utf-8") as f:
        f.write(report_md)

    frames = {
        "processed": results_df,
        "valid": results_df[results_df["category"] == "VALID"],
        "invalid": results_df[results_df["category"] != "VALID"],
    }
    for base, df in frames.items():
        masked = _masked_only(df)
        if _HAS_PARQUET:
            masked.to_parquet(os.path.join(root, f"{base}.parquet"), index=False)
        masked.to_csv(os.path.join(root, f"{base}.csv"), index=False)

    log.info("Run saved", extra={"root": root, "rows": len(results_df), "parquet": _HAS_PARQUET})
    return {"root": root, "saved": True}

def list_runs() -> list[dict]:
    if not os.path.isdir(RUNS_DIR):
        return []
    items = []
    for name in os.listdir(RUNS_DIR):
        root = os.path.join(RUNS_DIR, name)
        if not os.path.isdir(root):
            continue
        items.append({"name": name, "root": root, "meta": _read_meta(root)})
    return sorted(items, key=lambda x: x["name"], reverse=True)

def load_run(root: str) -> tuple[pd.DataFrame, pd.DataFrame, pd.DataFrame, dict, str]:
    """Return (processed, valid, invalid, meta, report_md) for a saved run."""
    meta = _read_meta(root)
    report_md = ""
    rp = os.path.join(root, "report.md")
    if os.path.isfile(rp):
        with open(rp, "r", encoding="utf-8") as f:
            report_md = f.read()

    def _read_df(base: str) -> pd.DataFrame:
        pq = os.path.join(root, f"{base}.parquet")
        if _HAS_PARQUET and os.path.isfile(pq):
            return pd.read_parquet(pq)
        csvp = os.path.join(root, f"{base}.csv")
        if os.path.isfile(csvp):
            return pd.read_csv(csvp, dtype=str, keep_default_na=False)
        return pd.DataFrame()

    return _read_df("processed"), _read_df("valid"), _read_df("invalid"), meta, report_md
