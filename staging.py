# staging.py
# Load the staged PAN dataset from CSV / Excel into raw records.

from __future__ import annotations
import typing as t
import pandas as pd

from logger import get_logger

log = get_logger(__name__)

PAN_NAME_HINTS = {"pan", "pan_number", "pan_no", "pan number", "pannumber"}
_PAN_LIKE = r"^\s*[A-Za-z0-9]{10}\s*$"
_CSV_OPTIONS = {"dtype": str, "keep_default_na": False, "na_values": [""], "skip_blank_lines": False}

def read_staging_file(file: t.Any, name: str, encoding: str = "utf-8") -> pd.DataFrame:
    """
    Read a CSV or .xlsx upload as strings, one row per line (blank lines kept).
    Empty cells become NaN (missing); text such as 'NA' or 'null' is kept as-is.
    Raises ValueError for other extensions.
    """
    lower = name.lower()
    if lower.endswith(".csv"):
        try:
            df = pd.read_csv(file, encoding=encoding, **_CSV_OPTIONS)
        except UnicodeDecodeError:
            log.warning("CSV decode failed, retrying as latin-1", extra={"file": name, "encoding": encoding})
            file.seek(0)
            df = pd.read_csv(file, encoding="latin-1", **_CSV_OPTIONS)
    elif lower.endswith(".xlsx"):
        df = pd.read_excel(file, engine="openpyxl", dtype=str, keep_default_na=False, na_values=[""])
    else:
        raise ValueError(f"Unsupported file type: {name}")
    log.info("Staged dataset loaded", extra={"file": name, "rows": len(df), "columns": len(df.columns)})
    return df

def guess_pan_column(df: pd.DataFrame, hint: str | None = None) -> str | None:
    # Name hints
    names = {str(c).strip().lower(): c for c in df.columns}
    if hint and hint.strip().lower() in names:
        return names[hint.strip().lower()]
    for n, c in names.items():
        if n in PAN_NAME_HINTS:
            return c
    # Heuristic: columns where >50% rows look like 10 alphanumerics
    for c in df.columns:
        s = df[c].dropna().astype(str)
        if not s.empty and s.str.match(_PAN_LIKE).mean() > 0.5:
            return c
    return None

def pan_records(df: pd.DataFrame, column: str) -> list[t.Optional[str]]:
    """Raw records of one column, NaN mapped to None. Raises KeyError if absent."""
    if column not in df.columns:
        raise KeyError(column)
    return [None if pd.isna(v) else str(v) for v in df[column].tolist()]
