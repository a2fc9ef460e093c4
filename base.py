# base.py
# Generic normalization and quality-signal utilities (pure Python; no Streamlit).

from __future__ import annotations
import typing as t
import pandas as pd

def is_missing(value: t.Any) -> bool:
    """
    True for None, pandas NaN/NA, or a string that is empty after trimming.
    The same test drives both normalization and the missing count.
    """
    if value is None:
        return True
    if not isinstance(value, str):
        try:
            if pd.isna(value):
                return True
        except (TypeError, ValueError):
            return False
        return str(value).strip() == ""
    return value.strip() == ""

def normalize_upper(value: t.Any) -> t.Optional[str]:
    """
    Trim and upper-case. Returns None when the value is missing.
    Idempotent: normalize_upper(normalize_upper(x)) == normalize_upper(x).
    """
    if is_missing(value):
        return None
    return str(value).strip().upper()

def dedupe(values: t.Iterable[str]) -> frozenset[str]:
    """Distinct values by exact string equality."""
    return frozenset(values)

def has_adjacent_repetition(s: str) -> bool:
    """True if any two neighbouring characters are equal. Strings shorter than 2 are False."""
    for i in range(1, len(s)):
        if s[i] == s[i - 1]:
            return True
    return False

def is_sequential_run(s: str) -> bool:
    """
    True if every character code is exactly one more than the previous one
    ("ABCDE", "1234"). Ascending only. Strings shorter than 2 are vacuously True.
    """
    for i in range(1, len(s)):
        if ord(s[i]) - ord(s[i - 1]) != 1:
            return False
    return True

def duplicated_values(values: t.Iterable[str]) -> dict[str, int]:
    """Values that occur more than once, with their counts, most frequent first."""
    counts = pd.Series(list(values), dtype=object).value_counts()
    dupes = counts[counts > 1]
    return {str(k): int(v) for k, v in dupes.items()}

# Category helper (field-specific precedence)
def category_pan(reason: str) -> str:
    """
    Map PAN reason -> primary category precedence:
    MISSING → INVALID_STRUCTURE → ADJACENT_REPEAT → SEQUENTIAL_LETTERS → SEQUENTIAL_DIGITS → VALID
    """
    if reason == "": return "VALID"
    order = ["MISSING", "INVALID_STRUCTURE", "ADJACENT_REPEAT", "SEQUENTIAL_LETTERS", "SEQUENTIAL_DIGITS"]
    return reason if reason in order else "INVALID"

def add_quality_flags_pan(df: pd.DataFrame, col: str, prefix: str = "q_") -> pd.DataFrame:
    """Add adjacency/sequence flags for a column holding normalized PAN strings."""
    out = df.copy()
    vals = out[col].fillna("").astype(str)
    out[f"{prefix}adjacent_repetition"] = vals.apply(has_adjacent_repetition)
    out[f"{prefix}sequential_letters"] = vals.apply(lambda s: len(s) >= 5 and is_sequential_run(s[0:5]))
    out[f"{prefix}sequential_digits"] = vals.apply(lambda s: len(s) >= 9 and is_sequential_run(s[5:9]))
    return out
