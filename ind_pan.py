# ind_pan.py
# PAN (Permanent Account Number) validation, classification & masking (pure functions).

from __future__ import annotations
import re
import typing as t
import pandas as pd
from base import (
    is_missing,
    normalize_upper,
    dedupe,
    duplicated_values,
    has_adjacent_repetition,
    is_sequential_run,
    category_pan,
    add_quality_flags_pan,
)
from logger import get_logger

log = get_logger(__name__)

VALID_PAN = "Valid PAN"
INVALID_PAN = "Invalid PAN"

# AAAAA9999A
PAN_RE = re.compile(r"[A-Z]{5}[0-9]{4}[A-Z]")
LETTERS = slice(0, 5)
DIGITS = slice(5, 9)

def normalize(value: t.Any) -> t.Optional[str]:
    """Trimmed, upper-cased PAN candidate, or None when the record is missing."""
    return normalize_upper(value)

def matches_structure(pan: str) -> bool:
    """Exactly 5 letters A-Z, 4 digits 0-9, 1 letter A-Z."""
    return PAN_RE.fullmatch(pan) is not None

def pan_reason(pan: str) -> str:
    """
    First failing rule for a normalized value, '' when it is a valid PAN.
    Precedence: INVALID_STRUCTURE → ADJACENT_REPEAT → SEQUENTIAL_LETTERS → SEQUENTIAL_DIGITS
    """
    if not matches_structure(pan):
        return "INVALID_STRUCTURE"
    if has_adjacent_repetition(pan):
        return "ADJACENT_REPEAT"
    if is_sequential_run(pan[LETTERS]):
        return "SEQUENTIAL_LETTERS"
    if is_sequential_run(pan[DIGITS]):
        return "SEQUENTIAL_DIGITS"
    return ""

def classify(pan: str) -> str:
    """VALID_PAN or INVALID_PAN for one normalized value. Never raises."""
    return VALID_PAN if pan_reason(pan) == "" else INVALID_PAN

def mask_pan(pan: t.Optional[str]) -> str:
    """
    Mask PAN as XXXXXX#### (last 4 visible).
    Shorter or malformed values are still masked down to their last 4 characters.
    """
    if is_missing(pan):
        return ""
    s = str(pan).strip()
    last4 = s[-4:] if len(s) >= 4 else s
    return f"XXXXXX{last4}"

def validate_single(pan_like: t.Any) -> dict:
    """
    Validate one raw PAN-like value. Returns:
    {
      'pan': normalized value or '',
      'valid': bool,
      'status': 'Valid PAN' | 'Invalid PAN' | '' (missing),
      'reason': '' | MISSING | INVALID_STRUCTURE | ADJACENT_REPEAT | SEQUENTIAL_LETTERS | SEQUENTIAL_DIGITS
    }
    """
    pan = normalize(pan_like)
    out = {"pan": pan or "", "valid": False, "status": "", "reason": ""}
    if pan is None:
        out["reason"] = "MISSING"; return out
    out["reason"] = pan_reason(pan)
    out["valid"] = out["reason"] == ""
    out["status"] = VALID_PAN if out["valid"] else INVALID_PAN
    return out

def validate_series(series: pd.Series) -> pd.DataFrame:
    """
    Row-level validation, one output row per input row (duplicates kept).
    Output columns: ['pan','valid','status','reason','q_adjacent_repetition',
    'q_sequential_letters','q_sequential_digits','category','masked']
    """
    rows = [validate_single(x) for x in series.astype(object).tolist()]
    df = pd.DataFrame(rows, columns=["pan", "valid", "status", "reason"])
    df = add_quality_flags_pan(df, col="pan", prefix="q_")
    df["category"] = df["reason"].apply(category_pan)
    df["masked"] = df["pan"].apply(mask_pan)
    return df

def classify_distinct(values: t.Iterable[str]) -> dict[str, str]:
    """One status per distinct normalized value."""
    return {pan: classify(pan) for pan in dedupe(values)}

def summarize(raw_records: t.Sequence[t.Any], results: t.Mapping[str, str]) -> dict:
    """
    Summary counts for a run. 'missing' is counted from the raw records, never
    derived from the other counts: duplicates collapse into one distinct value,
    so total_records need not equal missing + valid + invalid.
    """
    statuses = list(results.values())
    return {
        "total_records": len(raw_records),
        "missing": sum(1 for r in raw_records if is_missing(r)),
        "valid": statuses.count(VALID_PAN),
        "invalid": statuses.count(INVALID_PAN),
    }

def validate_dataset(raw_records: t.Sequence[t.Any]) -> tuple[dict[str, str], dict]:
    """
    normalize → dedupe → classify → summarize.
    Returns (value -> status mapping, summary dict).
    """
    normalized = [p for p in (normalize(r) for r in raw_records) if p is not None]
    results = classify_distinct(normalized)
    summary = summarize(raw_records, results)
    log.info("PAN validation finished", extra=summary)
    return results, summary

def profile_records(raw_records: t.Sequence[t.Any]) -> dict:
    """
    Data-quality profile of the staged records before cleaning:
    duplicated normalized values, values with leading/trailing spaces,
    values not already upper-case.
    """
    present = [str(r) for r in raw_records if not is_missing(r)]
    dupes = duplicated_values(normalize(r) for r in present)
    return {
        "duplicated_values": len(dupes),
        "duplicate_records": sum(dupes.values()),
        "untrimmed": sum(1 for r in present if r != r.strip()),
        "not_upper": sum(1 for r in present if r != r.upper()),
    }

def results_frame(results: t.Mapping[str, str]) -> pd.DataFrame:
    """Distinct values with status, reason and mask, sorted by value."""
    rows = [
        {"pan": pan, "status": status, "reason": pan_reason(pan), "masked": mask_pan(pan)}
        for pan, status in sorted(results.items())
    ]
    df = pd.DataFrame(rows, columns=["pan", "status", "reason", "masked"])
    df["category"] = df["reason"].apply(category_pan)
    return df
