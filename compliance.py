# compliance.py
# Build a Markdown summary report for a PAN validation run.

from __future__ import annotations
from datetime import datetime

def build_report(meta: dict, stats: dict, profile: dict | None = None) -> str:
    """
    Return a Markdown string with the run summary, data-quality profile and rules.
    """
    profile = profile or {}
    ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    return f"""# PAN Validation Report

**Generated:** {ts}

## Run Metadata
- Label: **{meta.get('label','')}**
- Source file: `{meta.get('source_file','')}`
- PAN column: `{meta.get('pan_column','')}`
- Mask by default: `{meta.get('mask_default', True)}`

## Summary
- Total records processed: **{stats.get('total_records',0):,}**
- Missing / blank PANs: **{stats.get('missing',0):,}**
- Distinct valid PANs: **{stats.get('valid',0):,}**
- Distinct invalid PANs: **{stats.get('invalid',0):,}**

Valid and invalid counts are per distinct normalized value; missing is per record.
When the file holds duplicates, the three counts do not add up to the total.

## Data Quality (before cleaning)
- Values appearing more than once: **{profile.get('duplicated_values',0):,}** (across **{profile.get('duplicate_records',0):,}** records)
- Values with leading/trailing spaces: **{profile.get('untrimmed',0):,}**
- Values not in upper case: **{profile.get('not_upper',0):,}**

## Rules
- Cleaning: trim spaces, upper-case, drop empty values, keep distinct values.
- **Structure**: `AAAAA9999A` (5 letters, 4 digits, 1 letter). Reason: `INVALID_STRUCTURE`.
- **Adjacent characters**: no two neighbouring characters may be equal. Reason: `ADJACENT_REPEAT`.
- **Sequences**: the 5 letters (e.g. `ABCDE`) and the 4 digits (e.g. `1234`) must not form an ascending run. Reasons: `SEQUENTIAL_LETTERS`, `SEQUENTIAL_DIGITS`.
- **Masking**: `XXXXXX####` (last 4 visible).

## Handling Notes
> ⚠️ **PAN is sensitive PII**: store masked outputs; limit and log unmasked exports.

- A valid result only means the value is well-formed. It is not checked against any registry.
"""
