import math

import pandas as pd
from hypothesis import given
from hypothesis import strategies as st

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

def test_adjacent_repetition_examples():
    assert has_adjacent_repetition("AABCD12345X")
    assert not has_adjacent_repetition("AHGVE1276F")
    assert has_adjacent_repetition("AHGVE1277F")
    assert not has_adjacent_repetition("")
    assert not has_adjacent_repetition("A")

def test_adjacent_repetition_any_position():
    assert has_adjacent_repetition("AA")
    assert has_adjacent_repetition("XYZZ")
    assert not has_adjacent_repetition("ABAB")
    assert not has_adjacent_repetition("AHGVE1276F")

def test_sequential_run_examples():
    assert is_sequential_run("ABCDE")
    assert not is_sequential_run("AXCDE")
    assert is_sequential_run("1234")
    assert not is_sequential_run("1235")

def test_sequential_run_is_ascending_only():
    assert not is_sequential_run("EDCBA")
    assert not is_sequential_run("4321")
    assert not is_sequential_run("ACEG")

@given(st.text(max_size=1))
def test_short_strings_are_vacuous(s):
    assert has_adjacent_repetition(s) is False
    assert is_sequential_run(s) is True

def test_missing_values():
    for v in (None, "", "   ", "\t\n", float("nan"), pd.NA):
        assert is_missing(v), v
    for v in ("A", " x ", "NA", "nan"):
        assert not is_missing(v), v

def test_normalize_upper_trims_and_uppercases():
    assert normalize_upper("  ahgve1276f ") == "AHGVE1276F"
    assert normalize_upper("   ") is None
    assert normalize_upper(None) is None
    assert normalize_upper(math.nan) is None

@given(st.text(alphabet=st.characters(max_codepoint=0x24F)))
def test_normalize_upper_is_idempotent(s):
    once = normalize_upper(s)
    if once is None:
        assert is_missing(s)
    else:
        assert normalize_upper(once) == once

def test_dedupe_after_normalization():
    values = [normalize_upper(v) for v in [" ahgve1276f ", "AHGVE1276F"]]
    assert dedupe(values) == frozenset({"AHGVE1276F"})

def test_dedupe_is_exact():
    assert len(dedupe(["AHGVE1276F", "AHGVE1276F ", "ahgve1276f"])) == 3

def test_duplicated_values():
    assert duplicated_values(["A", "B", "A", "C", "A", "B"]) == {"A": 3, "B": 2}
    assert duplicated_values([]) == {}

def test_category_pan():
    assert category_pan("") == "VALID"
    assert category_pan("MISSING") == "MISSING"
    assert category_pan("SEQUENTIAL_DIGITS") == "SEQUENTIAL_DIGITS"
    assert category_pan("SOMETHING_ELSE") == "INVALID"

def test_quality_flags():
    df = pd.DataFrame({"pan": ["ABCDE1234F", "AHGVE1276F", "", "AABCD1276F"]})
    out = add_quality_flags_pan(df, col="pan")
    assert out["q_sequential_letters"].tolist() == [True, False, False, False]
    assert out["q_sequential_digits"].tolist() == [True, False, False, False]
    assert out["q_adjacent_repetition"].tolist() == [False, False, False, True]
    assert "q_adjacent_repetition" not in df.columns
