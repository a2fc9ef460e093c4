import os

import pytest

import local_store
from ind_pan import VALID_PAN, INVALID_PAN, results_frame

@pytest.fixture
def runs_dir(tmp_path, monkeypatch):
    root = tmp_path / "runs"
    monkeypatch.setattr(local_store, "RUNS_DIR", str(root))
    return root

def test_list_runs_empty(runs_dir):
    assert local_store.list_runs() == []

def test_new_run_path_slugs_label(runs_dir):
    root = local_store.new_run_path("my run/#1")
    assert os.path.isdir(root)
    assert os.path.basename(root).endswith("_my_run1")

def test_save_and_load_run(runs_dir):
    df = results_frame({"AHGVE1276F": VALID_PAN, "ABCDE1234F": INVALID_PAN, "BAD": INVALID_PAN})
    root = local_store.new_run_path("pans")
    out = local_store.save_run(root, df, {"label": "pans"}, "# report")
    assert out == {"root": root, "saved": True}

    runs = local_store.list_runs()
    assert [r["root"] for r in runs] == [root]
    assert runs[0]["meta"] == {"label": "pans"}

    full, valid, invalid, meta, report_md = local_store.load_run(root)
    assert meta == {"label": "pans"}
    assert report_md == "# report"
    assert len(full) == 3
    assert valid["masked"].tolist() == ["XXXXXX276F"]
    assert sorted(invalid["category"].tolist()) == ["INVALID_STRUCTURE", "SEQUENTIAL_LETTERS"]

def test_saved_artifacts_are_masked(runs_dir):
    df = results_frame({"AHGVE1276F": VALID_PAN})
    root = local_store.new_run_path("pans")
    local_store.save_run(root, df, {}, "")
    with open(os.path.join(root, "processed.csv"), encoding="utf-8") as f:
        text = f.read()
    assert "AHGVE1276F" not in text
    assert "XXXXXX276F" in text

def test_corrupt_meta_is_tolerated(runs_dir):
    root = local_store.new_run_path("broken")
    with open(os.path.join(root, "meta.json"), "w", encoding="utf-8") as f:
        f.write("{not json")
    assert local_store.list_runs()[0]["meta"] == {}
    full, valid, invalid, meta, report_md = local_store.load_run(root)
    assert meta == {}
    assert report_md == ""
    assert full.empty
