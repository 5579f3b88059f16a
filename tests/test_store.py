import json
from pathlib import Path

from inctask.schema import SNAPSHOT_SCHEMA_VERSION
from inctask.snapshot import Fingerprint, Snapshot
from inctask.store import load_snapshot, scan, write_snapshot
from inctask.utils import normalize_path

def test_write_then_load(tmp_path: Path):
    snap = Snapshot(
        roots=("/src",),
        files={"/src/a.txt": Fingerprint(hash="abc", size=3, mtime=17)},
    )
    target = tmp_path / "deep" / "nested" / "inputs.state"
    write_snapshot(target, snap)
    assert target.exists()

    data = json.loads(target.read_text(encoding="utf-8"))
    assert data["schema_version"] == SNAPSHOT_SCHEMA_VERSION
    assert data["hash_algo"] == "sha256"
    assert data["files"]["/src/a.txt"] == {"hash": "abc", "size": 3, "mtime": 17}

    loaded = load_snapshot(target)
    assert loaded is not None
    assert loaded.roots == ("/src",)
    assert loaded.files["/src/a.txt"].size == 3

def test_write_overwrites(tmp_path: Path):
    target = tmp_path / "s.state"
    write_snapshot(target, Snapshot(roots=(), files={"/a": Fingerprint(hash="1")}))
    write_snapshot(target, Snapshot(roots=(), files={"/b": Fingerprint(hash="2")}))
    assert set(load_snapshot(target).files) == {"/b"}

def test_load_missing_returns_none(tmp_path: Path):
    assert load_snapshot(tmp_path / "nope.state") is None

def test_load_invalid_json_returns_none(tmp_path: Path):
    target = tmp_path / "bad.state"
    target.write_text("{not json", encoding="utf-8")
    assert load_snapshot(target) is None

def test_load_wrong_shape_returns_none(tmp_path: Path):
    cases = [
        [],
        {},
        {"schema_version": 99, "hash_algo": "sha256", "roots": [], "files": {}},
        {"schema_version": SNAPSHOT_SCHEMA_VERSION, "hash_algo": "md5", "roots": [], "files": {}},
        {"schema_version": SNAPSHOT_SCHEMA_VERSION, "hash_algo": "sha256", "roots": [], "files": {"/a": 5}},
        {"schema_version": SNAPSHOT_SCHEMA_VERSION, "hash_algo": "sha256", "roots": [], "files": {"/a": {}}},
        {"schema_version": SNAPSHOT_SCHEMA_VERSION, "hash_algo": "sha256", "roots": [], "files": []},
    ]
    for i, doc in enumerate(cases):
        target = tmp_path / f"case{i}.state"
        target.write_text(json.dumps(doc), encoding="utf-8")
        assert load_snapshot(target) is None, doc

def test_empty_snapshot_is_not_absent(tmp_path: Path):
    target = tmp_path / "empty.state"
    write_snapshot(target, Snapshot.empty())
    loaded = load_snapshot(target)
    assert loaded is not None
    assert len(loaded) == 0

def test_scan_round_trips_through_store(tmp_path: Path):
    src = tmp_path / "src"
    src.mkdir()
    (src / "a.txt").write_text("1")
    live = scan([str(src)])
    write_snapshot(tmp_path / "state", live)
    assert load_snapshot(tmp_path / "state").files == dict(live.files)
    assert normalize_path(src / "a.txt") in live
