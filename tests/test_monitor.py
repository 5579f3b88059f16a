from pathlib import Path

from inctask.monitor import FileMonitor
from inctask.snapshot import ChangeType
from inctask.utils import normalize_path

def _key(p: Path) -> str:
    return normalize_path(p)

def _baseline(tmp_path: Path, root: Path) -> Path:
    m = FileMonitor()
    m.register_root(root)
    state = tmp_path / "state" / "inputs.state"
    m.write(state)
    return state

def test_register_root_is_idempotent_and_lazy(tmp_path: Path):
    m = FileMonitor()
    missing = tmp_path / "does-not-exist-yet"
    m.register_root(missing)
    m.register_root(str(missing))
    assert m.roots == (_key(missing),)
    assert not missing.exists()

def test_load_missing_state(tmp_path: Path):
    m = FileMonitor()
    assert m.load(tmp_path / "nope.state") is False
    assert m.history is None

def test_changed_files_without_history_reports_created(tmp_path: Path):
    src = tmp_path / "src"
    src.mkdir()
    (src / "a.txt").write_text("1")
    m = FileMonitor()
    m.register_root(src)
    assert m.changed_files() == {_key(src / "a.txt"): ChangeType.CREATED}

def test_no_changes_after_write(tmp_path: Path):
    src = tmp_path / "src"
    src.mkdir()
    (src / "a.txt").write_text("1")
    state = _baseline(tmp_path, src)

    m = FileMonitor()
    m.register_root(src)
    assert m.load(state) is True
    assert m.changed_files() == {}

def test_detects_each_change_type(tmp_path: Path):
    src = tmp_path / "src"
    (src / "sub").mkdir(parents=True)
    (src / "keep.txt").write_text("k")
    (src / "edit.txt").write_text("1")
    (src / "sub" / "remove.txt").write_text("r")
    state = _baseline(tmp_path, src)

    (src / "edit.txt").write_text("2")
    (src / "sub" / "remove.txt").unlink()
    (src / "sub" / "new.txt").write_text("n")

    m = FileMonitor()
    m.register_root(src)
    m.load(state)
    assert m.changed_files() == {
        _key(src / "edit.txt"): ChangeType.MODIFIED,
        _key(src / "sub" / "remove.txt"): ChangeType.DELETED,
        _key(src / "sub" / "new.txt"): ChangeType.CREATED,
    }

def test_touch_without_content_change_is_not_modified(tmp_path: Path):
    import os

    src = tmp_path / "src"
    src.mkdir()
    f = src / "a.txt"
    f.write_text("same")
    state = _baseline(tmp_path, src)

    st = f.stat()
    os.utime(f, (st.st_atime + 100, st.st_mtime + 100))

    m = FileMonitor()
    m.register_root(src)
    m.load(state)
    assert m.changed_files() == {}

def test_rebaseline_replaces_roots_and_history(tmp_path: Path):
    old = tmp_path / "old"
    new = tmp_path / "new"
    old.mkdir()
    new.mkdir()
    (old / "o.txt").write_text("o")
    (new / "n.txt").write_text("n")

    m = FileMonitor()
    m.register_root(old)
    m.rebaseline([new])
    assert m.roots == (_key(new),)
    assert set(m.history.files) == {_key(new / "n.txt")}
    assert m.changed_files() == {}

    state = tmp_path / "outputs.state"
    # files changed after rebaseline are not part of the written baseline
    (new / "late.txt").write_text("late")
    m.write(state)

    fresh = FileMonitor()
    fresh.register_root(new)
    fresh.load(state)
    assert fresh.changed_files() == {_key(new / "late.txt"): ChangeType.CREATED}
