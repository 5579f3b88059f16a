# tests/test_comparator.py
from inctask.comparator import compare_snapshots, split_changes
from inctask.snapshot import ChangeType, Fingerprint, Snapshot

def _snap(files):
    return Snapshot(roots=("/r",), files={p: Fingerprint(hash=h) for p, h in files.items()})

def test_compare_snapshots_created_modified_deleted():
    old = _snap({
        "/r/a.txt": "h1",
        "/r/b.txt": "h2",
        "/r/c.txt": "h3",
    })

    new = _snap({
        "/r/a.txt": "h1",        # same
        "/r/b.txt": "h2_mod",    # modified
        "/r/d.txt": "h4",        # new
        # c.txt deleted
    })

    changes = compare_snapshots(old, new)
    assert changes == {
        "/r/b.txt": ChangeType.MODIFIED,
        "/r/c.txt": ChangeType.DELETED,
        "/r/d.txt": ChangeType.CREATED,
    }

def test_compare_ignores_size_and_mtime():
    old = Snapshot(roots=(), files={"/r/a": Fingerprint(hash="h", size=1, mtime=100)})
    new = Snapshot(roots=(), files={"/r/a": Fingerprint(hash="h", size=1, mtime=200)})
    assert compare_snapshots(old, new) == {}

def test_compare_against_empty_marks_everything_created():
    new = _snap({"/r/a.txt": "h1", "/r/b.txt": "h2"})
    changes = compare_snapshots(Snapshot.empty(), new)
    assert set(changes.values()) == {ChangeType.CREATED}
    assert set(changes) == {"/r/a.txt", "/r/b.txt"}

def test_split_changes_groups_sorted():
    grouped = split_changes({
        "/b": ChangeType.CREATED,
        "/a": ChangeType.CREATED,
        "/c": ChangeType.DELETED,
    })
    assert grouped == {"created": ["/a", "/b"], "modified": [], "deleted": ["/c"]}
