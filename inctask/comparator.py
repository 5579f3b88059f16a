from .snapshot import ChangeSet, ChangeType, Snapshot


def compare_snapshots(old: Snapshot, new: Snapshot) -> ChangeSet:
    """
    Compares a historical snapshot with a live one.
    Returns a dict mapping each changed path to created, modified or deleted.
    Unchanged paths never appear.
    """

    changes: ChangeSet = {}

    # Check for deleted or modified
    for path, old_fp in old.files.items():
        new_fp = new.files.get(path)
        if new_fp is None:
            changes[path] = ChangeType.DELETED
        elif old_fp != new_fp:
            changes[path] = ChangeType.MODIFIED

    # Check for newly created files
    for path in new.files:
        if path not in old.files:
            changes[path] = ChangeType.CREATED

    return changes


def split_changes(changes: ChangeSet) -> dict:
    """
    Group a change set into created/modified/deleted lists, the shape used by
    the run log and the CLI output.
    """
    grouped = {str(kind): [] for kind in ChangeType}
    for path in sorted(changes):
        grouped[str(changes[path])].append(path)
    return grouped
