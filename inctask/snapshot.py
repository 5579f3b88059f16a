"""
Data model shared by the scanner, the snapshot store and the monitors.

A Snapshot maps absolute file paths to Fingerprints. "No history" is modelled
as ``None`` (Optional[Snapshot]) and never as an empty Snapshot, so that a
baseline of zero files stays distinguishable from a missing baseline.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Tuple


class ChangeType(str, Enum):
    CREATED = "created"
    MODIFIED = "modified"
    DELETED = "deleted"

    def __str__(self) -> str:
        return self.value


ChangeSet = Dict[str, ChangeType]


@dataclass(frozen=True)
class Fingerprint:
    """
    Content fingerprint of a single file.

    Only ``hash`` takes part in equality. ``size`` and ``mtime`` are recorded
    for humans reading the state files; a file that was touched without its
    bytes changing keeps an equal fingerprint.
    """

    hash: str
    size: int = field(default=0, compare=False)
    mtime: int = field(default=0, compare=False)

    def to_dict(self) -> dict:
        return {"hash": self.hash, "size": self.size, "mtime": self.mtime}

    @classmethod
    def from_dict(cls, data: Mapping) -> "Fingerprint":
        digest = data["hash"]
        if not isinstance(digest, str) or not digest:
            raise ValueError(f"invalid fingerprint hash: {digest!r}")
        return cls(hash=digest, size=int(data.get("size", 0)), mtime=int(data.get("mtime", 0)))


@dataclass(frozen=True)
class Snapshot:
    roots: Tuple[str, ...]
    files: Mapping[str, Fingerprint]

    def __post_init__(self) -> None:
        # copy so later mutation of the caller's dict cannot leak in
        object.__setattr__(self, "roots", tuple(self.roots))
        object.__setattr__(self, "files", MappingProxyType(dict(self.files)))

    @classmethod
    def empty(cls, roots: Iterable[str] = ()) -> "Snapshot":
        return cls(roots=tuple(roots), files={})

    def __len__(self) -> int:
        return len(self.files)

    def __contains__(self, path: object) -> bool:
        return path in self.files
