import os
from typing import Union

PathLike = Union[str, "os.PathLike[str]"]


def normalize_path(path: PathLike) -> str:
    """
    Absolute, normalized path string used as snapshot key and monitor root.
    Pure string work: the filesystem is not touched.
    """
    return os.path.normpath(os.path.abspath(os.path.expanduser(os.fspath(path))))


def is_within(path: str, parent: str) -> bool:
    """True if normalized ``path`` is ``parent`` or lies beneath it."""
    return path == parent or path.startswith(parent.rstrip(os.sep) + os.sep)
