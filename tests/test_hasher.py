import hashlib
from pathlib import Path

import pytest

from inctask.hasher import hash_file

def test_hash_file_simple(tmp_path: Path):
    p = tmp_path / "a.txt"
    p.write_text("hello")
    h = hash_file(p)
    assert isinstance(h, str) and len(h) == 64
    assert h == hashlib.sha256(b"hello").hexdigest()

def test_hash_file_same_bytes_same_digest(tmp_path: Path):
    a = tmp_path / "a.bin"
    b = tmp_path / "b.bin"
    a.write_bytes(b"x" * 20000)
    b.write_bytes(b"x" * 20000)
    assert hash_file(a) == hash_file(b)

def test_hash_file_missing_raises(tmp_path: Path):
    p = tmp_path / "gone.txt"
    p.write_text("secret")
    p.unlink()
    with pytest.raises(FileNotFoundError):
        hash_file(p)
