"""
Storage: atomic writes, temp-file hygiene and writers in separate processes.
"""

from __future__ import annotations
import json
import multiprocessing
import os
import sys

import pytest

from retrieval.storage import Storage, StorageError

FILENAME = "items.json"


def _append_many(data_dir: str, tag: str, n: int) -> None:
    storage = Storage(data_dir)
    for i in range(n):
        storage.update_list(FILENAME, lambda items, i=i: items.append({"tag": tag, "i": i}))


@pytest.mark.skipif(sys.platform == "win32", reason="fork start method")
def test_processes_sharing_a_data_dir_do_not_lose_writes(tmp_path):
    ctx = multiprocessing.get_context("fork")
    procs = [ctx.Process(target=_append_many, args=(str(tmp_path), f"w{k}", 25)) for k in range(4)]
    for p in procs:
        p.start()
    for p in procs:
        p.join(timeout=60)
        assert p.exitcode == 0

    items = json.loads((tmp_path / FILENAME).read_text(encoding="utf-8"))
    assert len(items) == 100
    assert {x["tag"] for x in items} == {"w0", "w1", "w2", "w3"}
    assert not list(tmp_path.glob("*.tmp"))


def test_each_write_uses_its_own_temp_file(tmp_path, monkeypatch):
    seen = []
    real_replace = os.replace

    def spy(src, dst):
        seen.append(str(src))
        real_replace(src, dst)

    monkeypatch.setattr("retrieval.storage.os.replace", spy)
    storage = Storage(tmp_path)
    storage.write_list(FILENAME, [{"a": 1}])
    storage.write_list(FILENAME, [{"a": 2}])

    assert len(set(seen)) == 2
    assert all(s.endswith(".tmp") for s in seen)
    assert storage.read_list(FILENAME) == [{"a": 2}]


def test_failed_replace_leaves_old_file_and_no_temp(tmp_path, monkeypatch):
    storage = Storage(tmp_path)
    storage.write_list(FILENAME, [{"a": 1}])

    def broken(src, dst):
        raise OSError("read-only filesystem")

    monkeypatch.setattr("retrieval.storage.os.replace", broken)
    with pytest.raises(StorageError):
        storage.write_list(FILENAME, [{"a": 2}])

    monkeypatch.undo()
    assert storage.read_list(FILENAME) == [{"a": 1}]
    assert not list(tmp_path.glob("*.tmp"))


def test_update_list_is_reentrant(tmp_path):
    storage = Storage(tmp_path)

    def nested(items):
        storage.update_list("other.json", lambda xs: xs.append({"n": 1}))
        items.append({"n": 2})

    storage.update_list(FILENAME, nested)
    assert storage.read_list("other.json") == [{"n": 1}]
    assert storage.read_list(FILENAME) == [{"n": 2}]


def test_missing_file_reads_empty_without_creating_dir(tmp_path):
    storage = Storage(tmp_path / "fresh")
    assert storage.read_list(FILENAME) == []
    assert not (tmp_path / "fresh").exists()
