"""
Saved responses: HTTP CRUD, newest-first ordering, targeted delete,
and fixed error messages when storage fails.
"""

from __future__ import annotations
import json

import pytest

from retrieval.saved_responses_store import SavedResponsesStore
from retrieval.storage import StorageError


def post(client, body):
    return client.post("/api/saved-responses", data=json.dumps(body), headers={"Content-Type": "application/json"})


def test_save_then_list_newest_first(client):
    assert post(client, {"text": "older text", "style": "casual"}).status_code == 201
    r = post(client, {"text": "A joke about Mondays.", "style": "funny"})
    assert r.status_code == 201
    created = r.get_json()
    assert created["id"]
    assert created["timestamp"].endswith("Z")

    listed = client.get("/api/saved-responses").get_json()
    assert len(listed) == 2
    assert listed[0]["id"] == created["id"]
    assert listed[0]["text"] == "A joke about Mondays."
    assert listed[0]["style"] == "funny"
    assert listed[1]["text"] == "older text"


def test_save_requires_text_and_style(client):
    r = post(client, {"text": "no style"})
    assert r.status_code == 400
    assert r.get_json() == {"error": "Missing text or style"}
    assert client.get("/api/saved-responses").get_json() == []


def test_delete_removes_only_that_entry(client):
    ids = [post(client, {"text": f"t{i}", "style": "poetic"}).get_json()["id"] for i in range(3)]

    r = client.delete(f"/api/saved-responses?id={ids[1]}")
    assert r.status_code == 200
    assert r.get_json() == {"message": "Response deleted successfully"}

    remaining = {x["id"] for x in client.get("/api/saved-responses").get_json()}
    assert remaining == {ids[0], ids[2]}


def test_delete_by_path_and_unknown_id(client):
    rid = post(client, {"text": "x", "style": "casual"}).get_json()["id"]
    assert client.delete(f"/api/saved-responses/{rid}").status_code == 200
    assert client.delete(f"/api/saved-responses/{rid}").status_code == 404
    assert client.delete("/api/saved-responses").status_code == 400


@pytest.mark.parametrize("method,path,message", [
    ("get", "/api/saved-responses", "Failed to fetch saved responses"),
    ("post", "/api/saved-responses", "Failed to save response"),
    ("delete", "/api/saved-responses?id=abc", "Failed to delete response"),
])
def test_storage_failures_use_fixed_messages(client, monkeypatch, method, path, message):
    def broken(*a, **kw):
        raise StorageError("disk on fire")

    for name in ("list", "store", "remove"):
        monkeypatch.setattr(SavedResponsesStore, name, broken)

    kwargs = {}
    if method == "post":
        kwargs = {"data": json.dumps({"text": "t", "style": "s"}), "headers": {"Content-Type": "application/json"}}
    r = getattr(client, method)(path, **kwargs)
    assert r.status_code == 500
    assert r.get_json() == {"error": message}


def test_store_directly_orders_by_timestamp(storage):
    store = SavedResponsesStore(storage)
    first = store.store({"text": "a", "style": "funny"})
    second = store.store({"text": "b", "style": "funny"})
    assert [r["id"] for r in store.list()] == [second, first]
    assert store.remove(first)
    assert not store.remove(first)
    assert [r["id"] for r in store.list()] == [second]


def test_corrupt_file_raises_storage_error(storage):
    storage.data_dir.mkdir(parents=True, exist_ok=True)
    storage.file_path("saved_responses.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(StorageError):
        SavedResponsesStore(storage).list()
