import threading

import pytest

from studyquiz.db.session import make_session_factory
from studyquiz.storage.memory import MemoryDocumentStore
from studyquiz.storage.sql import SqlDocumentStore


@pytest.fixture(params=["memory", "sql"])
def any_store(request):
    if request.param == "memory":
        return MemoryDocumentStore()
    return SqlDocumentStore(make_session_factory("sqlite://"))


def test_create_get_and_list(any_store):
    doc_id = any_store.create("quizzes", {"course": "Math", "topic": "Limits", "level": "Beginner"})

    assert any_store.get("quizzes", doc_id) == {
        "id": doc_id, "course": "Math", "topic": "Limits", "level": "Beginner",
    }
    assert [r["id"] for r in any_store.list("quizzes")] == [doc_id]
    assert any_store.list("users") == []
    assert any_store.get("quizzes", "missing") is None


def test_set_with_and_without_merge(any_store):
    any_store.set("users", "u1", {"display_name": "Sam", "credits": 5})
    merged = any_store.set("users", "u1", {"credits": 8}, merge=True)
    assert merged == {"id": "u1", "display_name": "Sam", "credits": 8}

    replaced = any_store.set("users", "u1", {"credits": 1})
    assert replaced == {"id": "u1", "credits": 1}


def test_returned_records_are_copies(any_store):
    any_store.set("users", "u1", {"friends": ["u2"]})
    record = any_store.get("users", "u1")
    record["friends"].append("u3")
    assert any_store.get("users", "u1")["friends"] == ["u2"]


def test_subscription_is_inert_until_started(any_store):
    seen = []
    any_store.set("users", "u1", {"credits": 1})
    sub = any_store.subscribe("users", "u1", seen.append)

    any_store.set("users", "u1", {"credits": 2})
    assert seen == []

    sub.start()
    assert [s["credits"] for s in seen] == [2]

    any_store.set("users", "u1", {"credits": 3}, merge=True)
    any_store.set("users", "u2", {"credits": 99})
    assert [s["credits"] for s in seen] == [2, 3]

    sub.stop()
    any_store.set("users", "u1", {"credits": 4})
    assert [s["credits"] for s in seen] == [2, 3]
    assert not sub.active


def test_subscription_as_context_manager(any_store):
    seen = []
    with any_store.subscribe("users", "u1", seen.append) as sub:
        assert sub.active
        any_store.set("users", "u1", {"credits": 7})
    any_store.set("users", "u1", {"credits": 8})
    assert [s["credits"] for s in seen] == [7]


def test_concurrent_writes_reach_listener_in_order():
    store = MemoryDocumentStore()
    seen = []
    counter = {"n": 0}
    write_lock = threading.Lock()

    def writer():
        for _ in range(50):
            with write_lock:
                counter["n"] += 1
                store._write("users", "u1", {"credits": counter["n"]})
            store._notify("users", "u1")

    with store.subscribe("users", "u1", lambda snap: seen.append(snap["credits"])):
        threads = [threading.Thread(target=writer) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

    assert seen == sorted(seen)
    assert seen[-1] == 200
