from datetime import datetime

import pytest

from mirador.storage import (
    STORAGE_KEYS,
    AlertRepository,
    ChatHistoryRepository,
    JsonFileStore,
    MemoryStore,
    OnboardingRepository,
    SavedPropertyRepository,
    SessionRepository,
)
from mirador.models import ChatMessage


@pytest.fixture
def store():
    with MemoryStore() as store:
        yield store


def test_closed_store_rejects_access():
    store = MemoryStore()
    with pytest.raises(RuntimeError):
        store.get("x")
    store.open()
    store.set("x", 1)
    store.close()
    with pytest.raises(RuntimeError):
        store.set("x", 2)


def test_memory_store_does_not_share_references(store):
    value = {"tags": ["a"]}
    store.set("k", value)
    value["tags"].append("b")
    assert store.get("k") == {"tags": ["a"]}


def test_json_file_store_persists_between_sessions(tmp_path):
    path = tmp_path / "nested" / "storage.json"
    with JsonFileStore(path) as store:
        store.set("greeting", "hola")
        store.set("temp", 1)
        store.remove("temp")

    with JsonFileStore(path) as store:
        assert store.get("greeting") == "hola"
        assert store.get("temp") is None
        store.clear()

    with JsonFileStore(path) as store:
        assert store.get("greeting", "default") == "default"


def test_corrupt_file_starts_empty(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("{not json")
    with JsonFileStore(path) as store:
        assert store.get("anything") is None
        store.set("ok", True)
    with JsonFileStore(path) as store:
        assert store.get("ok") is True


def test_session_login_and_logout(store):
    repo = SessionRepository(store)
    assert not repo.is_authenticated()

    user = repo.login("ana@example.com", "Ana")
    assert user.id.startswith("user-")
    assert repo.get_current_user() == user

    repo.logout()
    assert repo.get_current_user() is None


def test_login_requires_name_and_email(store):
    with pytest.raises(ValueError):
        SessionRepository(store).login("", "Ana")


def test_save_updates_existing_entry(store):
    repo = SavedPropertyRepository(store)
    repo.save("prop-1")
    repo.save("prop-2", notes="corner lot")
    repo.save("prop-1", notes="call broker", tags=["priority"])

    saved = repo.get_all()
    assert [entry.property_id for entry in saved] == ["prop-1", "prop-2"]
    assert saved[0].notes == "call broker"
    assert saved[0].tags == ["priority"]

    repo.unsave("prop-1")
    assert not repo.is_saved("prop-1")
    assert repo.is_saved("prop-2")


def test_alerts_newest_first_and_read_tracking(store):
    repo = AlertRepository(store)
    first = repo.add("prop-1", "price-change", "Price dropped 5%")
    second = repo.add("prop-2", "legal", "Zoning hearing scheduled")

    assert first.id != second.id
    assert [alert.id for alert in repo.get_all()] == [second.id, first.id]
    assert repo.unread_count() == 2

    assert repo.mark_as_read(first.id)
    assert not repo.mark_as_read("alert-missing")
    assert repo.unread_count() == 1


def test_onboarding_flag(store):
    repo = OnboardingRepository(store)
    assert not repo.has_completed()
    repo.complete()
    assert store.get(STORAGE_KEYS["onboarding"]) == "true"
    assert repo.has_completed()
    repo.reset()
    assert not repo.has_completed()


def test_chat_history(store):
    repo = ChatHistoryRepository(store)
    repo.append(ChatMessage(role="user", content="hi"), ChatMessage(role="assistant", content="hello"))
    assert [m.role for m in repo.get()] == ["user", "assistant"]

    repo.clear()
    assert repo.get() == []


def test_corrupt_chat_history_is_discarded(store):
    store.set(STORAGE_KEYS["chat_history"], [{"role": "robot"}])
    assert ChatHistoryRepository(store).get() == []


def test_memory_store_reads_are_copies(store):
    store.set("saved", [{"propertyId": "prop-1"}])
    store.get("saved").append({"propertyId": "prop-2"})
    assert store.get("saved") == [{"propertyId": "prop-1"}]


def test_json_file_store_reads_are_copies(tmp_path):
    with JsonFileStore(tmp_path / "storage.json") as store:
        store.set("tags", ["a"])
        store.get("tags").append("b")
        assert store.get("tags") == ["a"]


def test_timestamps_are_timezone_aware(store):
    user = SessionRepository(store).login("ana@example.com", "Ana")
    assert datetime.fromisoformat(user.created_at).tzinfo is not None
