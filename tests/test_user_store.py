from user_rpc_api.app.schemas.user import User
from user_rpc_api.app.services.user_store import UserStore


def test_seeded_with_three_users_in_order(store):
    assert [(u.id, u.name, u.email) for u in store.list_all()] == [
        ("1", "Alice", "alice@example.com"),
        ("2", "Bob", "bob@example.com"),
        ("3", "Charlie", "charlie@example.com"),
    ]
    assert len(store) == 3


def test_list_all_returns_a_copy(store):
    users = store.list_all()
    users.clear()
    assert len(store) == 3


def test_find_by_id_and_email(store):
    assert store.find_by_id("2").name == "Bob"
    assert store.find_by_id("42") is None
    assert store.find_by_email("charlie@example.com").id == "3"
    assert store.find_by_email("nobody@example.com") is None


def test_insert_assigns_next_id(store):
    user = store.insert("Dana", "dana@example.com")
    assert user == User(id="4", name="Dana", email="dana@example.com")
    assert store.list_all()[-1] == user


def test_remove_by_id(store):
    removed = store.remove_by_id("2")
    assert removed.name == "Bob"
    assert [u.id for u in store.list_all()] == ["1", "3"]
    assert store.remove_by_id("2") is None
    assert len(store) == 2


def test_ids_are_not_reused_after_delete(store):
    store.remove_by_id("3")
    first = store.insert("Dana", "dana@example.com")
    store.remove_by_id(first.id)
    second = store.insert("Eve", "eve@example.com")
    assert first.id == "4"
    assert second.id == "5"


def test_empty_seed():
    store = UserStore(seed=[])
    assert store.list_all() == []
    assert store.insert("Dana", "dana@example.com").id == "1"


def test_custom_seed_with_sparse_ids_skips_taken_ids():
    store = UserStore(seed=[User(id="2", name="Bob", email="bob@example.com")])
    assert store.insert("Dana", "dana@example.com").id == "3"
