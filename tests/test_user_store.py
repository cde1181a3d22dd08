"""Tests for the in-memory UserStore."""
import random
from concurrent.futures import ThreadPoolExecutor

import pytest

from app.features.users.models import UserPayload
from app.shared.exceptions import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    ValidationError,
)


def usernames(users):
    return [user.username for user in users]


def assert_sorted(store):
    keys = [name.lower() for name in usernames(store.list())]
    assert keys == sorted(keys)


def test_create_assigns_sequential_ids(store, make_payload):
    first = store.create(make_payload("alice", email="alice@example.com"))
    second = store.create(make_payload("bob", email="bob@example.com"))

    assert (first.id, second.id) == (1, 2)
    assert store.count() == 2


def test_create_stores_trimmed_fields(store):
    user = store.create(UserPayload(username="  wisal ", age=22, email=" wisal@gmail.com "))

    assert user.username == "wisal"
    assert user.email == "wisal@gmail.com"
    assert user.age == 22


def test_create_keeps_username_order(store, make_payload):
    for name, age in [("charlie", 25), ("alice", 30), ("bob", 28)]:
        store.create(make_payload(name, age=age))

    assert usernames(store.list()) == ["alice", "bob", "charlie"]


def test_order_is_case_insensitive(store, make_payload):
    for name in ["bob", "Alice", "carol", "ALBERT"]:
        store.create(make_payload(name))

    assert usernames(store.list()) == ["ALBERT", "Alice", "bob", "carol"]


def test_duplicate_username_conflicts(store):
    store.create(UserPayload(username="duplicate", age=25, email="a@x.com"))

    with pytest.raises(ConflictError) as exc_info:
        store.create(UserPayload(username="duplicate", age=30, email="b@x.com"))

    assert exc_info.value.status_code == 409
    assert "already exists" in exc_info.value.detail
    assert store.count() == 1


def test_duplicate_username_conflicts_ignoring_case_and_whitespace(store, make_payload):
    store.create(make_payload("Alice"))

    with pytest.raises(ConflictError):
        store.create(make_payload("  aLiCe "))


def test_failed_create_does_not_consume_id(store, make_payload):
    store.create(make_payload("alice"))
    with pytest.raises(ConflictError):
        store.create(make_payload("alice"))
    with pytest.raises(ValidationError):
        store.create(make_payload("bob", age=17))

    assert store.create(make_payload("bob")).id == 2


def test_age_boundary(store, make_payload):
    with pytest.raises(ValidationError):
        store.create(make_payload("young", age=17))

    assert store.create(make_payload("adult", age=18)).age == 18


def test_get_by_id(store, make_payload):
    created = store.create(make_payload("test_user"))

    assert store.get_by_id(created.id) == created
    assert store.get_by_id(str(created.id)) == created


def test_get_by_id_errors(store):
    with pytest.raises(NotFoundError):
        store.get_by_id("999")
    with pytest.raises(InvalidInputError) as exc_info:
        store.get_by_id("invalid")

    assert exc_info.value.detail == "Invalid user ID"


def test_get_by_username_is_case_insensitive(store, make_payload):
    store.create(make_payload("FindMe"))

    assert store.get_by_username("findme").username == "FindMe"
    assert store.get_by_username("FINDME").username == "FindMe"
    with pytest.raises(NotFoundError):
        store.get_by_username("nobody")


def test_get_by_username_does_not_trim_key(store, make_payload):
    store.create(make_payload("findme"))

    with pytest.raises(NotFoundError):
        store.get_by_username(" findme ")


def test_update_replaces_fields_and_keeps_id(store, make_payload):
    created = store.create(make_payload("old_name", age=25, email="old@example.com"))

    updated = store.update(created.id, make_payload("new_name", age=30, email="new@example.com"))

    assert updated.id == created.id
    assert (updated.username, updated.age, updated.email) == ("new_name", 30, "new@example.com")
    assert store.get_by_id(created.id) == updated
    assert store.count() == 1


def test_update_repositions_record(store, make_payload):
    store.create(make_payload("alice"))
    bob = store.create(make_payload("bob"))

    store.update(bob.id, make_payload("zack"))

    assert usernames(store.list()) == ["alice", "zack"]


def test_update_may_keep_own_username_with_new_case(store, make_payload):
    created = store.create(make_payload("alice"))

    assert store.update(created.id, make_payload("ALICE")).username == "ALICE"


def test_update_conflict_leaves_record_unchanged(store, make_payload):
    alice = store.create(make_payload("alice", age=30))
    bob = store.create(make_payload("bob", age=28))

    with pytest.raises(ConflictError):
        store.update(bob.id, make_payload("Alice", age=40))

    assert store.get_by_id(bob.id) == bob
    assert store.get_by_id(alice.id) == alice


def test_update_rejects_underage(store, make_payload):
    created = store.create(make_payload("alice", age=30))

    with pytest.raises(ValidationError):
        store.update(created.id, make_payload("alice", age=17))

    assert store.get_by_id(created.id).age == 30


def test_update_check_order(store, make_payload):
    # invalid id is reported before field errors
    with pytest.raises(InvalidInputError):
        store.update("abc", make_payload("", age=1))
    # field errors are reported before not-found
    with pytest.raises(ValidationError):
        store.update("999", make_payload("", age=1))
    with pytest.raises(NotFoundError):
        store.update("999", make_payload("ghost"))


def test_delete_frees_username_but_not_id(store, make_payload):
    created = store.create(make_payload("alice"))

    store.delete(created.id)

    with pytest.raises(NotFoundError):
        store.get_by_id(created.id)
    assert store.create(make_payload("alice")).id == 2


def test_delete_errors(store):
    with pytest.raises(NotFoundError):
        store.delete("1")
    with pytest.raises(InvalidInputError):
        store.delete("one")


def test_list_filters_by_exact_age(store, make_payload):
    store.create(make_payload("alice", age=25))
    store.create(make_payload("bob", age=30))
    store.create(make_payload("charlie", age=25))

    assert usernames(store.list("25")) == ["alice", "charlie"]
    assert usernames(store.list(30)) == ["bob"]
    assert store.list("99") == []
    assert len(store.list()) == 3
    assert len(store.list("")) == 3


def test_list_rejects_invalid_filter(store):
    with pytest.raises(InvalidInputError) as exc_info:
        store.list("abc")

    assert exc_info.value.detail == "Age filter must be a number"


def test_list_returns_a_copy(store, make_payload):
    store.create(make_payload("alice"))

    store.list().clear()

    assert store.count() == 1


def test_reset(store, make_payload):
    store.create(make_payload("alice"))
    store.create(make_payload("bob"))

    store.reset()

    assert store.list() == []
    assert store.create(make_payload("carol")).id == 1


def test_random_mutations_keep_order_and_uniqueness(store):
    rng = random.Random(1234)
    names = ["amy", "Ben", "cara", "DAN", "eve", "Finn", "gus", "Hana"]
    seen_ids = set()

    for _ in range(200):
        action = rng.choice(["create", "update", "delete"])
        name = rng.choice(names)
        if rng.random() < 0.5:
            name = name.swapcase()
        payload = UserPayload(username=name, age=rng.randint(18, 60), email=f"{name}@example.com")
        current = store.list()

        try:
            if action == "create" or not current:
                user = store.create(payload)
                assert user.id not in seen_ids
                seen_ids.add(user.id)
            elif action == "update":
                store.update(rng.choice(current).id, payload)
            else:
                store.delete(rng.choice(current).id)
        except ConflictError:
            pass

        assert_sorted(store)
        lowered = [n.lower() for n in usernames(store.list())]
        assert len(lowered) == len(set(lowered))
        ids = [user.id for user in store.list()]
        assert len(ids) == len(set(ids))


def test_concurrent_creates_of_same_username(store, make_payload):
    def attempt(_):
        try:
            return store.create(make_payload("racer"))
        except ConflictError:
            return None

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(attempt, range(64)))

    created = [user for user in results if user is not None]
    assert len(created) == 1
    assert store.count() == 1
    assert store.create(make_payload("next")).id == 2


def test_concurrent_creates_get_distinct_ids(store, make_payload):
    names = [f"user{n:03d}" for n in range(100)]

    with ThreadPoolExecutor(max_workers=16) as pool:
        users = list(pool.map(lambda name: store.create(make_payload(name)), names))

    assert sorted(user.id for user in users) == list(range(1, 101))
    assert usernames(store.list()) == names
