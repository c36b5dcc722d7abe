import logging

import pytest

from user_rpc_api.app.core.errors import ErrorCode
from user_rpc_api.app.core.result import Err, Ok
from user_rpc_api.app.schemas.user import User


def _snapshot(store):
    return [user.model_dump() for user in store.list_all()]


def test_get_users_returns_all(service):
    result = service.get_users()
    assert isinstance(result, Ok)
    assert [u.name for u in result.value] == ["Alice", "Bob", "Charlie"]


def test_create_then_get_returns_same_record(service):
    created = service.create_user({"name": "Dana", "email": "dana@example.com"})
    assert created.ok
    user = created.value
    assert user.id not in {"1", "2", "3"}

    fetched = service.get_user_by_id(user.id)
    assert fetched.ok
    assert fetched.value == User(id=user.id, name="Dana", email="dana@example.com")


def test_create_with_existing_email_conflicts_and_leaves_store_unchanged(service, store):
    before = _snapshot(store)
    result = service.create_user({"name": "Another Bob", "email": "bob@example.com"})
    assert isinstance(result, Err)
    assert result.error.code is ErrorCode.CONFLICT
    assert result.error.message == "User with this email already exists"
    assert _snapshot(store) == before


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "D", "email": "dana@example.com"},
        {"name": "Dana", "email": "dana-at-example.com"},
        {"name": "D", "email": "nope"},
        {"email": "dana@example.com"},
        None,
    ],
)
def test_invalid_create_input_fails_validation_without_mutation(service, store, payload):
    before = _snapshot(store)
    result = service.create_user(payload)
    assert isinstance(result, Err)
    assert result.error.code is ErrorCode.BAD_REQUEST
    assert result.error.validation is not None
    assert _snapshot(store) == before


def test_validation_message_names_the_problem(service):
    result = service.create_user({"name": "D", "email": "dana@example.com"})
    assert result.error.message == "Name must be at least 2 characters"


def test_get_unknown_id_is_not_found(service):
    result = service.get_user_by_id("99")
    assert result.error.code is ErrorCode.NOT_FOUND
    assert result.error.message == "User with id 99 not found"


def test_delete_unknown_id_is_not_found_and_leaves_store_unchanged(service, store):
    before = _snapshot(store)
    result = service.delete_user("99")
    assert result.error.code is ErrorCode.NOT_FOUND
    assert _snapshot(store) == before


def test_empty_id_fails_validation(service):
    assert service.get_user_by_id("").error.code is ErrorCode.BAD_REQUEST
    assert service.delete_user("").error.code is ErrorCode.BAD_REQUEST


def test_delete_removes_exactly_one_record(service, store):
    result = service.delete_user("1")
    assert result.ok
    assert result.value.name == "Alice"
    assert len(store) == 2
    assert service.get_user_by_id("1").error.code is ErrorCode.NOT_FOUND


def test_scenario(service):
    assert [u.id for u in service.get_users().value] == ["1", "2", "3"]

    dana = service.create_user({"name": "Dana", "email": "dana@x.com"}).value
    assert dana == User(id="4", name="Dana", email="dana@x.com")

    bob = service.delete_user("2").value
    assert bob == User(id="2", name="Bob", email="bob@example.com")

    assert [u.name for u in service.get_users().value] == ["Alice", "Charlie", "Dana"]


def test_recreate_after_delete_gets_fresh_id(service):
    service.delete_user("3")
    created = service.create_user({"name": "Eve", "email": "eve@example.com"}).value
    assert created.id == "4"
    assert service.get_user_by_id("3").error.code is ErrorCode.NOT_FOUND


def test_procedures_log_start_and_completion(service, caplog):
    caplog.set_level(logging.INFO, logger="user_rpc_api.procedures")
    service.get_users()
    messages = [r.getMessage() for r in caplog.records if r.name == "user_rpc_api.procedures"]
    assert messages[0] == "QUERY getUsers - Started"
    assert messages[1].startswith("QUERY getUsers - Completed in ")
    assert messages[1].endswith("ms")


def test_failed_procedures_log_failure(service, caplog):
    caplog.set_level(logging.INFO, logger="user_rpc_api.procedures")
    service.delete_user("99")
    records = [r for r in caplog.records if r.name == "user_rpc_api.procedures"]
    assert records[-1].levelno == logging.ERROR
    assert records[-1].getMessage().startswith("MUTATION deleteUser - Failed after ")


def test_created_record_keeps_submitted_email(service):
    created = service.create_user({"name": "Dana", "email": "Dana@X.COM"}).value
    assert created.email == "Dana@X.COM"
    assert service.get_user_by_id(created.id).value == created


@pytest.mark.parametrize("email", ["Dana <dana@x.com>", " dana@x.com "])
def test_non_bare_email_fails_validation(service, store, email):
    before = _snapshot(store)
    result = service.create_user({"name": "Dana", "email": email})
    assert result.error.code is ErrorCode.BAD_REQUEST
    assert _snapshot(store) == before


def test_email_uniqueness_is_exact_match(service):
    result = service.create_user({"name": "Al", "email": "alice@EXAMPLE.com"})
    assert result.ok
    assert result.value.email == "alice@EXAMPLE.com"
    assert len(service.get_users().value) == 4
