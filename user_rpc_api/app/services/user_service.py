"""
Business logic for users.

``UserService`` exposes the four user procedures over a ``UserStore``
it owns.  Input is validated before the store is consulted and every
outcome is returned as a result value: ``Ok`` with the user(s) or
``Err`` with a ``ProcedureError`` (``BAD_REQUEST``, ``NOT_FOUND`` or
``CONFLICT``).  Nothing here raises for an expected failure.
"""

import logging
from typing import Any, Optional

from ..core.errors import conflict, not_found, validation_failed
from ..core.procedure_logging import logged_procedure
from ..core.result import Err, Ok, Result
from .user_store import UserStore
from .validation import validate_user_create, validate_user_id


logger = logging.getLogger(__name__)


class UserService:
    """Сервис для работы с пользователями.

    Owns the store; handlers reach users only through this class.
    """

    def __init__(self, store: Optional[UserStore] = None) -> None:
        self._store = store if store is not None else UserStore()

    @logged_procedure("query", "getUsers")
    def get_users(self, raw_input: Any = None) -> Result:
        """Return all users in insertion order."""
        return Ok(self._store.list_all())

    @logged_procedure("query", "getUserById")
    def get_user_by_id(self, raw_input: Any) -> Result:
        checked = validate_user_id(raw_input)
        if not checked.ok:
            return Err(validation_failed(checked.errors))
        user = self._store.find_by_id(checked.value)
        if user is None:
            return Err(not_found(f"User with id {checked.value} not found"))
        return Ok(user)

    @logged_procedure("mutation", "createUser")
    def create_user(self, raw_input: Any) -> Result:
        """Create a user from ``{name, email}``.

        Fails with ``BAD_REQUEST`` when the input does not validate and
        with ``CONFLICT`` when the email is already registered.  The
        store is only modified on success.
        """
        checked = validate_user_create(raw_input)
        if not checked.ok:
            return Err(validation_failed(checked.errors))
        data = checked.value
        if self._store.find_by_email(data.email) is not None:
            logger.info("Rejected duplicate email %s", data.email)
            return Err(conflict("User with this email already exists"))
        user = self._store.insert(data.name, data.email)
        logger.info("Created user %s", user.id)
        return Ok(user)

    @logged_procedure("mutation", "deleteUser")
    def delete_user(self, raw_input: Any) -> Result:
        checked = validate_user_id(raw_input)
        if not checked.ok:
            return Err(validation_failed(checked.errors))
        user = self._store.remove_by_id(checked.value)
        if user is None:
            return Err(not_found(f"User with id {checked.value} not found"))
        logger.info("Deleted user %s", user.id)
        return Ok(user)
