"""
In-memory storage for user records.

``UserStore`` keeps users in insertion order and is the only place
records are created or removed.  It performs no validation: callers
(``UserService``) check input shape and email uniqueness first.

Ids come from a counter seeded from the initial store size.  The
counter only moves forward, so an id freed by a deletion is never
handed out again.
"""

import logging
from typing import Iterable, List, Optional

from ..schemas.user import User


logger = logging.getLogger(__name__)


DEFAULT_USERS = (
    User(id="1", name="Alice", email="alice@example.com"),
    User(id="2", name="Bob", email="bob@example.com"),
    User(id="3", name="Charlie", email="charlie@example.com"),
)


class UserStore:
    """Ordered in-memory collection of ``User`` records."""

    def __init__(self, seed: Optional[Iterable[User]] = None) -> None:
        self._users: List[User] = list(DEFAULT_USERS if seed is None else seed)
        self._next_id = len(self._users) + 1

    def __len__(self) -> int:
        return len(self._users)

    def list_all(self) -> List[User]:
        return list(self._users)

    def find_by_id(self, user_id: str) -> Optional[User]:
        for user in self._users:
            if user.id == user_id:
                return user
        return None

    def find_by_email(self, email: str) -> Optional[User]:
        for user in self._users:
            if user.email == email:
                return user
        return None

    def insert(self, name: str, email: str) -> User:
        """Append a new record with a freshly assigned id and return it."""
        user_id = str(self._next_id)
        # Seeds may already hold ids above the counter.
        while self.find_by_id(user_id) is not None:
            self._next_id += 1
            user_id = str(self._next_id)
        self._next_id += 1
        user = User(id=user_id, name=name, email=email)
        self._users.append(user)
        logger.debug("Stored user %s", user_id)
        return user

    def remove_by_id(self, user_id: str) -> Optional[User]:
        for index, user in enumerate(self._users):
            if user.id == user_id:
                del self._users[index]
                logger.debug("Removed user %s", user_id)
                return user
        return None
