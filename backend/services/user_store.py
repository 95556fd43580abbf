"""
User Store - in-memory users for the lifetime of the process.

Owned by the app instance and passed explicitly to every handler, so each
create_app() (and each test) gets its own store.

Ids are numeric strings, one past the highest numeric id seen. create() is a
critical section: Flask's dev server handles requests on threads.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional

from api.contracts.schemas.users import CreateUserRequest, User

logger = logging.getLogger('services.user_store')


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a Z suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class UserStore:
    """
    Insertion-ordered user list with list / get / create.

    Args:
        users: Initial users (e.g. seed_users())
        clock: Returns the current time; injectable for tests
    """

    def __init__(
        self,
        users: Optional[Iterable[User]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._users: List[User] = list(users or [])
        self._clock = clock or _utcnow
        self._lock = threading.Lock()
        numeric_ids = [int(u.id) for u in self._users if u.id.isdigit()]
        self._next_id = max(numeric_ids, default=0) + 1

    def list(self) -> List[User]:
        """All users in insertion order (a copy)."""
        return list(self._users)

    def get_by_id(self, user_id: str) -> Optional[User]:
        for user in self._users:
            if user.id == user_id:
                return user
        return None

    def create(self, request: CreateUserRequest) -> User:
        """Store a new user with a server-assigned id and createdAt."""
        with self._lock:
            user = User(
                id=str(self._next_id),
                createdAt=format_timestamp(self._clock()),
                **request.model_dump(exclude_none=True),
            )
            self._next_id += 1
            self._users.append(user)

        logger.info(f"user_created id={user.id}")
        return user

    def __len__(self) -> int:
        return len(self._users)


def seed_users() -> List[User]:
    """The two demo users the service starts with."""
    return [
        User(
            id="1",
            name="Taro Yamada",
            email="yamada@example.com",
            age=25,
            createdAt="2025-01-01T00:00:00Z",
        ),
        User(
            id="2",
            name="Hanako Sato",
            email="sato@example.com",
            age=30,
            createdAt="2025-01-02T00:00:00Z",
        ),
    ]
