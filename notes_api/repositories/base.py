"""
Notes API — Repository Contracts
==================================

What:  Abstract storage interfaces for accounts and notes.
Why:   Services depend on these contracts only, so the SQL implementation can
       be replaced (or mocked in unit tests) without touching business logic.
How:   Concrete implementations inherit and implement every abstract method.
       The SQLAlchemy versions live beside this module.
Who:   AuthService takes a UserRepository; NoteService takes a NoteRepository.

Authorization Contract:
    Every owner-scoped method checks existence AND ownership in the same SQL
    statement that reads or writes the row. A method reports "nothing matched"
    (None / False) and the service decides which error that means; it never
    tells the caller which half of the predicate failed.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime
import logging
from typing import Any, Iterator, Optional, Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from notes_api.exceptions import DatabaseError
from notes_api.models import Note, User
from notes_api.security import Identity

logger = logging.getLogger(__name__)


@contextmanager
def translate_database_errors(operation: str, **context: Any) -> Iterator[None]:
    """
    Wrap SQLAlchemy failures raised inside the block in `DatabaseError`.

    The SQL error is logged here with its traceback; the client only ever sees
    the generic DatabaseError message.
    """
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(
            "Database error during %s (%s): %s",
            operation,
            ", ".join(f"{k}={v}" for k, v in context.items()),
            str(e),
            exc_info=True,
        )
        raise DatabaseError(context={"operation": operation, "error_type": type(e).__name__}) from e


class UserRepository(ABC):
    """Storage contract for accounts."""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Return the account registered under `email`, or None."""
        ...

    @abstractmethod
    async def add(self, user: User) -> User:
        """
        Persist a new account and return it with its identifier assigned.

        Raises:
            EmailExistsError: the email is already taken (unique constraint)
        """
        ...


class NoteRepository(ABC):
    """
    Storage contract for notes and their email share grants.

    Summary rows expose `id`, `author_id`, `title`, `is_public`, `slug` and
    `created_at` as attributes.
    """

    @abstractmethod
    async def add(self, note: Note) -> Note:
        """Insert the note and flush so its identifier is assigned."""
        ...

    @abstractmethod
    async def save(self, note: Note) -> Note:
        """Flush pending changes on an already-added note."""
        ...

    @abstractmethod
    async def list_summaries(self, author_id: UUID) -> Sequence[Any]:
        """Summary rows of the author's notes, newest created first."""
        ...

    @abstractmethod
    async def get_owned(self, note_id: UUID, author_id: UUID) -> Optional[Note]:
        """The note with its share grants loaded, if it exists and is owned by `author_id`."""
        ...

    @abstractmethod
    async def update_owned(
        self,
        note_id: UUID,
        author_id: UUID,
        *,
        title: str,
        content: str,
        is_public: bool,
        slug: Optional[str],
        updated_at: datetime,
    ) -> Optional[Any]:
        """Owner-scoped single-statement update; returns the summary row or None."""
        ...

    @abstractmethod
    async def delete_owned(self, note_id: UUID, author_id: UUID) -> bool:
        """Owner-scoped delete; True when a row was removed."""
        ...

    @abstractmethod
    async def add_share(self, note_id: UUID, owner_id: UUID, email: str) -> bool:
        """Insert a grant if the note is owned by `owner_id` and not already shared with `email`."""
        ...

    @abstractmethod
    async def share_exists(self, note_id: UUID, owner_id: UUID, email: str) -> bool:
        """True when `owner_id` owns the note and it is already shared with `email`."""
        ...

    @abstractmethod
    async def delete_share(self, note_id: UUID, owner_id: UUID, email: str) -> bool:
        """Owner-scoped grant removal; True when a grant was removed."""
        ...

    @abstractmethod
    async def find_visible_by_slug(self, slug: str, viewer: Optional[Identity]) -> Optional[Note]:
        """The note behind `slug` if `viewer` may read it (public, owner, or grantee)."""
        ...
