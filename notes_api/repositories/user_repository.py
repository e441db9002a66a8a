"""SQLAlchemy implementation of the account repository."""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from notes_api.exceptions import EmailExistsError
from notes_api.models import User
from notes_api.repositories.base import UserRepository, translate_database_errors

logger = logging.getLogger(__name__)


class SqlAlchemyUserRepository(UserRepository):
    """Account storage bound to one request's AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_email(self, email: str) -> Optional[User]:
        with translate_database_errors("get_user_by_email"):
            result = await self.db.execute(select(User).where(User.email == email))
            return result.scalar_one_or_none()

    async def add(self, user: User) -> User:
        with translate_database_errors("add_user"):
            self.db.add(user)
            try:
                await self.db.flush()
            except IntegrityError:
                # Lost a registration race: the unique index on users.email is authoritative
                logger.info("Registration rejected by unique constraint on email")
                raise EmailExistsError()
        return user
