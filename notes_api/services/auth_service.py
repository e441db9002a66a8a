"""
Notes API — Auth Service (Account Registration & Login)
=========================================================

What:  Business rules for creating accounts and exchanging credentials for a
       bearer token.
How:   Validates input, hashes/verifies passwords through PasswordHasher, and
       persists accounts through a UserRepository.
Who:   Called by the /auth route handlers.

Rules:
    register  email must match EMAIL_PATTERN          → InvalidEmailError (400)
              password length >= min_password_length  → WeakPasswordError (400)
              email not already registered            → EmailExistsError (409)
    login     unknown email OR wrong password         → InvalidCredentialsError (401)

Emails are trimmed and lower-cased before any lookup or insert, so
"Ann@Example.com" and "ann@example.com" are the same account.
"""

import logging
import re
from typing import Tuple

from starlette.concurrency import run_in_threadpool

from notes_api.exceptions import (
    EmailExistsError,
    InvalidCredentialsError,
    InvalidEmailError,
    WeakPasswordError,
)
from notes_api.models import User
from notes_api.repositories.base import UserRepository
from notes_api.services.password import PasswordHasher
from notes_api.services.token_service import TokenService

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


class AuthService:
    """
    Account registration and login.

    Stateless apart from its collaborators; one instance is built per request
    around that request's repository.
    """

    def __init__(
        self,
        repo: UserRepository,
        hasher: PasswordHasher,
        tokens: TokenService,
        min_password_length: int = 8,
    ):
        self.repo = repo
        self.hasher = hasher
        self.tokens = tokens
        self.min_password_length = min_password_length

    async def register(self, email: str, name: str, password: str) -> User:
        """
        Create an account.

        The pre-check gives the common duplicate case a cheap answer; the unique
        index still decides when two registrations race (the repository turns
        the IntegrityError into EmailExistsError).

        Raises:
            InvalidEmailError, WeakPasswordError, EmailExistsError
        """
        email = normalize_email(email or "")
        if not is_valid_email(email):
            raise InvalidEmailError()
        if len(password or "") < self.min_password_length:
            raise WeakPasswordError(self.min_password_length)

        if await self.repo.get_by_email(email) is not None:
            logger.info("Registration rejected: email already in use")
            raise EmailExistsError()

        # bcrypt is deliberately slow; keep it off the event loop
        password_hash = await run_in_threadpool(self.hasher.hash, password)

        user = await self.repo.add(
            User(email=email, name=(name or "").strip(), password_hash=password_hash)
        )
        logger.info("Account registered: %s", user.id)
        return user

    async def login(self, email: str, password: str) -> Tuple[User, str]:
        """
        Verify credentials and issue a bearer token.

        Returns:
            (account, signed token)

        Raises:
            InvalidCredentialsError: same error for unknown email and bad password
        """
        user = await self.repo.get_by_email(normalize_email(email or ""))
        if user is None:
            await run_in_threadpool(self.hasher.dummy_verify)
            logger.info("Login failed: unknown account")
            raise InvalidCredentialsError()

        if not await run_in_threadpool(self.hasher.verify, password or "", user.password_hash):
            logger.info("Login failed: bad password for account %s", user.id)
            raise InvalidCredentialsError()

        token = self.tokens.issue(user.id, user.email)
        logger.info("Login succeeded for account %s", user.id)
        return user, token
