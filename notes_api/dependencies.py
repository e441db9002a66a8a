"""
Notes API — Service Dependencies
==================================

What:  FastAPI dependency functions that assemble a service per request.
How:   Each service gets a repository bound to the request's AsyncSession and
       the long-lived components (hasher, token service) from `app.state`.

Routes never construct services themselves, so tests can override these with
`app.dependency_overrides` to inject doubles.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from notes_api.database import get_db_session
from notes_api.repositories.note_repository import SqlAlchemyNoteRepository
from notes_api.repositories.user_repository import SqlAlchemyUserRepository
from notes_api.services.auth_service import AuthService
from notes_api.services.note_service import NoteService


# Commit before the response is sent; see get_db_session
DbSession = Depends(get_db_session, scope="function")


def get_auth_service(request: Request, db: AsyncSession = DbSession) -> AuthService:
    state = request.app.state
    return AuthService(
        SqlAlchemyUserRepository(db),
        hasher=state.password_hasher,
        tokens=state.token_service,
        min_password_length=state.settings.password_min_length,
    )


def get_note_service(request: Request, db: AsyncSession = DbSession) -> NoteService:
    return NoteService(
        SqlAlchemyNoteRepository(db),
        slug_suffix_length=request.app.state.settings.slug_suffix_length,
    )
