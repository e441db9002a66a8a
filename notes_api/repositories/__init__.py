from notes_api.repositories.base import NoteRepository, UserRepository
from notes_api.repositories.note_repository import SqlAlchemyNoteRepository
from notes_api.repositories.user_repository import SqlAlchemyUserRepository

__all__ = [
    "NoteRepository",
    "UserRepository",
    "SqlAlchemyNoteRepository",
    "SqlAlchemyUserRepository",
]
