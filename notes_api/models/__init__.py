from notes_api.models.user import User
from notes_api.models.note import Note, NoteShare

__all__ = ["User", "Note", "NoteShare"]
