from notes_api.schemas.auth import LoginRequest, LoginResponse, RegisterRequest, UserResponse
from notes_api.schemas.common import ErrorResponse, HealthResponse, MessageResponse
from notes_api.schemas.note import (
    NoteCreateRequest,
    NoteResponse,
    NoteSummary,
    NoteUpdateRequest,
    PublicNoteResponse,
    ShareRequest,
)

__all__ = [
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    "UserResponse",
    "ErrorResponse",
    "HealthResponse",
    "MessageResponse",
    "NoteCreateRequest",
    "NoteResponse",
    "NoteSummary",
    "NoteUpdateRequest",
    "PublicNoteResponse",
    "ShareRequest",
]
