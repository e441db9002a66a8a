"""
Notes API — Notes Route Handlers
==================================

What:  HTTP surface of the notes component.
How:   Extracts query/body parameters, resolves the caller through the access
       gate, delegates to NoteService, returns JSON.
Who:   Called by API clients holding a bearer token (every route except
       /notes/public, where the token is optional).

Route Inventory:
    POST   /notes/create-note               strict    201 NoteResponse
    GET    /notes/get-notes                 strict    200 [NoteSummary]
    GET    /notes/get-note?id=              strict    200 NoteResponse
    PUT    /notes/update                    strict    200 NoteSummary
    DELETE /notes/delete?id=                strict    200 MessageResponse
    POST   /notes/share-slug                strict    200 MessageResponse
    DELETE /notes/revoke-access?email=&id=  strict    200 MessageResponse
    GET    /notes/public?q=<slug>           optional  200 PublicNoteResponse

Caching:
    Every response is per-caller, so all of them carry
    `Cache-Control: private, no-store`.
"""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from notes_api.dependencies import get_note_service
from notes_api.schemas.common import ErrorResponse, MessageResponse
from notes_api.schemas.note import (
    NoteCreateRequest,
    NoteResponse,
    NoteSummary,
    NoteUpdateRequest,
    PublicNoteResponse,
    ShareRequest,
)
from notes_api.security import Identity, optional_identity, require_identity
from notes_api.services.note_service import NoteService

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/notes", tags=["Notes"])

_AUTH_ERRORS = {
    401: {"description": "Missing, invalid or expired bearer token", "model": ErrorResponse},
}


def _no_store(response: Response) -> None:
    response.headers["Cache-Control"] = "private, no-store"


@router.post(
    "/create-note",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        **_AUTH_ERRORS,
        400: {"description": "Empty title or content", "model": ErrorResponse},
    },
    summary="Create a note",
)
async def create_note(
    body: NoteCreateRequest,
    response: Response,
    identity: Identity = Depends(require_identity),
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    """
    Create a note owned by the caller.

    A public note gets a slug of the form `<hyphenated-lowercase-title>-<6 chars of id>`.
    """
    _no_store(response)
    return await service.create_note(
        author_id=identity.user_id,
        title=body.title,
        content=body.content,
        public=body.public,
    )


@router.get(
    "/get-notes",
    response_model=List[NoteSummary],
    responses=_AUTH_ERRORS,
    summary="List the caller's notes",
    description="Summaries (no content) of every note the caller owns, newest first.",
)
async def list_notes(
    response: Response,
    identity: Identity = Depends(require_identity),
    service: NoteService = Depends(get_note_service),
) -> List[NoteSummary]:
    _no_store(response)
    return await service.list_notes(identity.user_id)


@router.get(
    "/get-note",
    response_model=NoteResponse,
    responses={
        **_AUTH_ERRORS,
        404: {"description": "Note not found", "model": ErrorResponse},
    },
    summary="Get one of the caller's notes",
)
async def get_note(
    response: Response,
    note_id: UUID = Query(alias="id", description="Note identifier"),
    identity: Identity = Depends(require_identity),
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    """
    Full note including the emails it is shared with.

    Invalid UUIDs return 422 Unprocessable Entity (FastAPI default). A note
    that exists but belongs to someone else is a 404, same as a missing one.
    """
    _no_store(response)
    return await service.get_note(note_id, identity.user_id)


@router.put(
    "/update",
    response_model=NoteSummary,
    responses={
        **_AUTH_ERRORS,
        400: {"description": "Empty title or content", "model": ErrorResponse},
        403: {"description": "Not the owner", "model": ErrorResponse},
    },
    summary="Replace a note's title, content and visibility",
)
async def update_note(
    body: NoteUpdateRequest,
    response: Response,
    identity: Identity = Depends(require_identity),
    service: NoteService = Depends(get_note_service),
) -> NoteSummary:
    _no_store(response)
    return await service.update_note(
        note_id=body.id,
        author_id=identity.user_id,
        title=body.title,
        content=body.content,
        public=body.public,
    )


@router.delete(
    "/delete",
    response_model=MessageResponse,
    responses={
        **_AUTH_ERRORS,
        404: {"description": "Note not found", "model": ErrorResponse},
    },
    summary="Delete one of the caller's notes",
)
async def delete_note(
    response: Response,
    note_id: UUID = Query(alias="id"),
    identity: Identity = Depends(require_identity),
    service: NoteService = Depends(get_note_service),
) -> MessageResponse:
    _no_store(response)
    await service.delete_note(note_id, identity.user_id)
    return MessageResponse(message="note deleted successfully")


@router.post(
    "/share-slug",
    response_model=MessageResponse,
    responses={
        **_AUTH_ERRORS,
        400: {"description": "Missing or malformed email", "model": ErrorResponse},
        403: {"description": "Not the owner", "model": ErrorResponse},
    },
    summary="Grant an email read access to a note",
)
async def share_note(
    body: ShareRequest,
    response: Response,
    identity: Identity = Depends(require_identity),
    service: NoteService = Depends(get_note_service),
) -> MessageResponse:
    """
    The grantee reads the note through GET /notes/public with the note's slug
    while authenticated as the shared email.
    """
    _no_store(response)
    await service.share_via_email(body.id, identity.user_id, body.email)
    return MessageResponse(message="note shared successfully")


@router.delete(
    "/revoke-access",
    response_model=MessageResponse,
    responses={
        **_AUTH_ERRORS,
        403: {"description": "No such grant, or not the owner", "model": ErrorResponse},
    },
    summary="Remove an email's read access to a note",
)
async def revoke_access(
    response: Response,
    email: str = Query(description="Grantee email to remove"),
    note_id: UUID = Query(alias="id"),
    identity: Identity = Depends(require_identity),
    service: NoteService = Depends(get_note_service),
) -> MessageResponse:
    _no_store(response)
    await service.revoke_email_share(note_id, identity.user_id, email)
    return MessageResponse(message="note access removed successfully")


@router.get(
    "/public",
    response_model=PublicNoteResponse,
    responses={
        404: {"description": "No note with this slug is visible to the caller", "model": ErrorResponse},
    },
    summary="Read a note by slug",
    description=(
        "Anonymous callers can read public notes. With a bearer token the caller "
        "can also read their own notes and notes shared with their email. An "
        "invalid or expired token is treated as anonymous."
    ),
)
async def get_public_note(
    response: Response,
    slug: str = Query(alias="q", description="Note slug"),
    identity: Optional[Identity] = Depends(optional_identity),
    service: NoteService = Depends(get_note_service),
) -> PublicNoteResponse:
    _no_store(response)
    return await service.get_public_note(slug, identity)
