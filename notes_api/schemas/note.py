"""
Notes API — Note Request/Response Schemas
===========================================

What:  Pydantic models defining the JSON contract of the /notes endpoints.
How:   FastAPI validates request bodies against the *Request models and
       serializes responses through the *Response models.
Who:   Used by route handlers and returned by NoteService.

Wire names:
    The visibility flag is `is_public` on the ORM model but `public` on the
    wire. Response models read either name (`AliasChoices`) and always write
    `public`.

Schemas only check JSON shape. Business rules (non-empty title/content,
email format) are enforced in NoteService so they surface as 400
validation_error instead of FastAPI's 422.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


def _public_field():
    return Field(
        default=False,
        validation_alias=AliasChoices("public", "is_public"),
        description="Whether anyone holding the slug may read the note",
    )


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreateRequest(BaseModel):
    """Body of POST /notes/create-note."""

    title: str = Field(description="Note title (must not be blank)")
    content: str = Field(description="Note body (must not be blank)")
    public: bool = Field(default=False, description="Publish under a slug")


class NoteUpdateRequest(BaseModel):
    """Body of PUT /notes/update. Every field is replaced."""

    id: uuid.UUID = Field(description="Note to update")
    title: str
    content: str
    public: bool = False


class ShareRequest(BaseModel):
    """Body of POST /notes/share-slug."""

    id: uuid.UUID = Field(description="Note to share")
    email: str = Field(description="Email address to grant read access")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteSummary(BaseModel):
    """
    What:  Note without its content body.
    Who:   Items of GET /notes/get-notes; result of PUT /notes/update.
    """

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: uuid.UUID
    author_id: uuid.UUID
    title: str
    public: bool = _public_field()
    slug: Optional[str] = None
    created_at: datetime


class NoteResponse(BaseModel):
    """
    What:  Full note as seen by its owner.
    Who:   Returned by POST /notes/create-note and GET /notes/get-note.

    `shared_with` lists the grantee emails; it is only ever shown to the owner.
    """

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: uuid.UUID = Field(description="Unique note identifier (UUID)")
    author_id: uuid.UUID = Field(description="Owning account")
    title: str
    content: str
    public: bool = _public_field()
    slug: Optional[str] = Field(default=None, description="Lookup key for GET /notes/public")
    shared_with: List[str] = Field(default_factory=list, description="Emails with read access")
    created_at: datetime
    updated_at: datetime


class PublicNoteResponse(BaseModel):
    """
    What:  Note as seen through a slug lookup.
    Who:   Returned by GET /notes/public.

    No `shared_with`: a reader never learns who else the note was shared with.
    """

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: uuid.UUID
    author_id: uuid.UUID
    title: str
    content: str
    public: bool = _public_field()
    slug: Optional[str] = None
    created_at: datetime
    updated_at: datetime
