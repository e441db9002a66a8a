"""
Notes API — SQLAlchemy Note Repository
========================================

What:  Note and share-grant storage over one request's AsyncSession.
How:   Each authorization decision is a single SQL statement whose WHERE clause
       carries both the row identity and the caller's right to it:

       get/update/delete   WHERE id = :id AND author_id = :caller
       share               INSERT INTO note_shares SELECT ... FROM notes
                           WHERE id = :id AND author_id = :owner
                             AND NOT EXISTS (grant for :email)
       revoke              DELETE FROM note_shares WHERE note_id = :id
                           AND email = :email
                           AND note_id IN (owner's note :id)
       slug lookup         WHERE slug = :slug AND (is_public OR author_id = :caller
                           OR EXISTS (grant for :caller_email))

There is no read-then-write window in which another request could change the
owner or visibility between the check and the action.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import DateTime, String, Uuid, delete, exists, literal, or_, select, update
from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from notes_api.models import Note, NoteShare
from notes_api.repositories.base import NoteRepository, translate_database_errors
from notes_api.security import Identity

logger = logging.getLogger(__name__)

# Columns of a NoteSummary; shared by listing and update RETURNING
_SUMMARY_COLUMNS = (
    Note.id,
    Note.author_id,
    Note.title,
    Note.is_public,
    Note.slug,
    Note.created_at,
)


class SqlAlchemyNoteRepository(NoteRepository):
    """Note storage bound to one request's AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, note: Note) -> Note:
        with translate_database_errors("add_note", author_id=note.author_id):
            self.db.add(note)
            await self.db.flush()
        return note

    async def save(self, note: Note) -> Note:
        with translate_database_errors("save_note", note_id=note.id):
            await self.db.flush()
        return note

    async def list_summaries(self, author_id: UUID) -> Sequence[Row]:
        query = (
            select(*_SUMMARY_COLUMNS)
            .where(Note.author_id == author_id)
            .order_by(Note.created_at.desc())
        )
        with translate_database_errors("list_notes", author_id=author_id):
            result = await self.db.execute(query)
            return result.all()

    async def get_owned(self, note_id: UUID, author_id: UUID) -> Optional[Note]:
        query = (
            select(Note)
            .options(selectinload(Note.shares))
            .where(Note.id == note_id, Note.author_id == author_id)
            .execution_options(populate_existing=True)
        )
        with translate_database_errors("get_note", note_id=note_id):
            result = await self.db.execute(query)
            return result.scalar_one_or_none()

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
    ) -> Optional[Row]:
        statement = (
            update(Note)
            .where(Note.id == note_id, Note.author_id == author_id)
            .values(
                title=title,
                content=content,
                is_public=is_public,
                slug=slug,
                updated_at=updated_at,
            )
            .returning(*_SUMMARY_COLUMNS)
            .execution_options(synchronize_session=False)
        )
        with translate_database_errors("update_note", note_id=note_id):
            result = await self.db.execute(statement)
            return result.one_or_none()

    async def delete_owned(self, note_id: UUID, author_id: UUID) -> bool:
        statement = (
            delete(Note)
            .where(Note.id == note_id, Note.author_id == author_id)
            .execution_options(synchronize_session=False)
        )
        with translate_database_errors("delete_note", note_id=note_id):
            result = await self.db.execute(statement)
            return result.rowcount > 0

    async def add_share(self, note_id: UUID, owner_id: UUID, email: str) -> bool:
        already_granted = exists().where(
            NoteShare.note_id == Note.id,
            NoteShare.email == email,
        )
        source = select(
            literal(uuid.uuid4(), Uuid(as_uuid=True)),
            Note.id,
            literal(email, String(320)),
            literal(datetime.now(timezone.utc), DateTime(timezone=True)),
        ).where(
            Note.id == note_id,
            Note.author_id == owner_id,
            ~already_granted,
        )
        statement = (
            NoteShare.__table__.insert()
            .from_select(["id", "note_id", "email", "created_at"], source)
        )
        with translate_database_errors("share_note", note_id=note_id):
            result = await self.db.execute(statement)
            return result.rowcount > 0

    async def share_exists(self, note_id: UUID, owner_id: UUID, email: str) -> bool:
        query = (
            select(NoteShare.id)
            .join(Note, Note.id == NoteShare.note_id)
            .where(
                NoteShare.note_id == note_id,
                NoteShare.email == email,
                Note.author_id == owner_id,
            )
        )
        with translate_database_errors("share_exists", note_id=note_id):
            result = await self.db.execute(query)
            return result.first() is not None

    async def delete_share(self, note_id: UUID, owner_id: UUID, email: str) -> bool:
        owned_note = select(Note.id).where(Note.id == note_id, Note.author_id == owner_id)
        statement = (
            delete(NoteShare)
            .where(
                NoteShare.note_id == note_id,
                NoteShare.email == email,
                NoteShare.note_id.in_(owned_note),
            )
            .execution_options(synchronize_session=False)
        )
        with translate_database_errors("revoke_share", note_id=note_id):
            result = await self.db.execute(statement)
            return result.rowcount > 0

    async def find_visible_by_slug(self, slug: str, viewer: Optional[Identity]) -> Optional[Note]:
        if viewer is None:
            visible = Note.is_public.is_(True)
        else:
            visible = or_(
                Note.is_public.is_(True),
                Note.author_id == viewer.user_id,
                exists().where(
                    NoteShare.note_id == Note.id,
                    NoteShare.email == viewer.email,
                ),
            )
        query = (
            select(Note)
            .where(Note.slug == slug, visible)
            .execution_options(populate_existing=True)
        )
        with translate_database_errors("get_note_by_slug"):
            result = await self.db.execute(query)
            return result.scalar_one_or_none()
