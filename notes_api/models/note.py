"""
Notes API — Note and NoteShare SQLAlchemy Models
==================================================

What:  ORM models for the `notes` and `note_shares` tables.
Who:   Used by SqlAlchemyNoteRepository for every note operation and by
       Alembic for schema management.

Table Design:
    notes
    - UUID primary key; the first characters of its string form become the
      slug suffix of a public note
    - author_id: owning account (FK, ON DELETE CASCADE)
    - is_public / slug: a note created private has no slug; every update
      re-derives it. The unique constraint makes the storage layer reject a
      colliding slug
    - created_at / updated_at: UTC with timezone

    note_shares
    - one row per (note, grantee email); unique on the pair so grants form a set
    - ON DELETE CASCADE from notes: deleting a note removes its grants

    Index on (author_id, created_at DESC):
        Serves "list my notes, newest first" without a sort step
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from notes_api.database import Base

# Column width of notes.title; longer titles are rejected before reaching SQL
TITLE_MAX_LENGTH = 255


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Note(Base):
    """
    A text note owned by exactly one account.

    Lifecycle:
        created → updated* → deleted

    Query Patterns:
        - List own notes:  WHERE author_id = :caller ORDER BY created_at DESC
        - Owner access:    WHERE id = :id AND author_id = :caller
        - Slug access:     WHERE slug = :slug AND (is_public OR author_id = :caller
                           OR EXISTS (grant for :email))
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    slug: Mapped[str | None] = mapped_column(
        String(320),
        nullable=True,
        unique=True,
        comment="Set on public create and on every update",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utc_now,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utc_now,
    )

    author: Mapped["User"] = relationship(back_populates="notes")

    shares: Mapped[list["NoteShare"]] = relationship(
        back_populates="note",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="NoteShare.created_at",
    )

    @property
    def shared_with(self) -> list[str]:
        """Grantee emails, in the order the grants were created."""
        return [share.email for share in self.shares]

    def __repr__(self) -> str:
        return (
            f"<Note(id={self.id}, author_id={self.author_id}, "
            f"public={self.is_public}, slug='{self.slug}')>"
        )


# Serves "list my notes, newest first" without a sort step
Index("idx_notes_author_created_at", Note.author_id, Note.created_at.desc())


class NoteShare(Base):
    """Read grant for one email address on one note."""

    __tablename__ = "note_shares"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    note_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("notes.id", ondelete="CASCADE"),
        nullable=False,
    )

    email: Mapped[str] = mapped_column(String(320), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utc_now,
    )

    note: Mapped[Note] = relationship(back_populates="shares")

    __table_args__ = (
        UniqueConstraint("note_id", "email", name="uq_note_shares_note_email"),
        Index("idx_note_shares_email", "email"),
    )

    def __repr__(self) -> str:
        return f"<NoteShare(note_id={self.note_id}, email='{self.email}')>"
