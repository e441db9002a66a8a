"""
Notes API — User (Account) SQLAlchemy Model
=============================================

What:  ORM model representing the `users` table.
Who:   Written by AuthService.register(), read by AuthService.login().

Table Design:
    - UUID primary key, generated in Python so the id is known after flush
      on every backend (PostgreSQL and SQLite alike)
    - email: unique, stored trimmed and lower-cased; the unique index is what
      makes "email already in use" hold under concurrent registrations
    - password_hash: passlib-encoded hash string (scheme + salt + digest);
      never copied into any response schema
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from notes_api.database import Base


class User(Base):
    """A registered account that can own notes."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    email: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        unique=True,
        index=True,
        comment="Login identifier, normalized to lower case",
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False, default="")

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="One-way password hash (passlib format)",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    notes: Mapped[list["Note"]] = relationship(
        back_populates="author",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
