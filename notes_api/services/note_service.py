"""
Notes API — Note Service (Business Logic)
===========================================

What:  CRUD over notes plus the two sharing mechanisms (public slug and
       per-email grant), each operation authorized against the caller.
How:   Validates input, derives slugs, and delegates every authorization
       decision to one owner-scoped NoteRepository call.
Who:   Called by the /notes route handlers.

Authorization Outcomes:
    get_note            not found / not owner   → NotFoundError (404)
    update_note         not found / not owner   → AuthorizationError (403)
    delete_note         not found / not owner   → NotFoundError (404)
    share_via_email     not found / not owner   → AuthorizationError (403)
    revoke_email_share  no such grant / not owner → AuthorizationError (403)
    get_public_note     not visible to caller   → NotFoundError (404)

    None of these says which half of the predicate failed, so a caller cannot
    probe for note identifiers that belong to other accounts.

Slugs:
    create  public → slug derived from title + first characters of the id,
            which is only known after the INSERT is flushed
            private → no slug
    update  slug re-derived from the new title on every update, whatever the
            visibility; a private note's slug is reachable only by its owner
            and grantees
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from notes_api.exceptions import AuthorizationError, NotFoundError, ValidationError
from notes_api.models import Note
from notes_api.models.note import TITLE_MAX_LENGTH
from notes_api.repositories.base import NoteRepository
from notes_api.schemas.note import NoteResponse, NoteSummary, PublicNoteResponse
from notes_api.security import Identity
from notes_api.services.auth_service import is_valid_email, normalize_email
from notes_api.services.slug import DEFAULT_SUFFIX_LENGTH, build_slug

logger = logging.getLogger(__name__)


def _require_text(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(message=f"Note {field} must not be empty", field=field)
    return value


def _require_title(value: Optional[str]) -> str:
    title = _require_text(value, "title")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(
            message=f"Note title must be at most {TITLE_MAX_LENGTH} characters",
            field="title",
            context={"max_length": TITLE_MAX_LENGTH},
        )
    return title


class NoteService:
    """
    Business logic layer for note operations.

    Responsibilities:
        - create_note() / list_notes() / get_note(): owner's own notes
        - update_note() / delete_note(): owner-scoped writes
        - share_via_email() / revoke_email_share(): read grants
        - get_public_note(): slug lookup for anyone allowed to see the note

    Error Handling Strategy:
        Input problems raise ValidationError before any query runs. Storage
        failures arrive from the repository already wrapped in DatabaseError
        and propagate unchanged.
    """

    def __init__(self, repo: NoteRepository, slug_suffix_length: int = DEFAULT_SUFFIX_LENGTH):
        self.repo = repo
        self.slug_suffix_length = slug_suffix_length

    # ── Owner CRUD ────────────────────────────────────────────────────────
    async def create_note(self, author_id: UUID, title: str, content: str, public: bool) -> NoteResponse:
        """
        Store a new note.

        Workflow:
            1. Validate title and content
            2. INSERT + flush (assigns the identifier)
            3. If public: derive the slug from title + id, flush again

        Raises:
            ValidationError: empty title/content, title too long, missing author
        """
        if not author_id:
            raise ValidationError(message="Missing author id", field="author_id")
        title = _require_title(title)
        content = _require_text(content, "content")

        now = datetime.now(timezone.utc)
        note = Note(
            author_id=author_id,
            title=title,
            content=content,
            is_public=public,
            created_at=now,
            updated_at=now,
            shares=[],
        )
        await self.repo.add(note)

        if public:
            note.slug = build_slug(note.title, note.id, self.slug_suffix_length)
            await self.repo.save(note)

        logger.info("Note created: %s (public=%s)", note.id, note.is_public)
        return NoteResponse.model_validate(note)

    async def list_notes(self, author_id: UUID) -> List[NoteSummary]:
        """Summaries of the caller's notes, newest created first."""
        rows = await self.repo.list_summaries(author_id)
        return [NoteSummary.model_validate(row) for row in rows]

    async def get_note(self, note_id: UUID, author_id: UUID) -> NoteResponse:
        """
        Full note including grantee emails.

        Raises:
            NotFoundError: note missing or owned by someone else
        """
        note = await self.repo.get_owned(note_id, author_id)
        if note is None:
            raise NotFoundError(resource="note")
        return NoteResponse.model_validate(note)

    async def update_note(
        self,
        note_id: UUID,
        author_id: UUID,
        title: str,
        content: str,
        public: bool,
    ) -> NoteSummary:
        """
        Replace title, content and visibility of an owned note.

        One UPDATE ... WHERE id AND author_id RETURNING; when it matches
        nothing, no row was touched.

        Raises:
            ValidationError:    empty title/content or title too long
            AuthorizationError: note missing or owned by someone else
        """
        title = _require_title(title)
        content = _require_text(content, "content")

        row = await self.repo.update_owned(
            note_id,
            author_id,
            title=title,
            content=content,
            is_public=public,
            slug=build_slug(title, note_id, self.slug_suffix_length),
            updated_at=datetime.now(timezone.utc),
        )
        if row is None:
            logger.warning("Update rejected for note %s by account %s", note_id, author_id)
            raise AuthorizationError()

        logger.info("Note updated: %s (public=%s)", note_id, public)
        return NoteSummary.model_validate(row)

    async def delete_note(self, note_id: UUID, author_id: UUID) -> None:
        """
        Delete an owned note; its share grants go with it.

        Raises:
            NotFoundError: note missing or owned by someone else
        """
        if not await self.repo.delete_owned(note_id, author_id):
            raise NotFoundError(resource="note")
        logger.info("Note deleted: %s", note_id)

    # ── Sharing ───────────────────────────────────────────────────────────
    async def share_via_email(self, note_id: UUID, owner_id: UUID, email: str) -> None:
        """
        Grant `email` read access to an owned note.

        Sharing again with the same email succeeds without adding a second
        grant.

        Raises:
            ValidationError:    missing owner, empty or malformed email
            AuthorizationError: note missing or owned by someone else
        """
        if not owner_id:
            raise ValidationError(message="Missing owner id", field="owner_id")
        email = normalize_email(email or "")
        if not email:
            raise ValidationError(message="Email is required", field="email")
        if not is_valid_email(email):
            raise ValidationError(message="Invalid email format provided", field="email")

        if await self.repo.add_share(note_id, owner_id, email):
            logger.info("Note %s shared with a new grantee", note_id)
            return

        # Zero rows: either the grant already exists or the caller is not the owner
        if await self.repo.share_exists(note_id, owner_id, email):
            logger.debug("Note %s already shared with this grantee", note_id)
            return

        logger.warning("Share rejected for note %s by account %s", note_id, owner_id)
        raise AuthorizationError()

    async def revoke_email_share(self, note_id: UUID, owner_id: UUID, email: str) -> None:
        """
        Remove a grant from an owned note.

        Raises:
            AuthorizationError: no such grant, no such note, or not the owner
        """
        email = normalize_email(email or "")
        if not await self.repo.delete_share(note_id, owner_id, email):
            logger.warning("Revoke rejected for note %s by account %s", note_id, owner_id)
            raise AuthorizationError()
        logger.info("Grant revoked on note %s", note_id)

    # ── Slug Lookup ───────────────────────────────────────────────────────
    async def get_public_note(self, slug: str, caller: Optional[Identity]) -> PublicNoteResponse:
        """
        Resolve a slug for the caller.

        Anonymous callers see public notes only. Authenticated callers also
        see their own notes and notes shared with their email. Everything else
        is NotFoundError, including an empty slug.
        """
        if not slug:
            raise NotFoundError(resource="note")
        note = await self.repo.find_visible_by_slug(slug, caller)
        if note is None:
            raise NotFoundError(resource="note")
        return PublicNoteResponse.model_validate(note)
