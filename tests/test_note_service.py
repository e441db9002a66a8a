"""
Notes API — Note Service Tests
================================

What:  Tests for NoteService business rules against a real SQLite database.
How:   NoteService over SqlAlchemyNoteRepository on the per-test db_session;
       accounts are inserted with the make_user fixture.

What we test:
    ✅ Private notes have no slug; public notes get <title>-<6 chars of id>
    ✅ Empty title/content rejected before touching storage
    ✅ Listing returns only the caller's notes, newest first, without content
    ✅ Non-owners get NotFound on read/delete and Authorization on update
    ✅ Rejected updates leave the row untouched
    ✅ Share grants: owner only, idempotent, revocable, cascade on delete
    ✅ Slug lookup: public / owner / grantee / anonymous / stranger matrix
"""

import re
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from sqlalchemy import func, select

from notes_api.exceptions import AuthorizationError, NotFoundError, ValidationError
from notes_api.models import NoteShare
from notes_api.repositories.note_repository import SqlAlchemyNoteRepository
from notes_api.security import Identity
from notes_api.services.note_service import NoteService


def _identity(user) -> Identity:
    return Identity(user_id=user.id, email=user.email)


@pytest.fixture
def service(db_session) -> NoteService:
    return NoteService(SqlAlchemyNoteRepository(db_session))


class TestCreateNote:

    @pytest.mark.asyncio
    async def test_private_note_has_no_slug(self, service, make_user):
        owner = await make_user()

        note = await service.create_note(owner.id, "Groceries", "milk", public=False)

        assert note.slug is None
        assert note.public is False
        assert note.author_id == owner.id
        assert note.shared_with == []

    @pytest.mark.asyncio
    async def test_public_note_slug_uses_title_and_id(self, service, make_user):
        owner = await make_user()

        note = await service.create_note(owner.id, "My First Note", "hello", public=True)

        assert re.fullmatch(r"my-first-note-[0-9a-f]{6}", note.slug)
        assert note.slug.endswith(str(note.id)[:6])

    @pytest.mark.asyncio
    async def test_timestamps_set(self, service, make_user):
        owner = await make_user()

        note = await service.create_note(owner.id, "T", "C", public=False)

        assert note.created_at is not None
        assert note.updated_at == note.created_at

    @pytest.mark.asyncio
    @pytest.mark.parametrize("title,content", [("", "body"), ("   ", "body"), ("Title", ""), ("Title", "\n\t")])
    async def test_empty_fields_rejected(self, mock_note_repo, title, content):
        service = NoteService(mock_note_repo)

        with pytest.raises(ValidationError):
            await service.create_note(uuid4(), title, content, public=False)
        mock_note_repo.add.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_title_longer_than_column_rejected(self, mock_note_repo):
        service = NoteService(mock_note_repo)

        with pytest.raises(ValidationError) as exc_info:
            await service.create_note(uuid4(), "x" * 256, "body", public=True)

        assert exc_info.value.field == "title"
        assert exc_info.value.context["max_length"] == 255
        mock_note_repo.add.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_title_of_exactly_column_width_accepted(self, service, make_user):
        owner = await make_user()

        note = await service.create_note(owner.id, "x" * 255, "body", public=False)

        assert len(note.title) == 255

    @pytest.mark.asyncio
    async def test_update_with_long_title_rejected(self, mock_note_repo):
        service = NoteService(mock_note_repo)

        with pytest.raises(ValidationError):
            await service.update_note(uuid4(), uuid4(), "x" * 256, "body", public=False)
        mock_note_repo.update_owned.assert_not_awaited()


class TestListAndGet:

    @pytest.mark.asyncio
    async def test_list_only_own_notes_newest_first(self, service, make_user):
        ann = await make_user("ann@example.com")
        bob = await make_user("bob@example.com")
        first = await service.create_note(ann.id, "First", "1", public=False)
        second = await service.create_note(ann.id, "Second", "2", public=True)
        await service.create_note(bob.id, "Bob's", "3", public=False)

        summaries = await service.list_notes(ann.id)

        assert [s.id for s in summaries] == [second.id, first.id]
        assert summaries[0].slug == second.slug
        assert not hasattr(summaries[0], "content")

    @pytest.mark.asyncio
    async def test_list_empty(self, service, make_user):
        owner = await make_user()
        assert await service.list_notes(owner.id) == []

    @pytest.mark.asyncio
    async def test_get_note_owner_sees_grants(self, service, make_user):
        owner = await make_user()
        note = await service.create_note(owner.id, "Plan", "secret", public=False)
        await service.share_via_email(note.id, owner.id, "someone@example.com")

        fetched = await service.get_note(note.id, owner.id)

        assert fetched.content == "secret"
        assert fetched.shared_with == ["someone@example.com"]

    @pytest.mark.asyncio
    async def test_get_note_non_owner_not_found(self, service, make_user):
        owner = await make_user()
        other = await make_user()
        note = await service.create_note(owner.id, "Plan", "secret", public=True)

        with pytest.raises(NotFoundError):
            await service.get_note(note.id, other.id)

    @pytest.mark.asyncio
    async def test_get_missing_note_not_found(self, service, make_user):
        owner = await make_user()
        with pytest.raises(NotFoundError):
            await service.get_note(uuid4(), owner.id)


class TestUpdateNote:

    @pytest.mark.asyncio
    async def test_owner_update_rederives_slug(self, service, make_user):
        owner = await make_user()
        note = await service.create_note(owner.id, "Old Title", "c", public=True)

        summary = await service.update_note(note.id, owner.id, "New Title", "c2", public=True)

        assert summary.title == "New Title"
        assert summary.slug == f"new-title-{str(note.id)[:6]}"
        fetched = await service.get_note(note.id, owner.id)
        assert fetched.content == "c2"
        assert fetched.updated_at >= fetched.created_at

    @pytest.mark.asyncio
    async def test_private_update_still_derives_slug(self, service, make_user):
        owner = await make_user()
        note = await service.create_note(owner.id, "Draft", "c", public=False)

        summary = await service.update_note(note.id, owner.id, "Draft", "c", public=False)

        assert summary.public is False
        assert summary.slug == f"draft-{str(note.id)[:6]}"

    @pytest.mark.asyncio
    async def test_non_owner_update_rejected_and_storage_unchanged(self, service, make_user):
        owner = await make_user()
        intruder = await make_user()
        note = await service.create_note(owner.id, "Mine", "original", public=False)

        with pytest.raises(AuthorizationError):
            await service.update_note(note.id, intruder.id, "Hacked", "hacked", public=True)

        fetched = await service.get_note(note.id, owner.id)
        assert fetched.title == "Mine"
        assert fetched.content == "original"
        assert fetched.public is False
        assert fetched.slug is None

    @pytest.mark.asyncio
    async def test_update_missing_note_rejected(self, service, make_user):
        owner = await make_user()
        with pytest.raises(AuthorizationError):
            await service.update_note(uuid4(), owner.id, "T", "C", public=False)

    @pytest.mark.asyncio
    async def test_update_with_empty_content_rejected(self, mock_note_repo):
        service = NoteService(mock_note_repo)

        with pytest.raises(ValidationError):
            await service.update_note(uuid4(), uuid4(), "Title", " ", public=False)
        mock_note_repo.update_owned.assert_not_awaited()


class TestDeleteNote:

    @pytest.mark.asyncio
    async def test_owner_delete_removes_note_and_grants(self, service, make_user, db_session):
        owner = await make_user()
        note = await service.create_note(owner.id, "Bye", "c", public=False)
        await service.share_via_email(note.id, owner.id, "reader@example.com")

        await service.delete_note(note.id, owner.id)

        with pytest.raises(NotFoundError):
            await service.get_note(note.id, owner.id)
        remaining = await db_session.scalar(
            select(func.count()).select_from(NoteShare).where(NoteShare.note_id == note.id)
        )
        assert remaining == 0

    @pytest.mark.asyncio
    async def test_non_owner_delete_not_found(self, service, make_user):
        owner = await make_user()
        other = await make_user()
        note = await service.create_note(owner.id, "Keep", "c", public=False)

        with pytest.raises(NotFoundError):
            await service.delete_note(note.id, other.id)

        assert (await service.get_note(note.id, owner.id)).title == "Keep"


class TestSharing:

    @pytest.mark.asyncio
    async def test_share_then_reshare_is_idempotent(self, service, make_user):
        owner = await make_user()
        note = await service.create_note(owner.id, "Shared", "c", public=False)

        await service.share_via_email(note.id, owner.id, "reader@example.com")
        await service.share_via_email(note.id, owner.id, " Reader@Example.com ")

        fetched = await service.get_note(note.id, owner.id)
        assert fetched.shared_with == ["reader@example.com"]

    @pytest.mark.asyncio
    async def test_non_owner_cannot_share(self, service, make_user):
        owner = await make_user()
        other = await make_user()
        note = await service.create_note(owner.id, "Shared", "c", public=False)

        with pytest.raises(AuthorizationError):
            await service.share_via_email(note.id, other.id, "reader@example.com")

    @pytest.mark.asyncio
    async def test_share_missing_note_rejected(self, service, make_user):
        owner = await make_user()
        with pytest.raises(AuthorizationError):
            await service.share_via_email(uuid4(), owner.id, "reader@example.com")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("email", ["", "   ", "not-an-email"])
    async def test_share_invalid_email_rejected(self, email):
        repo = AsyncMock()
        service = NoteService(repo)

        with pytest.raises(ValidationError):
            await service.share_via_email(uuid4(), uuid4(), email)
        repo.add_share.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_share_without_owner_rejected(self, mock_note_repo):
        service = NoteService(mock_note_repo)
        with pytest.raises(ValidationError):
            await service.share_via_email(uuid4(), None, "reader@example.com")

    @pytest.mark.asyncio
    async def test_revoke_existing_grant(self, service, make_user):
        owner = await make_user()
        note = await service.create_note(owner.id, "Shared", "c", public=False)
        await service.share_via_email(note.id, owner.id, "reader@example.com")

        await service.revoke_email_share(note.id, owner.id, "reader@example.com")

        assert (await service.get_note(note.id, owner.id)).shared_with == []

    @pytest.mark.asyncio
    async def test_revoke_never_created_grant_is_authorization_error(self, service, make_user):
        owner = await make_user()
        note = await service.create_note(owner.id, "Shared", "c", public=False)

        with pytest.raises(AuthorizationError):
            await service.revoke_email_share(note.id, owner.id, "nobody@example.com")

    @pytest.mark.asyncio
    async def test_non_owner_cannot_revoke(self, service, make_user):
        owner = await make_user()
        other = await make_user()
        note = await service.create_note(owner.id, "Shared", "c", public=False)
        await service.share_via_email(note.id, owner.id, "reader@example.com")

        with pytest.raises(AuthorizationError):
            await service.revoke_email_share(note.id, other.id, "reader@example.com")

        assert (await service.get_note(note.id, owner.id)).shared_with == ["reader@example.com"]


class TestPublicLookup:

    @pytest.mark.asyncio
    async def test_anonymous_reads_public_note(self, service, make_user):
        owner = await make_user()
        note = await service.create_note(owner.id, "Hello World", "hi", public=True)

        found = await service.get_public_note(note.slug, None)

        assert found.id == note.id
        assert found.content == "hi"
        assert not hasattr(found, "shared_with")

    @pytest.mark.asyncio
    async def test_anonymous_cannot_read_private_note(self, service, make_user):
        owner = await make_user()
        note = await service.create_note(owner.id, "Hidden", "x", public=True)
        summary = await service.update_note(note.id, owner.id, "Hidden", "x", public=False)

        with pytest.raises(NotFoundError):
            await service.get_public_note(summary.slug, None)

    @pytest.mark.asyncio
    async def test_private_note_visible_to_owner_and_grantee_only(self, service, make_user):
        owner = await make_user("owner@example.com")
        grantee = await make_user("someone@example.com")
        stranger = await make_user("stranger@example.com")
        note = await service.create_note(owner.id, "Diary", "dear diary", public=False)
        summary = await service.update_note(note.id, owner.id, "Diary", "dear diary", public=False)
        await service.share_via_email(note.id, owner.id, "someone@example.com")

        assert (await service.get_public_note(summary.slug, _identity(grantee))).id == note.id
        assert (await service.get_public_note(summary.slug, _identity(owner))).id == note.id
        with pytest.raises(NotFoundError):
            await service.get_public_note(summary.slug, _identity(stranger))
        with pytest.raises(NotFoundError):
            await service.get_public_note(summary.slug, None)

    @pytest.mark.asyncio
    async def test_revoked_grantee_loses_access(self, service, make_user):
        owner = await make_user()
        grantee = await make_user("someone@example.com")
        note = await service.create_note(owner.id, "Diary", "x", public=False)
        summary = await service.update_note(note.id, owner.id, "Diary", "x", public=False)
        await service.share_via_email(note.id, owner.id, grantee.email)
        await service.revoke_email_share(note.id, owner.id, grantee.email)

        with pytest.raises(NotFoundError):
            await service.get_public_note(summary.slug, _identity(grantee))

    @pytest.mark.asyncio
    async def test_unknown_or_empty_slug_not_found(self, service):
        with pytest.raises(NotFoundError):
            await service.get_public_note("does-not-exist-abcdef", None)
        with pytest.raises(NotFoundError):
            await service.get_public_note("", None)
