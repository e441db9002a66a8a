"""Tests for slug derivation."""

import re
from uuid import UUID

from notes_api.services.slug import build_slug, slugify

NOTE_ID = UUID("3f9a1c72-5b0e-4d1a-9c3e-2a7f8b6d4e10")


class TestSlugify:

    def test_lowercases_and_hyphenates(self):
        assert slugify("My First Note") == "my-first-note"

    def test_every_space_becomes_a_hyphen(self):
        assert slugify("a  b") == "a--b"

    def test_other_characters_are_kept(self):
        assert slugify("Q3: Plans!") == "q3:-plans!"


class TestBuildSlug:

    def test_example_scenario(self):
        """'My First Note' → my-first-note-<first 6 chars of the id>."""
        slug = build_slug("My First Note", NOTE_ID)
        assert slug == "my-first-note-3f9a1c"
        assert re.fullmatch(r"my-first-note-[0-9a-f]{6}", slug)

    def test_suffix_comes_from_string_form_of_id(self):
        assert build_slug("x", str(NOTE_ID)) == build_slug("x", NOTE_ID)

    def test_custom_suffix_length(self):
        assert build_slug("Title", NOTE_ID, suffix_length=8) == "title-3f9a1c72"

    def test_same_title_different_ids_differ(self):
        other = UUID("a1b2c3d4-0000-4000-8000-000000000000")
        assert build_slug("Shopping", NOTE_ID) != build_slug("Shopping", other)
