"""
Slug derivation for public notes.

A slug is the lower-cased title with spaces turned into hyphens, followed by a
hyphen and the first characters of the note's identifier:

    "My First Note" + 3f9a1c72-... → "my-first-note-3f9a1c"

Identifiers are unique, so the suffix disambiguates notes that share a title.
There is no collision-retry loop; the unique constraint on `notes.slug`
rejects the (practically impossible) duplicate at the storage layer.
"""

import uuid

DEFAULT_SUFFIX_LENGTH = 6


def slugify(title: str) -> str:
    """Lower-case the title and replace spaces with hyphens."""
    return title.lower().replace(" ", "-")


def build_slug(title: str, note_id: uuid.UUID | str, suffix_length: int = DEFAULT_SUFFIX_LENGTH) -> str:
    """Return `slugify(title)` joined by a hyphen to the identifier prefix."""
    return f"{slugify(title)}-{str(note_id)[:suffix_length]}"
