"""
Notes API — Application Package Initializer
=============================================

What: Multi-tenant note-taking REST API (accounts, notes, slug and email sharing).
Who:  Served by uvicorn (`notes_api.main:create_app --factory`); imported by Alembic and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │   Routes (API Layer) + Access Gate  │  ← HTTP concerns, bearer tokens
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Validation, slugs, authorization outcomes
    ├─────────────────────────────────────┤
    │      Repositories (Storage Contract)│  ← One SQL statement per decision
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
