# Services package init
"""
Notes API — Services Layer
============================

What:  Business logic between routes (HTTP) and repositories (persistence).
How:   Services receive their collaborators through the constructor and are
       built per request by the functions in notes_api.dependencies.

Service Inventory:
    - AuthService:    registration rules, login, token issuance
    - NoteService:    note CRUD, email sharing, slug lookup
    - TokenService:   signs and verifies bearer tokens (python-jose)
    - PasswordHasher: one-way password hashing (passlib)
    - slug:           slug derivation helpers
"""
