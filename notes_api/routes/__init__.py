# Routes package init
"""
Notes API — API Routes Package
================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - auth.py:    POST /auth/register, POST /auth/login
    - notes.py:   /notes/* (CRUD, sharing, slug lookup)
    - health.py:  GET  /health

Design Principle:
    Routes are THIN. They handle HTTP concerns only:
    - Extract data from the request (query params, body, bearer token)
    - Call the appropriate service
    - Choose the status code and response model

    Business logic belongs in services, not routes.
"""
