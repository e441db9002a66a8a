# Middleware package init
"""
Notes API — Middleware Package
================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID first so every later log line can carry it
    2. Logging wraps everything below it, so its duration covers the handler
    3. CORS is FastAPI's CORSMiddleware (handles preflight)

    Responses travel the chain in reverse: the logging middleware sees the
    final status code and the request-ID middleware adds its header last.
"""
