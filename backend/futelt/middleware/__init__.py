# Middleware package init
"""
Futelt Backend — Middleware Package
=====================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Access Log] → [GZip] → [CORS] → Route Handler

The request id is set before the access log runs, so every access line and
error response carries it.
"""
