# Middleware package init
"""
Rabbitry Backend — Middleware Package
======================================

Middleware Chain:
    Request → [Request ID] → [Access Log] → [GZip] → [CORS] → Route Handler

The request ID is set first so the access log line carries it.
"""
