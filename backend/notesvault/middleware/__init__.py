# Middleware package init
"""
NotesVault Backend: Middleware Package
======================================

Middleware Chain (order matters):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID first, so every later log line can carry it
    2. Logging measures the full downstream duration and final status
    3. GZip / CORS are Starlette's stock middleware

Authentication is not middleware: it is a router-level dependency
(see notesvault.security) so /health and / stay public.
"""
