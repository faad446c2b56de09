# Routes package init
"""
NotesVault Backend: API Routes Package
======================================

Route Inventory:
    - notes.py:   /notes and /v1/notes CRUD (HTTP Basic)
    - health.py:  GET /health (storage probe)
    - home.py:    GET / (HTML landing page)
    - responses.py: ErrorKind → status mapping and `{"error": ...}` rendering

Routes stay thin: parse the request, call NoteService, map the Outcome.
"""
