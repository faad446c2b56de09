"""
NotesVault Backend: Application Package
=======================================

What: A small HTTP/JSON note-taking backend (create, read, list, update, delete).
How:  Layered package; each layer only talks to the one below it.

    ┌─────────────────────────────────────┐
    │   Routes + Security (Transport)     │  ← HTTP shapes, status codes, auth
    ├─────────────────────────────────────┤
    │   Services (Note lifecycle)         │  ← normalization, ids, outcomes
    ├─────────────────────────────────────┤
    │   Repositories (Storage)            │  ← SQLAlchemy or in-memory store
    ├─────────────────────────────────────┤
    │   Models & Database                 │  ← Note dataclass, ORM row, engine
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
