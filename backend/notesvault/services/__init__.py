# Services package init
"""
NotesVault Backend: Services Layer
==================================

What:  Business logic sitting between routes (HTTP) and repositories (storage).
How:   Services receive their collaborators through the constructor and
       return Outcome values; they know nothing about HTTP.

Service Inventory:
    - NoteService: create / get / list / update / delete of notes
    - validation: content normalization shared by create and update
    - Outcome: result-or-error value returned by every NoteService operation
"""
