# Services package init
"""
NoteCache: Services Layer
=========================

What:  Business logic and storage, sitting between the routes (HTTP) and the disk.

Service Inventory:
    - NoteRepository (abstract): Storage contract for notes keyed by name
    - FileNoteRepository: One plain file per note in the cache directory
    - InMemoryNoteRepository: Dict-backed store for tests and embedding
    - NoteService: Request rules on top of a repository
"""
