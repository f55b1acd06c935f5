# Schemas package init
"""
NoteCache: Schemas Package
==========================

Pydantic models used by the routes and services (see note.py).
"""
