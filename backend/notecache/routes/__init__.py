# Routes package init
"""
NoteCache: API Routes Package
=============================

Route Inventory:
    - notes.py:   GET    /notes               (list all notes)
                  GET    /notes/{note_name}   (note text)
                  PUT    /notes/{note_name}   (overwrite text)
                  DELETE /notes/{note_name}   (remove note)
    - forms.py:   POST   /write               (create note from form fields)
                  GET    /UploadForm.html     (upload form page)
    - health.py:  GET    /health              (cache directory health)

Routes stay thin: read the request, call NoteService, shape the response.
"""
