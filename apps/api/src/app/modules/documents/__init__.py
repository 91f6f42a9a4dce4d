"""
Documents Module

Document records: a name and the URL the file can be viewed at. Files are
stored elsewhere; only the reference is kept here.

Endpoints:
- POST /documents - Record an uploaded document
- GET /documents - The caller's documents
- GET /documents/{id} - Document detail (owner or admin)
- DELETE /documents/{id} - Remove a document record (owner or admin)
"""
