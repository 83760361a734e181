"""Infrastructure layer for filetree app.

This package contains integrations with external systems:
- S3-compatible storage backend and the blob store on top of it
- The metadata store over the Django ORM
- Name helpers shared by both

Keep infrastructure concerns separate from business logic.
"""
