"""Business logic layer for filetree app.

This package contains the rules of the node tree:
- Ownership checks shared by every operation
- Folder creation, upload, listing, rename, delete and content fetch

The stores in ``infrastructure`` are injected into the file service,
so business logic never touches the ORM or storage backends directly.
"""
