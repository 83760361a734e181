"""HTTP boundary of the file tree (Django REST framework)."""
