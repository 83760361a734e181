"""File tree settings."""

from server.settings.components import config

# Upload ceiling in bytes (10 MiB by default)
FILETREE_MAX_UPLOAD_BYTES = config(
    'FILETREE_MAX_UPLOAD_BYTES',
    cast=int,
    default=10 * 1024 * 1024,
)

# Blobs younger than this are never treated as orphans by the sweep
FILETREE_ORPHAN_MIN_AGE_MINUTES = config(
    'FILETREE_ORPHAN_MIN_AGE_MINUTES',
    cast=int,
    default=60,
)
