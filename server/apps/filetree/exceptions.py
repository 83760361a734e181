"""Exceptions for filetree app.

Every failure of a tree operation is one of these kinds. Each carries a
stable ``code`` that callers can rely on and a human-readable message.
"""

from typing import ClassVar


class FileTreeError(Exception):
    """Base class for all file tree failures."""

    code: ClassVar[str] = 'file_tree_error'
    default_message: ClassVar[str] = 'File tree operation failed'

    def __init__(self, message: str | None = None) -> None:
        """Initialize the error.

        Args:
            message: Human-readable description, class default if omitted.
        """
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidArgumentError(FileTreeError):
    """Raised for malformed input (blank names, wrong node kind)."""

    code = 'invalid_argument'
    default_message = 'Invalid argument'


class NodeNotFoundError(FileTreeError):
    """Raised when a node, parent, or blob does not resolve."""

    code = 'not_found'
    default_message = 'Node not found'


class ForbiddenError(FileTreeError):
    """Raised when a node belongs to another owner."""

    code = 'forbidden'
    default_message = 'Node belongs to another owner'


class ConflictError(FileTreeError):
    """Raised for duplicate folder names and non-empty folder deletes."""

    code = 'conflict'
    default_message = 'Conflicting node state'


class PayloadTooLargeError(FileTreeError):
    """Raised when an upload exceeds the size ceiling."""

    code = 'payload_too_large'

    def __init__(self, size_bytes: int, max_bytes: int) -> None:
        """Initialize PayloadTooLargeError.

        Args:
            size_bytes: Size of the rejected upload in bytes.
            max_bytes: Configured ceiling in bytes.
        """
        self.size_bytes = size_bytes
        self.max_bytes = max_bytes
        super().__init__(
            f'Upload of {size_bytes} bytes exceeds the limit '
            f'of {max_bytes} bytes',
        )


class StorageWriteError(FileTreeError):
    """Raised when blob bytes cannot be written."""

    code = 'storage_write_error'
    default_message = 'Failed to write file to storage'


class StorageReadError(FileTreeError):
    """Raised when blob bytes cannot be read."""

    code = 'storage_read_error'
    default_message = 'Failed to read file from storage'


class StorageDeleteError(FileTreeError):
    """Raised when blob bytes cannot be deleted."""

    code = 'storage_delete_error'
    default_message = 'Failed to delete file from storage'


class MetadataWriteError(FileTreeError):
    """Raised when a node record cannot be persisted."""

    code = 'metadata_write_error'
    default_message = 'Failed to persist node metadata'
