"""Name utilities for nodes and blobs."""

import mimetypes
import secrets
from datetime import UTC, datetime
from pathlib import PurePosixPath
from typing import Final

from server.apps.filetree.exceptions import InvalidArgumentError
from server.apps.filetree.models import NAME_MAX_LENGTH

_DEFAULT_CONTENT_TYPE: Final = 'application/octet-stream'
_FALLBACK_BLOB_NAME: Final = 'blob'
_TOKEN_BYTES: Final = 4


def clean_node_name(name: str | None, *, field: str = 'Name') -> str:
    """Validate and normalize a node display name.

    Args:
        name: Name supplied by the caller.
        field: Field label used in error messages.

    Returns:
        Name with surrounding whitespace removed.

    Raises:
        InvalidArgumentError: If the name is empty, blank or too long.
    """
    cleaned = (name or '').strip()
    if not cleaned:
        raise InvalidArgumentError(f'{field} is required')
    if len(cleaned) > NAME_MAX_LENGTH:
        raise InvalidArgumentError(
            f'{field} must be at most {NAME_MAX_LENGTH} characters',
        )
    return cleaned


def split_extension(name: str) -> tuple[str, str]:
    """Split a file name into stem and extension.

    The extension starts at the last dot. A leading dot does not start an
    extension, so dotfiles have none.

    Examples:
        'photo.png' -> ('photo', '.png')
        'archive.tar.gz' -> ('archive.tar', '.gz')
        '.bashrc' -> ('.bashrc', '')

    Args:
        name: File name.

    Returns:
        Tuple of (stem, extension including the dot, or '').
    """
    last_dot = name.rfind('.')
    if last_dot <= 0:
        return name, ''
    return name[:last_dot], name[last_dot:]


def rename_keeping_extension(original_name: str, new_stem: str) -> str:
    """Build a new file name that keeps the original extension.

    Args:
        original_name: Current file name (e.g., 'photo.png').
        new_stem: Stem chosen by the caller (e.g., 'vacation').

    Returns:
        New name (e.g., 'vacation.png').
    """
    _, extension = split_extension(original_name)
    return f'{new_stem}{extension}'


def detect_content_type(filename: str) -> str:
    """Guess content type from the filename extension.

    Args:
        filename: Filename with extension.

    Returns:
        MIME type string, 'application/octet-stream' if unknown.
    """
    content_type, _ = mimetypes.guess_type(filename)
    if content_type is None:
        return _DEFAULT_CONTENT_TYPE
    return content_type


def build_blob_name(owner_id: int | str, suggested_name: str) -> str:
    """Build a collision-free blob key inside the owner's area.

    The key is prefixed with the owner id and a token made of a UTC
    timestamp and random bytes, so two uploads of the same name never
    share a key.

    Args:
        owner_id: Owner of the blob.
        suggested_name: Original file name supplied by the uploader.

    Returns:
        Key like '7/20260131T143052123456_9f3ab2c1_report.pdf'.
    """
    # Drop any directory components the client may have sent
    basename = PurePosixPath(suggested_name.replace('\\', '/')).name
    if basename in {'', '.', '..'}:
        basename = _FALLBACK_BLOB_NAME
    timestamp = datetime.now(tz=UTC).strftime('%Y%m%dT%H%M%S%f')
    token = secrets.token_hex(_TOKEN_BYTES)
    return f'{owner_id}/{timestamp}_{token}_{basename}'


def blob_owner_prefix(physical_ref: str) -> str:
    """Extract the owner area from a blob key.

    Example: '7/20260131T143052123456_9f3ab2c1_report.pdf' -> '7'

    Args:
        physical_ref: Blob key.

    Returns:
        First path component of the key.
    """
    return PurePosixPath(physical_ref).parts[0]
