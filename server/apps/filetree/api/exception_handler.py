"""Translate file tree failures into API responses."""

import logging
from typing import Any, Final

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from server.apps.filetree.exceptions import (
    ConflictError,
    FileTreeError,
    ForbiddenError,
    InvalidArgumentError,
    NodeNotFoundError,
    PayloadTooLargeError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: Final[dict[type[FileTreeError], int]] = {
    InvalidArgumentError: status.HTTP_400_BAD_REQUEST,
    NodeNotFoundError: status.HTTP_404_NOT_FOUND,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    ConflictError: status.HTTP_409_CONFLICT,
    PayloadTooLargeError: status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
}


def filetree_exception_handler(
    exc: Exception,
    context: dict[str, Any],
) -> Response | None:
    """Map file tree errors to ``{"error", "code"}`` responses.

    Anything else goes to the default DRF handler.

    Args:
        exc: Raised exception.
        context: DRF handler context.

    Returns:
        Error response, or None to let Django handle the exception.
    """
    if not isinstance(exc, FileTreeError):
        return exception_handler(exc, context)

    status_code = _STATUS_BY_ERROR.get(
        type(exc),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error('File tree operation failed: %s (%s)', exc, exc.code)
    return Response(
        {'error': exc.message, 'code': exc.code},
        status=status_code,
    )
