"""Ownership checks for nodes."""

import logging

from server.apps.filetree.exceptions import ForbiddenError
from server.apps.filetree.models import Node

logger = logging.getLogger(__name__)


def assert_ownership(owner_id: int, node: Node) -> None:
    """Ensure a node belongs to the calling owner.

    Args:
        owner_id: Authenticated owner making the request.
        node: Node being accessed.

    Raises:
        ForbiddenError: If the node belongs to someone else.
    """
    if node.owner_id != owner_id:
        logger.warning(
            'Owner %s denied access to node %d (owner: %s)',
            owner_id,
            node.id,
            node.owner_id,
        )
        raise ForbiddenError()
