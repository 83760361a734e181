"""Metadata store: durable node records on top of the Django ORM.

The store is an explicit handle bound to one database alias. It enforces
field constraints only; tree rules live in the file service. Folder name
uniqueness is decided by the database constraint at insert time, so two
racing inserts always produce one winner and one ``ConflictError``.
"""

import logging
from collections.abc import Iterator
from typing import Any, Final

from django.db import (
    DEFAULT_DB_ALIAS,
    DatabaseError,
    IntegrityError,
    connections,
    transaction,
)
from django.db.models import ProtectedError, QuerySet

from server.apps.filetree.exceptions import (
    ConflictError,
    MetadataWriteError,
    NodeNotFoundError,
)
from server.apps.filetree.models import Node

logger = logging.getLogger(__name__)

# Fields a caller may change after creation
_UPDATABLE_FIELDS: Final = frozenset(('name',))


class MetadataStore:
    """Persistence of ``Node`` records."""

    def __init__(self, using: str = DEFAULT_DB_ALIAS) -> None:
        """Initialize the store.

        Args:
            using: Database alias the store reads from and writes to.
        """
        self._using = using

    @property
    def using(self) -> str:
        """Database alias of this store."""
        return self._using

    def open(self) -> None:
        """Make sure the database connection is established."""
        connections[self._using].ensure_connection()
        logger.debug('Metadata store opened on %s', self._using)

    def close(self) -> None:
        """Close this thread's database connection."""
        connections[self._using].close()
        logger.debug('Metadata store closed on %s', self._using)

    def _nodes(self) -> QuerySet[Node]:
        return Node.objects.using(self._using)

    def insert(self, node: Node) -> Node:
        """Persist a new node.

        Args:
            node: Unsaved node. ``id`` and ``created_at`` are assigned here.

        Returns:
            The stored node.

        Raises:
            ConflictError: If a folder with the same name already exists
                in the same parent.
            MetadataWriteError: If the record cannot be written.
        """
        try:
            with transaction.atomic(using=self._using):
                node.save(using=self._using, force_insert=True)
        except IntegrityError as error:
            if node.is_folder and self._folder_name_taken(node):
                logger.info(
                    'Folder name taken for owner %s: %s',
                    node.owner_id,
                    node.name,
                )
                raise ConflictError('Folder already exists') from error
            logger.exception('Failed to insert node: %s', node.name)
            raise MetadataWriteError() from error
        except DatabaseError as error:
            logger.exception('Failed to insert node: %s', node.name)
            raise MetadataWriteError() from error

        logger.info(
            'Node created: %s %s (ID: %d, owner: %s)',
            node.kind,
            node.name,
            node.id,
            node.owner_id,
        )
        return node

    def find_by_id(self, node_id: int) -> Node | None:
        """Get node by id, None if it does not exist."""
        return self._nodes().filter(id=node_id).first()

    def find_children(
        self,
        owner_id: int,
        parent_id: int | None,
    ) -> list[Node]:
        """List direct children of a folder, or of the root when None.

        Args:
            owner_id: Owner of the nodes.
            parent_id: Parent folder id, None for the root.

        Returns:
            Child nodes, folders first.
        """
        return list(self._nodes().filter(
            owner_id=owner_id,
            parent_id=parent_id,
        ))

    def find_all(self, owner_id: int) -> list[Node]:
        """List every node of an owner across all folders."""
        return list(self._nodes().filter(owner_id=owner_id))

    def find_by_name_in_parent(
        self,
        owner_id: int,
        parent_id: int | None,
        name: str,
        kind: str,
    ) -> Node | None:
        """Find a node by exact name inside a parent.

        Args:
            owner_id: Owner of the node.
            parent_id: Parent folder id, None for the root.
            name: Exact node name.
            kind: Node kind to match.

        Returns:
            Matching node or None.
        """
        return self._nodes().filter(
            owner_id=owner_id,
            parent_id=parent_id,
            name=name,
            kind=kind,
        ).first()

    def update(self, node_id: int, **fields: Any) -> Node:
        """Update fields of an existing node. Last write wins.

        Args:
            node_id: Node to update.
            fields: New field values (only ``name`` is mutable).

        Returns:
            The updated node.

        Raises:
            ValueError: If an immutable field is passed.
            NodeNotFoundError: If the node does not exist.
            ConflictError: If the change violates folder name uniqueness.
            MetadataWriteError: If the record cannot be written.
        """
        immutable = set(fields) - _UPDATABLE_FIELDS
        if immutable:
            raise ValueError(f'Immutable node fields: {sorted(immutable)}')

        try:
            with transaction.atomic(using=self._using):
                updated = self._nodes().filter(id=node_id).update(**fields)
        except IntegrityError as error:
            logger.info('Update of node %d conflicts: %s', node_id, fields)
            raise ConflictError('Folder already exists') from error
        except DatabaseError as error:
            logger.exception('Failed to update node: ID=%d', node_id)
            raise MetadataWriteError() from error

        node = self.find_by_id(node_id)
        if not updated or node is None:
            raise NodeNotFoundError()
        logger.info('Node updated: ID=%d, fields=%s', node_id, sorted(fields))
        return node

    def remove(self, node_id: int) -> None:
        """Delete a node record.

        Args:
            node_id: Node to delete.

        Raises:
            NodeNotFoundError: If the node does not exist.
            ConflictError: If the node still has children.
            MetadataWriteError: If the record cannot be deleted.
        """
        try:
            with transaction.atomic(using=self._using):
                deleted, _ = self._nodes().filter(id=node_id).delete()
        except ProtectedError as error:
            logger.info('Node %d still has children', node_id)
            raise ConflictError('Folder is not empty') from error
        except DatabaseError as error:
            logger.exception('Failed to delete node: ID=%d', node_id)
            raise MetadataWriteError() from error

        if not deleted:
            raise NodeNotFoundError()
        logger.info('Node record deleted: ID=%d', node_id)

    def iter_physical_refs(self) -> Iterator[str]:
        """Iterate over the blob locators referenced by file nodes."""
        return self._nodes().filter(
            kind=Node.Kind.FILE,
        ).values_list('physical_ref', flat=True).iterator()

    def _folder_name_taken(self, node: Node) -> bool:
        return self._nodes().filter(
            owner_id=node.owner_id,
            parent_id=node.parent_id,
            name=node.name,
            kind=Node.Kind.FOLDER,
        ).exists()
