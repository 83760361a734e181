"""File service: tree rules coordinated across metadata and blob stores.

Ordering between the two stores bounds inconsistency:

- Upload writes the blob first, then the node. A failure in between can
  leak a blob but never leaves a node pointing at nothing.
- Delete removes the blob first, then the node. If the blob delete
  fails the node stays visible, which beats a node whose bytes are gone.
"""

import logging
from types import TracebackType
from typing import NamedTuple, Self

from django.conf import settings

from server.apps.filetree.exceptions import (
    ConflictError,
    InvalidArgumentError,
    MetadataWriteError,
    NodeNotFoundError,
    PayloadTooLargeError,
)
from server.apps.filetree.infrastructure.blob_store import BlobStore
from server.apps.filetree.infrastructure.metadata_store import MetadataStore
from server.apps.filetree.infrastructure.naming import (
    clean_node_name,
    detect_content_type,
    rename_keeping_extension,
)
from server.apps.filetree.logic.access import assert_ownership
from server.apps.filetree.models import Node

logger = logging.getLogger(__name__)


class FileContent(NamedTuple):
    """Bytes of a file node with the metadata needed to serve them."""

    content: bytes
    content_type: str
    name: str


class FileService:
    """Structural operations on an owner's node tree."""

    def __init__(
        self,
        metadata_store: MetadataStore,
        blob_store: BlobStore,
        *,
        max_upload_bytes: int,
    ) -> None:
        """Initialize the service.

        Args:
            metadata_store: Store for node records.
            blob_store: Store for file bytes.
            max_upload_bytes: Upload size ceiling in bytes.
        """
        self._metadata = metadata_store
        self._blobs = blob_store
        self._max_upload_bytes = max_upload_bytes

    @property
    def max_upload_bytes(self) -> int:
        """Upload size ceiling in bytes."""
        return self._max_upload_bytes

    def open(self) -> None:
        """Open the underlying stores."""
        self._metadata.open()

    def close(self) -> None:
        """Release the underlying stores."""
        self._metadata.close()

    def __enter__(self) -> Self:
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def create_folder(
        self,
        owner_id: int,
        name: str,
        parent_id: int | None = None,
    ) -> Node:
        """Create an empty folder.

        Args:
            owner_id: Owner of the new folder.
            name: Folder name.
            parent_id: Parent folder id, None for the root.

        Returns:
            Created folder node.

        Raises:
            InvalidArgumentError: If the name is blank or too long.
            NodeNotFoundError: If the parent folder does not exist.
            ForbiddenError: If the parent belongs to another owner.
            ConflictError: If a sibling folder has the same name.
        """
        folder_name = clean_node_name(name)
        self._resolve_parent(owner_id, parent_id)

        existing = self._metadata.find_by_name_in_parent(
            owner_id,
            parent_id,
            folder_name,
            Node.Kind.FOLDER,
        )
        if existing is not None:
            logger.info(
                'Folder already exists for owner %s: %s',
                owner_id,
                folder_name,
            )
            raise ConflictError('Folder already exists')

        # The unique constraint still decides if a concurrent call wins
        return self._metadata.insert(Node(
            owner_id=owner_id,
            parent_id=parent_id,
            name=folder_name,
            kind=Node.Kind.FOLDER,
        ))

    def upload_file(  # noqa: WPS211
        self,
        owner_id: int,
        content: bytes,
        original_name: str,
        content_type: str | None = None,
        size: int | None = None,
        parent_id: int | None = None,
    ) -> Node:
        """Store file bytes and create the file node.

        Transaction safety: the blob is written first, then the node.
        If the node cannot be written the blob is discarded (best
        effort) and the error is raised.

        Args:
            owner_id: Owner of the file.
            content: File bytes.
            original_name: Name given by the uploader.
            content_type: MIME type, guessed from the name if omitted.
            size: Declared size in bytes, length of content if omitted.
            parent_id: Parent folder id, None for the root.

        Returns:
            Created file node.

        Raises:
            PayloadTooLargeError: If the upload exceeds the ceiling.
            InvalidArgumentError: If the name is blank or too long.
            NodeNotFoundError: If the parent folder does not exist.
            ForbiddenError: If the parent belongs to another owner.
            StorageWriteError: If the bytes cannot be stored.
            MetadataWriteError: If the node cannot be written.
        """
        declared_size = len(content) if size is None else size
        upload_size = max(len(content), declared_size)
        if upload_size > self._max_upload_bytes:
            logger.warning(
                'Upload rejected for owner %s: %d bytes over limit %d',
                owner_id,
                upload_size,
                self._max_upload_bytes,
            )
            raise PayloadTooLargeError(
                size_bytes=upload_size,
                max_bytes=self._max_upload_bytes,
            )
        if declared_size < 0:
            raise InvalidArgumentError('Size cannot be negative')

        file_name = clean_node_name(original_name, field='File name')
        self._resolve_parent(owner_id, parent_id)

        # Step 1: bytes first
        physical_ref = self._blobs.save(owner_id, content, file_name)

        # Step 2: node record
        try:
            file_node = self._metadata.insert(Node(
                owner_id=owner_id,
                parent_id=parent_id,
                name=file_name,
                kind=Node.Kind.FILE,
                physical_ref=physical_ref,
                size_bytes=declared_size,
                content_type=content_type or detect_content_type(file_name),
            ))
        except MetadataWriteError:
            logger.exception(
                'Node write failed after blob upload: %s',
                physical_ref,
            )
            self._blobs.discard(physical_ref)
            raise

        logger.info(
            'File uploaded: %s (ID: %d, %d bytes)',
            file_node.name,
            file_node.id,
            declared_size,
        )
        return file_node

    def list_children(
        self,
        owner_id: int,
        parent_id: int | None = None,
    ) -> list[Node]:
        """List the direct children of a folder or of the root.

        Args:
            owner_id: Owner of the nodes.
            parent_id: Folder id, None for the root.

        Returns:
            Every child node, folders first.

        Raises:
            NodeNotFoundError: If the folder does not exist.
            ForbiddenError: If the folder belongs to another owner.
        """
        self._resolve_parent(owner_id, parent_id)
        return self._metadata.find_children(owner_id, parent_id)

    def list_all(self, owner_id: int) -> list[Node]:
        """List every node of an owner, whatever its folder."""
        return self._metadata.find_all(owner_id)

    def rename(self, owner_id: int, node_id: int, new_name: str) -> Node:
        """Rename a node.

        Files keep their extension: callers pass the new stem only, so
        renaming 'photo.png' to 'vacation' gives 'vacation.png'.

        Args:
            owner_id: Owner making the request.
            node_id: Node to rename.
            new_name: New folder name, or new stem for files.

        Returns:
            Updated node.

        Raises:
            NodeNotFoundError: If the node does not exist.
            ForbiddenError: If the node belongs to another owner.
            InvalidArgumentError: If the new name is blank or too long.
            ConflictError: If a sibling folder already has the name.
        """
        node = self._get_owned_node(owner_id, node_id)
        cleaned = clean_node_name(new_name, field='New name')

        if node.is_file:
            final_name = clean_node_name(
                rename_keeping_extension(node.name, cleaned),
                field='New name',
            )
        else:
            final_name = cleaned

        logger.info(
            'Renaming node %d: %s -> %s',
            node_id,
            node.name,
            final_name,
        )
        return self._metadata.update(node_id, name=final_name)

    def delete(self, owner_id: int, node_id: int) -> None:
        """Delete a file or an empty folder.

        Folders are never deleted recursively. For files the blob is
        deleted before the node.

        Args:
            owner_id: Owner making the request.
            node_id: Node to delete.

        Raises:
            NodeNotFoundError: If the node does not exist.
            ForbiddenError: If the node belongs to another owner.
            ConflictError: If the folder is not empty.
            StorageDeleteError: If the file bytes cannot be deleted.
        """
        node = self._get_owned_node(owner_id, node_id)

        if node.is_folder:
            if self._metadata.find_children(owner_id, node.id):
                logger.info('Refusing to delete non-empty folder %d', node_id)
                raise ConflictError('Folder is not empty')
        else:
            self._blobs.delete(node.physical_ref)

        self._metadata.remove(node.id)
        logger.info('Deleted %s %s (ID: %d)', node.kind, node.name, node_id)

    def fetch_content(self, owner_id: int, node_id: int) -> FileContent:
        """Read the bytes of a file node.

        Args:
            owner_id: Owner making the request.
            node_id: File node to read.

        Returns:
            File bytes with content type and name.

        Raises:
            NodeNotFoundError: If the node or its bytes do not exist.
            ForbiddenError: If the node belongs to another owner.
            InvalidArgumentError: If the node is a folder.
            StorageReadError: If the bytes cannot be read.
        """
        node = self._get_owned_node(owner_id, node_id)
        if not node.is_file:
            raise InvalidArgumentError('Only files have content')

        content = self._blobs.read(node.physical_ref)
        return FileContent(
            content=content,
            content_type=node.content_type or detect_content_type(node.name),
            name=node.name,
        )

    def _get_owned_node(self, owner_id: int, node_id: int) -> Node:
        node = self._metadata.find_by_id(node_id)
        if node is None:
            raise NodeNotFoundError()
        assert_ownership(owner_id, node)
        return node

    def _resolve_parent(self, owner_id: int, parent_id: int | None) -> None:
        if parent_id is None:
            return
        parent = self._metadata.find_by_id(parent_id)
        if parent is None or not parent.is_folder:
            raise NodeNotFoundError('Parent folder not found')
        assert_ownership(owner_id, parent)


def get_file_service() -> FileService:
    """Build a file service wired to the configured stores.

    Returns:
        FileService over the default database and storage backend.
    """
    return FileService(
        MetadataStore(),
        BlobStore(),
        max_upload_bytes=settings.FILETREE_MAX_UPLOAD_BYTES,
    )
