"""Blob store: raw byte storage keyed by owner and assigned name.

The blob store knows nothing about folders or nodes. It writes bytes
under an owner-scoped key, reads them back, and deletes them. Keeping
each blob referenced by exactly one node is the file service's job.
"""

import logging
from collections.abc import Iterator
from datetime import datetime

from django.core.files.base import ContentFile
from django.core.files.storage import Storage, storages

from server.apps.filetree.exceptions import (
    NodeNotFoundError,
    StorageDeleteError,
    StorageReadError,
    StorageWriteError,
)
from server.apps.filetree.infrastructure.naming import build_blob_name

logger = logging.getLogger(__name__)


class BlobStore:
    """Owner-scoped byte storage on top of a Django storage backend."""

    def __init__(self, storage: Storage | None = None) -> None:
        """Initialize the blob store.

        Args:
            storage: Storage backend, the configured default if omitted.
        """
        self._storage = storage if storage is not None else storages['default']

    @property
    def storage(self) -> Storage:
        """Underlying storage backend."""
        return self._storage

    def save(self, owner_id: int, content: bytes, suggested_name: str) -> str:
        """Write bytes into the owner's area.

        Args:
            owner_id: Owner of the blob.
            content: Raw bytes to store.
            suggested_name: Original file name, used as the key suffix.

        Returns:
            Locator of the stored blob.

        Raises:
            StorageWriteError: If the backend fails to write.
        """
        blob_name = build_blob_name(owner_id, suggested_name)
        try:
            saved_name = self._storage.save(blob_name, ContentFile(content))
        except Exception as error:
            logger.exception('Failed to write blob: %s', blob_name)
            raise StorageWriteError(
                f'Failed to write file "{suggested_name}" to storage',
            ) from error
        logger.info('Stored %d bytes as %s', len(content), saved_name)
        return saved_name

    def read(self, physical_ref: str) -> bytes:
        """Read all bytes of a blob.

        Args:
            physical_ref: Locator returned by ``save``.

        Returns:
            Blob content.

        Raises:
            NodeNotFoundError: If no blob exists under the locator.
            StorageReadError: If the backend fails to read.
        """
        try:
            with self._storage.open(physical_ref, 'rb') as blob:
                return blob.read()
        except FileNotFoundError as error:
            logger.warning('Blob missing from storage: %s', physical_ref)
            raise NodeNotFoundError(
                'File content not found in storage',
            ) from error
        except Exception as error:
            logger.exception('Failed to read blob: %s', physical_ref)
            raise StorageReadError() from error

    def delete(self, physical_ref: str) -> None:
        """Delete a blob. Missing blobs are not an error.

        Args:
            physical_ref: Locator returned by ``save``.

        Raises:
            StorageDeleteError: If the backend fails to delete.
        """
        try:
            self._storage.delete(physical_ref)
        except FileNotFoundError:
            logger.debug('Blob already absent: %s', physical_ref)
            return
        except Exception as error:
            logger.exception('Failed to delete blob: %s', physical_ref)
            raise StorageDeleteError() from error
        logger.info('Deleted blob: %s', physical_ref)

    def discard(self, physical_ref: str) -> None:
        """Delete a blob whose metadata was never written.

        Best effort: a failure is logged and the blob is left for the
        orphan sweep.

        Args:
            physical_ref: Locator of the blob to discard.
        """
        try:
            logger.warning('Discarding unreferenced blob: %s', physical_ref)
            self.delete(physical_ref)
        except StorageDeleteError:
            logger.exception(
                'Failed to discard blob, left for the orphan sweep: %s',
                physical_ref,
            )

    def exists(self, physical_ref: str) -> bool:
        """Check whether a blob exists."""
        return self._storage.exists(physical_ref)

    def modified_at(self, physical_ref: str) -> datetime | None:
        """Last modification time of a blob.

        Args:
            physical_ref: Blob locator.

        Returns:
            Modification time, None if the blob no longer exists.

        Raises:
            StorageReadError: If the backend fails to answer.
        """
        try:
            return self._storage.get_modified_time(physical_ref)
        except FileNotFoundError:
            logger.debug('Blob vanished before stat: %s', physical_ref)
            return None
        except Exception as error:
            logger.exception('Failed to stat blob: %s', physical_ref)
            raise StorageReadError(
                f'Failed to stat blob "{physical_ref}"',
            ) from error

    def owner_areas(self) -> list[str]:
        """List the owner areas that hold blobs.

        Raises:
            StorageReadError: If the backend fails to list.
        """
        try:
            owner_dirs, _ = self._storage.listdir('')
        except FileNotFoundError:
            # Local backends have no root directory until the first save
            return []
        except Exception as error:
            logger.exception('Failed to list blob storage root')
            raise StorageReadError('Failed to list blob storage') from error
        return sorted(owner_dirs)

    def refs_in_area(self, owner_area: str) -> list[str]:
        """List the blob locators inside one owner area.

        Args:
            owner_area: Area name returned by ``owner_areas``.

        Returns:
            Sorted blob locators.

        Raises:
            StorageReadError: If the backend fails to list.
        """
        try:
            _, blob_names = self._storage.listdir(owner_area)
        except Exception as error:
            logger.exception('Failed to list blob area: %s', owner_area)
            raise StorageReadError(
                f'Failed to list blobs in "{owner_area}"',
            ) from error
        return [
            f'{owner_area}/{blob_name}' for blob_name in sorted(blob_names)
        ]

    def iter_refs(self) -> Iterator[str]:
        """Iterate over the locators of every stored blob.

        Yields:
            Blob locators, grouped by owner area.
        """
        for owner_area in self.owner_areas():
            yield from self.refs_in_area(owner_area)
