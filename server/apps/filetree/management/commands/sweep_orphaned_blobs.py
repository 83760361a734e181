"""Management command to delete blobs that no node references."""

import logging
from datetime import timedelta
from typing import Any

from django.conf import settings
from django.core.management.base import BaseCommand
from django.utils import timezone

from server.apps.filetree.exceptions import (
    StorageDeleteError,
    StorageReadError,
)
from server.apps.filetree.infrastructure.blob_store import BlobStore
from server.apps.filetree.infrastructure.metadata_store import MetadataStore
from server.apps.filetree.infrastructure.naming import blob_owner_prefix

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Delete blobs left behind by failed or interrupted uploads."""

    help = 'Delete blobs not referenced by any file node'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be deleted without deleting',
        )
        parser.add_argument(
            '--min-age-minutes',
            type=int,
            default=settings.FILETREE_ORPHAN_MIN_AGE_MINUTES,
            help=(
                'Skip blobs younger than this, they may belong to an '
                'upload in progress (default: '
                f'{settings.FILETREE_ORPHAN_MIN_AGE_MINUTES})'
            ),
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the sweep.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        dry_run = options['dry_run']
        cutoff = timezone.now() - timedelta(minutes=options['min_age_minutes'])

        blob_store = BlobStore()
        referenced = set(MetadataStore().iter_physical_refs())

        self.stdout.write(
            f'Looking for unreferenced blobs older than {cutoff} '
            f'({len(referenced)} blobs referenced)',
        )

        count = 0
        failed = 0

        for owner_area in blob_store.owner_areas():
            try:
                physical_refs = blob_store.refs_in_area(owner_area)
            except StorageReadError as exc:
                self.stderr.write(f'Failed to list {owner_area}: {exc}')
                failed += 1
                continue

            for physical_ref in physical_refs:
                if physical_ref in referenced:
                    continue
                try:
                    modified_at = blob_store.modified_at(physical_ref)
                except StorageReadError as exc:
                    self.stderr.write(f'Failed to stat {physical_ref}: {exc}')
                    failed += 1
                    continue
                # Gone already, or too young to be a finished upload
                if modified_at is None or modified_at > cutoff:
                    continue

                if dry_run:
                    self.stdout.write(
                        f'Would delete: {physical_ref} '
                        f'(owner: {blob_owner_prefix(physical_ref)})',
                    )
                    count += 1
                    continue

                try:
                    blob_store.delete(physical_ref)
                except StorageDeleteError as exc:
                    self.stderr.write(
                        f'Failed to delete {physical_ref}: {exc}',
                    )
                    failed += 1
                    continue
                logger.info('Swept orphaned blob: %s', physical_ref)
                count += 1

        if dry_run:
            self.stdout.write(
                self.style.SUCCESS(
                    f'Would sweep {count} orphaned blobs, {failed} failed',
                ),
            )
        else:
            self.stdout.write(
                self.style.SUCCESS(
                    f'Swept {count} orphaned blobs, {failed} failed',
                ),
            )
