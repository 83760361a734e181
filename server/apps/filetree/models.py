"""Database models for filetree app."""

from typing import Final, final

from typing_extensions import override

from django.conf import settings
from django.db import models

# Constants for field max lengths
NAME_MAX_LENGTH: Final = 255
_KIND_MAX_LENGTH: Final = 6
_PHYSICAL_REF_MAX_LENGTH: Final = 1024
_CONTENT_TYPE_MAX_LENGTH: Final = 255


@final
class Node(models.Model):
    """File or folder in an owner's tree.

    Folders only carry a name and a parent. Files additionally point to
    their bytes in the blob store through ``physical_ref``, which is an
    opaque locator and never derived from ``name``.

    ``parent`` is null for nodes at the owner's root. It is only set when
    the node is created, so the tree can never contain a cycle.
    """

    class Kind(models.TextChoices):
        """Node kinds."""

        FILE = 'file', 'File'
        FOLDER = 'folder', 'Folder'

    # Owner relationship
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='nodes',
        db_index=True,
    )

    # PROTECT keeps non-empty folders from being deleted
    parent = models.ForeignKey(
        'self',
        on_delete=models.PROTECT,
        related_name='children',
        null=True,
        blank=True,
    )

    name = models.CharField(max_length=NAME_MAX_LENGTH)

    kind = models.CharField(
        max_length=_KIND_MAX_LENGTH,
        choices=Kind.choices,
    )

    # File-only fields
    physical_ref = models.CharField(
        max_length=_PHYSICAL_REF_MAX_LENGTH,
        blank=True,
        default='',
        help_text='Blob locator: {owner_id}/{timestamp}_{token}_{filename}',
    )

    size_bytes = models.BigIntegerField(
        null=True,
        blank=True,
        help_text='File size in bytes, as declared at upload',
    )

    content_type = models.CharField(
        max_length=_CONTENT_TYPE_MAX_LENGTH,
        blank=True,
        default='',
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Node'  # type: ignore[mutable-override]
        verbose_name_plural = 'Nodes'  # type: ignore[mutable-override]
        # 'folder' sorts after 'file', so folders come first
        ordering = ['-kind', 'name']

        indexes = [
            # Optimize child listing queries
            models.Index(
                fields=['owner', 'parent'],
                name='nodes_owner_parent_idx',
            ),
        ]

        constraints = [
            # Folder names are unique inside a parent folder
            models.UniqueConstraint(
                fields=['owner', 'parent', 'name'],
                condition=models.Q(kind='folder'),
                name='nodes_folder_name_unique',
            ),
            # NULL parents never collide in SQL, so the root needs its own
            models.UniqueConstraint(
                fields=['owner', 'name'],
                condition=models.Q(kind='folder', parent__isnull=True),
                name='nodes_root_folder_name_unique',
            ),
            # One node per blob
            models.UniqueConstraint(
                fields=['physical_ref'],
                condition=models.Q(kind='file'),
                name='nodes_physical_ref_unique',
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(
                        kind='folder',
                        physical_ref='',
                        size_bytes__isnull=True,
                        content_type='',
                    ) | (
                        models.Q(kind='file') & ~models.Q(physical_ref='')
                    )
                ),
                name='nodes_kind_fields_consistent',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.owner_id}:{self.kind}:{self.name}'

    @property
    def is_folder(self) -> bool:
        """Whether this node is a folder."""
        return self.kind == self.Kind.FOLDER

    @property
    def is_file(self) -> bool:
        """Whether this node is a file."""
        return self.kind == self.Kind.FILE
