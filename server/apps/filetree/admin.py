"""Django admin configuration for filetree app."""

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest

from server.apps.filetree.models import Node


def _format_bytes(size_bytes: int) -> str:
    """Format bytes in human-readable format.

    Args:
        size_bytes: Size in bytes.

    Returns:
        Formatted size string (e.g., '1.5 MB', '234 KB').
    """
    if size_bytes < 1024:
        return f'{size_bytes} B'
    if size_bytes < 1024 * 1024:  # noqa: WPS531
        return f'{size_bytes / 1024:.1f} KB'
    if size_bytes < 1024 * 1024 * 1024:  # noqa: WPS531
        return f'{size_bytes / (1024 * 1024):.1f} MB'
    return f'{size_bytes / (1024 * 1024 * 1024):.1f} GB'


@admin.register(Node)
class NodeAdmin(admin.ModelAdmin[Node]):
    """Read-only admin interface for Node model.

    Nodes change only through the file service, which keeps blobs and
    records in step. Editing or deleting them here would bypass it.
    """

    list_display = [
        'name',
        'kind',
        'owner',
        'parent',
        'size_display',
        'content_type',
        'created_at',
    ]

    list_filter = [
        'kind',
        'created_at',
        'owner',
    ]

    search_fields = [
        'name',
    ]

    readonly_fields = [
        'owner',
        'parent',
        'name',
        'kind',
        'physical_ref',
        'size_bytes',
        'content_type',
        'created_at',
    ]

    fieldsets = (
        ('Node', {
            'fields': ('name', 'kind', 'owner', 'parent'),
        }),
        ('File', {
            'fields': ('physical_ref', 'size_bytes', 'content_type'),
        }),
        ('Timestamps', {
            'fields': ('created_at',),
        }),
    )

    def size_display(self, obj: Node) -> str:
        """Display file size in human-readable format.

        Args:
            obj: Node instance.

        Returns:
            Formatted size, '-' for folders.
        """
        if obj.size_bytes is None:
            return '-'
        return _format_bytes(obj.size_bytes)
    size_display.short_description = 'Size'  # type: ignore[attr-defined]

    def has_add_permission(self, request: HttpRequest) -> bool:
        """Nodes are created through the API only."""
        return False

    def has_delete_permission(
        self,
        request: HttpRequest,
        obj: Node | None = None,
    ) -> bool:
        """Nodes are deleted through the API only."""
        return False

    def get_queryset(self, request: HttpRequest) -> QuerySet[Node]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('owner', 'parent')
