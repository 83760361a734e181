"""Request and response structures of the file tree API.

Requests are validated here, before anything reaches the file service.
"""

from typing import Final

from rest_framework import serializers

from server.apps.filetree.models import NAME_MAX_LENGTH, Node

_CONTENT_TYPE_MAX_LENGTH: Final = 255


class NodeSerializer(serializers.ModelSerializer):
    """Node as returned to clients. The blob locator is never exposed."""

    parent_id = serializers.IntegerField(read_only=True, allow_null=True)
    owner_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Node
        fields = [
            'id',
            'name',
            'kind',
            'parent_id',
            'owner_id',
            'size_bytes',
            'content_type',
            'created_at',
        ]
        read_only_fields = fields


class ListChildrenRequest(serializers.Serializer):
    """Query parameters of the listing endpoint."""

    parent_id = serializers.IntegerField(required=False, allow_null=True)


class CreateFolderRequest(serializers.Serializer):
    """Body of the create-folder endpoint."""

    name = serializers.CharField(max_length=NAME_MAX_LENGTH)
    parent_id = serializers.IntegerField(required=False, allow_null=True)


class UploadRequest(serializers.Serializer):
    """Multipart body of the upload endpoint."""

    file = serializers.FileField(allow_empty_file=True)
    parent_id = serializers.IntegerField(required=False, allow_null=True)
    content_type = serializers.CharField(
        max_length=_CONTENT_TYPE_MAX_LENGTH,
        required=False,
        allow_blank=True,
    )


class RenameRequest(serializers.Serializer):
    """Body of the rename endpoint."""

    new_name = serializers.CharField(max_length=NAME_MAX_LENGTH)
