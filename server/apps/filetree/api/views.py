"""API views for the file tree.

Views only validate the request, call the file service with the
authenticated user's id, and serialize the result. Failures raised by the
service are rendered by ``filetree_exception_handler``.
"""

import logging

from django.http import HttpResponse
from django.utils.http import content_disposition_header
from rest_framework import status
from rest_framework.decorators import api_view, parser_classes
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.request import Request
from rest_framework.response import Response

from server.apps.filetree.api.serializers import (
    CreateFolderRequest,
    ListChildrenRequest,
    NodeSerializer,
    RenameRequest,
    UploadRequest,
)
from server.apps.filetree.logic.file_service import get_file_service

logger = logging.getLogger(__name__)


@api_view(['GET'])
def list_children(request: Request) -> Response:
    """List the children of a folder, or of the root."""
    query = ListChildrenRequest(data=request.query_params)
    query.is_valid(raise_exception=True)

    nodes = get_file_service().list_children(
        request.user.id,
        query.validated_data.get('parent_id'),
    )
    return Response({'nodes': NodeSerializer(nodes, many=True).data})


@api_view(['GET'])
def list_all(request: Request) -> Response:
    """List every node of the current user."""
    nodes = get_file_service().list_all(request.user.id)
    return Response({'nodes': NodeSerializer(nodes, many=True).data})


@api_view(['POST'])
def create_folder(request: Request) -> Response:
    """Create a folder."""
    body = CreateFolderRequest(data=request.data)
    body.is_valid(raise_exception=True)

    folder = get_file_service().create_folder(
        request.user.id,
        body.validated_data['name'],
        body.validated_data.get('parent_id'),
    )
    return Response(
        {'folder': NodeSerializer(folder).data},
        status=status.HTTP_201_CREATED,
    )


@api_view(['POST'])
@parser_classes([MultiPartParser, FormParser])
def upload(request: Request) -> Response:
    """Upload a file from a multipart form."""
    body = UploadRequest(data=request.data)
    body.is_valid(raise_exception=True)

    uploaded = body.validated_data['file']
    service = get_file_service()
    # Read one byte past the limit so oversized uploads are detected
    # without loading them whole
    content = uploaded.read(service.max_upload_bytes + 1)

    file_node = service.upload_file(
        request.user.id,
        content,
        uploaded.name,
        content_type=(
            body.validated_data.get('content_type') or uploaded.content_type
        ),
        size=uploaded.size,
        parent_id=body.validated_data.get('parent_id'),
    )
    return Response(
        {'file': NodeSerializer(file_node).data},
        status=status.HTTP_201_CREATED,
    )


@api_view(['GET', 'PATCH', 'DELETE'])
def node_detail(request: Request, node_id: int) -> Response | HttpResponse:
    """Fetch content of, rename, or delete a node."""
    if request.method == 'PATCH':
        return _rename(request, node_id)
    if request.method == 'DELETE':
        return _delete(request, node_id)
    return _fetch_content(request, node_id)


def _rename(request: Request, node_id: int) -> Response:
    body = RenameRequest(data=request.data)
    body.is_valid(raise_exception=True)

    node = get_file_service().rename(
        request.user.id,
        node_id,
        body.validated_data['new_name'],
    )
    return Response({'node': NodeSerializer(node).data})


def _delete(request: Request, node_id: int) -> Response:
    get_file_service().delete(request.user.id, node_id)
    return Response({'ok': True})


def _fetch_content(request: Request, node_id: int) -> HttpResponse:
    file_content = get_file_service().fetch_content(request.user.id, node_id)
    response = HttpResponse(
        file_content.content,
        content_type=file_content.content_type,
    )
    response['Content-Length'] = str(len(file_content.content))
    response['Content-Disposition'] = content_disposition_header(
        as_attachment=False,
        filename=file_content.name,
    )
    return response
