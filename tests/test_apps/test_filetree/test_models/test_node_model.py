"""Tests for Node model."""

import pytest
from django.db import IntegrityError, transaction
from django.db.models import ProtectedError

from server.apps.filetree.models import Node


@pytest.mark.django_db
def test_folder_node(user):
    """Test folder creation with no file fields."""
    folder = Node.objects.create(
        owner=user,
        name='Reports',
        kind=Node.Kind.FOLDER,
    )

    assert folder.is_folder
    assert not folder.is_file
    assert folder.parent is None
    assert folder.physical_ref == ''
    assert folder.size_bytes is None
    assert str(folder) == f'{user.id}:folder:Reports'


@pytest.mark.django_db
def test_file_node(user):
    """Test file creation with file fields."""
    folder = Node.objects.create(
        owner=user,
        name='Photos',
        kind=Node.Kind.FOLDER,
    )
    file_node = Node.objects.create(
        owner=user,
        parent=folder,
        name='photo.png',
        kind=Node.Kind.FILE,
        physical_ref=f'{user.id}/token_photo.png',
        size_bytes=1024,
        content_type='image/png',
    )

    assert file_node.is_file
    assert list(folder.children.all()) == [file_node]


@pytest.mark.django_db
def test_folder_cannot_have_physical_ref(user):
    """Test the kind/field consistency check constraint."""
    with pytest.raises(IntegrityError), transaction.atomic():
        Node.objects.create(
            owner=user,
            name='Broken',
            kind=Node.Kind.FOLDER,
            physical_ref=f'{user.id}/token_broken',
        )


@pytest.mark.django_db
def test_file_requires_physical_ref(user):
    """Test files cannot exist without a blob locator."""
    with pytest.raises(IntegrityError), transaction.atomic():
        Node.objects.create(
            owner=user,
            name='orphan.txt',
            kind=Node.Kind.FILE,
            size_bytes=10,
        )


@pytest.mark.django_db
def test_physical_ref_unique(user):
    """Test two file nodes cannot share a blob."""
    blob_name = f'{user.id}/token_a.txt'
    Node.objects.create(
        owner=user,
        name='a.txt',
        kind=Node.Kind.FILE,
        physical_ref=blob_name,
    )

    with pytest.raises(IntegrityError), transaction.atomic():
        Node.objects.create(
            owner=user,
            name='b.txt',
            kind=Node.Kind.FILE,
            physical_ref=blob_name,
        )


@pytest.mark.django_db
def test_root_folder_name_unique(user):
    """Test root folder names collide despite the NULL parent."""
    Node.objects.create(owner=user, name='Docs', kind=Node.Kind.FOLDER)

    with pytest.raises(IntegrityError), transaction.atomic():
        Node.objects.create(owner=user, name='Docs', kind=Node.Kind.FOLDER)


@pytest.mark.django_db
def test_parent_is_protected(user):
    """Test a folder with children cannot be deleted."""
    folder = Node.objects.create(
        owner=user,
        name='Docs',
        kind=Node.Kind.FOLDER,
    )
    Node.objects.create(
        owner=user,
        parent=folder,
        name='Nested',
        kind=Node.Kind.FOLDER,
    )

    with pytest.raises(ProtectedError):
        folder.delete()
