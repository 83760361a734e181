"""Tests for ownership checks."""

import pytest

from server.apps.filetree.exceptions import ForbiddenError
from server.apps.filetree.logic.access import assert_ownership
from server.apps.filetree.models import Node


@pytest.fixture
def folder(user):
    """Root folder owned by the test user.

    Returns:
        Saved folder node.
    """
    return Node.objects.create(
        owner=user,
        name='Docs',
        kind=Node.Kind.FOLDER,
    )


def test_owner_passes(user, folder):
    """Test the owner is let through."""
    assert_ownership(user.id, folder)


def test_other_owner_forbidden(other_user, folder):
    """Test another owner is rejected."""
    with pytest.raises(ForbiddenError) as exc_info:
        assert_ownership(other_user.id, folder)

    assert exc_info.value.code == 'forbidden'
