"""Tests for node and blob name utilities."""

import re

import pytest

from server.apps.filetree.exceptions import InvalidArgumentError
from server.apps.filetree.infrastructure.naming import (
    blob_owner_prefix,
    build_blob_name,
    clean_node_name,
    detect_content_type,
    rename_keeping_extension,
    split_extension,
)


def test_split_extension():
    """Test stem/extension split at the last dot."""
    assert split_extension('photo.png') == ('photo', '.png')
    assert split_extension('archive.tar.gz') == ('archive.tar', '.gz')
    assert split_extension('README') == ('README', '')


def test_split_extension_dotfile():
    """Test that a leading dot does not start an extension."""
    assert split_extension('.bashrc') == ('.bashrc', '')


def test_rename_keeping_extension():
    """Test new stem keeps the original extension."""
    assert rename_keeping_extension('photo.png', 'vacation') == 'vacation.png'
    assert rename_keeping_extension('notes', 'ideas') == 'ideas'


def test_rename_keeping_extension_ignores_supplied_extension():
    """Test an extension typed by the caller is kept as part of the stem."""
    result = rename_keeping_extension('photo.png', 'vacation.jpg')

    assert result == 'vacation.jpg.png'


def test_clean_node_name_strips_whitespace():
    """Test surrounding whitespace is removed."""
    assert clean_node_name('  Reports ') == 'Reports'


@pytest.mark.parametrize('name', ['', '   ', None])
def test_clean_node_name_rejects_blank(name):
    """Test blank names are rejected."""
    with pytest.raises(InvalidArgumentError, match='is required'):
        clean_node_name(name)


def test_clean_node_name_rejects_too_long():
    """Test names over the column limit are rejected."""
    with pytest.raises(InvalidArgumentError, match='at most 255'):
        clean_node_name('a' * 256)


def test_detect_content_type():
    """Test content type detection from filename."""
    assert detect_content_type('test.pdf') == 'application/pdf'
    assert detect_content_type('test.txt') == 'text/plain'
    assert detect_content_type('test.png') == 'image/png'


def test_detect_content_type_unknown():
    """Test fallback for unknown extensions."""
    assert detect_content_type('test.unknown') == 'application/octet-stream'


def test_build_blob_name_is_owner_scoped():
    """Test blob names start with the owner id and end with the name."""
    blob_name = build_blob_name(7, 'report.pdf')

    assert re.fullmatch(r'7/\d{8}T\d{12}_[0-9a-f]{8}_report\.pdf', blob_name)


def test_build_blob_name_avoids_collisions():
    """Test two uploads of the same name get different keys."""
    assert build_blob_name(7, 'a.txt') != build_blob_name(7, 'a.txt')


def test_build_blob_name_drops_directories():
    """Test client-supplied paths cannot escape the owner area."""
    assert build_blob_name(7, '../../etc/passwd').endswith('_passwd')
    assert build_blob_name(7, 'dir\\evil.txt').endswith('_evil.txt')
    assert build_blob_name(7, '..').endswith('_blob')


def test_blob_owner_prefix():
    """Test owner area extraction from a blob key."""
    assert blob_owner_prefix('7/20260131T143052123456_ab_report.pdf') == '7'
