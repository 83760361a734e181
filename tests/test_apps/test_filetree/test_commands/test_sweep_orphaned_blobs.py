"""Tests for the sweep_orphaned_blobs management command."""

from io import StringIO

import pytest
from django.core.files.base import ContentFile
from django.core.files.storage import storages
from django.core.management import call_command

from server.apps.filetree.logic.file_service import get_file_service


@pytest.fixture
def default_storage(mock_s3):
    """Configured storage backend over the mocked bucket.

    Returns:
        Default storage instance.
    """
    return storages['default']


@pytest.fixture
def orphan(default_storage, user):
    """Blob with no node pointing at it.

    Returns:
        Locator of the orphaned blob.
    """
    return default_storage.save(
        f'{user.id}/20240101T000000000000_deadbeef_lost.txt',
        ContentFile(b'lost'),
    )


@pytest.fixture
def referenced(default_storage, user):
    """File node whose blob must survive the sweep.

    Returns:
        Locator of the referenced blob.
    """
    file_node = get_file_service().upload_file(user.id, b'kept', 'kept.txt')
    return file_node.physical_ref


def _sweep(*args):
    out = StringIO()
    call_command('sweep_orphaned_blobs', *args, stdout=out)
    return out.getvalue()


@pytest.mark.django_db
class TestSweepOrphanedBlobs:
    """Tests for sweep_orphaned_blobs."""

    def test_sweep_deletes_orphans(self, default_storage, orphan, referenced):
        """Test orphans go and referenced blobs stay."""
        output = _sweep('--min-age-minutes', '0')

        assert 'Swept 1 orphaned blobs, 0 failed' in output
        assert not default_storage.exists(orphan)
        assert default_storage.exists(referenced)

    def test_dry_run(self, default_storage, orphan, referenced):
        """Test dry run reports without deleting."""
        output = _sweep('--dry-run', '--min-age-minutes', '0')

        assert f'Would delete: {orphan}' in output
        assert 'Would sweep 1 orphaned blobs' in output
        assert default_storage.exists(orphan)

    def test_young_orphans_kept(self, default_storage, orphan):
        """Test blobs newer than the minimum age are left alone."""
        output = _sweep()

        assert 'Swept 0 orphaned blobs, 0 failed' in output
        assert default_storage.exists(orphan)

    def test_empty_bucket(self, default_storage):
        """Test an empty bucket sweeps nothing."""
        output = _sweep('--min-age-minutes', '0')

        assert 'Swept 0 orphaned blobs, 0 failed' in output

    def test_delete_failure_counted(
        self,
        default_storage,
        orphan,
        monkeypatch,
    ):
        """Test a failed delete is reported and the sweep goes on."""
        def failing_delete(name):
            raise PermissionError('Access denied')

        monkeypatch.setattr(default_storage, 'delete', failing_delete)
        err = StringIO()

        call_command(
            'sweep_orphaned_blobs',
            '--min-age-minutes',
            '0',
            stdout=StringIO(),
            stderr=err,
        )

        assert f'Failed to delete {orphan}' in err.getvalue()
        assert default_storage.exists(orphan)

    def test_stat_failure_does_not_stop_sweep(
        self,
        default_storage,
        user,
        monkeypatch,
    ):
        """Test a blob that cannot be inspected is counted and skipped."""
        broken = default_storage.save(
            f'{user.id}/20240101T000000000000_aaaaaaaa_broken.txt',
            ContentFile(b'broken'),
        )
        healthy = default_storage.save(
            f'{user.id}/20240101T000000000000_bbbbbbbb_healthy.txt',
            ContentFile(b'healthy'),
        )
        get_modified_time = default_storage.get_modified_time

        def flaky_get_modified_time(name):
            if name == broken:
                raise OSError('HeadObject timed out')
            return get_modified_time(name)

        monkeypatch.setattr(
            default_storage,
            'get_modified_time',
            flaky_get_modified_time,
        )
        out = StringIO()
        err = StringIO()

        call_command(
            'sweep_orphaned_blobs',
            '--min-age-minutes',
            '0',
            stdout=out,
            stderr=err,
        )

        assert f'Failed to stat {broken}' in err.getvalue()
        assert 'Swept 1 orphaned blobs, 1 failed' in out.getvalue()
        assert default_storage.exists(broken)
        assert not default_storage.exists(healthy)

    def test_vanished_blob_skipped(self, default_storage, orphan, monkeypatch):
        """Test a blob deleted after listing is neither swept nor failed."""
        def missing_get_modified_time(name):
            raise FileNotFoundError(name)

        monkeypatch.setattr(
            default_storage,
            'get_modified_time',
            missing_get_modified_time,
        )

        output = _sweep('--min-age-minutes', '0')

        assert 'Swept 0 orphaned blobs, 0 failed' in output

    def test_listing_failure_does_not_stop_sweep(
        self,
        default_storage,
        orphan,
        user,
        other_user,
        monkeypatch,
    ):
        """Test an owner area that cannot be listed is counted and skipped."""
        other_orphan = default_storage.save(
            f'{other_user.id}/20240101T000000000000_cafebabe_lost.txt',
            ContentFile(b'lost'),
        )
        listdir = default_storage.listdir

        def flaky_listdir(path):
            if path == str(user.id):
                raise OSError('ListObjects timed out')
            return listdir(path)

        monkeypatch.setattr(default_storage, 'listdir', flaky_listdir)
        out = StringIO()
        err = StringIO()

        call_command(
            'sweep_orphaned_blobs',
            '--min-age-minutes',
            '0',
            stdout=out,
            stderr=err,
        )

        assert f'Failed to list {user.id}' in err.getvalue()
        assert 'Swept 1 orphaned blobs, 1 failed' in out.getvalue()
        assert default_storage.exists(orphan)
        assert not default_storage.exists(other_orphan)
