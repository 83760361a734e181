"""S3-compatible storage backend for blob bytes."""

from datetime import datetime
from typing import Final, final

from typing_extensions import override

from botocore.exceptions import ClientError
from storages.backends.s3 import S3Storage

_HTTP_NOT_FOUND: Final = 404


@final
class BlobBucketStorage(S3Storage):
    """S3 storage backend holding the bytes of uploaded files.

    Missing keys raise ``FileNotFoundError`` from ``open`` and from
    ``get_modified_time``, as on a local filesystem backend.
    """

    @override
    def get_modified_time(self, name: str) -> datetime:
        """Last modification time of a key.

        Args:
            name: Blob key.

        Returns:
            Modification time, aware when ``USE_TZ`` is on.

        Raises:
            FileNotFoundError: If the key does not exist.
        """
        try:
            return super().get_modified_time(name)
        except ClientError as error:
            metadata = error.response.get('ResponseMetadata', {})
            if metadata.get('HTTPStatusCode') == _HTTP_NOT_FOUND:
                raise FileNotFoundError(
                    f'Blob does not exist: {name}',
                ) from error
            raise
