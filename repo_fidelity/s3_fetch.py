"""Point reads of single objects from the remote store."""

from __future__ import annotations

from botocore.exceptions import BotoCoreError, ClientError

from .errors import ObjectNotFoundError, TransportError, client_error_code
from .keys import join_key, normalize_prefix

NOT_FOUND_CODES = frozenset({"NoSuchKey", "404", "NotFound"})


class ContentFetcher:  # pylint: disable=too-few-public-methods
    """Fetches the full content of one object into memory."""

    def __init__(self, s3):
        self.s3 = s3

    def fetch(self, bucket: str, prefix: str, relative_path: str) -> bytes:
        """
        Return the bytes stored at ``prefix + "/" + relative_path``.

        Raises:
            ObjectNotFoundError: If no object exists at that key
            TransportError: For any other failure talking to the store
        """
        key = join_key(normalize_prefix(prefix), relative_path)
        try:
            response = self.s3.get_object(Bucket=bucket, Key=key)
            body = response["Body"]
            try:
                return body.read()
            finally:
                body.close()
        except ClientError as exc:
            if client_error_code(exc) in NOT_FOUND_CODES:
                raise ObjectNotFoundError("GetObject", bucket, key, exc) from exc
            raise TransportError("GetObject", bucket, key, exc) from exc
        except BotoCoreError as exc:
            raise TransportError("GetObject", bucket, key, exc) from exc


__all__ = ["ContentFetcher", "NOT_FOUND_CODES"]
