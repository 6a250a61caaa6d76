"""Remote inventory: relative paths of every object under a bucket prefix."""

from __future__ import annotations

import logging
import threading
from typing import Iterator, List, Optional

from botocore.exceptions import BotoCoreError, ClientError, ParamValidationError

from .errors import ConfigurationError, TransportError, VerificationCancelledError, client_error_code
from .exclusions import ExclusionSet
from .keys import KEY_SEPARATOR, normalize_prefix, strip_key_prefix

# Service error codes meaning the bucket itself is wrong rather than unreachable
BUCKET_CONFIGURATION_CODES = frozenset({"NoSuchBucket", "InvalidBucketName"})


class ObjectLister:
    """
    Lists the actual object set stored under a prefix.

    The lister owns key normalization: every key is stripped of
    ``prefix + "/"`` through ``strip_key_prefix`` so remote paths compare
    equal to the paths produced by the local inventory. The zero-byte
    ``prefix/`` placeholder that consoles create for a "folder" is skipped.
    """

    def __init__(
        self,
        s3,
        exclusions: Optional[ExclusionSet] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        self.s3 = s3
        self.exclusions = exclusions if exclusions is not None else ExclusionSet.default()
        self.cancel_event = cancel_event

    def iter_keys(self, bucket: str, prefix: str) -> Iterator[str]:
        """
        Yield every object key under the prefix, following continuation tokens.

        Raises:
            ConfigurationError: If the bucket does not exist or is invalid
            TransportError: If any listing page fails
            VerificationCancelledError: If the cancel event is set between pages
        """
        prefix = normalize_prefix(prefix)
        list_kwargs = {"Bucket": bucket}
        if prefix:
            list_kwargs["Prefix"] = prefix + KEY_SEPARATOR
        paginator = self.s3.get_paginator("list_objects_v2")
        page_count = 0
        try:
            for page in paginator.paginate(**list_kwargs):
                if self.cancel_event is not None and self.cancel_event.is_set():
                    raise VerificationCancelledError(0)
                page_count += 1
                for obj in page.get("Contents", []):
                    yield obj["Key"]
        except ParamValidationError as exc:
            raise ConfigurationError(f"Invalid listing request for bucket {bucket!r}: {exc}") from exc
        except ClientError as exc:
            if client_error_code(exc) in BUCKET_CONFIGURATION_CODES:
                raise ConfigurationError(f"Bucket {bucket!r} is not usable: {exc}") from exc
            raise TransportError("ListObjectsV2", bucket, list_kwargs.get("Prefix"), exc) from exc
        except BotoCoreError as exc:
            raise TransportError("ListObjectsV2", bucket, list_kwargs.get("Prefix"), exc) from exc
        logging.debug("Listed s3://%s/%s in %d page(s)", bucket, prefix, page_count)

    def list_relative_paths(self, bucket: str, prefix: str) -> List[str]:
        """Return sorted relative paths under the prefix with exclusions applied."""
        prefix = normalize_prefix(prefix)
        folder_marker = prefix + KEY_SEPARATOR if prefix else None
        relative_paths = set()
        for key in self.iter_keys(bucket, prefix):
            if key == folder_marker:
                logging.debug("Skipping folder marker s3://%s/%s", bucket, key)
                continue
            relative_path = strip_key_prefix(key, prefix)
            if self.exclusions.is_excluded(relative_path):
                continue
            relative_paths.add(relative_path)
        logging.info("Found %s object(s) under s3://%s/%s", f"{len(relative_paths):,}", bucket, prefix)
        return sorted(relative_paths)


def list_all_objects(s3, bucket: str, prefix: str, exclusions: Optional[ExclusionSet] = None) -> List[str]:
    """Return the relative paths of all objects under ``bucket``/``prefix``."""
    return ObjectLister(s3, exclusions).list_relative_paths(bucket, prefix)


__all__ = ["BUCKET_CONFIGURATION_CODES", "ObjectLister", "list_all_objects"]
