"""Module enumerating the keys stored in the remote bucket."""

from __future__ import annotations

import logging
import posixpath
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import boto3
from botocore import UNSIGNED
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import TransportError

log = logging.getLogger("remote/listing")


@dataclass(frozen=True, kw_only=True)
class RemoteObject:
    """A single object listed in the bucket."""

    key: str
    checksum: str


class S3KeyLister:
    """
    Enumerate every object in an S3 bucket.

    Pagination is handled internally and the result is fully materialized.
    """

    def __init__(
        self,
        *,
        bucket: str,
        prefix: str = "",
        anonymous: bool = False,
        region: str | None = None,
        endpoint_url: str | None = None,
        client: Any | None = None,
    ) -> None:
        self.bucket = bucket
        self.prefix = prefix
        if client is None:
            config = BotoConfig(signature_version=UNSIGNED) if anonymous else None
            client = boto3.client(
                "s3",
                region_name=region,
                endpoint_url=endpoint_url,
                config=config,
            )
        self.client = client

    def list(self) -> list[RemoteObject]:
        """
        Return every (key, checksum) pair currently in the bucket.

        Raises:
            TransportError: if the listing request fails.
        """
        log.info("listing s3://%s/%s... start", self.bucket, self.prefix)
        objects: list[RemoteObject] = []
        try:
            paginator = self.client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket, Prefix=self.prefix):
                for item in page.get("Contents", []):
                    objects.append(
                        RemoteObject(
                            key=item["Key"],
                            checksum=item.get("ETag", "").strip('"'),
                        )
                    )
        except (BotoCoreError, ClientError) as exc:
            log.warning("listing s3://%s/%s... failure: %s", self.bucket, self.prefix, exc)
            raise TransportError(f"cannot list bucket {self.bucket}: {exc}") from exc
        log.info("listing s3://%s/%s... ok (%d objects)", self.bucket, self.prefix, len(objects))
        return objects


def remote_key_set(objects: Iterable[RemoteObject]) -> frozenset[str]:
    """Return the set of keys for the given listed objects."""
    return frozenset(obj.key for obj in objects)


def keys_for_prefix(keys: Iterable[str], prefix: str) -> set[str]:
    """
    Return the keys whose directory component is exactly `prefix`.

    Keys with an empty or hidden basename are skipped, matching the files
    considered when scanning the local cache.
    """
    prefix = prefix.strip("/")
    result = set()
    for key in keys:
        name = posixpath.basename(key)
        if posixpath.dirname(key) == prefix and name and not name.startswith("."):
            result.add(key)
    return result
