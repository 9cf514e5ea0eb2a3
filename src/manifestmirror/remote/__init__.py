"""
Access to the remote object store holding the manifests.

The bucket is enumerated once per run using the S3 API:

    objects = S3KeyLister(bucket="opscode-omnibus-packages", anonymous=True).list()
    keys = remote_key_set(objects)

Individual objects are retrieved over plain HTTP(S) from the bucket's
public base URL:

    data = HTTPFetcher(base_url="https://example.s3.amazonaws.com").get(key)
"""

from .fetch import Fetcher, HTTPFetcher
from .listing import RemoteObject, S3KeyLister, keys_for_prefix, remote_key_set

__all__ = [
    "Fetcher",
    "HTTPFetcher",
    "RemoteObject",
    "S3KeyLister",
    "keys_for_prefix",
    "remote_key_set",
]
