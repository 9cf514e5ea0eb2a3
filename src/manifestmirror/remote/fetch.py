"""Module retrieving the bytes of a single remote object."""

from __future__ import annotations

import logging
from typing import Protocol

import requests

from ..errors import TransportError

log = logging.getLogger("remote/fetch")


class Fetcher(Protocol):
    """
    Retrieve the raw bytes of a remote object.

    Methods:
        get: return the object bytes or raise TransportError.
    """

    def get(self, key: str) -> bytes: ...


class HTTPFetcher:
    """Fetch objects from the bucket's HTTP(S) endpoint."""

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = 30,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()

    def url_for(self, key: str) -> str:
        """Return the URL where the given key is served."""
        return f"{self.base_url}/{key.lstrip('/')}"

    def get(self, key: str) -> bytes:
        """
        Return the bytes of the object at `key`.

        Raises:
            TransportError: on connection failures and non-2xx responses.
        """
        url = self.url_for(key)
        log.debug("GET %s... start", url)
        try:
            resp = self.session.get(url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            log.debug("GET %s... failure: %s", url, exc)
            raise TransportError(f"cannot fetch {key}: {exc}") from exc
        log.debug("GET %s... ok (%d bytes)", url, len(resp.content))
        return resp.content
