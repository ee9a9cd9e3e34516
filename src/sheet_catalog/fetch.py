"""Remote spreadsheet download."""

from __future__ import annotations

import logging

import requests

from sheet_catalog.errors import FetchError

logger = logging.getLogger(__name__)


class RemoteFetcher:
    """Downloads a workbook over HTTP(S) and returns its bytes.

    A failed download raises :class:`FetchError`; there are no retries.
    """

    def __init__(self, timeout: float = 30.0, session: requests.Session | None = None):
        self.timeout = timeout
        self.session = session

    def fetch(self, url: str) -> bytes:
        logger.debug("Fetching %s", url)
        get = self.session.get if self.session is not None else requests.get
        try:
            response = get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise FetchError(url, f"Download failed for {url}: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise FetchError(
                url,
                f"Download failed for {url}: HTTP {response.status_code}",
                status_code=response.status_code,
            )
        data = response.content
        logger.debug("Fetched %d bytes from %s", len(data), url)
        return data
