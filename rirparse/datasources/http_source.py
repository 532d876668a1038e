# rirparse/datasources/http_source.py

from __future__ import annotations
from typing import Iterator, Optional

import requests

from rirparse.datasources.base import DEFAULT_CHUNK_SIZE, ByteSource
from rirparse.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_TIMEOUT = 300

# Daily "delegated" statistics published by each registry.
RIR_URLS = {
    "afrinic": "https://ftp.afrinic.net/pub/stats/afrinic/delegated-afrinic-latest",
    "apnic": "https://ftp.apnic.net/stats/apnic/delegated-apnic-latest",
    "arin": "https://ftp.arin.net/pub/stats/arin/delegated-arin-extended-latest",
    "lacnic": "https://ftp.lacnic.net/pub/stats/lacnic/delegated-lacnic-latest",
    "ripencc": "https://ftp.ripe.net/pub/stats/ripencc/delegated-ripencc-latest",
}


class HttpSource(ByteSource):
    """
    Feed fetched over HTTP(S) and streamed in chunks.

    Non-2xx responses raise requests.HTTPError; connection failures and
    timeouts raise the corresponding requests exceptions.
    """

    def __init__(
            self,
            url: str,
            timeout: float = DEFAULT_TIMEOUT,
            chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self.url = url
        self.name = url
        self.timeout = timeout
        self.chunk_size = chunk_size
        self._response: Optional[requests.Response] = None

    def open(self) -> None:
        log.info("Fetching %s", self.url)
        response = requests.get(self.url, stream=True, timeout=self.timeout)
        try:
            response.raise_for_status()
        except requests.HTTPError:
            response.close()
            log.error("HTTP %s from %s", response.status_code, self.url)
            raise
        self._response = response

    def close(self) -> None:
        if self._response is not None:
            self._response.close()
            self._response = None

    def iter_chunks(self) -> Iterator[bytes]:
        opened_here = self._response is None
        if opened_here:
            self.open()
        try:
            for chunk in self._response.iter_content(chunk_size=self.chunk_size):
                if chunk:
                    yield chunk
        finally:
            if opened_here:
                self.close()
