# rirparse/datasources/resolve.py

from __future__ import annotations

from rirparse.datasources.base import DEFAULT_CHUNK_SIZE, ByteSource
from rirparse.datasources.file_source import FileSource
from rirparse.datasources.http_source import DEFAULT_TIMEOUT, RIR_URLS, HttpSource


def resolve_source(
        location: str,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        timeout: float = DEFAULT_TIMEOUT,
) -> ByteSource:
    """
    Turn a CLI-style location into a ByteSource.

    ``location`` is a registry name (see RIR_URLS), an http(s) URL, or a path.
    """
    key = location.lower()
    if key in RIR_URLS:
        return HttpSource(RIR_URLS[key], timeout=timeout, chunk_size=chunk_size)
    if key.startswith(("http://", "https://")):
        return HttpSource(location, timeout=timeout, chunk_size=chunk_size)
    return FileSource(location, chunk_size=chunk_size)
