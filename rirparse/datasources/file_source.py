# rirparse/datasources/file_source.py

from __future__ import annotations
import gzip
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

from rirparse.datasources.base import DEFAULT_CHUNK_SIZE, ByteSource
from rirparse.utils.logging import get_logger

log = get_logger(__name__)


class FileSource(ByteSource):
    """
    Local RIR statistics file. Files ending in .gz are decompressed on the fly.
    """

    def __init__(self, path: Union[str, Path], chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self.path = Path(path).expanduser()
        self.name = str(self.path)
        self.chunk_size = chunk_size
        self._fh: Optional[BinaryIO] = None

    def open(self) -> None:
        log.info("Reading %s", self.path)
        if self.path.suffix.lower() == ".gz":
            self._fh = gzip.open(self.path, "rb")
        else:
            self._fh = open(self.path, "rb")

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None

    def iter_chunks(self) -> Iterator[bytes]:
        opened_here = self._fh is None
        if opened_here:
            self.open()
        try:
            while True:
                chunk = self._fh.read(self.chunk_size)
                if not chunk:
                    return
                yield chunk
        finally:
            if opened_here:
                self.close()
