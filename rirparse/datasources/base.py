# rirparse/datasources/base.py

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Iterable, Iterator, Union

DEFAULT_CHUNK_SIZE = 64 * 1024


class ByteSource(ABC):
    """
    Where a feed's bytes come from.

    Use as a context manager; iter_chunks() yields the feed in order and
    raises (OSError, requests exceptions, ...) if the transport fails. Errors
    are never retried or wrapped here.
    """

    name: str = "source"

    def open(self) -> None:
        pass

    def close(self) -> None:
        pass

    @abstractmethod
    def iter_chunks(self) -> Iterator[bytes | str]:
        ...

    def __enter__(self) -> "ByteSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class TextSource(ByteSource):
    """In-memory feed: one string/bytes value, or an iterable of chunks."""

    name = "<memory>"

    def __init__(self, data: Union[str, bytes, Iterable[Union[str, bytes]]]) -> None:
        self.data = data

    def iter_chunks(self) -> Iterator[bytes | str]:
        if isinstance(self.data, (str, bytes)):
            yield self.data
        else:
            yield from self.data
