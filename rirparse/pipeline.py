# rirparse/pipeline.py
"""
Record pipeline: byte source -> LineParser -> RangeNormalizer -> records.

Delivery is pull-based. Nothing is decomposed until the consumer asks for
the next record, so a slow consumer simply stops pulling and resumes later.

    for record in iter_records(FileSource("delegated-afrinic-latest")):
        ...

    async for record in aiter_records(source):
        ...
"""

from __future__ import annotations
import asyncio
from collections import deque
from typing import AsyncIterable, AsyncIterator, Deque, Iterable, Iterator, List, Optional, Union

from rirparse.datasources.base import ByteSource
from rirparse.exceptions import ParserStateError
from rirparse.models import AddressRangeRecord, FeedHeader
from rirparse.processing.normalize import RangeNormalizer
from rirparse.processing.parser import Chunk, LineParser
from rirparse.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_YIELD_EVERY = 100

Source = Union[ByteSource, str, bytes, Iterable[Chunk]]


class RirParser:
    """
    Single-use parser for one RIR feed.

    write() chunks in order, call end() once the source is exhausted, and
    read() records until it returns None. IPv6 records become readable as soon
    as their line has been written; IPv4 records only after end().
    """

    def __init__(self) -> None:
        self.normalizer = RangeNormalizer()
        self.lines = LineParser(self.normalizer)
        self.intervals_read = 0
        self.ended = False

        self._batches: Optional[Iterator[List[AddressRangeRecord]]] = None
        self._ipv4: Deque[AddressRangeRecord] = deque()

    @property
    def header(self) -> Optional[FeedHeader]:
        return self.lines.header

    @property
    def done(self) -> bool:
        """True once end() has been called and every record has been read."""
        return (
            self.ended
            and not self.lines.output
            and not self._ipv4
            and self._batches is None
        )

    def write(self, chunk: Chunk) -> None:
        if self.ended:
            raise ParserStateError("write() after end()")
        self.lines.feed(chunk)

    def end(self) -> None:
        """
        Signal end of input: parse the trailing partial line, then merge and
        validate all staged IPv4 intervals.
        """
        if self.ended:
            return
        self.lines.finish()
        self.normalizer.normalize()
        self._batches = self.normalizer.iter_batches()
        self.ended = True

    def read(self) -> Optional[AddressRangeRecord]:
        """Return the next available record, or None if none is ready."""
        if self.lines.output:
            return self.lines.output.popleft()

        while not self._ipv4 and self._batches is not None:
            batch = next(self._batches, None)
            if batch is None:
                self._batches = None
                break
            self.intervals_read += 1
            self._ipv4.extend(batch)

        if self._ipv4:
            return self._ipv4.popleft()
        return None

    def drain(self) -> Iterator[AddressRangeRecord]:
        """Read records until none is ready."""
        while True:
            record = self.read()
            if record is None:
                return
            yield record


def iter_chunks(source: Source) -> Iterator[Chunk]:
    """Chunks from a ByteSource (opened and closed here), a string, or any iterable."""
    if isinstance(source, ByteSource):
        with source:
            yield from source.iter_chunks()
    elif isinstance(source, (str, bytes)):
        yield source
    else:
        yield from source


def iter_records(source: Source, parser: Optional[RirParser] = None) -> Iterator[AddressRangeRecord]:
    """
    Parse a whole feed, yielding records as they become available.

    Errors from the source propagate unchanged, before end() is reached, so
    no IPv4 record of a truncated feed is ever produced. Pass ``parser`` to
    inspect its header and stats afterwards.
    """
    parser = parser if parser is not None else RirParser()

    for chunk in iter_chunks(source):
        parser.write(chunk)
        yield from parser.drain()

    parser.end()
    yield from parser.drain()


async def aiter_records(
        source: Union[Source, AsyncIterable[Chunk]],
        parser: Optional[RirParser] = None,
        yield_every: int = DEFAULT_YIELD_EVERY,
) -> AsyncIterator[AddressRangeRecord]:
    """
    Async counterpart of iter_records().

    ``source`` may be an async iterable of chunks or anything iter_records()
    accepts. Control goes back to the event loop after every chunk and after
    every ``yield_every`` merged IPv4 intervals.
    """
    if yield_every < 1:
        raise ValueError("yield_every must be at least 1")
    parser = parser if parser is not None else RirParser()

    if hasattr(source, "__aiter__"):
        async for chunk in source:
            parser.write(chunk)
            for record in parser.drain():
                yield record
    else:
        for chunk in iter_chunks(source):
            parser.write(chunk)
            for record in parser.drain():
                yield record
            await asyncio.sleep(0)

    parser.end()

    last_pause = 0
    for record in parser.drain():
        yield record
        if parser.intervals_read - last_pause >= yield_every:
            last_pause = parser.intervals_read
            await asyncio.sleep(0)


def parse_text(text: Union[str, bytes]) -> List[AddressRangeRecord]:
    """Parse a complete feed held in memory."""
    return list(iter_records(text))
