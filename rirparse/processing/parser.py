# rirparse/processing/parser.py
"""
Line-level parsing of RIR statistics files.

The RIR statistics format is described at https://www.nro.net/statistics;
daily files are published by each registry, e.g.
https://ftp.ripe.net/pub/stats/ripencc/delegated-ripencc-latest.

Each record line has at least seven fields:

    registry|cc|type|start|value|date|status[|extensions...]

IPv6 lines already carry a prefix length and are emitted as-is. IPv4 lines
carry a start address and an address count; they are staged with a
RangeNormalizer and only turned into CIDR blocks once the whole feed has
been read.
"""

from __future__ import annotations
import codecs
import re
from collections import Counter, deque
from typing import Deque, List, Optional, Union

from rirparse.exceptions import CountParseError, FeedDecodeError, ParserStateError
from rirparse.models import AddressRangeRecord, FeedHeader, StagedInterval
from rirparse.processing.normalize import RangeNormalizer
from rirparse.utils.date_detection import parse_rir_date
from rirparse.utils.ipv4 import check_ipv6, ipv4_to_int
from rirparse.utils.logging import get_logger

log = get_logger(__name__)

KINDS = ("ipv4", "ipv6")
STATUSES = ("assigned", "allocated")
MIN_FIELDS = 7

_VERSION = re.compile(r"^\d+(\.\d+)?$")

Chunk = Union[str, bytes]


class LineParser:
    """
    Incremental parser: feed it chunks of any size, then call finish().

    IPv6 records are appended to ``output`` as their lines are parsed.
    IPv4 intervals go to ``normalizer``.
    """

    def __init__(self, normalizer: Optional[RangeNormalizer] = None) -> None:
        self.normalizer = normalizer if normalizer is not None else RangeNormalizer()
        self.output: Deque[AddressRangeRecord] = deque()
        self.header: Optional[FeedHeader] = None
        self.stats: Counter = Counter()
        self.finished = False

        self._partial = ""
        self._decoder = codecs.getincrementaldecoder("utf-8")()

    def feed(self, chunk: Chunk) -> None:
        """Parse every complete line in ``chunk``, buffering any trailing partial line."""
        if self.finished:
            raise ParserStateError("Cannot feed a finished parser")

        text = self._decode(chunk) if isinstance(chunk, bytes) else chunk
        if not text:
            return

        lines = (self._partial + text).split("\n")
        self._partial = lines.pop()
        for line in lines:
            self.parse_line(line)

    def finish(self) -> None:
        """Parse the buffered partial line, if any, as a complete line."""
        if self.finished:
            return

        line = self._partial + self._decode(b"", final=True)
        self._partial = ""
        if line:
            self.parse_line(line)
        self.finished = True

        log.info(
            "Parsed %d lines: %d ipv6 records, %d ipv4 intervals, %d skipped",
            self.stats["lines"], self.stats["ipv6"], self.stats["ipv4"], self.stats["skipped"],
        )

    def _decode(self, data: bytes, final: bool = False) -> str:
        try:
            return self._decoder.decode(data, final=final)
        except UnicodeDecodeError as e:
            raise FeedDecodeError(f"Feed is not valid UTF-8: {e}") from e

    def parse_line(self, line: str) -> None:
        self.stats["lines"] += 1
        line = line.rstrip("\r")
        if not line or line.startswith("#"):
            return

        fields = line.split("|")

        if self.header is None and len(fields) >= MIN_FIELDS and _VERSION.match(fields[0]):
            self.header = _parse_header(fields)
            return

        # registry|*|type|*|count|summary
        if len(fields) >= 6 and fields[5] == "summary":
            if self.header is not None and fields[4].isdigit():
                self.header.summaries[fields[2]] = int(fields[4])
            return

        if len(fields) < MIN_FIELDS:
            return self._skip("too few fields", line)

        country, kind, start, value, status = fields[1], fields[2], fields[3], fields[4], fields[6]
        if kind not in KINDS:
            return self._skip("type", line)
        if status not in STATUSES:
            return self._skip("status", line)
        if not country:
            return self._skip("no country", line)

        if kind == "ipv6":
            prefix_len = check_ipv6(start, value)
            self.output.append(
                AddressRangeRecord(cidr=f"{start}/{prefix_len}", kind="ipv6", country=country)
            )
            self.stats["ipv6"] += 1
        else:
            first = ipv4_to_int(start)
            self.normalizer.stage(
                StagedInterval(start=first, end=first + _parse_count(value), country=country)
            )
            self.stats["ipv4"] += 1

    def _skip(self, reason: str, line: str) -> None:
        self.stats["skipped"] += 1
        log.debug("Skipping line (%s): %s", reason, line)


def _parse_count(value: str) -> int:
    if not (value.isascii() and value.isdigit()):
        raise CountParseError(f"Bad IPv4 address count {value!r}")
    return int(value)


def _parse_header(fields: List[str]) -> FeedHeader:
    # version|registry|serial|records|startdate|enddate|UTCoffset
    version, registry, serial, records, start_date, end_date, utc_offset = fields[:7]
    header = FeedHeader(
        version=version,
        registry=registry,
        serial=serial,
        records=int(records) if records.isdigit() else None,
        start_date=parse_rir_date(start_date),
        end_date=parse_rir_date(end_date),
        utc_offset=utc_offset,
    )
    log.info("Feed %s version %s, serial %s, snapshot %s",
             header.registry, header.version, header.serial, header.end_date)
    return header
