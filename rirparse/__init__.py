"""Parse RIR delegated statistics into per-country CIDR blocks."""

from rirparse.exceptions import (
    AddressParseError,
    CountParseError,
    FeedDecodeError,
    InvalidIntervalError,
    ParserStateError,
    RirParserError,
)
from rirparse.models import AddressRangeRecord, FeedHeader, MergedInterval, StagedInterval
from rirparse.pipeline import RirParser, aiter_records, iter_records, parse_text

__version__ = "0.1.0"

__all__ = [
    "AddressParseError",
    "AddressRangeRecord",
    "CountParseError",
    "FeedDecodeError",
    "FeedHeader",
    "InvalidIntervalError",
    "MergedInterval",
    "ParserStateError",
    "RirParser",
    "RirParserError",
    "StagedInterval",
    "aiter_records",
    "iter_records",
    "parse_text",
]
