# rirparse/exceptions.py
"""
Exceptions raised by the RIR statistics parser.

Structural problems with individual feed lines are not errors: such lines are
skipped. Everything here is fatal for the pipeline that raised it.
"""


class RirParserError(Exception):
    """Base class for parser errors."""


class AddressParseError(RirParserError, ValueError):
    """Malformed IPv4/IPv6 literal or IPv6 prefix length in a feed line."""


class CountParseError(RirParserError, ValueError):
    """IPv4 address count that is not a non-negative integer."""


class InvalidIntervalError(RirParserError):
    """Staged IPv4 interval that cannot be normalized (eg, end before start)."""


class ParserStateError(RirParserError):
    """Parser used outside its lifecycle (eg, written to after end())."""


class FeedDecodeError(RirParserError, ValueError):
    """Feed bytes that are not valid UTF-8."""
