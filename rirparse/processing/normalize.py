# rirparse/processing/normalize.py

from __future__ import annotations
from dataclasses import replace
from operator import attrgetter
from typing import Iterable, Iterator, List, Tuple

from rirparse.exceptions import InvalidIntervalError, ParserStateError
from rirparse.models import AddressRangeRecord, MergedInterval, StagedInterval
from rirparse.utils.ipv4 import IPV4_SPACE, MAX_IPV4, int_to_ipv4
from rirparse.utils.logging import get_logger

log = get_logger(__name__)

# (prefix length, block size) for the block vocabulary, smallest first.
BLOCK_32 = (32, 1)
BLOCK_24 = (24, 1 << 8)
BLOCK_16 = (16, 1 << 16)
BLOCK_8 = (8, 1 << 24)

# Widening steps: emit blocks of the first size until the cursor reaches the
# alignment of the next size up.
_WIDEN = (
    (BLOCK_32, BLOCK_24),
    (BLOCK_24, BLOCK_16),
    (BLOCK_16, BLOCK_8),
)
# Narrowing steps after the /8 run, largest first.
_NARROW = (BLOCK_16, BLOCK_24, BLOCK_32)


def merge_intervals(staged: Iterable[StagedInterval]) -> List[MergedInterval]:
    """
    Sort intervals by start and glue together contiguous same-country runs.

    The sort is stable, so intervals sharing a start address stay in feed
    order; a warning is logged for each such duplicate. Input intervals are
    not modified.
    """
    ordered = sorted(staged, key=attrgetter("start"))

    merged: List[MergedInterval] = []
    acc = None
    prev_start = None
    for item in ordered:
        if item.start == prev_start:
            log.warning(
                "Duplicate IPv4 start %s (%s); keeping feed order",
                int_to_ipv4(item.start) if item.start <= MAX_IPV4 else item.start,
                item.country,
            )
        prev_start = item.start

        if acc is None:
            acc = replace(item)
        elif acc.end == item.start and acc.country == item.country:
            acc.end = item.end
        else:
            merged.append(acc)
            acc = replace(item)

    if acc is not None:
        merged.append(acc)

    return merged


def check_interval(interval: StagedInterval) -> StagedInterval:
    """
    Validate one interval against the IPv4 address space.

    An end past the top of the address space is clamped to 2**32. Returns the
    interval to decompose (the same object unless it was clamped).
    """
    if not 0 <= interval.start <= MAX_IPV4:
        raise InvalidIntervalError(
            f"Interval start {interval.start} outside IPv4 space ({interval.country})"
        )
    if interval.end < interval.start:
        raise InvalidIntervalError(
            f"Interval end {interval.end} before start {interval.start} ({interval.country})"
        )
    if interval.end > IPV4_SPACE:
        log.warning(
            "Clamping interval %s+%d (%s) to the end of IPv4 space",
            int_to_ipv4(interval.start), interval.size, interval.country,
        )
        return replace(interval, end=IPV4_SPACE)
    return interval


def decompose_interval(start: int, end: int) -> Iterator[Tuple[int, int]]:
    """
    Split the address interval [start, end) into aligned CIDR blocks.

    Blocks are drawn from /32, /24, /16 and /8. Working from ``start``, the
    block size widens as the cursor reaches each alignment boundary, runs
    through as many /8s as fit, then narrows again to cover the remainder.
    The result is the shortest ordered partition of the interval using those
    four sizes.

    Yields:
        (network address as int, prefix length) pairs in ascending order.
    """
    curr = start

    for (prefix_len, size), (_, boundary) in _WIDEN:
        while curr % boundary and curr + size <= end:
            yield curr, prefix_len
            curr += size

    prefix_len, size = BLOCK_8
    while curr + size <= end:
        yield curr, prefix_len
        curr += size

    for prefix_len, size in _NARROW:
        while curr + size <= end:
            yield curr, prefix_len
            curr += size


def interval_to_records(interval: MergedInterval) -> List[AddressRangeRecord]:
    """Decompose one merged interval into ipv4 records carrying its country."""
    return [
        AddressRangeRecord(
            cidr=f"{int_to_ipv4(network)}/{prefix_len}",
            kind="ipv4",
            country=interval.country,
        )
        for network, prefix_len in decompose_interval(interval.start, interval.end)
    ]


class RangeNormalizer:
    """
    Owner of staged IPv4 intervals.

    Intervals are staged one by one while the feed is parsed. ``normalize()``
    then merges and validates all of them at once, and ``iter_batches()``
    decomposes the merged intervals lazily, one batch of records per merged
    interval, so the caller controls how fast output is produced.
    """

    def __init__(self) -> None:
        self._staged: List[StagedInterval] = []
        self._merged: List[MergedInterval] | None = None

    def __len__(self) -> int:
        return len(self._staged)

    @property
    def merged(self) -> List[MergedInterval]:
        if self._merged is None:
            raise ParserStateError("normalize() has not been called")
        return self._merged

    def stage(self, interval: StagedInterval) -> None:
        if self._merged is not None:
            raise ParserStateError("Cannot stage intervals after normalize()")
        self._staged.append(interval)

    def normalize(self) -> List[MergedInterval]:
        """
        Merge and validate every staged interval.

        Validation covers all merged intervals before anything is decomposed,
        so an invariant violation surfaces before the first ipv4 record.
        Staging is cleared; the normalizer cannot be reused.
        """
        if self._merged is not None:
            return self._merged

        staged, self._staged = self._staged, []
        merged = [check_interval(interval) for interval in merge_intervals(staged)]
        log.info("Merged %d staged IPv4 intervals into %d ranges", len(staged), len(merged))

        self._merged = merged
        return merged

    def iter_batches(self) -> Iterator[List[AddressRangeRecord]]:
        """Yield the ipv4 records of each merged interval, in address order."""
        for interval in self.normalize():
            yield interval_to_records(interval)

    def iter_records(self) -> Iterator[AddressRangeRecord]:
        for batch in self.iter_batches():
            yield from batch
