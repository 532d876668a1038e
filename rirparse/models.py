# rirparse/models.py
from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from typing import Dict, Literal, Optional, Union

Kind = Literal["ipv4", "ipv6"]


@dataclass
class StagedInterval:
    start: int      # first address, as a 32-bit integer
    end: int        # one past the last address
    country: str    # two-letter country code from the feed

    @property
    def size(self) -> int:
        return self.end - self.start


# Merging produces intervals of the same shape.
MergedInterval = StagedInterval


@dataclass(frozen=True)
class AddressRangeRecord:
    cidr: str       # "a.b.c.d/len" or "x:y::/len"
    kind: Kind
    country: str

    @property
    def network(self) -> Union[ipaddress.IPv4Network, ipaddress.IPv6Network]:
        return ipaddress.ip_network(self.cidr, strict=False)

    @property
    def num_addresses(self) -> int:
        return self.network.num_addresses


@dataclass
class FeedHeader:
    version: str
    registry: str
    serial: str
    records: Optional[int]
    start_date: Optional[str]       # ISO "YYYY-MM-DD", None if not given
    end_date: Optional[str]         # snapshot date of the feed
    utc_offset: str
    summaries: Dict[str, int] = field(default_factory=dict)  # type -> count from summary lines
