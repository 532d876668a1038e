# rirparse/utils/ipv4.py

from __future__ import annotations
import ipaddress

from rirparse.exceptions import AddressParseError

IPV4_SPACE = 1 << 32
MAX_IPV4 = IPV4_SPACE - 1


def ipv4_to_int(text: str) -> int:
    """
    Parse a dotted-quad IPv4 address into its 32-bit integer value.

    Raises AddressParseError for anything ``ipaddress`` rejects.
    """
    try:
        return int(ipaddress.IPv4Address(text))
    except ipaddress.AddressValueError as e:
        raise AddressParseError(f"Bad IPv4 address {text!r}: {e}") from e


def int_to_ipv4(value: int) -> str:
    """Format a 32-bit integer as a dotted-quad IPv4 address."""
    if not 0 <= value <= MAX_IPV4:
        raise AddressParseError(f"IPv4 value out of range: {value}")
    return str(ipaddress.IPv4Address(value))


def check_ipv6(address: str, prefix_len: str) -> str:
    """
    Validate an IPv6 start address and prefix length as found in a feed line.

    The address is passed through verbatim. Returns the prefix length in
    canonical form, so "032" comes back as "32".
    """
    try:
        ipaddress.IPv6Address(address)
    except ipaddress.AddressValueError as e:
        raise AddressParseError(f"Bad IPv6 address {address!r}: {e}") from e

    if not (prefix_len.isascii() and prefix_len.isdigit()) or not 0 <= int(prefix_len) <= 128:
        raise AddressParseError(f"Bad IPv6 prefix length {prefix_len!r} for {address}")
    return str(int(prefix_len))
