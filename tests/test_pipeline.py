import asyncio
import ipaddress

import pytest

from rirparse.datasources.base import TextSource
from rirparse.exceptions import AddressParseError, ParserStateError
from rirparse.models import AddressRangeRecord
from rirparse.pipeline import RirParser, aiter_records, iter_records, parse_text

EXPECTED_IPV6 = [
    AddressRangeRecord("2001:4200::/32", "ipv6", "ZA"),
    AddressRangeRecord("2c0f:fc88::/32", "ipv6", "EG"),
]
EXPECTED_IPV4 = (
    [AddressRangeRecord("41.0.0.0/16", "ipv4", "ZA"), AddressRangeRecord("41.1.0.0/16", "ipv4", "ZA")]
    + [AddressRangeRecord(f"41.{n}.0.0/16", "ipv4", "EG") for n in range(32, 48)]
    + [AddressRangeRecord(f"41.57.{n}.0/24", "ipv4", "KE") for n in range(96, 100)]
)


def test_parse_text_sample(sample_feed):
    assert parse_text(sample_feed) == EXPECTED_IPV6 + EXPECTED_IPV4


def test_single_full_slash8():
    records = parse_text("arin|US|ipv4|1.0.0.0|16777216|20100101|allocated\n")

    assert records == [AddressRangeRecord("1.0.0.0/8", "ipv4", "US")]


def test_adjacent_ranges_different_countries_not_merged():
    feed = (
        "ripencc|AA|ipv4|10.0.0.0|256|20100101|allocated\n"
        "ripencc|BB|ipv4|10.0.1.0|256|20100101|allocated\n"
    )

    assert parse_text(feed) == [
        AddressRangeRecord("10.0.0.0/24", "ipv4", "AA"),
        AddressRangeRecord("10.0.1.0/24", "ipv4", "BB"),
    ]


def test_ipv6_emitted_before_end_ipv4_only_after(sample_feed):
    parser = RirParser()
    parser.write(sample_feed)

    assert list(parser.drain()) == EXPECTED_IPV6
    assert not parser.done

    parser.end()
    assert list(parser.drain()) == EXPECTED_IPV4
    assert parser.done


def test_slow_consumer_loses_nothing(sample_feed):
    parser = RirParser()
    got = []
    lines = sample_feed.splitlines(keepends=True)

    # read at most one record per written line
    for line in lines:
        parser.write(line)
        record = parser.read()
        if record is not None:
            got.append(record)
    parser.end()
    while True:
        record = parser.read()
        if record is None:
            break
        got.append(record)

    assert parser.done
    assert got == EXPECTED_IPV6 + EXPECTED_IPV4


def test_write_after_end_raises():
    parser = RirParser()
    parser.end()

    with pytest.raises(ParserStateError):
        parser.write("x")


def test_chunk_boundary_independence(sample_feed):
    expected = parse_text(sample_feed)
    data = sample_feed.encode("utf-8")

    for size in (1, 3, 10, 100):
        chunks = [data[i:i + size] for i in range(0, len(data), size)]
        assert list(iter_records(chunks)) == expected


def test_coverage_matches_input_per_country():
    feed = "".join(
        f"lacnic|{cc}|ipv4|{start}|{count}|20100101|assigned\n"
        for cc, start, count in [
            ("AR", "24.232.0.0", 65536),
            ("AR", "24.233.0.0", 1000),
            ("BR", "200.0.0.0", 3),
            ("AR", "24.233.3.232", 24),
            ("BR", "200.0.0.3", 16777213),
            ("CL", "190.0.0.7", 77777),
        ]
    )

    records = parse_text(feed)

    def addresses(country):
        covered = set()
        for record in records:
            if record.country == country:
                net = ipaddress.ip_network(record.cidr)
                span = range(int(net.network_address), int(net.network_address) + net.num_addresses)
                assert covered.isdisjoint(span)
                covered.update(span)
        return covered

    def span(start, count):
        first = int(ipaddress.IPv4Address(start))
        return set(range(first, first + count))

    assert addresses("AR") == span("24.232.0.0", 65536 + 1024)
    assert addresses("CL") == span("190.0.0.7", 77777)
    assert [r.cidr for r in records if r.country == "BR"] == ["200.0.0.0/8"]


def test_count_past_end_of_space_is_clamped():
    records = parse_text("arin|US|ipv4|255.255.255.0|1024|20100101|allocated")

    assert records == [AddressRangeRecord("255.255.255.0/24", "ipv4", "US")]


class FailingSource:
    def __init__(self, chunks):
        self.chunks = chunks

    def __iter__(self):
        yield from self.chunks
        raise ConnectionResetError("connection reset by peer")


def test_transport_error_propagates_without_ipv4(sample_feed):
    got = []

    with pytest.raises(ConnectionResetError):
        for record in iter_records(FailingSource([sample_feed])):
            got.append(record)

    assert got == EXPECTED_IPV6


def test_address_error_is_fatal():
    feed = (
        "ripencc|NL|ipv4|10.0.0.0|256|20100101|allocated\n"
        "ripencc|NL|ipv4|10.0.0.x|256|20100101|allocated\n"
    )

    with pytest.raises(AddressParseError):
        parse_text(feed)


def test_text_source(sample_feed):
    chunks = [sample_feed[:50], sample_feed[50:]]

    assert list(iter_records(TextSource(chunks))) == parse_text(sample_feed)


def test_header_available_after_iteration(sample_feed):
    parser = RirParser()
    list(iter_records(sample_feed, parser=parser))

    assert parser.header.registry == "afrinic"
    assert parser.intervals_read == 3


async def _collect(source, **kwargs):
    return [record async for record in aiter_records(source, **kwargs)]


def test_async_matches_sync(sample_feed):
    assert asyncio.run(_collect(sample_feed)) == parse_text(sample_feed)


def test_async_iterable_source(sample_feed):
    async def chunks():
        for i in range(0, len(sample_feed), 17):
            await asyncio.sleep(0)
            yield sample_feed[i:i + 17]

    assert asyncio.run(_collect(chunks(), yield_every=1)) == parse_text(sample_feed)


def test_async_yields_to_other_tasks():
    feed = "".join(
        f"arin|US|ipv4|10.0.{n}.0|1|20100101|allocated\n" for n in range(50)
    )
    records = []
    seen = []

    async def ticker():
        for _ in range(20):
            seen.append(len(records))
            await asyncio.sleep(0)

    async def main():
        task = asyncio.ensure_future(ticker())
        async for record in aiter_records(feed, yield_every=5):
            records.append(record)
        await task

    asyncio.run(main())

    assert len(records) == 50
    assert any(0 < n < 50 for n in seen)


def test_async_rejects_bad_yield_every():
    with pytest.raises(ValueError):
        asyncio.run(_collect("", yield_every=0))
