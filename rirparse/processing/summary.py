# rirparse/processing/summary.py

from __future__ import annotations
from typing import Iterable, Optional

import pandas as pd

from rirparse.models import AddressRangeRecord
from rirparse.utils.logging import get_logger

log = get_logger(__name__)

RECORD_COLUMNS = ["cidr", "kind", "country"]
SUMMARY_COLUMNS = ["country", "ipv4", "ipv6", "total", "ipv4_addresses"]


def records_to_dataframe(records: Iterable[AddressRangeRecord]) -> pd.DataFrame:
    """
    Collect records into a DataFrame with columns cidr, kind, country and
    prefix_len.
    """
    rows = [
        {
            "cidr": r.cidr,
            "kind": r.kind,
            "country": r.country,
            "prefix_len": r.network.prefixlen,
        }
        for r in records
    ]
    if not rows:
        return pd.DataFrame(columns=RECORD_COLUMNS + ["prefix_len"])
    return pd.DataFrame(rows)


def summarize_by_country(df: pd.DataFrame, top: Optional[int] = None) -> pd.DataFrame:
    """
    Count blocks per country and address family.

    Returns one row per country, sorted by country code (or, with ``top``,
    the ``top`` countries with most blocks), with columns
    country, ipv4, ipv6, total, ipv4_addresses.
    """
    if df.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    counts = (
        df.groupby(["country", "kind"]).size()
        .unstack(fill_value=0)
        .reindex(columns=["ipv4", "ipv6"], fill_value=0)
    )
    counts["total"] = counts["ipv4"] + counts["ipv6"]

    v4 = df[df["kind"] == "ipv4"]
    sizes = 2 ** (32 - v4["prefix_len"].astype("int64"))
    counts["ipv4_addresses"] = (
        sizes.groupby(v4["country"]).sum()
        .reindex(counts.index, fill_value=0)
        .astype("int64")
    )

    summary = counts.reset_index()
    summary.columns.name = None
    summary = summary[SUMMARY_COLUMNS].sort_values("country").reset_index(drop=True)

    if top is not None:
        summary = (
            summary.sort_values(["total", "country"], ascending=[False, True])
            .head(top)
            .reset_index(drop=True)
        )

    log.info("Summarized %d records across %d countries", len(df), len(summary))
    return summary


def grand_total(summary: pd.DataFrame) -> dict:
    return {
        "country": "TOTAL",
        "ipv4": int(summary["ipv4"].sum()) if not summary.empty else 0,
        "ipv6": int(summary["ipv6"].sum()) if not summary.empty else 0,
        "total": int(summary["total"].sum()) if not summary.empty else 0,
        "ipv4_addresses": int(summary["ipv4_addresses"].sum()) if not summary.empty else 0,
    }
