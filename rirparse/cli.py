from __future__ import annotations

import csv
import logging
import sys
from enum import Enum
from pathlib import Path
from typing import NoReturn, Optional

import requests
import typer

from rirparse.datasources import RIR_URLS, resolve_source
from rirparse.datasources.base import DEFAULT_CHUNK_SIZE, ByteSource
from rirparse.datasources.http_source import DEFAULT_TIMEOUT
from rirparse.exceptions import RirParserError
from rirparse.pipeline import RirParser, iter_records
from rirparse.processing.summary import grand_total, records_to_dataframe, summarize_by_country
from rirparse.utils.logging import get_logger, set_level

app = typer.Typer(help="Parse RIR delegated statistics into per-country CIDR blocks.")

log = get_logger(__name__)


class KindFilter(str, Enum):
    all = "all"
    ipv4 = "ipv4"
    ipv6 = "ipv6"


_SOURCE_HELP = (
    "Feed location: a registry name (" + ", ".join(sorted(RIR_URLS)) + "), "
    "an http(s) URL, or a local file (.gz allowed)."
)


@app.callback()
def main(
        ctx: typer.Context,
        verbose: bool = typer.Option(False, "--verbose", "-v", help="Log skipped lines and other debug output."),
        quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log warnings and errors."),
        chunk_size: int = typer.Option(DEFAULT_CHUNK_SIZE, "--chunk-size", min=1, help="Read size in bytes."),
        timeout: float = typer.Option(DEFAULT_TIMEOUT, "--timeout", help="HTTP timeout in seconds."),
):
    if verbose and quiet:
        raise typer.BadParameter("--verbose and --quiet are mutually exclusive")
    if verbose:
        set_level(logging.DEBUG)
    elif quiet:
        set_level(logging.WARNING)
    ctx.obj = {"chunk_size": chunk_size, "timeout": timeout}


def _open_source(ctx: typer.Context, location: str) -> ByteSource:
    settings = ctx.obj or {}
    return resolve_source(
        location,
        chunk_size=settings.get("chunk_size", DEFAULT_CHUNK_SIZE),
        timeout=settings.get("timeout", DEFAULT_TIMEOUT),
    )


def _fail(message: str) -> NoReturn:
    log.error(message)
    typer.echo(message, err=True)
    raise typer.Exit(code=1)


@app.command()
def records(
        ctx: typer.Context,
        source: str = typer.Argument(..., help=_SOURCE_HELP),
        kind: KindFilter = typer.Option(KindFilter.all, "--kind", "-k", help="all | ipv4 | ipv6"),
        country: Optional[str] = typer.Option(None, "--country", "-c", help="Only this country code."),
        output: Optional[Path] = typer.Option(None, "--output", "-o", help="CSV file (default: stdout)."),
):
    """
    Stream normalized address ranges as CSV (cidr,kind,country).

    Example:

        rirparse records afrinic --kind ipv4 -o afrinic-v4.csv
        rirparse records delegated-apnic-latest.gz --country JP
    """
    byte_source = _open_source(ctx, source)
    wanted_country = country.upper() if country else None

    out = open(output, "w", newline="") if output is not None else sys.stdout
    count = 0
    try:
        writer = csv.writer(out)
        writer.writerow(["cidr", "kind", "country"])
        for record in iter_records(byte_source):
            if kind is not KindFilter.all and record.kind != kind.value:
                continue
            if wanted_country and record.country != wanted_country:
                continue
            writer.writerow([record.cidr, record.kind, record.country])
            count += 1
    except (RirParserError, OSError, requests.RequestException) as e:
        _fail(f"Failed to parse {byte_source.name}: {e}")
    finally:
        if output is not None:
            out.close()

    log.info("Wrote %d records%s", count, f" to {output}" if output else "")


@app.command()
def summary(
        ctx: typer.Context,
        source: str = typer.Argument(..., help=_SOURCE_HELP),
        top: Optional[int] = typer.Option(None, "--top", "-n", min=1, help="Only the N countries with most blocks."),
        html: Optional[Path] = typer.Option(None, "--html", help="Also write a plotly bar chart to this HTML file."),
):
    """
    Print the number of IPv4 and IPv6 blocks delegated to each country.
    """
    byte_source = _open_source(ctx, source)
    parser = RirParser()
    try:
        df = records_to_dataframe(iter_records(byte_source, parser=parser))
    except (RirParserError, OSError, requests.RequestException) as e:
        _fail(f"Failed to parse {byte_source.name}: {e}")

    if df.empty:
        log.warning("No records parsed from %s", byte_source.name)

    table = summarize_by_country(df, top=top)
    header = parser.header
    if header is not None:
        typer.echo(f"{header.registry} snapshot {header.end_date or 'unknown'} (serial {header.serial})\n")

    typer.echo(_format_row("COUNTRY", "IPv4", "IPv6", "TOTAL", "IPv4 ADDRESSES"))
    for row in table.itertuples(index=False):
        typer.echo(_format_row(row.country, row.ipv4, row.ipv6, row.total, row.ipv4_addresses))
    totals = grand_total(table)
    typer.echo("")
    typer.echo(_format_row(totals["country"], totals["ipv4"], totals["ipv6"], totals["total"],
                           totals["ipv4_addresses"]))

    if html is not None:
        from rirparse.viz.charts import build_country_bar_chart
        from rirparse.viz.export import save_html

        fig = build_country_bar_chart(table)
        if header is not None:
            fig.update_layout(title=f"Delegated address ranges by country ({header.registry}, {header.end_date})")
        written = save_html(fig, html)
        typer.echo(f"\nWrote chart to {written}")


def _format_row(country, ipv4, ipv6, total, addresses) -> str:
    return f"{str(country):<8} {str(ipv4):>9} {str(ipv6):>9} {str(total):>9} {str(addresses):>16}"


if __name__ == "__main__":
    app()
