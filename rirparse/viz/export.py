# rirparse/viz/export.py

from __future__ import annotations
import gzip
from pathlib import Path
from typing import Union

import plotly.io as pio
from plotly.graph_objs import Figure

from rirparse.utils.logging import get_logger

log = get_logger(__name__)


PathLike = Union[str, Path]


def _write_html_with_compression(
    html: str,
    path: Path,
    compress: bool = True
) -> tuple[int, int]:
    """
    Write HTML to file, optionally with a gzipped copy alongside.

    Returns:
        tuple of (original_size_bytes, written_size_bytes)
    """
    html_bytes = html.encode("utf-8")
    original_size = len(html_bytes)
    path.write_bytes(html_bytes)

    if not compress:
        log.info(f"Wrote {path} ({original_size / 1024:.1f} KB)")
        return original_size, original_size

    gz_path = path.with_suffix(path.suffix + ".gz")
    with gzip.open(gz_path, "wb", compresslevel=9) as f:
        f.write(html_bytes)
    compressed_size = gz_path.stat().st_size

    log.info(
        f"Wrote {path} ({original_size / 1024:.1f} KB) and "
        f"{gz_path.name} ({compressed_size / 1024:.1f} KB)"
    )
    return original_size, compressed_size


def save_html(
        fig: Figure,
        path: PathLike,
        include_plotlyjs: str = "cdn",
        compress: bool = False,
) -> Path:
    """
    Save a Plotly figure as an HTML file.

    Parameters
    ----------
    fig : plotly.graph_objs.Figure
        The figure to save.
    path : str | Path
        Output path; a missing .html/.htm suffix is added.
    include_plotlyjs : {"cdn", "directory", "inline"}, default "cdn"
        Passed to plotly.io.to_html.
    compress : bool, default False
        Also write a gzipped copy next to the HTML file.
    """
    out_path = Path(path).expanduser()
    if out_path.suffix.lower() not in (".html", ".htm"):
        out_path = out_path.with_suffix(".html")
    log.info("Saving HTML report to %s", out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    html = pio.to_html(fig, include_plotlyjs=include_plotlyjs, full_html=True)
    _write_html_with_compression(html, out_path, compress=compress)
    return out_path
