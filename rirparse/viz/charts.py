# rirparse/viz/charts.py

from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go
from plotly.graph_objs import Figure


def build_country_bar_chart(summary: pd.DataFrame, title: str = "Delegated address ranges by country") -> Figure:
    """
    Stacked bar chart of ipv4 / ipv6 block counts per country.

    ``summary`` is the output of summarize_by_country().
    """
    fig = go.Figure()
    fig.add_trace(go.Bar(
        name="IPv4 blocks",
        x=summary["country"],
        y=summary["ipv4"],
        customdata=summary["ipv4_addresses"],
        hovertemplate="%{x}<br>IPv4 blocks: %{y}<br>IPv4 addresses: %{customdata:,}<extra></extra>",
    ))
    fig.add_trace(go.Bar(
        name="IPv6 blocks",
        x=summary["country"],
        y=summary["ipv6"],
        hovertemplate="%{x}<br>IPv6 blocks: %{y}<extra></extra>",
    ))
    fig.update_layout(
        barmode="stack",
        title=title,
        xaxis_title="Country",
        yaxis_title="Blocks",
        legend_title_text="",
        template="plotly_white",
    )
    return fig
