"""
Chart Builder — Plotly area chart for the close price series.
Theme values live on a ChartTheme instance handed to the builder.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional, Sequence

import plotly.graph_objects as go

from core.formatters import format_full_date, format_price
from stockscan.models import StockPoint


@dataclass(frozen=True)
class ChartTheme:
    line_color: str = "#3b82f6"
    fill_color: str = "rgba(59, 130, 246, 0.15)"
    grid_color: str = "#f1f5f9"
    axis_color: str = "#64748b"
    font_size: int = 10
    line_width: int = 2
    marker_size: int = 4
    height: int = 384
    y_axis_title: str = "Stock Price ($)"


class ChartBuilder:
    """Builds the dashboard figure from chart points."""

    def __init__(self, theme: Optional[ChartTheme] = None, display_tz: Optional[tzinfo] = None):
        self.theme = theme or ChartTheme()
        self.display_tz = display_tz

    def build(self, points: Sequence[StockPoint], compact: bool = False) -> go.Figure:
        """
        One filled line over the display labels. Hover shows the full
        date and formatted price; compact mode drops the y axis title.
        """
        theme = self.theme
        hover_text = [
            f"{format_full_date(p.full_date, self.display_tz)}<br>Price: {format_price(p.close)}"
            for p in points
        ]

        fig = go.Figure(
            go.Scatter(
                x=[p.date for p in points],
                y=[float(p.close) for p in points],
                mode="lines+markers",
                fill="tozeroy",
                fillcolor=theme.fill_color,
                line=dict(color=theme.line_color, width=theme.line_width, shape="spline"),
                marker=dict(color=theme.line_color, size=theme.marker_size,
                            line=dict(color="white", width=1)),
                text=hover_text,
                hoverinfo="text",
                name="Close",
            )
        )
        fig.update_layout(
            height=theme.height,
            margin=dict(t=5, r=30, l=20 if compact else 60, b=60),
            plot_bgcolor="white",
            paper_bgcolor="white",
            showlegend=False,
            font=dict(size=theme.font_size, color=theme.axis_color),
        )
        fig.update_xaxes(
            type="category",
            tickangle=-45,
            showgrid=True,
            gridcolor=theme.grid_color,
            griddash="dash",
        )
        fig.update_yaxes(
            showgrid=True,
            gridcolor=theme.grid_color,
            griddash="dash",
            title_text=None if compact else theme.y_axis_title,
        )
        return fig

    @staticmethod
    def to_html(fig: go.Figure) -> str:
        """Embeddable <div> that loads plotly.js from the CDN."""
        return fig.to_html(full_html=False, include_plotlyjs="cdn", config={"responsive": True})
