"""
Visualization module for the Vector-Aware Climate Outlier Detection system.

Provides Plotly-based interactive plots for the Streamlit interface.
"""

from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from config import RESULTS_PREVIEW_LIMIT, WIND_ARROW_SCALE_DEG
from detection.statistics import SummaryStatistics
from detection.wind_vector import wind_to_vector
from models.anomaly import AnomalyResult
from models.observation import Observation

TRUE_COLOR = "limegreen"
FALSE_COLOR = "orangered"


def _empty_figure(message: str) -> go.Figure:
    fig = go.Figure()
    fig.add_annotation(text=message, showarrow=False)
    fig.update_layout(template="plotly_dark", height=300)
    return fig


def _group_by_location(
    observations: Sequence[Observation],
) -> Dict[Tuple[float, float], List[Observation]]:
    groups: Dict[Tuple[float, float], List[Observation]] = defaultdict(list)
    for o in observations:
        groups[o.location].append(o)
    return groups


def _add_anomaly_markers(
    fig: go.Figure,
    results: Sequence[AnomalyResult],
    row: Optional[int] = None,
    col: Optional[int] = None,
) -> None:
    """Overlay anomaly locations colored by verdict.

    ``row``/``col`` address a subplot and must stay None for figures not
    built with ``make_subplots``.
    """
    for verdict, color, name in ((True, TRUE_COLOR, "True Anomaly"),
                                 (False, FALSE_COLOR, "Filtered (Noise)")):
        subset = [r for r in results if r.is_true_anomaly is verdict]
        if not subset:
            continue
        fig.add_trace(
            go.Scatter(
                x=[r.lon for r in subset],
                y=[r.lat for r in subset],
                mode="markers",
                marker=dict(size=16, color="rgba(0,0,0,0)", symbol="circle-open",
                            line=dict(width=3, color=color)),
                name=name,
                customdata=[
                    (r.index, r.precipitation, r.confidence, r.deviation_score)
                    for r in subset
                ],
                hovertemplate=(
                    "#%{customdata[0]}<br>"
                    "(%{y:.2f}, %{x:.2f})<br>"
                    "Prec: %{customdata[1]:.2f} mm<br>"
                    "Z: %{customdata[3]:.2f}<br>"
                    "Confidence: %{customdata[2]:.3f}<extra></extra>"
                ),
            ),
            row=row, col=col,
        )


# ── Precipitation map ───────────────────────────────────────────────────────

def create_precipitation_map(
    observations: Sequence[Observation],
    results: Optional[Sequence[AnomalyResult]] = None,
) -> go.Figure:
    """
    Scatter map of mean precipitation per location, with optional
    anomaly markers on top.
    """
    if not observations:
        return _empty_figure("No data to visualize")

    groups = _group_by_location(observations)
    locations = list(groups.keys())
    mean_prec = [float(np.mean([o.precipitation for o in groups[loc]])) for loc in locations]
    max_prec = [float(np.max([o.precipitation for o in groups[loc]])) for loc in locations]
    counts = [len(groups[loc]) for loc in locations]

    fig = make_subplots(rows=1, cols=1)
    fig.add_trace(
        go.Scatter(
            x=[loc[1] for loc in locations],
            y=[loc[0] for loc in locations],
            mode="markers",
            marker=dict(
                size=12,
                color=mean_prec,
                colorscale="Blues",
                colorbar=dict(title="Mean Prec (mm)"),
                line=dict(width=1, color="white"),
            ),
            name="Locations",
            customdata=list(zip(mean_prec, max_prec, counts)),
            hovertemplate=(
                "(%{y:.2f}, %{x:.2f})<br>"
                "Mean: %{customdata[0]:.2f} mm<br>"
                "Max: %{customdata[1]:.2f} mm<br>"
                "Records: %{customdata[2]}<extra></extra>"
            ),
        ),
        row=1, col=1,
    )

    if results:
        _add_anomaly_markers(fig, results)

    fig.update_layout(
        title="Precipitation by Location",
        height=550,
        template="plotly_dark",
        legend=dict(orientation="h", yanchor="bottom", y=-0.2, xanchor="center", x=0.5),
        margin=dict(l=60, r=60, t=50, b=80),
    )
    fig.update_xaxes(title_text="Longitude (deg)")
    fig.update_yaxes(title_text="Latitude (deg)", scaleanchor="x", scaleratio=1)

    return fig


# ── Wind field ──────────────────────────────────────────────────────────────

def create_wind_field_figure(
    observations: Sequence[Observation],
    results: Optional[Sequence[AnomalyResult]] = None,
    arrow_scale: float = WIND_ARROW_SCALE_DEG,
) -> go.Figure:
    """
    Mean wind vector per location drawn as line segments, plus the
    individual wind vectors of anomalies colored by verdict.

    Vectors use the same (u, v) components as the consistency check,
    drawn with u along longitude and v along latitude.
    """
    if not observations:
        return _empty_figure("No data to visualize")

    groups = _group_by_location(observations)
    seg_x: List[Optional[float]] = []
    seg_y: List[Optional[float]] = []
    for (lat, lon), obs in groups.items():
        u, v = wind_to_vector(
            np.array([o.wind_speed for o in obs]),
            np.array([o.wind_direction_deg for o in obs]),
        )
        mu, mv = float(np.mean(u)), float(np.mean(v))
        seg_x += [lon, lon + mu * arrow_scale, None]
        seg_y += [lat, lat + mv * arrow_scale, None]

    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=seg_x, y=seg_y,
            mode="lines",
            line=dict(color="lightskyblue", width=2),
            name="Mean Wind",
            hoverinfo="skip",
        )
    )
    fig.add_trace(
        go.Scatter(
            x=[loc[1] for loc in groups],
            y=[loc[0] for loc in groups],
            mode="markers",
            marker=dict(size=5, color="lightskyblue"),
            name="Locations",
            hovertemplate="(%{y:.2f}, %{x:.2f})<extra></extra>",
        )
    )

    for r in results or []:
        u, v = wind_to_vector(r.observation.wind_speed, r.observation.wind_direction_deg)
        color = TRUE_COLOR if r.is_true_anomaly else FALSE_COLOR
        fig.add_annotation(
            x=r.lon + u * arrow_scale, y=r.lat + v * arrow_scale,
            ax=r.lon, ay=r.lat,
            xref="x", yref="y", axref="x", ayref="y",
            showarrow=True,
            arrowhead=2,
            arrowwidth=2,
            arrowcolor=color,
        )
    if results:
        _add_anomaly_markers(fig, results)

    fig.update_layout(
        title="Wind Field (mean vector per location)",
        height=550,
        template="plotly_dark",
        legend=dict(orientation="h", yanchor="bottom", y=-0.2, xanchor="center", x=0.5),
        margin=dict(l=60, r=60, t=50, b=80),
    )
    fig.update_xaxes(title_text="Longitude (deg)")
    fig.update_yaxes(title_text="Latitude (deg)", scaleanchor="x", scaleratio=1)

    return fig


# ── Distribution ────────────────────────────────────────────────────────────

def create_precipitation_histogram(
    observations: Sequence[Observation],
    stats: SummaryStatistics,
    threshold: float,
) -> go.Figure:
    """Histogram of precipitation with mean and screening-threshold lines."""
    if not observations:
        return _empty_figure("No data to visualize")

    fig = go.Figure()
    fig.add_trace(
        go.Histogram(
            x=[o.precipitation for o in observations],
            nbinsx=50,
            marker_color="steelblue",
            name="Precipitation",
        )
    )
    fig.add_vline(x=stats.mean, line=dict(color="white", dash="dash"),
                  annotation_text="mean")
    cutoff = stats.mean + threshold * stats.std
    if stats.std > 0:
        fig.add_vline(x=cutoff, line=dict(color="gold", dash="dot"),
                      annotation_text=f"+{threshold:g} std")

    fig.update_layout(
        title="Precipitation Distribution",
        xaxis_title="Precipitation (mm)",
        yaxis_title="Count",
        template="plotly_dark",
        height=300,
        showlegend=False,
    )
    return fig


# ── Results ─────────────────────────────────────────────────────────────────

def create_confidence_profile(
    results: Sequence[AnomalyResult],
    limit: int = RESULTS_PREVIEW_LIMIT,
) -> go.Figure:
    """Bar chart of the top-ranked anomalies and their confidence."""
    if not results:
        return _empty_figure("No anomalies detected")

    top = list(results)[:limit]
    labels = [f"#{r.index} ({r.lat:.2f}, {r.lon:.2f})" for r in top]

    fig = go.Figure()
    fig.add_trace(
        go.Bar(
            x=labels,
            y=[r.confidence for r in top],
            marker_color=[TRUE_COLOR if r.is_true_anomaly else FALSE_COLOR for r in top],
            name="Confidence",
            customdata=[
                (r.deviation_score, r.neighbor_count,
                 r.directional_consistency if r.directional_consistency is not None else float("nan"))
                for r in top
            ],
            hovertemplate=(
                "Confidence: %{y:.3f}<br>"
                "Z: %{customdata[0]:.2f}<br>"
                "Neighbors: %{customdata[1]}<br>"
                "Consistency: %{customdata[2]:.3f}<extra></extra>"
            ),
        )
    )

    fig.update_layout(
        title="Top Anomalies by Confidence",
        xaxis_title="Observation",
        yaxis_title="Confidence",
        yaxis_range=[0, 1.05],
        template="plotly_dark",
        height=300,
    )

    return fig
