"""Impact barplot: per-node frequency of negative, zero and positive outcomes.

The user picks a press perturbation and any outcome already known from
monitoring in the Node Selector; each **Update** tallies the simulated
responses that agree with the monitoring and draws one horizontal stacked
bar per node (blue negative, off-white zero, orange positive).
"""

from __future__ import annotations

from typing import Any, Sequence

import dash
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import plotly.graph_objects as go
from loguru import logger

from ..config import settings
from ..core.errors import InvalidArgument, InvalidDimension
from ..core.tally import SIGN_COLUMNS, tally_outcomes
from ..simulation.network import Network
from .selector import NodeSelector, interactive_selection

IMPACT_PALETTE: tuple[str, str, str] = ("#92C5DE", "#F7F7F7", "#F4A582")

_OUTCOME_NAMES = ("Negative", "Zero", "Positive")


def _check_table(counts: Any, labels: Sequence[str], colors: Sequence[str]) -> np.ndarray:
    table = np.asarray(counts)
    if table.shape != (len(labels), 3):
        raise InvalidDimension(
            f"table has shape {table.shape}, expected ({len(labels)}, 3)"
        )
    if len(colors) != 3:
        raise InvalidArgument(f"expected 3 colors, got {len(colors)}")
    return table


def impact_figure(
    counts: Any,
    labels: Sequence[str],
    colors: Sequence[str] = IMPACT_PALETTE,
    title: str | None = None,
) -> go.Figure:
    """Plotly horizontal stacked bars, one per node, columns ``(-1, 0, +1)``."""
    table = _check_table(counts, labels, colors)
    labels = [str(lbl) for lbl in labels]

    fig = go.Figure()
    for k, (name, sign) in enumerate(zip(_OUTCOME_NAMES, SIGN_COLUMNS)):
        fig.add_trace(
            go.Bar(
                x=table[:, k],
                y=labels,
                orientation="h",
                name=name,
                marker=dict(color=colors[k], line=dict(width=0)),
                hovertemplate=f"%{{y}}<br>{sign}: %{{x}}<extra></extra>",
            )
        )

    fig.update_layout(
        barmode="stack",
        title=dict(text=title or "", font=dict(size=16)),
        xaxis=dict(title="Simulations"),
        yaxis=dict(categoryorder="array", categoryarray=labels, automargin=True),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
        margin=dict(l=20, r=20, t=50, b=20),
        height=max(300, 28 * len(labels) + 120),
    )
    return fig


def render_impact_barplot(
    counts: Any,
    labels: Sequence[str],
    colors: Sequence[str] = IMPACT_PALETTE,
    *,
    title: str | None = None,
    ax: Any = None,
) -> Any:
    """Draw the impact barplot with matplotlib and return the axes."""
    table = _check_table(counts, labels, colors)
    own_figure = ax is None
    if own_figure:
        _fig, ax = plt.subplots(1, 1, figsize=(8, 0.35 * len(labels) + 1.5))

    ys = np.arange(len(labels))
    left = np.zeros(len(labels))
    for k, name in enumerate(_OUTCOME_NAMES):
        ax.barh(ys, table[:, k], left=left, color=colors[k], edgecolor="none",
                label=name)
        left = left + table[:, k]

    ax.set_yticks(ys)
    ax.set_yticklabels([str(lbl) for lbl in labels])
    ax.set_xlabel("Simulations")
    if title:
        ax.set_title(title)
    for side in ("top", "right"):
        ax.spines[side].set_visible(False)
    if own_figure:
        # Leave room for the longest node label
        ax.figure.tight_layout()
    return ax


def _as_network(edges: Any) -> Network:
    if isinstance(edges, Network):
        return edges
    if isinstance(edges, pd.DataFrame):
        return Network.from_frame(edges)
    return Network(edges)


def impact_barplot(
    edges: Any,
    As: Sequence[Any],
    epsilon: float | None = None,
    *,
    workers: int | None = None,
    palette: Sequence[str] | None = None,
    app: dash.Dash | None = None,
) -> NodeSelector:
    """Interactive impact barplot over the simulated matrices *As*.

    Parameters
    ----------
    edges:
        The network's edge list (:class:`Network`, edge frame or tuples);
        its nodes label the bars.
    As:
        Simulated press-response matrices.
    epsilon:
        Outcomes at or below this magnitude count as zero; defaults to the
        configured ``epsilon``.
    """
    nodes = _as_network(edges).nodes
    eps = settings.epsilon if epsilon is None else epsilon
    colors = tuple(palette or settings.palette)
    n_workers = workers if workers is not None else settings.workers

    def action(perturb, monitor, edges, check, slider):
        table = tally_outcomes(As, perturb, monitor, labels=nodes, epsilon=eps,
                               workers=n_workers)
        if table.is_empty:
            logger.info(f"No simulation of {table.total} matches the monitoring")
            return None
        return impact_figure(
            table.counts, table.labels, colors,
            title=f"{table.consistent} of {table.total} simulations",
        )

    return interactive_selection(action, nodes, perturb=True, monitor=True, app=app)
