"""Node Selector: composite dialog choosing nodes to perturb and monitor.

Run the demo with:
    python -m press_impact.examples.impact_demo

Opens at http://127.0.0.1:8050
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

import dash
from dash import Input, Output, dcc, html, no_update
from loguru import logger

from ..core.errors import InvalidArgument, TallyError
from ..simulation.network import Network
from .widgets import (
    MONITOR_CHOICES,
    PERTURB_CHOICES,
    CheckBox,
    CheckEdges,
    RadioGrid,
    Slider,
    Widget,
)

Action = Callable[..., Any]

_ROW = {"display": "flex", "gap": "4px", "alignItems": "flex-start"}


@dataclass
class SliderSpec:
    """Label, initial value and range of the selector's slider."""

    label: str = ""
    initial: float = 1
    from_: float = 0
    to: float = 100
    step: float | None = None


def _slider_spec(spec: SliderSpec | Mapping[str, Any]) -> SliderSpec:
    if isinstance(spec, SliderSpec):
        return spec
    fields = dict(spec)
    if "from" in fields:
        fields["from_"] = fields.pop("from")
    return SliderSpec(**fields)


class NodeSelector:
    """Dialog that collects perturbation, monitoring, edge, checkbox and
    slider selections and hands them to *action* on **Update**.

    The action is called with keyword arguments ``perturb``, ``monitor``,
    ``edges``, ``check`` and ``slider``; absent widgets pass ``None``.  It
    returns a figure to display, or ``None`` to leave the plot unchanged.
    """

    def __init__(
        self,
        action: Action,
        nodes: Sequence[str],
        edges: Any = None,
        slider: SliderSpec | Mapping[str, Any] | None = None,
        checkbox: str | None = None,
        perturb: bool = True,
        monitor: bool = True,
        edge_groups: Sequence[Any] | None = None,
        title: str = "Node Selector",
        key: str = "selector",
    ) -> None:
        self.action = action
        self.nodes = [str(n) for n in nodes]
        self.key = key
        if isinstance(edges, Network):
            if edges.nodes != self.nodes:
                raise InvalidArgument(
                    "edge grid network nodes differ from the selector nodes"
                )
            if edge_groups is None:
                edge_groups = edges.edge_groups()
            edges = edges.edge_index()
        self.title = title
        self.app: dash.Dash | None = None

        # Only the first grid labels its rows
        label = True

        def take_label() -> bool:
            nonlocal label
            first, label = label, False
            return first

        self.perturb = (
            RadioGrid(f"{key}-perturb", "Perturb", self.nodes, PERTURB_CHOICES,
                      initial=1, label_rows=take_label())
            if perturb else None
        )
        self.monitor = (
            RadioGrid(f"{key}-monitor", "Monitor", self.nodes, MONITOR_CHOICES,
                      initial=3, label_rows=take_label())
            if monitor else None
        )
        self.edges = (
            CheckEdges(f"{key}-edges", "Edges", self.nodes, edges, group=edge_groups,
                       label_rows=take_label())
            if edges is not None else None
        )
        self.checkbox = CheckBox(f"{key}-option", checkbox) if checkbox is not None else None
        if slider is not None:
            spec = _slider_spec(slider)
            self.slider: Slider | None = Slider(
                f"{key}-param", spec.label, spec.initial, spec.from_, spec.to, spec.step
            )
        else:
            self.slider = None

    @property
    def widgets(self) -> list[tuple[str, Widget]]:
        """Present widgets keyed by the action argument they feed."""
        named = [
            ("perturb", self.perturb),
            ("monitor", self.monitor),
            ("edges", self.edges),
            ("check", self.checkbox),
            ("slider", self.slider),
        ]
        return [(name, w) for name, w in named if w is not None]

    def states(self) -> list[Any]:
        return [s for _, w in self.widgets for s in w.states()]

    def initial_values(self) -> list[Any]:
        return [v for _, w in self.widgets for v in w.initial_values()]

    def collect(self, *values: Any) -> dict[str, Any]:
        """Convert the raw values of :meth:`states`, in order, to selections."""
        selection: dict[str, Any] = {
            "perturb": None, "monitor": None, "edges": None,
            "check": None, "slider": None,
        }
        pos = 0
        for name, w in self.widgets:
            count = len(w.states())
            raw = values[pos : pos + count]
            pos += count
            result = w.selected(*raw)
            if name in ("perturb", "monitor"):
                result = list(result.values())
            selection[name] = result
        return selection

    # ── Layout ───────────────────────────────────────────────────────

    def body(self) -> html.Div:
        grids = [
            w.component() for w in (self.perturb, self.monitor, self.edges)
            if w is not None
        ]
        controls: list[Any] = [
            html.Button("Update", id=f"{self.key}-update", n_clicks=0),
            html.Button("Close", id=f"{self.key}-close", n_clicks=0),
        ]
        if self.checkbox is not None:
            controls.append(self.checkbox.component())
        if self.slider is not None:
            controls.append(self.slider.component())
        return html.Div([
            html.Div(grids, style=_ROW),
            html.Div(controls, style={**_ROW, "alignItems": "center", "marginTop": "6px"}),
            html.Div(id=f"{self.key}-status", style={"color": "#b00", "margin": "6px 0"}),
            dcc.Graph(id=f"{self.key}-graph"),
        ])

    def layout(self) -> html.Div:
        return html.Div([html.H3(self.title), html.Div(self.body(), id=f"{self.key}-body")])

    # ── Callbacks ────────────────────────────────────────────────────

    def update(self, n_clicks: int | None, *values: Any) -> tuple[Any, str]:
        """Body of the **Update** callback: returns ``(figure, status)``."""
        if not n_clicks:
            return no_update, no_update
        selection = self.collect(*values)
        logger.debug(f"Update requested with {selection}")
        try:
            figure = self.action(**selection)
        except TallyError as exc:
            logger.error(f"Selection rejected: {exc}")
            return no_update, str(exc)
        if figure is None:
            return no_update, "No simulations match the monitored outcome."
        return figure, ""

    def close(self, n_clicks: int | None) -> Any:
        if not n_clicks:
            return no_update
        logger.info("Node selector closed")
        return html.P("Selector closed.")

    def register(self, app: dash.Dash) -> dash.Dash:
        """Add the dialog to *app* and wire its callbacks.

        Several selectors can share an app as long as their keys differ.
        """
        if isinstance(app.layout, html.Div):
            children = app.layout.children
            if not isinstance(children, list):
                children = [] if children is None else [children]
            app.layout.children = children + [self.layout()]
        else:
            app.layout = html.Div([self.layout()])

        app.callback(
            Output(f"{self.key}-graph", "figure"),
            Output(f"{self.key}-status", "children"),
            Input(f"{self.key}-update", "n_clicks"),
            *self.states(),
            prevent_initial_call=True,
        )(self.update)

        app.callback(
            Output(f"{self.key}-body", "children"),
            Input(f"{self.key}-close", "n_clicks"),
            prevent_initial_call=True,
        )(self.close)
        self.app = app
        return app


def interactive_selection(
    action: Action,
    nodes: Sequence[str],
    edges: Any = None,
    slider: SliderSpec | Mapping[str, Any] | None = None,
    checkbox: str | None = None,
    perturb: bool = True,
    monitor: bool = True,
    *,
    edge_groups: Sequence[Any] | None = None,
    app: dash.Dash | None = None,
    key: str = "selector",
) -> NodeSelector:
    """Build a Node Selector and wire it into a Dash app.

    *edges* is either a :class:`Network` over *nodes*, whose edges and edge
    groups fill the edge grid, or an ``(m, 2)`` array of 0-based
    ``(source, target)`` node indices.  A new app titled "Node Selector" is
    created unless *app* is given; the app is available as
    ``selector.app``.  Selectors sharing an app need distinct *key*s.
    """
    selector = NodeSelector(
        action, nodes, edges=edges, slider=slider, checkbox=checkbox,
        perturb=perturb, monitor=monitor, edge_groups=edge_groups, key=key,
    )
    if app is None:
        app = dash.Dash(__name__, title=selector.title)
    selector.register(app)
    return selector
