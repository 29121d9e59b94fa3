"""Dash selection widgets.

Every widget renders a Dash component tree (:meth:`Widget.component`),
declares the component properties that hold its state
(:meth:`Widget.states`), and converts the raw values of those properties
into a selection with the pure :meth:`Widget.selected`.  Callbacks read the
state explicitly; nothing is bound two ways.
"""

from __future__ import annotations

from typing import Any, Hashable, Mapping, Sequence

import numpy as np
from dash import ALL, State, dcc, html

from ..core.errors import InvalidArgument, InvalidDimension
from ..core.signs import UNKNOWN

_CELL = {"padding": "0 6px", "textAlign": "center"}
_ROW_LABEL = {"padding": "0 8px 0 0", "textAlign": "left", "whiteSpace": "nowrap"}
_FRAME = {"border": "1px solid #ccc", "borderRadius": "4px", "padding": "4px 8px"}

ON = "on"


def _frame(label: str, body: Any) -> html.Fieldset:
    return html.Fieldset([html.Legend(label), body], style=_FRAME)


def _checked(value: Any) -> bool:
    return ON in (value or [])


class Widget:
    """Common interface of the selection widgets."""

    def __init__(self, key: str, label: str) -> None:
        self.key = key
        self.label = label

    def component(self) -> Any:
        raise NotImplementedError

    def states(self) -> list[State]:
        raise NotImplementedError

    def initial_values(self) -> list[Any]:
        """Raw state values as first rendered, one per :meth:`states` entry."""
        raise NotImplementedError

    def selected(self, *values: Any) -> Any:
        raise NotImplementedError


class RadioGrid(Widget):
    """Grid of radio buttons choosing one of several common options per item.

    Parameters
    ----------
    choices:
        Mapping of column label to selected value, or a sequence whose
        ``str()`` forms the column labels.
    initial:
        0-based choice index, either one for all rows or one per row.
    """

    def __init__(
        self,
        key: str,
        label: str,
        rows: Sequence[str],
        choices: Mapping[str, Any] | Sequence[Any],
        initial: int | Sequence[int] = 0,
        label_rows: bool = True,
    ) -> None:
        super().__init__(key, label)
        self.rows = [str(r) for r in rows]
        if isinstance(choices, Mapping):
            self.choices = {str(k): v for k, v in choices.items()}
        else:
            self.choices = {str(c): c for c in choices}
        names = list(self.choices)
        if isinstance(initial, int):
            initial = [initial] * len(self.rows)
        # Recycle shorter initial sequences across the rows
        self.initial = [names[initial[i % len(initial)]] for i in range(len(self.rows))]
        self.label_rows = label_rows

    def _id(self, row: int) -> dict[str, Any]:
        return {"type": f"{self.key}-radio", "index": row}

    def component(self) -> html.Fieldset:
        names = list(self.choices)
        header = html.Tr([html.Th("")] + [html.Th(n, style=_CELL) for n in names])
        body = [
            html.Tr([
                html.Td(row if self.label_rows else "", style=_ROW_LABEL),
                html.Td(
                    dcc.RadioItems(
                        id=self._id(i),
                        options=[{"label": "", "value": n} for n in names],
                        value=self.initial[i],
                        inline=True,
                        inputStyle={"margin": "0 10px"},
                    ),
                    colSpan=len(names),
                ),
            ])
            for i, row in enumerate(self.rows)
        ]
        return _frame(self.label, html.Table([header] + body))

    def states(self) -> list[State]:
        return [State({"type": f"{self.key}-radio", "index": ALL}, "value")]

    def initial_values(self) -> list[Any]:
        return [list(self.initial)]

    def selected(self, values: Sequence[str]) -> dict[str, Any]:
        """Row label to chosen value, in row order."""
        return {row: self.choices[name] for row, name in zip(self.rows, values)}


class CheckEdges(Widget):
    """Grid of check buttons selecting edges of the network.

    Rows and columns are nodes; edge ``k`` with 0-based endpoints
    ``(source, target)`` sits at row ``target``, column ``source``.  Edges
    sharing a *group* share one check button, drawn at the group's first
    edge; the other cells of the group show its tag.
    """

    def __init__(
        self,
        key: str,
        label: str,
        rows: Sequence[str],
        edges: Any,
        group: Sequence[Hashable] | None = None,
        label_rows: bool = True,
    ) -> None:
        super().__init__(key, label)
        self.rows = [str(r) for r in rows]
        self.edges = np.asarray(edges, dtype=int).reshape(-1, 2)
        m = self.edges.shape[0]
        if group is None:
            group = list(range(m))
        if len(group) != m:
            raise InvalidDimension(f"{len(group)} groups given for {m} edges")
        cells: set[tuple[int, int]] = set()
        for source, target in self.edges:
            cell = (int(target), int(source))
            if cell in cells:
                raise InvalidArgument(f"edge {int(source)} -> {int(target)} is listed twice")
            cells.add(cell)
        unique: dict[Hashable, int] = {}
        self.group_of = [unique.setdefault(g, len(unique)) for g in group]
        self.n_groups = len(unique)
        self.label_rows = label_rows

    def _id(self, g: int) -> dict[str, Any]:
        return {"type": f"{self.key}-edge", "index": g}

    def _cell(self, k: int, drawn: set[int]) -> Any:
        g = self.group_of[k]
        if g in drawn:
            return html.Span(f"g{g + 1}", style={"color": "#888", "fontSize": "0.8em"})
        drawn.add(g)
        return dcc.Checklist(id=self._id(g), options=[{"label": "", "value": ON}], value=[])

    def component(self) -> html.Fieldset:
        n = len(self.rows)
        drawn: set[int] = set()
        cells: dict[tuple[int, int], Any] = {}
        # Edge order puts each group's check button on its first edge
        for k, (source, target) in enumerate(self.edges):
            cells[(int(target), int(source))] = self._cell(k, drawn)

        header = html.Tr(
            [html.Th(""), html.Th("")]
            + [html.Th(str(j + 1), style=_CELL) for j in range(n)]
        )
        body = [
            html.Tr(
                [
                    html.Td(self.rows[i] if self.label_rows else "", style=_ROW_LABEL),
                    html.Td(str(i + 1), style=_CELL),
                ]
                + [html.Td(cells.get((i, j), ""), style=_CELL) for j in range(n)]
            )
            for i in range(n)
        ]
        return _frame(self.label, html.Table([header] + body))

    def states(self) -> list[State]:
        # Wildcard values arrive in layout order, so read the ids alongside
        pattern = {"type": f"{self.key}-edge", "index": ALL}
        return [State(pattern, "value"), State(pattern, "id")]

    def initial_values(self) -> list[Any]:
        groups = range(self.n_groups)
        return [[[] for _ in groups], [self._id(g) for g in groups]]

    def selected(self, values: Sequence[Any], ids: Sequence[Mapping[str, Any]]) -> np.ndarray:
        """One boolean per edge; grouped edges share their group's state.

        *values* and *ids* are the check buttons' values and ids in layout
        order.
        """
        on = [False] * self.n_groups
        for value, id_ in zip(values, ids):
            on[id_["index"]] = _checked(value)
        return np.array([on[g] for g in self.group_of], dtype=bool)


class CheckBox(Widget):
    """A single check button."""

    def __init__(self, key: str, label: str, initial: bool = False) -> None:
        super().__init__(key, label)
        self.initial = bool(initial)

    def component(self) -> dcc.Checklist:
        return dcc.Checklist(
            id=f"{self.key}-checkbox",
            options=[{"label": f" {self.label}", "value": ON}],
            value=[ON] if self.initial else [],
        )

    def states(self) -> list[State]:
        return [State(f"{self.key}-checkbox", "value")]

    def initial_values(self) -> list[Any]:
        return [[ON] if self.initial else []]

    def selected(self, value: Any) -> bool:
        return _checked(value)


class CheckColumn(Widget):
    """A column of check buttons, one per row."""

    def __init__(
        self, key: str, label: str, rows: Sequence[str], label_rows: bool = True
    ) -> None:
        super().__init__(key, label)
        self.rows = [str(r) for r in rows]
        self.label_rows = label_rows

    def component(self) -> html.Fieldset:
        boxes = [
            dcc.Checklist(
                id={"type": f"{self.key}-check", "index": i},
                options=[{"label": f" {row}" if self.label_rows else "", "value": ON}],
                value=[],
            )
            for i, row in enumerate(self.rows)
        ]
        return _frame(self.label, html.Div(boxes))

    def states(self) -> list[State]:
        return [State({"type": f"{self.key}-check", "index": ALL}, "value")]

    def initial_values(self) -> list[Any]:
        return [[[] for _ in self.rows]]

    def selected(self, values: Sequence[Any]) -> np.ndarray:
        return np.array([_checked(v) for v in values], dtype=bool)


class Slider(Widget):
    """A single horizontal slider."""

    def __init__(
        self,
        key: str,
        label: str = "",
        initial: float = 1,
        from_: float = 0,
        to: float = 100,
        step: float | None = None,
    ) -> None:
        super().__init__(key, label)
        self.initial = initial
        self.from_ = from_
        self.to = to
        self.step = step

    def component(self) -> html.Div:
        # A null step would restrict the slider to its marks
        extra = {"step": self.step} if self.step is not None else {}
        return html.Div(
            [
                html.Label(self.label),
                dcc.Slider(
                    id=f"{self.key}-slider",
                    min=self.from_,
                    max=self.to,
                    value=self.initial,
                    marks={self.from_: str(self.from_), self.to: str(self.to)},
                    tooltip={"placement": "bottom"},
                    **extra,
                ),
            ],
            style={"minWidth": "240px"},
        )

    def states(self) -> list[State]:
        return [State(f"{self.key}-slider", "value")]

    def initial_values(self) -> list[Any]:
        return [self.initial]

    def selected(self, value: Any) -> float:
        return float(value)


PERTURB_CHOICES: dict[str, Any] = {"-": -1, "0": 0, "+": 1}
MONITOR_CHOICES: dict[str, Any] = {"-": -1, "0": 0, "+": 1, "?": UNKNOWN}
