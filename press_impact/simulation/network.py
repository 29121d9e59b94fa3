"""Signed network model.

A network is described by its edge list.  Each edge carries the sign of the
direct effect of its source node on its target node.  Nodes are the distinct
endpoints of the edges, in order of first appearance.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable, Iterable, Sequence

import numpy as np
import pandas as pd

from ..core.errors import InvalidArgument

_SIGN_CODES: dict[Any, int] = {
    "P": 1, "+": 1, "positive": 1, 1: 1,
    "N": -1, "-": -1, "negative": -1, -1: -1,
}


def parse_sign(value: Any) -> int:
    """Map an edge type code (``"P"``/``"N"``, ``"+"``/``"-"``, ±1) to ±1."""
    key = value.strip() if isinstance(value, str) else value
    if isinstance(key, float) and key.is_integer():
        key = int(key)
    try:
        return _SIGN_CODES[key]
    except (KeyError, TypeError):
        raise InvalidArgument(f"unknown edge type {value!r}") from None


@dataclass(frozen=True)
class Edge:
    """Directed signed edge ``source -> target``."""

    source: str
    target: str
    sign: int = 1
    group: Hashable | None = None


def _coerce_edge(item: Any) -> Edge:
    if isinstance(item, Edge):
        return item
    if len(item) < 2 or len(item) > 4:
        raise InvalidArgument(f"edge {item!r} must have 2 to 4 fields")
    source, target = str(item[0]), str(item[1])
    sign = parse_sign(item[2]) if len(item) > 2 else 1
    group = item[3] if len(item) > 3 else None
    return Edge(source, target, sign, group)


def node_labels(edges: Iterable[Any]) -> list[str]:
    """Distinct endpoints of *edges*, in order of first appearance."""
    seen: dict[str, None] = {}
    for e in (_coerce_edge(item) for item in edges):
        seen.setdefault(e.source, None)
        seen.setdefault(e.target, None)
    return list(seen)


class Network:
    """A directed signed network built from an edge list."""

    def __init__(self, edges: Iterable[Any]) -> None:
        self.edges: list[Edge] = [_coerce_edge(item) for item in edges]
        self.nodes: list[str] = node_labels(self.edges)
        self._index = {label: i for i, label in enumerate(self.nodes)}

    def __len__(self) -> int:
        return len(self.nodes)

    def index(self, label: str) -> int:
        return self._index[label]

    def edge_index(self) -> np.ndarray:
        """``(m, 2)`` array of 0-based ``(source, target)`` node indices."""
        pairs = [(self._index[e.source], self._index[e.target]) for e in self.edges]
        return np.array(pairs, dtype=int).reshape(len(pairs), 2)

    def edge_groups(self) -> list[Hashable]:
        """Group key per edge; ungrouped edges are keyed by their position."""
        return [e.group if e.group is not None else ("edge", k)
                for k, e in enumerate(self.edges)]

    def sign_matrix(self) -> np.ndarray:
        """Matrix ``S`` with ``S[target, source]`` equal to the edge sign."""
        n = len(self.nodes)
        S = np.zeros((n, n), dtype=int)
        for e in self.edges:
            S[self._index[e.target], self._index[e.source]] = e.sign
        return S

    def with_self_limitation(self) -> Network:
        """Copy with a negative self edge on every node lacking one."""
        limited = {e.source for e in self.edges if e.source == e.target}
        extra = [Edge(n, n, -1) for n in self.nodes if n not in limited]
        return Network(self.edges + extra)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "From": [e.source for e in self.edges],
                "To": [e.target for e in self.edges],
                "Type": ["P" if e.sign > 0 else "N" for e in self.edges],
                "Group": [e.group for e in self.edges],
            }
        )

    # ── Factory helpers ──────────────────────────────────────────────

    @classmethod
    def from_frame(cls, frame: pd.DataFrame) -> Network:
        """Build from a frame with ``From``, ``To`` and optional ``Type``, ``Group``."""
        missing = {"From", "To"} - set(frame.columns)
        if missing:
            raise InvalidArgument(f"edge frame lacks columns {sorted(missing)}")
        types: Sequence[Any] = frame["Type"] if "Type" in frame.columns else ["P"] * len(frame)
        groups: Sequence[Any] = frame["Group"] if "Group" in frame.columns else [None] * len(frame)
        edges = []
        for source, target, typ, group in zip(frame["From"], frame["To"], types, groups):
            if group is not None and pd.isna(group):
                group = None
            edges.append(Edge(str(source), str(target), parse_sign(typ), group))
        return cls(edges)
