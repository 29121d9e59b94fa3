"""Tests for the signed network model."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from press_impact.core.errors import InvalidArgument
from press_impact.simulation.network import Edge, Network, node_labels, parse_sign


EDGES = [
    ("Prey", "Predator", "P"),
    ("Predator", "Prey", "N"),
    ("Resource", "Prey", "P"),
]


class TestNetwork:
    def test_node_labels_first_appearance(self):
        assert node_labels(EDGES) == ["Prey", "Predator", "Resource"]

    def test_edges_coerced(self):
        net = Network(EDGES)
        assert net.edges[1] == Edge("Predator", "Prey", -1, None)
        assert len(net) == 3
        assert net.index("Resource") == 2

    def test_default_sign_is_positive(self):
        net = Network([("a", "b")])
        assert net.edges[0].sign == 1

    def test_edge_index(self):
        net = Network(EDGES)
        np.testing.assert_array_equal(net.edge_index(), [[0, 1], [1, 0], [2, 0]])

    def test_edge_index_empty(self):
        assert Network([]).edge_index().shape == (0, 2)

    def test_sign_matrix(self):
        S = Network(EDGES).sign_matrix()
        # S[target, source]
        assert S[1, 0] == 1
        assert S[0, 1] == -1
        assert S[0, 2] == 1
        assert S[2, 2] == 0

    def test_self_limitation(self):
        net = Network(EDGES + [("Prey", "Prey", "N")]).with_self_limitation()
        S = net.sign_matrix()
        np.testing.assert_array_equal(np.diag(S), [-1, -1, -1])
        self_edges = [e for e in net.edges if e.source == e.target]
        assert len(self_edges) == 3

    def test_edge_groups(self):
        net = Network([("a", "b", "P", "g"), ("b", "a", "N", "g"), ("a", "a", "N")])
        groups = net.edge_groups()
        assert groups[0] == groups[1] == "g"
        assert groups[2] == ("edge", 2)

    def test_frame_round_trip(self):
        net = Network(EDGES)
        frame = net.to_frame()
        assert list(frame.columns) == ["From", "To", "Type", "Group"]
        again = Network.from_frame(frame)
        assert again.edges == net.edges

    def test_from_frame_defaults(self):
        frame = pd.DataFrame({"From": ["x"], "To": ["y"]})
        net = Network.from_frame(frame)
        assert net.edges == [Edge("x", "y", 1, None)]

    def test_from_frame_missing_columns(self):
        with pytest.raises(InvalidArgument):
            Network.from_frame(pd.DataFrame({"From": ["x"]}))


class TestParseSign:
    @pytest.mark.parametrize("code,sign", [
        ("P", 1), ("+", 1), (1, 1), (1.0, 1),
        ("N", -1), ("-", -1), (-1, -1), (" N ", -1),
    ])
    def test_codes(self, code, sign):
        assert parse_sign(code) == sign

    def test_unknown_code(self):
        with pytest.raises(InvalidArgument):
            parse_sign("U")

    def test_bad_edge_arity(self):
        with pytest.raises(InvalidArgument):
            Network([("a",)])
