"""Impact barplot demo.

Samples stable community matrices for a small pelagic food web, saves a
static barplot of the response to a press increase of nutrients, and serves
the interactive Node Selector.
"""

from __future__ import annotations

import matplotlib.pyplot as plt
import numpy as np

from ..config import settings
from ..core.tally import tally_outcomes
from ..helpers.logging_helpers import configure_logger
from ..simulation.network import Network
from ..simulation.sampler import CommunitySampler
from ..visualization.barplot import impact_barplot, render_impact_barplot

# (source, target, type): "P" the source benefits the target, "N" it harms it
FOOD_WEB = [
    ("Nutrients", "Phytoplankton", "P"),
    ("Phytoplankton", "Nutrients", "N"),
    ("Phytoplankton", "Zooplankton", "P"),
    ("Zooplankton", "Phytoplankton", "N"),
    ("Zooplankton", "Fish", "P"),
    ("Fish", "Zooplankton", "N"),
    ("Fish", "Seabirds", "P"),
    ("Seabirds", "Fish", "N"),
]


def build_ensemble(n: int | None = None, seed: int = 42):
    network = Network(FOOD_WEB).with_self_limitation()
    sampler = CommunitySampler(network, rng=np.random.default_rng(seed))
    return network, sampler.sample(n or settings.samples)


def build_app():
    network, ensemble = build_ensemble()
    selector = impact_barplot(network, ensemble.responses)
    return selector.app


def main() -> None:
    configure_logger("impact_demo")
    network, ensemble = build_ensemble()

    perturb = [1 if node == "Nutrients" else 0 for node in network.nodes]
    monitor = [None] * len(network.nodes)
    table = tally_outcomes(ensemble.responses, perturb, monitor,
                           labels=network.nodes, epsilon=settings.epsilon)
    render_impact_barplot(table.counts, table.labels,
                          title="Press increase of nutrients")
    plt.savefig("impact_demo.png", dpi=150)

    selector = impact_barplot(network, ensemble.responses)
    selector.app.run(host=settings.host, port=settings.port, debug=settings.debug)


if __name__ == "__main__":
    main()
