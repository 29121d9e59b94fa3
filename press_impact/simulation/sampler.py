"""Community matrix sampler.

Draws random interaction strengths consistent with the signs of a
:class:`Network`, keeps only stable community matrices, and stores their
press-perturbation responses ``-inv(W)``.  The resulting ensemble is the
input of the outcome tally.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from loguru import logger

from ..core.errors import InvalidArgument
from .network import Network


def is_stable(W: np.ndarray) -> bool:
    """True when every eigenvalue of *W* has a negative real part."""
    return bool(np.all(np.linalg.eigvals(W).real < 0))


def press_response(W: np.ndarray) -> np.ndarray:
    """Long-term response matrix of a press perturbation, ``-inv(W)``."""
    return -np.linalg.inv(W)


@dataclass
class Ensemble:
    """Accepted samples: press responses and the community matrices behind them."""

    nodes: list[str]
    responses: list[np.ndarray] = field(default_factory=list)
    matrices: list[np.ndarray] = field(default_factory=list)
    attempts: int = 0

    def __len__(self) -> int:
        return len(self.responses)

    @property
    def acceptance_rate(self) -> float:
        return len(self.responses) / self.attempts if self.attempts else 0.0


class CommunitySampler:
    """Samples stable community matrices for a signed network."""

    def __init__(
        self,
        network: Network,
        rng: np.random.Generator | None = None,
        magnitude: tuple[float, float] = (0.01, 1.0),
    ) -> None:
        low, high = magnitude
        if not 0 <= low <= high:
            raise InvalidArgument(f"invalid magnitude range {magnitude!r}")
        self.network = network
        self.rng = rng or np.random.default_rng()
        self.magnitude = (float(low), float(high))
        self._signs = network.sign_matrix()
        self._mask = self._signs != 0

    def community_matrix(self) -> np.ndarray:
        """One community matrix with uniformly drawn edge strengths."""
        low, high = self.magnitude
        strengths = self.rng.uniform(low, high, size=self._signs.shape)
        return np.where(self._mask, self._signs * strengths, 0.0)

    def sample(self, n: int, max_attempts: int | None = None) -> Ensemble:
        """Draw community matrices until *n* stable ones are accepted.

        Parameters
        ----------
        max_attempts:
            Upper bound on draws; defaults to ``1000 * n``.
        """
        if n < 0:
            raise InvalidArgument(f"sample size must be non-negative, got {n}")
        budget = max_attempts if max_attempts is not None else 1000 * max(n, 1)
        ensemble = Ensemble(nodes=list(self.network.nodes))
        while len(ensemble) < n:
            if ensemble.attempts >= budget:
                raise InvalidArgument(
                    f"only {len(ensemble)} of {n} stable matrices "
                    f"found in {budget} attempts"
                )
            ensemble.attempts += 1
            W = self.community_matrix()
            if not is_stable(W):
                continue
            ensemble.matrices.append(W)
            ensemble.responses.append(press_response(W))

        logger.info(
            f"Sampled {len(ensemble)} stable matrices in {ensemble.attempts} "
            f"attempts ({ensemble.acceptance_rate:.1%} accepted)"
        )
        return ensemble
