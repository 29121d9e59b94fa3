"""Outcome tally: count predicted response signs across an ensemble.

Each candidate matrix ``A`` maps a press perturbation ``p`` to a predicted
response ``A @ p``.  The response is classified by sign, compared against the
(partially) monitored outcome, and every consistent candidate contributes one
count per node to the column of its predicted sign.  Columns are ordered
``(-1, 0, +1)``.
"""

from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Sequence

import numpy as np
import pandas as pd
from loguru import logger

from .errors import InvalidArgument, InvalidDimension
from .signs import (
    SIGNS,
    monitoring_mask,
    normalize_monitoring,
    normalize_perturbation,
    signum,
)

DEFAULT_EPSILON = 1.0e-5

SIGN_COLUMNS: tuple[str, str, str] = ("-", "0", "+")


@dataclass
class TallyTable:
    """Per-node outcome counts with the labels they belong to."""

    counts: np.ndarray  # shape (n, 3), columns (-1, 0, +1)
    labels: list[str]
    consistent: int = 0
    total: int = 0
    columns: tuple[int, int, int] = field(default=SIGNS)

    @property
    def is_empty(self) -> bool:
        """No matrix in the ensemble agreed with the monitoring."""
        return self.consistent == 0

    def fractions(self) -> np.ndarray:
        """Counts divided by the number of consistent matrices."""
        if self.is_empty:
            return np.zeros(self.counts.shape, dtype=float)
        return self.counts / float(self.consistent)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.counts, index=list(self.labels), columns=list(SIGN_COLUMNS))


def _check_epsilon(epsilon: float) -> float:
    try:
        eps = float(epsilon)
    except (TypeError, ValueError):
        raise InvalidArgument(f"epsilon {epsilon!r} is not a number") from None
    if math.isnan(eps) or eps < 0:
        raise InvalidArgument(f"epsilon must be non-negative, got {epsilon!r}")
    return eps


def _check_matrices(matrices: Sequence[Any], n: int) -> list[np.ndarray]:
    checked: list[np.ndarray] = []
    for k, A in enumerate(matrices):
        arr = np.asarray(A, dtype=float)
        if arr.shape != (n, n):
            raise InvalidDimension(
                f"matrix {k} has shape {arr.shape}, expected ({n}, {n})"
            )
        checked.append(arr)
    return checked


def _accumulate(
    matrices: Sequence[np.ndarray],
    perturbation: np.ndarray,
    known: np.ndarray,
    observed: np.ndarray,
    epsilon: float,
) -> tuple[np.ndarray, int]:
    """Serial tally over *matrices*. Returns ``(counts, n_consistent)``."""
    n = perturbation.shape[0]
    counts = np.zeros((n, 3), dtype=np.int64)
    rows = np.arange(n)
    matched = 0
    for A in matrices:
        predicted = signum(A @ perturbation, epsilon)
        if np.all(predicted[known] == observed[known]):
            counts[rows, predicted + 1] += 1
            matched += 1
    return counts, matched


def _chunks(items: list[Any], parts: int) -> list[list[Any]]:
    size = max(1, math.ceil(len(items) / parts))
    return [items[i : i + size] for i in range(0, len(items), size)]


def _tally(
    matrices: Sequence[Any],
    perturbation: Sequence[Any],
    monitoring: Sequence[Any],
    epsilon: float,
    workers: int | None,
) -> tuple[np.ndarray, int, int]:
    eps = _check_epsilon(epsilon)
    p = normalize_perturbation(perturbation)
    n = p.shape[0]
    mon = normalize_monitoring(monitoring)
    if len(mon) != n:
        raise InvalidDimension(
            f"monitoring has length {len(mon)}, perturbation has length {n}"
        )
    checked = _check_matrices(matrices, n)
    known, observed = monitoring_mask(mon)

    if workers is not None and workers > 1 and len(checked) > 1:
        parts = _chunks(checked, workers)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            partials = list(
                pool.map(lambda part: _accumulate(part, p, known, observed, eps), parts)
            )
        counts = np.zeros((n, 3), dtype=np.int64)
        matched = 0
        for part_counts, part_matched in partials:
            counts += part_counts
            matched += part_matched
    else:
        counts, matched = _accumulate(checked, p, known, observed, eps)

    logger.debug(
        f"Tallied {len(checked)} matrices over {n} nodes: {matched} consistent"
    )
    return counts, matched, len(checked)


def compute_tally(
    matrices: Sequence[Any],
    perturbation: Sequence[Any],
    monitoring: Sequence[Any],
    epsilon: float = DEFAULT_EPSILON,
    *,
    workers: int | None = None,
) -> np.ndarray:
    """Count predicted outcome signs of consistent matrices.

    Parameters
    ----------
    matrices:
        Ensemble of ``(n, n)`` matrices (a list or an ``(m, n, n)`` array).
    perturbation:
        Length-``n`` vector in ``{-1, 0, +1}``.
    monitoring:
        Length-``n`` vector in ``{-1, 0, +1}`` or UNKNOWN (``None``, NaN or
        ``"?"``); unknown entries match any prediction.
    epsilon:
        Responses with ``|x| <= epsilon`` are classified as zero.
    workers:
        When greater than one, the ensemble is split across that many
        threads and the partial tables are summed.

    Returns an ``(n, 3)`` integer array with columns ``(-1, 0, +1)``.
    An empty ensemble yields a zero table.
    """
    counts, _matched, _total = _tally(matrices, perturbation, monitoring, epsilon, workers)
    return counts


def tally_outcomes(
    matrices: Sequence[Any],
    perturbation: Sequence[Any],
    monitoring: Sequence[Any],
    labels: Sequence[str] | None = None,
    epsilon: float = DEFAULT_EPSILON,
    *,
    workers: int | None = None,
) -> TallyTable:
    """Like :func:`compute_tally` but returns a labelled :class:`TallyTable`."""
    counts, matched, total = _tally(matrices, perturbation, monitoring, epsilon, workers)
    n = counts.shape[0]
    if labels is None:
        names = [str(i + 1) for i in range(n)]
    else:
        names = [str(lbl) for lbl in labels]
        if len(names) != n:
            raise InvalidDimension(f"{len(names)} labels given for {n} nodes")
    return TallyTable(counts=counts, labels=names, consistent=matched, total=total)
