"""Sign classification and the UNKNOWN monitoring marker.

Predicted outcomes live in ``{-1, 0, +1}``.  Monitoring values add a fourth
state, :data:`UNKNOWN`, which is an explicit ``None`` rather than a numeric
sentinel so that it can never take part in arithmetic.
"""

from __future__ import annotations

import math
from typing import Any, Sequence

import numpy as np

from .errors import InvalidArgument

SIGNS: tuple[int, int, int] = (-1, 0, 1)

UNKNOWN = None


def is_unknown(value: Any) -> bool:
    """Return True for the UNKNOWN marker and the values normalized to it."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == "?"
    try:
        return math.isnan(value)
    except TypeError:
        return False


def _as_sign(value: Any, what: str) -> int:
    try:
        as_float = float(value)
    except (TypeError, ValueError):
        raise InvalidArgument(f"{what} value {value!r} is not a sign") from None
    if as_float not in SIGNS:
        raise InvalidArgument(f"{what} value {value!r} is not one of -1, 0, +1")
    return int(as_float)


def normalize_perturbation(perturbation: Sequence[Any]) -> np.ndarray:
    """Validate a perturbation vector and return it as an int array."""
    return np.array([_as_sign(v, "perturbation") for v in perturbation], dtype=int)


def normalize_monitoring(monitoring: Sequence[Any]) -> list[int | None]:
    """Validate a monitoring vector.

    Known entries become ints in ``{-1, 0, +1}``; ``None``, NaN and ``"?"``
    become :data:`UNKNOWN`.
    """
    return [UNKNOWN if is_unknown(v) else _as_sign(v, "monitoring") for v in monitoring]


def signum(values: Any, epsilon: float = 1.0e-5) -> np.ndarray:
    """Classify *values* by sign, treating ``|x| <= epsilon`` as zero.

    Non-finite values never exceed the threshold and classify as zero.
    """
    x = np.asarray(values, dtype=float)
    with np.errstate(invalid="ignore"):
        beyond = np.abs(x) > epsilon
    return np.where(beyond, np.sign(np.where(beyond, x, 0.0)), 0).astype(int)


def monitoring_mask(monitoring: Sequence[int | None]) -> tuple[np.ndarray, np.ndarray]:
    """Split normalized monitoring into ``(known_mask, known_values)``.

    ``known_values`` holds zeros at UNKNOWN positions; only entries under
    ``known_mask`` are meaningful.
    """
    mask = np.array([v is not None for v in monitoring], dtype=bool)
    values = np.array([0 if v is None else v for v in monitoring], dtype=int)
    return mask, values


def consistent(predicted: np.ndarray, monitoring: Sequence[int | None]) -> bool:
    """True when *predicted* agrees with every known monitoring entry."""
    mask, values = monitoring_mask(monitoring)
    return bool(np.all(np.asarray(predicted)[mask] == values[mask]))
