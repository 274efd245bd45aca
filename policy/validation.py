"""Input validation for allocation maps and portfolio values.

Negative, NaN and infinite numbers are rejected with an
``AllocationInputError``. A target whose weights do not add up to 1.0 is
accepted, but reported as a warning.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

from portfolio.allocation import Allocation

logger = logging.getLogger(__name__)


class AllocationInputError(ValueError):
    """Error raised when an allocation or portfolio value is unusable."""

    pass


@dataclass(frozen=True)
class ValidationPolicy:
    raw: Dict[str, Any]

    @property
    def target_sum_tolerance(self) -> float:
        return float(self.raw.get("validation", {}).get("target_sum_tolerance", 1e-6))


def check_number(value: Any, what: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise AllocationInputError(f"{what} must be a number, got {value!r}") from None
    if math.isnan(number):
        raise AllocationInputError(f"{what} is NaN")
    if math.isinf(number):
        raise AllocationInputError(f"{what} is infinite")
    if number < 0:
        raise AllocationInputError(f"{what} must not be negative, got {number}")
    return number


def validate_weights(weights: Mapping[str, float], label: str = "allocation") -> None:
    """Raise if any weight in ``weights`` is negative, NaN or infinite.

    Args:
        weights: Asset class -> fractional weight.
        label: Name of the map, used in error messages.

    Raises:
        AllocationInputError: On the first offending weight.
    """
    for asset_class, w in weights.items():
        if not isinstance(asset_class, str) or not asset_class:
            raise AllocationInputError(f"{label} has an invalid asset class key: {asset_class!r}")
        check_number(w, f"{label} weight for {asset_class}")


def validate_total_value(total_value: float) -> float:
    return check_number(total_value, "Portfolio value")


def validate_target(target: Mapping[str, float], tol: float = 1e-6) -> List[str]:
    """Validate a target allocation.

    Args:
        target: Target asset class -> weight.
        tol: Accepted distance of the weight sum from 1.0.

    Returns:
        Warnings about the target (empty when the weights sum to ~1.0).
        An empty target yields no warning.
    """
    validate_weights(target, "target")
    if not target:
        return []
    alloc = Allocation(dict(target))
    if alloc.sums_to_one(tol):
        return []
    msg = f"Target weights sum to {alloc.total_weight():.4f}, expected 1.0"
    logger.warning(msg)
    return [msg]
