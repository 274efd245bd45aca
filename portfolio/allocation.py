from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Mapping

AllocationMap = Dict[str, float]  # asset class -> fractional weight


def weight_of(allocation: Mapping[str, float], asset_class: str) -> float:
    """Weight held for an asset class; absent classes count as 0.0."""
    if asset_class not in allocation:
        return 0.0
    return float(allocation[asset_class])


def weights_from_values(values: Mapping[str, float]) -> AllocationMap:
    total = sum(values.values())
    if total <= 0:
        return {k: 0.0 for k in values}
    return {k: float(v) / total for k, v in values.items()}


@dataclass(frozen=True)
class Allocation:
    targets: AllocationMap  # asset class -> weight

    def total_weight(self) -> float:
        return sum(self.targets.values())

    def sums_to_one(self, tol: float = 1e-6) -> bool:
        return abs(self.total_weight() - 1.0) <= tol
