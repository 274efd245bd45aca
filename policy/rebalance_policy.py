from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Any

@dataclass(frozen=True)
class RebalancePolicy:
    raw: Dict[str, Any]

    @property
    def min_weight_change(self) -> float:
        return float(self.raw.get("rebalance", {}).get("min_weight_change", 0.005))

    @property
    def include_holds(self) -> bool:
        return bool(self.raw.get("rebalance", {}).get("include_holds", False))

def needs_action(current: float, target: float, min_weight_change: float) -> bool:
    return abs(target - current) > min_weight_change
