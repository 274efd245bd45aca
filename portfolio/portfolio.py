from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List
from portfolio.allocation import AllocationMap, weights_from_values
from portfolio.wallet import Wallet

@dataclass
class ClientPortfolio:
    client_id: str
    wallets: List[Wallet] = field(default_factory=list)
    targets: AllocationMap = field(default_factory=dict)

    def total_value(self) -> float:
        return sum((w.current_value for w in self.wallets), 0.0)

    def current_values(self) -> Dict[str, float]:
        vals: Dict[str, float] = {}
        for w in self.wallets:
            vals[w.asset_class] = vals.get(w.asset_class, 0.0) + float(w.current_value)
        return vals

    def current_weights(self) -> AllocationMap:
        # every held class, planned or not
        return weights_from_values(self.current_values())

    def unplanned_classes(self) -> List[str]:
        return sorted(c for c in self.current_values() if c not in self.targets)
