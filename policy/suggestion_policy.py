from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Any

@dataclass(frozen=True)
class SuggestionPolicy:
    raw: Dict[str, Any]

    def _get(self, key: str, default: float) -> float:
        return float(self.raw.get("suggestions", {}).get(key, default))

    @property
    def concentration_max(self) -> float:
        return self._get("concentration_max_pct", 60.0)

    @property
    def concentration_high(self) -> float:
        return self._get("concentration_high_pct", 80.0)

    @property
    def concentration_ideal(self) -> float:
        return self._get("concentration_ideal_pct", 50.0)

    @property
    def cash_max(self) -> float:
        return self._get("cash_max_pct", 15.0)

    @property
    def cash_floor(self) -> float:
        return self._get("cash_floor_pct", 10.0)

    @property
    def diversification_gain(self) -> float:
        return self._get("diversification_gain", 0.02)

    @property
    def cash_return_gain(self) -> float:
        return self._get("cash_return_gain", 0.05)

    @property
    def cash_class(self) -> str:
        return str(self.raw.get("suggestions", {}).get("cash_class", "CASH"))
