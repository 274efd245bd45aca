from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

@dataclass(frozen=True)
class Wallet:
    asset_class: str  # STOCKS|BONDS|REAL_ESTATE|COMMODITIES|CASH|CRYPTO|PRIVATE_EQUITY|OTHER
    current_value: float
    description: Optional[str] = None
