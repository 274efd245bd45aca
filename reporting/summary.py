from __future__ import annotations
from typing import Dict, Any
from portfolio.portfolio import ClientPortfolio

def portfolio_summary(portfolio: ClientPortfolio) -> Dict[str, Any]:
    return {
        "client_id": portfolio.client_id,
        "total_value": portfolio.total_value(),
        "values": portfolio.current_values(),
        "weights": portfolio.current_weights(),
        "targets": dict(portfolio.targets),
    }
