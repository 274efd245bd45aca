from __future__ import annotations
from typing import List
from engine.rebalance_engine import RebalanceAction

def explain_actions(actions: List[RebalanceAction]) -> List[str]:
    return [
        f"{a}  |  {a.current_weight:.1%} -> {a.target_weight:.1%} "
        f"(${a.current_value:,.0f} -> ${a.target_value:,.0f})"
        for a in actions
    ]
