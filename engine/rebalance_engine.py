"""Rebalance engine.

Turns the gap between a current and a target allocation into signed
currency amounts per asset class, and into buy/sell/hold actions for
presentation. Nothing here executes trades; the output is advisory.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

from engine.alignment_engine import compute_alignment_score
from policy.alignment_policy import AlignmentPolicy, categorize
from policy.rebalance_policy import RebalancePolicy, needs_action
from policy.validation import (
    ValidationPolicy,
    validate_target,
    validate_total_value,
    validate_weights,
)
from portfolio.allocation import weight_of
from portfolio.portfolio import ClientPortfolio

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RebalanceAction:
    """A suggested move for one asset class."""

    asset_class: str
    action: str  # BUY/SELL/HOLD
    current_weight: float
    target_weight: float
    current_value: float
    target_value: float
    amount_change: float
    weight_change: float

    def __str__(self) -> str:
        """Format action for display."""
        if self.action == "HOLD":
            return f"HOLD {self.asset_class}"
        return f"{self.action} ${abs(self.amount_change):,.0f} {self.asset_class}"


@dataclass
class Recommendation:
    """Alignment score, rebalance amounts and actions for one portfolio."""

    client_id: str
    score: float
    category: str
    suggestions: Dict[str, float]
    actions: List[RebalanceAction]
    warnings: List[str]
    summary: Dict[str, Any]


def get_rebalance_suggestions(
    current: Mapping[str, float],
    target: Mapping[str, float],
    total_value: float,
) -> Dict[str, float]:
    """Signed amount to buy (positive) or sell (negative) per target class.

    Args:
        current: Current asset class -> weight. Missing classes count as 0.
        target: Target asset class -> weight.
        total_value: Portfolio value used to turn weights into amounts.

    Returns:
        One entry per key of ``target``. Classes held but not targeted get
        no entry.

    Raises:
        AllocationInputError: On negative, NaN or infinite input.
    """
    validate_weights(current, "current")
    validate_weights(target, "target")
    total_value = validate_total_value(total_value)

    suggestions: Dict[str, float] = {}
    for asset_class, tw in target.items():
        current_amount = weight_of(current, asset_class) * total_value
        target_amount = float(tw) * total_value
        suggestions[asset_class] = target_amount - current_amount
    return suggestions


def plan_rebalance_actions(
    current: Mapping[str, float],
    target: Mapping[str, float],
    total_value: float,
    min_weight_change: float = 0.005,
    include_holds: bool = False,
) -> List[RebalanceAction]:
    """Build display actions from the rebalance amounts.

    Classes whose weight would move by no more than ``min_weight_change``
    are HOLD and left out unless ``include_holds`` is set. Actions are
    ordered by absolute amount, largest first.
    """
    amounts = get_rebalance_suggestions(current, target, total_value)

    actions: List[RebalanceAction] = []
    for asset_class, amount in amounts.items():
        cw = weight_of(current, asset_class)
        tw = float(target[asset_class])
        if needs_action(cw, tw, min_weight_change):
            action = "BUY" if tw > cw else "SELL"
        elif include_holds:
            action = "HOLD"
        else:
            continue
        actions.append(
            RebalanceAction(
                asset_class=asset_class,
                action=action,
                current_weight=cw,
                target_weight=tw,
                current_value=cw * total_value,
                target_value=tw * total_value,
                amount_change=amount,
                weight_change=tw - cw,
            )
        )
    actions.sort(key=lambda a: abs(a.amount_change), reverse=True)
    return actions


def recommend(
    portfolio: ClientPortfolio,
    raw_policy: Dict[str, Any],
    include_holds: bool | None = None,
) -> Recommendation:
    """Generate the rebalance recommendation for a client portfolio.

    Args:
        portfolio: Client wallets and target allocation.
        raw_policy: Raw policy configuration.
        include_holds: Overrides the policy's ``include_holds`` when given.

    Returns:
        Recommendation with score, amounts, actions, warnings and summary.
    """
    reb = RebalancePolicy(raw_policy)
    val = ValidationPolicy(raw_policy)
    align = AlignmentPolicy(raw_policy)

    warnings: List[str] = []
    warnings += validate_target(portfolio.targets, val.target_sum_tolerance)

    unplanned = portfolio.unplanned_classes()
    if unplanned:
        warnings.append(f"Holdings outside the target plan: {', '.join(unplanned)}")

    current = portfolio.current_weights()
    total = portfolio.total_value()

    score = compute_alignment_score(current, portfolio.targets)
    suggestions = get_rebalance_suggestions(current, portfolio.targets, total)
    actions = plan_rebalance_actions(
        current,
        portfolio.targets,
        total,
        min_weight_change=reb.min_weight_change,
        include_holds=reb.include_holds if include_holds is None else include_holds,
    )
    category = categorize(score, align)
    logger.info(
        "Client %s: alignment %.1f (%s), %d actions",
        portfolio.client_id, score, category.value, len(actions),
    )

    summary = {
        "total_value": total,
        "alignment_score": score,
        "alignment_category": category.value,
        "unplanned_classes": unplanned,
        "num_actions": len(actions),
        "total_buy": sum((v for v in suggestions.values() if v > 0), 0.0),
        "total_sell": sum((-v for v in suggestions.values() if v < 0), 0.0),
    }

    return Recommendation(
        client_id=portfolio.client_id,
        score=score,
        category=category.value,
        suggestions=suggestions,
        actions=actions,
        warnings=warnings,
        summary=summary,
    )
