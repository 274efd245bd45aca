"""Advisory suggestion engine.

Looks at a client portfolio and raises advisory suggestions:
- Concentration in a single asset class
- Excess cash
- Poor alignment with the target plan

Suggestions are ordered by priority, then by confidence.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from engine.alignment_engine import compute_alignment_score
from engine.rebalance_engine import get_rebalance_suggestions
from policy.alignment_policy import AlignmentCategory, AlignmentPolicy, categorize
from policy.suggestion_policy import SuggestionPolicy
from portfolio.portfolio import ClientPortfolio

logger = logging.getLogger(__name__)

PRIORITY_ORDER = {"HIGH": 3, "MEDIUM": 2, "LOW": 1}

ASSET_CLASS_NAMES = {
    "STOCKS": "Stocks",
    "BONDS": "Bonds",
    "REAL_ESTATE": "Real estate funds",
    "COMMODITIES": "Commodities",
    "CASH": "Cash",
    "CRYPTO": "Crypto",
    "PRIVATE_EQUITY": "Private equity",
    "OTHER": "Other",
}


@dataclass(frozen=True)
class Suggestion:
    """An advisory suggestion for a client."""

    id: str
    type: str  # REBALANCING|TAX_OPTIMIZATION
    priority: str  # HIGH|MEDIUM|LOW
    title: str
    description: str
    impact: str
    action: str
    reasoning: str
    potential_gain: float
    confidence: int
    percentage: Optional[int] = None


def asset_class_name(asset_class: Optional[str]) -> str:
    return ASSET_CLASS_NAMES.get(asset_class or "", asset_class or "Unknown")


def _class_shares_pct(portfolio: ClientPortfolio) -> Dict[str, float]:
    return {k: w * 100 for k, w in portfolio.current_weights().items()}


def _concentration(portfolio: ClientPortfolio, pol: SuggestionPolicy) -> List[Suggestion]:
    shares = _class_shares_pct(portfolio)
    concentrated, max_share = max(shares.items(), key=lambda kv: kv[1])
    if max_share <= pol.concentration_max:
        return []

    excess = max_share - pol.concentration_ideal
    return [
        Suggestion(
            id=f"rebalancing_{portfolio.client_id}",
            type="REBALANCING",
            priority="HIGH" if max_share > pol.concentration_high else "MEDIUM",
            title="Portfolio rebalancing needed",
            description=f"Excess concentration in {asset_class_name(concentrated)} ({max_share:.1f}%)",
            impact="Lower risk through better diversification",
            action=f"Redistribute {excess:.1f}% to other asset classes",
            reasoning=(
                f"Holding {max_share:.1f}% in a single asset class raises portfolio risk. "
                f"Keep each main class at or below {pol.concentration_ideal:.0f}%."
            ),
            potential_gain=portfolio.total_value() * pol.diversification_gain,
            confidence=75,
            percentage=round(excess),
        )
    ]


def _excess_cash(portfolio: ClientPortfolio, pol: SuggestionPolicy) -> List[Suggestion]:
    cash = _class_shares_pct(portfolio).get(pol.cash_class, 0.0)
    if cash <= pol.cash_max:
        return []

    excess = cash - pol.cash_floor
    return [
        Suggestion(
            id=f"cash_optimization_{portfolio.client_id}",
            type="TAX_OPTIMIZATION",
            priority="MEDIUM",
            title="Excess cash identified",
            description=f"{cash:.1f}% of the portfolio held in cash or equivalents",
            impact=f"Up to {cash * pol.cash_return_gain:.1f}% more annual return",
            action="Invest excess cash in assets with higher return potential",
            reasoning=(
                f"More than {pol.cash_max:.0f}% in cash forgoes growth, "
                "especially while inflation is high."
            ),
            potential_gain=portfolio.total_value() * excess / 100 * pol.cash_return_gain,
            confidence=70,
            percentage=round(excess),
        )
    ]


def _misalignment(
    portfolio: ClientPortfolio,
    align: AlignmentPolicy,
) -> List[Suggestion]:
    if not portfolio.targets:
        return []
    current = portfolio.current_weights()
    score = compute_alignment_score(current, portfolio.targets)
    category = categorize(score, align)
    if category not in (AlignmentCategory.WARNING, AlignmentCategory.POOR):
        return []

    amounts = get_rebalance_suggestions(current, portfolio.targets, portfolio.total_value())
    asset_class, amount = max(amounts.items(), key=lambda kv: abs(kv[1]))
    verb = "Buy" if amount > 0 else "Sell"
    return [
        Suggestion(
            id=f"alignment_{portfolio.client_id}",
            type="REBALANCING",
            priority="HIGH" if category == AlignmentCategory.POOR else "MEDIUM",
            title="Portfolio off target allocation",
            description=f"Alignment with the target plan is {score:.1f}%",
            impact="Bring holdings back in line with the target plan",
            action=f"{verb} ${abs(amount):,.0f} of {asset_class_name(asset_class)}",
            reasoning=(
                f"{asset_class_name(asset_class)} is the class furthest from its target weight."
            ),
            potential_gain=0.0,
            confidence=80,
        )
    ]


def generate_suggestions(
    portfolio: ClientPortfolio,
    raw_policy: Dict[str, Any],
) -> List[Suggestion]:
    """Generate advisory suggestions for a client portfolio.

    Args:
        portfolio: Client wallets and target allocation.
        raw_policy: Raw policy configuration.

    Returns:
        Suggestions sorted by priority (HIGH first), then confidence.
    """
    if not portfolio.wallets or portfolio.total_value() <= 0:
        return []

    pol = SuggestionPolicy(raw_policy)
    align = AlignmentPolicy(raw_policy)

    suggestions: List[Suggestion] = []
    suggestions += _concentration(portfolio, pol)
    suggestions += _excess_cash(portfolio, pol)
    suggestions += _misalignment(portfolio, align)
    logger.debug("Client %s: %d suggestions", portfolio.client_id, len(suggestions))

    return sorted(
        suggestions,
        key=lambda s: (PRIORITY_ORDER[s.priority], s.confidence),
        reverse=True,
    )
