"""Tests for rebalance amounts, actions and recommendations."""
from __future__ import annotations

import pytest

from engine.explanation_engine import explain_actions
from engine.rebalance_engine import (
    get_rebalance_suggestions,
    plan_rebalance_actions,
    recommend,
)
from policy.validation import AllocationInputError
from portfolio.portfolio import ClientPortfolio
from portfolio.wallet import Wallet


POLICY = {
    "alignment": {"excellent_above": 90, "good_min": 70, "warning_min": 50},
    "rebalance": {"min_weight_change": 0.005, "include_holds": False},
    "validation": {"target_sum_tolerance": 1e-6},
}

TARGET = {"stocks": 0.6, "bonds": 0.4}


def make_portfolio(values: dict, targets: dict) -> ClientPortfolio:
    """Helper to create a test portfolio."""
    wallets = [Wallet(asset_class=k, current_value=v) for k, v in values.items()]
    return ClientPortfolio(client_id="c1", wallets=wallets, targets=targets)


class TestGetRebalanceSuggestions:
    """Tests for signed rebalance amounts."""

    def test_buy_and_sell_scenario(self):
        """60/40 target against 50/50 on $10,000."""
        result = get_rebalance_suggestions({"stocks": 0.5, "bonds": 0.5}, TARGET, 10000)

        assert result["stocks"] == pytest.approx(1000)
        assert result["bonds"] == pytest.approx(-1000)

    def test_one_entry_per_target_key(self):
        """Unplanned holdings get no entry."""
        result = get_rebalance_suggestions({"stocks": 0.5, "crypto": 0.5}, TARGET, 1000)

        assert set(result) == {"stocks", "bonds"}

    def test_missing_current_is_full_buy(self):
        result = get_rebalance_suggestions({"stocks": 0.6}, TARGET, 1000)

        assert result["bonds"] == pytest.approx(400)
        assert result["stocks"] == pytest.approx(0)

    def test_conservation(self):
        """Suggestions plus current amounts add up to target amounts."""
        current = {"stocks": 0.2, "bonds": 0.1, "cash": 0.3}
        target = {"stocks": 0.5, "bonds": 0.3, "cash": 0.2}
        total = 25000

        result = get_rebalance_suggestions(current, target, total)

        current_amount = sum(current.get(k, 0.0) * total for k in target)
        target_amount = sum(w * total for w in target.values())
        assert sum(result.values()) + current_amount == pytest.approx(target_amount)

    def test_aligned_portfolio_needs_nothing(self):
        result = get_rebalance_suggestions(dict(TARGET), TARGET, 50000)

        assert all(v == pytest.approx(0.0) for v in result.values())

    def test_empty_target(self):
        assert get_rebalance_suggestions({"stocks": 1.0}, {}, 1000) == {}

    def test_negative_total_rejected(self):
        with pytest.raises(AllocationInputError, match="Portfolio value"):
            get_rebalance_suggestions({}, TARGET, -1)

    def test_negative_weight_rejected(self):
        with pytest.raises(AllocationInputError, match="stocks"):
            get_rebalance_suggestions({}, {"stocks": -0.1}, 100)


class TestPlanRebalanceActions:
    """Tests for buy/sell/hold action planning."""

    def test_buy_and_sell_actions(self):
        actions = plan_rebalance_actions({"stocks": 0.5, "bonds": 0.5}, TARGET, 10000)
        by_class = {a.asset_class: a for a in actions}

        assert by_class["stocks"].action == "BUY"
        assert by_class["bonds"].action == "SELL"
        assert by_class["bonds"].amount_change == pytest.approx(-1000)
        assert by_class["stocks"].target_value == pytest.approx(6000)

    def test_small_moves_are_dropped(self):
        """Moves within half a percentage point are not listed."""
        actions = plan_rebalance_actions({"a": 0.5, "b": 0.5}, {"a": 0.503, "b": 0.497}, 1000)

        assert actions == []

    def test_small_moves_listed_as_hold(self):
        actions = plan_rebalance_actions(
            {"a": 0.5, "b": 0.5}, {"a": 0.503, "b": 0.497}, 1000, include_holds=True
        )

        assert [a.action for a in actions] == ["HOLD", "HOLD"]

    def test_sorted_by_amount(self):
        """Largest absolute amount comes first."""
        actions = plan_rebalance_actions(
            {"a": 0.3, "b": 0.3, "c": 0.4}, {"a": 0.1, "b": 0.2, "c": 0.7}, 100
        )

        assert [a.asset_class for a in actions] == ["c", "a", "b"]

    def test_explain_actions(self):
        actions = plan_rebalance_actions({"stocks": 0.5, "bonds": 0.5}, TARGET, 10000)

        lines = explain_actions(actions)

        assert any("BUY $1,000 stocks" in line for line in lines)
        assert any("SELL $1,000 bonds" in line for line in lines)


class TestRecommend:
    """Tests for the portfolio-level recommendation."""

    def test_recommendation_for_portfolio(self):
        p = make_portfolio({"stocks": 5000, "bonds": 5000}, TARGET)

        rec = recommend(p, POLICY)

        assert rec.score == pytest.approx(80.0)
        assert rec.category == "good"
        assert rec.suggestions["stocks"] == pytest.approx(1000)
        assert rec.summary["total_buy"] == pytest.approx(1000)
        assert rec.summary["total_sell"] == pytest.approx(1000)
        assert rec.warnings == []

    def test_unplanned_holdings_warned(self):
        p = make_portfolio({"stocks": 6000, "bonds": 4000, "crypto": 1000}, TARGET)

        rec = recommend(p, POLICY)

        assert rec.summary["unplanned_classes"] == ["crypto"]
        assert any("crypto" in w for w in rec.warnings)
        assert "crypto" not in rec.suggestions

    def test_target_sum_warned(self):
        p = make_portfolio({"stocks": 1000}, {"stocks": 0.5, "bonds": 0.3})

        rec = recommend(p, POLICY)

        assert any("sum" in w.lower() for w in rec.warnings)

    def test_include_holds_override(self):
        p = make_portfolio({"stocks": 6000, "bonds": 4000}, TARGET)

        rec = recommend(p, POLICY, include_holds=True)

        assert {a.action for a in rec.actions} == {"HOLD"}
        assert rec.score == pytest.approx(100.0)

    def test_empty_portfolio(self):
        """No wallets: zero value, zero amounts, no failure."""
        p = make_portfolio({}, TARGET)

        rec = recommend(p, POLICY)

        assert rec.score == 0
        assert rec.suggestions == {"stocks": 0.0, "bonds": 0.0}
        assert rec.summary["total_value"] == 0

    def test_aligned_totals_are_floats(self):
        """Buy and sell totals are floats even when nothing moves."""
        p = make_portfolio({"stocks": 6000, "bonds": 4000}, TARGET)

        rec = recommend(p, POLICY)

        assert rec.summary["total_buy"] == 0.0
        assert rec.summary["total_sell"] == 0.0
        assert isinstance(rec.summary["total_buy"], float)
        assert isinstance(rec.summary["total_sell"], float)
        assert isinstance(rec.summary["total_value"], float)
