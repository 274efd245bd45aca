"""Allocation analyzer CLI.

Provides commands for:
- score: Alignment of current holdings with the target plan
- rebalance: Buy/sell amounts per asset class
- suggest: Advisory suggestions
- report: Full JSON report
"""
from __future__ import annotations

import argparse
import json
import logging
import os
from typing import Any, Dict, List

import pandas as pd
import yaml

from common.config_loader import load_all
from engine.explanation_engine import explain_actions
from engine.rebalance_engine import recommend
from engine.suggestion_engine import generate_suggestions
from policy.alignment_policy import (
    AlignmentPolicy,
    categorize,
    format_alignment_percentage,
    status_text,
)
from policy.validation import AllocationInputError, check_number
from portfolio.portfolio import ClientPortfolio
from portfolio.wallet import Wallet
from reporting.explainability import explainability_report
from reporting.summary import portfolio_summary

logger = logging.getLogger(__name__)

REQUIRED_CSV_COLUMNS = ("asset_class", "current_value")


def configure_logging(level_name: str | None) -> None:
    """Configure root logging from the CLI flag or ALLOCATION_LOG_LEVEL."""
    name = (level_name or os.getenv("ALLOCATION_LOG_LEVEL", "WARNING")).upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.WARNING),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def build_wallets(raw_wallets: List[Dict[str, Any]]) -> List[Wallet]:
    """Build wallets from configuration entries."""
    wallets = []
    for w in raw_wallets or []:
        if "asset_class" not in w or "current_value" not in w:
            raise AllocationInputError(f"Wallet entry needs asset_class and current_value: {w}")
        asset_class = str(w["asset_class"] or "").strip()
        if not asset_class:
            raise AllocationInputError(f"Wallet entry has a blank asset_class: {w}")
        wallets.append(
            Wallet(
                asset_class=asset_class,
                current_value=check_number(w["current_value"], f"Wallet value for {asset_class}"),
                description=w.get("description"),
            )
        )
    return wallets


def load_wallets_csv(path: str) -> List[Wallet]:
    """Load wallets from a holdings CSV (asset_class,current_value[,description])."""
    df = pd.read_csv(path)
    missing = [c for c in REQUIRED_CSV_COLUMNS if c not in df.columns]
    if missing:
        raise AllocationInputError(f"CSV {path} is missing columns: {', '.join(missing)}")
    if "description" not in df.columns:
        df["description"] = None
    blank = df["asset_class"].isna() | df["asset_class"].astype(str).str.strip().eq("")
    if blank.any():
        # header is line 1
        lines = [str(i + 2) for i in df.index[blank]]
        raise AllocationInputError(f"CSV {path} has blank asset_class on lines: {', '.join(lines)}")
    df["asset_class"] = df["asset_class"].astype(str).str.strip()
    df["current_value"] = pd.to_numeric(df["current_value"], errors="coerce")
    if df["current_value"].isna().any():
        bad = df.loc[df["current_value"].isna(), "asset_class"].tolist()
        raise AllocationInputError(f"CSV {path} has non-numeric values for: {', '.join(bad)}")

    logger.debug("Loaded %d wallets from %s", len(df), path)
    return [
        Wallet(
            asset_class=row.asset_class,
            current_value=float(row.current_value),
            description=None if pd.isna(row.description) else str(row.description),
        )
        for row in df.itertuples(index=False)
    ]


def build_portfolio(cfg, holdings_csv: str | None = None) -> ClientPortfolio:
    """Build client portfolio from loaded configuration."""
    raw = cfg.portfolio
    if not isinstance(raw, dict):
        raise AllocationInputError("Portfolio file must be a mapping with client_id, wallets and targets")
    if holdings_csv:
        wallets = load_wallets_csv(holdings_csv)
    else:
        wallets = build_wallets(raw.get("wallets") or [])

    targets = {
        str(k): check_number(v, f"Target weight for {k}")
        for k, v in (raw.get("targets") or {}).items()
    }
    return ClientPortfolio(
        client_id=str(raw.get("client_id", "client")),
        wallets=wallets,
        targets=targets,
    )


def _load(args):
    cfg = load_all(args.config, args.portfolio)
    return cfg, build_portfolio(cfg, args.holdings)


def cmd_score(args) -> int:
    """Handle score command: alignment score and category."""
    cfg, portfolio = _load(args)
    rec = recommend(portfolio, cfg.policy)
    pol = AlignmentPolicy(cfg.policy)

    print(f"Alignment for {portfolio.client_id}")
    print("=" * 50)
    print(f"  Score:    {format_alignment_percentage(rec.score)}")
    print(f"  Category: {categorize(rec.score, pol).value}")
    print(f"  Status:   {status_text(rec.score, pol)}")

    if rec.warnings:
        print("\nWarnings:")
        for w in rec.warnings:
            print(f"  - {w}")
    return 0


def cmd_rebalance(args) -> int:
    """Handle rebalance command: per-class buy/sell amounts."""
    cfg, portfolio = _load(args)
    rec = recommend(portfolio, cfg.policy, include_holds=args.include_holds or None)

    print(f"Rebalance Recommendation for {portfolio.client_id}")
    print("=" * 50)

    print("\nSummary:")
    for k, v in rec.summary.items():
        if isinstance(v, float):
            if k == "alignment_score":
                print(f"  {k}: {format_alignment_percentage(v)}")
            else:
                print(f"  {k}: ${v:,.0f}")
        else:
            print(f"  {k}: {v}")

    if rec.warnings:
        print("\nWarnings:")
        for w in rec.warnings:
            print(f"  - {w}")

    if rec.actions:
        print("\nActions:")
        lines = explain_actions(rec.actions) if args.explain else [str(a) for a in rec.actions]
        for line in lines:
            print("  " + line)
    else:
        print("\nNo rebalancing needed (within tolerance).")

    return 0


def cmd_suggest(args) -> int:
    """Handle suggest command: advisory suggestions."""
    cfg, portfolio = _load(args)
    suggestions = generate_suggestions(portfolio, cfg.policy)

    print(f"Suggestions for {portfolio.client_id}")
    print("=" * 50)
    if not suggestions:
        print("\nNo suggestions.")
        return 0

    for s in suggestions:
        print(f"\n[{s.priority}] {s.title}")
        print(f"  {s.description}")
        print(f"  Impact: {s.impact}")
        print(f"  Action: {s.action}")
        if s.potential_gain:
            print(f"  Potential gain: ${s.potential_gain:,.0f}")
        print(f"  Confidence: {s.confidence}%")
    return 0


def cmd_report(args) -> int:
    """Handle report command: JSON report on stdout."""
    cfg, portfolio = _load(args)
    rec = recommend(portfolio, cfg.policy)
    suggestions = generate_suggestions(portfolio, cfg.policy)

    report = explainability_report(rec, suggestions)
    report["portfolio"] = portfolio_summary(portfolio)
    print(json.dumps(report, indent=2))
    return 0


def run(args) -> int:
    try:
        return args.func(args)
    except (ValueError, FileNotFoundError, yaml.YAMLError) as e:
        logger.error("%s failed: %s", args.cmd, e)
        print(f"Error: {e}")
        return 1


def main():
    """Main entry point."""
    p = argparse.ArgumentParser(
        prog="cli.main",
        description="Allocation analyzer: alignment scoring and rebalance suggestions",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    # Common arguments for all commands
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", default="config/analyzer_policy.yaml", help="Policy config file")
    common.add_argument("--portfolio", default="config/portfolio.yaml", help="Client portfolio file")
    common.add_argument("--holdings", default=None, help="CSV of holdings, replaces portfolio wallets")
    common.add_argument("--log-level", default=None, help="Logging level (default: ALLOCATION_LOG_LEVEL or WARNING)")

    score_p = sub.add_parser("score", parents=[common], help="Alignment score and category")
    score_p.set_defaults(func=cmd_score)

    rb = sub.add_parser("rebalance", parents=[common], help="Rebalance amounts per asset class")
    rb.add_argument("--explain", action="store_true", help="Include weights and values for each action")
    rb.add_argument("--include-holds", action="store_true", help="List classes within tolerance as HOLD")
    rb.set_defaults(func=cmd_rebalance)

    sg = sub.add_parser("suggest", parents=[common], help="Advisory suggestions")
    sg.set_defaults(func=cmd_suggest)

    rp = sub.add_parser("report", parents=[common], help="Full JSON report")
    rp.set_defaults(func=cmd_report)

    args = p.parse_args()
    configure_logging(args.log_level)
    raise SystemExit(run(args))


if __name__ == "__main__":
    main()
