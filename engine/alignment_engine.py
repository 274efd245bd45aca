"""Alignment scoring.

Measures how closely a client's current allocation conforms to a target
plan, as a 0-100 score weighted by each asset class's target proportion.
Only asset classes in the target are scored; holdings outside the plan do
not affect the score.
"""
from __future__ import annotations

import logging
from typing import Mapping

import numpy as np
import pandas as pd

from portfolio.allocation import weight_of
from policy.validation import AllocationInputError, validate_weights

logger = logging.getLogger(__name__)


def class_conformance(current_weight: float, target_weight: float) -> float:
    """Conformance of one asset class in [0, 1].

    The relative deviation ``|current - target| / target`` is capped at 1,
    so a complete miss scores 0 rather than going negative. A zero target
    has no conformance to measure and yields 0.
    """
    if target_weight <= 0:
        return 0.0
    ratio = min(abs(current_weight - target_weight) / target_weight, 1.0)
    return 1.0 - ratio


def compute_alignment_score(
    current: Mapping[str, float],
    target: Mapping[str, float],
) -> float:
    """Score how well ``current`` matches ``target``.

    Args:
        current: Current asset class -> weight. Missing classes count as 0.
        target: Target asset class -> weight.

    Returns:
        Score in [0, 100]. An empty or all-zero target scores 0.

    Raises:
        AllocationInputError: If any weight is negative, NaN or infinite.
    """
    validate_weights(current, "current")
    validate_weights(target, "target")

    numerator = 0.0
    denominator = 0.0
    for asset_class, tw in target.items():
        tw = float(tw)
        numerator += class_conformance(weight_of(current, asset_class), tw) * tw
        denominator += tw

    if denominator <= 0:
        return 0.0
    score = numerator / denominator * 100
    logger.debug("Alignment score %.2f over %d target classes", score, len(target))
    return score


def alignment_scores_frame(current: pd.DataFrame, target: pd.DataFrame) -> pd.Series:
    """Alignment scores for many clients at once.

    Rows are clients and columns asset classes. NaN means "not present".
    Rows of ``current`` are matched to ``target`` by index, and only the
    target's columns are scored, as in ``compute_alignment_score``.

    Returns:
        Series of scores indexed like ``target``.
    """
    t = target.astype(float).fillna(0.0).to_numpy()
    c = (
        current.reindex(index=target.index, columns=target.columns)
        .astype(float)
        .fillna(0.0)
        .to_numpy()
    )
    for label, arr in (("target", t), ("current", c)):
        if not np.isfinite(arr).all():
            raise AllocationInputError(f"{label} frame contains infinite weights")
        if (arr < 0).any():
            raise AllocationInputError(f"{label} frame contains negative weights")

    safe_t = np.where(t > 0, t, 1.0)
    ratio = np.where(t > 0, np.minimum(np.abs(c - t) / safe_t, 1.0), 1.0)
    contrib = (1.0 - ratio) * t

    totals = t.sum(axis=1)
    safe_totals = np.where(totals > 0, totals, 1.0)
    scores = np.where(totals > 0, contrib.sum(axis=1) / safe_totals * 100, 0.0)
    return pd.Series(scores, index=target.index, name="alignment_score")
