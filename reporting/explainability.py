from __future__ import annotations
from dataclasses import asdict
from typing import Dict, Any, List
from engine.rebalance_engine import Recommendation
from engine.suggestion_engine import Suggestion

def explainability_report(rec: Recommendation, suggestions: List[Suggestion]) -> Dict[str, Any]:
    return {
        "client_id": rec.client_id,
        "summary": rec.summary,
        "warnings": rec.warnings,
        "rebalance": rec.suggestions,
        "actions": [asdict(a) for a in rec.actions],
        "suggestions": [asdict(s) for s in suggestions],
    }
