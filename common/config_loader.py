from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict
import yaml

def load_yaml(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}

@dataclass(frozen=True)
class LoadedConfig:
    policy: Dict[str, Any]
    portfolio: Dict[str, Any]

def load_all(
    policy_path: str = "config/analyzer_policy.yaml",
    portfolio_path: str = "config/portfolio.yaml",
) -> LoadedConfig:
    return LoadedConfig(
        policy=load_yaml(policy_path),
        portfolio=load_yaml(portfolio_path),
    )
