# ABOUTME: Holds the tunable thresholds used by prediction, risk and trigger rules.
# ABOUTME: Loads overrides from the engine section of a YAML config file.

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Union

import yaml


@dataclass(frozen=True)
class EngineConfig:
    """Thresholds shared by the predictor, risk assessor and real-time trigger."""

    risk_threshold: float = 0.7
    high_risk_level: float = 0.8
    medium_risk_level: float = 0.6
    prediction_window_days: int = 7
    recent_window: int = 10
    long_session_seconds: int = 120 * 60
    rushing_seconds: int = 30
    struggle_score: float = 50.0
    low_score: float = 60.0
    improvement_probability_floor: float = 0.5
    confidence_full_history: int = 20


DEFAULT_CONFIG = EngineConfig()


def load_engine_config(config_path: Union[str, Path]) -> EngineConfig:
    """Read the ``engine:`` section of a YAML file; missing keys keep defaults."""

    with open(config_path, encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}

    engine_cfg = cfg.get("engine", {}) or {}
    known = {f.name for f in fields(EngineConfig)}
    unknown = sorted(set(engine_cfg) - known)
    if unknown:
        raise TypeError(f"Unknown engine config keys: {', '.join(unknown)}")
    return EngineConfig(**engine_cfg)
