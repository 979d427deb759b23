# ABOUTME: Loads tunable analytics parameters from a YAML config file.
# ABOUTME: Maps the trend and plan sections onto frozen dataclasses with defaults.

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Mapping, Optional, Tuple

import yaml

from .errors import ConfigError

DEFAULT_RESOURCES: Tuple[str, ...] = ("Practice Problems", "Explanations Review", "Recommended Videos")


@dataclass(frozen=True)
class TrendConfig:
    """Calibration of the pass-probability heuristic."""

    slope_weight: float = 2.0
    max_adjustment: float = 15.0


@dataclass(frozen=True)
class PlanConfig:
    """Shape of the remediation plan."""

    max_steps: int = 6
    min_days: int = 2
    days_divisor: int = 15
    resources: Tuple[str, ...] = DEFAULT_RESOURCES


@dataclass(frozen=True)
class AnalyticsConfig:
    trend: TrendConfig = field(default_factory=TrendConfig)
    plan: PlanConfig = field(default_factory=PlanConfig)


def load_config(config_path: Optional[Path] = None) -> AnalyticsConfig:
    """
    Read ``config_path`` and build an AnalyticsConfig.

    Missing sections fall back to defaults. Unknown keys and out-of-range
    values raise ConfigError so a typo never silently reverts to a default.
    """

    if config_path is None:
        return AnalyticsConfig()

    try:
        with open(config_path) as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot read analytics config {config_path}: {exc}") from exc

    if not isinstance(cfg, Mapping):
        raise ConfigError(f"Analytics config {config_path} must be a mapping, got {type(cfg).__name__}.")

    unknown = set(cfg) - {"trend", "plan"}
    if unknown:
        raise ConfigError(f"Unknown config sections: {', '.join(sorted(unknown))}.")

    trend = TrendConfig(**_section(cfg, "trend", TrendConfig))
    plan_values = _section(cfg, "plan", PlanConfig)
    if "resources" in plan_values:
        plan_values["resources"] = tuple(str(r) for r in plan_values["resources"])
    plan = PlanConfig(**plan_values)

    _validate(trend, plan)
    return AnalyticsConfig(trend=trend, plan=plan)


def _section(cfg: Mapping, name: str, schema) -> dict:
    values = cfg.get(name) or {}
    if not isinstance(values, Mapping):
        raise ConfigError(f"Config section '{name}' must be a mapping.")
    allowed = {f.name for f in fields(schema)}
    unknown = set(values) - allowed
    if unknown:
        raise ConfigError(f"Unknown keys in '{name}': {', '.join(sorted(unknown))}.")
    return dict(values)


def _validate(trend: TrendConfig, plan: PlanConfig) -> None:
    numeric = {
        "trend.slope_weight": (trend.slope_weight, (int, float)),
        "trend.max_adjustment": (trend.max_adjustment, (int, float)),
        "plan.max_steps": (plan.max_steps, int),
        "plan.min_days": (plan.min_days, int),
        "plan.days_divisor": (plan.days_divisor, (int, float)),
    }
    for name, (value, kinds) in numeric.items():
        if isinstance(value, bool) or not isinstance(value, kinds):
            raise ConfigError(f"{name} must be a number, got {value!r}.")

    if trend.slope_weight < 0:
        raise ConfigError("trend.slope_weight must be non-negative.")
    if not 0 <= trend.max_adjustment <= 100:
        raise ConfigError("trend.max_adjustment must lie in [0, 100].")
    if plan.max_steps < 0:
        raise ConfigError("plan.max_steps must be non-negative.")
    if plan.min_days < 1:
        raise ConfigError("plan.min_days must be at least 1.")
    if plan.days_divisor <= 0:
        raise ConfigError("plan.days_divisor must be positive.")
