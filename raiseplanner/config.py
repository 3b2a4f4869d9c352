"""Planner configuration and environment setup."""

import logging
import tomllib
from dataclasses import dataclass, field, fields, replace
from pathlib import Path

type ConfigDict = dict[str, str | int | float | bool | list[str] | dict]

logger = logging.getLogger(__name__)

DEFAULT_PYPROJECT = Path(__file__).parent.parent / "pyproject.toml"


@dataclass(frozen=True)
class IngestionConfig:
    max_file_size_bytes: int = 10 * 1024 * 1024
    large_file_warning_bytes: int = 5 * 1024 * 1024
    supported_extensions: tuple[str, ...] = ("csv", "xlsx", "xls")
    csv_encodings: tuple[str, ...] = ("utf-8", "utf-8-sig", "latin-1", "cp1252")


@dataclass(frozen=True)
class AnalysisConfig:
    # Grade bounds assumed when the export carries none, as ratios of base pay
    grade_min_ratio: float = 0.8
    grade_mid_ratio: float = 1.1
    grade_max_ratio: float = 1.4
    default_max_raise_percent: float = 12.0
    restricted_market_caps: dict[str, float] = field(
        default_factory=lambda: {"india": 10.0}
    )
    critical_risk_threshold: int = 70
    high_risk_threshold: int = 50
    medium_risk_threshold: int = 30
    market_risk_points: dict[str, int] = field(
        default_factory=lambda: {
            "india": 6,
            "poland": 4,
            "brazil": 4,
            "united states": 2,
        }
    )
    other_market_points: int = 1
    flagged_talent_points: int = 4


@dataclass(frozen=True)
class BudgetConfig:
    default_currency: str = "USD"
    backup_debounce_ms: int = 2000


@dataclass(frozen=True)
class Settings:
    env: str
    ingestion: IngestionConfig
    analysis: AnalysisConfig
    budget: BudgetConfig


def _overlay(section, values: ConfigDict, name: str):
    known = {f.name for f in fields(section)}
    updates = {}
    for key, value in values.items():
        if key not in known:
            logger.warning("Ignoring unknown [%s] setting: %s", name, key)
            continue
        current = getattr(section, key)
        updates[key] = tuple(value) if isinstance(current, tuple) else value
    return replace(section, **updates)


def get_env_config(path: Path | None = None) -> ConfigDict:
    """Read planner overrides from the [tool.raiseplanner] table of a TOML file."""
    path = path or DEFAULT_PYPROJECT
    if not path.exists():
        return {}
    with open(path, "rb") as f:
        data = tomllib.load(f)
    return data.get("tool", {}).get("raiseplanner", {})


def load_settings(env: str = "production", overrides_path: Path | None = None) -> Settings:
    match env:
        case "production":
            ingestion = IngestionConfig()
            budget = BudgetConfig()
        case "development":
            ingestion = IngestionConfig(max_file_size_bytes=50 * 1024 * 1024)
            budget = BudgetConfig(backup_debounce_ms=500)
        case "test":
            ingestion = IngestionConfig()
            budget = BudgetConfig(backup_debounce_ms=0)
        case other:
            raise ValueError(f"Unknown environment: {other}")

    analysis = AnalysisConfig()
    overrides = get_env_config(overrides_path)
    if overrides:
        ingestion = _overlay(ingestion, overrides.get("ingestion", {}), "ingestion")
        analysis = _overlay(analysis, overrides.get("analysis", {}), "analysis")
        budget = _overlay(budget, overrides.get("budget", {}), "budget")

    return Settings(env=env, ingestion=ingestion, analysis=analysis, budget=budget)
