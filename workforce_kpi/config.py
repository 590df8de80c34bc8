"""Pipeline configuration and environment setup."""

from dataclasses import dataclass, field, replace
from pathlib import Path

from workforce_kpi.utils.io import load_toml_config

type ConfigDict = dict[str, str | int | float | bool | list[str] | dict]


@dataclass(frozen=True)
class EngineSettings:
    """Constants of the KPI aggregation engine."""

    working_days_per_month: int = 22
    employer_charge_rate: float = 0.45
    default_age: int = 30
    turnover_window_months: int = 3
    annualization_factor: int = 4
    legacy_cumulative_cost: bool = False


@dataclass(frozen=True)
class AlertThresholds:
    turnover: float = 15.0
    absenteeism: float = 8.0
    data_quality: float = 80.0


@dataclass(frozen=True)
class PipelineConfig:
    output_format: str
    engine: EngineSettings = field(default_factory=EngineSettings)
    thresholds: AlertThresholds = field(default_factory=AlertThresholds)


def load_pipeline_config(env: str = "production") -> PipelineConfig:
    match env:
        case "production" | "staging":
            return PipelineConfig(output_format="json")
        case "development":
            return PipelineConfig(output_format="csv")
        case other:
            raise ValueError(f"Unknown environment: {other}")


def apply_overrides(config: PipelineConfig, overrides: ConfigDict) -> PipelineConfig:
    """Layer ``[engine]`` and ``[thresholds]`` tables from a config file onto ``config``."""
    engine_overrides = overrides.get("engine", {})
    threshold_overrides = overrides.get("thresholds", {})

    unknown = set(engine_overrides) - set(EngineSettings.__dataclass_fields__)
    unknown |= set(threshold_overrides) - set(AlertThresholds.__dataclass_fields__)
    if unknown:
        raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")

    return replace(
        config,
        engine=replace(config.engine, **engine_overrides),
        thresholds=replace(config.thresholds, **threshold_overrides),
    )


def get_env_config() -> ConfigDict:
    """Read pipeline config from pyproject.toml."""
    pyproject = Path(__file__).parent.parent / "pyproject.toml"
    if not pyproject.exists():
        return {}
    data = load_toml_config(pyproject)
    return data.get("tool", {}).get("workforce_kpi", {})
