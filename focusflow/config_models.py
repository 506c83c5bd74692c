from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from focusflow import ARGS_DIR

logger = logging.getLogger(__name__)


# =============================================================================
# FocusFlowConfig (args/focusflow.yaml)
# =============================================================================

class AppSettingsConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    default_user_id: str = Field(default="single-user", min_length=1)
    default_energy_level: int = Field(default=3, ge=1, le=5)


class StoreConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    backend: Literal["sqlite", "remote"] = Field(default="sqlite")
    sqlite_path: str = Field(default="data/focusflow.db")
    api_base: Optional[str] = None
    api_key_env: str = Field(default="FOCUSFLOW_API_KEY")
    timeout_seconds: float = Field(default=10.0, gt=0)


class DashboardConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    host: str = Field(default="127.0.0.1")
    api_port: int = Field(default=8080, ge=1, le=65535)
    allowed_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )
    require_auth: bool = Field(default=False)
    user_header: str = Field(default="X-User-Id")


class DerivationConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    bucket_size: int = Field(default=3, ge=1, le=3)


class StreaksConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    adjacency: Literal["day_of_month", "calendar"] = Field(default="day_of_month")
    milestones: list[int] = Field(default_factory=lambda: [7, 30, 100])
    active_window_hours: float = Field(default=24.0, gt=0)

    @field_validator("milestones")
    @classmethod
    def _sorted_positive(cls, value: list[int]) -> list[int]:
        if not value or any(m <= 0 for m in value):
            raise ValueError("milestones must be a non-empty list of positive integers")
        return sorted(value)


class AchievementsConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    completion_title: str = Field(default="Task Completed")
    completion_description: str = Field(default="Completed task: {title}")
    notification_title: str = Field(default="Task Completed!")
    notification_description: str = Field(default='You\'ve completed "{title}". Great job!')


class FocusFlowConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    app: AppSettingsConfig = Field(default_factory=AppSettingsConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    dashboard: DashboardConfig = Field(default_factory=DashboardConfig)
    derivation: DerivationConfig = Field(default_factory=DerivationConfig)
    streaks: StreaksConfig = Field(default_factory=StreaksConfig)
    achievements: AchievementsConfig = Field(default_factory=AchievementsConfig)


# =============================================================================
# Loader
# =============================================================================

_CONFIG_MAP: dict[str, type[BaseModel]] = {
    "focusflow": FocusFlowConfig,
}


def load_and_validate(config_name: str, model_class: type[BaseModel] | None = None) -> BaseModel:
    if model_class is None:
        model_class = _CONFIG_MAP.get(config_name)
        if model_class is None:
            raise ValueError(f"Unknown config: {config_name}. Available: {list(_CONFIG_MAP.keys())}")

    yaml_path = ARGS_DIR / f"{config_name}.yaml"

    try:
        if yaml_path.exists():
            with open(yaml_path) as f:
                raw = yaml.safe_load(f) or {}
        else:
            raw = {}

        return model_class.model_validate(raw)
    except Exception as e:
        logger.warning(f"Config validation failed for {config_name}: {e}, using defaults")
        return model_class()


@lru_cache(maxsize=1)
def get_config() -> FocusFlowConfig:
    """Load args/focusflow.yaml once per process."""
    return load_and_validate("focusflow")
