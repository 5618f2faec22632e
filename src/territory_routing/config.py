"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="TRE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Territory Route Optimization API"
    api_prefix: str = "/api"
    catalog_file: Optional[Path] = Field(
        default=None,
        description="CSV territory catalog. A seeded synthetic catalog is used when unset.",
    )
    depot_code: str = "OFFICE"
    depot_latitude: float = Field(default=25.6866, ge=-90.0, le=90.0)
    depot_longitude: float = Field(default=-80.1917, ge=-180.0, le=180.0)
    cluster_count: int = Field(default=5, ge=1)
    kmeans_iterations: int = Field(default=10, ge=1)
    random_seed: int = Field(default=42)
    synthetic_territory_count: int = Field(default=22, ge=0)
    exact_search_max_points: int = Field(
        default=8,
        ge=0,
        description="Largest route size solved by bounded permutation search.",
    )
    permutation_budget: int = Field(default=5000, ge=1)
    recent_visit_days: int = Field(default=3, ge=0)
    travel_minutes_per_km: float = Field(default=1.0, gt=0.0)
    history_capacity: int = Field(default=100, ge=1)
    optimization_timeout_seconds: Optional[float] = Field(default=None, gt=0.0)
    optimization_workers: int = Field(default=4, ge=1)
    default_optimization_model: Literal[
        "distance-optimizer", "success-predictor", "territory-clusterer"
    ] = "distance-optimizer"
    working_days: tuple[str, ...] = Field(default=("MON", "TUE", "WED", "THU", "FRI"))

    @field_validator("catalog_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Optional[Path]:
        if value is None or value == "":
            return None
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("working_days", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
