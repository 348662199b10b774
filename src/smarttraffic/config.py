"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="SMARTTRAFFIC_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "SmartTraffic AI API"
    api_prefix: str = "/api"
    data_root: Path = Field(default=Path("data"), description="Root directory for stored reports and data files.")
    cities_file: Optional[Path] = Field(
        default=None,
        description="Optional xlsx/csv city catalog with City, Latitude and Longitude columns.",
    )

    # TomTom routing, search and traffic flow
    tomtom_api_key: Optional[str] = Field(default=None, description="TomTom developer API key.")
    routing_base_url: str = "https://api.tomtom.com/routing/1"
    search_base_url: str = "https://api.tomtom.com/search/2"
    traffic_base_url: str = "https://api.tomtom.com/traffic/services/4"
    provider_timeout_seconds: float = Field(default=15.0, gt=0.0)
    provider_max_retries: int = Field(default=3, ge=0)
    provider_backoff_seconds: float = Field(default=1.0, ge=0.0)
    max_alternatives: int = Field(default=2, ge=0, le=5)
    default_preference: Literal["Fastest", "Shortest", "Balanced"] = "Balanced"
    geocoding_country_set: str = "KE"
    geocoding_limit: int = Field(default=7, ge=1, le=100)
    flow_zoom: int = Field(default=10, ge=0, le=22)
    report_default_radius_km: float = Field(default=5.0, gt=0.0)
    route_simplify_factor: int = Field(
        default=1,
        ge=1,
        description="Keep every nth geometry point of the selected route (1 keeps all).",
    )

    # OpenRouter (OpenAI-compatible) completions
    llm_api_key: Optional[str] = None
    llm_routing_api_key: Optional[str] = Field(
        default=None,
        description="Separate key for route summaries; falls back to llm_api_key.",
    )
    llm_base_url: str = "https://openrouter.ai/api/v1"
    llm_model: str = "deepseek/deepseek-chat"
    llm_routing_model: str = "deepseek/deepseek-chat"
    llm_temperature: float = Field(default=0.1, ge=0.0, le=2.0)
    llm_max_tokens: int = Field(default=1024, ge=1)
    llm_timeout_seconds: float = Field(default=30.0, gt=0.0)
    ai_route_summaries: bool = True
    site_url: str = "http://localhost:5173"
    site_title: str = "SmartTraffic AI"

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )
    reports_table: str = "traffic_reports"

    @field_validator("data_root", "cities_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path | None:
        if value is None or value == "":
            return None
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
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
