"""Centralized configuration using Pydantic Settings.

Configuration can be overridden via environment variables:
- OSMNAV_INGEST_HIGHWAY_WHITELIST='["residential", "primary"]'
- OSMNAV_ROUTING_ENFORCE_ONE_WAY=true
- OSMNAV_RENDER_BACKEND=folium
- OSMNAV_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_HIGHWAYS = [
    "residential",
    "motorway",
    "trunk",
    "primary",
    "secondary",
    "tertiary",
    "unclassified",
]


class IngestionConfig(BaseSettings):
    """Graph construction settings.

    Environment variables prefixed with OSMNAV_INGEST_.
    """

    model_config = SettingsConfigDict(env_prefix="OSMNAV_INGEST_")

    highway_whitelist: List[str] = Field(default_factory=lambda: list(DEFAULT_HIGHWAYS))
    default_speed_kmh: float = Field(default=50.0, gt=0)
    strict_references: bool = True
    restrict_to_largest_component: bool = True


class RoutingConfig(BaseSettings):
    """Path-finding settings.

    Environment variables prefixed with OSMNAV_ROUTING_.
    """

    model_config = SettingsConfigDict(env_prefix="OSMNAV_ROUTING_")

    enforce_one_way: bool = False


class RenderingConfig(BaseSettings):
    """Export and route annotation settings.

    Environment variables prefixed with OSMNAV_RENDER_.
    """

    model_config = SettingsConfigDict(env_prefix="OSMNAV_RENDER_")

    backend: Literal["graphviz", "folium"] = "graphviz"
    layout_program: str = "neato"
    route_color: str = "red"
    route_penwidth: float = 3.0
    marked_vertex_width: float = 0.2


class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Environment variables prefixed with OSMNAV_LOG_.
    """

    model_config = SettingsConfigDict(env_prefix="OSMNAV_LOG_")

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class AppConfig(BaseSettings):
    """Main application configuration aggregating all sub-configs.

        config = get_config()
        print(config.ingestion.highway_whitelist)
        print(config.routing.enforce_one_way)

    Environment variables prefixed with OSMNAV_.
    """

    model_config = SettingsConfigDict(env_prefix="OSMNAV_")

    ingestion: IngestionConfig = Field(default_factory=IngestionConfig)
    routing: RoutingConfig = Field(default_factory=RoutingConfig)
    rendering: RenderingConfig = Field(default_factory=RenderingConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    output_dir: Path = Field(default_factory=Path.cwd)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the singleton application configuration.

    Configuration is loaded once and cached. To reload configuration
    (e.g., in tests), use reset_config() first.
    """
    return AppConfig()


def reset_config() -> None:
    """Reset the configuration cache."""
    get_config.cache_clear()
