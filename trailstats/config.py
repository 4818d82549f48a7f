"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
"""

from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator, ConfigDict

from trailstats.shared.constants import (
    ElevationSource,
    ELEVATION_BATCH_SIZE,
    ELEVATION_BATCH_DELAY_SECONDS,
    DEFAULT_SIMPLIFY_TOLERANCE_M,
)


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # === Database ===
    database_url: str = Field(
        default="sqlite:///./trails.db",
        description="Track storage connection URL"
    )

    # === Elevation API ===
    elevation_api_url: str = Field(
        default="https://api.open-elevation.com/api/v1/lookup",
        description="Elevation API endpoint"
    )
    elevation_source: ElevationSource = Field(
        default=ElevationSource.AUTO,
        description="Elevation supplier used when none is requested"
    )
    elevation_default_source: ElevationSource = Field(
        default=ElevationSource.API,
        description="Supplier that 'auto' resolves to"
    )
    elevation_batch_size: int = Field(default=ELEVATION_BATCH_SIZE, ge=1)
    elevation_batch_delay_seconds: float = Field(
        default=ELEVATION_BATCH_DELAY_SECONDS, ge=0
    )
    elevation_request_timeout_seconds: float = Field(default=30.0)

    # === Terrain-RGB tiles ===
    mapbox_token: Optional[str] = Field(
        default=None,
        description="Mapbox access token for terrain-rgb tiles"
    )
    terrain_zoom: int = Field(default=13, ge=0, le=15)
    terrain_tile_url: str = Field(
        default="https://api.mapbox.com/v4/mapbox.terrain-rgb/{z}/{x}/{y}.pngraw"
    )

    # === GPX ===
    gpx_simplify_tolerance_m: float = Field(
        default=DEFAULT_SIMPLIFY_TOLERANCE_M, ge=0
    )

    # === Audit ===
    audit_batch_delay_ms: int = Field(default=600, ge=0)
    audit_min_diff_meters: float = Field(default=10.0)
    audit_min_diff_percent: float = Field(default=5.0)

    @field_validator('database_url')
    @classmethod
    def fix_postgres_url(cls, v: str) -> str:
        """Fix Render/Railway postgres:// URL to postgresql://"""
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    @field_validator('elevation_default_source')
    @classmethod
    def concrete_default_source(cls, v: ElevationSource) -> ElevationSource:
        """'auto' cannot resolve to itself."""
        if v == ElevationSource.AUTO:
            return ElevationSource.API
        return v

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
