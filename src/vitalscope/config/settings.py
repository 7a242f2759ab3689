"""Configuration settings using Pydantic Settings.

Provides typed engine configuration with environment variable support.

Usage:
    from vitalscope.config import EngineSettings

    # Load from environment variables (VITALSCOPE_*)
    settings = EngineSettings()

    # Or override with explicit values
    settings = EngineSettings(dwell_floor_ms=500.0, correlation_epsilon_ms=16.0)
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for collection, correlation and aggregation.

    Attributes:
        correlation_epsilon_ms: Half-width of the window used for
            instantaneous primaries (0 = exact instant only).
        dwell_floor_ms: Elements seen for less than this are reported as
            under threshold.
        resolver_max_depth: Maximum number of segments in a subtree path.
        test_attribute: Attribute treated as a stable test identifier.
        interaction_percentile: Quantile reported as INP (0.98 = p98).
        blocking_threshold_ms: Long-frame time beyond this counts as blocking.
        top_offenders: Length of the detail lists in a snapshot.
        exclude_recent_input: Drop layout shifts flagged hadRecentInput from CLS.

    Environment Variables:
        VITALSCOPE_CORRELATION_EPSILON_MS
        VITALSCOPE_DWELL_FLOOR_MS
        VITALSCOPE_RESOLVER_MAX_DEPTH
        VITALSCOPE_TEST_ATTRIBUTE
        VITALSCOPE_INTERACTION_PERCENTILE
        VITALSCOPE_BLOCKING_THRESHOLD_MS
        VITALSCOPE_TOP_OFFENDERS
        VITALSCOPE_EXCLUDE_RECENT_INPUT
    """

    model_config = SettingsConfigDict(
        env_prefix="VITALSCOPE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    correlation_epsilon_ms: float = Field(default=0.0, ge=0.0)
    dwell_floor_ms: float = Field(default=1000.0, ge=0.0)
    resolver_max_depth: int = Field(default=5, ge=1)
    test_attribute: str = "data-testid"
    interaction_percentile: float = Field(default=0.98, gt=0.0, le=1.0)
    blocking_threshold_ms: float = Field(default=50.0, ge=0.0)
    top_offenders: int = Field(default=10, ge=1)
    exclude_recent_input: bool = True
