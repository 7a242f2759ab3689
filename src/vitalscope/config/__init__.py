"""Configuration module using Pydantic Settings.

Provides typed engine configuration with environment variable support.

Usage:
    from vitalscope.config import EngineSettings

    settings = EngineSettings(top_offenders=5)
"""

from vitalscope.config.settings import EngineSettings

__all__ = [
    "EngineSettings",
]
