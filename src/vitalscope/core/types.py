"""Core type definitions for vitalscope."""

from typing import TypeAlias

Milliseconds: TypeAlias = float
"""Platform timeline value in milliseconds.

Observation timestamps are passed through exactly as the platform reported
them (``performance.now()`` timeline), so every duration and window in the
engine shares this unit.
"""
