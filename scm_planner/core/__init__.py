"""Core configuration exports."""

from .config import (
    CONFIG,
    CalendarConfig,
    ForecastConfig,
    InventoryConfig,
    PlannerConfig,
    SessionConfig,
)

__all__ = [
    "CONFIG",
    "CalendarConfig",
    "ForecastConfig",
    "InventoryConfig",
    "PlannerConfig",
    "SessionConfig",
]
