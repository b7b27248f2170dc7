"""Planning layer exports: breakdown rules, overlay resolution, inventory chain."""

from .breakdown import (
    consumption_driver,
    forecast_total,
    procurement_actual,
    procurement_total,
)
from .inventory import (
    PROJECTION_COLUMNS,
    calculate_inventory_end,
    find_week_index,
    first_negative_week,
    inventory_sign,
    projection_frame,
    recompute,
)
from .overlay import EffectiveWeek, OverlayResolver, base_week

__all__ = [
    "forecast_total",
    "procurement_actual",
    "procurement_total",
    "consumption_driver",
    "calculate_inventory_end",
    "recompute",
    "find_week_index",
    "projection_frame",
    "first_negative_week",
    "inventory_sign",
    "PROJECTION_COLUMNS",
    "EffectiveWeek",
    "OverlayResolver",
    "base_week",
]
