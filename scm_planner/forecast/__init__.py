"""Adaptive forecast estimation."""

from .adaptive import (
    AdaptiveBaseline,
    calculate_adaptive_forecast,
    calculate_baseline_forecast_system,
    calculate_run_rate_factor,
    clamp,
    round_half_up,
)

__all__ = [
    "AdaptiveBaseline",
    "calculate_adaptive_forecast",
    "calculate_baseline_forecast_system",
    "calculate_run_rate_factor",
    "clamp",
    "round_half_up",
]
