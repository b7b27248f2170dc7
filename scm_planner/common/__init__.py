"""공통 유틸리티 모듈."""

from .performance import measure_time

__all__ = ["measure_time"]
