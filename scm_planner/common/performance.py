"""
성능 모니터링 유틸리티

재고 체인 재계산처럼 편집마다 반복 호출되는 함수의 실행 시간을
측정하여 로깅하는 데코레이터를 제공합니다.
"""

from __future__ import annotations

import functools
import logging
import time
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

# 경고/오류 로그 임계값 (초)
WARN_THRESHOLD_SECONDS = 0.5
ERROR_THRESHOLD_SECONDS = 5.0


def measure_time(func: F) -> F:
    """
    함수 실행 시간을 측정하고 로깅하는 데코레이터.

    0.5초 이상이면 WARNING, 5초 이상이면 ERROR, 그 외에는 DEBUG 레벨로 로깅합니다.
    예외가 발생해도 경과 시간은 기록되며 예외는 그대로 전파됩니다.

    Examples:
        >>> @measure_time
        ... def recompute_all():
        ...     ...
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        start_time = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            _log_elapsed(func.__name__, time.perf_counter() - start_time)

    return wrapper  # type: ignore[return-value]


def _log_elapsed(name: str, elapsed: float) -> None:
    if elapsed >= ERROR_THRESHOLD_SECONDS:
        logger.error(
            f"SLOW: {name} took {elapsed:.3f}s (threshold: {ERROR_THRESHOLD_SECONDS}s)"
        )
    elif elapsed >= WARN_THRESHOLD_SECONDS:
        logger.warning(
            f"{name} took {elapsed:.3f}s (threshold: {WARN_THRESHOLD_SECONDS}s)"
        )
    else:
        logger.debug(f"{name} completed in {elapsed:.3f}s")
