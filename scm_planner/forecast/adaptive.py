"""Run-rate 기반 시스템 baseline 예측.

과거 H주 실적/예산 비율(run-rate)을 [MIN_FACTOR, MAX_FACTOR]로 제한하여
예산에 곱한 값을 시스템 제안 baseline으로 사용합니다.
수동 입력(override)이 있으면 run-rate 계산 없이 그대로 사용합니다.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from ..core.config import CONFIG, ForecastConfig
from ..domain.models import WeeklyRecord

logger = logging.getLogger(__name__)


def clamp(value: float, minimum: float, maximum: float) -> float:
    """value를 [minimum, maximum] 범위로 제한합니다."""
    return min(maximum, max(minimum, value))


def round_half_up(value: float) -> int:
    """0.5를 올림하는 반올림 (Python 기본 round의 은행가 반올림과 다름)."""
    return int(np.floor(value + 0.5))


def calculate_run_rate_factor(
    records: Sequence[WeeklyRecord],
    current_index: int,
    *,
    config: Optional[ForecastConfig] = None,
) -> float:
    """
    현재 주차 직전 H주의 실적/예산 비율을 계산합니다.

    - 윈도우: records[max(0, current_index - H) : current_index]
    - 실적이 없는 주차는 0으로 계산
    - 예산 합계가 0이면 1.0 (0으로 나누지 않음)
    - 결과는 [min_factor, max_factor]로 제한

    Args:
        records: 시간순 주간 레코드
        current_index: 현재 주차 위치 (윈도우에 포함되지 않음)
        config: 예측 설정 (기본값: CONFIG.forecast)

    Returns:
        run-rate 계수
    """
    cfg = config or CONFIG.forecast
    window = list(records[max(0, current_index - cfg.hist_weeks) : max(0, current_index)])

    actuals = np.array(
        [r.sales_actuals if r.sales_actuals is not None else 0.0 for r in window],
        dtype=float,
    )
    budgets = np.array([r.sales_budget for r in window], dtype=float)

    sum_budget = float(budgets.sum())
    if sum_budget == 0:
        logger.debug("Run-rate budget sum is zero, using factor 1.0")
        return 1.0

    factor = float(actuals.sum()) / sum_budget
    return clamp(factor, cfg.min_factor, cfg.max_factor)


def calculate_baseline_forecast_system(sales_budget: float, run_rate_factor: float) -> int:
    """시스템 baseline = round(예산 × run-rate 계수)."""
    return round_half_up(sales_budget * run_rate_factor)


def calculate_adaptive_forecast(
    records: Sequence[WeeklyRecord],
    index: int,
    *,
    current_index: Optional[int] = None,
    override: Optional[float] = None,
    config: Optional[ForecastConfig] = None,
) -> float:
    """
    주차의 baseline 예측값을 반환합니다.

    수동 입력(override)이 있으면 그대로 반환하고(혼합하지 않음),
    없으면 run-rate 기반 시스템 baseline을 계산합니다.

    Args:
        records: 시간순 주간 레코드
        index: 대상 주차 위치
        current_index: run-rate 윈도우 기준 위치 (기본값: index)
        override: 사용자가 입력한 baseline
        config: 예측 설정

    Examples:
        >>> calculate_adaptive_forecast(records, 10, override=1234)
        1234
    """
    if override is not None:
        return override

    anchor = index if current_index is None else current_index
    factor = calculate_run_rate_factor(records, anchor, config=config)
    return calculate_baseline_forecast_system(records[index].sales_budget, factor)


class AdaptiveBaseline:
    """
    OverlayResolver의 baseline_provider로 사용하는 시스템 baseline 공급자.

    현재 주차 이후(현재 포함)는 run-rate 기반 시스템 baseline을,
    과거 주차는 레코드의 baseline을 원래 값으로 제공합니다.
    run-rate 계수는 생성 시점에 한 번만 계산합니다.
    """

    def __init__(
        self,
        records: Sequence[WeeklyRecord],
        current_index: int,
        *,
        config: Optional[ForecastConfig] = None,
    ) -> None:
        self.current_index = current_index
        self.factor = calculate_run_rate_factor(records, current_index, config=config)
        logger.debug(f"Adaptive baseline factor {self.factor:.3f} at index {current_index}")

    def __call__(self, index: int, record: WeeklyRecord) -> float:
        if index < self.current_index:
            return record.sales_forecast_breakdown.baseline
        return calculate_baseline_forecast_system(record.sales_budget, self.factor)
