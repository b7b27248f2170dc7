"""Effective-value resolution for weekly records.

변경 저장소의 오버레이를 주간 레코드에 적용하여, 재고 체인 계산에
사용할 "유효" 판매 예측/조달 분해를 만듭니다. 원본 레코드는 변경하지 않습니다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, Optional

from ..core.config import CONFIG
from ..domain.fields import ChangeField
from ..domain.models import (
    DailyProcurement,
    ProcurementBreakdown,
    SalesBreakdown,
    WeeklyRecord,
)
from ..session.changes import ChangeStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EffectiveWeek:
    """오버레이가 반영된 한 주차의 계산 입력값"""

    forecast: SalesBreakdown
    procurement: ProcurementBreakdown
    daily: Optional[DailyProcurement] = None


Resolver = Callable[[int, WeeklyRecord], EffectiveWeek]
BaselineProvider = Callable[[int, WeeklyRecord], float]


def base_week(index: int, record: WeeklyRecord) -> EffectiveWeek:
    """오버레이 없이 레코드 값을 그대로 사용하는 기본 리졸버."""
    return EffectiveWeek(
        forecast=record.sales_forecast_breakdown,
        procurement=record.procurement_breakdown,
        daily=record.procurement_daily,
    )


class OverlayResolver:
    """
    한 품목의 변경 저장소를 읽어 주차별 유효 값을 계산하는 리졸버.

    - 판매 예측: baseline / Kartonware / Displays 각각 변경값 우선
    - 조달 예측: 주 단위 변경과 요일 단위 변경 중 나중에 입력된 쪽을 사용
      (요일 단위가 적용되면 월~금 유효 값의 합계)
    - 발주/입고(PO) 수량은 오버레이 대상이 아님

    Args:
        changes: 세션의 변경 저장소
        article_id: 대상 품목 ID
        baseline_provider: baseline의 원래 값을 제공하는 함수.
            지정하지 않으면 레코드의 baseline을 사용합니다.
            (예: :class:`~scm_planner.forecast.adaptive.AdaptiveBaseline`)
    """

    def __init__(
        self,
        changes: ChangeStore,
        article_id: str,
        *,
        baseline_provider: Optional[BaselineProvider] = None,
    ) -> None:
        self.changes = changes
        self.article_id = article_id
        self.baseline_provider = baseline_provider

    def __call__(self, index: int, record: WeeklyRecord) -> EffectiveWeek:
        daily = self.effective_daily(record)
        return EffectiveWeek(
            forecast=self.effective_forecast(index, record),
            procurement=replace(
                record.procurement_breakdown,
                forecast=self._effective_procurement_forecast(record, daily),
            ),
            daily=daily,
        )

    def effective_forecast(self, index: int, record: WeeklyRecord) -> SalesBreakdown:
        week = record.week_id
        base = record.sales_forecast_breakdown

        original_baseline = (
            self.baseline_provider(index, record)
            if self.baseline_provider is not None
            else base.baseline
        )
        resolve = self.changes.get_effective_value
        return SalesBreakdown.of(
            resolve(self.article_id, ChangeField.FORECAST_BASELINE, original_baseline, week),
            resolve(
                self.article_id,
                ChangeField.FORECAST_PROMO_KARTON,
                base.promo.kartonware,
                week,
            ),
            resolve(
                self.article_id,
                ChangeField.FORECAST_PROMO_DISPLAYS,
                base.promo.displays,
                week,
            ),
        )

    def effective_daily(self, record: WeeklyRecord) -> Optional[DailyProcurement]:
        """요일 단위 변경을 반영한 월~금 조달 예측. 요일 데이터/변경이 없으면 None."""
        day_changes = self.changes.get_day_changes(
            self.article_id, ChangeField.PROCUREMENT_FORECAST, record.week_id
        )
        if record.procurement_daily is None and not day_changes:
            return None

        original = record.procurement_daily or DailyProcurement()
        values = {
            day: (day_changes[day].new_value if day in day_changes else original.get(day))
            for day in CONFIG.calendar.weekday_keys
        }
        return DailyProcurement(**values)

    def _effective_procurement_forecast(
        self, record: WeeklyRecord, daily: Optional[DailyProcurement]
    ) -> float:
        week = record.week_id
        week_change = self.changes.get_change_for_cell(
            self.article_id, ChangeField.PROCUREMENT_FORECAST, week
        )
        day_changes = self.changes.get_day_changes(
            self.article_id, ChangeField.PROCUREMENT_FORECAST, week
        )

        if day_changes and daily is not None:
            latest_day = max(change.timestamp for change in day_changes.values())
            if week_change is None or latest_day >= week_change.timestamp:
                logger.debug(f"{self.article_id}/{week}: procurement forecast from days")
                return daily.total

        if week_change is not None:
            return week_change.new_value
        return record.procurement_breakdown.forecast
