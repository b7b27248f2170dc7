"""Weekly inventory recurrence.

주간 재고 체인을 계산합니다.

    inventory_start[0] = 초기 재고
    inventory_start[i] = inventory_end[i-1]
    inventory_end[i]   = inventory_start[i]
                         - max(판매 예측 합계, 시스템 내 주문)
                         + 조달 수량

음수 재고(결품/백오더)는 그대로 다음 주차로 전파되며 엔진 내부에서
0으로 자르지 않습니다.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from ..common.performance import measure_time
from .breakdown import consumption_driver, forecast_total, procurement_total
from .overlay import Resolver, base_week
from ..domain.models import WeeklyRecord

logger = logging.getLogger(__name__)


PROJECTION_COLUMNS = [
    "week",
    "year",
    "week_id",
    "inventory_start",
    "sales_budget",
    "forecast_baseline",
    "forecast_kartonware",
    "forecast_displays",
    "forecast_total",
    "sales_order_in_system",
    "consumption",
    "sales_actuals",
    "procurement_forecast",
    "procurement_ordered",
    "procurement_delivered",
    "procurement_total",
    "inventory_end",
]


def calculate_inventory_end(
    inventory_start: float,
    sales_forecast: float,
    sales_order_in_system: float,
    procurement: float,
) -> float:
    """
    주 종료 재고를 계산합니다.

    Examples:
        >>> calculate_inventory_end(2000, 1000, 700, 0)
        1000
        >>> calculate_inventory_end(400, 600, 0, 0)
        -200
    """
    consumption = consumption_driver(sales_forecast, sales_order_in_system)
    return inventory_start - consumption + procurement


@measure_time
def recompute(
    records: Sequence[WeeklyRecord],
    from_index: int = 0,
    *,
    initial_inventory: Optional[float] = None,
    resolve: Optional[Resolver] = None,
) -> list[WeeklyRecord]:
    """
    from_index부터 마지막 주차까지 재고 체인을 다시 계산합니다.

    from_index 이전 레코드는 그대로 두고, 이후 레코드는 시작 재고를
    직전 주차의 종료 재고로 다시 채운 새 인스턴스로 교체합니다.
    저장된 inventory_start 값은 첫 주차 외에는 읽지 않습니다.
    같은 입력에 대해 여러 번 호출해도 결과가 같습니다.

    Args:
        records: 시간순으로 정렬된 주간 레코드
        from_index: 재계산 시작 위치 (변경이 발생한 주차)
        initial_inventory: 첫 주차 시작 재고. None이면 레코드 값을 사용.
            from_index > 0 이면 무시됩니다.
        resolve: 주차별 유효 값 리졸버 (예: OverlayResolver).
            None이면 레코드 값을 그대로 사용합니다.

    Returns:
        새 레코드 리스트 (입력 시퀀스는 변경되지 않음)
    """
    result = list(records)
    if not result:
        return result

    start_index = min(max(0, int(from_index)), len(result))
    resolver = resolve or base_week
    logger.debug(f"Recomputing inventory chain for weeks {start_index}..{len(result) - 1}")

    for i in range(start_index, len(result)):
        record = result[i]

        # ========================================
        # 시작 재고: 체인 불변식
        # ========================================
        if i == 0:
            start = (
                record.inventory_start
                if initial_inventory is None
                else initial_inventory
            )
        else:
            start = result[i - 1].inventory_end

        # ========================================
        # 유효 값 기준으로 종료 재고 계산
        # ========================================
        effective = resolver(i, record)
        end = calculate_inventory_end(
            start,
            forecast_total(effective.forecast),
            record.sales_order_in_system,
            procurement_total(effective.procurement),
        )
        result[i] = replace(record, inventory_start=start, inventory_end=end)

    return result


def find_week_index(records: Sequence[WeeklyRecord], week_id: str) -> Optional[int]:
    """주차 ID("2025-KW13")의 위치를 반환합니다. 없으면 None."""
    for index, record in enumerate(records):
        if record.week_id == week_id:
            return index
    return None


def projection_frame(
    records: Sequence[WeeklyRecord],
    *,
    resolve: Optional[Resolver] = None,
) -> pd.DataFrame:
    """
    재계산된 레코드를 표시용 DataFrame으로 변환합니다 (주차당 1행).

    판매 예측/조달 컬럼은 리졸버의 유효 값이며, 재고 컬럼은 레코드에
    저장된 값입니다. 따라서 먼저 같은 리졸버로 :func:`recompute`를 호출해야 합니다.

    Returns:
        PROJECTION_COLUMNS 스키마의 DataFrame. 레코드가 없으면 빈 DataFrame.
    """
    if not records:
        return pd.DataFrame(columns=PROJECTION_COLUMNS)

    resolver = resolve or base_week
    rows = []
    for i, record in enumerate(records):
        effective = resolver(i, record)
        total = forecast_total(effective.forecast)
        rows.append(
            {
                "week": record.week,
                "year": record.year,
                "week_id": record.week_id,
                "inventory_start": record.inventory_start,
                "sales_budget": record.sales_budget,
                "forecast_baseline": effective.forecast.baseline,
                "forecast_kartonware": effective.forecast.promo.kartonware,
                "forecast_displays": effective.forecast.promo.displays,
                "forecast_total": total,
                "sales_order_in_system": record.sales_order_in_system,
                "consumption": consumption_driver(total, record.sales_order_in_system),
                "sales_actuals": (
                    np.nan if record.sales_actuals is None else record.sales_actuals
                ),
                "procurement_forecast": effective.procurement.forecast,
                "procurement_ordered": effective.procurement.ordered,
                "procurement_delivered": effective.procurement.delivered,
                "procurement_total": procurement_total(effective.procurement),
                "inventory_end": record.inventory_end,
            }
        )

    return pd.DataFrame(rows, columns=PROJECTION_COLUMNS)


def first_negative_week(records: Sequence[WeeklyRecord]) -> Optional[WeeklyRecord]:
    """종료 재고가 처음으로 음수가 되는 주차 (결품 예상 주차). 없으면 None."""
    for record in records:
        if record.inventory_end < 0:
            return record
    return None


def inventory_sign(value: float) -> str:
    """재고 값 색상 구분용 부호: "positive" / "negative" / "zero"."""
    if value > 0:
        return "positive"
    if value < 0:
        return "negative"
    return "zero"
