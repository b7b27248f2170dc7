import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scm_planner.domain.models import (  # noqa: E402
    ProcurementBreakdown,
    SalesBreakdown,
    WeeklyRecord,
)


class FakeClock:
    """호출할 때마다 1분씩 증가하는 테스트용 시계."""

    def __init__(self, start: datetime = datetime(2025, 3, 24, 9, 0)):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + timedelta(minutes=1)
        return current


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def make_week(
    week: int,
    year: int = 2025,
    *,
    inventory_start: float = 0,
    budget: float = 0,
    baseline: float = 0,
    kartonware: float = 0,
    displays: float = 0,
    orders: float = 0,
    procurement_forecast: float = 0,
    ordered: float = 0,
    delivered: float = 0,
    actuals=None,
    daily=None,
) -> WeeklyRecord:
    """테스트용 주간 레코드 생성 헬퍼."""
    return WeeklyRecord(
        week=f"KW{week}",
        year=year,
        inventory_start=inventory_start,
        sales_budget=budget,
        sales_budget_breakdown=SalesBreakdown.of(budget),
        sales_forecast_breakdown=SalesBreakdown.of(baseline, kartonware, displays),
        sales_order_in_system=orders,
        procurement_breakdown=ProcurementBreakdown(
            forecast=procurement_forecast, ordered=ordered, delivered=delivered
        ),
        sales_actuals=actuals,
        procurement_daily=daily,
    )


@pytest.fixture
def three_weeks() -> list[WeeklyRecord]:
    """KW20~KW22, 시작 재고 2000."""
    return [
        make_week(20, inventory_start=2000, baseline=1000, orders=700),
        make_week(21, baseline=500, orders=0, procurement_forecast=300),
        make_week(22, baseline=400, orders=600, ordered=1000),
    ]
