"""
편집 가능 필드 분류 및 예측 테이블 행 정의

변경(Change)은 필드 종류에 따라 주차(week) 또는 주문번호(order_id)로
식별됩니다. 문자열 비교 대신 열거형과 명시적인 구분자 타입으로
필드 분류를 표현합니다.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional


class Discriminator(str, Enum):
    """변경 키의 두 번째 구성요소 종류"""

    WEEK = "week"
    ORDER = "order"


class ChangeField(str, Enum):
    """사용자가 수정할 수 있는 필드 목록"""

    FORECAST_BASELINE = "forecastBaseline"
    FORECAST_PROMO_KARTON = "forecastPromoKarton"
    FORECAST_PROMO_DISPLAYS = "forecastPromoDisplays"
    PROCUREMENT_FORECAST = "procurementForecast"
    PO_LINK = "poLink"
    EINKAUF_MENGE = "einkauf_menge"
    VERKAUF_MENGE = "verkauf_menge"

    @property
    def discriminator(self) -> Discriminator:
        """이 필드의 변경이 주차/주문번호 중 무엇으로 식별되는지 반환합니다."""
        return _DISCRIMINATORS[self]

    @property
    def supports_day(self) -> bool:
        """요일 단위(월~금) 변경을 허용하는 필드인지 여부."""
        return self in _DAY_FIELDS

    @property
    def affects_inventory(self) -> bool:
        """재고 체인 재계산이 필요한 필드인지 여부."""
        return self in _INVENTORY_FIELDS


_DISCRIMINATORS: dict[ChangeField, Discriminator] = {
    ChangeField.FORECAST_BASELINE: Discriminator.WEEK,
    ChangeField.FORECAST_PROMO_KARTON: Discriminator.WEEK,
    ChangeField.FORECAST_PROMO_DISPLAYS: Discriminator.WEEK,
    ChangeField.PROCUREMENT_FORECAST: Discriminator.WEEK,
    ChangeField.PO_LINK: Discriminator.WEEK,
    ChangeField.EINKAUF_MENGE: Discriminator.ORDER,
    ChangeField.VERKAUF_MENGE: Discriminator.ORDER,
}

_DAY_FIELDS = frozenset({ChangeField.PROCUREMENT_FORECAST})

_INVENTORY_FIELDS = frozenset(
    {
        ChangeField.FORECAST_BASELINE,
        ChangeField.FORECAST_PROMO_KARTON,
        ChangeField.FORECAST_PROMO_DISPLAYS,
        ChangeField.PROCUREMENT_FORECAST,
    }
)


# ============================================================
# 예측 테이블 행 정의
# ============================================================

@dataclass(frozen=True)
class RowDefinition:
    """
    예측 테이블의 한 행에 대한 정의.

    Attributes:
        id: 행 식별자
        label: 표시 라벨
        level: 들여쓰기 단계 (0~2)
        data_path: WeeklyRecord 내 값 경로 (예: "sales_forecast_breakdown.baseline")
        parent_id: 상위 행 ID
        has_children: 하위 행 존재 여부
        editable: 현재/미래 주차에서 편집 가능
        editable_in_future: 미래 주차에서만 편집 가능
        calculated: 계산된 값 여부
        change_field: 편집 시 기록할 변경 필드
        clickable_for_po_linking: PO 연결 팝오버 대상 여부
    """

    id: str
    label: str
    level: int
    data_path: str
    parent_id: Optional[str] = None
    has_children: bool = False
    editable: bool = False
    editable_in_future: bool = False
    calculated: bool = False
    change_field: Optional[ChangeField] = None
    clickable_for_po_linking: bool = False


ROW_DEFINITIONS: tuple[RowDefinition, ...] = (
    RowDefinition(
        id="lagerbestandAnfang",
        label="Lagerbestand (Anfangs KW)",
        level=0,
        data_path="inventory_start",
    ),
    RowDefinition(
        id="salesBudget",
        label="Sales Budget Stück",
        level=0,
        data_path="sales_budget",
        has_children=True,
    ),
    RowDefinition(
        id="salesBudget_baseline",
        label="_Baseline",
        level=1,
        data_path="sales_budget_breakdown.baseline",
        parent_id="salesBudget",
    ),
    RowDefinition(
        id="salesBudget_promo",
        label="_Promo",
        level=1,
        data_path="sales_budget_breakdown.promo",
        parent_id="salesBudget",
        has_children=True,
        calculated=True,
    ),
    RowDefinition(
        id="salesBudget_promo_kartonware",
        label="__Promo (Kartonware)",
        level=2,
        data_path="sales_budget_breakdown.promo.kartonware",
        parent_id="salesBudget_promo",
    ),
    RowDefinition(
        id="salesBudget_promo_displays",
        label="__Promo (für auf Displays)",
        level=2,
        data_path="sales_budget_breakdown.promo.displays",
        parent_id="salesBudget_promo",
    ),
    RowDefinition(
        id="salesLatestForecast",
        label="Sales Latest Forecast Stück",
        level=0,
        data_path="sales_forecast_breakdown",
        has_children=True,
        calculated=True,
    ),
    RowDefinition(
        id="salesForecast_baseline",
        label="_Baseline",
        level=1,
        data_path="sales_forecast_breakdown.baseline",
        parent_id="salesLatestForecast",
        editable_in_future=True,
        change_field=ChangeField.FORECAST_BASELINE,
    ),
    RowDefinition(
        id="salesForecast_promo",
        label="_Promo",
        level=1,
        data_path="sales_forecast_breakdown.promo",
        parent_id="salesLatestForecast",
        has_children=True,
        calculated=True,
    ),
    RowDefinition(
        id="salesForecast_promo_kartonware",
        label="__Promo (Kartonware)",
        level=2,
        data_path="sales_forecast_breakdown.promo.kartonware",
        parent_id="salesForecast_promo",
        editable_in_future=True,
        change_field=ChangeField.FORECAST_PROMO_KARTON,
    ),
    RowDefinition(
        id="salesForecast_promo_displays",
        label="__Promo (für auf Displays)",
        level=2,
        data_path="sales_forecast_breakdown.promo.displays",
        parent_id="salesForecast_promo",
        editable_in_future=True,
        change_field=ChangeField.FORECAST_PROMO_DISPLAYS,
    ),
    RowDefinition(
        id="salesOrderImSystem",
        label="Sales Order im System",
        level=0,
        data_path="sales_order_in_system",
    ),
    RowDefinition(
        id="salesActuals",
        label="Sales Actuals",
        level=0,
        data_path="sales_actuals",
    ),
    RowDefinition(
        id="procurementPo",
        label="Procurement PO Lieferant",
        level=0,
        data_path="procurement_breakdown",
        has_children=True,
        calculated=True,
    ),
    RowDefinition(
        id="procurement_forecast",
        label="_Procurement Forecast",
        level=1,
        data_path="procurement_breakdown.forecast",
        parent_id="procurementPo",
        editable=True,
        change_field=ChangeField.PROCUREMENT_FORECAST,
        clickable_for_po_linking=True,
    ),
    RowDefinition(
        id="procurement_bestellt",
        label="_PO bestellt",
        level=1,
        data_path="procurement_breakdown.ordered",
        parent_id="procurementPo",
    ),
    RowDefinition(
        id="procurement_geliefert",
        label="_PO geliefert",
        level=1,
        data_path="procurement_breakdown.delivered",
        parent_id="procurementPo",
    ),
    RowDefinition(
        id="lagerbestandEnde",
        label="Lagerbestand (Ende KW)",
        level=0,
        data_path="inventory_end",
        calculated=True,
    ),
)

_ROWS_BY_ID: dict[str, RowDefinition] = {row.id: row for row in ROW_DEFINITIONS}


def get_row(row_id: str) -> RowDefinition:
    """행 ID로 행 정의를 조회합니다. 없으면 KeyError."""
    return _ROWS_BY_ID[row_id]


def visible_rows(expanded: Iterable[str]) -> list[RowDefinition]:
    """
    펼쳐진 행 집합에 따라 화면에 보이는 행 목록을 반환합니다.

    레벨 0 행은 항상 보이고, 하위 행은 모든 조상 행이
    펼쳐져 있을 때만 보입니다.

    Args:
        expanded: 펼쳐진 상위 행 ID 목록

    Returns:
        정의 순서를 유지한 가시 행 리스트
    """
    expanded_set = set(expanded)
    visible: list[RowDefinition] = []

    for row in ROW_DEFINITIONS:
        parent_id = row.parent_id
        shown = True
        while parent_id is not None:
            if parent_id not in expanded_set:
                shown = False
                break
            parent_id = _ROWS_BY_ID[parent_id].parent_id
        if shown:
            visible.append(row)

    return visible
