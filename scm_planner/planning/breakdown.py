"""Breakdown aggregation rules.

판매 예측 합계와 실제 적용되는 조달 수량을 계산하는 순수 함수 모음입니다.
"""

from __future__ import annotations

from ..domain.models import ProcurementBreakdown, SalesBreakdown


def forecast_total(breakdown: SalesBreakdown) -> float:
    """
    판매 예측(또는 예산) 분해의 합계를 계산합니다.

    합계 = baseline + promo.kartonware + promo.displays

    Examples:
        >>> forecast_total(SalesBreakdown.of(800, 100, 100))
        1000
    """
    return breakdown.baseline + breakdown.promo.kartonware + breakdown.promo.displays


def procurement_actual(breakdown: ProcurementBreakdown) -> float:
    """발주(ordered) + 입고(delivered) 수량 합계."""
    return breakdown.ordered + breakdown.delivered


def procurement_total(breakdown: ProcurementBreakdown) -> float:
    """
    해당 주차에 실제 반영되는 조달 수량을 계산합니다.

    발주 또는 입고된 PO가 하나라도 있으면(일부만 있어도) PO 합계만 사용하고
    예측값은 무시합니다. PO가 전혀 없으면 조달 예측값을 사용합니다.

    Examples:
        >>> procurement_total(ProcurementBreakdown(forecast=100, ordered=5, delivered=3))
        8
        >>> procurement_total(ProcurementBreakdown(forecast=50))
        50
    """
    actual = procurement_actual(breakdown)
    if actual > 0:
        return actual
    return breakdown.forecast


def consumption_driver(forecast: float, orders_in_system: float) -> float:
    """
    재고에서 차감할 판매 소비량.

    예측과 시스템 내 주문 중 더 큰 값(더 구속력 있는 수요)을 사용하며,
    두 값을 합산하지 않습니다.
    """
    return max(forecast, orders_in_system)
