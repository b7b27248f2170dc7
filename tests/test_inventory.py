"""
재고 체인 계산 테스트

breakdown 규칙, recompute 체인 불변식, 음수 재고 전파, 표시용 DataFrame을 테스트합니다.
"""
from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from conftest import make_week
from scm_planner.domain.models import (
    POEntry,
    ProcurementBreakdown,
    PromoBreakdown,
    SalesBreakdown,
)
from scm_planner.planning import (
    PROJECTION_COLUMNS,
    calculate_inventory_end,
    consumption_driver,
    find_week_index,
    first_negative_week,
    forecast_total,
    inventory_sign,
    procurement_actual,
    procurement_total,
    projection_frame,
    recompute,
)


# ============================================================
# Breakdown 규칙
# ============================================================

def test_forecast_total_sums_baseline_and_promo():
    """판매 예측 합계 = baseline + Kartonware + Displays"""
    breakdown = SalesBreakdown(800, PromoBreakdown(100, 50))
    assert forecast_total(breakdown) == 950


def test_procurement_total_prefers_actual_pos():
    """발주+입고가 있으면 예측 대신 실제 PO 수량 사용"""
    breakdown = ProcurementBreakdown(forecast=100, ordered=5, delivered=3)
    assert procurement_actual(breakdown) == 8
    assert procurement_total(breakdown) == 8


def test_procurement_total_falls_back_to_forecast():
    """발주/입고가 없으면 조달 예측 사용"""
    assert procurement_total(ProcurementBreakdown(forecast=50)) == 50
    assert procurement_total(ProcurementBreakdown()) == 0


def test_procurement_breakdown_from_po_lists():
    """PO 목록 수량 합산"""
    breakdown = ProcurementBreakdown.from_po_lists(
        40,
        [POEntry("PO-1", 10), POEntry("PO-2", 15)],
        [POEntry("PO-3", 5)],
    )
    assert breakdown.ordered == 25
    assert breakdown.delivered == 5
    assert procurement_total(breakdown) == 30


def test_consumption_driver_takes_larger_value():
    """소비량 = max(판매 예측, 시스템 내 주문)"""
    assert consumption_driver(1000, 700) == 1000
    assert consumption_driver(300, 700) == 700


# ============================================================
# 종료 재고 계산
# ============================================================

def test_calculate_inventory_end_scenario():
    """2000 - max(1000, 700) + 0 = 1000"""
    assert calculate_inventory_end(2000, 1000, 700, 0) == 1000


def test_calculate_inventory_end_negative_not_clamped():
    """음수 재고는 0으로 자르지 않음"""
    assert calculate_inventory_end(400, 600, 0, 0) == -200


# ============================================================
# recompute 체인
# ============================================================

def test_recompute_chain_invariant(three_weeks):
    """각 주차 시작 재고 = 직전 주차 종료 재고"""
    result = recompute(three_weeks)

    assert [r.inventory_end for r in result] == [1000, 800, 1200]
    for previous, current in zip(result, result[1:]):
        assert current.inventory_start == previous.inventory_end


def test_recompute_end_to_end_next_start():
    """종료 재고 1000이 다음 주차 시작 재고가 됨"""
    records = [
        make_week(10, inventory_start=2000, baseline=1000, orders=700),
        make_week(11, inventory_start=999),
    ]
    result = recompute(records)

    assert result[0].inventory_end == 1000
    assert result[1].inventory_start == 1000


def test_recompute_negative_inventory_propagates():
    """-200 재고가 다음 주차 시작 재고로 그대로 전파"""
    records = [
        make_week(10, inventory_start=400, baseline=600),
        make_week(11, baseline=100),
    ]
    result = recompute(records)

    assert result[0].inventory_end == -200
    assert result[1].inventory_start == -200
    assert result[1].inventory_end == -300


def test_recompute_initial_inventory_override(three_weeks):
    """initial_inventory 지정 시 첫 주차 시작 재고를 대체"""
    result = recompute(three_weeks, initial_inventory=500)

    assert result[0].inventory_start == 500
    assert result[0].inventory_end == -500


def test_recompute_from_index_keeps_earlier_weeks(three_weeks):
    """from_index 이전 주차는 변경되지 않음"""
    first = recompute(three_weeks)
    changed = list(first)
    changed[1] = make_week(21, baseline=100, procurement_forecast=300)

    result = recompute(changed, from_index=1)

    assert result[0] is changed[0]
    assert result[1].inventory_start == 1000
    assert result[1].inventory_end == 1200
    assert result[2].inventory_start == 1200


def test_recompute_is_idempotent(three_weeks):
    """같은 입력으로 반복 호출해도 결과 동일"""
    once = recompute(three_weeks)
    twice = recompute(once)
    assert once == twice


def test_recompute_does_not_mutate_input(three_weeks):
    """입력 리스트와 레코드는 변경되지 않음"""
    snapshot = list(three_weeks)
    recompute(three_weeks)

    assert three_weeks == snapshot
    assert three_weeks[0].inventory_end == 0


def test_recompute_empty_and_out_of_range():
    """빈 입력과 범위 밖 from_index 처리"""
    assert recompute([]) == []

    records = [make_week(1, inventory_start=10)]
    assert recompute(records, from_index=5) == records


def test_find_week_index(three_weeks):
    """주차 ID로 위치 검색"""
    assert find_week_index(three_weeks, "2025-KW21") == 1
    assert find_week_index(three_weeks, "2024-KW21") is None


# ============================================================
# 표시용 DataFrame / 결품 감지
# ============================================================

def test_projection_frame_columns_and_values(three_weeks):
    """주차당 1행, 파생 컬럼 포함"""
    frame = projection_frame(recompute(three_weeks))

    assert list(frame.columns) == PROJECTION_COLUMNS
    assert len(frame) == 3
    assert frame["week_id"].tolist() == ["2025-KW20", "2025-KW21", "2025-KW22"]
    assert frame["consumption"].tolist() == [1000, 500, 600]
    assert frame["procurement_total"].tolist() == [0, 300, 1000]
    assert frame["inventory_end"].tolist() == [1000, 800, 1200]
    assert np.isnan(frame.loc[0, "sales_actuals"])


def test_projection_frame_empty():
    """레코드가 없으면 빈 DataFrame"""
    frame = projection_frame([])
    assert frame.empty
    assert list(frame.columns) == PROJECTION_COLUMNS


def test_first_negative_week():
    """처음으로 음수 재고가 되는 주차"""
    records = recompute(
        [
            make_week(10, inventory_start=400, baseline=300),
            make_week(11, baseline=300),
            make_week(12, baseline=300),
        ]
    )
    assert first_negative_week(records).week == "KW11"
    assert first_negative_week(recompute([make_week(1, inventory_start=5)])) is None


@pytest.mark.parametrize(
    "value, expected",
    [(10, "positive"), (-1, "negative"), (0, "zero")],
)
def test_inventory_sign(value, expected):
    """재고 부호 분류"""
    assert inventory_sign(value) == expected


def test_projection_frame_matches_manual_frame():
    """단일 주차 DataFrame 값 비교"""
    records = recompute([make_week(5, inventory_start=100, baseline=40, actuals=35)])
    frame = projection_frame(records)

    expected = pd.DataFrame(
        {"inventory_start": [100], "forecast_total": [40], "inventory_end": [60]}
    )
    pd.testing.assert_frame_equal(
        frame[["inventory_start", "forecast_total", "inventory_end"]],
        expected,
        check_dtype=False,
    )
