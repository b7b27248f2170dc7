"""
변경(오버레이) 저장소 테스트

유효 값 조회, 키당 단일 변경, 최신순 이력, 요일 단위 키, 편집 승인 규칙을 테스트합니다.
"""
from __future__ import annotations

import pytest

from scm_planner.domain.exceptions import ChangeError, ValidationError
from scm_planner.domain.fields import ChangeField
from scm_planner.domain.models import CellEdit
from scm_planner.session.changes import ChangeStore

WEEK = "2025-KW20"


def baseline_edit(new_value, *, original=800, article="1", week=WEEK, comment=""):
    return CellEdit(
        article, ChangeField.FORECAST_BASELINE, original, new_value, comment, week=week
    )


# ============================================================
# 유효 값 조회
# ============================================================

def test_effective_value_prefers_change(clock):
    """변경이 있으면 new_value, 없으면 원래 값"""
    store = ChangeStore(clock=clock)
    assert store.get_effective_value("1", ChangeField.FORECAST_BASELINE, 800, WEEK) == 800

    store.add_change(baseline_edit(900))

    assert store.get_effective_value("1", ChangeField.FORECAST_BASELINE, 800, WEEK) == 900
    assert store.get_effective_value("1", ChangeField.FORECAST_BASELINE, 800, "2025-KW21") == 800
    assert store.get_effective_value("2", ChangeField.FORECAST_BASELINE, 800, WEEK) == 800


def test_revert_by_removing_change(clock):
    """변경 삭제 후 원래 값으로 복귀"""
    store = ChangeStore(clock=clock)
    change = store.add_change(baseline_edit(900))

    assert store.remove_change(change.id) is True
    assert store.get_effective_value("1", ChangeField.FORECAST_BASELINE, 800, WEEK) == 800
    assert store.remove_change(change.id) is False


def test_field_accepts_string_value(clock):
    """필드를 문자열 값으로 조회"""
    store = ChangeStore(clock=clock)
    store.add_change(baseline_edit(900))
    assert store.get_change_for_cell("1", "forecastBaseline", WEEK).new_value == 900


# ============================================================
# 키당 단일 변경
# ============================================================

def test_add_change_replaces_same_key(clock):
    """같은 키에 다시 추가하면 기존 변경을 대체"""
    store = ChangeStore(clock=clock)
    first = store.add_change(baseline_edit(900))
    second = store.add_change(baseline_edit(950))

    assert len(store) == 1
    assert store.get_change(first.id) is None
    assert store.get_change_for_cell("1", ChangeField.FORECAST_BASELINE, WEEK) == second
    assert first.id != second.id


def test_changes_for_article_newest_first(clock):
    """품목 변경 이력은 최신순"""
    store = ChangeStore(clock=clock)
    a = store.add_change(baseline_edit(900, week="2025-KW20"))
    b = store.add_change(baseline_edit(910, week="2025-KW21"))
    store.add_change(baseline_edit(920, article="2"))
    c = store.add_change(baseline_edit(930, week="2025-KW22"))

    assert [ch.id for ch in store.get_changes_for_article("1")] == [c.id, b.id, a.id]


def test_changes_for_article_same_timestamp_latest_added_first():
    """타임스탬프가 같으면 나중에 추가된 변경이 먼저"""
    from datetime import datetime

    fixed = datetime(2025, 1, 1)
    store = ChangeStore(clock=lambda: fixed)
    a = store.add_change(baseline_edit(900, week="2025-KW20"))
    b = store.add_change(baseline_edit(910, week="2025-KW21"))

    assert [ch.id for ch in store.get_changes_for_article("1")] == [b.id, a.id]


# ============================================================
# 주문 기반 / 요일 단위 키
# ============================================================

def test_order_keyed_field(clock):
    """주문 기반 필드는 order_id로 식별"""
    store = ChangeStore(clock=clock)
    store.add_change(
        CellEdit("1", ChangeField.EINKAUF_MENGE, 100, 120, order_id="PO-7")
    )

    assert store.get_effective_value("1", ChangeField.EINKAUF_MENGE, 100, "PO-7") == 120
    assert store.get_effective_value("1", ChangeField.EINKAUF_MENGE, 100, "PO-8") == 100


def test_day_level_changes_are_separate_keys(clock):
    """요일 단위 변경은 주 단위 변경과 별도 키"""
    store = ChangeStore(clock=clock)
    field = ChangeField.PROCUREMENT_FORECAST
    store.add_change(CellEdit("1", field, 0, 100, week=WEEK, day="mo"))
    store.add_change(CellEdit("1", field, 0, 50, week=WEEK, day="fr"))
    store.add_change(CellEdit("1", field, 200, 300, week=WEEK))

    assert len(store) == 3
    assert store.get_effective_value("1", field, 0, WEEK, "mo") == 100
    assert store.get_effective_value("1", field, 0, WEEK, "di") == 0
    assert store.get_effective_value("1", field, 200, WEEK) == 300
    assert sorted(store.get_day_changes("1", field, WEEK)) == ["fr", "mo"]


@pytest.mark.parametrize(
    "edit",
    [
        CellEdit("1", ChangeField.FORECAST_BASELINE, 1, 2),
        CellEdit("1", ChangeField.FORECAST_BASELINE, 1, 2, week=WEEK, order_id="PO-1"),
        CellEdit("1", ChangeField.FORECAST_BASELINE, 1, 2, order_id="PO-1"),
        CellEdit("1", ChangeField.VERKAUF_MENGE, 1, 2, week=WEEK),
        CellEdit("1", ChangeField.FORECAST_BASELINE, 1, 2, week=WEEK, day="mo"),
        CellEdit("1", ChangeField.PROCUREMENT_FORECAST, 1, 2, week=WEEK, day="sa"),
    ],
)
def test_add_change_rejects_malformed_keys(edit, clock):
    """키 구성이 필드 분류와 맞지 않으면 ValidationError"""
    store = ChangeStore(clock=clock)
    with pytest.raises(ValidationError):
        store.add_change(edit)
    assert len(store) == 0


# ============================================================
# 수정 / 삭제
# ============================================================

def test_update_change_refreshes_timestamp(clock):
    """값/코멘트 수정 시 타임스탬프 갱신"""
    store = ChangeStore(clock=clock)
    change = store.add_change(baseline_edit(900))

    updated = store.update_change(change.id, new_value=1000, comment="Aktion")

    assert updated.id == change.id
    assert updated.new_value == 1000
    assert updated.comment == "Aktion"
    assert updated.timestamp > change.timestamp
    assert store.get_effective_value("1", ChangeField.FORECAST_BASELINE, 800, WEEK) == 1000


def test_update_change_errors(clock):
    """없는 변경 또는 키 속성 수정 시 ChangeError"""
    store = ChangeStore(clock=clock)
    change = store.add_change(baseline_edit(900))

    with pytest.raises(ChangeError):
        store.update_change("change-999", new_value=1)
    with pytest.raises(ChangeError):
        store.update_change(change.id, week="2025-KW30")


def test_clear_changes_for_article(clock):
    """품목 변경 전체 삭제"""
    store = ChangeStore(clock=clock)
    store.add_change(baseline_edit(900))
    store.add_change(baseline_edit(910, week="2025-KW21"))
    store.add_change(baseline_edit(920, article="2"))

    assert store.clear_changes_for_article("1") == 2
    assert store.has_changes
    assert [c.article_id for c in store.changes] == ["2"]
    assert store.clear_changes_for_article("1") == 0


# ============================================================
# 편집 승인 규칙
# ============================================================

def test_submit_edit_adds_change(clock):
    """값이 바뀌면 변경 추가"""
    store = ChangeStore(clock=clock)
    change = store.submit_edit(baseline_edit(900))
    assert change is not None
    assert len(store) == 1


def test_submit_edit_back_to_original_removes_change(clock):
    """원래 값으로 되돌리고 코멘트가 없으면 변경 삭제"""
    store = ChangeStore(clock=clock)
    store.submit_edit(baseline_edit(900))

    assert store.submit_edit(baseline_edit(800)) is None
    assert not store.has_changes


def test_submit_edit_same_value_with_comment_kept(clock):
    """값이 같아도 코멘트가 있으면 변경으로 저장"""
    store = ChangeStore(clock=clock)
    change = store.submit_edit(baseline_edit(800, comment="bestätigt"))

    assert change is not None
    assert change.comment == "bestätigt"
    assert len(store) == 1
