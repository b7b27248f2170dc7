"""
주차(KW) 유틸리티와 시간 상태 분류

주차를 기준 주차(현재 주차)와 비교하여 과거/현재/미래로 분류하고,
행 편집 정책과 결합하여 셀 편집 가능 여부를 판단합니다.
ISO 8601 주차 규칙(월요일 시작, 1월 4일이 포함된 주가 1주차)을 따릅니다.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Optional, Sequence, Union

from ..core.config import CONFIG


class WeekStatus(str, Enum):
    """기준 주차 대비 시간 상태"""

    PAST = "past"
    CURRENT = "current"
    FUTURE = "future"


WeekLike = Union[int, str]


@dataclass(frozen=True, order=True)
class WeekRef:
    """
    (연도, 주차 번호) 쌍. 연도 → 주차 순으로 정렬됩니다.

    Examples:
        >>> WeekRef(2024, 52) < WeekRef(2025, 1)
        True
    """

    year: int
    week: int

    @property
    def label(self) -> str:
        return format_week_string(self.week)

    @property
    def week_id(self) -> str:
        """WeeklyRecord.week_id와 같은 형식의 식별자 (예: "2025-KW13")."""
        return f"{self.year}-{self.label}"

    def shift(self, weeks: int) -> "WeekRef":
        """주 단위로 이동한 WeekRef를 반환합니다 (연도 경계 처리 포함)."""
        monday = date.fromisocalendar(self.year, self.week, 1)
        iso = (monday + timedelta(weeks=weeks)).isocalendar()
        return WeekRef(iso[0], iso[1])


# ============================================================
# 주차 라벨 변환
# ============================================================

def parse_week_number(week: WeekLike) -> int:
    """
    주차 라벨에서 번호를 추출합니다.

    Examples:
        >>> parse_week_number("KW13")
        13
        >>> parse_week_number(7)
        7
        >>> parse_week_number("n/a")
        0
    """
    if isinstance(week, int):
        return week
    digits = "".join(ch for ch in str(week) if ch.isdigit())
    return int(digits) if digits else 0


def format_week_string(week_num: int) -> str:
    """주차 번호를 라벨로 변환합니다 (13 -> "KW13")."""
    return f"{CONFIG.calendar.week_prefix}{int(week_num)}"


# ============================================================
# ISO 주차 계산
# ============================================================

def current_iso_week(today: Optional[date] = None) -> WeekRef:
    """오늘(또는 주어진 날짜)의 ISO 연도/주차를 반환합니다."""
    iso = (today or date.today()).isocalendar()
    return WeekRef(iso[0], iso[1])


def weeks_in_year(year: int) -> int:
    """ISO 연도의 주차 수 (52 또는 53). 12월 28일은 항상 마지막 주에 속합니다."""
    return date(year, 12, 28).isocalendar()[1]


def week_dates(week: WeekLike, year: int) -> list[date]:
    """해당 주차의 월~금 날짜 목록을 반환합니다."""
    monday = date.fromisocalendar(year, parse_week_number(week), 1)
    return [monday + timedelta(days=offset) for offset in range(5)]


def format_date_short(value: date) -> str:
    """날짜를 "DD.MM" 형식으로 표시합니다."""
    return value.strftime("%d.%m")


def generate_week_range(start: WeekRef, count: int) -> list[WeekRef]:
    """
    시작 주차부터 count개의 연속 주차를 생성합니다.

    53주차가 있는 연도도 올바르게 처리합니다.
    """
    return [start.shift(offset) for offset in range(max(0, count))]


def current_week_index(weeks: Sequence[str], current_week: int) -> int:
    """
    라벨 목록에서 현재 주차의 위치를 반환합니다. 없으면 0.

    Args:
        weeks: 주차 라벨 목록 (예: ["KW10", "KW11", ...])
        current_week: 현재 주차 번호
    """
    target = format_week_string(current_week)
    try:
        return list(weeks).index(target)
    except ValueError:
        return 0


# ============================================================
# 시간 상태 분류 및 편집 가능 여부
# ============================================================

def get_week_temporal_state(
    week: WeekLike,
    year: int,
    current_week: WeekLike,
    current_year: int,
) -> WeekStatus:
    """
    주차를 기준 주차와 비교하여 과거/현재/미래로 분류합니다.

    연도를 먼저 비교하고, 같은 연도 내에서는 주차 번호를 비교합니다.

    Examples:
        >>> get_week_temporal_state("KW52", 2024, "KW1", 2025)
        <WeekStatus.PAST: 'past'>
        >>> get_week_temporal_state(3, 2025, 3, 2025)
        <WeekStatus.CURRENT: 'current'>
    """
    target = WeekRef(int(year), parse_week_number(week))
    reference = WeekRef(int(current_year), parse_week_number(current_week))

    if target < reference:
        return WeekStatus.PAST
    if target == reference:
        return WeekStatus.CURRENT
    return WeekStatus.FUTURE


def is_week_editable(state: WeekStatus) -> bool:
    """과거가 아닌 주차(현재/미래)인지 여부."""
    return state is not WeekStatus.PAST


def is_editable(
    state: WeekStatus,
    *,
    editable: bool = False,
    editable_in_future: bool = False,
) -> bool:
    """
    행 편집 정책과 주차 상태를 결합하여 셀 편집 가능 여부를 판단합니다.

    - editable: 현재/미래 주차에서 편집 가능
    - editable_in_future: 미래 주차에서만 편집 가능 (현재 주차는 불가)
    - 과거 주차는 어떤 정책이든 편집 불가

    Examples:
        >>> is_editable(WeekStatus.CURRENT, editable_in_future=True)
        False
        >>> is_editable(WeekStatus.CURRENT, editable=True)
        True
    """
    if state is WeekStatus.PAST:
        return False
    if editable:
        return True
    if editable_in_future:
        return state is WeekStatus.FUTURE
    return False


def is_cell_editable(row: object, state: WeekStatus) -> bool:
    """RowDefinition(또는 같은 속성을 가진 객체)의 편집 정책으로 판단합니다."""
    return is_editable(
        state,
        editable=bool(getattr(row, "editable", False)),
        editable_in_future=bool(getattr(row, "editable_in_future", False)),
    )
