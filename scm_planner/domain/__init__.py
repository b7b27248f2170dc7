"""
도메인 계층 퍼블릭 API

이 모듈은 도메인 계층의 주요 클래스와 함수를 재수출하여
일관된 퍼블릭 API를 제공합니다.
"""
from __future__ import annotations

from .exceptions import ChangeError, DomainError, POLinkError, ValidationError
from .fields import (
    ROW_DEFINITIONS,
    ChangeField,
    Discriminator,
    RowDefinition,
    get_row,
    visible_rows,
)
from .models import (
    CellEdit,
    Change,
    ChangeKey,
    DailyProcurement,
    POEntry,
    POStatus,
    ProcurementBreakdown,
    PromoBreakdown,
    SalesBreakdown,
    WeeklyRecord,
)
from .normalization import (
    format_week_label,
    normalize_weekly_frame,
    po_entries_from_frame,
    records_from_frame,
)
from .validation import validate_cell_edit, validate_weekly_sequence
from .weeks import (
    WeekRef,
    WeekStatus,
    current_iso_week,
    current_week_index,
    format_week_string,
    generate_week_range,
    get_week_temporal_state,
    is_cell_editable,
    is_editable,
    is_week_editable,
    parse_week_number,
    week_dates,
    weeks_in_year,
)

__all__ = [
    # 예외
    "DomainError",
    "ValidationError",
    "ChangeError",
    "POLinkError",
    # 필드 분류
    "ChangeField",
    "Discriminator",
    "RowDefinition",
    "ROW_DEFINITIONS",
    "get_row",
    "visible_rows",
    # 모델
    "PromoBreakdown",
    "SalesBreakdown",
    "ProcurementBreakdown",
    "DailyProcurement",
    "POEntry",
    "POStatus",
    "WeeklyRecord",
    "CellEdit",
    "Change",
    "ChangeKey",
    # 정규화
    "format_week_label",
    "normalize_weekly_frame",
    "records_from_frame",
    "po_entries_from_frame",
    # 검증
    "validate_weekly_sequence",
    "validate_cell_edit",
    # 주차 / 시간 상태
    "WeekRef",
    "WeekStatus",
    "current_iso_week",
    "current_week_index",
    "format_week_string",
    "generate_week_range",
    "get_week_temporal_state",
    "is_cell_editable",
    "is_editable",
    "is_week_editable",
    "parse_week_number",
    "week_dates",
    "weeks_in_year",
]
