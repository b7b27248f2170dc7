"""
도메인 데이터 검증 로직

이 모듈은 재고 체인 계산 전 주차 시퀀스와, 변경 저장소에
들어가는 셀 수정 요청의 구조적 정합성을 검증합니다.
Streamlit 의존성 없이 순수한 도메인 로직으로 동작합니다.
"""

from __future__ import annotations

import logging
from typing import Sequence

from .exceptions import ValidationError
from .fields import Discriminator
from .models import CellEdit, WeeklyRecord
from ..core.config import CONFIG

logger = logging.getLogger(__name__)


def validate_weekly_sequence(records: Sequence[WeeklyRecord]) -> None:
    """
    주간 레코드 시퀀스가 시간순으로 정렬되어 있고 중복이 없는지 검증합니다.

    검증 항목:
    1. 모든 요소가 WeeklyRecord인지 확인
    2. (year, week) 조합의 중복 여부 확인
    3. (year, week) 기준 오름차순 정렬 여부 확인

    Args:
        records: 주간 레코드 시퀀스

    Raises:
        ValidationError: 검증 실패 시 발생
    """
    logger.debug(f"Validating weekly sequence of {len(records)} records")

    seen: set[tuple[int, int]] = set()
    previous: tuple[int, int] | None = None

    for position, record in enumerate(records):
        # ========================================
        # 1단계: 타입 검증
        # ========================================
        if not isinstance(record, WeeklyRecord):
            logger.error(f"Record at {position} is {type(record)}, not WeeklyRecord")
            raise ValidationError(
                "주간 데이터가 손상되었습니다. 데이터를 다시 불러와 주세요."
            )

        # ========================================
        # 2단계: 중복 주차 검증
        # ========================================
        ordinal = (int(record.year), record.week_number)
        if ordinal in seen:
            logger.error(f"Duplicate week in sequence: {record.week_id}")
            raise ValidationError(f"주차가 중복되었습니다: {record.week_id}")
        seen.add(ordinal)

        # ========================================
        # 3단계: 시간순 정렬 검증
        # ========================================
        if previous is not None and ordinal < previous:
            logger.error(f"Sequence not chronological at {record.week_id}")
            raise ValidationError(
                f"주차가 시간순으로 정렬되어 있지 않습니다: {record.week_id}"
            )
        previous = ordinal

    logger.debug("Weekly sequence validation passed")


def validate_cell_edit(edit: CellEdit) -> None:
    """
    셀 수정 요청의 키 구성이 필드 분류와 일치하는지 검증합니다.

    - 주차 기반 필드: week 필수, order_id 금지
    - 주문 기반 필드: order_id 필수, week 금지
    - day는 요일 단위를 지원하는 필드에서만 허용되며 월~금 키여야 함

    Raises:
        ValidationError: 검증 실패 시 발생
    """
    field = edit.field

    if (edit.week is None) == (edit.order_id is None):
        logger.error(f"Edit for {field.value} must set exactly one of week/order_id")
        raise ValidationError("변경에는 주차 또는 주문번호 중 하나만 지정해야 합니다.")

    if field.discriminator is Discriminator.WEEK and edit.week is None:
        logger.error(f"Field {field.value} is keyed by week but got order_id")
        raise ValidationError(f"{field.value} 변경에는 주차가 필요합니다.")

    if field.discriminator is Discriminator.ORDER and edit.order_id is None:
        logger.error(f"Field {field.value} is keyed by order_id but got week")
        raise ValidationError(f"{field.value} 변경에는 주문번호가 필요합니다.")

    if edit.day is not None:
        if not field.supports_day:
            logger.error(f"Field {field.value} does not support day-level edits")
            raise ValidationError(f"{field.value}는 요일 단위 변경을 지원하지 않습니다.")
        if edit.day not in CONFIG.calendar.weekday_keys:
            logger.error(f"Unknown weekday key: {edit.day!r}")
            raise ValidationError(f"알 수 없는 요일입니다: {edit.day}")
