"""
변경(오버레이) 저장소

사용자가 승인한 셀 수정을 원본 데이터와 분리하여 보관하고,
계산 계층이 "유효 값"(변경값 또는 원래 값)을 조회할 수 있게 합니다.
저장소 자체 상태 외에는 부작용이 없으며, 재계산은 호출자가 명시적으로 수행합니다.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional, Union

from ..domain.exceptions import ChangeError
from ..domain.fields import ChangeField
from ..domain.models import CellEdit, Change, ChangeKey
from ..domain.validation import validate_cell_edit

logger = logging.getLogger(__name__)

FieldLike = Union[ChangeField, str]

# update_change로 수정할 수 있는 속성 (키 구성요소는 수정 불가)
UPDATABLE_ATTRIBUTES = frozenset({"original_value", "new_value", "comment", "po_nummer"})


class ChangeStore:
    """
    (article_id, field, week 또는 order_id, day) 복합 키당 최대 하나의
    변경을 보관하는 세션 범위 저장소.

    한 계획 세션(프로세스 수명) 동안 하나의 인스턴스를 사용하며,
    필요한 컴포넌트에 참조로 전달합니다.

    Args:
        clock: 타임스탬프 생성 함수 (기본값: datetime.now)

    Examples:
        >>> store = ChangeStore()
        >>> edit = CellEdit("1", ChangeField.FORECAST_BASELINE, 800, 900, week="2025-KW20")
        >>> _ = store.add_change(edit)
        >>> store.get_effective_value("1", ChangeField.FORECAST_BASELINE, 800, "2025-KW20")
        900
    """

    def __init__(self, *, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._changes: dict[ChangeKey, Change] = {}
        self._ids = itertools.count(1)
        self._clock = clock or datetime.now

    # ========================================
    # 조회
    # ========================================

    def __len__(self) -> int:
        return len(self._changes)

    @property
    def changes(self) -> list[Change]:
        """삽입 순서의 전체 변경 목록 (복사본)."""
        return list(self._changes.values())

    @property
    def has_changes(self) -> bool:
        return bool(self._changes)

    def get_change(self, change_id: str) -> Optional[Change]:
        for change in self._changes.values():
            if change.id == change_id:
                return change
        return None

    def get_change_for_cell(
        self,
        article_id: str,
        field: FieldLike,
        week_or_order_id: Optional[str],
        day: Optional[str] = None,
    ) -> Optional[Change]:
        """
        셀의 복합 키와 정확히 일치하는 변경을 반환합니다. 없으면 None.

        주차 기반 필드는 week, 주문 기반 필드는 order_id와 비교합니다.
        day가 없으면 주 단위 변경만, day가 있으면 해당 요일 변경만 일치합니다.
        """
        key = ChangeKey.for_cell(article_id, ChangeField(field), week_or_order_id, day)
        return self._changes.get(key)

    def get_effective_value(
        self,
        article_id: str,
        field: FieldLike,
        original_value: float,
        week_or_order_id: Optional[str],
        day: Optional[str] = None,
    ) -> float:
        """
        변경이 있으면 변경값(new_value), 없으면 원래 값을 반환합니다.

        하위 계산은 원본 레코드 필드 대신 항상 이 경로로 값을 읽어야 합니다.
        """
        change = self.get_change_for_cell(article_id, field, week_or_order_id, day)
        return change.new_value if change is not None else original_value

    def get_changes_for_article(self, article_id: str) -> list[Change]:
        """품목의 모든 변경을 최신순으로 반환합니다 (이력 표시용)."""
        # 같은 시각의 변경은 나중에 추가된 것이 먼저 오도록 역순에서 안정 정렬
        matching = [c for c in reversed(self._changes.values()) if c.article_id == article_id]
        return sorted(matching, key=lambda c: c.timestamp, reverse=True)

    def get_day_changes(
        self, article_id: str, field: FieldLike, week: str
    ) -> dict[str, Change]:
        """주차의 요일 단위 변경을 {요일: 변경} 형태로 반환합니다."""
        field_value = ChangeField(field)
        return {
            change.day: change
            for key, change in self._changes.items()
            if key.article_id == article_id
            and key.field is field_value
            and key.week == week
            and key.day is not None
        }

    # ========================================
    # 변경
    # ========================================

    def add_change(self, edit: CellEdit) -> Change:
        """
        변경을 추가합니다. 같은 키의 기존 변경은 원자적으로 대체됩니다.

        Raises:
            ValidationError: 키 구성이 필드 분류와 맞지 않을 경우
        """
        validate_cell_edit(edit)

        change = Change(
            id=f"change-{next(self._ids)}",
            article_id=edit.article_id,
            field=edit.field,
            original_value=edit.original_value,
            new_value=edit.new_value,
            timestamp=self._clock(),
            comment=edit.comment,
            week=edit.week,
            order_id=edit.order_id,
            day=edit.day,
            po_nummer=edit.po_nummer,
        )

        replaced = self._changes.pop(change.key, None)
        if replaced is not None:
            logger.debug(f"Replacing {replaced.id} with {change.id} for {change.key}")
        self._changes[change.key] = change

        logger.info(
            f"Change {change.id} accepted: article={change.article_id} "
            f"field={change.field.value} {change.original_value} -> {change.new_value}"
        )
        return change

    def update_change(self, change_id: str, **updates: object) -> Change:
        """
        기존 변경의 값/코멘트를 수정하고 타임스탬프를 갱신합니다.

        Raises:
            ChangeError: 변경 ID가 없거나 키 구성요소를 수정하려는 경우
        """
        invalid = set(updates) - UPDATABLE_ATTRIBUTES
        if invalid:
            logger.warning(f"Rejected update of key attributes {sorted(invalid)}")
            raise ChangeError(
                "변경 키(품목/필드/주차/주문/요일)는 수정할 수 없습니다: "
                + ", ".join(sorted(invalid))
            )

        current = self.get_change(change_id)
        if current is None:
            logger.warning(f"Update requested for unknown change {change_id}")
            raise ChangeError(f"존재하지 않는 변경입니다: {change_id}")

        updated = replace(current, **updates, timestamp=self._clock())
        self._changes[current.key] = updated
        logger.debug(f"Change {change_id} updated: {sorted(updates)}")
        return updated

    def remove_change(self, change_id: str) -> bool:
        """ID로 변경을 삭제합니다. 삭제되었으면 True, 없으면 False."""
        current = self.get_change(change_id)
        if current is None:
            logger.debug(f"Remove requested for unknown change {change_id}")
            return False
        del self._changes[current.key]
        logger.info(f"Change {change_id} removed")
        return True

    def clear_changes_for_article(self, article_id: str) -> int:
        """품목의 모든 변경을 삭제하고 삭제 건수를 반환합니다."""
        keys = [key for key in self._changes if key.article_id == article_id]
        for key in keys:
            del self._changes[key]
        if keys:
            logger.info(f"Cleared {len(keys)} changes for article {article_id}")
        return len(keys)

    def submit_edit(self, edit: CellEdit) -> Optional[Change]:
        """
        셀 편집 승인 규칙을 적용합니다.

        - 새 값이 원래 값과 같고 코멘트가 없으면: 기존 변경을 삭제하고 None 반환
        - 그 외: 변경을 추가(대체)하고 반환

        Returns:
            저장된 변경 또는 None (원래 값으로 되돌린 경우)
        """
        if edit.new_value == edit.original_value and not edit.comment:
            validate_cell_edit(edit)
            key = ChangeKey(edit.article_id, edit.field, edit.week, edit.order_id, edit.day)
            existing = self._changes.pop(key, None)
            if existing is not None:
                logger.info(f"Change {existing.id} reverted to original value")
            return None
        return self.add_change(edit)
