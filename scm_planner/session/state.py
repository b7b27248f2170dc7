"""
계획 세션 상태 관리

이 모듈은 변경 저장소와 PO 연결 저장소를 하나의 계획 세션으로 묶고,
Streamlit 세션 상태에 보관합니다. 테스트나 비-Streamlit 호출자는
``state`` 인자로 일반 dict를 전달할 수 있습니다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, MutableMapping, Optional

import streamlit as st

from ..core.config import CONFIG
from ..domain.fields import ChangeField
from ..domain.models import CellEdit, POEntry
from .changes import ChangeStore
from .po_links import POLinkStore

logger = logging.getLogger(__name__)


@dataclass
class PlanningSession:
    """한 계획 세션의 저장소 묶음 (변경 오버레이 + PO 연결)."""

    changes: ChangeStore = field(default_factory=ChangeStore)
    po_links: POLinkStore = field(default_factory=POLinkStore)

    def link_po(
        self, article_id: str, week: str, po_nummer: str, *, comment: str = ""
    ) -> POEntry:
        """
        PO를 주차에 연결하고 이력에 po_link 변경을 기록합니다.

        기존 연결을 대체한 경우 이전 PO 수량이 original_value로 남습니다.

        Raises:
            POLinkError: 연결 전제 조건 위반 시 (이력도 기록되지 않음)
        """
        previous = self.po_links.get_linked_entry(article_id, week)
        linked = self.po_links.link_po(article_id, week, po_nummer)
        self.changes.add_change(
            CellEdit(
                article_id=article_id,
                field=ChangeField.PO_LINK,
                original_value=previous.menge if previous is not None else 0,
                new_value=linked.menge,
                comment=comment,
                week=week,
                po_nummer=po_nummer,
            )
        )
        return linked

    def unlink_po(
        self, article_id: str, week: str, po_nummer: Optional[str] = None
    ) -> POEntry:
        """
        주차의 PO 연결을 해제하고 해당 po_link 이력을 삭제합니다.

        Raises:
            POLinkError: 연결이 없거나 PO 번호가 일치하지 않을 경우
        """
        released = self.po_links.unlink_po(article_id, week, po_nummer)
        audit = self.changes.get_change_for_cell(article_id, ChangeField.PO_LINK, week)
        if audit is not None:
            self.changes.remove_change(audit.id)
        return released


def _resolve_state(
    state: Optional[MutableMapping[str, object]],
) -> MutableMapping[str, object]:
    return st.session_state if state is None else state


def get_planning_session(
    state: Optional[MutableMapping[str, object]] = None,
    *,
    po_entries: Iterable[POEntry] = (),
) -> PlanningSession:
    """
    세션 상태에 저장된 계획 세션을 반환합니다. 없으면 새로 생성합니다.

    Args:
        state: 세션 상태 매핑 (기본값: st.session_state)
        po_entries: 새 세션을 만들 때 등록할 PO 목록 (기존 세션에는 무시)

    Session State Keys:
        - CONFIG.session.planning_session_key: PlanningSession 인스턴스
    """
    target = _resolve_state(state)
    key = CONFIG.session.planning_session_key

    session = target.get(key)
    if isinstance(session, PlanningSession):
        return session

    session = PlanningSession(po_links=POLinkStore(po_entries))
    target[key] = session
    logger.info(f"Planning session created with {len(session.po_links.all_pos)} POs")
    return session


def reset_planning_session(
    state: Optional[MutableMapping[str, object]] = None,
) -> None:
    """세션 상태에서 계획 세션을 제거합니다 (모든 변경/연결 초기화)."""
    target = _resolve_state(state)
    if target.pop(CONFIG.session.planning_session_key, None) is not None:
        logger.info("Planning session reset")
