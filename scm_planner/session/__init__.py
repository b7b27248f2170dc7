"""
세션 계층: 변경 오버레이 저장소, PO 연결 저장소, Streamlit 세션 바인딩
"""

from .changes import UPDATABLE_ATTRIBUTES, ChangeStore
from .po_links import POLinkStore
from .state import PlanningSession, get_planning_session, reset_planning_session

__all__ = [
    "ChangeStore",
    "UPDATABLE_ATTRIBUTES",
    "POLinkStore",
    "PlanningSession",
    "get_planning_session",
    "reset_planning_session",
]
