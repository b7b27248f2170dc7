"""
PO 연결 상태 관리

미연결 PO를 품목의 주차(조달 예측)에 연결/해제하는 상태 기계입니다.

상태 (품목별):
- 미연결 PO 집합: status == unlinked 인 PO
- 주차 → 연결 PO 번호 매핑

불변식:
- 한 PO는 최대 한 주차에 연결되고, 한 주차에는 최대 한 PO가 연결됩니다.
- 같은 품목에서 PO 번호가 미연결 집합과 연결 매핑에 동시에 존재하지 않습니다.

정책:
- 이미 다른 PO가 연결된 주차에 새 PO를 연결하면 기존 PO는 미연결로
  돌아가고(수량 유지) 새 PO가 연결됩니다.
- 전제 조건 위반은 POLinkError로 알리며 상태는 변경되지 않습니다.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Optional

from ..domain.exceptions import POLinkError
from ..domain.models import POEntry, POStatus

logger = logging.getLogger(__name__)


class POLinkStore:
    """
    세션 범위 PO 연결 저장소.

    Args:
        entries: 초기 PO 목록 (데이터 로더가 생성, 모두 미연결 상태여야 함)

    Examples:
        >>> store = POLinkStore([POEntry("PO-1", 500, artikel_id="1")])
        >>> _ = store.link_po("1", "2025-KW20", "PO-1")
        >>> store.get_linked_po("1", "2025-KW20")
        'PO-1'
    """

    def __init__(self, entries: Iterable[POEntry] = ()) -> None:
        self._pos: dict[str, POEntry] = {}
        self._links: dict[tuple[str, str], str] = {}
        self.register(entries)

    # ========================================
    # 등록 / 조회
    # ========================================

    def register(self, entries: Iterable[POEntry]) -> None:
        """
        PO를 미연결 상태로 등록합니다.

        Raises:
            POLinkError: 이미 등록된 PO 번호인 경우
        """
        for entry in entries:
            if entry.po_nummer in self._pos:
                logger.warning(f"PO {entry.po_nummer} registered twice")
                raise POLinkError(f"이미 등록된 PO입니다: {entry.po_nummer}")
            self._pos[entry.po_nummer] = replace(
                entry, status=POStatus.UNLINKED, linked_week=None
            )

    @property
    def all_pos(self) -> list[POEntry]:
        return list(self._pos.values())

    def get_po(self, po_nummer: str) -> Optional[POEntry]:
        return self._pos.get(po_nummer)

    def get_unlinked_pos(self, article_id: str) -> list[POEntry]:
        """품목의 미연결 PO 목록 (등록 순서)."""
        return [
            po
            for po in self._pos.values()
            if po.artikel_id == article_id and po.status is POStatus.UNLINKED
        ]

    def unlinked_count(self, article_id: str) -> int:
        return len(self.get_unlinked_pos(article_id))

    def get_linked_po(self, article_id: str, week: str) -> Optional[str]:
        """주차에 연결된 PO 번호. 없으면 None."""
        return self._links.get((article_id, week))

    def get_linked_entry(self, article_id: str, week: str) -> Optional[POEntry]:
        po_nummer = self.get_linked_po(article_id, week)
        return self._pos.get(po_nummer) if po_nummer is not None else None

    def is_linked(self, article_id: str, week: str) -> bool:
        return (article_id, week) in self._links

    def is_forecast_linked(self, article_id: str, week: str) -> bool:
        """주차의 조달 예측이 PO로 확정(연결)되었는지 여부."""
        return self.is_linked(article_id, week)

    def linked_weeks(self, article_id: str) -> dict[str, str]:
        """품목의 {주차: PO 번호} 매핑 (복사본)."""
        return {
            week: po_nummer
            for (article, week), po_nummer in self._links.items()
            if article == article_id
        }

    # ========================================
    # 상태 전이
    # ========================================

    def link_po(self, article_id: str, week: str, po_nummer: str) -> POEntry:
        """
        미연결 PO를 품목의 주차에 연결합니다.

        주차에 이미 다른 PO가 연결되어 있으면 그 PO는 미연결로 돌아갑니다.

        Returns:
            연결된 상태의 POEntry

        Raises:
            POLinkError: PO가 없거나, 다른 품목의 PO이거나, 이미 연결된 경우
        """
        entry = self._pos.get(po_nummer)
        if entry is None:
            logger.warning(f"Link requested for unknown PO {po_nummer}")
            raise POLinkError(f"존재하지 않는 PO입니다: {po_nummer}")
        if entry.artikel_id != article_id:
            logger.warning(
                f"PO {po_nummer} belongs to article {entry.artikel_id}, not {article_id}"
            )
            raise POLinkError(f"PO {po_nummer}는 품목 {article_id}의 PO가 아닙니다.")
        if entry.status is POStatus.LINKED:
            logger.warning(f"PO {po_nummer} is already linked to {entry.linked_week}")
            raise POLinkError(
                f"PO {po_nummer}는 이미 {entry.linked_week}에 연결되어 있습니다."
            )

        previous = self._links.get((article_id, week))
        if previous is not None:
            self._release(previous)
            logger.info(f"{article_id}/{week}: replacing linked PO {previous}")

        linked = replace(entry, status=POStatus.LINKED, linked_week=week)
        self._pos[po_nummer] = linked
        self._links[(article_id, week)] = po_nummer

        logger.info(f"PO {po_nummer} linked to {article_id}/{week}")
        return linked

    def unlink_po(
        self, article_id: str, week: str, po_nummer: Optional[str] = None
    ) -> POEntry:
        """
        주차의 PO 연결을 해제하고 PO를 미연결 목록으로 되돌립니다 (수량 유지).

        Args:
            article_id: 품목 ID
            week: 주차 ID
            po_nummer: 지정하면 현재 연결된 PO와 일치해야 함

        Returns:
            미연결 상태의 POEntry

        Raises:
            POLinkError: 주차에 연결된 PO가 없거나 지정한 PO와 다를 경우
        """
        linked = self._links.get((article_id, week))
        if linked is None:
            logger.warning(f"Unlink requested for {article_id}/{week} without a link")
            raise POLinkError(f"{week}에 연결된 PO가 없습니다.")
        if po_nummer is not None and po_nummer != linked:
            logger.warning(
                f"Unlink of {po_nummer} requested but {article_id}/{week} has {linked}"
            )
            raise POLinkError(f"{week}에는 {po_nummer}가 아닌 {linked}가 연결되어 있습니다.")

        del self._links[(article_id, week)]
        released = self._release(linked)
        logger.info(f"PO {linked} unlinked from {article_id}/{week}")
        return released

    def _release(self, po_nummer: str) -> POEntry:
        released = replace(self._pos[po_nummer], status=POStatus.UNLINKED, linked_week=None)
        self._pos[po_nummer] = released
        return released
