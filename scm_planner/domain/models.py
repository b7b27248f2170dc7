"""
도메인 모델: 주간 재고 계획의 핵심 데이터 구조

이 모듈은 계획 엔진에서 사용하는 데이터 모델을 정의합니다.
모든 모델은 불변(frozen) 데이터클래스로 구현되어, 계산 결과는
원본을 변경하지 않고 항상 새 인스턴스로 반환됩니다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable, NamedTuple, Optional

from .fields import ChangeField, Discriminator
from .weeks import parse_week_number


@dataclass(frozen=True)
class PromoBreakdown:
    """프로모션 판매량 분해 (Kartonware / Displays)"""

    kartonware: float = 0
    displays: float = 0


@dataclass(frozen=True)
class SalesBreakdown:
    """
    판매 예산/예측의 분해 구조.

    합계는 항상 baseline + promo.kartonware + promo.displays 입니다.

    Examples:
        >>> SalesBreakdown(800, PromoBreakdown(100, 100))
        SalesBreakdown(baseline=800, promo=PromoBreakdown(kartonware=100, displays=100))
    """

    baseline: float = 0
    promo: PromoBreakdown = field(default_factory=PromoBreakdown)

    @classmethod
    def of(
        cls, baseline: float, kartonware: float = 0, displays: float = 0
    ) -> "SalesBreakdown":
        return cls(baseline=baseline, promo=PromoBreakdown(kartonware, displays))


class POStatus(str, Enum):
    """PO 연결 상태"""

    UNLINKED = "unlinked"
    LINKED = "linked"


@dataclass(frozen=True)
class POEntry:
    """
    공급사 구매 주문(PO) 한 건.

    Attributes:
        po_nummer: PO 번호 (전역 고유)
        menge: 수량
        liefertermin: 납기 (표시용 문자열)
        artikel_id: 품목 ID
        status: 연결 상태
        linked_week: 연결된 주차 ID (연결된 경우만)
    """

    po_nummer: str
    menge: float
    liefertermin: str = ""
    artikel_id: str = ""
    status: POStatus = POStatus.UNLINKED
    linked_week: Optional[str] = None

    @property
    def is_linked(self) -> bool:
        return self.status is POStatus.LINKED


@dataclass(frozen=True)
class ProcurementBreakdown:
    """
    조달 분해 구조: 예측 / 발주(ordered) / 입고(delivered).

    ordered, delivered는 PO 목록 합계로 만들 수도 있습니다
    (:meth:`from_po_lists`).
    """

    forecast: float = 0
    ordered: float = 0
    delivered: float = 0

    @classmethod
    def from_po_lists(
        cls,
        forecast: float,
        pos_bestellt: Iterable[POEntry] = (),
        pos_geliefert: Iterable[POEntry] = (),
    ) -> "ProcurementBreakdown":
        """발주/입고 PO 목록의 수량을 합산하여 분해 구조를 생성합니다."""
        return cls(
            forecast=forecast,
            ordered=sum(po.menge for po in pos_bestellt),
            delivered=sum(po.menge for po in pos_geliefert),
        )


@dataclass(frozen=True)
class DailyProcurement:
    """요일별(월~금) 조달 예측 분해"""

    mo: float = 0
    di: float = 0
    mi: float = 0
    do: float = 0
    fr: float = 0

    def get(self, day: str) -> float:
        return float(getattr(self, day))

    @property
    def total(self) -> float:
        return self.mo + self.di + self.mi + self.do + self.fr


@dataclass(frozen=True)
class WeeklyRecord:
    """
    한 품목의 한 주차(week, year) 데이터.

    inventory_start는 직전 주차의 inventory_end와 같아야 하며(체인 불변식),
    inventory_end는 계산 결과로만 채워집니다.

    Attributes:
        week: 주차 라벨 (예: "KW13")
        year: ISO 연도
        inventory_start: 주 시작 재고 (Lagerbestand Anfang)
        sales_budget: 연간 기준 판매 예산 (생성 후 불변)
        sales_budget_breakdown: 예산 분해
        sales_forecast_breakdown: 최신 판매 예측 분해
        sales_order_in_system: 시스템 내 판매 주문 수량
        procurement_breakdown: 조달 분해
        sales_actuals: 실적 (과거 주차만)
        procurement_daily: 요일별 조달 예측 (선택)
        inventory_end: 주 종료 재고 (Lagerbestand Ende, 계산값)
    """

    week: str
    year: int
    inventory_start: float = 0
    sales_budget: float = 0
    sales_budget_breakdown: SalesBreakdown = field(default_factory=SalesBreakdown)
    sales_forecast_breakdown: SalesBreakdown = field(default_factory=SalesBreakdown)
    sales_order_in_system: float = 0
    procurement_breakdown: ProcurementBreakdown = field(
        default_factory=ProcurementBreakdown
    )
    sales_actuals: Optional[float] = None
    procurement_daily: Optional[DailyProcurement] = None
    inventory_end: float = 0

    @property
    def week_number(self) -> int:
        """라벨에서 주차 번호를 추출합니다 ("KW13" -> 13, 실패 시 0)."""
        return parse_week_number(self.week)

    @property
    def week_id(self) -> str:
        """연도를 포함한 주차 식별자 (예: "2025-KW13").

        변경 저장소와 PO 연결 저장소의 주차 키로 사용됩니다.
        """
        return f"{self.year}-{self.week}"


@dataclass(frozen=True)
class CellEdit:
    """
    사용자가 승인한 셀 수정 요청 (아직 ID/타임스탬프 없음).

    week와 order_id는 상호 배타적이며, 필드 분류에 따라 하나만 지정합니다.
    """

    article_id: str
    field: ChangeField
    original_value: float
    new_value: float
    comment: str = ""
    week: Optional[str] = None
    order_id: Optional[str] = None
    day: Optional[str] = None
    po_nummer: Optional[str] = None


class ChangeKey(NamedTuple):
    """(article_id, field, week, order_id, day) 복합 키"""

    article_id: str
    field: ChangeField
    week: Optional[str]
    order_id: Optional[str]
    day: Optional[str]

    @classmethod
    def for_cell(
        cls,
        article_id: str,
        field: ChangeField,
        week_or_order_id: Optional[str],
        day: Optional[str] = None,
    ) -> "ChangeKey":
        """필드 분류에 맞게 주차 또는 주문번호 자리에 값을 배치합니다."""
        if field.discriminator is Discriminator.ORDER:
            return cls(article_id, field, None, week_or_order_id, None)
        return cls(
            article_id, field, week_or_order_id, None, day if field.supports_day else None
        )


@dataclass(frozen=True)
class Change:
    """
    저장된 사용자 변경(오버레이) 한 건.

    동일한 :class:`ChangeKey`에 대해 최대 하나만 존재합니다.
    """

    id: str
    article_id: str
    field: ChangeField
    original_value: float
    new_value: float
    timestamp: datetime
    comment: str = ""
    week: Optional[str] = None
    order_id: Optional[str] = None
    day: Optional[str] = None
    po_nummer: Optional[str] = None

    @property
    def key(self) -> ChangeKey:
        return ChangeKey(self.article_id, self.field, self.week, self.order_id, self.day)
