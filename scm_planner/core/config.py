"""Configuration and constants for the SCM planner.

예측 파라미터, 주차 표기 규칙, 세션 키 등 전역 설정을 제공합니다.
"""

from __future__ import annotations
from dataclasses import dataclass, field


# ============================================================
# 예측 설정
# ============================================================

@dataclass(frozen=True)
class ForecastConfig:
    """Run-rate 기반 시스템 예측 관련 설정"""

    # run-rate 계산에 사용할 과거 주차 수 (롤링 윈도우)
    hist_weeks: int = 8

    # 최근 주차 가중치 (현재 미사용, 향후 지수 가중 예정)
    alpha: float = 0.7

    # run-rate 계수 최소값
    min_factor: float = 0.5

    # run-rate 계수 최대값
    max_factor: float = 1.5


# ============================================================
# 주차(KW) 설정
# ============================================================

@dataclass(frozen=True)
class CalendarConfig:
    """주차 표기 및 요일 관련 설정"""

    # 주차 라벨 접두어 (예: "KW13")
    week_prefix: str = "KW"

    # 일별 조달 분해에 사용하는 요일 키 (월~금)
    weekday_keys: tuple[str, ...] = ("mo", "di", "mi", "do", "fr")

    # 요일 표시 라벨
    weekday_labels: tuple[str, ...] = ("Mo", "Di", "Mi", "Do", "Fr")


@dataclass(frozen=True)
class InventoryConfig:
    """재고 체인 계산 관련 설정"""

    # 시작 재고가 주어지지 않았을 때 사용할 기본값
    default_initial_inventory: float = 0


@dataclass(frozen=True)
class SessionConfig:
    """Streamlit 세션 상태 키 설정"""

    # 계획 세션 (변경 저장소 + PO 연결 저장소) 번들 키
    planning_session_key: str = "_planner_session"


@dataclass(frozen=True)
class PlannerConfig:
    """플래너 전역 설정"""

    forecast: ForecastConfig = field(default_factory=ForecastConfig)
    calendar: CalendarConfig = field(default_factory=CalendarConfig)
    inventory: InventoryConfig = field(default_factory=InventoryConfig)
    session: SessionConfig = field(default_factory=SessionConfig)


# ============================================================
# 전역 설정 인스턴스
# ============================================================

# 전역 설정 객체 (불변)
CONFIG = PlannerConfig()
