"""
SCM Planner 패키지

주간 재고 예측, 사용자 수정(오버레이) 반영, PO 연결 관리를 위한
순수 계산 엔진입니다.
주요 구성:
- 도메인 모델과 계산 로직의 명확한 분리
- Streamlit 의존성을 세션 계층으로 격리
- 모든 계산은 입력을 변경하지 않는 순수 함수로 구현
"""

from __future__ import annotations

__version__ = "1.0.0"
