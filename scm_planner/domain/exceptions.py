"""
도메인 계층 예외 정의

이 모듈은 계획 엔진의 도메인 계층에서 발생할 수 있는
모든 예외를 정의합니다. 조회 연산은 예외 대신 원래 값으로
폴백하며, 전제 조건 위반만 예외로 상위 계층에 전달됩니다.
"""

from __future__ import annotations


class DomainError(Exception):
    """
    도메인 계층의 기본 예외 클래스.

    모든 도메인 예외는 이 클래스를 상속합니다.
    """

    pass


class ValidationError(DomainError):
    """
    데이터 검증 실패 시 발생하는 예외.

    입력 데이터가 비즈니스 규칙을 만족하지 않을 때 발생합니다.
    예: 필수 컬럼 누락, 주차 중복, 잘못된 변경 키 등
    """

    pass


class ChangeError(DomainError):
    """
    변경(오버레이) 저장소 작업 실패 시 발생하는 예외.

    존재하지 않는 변경 ID를 수정하려는 경우 사용합니다.
    """

    pass


class POLinkError(DomainError):
    """
    PO 연결 상태 전이의 전제 조건 위반 시 발생하는 예외.

    예: 존재하지 않는 PO 연결, 이미 연결된 PO 재연결,
    연결되지 않은 주차 해제 등. 예외 발생 시 저장소 상태는 변경되지 않습니다.
    """

    pass
