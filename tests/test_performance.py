"""
실행 시간 측정 데코레이터 테스트
"""
from __future__ import annotations

import logging

import pytest

from scm_planner.common import performance
from scm_planner.common.performance import measure_time


def test_measure_time_returns_result_and_logs(caplog):
    """결과 반환 및 DEBUG 로그"""

    @measure_time
    def add(a, b):
        return a + b

    with caplog.at_level(logging.DEBUG, logger=performance.__name__):
        assert add(2, 3) == 5

    assert "add completed" in caplog.text
    assert add.__name__ == "add"


def test_measure_time_propagates_exceptions(caplog):
    """예외는 그대로 전파되고 경과 시간은 기록"""

    @measure_time
    def broken():
        raise ValueError("boom")

    with caplog.at_level(logging.DEBUG, logger=performance.__name__):
        with pytest.raises(ValueError):
            broken()

    assert "broken completed" in caplog.text


def test_measure_time_warns_over_threshold(caplog, monkeypatch):
    """임계값 초과 시 WARNING"""
    monkeypatch.setattr(performance, "WARN_THRESHOLD_SECONDS", 0.0)

    @measure_time
    def noop():
        return None

    with caplog.at_level(logging.DEBUG, logger=performance.__name__):
        noop()

    assert any(record.levelno == logging.WARNING for record in caplog.records)
