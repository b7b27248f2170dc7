"""
데이터 정규화 유틸리티

이 모듈은 데이터 로더가 전달하는 원본 테이블(DataFrame)을
계획 엔진의 도메인 모델(WeeklyRecord, POEntry)로 변환합니다.
다양한 원본 컬럼명(영문/독일어 표기)을 표준 스키마로 맞추고,
숫자 컬럼은 일관된 타입으로 변환합니다.
"""

from __future__ import annotations

import logging
import numbers
import re
from dataclasses import replace
from typing import Optional, Sequence

import pandas as pd

from .exceptions import ValidationError
from .models import (
    DailyProcurement,
    POEntry,
    POStatus,
    ProcurementBreakdown,
    SalesBreakdown,
    WeeklyRecord,
)
from .validation import validate_weekly_sequence
from ..core.config import CONFIG

logger = logging.getLogger(__name__)


# Column aliases observed in planning exports. Values are compared after
# lower-casing and stripping everything but letters and digits, so
# "Lagerbestand (Anfang)" and "lagerbestand_anfang" resolve identically.
WEEKLY_COLUMN_ALIASES: dict[str, Sequence[str]] = {
    "week": ("week", "kw", "woche", "kalenderwoche"),
    "year": ("year", "jahr"),
    "inventory_start": (
        "inventory_start",
        "lagerbestand_anfang",
        "lagerbestandanfang",
        "lagerbestand anfangs kw",
    ),
    "sales_budget": ("sales_budget", "salesbudget", "budget"),
    "budget_baseline": ("budget_baseline", "sales_budget_baseline"),
    "budget_kartonware": ("budget_kartonware", "sales_budget_kartonware"),
    "budget_displays": ("budget_displays", "sales_budget_displays"),
    "forecast_baseline": (
        "forecast_baseline",
        "sales_forecast_baseline",
        "baseline",
    ),
    "forecast_kartonware": (
        "forecast_kartonware",
        "sales_forecast_kartonware",
        "kartonware",
        "promo_kartonware",
    ),
    "forecast_displays": (
        "forecast_displays",
        "sales_forecast_displays",
        "displays",
        "promo_displays",
    ),
    "sales_order_in_system": (
        "sales_order_in_system",
        "sales_order_im_system",
        "salesorderimsystem",
        "orders_in_system",
    ),
    "sales_actuals": ("sales_actuals", "actuals", "ist"),
    "procurement_forecast": ("procurement_forecast", "beschaffung_forecast"),
    "procurement_ordered": ("procurement_ordered", "ordered", "po_bestellt", "bestellt"),
    "procurement_delivered": (
        "procurement_delivered",
        "delivered",
        "po_geliefert",
        "geliefert",
    ),
    "inventory_end": ("inventory_end", "lagerbestand_ende", "lagerbestandende"),
}

PO_COLUMN_ALIASES: dict[str, Sequence[str]] = {
    "po_nummer": ("po_nummer", "ponummer", "po", "po_number", "po nr"),
    "menge": ("menge", "qty", "quantity", "qty_ea"),
    "liefertermin": ("liefertermin", "lieferdatum", "delivery_date", "eta"),
    "artikel_id": ("artikel_id", "artikelid", "article_id", "articleid"),
}

NUMERIC_WEEKLY_COLUMNS = (
    "inventory_start",
    "budget_baseline",
    "budget_kartonware",
    "budget_displays",
    "forecast_baseline",
    "forecast_kartonware",
    "forecast_displays",
    "sales_order_in_system",
    "procurement_forecast",
    "procurement_ordered",
    "procurement_delivered",
    "inventory_end",
)


def _canonical(name: object) -> str:
    return re.sub(r"[^0-9a-z]", "", str(name).strip().casefold())


def _rename_by_aliases(
    frame: pd.DataFrame, aliases: dict[str, Sequence[str]]
) -> pd.DataFrame:
    """Rename the columns of *frame* to their canonical names using *aliases*."""

    lookup: dict[str, str] = {}
    for col in frame.columns:
        key = _canonical(col)
        if key and key not in lookup:
            lookup[key] = col

    rename_map: dict[str, str] = {}
    consumed: set[str] = set()
    for canonical, names in aliases.items():
        for alias in names:
            match = lookup.get(_canonical(alias))
            if match is None or match in consumed:
                continue
            if match != canonical:
                rename_map[match] = canonical
            consumed.add(match)
            break

    return frame.rename(columns=rename_map)


def format_week_label(value: object) -> str:
    """주차 값을 "KW13" 형식 라벨로 변환합니다 (13, "13", "kw13" 모두 허용)."""

    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        if pd.isna(value):
            raise ValidationError("주차 값이 비어 있습니다.")
        return f"{CONFIG.calendar.week_prefix}{int(value)}"

    text = str(value).strip()
    digits = re.sub(r"\D", "", text)
    if not digits:
        raise ValidationError(f"주차 값을 해석할 수 없습니다: {value!r}")
    return f"{CONFIG.calendar.week_prefix}{int(digits)}"


def normalize_weekly_frame(frame: pd.DataFrame) -> pd.DataFrame:
    """
    주간 계획 테이블의 컬럼명과 타입을 표준화합니다.

    정규화 결과:
    - week: "KW13" 형식 문자열
    - year: 정수
    - 수량 컬럼: 숫자 (변환 실패 시 0)
    - sales_actuals: 숫자 또는 NaN (과거 주차만 값 존재)
    - sales_budget: 없으면 예산 분해 합계로 채움
    - 결과는 (year, 주차 번호) 기준으로 정렬

    Args:
        frame: 원본 주간 데이터프레임

    Returns:
        정규화된 데이터프레임 복사본. 원본은 변경되지 않습니다.

    Raises:
        ValidationError: week 또는 year 컬럼이 없을 경우
    """
    # ========================================
    # 1단계: 컬럼명 표준화
    # ========================================
    out = _rename_by_aliases(frame.copy(), WEEKLY_COLUMN_ALIASES)

    missing = [col for col in ("week", "year") if col not in out.columns]
    if missing:
        logger.error(f"Weekly frame is missing columns: {missing}")
        raise ValidationError(
            "주간 데이터에 필요한 컬럼이 없습니다: " + ", ".join(missing)
        )

    # ========================================
    # 2단계: 주차/연도 정규화
    # ========================================
    out["week"] = out["week"].map(format_week_label)
    out["year"] = pd.to_numeric(out["year"], errors="coerce")
    if out["year"].isna().any():
        logger.error("Weekly frame contains rows without a valid year")
        raise ValidationError("연도 값이 비어 있거나 숫자가 아닌 행이 있습니다.")
    out["year"] = out["year"].astype(int)

    # ========================================
    # 3단계: 수량 컬럼 정규화
    # ========================================
    for col in NUMERIC_WEEKLY_COLUMNS:
        if col in out.columns:
            out[col] = pd.to_numeric(out[col], errors="coerce").fillna(0)
        elif col == "inventory_start":
            out[col] = CONFIG.inventory.default_initial_inventory
        else:
            out[col] = 0

    if "sales_actuals" in out.columns:
        out["sales_actuals"] = pd.to_numeric(out["sales_actuals"], errors="coerce")
    else:
        out["sales_actuals"] = float("nan")

    # 예산 합계가 없으면 분해 값의 합으로 계산
    if "sales_budget" in out.columns:
        out["sales_budget"] = pd.to_numeric(out["sales_budget"], errors="coerce")
    else:
        out["sales_budget"] = float("nan")
    budget_sum = (
        out["budget_baseline"] + out["budget_kartonware"] + out["budget_displays"]
    )
    out["sales_budget"] = out["sales_budget"].fillna(budget_sum)

    # 요일별 조달 예측 (선택 컬럼)
    for day in CONFIG.calendar.weekday_keys:
        col = f"daily_{day}"
        if col in out.columns:
            out[col] = pd.to_numeric(out[col], errors="coerce").fillna(0)

    # ========================================
    # 4단계: 시간순 정렬
    # ========================================
    out["_week_no"] = out["week"].str.replace(r"\D", "", regex=True).astype(int)
    out = out.sort_values(["year", "_week_no"], kind="stable")
    out = out.drop(columns="_week_no").reset_index(drop=True)

    return out


def _daily_from_row(row: pd.Series) -> Optional[DailyProcurement]:
    keys = CONFIG.calendar.weekday_keys
    columns = [f"daily_{day}" for day in keys]
    if not any(col in row.index for col in columns):
        return None
    values = {
        day: float(row[f"daily_{day}"]) if f"daily_{day}" in row.index else 0.0
        for day in keys
    }
    return DailyProcurement(**values)


def records_from_frame(
    frame: pd.DataFrame,
    *,
    initial_inventory: Optional[float] = None,
) -> list[WeeklyRecord]:
    """
    주간 데이터프레임을 WeeklyRecord 리스트로 변환합니다.

    Args:
        frame: 원본 또는 정규화된 주간 데이터프레임
        initial_inventory: 첫 주차 시작 재고 (지정 시 테이블 값보다 우선)

    Returns:
        시간순으로 정렬된 WeeklyRecord 리스트.
        inventory_end는 로드된 값 그대로이며, 체인 계산은 호출자가 수행합니다.

    Raises:
        ValidationError: 필수 컬럼 누락 또는 주차 중복 시
    """
    normalized = normalize_weekly_frame(frame)
    logger.debug(f"Converting {len(normalized)} weekly rows to records")

    records: list[WeeklyRecord] = []
    for _, row in normalized.iterrows():
        actuals = row["sales_actuals"]
        records.append(
            WeeklyRecord(
                week=row["week"],
                year=int(row["year"]),
                inventory_start=float(row["inventory_start"]),
                sales_budget=float(row["sales_budget"]),
                sales_budget_breakdown=SalesBreakdown.of(
                    float(row["budget_baseline"]),
                    float(row["budget_kartonware"]),
                    float(row["budget_displays"]),
                ),
                sales_forecast_breakdown=SalesBreakdown.of(
                    float(row["forecast_baseline"]),
                    float(row["forecast_kartonware"]),
                    float(row["forecast_displays"]),
                ),
                sales_order_in_system=float(row["sales_order_in_system"]),
                procurement_breakdown=ProcurementBreakdown(
                    forecast=float(row["procurement_forecast"]),
                    ordered=float(row["procurement_ordered"]),
                    delivered=float(row["procurement_delivered"]),
                ),
                sales_actuals=None if pd.isna(actuals) else float(actuals),
                procurement_daily=_daily_from_row(row),
                inventory_end=float(row["inventory_end"]),
            )
        )

    if records and initial_inventory is not None:
        first = records[0]
        records[0] = replace(first, inventory_start=float(initial_inventory))

    validate_weekly_sequence(records)
    return records


def po_entries_from_frame(
    frame: pd.DataFrame, *, artikel_id: Optional[str] = None
) -> list[POEntry]:
    """
    PO 테이블을 POEntry 리스트로 변환합니다.

    모든 PO는 미연결(unlinked) 상태로 생성됩니다. 연결은
    :class:`~scm_planner.session.po_links.POLinkStore`가 관리합니다.

    Args:
        frame: 원본 PO 데이터프레임
        artikel_id: artikel_id 컬럼이 없을 때 사용할 품목 ID

    Raises:
        ValidationError: po_nummer 컬럼이 없거나 PO 번호가 중복될 경우
    """
    out = _rename_by_aliases(frame.copy(), PO_COLUMN_ALIASES)

    if "po_nummer" not in out.columns:
        logger.error("PO frame is missing po_nummer column")
        raise ValidationError("PO 데이터에 PO 번호 컬럼이 없습니다.")

    out = out[out["po_nummer"].notna()].copy()
    out["po_nummer"] = out["po_nummer"].astype(str).str.strip()
    out = out[out["po_nummer"].ne("") & out["po_nummer"].str.lower().ne("nan")]

    duplicated = out["po_nummer"][out["po_nummer"].duplicated()].unique().tolist()
    if duplicated:
        logger.error(f"Duplicate PO numbers: {duplicated}")
        raise ValidationError("PO 번호가 중복되었습니다: " + ", ".join(duplicated))

    menge = (
        pd.to_numeric(out["menge"], errors="coerce").fillna(0)
        if "menge" in out.columns
        else pd.Series(0, index=out.index)
    )
    termin = (
        out["liefertermin"].fillna("").astype(str)
        if "liefertermin" in out.columns
        else pd.Series("", index=out.index)
    )
    if "artikel_id" in out.columns:
        artikel = out["artikel_id"].astype(str).str.strip()
    else:
        artikel = pd.Series(artikel_id or "", index=out.index)

    return [
        POEntry(
            po_nummer=po,
            menge=float(qty),
            liefertermin=term,
            artikel_id=art,
            status=POStatus.UNLINKED,
        )
        for po, qty, term, art in zip(out["po_nummer"], menge, termin, artikel)
    ]
