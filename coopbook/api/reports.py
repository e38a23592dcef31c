from fastapi import APIRouter, Depends, HTTPException
from typing import List, Optional
from datetime import date

from coopbook.core.dependencies import get_engine
from coopbook.schemas.report import AuditReport, CashbookReport, DefaulterRow, MemberReport
from coopbook.services.engine import LedgerEngine

router = APIRouter(prefix="/api/reports", tags=["reports"])


def _check_range(start_date: Optional[date], end_date: Optional[date]):
    if start_date and end_date and start_date > end_date:
        raise HTTPException(status_code=400, detail="start_date must not be after end_date")


@router.get("/audit", response_model=AuditReport)
def get_audit_report(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    as_of: Optional[date] = None,
    engine: LedgerEngine = Depends(get_engine)
):
    """Full audit report. The range defaults to the calendar year of as_of."""
    _check_range(start_date, end_date)
    return engine.get_audit_data(start_date, end_date, as_of)


@router.get("/cashbook", response_model=CashbookReport)
def get_cashbook(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    engine: LedgerEngine = Depends(get_engine)
):
    _check_range(start_date, end_date)
    return engine.get_cashbook_data(start_date, end_date)


@router.get("/members", response_model=List[MemberReport])
def get_member_summary(engine: LedgerEngine = Depends(get_engine)):
    return engine.get_member_summary_data()


@router.get("/defaulters", response_model=List[DefaulterRow])
def get_defaulters(as_of: Optional[date] = None, engine: LedgerEngine = Depends(get_engine)):
    return engine.get_defaulters_data(as_of)


@router.get("/cash-in-hand")
def get_cash_in_hand(engine: LedgerEngine = Depends(get_engine)):
    return {"cash_in_hand": engine.society_cash_in_hand()}
