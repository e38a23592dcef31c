from fastapi import APIRouter, Depends

from coopbook.core.audit import write_audit_log
from coopbook.core.dependencies import ensure_success, get_actor, get_engine
from coopbook.schemas.fund import AdminFundCreate, ExpenseEntryCreate, MaintenanceFeeRequest
from coopbook.services.engine import LedgerEngine

router = APIRouter(prefix="/api/funds", tags=["funds"])


@router.get("/admin")
def get_admin_fund(engine: LedgerEngine = Depends(get_engine)):
    """Admin fund entries with their running balance and totals."""
    return {
        "entries": list(engine.admin_fund.entries()),
        "summary": engine.admin_fund_summary(),
    }


@router.post("/admin", status_code=201)
def add_admin_transaction(
    payload: AdminFundCreate,
    actor: str = Depends(get_actor),
    engine: LedgerEngine = Depends(get_engine)
):
    result = ensure_success(engine.add_admin_transaction(payload.amount, payload.type, payload.description))
    write_audit_log(actor, "Admin fund", f"type={payload.type.value} amount={payload.amount}")
    return {"message": result.message, "balance": result.data}


@router.delete("/admin/{entry_id}")
def delete_admin_transaction(
    entry_id: str,
    actor: str = Depends(get_actor),
    engine: LedgerEngine = Depends(get_engine)
):
    result = ensure_success(engine.delete_admin_transaction(entry_id))
    write_audit_log(actor, "Delete admin fund entry", f"entry_id={entry_id}")
    return {"message": result.message, "balance": engine.admin_fund.balance()}


@router.get("/expenses")
def get_expense_ledger(engine: LedgerEngine = Depends(get_engine)):
    return {
        "entries": list(engine.expenses.entries()),
        "summary": engine.expense_summary(),
    }


@router.post("/expenses", status_code=201)
def add_expense_entry(
    payload: ExpenseEntryCreate,
    actor: str = Depends(get_actor),
    engine: LedgerEngine = Depends(get_engine)
):
    result = ensure_success(engine.add_expense_entry(
        payload.amount, payload.type, payload.description, payload.category
    ))
    write_audit_log(
        actor,
        "Expense entry",
        f"type={payload.type.value} category={payload.category.value if payload.category else None} amount={payload.amount}",
    )
    return {"message": result.message, "balance": result.data}


@router.delete("/expenses/{entry_id}")
def delete_expense_entry(
    entry_id: str,
    actor: str = Depends(get_actor),
    engine: LedgerEngine = Depends(get_engine)
):
    result = ensure_success(engine.delete_expense_entry(entry_id))
    write_audit_log(actor, "Delete expense entry", f"entry_id={entry_id}")
    return {"message": result.message, "balance": engine.expenses.balance()}


@router.post("/maintenance", status_code=201)
def collect_maintenance_fee(
    payload: MaintenanceFeeRequest,
    actor: str = Depends(get_actor),
    engine: LedgerEngine = Depends(get_engine)
):
    """Record a member's maintenance fee in the expense ledger."""
    result = ensure_success(engine.collect_maintenance_fee(payload.member_id, payload.amount))
    write_audit_log(actor, "Maintenance fee", f"member_id={payload.member_id} amount={result.data.amount}")
    return {"message": result.message, "entry": result.data}


@router.get("/maintenance/stats")
def get_maintenance_stats(engine: LedgerEngine = Depends(get_engine)):
    return engine.maintenance_stats()
