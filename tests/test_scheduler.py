from datetime import date

from coopbook.services.scheduler import get_scheduler_status, sweep_defaulters


def test_sweep_logs_overdue_loans(engine, active_loan, audit_dir):
    rows = sweep_defaulters(engine, date(2024, 4, 15))

    assert [r.loan_id for r in rows] == [active_loan.id]
    log_files = list(audit_dir.glob("audit_*.log"))
    assert len(log_files) == 1
    assert "defaulter_sweep" in log_files[0].read_text()
    assert "critical=1" in log_files[0].read_text()


def test_sweep_without_overdue_loans(engine, active_loan, audit_dir):
    assert sweep_defaulters(engine, date(2024, 1, 15)) == []
    assert not audit_dir.exists()


def test_status_when_not_running():
    assert get_scheduler_status() == {"running": False, "interval_minutes": None, "jobs": []}
