"""
Unit tests for the write-once payslip stores.
"""

import pytest
import json
import tempfile
import threading
from datetime import date, datetime
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.entities import (
    AttendanceTotals, CompensationProfile, Payslip, PayrollPeriod, PayType
)
from domain.exceptions import PayslipAlreadyExistsError
from domain.payroll_calculator import calculate_payroll
from infrastructure.payslip_store import (
    InMemoryPayslipStore, JsonPayslipStore, payslip_from_dict, payslip_to_dict
)


def make_payslip(employee_id: str = "EMP-001", payslip_id: str = "PS-2026-01-0001",
                 month: int = 1) -> Payslip:
    period = PayrollPeriod.for_month(2026, month)
    calc = calculate_payroll(
        CompensationProfile(pay_type=PayType.DAILY, daily_rate=1000),
        AttendanceTotals(regular_hours=8 * period.working_days),
        period
    )
    return Payslip(
        id=payslip_id,
        employee_id=employee_id,
        employee_name="Maria Santos",
        department="Engineering",
        position="Developer",
        period=period,
        calculation=calc,
        generated_at=datetime(2026, 2, 1, 9, 0),
        generated_by="HR Department"
    )


class TestInMemoryPayslipStore:
    """Tests for InMemoryPayslipStore."""

    def test_save_and_get(self):
        store = InMemoryPayslipStore()
        payslip = make_payslip()

        store.save(payslip)

        assert store.exists("EMP-001", "2026-01")
        assert store.get("EMP-001", "2026-01") is payslip
        assert store.get("EMP-001", "2026-02") is None

    def test_second_save_rejected(self):
        store = InMemoryPayslipStore()
        first = make_payslip(payslip_id="PS-A")
        store.save(first)

        with pytest.raises(PayslipAlreadyExistsError) as exc_info:
            store.save(make_payslip(payslip_id="PS-B"))

        assert exc_info.value.period_key == "2026-01"
        assert store.get("EMP-001", "2026-01").id == "PS-A"

    def test_list_for_period(self):
        store = InMemoryPayslipStore()
        store.save(make_payslip("EMP-001"))
        store.save(make_payslip("EMP-002"))
        store.save(make_payslip("EMP-001", month=2))

        assert {p.employee_id for p in store.list_for_period("2026-01")} == {"EMP-001", "EMP-002"}
        assert len(store.list_for_period("2026-02")) == 1

    def test_concurrent_saves_only_one_wins(self):
        store = InMemoryPayslipStore()
        errors = []

        def worker(index):
            try:
                store.save(make_payslip(payslip_id=f"PS-{index}"))
            except PayslipAlreadyExistsError as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(errors) == 7
        assert len(store.list_for_period("2026-01")) == 1


class TestJsonPayslipStore:
    """Tests for JsonPayslipStore persistence."""

    def test_persists_across_instances(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "data" / "payslips.json"
            payslip = make_payslip()
            JsonPayslipStore(path).save(payslip)

            reloaded = JsonPayslipStore(path)

            assert reloaded.exists("EMP-001", "2026-01")
            restored = reloaded.get("EMP-001", "2026-01")
            assert restored.calculation == payslip.calculation
            assert restored.period == payslip.period
            assert restored.generated_at == payslip.generated_at

    def test_write_once_survives_reload(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "payslips.json"
            JsonPayslipStore(path).save(make_payslip(payslip_id="PS-A"))

            reloaded = JsonPayslipStore(path)
            with pytest.raises(PayslipAlreadyExistsError):
                reloaded.save(make_payslip(payslip_id="PS-B"))
            assert JsonPayslipStore(path).get("EMP-001", "2026-01").id == "PS-A"

    def test_file_uses_camel_case_payload(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "payslips.json"
            JsonPayslipStore(path).save(make_payslip())

            data = json.loads(path.read_text(encoding='utf-8'))
            item = data["payslips"][0]

            assert item["employeeId"] == "EMP-001"
            assert item["payrollPeriod"]["workingDays"] == 22
            assert item["payrollPeriod"]["attendanceStatus"] == "finalized"
            assert item["calculation"]["netPay"] == make_payslip().calculation.net_pay
            assert item["status"] == "generated"
            assert not path.with_suffix(".json.tmp").exists()

    def test_failed_write_leaves_no_payslip(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            blocker = Path(tmpdir) / "blocker"
            blocker.write_text("not a directory", encoding='utf-8')
            store = JsonPayslipStore(blocker / "payslips.json")

            with pytest.raises(OSError):
                store.save(make_payslip())

            assert not store.exists("EMP-001", "2026-01")

            store.file_path = Path(tmpdir) / "payslips.json"
            store.save(make_payslip())
            assert JsonPayslipStore(store.file_path).exists("EMP-001", "2026-01")

    def test_missing_file_is_empty_store(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            store = JsonPayslipStore(Path(tmpdir) / "none.json")
            assert store.list_for_period("2026-01") == []


class TestSerialization:
    """Tests for payslip dict conversion."""

    def test_round_trip(self):
        payslip = make_payslip()
        restored = payslip_from_dict(json.loads(json.dumps(payslip_to_dict(payslip))))

        assert restored == payslip

    def test_period_dates(self):
        data = payslip_to_dict(make_payslip())
        assert data["payrollPeriod"]["startDate"] == "2026-01-01"
        assert data["payrollPeriod"]["endDate"] == "2026-01-31"
        assert payslip_from_dict(data).period.start_date == date(2026, 1, 1)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
