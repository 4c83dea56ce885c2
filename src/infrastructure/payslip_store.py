"""
Payslip Store Module

Write-once persistence for generated payslips, keyed by
(employee_id, period_key).
"""

import json
import threading
from abc import ABC, abstractmethod
from datetime import date, datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from domain.entities import (
    Payslip, PayslipStatus, PayrollCalculation, PayrollPeriod, PeriodAttendanceStatus
)
from domain.exceptions import PayslipAlreadyExistsError
from infrastructure.logger import get_logger

logger = get_logger("PayslipStore")

StoreKey = Tuple[str, str]


class PayslipStore(ABC):
    """Abstract base class for payslip persistence."""

    @abstractmethod
    def exists(self, employee_id: str, period_key: str) -> bool:
        """Check whether a payslip is stored for the employee and period."""
        pass

    @abstractmethod
    def get(self, employee_id: str, period_key: str) -> Optional[Payslip]:
        """Return the stored payslip or None."""
        pass

    @abstractmethod
    def save(self, payslip: Payslip) -> Payslip:
        """
        Store a new payslip.

        Raises:
            PayslipAlreadyExistsError: If a payslip with the same key exists
        """
        pass

    @abstractmethod
    def list_for_period(self, period_key: str) -> List[Payslip]:
        """All payslips stored for a period."""
        pass


class InMemoryPayslipStore(PayslipStore):
    """
    Dict-backed store.

    The check-and-insert in save() runs under a lock, so concurrent
    generations for the same key cannot both succeed.
    """

    def __init__(self):
        self._payslips: Dict[StoreKey, Payslip] = {}
        self._lock = threading.Lock()

    def exists(self, employee_id: str, period_key: str) -> bool:
        with self._lock:
            return (employee_id, period_key) in self._payslips

    def get(self, employee_id: str, period_key: str) -> Optional[Payslip]:
        with self._lock:
            return self._payslips.get((employee_id, period_key))

    def save(self, payslip: Payslip) -> Payslip:
        with self._lock:
            if payslip.key in self._payslips:
                raise PayslipAlreadyExistsError(*payslip.key)
            self._payslips[payslip.key] = payslip
            try:
                self._on_saved()
            except Exception:
                del self._payslips[payslip.key]
                raise
        logger.debug(f"Stored payslip {payslip.id} for {payslip.key}")
        return payslip

    def list_for_period(self, period_key: str) -> List[Payslip]:
        with self._lock:
            return [p for key, p in self._payslips.items() if key[1] == period_key]

    def _on_saved(self) -> None:
        """
        Hook called with the lock held after the insert.

        If it raises, the insert is rolled back and the error propagates.
        """
        pass


class JsonPayslipStore(InMemoryPayslipStore):
    """Store persisted to a single JSON file, rewritten on every save."""

    def __init__(self, file_path: Path):
        super().__init__()
        self.file_path = file_path
        self._load()

    def _load(self) -> None:
        if not self.file_path.exists():
            return
        with open(self.file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        for item in data.get("payslips", []):
            payslip = payslip_from_dict(item)
            self._payslips[payslip.key] = payslip
        logger.info(f"Loaded {len(self._payslips)} payslips from {self.file_path.name}")

    def _on_saved(self) -> None:
        data = {"payslips": [payslip_to_dict(p) for p in self._payslips.values()]}
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.file_path.with_suffix(self.file_path.suffix + ".tmp")
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        tmp_path.replace(self.file_path)


# ==============================================================================
# Serialization
# ==============================================================================
def period_to_dict(period: PayrollPeriod) -> dict:
    return {
        "month": period.month,
        "startDate": period.start_date.isoformat(),
        "endDate": period.end_date.isoformat(),
        "attendanceStatus": period.attendance_status.value,
        "workingDays": period.working_days
    }


def period_from_dict(data: dict) -> PayrollPeriod:
    return PayrollPeriod(
        month=data["month"],
        start_date=date.fromisoformat(data["startDate"]),
        end_date=date.fromisoformat(data["endDate"]),
        attendance_status=PeriodAttendanceStatus(data.get("attendanceStatus", "finalized")),
        working_days=int(data["workingDays"])
    )


def payslip_to_dict(payslip: Payslip) -> dict:
    """Convert a payslip to its JSON payload."""
    return {
        "id": payslip.id,
        "employeeId": payslip.employee_id,
        "employeeName": payslip.employee_name,
        "department": payslip.department,
        "position": payslip.position,
        "payrollPeriod": period_to_dict(payslip.period),
        "calculation": payslip.calculation.to_dict(),
        "generatedAt": payslip.generated_at.isoformat(),
        "generatedBy": payslip.generated_by,
        "status": payslip.status.value
    }


def payslip_from_dict(data: dict) -> Payslip:
    """Convert a JSON payload back to a payslip."""
    return Payslip(
        id=data["id"],
        employee_id=data["employeeId"],
        employee_name=data.get("employeeName", ""),
        department=data.get("department", ""),
        position=data.get("position", ""),
        period=period_from_dict(data["payrollPeriod"]),
        calculation=PayrollCalculation.from_dict(data["calculation"]),
        generated_at=datetime.fromisoformat(data["generatedAt"]),
        generated_by=data.get("generatedBy", ""),
        status=PayslipStatus(data.get("status", "generated"))
    )
