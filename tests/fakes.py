from __future__ import annotations

import threading
from contextlib import contextmanager, nullcontext
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from src.timekeeping.timekeeping.attendance.model import AttendanceRecord, AttendanceSession
from src.timekeeping.timekeeping.corrections.model import TimeCorrectionRequest
from src.timekeeping.timekeeping.core.enums import EmployeeStatus, LeaveType, PayrollStatus, RequestStatus
from src.timekeeping.timekeeping.core.exceptions import ConflictError
from src.timekeeping.timekeeping.employees.model import Employee
from src.timekeeping.timekeeping.leave.model import LeaveAccrual, LeaveBalance, LeaveRequest
from src.timekeeping.timekeeping.overtime.model import OvertimeRequest
from src.timekeeping.timekeeping.payroll.model import PayrollPeriod, PayrollRecord

CREATED_AT = datetime(2026, 2, 1, 10, 0, 0)


class NoTransactions:
    def transaction(self):
        return nullcontext()


class SnapshotTransactions:
    """Restores the listed fakes' stored rows when the outermost block raises."""

    def __init__(self, *repos):
        self.repos = list(repos)
        self.rollbacks = 0
        self._depth = 0

    @staticmethod
    def _snapshot(repo) -> dict:
        state = {}
        for name, value in vars(repo).items():
            if isinstance(value, (dict, list)):
                state[name] = value.copy()
            elif isinstance(value, int):
                state[name] = value
        return state

    @contextmanager
    def transaction(self):
        outer = self._depth == 0
        saved = [(repo, self._snapshot(repo)) for repo in self.repos] if outer else []
        self._depth += 1
        try:
            yield self
        except Exception:
            if outer:
                for repo, state in saved:
                    for name, value in state.items():
                        setattr(repo, name, value)
                self.rollbacks += 1
            raise
        finally:
            self._depth -= 1


@dataclass
class InMemoryEmployees:
    employees_by_id: dict[int, Employee] = field(default_factory=dict)

    def add(self, employee_id: int, status: EmployeeStatus = EmployeeStatus.ACTIVE, base_salary="17600") -> Employee:
        emp = Employee(
            employee_id=employee_id,
            employee_code=f"EMP{employee_id:03d}",
            status=status,
            base_salary=Decimal(base_salary),
        )
        self.employees_by_id[employee_id] = emp
        return emp

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.employees_by_id.get(int(employee_id))


@dataclass
class InMemorySettings:
    values: dict[str, str] = field(default_factory=dict)

    def get_value(self, key: str) -> Optional[str]:
        return self.values.get(key)


class InMemoryAttendance:
    def __init__(self):
        self.records: dict[int, AttendanceRecord] = {}
        self.sessions: dict[int, AttendanceSession] = {}
        self.locked: list[int] = []
        self.locking_reads: list[tuple] = []
        self._lock = threading.Lock()
        self._next_record = 0
        self._next_session = 0

    # Records
    def get_record(self, record_id):
        return self.records.get(int(record_id))

    def get_for_employee_and_date(self, employee_id, work_date, *, for_update=False):
        if for_update:
            self.locking_reads.append(("record", employee_id, work_date))
        for r in self.records.values():
            if r.employee_id == employee_id and r.work_date == work_date:
                return r
        return None

    def create_record(self, *, employee_id, work_date, overall_status):
        with self._lock:
            if self.get_for_employee_and_date(employee_id, work_date):
                raise ConflictError("Duplicate entry for uq_employee_date")
            self._next_record += 1
            rec = AttendanceRecord(
                record_id=self._next_record,
                employee_id=employee_id,
                work_date=work_date,
                overall_status=overall_status,
                created_at=CREATED_AT,
            )
            self.records[rec.record_id] = rec
            return rec

    def lock_record(self, record_id):
        self.locked.append(int(record_id))

    def update_status(self, *, record_id, overall_status):
        rec = self.records.get(int(record_id))
        if not rec:
            return False
        self.records[rec.record_id] = replace(rec, overall_status=overall_status)
        return True

    def list_records(self, *, employee_id, start_date, end_date):
        rows = [
            r for r in self.records.values()
            if r.employee_id == employee_id and start_date <= r.work_date <= end_date
        ]
        return sorted(rows, key=lambda r: r.work_date)

    # Sessions
    def get_session(self, session_id):
        return self.sessions.get(int(session_id))

    def list_sessions(self, record_id, *, for_update=False):
        if for_update:
            self.locking_reads.append(("sessions", int(record_id)))
        rows = [s for s in self.sessions.values() if s.record_id == int(record_id)]
        return sorted(rows, key=lambda s: (s.effective_time or datetime.min, s.session_id))

    def list_sessions_for_records(self, record_ids):
        return {rid: self.list_sessions(rid) for rid in record_ids}

    def create_session(self, *, record_id, session_type, clock_in, clock_out, selfie_image_path=None, qr_code_hash=None):
        with self._lock:
            if session_type.is_slot and any(
                s.record_id == record_id and s.session_type == session_type for s in self.sessions.values()
            ):
                raise ConflictError("Duplicate entry for uq_record_slot")
            self._next_session += 1
            s = AttendanceSession(
                session_id=self._next_session,
                record_id=record_id,
                session_type=session_type,
                clock_in=clock_in,
                clock_out=clock_out,
                selfie_image_path=selfie_image_path,
                qr_code_hash=qr_code_hash,
                created_at=CREATED_AT,
            )
            self.sessions[s.session_id] = s
            return s

    def update_session_times(self, *, session_id, clock_in, clock_out):
        s = self.sessions.get(int(session_id))
        if not s:
            return False
        self.sessions[s.session_id] = replace(s, clock_in=clock_in, clock_out=clock_out)
        return True

    def update_calculated_hours(self, hours_by_session):
        for sid, hours in hours_by_session.items():
            s = self.sessions.get(int(sid))
            if s:
                self.sessions[s.session_id] = replace(s, calculated_hours=max(0.0, float(hours)))

    def latest_session_for_day(self, employee_id, work_date):
        rec = self.get_for_employee_and_date(employee_id, work_date)
        if not rec:
            return None
        sessions = self.list_sessions(rec.record_id)
        return sessions[-1] if sessions else None


class _InMemoryRequests:
    """Shared bookkeeping for overtime and correction requests."""

    def __init__(self):
        self.rows: dict[int, object] = {}
        self._lock = threading.Lock()
        self._next_id = 0

    def _new_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def get(self, request_id):
        return self.rows.get(int(request_id))

    def list_for_employee(self, employee_id, *, status=None, start_date=None, end_date=None, limit=200):
        rows = [
            r for r in self.rows.values()
            if r.employee_id == employee_id
            and (status is None or r.status == status)
            and (start_date is None or r.request_date >= start_date)
            and (end_date is None or r.request_date <= end_date)
        ]
        rows.sort(key=lambda r: (r.request_date, r.request_id), reverse=True)
        return rows if limit is None else rows[:limit]

    def decide(self, *, request_id, status, approved_by, approved_at, comments=None):
        with self._lock:
            req = self.rows.get(int(request_id))
            if not req or req.status != RequestStatus.PENDING:
                return False
            self.rows[req.request_id] = replace(
                req, status=status, approved_by=approved_by, approved_at=approved_at, comments=comments
            )
            return True

    def delete_pending(self, request_id):
        with self._lock:
            req = self.rows.get(int(request_id))
            if not req or req.status != RequestStatus.PENDING:
                return False
            del self.rows[req.request_id]
            return True


class InMemoryOvertime(_InMemoryRequests):
    def create(self, *, employee_id, request_date, start_time, end_time, requested_hours, reason):
        req = OvertimeRequest(
            request_id=self._new_id(),
            employee_id=employee_id,
            request_date=request_date,
            start_time=start_time,
            end_time=end_time,
            requested_hours=Decimal(requested_hours),
            reason=reason,
            status=RequestStatus.PENDING,
            created_at=CREATED_AT,
        )
        self.rows[req.request_id] = req
        return req

    def list_pending_for_day(self, employee_id, request_date):
        return self.list_for_employee(
            employee_id, status=RequestStatus.PENDING, start_date=request_date, end_date=request_date, limit=None
        )


class InMemoryCorrections(_InMemoryRequests):
    def create(self, *, employee_id, request_date, session_type, requested_time, reason):
        req = TimeCorrectionRequest(
            request_id=self._new_id(),
            employee_id=employee_id,
            request_date=request_date,
            session_type=session_type,
            requested_time=requested_time,
            reason=reason,
            status=RequestStatus.PENDING,
            created_at=CREATED_AT,
        )
        self.rows[req.request_id] = req
        return req

    def find_pending(self, employee_id, request_date, session_type):
        for r in self.rows.values():
            if (
                r.employee_id == employee_id
                and r.request_date == request_date
                and r.session_type == session_type
                and r.status == RequestStatus.PENDING
            ):
                return r
        return None


class InMemoryLeaveBalances:
    def __init__(self):
        self.rows: dict[tuple[int, LeaveType], LeaveBalance] = {}
        self._lock = threading.Lock()
        self._next_id = 0

    def _put(self, employee_id, leave_type, balance: Decimal) -> LeaveBalance:
        existing = self.rows.get((employee_id, leave_type))
        if existing:
            row = replace(existing, balance=balance)
        else:
            self._next_id += 1
            row = LeaveBalance(balance_id=self._next_id, employee_id=employee_id, leave_type=leave_type, balance=balance)
        self.rows[(employee_id, leave_type)] = row
        return row

    def get(self, employee_id, leave_type):
        return self.rows.get((int(employee_id), leave_type))

    def list_for_employee(self, employee_id):
        return sorted(
            (r for r in self.rows.values() if r.employee_id == int(employee_id)),
            key=lambda r: r.leave_type.value,
        )

    def add_days(self, *, employee_id, leave_type, days):
        with self._lock:
            current = self.rows.get((employee_id, leave_type))
            return self._put(employee_id, leave_type, (current.balance if current else Decimal("0")) + days)

    def consume_days(self, *, employee_id, leave_type, days, clamp):
        with self._lock:
            current = self.rows.get((employee_id, leave_type))
            if not current:
                return None
            if not clamp and current.balance < days:
                return None
            return self._put(employee_id, leave_type, max(Decimal("0"), current.balance - days))

    def upsert_many(self, updates):
        count = 0
        with self._lock:
            for u in updates:
                self._put(u.employee_id, u.leave_type, u.balance)
                count += 1
        return count


class InMemoryPayroll:
    def __init__(self):
        self.periods: dict[int, PayrollPeriod] = {}
        self.records: dict[tuple[int, int], PayrollRecord] = {}
        self._next_id = 0

    def add_period(self, period_id: int, start_date: date, end_date: date, expected_hours=None) -> PayrollPeriod:
        period = PayrollPeriod(
            payroll_period_id=period_id,
            start_date=start_date,
            end_date=end_date,
            expected_hours=Decimal(expected_hours) if expected_hours is not None else None,
        )
        self.periods[period_id] = period
        return period

    def set_status(self, period_id: int, employee_id: int, status: PayrollStatus) -> None:
        key = (period_id, employee_id)
        self.records[key] = replace(self.records[key], status=status)

    def get_period(self, payroll_period_id):
        return self.periods.get(int(payroll_period_id))

    def get_record(self, payroll_period_id, employee_id, *, for_update=False):
        return self.records.get((int(payroll_period_id), int(employee_id)))

    def save_draft(self, *, payroll_period_id, employee_id, base_salary, inputs, amounts):
        key = (payroll_period_id, employee_id)
        existing = self.records.get(key)
        if existing:
            record_id = existing.payroll_record_id
        else:
            self._next_id += 1
            record_id = self._next_id
        record = PayrollRecord(
            payroll_record_id=record_id,
            payroll_period_id=payroll_period_id,
            employee_id=employee_id,
            base_salary=base_salary,
            hourly_rate=amounts.hourly_rate,
            total_worked_hours=inputs.total_worked_hours,
            total_regular_hours=inputs.total_regular_hours,
            total_overtime_hours=inputs.total_overtime_hours,
            total_late_hours=inputs.total_late_hours,
            late_deductions=amounts.late_deductions,
            gross_pay=amounts.gross_pay,
            net_pay=amounts.net_pay,
            total_deductions=amounts.total_deductions,
            total_benefits=amounts.total_benefits,
            status=PayrollStatus.DRAFT,
        )
        self.records[key] = record
        return record


class InMemoryLeaveAccruals:
    def __init__(self):
        self.rows: dict[int, LeaveAccrual] = {}
        self._next_id = 0

    def create(self, *, employee_id, overtime_request_id, overtime_hours, leave_days, leave_type):
        if self.get_for_overtime_request(overtime_request_id):
            raise ConflictError(f"Overtime request {overtime_request_id} has already accrued leave")
        self._next_id += 1
        row = LeaveAccrual(
            accrual_id=self._next_id,
            employee_id=employee_id,
            overtime_request_id=overtime_request_id,
            overtime_hours=overtime_hours,
            leave_days=leave_days,
            leave_type=leave_type,
            created_at=CREATED_AT,
        )
        self.rows[row.accrual_id] = row
        return row

    def get_for_overtime_request(self, overtime_request_id):
        for r in self.rows.values():
            if r.overtime_request_id == int(overtime_request_id):
                return r
        return None

    def list_for_employee(self, employee_id, *, start_date=None, end_date=None):
        rows = [
            r for r in self.rows.values()
            if r.employee_id == int(employee_id)
            and (start_date is None or r.created_at.date() >= start_date)
            and (end_date is None or r.created_at.date() <= end_date)
        ]
        return sorted(rows, key=lambda r: r.accrual_id, reverse=True)


class InMemoryLeaveRequests(_InMemoryRequests):
    def create(self, *, employee_id, leave_type, start_date, end_date, total_days, reason):
        req = LeaveRequest(
            request_id=self._new_id(),
            employee_id=employee_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            total_days=Decimal(total_days),
            reason=reason,
            status=RequestStatus.PENDING,
            created_at=CREATED_AT,
        )
        self.rows[req.request_id] = req
        return req

    def list_for_employee(self, employee_id, *, status=None, limit=200):
        rows = [
            r for r in self.rows.values()
            if r.employee_id == employee_id and (status is None or r.status == status)
        ]
        rows.sort(key=lambda r: (r.start_date, r.request_id), reverse=True)
        return rows if limit is None else rows[:limit]

    def list_approved_overlapping(self, employee_id, start_date, end_date):
        return [
            r for r in self.rows.values()
            if r.employee_id == employee_id
            and r.status == RequestStatus.APPROVED
            and r.start_date <= end_date
            and r.end_date >= start_date
        ]
