from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ..core.enums import LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import LeaveBalance, LeaveBalanceUpdate
from .repository import LeaveBalanceRepository


def _to_balance(r: dict) -> LeaveBalance:
    return LeaveBalance(
        balance_id=int(r["balance_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        balance=as_decimal(r["balance"]),
        updated_at=r.get("updated_at"),
    )


class MySQLLeaveBalanceRepository(LeaveBalanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select(self, cur, employee_id: int, leave_type: LeaveType) -> Optional[LeaveBalance]:
        cur.execute(
            """
            SELECT balance_id, employee_id, leave_type, balance, updated_at
            FROM leave_balances
            WHERE employee_id=%s AND leave_type=%s
            """,
            (int(employee_id), leave_type.value),
        )
        r = fetchone(cur)
        return _to_balance(r) if r else None

    def get(self, employee_id: int, leave_type: LeaveType) -> Optional[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._select(cur, employee_id, leave_type)

    def list_for_employee(self, employee_id: int) -> Sequence[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT balance_id, employee_id, leave_type, balance, updated_at
                FROM leave_balances
                WHERE employee_id=%s
                ORDER BY leave_type ASC
                """,
                (int(employee_id),),
            )
            return [_to_balance(r) for r in fetchall(cur)]

    def add_days(self, *, employee_id: int, leave_type: LeaveType, days: Decimal) -> LeaveBalance:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_balances(employee_id, leave_type, balance)
                VALUES(%s,%s,%s) AS new
                ON DUPLICATE KEY UPDATE balance = leave_balances.balance + new.balance
                """,
                (int(employee_id), leave_type.value, days),
            )
            return self._select(cur, employee_id, leave_type)

    def consume_days(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        days: Decimal,
        clamp: bool,
    ) -> Optional[LeaveBalance]:
        where = "employee_id=%s AND leave_type=%s"
        params: list[object] = [days, int(employee_id), leave_type.value]
        if not clamp:
            where += " AND balance >= %s"
            params.append(days)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE leave_balances
                SET balance = GREATEST(0, balance - %s)
                WHERE {where}
                """,
                tuple(params),
            )
            if cur.rowcount <= 0:
                return None
            return self._select(cur, employee_id, leave_type)

    def upsert_many(self, updates: Iterable[LeaveBalanceUpdate]) -> int:
        rows = [(int(u.employee_id), u.leave_type.value, u.balance) for u in updates]
        if not rows:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO leave_balances(employee_id, leave_type, balance)
                VALUES(%s,%s,%s) AS new
                ON DUPLICATE KEY UPDATE balance = new.balance
                """,
                rows,
            )
        return len(rows)
