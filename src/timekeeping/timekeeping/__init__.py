"""Timekeeping package.

Attendance timeline, hours calculation, overtime / time-correction approval
workflows, leave ledger and payroll aggregation. Organized by feature module
with repository/service layers and a thin Flask controller layer.
"""
