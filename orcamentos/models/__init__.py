"""
Data Models Package

This package contains all Pydantic models used in Orçamentos.
All data flowing through the system must conform to these schemas.
"""

from orcamentos.models.budget import (
    BUDGET_COLUMNS,
    BudgetFields,
    BudgetItem,
    BudgetQuery,
    QuerySummary,
    SortKey,
    ValidationIssue,
    ValidationResult,
    to_iso_timestamp,
    utc_now,
)
from orcamentos.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from orcamentos.models.session import (
    FormMode,
    SessionState,
)

__all__ = [
    # Budget models
    "BUDGET_COLUMNS",
    "BudgetFields",
    "BudgetItem",
    "BudgetQuery",
    "QuerySummary",
    "SortKey",
    "ValidationIssue",
    "ValidationResult",
    "to_iso_timestamp",
    "utc_now",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    # Session models
    "FormMode",
    "SessionState",
]
