"""
Audit Models for Orçamentos

Every mutation of the budget collection (and every recovered failure)
is described by an AuditEvent and written to the structured log.
This provides:
1. Traceability of what was created, edited and removed
2. Debugging information when stored data turns out to be corrupt
3. A record of exports

DESIGN DECISION: Audit events go to the log only. The collection's
storage key holds budget items and nothing else.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Persistence
    BUDGET_CREATED = "budget_created"
    BUDGET_UPDATED = "budget_updated"
    BUDGET_DELETED = "budget_deleted"
    BUDGET_NOT_FOUND = "budget_not_found"

    # Validation
    VALIDATION_FAILED = "validation_failed"

    # Export
    EXPORT_GENERATED = "export_generated"
    EXPORT_EMPTY = "export_empty"

    # Storage
    STORAGE_CORRUPT = "storage_corrupt"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'budget', 'export')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = None

    description: str = Field(
        ...,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.budget_created(item_id, titulo, valor)
        event = AuditEventBuilder.storage_corrupt(key, error)
    """

    @staticmethod
    def budget_created(
        item_id: str,
        titulo: str,
        valor: float,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_CREATED,
            entity_type="budget",
            entity_id=item_id,
            correlation_id=correlation_id,
            description=f"Budget created: {titulo}",
            details={"titulo": titulo, "valor": valor},
            is_user_action=True,
        )

    @staticmethod
    def budget_updated(
        item_id: str,
        changed_fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_UPDATED,
            entity_type="budget",
            entity_id=item_id,
            correlation_id=correlation_id,
            description=f"Budget updated ({len(changed_fields)} fields changed)",
            details={"changed_fields": changed_fields},
            is_user_action=True,
        )

    @staticmethod
    def budget_deleted(
        item_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_DELETED,
            entity_type="budget",
            entity_id=item_id,
            correlation_id=correlation_id,
            description="Budget deleted",
            is_user_action=True,
        )

    @staticmethod
    def budget_not_found(
        item_id: str,
        operation: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_NOT_FOUND,
            severity=AuditSeverity.WARNING,
            entity_type="budget",
            entity_id=item_id,
            correlation_id=correlation_id,
            description=f"Budget not found for {operation}",
            details={"operation": operation},
        )

    @staticmethod
    def validation_failed(
        errors: dict[str, str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="form",
            correlation_id=correlation_id,
            description=f"Validation failed with {len(errors)} issues",
            details={"errors": errors},
            is_user_action=True,
        )

    @staticmethod
    def export_generated(
        export_format: str,
        record_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_GENERATED,
            entity_type="export",
            correlation_id=correlation_id,
            description=f"{export_format.upper()} export with {record_count} records",
            details={"format": export_format, "record_count": record_count},
            is_user_action=True,
        )

    @staticmethod
    def export_empty(
        export_format: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_EMPTY,
            severity=AuditSeverity.WARNING,
            entity_type="export",
            correlation_id=correlation_id,
            description=f"Nothing to export as {export_format.upper()}",
            details={"format": export_format},
            is_user_action=True,
        )

    @staticmethod
    def storage_corrupt(
        key: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_CORRUPT,
            severity=AuditSeverity.ERROR,
            entity_type="storage",
            entity_id=key,
            description=f"Stored data under '{key}' could not be read; treating as empty",
            error_message=error_message,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
