"""
Audit Logger

DESIGN DECISION: Every mutation of the collection, and every failure
the core recovers from on its own, is logged.
This provides:
1. Traceability of edits and deletions
2. Debugging capability when stored data is corrupt
3. A record of what was exported and when

The audit logger:
- Gracefully handles failures (doesn't crash the app if a sink fails)
- Supports correlation IDs to trace related events
"""

import logging
import sys
from typing import Callable, Optional
from uuid import UUID, uuid4

import structlog
from pydantic import ValidationError

from orcamentos.models.audit import AuditEvent, AuditEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(ensure_ascii=False)
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route structlog output to stderr at the given level.

    structlog renders each event to a single JSON line, so the stdlib
    handler only needs to print the message.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An optional sink (e.g. an in-app history panel, or a test)
    """

    def __init__(
        self,
        sink: Optional[Callable[[AuditEvent], None]] = None,
    ):
        """
        Initialize audit logger.

        Args:
            sink: Extra destination that receives every event.
                  If None, only logs locally.
        """
        self._sink = sink
        self._logger = structlog.get_logger("orcamentos.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Forwards to the sink if configured.

        Returns True if the sink accepted the event (or no sink configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value == "error":
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._sink:
            try:
                self._sink(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_sink_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def _record(self, build: Callable[..., AuditEvent], **kwargs) -> bool:
        """
        Build an event and log it.

        An event that cannot be built is logged as such and dropped; the
        operation being audited has already happened.
        """
        try:
            event = build(**kwargs)
        except ValidationError as e:
            self._logger.error(
                "audit_event_invalid",
                builder=build.__name__,
                error=str(e),
            )
            return False
        return self.log(event)

    def log_budget_created(
        self,
        item_id: str,
        titulo: str,
        valor: float,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log budget creation."""
        self._record(
            AuditEventBuilder.budget_created,
            item_id=item_id,
            titulo=titulo,
            valor=valor,
            correlation_id=correlation_id,
        )

    def log_budget_updated(
        self,
        item_id: str,
        changed_fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log budget update."""
        self._record(
            AuditEventBuilder.budget_updated,
            item_id=item_id,
            changed_fields=changed_fields,
            correlation_id=correlation_id,
        )

    def log_budget_deleted(
        self,
        item_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log budget deletion."""
        self._record(
            AuditEventBuilder.budget_deleted,
            item_id=item_id,
            correlation_id=correlation_id,
        )

    def log_budget_not_found(
        self,
        item_id: str,
        operation: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._record(
            AuditEventBuilder.budget_not_found,
            item_id=item_id,
            operation=operation,
            correlation_id=correlation_id,
        )

    def log_validation_failed(
        self,
        errors: dict[str, str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log validation failure."""
        self._record(
            AuditEventBuilder.validation_failed,
            errors=errors,
            correlation_id=correlation_id,
        )

    def log_export_generated(
        self,
        export_format: str,
        record_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._record(
            AuditEventBuilder.export_generated,
            export_format=export_format,
            record_count=record_count,
            correlation_id=correlation_id,
        )

    def log_export_empty(
        self,
        export_format: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._record(
            AuditEventBuilder.export_empty,
            export_format=export_format,
            correlation_id=correlation_id,
        )

    def log_storage_corrupt(
        self,
        key: str,
        error_message: str,
    ) -> None:
        """Log unreadable stored data."""
        self._record(
            AuditEventBuilder.storage_corrupt,
            key=key,
            error_message=error_message,
        )

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        self._record(
            AuditEventBuilder.system_error,
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., a form submit).
    Pass it through all subsequent operations.
    """
    return uuid4()
