"""
Core Data Models for Orçamentos

These models define the schemas for all data flowing through the system.
They are designed to:
1. Keep the stored field names exactly as previously persisted data has them
2. Provide clear, per-field validation messages
3. Be serializable for storage, export and logging

DESIGN DECISION: The stored record model (BudgetItem) checks TYPES only.
Field rules (minimum lengths, non-negative amounts) belong to the
BudgetValidator, which runs before anything is written. Loading must
accept whatever was written before, so the model cannot be stricter
than the data already on disk.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)


# Column order used by the CSV export
BUDGET_COLUMNS = [
    "id",
    "titulo",
    "descricao",
    "fornecedor",
    "valor",
    "data",
    "categoria",
    "criadoEm",
    "atualizadoEm",
]


def to_iso_timestamp(moment: datetime) -> str:
    """Format a datetime as UTC ISO-8601 with milliseconds and a Z suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class SortKey(str, Enum):
    """Orderings offered by the list view."""
    DATE_DESC = "date-desc"
    DATE_ASC = "date-asc"
    AMOUNT_DESC = "amount-desc"
    AMOUNT_ASC = "amount-asc"
    NONE = "none"


# =============================================================================
# CORE BUDGET MODELS
# =============================================================================

class BudgetFields(BaseModel):
    """
    The user-editable part of a budget item, already normalized.

    Produced by BudgetValidator, consumed by BudgetRepository.create/update.
    """

    titulo: str
    descricao: str = ""
    fornecedor: str
    valor: float = Field(..., ge=0)
    data: str = ""
    categoria: str = ""


class BudgetItem(BaseModel):
    """
    One budget/quote line entry, as stored.

    Wire names (criadoEm, atualizadoEm) are used as aliases so records
    written by earlier versions load unchanged. A record that was never
    edited has no atualizadoEm at all.
    """
    model_config = ConfigDict(populate_by_name=True)

    # Identity
    id: str = Field(
        ...,
        min_length=1,
        description="Opaque unique id, generated at creation"
    )
    criado_em: str = Field(
        ...,
        alias="criadoEm",
        description="Creation timestamp (never changes)"
    )

    titulo: str
    descricao: str = ""
    fornecedor: str
    valor: float = Field(
        ...,
        description="Amount in BRL, rounded to 2 decimals"
    )
    data: str = Field(
        default="",
        description="Estimated date as an ISO string, or empty"
    )
    categoria: str = ""

    atualizado_em: Optional[str] = Field(
        default=None,
        alias="atualizadoEm",
        description="Timestamp of the last edit"
    )

    @field_validator('descricao', 'data', 'categoria', mode='before')
    @classmethod
    def none_as_empty(cls, v):
        return "" if v is None else v

    @field_serializer('valor')
    def serialize_valor(self, v: float):
        """Integral amounts are written as integers (10, not 10.0)."""
        if float(v).is_integer():
            return int(v)
        return v

    def fields(self) -> BudgetFields:
        """The editable part of this record, e.g. to prefill an edit form."""
        return BudgetFields(
            titulo=self.titulo,
            descricao=self.descricao,
            fornecedor=self.fornecedor,
            valor=self.valor,
            data=self.data,
            categoria=self.categoria,
        )

    def to_storage_dict(self) -> dict:
        """Convert to the dict persisted in storage and exported as JSON."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )


class ValidationResult(BaseModel):
    """
    Result of validating a raw form submission.

    normalized is only set when ok is True.
    """

    ok: bool
    issues: list[ValidationIssue] = Field(default_factory=list)
    normalized: Optional[BudgetFields] = None

    @property
    def errors(self) -> dict[str, str]:
        """Per-field error messages."""
        return {issue.field: issue.message for issue in self.issues}


# =============================================================================
# QUERY MODELS
# =============================================================================

class BudgetQuery(BaseModel):
    """Search / category filter / sort state of the list view."""
    model_config = ConfigDict(frozen=True)

    search_text: str = ""
    category: str = ""
    sort_key: SortKey = SortKey.NONE

    @field_validator('search_text', 'category', mode='before')
    @classmethod
    def none_as_empty(cls, v):
        return "" if v is None else v


class QuerySummary(BaseModel):
    """Header figures for a list of budget items."""

    count: int = Field(ge=0)
    total: float
