"""
Budget Form Validation

Turns raw form values into normalized BudgetFields, or reports why it
cannot.

RULES (all independent, all checked - errors are collected, not
short-circuited):
- titulo: at least 3 characters after trimming
- fornecedor: at least 2 characters after trimming
- valor: a finite number >= 0 (empty is an error)

NORMALIZATION:
- titulo, descricao and fornecedor are trimmed
- valor is rounded to 2 decimals (half-up)
- data and categoria pass through unchanged

Validation has no side effects: nothing is stored or logged here.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from orcamentos.models.budget import (
    BudgetFields,
    ValidationIssue,
    ValidationResult,
)


TITLE_MIN_LENGTH = 3
SUPPLIER_MIN_LENGTH = 2

TITLE_ERROR = "Informe um título com ao menos 3 caracteres."
SUPPLIER_ERROR = "Informe o fornecedor."
AMOUNT_ERROR = "Valor inválido."

_CENTS = Decimal("0.01")


def _text(raw: Mapping[str, Any], name: str) -> str:
    value = raw.get(name)
    if value is None:
        return ""
    return str(value).strip()


def _passthrough(raw: Mapping[str, Any], name: str) -> str:
    value = raw.get(name)
    if value is None:
        return ""
    return str(value)


def parse_amount(value: Any) -> Optional[Decimal]:
    """
    Parse a form amount.

    Accepts numbers and numeric strings. Returns None for anything that
    is not a finite number (including empty input).
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float, Decimal)):
        text = str(value)
    else:
        text = str(value).strip()
        if not text:
            return None

    try:
        amount = Decimal(text)
    except InvalidOperation:
        return None

    if not amount.is_finite():
        return None
    return amount


def round_amount(amount: Decimal) -> float:
    """Round to cents, half-up, without producing -0.0."""
    rounded = amount.quantize(_CENTS, rounding=ROUND_HALF_UP)
    if rounded == 0:
        return 0.0
    return float(rounded)


class BudgetValidator:
    """
    Validates a raw budget form submission.

    The raw mapping uses the form field names: titulo, descricao,
    fornecedor, valor, data, categoria. Missing keys count as empty.
    """

    def validate(self, raw: Mapping[str, Any]) -> ValidationResult:
        """
        Validate and normalize raw form values.

        Returns:
            ValidationResult with every issue found, and the normalized
            fields when there are none
        """
        issues = []

        titulo = _text(raw, "titulo")
        descricao = _text(raw, "descricao")
        fornecedor = _text(raw, "fornecedor")
        data = _passthrough(raw, "data")
        categoria = _passthrough(raw, "categoria")

        if len(titulo) < TITLE_MIN_LENGTH:
            issues.append(ValidationIssue(field="titulo", message=TITLE_ERROR))

        if len(fornecedor) < SUPPLIER_MIN_LENGTH:
            issues.append(ValidationIssue(field="fornecedor", message=SUPPLIER_ERROR))

        amount = parse_amount(raw.get("valor"))
        if amount is None or amount < 0:
            issues.append(ValidationIssue(field="valor", message=AMOUNT_ERROR))

        if issues:
            return ValidationResult(ok=False, issues=issues)

        return ValidationResult(
            ok=True,
            normalized=BudgetFields(
                titulo=titulo,
                descricao=descricao,
                fornecedor=fornecedor,
                valor=round_amount(amount),
                data=data,
                categoria=categoria,
            ),
        )

    def summary(self, result: ValidationResult) -> str:
        """
        One notice for the whole form.

        Presentation layers that can show messages next to each field
        should use result.errors instead.
        """
        if result.ok:
            return "Tudo certo."

        lines = ["Corrija os campos abaixo:"]
        for issue in result.issues:
            lines.append(f"   • {issue.message}")
        return "\n".join(lines)
