"""Display helpers for the pt-BR / BRL convention used by the list view."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from orcamentos.models.budget import BudgetItem
from orcamentos.validation import parse_amount


# pt-BR currency formatting puts a non-breaking space after the symbol
CURRENCY_PREFIX = "R$\u00a0"


def format_brl(value: Any) -> str:
    """
    Format an amount as Brazilian reais, e.g. 1234.5 -> "R$ 1.234,50".

    Empty or non-numeric values are shown as "-".
    """
    amount = parse_amount(value)
    if amount is None:
        return "-"

    rounded = amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    text = f"{abs(rounded):,.2f}"
    # 1,234.50 -> 1.234,50
    text = text.replace(",", "\x00").replace(".", ",").replace("\x00", ".")
    return f"{sign}{CURRENCY_PREFIX}{text}"


def describe_item(item: BudgetItem) -> str:
    """Card subtitle: supplier · category · amount."""
    return f"{item.fornecedor} · {item.categoria or '—'} · {format_brl(item.valor)}"
