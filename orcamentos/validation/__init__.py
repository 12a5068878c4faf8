"""Validation package."""

from orcamentos.validation.validator import BudgetValidator, parse_amount, round_amount

__all__ = ["BudgetValidator", "parse_amount", "round_amount"]
