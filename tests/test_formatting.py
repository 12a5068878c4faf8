"""Tests for BRL display formatting."""

import pytest

from orcamentos.formatting import describe_item, format_brl
from orcamentos.models.budget import BudgetItem


class TestFormatBrl:
    """Tests for format_brl."""

    @pytest.mark.parametrize("value,expected", [
        (1234.5, "R$\u00a01.234,50"),
        (0, "R$\u00a00,00"),
        (0.5, "R$\u00a00,50"),
        (999.999, "R$\u00a01.000,00"),
        (1234567.891, "R$\u00a01.234.567,89"),
        ("10", "R$\u00a010,00"),
        (-5, "-R$\u00a05,00"),
    ])
    def test_formats_amounts(self, value, expected):
        assert format_brl(value) == expected

    @pytest.mark.parametrize("value", ["", None, "abc", "NaN"])
    def test_non_numbers_show_dash(self, value):
        assert format_brl(value) == "-"


class TestDescribeItem:
    """Tests for the card subtitle."""

    def _item(self, categoria):
        return BudgetItem(
            id="id-1",
            criado_em="2024-05-01T12:00:00.000Z",
            titulo="Cadeiras",
            fornecedor="Acme",
            valor=1500,
            categoria=categoria,
        )

    def test_with_category(self):
        assert describe_item(self._item("Móveis")) == "Acme · Móveis · R$\u00a01.500,00"

    def test_without_category(self):
        assert describe_item(self._item("")) == "Acme · — · R$\u00a01.500,00"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
