"""
Query Engine

DESIGN DECISION: Querying is a PURE function over a snapshot.
It never mutates its input and never touches storage, so the list
view can be recomputed on every keystroke without side effects.

Pipeline:
1. Filter: search text (titulo OR fornecedor) AND category
2. Sort: by date or amount, stable for equal keys

Dates are compared as plain strings. That is only correct because
stored dates are fixed-width ISO dates (YYYY-MM-DD); a missing date
compares as "" and therefore sorts first ascending, last descending.
"""

from typing import Callable, Iterable, Sequence

from orcamentos.models.budget import (
    BudgetItem,
    BudgetQuery,
    QuerySummary,
    SortKey,
)


def _date_key(item: BudgetItem) -> str:
    return item.data or ""


def _amount_key(item: BudgetItem) -> float:
    return float(item.valor)


# sort key -> (key function, descending)
_SORTS: dict[SortKey, tuple[Callable[[BudgetItem], object], bool]] = {
    SortKey.DATE_DESC: (_date_key, True),
    SortKey.DATE_ASC: (_date_key, False),
    SortKey.AMOUNT_DESC: (_amount_key, True),
    SortKey.AMOUNT_ASC: (_amount_key, False),
}


def matches_search(item: BudgetItem, search_text: str) -> bool:
    """Case-insensitive substring match on titulo or fornecedor."""
    needle = search_text.strip().lower()
    if not needle:
        return True
    return needle in item.titulo.lower() or needle in item.fornecedor.lower()


def matches_category(item: BudgetItem, category: str) -> bool:
    if not category:
        return True
    return item.categoria == category


def apply_query(
    records: Iterable[BudgetItem],
    query: BudgetQuery,
) -> list[BudgetItem]:
    """
    Filter then sort records.

    Returns a new list; the input sequence is never reordered.
    """
    filtered = [
        item for item in records
        if matches_search(item, query.search_text)
        and matches_category(item, query.category)
    ]

    if query.sort_key not in _SORTS:
        return filtered

    key, descending = _SORTS[query.sort_key]
    # sorted() keeps equal elements in input order, also with reverse=True
    return sorted(filtered, key=key, reverse=descending)


def summarize(records: Sequence[BudgetItem]) -> QuerySummary:
    """Count and total amount of the given records."""
    return QuerySummary(
        count=len(records),
        total=round(sum(float(item.valor) for item in records), 2),
    )


class QueryEngine:
    """
    Applies list-view queries to budget snapshots.

    GUARANTEES:
    - Only returns records it was given
    - Never reorders or mutates the input
    """

    def apply(
        self,
        records: Iterable[BudgetItem],
        query: BudgetQuery,
    ) -> list[BudgetItem]:
        return apply_query(records, query)

    def summarize(self, records: Sequence[BudgetItem]) -> QuerySummary:
        return summarize(records)
