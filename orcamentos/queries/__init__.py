"""Query package."""

from orcamentos.queries.engine import QueryEngine, apply_query, summarize

__all__ = ["QueryEngine", "apply_query", "summarize"]
