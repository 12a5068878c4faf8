"""
Orçamentos - Source Package

A small budget/quote manager: a personal list of budget line items
kept in a local key-value store, with search, filters, sorting and
JSON/CSV export.

DESIGN PRINCIPLES:
1. The core is headless - any UI calls into it
2. Every mutation is validated before it is written
3. Storage is always overwritten as a whole (never half-written)
4. Corrupt data degrades to "no data", never to a crash
5. Storage backend is swappable
"""

__version__ = "1.0.0"
__author__ = "Orçamentos Team"
