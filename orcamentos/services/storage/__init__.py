"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Currently implements a local JSON-file key-value store as the backend,
but designed to be swappable.
"""

from orcamentos.services.storage.interface import (
    BudgetStorageInterface,
    KeyValueStore,
    NotFoundError,
    StorageError,
    StorageUnavailableError,
)
from orcamentos.services.storage.local_store import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
)
from orcamentos.services.storage.budget_storage import (
    DEFAULT_STORAGE_KEY,
    KeyValueBudgetStorage,
)

__all__ = [
    # Interfaces
    "BudgetStorageInterface",
    "KeyValueStore",
    # Exceptions
    "NotFoundError",
    "StorageError",
    "StorageUnavailableError",
    # Local implementations
    "DEFAULT_STORAGE_KEY",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueBudgetStorage",
]
