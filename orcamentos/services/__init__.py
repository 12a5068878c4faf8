"""Services package."""

from orcamentos.services.storage import (
    DEFAULT_STORAGE_KEY,
    BudgetStorageInterface,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueBudgetStorage,
    KeyValueStore,
    NotFoundError,
    StorageError,
    StorageUnavailableError,
)

__all__ = [
    # Storage services
    "DEFAULT_STORAGE_KEY",
    "BudgetStorageInterface",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueBudgetStorage",
    "KeyValueStore",
    "NotFoundError",
    "StorageError",
    "StorageUnavailableError",
]
