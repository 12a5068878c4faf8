"""
Abstract Storage Interface

DESIGN DECISION: We define abstract interfaces for storage operations.
This allows us to:
1. Swap the JSON file for another local key-value backend later
2. Use in-memory storage for testing
3. Keep business logic decoupled from storage implementation

Two layers:
- KeyValueStore: a string-to-string store (the "local storage")
- BudgetStorageInterface: the whole budget collection under one key

The interfaces are intentionally small - the collection is always read
and written as a whole.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from orcamentos.models.budget import BudgetItem


class KeyValueStore(ABC):
    """
    Abstract persistent key-value store.

    Values are opaque text; the store performs no validation.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read the text stored under a key.

        Returns:
            The stored text, or None if the key is absent

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Store text under a key, overwriting any previous value.

        Raises:
            StorageError: If the backend cannot be written
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove a key. Removing an absent key is a no-op."""
        pass


class BudgetStorageInterface(ABC):
    """
    Abstract interface for the budget collection.

    Any implementation must hand out the full collection on load and
    replace it as a whole on save (last writer wins).
    """

    @abstractmethod
    def load(self) -> list[BudgetItem]:
        """
        Load the full collection.

        Returns:
            The stored items in insertion order; an empty list if nothing
            is stored or the stored data cannot be read
        """
        pass

    @abstractmethod
    def save(self, items: Sequence[BudgetItem]) -> None:
        """
        Replace the stored collection.

        Raises:
            StorageError: If the backend cannot be written
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Orçamento não encontrado: {item_id}")


class StorageUnavailableError(StorageError):
    """The storage backend could not be read or written."""
    pass
