"""
Data source interface: list, get, store, update and delete typed records.
"""

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

from .params import Params
from .result import DataList

T = TypeVar("T")
K = TypeVar("K")


class IDataSource(ABC, Generic[T, K]):
    """Capability bound to one item type and one key type."""

    @abstractmethod
    def get_list(self, params: Optional[Params] = None) -> DataList[T]:
        """List items, optionally scoped and paginated."""
        pass

    @abstractmethod
    def get_item(self, key: K) -> T:
        """Get one item by key; raises NotFoundError when absent."""
        pass

    @abstractmethod
    def store(self, item: T) -> T:
        """Insert an item."""
        pass

    @abstractmethod
    def update(self, key: K, item: T) -> int:
        """Partially update the item stored under key."""
        pass

    @abstractmethod
    def delete(self, key: K) -> int:
        """Delete the item stored under key."""
        pass
