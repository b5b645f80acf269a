"""
Result containers returned by DataSource.get_list.
"""

from typing import Generic, List, Protocol, Sequence, TypeVar, runtime_checkable

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class PageMeta(BaseModel):
    """Page index, page size and the total number of matching rows."""
    model_config = ConfigDict(frozen=True)

    page: int = 0
    per_page: int = 0
    total: int = 0


@runtime_checkable
class DataList(Protocol[T_co]):
    def get_data(self) -> Sequence[T_co]:
        ...


@runtime_checkable
class PaginatedDataList(Protocol):
    def get_page_meta(self) -> PageMeta:
        ...


class SimpleDataList(BaseModel, Generic[T]):
    """Items plus page metadata; immutable once built."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    items: List[T]
    meta: PageMeta

    def get_data(self) -> List[T]:
        return list(self.items)

    def get_page_meta(self) -> PageMeta:
        return self.meta

    def __len__(self) -> int:
        return len(self.items)


def new_simple_list(items: Sequence[T]) -> SimpleDataList[T]:
    """Wrap items as a single page holding the whole set."""
    size = len(items)
    return new_simple_paged_list(items, PageMeta(page=1, per_page=size, total=size))


def new_simple_paged_list(items: Sequence[T], meta: PageMeta) -> SimpleDataList[T]:
    """Wrap items with metadata from a paginated query."""
    return SimpleDataList.model_construct(items=list(items), meta=meta)
