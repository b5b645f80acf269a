"""
Data sources: generic list/get/store/update/delete over relational tables.
"""

from .base import IDataSource
from .db import DBSource, TableSource, count_statement, normalize_page
from .params import DEFAULT_PAGE_SIZE, PageParam, Params, Scope, apply_scopes
from .result import (
    DataList,
    PageMeta,
    PaginatedDataList,
    SimpleDataList,
    new_simple_list,
    new_simple_paged_list,
)

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "DBSource",
    "DataList",
    "IDataSource",
    "PageMeta",
    "PageParam",
    "PaginatedDataList",
    "Params",
    "Scope",
    "SimpleDataList",
    "TableSource",
    "apply_scopes",
    "count_statement",
    "new_simple_list",
    "new_simple_paged_list",
    "normalize_page",
]
