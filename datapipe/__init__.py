"""
datapipe: generic, paginated data sources over SQLAlchemy / SQLModel.
"""

from loguru import logger

from .exceptions import ConfigurationError, DataPipeError, NotFoundError
from .source import (
    DEFAULT_PAGE_SIZE,
    DBSource,
    DataList,
    IDataSource,
    PageMeta,
    PageParam,
    PaginatedDataList,
    Params,
    Scope,
    SimpleDataList,
    TableSource,
    new_simple_list,
    new_simple_paged_list,
)

# Silent until the host opts in with logger.enable("datapipe") or LogConfig
logger.disable("datapipe")

__version__ = "1.0.0"

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "ConfigurationError",
    "DBSource",
    "DataList",
    "DataPipeError",
    "IDataSource",
    "NotFoundError",
    "PageMeta",
    "PageParam",
    "PaginatedDataList",
    "Params",
    "Scope",
    "SimpleDataList",
    "TableSource",
    "new_simple_list",
    "new_simple_paged_list",
]
