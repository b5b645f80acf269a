from .manager import DatabaseManager
from .sql_driver import SQLDriver

__all__ = ["DatabaseManager", "SQLDriver"]
