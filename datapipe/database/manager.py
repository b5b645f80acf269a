from typing import Optional, Type, TypeVar, Union
from sqlalchemy import Table
from .sql_driver import SQLDriver

T = TypeVar("T")


class DatabaseManager:
    _instance = None

    def __init__(self, settings):
        self.sql = SQLDriver(
            settings.DATABASE_URL,
            echo=settings.DB_ECHO,
            pool_pre_ping=settings.DB_POOL_PRE_PING,
        )
        self.strict_update = settings.STRICT_UPDATE

    @classmethod
    def get_instance(cls, settings=None):
        if cls._instance is None:
            if settings is None:
                from datapipe.config import settings as app_settings
                settings = app_settings
            cls._instance = cls(settings)
        return cls._instance

    @classmethod
    def reset(cls):
        """Dispose the singleton's engine and forget it."""
        if cls._instance is not None:
            cls._instance.sql.disconnect()
            cls._instance = None

    def source(self, model: Type[T], key=None, strict_update: Optional[bool] = None):
        """Build a model-bound data source on the shared pool."""
        from datapipe.source.db import DBSource
        if strict_update is None:
            strict_update = self.strict_update
        return DBSource(self.sql.session_factory, model, key=key, strict_update=strict_update)

    def table_source(self, table: Union[str, Table], key: str = "id", strict_update: Optional[bool] = None):
        """Build a table-bound data source on the shared pool."""
        from datapipe.source.db import TableSource
        if strict_update is None:
            strict_update = self.strict_update
        return TableSource(self.sql.session_factory, table, key=key, strict_update=strict_update)
