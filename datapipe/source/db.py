"""
Relational data sources backed by SQLAlchemy / SQLModel.

A source keeps only its binding (session factory, target, key column and
update mode). Every call opens its own session from the shared factory, so
sources can be shared between threads without locking.
"""

from abc import abstractmethod
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar, Union

from sqlalchemy import MetaData, Select, Table, delete, func, insert, inspect as sa_inspect, update
from sqlalchemy import select as sa_select
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel, select

from datapipe.exceptions import ConfigurationError, NotFoundError
from datapipe.logging.logger import get_logger

from .base import IDataSource
from .params import DEFAULT_PAGE_SIZE, Params, apply_scopes
from .result import DataList, PageMeta, new_simple_list, new_simple_paged_list

T = TypeVar("T")
K = TypeVar("K")
ModelT = TypeVar("ModelT", bound=SQLModel)

Row = Dict[str, Any]


def normalize_page(page: int, per_page: int) -> Tuple[int, int]:
    """Coerce a page request: page below 1 becomes 1, page size below 1 the default."""
    if page < 1:
        page = 1
    if per_page < 1:
        per_page = DEFAULT_PAGE_SIZE
    return page, per_page


def count_statement(statement: Select, count_field: Optional[str] = None) -> Select:
    """SELECT COUNT(...) over the given statement wrapped as a subquery."""
    aggregate = statement.subquery("aggregate")
    counted = func.count(aggregate.c[count_field]) if count_field else func.count()
    return select(counted).select_from(aggregate)


class _SQLSource(IDataSource[T, K]):
    """Shared list/paginate/delete logic; subclasses bind the target."""

    def __init__(self, session_factory: sessionmaker, strict_update: bool = False):
        self._session_factory = session_factory
        self._strict_update = strict_update

    @property
    def strict_update(self) -> bool:
        return self._strict_update

    @property
    def key_name(self) -> str:
        return self._key_name

    @abstractmethod
    def _select(self) -> Select:
        """Base statement selecting every row of the bound target."""
        pass

    @abstractmethod
    def _fetch(self, session, statement: Select) -> List[T]:
        """Run statement and return detached items."""
        pass

    def get_list(self, params: Optional[Params] = None) -> DataList[T]:
        """List rows matching the scopes; paginated when a page is requested."""
        params = params or Params()
        statement = apply_scopes(self._select(), params.scopes)

        if params.page is not None:
            items, meta = self.paginate(
                statement,
                params.page.page,
                params.page.per_page,
                consistent=params.consistent,
            )
            return new_simple_paged_list(items, meta)

        with self._session_factory() as session:
            items = self._fetch(session, statement)

        self._logger.debug("Listed {count} rows", count=len(items))
        return new_simple_list(items)

    def paginate(
        self,
        statement: Select,
        page: int,
        per_page: int,
        count_field: Optional[str] = None,
        consistent: bool = False,
    ) -> Tuple[List[T], PageMeta]:
        """
        Count the rows matched by statement and fetch one page of them.

        The count runs over the same (scoped) statement wrapped as a
        subquery. By default the count and the fetch use separate sessions,
        so total can be stale under concurrent writes; consistent=True runs
        both inside the one transaction the session
        autobegins; closing the session rolls it back after the items are
        expunged, so they stay loaded whatever expire_on_commit says. A failed count raises before any page
        is fetched.
        """
        page, per_page = normalize_page(page, per_page)
        counter = count_statement(statement, count_field)
        paged = statement.limit(per_page).offset(per_page * (page - 1))

        if consistent:
            with self._session_factory() as session:
                total = session.exec(counter).one()
                items = self._fetch(session, paged)
        else:
            with self._session_factory() as session:
                total = session.exec(counter).one()
            with self._session_factory() as session:
                items = self._fetch(session, paged)

        meta = PageMeta(page=page, per_page=per_page, total=total)
        self._logger.debug(
            "Fetched page {page} ({count} of {total} rows)",
            page=page, count=len(items), total=total,
        )
        return items, meta

    def _nothing_to_update(self, key: K) -> int:
        if self._strict_update:
            self.get_item(key)
        return 0

    def _run_update(self, key: K, statement) -> int:
        with self._session_factory() as session:
            count = session.exec(statement).rowcount
            if count == 0 and self._strict_update:
                raise NotFoundError(key, self._label)
            session.commit()

        self._logger.debug("Updated {count} rows for key {key!r}", count=count, key=key)
        return count

    def _run_delete(self, key: K, statement) -> int:
        with self._session_factory() as session:
            count = session.exec(statement).rowcount
            session.commit()

        self._logger.debug("Deleted {count} rows for key {key!r}", count=count, key=key)
        return count


class DBSource(_SQLSource[ModelT, K]):
    """Data source bound to a SQLModel table model; rows come back as model instances."""

    def __init__(
        self,
        session_factory: sessionmaker,
        model: Type[ModelT],
        key: Union[str, Any, None] = None,
        strict_update: bool = False,
    ):
        super().__init__(session_factory, strict_update)
        mapper = sa_inspect(model, raiseerr=False)
        if mapper is None:
            raise ConfigurationError(f"{model!r} is not a mapped table model")

        self.model = model
        self._key_name = self._resolve_key(mapper, key)
        self._key_column = getattr(model, self._key_name)
        self._label = model.__name__
        self._logger = get_logger(__name__, source=self._label)

    @staticmethod
    def _resolve_key(mapper, key) -> str:
        if key is None:
            primary_key = mapper.primary_key
            if len(primary_key) != 1:
                raise ConfigurationError(
                    f"{mapper.class_.__name__} has a composite primary key; pass key= explicitly"
                )
            return mapper.get_property_by_column(primary_key[0]).key
        name = key if isinstance(key, str) else getattr(key, "key", None)
        if name not in mapper.column_attrs:
            raise ConfigurationError(f"{mapper.class_.__name__} has no column attribute {key!r}")
        return name

    def _select(self) -> Select:
        return select(self.model)

    def _fetch(self, session, statement: Select) -> List[ModelT]:
        return list(session.exec(statement).all())

    def get_item(self, key: K) -> ModelT:
        """Get one model instance by key."""
        statement = select(self.model).where(self._key_column == key)
        with self._session_factory() as session:
            item = session.exec(statement).first()

        if item is None:
            raise NotFoundError(key, self._label)
        return item

    def store(self, item: ModelT) -> ModelT:
        """Insert item; generated values are loaded back onto it."""
        with self._session_factory() as session:
            session.add(item)
            session.commit()
            session.refresh(item)

        self._logger.debug("Stored {key!r}", key=getattr(item, self._key_name))
        return item

    def update(self, key: K, item: ModelT) -> int:
        """
        Write item's non-default fields onto the row stored under key.

        Returns the number of rows affected. With strict_update a key that
        matches nothing raises NotFoundError; otherwise it is a no-op.
        """
        values = {
            name: value
            for name, value in item.model_dump(exclude_defaults=True).items()
            if name != self._key_name
        }
        if not values:
            return self._nothing_to_update(key)

        statement = (
            update(self.model)
            .where(self._key_column == key)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return self._run_update(key, statement)

    def delete(self, key: K) -> int:
        """Delete the row stored under key; returns rows affected."""
        return self._run_delete(key, delete(self.model).where(self._key_column == key))


class TableSource(_SQLSource[Row, K]):
    """Data source bound to a plain table; rows come back as dicts."""

    def __init__(
        self,
        session_factory: sessionmaker,
        table: Union[str, Table],
        key: str = "id",
        strict_update: bool = False,
    ):
        super().__init__(session_factory, strict_update)
        if isinstance(table, str):
            table = self._reflect(session_factory, table)

        if key not in table.c:
            raise ConfigurationError(f"table {table.name!r} has no column {key!r}")

        self.table = table
        self._key_name = key
        self._key_column = table.c[key]
        self._label = table.name
        self._logger = get_logger(__name__, source=self._label)

    @staticmethod
    def _reflect(session_factory: sessionmaker, name: str) -> Table:
        with session_factory() as session:
            return Table(name, MetaData(), autoload_with=session.get_bind())

    def _select(self) -> Select:
        return sa_select(self.table)

    def _fetch(self, session, statement: Select) -> List[Row]:
        return [dict(row) for row in session.exec(statement).mappings().all()]

    def get_item(self, key: K) -> Row:
        """Get one row by key as a dict."""
        statement = sa_select(self.table).where(self._key_column == key)
        with self._session_factory() as session:
            row = session.exec(statement).mappings().first()

        if row is None:
            raise NotFoundError(key, self._label)
        return dict(row)

    def store(self, item: Row) -> Row:
        """Insert item; generated primary key values are written back into it."""
        with self._session_factory() as session:
            result = session.exec(insert(self.table).values(**item))
            generated = result.inserted_primary_key
            session.commit()

        if generated is not None:
            for column, value in zip(self.table.primary_key.columns, generated):
                if item.get(column.name) is None:
                    item[column.name] = value

        self._logger.debug("Stored {key!r}", key=item.get(self._key_name))
        return item

    def update(self, key: K, item: Row) -> int:
        """Write every column in item (except the key) onto the row stored under key."""
        values = {name: value for name, value in item.items() if name != self._key_name}
        if not values:
            return self._nothing_to_update(key)

        statement = update(self.table).where(self._key_column == key).values(**values)
        return self._run_update(key, statement)

    def delete(self, key: K) -> int:
        return self._run_delete(key, delete(self.table).where(self._key_column == key))
