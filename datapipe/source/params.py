"""
List query directives: page request and query modifiers ("scopes").
"""

from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping, Optional

from sqlalchemy import Select

DEFAULT_PAGE_SIZE = 20

# A scope narrows, orders or projects a query and returns the new statement
Scope = Callable[[Select], Select]


@dataclass(frozen=True)
class PageParam:
    """Caller page request; 1-based page index. Coerced when consumed, not here."""
    page: int
    per_page: int


@dataclass
class Params:
    """Optional directives for DataSource.get_list; builder methods return self."""
    page: Optional[PageParam] = None
    scopes: List[Scope] = field(default_factory=list)
    consistent: bool = False

    def with_page(self, page: int, per_page: int) -> "Params":
        """Request a page, replacing any earlier page request."""
        self.page = PageParam(page=page, per_page=per_page)
        return self

    def with_scopes(self, *scopes: Scope) -> "Params":
        """Append query modifiers; they run in the order given."""
        self.scopes.extend(scopes)
        return self

    def with_consistency(self, enabled: bool = True) -> "Params":
        """Run the page count and fetch inside one transaction."""
        self.consistent = enabled
        return self

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "Params":
        """Build params from the loose dict form; unknown keys are ignored."""
        params = cls()
        page = mapping.get("page")
        if isinstance(page, PageParam):
            params.page = page
        elif isinstance(page, (tuple, list)) and len(page) == 2:
            params.with_page(int(page[0]), int(page[1]))
        scopes = mapping.get("scopes")
        if scopes:
            params.with_scopes(*scopes)
        params.consistent = bool(mapping.get("consistent", False))
        return params


def apply_scopes(statement: Select, scopes) -> Select:
    """Fold scopes over a statement left to right."""
    for scope in scopes:
        statement = scope(statement)
    return statement
