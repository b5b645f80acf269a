"""
FastAPI dependencies that turn query strings into data source params.
"""

from fastapi import Query

from datapipe.source.params import DEFAULT_PAGE_SIZE, Params


def page_params(
    page: int = Query(1, description="1-based page index; values below 1 read as 1"),
    per_page: int = Query(
        DEFAULT_PAGE_SIZE,
        description=f"Page size; values below 1 read as {DEFAULT_PAGE_SIZE}",
    ),
) -> Params:
    """Params carrying the page request from ?page=&per_page=."""
    return Params().with_page(page, per_page)
