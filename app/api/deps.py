from dataclasses import dataclass
from typing import Optional

from fastapi import Query

from app.core.config import get_pagination_settings


@dataclass
class Pagination:
    page: int
    page_size: int


def pagination_params(
    page: int = Query(1, description="1-based page number"),
    page_size: Optional[int] = Query(None, alias="limit", description="Rows per page"),
) -> Pagination:
    # bounds are checked by the query builder so the caller gets an InvalidPage envelope
    if page_size is None:
        page_size = get_pagination_settings().default_page_size
    return Pagination(page=page, page_size=page_size)
