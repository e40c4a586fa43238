from typing import Any, Dict, List

from pydantic import BaseModel, Field


class Page(BaseModel):
    items: List[Dict[str, Any]] = Field(default_factory=list)
    total: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)
    total_pages: int = Field(..., ge=0)
    has_next_page: bool
    has_prev_page: bool
