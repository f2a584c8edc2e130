"""Response envelope shared by every HTTP endpoint."""

import math
from typing import Any, Optional

from pydantic import BaseModel, Field


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int = Field(..., alias="totalPages")
    has_next_page: bool = Field(False, alias="hasNextPage")
    has_prev_page: bool = Field(False, alias="hasPrevPage")

    model_config = {"populate_by_name": True}

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = math.ceil(total / limit) if limit else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )


class ApiResponse(BaseModel):
    """{success, message, data?, errors?, pagination?, statusCode?}"""

    success: bool
    message: str
    data: Optional[Any] = None
    errors: Optional[Any] = None
    pagination: Optional[Pagination] = None
    status_code: Optional[int] = Field(None, alias="statusCode")

    model_config = {"populate_by_name": True}

    def to_json(self) -> dict[str, Any]:
        """Serialize with camelCase keys, omitting unset top-level members (nulls inside data are kept)."""
        body = self.model_dump(mode="json", by_alias=True)
        return {key: value for key, value in body.items() if value is not None}
