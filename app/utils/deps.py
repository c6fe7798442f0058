# # app/utils/deps.py
"""
FastAPI dependencies shared by the routers.
"""

from fastapi import Query


class PaginationParams:
    """Pagination parameters for list endpoints."""

    def __init__(
        self,
        page: int = Query(1, ge=1, description="Page number"),
        size: int = Query(100, ge=1, le=100, description="Page size"),
    ):
        self.page = page
        self.size = size
        self.skip = (page - 1) * size
        self.limit = size


async def get_pagination_params(
    page: int = Query(1, ge=1, description="Page number"),
    size: int = Query(100, ge=1, le=100, description="Page size"),
) -> PaginationParams:
    """Get pagination parameters as a dependency."""
    return PaginationParams(page=page, size=size)


__all__ = [
    "PaginationParams",
    "get_pagination_params",
]
