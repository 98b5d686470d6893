"""Generic pagination types shared by list endpoints.

PaginatedResponse[T]: Pydantic model for HTTP responses (serializable).
Paginated[T]: plain dataclass for service-layer returns (not serializable).
"""

from dataclasses import dataclass

from pydantic import BaseModel


class PaginatedResponse[T](BaseModel):
    """Pydantic model for paginated HTTP responses.

    ``from_attributes`` is set so ``model_validate`` can read attributes
    directly from a ``Paginated`` dataclass::

        # schemas/deal.py
        DealListResponse = PaginatedResponse[DealResponse]

    Use this in routers only; services and repositories stay Pydantic-free.
    """

    model_config = {"from_attributes": True}

    items: list[T]
    total: int
    skip: int
    limit: int


@dataclass
class Paginated[T]:
    """Plain dataclass for paginated results inside the service layer.

    The router converts it to the Pydantic version for the response::

        result = await get_deals(db, filters, skip, limit)
        return DealListResponse.model_validate(result)
    """

    items: list[T]
    total: int
    skip: int
    limit: int
