"""Shared FastAPI dependencies.

Reusable type aliases and dependency functions that routers import.
Defined here (not in main.py) to avoid circular imports when routers
are registered in main.
"""

from typing import Annotated

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from resort_deals.db.session import get_db
from resort_deals.exceptions import InvalidParameterError
from resort_deals.models import RESORT_TYPES

DB = Annotated[AsyncSession, Depends(get_db)]


def split_csv(value: str | None) -> list[str]:
    """Split a comma-separated query value, dropping blanks."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def resort_types_param(
    resort_types: str | None = Query(None, description="Comma-separated resort types"),
) -> list[str]:
    types = split_csv(resort_types)
    unknown = [t for t in types if t not in RESORT_TYPES]
    if unknown:
        raise InvalidParameterError(f"Unknown resort types: {', '.join(unknown)}")
    return types


ResortTypes = Annotated[list[str], Depends(resort_types_param)]
