"""Common schema utilities."""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer


def _format_money(value: Decimal) -> str:
    return f"{value:.2f}"


def _format_utc(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


# Two-decimal string, e.g. "25.00"
Money = Annotated[Decimal, PlainSerializer(_format_money, return_type=str)]

# Stored timestamps are naive UTC
UtcDatetime = Annotated[datetime, PlainSerializer(_format_utc, return_type=str)]


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class ErrorResponse(BaseModel):
    """Error response schema."""

    success: bool = False
    error: str
    message: str
    detail: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    database: bool
