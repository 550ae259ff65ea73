from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator
from pydantic.config import ConfigDict


def to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(word.capitalize() for word in parts[1:])


class BaseSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def coerce_decimal(value: Any) -> Decimal:
    """Parse a numeric column, treating missing or malformed values as zero."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, Decimal):
        return value if value.is_finite() else Decimal("0")
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")
    return parsed if parsed.is_finite() else Decimal("0")


def coerce_int(value: Any) -> int:
    return int(coerce_decimal(value))


# Numeric columns from the hosted backend; malformed values read as zero.
Amount = Annotated[Decimal, BeforeValidator(coerce_decimal)]
Count = Annotated[int, BeforeValidator(coerce_int)]
