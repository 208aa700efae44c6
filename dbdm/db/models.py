from dataclasses import dataclass
from typing import Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

Scalar = Union[None, int, float, str, bytes]
ComparisonOperator = Literal["gt", "lt", "gte", "lte", "ne"]

OPERATOR_SYMBOLS: Dict[str, str] = {
    "gt": ">",
    "lt": "<",
    "gte": ">=",
    "lte": "<=",
    "ne": "!=",
}


@dataclass(frozen=True)
class Equals:
    """``column = value``"""

    column: str
    value: Scalar


@dataclass(frozen=True)
class Compare:
    """A single comparison such as ``column > value``."""

    column: str
    operator: ComparisonOperator
    value: Scalar

    @property
    def symbol(self) -> str:
        return OPERATOR_SYMBOLS[self.operator]


@dataclass(frozen=True)
class In:
    """``column IN (values...)``"""

    column: str
    values: Tuple[Scalar, ...]


Term = Union[Equals, Compare, In]


class QueryOptions(BaseModel):
    """Ordering and paging options accepted by ``find`` and ``find_one``."""

    model_config = ConfigDict(frozen=True)

    order_by: Optional[str] = None
    limit: Optional[int] = Field(None, ge=0, strict=True)
    offset: Optional[int] = Field(None, ge=0, strict=True)

    @field_validator("order_by")
    def order_by_must_not_be_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("order_by must not be blank")
        return v
