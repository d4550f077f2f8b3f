from decimal import Decimal, InvalidOperation

from pydantic import BaseModel, ConfigDict, field_validator

class Quote(BaseModel):
    """A fetched bid, kept as the exact text the source sent."""

    model_config = ConfigDict(frozen=True, strict=True)

    bid: str

    @field_validator("bid")
    @classmethod
    def bid_is_decimal(cls, value: str) -> str:
        try:
            parsed = Decimal(value)
        except InvalidOperation:
            raise ValueError(f"bid {value!r} is not a decimal number")
        if not parsed.is_finite():
            raise ValueError(f"bid {value!r} is not a finite number")
        return value

    def as_decimal(self) -> Decimal:
        return Decimal(self.bid)
