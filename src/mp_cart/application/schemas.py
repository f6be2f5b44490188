from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from src.mp_cart.domain.models import CartLine
from src.mp_common.money import money_to_display, to_money


class AddToCartRequest(BaseModel):
    product_id: int
    variant_id: str
    merchant_id: str
    quantity: int = Field(ge=1)

    @field_validator("variant_id", "merchant_id")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be blank")
        return v.strip()


class CartItemResponse(BaseModel):
    item_id: int
    product_id: int
    variant_id: str
    merchant_id: str
    quantity: int
    price: Decimal
    sub_total: Decimal

    @classmethod
    def from_line(cls, line: CartLine) -> "CartItemResponse":
        return cls(
            item_id=line.id or 0,
            product_id=line.product_id,
            variant_id=line.variant_id,
            merchant_id=line.merchant_id,
            quantity=line.quantity,
            price=to_money(line.price),
            sub_total=line.subtotal,
        )


class CartResponse(BaseModel):
    items: list[CartItemResponse]
    total_value: Decimal
    total_value_display: str

    @classmethod
    def from_lines(cls, lines: list[CartLine]) -> "CartResponse":
        total = to_money(sum((line.subtotal for line in lines), Decimal("0")))
        return cls(
            items=[CartItemResponse.from_line(line) for line in lines],
            total_value=total,
            total_value_display=money_to_display(total),
        )
