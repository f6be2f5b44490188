# src/mp_order/application/schemas.py
from decimal import Decimal

from pydantic import BaseModel

from src.mp_common.datetime_utils import to_iso
from src.mp_common.money import money_to_display
from src.mp_order.domain.models import Order, OrderLine


class OrderItemResponse(BaseModel):
    item_id: int
    product_id: int
    variant_id: str
    merchant_id: str
    merchant_name: str
    quantity: int
    price: Decimal
    sub_total: Decimal
    image_url: str

    @classmethod
    def from_line(cls, line: OrderLine) -> "OrderItemResponse":
        return cls(
            item_id=line.id or 0,
            product_id=line.product_id,
            variant_id=line.variant_id,
            merchant_id=line.merchant_id,
            merchant_name=line.merchant_name,
            quantity=line.quantity,
            price=line.price,
            sub_total=line.subtotal,
            image_url=line.image_url,
        )


class OrderResponse(BaseModel):
    order_id: str
    order_number: str
    order_date: str
    status: str
    total_amount: Decimal
    total_amount_display: str
    items: list[OrderItemResponse]

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        return cls(
            order_id=order.id,
            order_number=order.order_number,
            order_date=to_iso(order.created_at),
            status=order.status,
            total_amount=order.total_amount,
            total_amount_display=money_to_display(order.total_amount),
            items=[OrderItemResponse.from_line(line) for line in order.lines],
        )


class OrderHistoryResponse(BaseModel):
    orders: list[OrderResponse]


class CheckoutResponse(BaseModel):
    order_number: str
