"""Global enums, must match DB CHECK constraints exactly."""

from enum import Enum


class OrderStatus(str, Enum):
    # Checkout only ever produces CONFIRMED; the rest are owned by
    # fulfillment and payment flows outside this service.
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
