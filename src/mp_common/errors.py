"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth
  2xxx: Cart
  3xxx: Catalog (remote product/inventory service)
  4xxx: Order
  9xxx: System
"""

from typing import Any


class AppError(Exception):
    """Base application error.

    `details` is optional structured context rendered as the envelope's data.
    """

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.details = details
        super().__init__(message)


class NotFoundError(AppError):
    """A referenced cart line, order or order line does not exist."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 404)


# --- 1xxx: Auth ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid or expired token", 401)


# --- 2xxx: Cart ---

class EmptyCartError(AppError):
    def __init__(self) -> None:
        super().__init__(2001, "Cart is empty", 400)


class CartLineNotFoundError(NotFoundError):
    def __init__(self, item_id: int) -> None:
        super().__init__(2002, f"Cart item not found: {item_id}")


class InvalidQuantityError(AppError):
    def __init__(self, quantity: int) -> None:
        super().__init__(2003, f"Quantity must be at least 1, got {quantity}", 422)


# --- 3xxx: Catalog ---

class ProductUnavailableError(AppError):
    def __init__(self, product_id: int, merchant_id: str) -> None:
        super().__init__(
            3001,
            f"Product {product_id} is unavailable from merchant {merchant_id}",
            422,
        )


class InsufficientStockError(AppError):
    def __init__(self, product_name: str, requested: int, available: int) -> None:
        self.requested = requested
        self.available = available
        super().__init__(
            3002,
            f"Insufficient stock for {product_name}: requested {requested}, "
            f"available {available} (short by {requested - available})",
            409,
            details={
                "requested": requested,
                "available": available,
                "shortfall": requested - available,
            },
        )


class RemoteServiceError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(3003, f"Product service error: {detail}", 502)


# --- 4xxx: Order ---

class OrderNotFoundError(NotFoundError):
    def __init__(self, order_id: str) -> None:
        super().__init__(4004, f"Order not found: {order_id}")


class OrderLineNotFoundError(NotFoundError):
    def __init__(self, item_id: int) -> None:
        super().__init__(4005, f"Order item not found: {item_id}")


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Rate limit exceeded", 429)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
