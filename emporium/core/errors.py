"""Error taxonomy for the Emporium marketplace core.

Every error the core raises on purpose derives from MarketplaceError, so
driving adapters can recover at the use-case boundary with a single except
clause and show the message to the user.
"""


class MarketplaceError(Exception):
    """Base class for recoverable marketplace errors."""


class NotFoundError(MarketplaceError):
    """A product, order or user lookup missed."""


class ProductNotFoundError(NotFoundError):
    def __init__(self, product_id: str):
        super().__init__(f"Product {product_id} not found.")
        self.product_id = product_id


class OrderNotFoundError(NotFoundError):
    def __init__(self, order_id: str):
        super().__init__(f"Order {order_id} not found.")
        self.order_id = order_id


class UserNotFoundError(NotFoundError):
    def __init__(self, username: str):
        super().__init__(f"User {username} not found.")
        self.username = username


class DuplicateUsernameError(MarketplaceError):
    def __init__(self, username: str):
        super().__init__(
            "Username already exists. Please choose a different username."
        )
        self.username = username


class InvalidCredentialsError(MarketplaceError):
    """Raised for both unknown usernames and wrong passwords.

    The message is identical in both cases so callers cannot tell which
    half of the credentials was wrong.
    """

    def __init__(self) -> None:
        super().__init__("Invalid username or password.")


class OutOfStockError(MarketplaceError):
    def __init__(self, product_id: str):
        super().__init__("Out of stock!")
        self.product_id = product_id


class InvalidPriceError(MarketplaceError, ValueError):
    def __init__(self, price: float):
        super().__init__(f"Price must be non-negative, got {price}.")
        self.price = price


class PersistenceError(MarketplaceError):
    """Reading or writing an aggregate failed."""


class RegistrationRejectedError(MarketplaceError):
    """Registration fields failed validation."""

    def __init__(self, reason: str):
        super().__init__(f"Validation error: {reason}")
        self.reason = reason


__all__ = [
    "DuplicateUsernameError",
    "InvalidCredentialsError",
    "InvalidPriceError",
    "MarketplaceError",
    "NotFoundError",
    "OrderNotFoundError",
    "OutOfStockError",
    "PersistenceError",
    "ProductNotFoundError",
    "RegistrationRejectedError",
    "UserNotFoundError",
]
