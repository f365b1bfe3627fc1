"""Core domain logic for the Emporium marketplace.

This package contains zero external dependencies and represents
the pure business logic of the application. All adapters and
external integrations are handled by the adapters package.
"""

from .errors import (
    DuplicateUsernameError,
    InvalidCredentialsError,
    InvalidPriceError,
    MarketplaceError,
    NotFoundError,
    OrderNotFoundError,
    OutOfStockError,
    PersistenceError,
    ProductNotFoundError,
    RegistrationRejectedError,
    UserNotFoundError,
)
from .models import (
    Catalog,
    Directory,
    LoginResult,
    MessageLevel,
    Order,
    OrderStatus,
    PendingOrder,
    Product,
    RegistrationData,
    User,
)

__all__ = [
    "Catalog",
    "Directory",
    "DuplicateUsernameError",
    "InvalidCredentialsError",
    "InvalidPriceError",
    "LoginResult",
    "MarketplaceError",
    "MessageLevel",
    "NotFoundError",
    "Order",
    "OrderNotFoundError",
    "OrderStatus",
    "OutOfStockError",
    "PendingOrder",
    "PersistenceError",
    "Product",
    "ProductNotFoundError",
    "RegistrationData",
    "RegistrationRejectedError",
    "User",
    "UserNotFoundError",
]
