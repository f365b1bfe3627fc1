"""Domain models for the Emporium marketplace.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TypeAlias

DEFAULT_STOCK_QUANTITY = 3


@dataclass
class Product:
    """A catalog entry with finite stock.

    Mutable: name, price and description change through admin edits and
    quantity changes through purchases. Products are never deleted.

    ``price`` is None when the admin typed something that is not a number;
    the record is kept rather than rejected.
    """

    id: str
    name: str
    price: float | None
    description: str
    quantity: int = DEFAULT_STOCK_QUANTITY

    def __post_init__(self) -> None:
        """Validate product invariants on creation or deserialization."""
        if not self.id:
            raise ValueError("product id must be a non-empty string")
        if self.quantity < 0:
            raise ValueError(f"quantity must be non-negative, got {self.quantity}")
        if self.price is not None and self.price < 0:
            raise ValueError(f"price must be non-negative, got {self.price}")

    @property
    def in_stock(self) -> bool:
        return self.quantity >= 1

    def snapshot(self) -> "Product":
        """Return an independent copy for embedding in an order."""
        return replace(self)


class OrderStatus(Enum):
    """Lifecycle states for an order.

    The only transition is PENDING → APPROVED. There is no rejection or
    cancellation path.
    """

    PENDING = "pending"
    APPROVED = "approved"


@dataclass
class Order:
    """A purchase of one unit of a product.

    ``product`` is a snapshot taken at purchase time; later catalog edits
    never reach it.
    """

    order_id: str
    product: Product
    status: OrderStatus = OrderStatus.PENDING

    @property
    def is_pending(self) -> bool:
        return self.status == OrderStatus.PENDING

    def approve(self) -> bool:
        """Transition to approved.

        Returns:
            True if the status changed, False if the order was already
            approved (re-approval is a no-op).
        """
        if self.status == OrderStatus.APPROVED:
            return False
        self.status = OrderStatus.APPROVED
        return True


@dataclass
class User:
    """A registered account.

    ``orders`` is append-only; only the status of a contained order may
    change. ``notifications`` is the user's mailbox, emptied as a unit when
    the owner reads it.
    """

    username: str
    name: str
    email: str
    password: str
    admin: bool = False
    orders: list[Order] = field(default_factory=list)
    notifications: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.username:
            raise ValueError("username must be a non-empty string")


@dataclass(frozen=True)
class PendingOrder:
    """Read-only pairing of an order with the username that owns it."""

    username: str
    order: Order


@dataclass(frozen=True)
class RegistrationData:
    """Registration fields that have passed validation."""

    name: str
    username: str
    email: str
    password: str


class MessageLevel(Enum):
    """Display levels understood by the console."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class LoginResult:
    """Outcome of a successful login: the user and the delivered mailbox.

    ``mailbox_deferred`` is True when the mailbox could not be emptied on
    disk. Its messages stay queued for a later login.
    """

    user: User
    notifications: tuple[str, ...]
    mailbox_deferred: bool = False


# Aggregates. Each is loaded and saved as a whole.
Catalog: TypeAlias = list[Product]
Directory: TypeAlias = dict[str, User]


__all__ = [
    "DEFAULT_STOCK_QUANTITY",
    "Catalog",
    "Directory",
    "LoginResult",
    "MessageLevel",
    "Order",
    "OrderStatus",
    "PendingOrder",
    "Product",
    "RegistrationData",
    "User",
]
