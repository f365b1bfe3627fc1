"""Port interfaces for the Emporium marketplace.

These abstract base classes define the boundaries between core
domain logic and external adapters. Implementations live in the
adapters/ package.

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - DataStorePort: Load and save the user directory and product catalog
   - ConsolePort: Prompt for input and display messages
   - RegistrationValidatorPort: Accept or reject raw registration fields

2. **Driving Ports** (adapters call into core)
   - MarketplacePort: The marketplace use cases (buy, approve, edit, ...)
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

from .models import (
    Catalog,
    Directory,
    LoginResult,
    MessageLevel,
    Order,
    PendingOrder,
    Product,
    RegistrationData,
    User,
)


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class DataStorePort(ABC):
    """Port for durable load and save of the two aggregates.

    Each aggregate is always read and written as a whole. There are no
    partial updates and no append semantics: a save overwrites whatever
    was stored before.

    Implementations must handle:
    - Absent or blank resources (load returns an empty aggregate)
    - Read, parse and write failures (raise PersistenceError)
    """

    @abstractmethod
    async def load_directory(self) -> Directory:
        """Load the user directory.

        Returns:
            Mapping of username to User in stored insertion order.
            Empty dict if nothing has been stored yet.

        Raises:
            PersistenceError: If the resource cannot be read or parsed.
        """

    @abstractmethod
    async def save_directory(self, directory: Directory) -> None:
        """Persist the complete user directory, replacing prior content.

        Raises:
            PersistenceError: If the write fails. Prior content must be
                left intact.
        """

    @abstractmethod
    async def load_catalog(self) -> Catalog:
        """Load the product catalog.

        Returns:
            Products in catalog order. Empty list if nothing has been
            stored yet.

        Raises:
            PersistenceError: If the resource cannot be read or parsed.
        """

    @abstractmethod
    async def save_catalog(self, catalog: Catalog) -> None:
        """Persist the complete product catalog, replacing prior content.

        Raises:
            PersistenceError: If the write fails. Prior content must be
                left intact.
        """


class ConsolePort(ABC):
    """Port for the interactive terminal.

    Supplies strings and displays output. It holds no marketplace logic.
    """

    @abstractmethod
    async def prompt(self, question: str) -> str:
        """Read one line of input after showing ``question``.

        Raises:
            EOFError: If the input stream is closed.
        """

    @abstractmethod
    async def display(
        self, message: str, level: MessageLevel = MessageLevel.INFO
    ) -> None:
        """Show a message to the user at the given level."""


class RegistrationValidatorPort(ABC):
    """Port for field-format validation of registration input."""

    @abstractmethod
    def validate(
        self, name: str, username: str, email: str, password: str
    ) -> RegistrationData:
        """Validate raw registration fields.

        Returns:
            RegistrationData with the accepted values.

        Raises:
            RegistrationRejectedError: With the first rejection reason.
        """


# ============================================================================
# DRIVING PORTS (Adapters call into core)
# ============================================================================

ApprovalDecision = Callable[[PendingOrder], Awaitable[bool]]


class MarketplacePort(ABC):
    """Port for the marketplace use cases.

    Driving port: the interactive menu invokes these methods with
    already-validated primitive arguments.

    Every mutating use case loads the aggregate(s) it needs, mutates them
    in memory and saves them back before returning. A returned value
    therefore means the change is durable.
    """

    @abstractmethod
    async def register(self, registration: RegistrationData) -> User:
        """Create a customer account.

        Raises:
            DuplicateUsernameError: If the username is taken.
            PersistenceError: If the directory cannot be loaded or saved.
        """

    @abstractmethod
    async def login(self, username: str, password: str) -> LoginResult:
        """Authenticate and deliver the user's mailbox.

        The mailbox is only emptied once the emptied directory has been
        saved. If that save fails the login still succeeds, the mailbox is
        left untouched and the result is marked ``mailbox_deferred``.

        Raises:
            InvalidCredentialsError: On unknown user or wrong password.
            PersistenceError: If the directory cannot be loaded.
        """

    @abstractmethod
    async def list_products(self) -> list[Product]:
        """Return the whole catalog."""

    @abstractmethod
    async def search_products(self, term: str) -> list[Product]:
        """Return products whose name contains ``term`` (case-insensitive)."""

    @abstractmethod
    async def buy(self, username: str, product_id: str) -> Order:
        """Buy one unit of a product as one all-or-nothing transaction.

        Raises:
            ProductNotFoundError: If the product does not exist.
            OutOfStockError: If the product has no stock left.
            UserNotFoundError: If the buyer is not in the directory.
            PersistenceError: If either aggregate cannot be loaded or saved.
        """

    @abstractmethod
    async def list_orders(self, username: str) -> list[Order]:
        """Return the user's orders in placement order."""

    @abstractmethod
    async def find_order(self, username: str, order_id: str) -> Order:
        """Find one of the user's orders by id.

        Raises:
            OrderNotFoundError: If the user has no such order.
        """

    @abstractmethod
    async def add_product(
        self, name: str, price: str | float, description: str
    ) -> Product:
        """Add a product with the default stock quantity."""

    @abstractmethod
    async def edit_product(
        self,
        product_id: str,
        name: str | None = None,
        price: str | float | None = None,
        description: str | None = None,
    ) -> Product:
        """Overwrite the supplied fields of a product.

        Raises:
            ProductNotFoundError: If the product does not exist.
        """

    @abstractmethod
    async def list_all_orders(self) -> list[PendingOrder]:
        """Return every order of every user, paired with its owner."""

    @abstractmethod
    async def list_pending_orders(self) -> list[PendingOrder]:
        """Return every pending order of every user, paired with its owner."""

    @abstractmethod
    async def approve_orders(
        self, decide: ApprovalDecision
    ) -> list[PendingOrder]:
        """Run the approval workflow over all pending orders.

        ``decide`` is awaited once per pending order, in listing order.
        The directory is saved once after the whole batch.

        Returns:
            The orders that were approved.
        """
