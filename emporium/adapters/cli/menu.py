"""Interactive menu for the marketplace.

Maps numbered menu choices to MarketplacePort use cases. The entries shown
depend on the session's role; see emporium.core.session. Marketplace errors
are reported to the console and the loop carries on.
"""

import logging
from collections.abc import Awaitable, Callable

from emporium.core.errors import MarketplaceError, ProductNotFoundError
from emporium.core.models import MessageLevel, Order, PendingOrder, Product
from emporium.core.ports import ConsolePort, MarketplacePort, RegistrationValidatorPort
from emporium.core.session import Action, Session

logger = logging.getLogger(__name__)


def format_price(price: float | None) -> str:
    if price is None:
        return "$n/a"
    if float(price).is_integer():
        return f"${int(price)}"
    return f"${price}"


def format_product(product: Product) -> str:
    return "\n".join(
        [
            f"\nProduct ID: {product.id}",
            f"Name: {product.name}",
            f"Price: {format_price(product.price)}",
            f"Description: {product.description}",
            f"Quantity: {product.quantity}",
        ]
    )


def format_order(order: Order, username: str | None = None) -> str:
    lines = [f"\nOrder ID: {order.order_id}"]
    if username is not None:
        lines.append(f"User: {username}")
    lines.extend(
        [
            f"Product Name: {order.product.name}",
            f"Price: {format_price(order.product.price)}",
            f"Description: {order.product.description}",
            f"Status: {order.status.value}",
        ]
    )
    return "\n".join(lines)


class MenuRunner:
    """Runs the two-tier menu loop against a MarketplacePort.

    Holds the current Session. Login swaps in a customer or admin session,
    logout swaps back to anonymous.
    """

    def __init__(
        self,
        marketplace: MarketplacePort,
        console: ConsolePort,
        validator: RegistrationValidatorPort,
        title: str = "Welcome to Emporium",
    ):
        """Initialize the menu runner.

        Args:
            marketplace: Use cases to drive.
            console: Where prompts and messages go.
            validator: Checks registration fields before registering.
            title: Heading shown above the anonymous menu.
        """
        self.marketplace = marketplace
        self.console = console
        self.validator = validator
        self.title = title
        self.session = Session.anonymous()

        self._handlers: dict[Action, Callable[[], Awaitable[None]]] = {
            Action.REGISTER: self.register,
            Action.LOGIN: self.login,
            Action.LIST_PRODUCTS: self.list_products,
            Action.SEARCH_PRODUCTS: self.search_products,
            Action.BUY: self.buy,
            Action.LIST_ORDERS: self.list_orders,
            Action.FIND_ORDER: self.find_order,
            Action.ADD_PRODUCT: self.add_product,
            Action.EDIT_PRODUCT: self.edit_product,
            Action.APPROVE_ORDERS: self.approve_orders,
            Action.LIST_ALL_ORDERS: self.list_all_orders,
            Action.LOGOUT: self.logout,
        }

    async def run(self) -> None:
        """Loop until the user exits or input ends.

        Ctrl-C cancels the running task; the cancellation is not caught here
        and ends the program.
        """
        while True:
            try:
                if not await self.step():
                    break
            except EOFError:
                logger.info("EOF received, exiting menu")
                break

    async def step(self) -> bool:
        """Show the menu, run one choice. Returns False when the user exits."""
        actions = self.session.actions()
        await self._show_menu(actions)

        choice = (await self.console.prompt("Enter your choice: ")).strip()
        action = self._resolve_choice(actions, choice)
        if action is None:
            await self.console.display(
                "Invalid choice. Please try again.", MessageLevel.ERROR
            )
            return True

        if action is Action.EXIT:
            await self.console.display(
                "Thank you for using Emporium. Goodbye!", MessageLevel.SUCCESS
            )
            return False

        await self.dispatch(action)
        return True

    async def dispatch(self, action: Action) -> None:
        """Run one action, reporting failures instead of raising them."""
        if not self.session.allows(action):
            await self.console.display(
                "That action is not available.", MessageLevel.ERROR
            )
            return

        try:
            await self._handlers[action]()
        except MarketplaceError as e:
            logger.warning(
                f"{action.name} failed: {e}",
                extra={"action": action.name, "username": self.session.username},
            )
            await self.console.display(str(e), MessageLevel.ERROR)
        except EOFError:
            raise
        except Exception as e:
            logger.error(f"Unexpected error in {action.name}: {e}", exc_info=True)
            await self.console.display(f"Unexpected error: {e}", MessageLevel.ERROR)

    async def _show_menu(self, actions: list[Action]) -> None:
        if self.session.is_admin:
            heading = "\nAdmin Menu"
        elif self.session.is_authenticated:
            heading = "\nUser Menu"
        else:
            heading = f"\n{self.title}"
        await self.console.display(heading, MessageLevel.INFO)

        lines = [f"{i}. {action.label}" for i, action in enumerate(actions, 1)]
        await self.console.display("\n".join(lines))

    @staticmethod
    def _resolve_choice(actions: list[Action], choice: str) -> Action | None:
        if not choice.isdigit():
            return None
        index = int(choice) - 1
        if 0 <= index < len(actions):
            return actions[index]
        return None

    # ------------------------------------------------------------------
    # Anonymous actions
    # ------------------------------------------------------------------

    async def register(self) -> None:
        name = await self.console.prompt("Enter your name: ")
        username = await self.console.prompt("Enter your username: ")
        email = await self.console.prompt("Enter your email: ")
        password = await self.console.prompt("Enter your password: ")

        registration = self.validator.validate(name, username, email, password)
        await self.marketplace.register(registration)
        await self.console.display("Registration successful!", MessageLevel.SUCCESS)

    async def login(self) -> None:
        username = await self.console.prompt("Enter your username: ")
        password = await self.console.prompt("Enter your password: ")

        result = await self.marketplace.login(username, password)
        self.session = Session.for_user(result.user)
        await self.console.display("Login successful!", MessageLevel.SUCCESS)

        if result.mailbox_deferred:
            await self.console.display(
                "Your notifications could not be opened right now. "
                "They will be shown at your next login.",
                MessageLevel.WARNING,
            )
            return
        if not result.notifications:
            await self.console.display("No new notifications.", MessageLevel.INFO)
            return

        await self.console.display("\nYou have new notifications:", MessageLevel.INFO)
        for i, note in enumerate(result.notifications, 1):
            await self.console.display(f"Notification {i}: {note}", MessageLevel.WARNING)

    # ------------------------------------------------------------------
    # Shared actions
    # ------------------------------------------------------------------

    async def list_products(self) -> None:
        products = await self.marketplace.list_products()
        if not products:
            await self.console.display(
                "No products available at the moment.", MessageLevel.WARNING
            )
            return
        await self.console.display("All Products:", MessageLevel.INFO)
        for product in products:
            await self.console.display(format_product(product))

    async def search_products(self) -> None:
        term = await self.console.prompt("Enter product name to search: ")
        results = await self.marketplace.search_products(term)
        if not results:
            await self.console.display(
                "No products found matching your search.", MessageLevel.WARNING
            )
            return
        await self.console.display("Search Results:", MessageLevel.INFO)
        for product in results:
            await self.console.display(format_product(product))

    async def buy(self) -> None:
        product_id = (await self.console.prompt("Enter the product ID to buy: ")).strip()
        order = await self.marketplace.buy(self._username(), product_id)
        await self.console.display(
            f"Order placed! Order ID: {order.order_id}. Awaiting admin approval.",
            MessageLevel.SUCCESS,
        )

    async def list_orders(self) -> None:
        orders = await self.marketplace.list_orders(self._username())
        if not orders:
            await self.console.display(
                "You have not bought any products yet.", MessageLevel.WARNING
            )
            return
        await self.console.display("Your Orders:", MessageLevel.INFO)
        for order in orders:
            await self.console.display(format_order(order))

    async def find_order(self) -> None:
        order_id = (await self.console.prompt("Enter Order ID to search: ")).strip()
        order = await self.marketplace.find_order(self._username(), order_id)
        await self.console.display("Order Found:", MessageLevel.INFO)
        await self.console.display(format_order(order))

    async def logout(self) -> None:
        self.session = self.session.logout()
        await self.console.display("Logged out successfully.", MessageLevel.SUCCESS)

    # ------------------------------------------------------------------
    # Admin actions
    # ------------------------------------------------------------------

    async def add_product(self) -> None:
        name = await self.console.prompt("Enter product name: ")
        price = await self.console.prompt("Enter product price: ")
        description = await self.console.prompt("Enter product description: ")

        product = await self.marketplace.add_product(name, price, description)
        await self.console.display(
            f"Product added successfully! Default quantity set to {product.quantity}.",
            MessageLevel.SUCCESS,
        )

    async def edit_product(self) -> None:
        product_id = (await self.console.prompt("Enter the Product ID to edit: ")).strip()
        current = await self._find_product(product_id)

        # Blank answers keep the current value
        name = await self.console.prompt(f"Enter new name ({current.name}): ")
        price = await self.console.prompt(
            f"Enter new price ({format_price(current.price)}): "
        )
        description = await self.console.prompt(
            f"Enter new description ({current.description}): "
        )

        await self.marketplace.edit_product(
            product_id,
            name=name or None,
            price=price or None,
            description=description or None,
        )
        await self.console.display("Product updated successfully!", MessageLevel.SUCCESS)

    async def _find_product(self, product_id: str) -> Product:
        for product in await self.marketplace.list_products():
            if product.id == product_id:
                return product
        raise ProductNotFoundError(product_id)

    async def approve_orders(self) -> None:
        seen = 0

        async def decide(entry: PendingOrder) -> bool:
            nonlocal seen
            seen += 1
            await self.console.display(format_order(entry.order, entry.username))
            answer = await self.console.prompt("Approve this order? (yes/no): ")
            return answer.strip().lower() == "yes"

        approved = await self.marketplace.approve_orders(decide)

        if seen == 0:
            await self.console.display("No pending orders.", MessageLevel.SUCCESS)
            return
        await self.console.display(
            f"Order approvals processed. {len(approved)} approved.",
            MessageLevel.SUCCESS,
        )

    async def list_all_orders(self) -> None:
        entries = await self.marketplace.list_all_orders()
        if not entries:
            await self.console.display("No orders found.", MessageLevel.SUCCESS)
            return
        await self.console.display("All Orders:", MessageLevel.INFO)
        for entry in entries:
            await self.console.display(format_order(entry.order, entry.username))

    def _username(self) -> str:
        assert self.session.username is not None
        return self.session.username
