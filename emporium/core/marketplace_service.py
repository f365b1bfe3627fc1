"""Marketplace service: implements MarketplacePort for the interactive menu.

This is a core service that orchestrates the marketplace use cases (buy,
approve, add/edit product, list orders) by loading aggregates from the data
store, mutating them through the ledgers and saving them back as a unit.

Writers to the same aggregate are serialised through one asyncio.Lock per
aggregate, so load → mutate → save cannot interleave inside one process.
Use cases touching both aggregates take the catalog lock before the
directory lock. Separate processes sharing the same files are not
coordinated and can still lose each other's updates.
"""

import asyncio
import copy
import logging

from .errors import PersistenceError
from .inventory import InventoryLedger
from .models import (
    Catalog,
    Directory,
    LoginResult,
    Order,
    PendingOrder,
    Product,
    RegistrationData,
    User,
)
from .notifications import NotificationQueue, approved_message, pending_message
from .orders import OrderLedger
from .ports import ApprovalDecision, DataStorePort, MarketplacePort
from .users import UserDirectory

logger = logging.getLogger(__name__)


class MarketplaceService(MarketplacePort):
    """Core implementation of MarketplacePort.

    Coordinates the inventory, order, notification and user ledgers with
    the data store. All state changes are logged.
    """

    def __init__(
        self,
        store: DataStorePort,
        inventory: InventoryLedger | None = None,
        orders: OrderLedger | None = None,
        notifications: NotificationQueue | None = None,
        users: UserDirectory | None = None,
    ):
        """Initialize the marketplace service.

        Args:
            store: DataStorePort implementation for persistence.
            inventory: Ledger for catalog and stock rules.
            orders: Ledger for order creation and approval.
            notifications: Mailbox operations.
            users: Directory rules for registration and login.
        """
        self.store = store
        self.inventory = inventory or InventoryLedger()
        self.orders = orders or OrderLedger()
        self.notifications = notifications or NotificationQueue()
        self.users = users or UserDirectory()

        # Lock order: catalog before directory
        self._catalog_lock = asyncio.Lock()
        self._directory_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    async def register(self, registration: RegistrationData) -> User:
        async with self._directory_lock:
            directory = await self.store.load_directory()
            user = self.users.register(directory, registration)
            await self.store.save_directory(directory)

        logger.info(
            f"User {user.username} registered",
            extra={"username": user.username},
        )
        return user

    async def seed_admin(self, registration: RegistrationData) -> User:
        """Create an admin account out of band.

        Self-registration never grants admin rights, so at least one admin
        has to be created this way.
        """
        async with self._directory_lock:
            directory = await self.store.load_directory()
            user = self.users.seed_admin(directory, registration)
            await self.store.save_directory(directory)

        logger.info(
            f"Admin {user.username} seeded",
            extra={"username": user.username},
        )
        return user

    async def login(self, username: str, password: str) -> LoginResult:
        async with self._directory_lock:
            directory = await self.store.load_directory()
            user = self.users.authenticate(directory, username, password)

            delivered = self.notifications.drain(user)
            deferred = False
            if delivered:
                try:
                    await self.store.save_directory(directory)
                except PersistenceError:
                    # Not delivered until the empty mailbox is durable
                    self.notifications.restore(user, delivered)
                    logger.warning(
                        f"Could not persist mailbox drain for {username}, "
                        f"keeping {len(delivered)} messages queued",
                        exc_info=True,
                    )
                    delivered = []
                    deferred = True

        logger.info(
            f"User {username} logged in",
            extra={"username": username, "notifications": len(delivered)},
        )
        return LoginResult(
            user=user, notifications=tuple(delivered), mailbox_deferred=deferred
        )

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    async def list_products(self) -> list[Product]:
        return await self.store.load_catalog()

    async def search_products(self, term: str) -> list[Product]:
        catalog = await self.store.load_catalog()
        results = self.inventory.search(catalog, term)
        logger.debug(
            f"Product search matched {len(results)} products",
            extra={"term": term, "count": len(results)},
        )
        return results

    async def add_product(
        self, name: str, price: str | float, description: str
    ) -> Product:
        async with self._catalog_lock:
            catalog = await self.store.load_catalog()
            product = self.inventory.add_product(catalog, name, price, description)
            await self.store.save_catalog(catalog)

        logger.info(
            f"Product {product.id} added",
            extra={"product_id": product.id, "quantity": product.quantity},
        )
        return product

    async def edit_product(
        self,
        product_id: str,
        name: str | None = None,
        price: str | float | None = None,
        description: str | None = None,
    ) -> Product:
        async with self._catalog_lock:
            catalog = await self.store.load_catalog()
            product = self.inventory.edit_product(
                catalog, product_id, name=name, price=price, description=description
            )
            await self.store.save_catalog(catalog)

        logger.info(
            f"Product {product_id} edited",
            extra={"product_id": product_id},
        )
        return product

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    async def buy(self, username: str, product_id: str) -> Order:
        async with self._catalog_lock, self._directory_lock:
            catalog = await self.store.load_catalog()
            directory = await self.store.load_directory()
            catalog_before = copy.deepcopy(catalog)

            user = self.users.get(directory, username)
            snapshot = self.inventory.decrement_if_available(catalog, product_id)
            order = self.orders.place_order(
                user, snapshot, taken_ids=self.orders.order_ids(directory)
            )
            self.notifications.append(user, pending_message(order))

            await self._save_purchase(catalog, directory, catalog_before)

        logger.info(
            f"Order {order.order_id} placed by {username}",
            extra={
                "order_id": order.order_id,
                "username": username,
                "product_id": product_id,
            },
        )
        return order

    async def _save_purchase(
        self, catalog: Catalog, directory: Directory, catalog_before: Catalog
    ) -> None:
        """Persist both aggregates of a purchase, or neither.

        If the directory save fails after the catalog was written, the
        catalog is written back as it was before the purchase.
        """
        await self.store.save_catalog(catalog)
        try:
            await self.store.save_directory(directory)
        except PersistenceError:
            try:
                await self.store.save_catalog(catalog_before)
            except PersistenceError as rollback_error:
                logger.error(
                    f"Failed to roll back catalog after order save failure: "
                    f"{rollback_error}",
                    exc_info=True,
                )
            raise

    async def list_orders(self, username: str) -> list[Order]:
        directory = await self.store.load_directory()
        return list(self.users.get(directory, username).orders)

    async def find_order(self, username: str, order_id: str) -> Order:
        directory = await self.store.load_directory()
        user = self.users.get(directory, username)
        return self.orders.find_by_order_id(user, order_id)

    async def list_all_orders(self) -> list[PendingOrder]:
        directory = await self.store.load_directory()
        return self.orders.list_all_across_all_users(directory)

    async def list_pending_orders(self) -> list[PendingOrder]:
        directory = await self.store.load_directory()
        return self.orders.list_pending_across_all_users(directory)

    async def approve_orders(self, decide: ApprovalDecision) -> list[PendingOrder]:
        approved: list[PendingOrder] = []

        async with self._directory_lock:
            directory = await self.store.load_directory()

            for entry in self.orders.list_pending_across_all_users(directory):
                if not await decide(entry):
                    continue
                if self.orders.approve(entry.order):
                    owner = directory[entry.username]
                    self.notifications.append(owner, approved_message(entry.order))
                    approved.append(entry)

            if approved:
                await self.store.save_directory(directory)

        for entry in approved:
            logger.info(
                f"Order {entry.order.order_id} approved",
                extra={"order_id": entry.order.order_id, "username": entry.username},
            )
        return approved
