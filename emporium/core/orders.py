"""Order creation, approval and lookup.

Orders live inside their owner's record in the user directory. Placing an
order assumes stock has already been taken from the catalog; the caller
must persist both in the same transaction.
"""

from collections.abc import Collection

from .errors import OrderNotFoundError
from .models import Directory, Order, OrderStatus, PendingOrder, Product, User
from .order_ids import OrderIdGenerator


class OrderLedger:
    """Creates orders and tracks their status transitions."""

    def __init__(self, id_generator: OrderIdGenerator | None = None):
        self.id_generator = id_generator or OrderIdGenerator()

    def place_order(
        self, user: User, product: Product, taken_ids: Collection[str] = ()
    ) -> Order:
        """Append a pending order for a snapshot of ``product``."""
        order = Order(
            order_id=self.id_generator.next(taken_ids),
            product=product.snapshot(),
            status=OrderStatus.PENDING,
        )
        user.orders.append(order)
        return order

    @staticmethod
    def approve(order: Order) -> bool:
        """Approve a pending order. Returns False if it was already approved."""
        return order.approve()

    @staticmethod
    def find_by_order_id(user: User, order_id: str) -> Order:
        for order in user.orders:
            if order.order_id == order_id:
                return order
        raise OrderNotFoundError(order_id)

    @staticmethod
    def list_all_across_all_users(directory: Directory) -> list[PendingOrder]:
        """Every order paired with its owner.

        Directory insertion order first, then each user's placement order.
        """
        return [
            PendingOrder(username=username, order=order)
            for username, user in directory.items()
            for order in user.orders
        ]

    @classmethod
    def list_pending_across_all_users(cls, directory: Directory) -> list[PendingOrder]:
        return [
            entry
            for entry in cls.list_all_across_all_users(directory)
            if entry.order.is_pending
        ]

    @staticmethod
    def order_ids(directory: Directory) -> set[str]:
        return {order.order_id for user in directory.values() for order in user.orders}
