"""Per-user notification mailbox.

Messages are appended by the system and delivered to the owner on their
next login. Delivery counts only once the emptied mailbox is persisted;
``restore`` undoes a drain whose save failed.
"""

from .models import Order, User


def pending_message(order: Order) -> str:
    return f"Order {order.order_id} for {order.product.name} is pending admin approval."


def approved_message(order: Order) -> str:
    return f"Order {order.order_id} for {order.product.name} has been approved!"


class NotificationQueue:
    """Append-only mailbox operations on a user record."""

    @staticmethod
    def append(user: User, message: str) -> None:
        user.notifications.append(message)

    @staticmethod
    def drain(user: User) -> list[str]:
        """Take every message out of the mailbox, oldest first."""
        messages = list(user.notifications)
        user.notifications.clear()
        return messages

    @staticmethod
    def restore(user: User, messages: list[str]) -> None:
        """Put drained messages back ahead of anything appended since."""
        user.notifications[:0] = messages
