"""Interactive session state for the marketplace menu.

A session is in one of three roles. Anonymous sessions become customer or
admin sessions on login and return to anonymous on logout. Each menu
action is tagged with the roles allowed to run it, so admin-only actions
are gated by the session's role rather than by a separate menu.
"""

from dataclasses import dataclass
from enum import Enum

from .models import User


class Role(Enum):
    """Capability tag of a session."""

    ANONYMOUS = "anonymous"
    CUSTOMER = "customer"
    ADMIN = "admin"


_SIGNED_IN = frozenset({Role.CUSTOMER, Role.ADMIN})
_ADMIN_ONLY = frozenset({Role.ADMIN})


class Action(Enum):
    """Menu actions in display order, each with a label and allowed roles."""

    REGISTER = ("Register", frozenset({Role.ANONYMOUS}))
    LOGIN = ("Login", frozenset({Role.ANONYMOUS}))
    LIST_PRODUCTS = ("See All Products", frozenset(Role))
    SEARCH_PRODUCTS = ("Search Products by Name", _SIGNED_IN)
    BUY = ("Buy Products", _SIGNED_IN)
    LIST_ORDERS = ("See bought Products", _SIGNED_IN)
    FIND_ORDER = ("Search Order by ID", _SIGNED_IN)
    ADD_PRODUCT = ("Add Product", _ADMIN_ONLY)
    EDIT_PRODUCT = ("Edit Product", _ADMIN_ONLY)
    APPROVE_ORDERS = ("Approve Orders", _ADMIN_ONLY)
    LIST_ALL_ORDERS = ("See All Orders", _ADMIN_ONLY)
    LOGOUT = ("Logout", _SIGNED_IN)
    EXIT = ("Exit", frozenset({Role.ANONYMOUS}))

    def __init__(self, label: str, roles: frozenset[Role]):
        self.label = label
        self.roles = roles


@dataclass(frozen=True)
class Session:
    """Who is using the menu right now."""

    role: Role = Role.ANONYMOUS
    username: str | None = None

    def __post_init__(self) -> None:
        if self.role == Role.ANONYMOUS and self.username is not None:
            raise ValueError("anonymous session cannot carry a username")
        if self.role != Role.ANONYMOUS and not self.username:
            raise ValueError(f"{self.role.value} session requires a username")

    @classmethod
    def anonymous(cls) -> "Session":
        return cls()

    @classmethod
    def for_user(cls, user: User) -> "Session":
        role = Role.ADMIN if user.admin else Role.CUSTOMER
        return cls(role=role, username=user.username)

    @property
    def is_authenticated(self) -> bool:
        return self.role != Role.ANONYMOUS

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def allows(self, action: Action) -> bool:
        return self.role in action.roles

    def actions(self) -> list[Action]:
        """Menu entries available to this session, in display order."""
        return [action for action in Action if self.allows(action)]

    def logout(self) -> "Session":
        return Session.anonymous()
