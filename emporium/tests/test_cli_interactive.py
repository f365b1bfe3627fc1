"""Tests for the interactive menu.

Covers:
- MenuRunner loop: exit, EOF, invalid choices
- Anonymous, customer and admin actions driven through numbered choices
- Error reporting without leaving the loop
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from emporium.adapters.cli.menu import MenuRunner, format_order, format_price
from emporium.core.marketplace_service import MarketplaceService
from emporium.core.models import MessageLevel, Order, OrderStatus, Product, User
from emporium.core.session import Action, Role, Session
from emporium.tests.fakes import (
    FakeConsolePort,
    FakeDataStorePort,
    FakeRegistrationValidator,
)

# Menu numbers per role, in display order
ANON_REGISTER, ANON_LOGIN, ANON_PRODUCTS, ANON_EXIT = "1", "2", "3", "4"
CUSTOMER_BUY, CUSTOMER_ORDERS, CUSTOMER_FIND, CUSTOMER_LOGOUT = "3", "4", "5", "6"
ADMIN_ADD, ADMIN_EDIT, ADMIN_APPROVE, ADMIN_ALL_ORDERS = "6", "7", "8", "9"


@pytest.fixture
def store() -> FakeDataStorePort:
    return FakeDataStorePort(
        directory={
            "bob": User(
                username="bob",
                name="Bob",
                email="bob@mail.com",
                password="pw12",
                notifications=["Order AB12 for Pen has been approved!"],
            ),
            "root": User(
                username="root",
                name="Root",
                email="root@mail.com",
                password="toor",
                admin=True,
            ),
        },
        catalog=[
            Product(id="1", name="Pen", price=1.5, description="Blue ink", quantity=1),
        ],
    )


@pytest.fixture
def console() -> FakeConsolePort:
    return FakeConsolePort()


@pytest.fixture
def validator() -> FakeRegistrationValidator:
    return FakeRegistrationValidator()


@pytest.fixture
def menu(store, console, validator) -> MenuRunner:
    return MenuRunner(MarketplaceService(store), console, validator)


def sign_in(menu: MenuRunner, store: FakeDataStorePort, username: str) -> None:
    menu.session = Session.for_user(store.directory[username])


class TestFormatting:
    @pytest.mark.parametrize(
        "price,expected",
        [(None, "$n/a"), (2.0, "$2"), (2, "$2"), (1.5, "$1.5"), (0.0, "$0")],
    )
    def test_format_price(self, price, expected) -> None:
        assert format_price(price) == expected

    def test_format_order_with_owner(self) -> None:
        pen = Product(id="1", name="Pen", price=1.5, description="Blue ink")
        text = format_order(
            Order(order_id="AB12", product=pen, status=OrderStatus.APPROVED), "bob"
        )

        assert "Order ID: AB12" in text
        assert "User: bob" in text
        assert "Status: approved" in text


@pytest.mark.asyncio
class TestMenuLoop:
    async def test_exit_choice_ends_loop(self, menu, console) -> None:
        console.feed(ANON_EXIT)
        await menu.run()

        assert "Thank you for using Emporium. Goodbye!" in console.messages_at(
            MessageLevel.SUCCESS
        )

    async def test_eof_ends_loop(self, menu, console) -> None:
        # No scripted input: the first prompt raises EOFError
        await menu.run()
        assert console.prompts == ["Enter your choice: "]

    async def test_invalid_choices_reprompt(self, menu, console) -> None:
        console.feed("0", "abc", "99", ANON_EXIT)
        await menu.run()

        errors = console.messages_at(MessageLevel.ERROR)
        assert errors.count("Invalid choice. Please try again.") == 3

    async def test_anonymous_menu_lists_entries(self, menu, console) -> None:
        console.feed(ANON_EXIT)
        await menu.run()

        assert "\nWelcome to Emporium" in console.output
        assert "1. Register\n2. Login\n3. See All Products\n4. Exit" in console.output

    async def test_admin_heading(self, menu, store, console) -> None:
        sign_in(menu, store, "root")
        console.feed("1")
        await menu.step()

        assert console.messages[0] == ("\nAdmin Menu", MessageLevel.INFO)
        assert "10. Logout" in console.output


@pytest.mark.asyncio
class TestAnonymousActions:
    async def test_register(self, menu, store, console, validator) -> None:
        console.feed(ANON_REGISTER, "Ada", "ada", "ada@mail.com", "pw99")
        await menu.step()

        assert validator.calls == [("Ada", "ada", "ada@mail.com", "pw99")]
        assert store.directory["ada"].admin is False
        assert "Registration successful!" in console.messages_at(MessageLevel.SUCCESS)

    async def test_register_rejected(self, menu, store, console, validator) -> None:
        validator.reject_reason = "email: Email must be a valid email address."
        console.feed(ANON_REGISTER, "Ada", "ada", "nope", "pw99")
        await menu.step()

        assert "ada" not in store.directory
        assert console.messages_at(MessageLevel.ERROR) == [
            "Validation error: email: Email must be a valid email address."
        ]

    async def test_register_duplicate(self, menu, store, console) -> None:
        console.feed(ANON_REGISTER, "Bobby", "bob", "b2@mail.com", "pw99")
        await menu.step()

        assert store.directory["bob"].name == "Bob"
        assert len(console.messages_at(MessageLevel.ERROR)) == 1

    async def test_login_delivers_notifications(self, menu, store, console) -> None:
        console.feed(ANON_LOGIN, "bob", "pw12")
        await menu.step()

        assert menu.session.role == Role.CUSTOMER
        assert menu.session.username == "bob"
        assert console.messages_at(MessageLevel.WARNING) == [
            "Notification 1: Order AB12 for Pen has been approved!"
        ]
        assert store.directory["bob"].notifications == []

    async def test_login_with_unwritable_mailbox(self, menu, store, console) -> None:
        store.fail_save_directory = True
        console.feed(ANON_LOGIN, "bob", "pw12")
        await menu.step()

        assert menu.session.username == "bob"
        assert console.messages_at(MessageLevel.WARNING) == [
            "Your notifications could not be opened right now. "
            "They will be shown at your next login."
        ]
        assert store.directory["bob"].notifications == [
            "Order AB12 for Pen has been approved!"
        ]

    async def test_login_without_notifications(self, menu, console) -> None:
        console.feed(ANON_LOGIN, "root", "toor")
        await menu.step()

        assert menu.session.is_admin
        assert "No new notifications." in console.messages_at(MessageLevel.INFO)

    async def test_login_bad_password(self, menu, console) -> None:
        console.feed(ANON_LOGIN, "bob", "wrong")
        await menu.step()

        assert not menu.session.is_authenticated
        assert console.messages_at(MessageLevel.ERROR) == [
            "Invalid username or password."
        ]

    async def test_list_products_anonymously(self, menu, console) -> None:
        console.feed(ANON_PRODUCTS)
        await menu.step()

        assert "Name: Pen" in console.output
        assert "Price: $1.5" in console.output

    async def test_list_products_empty(self, store, console, validator) -> None:
        menu = MenuRunner(MarketplaceService(FakeDataStorePort()), console, validator)
        console.feed(ANON_PRODUCTS)
        await menu.step()

        assert console.messages_at(MessageLevel.WARNING) == [
            "No products available at the moment."
        ]


@pytest.mark.asyncio
class TestCustomerActions:
    async def test_buy(self, menu, store, console) -> None:
        sign_in(menu, store, "bob")
        console.feed(CUSTOMER_BUY, "1")
        await menu.step()

        order = store.directory["bob"].orders[0]
        assert console.messages_at(MessageLevel.SUCCESS) == [
            f"Order placed! Order ID: {order.order_id}. Awaiting admin approval."
        ]
        assert store.product("1").quantity == 0

    async def test_buy_out_of_stock(self, menu, store, console) -> None:
        sign_in(menu, store, "bob")
        console.feed(CUSTOMER_BUY, "1", CUSTOMER_BUY, "1")
        await menu.step()
        await menu.step()

        assert console.messages_at(MessageLevel.ERROR) == ["Out of stock!"]
        assert len(store.directory["bob"].orders) == 1

    async def test_list_orders_empty(self, menu, store, console) -> None:
        sign_in(menu, store, "bob")
        console.feed(CUSTOMER_ORDERS)
        await menu.step()

        assert console.messages_at(MessageLevel.WARNING) == [
            "You have not bought any products yet."
        ]

    async def test_find_order(self, menu, store, console) -> None:
        sign_in(menu, store, "bob")
        console.feed(CUSTOMER_BUY, "1")
        await menu.step()
        order_id = store.directory["bob"].orders[0].order_id

        console.feed(CUSTOMER_FIND, order_id)
        await menu.step()

        assert "Order Found:" in console.output
        assert f"Order ID: {order_id}" in console.output
        assert "Status: pending" in console.output

    async def test_find_unknown_order(self, menu, store, console) -> None:
        sign_in(menu, store, "bob")
        console.feed(CUSTOMER_FIND, "ZZZZ")
        await menu.step()

        assert console.messages_at(MessageLevel.ERROR) == ["Order ZZZZ not found."]

    async def test_logout(self, menu, store, console) -> None:
        sign_in(menu, store, "bob")
        console.feed(CUSTOMER_LOGOUT)
        await menu.step()

        assert menu.session == Session.anonymous()
        assert "Logged out successfully." in console.messages_at(MessageLevel.SUCCESS)

    async def test_admin_actions_refused(self, menu, store, console) -> None:
        sign_in(menu, store, "bob")
        await menu.dispatch(Action.ADD_PRODUCT)

        assert console.messages_at(MessageLevel.ERROR) == [
            "That action is not available."
        ]
        assert console.prompts == []

    async def test_customer_menu_has_no_admin_entries(self, menu, store, console) -> None:
        sign_in(menu, store, "bob")
        console.feed(CUSTOMER_LOGOUT)
        await menu.step()

        assert "Add Product" not in console.output
        assert "6. Logout" in console.output


@pytest.mark.asyncio
class TestAdminActions:
    async def test_add_product(self, menu, store, console) -> None:
        sign_in(menu, store, "root")
        console.feed(ADMIN_ADD, "Notebook", "4", "A5")
        await menu.step()

        added = store.product("2")
        assert added.name == "Notebook"
        assert added.price == 4.0
        assert added.quantity == 3
        assert console.messages_at(MessageLevel.SUCCESS) == [
            "Product added successfully! Default quantity set to 3."
        ]

    async def test_add_product_bad_price_is_unpriced(self, menu, store, console) -> None:
        sign_in(menu, store, "root")
        console.feed(ADMIN_ADD, "Mystery", "cheap", "?")
        await menu.step()

        assert store.product("2").price is None

    async def test_add_product_negative_price(self, menu, store, console) -> None:
        sign_in(menu, store, "root")
        console.feed(ADMIN_ADD, "Refund", "-5", "no")
        await menu.step()

        assert store.product("2") is None
        assert len(console.messages_at(MessageLevel.ERROR)) == 1

    async def test_edit_product_blank_keeps_value(self, menu, store, console) -> None:
        sign_in(menu, store, "root")
        console.feed(ADMIN_EDIT, "1", "", "2.5", "")
        await menu.step()

        pen = store.product("1")
        assert pen.name == "Pen"
        assert pen.price == 2.5
        assert pen.description == "Blue ink"
        assert "Enter new name (Pen): " in console.prompts
        assert "Product updated successfully!" in console.messages_at(
            MessageLevel.SUCCESS
        )

    async def test_edit_unknown_product(self, menu, store, console) -> None:
        sign_in(menu, store, "root")
        console.feed(ADMIN_EDIT, "42")
        await menu.step()

        assert console.messages_at(MessageLevel.ERROR) == ["Product 42 not found."]
        assert console.prompts == ["Enter your choice: ", "Enter the Product ID to edit: "]

    async def test_approve_orders(self, menu, store, console) -> None:
        sign_in(menu, store, "bob")
        console.feed(CUSTOMER_BUY, "1")
        await menu.step()
        order_id = store.directory["bob"].orders[0].order_id

        sign_in(menu, store, "root")
        console.feed(ADMIN_APPROVE, "yes")
        await menu.step()

        assert store.directory["bob"].orders[0].status == OrderStatus.APPROVED
        assert f"Order {order_id} for Pen has been approved!" in (
            store.directory["bob"].notifications
        )
        assert "User: bob" in console.output
        assert "Order approvals processed. 1 approved." in console.messages_at(
            MessageLevel.SUCCESS
        )

    async def test_approve_declined(self, menu, store, console) -> None:
        sign_in(menu, store, "bob")
        console.feed(CUSTOMER_BUY, "1")
        await menu.step()

        sign_in(menu, store, "root")
        console.feed(ADMIN_APPROVE, "no")
        await menu.step()

        assert store.directory["bob"].orders[0].status == OrderStatus.PENDING
        assert "Order approvals processed. 0 approved." in console.messages_at(
            MessageLevel.SUCCESS
        )

    async def test_approve_nothing_pending(self, menu, store, console) -> None:
        sign_in(menu, store, "root")
        console.feed(ADMIN_APPROVE)
        await menu.step()

        assert console.messages_at(MessageLevel.SUCCESS) == ["No pending orders."]

    async def test_list_all_orders_empty(self, menu, store, console) -> None:
        sign_in(menu, store, "root")
        console.feed(ADMIN_ALL_ORDERS)
        await menu.step()

        assert console.messages_at(MessageLevel.SUCCESS) == ["No orders found."]


@pytest.mark.asyncio
class TestErrorReporting:
    async def test_persistence_error_reported(self, menu, store, console) -> None:
        store.fail_load_catalog = True
        console.feed(ANON_PRODUCTS, ANON_EXIT)
        await menu.run()

        assert "products file unreadable" in console.messages_at(MessageLevel.ERROR)
        assert "Thank you for using Emporium. Goodbye!" in console.output

    async def test_unexpected_error_reported(self, menu, console) -> None:
        menu.marketplace.list_products = AsyncMock(side_effect=RuntimeError("boom"))
        await menu.dispatch(Action.LIST_PRODUCTS)

        assert console.messages_at(MessageLevel.ERROR) == ["Unexpected error: boom"]

    async def test_eof_mid_action_ends_loop(self, menu, console) -> None:
        # Script runs out while the register action is still prompting
        console.feed(ANON_REGISTER, "Ada")
        await menu.run()

        assert console.prompts[-1] == "Enter your username: "

    async def test_cancellation_at_prompt_ends_loop(self, menu, console) -> None:
        # Ctrl-C under asyncio.run arrives as a cancellation of the main task
        console.prompt = AsyncMock(side_effect=asyncio.CancelledError())

        with pytest.raises(asyncio.CancelledError):
            await menu.run()
        assert console.prompt.await_count == 1


@pytest.mark.asyncio
async def test_full_purchase_walkthrough(menu, store, console) -> None:
    """Customer buys, admin approves, customer sees the news on next login."""
    console.feed(
        ANON_LOGIN, "bob", "pw12",
        CUSTOMER_BUY, "1",
        CUSTOMER_LOGOUT,
        ANON_LOGIN, "root", "toor",
        ADMIN_APPROVE, "yes",
        "10",
        ANON_LOGIN, "bob", "pw12",
        CUSTOMER_LOGOUT,
        ANON_EXIT,
    )
    await menu.run()

    order_id = store.directory["bob"].orders[0].order_id
    warnings = console.messages_at(MessageLevel.WARNING)
    assert warnings[-1] == f"Notification 2: Order {order_id} for Pen has been approved!"
    assert warnings[-2] == f"Notification 1: Order {order_id} for Pen is pending admin approval."
    assert store.directory["bob"].notifications == []
    assert store.product("1").quantity == 0
