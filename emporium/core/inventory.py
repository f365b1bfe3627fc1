"""Inventory rules for the product catalog.

Stock only ever moves down, one unit per purchase, and never below zero.
Product ids are positional (``len(catalog) + 1``). That stays monotonic
only because products are never removed.
"""

import logging
import math

from .errors import InvalidPriceError, OutOfStockError, ProductNotFoundError
from .models import DEFAULT_STOCK_QUANTITY, Catalog, Product

logger = logging.getLogger(__name__)


def parse_price(raw: str | float | int | None) -> float | None:
    """Convert admin-supplied price input to a number.

    Text that is not a finite number degrades to None rather than being
    rejected, so the product is still created.

    Raises:
        InvalidPriceError: If the value parses to a negative number.
    """
    if raw is None:
        return None
    try:
        price = float(raw)
    except (TypeError, ValueError):
        logger.warning(f"Unparseable price {raw!r}, storing no price")
        return None
    if not math.isfinite(price):
        return None
    if price < 0:
        raise InvalidPriceError(price)
    return price


class InventoryLedger:
    """Owns product records and stock counts within a loaded catalog.

    Pure decision logic over the aggregate passed in. Persistence is the
    caller's job.
    """

    def __init__(self, default_quantity: int = DEFAULT_STOCK_QUANTITY):
        if default_quantity < 0:
            raise ValueError("default_quantity must be non-negative")
        self.default_quantity = default_quantity

    @staticmethod
    def find(catalog: Catalog, product_id: str) -> Product:
        """Look up a product by id.

        Raises:
            ProductNotFoundError: If no product has that id.
        """
        for product in catalog:
            if product.id == product_id:
                return product
        raise ProductNotFoundError(product_id)

    @staticmethod
    def search(catalog: Catalog, term: str) -> list[Product]:
        """Case-insensitive substring match on product name."""
        needle = term.lower()
        return [p for p in catalog if needle in p.name.lower()]

    def decrement_if_available(self, catalog: Catalog, product_id: str) -> Product:
        """Take one unit of stock.

        Returns:
            Snapshot of the product as it was before the decrement.

        Raises:
            ProductNotFoundError: If no product has that id.
            OutOfStockError: If quantity is below 1. Nothing is changed.
        """
        product = self.find(catalog, product_id)
        if not product.in_stock:
            raise OutOfStockError(product_id)

        before = product.snapshot()
        product.quantity -= 1
        return before

    def add_product(
        self,
        catalog: Catalog,
        name: str,
        price: str | float | None,
        description: str,
    ) -> Product:
        """Append a new product with the default stock quantity."""
        product = Product(
            id=str(len(catalog) + 1),
            name=name,
            price=parse_price(price),
            description=description,
            quantity=self.default_quantity,
        )
        catalog.append(product)
        return product

    def edit_product(
        self,
        catalog: Catalog,
        product_id: str,
        name: str | None = None,
        price: str | float | None = None,
        description: str | None = None,
    ) -> Product:
        """Overwrite supplied fields. Quantity is not editable here.

        Raises:
            ProductNotFoundError: If no product has that id.
            InvalidPriceError: If the new price is negative.
        """
        product = self.find(catalog, product_id)

        # Parse before touching anything so a bad price leaves the product as is
        new_price = parse_price(price) if price is not None else product.price

        if name is not None:
            product.name = name
        product.price = new_price
        if description is not None:
            product.description = description
        return product
