"""JSON file data store adapter.

Implements DataStorePort with two pretty-printed JSON files: a users file
holding a mapping of username to user record, and a products file holding
a list of product records. Each save rewrites the whole file through a
temporary file and an atomic rename, so a failed write leaves the previous
content in place.
"""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from emporium.core.errors import PersistenceError
from emporium.core.models import Catalog, Directory, Order, OrderStatus, Product, User
from emporium.core.ports import DataStorePort

logger = logging.getLogger(__name__)


class JsonFileDataStore(DataStorePort):
    """Stores the user directory and product catalog as JSON files."""

    def __init__(self, users_path: str, products_path: str):
        """Initialize the JSON file store.

        Args:
            users_path: Path of the users file. Created on first save.
            products_path: Path of the products file. Created on first save.
        """
        self.users_path = Path(users_path)
        self.products_path = Path(products_path)
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # DataStorePort
    # ------------------------------------------------------------------

    async def load_directory(self) -> Directory:
        data = await self._read(self.users_path, default={})
        if not isinstance(data, dict):
            raise PersistenceError(
                f"{self.users_path} must hold a JSON object, got {type(data).__name__}"
            )
        try:
            return {
                username: self._dict_to_user(username, record)
                for username, record in data.items()
            }
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Failed to parse user record in {self.users_path}: {e}")
            raise PersistenceError(f"Corrupt users file {self.users_path}: {e}") from e

    async def save_directory(self, directory: Directory) -> None:
        data = {
            username: self._user_to_dict(user) for username, user in directory.items()
        }
        await self._write(self.users_path, data)

    async def load_catalog(self) -> Catalog:
        data = await self._read(self.products_path, default=[])
        if not isinstance(data, list):
            raise PersistenceError(
                f"{self.products_path} must hold a JSON array, got {type(data).__name__}"
            )
        try:
            return [self._dict_to_product(record) for record in data]
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Failed to parse product record in {self.products_path}: {e}")
            raise PersistenceError(
                f"Corrupt products file {self.products_path}: {e}"
            ) from e

    async def save_catalog(self, catalog: Catalog) -> None:
        await self._write(self.products_path, [self._product_to_dict(p) for p in catalog])

    # ------------------------------------------------------------------
    # File I/O
    # ------------------------------------------------------------------

    async def _read(self, path: Path, default: Any) -> Any:
        """Read and parse a JSON file.

        Absent or blank files yield ``default``.

        Raises:
            PersistenceError: If the file cannot be read or is not valid JSON.
        """
        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError:
            logger.info(f"File not found, starting empty: {path.name}")
            return default
        except OSError as e:
            logger.error(f"Error reading file at {path}: {e}")
            raise PersistenceError(f"Could not read {path}: {e}") from e

        if not text.strip():
            return default

        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in {path}: {e}")
            raise PersistenceError(f"Invalid JSON in {path}: {e}") from e

    async def _write(self, path: Path, data: Any) -> None:
        """Replace the file with ``data`` as indented JSON.

        Raises:
            PersistenceError: If the file cannot be written.
        """
        text = json.dumps(data, indent=2)
        async with self._lock:
            try:
                await asyncio.to_thread(self._replace_file, path, text)
            except OSError as e:
                logger.error(f"Error writing to file at {path}: {e}")
                raise PersistenceError(f"Could not write {path}: {e}") from e

    @staticmethod
    def _replace_file(path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    # ------------------------------------------------------------------
    # Record conversion
    # ------------------------------------------------------------------

    @staticmethod
    def _product_to_dict(product: Product) -> dict[str, Any]:
        return {
            "id": product.id,
            "name": product.name,
            "price": product.price,
            "description": product.description,
            "quantity": product.quantity,
        }

    @staticmethod
    def _dict_to_product(data: dict[str, Any]) -> Product:
        """Convert a stored product record to a Product.

        A missing quantity counts as no stock. A null price stays None.
        """
        price = data.get("price")
        return Product(
            id=str(data["id"]),
            name=data["name"],
            price=float(price) if price is not None else None,
            description=data.get("description", ""),
            quantity=int(data.get("quantity") or 0),
        )

    @classmethod
    def _order_to_dict(cls, order: Order) -> dict[str, Any]:
        return {
            "orderId": order.order_id,
            "product": cls._product_to_dict(order.product),
            "status": order.status.value,
        }

    @classmethod
    def _dict_to_order(cls, data: dict[str, Any]) -> Order:
        return Order(
            order_id=data["orderId"],
            product=cls._dict_to_product(data["product"]),
            status=OrderStatus(data["status"]),
        )

    @classmethod
    def _user_to_dict(cls, user: User) -> dict[str, Any]:
        # The username is the key of the enclosing mapping, not a field
        return {
            "name": user.name,
            "email": user.email,
            "password": user.password,
            "admin": user.admin,
            "orders": [cls._order_to_dict(o) for o in user.orders],
            "notifications": list(user.notifications),
        }

    @classmethod
    def _dict_to_user(cls, username: str, data: dict[str, Any]) -> User:
        """Convert a stored user record to a User.

        Records written before orders or notifications existed load with
        empty lists.
        """
        return User(
            username=username,
            name=data.get("name", ""),
            email=data.get("email", ""),
            password=data["password"],
            admin=bool(data.get("admin", False)),
            orders=[cls._dict_to_order(o) for o in data.get("orders") or []],
            notifications=[str(n) for n in data.get("notifications") or []],
        )
