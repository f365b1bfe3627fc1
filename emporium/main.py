"""Entry point and wiring for the Emporium marketplace.

The one module that sees both core and adapters: it reads settings, builds
the JSON store, console, validator and service, then either seeds an admin
account or hands control to the interactive menu.
"""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from dataclasses import dataclass

from emporium.adapters.cli.menu import MenuRunner
from emporium.adapters.console.terminal import TerminalConsole
from emporium.adapters.store.json_file import JsonFileDataStore
from emporium.adapters.validation.registration import PydanticRegistrationValidator
from emporium.config import Settings, load_settings
from emporium.core.errors import MarketplaceError
from emporium.core.inventory import InventoryLedger
from emporium.core.marketplace_service import MarketplaceService
from emporium.core.order_ids import OrderIdGenerator
from emporium.core.orders import OrderLedger


@dataclass
class Application:
    """Wired components, ready to run."""

    settings: Settings
    service: MarketplaceService
    console: TerminalConsole
    validator: PydanticRegistrationValidator
    menu: MenuRunner


# Attributes every LogRecord has; anything else came in through ``extra``
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime"}


class JsonLogFormatter(logging.Formatter):
    """One JSON object per line, with ``extra`` context as top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS and key not in entry:
                entry[key] = value
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def build_log_formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return JsonLogFormatter()
    return logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s")


def configure_logging(log_level: str, log_format: str) -> None:
    """Send log records to stderr, away from the menu on stdout."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(build_log_formatter(log_format))
    logging.basicConfig(
        level=getattr(logging, log_level, logging.WARNING), handlers=[handler]
    )


def build_application(settings: Settings) -> Application:
    """Instantiate adapters and core services from settings.

    This is the single place where components are instantiated and wired
    together.
    """
    store = JsonFileDataStore(
        users_path=settings.users_path,
        products_path=settings.products_path,
    )

    service = MarketplaceService(
        store=store,
        inventory=InventoryLedger(default_quantity=settings.default_stock_quantity),
        orders=OrderLedger(
            OrderIdGenerator(
                length=settings.order_id_length,
                max_attempts=settings.order_id_max_attempts,
            )
        ),
    )

    console = TerminalConsole(color=settings.color)
    validator = PydanticRegistrationValidator()
    menu = MenuRunner(marketplace=service, console=console, validator=validator)

    return Application(
        settings=settings,
        service=service,
        console=console,
        validator=validator,
        menu=menu,
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="emporium",
        description="Marketplace inventory and order management",
    )
    parser.add_argument("--env-file", help="Path to a .env file with settings")
    parser.add_argument(
        "--seed-admin",
        metavar="USERNAME",
        help="Create an admin account and exit",
    )
    parser.add_argument("--password", help="Password for --seed-admin")
    parser.add_argument("--name", default="Administrator", help="Name for --seed-admin")
    parser.add_argument("--email", default="admin@example.com", help="Email for --seed-admin")
    args = parser.parse_args(argv)

    if args.seed_admin and not args.password:
        parser.error("--seed-admin requires --password")
    return args


async def seed_admin(app: Application, args: argparse.Namespace) -> int:
    """Create the admin account named on the command line.

    Returns:
        Process exit code.
    """
    logger = logging.getLogger(__name__)
    try:
        registration = app.validator.validate(
            args.name, args.seed_admin, args.email, args.password
        )
        user = await app.service.seed_admin(registration)
    except MarketplaceError as e:
        logger.error(f"Could not seed admin: {e}")
        print(str(e), file=sys.stderr)
        return 1

    print(f"Admin {user.username} created.")
    return 0


async def bootstrap(argv: Sequence[str] | None = None) -> int:
    """Run one invocation: seed an admin if asked, otherwise the menu.

    Returns:
        Process exit code.
    """
    args = parse_args(argv)
    settings = load_settings(args.env_file)

    configure_logging(settings.log_level, settings.log_format)
    logger = logging.getLogger(__name__)
    logger.info("Starting Emporium")

    app = build_application(settings)
    logger.info(
        f"Data store: {settings.users_path}, {settings.products_path}",
    )

    if args.seed_admin:
        return await seed_admin(app, args)

    await app.menu.run()
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Console script entry point.

    Exits 0 after a normal session, 1 on an unhandled error and 130 on
    Ctrl-C.
    """
    logger = logging.getLogger(__name__)
    try:
        code = asyncio.run(bootstrap(argv))
    except KeyboardInterrupt:
        logger.warning("Interrupted, exiting")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
