from __future__ import annotations

from pathlib import Path

import click

from storefront.infrastructure.bootstrap import open_storefront
from storefront.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_merge_login,
    cart_remove,
    cart_set,
    cart_show,
)
from storefront.infrastructure.cli.catalog_commands import (
    catalog_inventory,
    catalog_invalidate,
    catalog_list,
    catalog_show,
)
from storefront.infrastructure.cli.checkout_commands import (
    checkout_create,
    checkout_status,
    checkout_validate,
)
from storefront.infrastructure.cli.customer_commands import customer_ensure
from storefront.infrastructure.cli.order_commands import order_notify
from storefront.infrastructure.config import load_settings
from storefront.infrastructure.logging import configure_logging


@click.group()
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Read settings from this .env file instead of the project one.",
)
@click.pass_context
def cli(ctx: click.Context, env_file: Path | None) -> None:
    """Storefront: carts, catalog cache and checkout hand-off."""
    if ctx.obj is not None:
        return  # already wired (tests pass their own Storefront)
    settings = load_settings(env_file)
    configure_logging(settings)
    ctx.obj = open_storefront(settings)
    ctx.call_on_close(ctx.obj.close)


@cli.group()
def cart() -> None:
    """Manage the shopper's cart."""


@cli.group()
def catalog() -> None:
    """Browse the cached product catalog."""


@cli.group()
def checkout() -> None:
    """Validate carts and hand off to the platform checkout."""


@cli.group()
def order() -> None:
    """Apply platform order notifications."""


@cli.group()
def customer() -> None:
    """Manage platform customers."""


# Register subcommands
cart.add_command(cart_add)
cart.add_command(cart_clear)
cart.add_command(cart_merge_login)
cart.add_command(cart_remove)
cart.add_command(cart_set)
cart.add_command(cart_show)
catalog.add_command(catalog_inventory)
catalog.add_command(catalog_invalidate)
catalog.add_command(catalog_list)
catalog.add_command(catalog_show)
checkout.add_command(checkout_create)
checkout.add_command(checkout_status)
checkout.add_command(checkout_validate)
order.add_command(order_notify)
customer.add_command(customer_ensure)
