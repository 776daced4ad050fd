"""CLI commands for the Cart aggregate."""

from __future__ import annotations

import click

from storefront.application.add_to_cart import AddToCartHandler
from storefront.application.reconcile_login import ReconcileLoginHandler
from storefront.application.remove_cart_item import ClearCartHandler, RemoveCartItemHandler
from storefront.application.show_cart import ShowCartHandler
from storefront.application.update_cart_item import UpdateCartItemHandler
from storefront.domain.exceptions import DomainException
from storefront.domain.model.value_objects import ActorKey
from storefront.domain.service.actor_resolver import RequestContext
from storefront.infrastructure.bootstrap import Storefront
from storefront.infrastructure.cli.common import actor_options, display_cart, pass_storefront


@click.command("show")
@actor_options
def cart_show(storefront: Storefront, actor: ActorKey) -> None:
    """Show the current cart."""
    dto = ShowCartHandler(storefront.cart_store).handle(actor)
    display_cart(dto)


@click.command("add")
@click.option("--product", "product_id", required=True, help="Product ID to add.")
@click.option("--quantity", default=1, type=int, show_default=True, help="Quantity to add.")
@click.option("--badge", default="", help="Display badge shown with the item.")
@click.option("--palette", multiple=True, help="Display colour; repeat for several.")
@actor_options
def cart_add(
    storefront: Storefront,
    actor: ActorKey,
    product_id: str,
    quantity: int,
    badge: str,
    palette: tuple[str, ...],
) -> None:
    """Add a product to the cart (price comes from the catalog)."""
    handler = AddToCartHandler(storefront.cart_store, storefront.product_cache)

    try:
        dto = handler.handle(actor, product_id, quantity, badge=badge, palette=palette)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Added {quantity} x {product_id}.")
    display_cart(dto)


@click.command("set")
@click.option("--product", "product_id", required=True, help="Product ID to update.")
@click.option("--quantity", required=True, type=int, help="New quantity; 0 removes the item.")
@actor_options
def cart_set(storefront: Storefront, actor: ActorKey, product_id: str, quantity: int) -> None:
    """Set the quantity of an item already in the cart."""
    handler = UpdateCartItemHandler(storefront.cart_store)

    try:
        dto = handler.handle(actor, product_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_cart(dto)


@click.command("remove")
@click.option("--product", "product_id", required=True, help="Product ID to remove.")
@actor_options
def cart_remove(storefront: Storefront, actor: ActorKey, product_id: str) -> None:
    """Remove an item from the cart."""
    handler = RemoveCartItemHandler(storefront.cart_store)

    try:
        dto = handler.handle(actor, product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_cart(dto)


@click.command("clear")
@actor_options
def cart_clear(storefront: Storefront, actor: ActorKey) -> None:
    """Empty the cart."""
    try:
        ClearCartHandler(storefront.cart_store).handle(actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Cart for {actor} cleared.")


@click.command("merge-login")
@click.option("--account", required=True, help="Account id that just signed in.")
@click.option(
    "--session",
    default=None,
    envvar="STOREFRONT_SESSION",
    help="Anonymous session the shopper browsed under.",
)
@pass_storefront
def cart_merge_login(storefront: Storefront, account: str, session: str | None) -> None:
    """Fold the anonymous session cart into the account cart."""
    handler = ReconcileLoginHandler(storefront.cart_store, storefront.resolver)

    try:
        result = handler.handle(RequestContext(account_id=account, session_cookie=session))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if result.merged_from:
        click.echo(f"Merged cart from {result.merged_from}.")
    else:
        click.echo("No anonymous cart to merge.")
    display_cart(result.cart)
