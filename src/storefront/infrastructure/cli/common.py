"""Helpers shared by the CLI command modules."""

from __future__ import annotations

import functools

import click

from storefront.application.dto import CartDTO, CheckoutItemSpec
from storefront.domain.model.value_objects import ActorKey
from storefront.domain.service.actor_resolver import RequestContext
from storefront.infrastructure.bootstrap import Storefront

pass_storefront = click.make_pass_decorator(Storefront)


def actor_options(func):
    """Add --account/--session and hand the command a resolved ``actor``."""

    @click.option("--account", default=None, envvar="STOREFRONT_ACCOUNT", help="Signed-in account id.")
    @click.option(
        "--session",
        default=None,
        envvar="STOREFRONT_SESSION",
        help="Anonymous session id (as the browser cookie would carry it).",
    )
    @pass_storefront
    @functools.wraps(func)
    def wrapper(storefront: Storefront, account: str | None, session: str | None, **kwargs):
        actor = resolve_actor(storefront, account, session)
        return func(storefront, actor, **kwargs)

    return wrapper


def resolve_actor(storefront: Storefront, account: str | None, session: str | None) -> ActorKey:
    resolved = storefront.resolver.resolve(
        RequestContext(account_id=account, session_cookie=session)
    )
    if resolved.issued_session:
        # Stands in for Set-Cookie: reuse it with --session next time.
        click.echo(f"Session: {resolved.issued_session}", err=True)
    return resolved.actor_key


def parse_items(raw: str) -> list[CheckoutItemSpec]:
    """Parse 'prod-1:3,prod-2:5' into a CheckoutItemSpec list."""
    specs: list[CheckoutItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductId:Quantity'."
            )
        product_id, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{product_id}'."
            )
        specs.append(CheckoutItemSpec(product_id=product_id.strip(), quantity=qty))
    return specs


def display_cart(dto: CartDTO) -> None:
    click.echo(f"Cart for {dto.actor}")
    if dto.is_empty:
        click.echo("  (empty)")
        return

    click.echo()
    click.echo(f"  {'Product':<24} {'Name':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*73}")
    for item in dto.items:
        click.echo(
            f"  {item.product_id:<24} {item.name:<20} {item.quantity:>5} "
            f"{item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*73}")
    click.echo(f"  {'Items':<24} {dto.total_items:>26}")
    click.echo(f"  {'Cart Total':<24} {dto.total_price:>48}")
