"""CLI commands for checkout validation and hand-off."""

from __future__ import annotations

import click

from storefront.application.create_checkout import CreateCheckoutHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.application.validate_checkout import ValidateCheckoutHandler
from storefront.domain.exceptions import ConsistencyError, DomainException
from storefront.domain.model.value_objects import ActorKey
from storefront.infrastructure.bootstrap import Storefront
from storefront.infrastructure.cli.common import actor_options, parse_items


@click.command("validate")
@click.option("--items", required=True, help="Items as 'ProductId:Qty,ProductId:Qty'.")
@actor_options
def checkout_validate(storefront: Storefront, actor: ActorKey, items: str) -> None:
    """Check the proposed lines against the server-side cart."""
    specs = parse_items(items)

    try:
        dto = ValidateCheckoutHandler(storefront.validator).handle(actor, specs)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not dto.valid:
        for error in dto.errors:
            click.echo(f"  - {error}", err=True)
        raise click.ClickException(dto.message)

    click.echo(dto.message)
    click.echo(f"Total: {dto.total_amount}  ({dto.items_count} item(s))")


@click.command("create")
@click.option("--items", required=True, help="Items as 'ProductId:Qty,ProductId:Qty'.")
@click.option("--email", default=None, help="Customer email to prefill at checkout.")
@actor_options
def checkout_create(
    storefront: Storefront, actor: ActorKey, items: str, email: str | None
) -> None:
    """Validate the cart and open a checkout on the commerce platform."""
    specs = parse_items(items)
    handler = CreateCheckoutHandler(
        validator=storefront.validator,
        platform=storefront.platform,
        ledger=storefront.ledger,
    )

    try:
        dto = handler.handle(actor, specs, customer_email=email)
    except ConsistencyError as exc:
        for problem in exc.problems:
            click.echo(f"  - {problem.message}", err=True)
        raise click.ClickException("Cart validation failed")
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Checkout {dto.checkout_id} created  (total={dto.total_amount})")
    click.echo(f"Pay at: {dto.checkout_url}")


@click.command("status")
@click.option("--checkout-id", required=True, help="Checkout ID returned by 'checkout create'.")
@actor_options
def checkout_status(storefront: Storefront, actor: ActorKey, checkout_id: str) -> None:
    """Show the order recorded for a checkout."""
    try:
        dto = ShowOrderHandler(storefront.order_repo).handle(actor, checkout_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Checkout {dto.checkout_id}  (status={dto.status})")
    click.echo(f"Order:   {dto.order_id or '-'}")
    click.echo(f"Total:   {dto.total_amount}")
    click.echo(f"Created: {dto.created_at}")
