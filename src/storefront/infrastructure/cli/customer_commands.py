"""CLI commands for platform customers."""

from __future__ import annotations

import click

from storefront.application.ensure_customer import EnsureCustomerHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import Storefront
from storefront.infrastructure.cli.common import pass_storefront


@click.command("ensure")
@click.option("--email", required=True, help="Customer email.")
@click.option("--first-name", default=None, help="First name, used when registering.")
@click.option("--last-name", default=None, help="Last name, used when registering.")
@pass_storefront
def customer_ensure(
    storefront: Storefront, email: str, first_name: str | None, last_name: str | None
) -> None:
    """Find the platform customer for an email, registering one if needed."""
    handler = EnsureCustomerHandler(storefront.platform)

    try:
        customer, created = handler.handle(email, first_name, last_name)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    verb = "created" if created else "found"
    click.echo(f"Customer {customer.customer_id} {verb}  ({customer.email})")
    click.echo(f"Use --account {customer.customer_id} for this shopper's cart.")
