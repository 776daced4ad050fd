"""CLI commands for platform notifications about orders and stock."""

from __future__ import annotations

import click

from storefront.application.record_notification import (
    RecordInventoryChangeHandler,
    RecordNotificationHandler,
)
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import Storefront
from storefront.infrastructure.cli.common import pass_storefront
from storefront.infrastructure.upstream.webhooks import (
    INVENTORY_TOPIC,
    parse_order_notification,
)


@click.command("notify")
@click.option("--topic", required=True, help="Webhook topic, e.g. 'orders/paid'.")
@click.option(
    "--body-file",
    required=True,
    type=click.File("rb"),
    help="Raw webhook body ('-' for stdin).",
)
@click.option("--signature", default=None, help="Value of the X-Shopify-Hmac-Sha256 header.")
@pass_storefront
def order_notify(storefront: Storefront, topic: str, body_file, signature: str | None) -> None:
    """Apply a signed platform webhook."""
    body = body_file.read()
    if not storefront.verifier.verify(body, signature):
        raise click.ClickException("Invalid webhook signature")

    try:
        if topic == INVENTORY_TOPIC:
            RecordInventoryChangeHandler(storefront.product_cache).handle()
            click.echo("Product cache marked stale.")
            return

        notification = parse_order_notification(topic, body)
        outcome = RecordNotificationHandler(storefront.ledger).handle(notification)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {notification.order_id}: {outcome.value}")
