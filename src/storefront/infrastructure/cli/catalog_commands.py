"""CLI commands for the product catalog."""

from __future__ import annotations

import click

from storefront.application.browse_catalog import (
    STALE_WARNING,
    ListCatalogHandler,
    ShowProductHandler,
)
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import Storefront
from storefront.infrastructure.cli.common import pass_storefront


@click.command("list")
@pass_storefront
def catalog_list(storefront: Storefront) -> None:
    """List products (cached for the configured TTL)."""
    try:
        dto = ListCatalogHandler(storefront.product_cache).handle()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if dto.warning:
        click.echo(f"Warning: {dto.warning}", err=True)

    click.echo(f"  {'Product':<24} {'Title':<28} {'Price':>10} {'Stock':>6}")
    click.echo(f"  {'-'*71}")
    for p in dto.products:
        click.echo(f"  {p.product_id:<24} {p.title:<28} {p.price:>10} {p.inventory_count:>6}")
    click.echo(f"  {'-'*71}")
    click.echo(f"  {len(dto.products)} product(s), fetched {dto.fetched_at}")


@click.command("show")
@click.option("--product", "product_id", required=True, help="Product ID to display.")
@pass_storefront
def catalog_show(storefront: Storefront, product_id: str) -> None:
    """Show one product."""
    try:
        dto, stale = ShowProductHandler(storefront.product_cache).handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if stale:
        click.echo(f"Warning: {STALE_WARNING}", err=True)

    click.echo(f"{dto.title}  ({dto.product_id})")
    click.echo(f"Price:    {dto.price}")
    click.echo(f"Stock:    {dto.inventory_count}")
    click.echo(f"Variants: {', '.join(dto.variant_ids) or '-'}")
    if dto.description:
        click.echo()
        click.echo(dto.description)


@click.command("inventory")
@pass_storefront
def catalog_inventory(storefront: Storefront) -> None:
    """Show inventory levels per product."""
    try:
        levels = storefront.product_cache.inventory_levels()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"  {'Product':<24} {'Title':<28} {'Available':>10}")
    click.echo(f"  {'-'*64}")
    for level in levels:
        click.echo(f"  {level.product_id:<24} {level.title:<28} {level.inventory_count:>10}")


@click.command("invalidate")
@pass_storefront
def catalog_invalidate(storefront: Storefront) -> None:
    """Drop the cached catalog (admin)."""
    try:
        storefront.product_cache.invalidate()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo("Product cache cleared.")
