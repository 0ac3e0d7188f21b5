"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from provenance.application.accept_product import AcceptProductHandler
from provenance.application.create_product import CreateProductHandler
from provenance.application.delegate_product import DelegateProductHandler
from provenance.application.dto import ProductDTO
from provenance.application.show_product import (
    ListProductsHandler,
    ShowLastProductHandler,
    ShowProductHandler,
)
from provenance.domain.exceptions import DomainException
from provenance.infrastructure.cli.context import CliContext, pass_cli_context

# Identifiers on the command surface are unsigned 32-bit.
PRODUCT_ID = click.IntRange(0, 2**32 - 1)


def _display_product(dto: ProductDTO) -> None:
    click.echo(f"Product #{dto.id}  (state={dto.state})")
    click.echo(f"Code:     {dto.code}")
    click.echo(f"Owner:    {dto.owner}")
    click.echo(f"Delegate: {dto.delegate or '-'}")


@click.command("create")
@click.option("--code", required=True, type=click.IntRange(0, 0xFFFF), help="Product code (0-65535).")
@pass_cli_context
def product_create(obj: CliContext, code: int) -> None:
    """Create a product owned by the caller."""
    handler = CreateProductHandler(obj.store, obj.require_caller())

    try:
        dto = handler.handle(code)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{dto.id} created (code={dto.code}, owner={dto.owner})")


@click.command("last")
@pass_cli_context
def product_last(obj: CliContext) -> None:
    """Show the most recently created product."""
    handler = ShowLastProductHandler(obj.store)

    try:
        dto = handler.handle()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_product(dto)


@click.command("show")
@click.option("--id", "product_id", required=True, type=PRODUCT_ID, help="Product ID to display.")
@pass_cli_context
def product_show(obj: CliContext, product_id: int) -> None:
    """Show details of an existing product."""
    handler = ShowProductHandler(obj.store)

    try:
        dto = handler.handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_product(dto)


@click.command("list")
@pass_cli_context
def product_list(obj: CliContext) -> None:
    """List all products."""
    products = ListProductsHandler(obj.store).handle()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Code':>6}  {'State':<17} {'Owner':<16} {'Delegate':<16}")
    click.echo("-" * 65)
    for p in products:
        click.echo(
            f"{p.id:<6} {p.code:>6}  {p.state:<17} {p.owner:<16} {p.delegate or '-':<16}"
        )


@click.command("delegate")
@click.option("--id", "product_id", required=True, type=PRODUCT_ID, help="Product ID to delegate.")
@click.option("--to", "delegate_to", required=True, help="Principal to delegate to.")
@pass_cli_context
def product_delegate(obj: CliContext, product_id: int, delegate_to: str) -> None:
    """Offer ownership of a product to another principal."""
    handler = DelegateProductHandler(obj.store, obj.require_caller())

    try:
        handler.handle(product_id, delegate_to)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} delegated to {delegate_to.strip()} — awaiting acceptance.")


@click.command("accept")
@click.option("--id", "product_id", required=True, type=PRODUCT_ID, help="Product ID to accept.")
@pass_cli_context
def product_accept(obj: CliContext, product_id: int) -> None:
    """Accept a product delegated to the caller."""
    handler = AcceptProductHandler(obj.store, obj.require_caller())

    try:
        handler.handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} accepted.")
