import logging
from pathlib import Path

import click

from provenance.domain.caller import StaticCallerContext
from provenance.domain.exceptions import ValidationError
from provenance.domain.model.value_objects import Principal
from provenance.infrastructure.bootstrap import CALLER_ENV, DATA_DIR_ENV, product_store
from provenance.infrastructure.cli.context import CliContext
from provenance.infrastructure.cli.product_commands import (
    product_accept,
    product_create,
    product_delegate,
    product_last,
    product_list,
    product_show,
)


@click.group()
@click.option(
    "--as",
    "caller",
    envvar=CALLER_ENV,
    default=None,
    help="Principal making the call.",
)
@click.option(
    "--data-dir",
    envvar=DATA_DIR_ENV,
    default="data",
    show_default=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory holding products.json.",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, caller: str | None, data_dir: Path, verbose: bool) -> None:
    """Provenance — product ownership registry"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    caller_context = None
    if caller is not None:
        try:
            caller_context = StaticCallerContext(Principal(caller))
        except ValidationError as exc:
            raise click.BadParameter(str(exc), param_hint="--as")

    ctx.obj = CliContext(store=product_store(data_dir), caller_context=caller_context)


@cli.group()
def product() -> None:
    """Manage products."""


# Register subcommands
product.add_command(product_accept)
product.add_command(product_create)
product.add_command(product_delegate)
product.add_command(product_last)
product.add_command(product_list)
product.add_command(product_show)
