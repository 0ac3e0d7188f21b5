"""Per-invocation state shared by the CLI commands."""

from __future__ import annotations

from dataclasses import dataclass

import click

from provenance.domain.caller import CallerContext
from provenance.domain.service.product_store import ProductStore


@dataclass
class CliContext:
    store: ProductStore
    caller_context: CallerContext | None = None

    def require_caller(self) -> CallerContext:
        if self.caller_context is None:
            raise click.UsageError(
                "This command acts on behalf of a caller; pass --as or set PROVENANCE_CALLER."
            )
        return self.caller_context


pass_cli_context = click.make_pass_decorator(CliContext)
