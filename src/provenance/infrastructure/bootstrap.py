"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

import os
from pathlib import Path

from provenance.domain.service.product_store import ProductStore
from provenance.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)

DATA_DIR_ENV = "PROVENANCE_DATA_DIR"
CALLER_ENV = "PROVENANCE_CALLER"

PRODUCTS_FILE = "products.json"


def data_dir() -> Path:
    return Path(os.environ.get(DATA_DIR_ENV, "data"))


def product_repository(directory: Path | None = None) -> JsonProductRepository:
    return JsonProductRepository((directory or data_dir()) / PRODUCTS_FILE)


def product_store(directory: Path | None = None) -> ProductStore:
    return ProductStore(product_repository(directory))
