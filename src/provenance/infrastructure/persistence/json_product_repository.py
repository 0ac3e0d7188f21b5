"""JSON-file-backed implementation of ProductRepository.

Several CLI processes may share one data directory. Each read-check-write
runs under an exclusive ``fcntl`` lock on a ``.lock`` sidecar file, and
every write goes to a temporary file that is ``os.replace``-d over the
original, so readers never see a half-written array.
"""

from __future__ import annotations

import fcntl
import json
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from provenance.domain.exceptions import ValidationError
from provenance.domain.model.product import ProductRecord, ProductState
from provenance.domain.model.value_objects import Principal, ProductCode
from provenance.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)

_LOCK_SUFFIX = ".lock"


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock_path = file_path.with_suffix(file_path.suffix + _LOCK_SUFFIX)
        self._ensure_file()

    # --- ProductRepository interface ------------------------------------------

    def count(self) -> int:
        return len(self._load_raw())

    def get_by_id(self, product_id: int) -> ProductRecord | None:
        products = self._load_raw()
        if not 0 <= product_id < len(products):
            return None
        return self._to_domain(products[product_id])

    def append(self, product: ProductRecord) -> None:
        products = self._load_raw()
        if product.id != len(products):
            raise ValidationError(
                f"Product #{product.id} cannot be appended at position {len(products)}"
            )
        products.append(self._to_raw(product))
        self._persist_raw(products)

    def save(self, product: ProductRecord) -> None:
        products = self._load_raw()
        if not 0 <= product.id < len(products):
            raise ValidationError(f"Product #{product.id} has not been created")
        products[product.id] = self._to_raw(product)
        self._persist_raw(products)

    @contextmanager
    def locked(self) -> Iterator[None]:
        with self._lock_path.open("a+", encoding="utf-8") as lock_handle:
            fcntl.flock(lock_handle.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(lock_handle.fileno(), fcntl.LOCK_UN)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: ProductRecord) -> dict:
        return {
            "id": product.id,
            "code": product.code.value,
            "state": product.state.value,
            "owner": product.owner.name,
            "delegate": product.delegate.name if product.delegate is not None else None,
        }

    @staticmethod
    def _to_domain(raw: dict) -> ProductRecord:
        delegate = raw.get("delegate")
        return ProductRecord(
            id=raw["id"],
            code=ProductCode(raw["code"]),
            owner=Principal(raw["owner"]),
            state=ProductState(raw["state"]),
            delegate=Principal(delegate) if delegate is not None else None,
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, products: list[dict]) -> None:
        self._write_atomic(json.dumps(products, indent=2) + "\n")

    def _write_atomic(self, content: str) -> None:
        fd, tmp_path = tempfile.mkstemp(
            dir=str(self._file_path.parent),
            prefix=f".{self._file_path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp_handle:
                tmp_handle.write(content)
                tmp_handle.flush()
                os.fsync(tmp_handle.fileno())
            os.replace(tmp_path, self._file_path)
        except BaseException:
            os.unlink(tmp_path)
            raise

    def _ensure_file(self) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        with self.locked():
            if not self._file_path.exists():
                logger.debug("Creating product file %s", self._file_path)
                self._write_atomic("[]")
