import pytest

from provenance.domain.service.product_store import ProductStore
from tests.fakes import FakeProductRepository


@pytest.fixture
def repo() -> FakeProductRepository:
    return FakeProductRepository()


@pytest.fixture
def store(repo: FakeProductRepository) -> ProductStore:
    return ProductStore(repo)
