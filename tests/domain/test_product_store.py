"""Unit tests for the ProductStore domain service."""

import logging
import threading

import pytest

from provenance.domain.exceptions import (
    EmptyStoreError,
    ErrorKind,
    InvalidStateError,
    NotDelegateError,
    NotOwnerError,
    RecordNotFoundError,
    ValidationError,
)
from provenance.domain.model.product import ProductState
from provenance.domain.model.value_objects import Principal, ProductCode
from provenance.domain.service.product_store import ProductStore

ALICE = Principal("alice")
BOB = Principal("bob")
CHARLIE = Principal("charlie")


class TestCreate:

    def test_new_product_is_owned_by_caller(self, store):
        snap = store.create(ProductCode(1), ALICE)
        assert snap.id == 0
        assert snap.code == ProductCode(1)
        assert snap.owner == ALICE
        assert snap.state == ProductState.OWNED
        assert snap.delegate is None

    def test_accepts_plain_int_code(self, store):
        snap = store.create(7, ALICE)
        assert snap.code == ProductCode(7)

    def test_length_grows_by_one(self, store):
        assert len(store) == 0
        store.create(1, ALICE)
        assert len(store) == 1
        store.create(2, BOB)
        assert len(store) == 2

    def test_ids_are_sequential_from_zero(self, store):
        ids = [store.create(code, ALICE).id for code in (5, 5, 9, 0)]
        assert ids == [0, 1, 2, 3]

    def test_invalid_code_leaves_store_unchanged(self, store, repo):
        with pytest.raises(ValidationError):
            store.create(0x10000, ALICE)
        assert len(store) == 0
        assert repo.writes == 0


class TestQueries:

    def test_get_last_on_empty_store(self, store):
        with pytest.raises(EmptyStoreError) as exc_info:
            store.get_last()
        assert exc_info.value.kind is ErrorKind.EMPTY_STORE

    def test_get_last_returns_newest(self, store):
        store.create(1, ALICE)
        store.create(2, BOB)
        last = store.get_last()
        assert last.id == 1
        assert last.owner == BOB

    def test_get_by_id(self, store):
        store.create(1, ALICE)
        store.create(2, BOB)
        assert store.get_by_id(0).code == ProductCode(1)
        assert store.get_by_id(1).code == ProductCode(2)

    @pytest.mark.parametrize("product_id", [1, 99, -1])
    def test_get_by_id_out_of_range(self, store, product_id):
        store.create(1, ALICE)
        with pytest.raises(RecordNotFoundError, match="not found") as exc_info:
            store.get_by_id(product_id)
        assert exc_info.value.kind is ErrorKind.RECORD_NOT_FOUND
        assert exc_info.value.product_id == product_id

    def test_snapshot_does_not_alias_store(self, store):
        store.create(1, ALICE)
        before = store.get_by_id(0)
        store.delegate(0, ALICE, BOB)
        assert before.state == ProductState.OWNED
        assert store.get_by_id(0).state == ProductState.PENDING_DELEGATE


class TestDelegate:

    def test_owner_can_delegate(self, store):
        store.create(1, ALICE)
        store.delegate(0, ALICE, BOB)
        snap = store.get_by_id(0)
        assert snap.owner == ALICE
        assert snap.state == ProductState.PENDING_DELEGATE
        assert snap.delegate == BOB

    def test_missing_product(self, store):
        store.create(1, ALICE)
        with pytest.raises(RecordNotFoundError):
            store.delegate(1, ALICE, BOB)

    def test_non_owner_rejected(self, store):
        store.create(1, ALICE)
        with pytest.raises(NotOwnerError) as exc_info:
            store.delegate(0, BOB, BOB)
        assert exc_info.value.kind is ErrorKind.NOT_OWNER

    def test_pending_product_rejected(self, store):
        store.create(1, ALICE)
        store.delegate(0, ALICE, BOB)
        with pytest.raises(InvalidStateError, match="expected OWNED"):
            store.delegate(0, ALICE, CHARLIE)
        assert store.get_by_id(0).delegate == BOB

    def test_ownership_checked_before_state(self, store):
        store.create(1, ALICE)
        store.delegate(0, ALICE, BOB)
        # both ownership and state are wrong; ownership wins
        with pytest.raises(NotOwnerError):
            store.delegate(0, BOB, BOB)

    def test_delegating_to_self_is_allowed(self, store):
        store.create(1, ALICE)
        store.delegate(0, ALICE, ALICE)
        assert store.get_by_id(0).delegate == ALICE

    def test_failure_does_not_write(self, store, repo):
        store.create(1, ALICE)
        writes = repo.writes
        before = store.get_by_id(0)
        with pytest.raises(NotOwnerError):
            store.delegate(0, BOB, CHARLIE)
        assert repo.writes == writes
        assert store.get_by_id(0) == before


class TestAccept:

    def test_delegate_can_accept(self, store):
        store.create(1, ALICE)
        store.delegate(0, ALICE, BOB)
        store.accept(0, BOB)
        snap = store.get_by_id(0)
        assert snap.owner == BOB
        assert snap.state == ProductState.OWNED
        assert snap.delegate is None

    def test_missing_product(self, store):
        with pytest.raises(RecordNotFoundError):
            store.accept(0, BOB)

    def test_non_delegate_rejected(self, store):
        store.create(1, ALICE)
        store.delegate(0, ALICE, BOB)
        with pytest.raises(NotDelegateError) as exc_info:
            store.accept(0, CHARLIE)
        assert exc_info.value.kind is ErrorKind.NOT_DELEGATE
        assert store.get_by_id(0).delegate == BOB

    def test_accept_without_delegation_rejected(self, store):
        store.create(1, ALICE)
        # no delegate set, so even the owner is not the delegate
        with pytest.raises(NotDelegateError):
            store.accept(0, ALICE)

    def test_new_owner_can_delegate_again(self, store):
        store.create(1, ALICE)
        store.delegate(0, ALICE, BOB)
        store.accept(0, BOB)
        with pytest.raises(NotOwnerError):
            store.delegate(0, ALICE, CHARLIE)
        store.delegate(0, BOB, CHARLIE)
        store.accept(0, CHARLIE)
        assert store.get_by_id(0).owner == CHARLIE

    def test_failure_does_not_write(self, store, repo):
        store.create(1, ALICE)
        store.delegate(0, ALICE, BOB)
        writes = repo.writes
        with pytest.raises(NotDelegateError):
            store.accept(0, ALICE)
        assert repo.writes == writes


class TestRejectionIsRepeatable:

    def test_same_error_on_retry(self, store):
        store.create(1, ALICE)
        for _ in range(3):
            with pytest.raises(NotOwnerError):
                store.delegate(0, BOB, BOB)
        for _ in range(3):
            with pytest.raises(NotDelegateError):
                store.accept(0, BOB)


class TestWalkthrough:
    """Alice creates a product and hands it to Bob."""

    def test_alice_to_bob(self, store):
        store.create(1, ALICE)
        assert store.get_last() == store.get_by_id(0)
        assert store.get_last().owner == ALICE
        assert store.get_last().state == ProductState.OWNED

        store.delegate(0, ALICE, BOB)
        last = store.get_last()
        assert (last.owner, last.state, last.delegate) == (
            ALICE,
            ProductState.PENDING_DELEGATE,
            BOB,
        )

        with pytest.raises(RecordNotFoundError):
            store.delegate(1, ALICE, BOB)
        with pytest.raises(InvalidStateError):
            store.delegate(0, ALICE, BOB)
        with pytest.raises(NotOwnerError):
            store.delegate(0, BOB, BOB)

        store.accept(0, BOB)
        last = store.get_last()
        assert (last.code, last.owner, last.state, last.delegate) == (
            ProductCode(1),
            BOB,
            ProductState.OWNED,
            None,
        )

        with pytest.raises(NotDelegateError):
            store.accept(0, BOB)
        assert store.get_last().owner == BOB


class TestLogging:

    def test_transitions_logged_at_info(self, store, caplog):
        with caplog.at_level(logging.INFO, logger="provenance.domain.service.product_store"):
            store.create(1, ALICE)
            store.delegate(0, ALICE, BOB)
            store.accept(0, BOB)
        messages = [r.getMessage() for r in caplog.records]
        assert "Product #0 created (code=1, owner=alice)" in messages
        assert "Product #0 delegated by alice to bob" in messages
        assert "Product #0 accepted by bob (previous owner alice)" in messages

    def test_rejection_logged_at_debug(self, store, caplog):
        store.create(1, ALICE)
        with caplog.at_level(logging.DEBUG, logger="provenance.domain.service.product_store"):
            with pytest.raises(NotOwnerError):
                store.delegate(0, BOB, BOB)
        assert any("NOT_OWNER" in r.getMessage() for r in caplog.records)


class TestConcurrency:

    def test_concurrent_creates_get_distinct_ids(self, store):
        barrier = threading.Barrier(8)
        results: list[int] = []
        results_lock = threading.Lock()

        def worker(name: str) -> None:
            caller = Principal(name)
            barrier.wait()
            for code in range(25):
                snap = store.create(code, caller)
                with results_lock:
                    results.append(snap.id)

        threads = [threading.Thread(target=worker, args=(f"p{i}",)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(results) == list(range(200))
        assert len(store) == 200

    def test_only_one_racing_accept_succeeds(self, repo):
        store = ProductStore(repo)
        store.create(1, ALICE)
        store.delegate(0, ALICE, BOB)
        barrier = threading.Barrier(6)
        outcomes: list[str] = []
        outcomes_lock = threading.Lock()

        def worker() -> None:
            barrier.wait()
            try:
                store.accept(0, BOB)
                outcome = "ok"
            except NotDelegateError:
                outcome = "rejected"
            with outcomes_lock:
                outcomes.append(outcome)

        threads = [threading.Thread(target=worker) for _ in range(6)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert outcomes.count("ok") == 1
        assert outcomes.count("rejected") == 5
        assert store.get_by_id(0).owner == BOB


class TestInconsistentRecords:
    """Records reconstituted from storage are checked, not trusted."""

    def test_accept_on_owned_record_with_stale_delegate(self, store, repo):
        store.create(1, ALICE)
        # delegate set but state still OWNED, as a hand-edited file could leave it
        repo.raw(0).delegate = BOB
        with pytest.raises(InvalidStateError, match="expected PENDING_DELEGATE"):
            store.accept(0, BOB)
        assert store.get_by_id(0).owner == ALICE


class TestArgumentValidation:

    def test_delegate_to_none_rejected(self, store, repo):
        store.create(1, ALICE)
        writes = repo.writes
        with pytest.raises(ValidationError, match="delegate target must be a Principal"):
            store.delegate(0, ALICE, None)  # type: ignore[arg-type]
        snap = store.get_by_id(0)
        assert snap.state == ProductState.OWNED
        assert snap.delegate is None
        assert repo.writes == writes

    def test_delegate_to_plain_string_rejected(self, store):
        store.create(1, ALICE)
        with pytest.raises(ValidationError, match="got str"):
            store.delegate(0, ALICE, "bob")  # type: ignore[arg-type]
        assert store.get_by_id(0).delegate is None

    def test_create_requires_principal_caller(self, store):
        with pytest.raises(ValidationError, match="caller must be a Principal"):
            store.create(1, "alice")  # type: ignore[arg-type]
        assert len(store) == 0

    def test_accept_requires_principal_caller(self, store):
        store.create(1, ALICE)
        store.delegate(0, ALICE, BOB)
        with pytest.raises(ValidationError, match="caller must be a Principal"):
            store.accept(0, None)  # type: ignore[arg-type]
        assert store.get_by_id(0).owner == ALICE

    @pytest.mark.parametrize("product_id", [True, "0", 0.0, None])
    def test_non_integer_id_is_not_found(self, store, product_id):
        store.create(1, ALICE)
        with pytest.raises(RecordNotFoundError):
            store.get_by_id(product_id)
        with pytest.raises(RecordNotFoundError):
            store.delegate(product_id, ALICE, BOB)
