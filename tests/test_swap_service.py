import threading
import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

import pytest
from sqlalchemy.orm import sessionmaker

from slotswapper.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from slotswapper.db.base import Base
from slotswapper.db.enums import SlotStatus, SwapRequestStatus
from slotswapper.db.models import Slot, SwapRequest, User
from slotswapper.db.repository import RecordStore
from slotswapper.db.session import create_db_engine
from slotswapper.services import slot_service, swap_service


@pytest.fixture
def alice_slot(make_slot, alice):
    return make_slot(alice, title="Team Meeting")


@pytest.fixture
def bob_slot(make_slot, bob):
    return make_slot(
        bob,
        title="Focus Block",
        start=datetime(2025, 11, 12, 14, 0),
        end=datetime(2025, 11, 12, 15, 0),
    )


def _request_count(store: RecordStore) -> int:
    return store.db.query(SwapRequest).count()


def _status(store: RecordStore, slot_id) -> str:
    return store.get_slot(slot_id).status


# =============================================================================
# Propose
# =============================================================================

def test_propose_locks_slots_and_addresses_owner(store, alice, bob, alice_slot, bob_slot):
    view = swap_service.propose_swap(store, alice.id, alice_slot.id, bob_slot.id)

    assert view.request.status == SwapRequestStatus.PENDING.value
    assert view.request.requester_id == alice.id
    assert view.request.owner_id == bob.id
    assert view.requester_slot_title == "Team Meeting"
    assert view.owner_slot_title == "Focus Block"
    assert _status(store, alice_slot.id) == SlotStatus.SWAP_PENDING.value
    assert _status(store, bob_slot.id) == SlotStatus.SWAP_PENDING.value


def test_propose_requires_both_ids(store, alice, alice_slot):
    with pytest.raises(ValidationError):
        swap_service.propose_swap(store, alice.id, alice_slot.id, None)


def test_propose_same_slot_twice_writes_nothing(store, alice, alice_slot):
    with pytest.raises(ValidationError):
        swap_service.propose_swap(store, alice.id, alice_slot.id, alice_slot.id)

    assert _status(store, alice_slot.id) == SlotStatus.SWAPPABLE.value
    assert _request_count(store) == 0


def test_propose_with_two_of_my_own_slots(store, alice, make_slot, alice_slot):
    other = make_slot(alice, title="Lunch")

    with pytest.raises(ValidationError) as exc:
        swap_service.propose_swap(store, alice.id, alice_slot.id, other.id)

    assert exc.value.message == "Cannot swap with your own slot"
    assert _status(store, other.id) == SlotStatus.SWAPPABLE.value


def test_propose_with_someone_elses_slot_as_mine(store, carol, alice_slot, bob_slot):
    with pytest.raises(NotFoundError) as exc:
        swap_service.propose_swap(store, carol.id, alice_slot.id, bob_slot.id)

    assert exc.value.message == "Your slot not found"


def test_propose_for_missing_target(store, alice, alice_slot):
    with pytest.raises(NotFoundError) as exc:
        swap_service.propose_swap(store, alice.id, alice_slot.id, uuid.uuid4())

    assert exc.value.message == "Requested slot not found"
    assert _status(store, alice_slot.id) == SlotStatus.SWAPPABLE.value


def test_propose_for_busy_target(store, alice, bob, make_slot, alice_slot):
    busy = make_slot(bob, status=SlotStatus.BUSY)

    with pytest.raises(ConflictError):
        swap_service.propose_swap(store, alice.id, alice_slot.id, busy.id)

    assert _status(store, alice_slot.id) == SlotStatus.SWAPPABLE.value
    assert _request_count(store) == 0


def test_pending_slot_cannot_join_a_second_swap(
    store, alice, carol, make_slot, alice_slot, bob_slot
):
    swap_service.propose_swap(store, alice.id, alice_slot.id, bob_slot.id)
    carol_slot = make_slot(carol, title="Carol's slot")

    with pytest.raises(ConflictError):
        swap_service.propose_swap(store, carol.id, carol_slot.id, bob_slot.id)

    assert _status(store, carol_slot.id) == SlotStatus.SWAPPABLE.value
    assert _request_count(store) == 1


def test_failed_write_rolls_back_the_whole_proposal(
    store, alice, alice_slot, bob_slot, monkeypatch
):
    def fail(self, slot, status):
        raise RuntimeError("disk full")

    monkeypatch.setattr(RecordStore, "set_slot_status", fail)

    with pytest.raises(RuntimeError):
        swap_service.propose_swap(store, alice.id, alice_slot.id, bob_slot.id)

    monkeypatch.undo()
    assert _request_count(store) == 0
    assert _status(store, alice_slot.id) == SlotStatus.SWAPPABLE.value
    assert _status(store, bob_slot.id) == SlotStatus.SWAPPABLE.value


# =============================================================================
# Respond
# =============================================================================

def test_accept_exchanges_owners(store, alice, bob, alice_slot, bob_slot):
    view = swap_service.propose_swap(store, alice.id, alice_slot.id, bob_slot.id)

    request = swap_service.respond_to_swap(store, bob.id, view.request.id, accept=True)

    assert request.status == SwapRequestStatus.ACCEPTED.value
    first, second = store.get_slot(alice_slot.id), store.get_slot(bob_slot.id)
    assert first.user_id == bob.id
    assert second.user_id == alice.id
    assert first.status == second.status == SlotStatus.BUSY.value
    assert [s.title for s in slot_service.list_slots(store, alice.id)] == ["Focus Block"]


def test_reject_returns_slots_to_market(store, alice, bob, alice_slot, bob_slot):
    view = swap_service.propose_swap(store, alice.id, alice_slot.id, bob_slot.id)

    request = swap_service.respond_to_swap(store, bob.id, view.request.id, accept=False)

    assert request.status == SwapRequestStatus.REJECTED.value
    assert store.get_slot(alice_slot.id).user_id == alice.id
    assert store.get_slot(bob_slot.id).user_id == bob.id
    assert _status(store, alice_slot.id) == SlotStatus.SWAPPABLE.value
    assert _status(store, bob_slot.id) == SlotStatus.SWAPPABLE.value


@pytest.mark.parametrize("first, second", [(True, True), (True, False), (False, True)])
def test_second_response_is_a_conflict(
    store, alice, bob, alice_slot, bob_slot, first, second
):
    view = swap_service.propose_swap(store, alice.id, alice_slot.id, bob_slot.id)
    swap_service.respond_to_swap(store, bob.id, view.request.id, accept=first)
    owners_after_first = (
        store.get_slot(alice_slot.id).user_id,
        store.get_slot(bob_slot.id).user_id,
    )

    with pytest.raises(ConflictError) as exc:
        swap_service.respond_to_swap(store, bob.id, view.request.id, accept=second)

    assert exc.value.message == "Swap request already processed"
    assert (
        store.get_slot(alice_slot.id).user_id,
        store.get_slot(bob_slot.id).user_id,
    ) == owners_after_first


def test_only_the_owner_may_respond(store, alice, carol, alice_slot, bob_slot):
    view = swap_service.propose_swap(store, alice.id, alice_slot.id, bob_slot.id)

    for outsider in (alice, carol):
        with pytest.raises(ForbiddenError):
            swap_service.respond_to_swap(store, outsider.id, view.request.id, accept=True)

    assert store.get_swap_request(view.request.id).status == SwapRequestStatus.PENDING.value
    assert _status(store, bob_slot.id) == SlotStatus.SWAP_PENDING.value


def test_respond_to_unknown_request(store, bob):
    with pytest.raises(NotFoundError):
        swap_service.respond_to_swap(store, bob.id, uuid.uuid4(), accept=True)


def test_failed_write_rolls_back_the_acceptance(
    store, alice, bob, alice_slot, bob_slot, monkeypatch
):
    view = swap_service.propose_swap(store, alice.id, alice_slot.id, bob_slot.id)

    def fail(self, request, status):
        raise RuntimeError("connection lost")

    monkeypatch.setattr(RecordStore, "set_swap_request_status", fail)

    with pytest.raises(RuntimeError):
        swap_service.respond_to_swap(store, bob.id, view.request.id, accept=True)

    monkeypatch.undo()
    assert store.get_swap_request(view.request.id).status == SwapRequestStatus.PENDING.value
    assert store.get_slot(alice_slot.id).user_id == alice.id
    assert _status(store, alice_slot.id) == SlotStatus.SWAP_PENDING.value
    assert _status(store, bob_slot.id) == SlotStatus.SWAP_PENDING.value


# =============================================================================
# Listings
# =============================================================================

def test_listings_survive_deleted_slots(store, alice, bob, alice_slot, bob_slot):
    view = swap_service.propose_swap(store, alice.id, alice_slot.id, bob_slot.id)
    swap_service.respond_to_swap(store, bob.id, view.request.id, accept=False)

    slot_service.delete_slot(store, alice.id, alice_slot.id)

    [outgoing] = swap_service.list_outgoing_requests(store, alice.id)
    assert outgoing.request.requester_slot_id is None
    assert outgoing.requester_slot_title is None
    assert outgoing.owner_slot_title == "Focus Block"
    assert swap_service.list_incoming_requests(store, bob.id)[0].request.id == view.request.id


# =============================================================================
# Concurrency
# =============================================================================

def test_concurrent_proposals_for_one_slot(tmp_path):
    """Racing proposals against one target: exactly one wins."""
    contenders = 8
    file_engine = create_db_engine(f"sqlite:///{tmp_path / 'race.db'}")
    Base.metadata.create_all(bind=file_engine)
    FileSession = sessionmaker(autocommit=False, autoflush=False, bind=file_engine)

    with FileSession() as setup:
        alice = User(name="Alice", email="alice@test.com", password_hash="x")
        bob = User(name="Bob", email="bob@test.com", password_hash="x")
        setup.add_all([alice, bob])
        setup.flush()
        target = Slot(
            user_id=bob.id,
            title="Focus Block",
            start_time=datetime(2025, 11, 12, 14, 0),
            end_time=datetime(2025, 11, 12, 15, 0),
            status=SlotStatus.SWAPPABLE.value,
        )
        offers = [
            Slot(
                user_id=alice.id,
                title=f"Offer {i}",
                start_time=datetime(2025, 11, 10, 8 + i, 0),
                end_time=datetime(2025, 11, 10, 9 + i, 0),
                status=SlotStatus.SWAPPABLE.value,
            )
            for i in range(contenders)
        ]
        setup.add_all([target, *offers])
        setup.commit()
        alice_id, target_id = alice.id, target.id
        offer_ids = [offer.id for offer in offers]

    barrier = threading.Barrier(contenders)

    def propose(offer_id):
        session = FileSession()
        try:
            barrier.wait()
            swap_service.propose_swap(RecordStore(session), alice_id, offer_id, target_id)
            return "ok"
        except ConflictError:
            return "conflict"
        finally:
            session.close()

    try:
        with ThreadPoolExecutor(max_workers=contenders) as pool:
            outcomes = list(pool.map(propose, offer_ids))

        assert outcomes.count("ok") == 1
        assert outcomes.count("conflict") == contenders - 1

        with FileSession() as check:
            assert check.query(SwapRequest).count() == 1
            pending = check.query(Slot).filter_by(status=SlotStatus.SWAP_PENDING.value).count()
            assert pending == 2
    finally:
        Base.metadata.drop_all(bind=file_engine)
        file_engine.dispose()
