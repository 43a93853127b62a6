"""Item lifecycle and claim adjudication."""

import pytest

from lostfound.errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from lostfound.models.claim import ClaimStatus
from lostfound.models.item import ItemStatus
from lostfound.models.notification import NotificationType
from lostfound.services.events import ClaimDecided, ItemResolved


def test_approving_claim_resolves_item(items, claims, backpack, alice, bob, upload_proof):
    assert backpack.status == ItemStatus.open

    claim = claims.submit_claim(bob, backpack.id, upload_proof(bob))
    assert claim.status == ClaimStatus.pending

    decided = claims.adjudicate_claim(alice, claim.id, "approved", backpack.id)

    assert decided.status == ClaimStatus.approved
    assert items.get_item(backpack.id).status == ItemStatus.resolved


def test_approval_leaves_other_claims_alone(claims, backpack, alice, bob, carol, upload_proof):
    bobs = claims.submit_claim(bob, backpack.id, upload_proof(bob))
    carols = claims.submit_claim(carol, backpack.id, upload_proof(carol))

    claims.adjudicate_claim(alice, bobs.id, ClaimStatus.approved, backpack.id)

    assert claims.get_claim(carols.id).status == ClaimStatus.pending


def test_rejecting_claim_keeps_item_status(items, claims, backpack, alice, bob, upload_proof):
    items.change_item_status(alice, backpack.id, ItemStatus.in_progress)
    claim = claims.submit_claim(bob, backpack.id, upload_proof(bob))

    decided = claims.adjudicate_claim(alice, claim.id, "rejected", backpack.id, admin_notes="Wrong colour")

    assert decided.status == ClaimStatus.rejected
    assert decided.admin_notes == "Wrong colour"
    assert items.get_item(backpack.id).status == ItemStatus.in_progress


def test_second_approval_on_same_item_conflicts(items, claims, backpack, alice, bob, carol, upload_proof):
    bobs = claims.submit_claim(bob, backpack.id, upload_proof(bob))
    carols = claims.submit_claim(carol, backpack.id, upload_proof(carol))
    claims.adjudicate_claim(alice, bobs.id, "approved", backpack.id)

    # Owner reopens the item, but the item already has its approved claim
    items.change_item_status(alice, backpack.id, ItemStatus.open)
    with pytest.raises(ConflictError):
        claims.adjudicate_claim(alice, carols.id, "approved", backpack.id)

    assert claims.get_claim(carols.id).status == ClaimStatus.pending


def test_decided_claim_is_terminal(claims, backpack, alice, bob, upload_proof):
    claim = claims.submit_claim(bob, backpack.id, upload_proof(bob))
    claims.adjudicate_claim(alice, claim.id, "rejected", backpack.id)

    with pytest.raises(ConflictError):
        claims.adjudicate_claim(alice, claim.id, "approved", backpack.id)


def test_only_owner_can_adjudicate(items, claims, backpack, bob, carol, upload_proof):
    claim = claims.submit_claim(bob, backpack.id, upload_proof(bob))

    with pytest.raises(PermissionDeniedError):
        claims.adjudicate_claim(carol, claim.id, "approved", backpack.id)
    with pytest.raises(PermissionDeniedError):
        claims.adjudicate_claim(bob, claim.id, "approved", backpack.id)

    assert claims.get_claim(claim.id).status == ClaimStatus.pending
    assert items.get_item(backpack.id).status == ItemStatus.open


def test_invalid_decision_is_rejected(claims, backpack, alice, bob, upload_proof):
    claim = claims.submit_claim(bob, backpack.id, upload_proof(bob))

    with pytest.raises(ValidationError):
        claims.adjudicate_claim(alice, claim.id, "pending", backpack.id)
    with pytest.raises(ValidationError):
        claims.adjudicate_claim(alice, claim.id, "maybe", backpack.id)


def test_claim_must_belong_to_item(items, claims, backpack, alice, bob, upload_proof):
    other = items.report_item(alice, {**_umbrella()})
    claim = claims.submit_claim(bob, backpack.id, upload_proof(bob))

    with pytest.raises(ValidationError):
        claims.adjudicate_claim(alice, claim.id, "approved", other.id)

    assert items.get_item(other.id).status == ItemStatus.open


def test_cannot_claim_own_item(claims, backpack, alice, upload_proof):
    with pytest.raises(PermissionDeniedError):
        claims.submit_claim(alice, backpack.id, upload_proof(alice))


def test_duplicate_claim_is_refused_until_rejected(claims, backpack, alice, bob, upload_proof):
    first = claims.submit_claim(bob, backpack.id, upload_proof(bob))

    with pytest.raises(ConflictError):
        claims.submit_claim(bob, backpack.id, upload_proof(bob))

    claims.adjudicate_claim(alice, first.id, "rejected", backpack.id)
    second = claims.submit_claim(bob, backpack.id, upload_proof(bob))

    assert second.id != first.id
    assert claims.get_my_claim(bob, backpack.id).id == second.id


def test_resolved_item_cannot_be_claimed(items, claims, backpack, alice, bob, upload_proof):
    items.change_item_status(alice, backpack.id, ItemStatus.resolved)

    with pytest.raises(ConflictError):
        claims.submit_claim(bob, backpack.id, upload_proof(bob))


def test_proof_must_be_an_uploaded_image(claims, backpack, bob):
    with pytest.raises(ValidationError):
        claims.submit_claim(bob, backpack.id, "https://example.com/me.png")
    with pytest.raises(ValidationError):
        claims.submit_claim(bob, backpack.id, "http://testserver/storage/proofs/missing.png")


def test_claiming_missing_item(claims, backpack, alice, bob, upload_proof):
    import uuid

    with pytest.raises(NotFoundError):
        claims.submit_claim(bob, uuid.uuid4(), upload_proof(bob))


def test_owner_may_resolve_without_approved_claim(items, claims, backpack, alice):
    # Resolving by hand is allowed, so "resolved" does not imply an approved claim
    item = items.change_item_status(alice, backpack.id, ItemStatus.resolved)

    assert item.status == ItemStatus.resolved
    assert claims.list_item_claims(alice, backpack.id) == []


def test_owner_may_move_status_backwards(items, backpack, alice):
    items.change_item_status(alice, backpack.id, ItemStatus.resolved)
    item = items.change_item_status(alice, backpack.id, ItemStatus.open)

    assert item.status == ItemStatus.open


def test_non_owner_cannot_change_status(items, backpack, bob):
    with pytest.raises(PermissionDeniedError):
        items.change_item_status(bob, backpack.id, ItemStatus.resolved)

    assert items.get_item(backpack.id).status == ItemStatus.open


def test_only_owner_lists_claims(claims, backpack, alice, bob, upload_proof):
    claim = claims.submit_claim(bob, backpack.id, upload_proof(bob))

    assert [c.id for c in claims.list_item_claims(alice, backpack.id)] == [claim.id]
    with pytest.raises(PermissionDeniedError):
        claims.list_item_claims(bob, backpack.id)


def test_claim_events_notify_both_sides(claims, notifications, backpack, alice, bob, upload_proof):
    claim = claims.submit_claim(bob, backpack.id, upload_proof(bob))

    owner_inbox = notifications.list_notifications(alice)
    assert [n["type"] for n in owner_inbox] == [NotificationType.claim_submitted]
    assert owner_inbox[0]["actor_id"] == bob.user_id
    assert owner_inbox[0]["actor_profile"]["full_name"] == "Bob Brown"

    claims.adjudicate_claim(alice, claim.id, "approved", backpack.id)

    claimant_inbox = notifications.list_notifications(bob)
    assert [n["type"] for n in claimant_inbox] == [NotificationType.claim_approved]
    assert claimant_inbox[0]["item_id"] == backpack.id


def test_approval_publishes_domain_events(bus, claims, backpack, alice, bob, upload_proof):
    seen = []
    bus.subscribe(ClaimDecided, seen.append)
    bus.subscribe(ItemResolved, seen.append)

    claim = claims.submit_claim(bob, backpack.id, upload_proof(bob))
    claims.adjudicate_claim(alice, claim.id, "approved", backpack.id)

    decided, resolved = seen
    assert decided.decision == ClaimStatus.approved
    assert decided.claimant_id == bob.user_id
    assert resolved == ItemResolved(item_id=backpack.id, owner_id=alice.user_id, claim_id=claim.id)


def test_manual_resolve_publishes_item_resolved(bus, items, backpack, alice):
    seen = []
    bus.subscribe(ItemResolved, seen.append)

    items.change_item_status(alice, backpack.id, ItemStatus.in_progress)
    items.change_item_status(alice, backpack.id, ItemStatus.resolved)
    items.change_item_status(alice, backpack.id, ItemStatus.resolved)

    assert seen == [ItemResolved(item_id=backpack.id, owner_id=alice.user_id)]


def _umbrella():
    from datetime import date

    return {
        "title": "Black Umbrella",
        "description": "Folding umbrella",
        "category": "other",
        "type": "found",
        "location": "Cafeteria",
        "date": date(2024, 5, 2),
    }


def test_submitted_claim_is_loaded_after_notifying_owner(claims, backpack, bob, upload_proof):
    claim = claims.submit_claim(bob, backpack.id, upload_proof(bob))

    body = claim.model_dump()
    assert body["status"] == ClaimStatus.pending
    assert body["claimed_by"] == bob.user_id
    assert body["item_id"] == backpack.id


def test_proof_must_be_the_claimants_own_upload(claims, backpack, bob, carol, upload_proof):
    carols_proof = upload_proof(carol)

    with pytest.raises(ValidationError):
        claims.submit_claim(bob, backpack.id, carols_proof)

    assert claims.submit_claim(carol, backpack.id, carols_proof).claimed_by == carol.user_id
