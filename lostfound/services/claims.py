"""Ownership claims, decided by the item owner."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from lostfound.db.gateway import Gateway
from lostfound.errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from lostfound.models.claim import ClaimStatus, ItemClaim
from lostfound.models.item import ItemStatus
from lostfound.services.auth import SessionContext
from lostfound.services.events import ClaimDecided, ClaimSubmitted, EventBus, ItemResolved
from lostfound.services.items import ItemService, require_item_owner
from lostfound.utils.storage_service import LocalStorage

logger = logging.getLogger(__name__)

PROOF_BUCKET = "proofs"
DECISIONS = (ClaimStatus.approved, ClaimStatus.rejected)


class ClaimWorkflow:
    def __init__(self, gateway: Gateway, bus: EventBus, storage: LocalStorage) -> None:
        self.gateway = gateway
        self.bus = bus
        self.storage = storage
        self.items = ItemService(gateway, bus)

    def get_claim(self, claim_id: uuid.UUID) -> ItemClaim:
        claim = self.gateway.select_one("item_claims", {"id": claim_id})
        if claim is None:
            raise NotFoundError("Claim not found")
        return claim

    def submit_claim(self, context: SessionContext, item_id: uuid.UUID, proof_url: str) -> ItemClaim:
        if not self.storage.owns_url(PROOF_BUCKET, proof_url, owner_id=context.user_id):
            raise ValidationError("Proof of ownership must be an uploaded image")

        item = self.items.get_item(item_id)
        if item.user_id == context.user_id:
            raise PermissionDeniedError("You cannot claim your own item")
        if item.status == ItemStatus.resolved:
            raise ConflictError("This item has already been resolved")

        active = self.gateway.select("item_claims", {
            "item_id": item_id,
            "claimed_by": context.user_id,
            "status": [ClaimStatus.pending, ClaimStatus.approved],
        })
        if active:
            raise ConflictError("You have already submitted a claim for this item")

        claim, = self.gateway.insert("item_claims", [{
            "item_id": item_id,
            "claimed_by": context.user_id,
            "proof_of_ownership": proof_url,
            "status": ClaimStatus.pending,
        }])
        logger.info("User %s claimed item %s (claim %s)", context.user_id, item_id, claim.id)

        self.bus.publish(ClaimSubmitted(
            claim_id=claim.id,
            item_id=item_id,
            owner_id=item.user_id,
            claimant_id=context.user_id,
        ))
        # Notification writes commit and expire the claim
        return self.get_claim(claim.id)

    def adjudicate_claim(
        self,
        context: SessionContext,
        claim_id: uuid.UUID,
        decision: ClaimStatus,
        item_id: uuid.UUID,
        admin_notes: Optional[str] = None,
    ) -> ItemClaim:
        try:
            decision = ClaimStatus(decision)
        except ValueError:
            raise ValidationError("Decision must be 'approved' or 'rejected'")
        if decision not in DECISIONS:
            raise ValidationError("Decision must be 'approved' or 'rejected'")

        with self.gateway.transaction():
            item = self.items.get_item(item_id, for_update=True)
            require_item_owner(item, context, "decide claims on it")

            claim = self.get_claim(claim_id)
            if claim.item_id != item_id:
                raise ValidationError("Claim does not belong to this item")
            if claim.status != ClaimStatus.pending:
                raise ConflictError(f"Claim has already been {claim.status.value}")

            if decision == ClaimStatus.approved:
                approved = self.gateway.select("item_claims", {
                    "item_id": item_id,
                    "status": ClaimStatus.approved,
                })
                if approved:
                    raise ConflictError("Another claim on this item was already approved")

            now = datetime.now(timezone.utc)
            patch = {"status": decision, "updated_at": now}
            if admin_notes is not None:
                patch["admin_notes"] = admin_notes

            # Conditional on the claim still being pending
            changed = self.gateway.update(
                "item_claims", patch, {"id": claim_id, "status": ClaimStatus.pending}
            )
            if not changed:
                raise ConflictError("Claim was decided by another request")

            if decision == ClaimStatus.approved:
                self.gateway.update(
                    "items",
                    {"status": ItemStatus.resolved, "updated_at": now},
                    {"id": item_id},
                )

        logger.info("Claim %s on item %s %s by owner", claim_id, item_id, decision.value)

        self.bus.publish(ClaimDecided(
            claim_id=claim_id,
            item_id=item_id,
            owner_id=context.user_id,
            claimant_id=claim.claimed_by,
            decision=decision,
        ))
        if decision == ClaimStatus.approved:
            self.bus.publish(ItemResolved(item_id=item_id, owner_id=context.user_id, claim_id=claim_id))

        return self.get_claim(claim_id)

    def list_item_claims(self, context: SessionContext, item_id: uuid.UUID) -> list[ItemClaim]:
        item = self.items.get_item(item_id)
        require_item_owner(item, context, "review its claims")
        return self.gateway.select("item_claims", {"item_id": item_id}, order_by="created_at")

    def get_my_claim(self, context: SessionContext, item_id: uuid.UUID) -> Optional[ItemClaim]:
        """The caller's most recent claim on the item, if any."""
        claims = self.gateway.select(
            "item_claims",
            {"item_id": item_id, "claimed_by": context.user_id},
            order_by="created_at",
            descending=True,
            limit=1,
        )
        return claims[0] if claims else None
