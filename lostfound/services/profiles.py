from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Mapping

from lostfound.db.gateway import Gateway
from lostfound.errors import NotFoundError
from lostfound.models.profile import Profile
from lostfound.services.auth import SessionContext
from lostfound.utils.storage_service import LocalStorage, store_image

EDITABLE_FIELDS = ("full_name", "student_id", "department", "phone", "year_of_study")
AVATAR_BUCKET = "avatars"


class ProfileService:
    def __init__(self, gateway: Gateway) -> None:
        self.gateway = gateway

    def get_or_create_profile(self, context: SessionContext) -> Profile:
        """Return the caller's profile, creating an empty one on first view."""

        profile = self.gateway.select_one("profiles", {"id": context.user_id})
        if profile is None:
            profile, = self.gateway.insert("profiles", [{"id": context.user_id}])
        return profile

    def get_profile(self, user_id: uuid.UUID) -> Profile:
        profile = self.gateway.select_one("profiles", {"id": user_id})
        if profile is None:
            raise NotFoundError("User not found")
        return profile

    def update_profile(self, context: SessionContext, patch: Mapping[str, Any]) -> Profile:
        self.get_or_create_profile(context)

        changes = {key: value for key, value in patch.items() if key in EDITABLE_FIELDS}
        changes["updated_at"] = datetime.now(timezone.utc)
        self.gateway.update("profiles", changes, {"id": context.user_id})

        return self.get_profile(context.user_id)

    def set_avatar(
        self,
        context: SessionContext,
        storage: LocalStorage,
        content_type: str | None,
        data: bytes,
    ) -> Profile:
        url = store_image(storage, AVATAR_BUCKET, context.user_id, content_type, data)

        self.get_or_create_profile(context)
        self.gateway.update(
            "profiles",
            {"avatar_url": url, "updated_at": datetime.now(timezone.utc)},
            {"id": context.user_id},
        )
        return self.get_profile(context.user_id)
