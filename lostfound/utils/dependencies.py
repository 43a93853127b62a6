from typing import Callable, Optional

from fastapi import Depends
from sqlmodel import Session

from lostfound.config import get_settings
from lostfound.db.db import get_engine, get_session
from lostfound.db.gateway import Gateway
from lostfound.realtime.feed import RealtimeFeed, realtime_feed
from lostfound.services.auth import SessionContext, SessionProvider
from lostfound.services.claims import ClaimWorkflow
from lostfound.services.events import EventBus
from lostfound.services.items import ItemService
from lostfound.services.messaging import MessagingService
from lostfound.services.notifications import NotificationService
from lostfound.services.notifier import build_event_bus
from lostfound.services.profiles import ProfileService
from lostfound.utils.storage_service import LocalStorage


def get_feed() -> RealtimeFeed:
    return realtime_feed


def get_storage() -> LocalStorage:
    settings = get_settings()
    return LocalStorage(settings.storage_root, settings.storage_base_url)


def get_gateway(
    session: Session = Depends(get_session),
    feed: RealtimeFeed = Depends(get_feed),
) -> Gateway:
    return Gateway(session, feed)


def get_event_bus(gateway: Gateway = Depends(get_gateway)) -> EventBus:
    return build_event_bus(gateway)


def get_session_provider(gateway: Gateway = Depends(get_gateway)) -> SessionProvider:
    return SessionProvider(gateway)


def get_token_resolver(db_engine=Depends(get_engine)) -> Callable[[str], Optional[SessionContext]]:
    # Long-lived callers (websockets) must not hold a pooled connection
    def resolve(token: str) -> Optional[SessionContext]:
        with Session(db_engine) as session:
            return SessionProvider(Gateway(session)).current_user(token)

    return resolve


def get_item_service(
    gateway: Gateway = Depends(get_gateway),
    bus: EventBus = Depends(get_event_bus),
) -> ItemService:
    return ItemService(gateway, bus)


def get_claim_workflow(
    gateway: Gateway = Depends(get_gateway),
    bus: EventBus = Depends(get_event_bus),
    storage: LocalStorage = Depends(get_storage),
) -> ClaimWorkflow:
    return ClaimWorkflow(gateway, bus, storage)


def get_messaging_service(
    gateway: Gateway = Depends(get_gateway),
    bus: EventBus = Depends(get_event_bus),
) -> MessagingService:
    return MessagingService(gateway, bus)


def get_notification_service(gateway: Gateway = Depends(get_gateway)) -> NotificationService:
    return NotificationService(gateway)


def get_profile_service(gateway: Gateway = Depends(get_gateway)) -> ProfileService:
    return ProfileService(gateway)
