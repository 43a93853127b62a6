"""Table-style data gateway over a SQLModel session.

The services only talk to the store through this class: named collections,
equality filters, ordering, and an explicit transaction boundary. Every
database failure surfaces as :class:`~lostfound.errors.RemoteError`.
Committed inserts are published on the realtime feed.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, Mapping, Optional

from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, select

from lostfound.errors import RemoteError
from lostfound.models.claim import ItemClaim
from lostfound.models.comment import Comment
from lostfound.models.item import Item
from lostfound.models.message import Message
from lostfound.models.notification import Notification
from lostfound.models.profile import Profile
from lostfound.models.user import User, UserSession
from lostfound.realtime.feed import INSERT, RealtimeFeed

logger = logging.getLogger(__name__)

COLLECTIONS: dict[str, type[SQLModel]] = {
    "items": Item,
    "item_claims": ItemClaim,
    "comments": Comment,
    "messages": Message,
    "notifications": Notification,
    "profiles": Profile,
    "users": User,
    "user_sessions": UserSession,
}

# Never broadcast on the realtime feed
PRIVATE_COLLECTIONS = frozenset({"users", "user_sessions"})

Filters = Optional[Mapping[str, Any]]


class Gateway:
    def __init__(self, session: Session, feed: Optional[RealtimeFeed] = None):
        self.session = session
        self.feed = feed
        self._depth = 0
        self._pending_events: list[tuple[str, dict[str, Any]]] = []

    # Helpers

    @staticmethod
    def _model(collection: str) -> type[SQLModel]:
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise RemoteError(f"Unknown collection '{collection}'")

    @staticmethod
    def _where(model: type[SQLModel], filters: Filters) -> list:
        clauses = []
        for name, value in (filters or {}).items():
            column = getattr(model, name, None)
            if column is None:
                raise RemoteError(f"Unknown field '{name}' on {model.__tablename__}")

            if isinstance(value, (list, tuple, set, frozenset)):
                clauses.append(column.in_(list(value)))
            elif value is None:
                clauses.append(column.is_(None))
            else:
                clauses.append(column == value)
        return clauses

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            if self._depth == 0:
                self.session.rollback()
            logger.warning("Gateway failed to %s: %s", action, exc)
            raise RemoteError(f"Failed to {action}") from exc

    def _finish_write(self, action: str) -> None:
        with self._guard(action):
            if self._depth:
                self.session.flush()
            else:
                self.session.commit()
        if not self._depth:
            self._publish_pending()

    def _publish_pending(self) -> None:
        events, self._pending_events = self._pending_events, []
        if self.feed is None:
            return
        for collection, row in events:
            self.feed.publish(collection, INSERT, row)

    # Transactions

    @contextmanager
    def transaction(self) -> Iterator["Gateway"]:
        """Group writes so they commit together or not at all.

        Nested blocks join the outermost one. Realtime events for rows
        inserted inside the block are only published after the commit.
        """

        self._depth += 1
        try:
            yield self
        except BaseException:
            self._depth -= 1
            if self._depth == 0:
                self.session.rollback()
                self._pending_events.clear()
            raise

        self._depth -= 1
        if self._depth == 0:
            try:
                with self._guard("commit transaction"):
                    self.session.commit()
            except RemoteError:
                self._pending_events.clear()
                raise
            self._publish_pending()

    # CRUD

    def select(
        self,
        collection: str,
        filters: Filters = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        for_update: bool = False,
    ) -> list:
        model = self._model(collection)
        statement = select(model).where(*self._where(model, filters))

        if order_by:
            column = getattr(model, order_by)
            statement = statement.order_by(column.desc() if descending else column.asc())
        if limit:
            statement = statement.limit(limit)
        if for_update:
            # Row lock on backends that support it; SQLite serialises writers anyway
            statement = statement.with_for_update()

        with self._guard(f"read {collection}"):
            return list(self.session.exec(statement).all())

    def select_one(self, collection: str, filters: Filters = None, for_update: bool = False):
        rows = self.select(collection, filters, limit=1, for_update=for_update)
        return rows[0] if rows else None

    def insert(self, collection: str, rows: Iterable[Mapping[str, Any]]) -> list:
        model = self._model(collection)
        records = [model(**dict(row)) for row in rows]

        with self._guard(f"insert into {collection}"):
            self.session.add_all(records)
            self.session.flush()
            if collection not in PRIVATE_COLLECTIONS:
                for record in records:
                    self._pending_events.append((collection, record.model_dump(mode="json")))

        try:
            self._finish_write(f"insert into {collection}")
        except RemoteError:
            self._pending_events.clear()
            raise

        if not self._depth:
            with self._guard(f"reload {collection}"):
                for record in records:
                    self.session.refresh(record)
        return records

    def update(self, collection: str, patch: Mapping[str, Any], filters: Filters) -> int:
        """Apply ``patch`` to every row matching ``filters``; return the affected row count."""

        if not filters:
            raise RemoteError(f"Refusing to update every row of {collection}")
        model = self._model(collection)
        statement = update(model).where(*self._where(model, filters)).values(**dict(patch))

        with self._guard(f"update {collection}"):
            result = self.session.exec(statement)
            count = result.rowcount
        self._finish_write(f"update {collection}")
        return count

    def delete(self, collection: str, filters: Filters) -> int:
        if not filters:
            raise RemoteError(f"Refusing to delete every row of {collection}")
        model = self._model(collection)
        statement = delete(model).where(*self._where(model, filters))

        with self._guard(f"delete from {collection}"):
            result = self.session.exec(statement)
            count = result.rowcount
        self._finish_write(f"delete from {collection}")
        return count


__all__ = ["COLLECTIONS", "Gateway"]
