from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from PySide6.QtCore import QMetaObject, QObject, Signal

from glyphdeck.model.sections import Side

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SectionChange:
    """Payload of the 'active section changed' event."""
    id: str
    side: Side


def change_id(change: Any) -> str | None:
    """Return the section id carried by a payload, or None if it has none."""
    section_id = getattr(change, "id", None)
    if not section_id or not isinstance(section_id, str):
        return None
    return section_id


class Subscription:
    """Handle returned by SectionChannel.subscribe; cancel() is idempotent."""
    def __init__(self, channel: SectionChannel, connection: QMetaObject.Connection) -> None:
        self._channel = channel
        # Disconnect this exact connection; the same callable may be subscribed twice
        self._connection = connection
        self.active = True

    def cancel(self) -> None:
        if not self.active:
            return
        self.active = False
        QObject.disconnect(self._connection)
        self._channel._forget(self)


class SectionChannel(QObject):
    """
    Process-wide publish/subscribe point for active section changes.

    Delivery is synchronous (direct connection on the GUI thread) and in
    registration order. Nothing is buffered: a subscriber added after a
    publish does not see it.
    """
    section_changed = Signal(object)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._subscriptions: list[Subscription] = []

    def subscribe(self, callback: Callable[[Any], None]) -> Subscription:
        connection = self.section_changed.connect(callback)
        subscription = Subscription(self, connection)
        self._subscriptions.append(subscription)
        return subscription

    def publish(self, change: SectionChange) -> None:
        logger.debug(f"Publishing section change: {change.id} ({change.side})")
        self.section_changed.emit(change)

    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def clear(self) -> None:
        """Cancel every outstanding subscription."""
        for subscription in list(self._subscriptions):
            subscription.cancel()

    def _forget(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
