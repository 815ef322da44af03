"""
Transient user notifications ("toasts").

Services report collaborator failures here instead of raising to the view.
"""
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, List, Optional

from storefront.errors import ERROR_GENERIC_TITLE
from storefront.logging import get_logger

logger = get_logger(__name__)

VARIANT_DEFAULT = "default"
VARIANT_DESTRUCTIVE = "destructive"

NotificationListener = Callable[["Notification"], None]


@dataclass(frozen=True)
class Notification:
    """A short-lived message shown to the user."""

    title: str
    description: str = ""
    variant: str = VARIANT_DEFAULT


class NotificationCenter:
    """Fans notifications out to listeners and keeps the latest few."""

    def __init__(self, history_size: int = 20):
        self.history: Deque[Notification] = deque(maxlen=history_size)
        self._listeners: List[NotificationListener] = []

    def notify(self, title: str, description: str = "", variant: str = VARIANT_DEFAULT) -> Notification:
        notification = Notification(title=title, description=description, variant=variant)
        self.history.append(notification)
        for listener in list(self._listeners):
            try:
                listener(notification)
            except Exception as e:
                logger.warning(f"Notification listener failed: {e}", exc_info=True)
        return notification

    def error(self, description: str, title: str = ERROR_GENERIC_TITLE) -> Notification:
        return self.notify(title, description, VARIANT_DESTRUCTIVE)

    def subscribe(self, listener: NotificationListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def latest(self) -> Optional[Notification]:
        return self.history[-1] if self.history else None
