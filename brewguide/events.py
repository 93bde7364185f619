##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
In-process publish/subscribe notifications for storage writes.

Two topics are published by the persistence layer:

- `STORAGE_CHANGED` with `{"key": ..., "source": ...}` after a key-value write.
- `DATA_CHANGED` with `{"key": ...}` after any successful entity write.

Views subscribe to these instead of polling the stores.
"""

import logging
import threading
from collections import defaultdict
from typing import Any, Callable, Dict, List


LOG = logging.getLogger(__name__)

STORAGE_CHANGED = "storage:changed"
DATA_CHANGED = "data:changed"
ALL_TOPICS = "*"

Event = Dict[str, Any]
Handler = Callable[[Event], None]


class EventBus:
    """
    In-process event bus with topic routing.

    Methods:
        subscribe: Register a handler for a topic (or `*` for every topic).
        unsubscribe: Remove a previously registered handler.
        publish: Deliver an event to every handler of the topic.
        notify_storage_changed: Publish a `STORAGE_CHANGED` event for a key.
        notify_data_changed: Publish a `DATA_CHANGED` event for a key.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: Dict[str, List[Handler]] = defaultdict(list)

    def subscribe(self, topic: str, handler: Handler):
        """
        Subscribe a handler to a topic ("*" for all).

        Args:
            topic: The topic to listen on.
            handler: A callable receiving the event dictionary.
        """
        with self._lock:
            self._subscribers[topic].append(handler)

    def unsubscribe(self, topic: str, handler: Handler) -> bool:
        """
        Remove a handler from a topic.

        Args:
            topic: The topic the handler was registered on.
            handler: The handler to remove.

        Returns:
            True if the handler was registered, False otherwise.
        """
        with self._lock:
            handlers = self._subscribers.get(topic, [])
            if handler in handlers:
                handlers.remove(handler)
                return True
        return False

    def publish(self, topic: str, event: Event):
        """
        Publish an event to a topic. A failing handler is logged and does not
        stop delivery to the remaining handlers.

        Args:
            topic: The topic to publish on.
            event: The event payload.
        """
        handlers = []
        with self._lock:
            handlers.extend(self._subscribers.get(topic, []))
            handlers.extend(self._subscribers.get(ALL_TOPICS, []))
        for handler in handlers:
            try:
                handler(event)
            except Exception as exc:  # pylint: disable=broad-except
                LOG.error(f"Event handler failed for topic '{topic}': {exc}")

    def notify_storage_changed(self, key: str, source: str = "internal"):
        """
        Announce that a key-value entry was written.

        Args:
            key: The storage key that changed.
            source: Who made the change.
        """
        self.publish(STORAGE_CHANGED, {"key": key, "source": source})

    def notify_data_changed(self, key: str):
        """
        Announce that an entity collection was written.

        Args:
            key: The collection name that changed.
        """
        self.publish(DATA_CHANGED, {"key": key})
