"""Fan out manager events to interested consumers via asyncio queues."""

from __future__ import annotations

import asyncio
import logging
from collections import Counter, defaultdict
from dataclasses import dataclass
from typing import Any, DefaultDict, Dict, List, Optional


LOGGER = logging.getLogger(__name__)


@dataclass
class SubscriberQueue:
    event: str
    subscriber_id: str
    queue: "asyncio.Queue[Dict[str, Any]]"


class EventDispatcher:
    """Publish state transitions and re-render signals to subscriber queues.

    Publishing happens from inside synchronous reducer notifications, so it
    never awaits.  Bounded queues that are full either drop the new message or
    evict the oldest one depending on ``overflow_strategy``.
    """

    _VALID_OVERFLOW_STRATEGIES = {"drop_new", "drop_oldest"}

    def __init__(
        self,
        *,
        default_queue_size: int = 0,
        overflow_strategy: str = "drop_new",
    ) -> None:
        if overflow_strategy not in self._VALID_OVERFLOW_STRATEGIES:
            raise ValueError(
                "overflow_strategy must be one of "
                f"{sorted(self._VALID_OVERFLOW_STRATEGIES)}"
            )

        if default_queue_size < 0:
            raise ValueError("default_queue_size must be >= 0")

        self._queues: DefaultDict[str, List[SubscriberQueue]] = defaultdict(list)
        self._wildcard_key = "*"
        self._default_queue_size = default_queue_size
        self._overflow_strategy = overflow_strategy
        self._delivered_counts: Counter[str] = Counter()
        self._dropped_counts: Counter[str] = Counter()
        self._queue_index: Dict[asyncio.Queue, SubscriberQueue] = {}

    # ------------------------------------------------------------------
    # Subscription management
    # ------------------------------------------------------------------
    def register_queue(
        self,
        event_name: str,
        *,
        maxsize: Optional[int] = None,
        subscriber_id: str = "anonymous",
    ) -> "asyncio.Queue[Dict[str, Any]]":
        """Return a queue receiving ``state_changed`` or ``*_rerender`` messages.

        ``"*"`` subscribes to everything the manager publishes.  ``maxsize``
        falls back to the dispatcher default, 0 meaning unbounded.
        """

        size = self._default_queue_size if maxsize is None else max(maxsize, 0)
        queue: "asyncio.Queue[Dict[str, Any]]" = asyncio.Queue(maxsize=size)
        metadata = SubscriberQueue(
            event=event_name, subscriber_id=subscriber_id, queue=queue
        )
        self._queues[event_name].append(metadata)
        self._queue_index[queue] = metadata
        return queue

    def unregister_queue(self, event_name: str, queue: asyncio.Queue) -> None:
        queues = self._queues.get(event_name)
        if not queues:
            return
        for metadata in list(queues):
            if metadata.queue is queue:
                queues.remove(metadata)
                break
        if not queues and event_name in self._queues:
            del self._queues[event_name]
        self._queue_index.pop(queue, None)

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------
    def publish(self, event_name: str, payload: Dict[str, Any]) -> None:
        """Queue ``{"event": event_name, "data": payload}`` for every subscriber.

        Called synchronously from store notifications, so full queues are
        resolved with the overflow strategy instead of waiting.
        """

        queues = list(self._queues.get(event_name, []))
        queues.extend(self._queues.get(self._wildcard_key, []))

        if not queues:
            LOGGER.debug("No subscribers for event '%s'", event_name)
            return

        message = {"event": event_name, "data": payload}
        for subscriber in queues:
            self._dispatch_to_queue(subscriber, event_name, message)

    def _dispatch_to_queue(
        self,
        subscriber: SubscriberQueue,
        event_name: str,
        message: Dict[str, Any],
    ) -> None:
        queue = subscriber.queue
        while True:
            try:
                queue.put_nowait(message)
            except asyncio.QueueFull:
                self._dropped_counts[event_name] += 1
                LOGGER.warning(
                    "Queue overflow for event '%s' (subscriber=%s strategy=%s size=%d)",
                    event_name,
                    subscriber.subscriber_id,
                    self._overflow_strategy,
                    queue.maxsize,
                    extra={
                        "event_name": event_name,
                        "subscriber": subscriber.subscriber_id,
                        "strategy": self._overflow_strategy,
                        "queue_size": queue.qsize(),
                    },
                )

                if self._overflow_strategy == "drop_new":
                    return

                try:
                    queue.get_nowait()
                except asyncio.QueueEmpty:
                    return
            else:
                self._delivered_counts[event_name] += 1
                return

    # ------------------------------------------------------------------
    # Metrics
    # ------------------------------------------------------------------
    def metrics_snapshot(self) -> Dict[str, Dict[str, int]]:
        """Per-event counts of delivered and overflow-dropped manager messages."""

        return {
            "delivered": dict(self._delivered_counts),
            "dropped": dict(self._dropped_counts),
        }

    def subscriber_snapshot(self) -> List[Dict[str, Any]]:
        """Backlog of every registered consumer, useful to spot a stalled UI."""

        return [
            {
                "event": metadata.event,
                "subscriber": metadata.subscriber_id,
                "size": metadata.queue.qsize(),
                "maxsize": metadata.queue.maxsize,
            }
            for metadata in self._queue_index.values()
        ]

    def reset_metrics(self) -> None:
        # subscriptions survive, only the counters start over
        self._delivered_counts.clear()
        self._dropped_counts.clear()
