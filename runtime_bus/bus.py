from __future__ import annotations

import itertools
import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from .messages import MessageEnvelope

logger = logging.getLogger(__name__)

Handler = Callable[[MessageEnvelope], None]


@dataclass(frozen=True)
class _Subscription:
    sub_id: str
    topic: str
    handler: Handler


class RuntimeBus:
    """Synchronous topic bus shared by the navigation panel and its pages.

    ``publish`` calls every handler subscribed at that moment, in the order
    they subscribed, before returning. Handlers may publish or (un)subscribe
    from inside a delivery; the running delivery keeps the list it started
    with. Nothing is queued, persisted or replayed.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._by_id: Dict[str, _Subscription] = {}
        self._by_topic: Dict[str, List[_Subscription]] = {}
        self._sequence = itertools.count(1)

    def subscribe(self, topic: str, handler: Handler) -> str:
        """Register ``handler`` for ``topic``; the returned id unsubscribes it."""
        subscription = _Subscription(str(uuid.uuid4()), topic, handler)
        with self._lock:
            self._by_id[subscription.sub_id] = subscription
            self._by_topic.setdefault(topic, []).append(subscription)
        logger.debug("subscribed %s to %s", subscription.sub_id, topic)
        return subscription.sub_id

    def unsubscribe(self, sub_id: str) -> None:
        with self._lock:
            subscription = self._by_id.pop(sub_id, None)
            if subscription is None:
                return
            remaining = [s for s in self._by_topic.get(subscription.topic, []) if s.sub_id != sub_id]
            if remaining:
                self._by_topic[subscription.topic] = remaining
            else:
                self._by_topic.pop(subscription.topic, None)

    def subscriber_count(self, topic: str) -> int:
        with self._lock:
            return len(self._by_topic.get(topic, ()))

    def publish(
        self,
        topic: str,
        payload: object = None,
        source: str = "unknown",
        trace_id: Optional[str] = None,
    ) -> MessageEnvelope:
        with self._lock:
            envelope = MessageEnvelope(
                topic=topic,
                payload=payload,
                source=source,
                sequence=next(self._sequence),
                timestamp=datetime.now(timezone.utc).isoformat(),
                trace_id=trace_id or str(uuid.uuid4()),
            )
            targets = list(self._by_topic.get(topic, ()))
        for subscription in targets:
            try:
                subscription.handler(envelope)
            except Exception:
                logger.exception(
                    "bus handler %s failed on %s (seq=%s)",
                    subscription.sub_id,
                    topic,
                    envelope.sequence,
                )
        return envelope


_GLOBAL_BUS: Optional[RuntimeBus] = None
_GLOBAL_LOCK = threading.Lock()


def get_global_bus() -> RuntimeBus:
    global _GLOBAL_BUS
    with _GLOBAL_LOCK:
        if _GLOBAL_BUS is None:
            _GLOBAL_BUS = RuntimeBus()
    return _GLOBAL_BUS
