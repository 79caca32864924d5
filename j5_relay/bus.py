import asyncio
from collections import defaultdict
from collections.abc import Callable, Coroutine
from types import TracebackType
from typing import Any, Optional, TypeVar

T = TypeVar("T")
Handler = Callable[[T], Coroutine[Any, Any, None]]


class Subscription:
    """Handle returned by EventBus.subscribe; releasing it stops delivery."""

    def __init__(self, bus: "EventBus", topic: str, handler: Handler[Any]) -> None:
        self.topic = topic
        self.handler = handler
        self.active = True
        self._bus = bus

    async def deliver(self, message: Any) -> None:
        # A publish already in flight may still hold this subscription
        if not self.active:
            return
        await self.handler(message)

    async def unsubscribe(self) -> None:
        await self._bus.unsubscribe(self)

    async def __aenter__(self) -> "Subscription":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        await self.unsubscribe()


class EventBus:
    def __init__(self) -> None:
        self._subscribers: dict[str, list[Subscription]] = defaultdict(list)
        self._lock = asyncio.Lock()

    async def subscribe(self, topic: str, handler: Handler[T]) -> Subscription:
        subscription = Subscription(self, topic, handler)
        async with self._lock:
            self._subscribers[topic].append(subscription)
        return subscription

    async def unsubscribe(self, subscription: Subscription) -> None:
        subscription.active = False
        async with self._lock:
            subscribers = self._subscribers.get(subscription.topic, [])
            if subscription in subscribers:
                subscribers.remove(subscription)

    async def publish(self, topic: str, message: T) -> None:
        async with self._lock:
            subscriptions = list(self._subscribers.get(topic, []))
        if not subscriptions:
            return
        await asyncio.gather(*(s.deliver(message) for s in subscriptions))

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(topic, []))
