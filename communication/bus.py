import asyncio

from internal.logging import get_logger


class Subscriber:
    __slots__ = ("name", "queue", "received", "dropped")

    def __init__(self, name, queue):
        self.name = name
        self.queue = queue
        self.received = 0
        self.dropped = 0


class EventBus:
    """Copy-on-write pub/sub between the stepping loop and its consumers.

    Publish path is lock-free. A full subscriber queue drops the new item,
    except for items published with ``keep=True`` (terminal snapshots and
    stop events), which evict the oldest queued item instead.
    """

    def __init__(self, queue_size=50):
        self._lock = asyncio.Lock()
        self._subscribers = {}
        self._subscribers_snapshot = []
        self._queue_size = queue_size
        self._log = get_logger()
        self.total_published = 0
        self.total_delivered = 0
        self.total_dropped = 0

    async def subscribe(self, name, max_queue_size=None):
        async with self._lock:
            if name in self._subscribers:
                return self._subscribers[name]
            subscriber = Subscriber(name, asyncio.Queue(maxsize=max_queue_size or self._queue_size))
            self._subscribers[name] = subscriber
            self._subscribers_snapshot = list(self._subscribers.values())
            self._log.debug("subscribe", subscriber=name)
            return subscriber

    async def unsubscribe(self, name):
        async with self._lock:
            if self._subscribers.pop(name, None) is None:
                return False
            self._subscribers_snapshot = list(self._subscribers.values())
            self._log.debug("unsubscribe", subscriber=name)
            return True

    def _deliver(self, subscriber, item, keep):
        """Queue item for one subscriber. Returns the number of items lost."""
        try:
            subscriber.queue.put_nowait(item)
            return 0
        except asyncio.QueueFull:
            subscriber.dropped += 1
            if not keep:
                return 1
        subscriber.queue.get_nowait()
        subscriber.queue.put_nowait(item)
        return 1

    async def publish(self, item, keep=False):
        delivered = dropped = 0
        for subscriber in self._subscribers_snapshot:
            lost = self._deliver(subscriber, item, keep)
            dropped += lost
            if keep or not lost:
                subscriber.received += 1
                delivered += 1
        self.total_published += 1
        self.total_delivered += delivered
        self.total_dropped += dropped
        return delivered

    def get_stats(self):
        return {
            "subscriber_count": len(self._subscribers_snapshot),
            "total_published": self.total_published,
            "total_delivered": self.total_delivered,
            "total_dropped": self.total_dropped,
        }
