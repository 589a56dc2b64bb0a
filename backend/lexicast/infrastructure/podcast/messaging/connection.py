"""
Redis Streams connection for the audio processing queue.

The stream plus one consumer group gives work-queue semantics: each entry
goes to one consumer, stays pending until acknowledged, and can be copied to
a dead-letter stream or re-added for another attempt.
"""

import asyncio
import logging
import socket
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import redis.asyncio as aioredis
from redis.exceptions import RedisError, ResponseError

logger = logging.getLogger(__name__)

PAYLOAD_FIELD = "payload"
DEAD_LETTER_SUFFIX = ":dead"


@dataclass(frozen=True)
class QueueDelivery:
    """One stream entry handed to a consumer."""

    message_id: str
    fields: dict[str, str] = field(default_factory=dict)

    @property
    def payload(self) -> str | None:
        return self.fields.get(PAYLOAD_FIELD)


class QueueConnectionManager:
    """
    Owns the Redis client shared by publishers and the worker.

    The lock guards connecting and reconnecting only; commands run on the
    shared client without it.
    """

    def __init__(
        self,
        redis_url: str,
        stream: str,
        group: str,
        consumer: str = "",
        block_ms: int = 5000,
        max_len: int = 10000,
        health_check_interval: float = 1.0,
        retry_delay: float = 5.0,
        client_factory: Callable[[], Any] | None = None,
    ) -> None:
        self.redis_url = redis_url
        self.stream = stream
        self.group = group
        self.consumer = consumer or socket.gethostname()
        self.block_ms = block_ms
        self.max_len = max_len
        self.health_check_interval = health_check_interval
        self.retry_delay = retry_delay
        self._client_factory = client_factory or self._default_client
        self._client: Any | None = None
        self._lock = asyncio.Lock()
        self._pending_drained = False
        self.is_healthy = False

    @property
    def dead_letter_stream(self) -> str:
        return f"{self.stream}{DEAD_LETTER_SUFFIX}"

    def _default_client(self) -> aioredis.Redis:
        return aioredis.from_url(self.redis_url, decode_responses=True)

    async def connect(self) -> Any:
        """
        Connect and declare the stream and consumer group if needed.

        Raises:
            RedisError: If Redis is unreachable
        """
        async with self._lock:
            if self._client is None:
                client = self._client_factory()
                try:
                    await client.ping()
                    await self._declare(client)
                except (RedisError, OSError):
                    await client.aclose()
                    raise
                self._client = client
                self.is_healthy = True
                logger.info(f"Connected to queue {self.stream} as {self.consumer}")
            return self._client

    async def _declare(self, client: Any) -> None:
        try:
            await client.xgroup_create(self.stream, self.group, id="$", mkstream=True)
        except ResponseError as e:
            if "BUSYGROUP" not in str(e):
                raise

    async def _get_client(self) -> Any:
        if self._client is not None:
            return self._client
        return await self.connect()

    async def publish(self, payload: str) -> str:
        client = await self._get_client()
        return await client.xadd(
            self.stream, {PAYLOAD_FIELD: payload}, maxlen=self.max_len, approximate=True
        )

    async def read_one(self) -> QueueDelivery | None:
        """
        Wait up to block_ms for the next entry.

        Entries this consumer received but never acknowledged, for example
        before a crash, are handed out again first.
        """
        client = await self._get_client()
        if not self._pending_drained:
            delivery = await self._read(client, "0", block=None)
            if delivery is not None:
                return delivery
            self._pending_drained = True
        return await self._read(client, ">", block=self.block_ms)

    def reset_pending(self) -> None:
        """Hand out this consumer's unacknowledged entries again on the next read."""
        self._pending_drained = False

    async def _read(self, client: Any, start_id: str, block: int | None) -> QueueDelivery | None:
        response = await client.xreadgroup(
            self.group, self.consumer, {self.stream: start_id}, count=1, block=block
        )
        for message_id, fields in _entries(response):
            if fields is None:
                # Pending entry whose body was already deleted
                await client.xack(self.stream, self.group, message_id)
                continue
            return QueueDelivery(message_id=message_id, fields=dict(fields))
        return None

    async def ack(self, delivery: QueueDelivery) -> None:
        client = await self._get_client()
        await client.xack(self.stream, self.group, delivery.message_id)
        await client.xdel(self.stream, delivery.message_id)

    async def dead_letter(self, delivery: QueueDelivery, reason: str) -> None:
        client = await self._get_client()
        await client.xadd(
            self.dead_letter_stream,
            {**delivery.fields, "reason": reason, "sourceId": delivery.message_id},
            maxlen=self.max_len,
            approximate=True,
        )
        await self.ack(delivery)
        logger.warning(f"Dead-lettered {delivery.message_id}: {reason}")

    async def requeue(self, delivery: QueueDelivery) -> None:
        client = await self._get_client()
        await client.xadd(self.stream, delivery.fields, maxlen=self.max_len, approximate=True)
        await self.ack(delivery)
        logger.info(f"Requeued {delivery.message_id}")

    async def monitor(self, stop_event: asyncio.Event) -> None:
        """Ping on an interval and reconnect when Redis goes away."""
        while not stop_event.is_set():
            delay = self.health_check_interval
            try:
                client = await self._get_client()
                await client.ping()
                self.is_healthy = True
            except (RedisError, OSError) as e:
                self.is_healthy = False
                logger.warning(f"Queue health check failed: {e!s}")
                if not await self._reconnect():
                    delay = self.retry_delay
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=delay)
            except TimeoutError:
                pass

    async def _reconnect(self) -> bool:
        await self._drop_client()
        try:
            await self.connect()
        except (RedisError, OSError) as e:
            logger.error(f"Queue reconnect failed, retrying in {self.retry_delay}s: {e!s}")
            return False
        self.reset_pending()
        logger.info(f"queue_reconnected: {self.stream} as {self.consumer}")
        return True

    async def _drop_client(self) -> None:
        async with self._lock:
            client, self._client = self._client, None
            self.is_healthy = False
        if client is not None:
            try:
                await client.aclose()
            except (RedisError, OSError) as e:
                logger.debug(f"Ignoring error while closing queue client: {e!s}")

    async def close(self) -> None:
        await self._drop_client()
        logger.info(f"Closed queue connection for {self.stream}")


def _entries(response: Any) -> list[tuple[str, dict[str, str] | None]]:
    """Flatten an XREADGROUP reply: [[stream, [(id, fields), ...]], ...]."""
    if not response:
        return []
    return [entry for _, entries in response for entry in entries]
