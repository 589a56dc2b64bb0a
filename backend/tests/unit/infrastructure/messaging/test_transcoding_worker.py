"""Tests for TranscodingWorker and the Redis Streams queue it consumes."""

import asyncio
import json
from itertools import count
from typing import Any

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError

from lexicast.application.podcast.use_cases.dtos import (
    AudioProcessingJob,
    QualityLevelJob,
    TranscodeOutcome,
)
from lexicast.infrastructure.podcast.messaging import (
    AudioProcessingMessage,
    QueueConnectionManager,
    QueueDelivery,
)
from lexicast.infrastructure.podcast.workers import TranscodingWorker
from lexicast.utils import utc_now

STREAM = "audio-processing"
GROUP = "transcoders"


class InMemoryStreams:
    """Just enough of the Redis Streams commands for one consumer group."""

    def __init__(self) -> None:
        self.streams: dict[str, list[tuple[str, dict[str, str]]]] = {}
        self.pending: dict[str, dict[str, str]] = {}
        self.delivered: set[str] = set()
        self.closed = False
        self._ids = count(1)

    async def ping(self) -> bool:
        return True

    async def xgroup_create(self, stream: str, group: str, id: str, mkstream: bool) -> bool:
        self.streams.setdefault(stream, [])
        return True

    async def xadd(
        self, stream: str, fields: dict[str, str], maxlen: int, approximate: bool
    ) -> str:
        message_id = f"{next(self._ids)}-0"
        self.streams.setdefault(stream, []).append((message_id, dict(fields)))
        return message_id

    async def xreadgroup(
        self,
        group: str,
        consumer: str,
        streams: dict[str, str],
        count: int,
        block: int | None,
    ) -> list[Any]:
        ((stream, start),) = streams.items()
        if start == "0":
            entries = list(self.pending.items())[:count]
            return [[stream, entries]]
        for message_id, fields in self.streams.get(stream, []):
            if message_id not in self.delivered:
                self.delivered.add(message_id)
                self.pending[message_id] = fields
                return [[stream, [(message_id, fields)]]]
        return []

    async def xack(self, stream: str, group: str, message_id: str) -> int:
        return 1 if self.pending.pop(message_id, None) is not None else 0

    async def xdel(self, stream: str, message_id: str) -> int:
        before = len(self.streams.get(stream, []))
        self.streams[stream] = [e for e in self.streams.get(stream, []) if e[0] != message_id]
        return before - len(self.streams[stream])

    async def aclose(self) -> None:
        self.closed = True


class FlakyStreams(InMemoryStreams):
    """InMemoryStreams whose ping and reads can be made to fail."""

    def __init__(self, busy_group: bool = False) -> None:
        super().__init__()
        self.busy_group = busy_group
        self.ping_failures = 0
        self.read_failures = 0
        self.group_creates = 0

    async def ping(self) -> bool:
        if self.ping_failures:
            self.ping_failures -= 1
            raise RedisConnectionError("Connection reset by peer")
        return True

    async def xgroup_create(self, stream: str, group: str, id: str, mkstream: bool) -> bool:
        self.group_creates += 1
        if self.busy_group:
            raise ResponseError("BUSYGROUP Consumer Group name already exists")
        return await super().xgroup_create(stream, group, id, mkstream)

    async def xreadgroup(
        self,
        group: str,
        consumer: str,
        streams: dict[str, str],
        count: int,
        block: int | None,
    ) -> list[Any]:
        if self.read_failures:
            self.read_failures -= 1
            raise RedisConnectionError("Connection closed by server")
        return await super().xreadgroup(group, consumer, streams, count, block)


def _job(episode_id: int = 7) -> AudioProcessingJob:
    return AudioProcessingJob(
        episode_id=episode_id,
        original_file_path=f"podcasts/1/1/{episode_id}/original_20260101_120000.mp3",
        original_file_name="lesson.mp3",
        queued_at=utc_now(),
        quality_levels=[
            QualityLevelJob(
                quality="64k", bitrate=64, output_path=f"podcasts/1/1/{episode_id}/64k.mp3"
            )
        ],
    )


def _delivery(payload: str | None, message_id: str = "100-0") -> QueueDelivery:
    fields = {} if payload is None else {"payload": payload}
    return QueueDelivery(message_id=message_id, fields=fields)


@pytest.fixture
def redis_client() -> InMemoryStreams:
    return InMemoryStreams()


@pytest.fixture
def connection(redis_client: InMemoryStreams) -> QueueConnectionManager:
    return QueueConnectionManager(
        redis_url="redis://unused",
        stream=STREAM,
        group=GROUP,
        consumer="worker-1",
        block_ms=10,
        health_check_interval=0.01,
        retry_delay=0,
        client_factory=lambda: redis_client,
    )


def _processor(outcome: TranscodeOutcome, seen: list[AudioProcessingJob]):
    async def process(job: AudioProcessingJob) -> TranscodeOutcome:
        seen.append(job)
        return outcome

    return process


class TestHandleDelivery:
    async def test_completed_job_is_acknowledged(
        self, connection: QueueConnectionManager, redis_client: InMemoryStreams
    ) -> None:
        await connection.publish(AudioProcessingMessage.from_job(_job()).encode())
        delivery = await connection.read_one()
        assert delivery is not None
        seen: list[AudioProcessingJob] = []
        worker = TranscodingWorker(connection, _processor(TranscodeOutcome.COMPLETED, seen))

        outcome = await worker.handle_delivery(delivery)

        assert outcome == TranscodeOutcome.COMPLETED
        assert seen[0].episode_id == 7
        assert seen[0].quality_levels[0].bitrate == 64
        assert redis_client.pending == {}
        assert redis_client.streams[STREAM] == []

    async def test_failed_job_is_acknowledged(
        self, connection: QueueConnectionManager, redis_client: InMemoryStreams
    ) -> None:
        await connection.publish(AudioProcessingMessage.from_job(_job()).encode())
        delivery = await connection.read_one()
        assert delivery is not None
        worker = TranscodingWorker(connection, _processor(TranscodeOutcome.FAILED, []))

        assert await worker.handle_delivery(delivery) == TranscodeOutcome.FAILED
        assert redis_client.pending == {}
        assert redis_client.streams.get(connection.dead_letter_stream) is None

    async def test_missing_episode_is_dead_lettered(
        self, connection: QueueConnectionManager, redis_client: InMemoryStreams
    ) -> None:
        await connection.publish(AudioProcessingMessage.from_job(_job(42)).encode())
        delivery = await connection.read_one()
        assert delivery is not None
        worker = TranscodingWorker(connection, _processor(TranscodeOutcome.EPISODE_MISSING, []))

        outcome = await worker.handle_delivery(delivery)

        assert outcome == TranscodeOutcome.EPISODE_MISSING
        ((_, fields),) = redis_client.streams[connection.dead_letter_stream]
        assert fields["reason"] == "episode 42 not found"
        assert fields["sourceId"] == delivery.message_id
        assert json.loads(fields["payload"])["episodeId"] == 42
        assert redis_client.pending == {}

    async def test_undecodable_payload_is_dead_lettered(
        self, connection: QueueConnectionManager, redis_client: InMemoryStreams
    ) -> None:
        await connection.connect()
        seen: list[AudioProcessingJob] = []
        worker = TranscodingWorker(connection, _processor(TranscodeOutcome.COMPLETED, seen))

        outcome = await worker.handle_delivery(_delivery('{"episodeId": "seven"}'))

        assert outcome is None
        assert seen == []
        ((_, fields),) = redis_client.streams[connection.dead_letter_stream]
        assert fields["reason"] == "invalid payload"

    async def test_missing_payload_is_dead_lettered(
        self, connection: QueueConnectionManager, redis_client: InMemoryStreams
    ) -> None:
        await connection.connect()
        worker = TranscodingWorker(connection, _processor(TranscodeOutcome.COMPLETED, []))

        assert await worker.handle_delivery(_delivery(None)) is None
        ((_, fields),) = redis_client.streams[connection.dead_letter_stream]
        assert fields["reason"] == "missing payload"

    async def test_processor_error_requeues_job(
        self, connection: QueueConnectionManager, redis_client: InMemoryStreams
    ) -> None:
        payload = AudioProcessingMessage.from_job(_job()).encode()
        await connection.publish(payload)
        delivery = await connection.read_one()
        assert delivery is not None

        async def explode(job: AudioProcessingJob) -> TranscodeOutcome:
            raise RuntimeError("database went away")

        worker = TranscodingWorker(connection, explode)

        assert await worker.handle_delivery(delivery) is None
        ((message_id, fields),) = redis_client.streams[STREAM]
        assert message_id != delivery.message_id
        assert fields["payload"] == payload
        assert delivery.message_id not in redis_client.pending


class TestQueueConnection:
    async def test_unacknowledged_entries_are_redelivered_first(
        self, redis_client: InMemoryStreams
    ) -> None:
        """A restarted consumer picks up what it received before the crash."""

        def manager() -> QueueConnectionManager:
            return QueueConnectionManager(
                redis_url="redis://unused",
                stream=STREAM,
                group=GROUP,
                consumer="worker-1",
                client_factory=lambda: redis_client,
            )

        first = manager()
        await first.publish("one")
        await first.publish("two")
        crashed = await first.read_one()
        assert crashed is not None

        restarted = manager()
        redelivered = await restarted.read_one()
        assert redelivered == crashed
        assert redelivered is not None
        await restarted.ack(redelivered)
        following = await restarted.read_one()

        assert following is not None
        assert following.payload == "two"

    async def test_close_releases_client(
        self, connection: QueueConnectionManager, redis_client: InMemoryStreams
    ) -> None:
        await connection.connect()
        assert connection.is_healthy is True

        await connection.close()

        assert redis_client.closed is True
        assert connection.is_healthy is False


class TestRunLoop:
    async def test_run_processes_until_stopped(
        self, connection: QueueConnectionManager, redis_client: InMemoryStreams
    ) -> None:
        await connection.publish(AudioProcessingMessage.from_job(_job(1)).encode())
        await connection.publish(AudioProcessingMessage.from_job(_job(2)).encode())
        seen: list[AudioProcessingJob] = []
        worker: TranscodingWorker

        async def process(job: AudioProcessingJob) -> TranscodeOutcome:
            seen.append(job)
            if len(seen) == 2:
                worker.stop()
            return TranscodeOutcome.COMPLETED

        worker = TranscodingWorker(connection, process)

        await asyncio.wait_for(worker.run(), timeout=5)

        assert [job.episode_id for job in seen] == [1, 2]
        assert worker.is_stopping is True
        assert redis_client.streams[STREAM] == []
        assert redis_client.closed is True

    async def test_stop_before_run(self, connection: QueueConnectionManager) -> None:
        worker = TranscodingWorker(connection, _processor(TranscodeOutcome.COMPLETED, []))
        worker.stop()

        await asyncio.wait_for(worker.run(), timeout=5)

        assert worker.is_stopping is True


def _flaky_manager(factory: Any) -> QueueConnectionManager:
    return QueueConnectionManager(
        redis_url="redis://unused",
        stream=STREAM,
        group=GROUP,
        consumer="worker-1",
        block_ms=10,
        health_check_interval=0.01,
        retry_delay=0,
        client_factory=factory,
    )


async def _wait_until(condition: Any, timeout: float = 5.0) -> None:
    async with asyncio.timeout(timeout):
        while not condition():
            await asyncio.sleep(0.01)


class TestQueueReconnect:
    async def test_existing_group_is_reused(self) -> None:
        redis_client = FlakyStreams(busy_group=True)
        connection = _flaky_manager(lambda: redis_client)

        await connection.connect()

        assert connection.is_healthy is True
        assert redis_client.group_creates == 1
        assert redis_client.closed is False

    async def test_other_group_errors_propagate(self) -> None:
        redis_client = FlakyStreams()

        async def broken_create(*args: Any, **kwargs: Any) -> bool:
            raise ResponseError("WRONGTYPE Operation against a key holding the wrong kind of value")

        redis_client.xgroup_create = broken_create  # type: ignore[method-assign]
        connection = _flaky_manager(lambda: redis_client)

        with pytest.raises(ResponseError):
            await connection.connect()

        assert connection.is_healthy is False
        assert redis_client.closed is True

    async def test_monitor_reconnects_and_redelivers_pending(self) -> None:
        redis_client = FlakyStreams()
        created: list[FlakyStreams] = []

        def factory() -> FlakyStreams:
            created.append(redis_client)
            return redis_client

        connection = _flaky_manager(factory)
        await connection.publish("one")
        in_flight = await connection.read_one()
        assert in_flight is not None

        redis_client.busy_group = True
        redis_client.ping_failures = 1
        stop = asyncio.Event()
        monitor = asyncio.create_task(connection.monitor(stop))
        await _wait_until(lambda: len(created) == 2 and connection.is_healthy)
        stop.set()
        await asyncio.wait_for(monitor, timeout=5)

        assert redis_client.closed is True
        assert redis_client.group_creates == 2
        assert await connection.read_one() == in_flight

    async def test_monitor_retries_failed_reconnect(self) -> None:
        redis_client = FlakyStreams(busy_group=True)
        attempts: list[int] = []

        def factory() -> FlakyStreams:
            attempts.append(len(attempts) + 1)
            if len(attempts) == 2:
                raise OSError("Connection refused")
            return redis_client

        connection = _flaky_manager(factory)
        await connection.connect()
        redis_client.ping_failures = 1

        stop = asyncio.Event()
        monitor = asyncio.create_task(connection.monitor(stop))
        await _wait_until(lambda: len(attempts) == 3 and connection.is_healthy)
        stop.set()
        await asyncio.wait_for(monitor, timeout=5)

        assert connection.is_healthy is True

    async def test_worker_rereads_pending_after_queue_error(self) -> None:
        redis_client = FlakyStreams()
        connection = _flaky_manager(lambda: redis_client)
        await connection.publish(AudioProcessingMessage.from_job(_job(1)).encode())
        # Received by an earlier loop iteration but never acknowledged
        assert await connection.read_one() is not None
        redis_client.read_failures = 1
        seen: list[AudioProcessingJob] = []
        worker: TranscodingWorker

        async def process(job: AudioProcessingJob) -> TranscodeOutcome:
            seen.append(job)
            worker.stop()
            return TranscodeOutcome.COMPLETED

        worker = TranscodingWorker(connection, process)

        await asyncio.wait_for(worker.run(), timeout=5)

        assert [job.episode_id for job in seen] == [1]
        assert redis_client.pending == {}
