"""Tests for EpisodeMediaUploadUseCase size and type checks."""

import io
import threading
from pathlib import Path

import pytest
from conftest import FakeJobPublisher
from sqlalchemy.orm import Session

from lexicast.application.podcast.use_cases.episode_media_upload_use_case import (
    EpisodeMediaUploadUseCase,
)
from lexicast.domain.podcast.entities.podcast_episode import PodcastEpisode
from lexicast.domain.podcast.value_objects.processing_status import ProcessingStatus
from lexicast.exceptions import InvalidMediaFileError
from lexicast.infrastructure.podcast.repositories import PodcastEpisodeRepository
from lexicast.infrastructure.podcast.storage.media_storage import BYTES_PER_MB, LocalMediaStorage


class UnreadableStream(io.RawIOBase):
    """Upload body that fails the test if anything tries to read it."""

    def __init__(self) -> None:
        self.reads = 0

    def readable(self) -> bool:
        return True

    def readinto(self, buffer: bytearray) -> int:  # type: ignore[override]
        self.reads += 1
        raise AssertionError("upload body was read before validation")


@pytest.fixture
def small_storage(tmp_path: Path) -> LocalMediaStorage:
    return LocalMediaStorage(public_root=tmp_path / "public", max_audio_mb=1, max_image_mb=1)


@pytest.fixture
def use_case(
    db_session: Session, small_storage: LocalMediaStorage, job_publisher: FakeJobPublisher
) -> EpisodeMediaUploadUseCase:
    return EpisodeMediaUploadUseCase(
        PodcastEpisodeRepository(db_session), small_storage, job_publisher
    )


class TestUploadLimits:
    async def test_oversized_audio_rejected_without_reading(
        self,
        use_case: EpisodeMediaUploadUseCase,
        small_storage: LocalMediaStorage,
        test_episode: PodcastEpisode,
        job_publisher: FakeJobPublisher,
    ) -> None:
        stream = UnreadableStream()

        with pytest.raises(InvalidMediaFileError) as exc_info:
            await use_case.upload_audio(
                test_episode.id.value, "lesson.mp3", "audio/mpeg", BYTES_PER_MB + 1, stream
            )

        assert exc_info.value.message == "Invalid audio file: file exceeds 1 MB limit"
        assert stream.reads == 0
        assert not (small_storage.public_root / "podcasts").exists()
        assert job_publisher.jobs == []

    async def test_wrong_type_rejected_without_reading(
        self,
        use_case: EpisodeMediaUploadUseCase,
        small_storage: LocalMediaStorage,
        test_episode: PodcastEpisode,
    ) -> None:
        stream = UnreadableStream()

        with pytest.raises(InvalidMediaFileError):
            await use_case.upload_audio(
                test_episode.id.value, "lesson.wav", "audio/wav", 10, stream
            )

        assert stream.reads == 0
        assert not (small_storage.public_root / "podcasts").exists()

    def test_oversized_thumbnail_rejected_without_reading(
        self,
        use_case: EpisodeMediaUploadUseCase,
        small_storage: LocalMediaStorage,
        test_episode: PodcastEpisode,
    ) -> None:
        stream = UnreadableStream()

        with pytest.raises(InvalidMediaFileError):
            use_case.upload_thumbnail(
                test_episode.id.value, "cover.png", "image/png", BYTES_PER_MB + 1, stream
            )

        assert stream.reads == 0
        assert not (small_storage.public_root / "thumbnails").exists()

    async def test_accepted_audio_is_streamed_to_storage(
        self,
        use_case: EpisodeMediaUploadUseCase,
        small_storage: LocalMediaStorage,
        test_episode: PodcastEpisode,
        job_publisher: FakeJobPublisher,
    ) -> None:
        payload = b"ID3" + b"\x00" * 4093

        episode = await use_case.upload_audio(
            test_episode.id.value, "lesson.mp3", "audio/mpeg", len(payload), io.BytesIO(payload)
        )

        assert episode.processing_status == ProcessingStatus.QUEUED
        assert episode.original_audio_url is not None
        assert small_storage.resolve(episode.original_audio_url).read_bytes() == payload
        assert len(job_publisher.jobs) == 1

    async def test_blocking_work_runs_off_the_event_loop(
        self,
        use_case: EpisodeMediaUploadUseCase,
        small_storage: LocalMediaStorage,
        test_episode: PodcastEpisode,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        loop_thread = threading.get_ident()
        threads: dict[str, int] = {}

        def recorded(name, method):
            def call(*args, **kwargs):
                threads[name] = threading.get_ident()
                return method(*args, **kwargs)

            return call

        repository = use_case.episode_repository
        monkeypatch.setattr(repository, "find_by_id", recorded("find", repository.find_by_id))
        monkeypatch.setattr(
            repository, "save_if_status", recorded("save", repository.save_if_status)
        )
        monkeypatch.setattr(
            small_storage, "save_audio", recorded("store", small_storage.save_audio)
        )

        await use_case.upload_audio(
            test_episode.id.value, "lesson.mp3", "audio/mpeg", 4, io.BytesIO(b"ID3\x00")
        )

        assert set(threads) == {"find", "save", "store"}
        assert loop_thread not in threads.values()
