"""Tests for TranscodeEpisodeUseCase with a fake encoder."""

import io
import threading
from pathlib import Path

import pytest
from sqlalchemy.orm import Session

from lexicast.application.podcast.use_cases.dtos import (
    AudioProcessingJob,
    MediaProbe,
    QualityLevelJob,
    TranscodeOutcome,
)
from lexicast.application.podcast.use_cases.transcode_episode_use_case import (
    TranscodeEpisodeUseCase,
)
from lexicast.domain.podcast.entities.podcast_episode import PodcastEpisode
from lexicast.domain.podcast.value_objects.audio_quality import DEFAULT_QUALITY_LEVELS
from lexicast.domain.podcast.value_objects.processing_status import ProcessingStatus
from lexicast.infrastructure.podcast.repositories import PodcastEpisodeRepository
from lexicast.infrastructure.podcast.storage.media_storage import LocalMediaStorage
from lexicast.utils import utc_now


class FakeEncoder:
    def __init__(
        self,
        duration: int = 754,
        failing_bitrates: frozenset[int] = frozenset(),
        raising_bitrates: frozenset[int] = frozenset(),
        probe_error: Exception | None = None,
    ) -> None:
        self.duration = duration
        self.failing_bitrates = failing_bitrates
        self.raising_bitrates = raising_bitrates
        self.probe_error = probe_error
        self.calls: list[tuple[Path, Path, int]] = []

    async def probe(self, source: Path) -> MediaProbe:
        if self.probe_error is not None:
            raise self.probe_error
        return MediaProbe(duration_seconds=self.duration, file_size=source.stat().st_size)

    async def transcode(self, source: Path, output: Path, bitrate_kbps: int) -> bool:
        self.calls.append((source, output, bitrate_kbps))
        if bitrate_kbps in self.raising_bitrates:
            raise OSError(f"encoder crashed at {bitrate_kbps}k")
        if bitrate_kbps in self.failing_bitrates:
            return False
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(b"\xff" * bitrate_kbps)
        return True


@pytest.fixture
def repository(db_session: Session) -> PodcastEpisodeRepository:
    return PodcastEpisodeRepository(db_session)


def _queue(
    repository: PodcastEpisodeRepository,
    storage: LocalMediaStorage,
    episode: PodcastEpisode,
) -> AudioProcessingJob:
    stored = storage.save_audio(episode, "lesson.mp3", io.BytesIO(b"ID3" + b"\x00" * 997))
    episode.queue_for_processing(stored, "lesson.mp3")
    repository.save(episode)
    return AudioProcessingJob(
        episode_id=episode.id.value,
        original_file_path=stored,
        original_file_name="lesson.mp3",
        queued_at=utc_now(),
        quality_levels=[
            QualityLevelJob(
                quality=level.quality,
                bitrate=level.bitrate,
                output_path=storage.rendition_path(episode, level.quality),
            )
            for level in DEFAULT_QUALITY_LEVELS
        ],
    )


class TestTranscodeEpisode:
    async def test_all_renditions_produced(
        self,
        repository: PodcastEpisodeRepository,
        media_storage: LocalMediaStorage,
        test_episode: PodcastEpisode,
    ) -> None:
        job = _queue(repository, media_storage, test_episode)
        encoder = FakeEncoder()
        use_case = TranscodeEpisodeUseCase(repository, media_storage, encoder)

        outcome = await use_case.process(job)

        assert outcome == TranscodeOutcome.COMPLETED
        episode = repository.find_by_id(test_episode.id)
        assert episode is not None
        assert episode.processing_status == ProcessingStatus.COMPLETED
        assert episode.duration_seconds == 754
        assert episode.processing_started_at is not None
        assert episode.processing_completed_at is not None
        assert [q.quality for q in episode.audio_qualities] == [
            "original",
            "64k",
            "128k",
            "256k",
        ]
        assert episode.audio_qualities[0].file_size == 1000
        assert episode.audio_qualities[2].file_size == 128
        assert episode.all_qualities_processed is True
        assert [call[2] for call in encoder.calls] == [64, 128, 256]

    async def test_failed_rendition_keeps_episode_completed(
        self,
        repository: PodcastEpisodeRepository,
        media_storage: LocalMediaStorage,
        test_episode: PodcastEpisode,
    ) -> None:
        job = _queue(repository, media_storage, test_episode)
        use_case = TranscodeEpisodeUseCase(
            repository, media_storage, FakeEncoder(failing_bitrates=frozenset({128}))
        )

        outcome = await use_case.process(job)

        assert outcome == TranscodeOutcome.COMPLETED
        episode = repository.find_by_id(test_episode.id)
        assert episode is not None
        assert episode.processing_status == ProcessingStatus.COMPLETED
        assert episode.all_qualities_processed is False
        by_quality = {q.quality: q for q in episode.audio_qualities}
        assert by_quality["128k"].is_processed is False
        assert by_quality["128k"].file_size == 0
        assert by_quality["64k"].is_processed is True
        assert by_quality["256k"].is_processed is True

    async def test_encoder_exception_only_fails_that_rendition(
        self,
        repository: PodcastEpisodeRepository,
        media_storage: LocalMediaStorage,
        test_episode: PodcastEpisode,
    ) -> None:
        job = _queue(repository, media_storage, test_episode)
        encoder = FakeEncoder(raising_bitrates=frozenset({128}))
        use_case = TranscodeEpisodeUseCase(repository, media_storage, encoder)

        outcome = await use_case.process(job)

        assert outcome == TranscodeOutcome.COMPLETED
        assert [call[2] for call in encoder.calls] == [64, 128, 256]
        episode = repository.find_by_id(test_episode.id)
        assert episode is not None
        assert episode.processing_status == ProcessingStatus.COMPLETED
        assert episode.processing_error is None
        by_quality = {q.quality: q for q in episode.audio_qualities}
        assert by_quality["128k"].is_processed is False
        assert by_quality["64k"].is_processed is True
        assert by_quality["256k"].is_processed is True

    async def test_repository_calls_run_off_the_event_loop(
        self,
        repository: PodcastEpisodeRepository,
        media_storage: LocalMediaStorage,
        test_episode: PodcastEpisode,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        job = _queue(repository, media_storage, test_episode)
        loop_thread = threading.get_ident()
        threads: list[int] = []

        def recorded(method):
            def call(*args, **kwargs):
                threads.append(threading.get_ident())
                return method(*args, **kwargs)

            return call

        monkeypatch.setattr(repository, "find_by_id", recorded(repository.find_by_id))
        monkeypatch.setattr(repository, "save", recorded(repository.save))
        use_case = TranscodeEpisodeUseCase(repository, media_storage, FakeEncoder())

        outcome = await use_case.process(job)

        assert outcome == TranscodeOutcome.COMPLETED
        assert len(threads) >= 3
        assert loop_thread not in threads

    async def test_unreadable_source_marks_failed(
        self,
        repository: PodcastEpisodeRepository,
        media_storage: LocalMediaStorage,
        test_episode: PodcastEpisode,
    ) -> None:
        job = _queue(repository, media_storage, test_episode)
        use_case = TranscodeEpisodeUseCase(
            repository, media_storage, FakeEncoder(probe_error=RuntimeError("ffprobe crashed"))
        )

        outcome = await use_case.process(job)

        assert outcome == TranscodeOutcome.FAILED
        episode = repository.find_by_id(test_episode.id)
        assert episode is not None
        assert episode.processing_status == ProcessingStatus.FAILED
        assert episode.processing_error == "ffprobe crashed"
        assert episode.audio_qualities == []

    async def test_missing_source_marks_failed(
        self,
        repository: PodcastEpisodeRepository,
        media_storage: LocalMediaStorage,
        test_episode: PodcastEpisode,
    ) -> None:
        job = _queue(repository, media_storage, test_episode)
        media_storage.delete(job.original_file_path)

        outcome = await TranscodeEpisodeUseCase(repository, media_storage, FakeEncoder()).process(
            job
        )

        assert outcome == TranscodeOutcome.FAILED

    async def test_redelivered_job_is_reprocessed(
        self,
        repository: PodcastEpisodeRepository,
        media_storage: LocalMediaStorage,
        test_episode: PodcastEpisode,
    ) -> None:
        """A job interrupted mid-processing runs again from the start."""
        job = _queue(repository, media_storage, test_episode)
        episode = repository.find_by_id(test_episode.id)
        assert episode is not None
        episode.start_processing(utc_now())
        repository.save(episode)

        outcome = await TranscodeEpisodeUseCase(repository, media_storage, FakeEncoder()).process(
            job
        )

        assert outcome == TranscodeOutcome.COMPLETED

    async def test_job_for_unqueued_episode_is_skipped(
        self,
        repository: PodcastEpisodeRepository,
        media_storage: LocalMediaStorage,
        test_episode: PodcastEpisode,
    ) -> None:
        job = _queue(repository, media_storage, test_episode)
        use_case = TranscodeEpisodeUseCase(repository, media_storage, FakeEncoder())
        assert await use_case.process(job) == TranscodeOutcome.COMPLETED

        # A stale duplicate of the same job arrives after completion
        encoder = FakeEncoder()
        outcome = await TranscodeEpisodeUseCase(repository, media_storage, encoder).process(job)

        assert outcome == TranscodeOutcome.SKIPPED
        assert encoder.calls == []

    async def test_missing_episode(
        self,
        repository: PodcastEpisodeRepository,
        media_storage: LocalMediaStorage,
    ) -> None:
        job = AudioProcessingJob(
            episode_id=123456,
            original_file_path="podcasts/1/1/123456/original.mp3",
            original_file_name="original.mp3",
            queued_at=utc_now(),
        )

        outcome = await TranscodeEpisodeUseCase(repository, media_storage, FakeEncoder()).process(
            job
        )

        assert outcome == TranscodeOutcome.EPISODE_MISSING
