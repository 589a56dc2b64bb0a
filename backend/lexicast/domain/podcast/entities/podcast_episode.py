"""Podcast episode entity."""

from dataclasses import dataclass, field
from datetime import datetime

from lexicast.domain.common.entity import Entity
from lexicast.domain.common.exceptions import ValidationError
from lexicast.domain.common.value_objects.ids import EpisodeId, PodcastSeasonId, PodcastSeriesId
from lexicast.domain.podcast.exceptions import InvalidStatusTransitionError
from lexicast.domain.podcast.value_objects.audio_quality import AudioQuality
from lexicast.domain.podcast.value_objects.processing_status import ProcessingStatus

MAX_TITLE_LENGTH = 255


@dataclass
class PodcastEpisode(Entity[EpisodeId]):
    """
    A podcast episode and the processing state of its audio.

    Business Rules:
    - Status changes follow ProcessingStatus transitions; nothing skips a step
    - Renditions are replaced wholesale each time processing starts
    - A failed rendition does not fail the episode; it is recorded per quality
    """

    id: EpisodeId
    series_id: PodcastSeriesId
    season_id: PodcastSeasonId
    episode_number: int
    title: str
    description: str | None = None
    duration_seconds: int = 0
    original_audio_url: str | None = None
    original_file_name: str | None = None
    audio_qualities: list[AudioQuality] = field(default_factory=list)
    thumbnail_url: str | None = None
    release_date: datetime | None = None
    processing_status: ProcessingStatus = ProcessingStatus.UPLOADED
    processing_started_at: datetime | None = None
    processing_completed_at: datetime | None = None
    processing_error: str | None = None
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        _validate_metadata(self.title, self.episode_number)

    @property
    def all_qualities_processed(self) -> bool:
        """True only when processing completed and every rendition was produced."""
        return (
            self.processing_status == ProcessingStatus.COMPLETED
            and bool(self.audio_qualities)
            and all(q.is_processed for q in self.audio_qualities)
        )

    def _transition(self, target: ProcessingStatus) -> None:
        if not self.processing_status.can_transition_to(target):
            raise InvalidStatusTransitionError(self.processing_status.value, target.value)
        self.processing_status = target

    def queue_for_processing(self, original_audio_url: str, original_file_name: str) -> None:
        """
        Attach newly uploaded audio and wait for the transcoding worker.

        Raises:
            InvalidStatusTransitionError: If processing is already pending or running
        """
        self._transition(ProcessingStatus.QUEUED)
        self.original_audio_url = original_audio_url
        self.original_file_name = original_file_name
        self.processing_error = None

    def start_processing(self, at: datetime) -> None:
        self._transition(ProcessingStatus.PROCESSING)
        self.processing_started_at = at
        self.processing_completed_at = None
        self.processing_error = None
        self.audio_qualities = []

    def complete_processing(
        self, duration_seconds: int, audio_qualities: list[AudioQuality], at: datetime
    ) -> None:
        self._transition(ProcessingStatus.COMPLETED)
        self.duration_seconds = duration_seconds
        self.audio_qualities = list(audio_qualities)
        self.processing_completed_at = at

    def fail_processing(self, error: str, at: datetime) -> None:
        self._transition(ProcessingStatus.FAILED)
        self.processing_error = error
        self.processing_completed_at = at

    def update_details(
        self,
        title: str | None = None,
        description: str | None = None,
        episode_number: int | None = None,
        release_date: datetime | None = None,
        is_active: bool | None = None,
    ) -> None:
        """
        Change episode metadata; None leaves a value unchanged.

        Raises:
            ValidationError: If the title or episode number is invalid
        """
        new_title = self.title if title is None else title
        new_number = self.episode_number if episode_number is None else episode_number
        _validate_metadata(new_title, new_number)
        self.title = new_title
        self.episode_number = new_number
        if description is not None:
            self.description = description
        if release_date is not None:
            self.release_date = release_date
        if is_active is not None:
            self.is_active = is_active

    def replace_thumbnail(self, thumbnail_url: str) -> str | None:
        """Set a new thumbnail and return the previous one."""
        previous = self.thumbnail_url
        self.thumbnail_url = thumbnail_url
        return previous

    @classmethod
    def create(
        cls,
        series_id: PodcastSeriesId,
        season_id: PodcastSeasonId,
        episode_number: int,
        title: str,
        description: str | None = None,
        release_date: datetime | None = None,
    ) -> "PodcastEpisode":
        return cls(
            id=EpisodeId.generate(),
            series_id=series_id,
            season_id=season_id,
            episode_number=episode_number,
            title=title,
            description=description,
            release_date=release_date,
        )


def _validate_metadata(title: str, episode_number: int) -> None:
    if not title or not title.strip():
        raise ValidationError("Title cannot be empty", field="title")
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationError(f"Title cannot exceed {MAX_TITLE_LENGTH} characters", field="title")
    if episode_number <= 0:
        raise ValidationError(
            "Episode number must be positive", field="episode_number", value=episode_number
        )
