from .audio_encoder import AudioEncoderProtocol
from .episode_repository import PodcastEpisodeRepositoryProtocol
from .job_publisher import AudioJobPublisherProtocol
from .media_storage import MediaStorageProtocol
from .quiz_repository import PodcastQuizRepositoryProtocol
from .series_repository import PodcastSeasonRepositoryProtocol, PodcastSeriesRepositoryProtocol

__all__ = [
    "AudioEncoderProtocol",
    "AudioJobPublisherProtocol",
    "MediaStorageProtocol",
    "PodcastEpisodeRepositoryProtocol",
    "PodcastQuizRepositoryProtocol",
    "PodcastSeasonRepositoryProtocol",
    "PodcastSeriesRepositoryProtocol",
]
