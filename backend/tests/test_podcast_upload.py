"""Tests for podcast episode media upload endpoints."""

from conftest import FakeJobPublisher
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from lexicast.domain.common.value_objects.ids import EpisodeId
from lexicast.domain.podcast.entities.podcast_episode import PodcastEpisode
from lexicast.infrastructure.podcast.repositories import PodcastEpisodeRepository
from lexicast.infrastructure.podcast.storage.media_storage import LocalMediaStorage
from lexicast.utils import utc_now

MP3_BYTES = b"ID3\x03\x00\x00\x00\x00\x00\x00" + b"\xff\xfb\x90\x00" * 256


def _upload_audio(
    client: TestClient,
    headers: dict[str, str],
    episode_id: int,
    file_name: str = "lesson.mp3",
    content: bytes = MP3_BYTES,
    content_type: str = "audio/mpeg",
):
    return client.post(
        f"/api/admin/Podcast/episodes/{episode_id}/upload-audio",
        files={"file": (file_name, content, content_type)},
        headers=headers,
    )


class TestUploadAudio:
    """Test suite for POST /admin/Podcast/episodes/{id}/upload-audio."""

    def test_upload_queues_job(
        self,
        client: TestClient,
        admin_headers: dict[str, str],
        test_episode: PodcastEpisode,
        job_publisher: FakeJobPublisher,
        media_storage: LocalMediaStorage,
    ) -> None:
        response = _upload_audio(client, admin_headers, test_episode.id.value)

        assert response.status_code == status.HTTP_202_ACCEPTED
        body = response.json()
        assert body["message"] == "Audio queued for processing"
        data = body["data"]
        assert data["processing_status"] == "Queued"
        assert data["original_file_name"] == "lesson.mp3"
        assert data["original_audio_url"].startswith(
            f"podcasts/{test_episode.series_id.value}/{test_episode.season_id.value}/"
            f"{test_episode.id.value}/original_"
        )
        assert data["all_qualities_processed"] is False

        stored = media_storage.resolve(data["original_audio_url"])
        assert stored.read_bytes() == MP3_BYTES

        assert len(job_publisher.jobs) == 1
        job = job_publisher.jobs[0]
        assert job.episode_id == test_episode.id.value
        assert job.original_file_path == data["original_audio_url"]
        assert [(q.quality, q.bitrate) for q in job.quality_levels] == [
            ("64k", 64),
            ("128k", 128),
            ("256k", 256),
        ]
        assert job.quality_levels[1].output_path.endswith(f"/{test_episode.id.value}/128k.mp3")

    def test_content_type_parameters_are_ignored(
        self,
        client: TestClient,
        admin_headers: dict[str, str],
        test_episode: PodcastEpisode,
    ) -> None:
        response = _upload_audio(
            client,
            admin_headers,
            test_episode.id.value,
            content_type="audio/mpeg; charset=binary",
        )

        assert response.status_code == status.HTTP_202_ACCEPTED

    def test_wrong_extension_rejected(
        self,
        client: TestClient,
        admin_headers: dict[str, str],
        test_episode: PodcastEpisode,
        job_publisher: FakeJobPublisher,
    ) -> None:
        response = _upload_audio(client, admin_headers, test_episode.id.value, file_name="x.wav")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "extension must be one of .mp3" in response.json()["message"]
        assert job_publisher.jobs == []

    def test_wrong_content_type_rejected(
        self,
        client: TestClient,
        admin_headers: dict[str, str],
        test_episode: PodcastEpisode,
    ) -> None:
        response = _upload_audio(
            client, admin_headers, test_episode.id.value, content_type="video/mp4"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "content type video/mp4 is not allowed" in response.json()["message"]

    def test_empty_file_rejected(
        self,
        client: TestClient,
        admin_headers: dict[str, str],
        test_episode: PodcastEpisode,
        media_storage: LocalMediaStorage,
    ) -> None:
        response = _upload_audio(client, admin_headers, test_episode.id.value, content=b"")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "file is empty" in response.json()["message"]
        assert not (media_storage.public_root / "podcasts").exists()

    def test_oversized_file_rejected_before_storage(
        self,
        client: TestClient,
        admin_headers: dict[str, str],
        test_episode: PodcastEpisode,
        media_storage: LocalMediaStorage,
        job_publisher: FakeJobPublisher,
    ) -> None:
        media_storage.max_audio_bytes = len(MP3_BYTES) - 1

        response = _upload_audio(client, admin_headers, test_episode.id.value)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "exceeds" in response.json()["message"]
        assert not (media_storage.public_root / "podcasts").exists()
        assert job_publisher.jobs == []

    def test_upload_while_queued_conflicts(
        self,
        client: TestClient,
        admin_headers: dict[str, str],
        test_episode: PodcastEpisode,
        job_publisher: FakeJobPublisher,
    ) -> None:
        first = _upload_audio(client, admin_headers, test_episode.id.value)
        assert first.status_code == status.HTTP_202_ACCEPTED

        second = _upload_audio(client, admin_headers, test_episode.id.value)

        assert second.status_code == status.HTTP_409_CONFLICT
        assert len(job_publisher.jobs) == 1

    def test_reupload_after_failure(
        self,
        client: TestClient,
        db_session: Session,
        admin_headers: dict[str, str],
        test_episode: PodcastEpisode,
        job_publisher: FakeJobPublisher,
    ) -> None:
        """A failed episode accepts a fresh upload."""
        repository = PodcastEpisodeRepository(db_session)
        queued = _upload_audio(client, admin_headers, test_episode.id.value)
        assert queued.status_code == status.HTTP_202_ACCEPTED
        episode = repository.find_by_id(test_episode.id)
        assert episode is not None
        episode.start_processing(utc_now())
        episode.fail_processing("encoder crashed", utc_now())
        repository.save(episode)

        response = _upload_audio(client, admin_headers, test_episode.id.value)

        assert response.status_code == status.HTTP_202_ACCEPTED
        data = response.json()["data"]
        assert data["processing_status"] == "Queued"
        assert data["processing_error"] is None
        assert len(job_publisher.jobs) == 2

    def test_queue_unavailable(
        self,
        client: TestClient,
        db_session: Session,
        admin_headers: dict[str, str],
        test_episode: PodcastEpisode,
        job_publisher: FakeJobPublisher,
    ) -> None:
        job_publisher.fail = True

        response = _upload_audio(client, admin_headers, test_episode.id.value)

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["success"] is False
        episode = PodcastEpisodeRepository(db_session).find_by_id(EpisodeId(test_episode.id.value))
        assert episode is not None
        assert episode.processing_status.value == "Queued"

    def test_missing_episode(self, client: TestClient, admin_headers: dict[str, str]) -> None:
        response = _upload_audio(client, admin_headers, 99999)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_requires_admin(
        self,
        client: TestClient,
        auth_headers: dict[str, str],
        test_episode: PodcastEpisode,
    ) -> None:
        response = _upload_audio(client, auth_headers, test_episode.id.value)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_requires_authentication(
        self, client: TestClient, test_episode: PodcastEpisode
    ) -> None:
        response = client.post(
            f"/api/admin/Podcast/episodes/{test_episode.id.value}/upload-audio",
            files={"file": ("lesson.mp3", MP3_BYTES, "audio/mpeg")},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestUploadThumbnail:
    """Test suite for POST /admin/Podcast/episodes/{id}/upload-thumbnail."""

    def test_thumbnail_replaces_previous_file(
        self,
        client: TestClient,
        admin_headers: dict[str, str],
        test_episode: PodcastEpisode,
        media_storage: LocalMediaStorage,
    ) -> None:
        url = f"/api/admin/Podcast/episodes/{test_episode.id.value}/upload-thumbnail"

        first = client.post(
            url, files={"file": ("cover.png", b"\x89PNG-1", "image/png")}, headers=admin_headers
        )
        assert first.status_code == status.HTTP_200_OK
        first_path = first.json()["data"]["thumbnail_url"]
        assert first_path.startswith("thumbnails/")
        assert first_path.endswith(".png")
        assert media_storage.resolve(first_path).exists()

        second = client.post(
            url,
            files={"file": ("cover.jpg", b"\xff\xd8JPEG-2", "image/jpeg")},
            headers=admin_headers,
        )

        assert second.status_code == status.HTTP_200_OK
        second_path = second.json()["data"]["thumbnail_url"]
        assert second_path.endswith(".jpg")
        assert media_storage.resolve(second_path).read_bytes() == b"\xff\xd8JPEG-2"
        assert not media_storage.resolve(first_path).exists()

    def test_thumbnail_does_not_touch_processing(
        self,
        client: TestClient,
        admin_headers: dict[str, str],
        test_episode: PodcastEpisode,
        job_publisher: FakeJobPublisher,
    ) -> None:
        response = client.post(
            f"/api/admin/Podcast/episodes/{test_episode.id.value}/upload-thumbnail",
            files={"file": ("cover.webp", b"RIFFWEBP", "image/webp")},
            headers=admin_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["processing_status"] == "Uploaded"
        assert job_publisher.jobs == []

    def test_gif_rejected(
        self,
        client: TestClient,
        admin_headers: dict[str, str],
        test_episode: PodcastEpisode,
    ) -> None:
        response = client.post(
            f"/api/admin/Podcast/episodes/{test_episode.id.value}/upload-thumbnail",
            files={"file": ("cover.gif", b"GIF89a", "image/gif")},
            headers=admin_headers,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
