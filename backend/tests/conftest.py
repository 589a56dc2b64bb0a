"""Pytest configuration and fixtures."""

import os
import tempfile
from collections.abc import Generator
from typing import Any

os.environ["ENVIRONMENT"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key-0123456789abcdef0123456789abcdef"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["PUBLIC_ROOT"] = tempfile.mkdtemp(prefix="lexicast-media-")

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from lexicast.application.podcast.use_cases.dtos import AudioProcessingJob
from lexicast.core import container
from lexicast.database import Base, get_db
from lexicast.domain.identity.entities.anonymous_user import AnonymousUser
from lexicast.domain.identity.entities.user import ROLE_ADMIN, User
from lexicast.domain.podcast.entities.podcast_episode import PodcastEpisode
from lexicast.domain.podcast.entities.podcast_series import PodcastSeason, PodcastSeries
from lexicast.exceptions import QueueUnavailableError
from lexicast.infrastructure.identity.repositories import (
    AnonymousUserRepository,
    UserRepository,
)
from lexicast.infrastructure.podcast.repositories import (
    PodcastEpisodeRepository,
    PodcastSeasonRepository,
    PodcastSeriesRepository,
)
from lexicast.infrastructure.podcast.storage.media_storage import LocalMediaStorage
from lexicast.main import app
from lexicast.utils import utc_now

TEST_PASSWORD = "CorrectHorse1!"
TEST_DEVICE_ID = "device-0001"

# Test database URL (in-memory SQLite shared across threads)
TEST_DATABASE_URL = "sqlite:///:memory:"

test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


class FakeJobPublisher:
    """Collects published jobs instead of sending them to Redis."""

    def __init__(self) -> None:
        self.jobs: list[AudioProcessingJob] = []
        self.fail = False

    async def publish(self, job: AudioProcessingJob) -> None:
        if self.fail:
            raise QueueUnavailableError
        self.jobs.append(job)


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    Base.metadata.create_all(bind=test_engine)

    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def media_storage(tmp_path: Any) -> LocalMediaStorage:
    return LocalMediaStorage(public_root=tmp_path / "public")


@pytest.fixture
def job_publisher() -> FakeJobPublisher:
    return FakeJobPublisher()


@pytest.fixture
def client(
    db_session: Session,
    media_storage: LocalMediaStorage,
    job_publisher: FakeJobPublisher,
) -> Generator[TestClient, Any, None]:
    """Create a test client with database session, local media root and fake queue."""

    def override_get_db() -> Generator[Session, None, None]:
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    container.media_storage.override(providers.Object(media_storage))
    container.job_publisher.override(providers.Object(job_publisher))

    with TestClient(app) as test_client:
        yield test_client

    container.job_publisher.reset_override()
    container.media_storage.reset_override()
    app.dependency_overrides.clear()


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def test_user(db_session: Session) -> User:
    """Registered user with TEST_PASSWORD."""
    password_service = container.password_service()
    user = User.create(
        email="learner@example.com",
        hashed_password=password_service.hash_password(TEST_PASSWORD),
        first_name="Ada",
        last_name="Learner",
    )
    return UserRepository(db_session).save(user)


@pytest.fixture
def admin_user(db_session: Session) -> User:
    user = User.create(email="admin@example.com", first_name="Site", last_name="Admin")
    user.role = ROLE_ADMIN
    return UserRepository(db_session).save(user)


@pytest.fixture
def auth_headers(test_user: User) -> dict[str, str]:
    return _bearer(container.token_service().issue_user_token(test_user))


@pytest.fixture
def admin_headers(admin_user: User) -> dict[str, str]:
    return _bearer(container.token_service().issue_user_token(admin_user))


@pytest.fixture
def anonymous_user(db_session: Session) -> AnonymousUser:
    anonymous = AnonymousUser.create(TEST_DEVICE_ID, utc_now(), device_type="ios")
    return AnonymousUserRepository(db_session).create_if_absent(anonymous)


@pytest.fixture
def anonymous_headers(anonymous_user: AnonymousUser) -> dict[str, str]:
    return _bearer(container.token_service().issue_anonymous_token(anonymous_user.device_id))


@pytest.fixture
def test_series(db_session: Session) -> PodcastSeries:
    series = PodcastSeries.create("Everyday Turkish", "Short dialogues", "EN", "TR", "A2")
    return PodcastSeriesRepository(db_session).save(series)


@pytest.fixture
def test_season(db_session: Session, test_series: PodcastSeries) -> PodcastSeason:
    season = PodcastSeason.create(test_series.id, 1, "Season 1")
    return PodcastSeasonRepository(db_session).save(season)


@pytest.fixture
def test_episode(
    db_session: Session, test_series: PodcastSeries, test_season: PodcastSeason
) -> PodcastEpisode:
    episode = PodcastEpisode.create(
        series_id=test_series.id,
        season_id=test_season.id,
        episode_number=1,
        title="At the market",
    )
    return PodcastEpisodeRepository(db_session).save(episode)
