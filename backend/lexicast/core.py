from datetime import timedelta

from dependency_injector import containers, providers
from sqlalchemy.orm import Session

from lexicast.application.identity.services.session_store import SessionStore
from lexicast.application.identity.services.token_issuer import TokenIssuer
from lexicast.application.identity.use_cases.anonymous_user_use_case import AnonymousUserUseCase
from lexicast.application.identity.use_cases.authentication_use_case import (
    AuthenticationUseCase,
)
from lexicast.application.identity.use_cases.provider_authentication_use_case import (
    ProviderAuthenticationUseCase,
)
from lexicast.application.identity.use_cases.register_user_use_case import RegisterUserUseCase
from lexicast.application.identity.use_cases.upgrade_anonymous_user_use_case import (
    UpgradeAnonymousUserUseCase,
)
from lexicast.application.learning.use_cases.flashcard_group_use_case import (
    FlashCardGroupUseCase,
)
from lexicast.application.podcast.use_cases.episode_media_upload_use_case import (
    EpisodeMediaUploadUseCase,
)
from lexicast.application.podcast.use_cases.podcast_catalog_use_case import (
    PodcastCatalogUseCase,
)
from lexicast.application.podcast.use_cases.podcast_quiz_use_case import PodcastQuizUseCase
from lexicast.config import get_settings
from lexicast.infrastructure.identity.auth.password_service import PasswordService
from lexicast.infrastructure.identity.auth.token_service import JwtTokenService
from lexicast.infrastructure.identity.repositories import (
    AnonymousUserRepository,
    RefreshTokenRepository,
    UserRepository,
)
from lexicast.infrastructure.learning.repositories import (
    FlashCardGroupRepository,
    FlashCardRepository,
)
from lexicast.infrastructure.podcast.encoding.ffmpeg_encoder import FfmpegAudioEncoder
from lexicast.infrastructure.podcast.messaging.connection import QueueConnectionManager
from lexicast.infrastructure.podcast.messaging.publisher import RedisAudioJobPublisher
from lexicast.infrastructure.podcast.repositories import (
    PodcastEpisodeRepository,
    PodcastQuizRepository,
    PodcastSeasonRepository,
    PodcastSeriesRepository,
)
from lexicast.infrastructure.podcast.storage.media_storage import LocalMediaStorage


class Container(containers.DeclarativeContainer):
    """Dependency injection container."""

    settings = providers.Callable(get_settings)

    # Database session - will be provided at runtime
    db = providers.Dependency(instance_of=Session)

    # Repositories
    user_repository = providers.Factory(UserRepository, db=db)
    anonymous_user_repository = providers.Factory(AnonymousUserRepository, db=db)
    refresh_token_repository = providers.Factory(RefreshTokenRepository, db=db)
    podcast_series_repository = providers.Factory(PodcastSeriesRepository, db=db)
    podcast_season_repository = providers.Factory(PodcastSeasonRepository, db=db)
    podcast_episode_repository = providers.Factory(PodcastEpisodeRepository, db=db)
    podcast_quiz_repository = providers.Factory(PodcastQuizRepository, db=db)
    flashcard_group_repository = providers.Factory(FlashCardGroupRepository, db=db)
    flashcard_repository = providers.Factory(FlashCardRepository, db=db)

    # Application-scoped services
    token_service = providers.Singleton(JwtTokenService, settings=settings)
    password_service = providers.Singleton(
        PasswordService, pepper=settings.provided.PASSWORD_PEPPER
    )
    media_storage = providers.Singleton(
        LocalMediaStorage,
        public_root=settings.provided.PUBLIC_ROOT,
        max_audio_mb=settings.provided.MAX_AUDIO_UPLOAD_MB,
        max_image_mb=settings.provided.MAX_IMAGE_UPLOAD_MB,
    )
    audio_encoder = providers.Singleton(
        FfmpegAudioEncoder,
        ffmpeg_path=settings.provided.FFMPEG_PATH,
        ffprobe_path=settings.provided.FFPROBE_PATH,
        use_docker=settings.provided.FFMPEG_USE_DOCKER,
        docker_image=settings.provided.FFMPEG_DOCKER_IMAGE,
        public_root=settings.provided.PUBLIC_ROOT,
    )
    queue_connection = providers.Singleton(
        QueueConnectionManager,
        redis_url=settings.provided.REDIS_URL,
        stream=settings.provided.AUDIO_PROCESSING_STREAM,
        group=settings.provided.AUDIO_PROCESSING_GROUP,
        consumer=settings.provided.QUEUE_CONSUMER_NAME,
        block_ms=settings.provided.QUEUE_BLOCK_MS,
        max_len=settings.provided.QUEUE_MAX_LEN,
        health_check_interval=settings.provided.QUEUE_HEALTH_CHECK_INTERVAL_SECONDS,
        retry_delay=settings.provided.QUEUE_RETRY_DELAY_SECONDS,
    )
    job_publisher = providers.Singleton(RedisAudioJobPublisher, connection=queue_connection)

    # Session services
    session_store = providers.Factory(
        SessionStore,
        refresh_token_repository=refresh_token_repository,
        token_service=token_service,
        token_lifetime=providers.Callable(
            timedelta, days=settings.provided.REFRESH_TOKEN_EXPIRE_DAYS
        ),
        sweep_grace_period=providers.Callable(
            timedelta, days=settings.provided.REFRESH_TOKEN_SWEEP_GRACE_DAYS
        ),
    )
    token_issuer = providers.Factory(
        TokenIssuer, token_service=token_service, session_store=session_store
    )

    # Identity use cases
    authentication_use_case = providers.Factory(
        AuthenticationUseCase,
        user_repository=user_repository,
        anonymous_user_repository=anonymous_user_repository,
        password_service=password_service,
        session_store=session_store,
        token_issuer=token_issuer,
    )
    register_user_use_case = providers.Factory(
        RegisterUserUseCase,
        user_repository=user_repository,
        password_service=password_service,
        token_issuer=token_issuer,
    )
    provider_authentication_use_case = providers.Factory(
        ProviderAuthenticationUseCase,
        user_repository=user_repository,
        token_issuer=token_issuer,
    )
    anonymous_user_use_case = providers.Factory(
        AnonymousUserUseCase,
        anonymous_user_repository=anonymous_user_repository,
        token_issuer=token_issuer,
    )
    upgrade_anonymous_user_use_case = providers.Factory(
        UpgradeAnonymousUserUseCase,
        anonymous_user_repository=anonymous_user_repository,
        user_repository=user_repository,
        password_service=password_service,
        token_issuer=token_issuer,
    )

    # Podcast use cases
    podcast_catalog_use_case = providers.Factory(
        PodcastCatalogUseCase,
        series_repository=podcast_series_repository,
        season_repository=podcast_season_repository,
        episode_repository=podcast_episode_repository,
    )
    episode_media_upload_use_case = providers.Factory(
        EpisodeMediaUploadUseCase,
        episode_repository=podcast_episode_repository,
        media_storage=media_storage,
        job_publisher=job_publisher,
    )
    podcast_quiz_use_case = providers.Factory(
        PodcastQuizUseCase,
        episode_repository=podcast_episode_repository,
        quiz_repository=podcast_quiz_repository,
    )

    # Learning use cases
    flashcard_group_use_case = providers.Factory(
        FlashCardGroupUseCase,
        group_repository=flashcard_group_repository,
        card_repository=flashcard_repository,
    )


container = Container()
