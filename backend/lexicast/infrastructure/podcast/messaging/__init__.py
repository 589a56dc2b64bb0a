from .connection import QueueConnectionManager, QueueDelivery
from .messages import AudioProcessingMessage, QualityLevelMessage
from .publisher import RedisAudioJobPublisher

__all__ = [
    "AudioProcessingMessage",
    "QualityLevelMessage",
    "QueueConnectionManager",
    "QueueDelivery",
    "RedisAudioJobPublisher",
]
