"""Audio processing status of a podcast episode."""

from enum import Enum


class ProcessingStatus(str, Enum):
    """
    Lifecycle of an episode's audio.

    Uploaded -> Queued -> Processing -> Completed, or Processing -> Failed.
    Failed and Completed episodes re-enter Queued only through a new upload.
    A redelivered job may restart Processing.
    """

    UPLOADED = "Uploaded"
    QUEUED = "Queued"
    PROCESSING = "Processing"
    COMPLETED = "Completed"
    FAILED = "Failed"

    def can_transition_to(self, target: "ProcessingStatus") -> bool:
        return target in _TRANSITIONS[self]

    @property
    def accepts_upload(self) -> bool:
        return self.can_transition_to(ProcessingStatus.QUEUED)


_TRANSITIONS: dict[ProcessingStatus, frozenset[ProcessingStatus]] = {
    ProcessingStatus.UPLOADED: frozenset({ProcessingStatus.QUEUED}),
    ProcessingStatus.QUEUED: frozenset({ProcessingStatus.PROCESSING}),
    ProcessingStatus.PROCESSING: frozenset(
        {ProcessingStatus.PROCESSING, ProcessingStatus.COMPLETED, ProcessingStatus.FAILED}
    ),
    ProcessingStatus.COMPLETED: frozenset({ProcessingStatus.QUEUED}),
    ProcessingStatus.FAILED: frozenset({ProcessingStatus.QUEUED}),
}

UPLOADABLE_STATUSES: tuple[ProcessingStatus, ...] = tuple(
    status for status in ProcessingStatus if status.accepts_upload
)
