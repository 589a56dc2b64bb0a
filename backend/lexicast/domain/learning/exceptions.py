"""Learning domain exceptions."""

from lexicast.domain.common.exceptions import ConflictError, EntityNotFoundError


class FlashCardGroupNotFoundError(EntityNotFoundError):
    def __init__(self, group_id: int) -> None:
        super().__init__("FlashCardGroup", group_id)


class FlashCardNotFoundError(EntityNotFoundError):
    def __init__(self, card_id: int) -> None:
        super().__init__("FlashCard", card_id)


class DuplicateFlashCardGroupError(ConflictError):
    """Raised when an owner already has a group with the same name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"A flashcard group named '{name}' already exists", {"name": name})
        self.name = name
