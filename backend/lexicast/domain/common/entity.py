"""
Base class for Entities.

Entities carry an identity that survives state changes. Subclasses are
mutable dataclasses; an unsaved entity holds a placeholder id until its
repository assigns the database key.

Example:
    @dataclass
    class FlashCardGroup(Entity[FlashCardGroupId]):
        id: FlashCardGroupId
        name: str

        def rename(self, name: str) -> None:
            self.name = name
"""

from abc import ABC
from dataclasses import dataclass
from typing import Generic, Self, TypeVar

from .value_object import ValueObject


@dataclass(frozen=True)
class EntityId(ValueObject):
    """
    Base class for strongly-typed entity identifiers.

    Ids wrap the integer primary key. A value of 0 marks an entity that has
    not been persisted yet.
    """

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError(f"{self.__class__.__name__} must be non-negative")

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)

    @classmethod
    def generate(cls) -> Self:
        """Set placeholder id. The database assigns the real one."""
        return cls(0)

    def is_persisted(self) -> bool:
        return self.value != 0


IdType = TypeVar("IdType", bound=EntityId)


class Entity(ABC, Generic[IdType]):
    """Base class for Entities in the domain model."""

    id: IdType
