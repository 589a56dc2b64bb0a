"""
Base class for Value Objects.

Value Objects are immutable and compared by their attributes. Subclasses are
frozen dataclasses, which supply equality, hashing and repr; validation goes
in __post_init__ and raises ValidationError.

Example:
    @dataclass(frozen=True)
    class QualityLevel(ValueObject):
        quality: str
        bitrate: int
"""


class ValueObject:
    """Marker base for immutable domain values."""

    __slots__ = ()
