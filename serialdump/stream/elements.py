"""Content elements produced by the stream decoder.

Each wire element kind decodes to one of these immutable records. The
decoder keeps top-level NewObject elements and uses the rest only for
their handle registrations and as field values.
"""

from dataclasses import dataclass, field
from typing import TypeAlias

from .model import BackReference, ClassDescriptorChain, FieldValue


@dataclass(frozen=True, slots=True)
class NewObject:
    """An object instance with its populated class descriptor chain."""

    handle: int
    chain: ClassDescriptorChain

    def as_value(self) -> FieldValue:
        return self.chain


@dataclass(frozen=True, slots=True)
class NewArray:
    """An array; its elements are the field entries of its single class."""

    handle: int
    chain: ClassDescriptorChain

    def as_value(self) -> FieldValue:
        return self.chain


@dataclass(frozen=True, slots=True)
class NewClass:
    """A bare class token."""

    handle: int
    chain: ClassDescriptorChain | None

    def as_value(self) -> FieldValue:
        return self.chain


@dataclass(frozen=True, slots=True)
class NewClassDesc:
    """A class or proxy class descriptor."""

    handle: int
    chain: ClassDescriptorChain
    proxy: bool = False

    def as_value(self) -> FieldValue:
        return self.chain


@dataclass(frozen=True, slots=True)
class NewString:
    handle: int
    value: str
    long: bool = False

    def as_value(self) -> FieldValue:
        return self.value


@dataclass(frozen=True, slots=True)
class Reference:
    """A back-reference to a previously registered handle."""

    handle: int
    target: object = field(repr=False, compare=False)

    def as_value(self) -> FieldValue:
        return BackReference(self.handle, self.target)


@dataclass(frozen=True, slots=True)
class Null:
    def as_value(self) -> FieldValue:
        return None


@dataclass(frozen=True, slots=True)
class BlockData:
    """Opaque block data payload."""

    payload: bytes
    long: bool = False

    def as_value(self) -> FieldValue:
        return self.payload


NULL = Null()

ContentElement: TypeAlias = (
    NewObject | NewArray | NewClass | NewClassDesc | NewString | Reference | Null | BlockData
)
