"""Class descriptor data model built by the stream decoder.

A decoded object is described by a ClassDescriptorChain: the ordered class
descriptors of its runtime class, each carrying the declared fields and,
once class data has been read, the value of every field.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import IntFlag, StrEnum
from typing import TypeAlias

from .constants import SC_BLOCK_DATA, SC_EXTERNALIZABLE, SC_SERIALIZABLE, SC_WRITE_METHOD
from .errors import IllegalClassDescFlagsError, IllegalFieldTypeCodeError


class ClassDescFlags(IntFlag):
    """classDescFlags bits of a class descriptor."""

    WRITE_METHOD = SC_WRITE_METHOD
    SERIALIZABLE = SC_SERIALIZABLE
    EXTERNALIZABLE = SC_EXTERNALIZABLE
    BLOCK_DATA = SC_BLOCK_DATA

    @classmethod
    def parse(cls, value: int) -> ClassDescFlags:
        """Validate a raw flags byte and return it as flags."""
        if value not in _VALID_FLAGS:
            raise IllegalClassDescFlagsError(f"Illegal classDescFlags 0x{value:02X}: {_reason(value)}")
        return cls(value)

    def describe(self) -> str:
        return " | ".join(f"SC_{flag.name}" for flag in ClassDescFlags if flag in self)


_VALID_FLAGS = frozenset(
    [
        0,
        SC_WRITE_METHOD,
        SC_SERIALIZABLE,
        SC_SERIALIZABLE | SC_WRITE_METHOD,
        SC_EXTERNALIZABLE,
        SC_EXTERNALIZABLE | SC_BLOCK_DATA,
    ]
)


def _reason(value: int) -> str:
    if value & SC_SERIALIZABLE:
        if value & SC_EXTERNALIZABLE:
            return "SC_SERIALIZABLE is not compatible with SC_EXTERNALIZABLE"
        if value & SC_BLOCK_DATA:
            return "SC_SERIALIZABLE is not compatible with SC_BLOCKDATA"
    elif value & SC_EXTERNALIZABLE:
        if value & SC_WRITE_METHOD:
            return "SC_EXTERNALIZABLE is not compatible with SC_WRITE_METHOD"
    elif value & SC_BLOCK_DATA:
        return "must include either SC_SERIALIZABLE or SC_EXTERNALIZABLE"
    return "unknown bits set"


class TypeCode(StrEnum):
    """Field type codes."""

    BYTE = "B"
    CHAR = "C"
    DOUBLE = "D"
    FLOAT = "F"
    INT = "I"
    LONG = "J"
    SHORT = "S"
    BOOLEAN = "Z"
    ARRAY = "["
    OBJECT = "L"

    @classmethod
    def from_byte(cls, value: int) -> TypeCode:
        try:
            return cls(chr(value))
        except ValueError:
            raise IllegalFieldTypeCodeError(
                f"Illegal field type code ('{chr(value)}', 0x{value:02X})"
            ) from None

    @property
    def is_primitive(self) -> bool:
        return self not in (TypeCode.ARRAY, TypeCode.OBJECT)


@dataclass(frozen=True)
class BackReference:
    """A field value that points at an entity decoded earlier in the stream."""

    handle: int
    target: object = field(repr=False, compare=False)


@dataclass
class FieldDescriptor:
    """One declared field, or one element/annotation entry of an instance."""

    type_code: TypeCode
    name: str
    class_name: str | None = None
    value: FieldValue = None

    def copy(self) -> FieldDescriptor:
        """Return the declaration without its value."""
        return FieldDescriptor(self.type_code, self.name, self.class_name)


@dataclass
class ClassDescriptor:
    """Metadata of one class: name, flags and ordered field declarations."""

    name: str
    flags: ClassDescFlags = ClassDescFlags(0)
    serial_version_uid: int = 0
    handle: int | None = None
    fields: list[FieldDescriptor] = field(default_factory=list)

    @property
    def is_serializable(self) -> bool:
        return ClassDescFlags.SERIALIZABLE in self.flags

    @property
    def is_externalizable(self) -> bool:
        return ClassDescFlags.EXTERNALIZABLE in self.flags

    @property
    def has_write_method(self) -> bool:
        return ClassDescFlags.WRITE_METHOD in self.flags

    @property
    def has_block_data(self) -> bool:
        return ClassDescFlags.BLOCK_DATA in self.flags

    def add_field(self, fd: FieldDescriptor) -> None:
        self.fields.append(fd)

    def get_field(self, name: str) -> FieldDescriptor | None:
        """Return the first field entry named `name`."""
        return next((fd for fd in self.fields if fd.name == name), None)

    def copy(self) -> ClassDescriptor:
        return ClassDescriptor(
            name=self.name,
            flags=self.flags,
            serial_version_uid=self.serial_version_uid,
            handle=self.handle,
            fields=[fd.copy() for fd in self.fields],
        )


@dataclass
class ClassDescriptorChain:
    """Ordered class descriptors of one object, most-derived class first."""

    classes: list[ClassDescriptor] = field(default_factory=list)

    @property
    def name(self) -> str | None:
        """Name of the most-derived class, if any."""
        return self.classes[0].name if self.classes else None

    def add_class(self, cd: ClassDescriptor) -> None:
        self.classes.append(cd)

    def add_superclass_chain(self, chain: ClassDescriptorChain | None) -> None:
        if chain is not None:
            self.classes.extend(chain.classes)

    def find(self, name: str) -> ClassDescriptor | None:
        return next((cd for cd in self.classes if cd.name == name), None)

    def copy(self) -> ClassDescriptorChain:
        """Return a copy with the same layout and no field values."""
        return ClassDescriptorChain([cd.copy() for cd in self.classes])

    def __iter__(self) -> Iterator[ClassDescriptor]:
        return iter(self.classes)

    def __len__(self) -> int:
        return len(self.classes)

    def __getitem__(self, index: int) -> ClassDescriptor:
        return self.classes[index]


FieldValue: TypeAlias = (
    int | float | bool | str | bytes | ClassDescriptorChain | BackReference | None
)
