"""JSON-ready reports of decoded objects."""

from collections import Counter
from dataclasses import dataclass
from typing import Any

from dataclasses_json import DataClassJsonMixin

from serialdump.stream.handles import HandleTable
from serialdump.stream.model import (
    BackReference,
    ClassDescFlags,
    ClassDescriptor,
    ClassDescriptorChain,
    FieldDescriptor,
    FieldValue,
)


@dataclass
class FieldReport(DataClassJsonMixin):
    """One field entry and its value.

    Nested objects and arrays are ObjectReports. Back-references are
    reported as {"ref": handle} and never followed, so cyclic graphs
    produce finite reports.
    """

    name: str
    type_code: str
    class_name: str | None
    value: Any


@dataclass
class ClassReport(DataClassJsonMixin):
    """One class of an object with its field entries."""

    name: str
    flags: list[str]
    handle: int | None
    serial_version_uid: int
    fields: list[FieldReport]


@dataclass
class ObjectReport(DataClassJsonMixin):
    """A decoded object, most-derived class first."""

    classes: list[ClassReport]

    @property
    def name(self) -> str | None:
        return self.classes[0].name if self.classes else None


@dataclass
class StreamSummary(DataClassJsonMixin):
    """Counts describing a decoded stream."""

    objects: int
    handles: int
    class_counts: dict[str, int]


def report_value(value: FieldValue) -> Any:
    """Convert a field value to a JSON-compatible value."""
    if isinstance(value, BackReference):
        return {"ref": value.handle}
    if isinstance(value, ClassDescriptorChain):
        return report_object(value)
    if isinstance(value, bytes):
        return value.hex()
    return value


def report_field(fd: FieldDescriptor) -> FieldReport:
    return FieldReport(
        name=fd.name,
        type_code=fd.type_code.value,
        class_name=fd.class_name,
        value=report_value(fd.value),
    )


def report_class(cd: ClassDescriptor, field_name: str | None = None) -> ClassReport:
    fields = [fd for fd in cd.fields if field_name is None or fd.name == field_name]
    return ClassReport(
        name=cd.name,
        flags=[f"SC_{flag.name}" for flag in ClassDescFlags if flag in cd.flags],
        handle=cd.handle,
        serial_version_uid=cd.serial_version_uid,
        fields=[report_field(fd) for fd in fields],
    )


def report_object(chain: ClassDescriptorChain) -> ObjectReport:
    return ObjectReport(classes=[report_class(cd) for cd in chain])


def build_report(
    objects: list[ClassDescriptorChain],
    *,
    class_name: str | None = None,
    field_name: str | None = None,
) -> list[ObjectReport]:
    """Build reports for top-level objects.

    Args:
        objects: Decoded top-level objects.
        class_name: Keep only classes with this exact name; objects left
            with no classes are dropped.
        field_name: Keep only fields with this exact name. Applies to the
            top-level classes, not to nested values.

    Returns:
        One ObjectReport per object that survives filtering.
    """
    reports = []
    for chain in objects:
        classes = [
            report_class(cd, field_name)
            for cd in chain
            if class_name is None or cd.name == class_name
        ]
        if classes:
            reports.append(ObjectReport(classes=classes))
    return reports


def summarize(objects: list[ClassDescriptorChain], handles: HandleTable) -> StreamSummary:
    counts = Counter(cd.name for chain in objects for cd in chain)
    return StreamSummary(
        objects=len(objects),
        handles=len(handles.minted),
        class_counts=dict(counts.most_common()),
    )
