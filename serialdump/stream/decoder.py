"""Recursive-descent decoder for Java Object Serialization Streams."""

import logging
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from .constants import (
    STREAM_MAGIC,
    STREAM_VERSION,
    TC_ARRAY,
    TC_BLOCKDATA,
    TC_BLOCKDATALONG,
    TC_CLASS,
    TC_CLASSDESC,
    TC_ENDBLOCKDATA,
    TC_ENUM,
    TC_LONGSTRING,
    TC_NULL,
    TC_OBJECT,
    TC_PROXYCLASSDESC,
    TC_REFERENCE,
    TC_STRING,
    tag_name,
)
from .cursor import BinaryCursor
from .elements import (
    NULL,
    BlockData,
    ContentElement,
    NewArray,
    NewClass,
    NewClassDesc,
    NewObject,
    NewString,
    Null,
    Reference,
)
from .errors import (
    EnumNotImplementedError,
    HandleKindError,
    IllegalArrayClassError,
    IllegalContentTagError,
    MalformedHeaderError,
    MissingClassDescError,
    OutOfRangeError,
    RecursionLimitError,
    UnsupportedExternalContentsError,
)
from .handles import HandleTable
from .model import (
    ClassDescFlags,
    ClassDescriptor,
    ClassDescriptorChain,
    FieldDescriptor,
    FieldValue,
    TypeCode,
)

logger = logging.getLogger(__name__)

_Reader = Callable[[], Any]


class StreamDecoder:
    """Decodes one serialization stream.

    A decoder is one decode session: it owns the read position, the handle
    table and the list of decoded top-level objects. Sessions share no
    state, so independent streams can be decoded concurrently with one
    decoder each.

    Example:
        objects, ok = StreamDecoder(data).decode()
        if ok:
            for chain in objects:
                print(chain.name)
    """

    def __init__(self, data: bytes | bytearray | memoryview, *, max_depth: int | None = None) -> None:
        self._data = bytes(data)
        self._max_depth = max_depth
        self._reset()

        self._content_readers: dict[int, _Reader] = {
            TC_OBJECT: self._read_new_object,
            TC_CLASS: self._read_new_class,
            TC_ARRAY: self._read_new_array,
            TC_STRING: self._read_new_string,
            TC_LONGSTRING: self._read_new_string,
            TC_ENUM: self._read_new_enum,
            TC_CLASSDESC: self._read_new_class_desc,
            TC_PROXYCLASSDESC: self._read_new_proxy_class_desc,
            TC_REFERENCE: self._read_reference,
            TC_NULL: self._read_null,
            TC_BLOCKDATA: self._read_block_data,
            TC_BLOCKDATALONG: self._read_block_data,
        }
        self._class_desc_readers: dict[int, _Reader] = {
            TC_CLASSDESC: self._read_new_class_desc,
            TC_PROXYCLASSDESC: self._read_new_proxy_class_desc,
            TC_NULL: self._read_null,
            TC_REFERENCE: self._read_reference,
        }
        self._string_readers: dict[int, _Reader] = {
            TC_STRING: self._read_new_string,
            TC_LONGSTRING: self._read_new_string,
            TC_REFERENCE: self._read_reference,
        }
        self._object_field_readers: dict[int, _Reader] = {
            TC_OBJECT: self._read_new_object,
            TC_REFERENCE: self._read_reference,
            TC_NULL: self._read_null,
            TC_STRING: self._read_new_string,
            TC_LONGSTRING: self._read_new_string,
            TC_CLASS: self._read_new_class,
            TC_ARRAY: self._read_new_array,
            TC_ENUM: self._read_new_enum,
        }
        self._array_field_readers: dict[int, _Reader] = {
            TC_NULL: self._read_null,
            TC_ARRAY: self._read_new_array,
            TC_REFERENCE: self._read_reference,
        }

    @property
    def handles(self) -> HandleTable:
        return self._handles

    def decode(self) -> tuple[list[ClassDescriptorChain], bool]:
        """Decode the whole stream.

        Returns:
            Tuple of (top-level objects, success). A bad header yields
            ([], False); any other malformation raises a StreamError.
        """
        self._reset()

        try:
            self._read_header()
        except MalformedHeaderError as e:
            logger.debug("Rejected stream: %s", e)
            return [], False

        objects: list[ClassDescriptorChain] = []
        self._trace("Contents")
        with self._nested():
            while self._cursor.remaining > 0:
                element = self.read_content_element()
                if isinstance(element, NewObject):
                    objects.append(element.chain)
        return objects, True

    def read_content_element(self) -> ContentElement:
        """Decode the content element at the current position."""
        return self._read_element(self._content_readers, "content element")

    # Session helpers

    def _reset(self) -> None:
        self._cursor = BinaryCursor(self._data)
        self._handles = HandleTable()
        self._depth = 0
        self._primitive_readers: dict[TypeCode, _Reader] = {
            TypeCode.BYTE: self._cursor.read_int8,
            TypeCode.DOUBLE: self._cursor.read_float64,
            TypeCode.FLOAT: self._cursor.read_float32,
            TypeCode.INT: self._cursor.read_int32,
            TypeCode.LONG: self._cursor.read_int64,
            TypeCode.SHORT: self._cursor.read_int16,
        }

    def _trace(self, message: str, *args: Any) -> None:
        logger.debug("%s" + message, "  " * self._depth, *args)

    @contextmanager
    def _nested(self) -> Iterator[None]:
        self._depth += 1
        try:
            if self._max_depth is not None and self._depth > self._max_depth:
                raise RecursionLimitError(f"Stream nests deeper than {self._max_depth} levels")
            yield
        finally:
            self._depth -= 1

    def _read_element(self, readers: Mapping[int, _Reader], what: str) -> Any:
        tag = self._cursor.peek_byte()
        reader = readers.get(tag)
        if reader is None:
            raise IllegalContentTagError(
                f"Illegal {what} tag {tag_name(tag)} at offset {self._cursor.offset}"
            )
        with self._nested():
            return reader()

    def _consume_tag(self, expected: int) -> None:
        tag = self._cursor.read_byte()
        self._trace("%s - 0x%02X", tag_name(tag), tag)
        if tag != expected:
            raise IllegalContentTagError(
                f"Illegal value for {tag_name(expected)} (should be 0x{expected:02X}, got 0x{tag:02X})"
            )

    def _new_handle(self) -> int:
        handle = self._handles.mint()
        self._trace("newHandle 0x%06X", handle)
        return handle

    def _read_header(self) -> None:
        if self._cursor.remaining < 4:
            raise MalformedHeaderError("Stream is shorter than its header")
        magic = self._cursor.read_uint16()
        if magic != STREAM_MAGIC:
            raise MalformedHeaderError(f"Invalid STREAM_MAGIC 0x{magic:04X}, should be 0xACED")
        version = self._cursor.read_uint16()
        if version != STREAM_VERSION:
            raise MalformedHeaderError(f"Unsupported STREAM_VERSION {version}")
        self._trace("STREAM_MAGIC - 0x%04X", magic)
        self._trace("STREAM_VERSION - %d", version)

    def _read_utf(self) -> str:
        value = self._cursor.read_utf(self._cursor.read_uint16())
        self._trace("Value - %s", value)
        return value

    def _read_long_utf(self) -> str:
        value = self._cursor.read_utf(self._cursor.read_int64())
        self._trace("Value - %s", value)
        return value

    # Objects

    def _read_new_object(self) -> NewObject:
        self._consume_tag(TC_OBJECT)
        chain = self._read_class_desc()
        if chain is None:
            raise MissingClassDescError("Object has a null class descriptor")

        # The handle must be live before the class data is read, since the
        # data may refer back to this object.
        handle = self._new_handle()
        instance = chain.copy()
        self._handles.register(handle, instance)
        self._read_class_data(instance)
        return NewObject(handle, instance)

    def _read_class_data(self, chain: ClassDescriptorChain) -> None:
        self._trace("classdata")
        # Class data is written superclass first
        for cd in reversed(chain.classes):
            self._trace("%s", cd.name)
            if cd.is_serializable:
                for fd in cd.fields:
                    self._trace("%s", fd.name)
                    fd.value = self._read_field_value(fd.type_code)

            if (cd.is_serializable and cd.has_write_method) or (
                cd.is_externalizable and cd.has_block_data
            ):
                self._read_object_annotation(cd)

            if cd.is_externalizable and not cd.has_block_data:
                raise UnsupportedExternalContentsError(
                    f"Unable to parse externalContents of {cd.name}: "
                    "the format is specific to the implementation class"
                )

    def _read_object_annotation(self, cd: ClassDescriptor) -> None:
        self._trace("objectAnnotation")
        first = True
        while self._cursor.peek_byte() != TC_ENDBLOCKDATA:
            element = self.read_content_element()
            if first:
                # The leading element is a marker (e.g. ArrayList capacity);
                # it and the field it duplicates are dropped.
                if cd.fields:
                    del cd.fields[0]
                first = False
                continue
            cd.add_field(FieldDescriptor(TypeCode.OBJECT, "", value=element.as_value()))
        self._consume_tag(TC_ENDBLOCKDATA)

    def _read_field_value(self, type_code: TypeCode) -> FieldValue:
        value: FieldValue
        if type_code is TypeCode.ARRAY:
            return self._read_element(self._array_field_readers, "array field").as_value()
        if type_code is TypeCode.OBJECT:
            return self._read_element(self._object_field_readers, "object field").as_value()
        if type_code is TypeCode.CHAR:
            value = chr(self._cursor.read_uint16())
        elif type_code is TypeCode.BOOLEAN:
            value = self._cursor.read_byte() != 0
        else:
            value = self._primitive_readers[type_code]()
        self._trace("(%s)%r", type_code.name.lower(), value)
        return value

    # Arrays

    def _read_new_array(self) -> NewArray:
        self._consume_tag(TC_ARRAY)
        chain = self._read_class_desc()
        if chain is None:
            raise MissingClassDescError("Array has a null class descriptor")
        if len(chain) != 1:
            raise IllegalArrayClassError("Array class description made up of more than one class")
        if not chain.name or chain.name[0] != "[" or len(chain.name) < 2:
            raise IllegalArrayClassError(f"Array class name {chain.name!r} does not begin with '['")

        handle = self._new_handle()
        array = chain.copy()
        self._handles.register(handle, array)

        cd = array[0]
        element_type = TypeCode.from_byte(ord(cd.name[1]))
        element_class = None if element_type.is_primitive else cd.name[1:]
        size = self._cursor.read_int32()
        if size < 0:
            raise OutOfRangeError(f"Negative array size {size}")

        self._trace("Values")
        for index in range(size):
            self._trace("Index %d:", index)
            value = self._read_field_value(element_type)
            cd.add_field(FieldDescriptor(element_type, "", element_class, value))
        return NewArray(handle, array)

    # Classes and class descriptors

    def _read_new_class(self) -> NewClass:
        self._consume_tag(TC_CLASS)
        chain = self._read_class_desc()
        handle = self._new_handle()
        self._handles.register(handle, chain)
        return NewClass(handle, chain)

    def _read_class_desc(self) -> ClassDescriptorChain | None:
        element = self._read_element(self._class_desc_readers, "classDesc")
        if isinstance(element, Null):
            return None
        if isinstance(element, Reference):
            if not isinstance(element.target, ClassDescriptorChain):
                raise HandleKindError(
                    f"Handle 0x{element.handle:X} is not a class descriptor: {element.target!r}"
                )
            return element.target
        return element.chain

    def _read_new_class_desc(self) -> NewClassDesc:
        self._consume_tag(TC_CLASSDESC)
        with self._nested():
            self._trace("className")
            name = self._read_utf()
            suid = self._cursor.read_int64()
            self._trace("serialVersionUID - 0x%016X", suid & 0xFFFFFFFFFFFFFFFF)

            handle = self._new_handle()
            cd = ClassDescriptor(name=name, serial_version_uid=suid, handle=handle)
            chain = ClassDescriptorChain([cd])
            self._handles.register(handle, chain)

            cd.flags = ClassDescFlags.parse(self._cursor.read_byte())
            self._trace("classDescFlags - 0x%02X - %s", int(cd.flags), cd.flags.describe())
            self._read_fields(cd)
            self._read_class_annotation()

            # The superclass is consumed but not linked for plain classes.
            self._trace("superClassDesc")
            self._read_class_desc()
        return NewClassDesc(handle, chain)

    def _read_new_proxy_class_desc(self) -> NewClassDesc:
        self._consume_tag(TC_PROXYCLASSDESC)
        with self._nested():
            handle = self._new_handle()
            chain = ClassDescriptorChain()
            self._handles.register(handle, chain)

            count = self._cursor.read_int32()
            if count < 0:
                raise OutOfRangeError(f"Negative proxy interface count {count}")
            self._trace("proxyInterfaceNames")
            for _ in range(count):
                self._read_utf()
            self._read_class_annotation()

            self._trace("superClassDesc")
            chain.add_superclass_chain(self._read_class_desc())
        return NewClassDesc(handle, chain, proxy=True)

    def _read_fields(self, cd: ClassDescriptor) -> None:
        count = self._cursor.read_int16()
        if count < 0:
            raise OutOfRangeError(f"Illegal field count {count} for {cd.name}")
        self._trace("fieldCount - %d", count)
        for _ in range(count):
            type_code = TypeCode.from_byte(self._cursor.read_byte())
            name = self._read_utf()
            class_name = None
            if not type_code.is_primitive:
                class_name = self._read_string()
            self._trace("%s - %s %s", name, type_code.name.lower(), class_name or "")
            cd.add_field(FieldDescriptor(type_code, name, class_name))

    def _read_class_annotation(self) -> None:
        self._trace("classAnnotations")
        while self._cursor.peek_byte() != TC_ENDBLOCKDATA:
            self.read_content_element()
        self._consume_tag(TC_ENDBLOCKDATA)

    # Strings, enums and leaves

    def _read_new_string(self) -> NewString:
        long = self._cursor.peek_byte() == TC_LONGSTRING
        self._consume_tag(TC_LONGSTRING if long else TC_STRING)
        handle = self._new_handle()
        value = self._read_long_utf() if long else self._read_utf()
        self._handles.register(handle, value)
        return NewString(handle, value, long)

    def _read_string(self) -> str:
        element = self._read_element(self._string_readers, "string")
        if isinstance(element, Reference):
            if not isinstance(element.target, str):
                raise HandleKindError(f"Handle 0x{element.handle:X} is not a string: {element.target!r}")
            return element.target
        return element.value

    def _read_new_enum(self) -> None:
        self._consume_tag(TC_ENUM)
        self._read_class_desc()
        self._new_handle()
        self._read_string()
        raise EnumNotImplementedError("Enum constants are not supported")

    def _read_reference(self) -> Reference:
        self._consume_tag(TC_REFERENCE)
        handle = self._cursor.read_int32()
        self._trace("Handle - 0x%06X", handle)
        return Reference(handle, self._handles.resolve(handle))

    def _read_null(self) -> Null:
        self._consume_tag(TC_NULL)
        return NULL

    def _read_block_data(self) -> BlockData:
        long = self._cursor.peek_byte() == TC_BLOCKDATALONG
        self._consume_tag(TC_BLOCKDATALONG if long else TC_BLOCKDATA)
        size = self._cursor.read_int32() if long else self._cursor.read_byte()
        payload = self._cursor.read_bytes(size)
        self._trace("Length - %d Contents - 0x%s", size, payload.hex())
        return BlockData(payload, long)


def decode_stream(
    data: bytes | bytearray | memoryview, *, max_depth: int | None = None
) -> tuple[list[ClassDescriptorChain], bool]:
    """Decode a serialization stream into its top-level objects.

    Args:
        data: The complete stream, starting with the 0xACED magic.
        max_depth: Optional limit on element nesting.

    Returns:
        Tuple of (objects, success); see StreamDecoder.decode().
    """
    return StreamDecoder(data, max_depth=max_depth).decode()
