"""Unit tests configuration file."""

import struct

import pytest

from serialdump.stream.constants import (
    SC_SERIALIZABLE,
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
)


def pytest_configure(config):
    """Disable verbose output when running tests."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False


class StreamBuilder:
    """Writes serialization stream bytes for tests.

    Field declarations are (type_code, name) for primitives and
    (type_code, name, class_name) for arrays and objects; the class name is
    written as a TC_STRING, which takes a handle, or as a TC_REFERENCE when
    given as an int.
    """

    def __init__(self, header: bool = True):
        self._buf = bytearray(b"\xac\xed\x00\x05" if header else b"")

    def raw(self, data):
        self._buf.extend(data)
        return self

    def byte(self, value):
        return self.raw(struct.pack(">B", value))

    def short(self, value):
        return self.raw(struct.pack(">h", value))

    def int(self, value):
        return self.raw(struct.pack(">i", value))

    def long(self, value):
        return self.raw(struct.pack(">q", value))

    def float(self, value):
        return self.raw(struct.pack(">f", value))

    def double(self, value):
        return self.raw(struct.pack(">d", value))

    def char(self, value):
        return self.raw(struct.pack(">H", ord(value)))

    def boolean(self, value):
        return self.byte(1 if value else 0)

    def utf(self, text):
        data = text.encode("latin-1")
        return self.raw(struct.pack(">H", len(data)) + data)

    def string(self, text):
        return self.byte(TC_STRING).utf(text)

    def long_string(self, text):
        data = text.encode("latin-1")
        return self.byte(TC_LONGSTRING).raw(struct.pack(">q", len(data)) + data)

    def null(self):
        return self.byte(TC_NULL)

    def reference(self, handle):
        return self.byte(TC_REFERENCE).int(handle)

    def end_block(self):
        return self.byte(TC_ENDBLOCKDATA)

    def block_data(self, payload):
        return self.byte(TC_BLOCKDATA).byte(len(payload)).raw(payload)

    def long_block_data(self, payload):
        return self.byte(TC_BLOCKDATALONG).int(len(payload)).raw(payload)

    def class_desc(self, name, fields=(), flags=SC_SERIALIZABLE, suid=0, superclass=None):
        """Write a TC_CLASSDESC with an empty annotation.

        `superclass` is a callable writing the superclass descriptor; the
        default writes TC_NULL.
        """
        self.byte(TC_CLASSDESC).utf(name).long(suid).byte(flags).short(len(fields))
        for declaration in fields:
            code, field_name = declaration[0], declaration[1]
            self.byte(ord(code)).utf(field_name)
            if code in "[L" and isinstance(declaration[2], int):
                self.reference(declaration[2])
            elif code in "[L":
                self.string(declaration[2])
        self.end_block()
        if superclass is None:
            return self.null()
        superclass(self)
        return self

    def proxy_class_desc(self, interfaces, superclass=None):
        self.byte(TC_PROXYCLASSDESC).int(len(interfaces))
        for interface in interfaces:
            self.utf(interface)
        self.end_block()
        if superclass is None:
            return self.null()
        superclass(self)
        return self

    def new_object(self):
        return self.byte(TC_OBJECT)

    def new_array(self):
        return self.byte(TC_ARRAY)

    def new_class(self):
        return self.byte(TC_CLASS)

    def new_enum(self):
        return self.byte(TC_ENUM)

    def build(self):
        return bytes(self._buf)


@pytest.fixture
def stream():
    """Return a StreamBuilder factory."""
    return StreamBuilder
