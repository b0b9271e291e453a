"""Wire constants of the Java Object Serialization Stream protocol."""

STREAM_MAGIC = 0xACED
STREAM_VERSION = 5

# Content element tags
TC_NULL = 0x70
TC_REFERENCE = 0x71
TC_CLASSDESC = 0x72
TC_OBJECT = 0x73
TC_STRING = 0x74
TC_ARRAY = 0x75
TC_CLASS = 0x76
TC_BLOCKDATA = 0x77
TC_ENDBLOCKDATA = 0x78
TC_RESET = 0x79
TC_BLOCKDATALONG = 0x7A
TC_EXCEPTION = 0x7B
TC_LONGSTRING = 0x7C
TC_PROXYCLASSDESC = 0x7D
TC_ENUM = 0x7E

TAG_NAMES: dict[int, str] = {
    TC_NULL: "TC_NULL",
    TC_REFERENCE: "TC_REFERENCE",
    TC_CLASSDESC: "TC_CLASSDESC",
    TC_OBJECT: "TC_OBJECT",
    TC_STRING: "TC_STRING",
    TC_ARRAY: "TC_ARRAY",
    TC_CLASS: "TC_CLASS",
    TC_BLOCKDATA: "TC_BLOCKDATA",
    TC_ENDBLOCKDATA: "TC_ENDBLOCKDATA",
    TC_RESET: "TC_RESET",
    TC_BLOCKDATALONG: "TC_BLOCKDATALONG",
    TC_EXCEPTION: "TC_EXCEPTION",
    TC_LONGSTRING: "TC_LONGSTRING",
    TC_PROXYCLASSDESC: "TC_PROXYCLASSDESC",
    TC_ENUM: "TC_ENUM",
}

# classDescFlags bits
SC_WRITE_METHOD = 0x01
SC_SERIALIZABLE = 0x02
SC_EXTERNALIZABLE = 0x04
SC_BLOCK_DATA = 0x08

# First handle assigned in a stream
BASE_WIRE_HANDLE = 0x7E0000


def tag_name(tag: int) -> str:
    """Return the protocol name of a tag byte, or its hex value if unknown."""
    return TAG_NAMES.get(tag, f"0x{tag:02X}")
