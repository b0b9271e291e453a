"""Exceptions raised while decoding a serialization stream."""


class StreamError(RuntimeError):
    """Base exception for stream decoding errors."""


class MalformedHeaderError(StreamError):
    """Raised when the stream magic or protocol version is wrong."""


class OutOfRangeError(StreamError):
    """Raised when a read runs past the end of the buffer."""


class IllegalContentTagError(StreamError):
    """Raised when a tag byte is not valid at the current position."""


class IllegalFieldTypeCodeError(StreamError):
    """Raised when a field declares an unknown type code."""


class IllegalClassDescFlagsError(StreamError):
    """Raised when classDescFlags holds an invalid combination of bits."""


class IllegalArrayClassError(StreamError):
    """Raised when an array is described by something other than one array class."""


class MissingClassDescError(StreamError):
    """Raised when an object or array has a null class descriptor."""


class UnknownHandleError(StreamError):
    """Raised when a reference names a handle that was never registered."""


class HandleKindError(StreamError):
    """Raised when a reference resolves to an entity of the wrong kind."""


class UnsupportedExternalContentsError(StreamError):
    """Raised for externalizable class data not written in block data mode."""


class EnumNotImplementedError(StreamError, NotImplementedError):
    """Raised when an enum constant is encountered."""


class RecursionLimitError(StreamError):
    """Raised when elements nest deeper than the configured limit."""
