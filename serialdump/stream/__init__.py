"""Java Object Serialization Stream decoder."""

from .cursor import BinaryCursor as BinaryCursor
from .decoder import StreamDecoder as StreamDecoder
from .decoder import decode_stream as decode_stream
from .errors import EnumNotImplementedError as EnumNotImplementedError
from .errors import HandleKindError as HandleKindError
from .errors import IllegalArrayClassError as IllegalArrayClassError
from .errors import IllegalClassDescFlagsError as IllegalClassDescFlagsError
from .errors import IllegalContentTagError as IllegalContentTagError
from .errors import IllegalFieldTypeCodeError as IllegalFieldTypeCodeError
from .errors import MalformedHeaderError as MalformedHeaderError
from .errors import MissingClassDescError as MissingClassDescError
from .errors import OutOfRangeError as OutOfRangeError
from .errors import RecursionLimitError as RecursionLimitError
from .errors import StreamError as StreamError
from .errors import UnknownHandleError as UnknownHandleError
from .errors import UnsupportedExternalContentsError as UnsupportedExternalContentsError
from .handles import HandleTable as HandleTable
from .model import BackReference as BackReference
from .model import ClassDescFlags as ClassDescFlags
from .model import ClassDescriptor as ClassDescriptor
from .model import ClassDescriptorChain as ClassDescriptorChain
from .model import FieldDescriptor as FieldDescriptor
from .model import TypeCode as TypeCode
