"""
Bencode codec for BitTorrent data: decode bytes into BencodeType values
and encode values back into canonical bytes.
"""
from .constants import DEFAULT_MAX_DEPTH
from .decoder import BencodeDecoder, decode, iter_decode, parse
from .encoder import encode
from .errors import (
    BencodeDecodeError,
    BencodeEncodeError,
    BencodeError,
    CustomRenderError,
    DuplicateKeyError,
    EmptyIntegerLiteralError,
    EmptyLengthError,
    EncodeNestingTooDeepError,
    InvalidLengthError,
    InvalidTokenError,
    LeadingZeroError,
    MalformedIntegerError,
    MissingLengthDelimiterError,
    NegativeZeroError,
    NestingTooDeepError,
    NonStringKeyError,
    TruncatedStringError,
    UnexpectedEndOfInputError,
    UnsupportedValueError,
    UnterminatedDictionaryError,
    UnterminatedIntegerError,
    UnterminatedListError,
)
from .fetch import fetch, fetch_many
from .source import ByteSource
from .structure import (
    Bencodable,
    BencodeDict,
    BencodeInt,
    BencodeList,
    BencodeString,
    BencodeType,
    Value,
    from_python,
    to_python,
)

__version__ = "0.1.0"

__all__ = [
    'decode', 'parse', 'iter_decode', 'encode', 'fetch', 'fetch_many',
    'BencodeDecoder', 'ByteSource', 'DEFAULT_MAX_DEPTH',
    'BencodeType', 'BencodeInt', 'BencodeString', 'BencodeList', 'BencodeDict',
    'Value', 'Bencodable', 'to_python', 'from_python',
    'BencodeError', 'BencodeDecodeError', 'BencodeEncodeError',
    'InvalidTokenError', 'UnexpectedEndOfInputError',
    'UnterminatedIntegerError', 'EmptyIntegerLiteralError', 'LeadingZeroError',
    'NegativeZeroError', 'MalformedIntegerError',
    'MissingLengthDelimiterError', 'EmptyLengthError', 'InvalidLengthError',
    'TruncatedStringError', 'UnterminatedListError', 'UnterminatedDictionaryError',
    'NonStringKeyError', 'DuplicateKeyError', 'NestingTooDeepError',
    'UnsupportedValueError', 'CustomRenderError', 'EncodeNestingTooDeepError',
]
