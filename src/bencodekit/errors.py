"""
Exceptions raised by the Bencode decoder and encoder.

Every error aborts the current call; nothing is recovered or retried.
Decode errors carry the byte offset where the problem was found and the
offending byte or literal, so callers can build their own diagnostics.
"""
from typing import Optional, Union


class BencodeError(Exception):
    """Base class for all Bencode codec errors."""


class BencodeDecodeError(BencodeError, ValueError):
    """Raised when input bytes are not valid Bencode."""

    def __init__(self, message: str, position: Optional[int] = None,
                 token: Union[bytes, int, None] = None):
        if position is not None:
            message = f"{message} (at offset {position})"
        super().__init__(message)
        self.position = position
        self.token = token


class InvalidTokenError(BencodeDecodeError):
    """The lookahead byte does not start any value."""


class UnexpectedEndOfInputError(BencodeDecodeError):
    """Input ended where a value was required."""


# --------------------------
# Integers
# --------------------------

class UnterminatedIntegerError(BencodeDecodeError):
    """No closing 'e' before the end of input."""


class EmptyIntegerLiteralError(BencodeDecodeError):
    """Nothing between 'i' and 'e'."""


class LeadingZeroError(BencodeDecodeError):
    """Integer literal such as i03e."""


class NegativeZeroError(BencodeDecodeError):
    """Integer literal such as i-0e."""


class MalformedIntegerError(BencodeDecodeError):
    """Stray characters in the literal, or a value outside int64."""


# --------------------------
# Byte strings
# --------------------------

class MissingLengthDelimiterError(BencodeDecodeError):
    """No ':' after the length prefix."""


class EmptyLengthError(BencodeDecodeError):
    """Length prefix has no digits."""


class InvalidLengthError(BencodeDecodeError):
    """Length prefix is not a non-negative decimal number."""


class TruncatedStringError(BencodeDecodeError):
    """Fewer payload bytes available than the declared length."""

    def __init__(self, message: str, position: Optional[int] = None,
                 token: Union[bytes, int, None] = None,
                 expected: int = 0, available: int = 0):
        super().__init__(message, position, token)
        self.expected = expected
        self.available = available


# --------------------------
# Containers
# --------------------------

class UnterminatedListError(BencodeDecodeError):
    """Input ended before the list's closing 'e'."""


class UnterminatedDictionaryError(BencodeDecodeError):
    """Input ended before the dictionary's closing 'e'."""


class NonStringKeyError(BencodeDecodeError):
    """A dictionary key does not start with a length prefix."""


class DuplicateKeyError(BencodeDecodeError):
    """A dictionary key occurred twice (strict mode only)."""


class NestingTooDeepError(BencodeDecodeError):
    """Lists/dictionaries nested deeper than the configured limit."""


# --------------------------
# Encoding
# --------------------------

class BencodeEncodeError(BencodeError, TypeError):
    """Raised when a value cannot be rendered as Bencode."""


class UnsupportedValueError(BencodeEncodeError):
    """The value is not one of the four Bencode shapes."""


class CustomRenderError(BencodeEncodeError):
    """An object's own __bencode__ failed or returned something other than bytes."""


class EncodeNestingTooDeepError(BencodeEncodeError):
    """The value tree is nested deeper than the configured limit."""
