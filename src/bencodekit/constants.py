"""
Grammar tokens and limits shared by the Bencode decoder and encoder.
"""

# Single-byte tokens, compared against ints read from a ByteSource
INT_START = ord("i")
LIST_START = ord("l")
DICT_START = ord("d")
END = ord("e")
LENGTH_DELIM = ord(":")
MINUS = ord("-")
ZERO = ord("0")
DIGITS = frozenset(b"0123456789")

# Integers are signed 64-bit on the wire
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

# Maximum list/dict nesting accepted by decode() and encode().
# Each level costs two Python frames, so keep this well below sys.getrecursionlimit().
DEFAULT_MAX_DEPTH = 256

# Seconds allowed for a whole fetch() round trip
DEFAULT_FETCH_TIMEOUT = 10

# Longest literals that can still be valid: len(b"-9223372036854775808")
# and the 19 digits of INT64_MAX
MAX_INT_LITERAL_LEN = 20
MAX_LENGTH_DIGITS = 19

# Upper bound for a single stream read, so a huge declared length never
# allocates more than is actually available
READ_CHUNK_SIZE = 64 * 1024
