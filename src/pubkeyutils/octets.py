"""Integer <-> octet string transcoding used by every algorithm family.

The pair `(n_bits, big_endian)` fully determines the encoding of an integer. Every key component, signature component
and ciphertext component is written and read through these functions, so two implementations agreeing on the pair are
bit-compatible.

Typical usage example:

    integer_to_octets(256, 16)           # b"\\x01\\x00"
    octets_to_integer(b"\\x00\\x01", big_endian=False)  # 256
    maybe_integerize(b"*")              # 42
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from pubkeyutils.errors import RangeError


def check_range(data: bytes, start: int = 0, end: int | None = None) -> tuple[int, int]:
    """Validates a `[start, end)` extent against a buffer.

    Args:
        data: The buffer the extent refers to.
        start: First index of the extent. Defaults to 0.
        end: One past the last index of the extent. Defaults to the buffer length.

    Returns:
        The normalized `(start, end)` pair.

    Raises:
        RangeError: If `0 <= start <= end <= len(data)` does not hold.
    """
    if end is None:
        end = len(data)
    if not 0 <= start <= end <= len(data):
        raise RangeError(f"Range [{start}, {end}) is out of bounds for a buffer of {len(data)} octets.")
    return start, end


def octets_to_integer(data: bytes,
                      start: int = 0,
                      end: int | None = None,
                      big_endian: bool = True,
                      n_bits: int | None = None) -> int:
    """Converts an octet string (or a slice of one) to a non-negative integer.

    Args:
        data: The octets to convert.
        start: First index to read. Defaults to 0.
        end: One past the last index to read. Defaults to the length of `data`.
        big_endian: Whether the most significant octet comes first. Defaults to True.
        n_bits: If given, only the low `n_bits` bits of the decoded value are kept,
            matching the truncation `integer_to_octets` applies when encoding.

    Returns:
        The representative integer.

    Raises:
        RangeError: If `start`/`end` lie outside `data`.
        ValueError: If `n_bits` is negative.
    """
    start, end = check_range(data, start, end)
    value = int.from_bytes(data[start:end], byteorder="big" if big_endian else "little", signed=False)
    if n_bits is not None:
        if n_bits < 0:
            raise ValueError("n_bits must be >= 0")
        value &= (1 << n_bits) - 1
    return value


def integer_to_octets(value: int, n_bits: int | None = None, big_endian: bool = True) -> bytes:
    """Converts a non-negative integer to a fixed-length octet string.

    The result is `ceil(n_bits / 8)` octets long and holds exactly the low `n_bits` bits of `value`. Bits above
    `n_bits` are dropped silently, so callers wanting overflow detection have to compare against
    `value.bit_length()` themselves.

    Args:
        value: The integer to encode.
        n_bits: Width of the encoding in bits. Defaults to the bit length of `value`.
        big_endian: Whether the most significant octet is written first. Defaults to True.

    Returns:
        The representative octets.

    Raises:
        ValueError: If `value` or `n_bits` is negative.
    """
    if value < 0:
        raise ValueError("Only non-negative integers can be encoded.")
    if n_bits is None:
        n_bits = value.bit_length()
    if n_bits < 0:
        raise ValueError("n_bits must be >= 0")
    value &= (1 << n_bits) - 1
    return value.to_bytes((n_bits + 7) // 8, byteorder="big" if big_endian else "little", signed=False)


def maybe_integerize(thing: int | bytes) -> int:
    """Returns `thing` as an integer, decoding big-endian octets when necessary.

    Args:
        thing: An integer or a bytes-like object.

    Returns:
        The integer itself, or the big-endian decoding of the octets.

    Raises:
        TypeError: If `thing` is neither.
    """
    if isinstance(thing, int):
        return thing
    if isinstance(thing, (bytes, bytearray, memoryview)):
        return octets_to_integer(bytes(thing))
    raise TypeError(f"Cannot interpret {type(thing).__name__} as an integer.")
