#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Pull single numeric values out of a message payload.

Everything here returns None rather than raising: a value that can't be
read is simply absent, and the caller keeps walking the message using
the declared field sizes.

"""
from struct import unpack_from, error as StructError

from strideio.fit._profile import BASE_TYPES, BASE_TYPE_STRING


def lookup_base_type(base_type_code):
    """The base type for a definition's type byte (high bits ignored)."""
    return BASE_TYPES.get(base_type_code & 0x1F)


def decode_value(buffer, offset, size, base_type_code, endian='<'):
    """Decode the first scalar of a field.

    Parameters
    ----------
    buffer : bytes-like
        The whole file (not just the message).
    offset : int
        Absolute position of the field.
    size : int
        Declared width of the field in bytes. May exceed the natural width
        of the type (arrays); only the first element is read.
    base_type_code : int
        Base type byte from the field definition.
    endian : str
        '<' or '>', from the owning definition message.

    Returns
    -------
    int, float or None
    """
    base_type = lookup_base_type(base_type_code)
    if base_type is None or base_type.fmt is None:
        return None

    width = base_type.size
    if size < width or offset < 0 or offset + width > len(buffer):
        return None

    try:
        value, = unpack_from(endian + base_type.fmt, buffer, offset)
    except StructError:
        return None

    return base_type.parse(value)


def decode_by_width(buffer, offset, size, endian='<'):
    """Best guess at a developer field value we have no description for.

    1 and 2 byte fields are read as unsigned integers, 8 byte fields as
    doubles. 4 byte fields are usually floats (Stryd), so try that first
    and fall back on an unsigned integer for implausible floats.
    """
    if offset < 0 or offset + size > len(buffer):
        return None

    if size == 1:
        value, = unpack_from('B', buffer, offset)
    elif size == 2:
        value, = unpack_from(endian + 'H', buffer, offset)
    elif size == 4:
        value, = unpack_from(endian + 'f', buffer, offset)
        if value != value or abs(value) >= 1e10:   # NaN, inf, garbage
            value, = unpack_from(endian + 'I', buffer, offset)
    elif size == 8:
        value, = unpack_from(endian + 'd', buffer, offset)
        if value != value:
            return None
    else:
        return None

    return value


def decode_string(buffer, offset, size):
    """NUL-terminated UTF-8 string, or None if empty."""
    if offset < 0 or offset + size > len(buffer):
        return None
    raw = bytes(buffer[offset:offset + size])
    text = raw.split(b'\x00')[0].decode('utf-8', 'replace')
    return text or None


def is_string_type(base_type_code):
    return lookup_base_type(base_type_code) is BASE_TYPE_STRING
