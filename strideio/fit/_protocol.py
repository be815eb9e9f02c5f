#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Implement the Flexible and Interoperable data Transfer (FIT) protocol.

The whole file is held in memory and walked once, front to back. Each
walk owns its own `FitFile` (cursor, definition table, developer field
table), so separate files can be decoded side by side.

Decoding is best effort by default: a message that can't be decoded is
dropped and scanning resumes one byte after its header byte. Pass
``strict=True`` to `gen_fit_messages` to get the error instead.

"""
from collections import namedtuple
import logging
from os import PathLike
from struct import unpack, unpack_from

from strideio.fit import _codec
from strideio.fit._devfields import DevFieldResolver
from strideio.fit._profile import (
    COMPRESSED_TIMESTAMP, DEFINITION_MESSAGE, DEVELOPER_DATA,
    FILE_HEADER_MIN_SIZE, FIT_SIGNATURE, GLOBAL_MESG_NUMS,
    MESG_NUM_DEVELOPER_DATA_ID, MESG_NUM_FIELD_DESCRIPTION, MESG_NUM_RECORD,
    STRING_FIELDS, field_name)
from strideio._util.exceptions import (
    FITMessageError, InvalidFileError)


log = logging.getLogger(__name__)


class FitHeader(namedtuple('FitHeader', ('header_size', 'protocol_version',
                                     'profile_version', 'data_size'))):
    """The fixed part of the file header (any header CRC is ignored)."""
    __slots__ = ()

    @property
    def protocol_version_str(self):
        prot = self.protocol_version
        return '{:d}.{:d}'.format(prot >> 4, prot & 0xF)

    @property
    def profile_version_str(self):
        prof = self.profile_version
        return '{:d}.{:d}'.format(prof // 100, prof % 100)


class FitFile:
    """An in-memory *.fit file and the state needed to walk it.

    Attributes
    ----------
    buffer : bytes
        The complete file.
    position : int
        Read cursor (absolute offset into `buffer`).
    end : int
        One past the last byte of the message stream. Set properly when
        the file header is read.
    local_messages : dict
        Definition messages by local message type. A later definition
        for the same local type replaces the earlier one.
    dev_fields : DevFieldResolver
        Developer field descriptions seen so far.
    last_timestamp : int or None
        Most recent `timestamp` field seen in any data message; the base
        for compressed timestamp headers.
    expand_timestamps : bool
        Reconstruct timestamps for compressed timestamp headers.
    """
    def __init__(self, buffer, *, expand_timestamps=False):
        self.buffer = bytes(buffer)
        self.position = 0
        self.end = len(self.buffer)
        self.local_messages = {}
        self.dev_fields = DevFieldResolver()
        self.last_timestamp = None
        self.expand_timestamps = expand_timestamps

    @property
    def bytes_left(self):
        return self.end - self.position

    def read(self, size):
        """Read from the message stream, refusing to run past its end."""
        if size > self.bytes_left:
            raise FITMessageError(
                'wanted %d bytes, only %d left' % (size, self.bytes_left))
        start = self.position
        self.position += size
        return self.buffer[start:self.position]

    def skip_bytes(self, size):
        if size > self.bytes_left:
            raise FITMessageError(
                'wanted to skip %d bytes, only %d left'
                % (size, self.bytes_left))
        self.position += size

    def seek(self, position):
        self.position = position


class FitMessageHeader:
    """From the FIT SDK

    The record header is a one byte bit field. There are two types of
    record header: normal header and compressed timestamp header,
    distinguished by the most significant bit.
    """
    __slots__ = ('_message_cls', 'local_message_type', 'time_offset',
                 'has_developer_data')

    @property
    def is_compressed(self):
        return self.time_offset is not None

    def message_cls(self, fitfile):
        return self._message_cls(self, fitfile)   # partial'd, kinda


class NormalHeader(FitMessageHeader):
    """From the FIT SDK

    Normal Header Bit Field Description
    -----------------------------------

    =====  =============  ========================
    Bit        Value      Description
    =====  =============  ========================
      7          0        Normal header
      6        0 or 1     Message type:
                            1: definition message
                            0: data message
      5        0 or 1     Definition has developer fields
      4          0        Reserved
     0-3        0-15      Local message type
    =====  =============  ========================
    """
    __slots__ = tuple()

    def __init__(self, header_byte):
        is_definition = bool(header_byte & DEFINITION_MESSAGE)
        self._message_cls = DefinitionMessage if is_definition else DataMessage
        self.has_developer_data = (
            is_definition and bool(header_byte & DEVELOPER_DATA))
        self.local_message_type = header_byte & 0xF    # bits 0-3
        self.time_offset = None


class CompressedTimestampHeader(FitMessageHeader):
    """From the FIT SDK

    Compressed Timestamp Header Description
    ---------------------------------------

    =====  =============  ========================
    Bit        Value      Description
    =====  =============  ========================
      7          1        Compressed timestamp
     5-6        0-3       Local message type
     0-4        0-31      Time offset (seconds)
    =====  =============  ========================

    Only ever used for data messages.
    """
    __slots__ = tuple()

    def __init__(self, header_byte):
        self._message_cls = DataMessage
        self.has_developer_data = False
        self.local_message_type = (header_byte >> 5) & 0x3   # bits 5-6
        self.time_offset = header_byte & 0x1F                # bits 0-4


class DefinitionMessage:
    """From the FIT SDK

    Associates the local message type in the record header with a global
    message number and the layout of the data messages that follow.

    Definition Message Contents
    ---------------------------

    ======  =======================  =============  ===========================
    Byte    Description                 Length      Value
    ======  =======================  =============  ===========================
      0     Reserved                       1         0
      1     Architecture                   1         0: little endian
                                                     otherwise: big endian
     2-3    Global message number          2         in the above endianness
      4     Fields                         1         number of field defs
      5-    Field definitions          3 each        see FieldDefinition
      .     Developer fields               1         only if header bit 5 set
      .-    Developer field defs       3 each        see DevFieldDefinition
    ======  =======================  =============  ===========================
    """
    __slots__ = ('header', 'global_mesg_num', 'name', 'endian',
                 'field_defs', 'dev_field_defs', 'size')

    kind = 'definition'

    def __init__(self, header, fitfile):
        self.header = header

        __, arch = unpack('<2B', fitfile.read(2))   # ignore reserved
        self.endian = '<' if arch == 0 else '>'

        self.global_mesg_num, field_count = unpack(
            self.endian + 'HB', fitfile.read(3))
        self.name = GLOBAL_MESG_NUMS.get(self.global_mesg_num, 'unknown')

        self.field_defs = [FieldDefinition(fitfile, self.global_mesg_num)
                           for _ in range(field_count)]

        self.dev_field_defs = []
        if header.has_developer_data:
            dev_count, = unpack('<B', fitfile.read(1))
            self.dev_field_defs = [DevFieldDefinition(fitfile)
                                   for _ in range(dev_count)]

        self.size = (sum(f.size for f in self.field_defs)
                     + sum(f.size for f in self.dev_field_defs))

        # Save (or replace) this local message.
        fitfile.local_messages[header.local_message_type] = self
        log.debug('local type %d -> %s (%d) %d+%d fields, %s',
                  header.local_message_type, self.name,
                  self.global_mesg_num, len(self.field_defs),
                  len(self.dev_field_defs),
                  'little endian' if self.endian == '<' else 'big endian')


class DataMessage:
    """Field values laid out per a previously seen definition.

    Attributes
    ----------
    fields : dict
        Field name -> decoded value. Fields that decoded to nothing
        (invalid, unsupported type, truncated) are left out. Developer
        fields are merged in under their resolved names.
    """
    __slots__ = ('header', 'global_mesg_num', 'name', 'fields')

    kind = 'data'

    def __init__(self, header, fitfile):
        self.header = header

        definition = fitfile.local_messages.get(header.local_message_type)
        if definition is None:
            raise FITMessageError('invalid local message type (%d)' %
                                  header.local_message_type)

        if definition.size > fitfile.bytes_left:
            raise FITMessageError(
                '%s message runs past the end of the data' % definition.name)

        self.global_mesg_num = definition.global_mesg_num
        self.name = definition.name
        self.fields = {}

        buffer, endian = fitfile.buffer, definition.endian
        strings = STRING_FIELDS.get(self.global_mesg_num, ())

        for field_def in definition.field_defs:
            offset = fitfile.position
            if field_def.name in strings:
                value = _codec.decode_string(buffer, offset, field_def.size)
            else:
                value = _codec.decode_value(buffer, offset, field_def.size,
                                            field_def.base_type_code, endian)
            fitfile.skip_bytes(field_def.size)   # regardless of value
            if value is not None:
                self.fields[field_def.name] = value

        for dev_def in definition.dev_field_defs:
            value = dev_def.read(fitfile, endian)
            if value is not None:
                name = fitfile.dev_fields.resolve(
                    dev_def.developer_data_index, dev_def.field_num, value)
                self.fields[name] = value

    @property
    def is_record(self):
        return self.global_mesg_num == MESG_NUM_RECORD

    def get(self, name, default=None):
        return self.fields.get(name, default)


class FieldDefinition:
    """From the FIT SDK

    Field Definition Contents
    -------------------------

    ======  =================  ===============================================
     Byte    Name               Description
    ======  =================  ===============================================
      0     Field definition   Defined in the global FIT profile for the
            number             specified FIT message.
      1     Size               Size (in bytes) of the field. May be a
                               multiple of the base type's size (arrays).
      2     Base type          Base type of the field. Low five bits are
                               the type number.
    ======  =================  ===============================================
    """
    __slots__ = ('field_def_num', 'size', 'base_type_code', 'name')

    def __init__(self, fitfile, global_mesg_num):
        # NOTE: reading single bytes, so no need to apply endianness here.
        self.field_def_num, self.size, self.base_type_code = unpack(
            '<3B', fitfile.read(3))
        self.name = field_name(global_mesg_num, self.field_def_num)


class DevFieldDefinition:
    """Field number, size and developer data index; three bytes."""
    __slots__ = ('field_num', 'size', 'developer_data_index')

    def __init__(self, fitfile):
        self.field_num, self.size, self.developer_data_index = unpack(
            '<3B', fitfile.read(3))

    def read(self, fitfile, endian):
        """Decode this field's value and advance past it."""
        offset = fitfile.position
        description = fitfile.dev_fields.describe(
            self.developer_data_index, self.field_num)

        base_type = description.base_type if description else None
        if base_type is not None and base_type.fmt is not None:
            value = _codec.decode_value(fitfile.buffer, offset, self.size,
                                        base_type.type_num, endian)
        else:
            value = _codec.decode_by_width(fitfile.buffer, offset,
                                           self.size, endian)

        fitfile.skip_bytes(self.size)
        return value


def read_file_header(fitfile):
    """Read the *.fit file header, modifying `fitfile` in place.

    The cursor is moved to the first message header and `fitfile.end` is
    set to the end of the message stream. Anything wrong with the header
    is fatal.

    Returns
    -------
    FitHeader

    Raises
    ------
    InvalidFileError
    """
    buffer = fitfile.buffer
    if len(buffer) < FILE_HEADER_MIN_SIZE:
        raise InvalidFileError('fit', 'only %d bytes' % len(buffer))

    if buffer[8:12] != FIT_SIGNATURE:
        raise InvalidFileError('fit')

    # Larger fields are explicitly little endian from SDK.
    header = FitHeader(*unpack_from('<2BHI', buffer, 0))

    if header.header_size < FILE_HEADER_MIN_SIZE:
        raise InvalidFileError(
            'fit', 'header size of %d' % header.header_size)
    if header.header_size > len(buffer):
        raise InvalidFileError('fit', 'header runs past the end of the file')

    end = header.header_size + header.data_size
    if end > len(buffer):
        log.warning('data size (%d) runs past the end of the file; '
                    'reading what there is', header.data_size)
        end = len(buffer)

    fitfile.seek(header.header_size)   # any header CRC is ignored
    fitfile.end = end
    return header


def read_fit_message(fitfile):
    """Parse a message (header + contents)."""
    header_byte, = unpack('<B', fitfile.read(1))
    # A value of 0 in bit 7 indicates that this is a normal header.
    header_cls = (CompressedTimestampHeader
                  if (header_byte & COMPRESSED_TIMESTAMP) else NormalHeader)
    header = header_cls(header_byte)

    message = header.message_cls(fitfile)

    if isinstance(message, DataMessage):
        _after_data_message(fitfile, message)

    return message


def _after_data_message(fitfile, message):
    """Keep per-file state in step with a freshly decoded data message."""
    num = message.global_mesg_num
    if num == MESG_NUM_DEVELOPER_DATA_ID:
        fitfile.dev_fields.add_developer(message.fields)
    elif num == MESG_NUM_FIELD_DESCRIPTION:
        fitfile.dev_fields.add_description(message.fields)

    timestamp = message.fields.get('timestamp')
    if isinstance(timestamp, int):
        fitfile.last_timestamp = timestamp
    elif timestamp is not None:
        log.debug('non-integer timestamp %r not used as a base', timestamp)
    elif (message.header.is_compressed and fitfile.expand_timestamps
            and fitfile.last_timestamp is not None):
        base = fitfile.last_timestamp
        timestamp = base + ((message.header.time_offset - base) & 0x1F)
        message.fields['timestamp'] = timestamp
        fitfile.last_timestamp = timestamp


def open_fit(source, **kwargs):
    """A `FitFile` from raw bytes or a path to a *.fit file."""
    if isinstance(source, (str, PathLike)):
        with open(source, 'rb') as reader:
            source = reader.read()
    return FitFile(source, **kwargs)


def gen_fit_messages(source, *, strict=False, expand_timestamps=False):
    """Generator function for iterating over *.fit file messages.

    Parameters
    ----------
    source : bytes-like or str
        The file contents, or a path to the file.
    strict : bool, optional
        Raise `FITMessageError` on the first message that can't be
        decoded instead of skipping a byte and carrying on.
    expand_timestamps : bool, optional
        Give data messages with a compressed timestamp header an absolute
        `timestamp` built from the last full timestamp seen.

    Yields
    ------
    DefinitionMessage or DataMessage
        In file order.

    Raises
    ------
    InvalidFileError
        If the file header is unusable; nothing is yielded.
    """
    fitfile = open_fit(source, expand_timestamps=expand_timestamps)
    read_file_header(fitfile)       # inplace changes

    n_messages = n_skipped = 0
    while fitfile.bytes_left > 0:
        start = fitfile.position
        try:
            message = read_fit_message(fitfile)
        except FITMessageError as e:
            if strict:
                raise FITMessageError(str(e), offset=start) from e
            log.debug('skipping byte at %d: %s', start, e)
            fitfile.seek(start + 1)
            n_skipped += 1
            continue

        n_messages += 1
        yield message

    log.info('decoded %d messages, skipped %d bytes', n_messages, n_skipped)
