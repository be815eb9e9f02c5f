#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
The slice of the FIT profile this package needs.

Only running-relevant record fields and the two developer metadata
messages are named here. Everything else is decoded for stream position
only and reported under a generic ``unknown_<num>`` name.

"""
from datetime import datetime
from math import isnan
import struct

import pytz


FIT_SIGNATURE = b'.FIT'
FILE_HEADER_MIN_SIZE = 12

# Record header bits
COMPRESSED_TIMESTAMP = 0x80
DEFINITION_MESSAGE = 0x40
DEVELOPER_DATA = 0x20

# Global message numbers
MESG_NUM_RECORD = 20
MESG_NUM_FIELD_DESCRIPTION = 206
MESG_NUM_DEVELOPER_DATA_ID = 207

GLOBAL_MESG_NUMS = {
    0: 'file_id',
    18: 'session',
    19: 'lap',
    20: 'record',
    21: 'event',
    23: 'device_info',
    34: 'activity',
    206: 'field_description',
    207: 'developer_data_id',
}

FIT_EPOCH = datetime(year=1989, month=12, day=31, tzinfo=pytz.utc)


class BaseType:
    __slots__ = ('name', 'identifier', 'fmt', 'invalid')

    def __init__(self, **kwargs):
        for name, value in kwargs.items():
            setattr(self, name, value)

    @property
    def size(self):
        """Natural width in bytes, or None for types we never unpack."""
        return struct.calcsize(self.fmt) if self.fmt else None

    @property
    def type_num(self):
        return self.identifier & 0x1F

    def parse(self, value):
        """Map the type's invalid sentinel (or NaN) to None."""
        if self.invalid is isnan:
            return None if isnan(value) else value
        return None if value == self.invalid else value


def _bt(name, identifier, fmt, invalid):
    return BaseType(name=name, identifier=identifier, fmt=fmt, invalid=invalid)


# Keyed by the low five bits of the base type byte; the top bit (endian
# ability) is ignored. A `fmt` of None means the codec never decodes it:
# strings and byte arrays are not numbers, and 64 bit integers are
# refused outright.
BASE_TYPES = {
    0x00: _bt('enum',    0x00, 'B', 0xFF),
    0x01: _bt('sint8',   0x01, 'b', 0x7F),
    0x02: _bt('uint8',   0x02, 'B', 0xFF),
    0x03: _bt('sint16',  0x83, 'h', 0x7FFF),
    0x04: _bt('uint16',  0x84, 'H', 0xFFFF),
    0x05: _bt('sint32',  0x85, 'i', 0x7FFFFFFF),
    0x06: _bt('uint32',  0x86, 'I', 0xFFFFFFFF),
    0x07: _bt('string',  0x07, None, None),
    0x08: _bt('float32', 0x88, 'f', isnan),
    0x09: _bt('float64', 0x89, 'd', isnan),
    0x0A: _bt('uint8z',  0x0A, 'B', 0x00),
    0x0B: _bt('uint16z', 0x8B, 'H', 0x0000),
    0x0C: _bt('uint32z', 0x8C, 'I', 0x00000000),
    0x0D: _bt('byte',    0x0D, None, None),
    0x0E: _bt('sint64',  0x8E, None, None),
    0x0F: _bt('uint64',  0x8F, None, None),
    0x10: _bt('uint64z', 0x90, None, None),
}

BASE_TYPE_STRING = BASE_TYPES[0x07]


# Field numbers -> names, per message
# -----------------------------------
RECORD_FIELDS = {
    253: 'timestamp',
    0: 'position_lat',
    1: 'position_long',
    2: 'altitude',
    3: 'heart_rate',
    4: 'cadence',
    5: 'distance',
    6: 'speed',
    7: 'power',
    39: 'vertical_oscillation',
    40: 'stance_time_percent',
    41: 'stance_time',
    42: 'activity_type',
    43: 'left_right_balance',
    44: 'gps_accuracy',
    45: 'vertical_speed',
    46: 'calories',
    47: 'vertical_ratio',
    48: 'stance_time_balance',
    49: 'step_length',
    53: 'fractional_cadence',
    62: 'enhanced_altitude',
    73: 'enhanced_speed',
    78: 'saturated_hemoglobin_percent',
    79: 'total_hemoglobin_conc',
    83: 'core_temperature',
}

FIELD_DESCRIPTION_FIELDS = {
    0: 'developer_data_index',
    1: 'field_definition_number',
    2: 'fit_base_type_id',
    3: 'field_name',
    6: 'scale',
    7: 'offset',
    8: 'units',
    14: 'native_mesg_num',
    15: 'native_field_num',
}

DEVELOPER_DATA_ID_FIELDS = {
    0: 'developer_id',
    1: 'application_id',
    2: 'manufacturer_id',
    3: 'developer_data_index',
    4: 'application_version',
}

MESSAGE_FIELDS = {
    MESG_NUM_RECORD: RECORD_FIELDS,
    MESG_NUM_FIELD_DESCRIPTION: FIELD_DESCRIPTION_FIELDS,
    MESG_NUM_DEVELOPER_DATA_ID: DEVELOPER_DATA_ID_FIELDS,
}

# String fields we are prepared to decode. Only the developer metadata
# needs them; record strings stay absent.
STRING_FIELDS = {
    MESG_NUM_FIELD_DESCRIPTION: {'field_name', 'units'},
}


def field_name(global_mesg_num, field_def_num):
    names = MESSAGE_FIELDS.get(global_mesg_num, {})
    return names.get(field_def_num, 'unknown_%d' % field_def_num)
