#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Build small synthetic *.fit byte strings for the tests.

"""
from struct import pack


UINT8, UINT16, SINT16, UINT32 = 0x02, 0x84, 0x83, 0x86
FLOAT32, STRING = 0x88, 0x07


def file_header(data_size, *, header_size=12, signature=b'.FIT'):
    header = pack('<2BHI', header_size, 0x20, 2132, data_size) + signature
    return header + b'\x00' * (header_size - 12)


def definition(local, global_num, fields, dev_fields=(), *, big_endian=False):
    """fields: (field_def_num, size, base_type) triples;
    dev_fields: (field_num, size, developer_data_index) triples."""
    endian = '>' if big_endian else '<'
    header = 0x40 | local | (0x20 if dev_fields else 0)
    out = pack('<3B', header, 0, 1 if big_endian else 0)
    out += pack(endian + 'HB', global_num, len(fields))
    out += b''.join(pack('3B', *f) for f in fields)
    if dev_fields:
        out += pack('B', len(dev_fields))
        out += b''.join(pack('3B', *f) for f in dev_fields)
    return out


def data(local, payload):
    return pack('B', local) + payload


def compressed(local, time_offset, payload):
    return pack('B', 0x80 | (local << 5) | (time_offset & 0x1F)) + payload


def fit_file(*messages, header_size=12):
    body = b''.join(messages)
    return file_header(len(body), header_size=header_size) + body + b'\x00\x00'


def text(value, size):
    raw = value.encode('utf-8')
    return raw + b'\x00' * (size - len(raw))


# Record (20) layout used across the tests
# ----------------------------------------
RECORD_FIELDS = (
    (253, 4, UINT32),   # timestamp
    (5, 4, UINT32),     # distance, cm
    (6, 2, UINT16),     # speed, mm/s
    (3, 1, UINT8),      # heart_rate
    (4, 1, UINT8),      # cadence, half
    (53, 1, UINT8),     # fractional_cadence, 1/128
    (41, 2, UINT16),    # stance_time, 0.1 ms
    (39, 2, UINT16),    # vertical_oscillation
    (49, 2, UINT16),    # step_length, 0.1 mm
    (47, 2, UINT16),    # vertical_ratio, 0.01 %
    (48, 2, UINT16),    # stance_time_balance, 0.01 %
)


def record_payload(timestamp=1000000000, distance=0, speed=3000, hr=150,
                   cadence=85, fractional=0, stance_time=2400, vo=9000,
                   step_length=10500, vertical_ratio=850, balance=5010):
    return pack('<2IH3B5H', timestamp, distance, speed, hr, cadence,
                fractional, stance_time, vo, step_length, vertical_ratio,
                balance)
