#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Translate the `_protocol` module functionality to be consistent with
this package's API.

Record messages are folded into `RunningDataPoint`s here. Where Garmin
and Stryd both report a quantity, the preference order is fixed:

    ground contact time    Garmin stance_time > Stryd ground_time
    vertical oscillation   Garmin > Stryd
    power                  Stryd (by value) > Stryd (by name) > Garmin
    altitude               enhanced_altitude > altitude > Stryd elevation

"""
from collections import namedtuple
from datetime import timedelta
import logging

import pytz

from strideio.fit import _units as units
from strideio.fit._profile import FIT_EPOCH
from strideio.fit._protocol import gen_fit_messages, DataMessage
from strideio._types import RunningData
from strideio import tools


log = logging.getLogger(__name__)


MIN_RUNNING_SPEED = 0.5     # m/s; a very slow jog

RunningDataPoint = namedtuple('RunningDataPoint', (
    'idx',                  # position in the output sequence
    'timestamp',            # s since the FIT epoch, or idx if unknown
    'distance',             # km, never decreasing
    'speed',                # m/s
    'pace',                 # min/km
    'gct',                  # ms; 0 when absent
    'vo',                   # cm
    'sl',                   # mm
    'cadence',              # steps/min
    'vr',                   # %
    'gct_balance',          # % (left)
    'hr',                   # bpm
    'power',                # W
    'form_power',           # W
    'form_power_ratio',     # % of power
    'lss',                  # kN/m
    'air_power',            # W
    'altitude',             # m
    'impact_loading_rate',
    'braking_impulse',
    'impact_gs',            # g
))


def message_filter(message):
    return isinstance(message, DataMessage) and message.is_record


def record_speed(record):
    """m/s from enhanced_speed, else speed; None without either."""
    return (units.speed_ms(record.get('enhanced_speed'))
            or units.speed_ms(record.get('speed')))


def first_of(*values):
    """First value that isn't None."""
    return next((v for v in values if v is not None), None)


def assemble_point(record, idx, speed, last_distance=0):
    """Fold one decoded record into a `RunningDataPoint`.

    Parameters
    ----------
    record : dict
        Decoded record fields (raw values, developer fields by name).
    idx : int
        Index of this point in the output.
    speed : float
        Already normalized speed (m/s) for this record.
    last_distance : float
        Distance (km) of the previous point; distance is carried forward.
    """
    get = record.get

    distance = units.distance_km(get('distance'))
    if distance is None:
        distance = idx * speed / 1000
    distance = max(distance, last_distance)

    vo = first_of(units.vertical_oscillation_cm(get('vertical_oscillation')),
                  units.passthrough(get('vertical_oscillation_stryd')))
    # Vendor picked by presence, not by plausibility.
    if get('stance_time') is not None:
        gct = units.ground_contact_ms(get('stance_time'))
    else:
        gct = units.ground_contact_ms(get('ground_time'), scale=1)
    sl = units.step_length_mm(get('step_length'))
    vr = first_of(units.vertical_ratio_pct(get('vertical_ratio')),
                  units.vertical_ratio_from(vo, sl))

    power = first_of(units.passthrough(get('power_dev')),
                     units.passthrough(get('stryd_power')),
                     units.passthrough(get('power')))
    form_power = units.passthrough(get('form_power'))
    form_power_ratio = (form_power / power * 100
                        if form_power and power else None)

    altitude = first_of(units.altitude_m(get('enhanced_altitude')),
                        units.altitude_m(get('altitude')),
                        units.passthrough(get('elevation')))

    return RunningDataPoint(
        idx=idx,
        timestamp=first_of(get('timestamp'), idx),
        distance=distance,
        speed=speed,
        pace=tools.speed_to_pace(speed),
        gct=gct or 0,
        vo=vo,
        sl=sl,
        cadence=units.cadence_spm(get('cadence'), get('fractional_cadence')),
        vr=vr,
        gct_balance=units.stance_balance_pct(get('stance_time_balance')),
        hr=units.passthrough(get('heart_rate')),
        power=power,
        form_power=form_power,
        form_power_ratio=form_power_ratio,
        lss=units.passthrough(get('leg_spring_stiffness')),
        air_power=units.passthrough(get('air_power')),
        altitude=altitude,
        impact_loading_rate=units.passthrough(get('impact_loading_rate')),
        braking_impulse=units.passthrough(get('braking_impulse')),
        impact_gs=units.passthrough(get('impact_gs')),
    )


def gen_records(source, *, strict=False, expand_timestamps=False):
    """Generator function for iterating over decoded record messages.

    "Records" are dictionary objects holding the raw (unscaled) field
    values of a single sample, developer fields included under their
    resolved names.
    """
    messages = gen_fit_messages(source, strict=strict,
                                expand_timestamps=expand_timestamps)
    for message in filter(message_filter, messages):
        yield dict(message.fields)


def _gen_accepted(source, min_speed, **kwargs):
    """(record, point) pairs for every record fast enough to be running."""
    idx, distance, n_records = 0, 0, 0
    for record in gen_records(source, **kwargs):
        n_records += 1
        speed = record_speed(record)
        if speed is None or speed <= min_speed:
            continue

        point = assemble_point(record, idx, speed, distance)
        distance = point.distance
        idx += 1
        yield record, point

    log.info('%d of %d records accepted', idx, n_records)


def gen_running_points(source, *, min_speed=MIN_RUNNING_SPEED, **kwargs):
    """Generator function for iterating over `RunningDataPoint`s.

    Records too slow to be running (or without any speed) are dropped.
    Order is preserved. Keyword arguments go to `gen_fit_messages`.
    """
    for _, point in _gen_accepted(source, min_speed, **kwargs):
        yield point


def read_and_format(source, *, tz_str=None, min_speed=MIN_RUNNING_SPEED,
                    **kwargs):
    """Read a *.fit file into a `RunningData` frame.

    The frame gets a time index only if every point carries a real
    timestamp. Records with a compressed timestamp header have none
    unless ``expand_timestamps=True``; for those files `start` is still
    set (from the first timestamp seen) but the index stays positional.

    Parameters
    ----------
    source : bytes-like or str
        The file contents, or a path to the file.
    tz_str : str, optional
        Time zone (pytz name) for the `start` attribute; UTC by default.
    min_speed : float, optional
        See `gen_running_points`.
    **kwargs
        Passed to `gen_fit_messages`.
    """
    points, timed = [], []
    for record, point in _gen_accepted(source, min_speed, **kwargs):
        points.append(point)
        timed.append(record.get('timestamp') is not None)

    data = RunningData.from_records(points, columns=RunningDataPoint._fields)

    # Metrics the file never carries come out as all-None object columns.
    empty = [column for column in data if data[column].dtype == object]
    data = data.astype({column: 'float64' for column in empty})

    if not any(timed):
        data._finish_up()
        return data

    first = timed.index(True)
    tstart = points[first].timestamp
    timezone = pytz.timezone(tz_str) if tz_str is not None else pytz.utc
    start = (FIT_EPOCH + timedelta(seconds=tstart)).astimezone(timezone)

    if all(timed):
        data._finish_up(start=start, timeoffsets=data['timestamp'] - tstart)
    else:
        log.info('%d of %d points have no timestamp; no time index',
                 timed.count(False), len(timed))
        data._finish_up(start=start)

    return data
