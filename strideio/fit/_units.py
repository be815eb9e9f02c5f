#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Raw record values --> physical units.

One function per quantity. Each takes the raw decoded value and returns
the physical value, or None when the field should be treated as absent.

A raw zero always means "not present". A runner standing still and a
watch that didn't write the field look the same, and downstream
consumers rely on that.

"""
DISTANCE_SCALE = 100        # cm
SPEED_SCALE = 1000          # mm/s
GCT_SCALE = 10              # 0.1 ms
VO_SCALE = 1000             # raw --> cm
STEP_LENGTH_SCALE = 10      # 0.1 mm
PERCENT_SCALE = 100         # 0.01 %
FRACTIONAL_CADENCE_SCALE = 128
ALTITUDE_SCALE, ALTITUDE_OFFSET = 5, 500

# Values at or below this are taken to be m/s already; some firmware
# writes speed unscaled.
SPEED_SCALED_THRESHOLD = 100

GCT_RANGE_MS = (150, 400)


def _present(raw):
    return raw is not None and raw != 0


def distance_km(raw):
    """ cm --> km """
    if not _present(raw) or raw < 0:
        return None
    return raw / DISTANCE_SCALE / 1000


def speed_ms(raw):
    """ mm/s --> m/s (or m/s, passed through) """
    if raw is None or raw <= 0:
        return None
    return raw / SPEED_SCALE if raw > SPEED_SCALED_THRESHOLD else raw


def ground_contact_ms(raw, *, scale=GCT_SCALE):
    """ 0.1 ms --> ms, gated to a plausible running range.

    Stryd reports ground time in ms already; pass ``scale=1``.
    """
    if not _present(raw):
        return None
    gct = raw / scale
    low, high = GCT_RANGE_MS
    return gct if low <= gct <= high else None


def vertical_oscillation_cm(raw):
    if not _present(raw):
        return None
    return raw / VO_SCALE


def step_length_mm(raw):
    if not _present(raw):
        return None
    return raw / STEP_LENGTH_SCALE


def percent(raw):
    """ 0.01 % --> % (vertical ratio, stance time balance) """
    if not _present(raw):
        return None
    return raw / PERCENT_SCALE


vertical_ratio_pct = percent
stance_balance_pct = percent


def vertical_ratio_from(vo_cm, sl_mm):
    """Vertical ratio when the watch doesn't record it: VO / step length."""
    if not vo_cm or not sl_mm:
        return None
    return (vo_cm * 10) / sl_mm * 100


def cadence_spm(raw, fractional=None):
    """Half cadence (one leg, plus 1/128ths) --> steps per minute."""
    if not _present(raw):
        return None
    frac = fractional / FRACTIONAL_CADENCE_SCALE if fractional else 0
    return (raw + frac) * 2


def altitude_m(raw):
    if not _present(raw):
        return None
    return raw / ALTITUDE_SCALE - ALTITUDE_OFFSET


def passthrough(raw):
    """For quantities already in their natural unit (bpm, W, ...)."""
    return raw if _present(raw) else None
