#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
General tools that complement the API.

"""
import numpy as np


def usable(values):
    """Drop NaNs, infinities and zeros (the "absent" placeholder).

        >>> usable([210.0, None, 0, float('nan'), 230.5])
        array([210. , 230.5])
    """
    arr = np.array(values, dtype='float64')   # None --> nan
    return arr[np.isfinite(arr) & (arr != 0)]


def mean(values):
    """Arithmetic mean; 0 for no values."""
    arr = np.asarray(values, dtype='float64')
    return float(arr.mean()) if arr.size else 0.0


def std(values):
    """Sample standard deviation; 0 for fewer than two values.

        >>> std([2, 4, 4, 4, 5, 5, 7, 9])
        2.138089935299395
    """
    arr = np.asarray(values, dtype='float64')
    return float(arr.std(ddof=1)) if arr.size > 1 else 0.0


def correlation(x, y):
    """Pearson correlation coefficient.

    Only the first ``min(len(x), len(y))`` values are used. Returns 0 for
    fewer than three values or when either input doesn't vary.

        >>> correlation([1, 2, 3, 4], [2, 4, 6, 8])
        1.0
    """
    n = min(len(x), len(y))
    if n < 3:
        return 0.0

    x = np.asarray(x[:n], dtype='float64')
    y = np.asarray(y[:n], dtype='float64')
    dx, dy = x - x.mean(), y - y.mean()

    denominator = np.sqrt(np.sum(dx**2) * np.sum(dy**2))
    return float(np.sum(dx * dy) / denominator) if denominator > 0 else 0.0


def speed_to_pace(speed):
    """ metres/second --> minutes/kilometre (None for no movement) """
    if not speed or speed <= 0:
        return None
    return 1000 / (speed * 60)


def format_pace(pace):
    """Minutes per km as 'M:SS'.

        >>> format_pace(4.5)
        '4:30'
        >>> format_pace(None)
        '--:--'
    """
    if not pace or pace < 0 or pace > 20 or pace != pace:
        return '--:--'
    minutes = int(pace)
    seconds = int((pace % 1) * 60)
    return '{:d}:{:02d}'.format(minutes, seconds)
