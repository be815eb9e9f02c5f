#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import numpy as np
from pandas import DataFrame, Series, TimedeltaIndex, to_timedelta

from strideio import tools
from strideio._util import exceptions
from strideio._types import special_columns
from strideio._types.base import DataFrameSubclass, new_column_sugar


MIN_POINTS = 10             # fewer than this and summaries mean nothing
MIN_CORRELATION_POINTS = 11
MIN_BIN_POINTS = 6

# Speed buckets (m/s) for pace_bins()
PACE_BIN_SPEEDS = tuple((2.0 + 0.5 * i, 2.5 + 0.5 * i) for i in range(8))

SUMMARY_DECIMALS = {
    'gct': 1, 'vo': 2, 'sl': 0, 'cadence': 0, 'vr': 2,
    'power': 0, 'form_power': 0, 'form_power_ratio': 1, 'lss': 2,
    'air_power': 1, 'impact_loading_rate': 1, 'impact_gs': 1,
}

CORRELATION_PAIRS = {   # name: (x, y)
    'gct_speed': ('gct', 'speed'),
    'gct_cadence': ('gct', 'cadence'),
    'sl_speed': ('sl', 'speed'),
    'sl_cadence': ('sl', 'cadence'),
    'vo_speed': ('vo', 'speed'),
    'vr_speed': ('vr', 'speed'),
    'power_speed': ('power', 'speed'),
    'lss_speed': ('lss', 'speed'),
    'form_power_speed': ('form_power', 'speed'),
    'hr_speed': ('hr', 'speed'),
    'cadence_speed': ('cadence', 'speed'),
}

BIN_METRICS = ('gct', 'vo', 'cadence', 'sl', 'vr', 'power', 'form_power',
               'lss')
SPLIT_METRICS = BIN_METRICS[:5] + ('power', 'form_power', 'lss', 'hr')


class RunningData(DataFrameSubclass):
    """A run, one row per `RunningDataPoint`.

    Missing values are NaN, except ground contact time, which keeps the
    zero placeholder; the summaries below skip both.
    """
    _metadata = ['start']

    def __getitem__(self, key):
        """Create the illusion of Series subclasses in the DataFrame."""
        item = super().__getitem__(key)
        if isinstance(key, str) and key in special_columns.REGISTRY:
            return special_columns.REGISTRY[key](item)
        return item

    @property
    def time(self):   # makes accessing the index more readable
        if isinstance(self.index, TimedeltaIndex):
            return self.index
        else:
            # because recursion problems with super().__getattr__()
            raise AttributeError('index is not TimedeltaIndex')

    @property
    def has_stryd_data(self):
        return any(self._count(col) for col in ('power', 'form_power', 'lss'))

    @property
    def has_running_dynamics(self):
        return self._count('gct') > 0

    @new_column_sugar(needs=('gct', 'cadence'))
    def duty_factor(self):
        """Share of each step spent on the ground (0-1)."""
        step_ms = 60000 / self['cadence']
        gct = self['gct'].replace(0, np.nan)
        return (gct / step_ms).values

    def summary(self):
        """Means, spreads and ranges of every metric.

        Metrics the file doesn't carry come back as None.

        Raises
        ------
        TooFewPointsError
            With fewer than `MIN_POINTS` rows.
        """
        self._check_viable()

        speed = self._values('speed')
        avg_speed = tools.mean(speed)
        balance = self['gct_balance'].in_range().valid \
            if 'gct_balance' in self else np.array([])
        hr = self._values('hr')

        summary = {
            'duration': len(self),
            'distance': round(float(self._try_get('distance').iloc[-1]), 2),
            'avg_speed': round(avg_speed, 2),
            'avg_pace': tools.format_pace(tools.speed_to_pace(avg_speed)),
            'gct_balance': (round(tools.mean(balance), 1)
                            if balance.size else None),
            'hr': ({'mean': round(tools.mean(hr)), 'max': float(hr.max())}
                   if hr.size else None),
        }
        for column, decimals in SUMMARY_DECIMALS.items():
            summary[column] = metric_stats(self._values(column), decimals)

        return summary

    def correlations(self):
        """Pearson correlation for each pair in `CORRELATION_PAIRS`.

        Only rows where both values are usable count; with too few of
        those the correlation is reported as 0.
        """
        out = {}
        for name, (x, y) in CORRELATION_PAIRS.items():
            xs, ys = self._paired(x, y)
            out[name] = (tools.correlation(xs, ys)
                         if xs.size >= MIN_CORRELATION_POINTS else 0.0)
        return Series(out, name='r')

    def pace_bins(self):
        """Metric means per speed bucket, fastest first."""
        rows = []
        for low, high in PACE_BIN_SPEEDS:
            speed = self._try_get('speed')
            subset = self[(speed >= low) & (speed < high)]
            if len(subset) < MIN_BIN_POINTS:
                continue

            pace_num = tools.speed_to_pace((low + high) / 2)
            row = {'pace': tools.format_pace(pace_num),
                   'pace_num': pace_num,
                   'count': len(subset)}
            for column in BIN_METRICS:
                values = subset._values(column)
                row[column] = tools.mean(values) if values.size else np.nan
            rows.append(row)

        columns = ('pace', 'pace_num', 'count') + BIN_METRICS
        bins = DataFrame(rows, columns=columns)
        return bins.sort_values('pace_num').set_index('pace')

    def split_analysis(self):
        """First quarter vs last quarter, for spotting fatigue."""
        n = len(self)
        quarters = {'first_quarter': self.iloc[:n // 4],
                    'last_quarter': self.iloc[(3 * n) // 4:]}

        rows = {}
        for label, part in quarters.items():
            rows[label] = {
                column: (tools.mean(part._values(column))
                         if self._count(column) else np.nan)
                for column in SPLIT_METRICS}

        return DataFrame.from_dict(rows, orient='index',
                                   columns=list(SPLIT_METRICS))

    # Private methods
    # ---------------
    def _finish_up(self, *, start=None, timeoffsets=None):
        """A pseudo-init method, used internally."""
        self.start = start
        if timeoffsets is not None:
            self.index = TimedeltaIndex(
                to_timedelta(np.asarray(timeoffsets), unit='s'), name='time')

    def _check_viable(self):
        if len(self) < MIN_POINTS:
            raise exceptions.TooFewPointsError(len(self), MIN_POINTS)

    def _values(self, column):
        """Usable values of a column (empty if the column is missing)."""
        if column not in self:
            return np.array([])
        return tools.usable(self[column])

    def _count(self, column):
        return self._values(column).size

    def _paired(self, x, y):
        if x not in self or y not in self:
            return np.array([]), np.array([])
        xs = self[x].to_numpy(dtype='float64', na_value=np.nan)
        ys = self[y].to_numpy(dtype='float64', na_value=np.nan)
        usable = (np.isfinite(xs) & np.isfinite(ys) & (xs != 0) & (ys != 0))
        return xs[usable], ys[usable]

    def _try_get(self, key):
        """Try and get a required column from the data."""
        try:
            return self[key]
        except KeyError as e:
            raise exceptions.RequiredColumnError(key) from e


def metric_stats(values, decimals=1):
    """mean/std/min/max of usable values, or None if there are none."""
    if not values.size:
        return None
    return {'mean': round(tools.mean(values), decimals),
            'std': round(tools.std(values), decimals),
            'min': float(values.min()),
            'max': float(values.max())}
