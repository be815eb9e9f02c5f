#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Column types for `RunningData`.

Each class is registered under the column name it represents; indexing
a `RunningData` frame by that name gives back an instance, so unit
conversions hang off the column: ``data['speed'].kph``.

"""
import numpy as np
from pandas import Series

from strideio import tools
from strideio._types.base import SeriesSubclass, series_property


REGISTRY = {}    # grows at import-time via the below metaclass

BALANCE_RANGE_PCT = (40, 60)    # plausible left/right split


class SpecialRegistrar(type):
    def __init__(cls, name, bases, namespace):
        if 'colname' in namespace:
            REGISTRY[cls.colname] = cls
        super().__init__(name, bases, namespace)


class SpecialColumn(SeriesSubclass, metaclass=SpecialRegistrar):
    # `colname` and `base_unit` are class attributes; keep them out of
    # pandas' metadata so they are never overwritten on instances.
    _metadata = []

    def __init__(self, data, *args, **kwargs):
        super().__init__(data, *args, **kwargs)
        self._name = self.__class__.colname     # use *class* attribute


# ----------------------------------------------------------
# NOTE: subclasses should follow the structure...
#   + classmethods (i.e. alternative constructors; private!)
#   + general methods
#   + properties
# ----------------------------------------------------------


class Altitude(SpecialColumn):
    colname = 'altitude'
    base_unit = 'm'

    @property
    def ascent(self):
        deltas = self.diff()
        cls = type(self)
        return cls(np.where(deltas > 0, deltas, 0))

    @property
    def descent(self):
        deltas = self.diff()
        cls = type(self)
        return cls(np.where(deltas < 0, deltas, 0))

    @series_property
    def ft(self):
        """ metres --> feet """
        return self * 3.28084


class Cadence(SpecialColumn):
    colname = 'cadence'
    base_unit = 'steps/min'

    @series_property
    def per_leg(self):
        """ steps/min --> strides/min (what the watch records) """
        return self / 2


class Distance(SpecialColumn):
    colname = 'distance'
    base_unit = 'km'

    @series_property
    def m(self):
        """ kilometres --> metres """
        return self * 1000

    @series_property
    def miles(self):
        """ kilometres --> miles """
        return self * 0.621371


class GroundContactTime(SpecialColumn):
    colname = 'gct'
    base_unit = 'ms'


class GCTBalance(SpecialColumn):
    colname = 'gct_balance'
    base_unit = '% left'

    def in_range(self, low=BALANCE_RANGE_PCT[0], high=BALANCE_RANGE_PCT[1]):
        """Only plausible balance values; the rest become NaN."""
        return self.where((self > low) & (self < high))


class HeartRate(SpecialColumn):
    colname = 'hr'
    base_unit = 'bpm'


class LegSpringStiffness(SpecialColumn):
    colname = 'lss'
    base_unit = 'kN/m'


class Pace(SpecialColumn):
    colname = 'pace'
    base_unit = 'min/km'

    @series_property
    def min_per_mile(self):
        return self * 1.609344

    @property
    def formatted(self):
        """ 'M:SS' strings """
        return Series([tools.format_pace(p) for p in self], index=self.index)


class Power(SpecialColumn):
    colname = 'power'
    base_unit = 'watts'


class AirPower(Power):
    colname = 'air_power'


class FormPower(Power):
    colname = 'form_power'


class Speed(SpecialColumn):
    colname = 'speed'
    base_unit = 'm/s'

    def to_pace(self):
        return Pace(1000 / (self * 60))

    @series_property
    def kph(self):
        """ metres/second --> kilometres/hour """
        return self * 60**2 / 1000

    @property
    def mph(self):
        """ metres/second --> miles/hour """
        return (self.kph / 1.609344).rename(self.name + '_mph')


class StepLength(SpecialColumn):
    colname = 'sl'
    base_unit = 'mm'

    @series_property
    def m(self):
        """ millimetres --> metres """
        return self / 1000


class VerticalOscillation(SpecialColumn):
    colname = 'vo'
    base_unit = 'cm'

    @series_property
    def mm(self):
        """ centimetres --> millimetres """
        return self * 10


class VerticalRatio(SpecialColumn):
    colname = 'vr'
    base_unit = '%'
