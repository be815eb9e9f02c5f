#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
pandas plumbing shared by `RunningData` and the special columns.

"""
from functools import wraps

from pandas import DataFrame, Series

from strideio import tools
from strideio._util import exceptions


__all__ = ('DataFrameSubclass', 'SeriesSubclass',  # using * import elsewhere
           'series_property', 'new_column_sugar')


class _KeepsMetadata:
    """Make pandas operations return our own type, carrying `_metadata`."""
    _metadata = []

    @property
    def _constructor(self):
        return type(self)

    def __finalize__(self, other, method=None, **kwargs):
        for attr in self._metadata:
            object.__setattr__(self, attr, getattr(other, attr, None))
        return self


class DataFrameSubclass(_KeepsMetadata, DataFrame):
    pass


class SeriesSubclass(_KeepsMetadata, Series):

    @property
    def valid(self):
        """Usable values only: no NaNs, infinities or zero placeholders."""
        return tools.usable(self)


class series_property:
    """Read-only attribute giving a unit conversion of a column.

    The result is a plain Series (the units no longer match the column
    type) named ``<column>_<attribute>``, e.g. ``speed_kph``.
    """
    def __init__(self, fget):
        self.fget = fget
        self.__doc__ = fget.__doc__
        self.attr = fget.__name__

    def __get__(self, obj, objtype=None):
        if obj is None:
            return self
        return Series(self.fget(obj), name='%s_%s' % (obj.name, self.attr))


def new_column_sugar(needs: tuple, name=None):
    """Decorator for `RunningData` methods that derive a new column.

    The method returns values row-aligned with the frame; the decorator
    checks for the columns it `needs` first and wraps the values up.

    Parameters
    ----------
    needs : tuple
        Column names the method reads.
    name : str, optional
        Name of the returned Series; the method name by default.

    Returns
    -------
    Series
        On the frame's index, ready to be joined back on.

    Raises
    ------
    RequiredColumnError
        For the first column of `needs` that isn't there.
    """
    def decorate(method):
        series_name = name or method.__name__

        @wraps(method)
        def derive(self, *args, **kwargs):
            missing = [column for column in needs if column not in self]
            if missing:
                raise exceptions.RequiredColumnError(missing[0])
            values = method(self, *args, **kwargs)
            return Series(values, index=self.index, name=series_name)
        return derive
    return decorate
