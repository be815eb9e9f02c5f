#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Exceptions for this package.

"""


class StrideIOError(Exception):
    """Base exception."""
    _default_message = ''

    def __init__(self, message=None):
        super().__init__(message if message else self._default_message)


class InvalidFileError(StrideIOError):
    def __init__(self, fmt, reason=None):
        determiner = 'an' if fmt[0] in ('aeiou' + 's') else 'a'  # grammar
        message = "this doesn't look like %s %s file!" % (determiner, fmt)
        if reason:
            message += ' (%s)' % reason
        super().__init__(message)


class RequiredColumnError(StrideIOError):
    def __init__(self, column, cls=None):
        if cls is None:
            message = '{!r} column not found'.format(column)
        else:
            message = '{!r} column should be of type {!s}'.format(column, cls)
        super().__init__(message)


class TooFewPointsError(StrideIOError):
    def __init__(self, got, want):
        super().__init__('only %d usable data points (need %d)' % (got, want))


# Exceptions specific to the fit subpackage
# -----------------------------------------
class FITMessageError(StrideIOError):
    """A single message could not be decoded.

    `offset` is the position of the message's header byte in the buffer.
    """
    def __init__(self, message=None, offset=None):
        if offset is not None and message:
            message = '%s (at byte %d)' % (message, offset)
        super().__init__(message)
        self.offset = offset
