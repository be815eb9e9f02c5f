#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
parse is installed as an executable console_script with this package.

"""
from argparse import ArgumentParser
from functools import partial
import logging
from pprint import pprint
import sys

from strideio import fit
from strideio._util.exceptions import StrideIOError


def parse(argv=None):

    # Argument handling
    parser = ArgumentParser(description='decode running data from a fit file')

    parser.add_argument('input',
                        type=str,
                        help='raw file to read')
    parser.add_argument('--output',
                        type=str,
                        metavar='filename',
                        default=None,
                        help='optional; file to write to')
    parser.add_argument('--summary',
                        action='store_true',
                        help='print summary statistics instead of the data')
    parser.add_argument('--strict',
                        action='store_true',
                        help='fail on the first undecodable message')
    parser.add_argument('--tz',
                        type=str,
                        default=None,
                        help='optional; time zone name for the start time')
    parser.add_argument('-v', '--verbose',
                        action='store_true',
                        help='log decoding progress')

    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=level)

    # Script begins
    try:
        data = fit.read(args.input, tz_str=args.tz, strict=args.strict)
        if args.summary:
            pprint(data.summary())
            return 0
    except StrideIOError as e:
        print('%s: %s' % (args.input, e), file=sys.stderr)
        return 1

    write = partial(data.to_csv, na_rep='NA', encoding='utf-8')
    if args.output is None:
        print(write())
    else:
        write(args.output)

    return 0


if __name__ == '__main__':
    sys.exit(parse())
