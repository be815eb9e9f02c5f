#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Give names to developer fields.

Developer fields arrive as nothing more than a (developer data index,
field number) pair. Files that carry `developer_data_id` and
`field_description` messages tell us what those pairs mean; plenty of
files don't, in which case we fall back on guessing from the value and
the field number. The guessing is crude and will misclassify sometimes.

"""
from collections import namedtuple
import logging
import re

from strideio.fit._profile import BASE_TYPES


log = logging.getLogger(__name__)


DevFieldDescription = namedtuple(
    'DevFieldDescription',
    ('developer_data_index', 'field_definition_number', 'name', 'units',
     'base_type', 'native_field_num'))


# Stryd (and friends) field names, lower case. Matched after stripping
# spaces, underscores and hyphens.
STRYD_FIELD_MAPPINGS = {
    'power': 'stryd_power',
    'form power': 'form_power',
    'formpower': 'form_power',
    'leg spring stiffness': 'leg_spring_stiffness',
    'legspringstiffness': 'leg_spring_stiffness',
    'lss': 'leg_spring_stiffness',
    'air power': 'air_power',
    'airpower': 'air_power',
    'ground time': 'ground_time',
    'groundtime': 'ground_time',
    'gct': 'ground_time',
    'vertical oscillation': 'vertical_oscillation_stryd',
    'verticaloscillation': 'vertical_oscillation_stryd',
    'cadence': 'cadence_stryd',
    'elevation': 'elevation',
    'impact loading rate': 'impact_loading_rate',
    'impactloadingrate': 'impact_loading_rate',
    'ilr': 'impact_loading_rate',
    'braking impulse': 'braking_impulse',
    'brakingimpulse': 'braking_impulse',
    'footstrike type': 'footstrike_type',
    'footstriketype': 'footstrike_type',
    'pronation excursion': 'pronation_excursion',
    'pronationexcursion': 'pronation_excursion',
    'stance time': 'ground_time',
    'stancetime': 'ground_time',
}

# (name, low, high, key suffixes) in priority order; first match wins.
HEURISTIC_RULES = (
    ('power_dev',            50,   800, ('0',)),
    ('form_power',           30,   120, ('8',)),
    ('leg_spring_stiffness',  4,    25, ('9', '3')),
    ('air_power',          0.05,    15, ('5', '7')),
    ('impact_gs',             5,    60, ('11',)),
)

RE_SEPARATORS = re.compile(r'[_\s-]')


def generic_name(developer_data_index, field_num):
    return 'dev_%d_%d' % (developer_data_index, field_num)


def normalize_name(name):
    return RE_SEPARATORS.sub('', name.lower())


def map_stryd_name(name):
    """Semantic name for a described developer field, or None."""
    lower = name.lower()
    if lower in STRYD_FIELD_MAPPINGS:
        return STRYD_FIELD_MAPPINGS[lower]

    normalized = normalize_name(name)
    if not normalized:
        return None
    for pattern, mapped in STRYD_FIELD_MAPPINGS.items():
        pattern = normalize_name(pattern)
        if pattern in normalized or normalized in pattern:
            return mapped

    return None


def classify(value, key):
    """Guess what an undescribed developer field holds.

    Parameters
    ----------
    value : int or float
        Decoded (raw) value.
    key : str
        The generic ``dev_<index>_<slot>`` name; its ending picks the rule.

    Returns
    -------
    str or None
        None when no rule matches.
    """
    for name, low, high, suffixes in HEURISTIC_RULES:
        if low <= value <= high and key.endswith(suffixes):
            return name
    return None


class DevFieldResolver:
    """Per-file table of developer field descriptions.

    Fed with `developer_data_id` and `field_description` messages as the
    stream is walked, consulted for every developer field value after.

    Attributes
    ----------
    developers : dict
        developer_data_index -> application_id (raw bytes or None).
    descriptions : dict
        (developer_data_index, field_definition_number) ->
        DevFieldDescription.
    """
    def __init__(self):
        self.developers = {}
        self.descriptions = {}

    def add_developer(self, fields):
        """Register a decoded `developer_data_id` message."""
        index = fields.get('developer_data_index')
        if not isinstance(index, int):
            return
        self.developers[index] = fields.get('application_id')

    def add_description(self, fields):
        """Register a decoded `field_description` message.

        Descriptions are accepted even if the developer was never
        declared; some writers skip the `developer_data_id` message.
        """
        index = fields.get('developer_data_index')
        number = fields.get('field_definition_number')
        if not (isinstance(index, int) and isinstance(number, int)):
            log.debug('ignoring field description without a usable key')
            return

        base_type_id = fields.get('fit_base_type_id')
        if not isinstance(base_type_id, int):
            base_type_id = None     # declared with a non-integer type
        description = DevFieldDescription(
            developer_data_index=index,
            field_definition_number=number,
            name=fields.get('field_name'),
            units=fields.get('units'),
            base_type=(None if base_type_id is None
                       else BASE_TYPES.get(base_type_id & 0x1F)),
            native_field_num=fields.get('native_field_num'))

        log.debug('developer field %d/%d described as %r (%s)',
                  index, number, description.name, description.units)
        self.descriptions[index, number] = description   # overwrite

    def describe(self, developer_data_index, field_num):
        return self.descriptions.get((developer_data_index, field_num))

    def resolve(self, developer_data_index, field_num, value):
        """Name for a developer field value.

        Explicit descriptions win. A described field with a name we don't
        recognise keeps the generic name; only undescribed fields are
        classified heuristically.
        """
        key = generic_name(developer_data_index, field_num)

        description = self.describe(developer_data_index, field_num)
        if description is not None and description.name:
            return map_stryd_name(description.name) or key

        if value is None:
            return key

        guess = classify(value, key)
        if guess is None:
            log.debug('no rule for %s = %r', key, value)
            return key
        return guess
