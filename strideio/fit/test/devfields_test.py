#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import pytest

from strideio.fit._devfields import (
    DevFieldResolver, classify, generic_name, map_stryd_name)
from strideio.fit._profile import BASE_TYPES


def description(index, number, name, base_type_id=0x88, units=None):
    return {'developer_data_index': index, 'field_definition_number': number,
            'fit_base_type_id': base_type_id, 'field_name': name,
            'units': units}


def test_generic_name():
    assert generic_name(0, 42) == 'dev_0_42'


@pytest.mark.parametrize('value, key, expected', [
    (220, 'dev_0_0', 'power_dev'),
    (75, 'dev_0_8', 'form_power'),
    (9.5, 'dev_0_9', 'leg_spring_stiffness'),
    (11, 'dev_0_3', 'leg_spring_stiffness'),
    (2.5, 'dev_0_5', 'air_power'),
    (1.2, 'dev_0_7', 'air_power'),
    (30, 'dev_0_11', 'impact_gs'),
])
def test_classify_rules(value, key, expected):
    assert classify(value, key) == expected


def test_classify_first_rule_wins():
    # 10 fits both the stiffness and the air power range; the key decides.
    assert classify(10, 'dev_0_3') == 'leg_spring_stiffness'
    assert classify(10, 'dev_0_5') == 'air_power'
    # 60 at a key ending in '0' is power, not form power.
    assert classify(60, 'dev_0_10') == 'power_dev'


def test_classify_no_match():
    assert classify(1000, 'dev_0_0') is None
    assert classify(220, 'dev_0_1') is None
    assert classify(3, 'dev_0_42') is None


@pytest.mark.parametrize('name, expected', [
    ('Power', 'stryd_power'),
    ('Form Power', 'form_power'),
    ('Leg Spring Stiffness', 'leg_spring_stiffness'),
    ('Air Power', 'air_power'),
    ('Ground Time', 'ground_time'),
    ('Stance Time', 'ground_time'),
    ('Impact Loading Rate', 'impact_loading_rate'),
    ('Braking_Impulse', 'braking_impulse'),
    ('leg-spring-stiffness', 'leg_spring_stiffness'),
])
def test_map_stryd_name(name, expected):
    assert map_stryd_name(name) == expected


def test_map_stryd_name_unknown():
    assert map_stryd_name('Mood') is None
    assert map_stryd_name('   ') is None


def test_resolver_without_descriptions_guesses():
    resolver = DevFieldResolver()
    assert resolver.resolve(0, 0, 220) == 'power_dev'
    assert resolver.resolve(0, 0, 220) == 'power_dev'    # deterministic
    assert resolver.resolve(0, 42, 3) == 'dev_0_42'
    assert resolver.resolve(0, 0, None) == 'dev_0_0'


def test_resolver_description_wins_over_guess():
    resolver = DevFieldResolver()
    resolver.add_description(description(0, 0, 'Form Power', 0x84, 'Watts'))
    assert resolver.resolve(0, 0, 220) == 'form_power'


def test_resolver_described_unknown_name_keeps_generic():
    resolver = DevFieldResolver()
    resolver.add_description(description(1, 5, 'Mood', 0x02))
    assert resolver.resolve(1, 5, 220) == 'dev_1_5'


def test_resolver_description_is_keyed_by_developer():
    resolver = DevFieldResolver()
    resolver.add_description(description(1, 0, 'Air Power'))
    assert resolver.resolve(1, 0, 220) == 'air_power'
    assert resolver.resolve(0, 0, 220) == 'power_dev'


def test_resolver_later_description_overwrites():
    resolver = DevFieldResolver()
    resolver.add_description(description(0, 3, 'Form Power'))
    resolver.add_description(description(0, 3, 'Leg Spring Stiffness', 0x84))

    desc = resolver.describe(0, 3)
    assert desc.name == 'Leg Spring Stiffness'
    assert desc.base_type is BASE_TYPES[0x04]
    assert resolver.resolve(0, 3, 9) == 'leg_spring_stiffness'


def test_resolver_ignores_incomplete_messages():
    resolver = DevFieldResolver()
    resolver.add_description({'field_name': 'Power'})
    resolver.add_developer({'application_id': None})
    assert resolver.descriptions == {}
    assert resolver.developers == {}


def test_resolver_registers_developers():
    resolver = DevFieldResolver()
    resolver.add_developer({'developer_data_index': 0})
    assert resolver.developers == {0: None}


def test_resolver_ignores_non_integer_metadata():
    resolver = DevFieldResolver()
    resolver.add_description(description(0, 0, 'Form Power', base_type_id=2.0))
    assert resolver.describe(0, 0).base_type is None
    assert resolver.resolve(0, 0, 75) == 'form_power'

    resolver.add_description(description(1.0, 0, 'Air Power'))
    resolver.add_developer({'developer_data_index': 0.5})
    assert resolver.describe(1, 0) is None
    assert resolver.developers == {}
