#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import numpy as np
import pytest

from strideio._types import RunningData, special_columns
from strideio._util.exceptions import RequiredColumnError, TooFewPointsError


def make_run(n=20, **columns):
    frame = {'idx': list(range(n)),
             'distance': [0.01 * (i + 1) for i in range(n)],
             'speed': [3.0] * n}
    frame.update(columns)
    return RunningData(frame)


# summary()
# ---------
def test_summary_needs_enough_points():
    with pytest.raises(TooFewPointsError):
        make_run(n=9).summary()


def test_summary():
    speed = [2.5 + 0.05 * i for i in range(20)]
    run = make_run(speed=speed,
                   gct=[240.0] * 20,
                   cadence=[170.0] * 20,
                   hr=[150] * 19 + [170],
                   gct_balance=[50.0] * 19 + [70.0])
    summary = run.summary()

    assert summary['duration'] == 20
    assert summary['distance'] == 0.2
    assert summary['avg_speed'] == pytest.approx(2.975, abs=0.01)
    assert summary['avg_pace'] == '5:36'
    assert summary['gct'] == {'mean': 240.0, 'std': 0.0,
                              'min': 240.0, 'max': 240.0}
    assert summary['cadence']['mean'] == 170
    assert summary['hr'] == {'mean': 151, 'max': 170.0}
    assert summary['gct_balance'] == 50.0     # 70 is out of range


def test_summary_missing_metrics_are_none():
    run = make_run(power=[np.nan] * 20)
    summary = run.summary()
    assert summary['power'] is None
    assert summary['gct'] is None
    assert summary['hr'] is None
    assert summary['gct_balance'] is None


def test_summary_skips_zero_placeholders():
    run = make_run(gct=[0.0] * 10 + [250.0] * 10)
    assert run.summary()['gct']['mean'] == 250.0
    assert run.summary()['gct']['min'] == 250.0


# correlations()
# --------------
def test_correlations():
    speed = np.linspace(2.5, 4.0, 20)
    run = make_run(speed=speed, gct=300 - 20 * speed, cadence=160 + 10 * speed)
    r = run.correlations()

    assert r.name == 'r'
    assert r['gct_speed'] == pytest.approx(-1)
    assert r['cadence_speed'] == pytest.approx(1)
    assert r['gct_cadence'] == pytest.approx(-1)
    assert r['power_speed'] == 0.0      # no power


def test_correlations_use_paired_rows_only():
    speed = np.linspace(2.5, 4.0, 20)
    gct = 300 - 20 * speed
    gct[:5] = 0             # absent
    run = make_run(speed=speed, gct=gct)
    assert run.correlations()['gct_speed'] == pytest.approx(-1)


def test_correlations_need_enough_pairs():
    speed = np.linspace(2.5, 4.0, 20)
    gct = 300 - 20 * speed
    gct[:10] = np.nan
    run = make_run(speed=speed, gct=gct)
    assert run.correlations()['gct_speed'] == 0.0


# pace_bins()
# -----------
def test_pace_bins():
    speed = [2.7] * 6 + [3.2] * 6 + [4.1] * 3
    gct = [250.0] * 6 + [230.0] * 6 + [210.0] * 3
    bins = make_run(n=15, speed=speed, gct=gct).pace_bins()

    assert list(bins.index) == ['5:07', '6:03']      # fastest first
    assert list(bins['count']) == [6, 6]
    assert list(bins['gct']) == [230.0, 250.0]
    assert np.isnan(bins['power']).all()


def test_pace_bins_empty():
    bins = make_run(n=5, speed=[3.2] * 5).pace_bins()
    assert bins.empty


# split_analysis()
# ----------------
def test_split_analysis():
    gct = [220.0] * 5 + [240.0] * 10 + [260.0] * 5
    split = make_run(gct=gct).split_analysis()

    assert list(split.index) == ['first_quarter', 'last_quarter']
    assert split.loc['first_quarter', 'gct'] == 220.0
    assert split.loc['last_quarter', 'gct'] == 260.0
    assert np.isnan(split.loc['first_quarter', 'hr'])


# Derived columns and flags
# -------------------------
def test_duty_factor():
    run = make_run(gct=[250.0] * 20, cadence=[180.0] * 20)
    duty = run.duty_factor()
    assert duty.name == 'duty_factor'
    assert duty.iloc[0] == pytest.approx(0.75)


def test_duty_factor_needs_columns():
    with pytest.raises(RequiredColumnError):
        make_run(gct=[250.0] * 20).duty_factor()


def test_flags():
    run = make_run(gct=[0.0] * 20, power=[np.nan] * 20)
    assert not run.has_running_dynamics
    assert not run.has_stryd_data

    run = make_run(gct=[240.0] * 20, power=[250.0] * 20)
    assert run.has_running_dynamics
    assert run.has_stryd_data


def test_time_needs_timedelta_index():
    with pytest.raises(AttributeError):
        make_run().time


# Special columns
# ---------------
def test_columns_are_special():
    run = make_run(gct=[240.0] * 20)
    assert isinstance(run['speed'], special_columns.Speed)
    assert isinstance(run['gct'], special_columns.GroundContactTime)
    assert not isinstance(run['idx'], special_columns.SpecialColumn)


def test_unit_conversions():
    speed = special_columns.Speed([3.0, 5.0])
    assert list(speed.kph) == pytest.approx([10.8, 18.0])
    assert list(speed.to_pace().formatted) == ['5:33', '3:20']

    assert list(special_columns.Distance([1.5]).m) == [1500.0]
    assert list(special_columns.Cadence([180.0]).per_leg) == [90.0]
    assert list(special_columns.VerticalOscillation([9.0]).mm) == [90.0]


def test_balance_in_range():
    balance = special_columns.GCTBalance([50.0, 70.0, 49.5])
    assert list(balance.in_range().valid) == [50.0, 49.5]


def test_valid_drops_placeholders():
    gct = special_columns.GroundContactTime([0.0, 240.0, np.nan])
    assert list(gct.valid) == [240.0]


def test_conversions_are_named_after_the_column():
    speed = special_columns.Speed([3.0])
    assert speed.kph.name == 'speed_kph'
    assert speed.mph.name == 'speed_mph'
    assert special_columns.Distance([1.5]).miles.name == 'distance_miles'
