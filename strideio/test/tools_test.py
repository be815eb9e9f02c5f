#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import numpy as np
import pytest

from strideio import tools


def test_usable():
    values = tools.usable([210.0, None, 0, float('nan'), float('inf'), 230.5])
    assert list(values) == [210.0, 230.5]


def test_mean_and_std():
    assert tools.mean([]) == 0.0
    assert tools.mean([1, 2, 3]) == 2.0
    assert tools.std([5]) == 0.0
    assert tools.std([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.1381, 1e-4)


def test_correlation():
    x = np.arange(10)
    assert tools.correlation(x, 2 * x + 1) == pytest.approx(1)
    assert tools.correlation(x, -x) == pytest.approx(-1)
    assert tools.correlation(x, np.ones(10)) == 0.0     # no variance
    assert tools.correlation([1, 2], [2, 4]) == 0.0


def test_correlation_truncates_to_shorter():
    assert tools.correlation([1, 2, 3, 4, 100], [2, 4, 6, 8]) == pytest.approx(1)


def test_speed_to_pace():
    assert tools.speed_to_pace(4.0) == pytest.approx(4.1667, 1e-4)
    assert tools.speed_to_pace(0) is None
    assert tools.speed_to_pace(None) is None


@pytest.mark.parametrize('pace, expected', [
    (4.5, '4:30'),
    (5.0, '5:00'),
    (None, '--:--'),
    (0, '--:--'),
    (-1, '--:--'),
    (25, '--:--'),
    (float('nan'), '--:--'),
])
def test_format_pace(pace, expected):
    assert tools.format_pace(pace) == expected
