from unittest import mock

import pytest

from ecotrack.timer import Timer


def test_delay_after_reset():
    timer = Timer()
    with mock.patch("time.time", side_effect=[10.0, 10.25]):
        timer.reset()
        assert timer.ms_delay() == pytest.approx(250.0)


def test_successive_delays_measure_from_previous_call():
    timer = Timer()
    with mock.patch("time.time", side_effect=[5.0, 5.5, 6.0]):
        timer.reset()
        assert timer.ms_delay() == pytest.approx(500.0)
        assert timer.ms_delay() == pytest.approx(500.0)


def test_without_reset_measures_from_epoch():
    timer = Timer()
    with mock.patch("time.time", side_effect=[2.0]):
        assert timer.ms_delay() == pytest.approx(2000.0)


def test_real_clock_is_non_negative():
    timer = Timer()
    timer.reset()
    assert timer.ms_delay() >= 0.0