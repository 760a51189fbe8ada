"""
Unit tests for timing primitives (scientist/core/measurement.py)
"""

from unittest.mock import Mock

import pytest

from scientist.core.measurement import Measurement, Stopwatch


class TestStopwatch:
    """Tests for Stopwatch."""

    def test_time_rounds_to_milliseconds(self, fake_clock):
        """Test elapsed time is rounded to the nearest millisecond."""
        stopwatch = Stopwatch()
        fake_clock.tick(10.4)
        assert stopwatch.time() == 10

        fake_clock.tick(0.2)
        assert stopwatch.time() == 11

    def test_reset_reanchors_start(self, fake_clock):
        """Test reset starts counting again from now."""
        stopwatch = Stopwatch()
        fake_clock.tick(50)
        stopwatch.reset()
        fake_clock.tick(5)
        assert stopwatch.time() == 5


class TestBenchmark:
    """Tests for Measurement.benchmark()."""

    def test_runs_block_and_returns_measurement(self):
        """Test the block runs once and a Measurement comes back."""
        block = Mock()
        measurement = Measurement.benchmark(block)

        block.assert_called_once_with()
        assert isinstance(measurement, Measurement)

    def test_captures_elapsed_time(self, fake_clock):
        """Test the time spent in the block is captured."""
        measurement = Measurement.benchmark(lambda: fake_clock.tick(10))
        assert measurement.elapsed == 10

    def test_block_errors_propagate(self):
        """Test errors in the block are not handled here."""
        with pytest.raises(ValueError, match="boom"):
            Measurement.benchmark(Mock(side_effect=ValueError("boom")))

    def test_is_immutable(self):
        """Test measurements cannot be modified."""
        measurement = Measurement.benchmark(lambda: None)
        with pytest.raises(AttributeError):
            measurement.elapsed = 5


class TestRemeasure:
    """Tests for Measurement.remeasure()."""

    def test_returns_new_measurement(self):
        """Test remeasure runs the block and returns a different Measurement."""
        measurement = Measurement.benchmark(lambda: None)
        block = Mock()
        remeasurement = measurement.remeasure(block)

        block.assert_called_once_with()
        assert isinstance(remeasurement, Measurement)
        assert remeasurement is not measurement

    def test_extends_elapsed_time_to_end_of_block(self, fake_clock):
        """Test elapsed time counts from the original start."""
        measurement = Measurement.benchmark(lambda: fake_clock.tick(10))
        fake_clock.tick(10)
        remeasurement = measurement.remeasure(lambda: fake_clock.tick(10))

        assert measurement.elapsed == 10
        assert remeasurement.elapsed == 30

    def test_two_ticks_add_up(self, fake_clock):
        """Test a benchmark then a remeasure of 1000ms each totals 2000ms."""
        measurement = Measurement.benchmark(lambda: fake_clock.tick(1000))
        remeasurement = measurement.remeasure(lambda: fake_clock.tick(1000))

        assert remeasurement.elapsed == 2000


class TestPreserve:
    """Tests for Measurement.preserve()."""

    def test_returns_same_measurement(self, fake_clock):
        """Test preserve runs the block and keeps the measurement unchanged."""
        measurement = Measurement.benchmark(lambda: fake_clock.tick(3))
        block = Mock(side_effect=lambda: fake_clock.tick(1000))

        preserved = measurement.preserve(block)

        block.assert_called_once_with()
        assert preserved is measurement
        assert preserved.elapsed == 3
