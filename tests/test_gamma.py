"""Tests for gamma correction."""

import math

import pytest

from piglow.exceptions import EncodingError, GammaInputError
from piglow.utils import gamma_correct, gamma_table


@pytest.mark.unit
class TestGammaIntegers:
    """Test integer brightness input (0-255)."""

    def test_low_end(self):
        """Test the bottom of the curve."""
        assert [gamma_correct(v) for v in (0, 1, 2)] == [0, 1, 1]

    def test_high_end(self):
        """Test the top of the curve."""
        assert [gamma_correct(v) for v in (255, 254, 253)] == [255, 250, 244]

    def test_zero_is_exactly_off(self):
        """Test zero maps to 0, not 255 ** 0."""
        assert gamma_correct(0) == 0

    def test_out_of_range(self):
        """Test values outside 0-255 are rejected."""
        for value in (-1, 256):
            with pytest.raises(GammaInputError):
                gamma_correct(value)


@pytest.mark.unit
class TestGammaFloats:
    """Test fractional brightness input (0.0-1.0)."""

    def test_low_end(self):
        """Test the bottom of the curve."""
        assert [gamma_correct(v) for v in (0.0, 0.001, 0.002)] == [0, 1, 1]

    def test_high_end(self):
        """Test the top of the curve."""
        assert [gamma_correct(v) for v in (1.0, 0.999, 0.998)] == [255, 254, 252]

    def test_out_of_range(self):
        """Test values outside 0.0-1.0 are rejected."""
        for value in (-0.1, 1.01, math.nan, math.inf):
            with pytest.raises(GammaInputError):
                gamma_correct(value)


@pytest.mark.unit
class TestGammaInputTypes:
    """Test non-numeric input handling."""

    def test_bool_rejected(self):
        """Test booleans are not treated as 0/1."""
        with pytest.raises(GammaInputError):
            gamma_correct(True)

    def test_string_rejected(self):
        """Test strings are rejected."""
        with pytest.raises(GammaInputError):
            gamma_correct("128")

    def test_error_is_encoding_error(self):
        """Test callers can catch the whole encoding family."""
        with pytest.raises(EncodingError):
            gamma_correct(300)
        with pytest.raises(ValueError):
            gamma_correct(300)


@pytest.mark.unit
def test_gamma_table_is_monotonic():
    """Test the lookup table covers 0-255 and never decreases."""
    table = gamma_table()
    assert len(table) == 256
    assert table[0] == 0
    assert table[-1] == 255
    assert all(a <= b for a, b in zip(table, table[1:]))


@pytest.mark.unit
def test_float_curve_tracks_integer_curve():
    """Test fractions land within rounding distance of the matching integer."""
    fractions = [i / 1000 for i in range(1001)]
    corrected = [gamma_correct(f) for f in fractions]

    assert all(a <= b for a, b in zip(corrected, corrected[1:]))
    for fraction, value in zip(fractions, corrected):
        assert abs(value - gamma_correct(round(fraction * 255))) <= 3
