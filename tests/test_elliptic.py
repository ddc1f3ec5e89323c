"""Tests for the elliptic integral evaluator and arc-length decomposition."""

import pytest
from math import *

import mpmath as mpm

from ellipcad.geom import close
from ellipcad.elliptic import (
    complete_e, incomplete_e, arc_integral, arc_length, full_length
)


def numeric_length(a, ratio, x1, x2):
    """direct quadrature of the arc length integrand"""
    b = a*ratio
    return float(mpm.quad(lambda t: mpm.sqrt((a*mpm.sin(t))**2 +
                                             (b*mpm.cos(t))**2),
                          [x1, x2]))


class TestEllipticIntegrals:
    """Test the complete and incomplete integrals of the second kind."""

    def test_complete(self):
        assert close(complete_e(0.0), pi/2)
        assert close(complete_e(1.0), 1.0)
        ## E(k = 0.8), i.e. parameter m = 0.64
        assert close(complete_e(0.8), 1.2763499431699064, 1e-9)

    def test_incomplete(self):
        assert close(incomplete_e(0.0, 1.0), 1.0)
        assert close(incomplete_e(0.5, pi/2), complete_e(0.5))
        assert close(incomplete_e(0.5, -0.3), -incomplete_e(0.5, 0.3))

    def test_arc_integral(self):
        """The half period integral of sqrt(1 - k^2 cos^2) is 2 E(k)."""
        k = 0.6
        assert close(arc_integral(k, 0.0), 0.0)
        assert close(arc_integral(k, pi/2), complete_e(k))
        assert close(arc_integral(k, pi - 1e-12), 2.0*complete_e(k), 1e-9)


class TestArcLength:
    """Test arc lengths of ellipses and elliptic arcs."""

    def test_full_length(self):
        """a = 10, b = 6: 4 a E(0.8)"""
        assert close(full_length(10.0, 0.6), 51.053997726796, 1e-7)
        assert close(arc_length(10.0, 0.6, 0.0, 0.0), full_length(10.0, 0.6))
        assert close(arc_length(10.0, 0.6, 1.0, 1.0), full_length(10.0, 0.6))

    def test_circle(self):
        assert close(full_length(2.0, 1.0), 4.0*pi)
        assert close(arc_length(2.0, 1.0, 0.0, pi/3), 2.0*pi/3)
        assert close(arc_length(2.0, 1.0, 5.0, 1.0), 2.0*(2*pi - 4.0))

    def test_full_length_swapped_axes(self):
        """A ratio above one describes the same curve."""
        assert close(full_length(6.0, 10.0/6.0), full_length(10.0, 0.6))

    def test_quarter(self):
        """The quarter from the major vertex is a E(k)."""
        k = 0.8
        assert close(arc_length(10.0, 0.6, 0.0, pi/2), 10.0*complete_e(k))
        assert close(arc_length(10.0, 0.6, pi/2, pi), 10.0*complete_e(k))

    @pytest.mark.parametrize('x1,x2', [
        (0.3, 1.2),
        (1.2, 2.9),
        (2.9, 3.4),
        (0.5, 6.0),
        (4.0, 5.5),
        (5.5, 0.7),
        (pi/2, 3*pi/2),
    ])
    def test_against_quadrature(self, x1, x2):
        expected = numeric_length(10.0, 0.6, x1, x2 if x2 > x1 else x2 + 2*pi)
        assert close(arc_length(10.0, 0.6, x1, x2), expected, 1e-8)

    def test_additive(self):
        a, r = 3.0, 0.25
        whole = arc_length(a, r, 0.4, 5.1)
        parts = arc_length(a, r, 0.4, 2.0) + arc_length(a, r, 2.0, 5.1)
        assert close(whole, parts, 1e-9)

    def test_wraps_counter_clockwise(self):
        """From x1 to x2 < x1 goes through zero."""
        a, r = 3.0, 0.5
        total = full_length(a, r)
        assert close(arc_length(a, r, 1.0, 2.0) + arc_length(a, r, 2.0, 1.0),
                     total, 1e-9)

    def test_bad_ratio(self):
        with pytest.raises(ValueError):
            arc_length(1.0, 2.0, 0.0, 1.0)
