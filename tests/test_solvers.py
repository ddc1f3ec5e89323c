"""Tests for the numeric root finding utilities."""

import pytest
from math import *

from ellipcad.geom import close
from ellipcad.solvers import (
    linear_solve, quartic_roots, closest_angle, halley_iterate
)


class TestLinearSolve:
    """Test the augmented-matrix linear solver."""

    def test_two_by_two(self):
        """x + y = 3, x - y = 1"""
        x = linear_solve([[1, 1, 3], [1, -1, 1]])
        assert close(x[0], 2.0)
        assert close(x[1], 1.0)

    def test_three_by_three(self):
        mt = [[2, 1, -1, 8],
              [-3, -1, 2, -11],
              [-2, 1, 2, -3]]
        x = linear_solve(mt)
        assert close(x[0], 2.0, 1e-9)
        assert close(x[1], 3.0, 1e-9)
        assert close(x[2], -1.0, 1e-9)

    def test_singular(self):
        """Dependent rows have no unique solution."""
        assert linear_solve([[1, 2, 3], [2, 4, 6]]) is False
        assert linear_solve([[0, 0, 1], [0, 0, 1]]) is False

    def test_malformed(self):
        assert linear_solve([]) is False
        with pytest.raises(ValueError):
            linear_solve([[1, 2], [3, 4]])


class TestQuarticRoots:
    """Test the real quartic root finder."""

    def test_four_real_roots(self):
        """(x-1)(x+1)(x-2)(x+2) = x^4 - 5x^2 + 4"""
        roots = quartic_roots([0, -5, 0, 4])
        assert len(roots) == 4
        for r, expected in zip(roots, [-2, -1, 1, 2]):
            assert close(r, expected, 1e-9)

    def test_five_coefficients(self):
        """Leading coefficient other than one."""
        roots = quartic_roots([2, 0, -10, 0, 8])
        assert len(roots) == 4
        assert close(roots[-1], 2.0, 1e-9)

    def test_complex_roots_dropped(self):
        """(x^2 + 1)(x - 3)(x + 3) has two real roots."""
        roots = quartic_roots([0, -8, 0, -9])
        assert len(roots) == 2
        assert close(roots[0], -3.0, 1e-9)
        assert close(roots[1], 3.0, 1e-9)

    def test_no_real_roots(self):
        """(x^2 + 1)(x^2 + 4)"""
        assert quartic_roots([0, 5, 0, 4]) == []

    def test_degree_drop(self):
        """A vanishing leading term leaves a cubic."""
        roots = quartic_roots([0, 1, 0, -1, 0])
        assert len(roots) == 3
        assert close(roots[0], -1.0, 1e-9)
        assert close(roots[1], 0.0, 1e-9)
        assert close(roots[2], 1.0, 1e-9)

    def test_bad_arity(self):
        with pytest.raises(ValueError):
            quartic_roots([1, 2, 3])


class TestClosestAngle:
    """Test the Newton-Raphson closest point search."""

    def test_circle(self):
        """On a circle the answer is the polar angle of the point."""
        t = closest_angle(2.0, 2.0, [3.0, 3.0])
        assert close(cos(t), sqrt(0.5), 1e-9)
        assert close(sin(t), sqrt(0.5), 1e-9)

    def test_near_circle_stationary(self):
        """The result is a stationary point of the squared distance."""
        a, b = 1.0, 1.0 - 1e-9
        p = [0.3, 0.9]
        t = closest_angle(a, b, p)
        deriv = (b*b - a*a)*sin(2*t) + 2*a*p[0]*sin(t) - 2*b*p[1]*cos(t)
        assert abs(deriv) < 1e-8

    def test_seed(self):
        """A seed a little off the major vertex is pulled back onto it."""
        t = closest_angle(10.0, 5.0, [20.0, 0.0], maxiter=4, seed=1.5e-7)
        assert abs(t) < 1e-15
        t = closest_angle(10.0, 5.0, [-20.0, 0.0], maxiter=4,
                          seed=pi - 1.5e-7)
        assert close(t, pi, 1e-14)


class TestHalleyIterate:
    """Test the bracketed Halley iteration."""

    def test_cubic(self):
        """x^3 - 2 on [0, 2]"""
        def f(x):
            return x**3 - 2.0, 3.0*x*x, 6.0*x
        x = halley_iterate(f, 1.0, 0.0, 2.0)
        assert close(x, 2.0**(1.0/3.0), 1e-9)

    def test_stays_in_bracket(self):
        """A poor initial guess does not leave the bracket."""
        def f(x):
            return atan(x - 0.5), 1.0/(1.0 + (x - 0.5)**2), \
                -2.0*(x - 0.5)/(1.0 + (x - 0.5)**2)**2
        x = halley_iterate(f, 10.0, 0.0, 1.0)
        assert 0.0 <= x <= 1.0
        assert close(x, 0.5, 1e-9)

    def test_decreasing(self):
        def f(x):
            return 1.0 - x, -1.0, 0.0
        x = halley_iterate(f, 0.0, 0.0, 3.0)
        assert close(x, 1.0, 1e-9)
