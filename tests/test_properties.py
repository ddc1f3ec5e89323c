"""Randomized checks of geometric identities over many ellipses and arcs."""

import pytest
import random
from math import *

from ellipcad.geom import *
from ellipcad.ellipse import *
from ellipcad.ellipse_edit import ellipse_revert, ellipse_move_startpoint


def random_ellipse(rng, arc=True, minratio=0.1, maxratio=1.0):
    c = point(rng.uniform(-10, 10), rng.uniform(-10, 10))
    mp = polar(rng.uniform(0, pi2), rng.uniform(0.5, 20))
    r = rng.uniform(minratio, maxratio)
    if not arc:
        return ellipse(c, mp, r)
    a1 = rng.uniform(0, pi2)
    a2 = rng.uniform(0, pi2)
    return ellipse(c, mp, r, a1, a2, rng.random() < 0.5)


class TestRandomEllipses:
    """Identities that hold for every ellipse."""

    def test_point_angle_roundtrip(self):
        rng = random.Random(1)
        for i in range(500):
            e = random_ellipse(rng, arc=False, maxratio=3.0)
            t = rng.uniform(-pi2, 2*pi2)
            a = ellipse_angle(e, ellipse_point(e, t))
            assert angleDifferenceU(a, t) < 1e-9

    def test_arc_length_additive(self):
        rng = random.Random(2)
        for i in range(200):
            n = ellipse_normalized(random_ellipse(rng, arc=False))
            x1 = rng.uniform(0, pi2)
            d1 = rng.uniform(0.01, 3.0)
            d2 = rng.uniform(0.01, 3.0)
            whole = ellipse_arclength(n, x1, x1 + d1 + d2)
            parts = ellipse_arclength(n, x1, x1 + d1) + \
                ellipse_arclength(n, x1 + d1, x1 + d1 + d2)
            assert close(whole, parts, 1e-8)

    def test_reversal(self):
        """Reverting keeps the length and runs the samples backwards."""
        rng = random.Random(3)
        for i in range(200):
            e = random_ellipse(rng)
            r = ellipse_revert(e)
            assert close(ellipse_length(r), ellipse_length(e), 1e-8)
            for u in (0.0, 0.3, 1.0):
                assert vclose(ellipse_sample(r, u),
                              ellipse_sample(e, 1.0 - u), 1e-8)

    def test_bbox_contains_arc(self):
        rng = random.Random(4)
        for i in range(1000):
            e = random_ellipse(rng)
            bb = ellipse_bbox(e)
            lo = [maxdouble, maxdouble]
            hi = [-maxdouble, -maxdouble]
            for j in range(51):
                p = ellipse_sample(e, j/50.0)
                assert isinsidebbox(bb, p, 1e-9)
                lo = [min(lo[0], p[0]), min(lo[1], p[1])]
                hi = [max(hi[0], p[0]), max(hi[1], p[1])]
            ## the box is tight up to the sampling resolution
            tol = 0.01*ellipse_majorradius(e)
            assert lo[0] - bb[0][0] < tol and lo[1] - bb[0][1] < tol
            assert bb[1][0] - hi[0] < tol and bb[1][1] - hi[1] < tol

    def test_move_startpoint_keeps_end(self):
        rng = random.Random(5)
        for i in range(200):
            e = random_ellipse(rng)
            if not ellipse_isarc(e):
                continue
            m = ellipse_move_startpoint(e, ellipse_sample(e, 0.3))
            assert vclose(ellipse_endpoint(m), ellipse_endpoint(e), 1e-8)
            assert vclose(ellipse_startpoint(m), ellipse_sample(e, 0.3),
                          1e-8)


class TestRandomNearest:
    """Closest point queries against direct computation."""

    def test_circle(self):
        rng = random.Random(6)
        for i in range(300):
            c = point(rng.uniform(-10, 10), rng.uniform(-10, 10))
            rad = rng.uniform(0.5, 10)
            e = ellipse(c, polar(rng.uniform(0, pi2), rad), 1.0)
            q = add(c, polar(rng.uniform(0, pi2), rng.uniform(0.1, 30)))
            p, d = ellipse_nearest_point(e, q)
            expect = add(c, scale3(normalizeXY(sub(q, c)), rad))
            assert vclose(p, expect, 1e-8)
            assert close(d, abs(dist(q, c) - rad), 1e-8)

    def test_brute_force(self):
        rng = random.Random(7)
        steps = 2000
        for i in range(100):
            e = random_ellipse(rng, arc=False, minratio=0.2, maxratio=0.95)
            a = ellipse_majorradius(e)
            q = add(ellipse_center(e),
                    polar(rng.uniform(0, pi2), rng.uniform(0.05, 3.0)*a))
            p, d = ellipse_nearest_point(e, q)
            assert ellipse_ispointon(e, p, 1e-8)
            assert close(d, dist(p, q), 1e-9)
            brute = min(dist(q, ellipse_point(e, pi2*j/steps))
                        for j in range(steps))
            assert d <= brute + 1e-9
            assert brute - d < 1e-3*a
