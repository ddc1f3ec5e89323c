"""Tests for ellipse reconstruction from points, conics and tangent lines."""

import pytest
from math import *

from ellipcad.geom import *
from ellipcad.conic import Quadratic
from ellipcad.ellipse import *
from ellipcad.construct import (
    ellipse_from_4p, ellipse_from_center_3p, ellipse_from_quadratic_form,
    ellipse_from_quadratic, ellipse_inscribed
)


def same_ellipse(e1, e2, tol=1e-9):
    """same center, radii and axis line"""
    if not vclose(ellipse_center(e1), ellipse_center(e2), tol):
        return False
    if not close(ellipse_majorradius(e1), ellipse_majorradius(e2), tol):
        return False
    if not close(ellipse_minorradius(e1), ellipse_minorradius(e2), tol):
        return False
    ## the major axis may point either way
    return abs(crossXY(ellipse_majorp(e1), ellipse_majorp(e2))) < tol


def on_segment(l, p, tol=1e-9):
    return linePointXY(l, p, inside=True, distance=True) < tol


class TestFromPoints:
    """Reconstruction from points on the ellipse."""

    def test_4p(self):
        pts = [point(1, 0), point(-1, 0), point(0, 2), point(0, -2)]
        e = ellipse_from_4p(pts)
        assert e is not False
        assert vclose(ellipse_center(e), point(0, 0), 1e-9)
        assert close(ellipse_majorradius(e), 2.0, 1e-9)
        assert close(ellipse_ratio(e), 0.5, 1e-9)
        assert close(abs(ellipse_majorp(e)[1]), 2.0, 1e-9)
        assert not ellipse_isarc(e)

    def test_4p_offset(self):
        """Four points of an axis aligned ellipse off the origin."""
        ref = ellipse(point(2, -1), point(3, 0), 0.5)
        pts = [ ellipse_point(ref, t) for t in (0.2, 1.4, 3.0, 4.5) ]
        e = ellipse_from_4p(pts)
        assert same_ellipse(e, ref)
        for p in pts:
            assert ellipse_ispointon(e, p, 1e-9)

    def test_4p_failures(self):
        ## collinear points
        pts = [point(0, 0), point(1, 1), point(2, 2), point(3, 3)]
        assert ellipse_from_4p(pts) is False
        ## a hyperbola x^2 - y^2 = 1
        pts = [point(1, 0), point(-1, 0), point(sqrt(2), 1),
               point(sqrt(5), -2)]
        assert ellipse_from_4p(pts) is False
        assert ellipse_from_4p(pts[:3]) is False

    def test_center_2p(self):
        """Center and two points give an axis aligned ellipse."""
        c = point(1, 1)
        e = ellipse_from_center_3p([c, point(4, 1), point(1, 3)])
        assert e is not False
        assert vclose(ellipse_center(e), c)
        assert close(ellipse_majorradius(e), 3.0, 1e-9)
        assert close(ellipse_minorradius(e), 2.0, 1e-9)

    def test_center_3p(self):
        ref = ellipse(point(-1, 2), point(3, 4), 0.3)
        pts = [ ellipse_point(ref, t) for t in (0.3, 1.9, 2.6) ]
        e = ellipse_from_center_3p([point(-1, 2)] + pts)
        assert same_ellipse(e, ref, 1e-8)

    def test_center_3p_repeated(self):
        """A repeated last point is dropped."""
        c = point(1, 1)
        e = ellipse_from_center_3p([c, point(4, 1), point(1, 3), point(1, 3)])
        assert close(ellipse_majorradius(e), 3.0, 1e-9)
        assert close(ellipse_minorradius(e), 2.0, 1e-9)

    def test_center_3p_failures(self):
        assert ellipse_from_center_3p([point(0, 0), point(1, 0)]) is False
        ## points through the center do not bound an ellipse
        pts = [point(0, 0), point(1, 1), point(-1, -1), point(2, 2)]
        assert ellipse_from_center_3p(pts) is False


class TestFromQuadratic:
    """Reconstruction from quadratic forms and general conics."""

    def test_form_axis_aligned(self):
        """x^2/4 + y^2 = 1"""
        e = ellipse_from_quadratic_form([0.25, 0.0, 1.0])
        assert close(ellipse_majorradius(e), 2.0)
        assert close(ellipse_ratio(e), 0.5)
        assert close(abs(ellipse_majorp(e)[0]), 2.0)

    def test_form_tall(self):
        """x^2 + y^2/4 = 1 has its major axis along y"""
        e = ellipse_from_quadratic_form([1.0, 0.0, 0.25], point(1, 1))
        assert vclose(ellipse_center(e), point(1, 1))
        assert close(ellipse_majorradius(e), 2.0)
        assert close(abs(ellipse_majorp(e)[1]), 2.0)

    def test_form_rotated(self):
        ref = ellipse(point(0, 0), point(3, 4), 0.4)
        q = ellipse_quadratic(ref)
        ## scale so the constant term is -1
        k = -1.0/q.const_term()
        c = q.coefficients()
        e = ellipse_from_quadratic_form([c[0]*k, c[1]*k, c[2]*k])
        assert same_ellipse(e, ref)

    def test_form_circle(self):
        e = ellipse_from_quadratic_form([0.25, 0.0, 0.25])
        assert close(ellipse_majorradius(e), 2.0)
        assert close(ellipse_ratio(e), 1.0)

    def test_form_failures(self):
        assert ellipse_from_quadratic_form([1.0, 0.0, -1.0]) is False
        assert ellipse_from_quadratic_form([-1.0, 0.0, -1.0]) is False
        assert ellipse_from_quadratic_form([1.0, 0.0]) is False

    def test_conic(self):
        ref = ellipse(point(2, -3), point(-1, 2), 0.6)
        e = ellipse_from_quadratic(ellipse_quadratic(ref))
        assert same_ellipse(e, ref)

    def test_conic_scaled(self):
        """Any nonzero multiple of the equation is the same ellipse."""
        ref = ellipse(point(2, -3), point(-1, 2), 0.6)
        c = ellipse_quadratic(ref).coefficients()
        for k in (-3.0, 0.5, 7.0):
            e = ellipse_from_quadratic(Quadratic([x*k for x in c]))
            assert same_ellipse(e, ref)

    def test_conic_failures(self):
        ## a hyperbola
        assert ellipse_from_quadratic(Quadratic([1, 0, -1, 0, 0, -1])) \
            is False
        ## a single point
        assert ellipse_from_quadratic(Quadratic([1, 0, 1, -2, 0, 1])) \
            is False
        ## no real locus
        assert ellipse_from_quadratic(Quadratic([1, 0, 1, 0, 0, 1])) \
            is False
        assert ellipse_from_quadratic(Quadratic([1, 2, 3])) is False
        assert ellipse_from_quadratic([1, 0, 1, 0, 0, -1]) is False


class TestInscribed:
    """Ellipses inscribed in the quadrilateral bounded by four lines."""

    def test_square(self):
        lines = [ line(point(-1, -1), point(1, -1)),
                  line(point(1, -1), point(1, 1)),
                  line(point(1, 1), point(-1, 1)),
                  line(point(-1, 1), point(-1, -1)) ]
        e, tangents = ellipse_inscribed(lines, tangents=True)
        assert vclose(ellipse_center(e), point(0, 0), 1e-9)
        assert close(ellipse_majorradius(e), 1.0, 1e-9)
        assert close(ellipse_ratio(e), 1.0, 1e-9)
        for t in (point(0, 1), point(0, -1), point(1, 0), point(-1, 0)):
            assert any(vclose(t, p, 1e-9) for p in tangents)

    def test_line_order(self):
        """The lines may be given in any order and direction."""
        lines = [ line(point(-5, 1), point(5, 1)),
                  line(point(1, -5), point(1, 5)),
                  line(point(5, -1), point(-5, -1)),
                  line(point(-1, -5), point(-1, 5)) ]
        e = ellipse_inscribed(lines)
        assert vclose(ellipse_center(e), point(0, 0), 1e-9)
        assert close(ellipse_majorradius(e), 1.0, 1e-9)

    def test_rectangle(self):
        lines = [ line(point(-2, -1), point(2, -1)),
                  line(point(2, -1), point(2, 1)),
                  line(point(2, 1), point(-2, 1)),
                  line(point(-2, 1), point(-2, -1)) ]
        e = ellipse_inscribed(lines)
        assert close(ellipse_majorradius(e), 2.0, 1e-9)
        assert close(ellipse_ratio(e), 0.5, 1e-9)
        assert close(abs(ellipse_majorp(e)[0]), 2.0, 1e-9)

    def test_parallelogram(self):
        verts = [point(0, 0), point(4, 0), point(5, 2), point(1, 2)]
        lines = [ line(verts[i], verts[(i+1) % 4]) for i in range(4) ]
        e, tangents = ellipse_inscribed(lines, tangents=True)
        assert vclose(ellipse_center(e), point(2.5, 1), 1e-9)
        ## tangent at the edge midpoints
        for i in range(4):
            assert ellipse_ispointon(e, linecenter(lines[i]), 1e-9)
        for p in tangents:
            assert ellipse_ispointon(e, p, 1e-9)

    def test_trapezoid(self):
        lines = [ line(point(-1, -1), point(1, -1)),
                  line(point(1, -1), point(2, 1)),
                  line(point(2, 1), point(-2, 1)),
                  line(point(-2, 1), point(-1, -1)) ]
        e, tangents = ellipse_inscribed(lines, tangents=True)
        assert vclose(ellipse_center(e), point(0, 0), 1e-9)
        assert close(ellipse_majorradius(e), sqrt(2), 1e-9)
        assert close(ellipse_ratio(e), sqrt(0.5), 1e-9)
        assert close(abs(ellipse_majorp(e)[0]), sqrt(2), 1e-9)
        for t in (point(0, 1), point(0, -1), point(4/3, -1/3),
                  point(-4/3, -1/3)):
            assert any(vclose(t, p, 1e-9) for p in tangents)

    def test_general(self):
        """A quadrilateral without parallel sides."""
        verts = [point(0, 0), point(4, 0), point(5, 3), point(1, 4)]
        lines = [ line(verts[i], verts[(i+1) % 4]) for i in range(4) ]
        e, tangents = ellipse_inscribed(lines, tangents=True)
        assert e is not False
        assert len(tangents) == 4
        for p in tangents:
            assert ellipse_ispointon(e, p, 1e-8)
            assert any(on_segment(l, p, 1e-8) for l in lines)
        ## each edge touches the ellipse exactly once
        for l in lines:
            d = sub(l[1], l[0])
            n = normalizeXY(orthoXY(d))
            sides = [ dot2(n, sub(ellipse_point(e, pi2*i/720), l[0]))
                      for i in range(720) ]
            assert min(sides) > -1e-6 or max(sides) < 1e-6

    def test_failures(self):
        lines = [ line(point(0, 0), point(1, 0)),
                  line(point(0, 1), point(1, 1)),
                  line(point(0, 2), point(1, 2)),
                  line(point(0, 0), point(0, 1)) ]
        assert ellipse_inscribed(lines) is False
        assert ellipse_inscribed(lines[:3]) is False
