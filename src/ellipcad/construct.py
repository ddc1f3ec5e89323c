## reconstruction of ellipses from point and line constraints for ellipcad

## Copyright (c) 2020 Richard W. DeVaul
## Copyright (c) 2024 ellipcad contributors


# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""reconstruction of ellipses from constraints

Every routine here returns a new whole ellipse (both end angles zero),
normalized so that ``ratio <= 1``, or ``False`` when the constraints do
not define an ellipse: too few points, a singular linear system, a
quadratic form that is not positive definite, or a quadrilateral with
no inscribed ellipse.  None of them raise on degenerate geometry.

"""

import logging
from math import *

import numpy as np

from ellipcad.geom import *
from ellipcad.conic import Quadratic
from ellipcad.ellipse import ellipse, ellipse_switch_axes
from ellipcad.solvers import linear_solve

logger = logging.getLogger(__name__)


def _normalized(e):
    if e[3]['ratio'] > 1.0:
        return ellipse_switch_axes(e)
    return e


def ellipse_from_4p(points):
    """Axis-aligned ellipse through four points.  Solves
    ``c0 x^2 + c1 x + c2 y^2 + c3 y = 1`` for the four coefficients, so
    the axes of the result are always parallel to x and y."""
    if len(points) != 4:
        return False
    mt = [ [ p[0]*p[0], p[0], p[1]*p[1], p[1], 1.0 ] for p in points ]
    dn = linear_solve(mt)
    if not dn:
        logger.debug('ellipse_from_4p(): singular system')
        return False
    if abs(dn[0]) < tolerance15 or abs(dn[2]) < tolerance15:
        return False
    d = 1.0 + 0.25*(dn[1]*dn[1]/dn[0] + dn[3]*dn[3]/dn[2])
    if d/dn[0] < tolerance15 or d/dn[2] < tolerance15:
        ## not an ellipse
        return False
    center = point(-0.5*dn[1]/dn[0], -0.5*dn[3]/dn[2])
    e = ellipse(center, point(sqrt(d/dn[0]), 0), sqrt(dn[0]/dn[2]))
    return _normalized(e)


def ellipse_from_center_3p(points):
    """Ellipse from its center ``points[0]`` and two or three points on
    it.  With two points the axes are parallel to x and y; with three
    the orientation is free.  A repeated last point is dropped."""
    if len(points) < 3:
        return False
    center = points[0]
    msize = len(points) - 1
    if squared(sub(points[msize],points[msize-1])) < tolerance15:
        msize -= 1
    rel = [ sub(points[i+1],center) for i in range(msize) ]
    if msize == 2:
        mt = [ [ v[0]*v[0], v[1]*v[1], 1.0 ] for v in rel ]
        dn = linear_solve(mt)
        if not dn or dn[0] < tolerance15 or dn[1] < tolerance15:
            return False
        e = ellipse(center, point(1.0/sqrt(dn[0]), 0), sqrt(dn[0]/dn[1]))
        return _normalized(e)
    if msize == 3:
        mt = [ [ v[0]*v[0], v[0]*v[1], v[1]*v[1], 1.0 ] for v in rel ]
        dn = linear_solve(mt)
        if not dn:
            return False
        return ellipse_from_quadratic_form(dn, center)
    return False


## Eigen-decomposition of the quadratic form a x^2 + c xy + b y^2 = 1,
## i.e. of the symmetric matrix [[a, c/2], [c/2, b]].  With d = a - b
## and s = hypot(d, c) the eigenvalues are (a + b -/+ s)/2; the smaller
## one belongs to the major axis.  Both must be positive.
def ellipse_from_quadratic_form(dn, center=False):
    """centered ellipse from the three coefficients of
    ``dn[0] x^2 + dn[1] xy + dn[2] y^2 = 1``, placed at ``center`` (or
    the origin)"""
    if len(dn) != 3:
        return False
    a, c, b = dn
    if not center:
        center = point(0, 0)
    d = a - b
    s = hypot(d, c)
    if s >= a + b:
        ## an eigenvalue is not positive
        return False
    r = 1.0/sqrt(0.5*(a + b - s))
    if s < tolerance15:
        ang = 0.0
    elif a >= b:
        ang = atan2(d + s, -c)
    else:
        ang = atan2(-c, s - d)
    return ellipse(center, polar(ang, r), sqrt((a + b - s)/(a + b + s)))


def ellipse_from_quadratic(q):
    """ellipse from a general conic with linear terms.  The conic must
    be an ellipse (``c^2 - 4ab < 0``) with a real, non-degenerate
    locus."""
    if not isinstance(q, Quadratic) or not q.is_quadratic():
        return False
    m = q.quad()
    a = m[0, 0]
    c = 2.0*m[0, 1]
    b = m[1, 1]
    d, f = q.linear()
    determinant = c*c - 4.0*a*b
    if determinant >= -tolerance15:
        return False
    ## the gradient vanishes at the center:
    ##   2a x + c y + d = 0
    ##   c x + 2b y + f = 0
    center = point(float((2.0*b*d - f*c)/determinant),
                   float((2.0*a*f - d*c)/determinant))
    centered = q.move([-center[0], -center[1]])
    k = centered.const_term()
    if abs(k) < tolerance15:
        ## a single point
        return False
    mq = centered.quad()
    factor = -1.0/k
    return ellipse_from_quadratic_form([ float(mq[0, 0]*factor),
                                         float(2.0*mq[0, 1]*factor),
                                         float(mq[1, 1]*factor) ],
                                       center)


## An ellipse inscribed in a convex quadrilateral is the projective
## image of the circle inscribed in a square.  The square's center maps
## to the intersection of the diagonals, and each of its midlines maps
## to the line through that point and the vanishing point of the
## opposite edge pair, which meets the other two edges at their
## tangent points.  Each vertex, the midpoint of the chord between the
## tangent points on its edges, and the ellipse center are collinear.

def _inscribedtrapezoid(quad, index):
    l0 = quad[index]
    l1 = quad[(index+2) % 4]
    cpt = scale3(add(linecenter(l0), linecenter(l1)), 0.5)
    if abs(dist(cpt,l0[0]) - dist(cpt,l0[1])) > tolerance:
        logger.debug('ellipse_inscribed(): trapezoid is not symmetric')
        return False
    logger.debug('ellipse_inscribed(): symmetric trapezoid')
    d = linePointXYDist(l0, cpt, inside=False)
    len0 = linelength(l0)
    len1 = linelength(l1)
    l = 0.25*(len0 + len1)
    k = 4.0*d/abs(len0 - len1)
    theta = d/(l*k)
    if theta >= 1.0 or d < tolerance:
        logger.debug('ellipse_inscribed(): degenerate trapezoid')
        return False
    theta = asin(theta)
    a = d/(k*tan(theta))
    return _normalized(ellipse(cpt, polar(lineangle(l0), a), d/a))

def _inscribedparallelogram(rel, center):
    ## the center to tangent point vectors on two adjacent edges are
    ## conjugate semi-diameters; with M = [u v] the form is (M M^T)^-1
    u = rel[0]
    v = rel[2]
    m = np.array([[u[0], v[0]], [u[1], v[1]]])
    if abs(np.linalg.det(m)) < tolerance2:
        return False
    q = np.linalg.inv(m @ m.T)
    return ellipse_from_quadratic_form([ float(q[0, 0]), float(2.0*q[0, 1]),
                                         float(q[1, 1]) ], center)

def ellipse_inscribed(lines, tangents=False):
    """Ellipse inscribed in the quadrilateral bounded by four lines.

    If ``tangents`` is true, return the pair ``[e, points]`` where
    ``points`` are the tangent points on the quadrilateral edges.
    Returns ``False`` if no quadrilateral or no inscribed ellipse
    exists.

    """
    if len(lines) != 4:
        return False
    verts = quadrilateralXY(lines)
    if not verts:
        return False
    quad = [ line(verts[i], verts[(i+1) % 4]) for i in range(4) ]

    ## projected center of the square, where the diagonals cross
    cp = lineLineIntersectXY(line(quad[0][0], quad[1][1]),
                             line(quad[1][0], quad[2][1]),
                             inside=False)
    if cp is False:
        logger.debug('ellipse_inscribed(): cannot locate projection center')
        return False

    tangent = []
    parallel = 0
    parallelindex = 0
    for i in range(2):
        vanish = lineLineIntersectXY(quad[i], quad[i+2], inside=False)
        if vanish is False:
            direction = sub(quad[i][1], quad[i][0])
            parallel += 1
            parallelindex = i
        else:
            direction = sub(vanish, cp)
        mid = [ cp, add(cp, direction) ]
        for k in (1, 3):
            p = lineLineIntersectXY(mid, quad[(i+k) % 4], inside=False)
            if p is not False:
                tangent.append(p)
    if len(tangent) < 3:
        return False

    cl0 = line(quad[1][1], scale3(add(tangent[0], tangent[2]), 0.5))
    cl1 = line(quad[2][1], scale3(add(tangent[1], tangent[2]), 0.5))
    center = lineLineIntersectXY(cl0, cl1, inside=False)
    if center is False:
        logger.debug('ellipse_inscribed(): cannot locate ellipse center')
        return False

    if parallel == 1:
        e = _inscribedtrapezoid(quad, parallelindex)
    else:
        rel = [ sub(t, center) for t in tangent ]
        ## drop tangent points that are point reflections of one already
        ## used, they add the same row to the linear system
        symtol = 20.0*tolerance
        rows = []
        for vp in rel:
            row = [ vp[0]*vp[0], vp[0]*vp[1], vp[1]*vp[1] ]
            l = sqrt(sum(x*x for x in row))
            if any(sqrt(sum((x-y)**2 for x, y in zip(row, other))) < symtol*l
                   for other in rows):
                continue
            rows.append(row)
        if len(rows) == 2 and len(rel) >= 3:
            logger.debug('ellipse_inscribed(): parallelogram')
            e = _inscribedparallelogram(rel, center)
        elif len(rows) >= 3:
            dn = linear_solve([ row + [1.0] for row in rows[:3] ])
            e = ellipse_from_quadratic_form(dn, center) if dn else False
        else:
            e = False
        if e is not False:
            e = _normalized(e)
    if e is False:
        return False
    if tangents:
        return [ e, tangent ]
    return e
