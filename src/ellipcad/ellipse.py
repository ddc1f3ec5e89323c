## ellipse and elliptic arc primitive for ellipcad

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

"""ellipse and elliptic arc primitive for **ellipcad**

====================
OVERVIEW
====================

An ellipse is represented the way yapCAD represents its tagged
primitives, as a list holding a tag, the defining points, and a
dictionary of scalar parameters::

    ['ellipse', center, majorp, {'ratio': r, 'angle1': a1,
                                 'angle2': a2, 'reversed': False}]

``center`` is the ellipse center.  ``majorp`` is the vector from the
center to one end of the major axis: its magnitude is the major
radius and its polar angle is the rotation of the ellipse.  ``ratio``
is the minor to major radius ratio.  ``angle1`` and ``angle2`` are the
*parametric* start and end angles of an arc, and ``reversed`` selects
clockwise traversal from ``angle1`` to ``angle2``.  When both angles
are zero the figure is a whole ellipse, which has no start or end
point.

parametric angles
=================

The parametric angle ``t`` maps to the point

    center + rotate( [a cos(t), b sin(t)], rotation )

where ``a`` and ``b`` are the major and minor radii.  This is not the
polar angle of the resulting point.  ``ellipse_point()`` and
``ellipse_angle()`` convert between the two, and every other function
in this module goes through them.

values, not objects
===================

Nothing in this module modifies its arguments.  Functions that
produce a changed ellipse return a new list; see
``ellipcad.geometry.Ellipse`` for a stateful wrapper that caches the
derived quantities.

queries
=======

Nearest-point style queries return a pair ``(p, d)``: the point found
and its distance from the query point.  Queries with no answer return
``(False, maxdouble)``.

"""

import logging
from copy import deepcopy
from math import *

from ellipcad.geom import *
from ellipcad import elliptic
from ellipcad.conic import Quadratic
from ellipcad.solvers import quartic_roots, closest_angle, halley_iterate

logger = logging.getLogger(__name__)


class NearestPointError(ArithmeticError):
    """no closest point could be found on an ellipse"""


## creation and access
## -------------------

def _topoint(p):
    if ispoint(p):
        return point(p)
    if isinstance(p,(list,tuple)) and 2 <= len(p) <= 3 \
       and all(isgoodnum(x) for x in p):
        return point(*p)
    raise ValueError('bad point or vector passed to ellipse: {}'.format(p))

def _snapangles(meta):
    ## angles that are both negligible denote a whole ellipse
    if abs(meta['angle1']) < tolerance_angle and \
       abs(meta['angle2']) < tolerance_angle:
        meta['angle1'] = 0.0
        meta['angle2'] = 0.0

def ellipse(center,majorp,ratio,angle1=0.0,angle2=0.0,reversed=False):
    """value-safe ellipse creation.  ``center`` and ``majorp`` are points
    (or 2-tuples), ``ratio`` the minor/major radius ratio."""
    if not isgoodnum(ratio) or ratio < 0:
        raise ValueError('bad ratio passed to ellipse(): {}'.format(ratio))
    if not isgoodnum(angle1) or not isgoodnum(angle2):
        raise ValueError('bad angles passed to ellipse()')
    meta = { 'ratio': float(ratio),
             'angle1': float(angle1),
             'angle2': float(angle2),
             'reversed': bool(reversed) }
    _snapangles(meta)
    c = _topoint(center)
    mp = _topoint(majorp)
    mp[2] = 0
    return ['ellipse', c, mp, meta]

def isellipse(e):
    """ is it an ellipse? """
    return isinstance(e,list) and len(e) == 4 and e[0] == 'ellipse' \
        and ispoint(e[1]) and ispoint(e[2]) and isinstance(e[3],dict) \
        and isgoodnum(e[3].get('ratio')) and e[3]['ratio'] >= 0

def ellipse_replace(e,center=None,majorp=None,**meta):
    """return a copy of ellipse ``e`` with the given fields replaced.
    Accepted keywords are ``ratio``, ``angle1``, ``angle2`` and
    ``reversed``."""
    unknown = set(meta) - {'ratio','angle1','angle2','reversed'}
    if unknown:
        raise ValueError('unknown ellipse fields: {}'.format(sorted(unknown)))
    r = deepcopy(e)
    if center is not None:
        r[1] = _topoint(center)
    if majorp is not None:
        r[2] = _topoint(majorp)
        r[2][2] = 0
    if 'ratio' in meta:
        if not isgoodnum(meta['ratio']) or meta['ratio'] < 0:
            raise ValueError('bad ratio: {}'.format(meta['ratio']))
        meta['ratio'] = float(meta['ratio'])
    if 'reversed' in meta:
        meta['reversed'] = bool(meta['reversed'])
    r[3].update(meta)
    _snapangles(r[3])
    return r

def ellipse_center(e):
    return point(e[1])

def ellipse_majorp(e):
    return point(e[2])

def ellipse_ratio(e):
    return e[3]['ratio']

def ellipse_angles(e):
    """ the pair ``(angle1, angle2)`` """
    return e[3]['angle1'], e[3]['angle2']

def ellipse_isreversed(e):
    return e[3]['reversed']

def ellipse_isarc(e):
    """an elliptic arc has at least one non-negligible end angle"""
    a1, a2 = ellipse_angles(e)
    return abs(a1) >= tolerance_angle or abs(a2) >= tolerance_angle

def ellipse_majorradius(e):
    return sqrt(squared(e[2]))

def ellipse_minorradius(e):
    return ellipse_majorradius(e)*e[3]['ratio']

def ellipse_rotation(e):
    """ polar angle of the major axis """
    return angleXY(e[2])

def ellipse_majorpoint(e):
    return add(e[1],e[2])

def ellipse_minorpoint(e):
    r = e[3]['ratio']
    return add(e[1],[-r*e[2][1], r*e[2][0], 0, 1.0])

## unit direction of the major axis, [1, 0] for a zero-size ellipse
def _axisdir(e):
    a = ellipse_majorradius(e)
    if a < tolerance2:
        return [1.0, 0.0]
    return [e[2][0]/a, e[2][1]/a]

## convert a point to the ellipse's centered, unrotated frame
def _tolocal(e,p):
    u = _axisdir(e)
    return rotateByXY(sub(p,e[1]),[u[0],-u[1]])

def _toglobal(e,p):
    return add(rotateByXY(p,_axisdir(e)),e[1])


## canonical geometry
## ------------------

def ellipse_point(e,a):
    """the point at parametric angle ``a``"""
    ra = ellipse_majorradius(e)
    p = [ ra*cos(a), ra*e[3]['ratio']*sin(a), 0, 1.0 ]
    return _toglobal(e,p)

def ellipse_angle(e,p):
    """the parametric angle of point ``p``, in `[0, 2*pi)`.  Points off
    the ellipse map to the angle of their projection along the ray from
    the center in the stretched frame."""
    m = _tolocal(e,p)
    return angleXY([ m[0]*e[3]['ratio'], m[1] ])

def ellipse_startpoint(e):
    """ start point of an arc, ``False`` for a whole ellipse """
    if not ellipse_isarc(e):
        return False
    return ellipse_point(e,e[3]['angle1'])

def ellipse_endpoint(e):
    """ end point of an arc, ``False`` for a whole ellipse """
    if not ellipse_isarc(e):
        return False
    return ellipse_point(e,e[3]['angle2'])

def ellipse_angularlength(e):
    """parametric angle swept by the arc in the traversal direction, in
    `(0, 2*pi]`.  Coincident end angles are a full loop."""
    a1, a2 = ellipse_angles(e)
    if ellipse_isreversed(e):
        a1, a2 = a2, a1
    ret = correctAngle(a2 - a1)
    if abs(remainder(ret,pi2)) < tolerance_angle:
        ret = pi2
    return ret

def ellipse_sample(e,u):
    """sample the ellipse or arc at ``0 <= u <= 1`` along its traversal
    direction"""
    a1 = e[3]['angle1']
    da = ellipse_angularlength(e)*u
    if ellipse_isreversed(e):
        da = -da
    return ellipse_point(e,a1+da)

## bounding box of the full ellipse or the arc.  The x and y extrema
## are at parametric angles that depend only on the rotation and the
## ratio; each one counts only if it falls on the arc.
def ellipse_bbox(e):
    """ tightest XY bounding box of the ellipse or arc """
    bb = False
    if ellipse_isarc(e):
        bb = bboxmerge(bb,ellipse_startpoint(e))
        bb = bboxmerge(bb,ellipse_endpoint(e))
    mp = e[2]
    r = e[3]['ratio']
    a1, a2 = ellipse_angles(e)
    rev = ellipse_isreversed(e)
    for vp in ([mp[0], -r*mp[1]], [mp[1], r*mp[0]]):
        ang = atan2(vp[1],vp[0])
        for a in (ang, ang+pi):
            if isAngleBetween(a,a1,a2,rev):
                bb = bboxmerge(bb,ellipse_point(e,a))
    if not bb:
        bb = bboxmerge(bb,e[1])
    return bb

def ellipse_switch_axes(e):
    """rename the axes so that the minor axis becomes the major axis,
    keeping the geometric end points of an arc.  The ratio becomes its
    reciprocal.  Returns ``False`` for a ratio of zero."""
    r = e[3]['ratio']
    if abs(r) < tolerance:
        return False
    vs = ellipse_startpoint(e)
    ve = ellipse_endpoint(e)
    mp = e[2]
    n = ellipse_replace(e,majorp=[-r*mp[1], r*mp[0]],ratio=1.0/r)
    if vs:
        n = ellipse_replace(n,angle1=ellipse_angle(n,vs),
                            angle2=ellipse_angle(n,ve))
    return n

def ellipse_normalized(e):
    """return an equivalent ellipse with ``ratio <= 1`` traversed
    counter-clockwise.  Arc length and distance inversion are only
    defined in this form."""
    n = e
    if n[3]['ratio'] > 1.0:
        n = ellipse_switch_axes(n)
    if n[3]['reversed']:
        n = ellipse_replace(n,angle1=n[3]['angle2'],angle2=n[3]['angle1'],
                            reversed=False)
    elif n is e:
        n = deepcopy(e)
    return n

def ellipse_arclength(e,x1,x2):
    """arc length between parametric angles ``x1`` and ``x2`` of a
    normalized ellipse, measured counter-clockwise"""
    return elliptic.arc_length(ellipse_majorradius(e),e[3]['ratio'],x1,x2)

def ellipse_length(e):
    """ length of the ellipse or arc """
    n = ellipse_normalized(e)
    a1, a2 = ellipse_angles(n)
    return ellipse_arclength(n,a1,a2)

def ellipse_foci(e):
    """ the two foci """
    n = e
    if e[3]['ratio'] > 1.0:
        n = ellipse_switch_axes(e)
    r = n[3]['ratio']
    vp = scale3(n[2],sqrt(max(0.0,1.0 - r*r)))
    return [ add(e[1],vp), sub(e[1],vp) ]

def ellipse_refpoints(e):
    """reference points for editing: start and end (arcs only), center,
    both foci, the major point and the minor point"""
    ret = []
    if ellipse_isarc(e):
        ret += [ ellipse_startpoint(e), ellipse_endpoint(e) ]
    ret.append(ellipse_center(e))
    ret += ellipse_foci(e)
    ret.append(ellipse_majorpoint(e))
    ret.append(ellipse_minorpoint(e))
    return ret

## tangent directions at the end points, pointing into the arc
def ellipse_direction1(e):
    """ polar angle of the tangent at the start point, into the arc """
    a1 = e[3]['angle1']
    r = e[3]['ratio']
    if e[3]['reversed']:
        vp = [ sin(a1), -r*cos(a1) ]
    else:
        vp = [ -sin(a1), r*cos(a1) ]
    return correctAngle(atan2(vp[1],vp[0]) + ellipse_rotation(e))

def ellipse_direction2(e):
    """ polar angle of the tangent at the end point, into the arc """
    a2 = e[3]['angle2']
    r = e[3]['ratio']
    if e[3]['reversed']:
        vp = [ -sin(a2), r*cos(a2) ]
    else:
        vp = [ sin(a2), -r*cos(a2) ]
    return correctAngle(atan2(vp[1],vp[0]) + ellipse_rotation(e))

def ellipse_bulge(e):
    bulge = tan(abs(ellipse_angularlength(e))/4.0)
    return -bulge if e[3]['reversed'] else bulge

def ellipse_quadratic(e):
    """ the implicit equation of the ellipse as a ``Quadratic`` """
    a2 = squared(e[2])
    b2 = e[3]['ratio']**2*a2
    if a2 < tolerance2 or b2 < tolerance2:
        return Quadratic()
    q = Quadratic([ 1.0/a2, 0.0, 1.0/b2, 0.0, 0.0, -1.0 ])
    return q.rotate(ellipse_rotation(e)).move(e[1])

## Contour integral of x dy along the arc in its traversal direction,
## the ellipse's contribution to an area computed by Green's theorem.
## With x = cx + X(t), y = cy + Y(t) the antiderivative is
##   cx y(t) - (a^2+b^2) sin(2 phi) sin^2(t)/4
##           + a b (t/2 + cos(2 phi) sin(2 t)/4)
def ellipse_area_integral(e):
    """contour integral of ``x dy`` along the ellipse or arc; a whole
    ellipse contributes its area"""
    a = ellipse_majorradius(e)
    b = ellipse_minorradius(e)
    if not ellipse_isarc(e):
        return pi*a*b
    phi = ellipse_rotation(e)
    cx = e[1][0]
    r2 = a*a + b*b

    def antiderivative(t):
        y = ellipse_point(e,t)[1]
        return cx*y - 0.25*r2*sin(2.0*phi)*sin(t)**2 + \
            a*b*(0.5*t + 0.25*cos(2.0*phi)*sin(2.0*t))

    t0 = e[3]['angle1']
    da = ellipse_angularlength(e)
    t1 = t0 - da if e[3]['reversed'] else t0 + da
    return antiderivative(t1) - antiderivative(t0)

def ellipse_area(e):
    """area of a whole ellipse, or of the elliptic segment bounded by an
    arc and its chord"""
    if not ellipse_isarc(e):
        return pi*ellipse_majorradius(e)*ellipse_minorradius(e)
    p0 = ellipse_startpoint(e)
    p1 = ellipse_endpoint(e)
    ## close the contour along the chord from end back to start
    chord = 0.5*(p0[0] + p1[0])*(p0[1] - p1[1])
    return abs(ellipse_area_integral(e) + chord)


## queries
## -------

def ellipse_ispointon(e,p,tol=tolerance):
    """is point ``p`` on the ellipse or arc, to within ``tol`` of the
    normalized squared radius?"""
    a = ellipse_majorradius(e)
    b = a*e[3]['ratio']
    vp = _tolocal(e,p)
    if a < tolerance:
        ## radius treated as zero
        return abs(vp[0]) < tolerance and abs(vp[1]) < b
    if b < tolerance:
        return abs(vp[1]) < tolerance and abs(vp[0]) < a
    vp = scaleXY(vp,[1.0/a, 1.0/b])
    if abs(squared(vp) - 1.0) > abs(tol):
        return False
    a1, a2 = ellipse_angles(e)
    return isAngleBetween(angleXY(vp),a1,a2,e[3]['reversed'])

def ellipse_nearest_endpoint(e,p):
    """the arc end point closest to ``p`` and its distance"""
    if not ellipse_isarc(e):
        return False, maxdouble
    vs = ellipse_startpoint(e)
    ve = ellipse_endpoint(e)
    d1 = squared(sub(vs,p))
    d2 = squared(sub(ve,p))
    if d2 < d1:
        return ve, sqrt(d2)
    return vs, sqrt(d1)

## Closest point on the ellipse to an arbitrary point.  In the centered,
## unrotated frame, minimizing the squared distance from (x, y) to
## (a cos t, b sin t) leads to a quartic in c = cos t.  Every real root
## in [-1, 1] together with s = +/- sqrt(1 - c^2) is a candidate; the
## second derivative of the squared distance rejects the maxima and the
## closest remaining candidate wins.  The quartic degenerates for a
## circle, where Newton-Raphson on the derivative is used instead.

def _quarticcandidates(a,b,x,y):
    twoa2b2 = 2.0*(a*a - b*b)
    twoax = 2.0*a*x
    twoby = 2.0*b*y
    a0 = twoa2b2*twoa2b2
    ce = [ -2.0*twoax/twoa2b2,
           (twoax*twoax + twoby*twoby)/a0 - 1.0,
           2.0*twoax/twoa2b2,
           -twoax*twoax/a0 ]
    roots = quartic_roots(ce)
    candidates = []
    for c in roots:
        if abs(c) > 1.0 + tolerance_angle:
            continue
        c = min(1.0,max(-1.0,c))
        s = sqrt(1.0 - c*c)
        for sn in (s, -s):
            d2 = twoa2b2 + (twoax - 2.0*c*twoa2b2)*c + twoby*sn
            if d2 < -tolerance*abs(twoa2b2):
                ## farthest point branch
                continue
            candidates.append([c, sn])
    return candidates, roots, ce

def ellipse_nearest_point(e,p,onentity=False,strict=False):
    """Find the point on the ellipse closest to ``p``, returning the pair
    ``(point, distance)``.

    If ``onentity`` is true and the closest point falls outside the
    arc, the nearer arc end point is returned instead.

    Should the numerical search fail to produce a minimum, an error is
    logged and ``p`` itself is returned with distance ``maxdouble``;
    with ``strict`` true a ``NearestPointError`` is raised instead.

    """
    if not ispoint(p):
        return False, maxdouble
    a = ellipse_majorradius(e)
    r = e[3]['ratio']
    b = a*r
    if a < tolerance:
        ## a zero-size ellipse is its center
        return ellipse_center(e), dist(e[1],p)
    local = _tolocal(e,p)
    x = local[0]
    y = local[1]
    a0 = (2.0*(a*a - b*b))**2
    nearcircle = a0 <= tolerance or abs(r - 1.0) <= tolerance
    nearcenter = squared(local) <= tolerance2

    if not nearcircle and not nearcenter:
        candidates, roots, ce = _quarticcandidates(a,b,x,y)
        if not roots:
            logger.error('no root from quartic for a=%g b=%g x=%g y=%g, '
                         'coefficients %s', a, b, x, y, ce)
            if strict:
                raise NearestPointError('quartic has no real root for '
                                        'point {}'.format(vstr(p)))
            return point(p), maxdouble
    elif nearcenter and not nearcircle:
        ## every direction is stationary at the center; the minor axis
        ## vertices are the closest points
        candidates = [ [0.0, 1.0 if y >= 0 else -1.0] ]
    else:
        theta = closest_angle(a,b,local)
        ## the search may have found the farthest point
        candidates = [ [cos(theta), sin(theta)],
                       [cos(theta+pi), sin(theta+pi)] ]

    best = False
    dd = maxdouble*maxdouble
    for c, s in candidates:
        q = [ a*c, b*s, 0, 1.0 ]
        d = squared(sub(q,local))
        if d < dd:
            best = q
            dd = d
    if not best:
        logger.error('no minimum found for a=%g b=%g x=%g y=%g', a, b, x, y)
        if strict:
            raise NearestPointError('no closest point for {}'.format(vstr(p)))
        return point(p), maxdouble

    if not nearcircle and not nearcenter and b > tolerance:
        ## a double root of the quartic (queries on an axis) comes back
        ## from the solver with only half the digits; the angle is a
        ## simple root of the derivative and Newton restores them
        theta = closest_angle(a,b,local,maxiter=4,
                              seed=atan2(best[1]/b,best[0]/a))
        q = [ a*cos(theta), b*sin(theta), 0, 1.0 ]
        d = squared(sub(q,local))
        if d <= dd:
            best = q
            dd = d

    ret = _toglobal(e,best)
    if onentity:
        a1, a2 = ellipse_angles(e)
        if not isAngleBetween(ellipse_angle(e,ret),a1,a2,e[3]['reversed']):
            return ellipse_nearest_endpoint(e,p)
    return ret, sqrt(dd)

def ellipse_nearest_center(e,p):
    """the center or a focus, whichever is closest to ``p``"""
    best = ellipse_center(e)
    d = dist(best,p)
    for f in ellipse_foci(e):
        df = dist(f,p)
        if df < d:
            best = f
            d = df
    return best, d

def _lengthfunctor(e,target):
    ## f, f' and f'' of the arc length from angle1, less the target,
    ## for a normalized ellipse
    a = ellipse_majorradius(e)
    r = e[3]['ratio']
    k2 = 1.0 - r*r
    x1 = e[3]['angle1']

    def f(t):
        c = cos(t)
        s = sin(t)
        delta = sqrt(max(0.0,1.0 - k2*c*c))
        if t - x1 < tolerance_angle:
            length = 0.0
        else:
            length = ellipse_arclength(e,x1,t)
        d2 = a*k2*s*c/delta if delta > tolerance else 0.0
        return length - target, a*delta, d2
    return f

def ellipse_point_at_length(e,distance):
    """the point at arc length ``distance`` from the start point,
    following the traversal direction.  Returns ``False`` for a whole
    ellipse or a distance outside the arc."""
    if not ellipse_isarc(e):
        return False
    n = ellipse_normalized(e)
    x1, x2 = ellipse_angles(n)
    if x2 < x1 + tolerance_angle:
        x2 += pi2
    total = ellipse_arclength(n,x1,x2)
    if distance < -tolerance or distance > total + tolerance:
        return False
    distance = min(total,max(0.0,distance))
    if e[3]['reversed']:
        ## the normalized arc starts at the end point of e
        distance = total - distance
    if distance < tolerance:
        return ellipse_point(n,x1)
    if distance > total - tolerance:
        return ellipse_point(n,x2)
    theta = halley_iterate(_lengthfunctor(n,distance),
                           x1 + pi, x1, x1 + pi2 - tolerance_angle)
    return ellipse_point(n,theta)

def ellipse_nearest_dist(e,distance,p):
    """the point at arc length ``distance`` from whichever end point of
    the arc is closer to ``p``, and its distance to ``p``"""
    if not ellipse_isarc(e):
        return False, maxdouble
    n = ellipse_normalized(e)
    a = ellipse_majorradius(n)
    if a < tolerance:
        return False, maxdouble
    if n[3]['ratio'] < tolerance:
        ## a flat ellipse is a line between the major vertices
        l = line(sub(n[1],n[2]),add(n[1],n[2]))
        return lineNearestDist(l,distance,p)
    x1, x2 = ellipse_angles(n)
    if x2 < x1 + tolerance_angle:
        x2 += pi2
    total = ellipse_arclength(n,x1,x2)
    if distance > total + tolerance:
        return False, maxdouble
    vs = ellipse_startpoint(e)
    ve = ellipse_endpoint(e)
    fromstart = squared(sub(p,vs)) <= squared(sub(p,ve))
    if distance > total - tolerance:
        q = ve if fromstart else vs
        return q, dist(q,p)
    target = distance if fromstart else total - distance
    q = ellipse_point_at_length(e,max(0.0,target))
    return q, dist(q,p)

def ellipse_nearest_middle(e,p,middlepoints=1):
    """Of the ``middlepoints`` points dividing the arc into equal polar
    angle segments, return the one closest to ``p`` and its distance.
    A whole ellipse has no middle points."""
    if not ellipse_isarc(e):
        return False, maxdouble
    ra = ellipse_majorradius(e)
    rb = ellipse_minorradius(e)
    if ra < tolerance or rb < tolerance:
        c = ellipse_center(e)
        return c, dist(c,p)
    amin = angleToXY(e[1],ellipse_startpoint(e))
    amax = angleToXY(e[1],ellipse_endpoint(e))
    if e[3]['reversed']:
        amin, amax = amax, amin
    da = fmod(amax - amin + pi2, pi2)
    if da < tolerance:
        da = pi2
    vp, d = ellipse_nearest_point(e,p,onentity=True)
    a = angleToXY(e[1],vp)
    counts = middlepoints + 1
    i = int(fmod(a - amin + pi2, pi2)/da*counts + 0.5)
    ## end points are not middle points
    i = min(max(i,1),counts - 1)
    a = amin + da*i/counts - ellipse_rotation(e)
    ## the polar ray at angle a meets the unrotated ellipse at radius rho
    rho = 1.0/sqrt((cos(a)/ra)**2 + (sin(a)/rb)**2)
    q = _toglobal(e,polar(a,rho))
    return q, dist(q,p)

def ellipse_middle_point(e):
    """ the middle point of an arc, ``False`` for a whole ellipse """
    return ellipse_nearest_middle(e,e[1])[0]

def ellipse_tangent_points(e,p):
    """Points on the ellipse whose tangent lines pass through ``p``.
    Two points for an outside point, one for a point on the ellipse and
    none for an inside point."""
    a = ellipse_majorradius(e)
    r = e[3]['ratio']
    if a < tolerance or r < tolerance:
        return []
    local = _tolocal(e,p)
    local[1] /= r
    sol = circleTangentPointsXY(circle(point(0,0),a),local)
    return [ _toglobal(e,scaleXY(q,[1.0,r])) for q in sol ]

def ellipse_tangent_direction(e,p):
    """tangent direction vector at point ``p`` on the ellipse, following
    the traversal direction, or ``False`` for a degenerate ellipse"""
    a = ellipse_majorradius(e)
    r = e[3]['ratio']
    if a < tolerance or r < tolerance:
        return False
    local = _tolocal(e,p)
    local[1] /= r
    d = circleTangentDirectionXY(circle(point(0,0),a),local)
    d = rotateByXY([d[0], d[1]*r, 0, 1.0],_axisdir(e))
    if e[3]['reversed']:
        return [ -d[0], -d[1], 0, 1.0 ]
    return d

def ellipse_nearest_orthtan(e,p,normal,onentity=False):
    """The point on the ellipse whose tangent is orthogonal to line
    ``normal``.  Of the two such points the one on the side of ``p`` is
    returned; with ``onentity`` only points on the arc count.  Returns
    ``False`` if there is none."""
    if not ispoint(p):
        return False
    direction = sub(normal[1],normal[0])
    if squared(direction) < tolerance15:
        ## undefined direction
        return False
    u = _axisdir(e)
    r = e[3]['ratio']
    direction = rotateByXY(direction,[u[0],-u[1]])
    angle = angleXY([direction[0], r*direction[1]])
    ra = ellipse_majorradius(e)
    vp = [ ra*cos(angle), r*ra*sin(angle), 0, 1.0 ]
    a1, a2 = ellipse_angles(e)
    sol = []
    for i in range(2):
        if not onentity or isAngleBetween(angle,a1,a2,e[3]['reversed']):
            sol.append(vp if i == 0 else scale3(vp,-1.0))
        angle = correctAngle(angle + pi)
    if not sol:
        return False
    sol = [ rotateByXY(v,u) for v in sol ]
    q = sol[0]
    if len(sol) == 2 and dot2(sol[1],sub(p,e[1])) > 0.0:
        q = sol[1]
    return add(e[1],q)

def ellipse_dual_tangent_point(e,uv):
    """Tangent point of the line ``u x + v y + 1 = 0``, given by its dual
    coordinates ``uv = [u, v]``.  Of the two points with the line's
    slope the one closer to satisfying the equation is returned."""
    u = _axisdir(e)
    local = rotateByXY([uv[0], uv[1], 0, 1.0],[u[0],-u[1]])
    r = e[3]['ratio']
    t = atan2(r*local[1],local[0])
    ra = ellipse_majorradius(e)
    vp = rotateByXY([ ra*cos(t), ra*r*sin(t), 0, 1.0 ],u)
    vp0 = add(e[1],vp)
    vp1 = sub(e[1],vp)

    def residual(q):
        return abs(dot2(uv,q) + 1.0)

    return vp0 if residual(vp0) < residual(vp1) else vp1
