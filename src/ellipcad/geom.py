## foundational computational geometry helpers for ellipcad
## Copyright (c) 2020 Richard DeVaul
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

"""foundational computational geometry helpers for **ellipcad**

====================
OVERVIEW
====================

The ellipcad.geom module provides the collaborators the ellipse kernel
is built on: tolerance constants, scalar and vector operations, angle
arithmetic, and the line and circle primitives used by the nearest
point, tangent and reconstruction algorithms.

constants
=========

ellipcad.geom provides the tolerance tiers used throughout the
package.  Every comparison against zero or against a convergence
threshold uses the tier matching the quantity being compared:

- ``tolerance`` (1E-10) -- distances
- ``tolerance2`` (1E-20) -- squared distances
- ``tolerance15`` (1.5E-15) -- coefficients of linear systems
- ``tolerance_angle`` (1E-8) -- angles in radians

``maxdouble`` is the distance reported when a query has no answer, and
``pi2`` is 2*pi.  Redefine these at your peril.

vectors and points
==================

vectors are defined as a list of four numbers, i.e. ``[x,y,z,w]``.
The kernel is planar, so only the x and y components take part in the
XY operations below; z is carried along untouched and w is 1 for
points.  Functions that have no answer return the boolean ``False``
in place of a point.

lines
=====

Lines are Python3 lists of two points, e.g. ``line(point(0,0),
point(1,1))``, parameterized over ``0 <= u <= 1``.

circles
=======

Circles use the yapCAD arc layout ``[ center, [radius, 0, 360, -1] ]``.

angles
======

All angles are in radians.  ``correctAngle()`` maps an angle to
``[0, 2*pi)``, and ``isAngleBetween()`` is the single arbiter of
whether a parametric angle falls on an arc.

"""

from math import *
from copy import deepcopy

## constants
tolerance = 1.0e-10
tolerance2 = 1.0e-20
tolerance15 = 1.5e-15
tolerance_angle = 1.0e-8
maxdouble = 1.0e10
pi2 = 2.0*pi

## operations on scalars
## -----------------------

## utility function to determine if argument is a "real" python
## number, since booleans are considered ints (True=1 and False=0 for
## integer arithmetic) but 1 and 0 are not considered boolean

def isgoodnum(n):
    """ determine if an argument is actually a scalar number, and not boolean
    """
    return (not isinstance(n,bool)) and isinstance(n,(int,float))

## utilty function to determine if scalars a and b are the same to
## within tolerance
def close(a,b,tol=tolerance):
    """ are two scalars the same within tolerance
    """
    return abs(a-b) < tol


## operations on vectors
## ------------------------

def vect(a=False,b=False,c=False,d=False):
    """Convenience function for making a homogeneous coordinates 4 vector
from practically anything
    """
    r = [0,0,0,1]
    if isgoodnum(a):
        r[0]=a
        if isgoodnum(b):
            r[1]=b
            if isgoodnum(c):
                r[2]=c
                if isgoodnum(d):
                    r[3]=d
    elif isinstance(a,(tuple,list)):
        for i in range(min(4,len(a))):
            x=a[i]
            if isgoodnum(x):
                r[i]=x
    return r

## check to see if argument is a proper vector for our purposes
def isvect(x):
    """
    check to see if argument is a proper vector for our purposes
    """
    return isinstance(x,list) and len(x) == 4 and isgoodnum(x[0]) and isgoodnum(x[1]) and isgoodnum(x[2]) and isgoodnum(x[3])

def point(x=False,y=False,z=False,w=False):
    """Point creation from point, tuple or scalars"""
    if ispoint(x):
        return deepcopy(x)
    if isinstance(x,tuple) and 2 <= len(x) <= 4:
        return point(vect(x))
    r = [0,0,0,1]
    if isgoodnum(x):
        r[0]=x
        if isgoodnum(y):
            r[1]=y
            if isgoodnum(z):
                r[2]=z
                if isgoodnum(w):
                    r[3]=w
    if r[3] > 0:
        return r
    else:
        raise ValueError('bad w argument to point()')

def ispoint(x):
    """ is it a point?"""
    if isvect(x) and x[3] > 0.0:
        return True
    return False

## determine if two vectors are the same, to within tolerance
def vclose(a,b,tol=tolerance):
    return dist(a,b) < tol

def vstr(a):
    """ compact string representation of a point, dropping default z and w"""
    if a is False:
        return 'False'
    if a[3] == 1:
        if a[2] == 0:
            return '[{}, {}]'.format(a[0],a[1])
        return '[{}, {}, {}]'.format(a[0],a[1],a[2])
    return '[{}, {}, {}, {}]'.format(a[0],a[1],a[2],a[3])

## R^3 -> R^3 functions: ignore w component
## ------------------------------------------------
def add(a,b):
    """ 3 vector, `a + b`"""
    return [a[0]+b[0],a[1]+b[1],a[2]+b[2],1.0]

def sub(a,b):
    """ 3 vector, `a - b`"""
    return [a[0]-b[0],a[1]-b[1],a[2]-b[2],1.0]

def scale3(a,c):
    """ 3 vector, vector ''a'' times scalar ``c``, `a * c`"""
    return [a[0]*c,a[1]*c,a[2]*c,1.0]

## NOTE: this function assumes that a lies in the x,y plane.  If this
## is not the case, the results are bogus.
def orthoXY(a):
    """compute an orthogonal vector to vector ``a`` which lies in an XY
plane, rotated 90 degrees counter-clockwise"""

    return [ -a[1], a[0], a[2], 1.0 ]

## R^3 -> R functions -- ignore w component
## ----------------------------------------
def dot(a,b):
    """ 3 vector ``a`` dot ``b`` """
    return a[0]*b[0]+a[1]*b[1]+a[2]*b[2]

def mag(a):
    """ compute the magnitude of 3 vector ``a``"""
    return sqrt(a[0]*a[0]+a[1]*a[1]+a[2]*a[2])

def squared(a):
    """ squared magnitude of the XY components of ``a``"""
    return a[0]*a[0]+a[1]*a[1]

def dist(a,b):  # compute distance between two points a & b
    """ compute the euclidean distance between two 3 vector points ``a`` and ``b``"""
    return mag(sub(a,b))

def crossXY(a,b):
    """ z component of the cross product of the XY parts of ``a`` and ``b``"""
    return a[0]*b[1] - a[1]*b[0]

## XY plane vector operations.  These are the rotate/scale/mirror/shear
## operations the ellipse kernel needs; all of them return new points.
## ------------------------------------------------------------------

## unit vector at angle ``ang``, scaled by ``r``
def polar(ang,r=1.0):
    """ the point ``r*(cos(ang), sin(ang))``"""
    return [r*cos(ang),r*sin(ang),0,1.0]

## polar angle of a vector, in [0, 2*pi)
def angleXY(a):
    """ polar angle of the XY components of ``a`` in `[0, 2*pi)`"""
    return correctAngle(atan2(a[1],a[0]))

def angleToXY(a,b):
    """ polar angle of the vector from ``a`` to ``b``"""
    return angleXY(sub(b,a))

## rotate by a precomputed direction, i.e. the unit vector
## [cos(ang), sin(ang)], about the optional center
def rotateByXY(a,dirv,cent=False):
    """rotate ``a`` about ``cent`` (or the origin) by the angle whose
    unit direction vector is ``dirv``"""
    x = a[0]
    y = a[1]
    if cent:
        x -= cent[0]
        y -= cent[1]
    r = [ x*dirv[0] - y*dirv[1],
          x*dirv[1] + y*dirv[0],
          a[2], 1.0 ]
    if cent:
        r[0] += cent[0]
        r[1] += cent[1]
    return r

def rotateXY(a,ang,cent=False):
    """ rotate ``a`` by ``ang`` radians about ``cent`` (or the origin)"""
    return rotateByXY(a,[cos(ang),sin(ang)],cent)

## scale by a uniform factor or by a per-axis factor point, about the
## optional center
def scaleXY(a,factor,cent=False):
    """scale ``a`` by ``factor`` about ``cent`` (or the origin).
    ``factor`` is either a scalar or a point holding ``[kx, ky]``"""
    if isgoodnum(factor):
        kx = ky = factor
    else:
        kx = factor[0]
        ky = factor[1]
    if cent:
        return [ cent[0] + (a[0]-cent[0])*kx,
                 cent[1] + (a[1]-cent[1])*ky,
                 a[2], 1.0 ]
    return [ a[0]*kx, a[1]*ky, a[2], 1.0 ]

## mirror a point across the axis defined by two points
def mirrorXY(a,axis1,axis2):
    """ mirror point ``a`` across the line through ``axis1`` and ``axis2``"""
    d = sub(axis2,axis1)
    dd = squared(d)
    if dd < tolerance2:
        return point(a)
    t = dot2(sub(a,axis1),d)/dd
    foot = add(axis1,scale3(d,t))
    return [ 2.0*foot[0] - a[0], 2.0*foot[1] - a[1], a[2], 1.0 ]

def dot2(a,b):
    """ dot product of the XY components of ``a`` and ``b``"""
    return a[0]*b[0]+a[1]*b[1]

## horizontal shear, x' = x + k*y
def shearXY(a,k):
    """ shear ``a`` horizontally, `x' = x + k*y`"""
    return [ a[0] + k*a[1], a[1], a[2], 1.0 ]

def normalizeXY(a):
    """ unit vector in the direction of ``a``, or ``False`` if ``a`` is
    too short to have a direction"""
    m = sqrt(squared(a))
    if m < tolerance:
        return False
    return [ a[0]/m, a[1]/m, 0, 1.0 ]

## operations on angles
## ---------------------

## map an angle to [0, 2*pi)
def correctAngle(a):
    """ map angle ``a`` to the interval `[0, 2*pi)`"""
    return fmod(pi + remainder(a - pi, pi2), pi2)

## counter-clockwise angular distance from a1 to a2 (or clockwise if
## reversed) in [0, 2*pi)
def angleDifference(a1,a2,reversed=False):
    """ angular distance from ``a1`` to ``a2`` in the traversal direction"""
    if reversed:
        a1,a2 = a2,a1
    return correctAngle(a2 - a1)

## unsigned smallest angular distance, in [0, pi]
def angleDifferenceU(a1,a2):
    """ unsigned angular distance between ``a1`` and ``a2``, in `[0, pi]`"""
    delta = correctAngle(a1 - a2)
    if delta > pi:
        delta = pi2 - delta
    return delta

def isSameDirection(dir1,dir2,tol=tolerance_angle):
    """ do two angles point in the same direction, modulo 2*pi"""
    return angleDifferenceU(dir1,dir2) < tol

## is angle a within the interval [a1, a2] traversed counter-clockwise
## (or clockwise if reversed)?  An interval with a1 == a2 covers the
## whole circle.
def isAngleBetween(a,a1,a2,reversed=False):
    """determine whether angle ``a`` lies on the arc from ``a1`` to
    ``a2``, honouring the traversal direction.  Coincident limits are
    interpreted as a full loop."""
    if reversed:
        a1,a2 = a2,a1
    if angleDifferenceU(a2,a1) < tolerance_angle:
        return True
    tol = 0.5*tolerance_angle
    diff0 = correctAngle(a2 - a1) + tol
    return diff0 >= correctAngle(a - a1) or diff0 >= correctAngle(a2 - a)

## bounding boxes
## --------------

## a bounding box is [point(xmin,ymin), point(xmax,ymax)], or False if
## empty.  bboxmerge returns a new box grown to contain p
def bboxmerge(bb,p):
    """ grow bounding box ``bb`` (or ``False``) to contain point ``p``"""
    if not bb:
        return [ point(p[0],p[1]), point(p[0],p[1]) ]
    return [ point(min(bb[0][0],p[0]),min(bb[0][1],p[1])),
             point(max(bb[1][0],p[0]),max(bb[1][1],p[1])) ]

# does point p lie inside bounding box bbox, to within tol
def isinsidebbox(bbox,p,tol=0.0):
    """ does point ``p`` lie inside XY bounding box ``bbox``?"""
    return p[0] >= bbox[0][0]-tol and p[0] <= bbox[1][0]+tol and\
        p[1] >= bbox[0][1]-tol and p[1] <= bbox[1][1]+tol

## operations on lines
## --------------------

## lines are defined as lists of two points, i.e.  [point(x1,
## y1),point(x2, y2)].

## make a line, copying points, value-safe
def line(p1,p2=False):
    """Value-safe line creation"""
    if isline(p1):
        return deepcopy(p1)
    elif ispoint(p1) and ispoint(p2):
        return [ point(p1), point(p2) ]
    else:
        raise ValueError('bad values passed to line()')

## is it a line?
def isline(l):
    """ is it a line? """
    return isinstance(l,list) and len(l) == 2 \
        and ispoint(l[0]) and ispoint(l[1])

## return the length of a line
def linelength(l):
    """ return the length of a line"""
    return dist(l[0],l[1])

## return the center of a line
def linecenter(l):
    """ return the center of a line"""
    return scale3(add(l[0],l[1]),0.5)

## direction angle of a line, from first to second point
def lineangle(l):
    """ polar angle of the line direction"""
    return angleToXY(l[0],l[1])

## Sample a parameterized line.  Values 0 <= u <= 1.0 will fall within
## the line segment, values u < 0 and u > 1 will fall outside the line
## segment.

def sampleline(l,u):
    """Sample a parameterized line ``l``.  Values `0 <= u <= 1.0` will
    fall within the line segment, values `u < 0` and `u > 1` will fall
    outside the line segment.

    """

    p1=l[0]
    p2=l[1]
    p = 1.0-u
    return add(scale3(p1,p),scale3(p2,u))

## Compute the intersection of two lines that lie in the same x,y plane
def lineLineIntersectXY(l1,l2,inside=True,params=False):
    """Compute the intersection of two lines that lie in the same XY
    plane.  If ``inside`` is true, the intersection must fall on both
    segments, otherwise the lines are treated as infinite.  Return the
    intersection point, the parameter pair if ``params`` is true, or
    ``False`` for parallel (or degenerate) lines.
    """

    x1=l1[0][0]
    y1=l1[0][1]

    x2=l1[1][0]
    y2=l1[1][1]

    x3=l2[0][0]
    y3=l2[0][1]

    x4=l2[1][0]
    y4=l2[1][1]

    ## do lines intersect anywhere?  compare the cross product with the
    ## product of the line lengths, so the test is scale-free
    len1 = hypot(x2-x1,y2-y1)
    len2 = hypot(x4-x3,y4-y3)
    if len1 < tolerance or len2 < tolerance:
        return False
    denom=(x1-x2)*(y3-y4)-(y1-y2)*(x3-x4)
    if abs(denom) < tolerance_angle*len1*len2:
        return False

    ## the lines do intersect, so let's see if they intersect
    ## inside both line segments
    t = ((x1-x3)*(y3-y4) - (y1-y3)*(x3-x4))/denom
    u = -1 * ((x1-x2)*(y1-y3) - (y1-y2)*(x1-x3))/denom

    ## return the paramater space intersection
    if params:
        return [t,u]

    ## do we care about falling inside the line segments? if so,
    ## check that the intersection falls within
    if inside and ( t < -tolerance or t > 1.0+tolerance or
                    u < -tolerance or u > 1.0+tolerance):
        return False

    return [x1 + t*(x2-x1), y1+t*(y2-y1), l1[0][2], 1.0]

## for a point and a line that lie in the x,y plane, compute the
## closest distance point on the line to the point, and return that
## point. If inside is true, then return the closest distance point
## between the point and the line segment.  If distance is true,
## return the distance, not the point.

def linePointXY(l,p,inside=True,distance=False):
    """
    For a point ``p`` and a line ``l`` that lie in the same XY plane,
    compute the point on ``l`` that is closest to ``p``, and return
    that point. If ``inside`` is true, then return the closest distance
    point between the point and the line segment. If ``distance`` is
    true, return the closest distance, not the point.  A zero-length
    line yields ``False``.
    """
    a=l[0]
    b=l[1]
    d = sub(b,a)
    dd = squared(d)
    # check for degenerate case of zero-length line
    if dd < tolerance2:
        return False

    u = dot2(sub(p,a),d)/dd
    if inside:
        u = min(1.0,max(0.0,u))
    q = sampleline(l,u)
    if distance:
        return dist(p,q)
    return q

## convenience function for fast distance calc
def linePointXYDist(l,p,inside=True):
    """
    Convenience function wrapping point-line distance calculation using ``linePointXY()``
    """
    return linePointXY(l,p,inside,distance=True)

## point on a line at the given distance from whichever end lies
## closer to coord, measured into the line
def lineNearestDist(l,distance,coord):
    """return ``(p, d)``: the point ``p`` on line ``l`` at ``distance``
    from the endpoint nearer to ``coord``, and the distance ``d`` from
    ``p`` to ``coord``"""
    dv = polar(lineangle(l),distance)
    if squared(sub(coord,l[0])) < squared(sub(coord,l[1])):
        p = add(l[0],dv)
    else:
        p = sub(l[1],dv)
    return p, dist(p,coord)

## operations on circles
## ---------------------

## circles follow the yapCAD arc layout, [center, [r, 0, 360, -1]]
def circle(c,r):
    """ value-safe full circle creation"""
    if not ispoint(c) or not isgoodnum(r) or r < 0:
        raise ValueError('bad values passed to circle()')
    return [ point(c), [ float(r), 0, 360, -1 ] ]

## tangent points on a circle as seen from point p.  Two points for an
## external point, the point itself for a point on the circle, and an
## empty list for a point inside the circle.
def circleTangentPointsXY(c,p):
    """return the points where lines through ``p`` touch circle ``c``"""
    r = c[1][0]
    r2 = r*r
    if r2 < tolerance2:
        return []
    vp = sub(p,c[0])
    c2 = squared(vp)
    if c2 < r2 - 2.0*r*tolerance:
        ## inside point, no tangent points
        return []
    if c2 > r2 + 2.0*r*tolerance:
        ## external point
        vp1 = scale3(orthoXY(vp),r*sqrt(c2-r2)/c2)
        base = add(scale3(vp,r2/c2),c[0])
        if squared(vp1) > tolerance2:
            return [ add(base,vp1), sub(base,vp1) ]
    return [ point(p) ]

## counter-clockwise tangent direction at point p on circle c
def circleTangentDirectionXY(c,p):
    """ tangent direction of circle ``c`` at point ``p`` (not normalized)"""
    return orthoXY(sub(p,c[0]))

## quadrilaterals
## --------------

## form the convex quadrilateral bounded by four lines.  The lines are
## treated as infinite; every cyclic ordering of the lines is tried and
## the first one producing a convex, non-degenerate quadrilateral is
## returned as four counter-clockwise vertices, or False.
def quadrilateralXY(lines):
    """return the four counter-clockwise vertices of the convex
    quadrilateral bounded by ``lines``, or ``False``"""
    if len(lines) != 4:
        return False
    for order in ((0,1,2,3),(0,1,3,2),(0,2,1,3)):
        verts = []
        for i in range(4):
            p = lineLineIntersectXY(lines[order[i]],lines[order[(i+1)%4]],
                                    inside=False)
            if p is False:
                break
            verts.append(p)
        if len(verts) != 4:
            continue
        ## vertex j lies between edge j-1 and edge j; rotate so that
        ## vertex j starts edge j
        verts = verts[-1:] + verts[:-1]
        turns = [ crossXY(sub(verts[(i+1)%4],verts[i]),
                          sub(verts[(i+2)%4],verts[(i+1)%4]))
                  for i in range(4) ]
        if all(t > tolerance2 for t in turns):
            return verts
        if all(t < -tolerance2 for t in turns):
            return list(reversed(verts))
    return False
