## affine transforms, trimming and reference point editing of ellipses

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

"""editing operations on ``ellipcad.ellipse`` values

Transforms (move, rotate, scale, mirror, shear) keep the canonical
representation: arcs keep their geometric end points, and the end
angles are re-derived from the transformed end points.  Trimming and
reference point dragging return the edited ellipse.  Like the rest of
the functional layer, nothing here modifies its arguments.

"""

import logging
from copy import deepcopy
from enum import Enum
from math import *

from ellipcad.geom import *
from ellipcad.ellipse import *
from ellipcad.construct import ellipse_from_quadratic

logger = logging.getLogger(__name__)


class Ending(Enum):
    """which end of an arc a trim operation moves"""
    START = 0
    END = 1
    NONE = 2


## transforms
## ----------

def ellipse_move(e,offset):
    """ translate by ``offset`` """
    return ellipse_replace(e,center=add(e[1],[offset[0],offset[1],0,1.0]))

def ellipse_rotate(e,ang,cent=False):
    """rotate by ``ang`` radians about ``cent`` (or the origin)"""
    return ellipse_rotate_by(e,[cos(ang),sin(ang)],cent)

def ellipse_rotate_by(e,dirv,cent=False):
    """rotate by the angle whose unit direction vector is ``dirv``"""
    return ellipse_replace(e,center=rotateByXY(e[1],dirv,cent),
                           majorp=rotateByXY(e[2],dirv))

def ellipse_revert(e):
    """swap the arc end points, reversing the traversal direction"""
    if not ellipse_isarc(e):
        return deepcopy(e)
    a1, a2 = ellipse_angles(e)
    return ellipse_replace(e,angle1=a2,angle2=a1,
                           reversed=not ellipse_isreversed(e))

def ellipse_correct_angles(e):
    """remove whole extra turns between the end angles so that the
    angular length never exceeds 2*pi"""
    a1, a2 = ellipse_angles(e)
    rev = ellipse_isreversed(e)
    if rev:
        a1 = a2 + fmod(a1 - a2, pi2)
    else:
        a2 = a1 + fmod(a2 - a1, pi2)
    if abs(a1 - a2) < tolerance_angle and abs(a1) > tolerance_angle:
        ## a full loop arc, not a whole ellipse
        if rev:
            a1 += pi2
        else:
            a2 += pi2
    return ellipse_replace(e,angle1=a1,angle2=a2)

def ellipse_move_startpoint(e,p):
    """ move the start point of the arc to the projection of ``p`` """
    n = ellipse_replace(e,angle1=ellipse_angle(e,p))
    return ellipse_correct_angles(n)

def ellipse_move_endpoint(e,p):
    """ move the end point of the arc to the projection of ``p`` """
    n = ellipse_replace(e,angle2=ellipse_angle(e,p))
    return ellipse_correct_angles(n)

def _reattach(n,vs,ve):
    ## re-derive the end angles of an arc from its transformed end points
    n = ellipse_replace(n,angle1=ellipse_angle(n,vs),
                        angle2=ellipse_angle(n,ve))
    return ellipse_correct_angles(n)

## Scaling by (kx, ky) is not a similarity, so the principal axes of the
## result are found as the extrema of the squared radius
##   |S R (a cos t, b sin t)|^2 = A + (cA - cB) cos 2t + cC sin 2t
## with A = cA + cB, maximal at 2t = atan2(cC, cA - cB) with value
## A + hypot(cA - cB, cC) and minimal with the opposite sign.
def ellipse_scale(e,factor,cent=False):
    """scale by ``factor`` about ``cent`` (or the origin).  ``factor``
    is a scalar or a point holding ``[kx, ky]``.  A factor with a
    single negative component reflects the ellipse and flips the
    traversal direction."""
    if isgoodnum(factor):
        kx = ky = factor
    else:
        kx = factor[0]
        ky = factor[1]
    vs = ve = False
    if ellipse_isarc(e):
        vs = scaleXY(ellipse_startpoint(e),[kx,ky],cent)
        ve = scaleXY(ellipse_endpoint(e),[kx,ky],cent)
    center = scaleXY(e[1],[kx,ky],cent)
    a = ellipse_majorradius(e)
    if a < tolerance:
        ## too small to have axes
        return ellipse_replace(e,center=center)
    ct = e[2][0]/a
    st = e[2][1]/a
    ct2 = ct*ct
    st2 = 1.0 - ct2
    kx2 = kx*kx
    ky2 = ky*ky
    b = e[3]['ratio']*a
    ca = 0.5*a*a*(kx2*ct2 + ky2*st2)
    cb = 0.5*b*b*(kx2*st2 + ky2*ct2)
    cc = a*b*ct*st*(ky2 - kx2)
    rev = e[3]['reversed']
    if kx < 0:
        rev = not rev
    if ky < 0:
        rev = not rev
    t = 0.5*atan2(cc,ca - cb)
    vp = rotateByXY([ a*cos(t), b*sin(t), 0, 1.0 ],[ct,st])
    majorp = scaleXY(vp,[kx,ky])
    s = ca + cb
    h = hypot(ca - cb,cc)
    ratio = sqrt(max(0.0,(s - h)/(s + h))) if s + h > tolerance2 else 0.0
    n = ellipse_replace(e,center=center,majorp=majorp,ratio=ratio,
                        reversed=rev)
    if vs:
        n = _reattach(n,vs,ve)
    return n

def ellipse_mirror(e,axis1,axis2):
    """mirror across the line through ``axis1`` and ``axis2``; the
    traversal direction always flips"""
    center = mirrorXY(e[1],axis1,axis2)
    majorpoint = mirrorXY(ellipse_majorpoint(e),axis1,axis2)
    n = ellipse_replace(e,center=center,majorp=sub(majorpoint,center),
                        reversed=not ellipse_isreversed(e))
    if ellipse_isarc(e):
        n = _reattach(n,mirrorXY(ellipse_startpoint(e),axis1,axis2),
                      mirrorXY(ellipse_endpoint(e),axis1,axis2))
    return n

def ellipse_shear(e,k):
    """shear horizontally, ``x' = x + k*y``, through the ellipse's
    quadratic form"""
    n = ellipse_from_quadratic(ellipse_quadratic(e).shear(k))
    if n is False:
        logger.debug('ellipse_shear(): degenerate ellipse left unchanged')
        return deepcopy(e)
    n = ellipse_replace(n,reversed=ellipse_isreversed(e))
    if ellipse_isarc(e):
        n = ellipse_move_startpoint(n,shearXY(ellipse_startpoint(e),k))
        n = ellipse_move_endpoint(n,shearXY(ellipse_endpoint(e),k))
    return n


## trimming
## --------

def ellipse_trim_point(e,trimcoord):
    """the end of the arc nearer to ``trimcoord`` in parametric angle,
    i.e. the end a trim at that position moves"""
    am = ellipse_angle(e,trimcoord)
    a1, a2 = ellipse_angles(e)
    rev = ellipse_isreversed(e)
    if angleDifference(am,a1,rev) > angleDifference(a2,am,rev):
        return Ending.START
    return Ending.END

def _angdist(a,b):
    return abs(remainder(a - b,pi2))

def ellipse_prepare_trim(e,trimcoord,candidates):
    """Choose among the intersection points ``candidates`` the one a trim
    at ``trimcoord`` should cut at, and shorten the arc accordingly.

    Returns ``[n, p]``: the trimmed ellipse and the chosen point.  The
    result always keeps the part of the arc containing ``trimcoord``.
    With no valid candidate the point is ``False``; a single candidate
    is returned as is, leaving the ellipse unchanged.

    """
    sols = [ c for c in candidates if ispoint(c) ]
    if not sols:
        return [ deepcopy(e), False ]
    if len(sols) == 1:
        return [ deepcopy(e), point(sols[0]) ]
    n = len(sols)
    am = ellipse_angle(e,trimcoord)
    rev = ellipse_isreversed(e)
    angle1, angle2 = ellipse_angles(e)

    ## the candidate closest to the click, by parametric angle
    ias = [ ellipse_angle(e,v) for v in sols ]
    ia = ias[0]
    is1 = sols[0]
    for a, v in zip(ias[1:],sols[1:]):
        if _angdist(a,am) < _angdist(ia,am):
            ia = a
            is1 = v

    ## its neighbour on the other side of the click
    ias = sorted(ias)
    ia2 = ia
    for ii in range(n):
        if not isSameDirection(ia,ias[ii],tolerance):
            continue
        prev = ias[(ii + n - 1) % n]
        if isAngleBetween(am,prev,ia,False):
            ia2 = prev
        else:
            ia2 = ias[(ii + 1) % n]
        break
    is2 = is1
    for v in sols:
        if isSameDirection(ia2,ellipse_angle(e,v),tolerance):
            is2 = v
            break

    if isSameDirection(angle1,angle2,tolerance_angle) or \
       isSameDirection(ia2,ia,tolerance):
        ## whole ellipse: the candidates bracketing the click become
        ## the new end points
        if not isAngleBetween(am,ia,ia2,rev):
            ia, ia2 = ia2, ia
            is1, is2 = is2, is1
        angle1 = ia
        angle2 = ia2
        if _angdist(angle2,am) < _angdist(angle1,am):
            is1, is2 = is2, is1
    else:
        dia = _angdist(ia,am)
        dia2 = _angdist(ia2,am)
        aimin = min(dia,dia2)
        da1 = _angdist(angle1,am)
        da2 = _angdist(angle2,am)
        if min(da1,da2) < aimin:
            ## trimming one end of the arc
            irev = isAngleBetween(am,ia2,ia,rev)
            if isAngleBetween(ia,angle1,angle2,rev) and \
               isAngleBetween(ia2,angle1,angle2,rev):
                if irev:
                    angle1, angle2 = ia2, ia
                else:
                    angle1, angle2 = ia, ia2
                da1 = _angdist(angle1,am)
                da2 = _angdist(angle2,am)
            if (da1 < da2 and isAngleBetween(ia2,ia,angle1,rev)) or \
               (da1 > da2 and isAngleBetween(ia2,angle2,ia,rev)):
                is1, is2 = is2, is1
        else:
            ## the closer intersection becomes the new end point
            if dia > dia2:
                is1, is2 = is2, is1
                ia, ia2 = ia2, ia
            if isAngleBetween(ia,angle1,angle2,rev):
                if abs(ia - angle1) > tolerance_angle and \
                   isAngleBetween(am,angle1,ia,rev):
                    angle2 = ia
                else:
                    angle1 = ia
    return [ ellipse_replace(e,angle1=angle1,angle2=angle2), point(is1) ]


## reference points
## ----------------

def _refhit(ref,p):
    return squared(sub(ref,p)) < tolerance_angle

def _renormalize(n):
    if n[3]['ratio'] > 1.0:
        return ellipse_switch_axes(n)
    return n

def ellipse_move_ref(e,ref,offset):
    """Drag the reference point at ``ref`` by ``offset``.  The reference
    points are those of ``ellipse_refpoints()``: an arc end point, the
    center, a focus, the major point or the minor point.  Anything else
    leaves the ellipse unchanged."""
    if ellipse_isarc(e):
        vs = ellipse_startpoint(e)
        ve = ellipse_endpoint(e)
        if _refhit(ref,vs):
            return ellipse_move_startpoint(e,add(vs,offset))
        if _refhit(ref,ve):
            return ellipse_move_endpoint(e,add(ve,offset))
    if _refhit(ref,e[1]):
        return ellipse_move(e,offset)

    n = _renormalize(e)
    foci = ellipse_foci(n)
    for i in range(2):
        if not _refhit(ref,foci[i]):
            continue
        ## the other focus stays put
        focusnew = add(foci[i],offset)
        center = add(n[1],scale3(offset,0.5))
        if dot2(n[2],sub(foci[i],n[1])) >= 0.0:
            majorp = sub(focusnew,center)
        else:
            majorp = sub(center,focusnew)
        d = ellipse_majorradius(n)
        c = 0.5*dist(focusnew,foci[1-i])
        k = sqrt(squared(majorp))
        if k < tolerance2 or d < tolerance or c >= d - tolerance:
            return deepcopy(e)
        n = ellipse_replace(n,center=center,majorp=scale3(majorp,d/k),
                            ratio=sqrt(d*d - c*c)/d)
        return _renormalize(ellipse_correct_angles(n))

    if _refhit(ref,ellipse_majorpoint(n)):
        majorp = add(n[2],offset)
        r = sqrt(squared(majorp))
        if r < tolerance:
            return deepcopy(e)
        ratio = ellipse_minorradius(n)/r
        return _renormalize(ellipse_replace(n,majorp=majorp,ratio=ratio))
    if _refhit(ref,ellipse_minorpoint(n)):
        minorp = add(ellipse_minorpoint(n),offset)
        r2 = squared(n[2])
        if r2 < tolerance2:
            return deepcopy(e)
        projected = add(n[1],scale3(n[2],dot2(n[2],sub(minorp,n[1]))/r2))
        r = dist(minorp,projected)
        if r < tolerance:
            return deepcopy(e)
        return _renormalize(ellipse_replace(n,ratio=r/sqrt(r2)))
    return deepcopy(e)
