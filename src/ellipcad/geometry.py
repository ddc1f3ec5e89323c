## ellipcad ellipse figure class
## ============================

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

"""object-oriented ellipse figure class for **ellipcad**

===============
Overview
===============

The ``ellipcad.geometry`` module provides the ``Ellipse`` class.  It
wraps an ``ellipcad.ellipse`` value and caches its derived properties:
whether it is an arc, its bounding box, its length, and the rotation,
start, end and angular length in degrees.

Why would I use ``ellipcad.geometry`` vs. ``ellipcad.ellipse``
==============================================================

Computing the length of an elliptic arc means evaluating elliptic
integrals, and the bounding box needs several point evaluations.  The
``Ellipse`` class computes these once per change instead of once per
query.

the update contract
===================

Every method that changes the ellipse replaces the wrapped value and
then calls ``_updateInternals()``, which is the single place derived
properties are recomputed.  The bounding box and the length are
computed by independent functions (``ellipse_bbox()`` and
``ellipse_length()``) that never trigger recomputation themselves.
Operations that can update the cached bounding box more cheaply than
recomputing it, such as ``move()``, pass ``skip_bounds=True``.

Construction methods (``create_from_4p()`` and friends) return a
boolean and leave the instance untouched on failure.

"""

from copy import deepcopy
from math import *

from ellipcad.geom import *
from ellipcad.ellipse import *
from ellipcad.ellipse_edit import *
from ellipcad.construct import *
from ellipcad.conic import Quadratic


class Ellipse():
    """ellipse or elliptic arc with cached derived properties"""

    def __repr__(self):
        return f"Ellipse({self.__elem})"

    def __init__(self,center=False,majorp=False,ratio=1.0,angle1=0.0,
                 angle2=0.0,reversed=False):
        self.__update = True
        self.__isarc = False
        self.__bbox = None
        self.__length = 0.0
        self.__angledegrees = 0.0
        self.__startangledegrees = 0.0
        self.__otherangledegrees = 0.0
        self.__angularlength = 0.0
        if isinstance(center,Ellipse):
            self.__elem = center.geom
        elif isellipse(center):
            self.__elem = deepcopy(center)
        else:
            if center is False:
                center = point(0,0)
            if majorp is False:
                majorp = point(1,0)
            self.__elem = ellipse(center,majorp,ratio,angle1,angle2,reversed)
        self._updateInternals()

    # one underscore to make this easily overridable in subclasses
    def _updateInternals(self,skip_bounds=False):
        """recompute every derived property from the wrapped ellipse.
        With ``skip_bounds`` the cached bounding box is kept as is."""
        e = self.__elem
        a1, a2 = ellipse_angles(e)
        self.__isarc = ellipse_isarc(e)
        if not skip_bounds or self.__bbox is None:
            self.__bbox = ellipse_bbox(e)
        self.__angledegrees = degrees(ellipse_rotation(e))
        self.__startangledegrees = degrees(a1)
        self.__otherangledegrees = degrees(a2)
        self.__angularlength = degrees(ellipse_angularlength(e))
        self.__length = ellipse_length(e)
        self._setUpdate(False)

    def _setUpdate(self,bln):
        """method to set status of __update, accessible from derived classes"""
        self.__update = bln

    def _setElem(self,e,skip_bounds=False):
        self.__elem = e
        self._setUpdate(True)
        self._updateInternals(skip_bounds)

    ## properties
    ## ----------

    @property
    def update(self):
        return self.__update

    @property
    def elem(self):
        return self.__elem

    @elem.setter
    def elem(self,e):
        if not isellipse(e):
            raise ValueError(f'bad ellipse: {e}')
        self._setElem(deepcopy(e))

    @property
    def geom(self):
        """return ellipcad.ellipse representation of the figure"""
        return deepcopy(self.__elem)

    @property
    def center(self):
        return ellipse_center(self.__elem)

    @center.setter
    def center(self,c):
        self._setElem(ellipse_replace(self.__elem,center=c))

    @property
    def majorp(self):
        return ellipse_majorp(self.__elem)

    @majorp.setter
    def majorp(self,p):
        self._setElem(ellipse_replace(self.__elem,majorp=p))

    @property
    def ratio(self):
        return ellipse_ratio(self.__elem)

    @ratio.setter
    def ratio(self,r):
        self._setElem(ellipse_replace(self.__elem,ratio=r))

    @property
    def angle1(self):
        return ellipse_angles(self.__elem)[0]

    @angle1.setter
    def angle1(self,a):
        self._setElem(ellipse_replace(self.__elem,angle1=a))

    @property
    def angle2(self):
        return ellipse_angles(self.__elem)[1]

    @angle2.setter
    def angle2(self,a):
        self._setElem(ellipse_replace(self.__elem,angle2=a))

    @property
    def reversed(self):
        return ellipse_isreversed(self.__elem)

    @reversed.setter
    def reversed(self,r):
        self._setElem(ellipse_replace(self.__elem,reversed=r))

    @property
    def isarc(self):
        return self.__isarc

    @property
    def bbox(self):
        return deepcopy(self.__bbox)

    @property
    def length(self):
        return self.__length

    @property
    def angledegrees(self):
        """ rotation of the major axis in degrees """
        return self.__angledegrees

    @property
    def startangledegrees(self):
        """ parametric angle where drawing starts, in degrees """
        return self.__startangledegrees

    @property
    def otherangledegrees(self):
        return self.__otherangledegrees

    @property
    def angularlength(self):
        """ parametric angle swept by the arc, in degrees """
        return self.__angularlength

    @property
    def majorradius(self):
        return ellipse_majorradius(self.__elem)

    @property
    def minorradius(self):
        return ellipse_minorradius(self.__elem)

    @property
    def majorpoint(self):
        return ellipse_majorpoint(self.__elem)

    @property
    def minorpoint(self):
        return ellipse_minorpoint(self.__elem)

    @property
    def startpoint(self):
        return ellipse_startpoint(self.__elem)

    @property
    def endpoint(self):
        return ellipse_endpoint(self.__elem)

    @property
    def foci(self):
        return ellipse_foci(self.__elem)

    @property
    def refpoints(self):
        return ellipse_refpoints(self.__elem)

    @property
    def direction1(self):
        return ellipse_direction1(self.__elem)

    @property
    def direction2(self):
        return ellipse_direction2(self.__elem)

    @property
    def bulge(self):
        return ellipse_bulge(self.__elem)

    @property
    def quadratic(self):
        return ellipse_quadratic(self.__elem)

    @property
    def area(self):
        return ellipse_area(self.__elem)

    def area_line_integral(self):
        return ellipse_area_integral(self.__elem)

    ## canonical geometry and queries
    ## ------------------------------

    def point_at(self,a):
        """ the point at parametric angle ``a`` """
        return ellipse_point(self.__elem,a)

    def angle_at_point(self,p):
        """ the parametric angle of point ``p`` """
        return ellipse_angle(self.__elem,p)

    def sample(self,u):
        return ellipse_sample(self.__elem,u)

    def arc_length(self,x1,x2):
        """arc length between two parametric angles, measured
        counter-clockwise on the normalized ellipse"""
        return ellipse_arclength(ellipse_normalized(self.__elem),x1,x2)

    def is_point_on(self,p,tol=tolerance):
        return ellipse_ispointon(self.__elem,p,tol)

    def nearest_point(self,p,onentity=False,strict=False):
        return ellipse_nearest_point(self.__elem,p,onentity,strict)

    def nearest_endpoint(self,p):
        return ellipse_nearest_endpoint(self.__elem,p)

    def nearest_center(self,p):
        return ellipse_nearest_center(self.__elem,p)

    def nearest_middle(self,p,middlepoints=1):
        return ellipse_nearest_middle(self.__elem,p,middlepoints)

    def middle_point(self):
        return ellipse_middle_point(self.__elem)

    def nearest_dist(self,distance,p):
        return ellipse_nearest_dist(self.__elem,distance,p)

    def point_at_length(self,distance):
        return ellipse_point_at_length(self.__elem,distance)

    def nearest_orth_tan(self,p,normal,onentity=False):
        return ellipse_nearest_orthtan(self.__elem,p,normal,onentity)

    def tangent_points(self,p):
        return ellipse_tangent_points(self.__elem,p)

    def tangent_direction(self,p):
        return ellipse_tangent_direction(self.__elem,p)

    def dual_line_tangent_point(self,uv):
        return ellipse_dual_tangent_point(self.__elem,uv)

    def trim_point(self,trimcoord):
        """ which end a trim at ``trimcoord`` moves """
        return ellipse_trim_point(self.__elem,trimcoord)

    ## construction
    ## ------------

    def _create(self,e):
        if e is False:
            return False
        self._setElem(e)
        return True

    def create_from_4p(self,points):
        return self._create(ellipse_from_4p(points))

    def create_from_center_3p(self,points):
        return self._create(ellipse_from_center_3p(points))

    def create_from_quadratic(self,q):
        """build from a ``Quadratic`` or from the three coefficients of a
        centered form, keeping the current center"""
        if isinstance(q,Quadratic):
            return self._create(ellipse_from_quadratic(q))
        return self._create(ellipse_from_quadratic_form(q,self.center))

    def create_inscribed(self,lines):
        return self._create(ellipse_inscribed(lines))

    ## mutation
    ## --------

    def move(self,offset):
        bb = self.__bbox
        self.__bbox = [ add(bb[0],[offset[0],offset[1],0,1.0]),
                        add(bb[1],[offset[0],offset[1],0,1.0]) ]
        self._setElem(ellipse_move(self.__elem,offset),skip_bounds=True)

    def rotate(self,ang,cent=False):
        self._setElem(ellipse_rotate(self.__elem,ang,cent))

    def scale(self,factor,cent=False):
        self._setElem(ellipse_scale(self.__elem,factor,cent))

    def mirror(self,axis1,axis2):
        self._setElem(ellipse_mirror(self.__elem,axis1,axis2))

    def shear(self,k):
        self._setElem(ellipse_shear(self.__elem,k))

    def revert_direction(self):
        self._setElem(ellipse_revert(self.__elem))

    def correct_angles(self):
        self._setElem(ellipse_correct_angles(self.__elem))

    def move_startpoint(self,p):
        self._setElem(ellipse_move_startpoint(self.__elem,p))

    def move_endpoint(self,p):
        self._setElem(ellipse_move_endpoint(self.__elem,p))

    def move_ref(self,ref,offset):
        self._setElem(ellipse_move_ref(self.__elem,ref,offset))

    def switch_major_minor(self):
        """swap the axis naming, returning ``False`` for a zero ratio"""
        return self._create(ellipse_switch_axes(self.__elem))

    def prepare_trim(self,trimcoord,candidates):
        """shorten the arc at the candidate selected by ``trimcoord`` and
        return that candidate"""
        e, p = ellipse_prepare_trim(self.__elem,trimcoord,candidates)
        self._setElem(e)
        return p
