## quadratic form (conic section) type for ellipcad

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

"""quadratic form (conic section) type for **ellipcad**

A ``Quadratic`` holds the implicit equation

    m0 x^2 + m1 xy + m2 y^2 + m3 x + m4 y + m5 = 0

as a symmetric 2x2 matrix of quadratic terms, a vector of linear
terms, and a constant term.  A ``Quadratic`` built from three
coefficients ``m0 x + m1 y + m2 = 0`` is linear, and
``is_quadratic()`` reports false for it.

Quadratics are values: ``move()``, ``rotate()`` and ``shear()`` return
new instances describing the transformed curve.

"""

from math import *

import numpy as np

from ellipcad.geom import isgoodnum


class Quadratic():
    """implicit conic section equation"""

    def __repr__(self):
        return f"Quadratic({self.coefficients()})"

    def __init__(self, ce=None):
        self.__quad = np.zeros((2, 2))
        self.__linear = np.zeros(2)
        self.__const = 0.0
        self.__isquadratic = False
        self.__valid = False
        if ce is None:
            return
        if not all(isgoodnum(c) for c in ce):
            raise ValueError('non-numeric coefficient passed to Quadratic()')
        if len(ce) == 6:
            self.__quad = np.array([[ce[0], 0.5*ce[1]],
                                    [0.5*ce[1], ce[2]]], dtype=float)
            self.__linear = np.array([ce[3], ce[4]], dtype=float)
            self.__const = float(ce[5])
            self.__isquadratic = True
            self.__valid = True
        elif len(ce) == 3:
            self.__linear = np.array([ce[0], ce[1]], dtype=float)
            self.__const = float(ce[2])
            self.__valid = True
        else:
            raise ValueError('Quadratic() needs 3 or 6 coefficients')

    @classmethod
    def _fromParts(cls, quad, linear, const, isquadratic):
        q = cls()
        q.__quad = np.array(quad, dtype=float)
        q.__linear = np.array(linear, dtype=float)
        q.__const = float(const)
        q.__isquadratic = isquadratic
        q.__valid = True
        return q

    def is_valid(self):
        return self.__valid

    def is_quadratic(self):
        """true for a valid equation with second order terms"""
        return self.__valid and self.__isquadratic

    def quad(self):
        """symmetric matrix of the quadratic terms"""
        return self.__quad.copy()

    def linear(self):
        """vector of the linear terms"""
        return self.__linear.copy()

    def const_term(self):
        return self.__const

    def coefficients(self):
        """the equation as a flat list, six coefficients for a quadratic
        and three for a linear equation"""
        if not self.__valid:
            return []
        if self.__isquadratic:
            q = self.__quad
            return [ float(q[0, 0]), float(2.0*q[0, 1]), float(q[1, 1]),
                     float(self.__linear[0]), float(self.__linear[1]),
                     self.__const ]
        return [ float(self.__linear[0]), float(self.__linear[1]),
                 self.__const ]

    def evaluate(self, p):
        """value of the left hand side at point ``p``"""
        v = np.array([p[0], p[1]], dtype=float)
        return float(v @ self.__quad @ v + self.__linear @ v + self.__const)

    def move(self, offset):
        """translate the curve by ``offset``"""
        if not self.__valid:
            return Quadratic()
        v = np.array([offset[0], offset[1]], dtype=float)
        av = self.__quad @ v
        linear = self.__linear - 2.0*av
        const = self.__const + float(v @ av) - float(self.__linear @ v)
        return Quadratic._fromParts(self.__quad, linear, const,
                                    self.__isquadratic)

    def rotate(self, angle, cent=False):
        """rotate the curve by ``angle`` radians about ``cent`` (or the
        origin)"""
        if not self.__valid:
            return Quadratic()
        if cent:
            return self.move([-cent[0], -cent[1]]).rotate(angle).move(cent)
        c = cos(angle)
        s = sin(angle)
        r = np.array([[c, -s], [s, c]])
        return Quadratic._fromParts(r @ self.__quad @ r.T,
                                    r @ self.__linear,
                                    self.__const, self.__isquadratic)

    def shear(self, k):
        """shear the curve horizontally, ``x' = x + k*y``"""
        if not self.__valid:
            return Quadratic()
        inv = np.array([[1.0, -k], [0.0, 1.0]])
        return Quadratic._fromParts(inv.T @ self.__quad @ inv,
                                    inv.T @ self.__linear,
                                    self.__const, self.__isquadratic)
