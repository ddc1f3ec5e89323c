## elliptic integrals and ellipse arc length for ellipcad

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

"""elliptic integrals of the second kind and ellipse arc length

The arc length of the ellipse ``x = a cos(t), y = b sin(t)`` between
parametric angles ``t1`` and ``t2`` is

    a * integral( sqrt(1 - k^2 cos^2 t), t1, t2 )

with the eccentricity modulus ``k = sqrt(1 - (b/a)^2)``.  The
integrand has period pi and integrates to ``2 E(k)`` over one period,
so a span is evaluated as a whole number of half turns times
``2 E(k)`` plus the incomplete integral of the residual.  The
incomplete integral is only ever evaluated on ``[-pi/2, pi/2)`` where
it is well conditioned.

The special functions come from mpmath, which uses the modulus
parameter ``m = k^2``.

"""

from math import *

import mpmath as mpm

from ellipcad.geom import tolerance_angle, pi2, correctAngle


def complete_e(k):
    """complete elliptic integral of the second kind, ``E(k)``"""
    return float(mpm.ellipe(k*k))


def incomplete_e(k, phi):
    """incomplete elliptic integral of the second kind,
    ``E(phi, k) = integral( sqrt(1 - k^2 sin^2 t), 0, phi )``"""
    return float(mpm.ellipe(phi, k*k))


## integral of sqrt(1 - k^2 cos^2 t) from 0 to x, for 0 <= x < pi.
## The substitution t = u + pi/2 turns it into an incomplete integral
## of the second kind on [-pi/2, pi/2).
def arc_integral(k, x, ek=None):
    """arc length integral of the unit-major-radius ellipse from
    parametric angle 0 to ``x``, for ``x`` within one half turn"""
    if ek is None:
        ek = complete_e(k)
    return incomplete_e(k, x - 0.5*pi) + ek


def arc_length(a, ratio, x1, x2):
    """arc length of the ellipse with major radius ``a`` and axis ratio
    ``ratio <= 1``, traversed counter-clockwise from parametric angle
    ``x1`` to ``x2``.  Coincident angles are a full turn.

    """
    if ratio > 1.0:
        raise ValueError('arc_length() needs ratio <= 1, swap the axes first')
    k = sqrt(max(0.0, 1.0 - ratio*ratio))
    ek = complete_e(k)

    x1 = correctAngle(x1)
    x2 = correctAngle(x2)
    if x2 < x1 + tolerance_angle:
        x2 += pi2

    ## whole half turns crossed, then the residuals within a half turn
    n1 = floor((x1 + tolerance_angle)/pi)
    n2 = floor((x2 + tolerance_angle)/pi)
    ret = 2.0*(n2 - n1)*ek
    r1 = x1 - n1*pi
    r2 = x2 - n2*pi
    if abs(r2 - r1) > tolerance_angle:
        ret += arc_integral(k, r2, ek) - arc_integral(k, r1, ek)
    return a*ret


def full_length(a, ratio):
    """circumference of the ellipse, ``4 a E(k)``"""
    if ratio > 1.0:
        a = a*ratio
        ratio = 1.0/ratio
    k = sqrt(max(0.0, 1.0 - ratio*ratio))
    return 4.0*a*complete_e(k)
