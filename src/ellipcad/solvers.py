## root finding and linear algebra utilities for ellipcad

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

"""root finding and linear algebra utilities for **ellipcad**

These are the numeric leaves of the ellipse kernel.  None of the
functions here know anything about ellipses: they take coefficients,
matrices or callables and return numbers.

- ``linear_solve()`` solves an n x (n+1) augmented linear system
- ``quartic_roots()`` returns the real roots of a quartic
- ``closest_angle()`` is the Newton-Raphson search for the closest
  point on an ellipse, used directly for near-circular ones and to
  polish quartic roots otherwise
- ``halley_iterate()`` is a bracketed second-order root finder

Failures are reported the yapCAD way, by returning ``False``.

"""

import logging
from math import *

import numpy as np

from ellipcad.geom import tolerance, tolerance15

logger = logging.getLogger(__name__)

## largest condition number we accept before calling a linear system
## singular
_maxcondition = 1.0/tolerance15

## imaginary parts smaller than this are numerical noise from the
## companion matrix eigen-solve
_imagtolerance = 1.0e-6


def linear_solve(mt):
    """solve the linear system described by the augmented matrix ``mt``,
    a list of n rows of n+1 numbers, the last column being the right
    hand side.  Return the list of n solutions, or ``False`` if the
    system is malformed or (numerically) singular.

    """
    if not mt:
        return False
    n = len(mt)
    if any(len(row) != n + 1 for row in mt):
        raise ValueError('linear_solve() needs an n x (n+1) augmented matrix')
    m = np.array(mt, dtype=float)
    a = m[:, :n]
    b = m[:, n]
    if not np.all(np.isfinite(m)):
        return False
    if np.linalg.cond(a) > _maxcondition:
        return False
    try:
        x = np.linalg.solve(a, b)
    except np.linalg.LinAlgError:
        return False
    if not np.all(np.isfinite(x)):
        return False
    return [float(v) for v in x]


def quartic_roots(ce):
    """return the sorted real roots of a quartic.

    ``ce`` is either four coefficients of the monic quartic
    ``x^4 + ce[0] x^3 + ce[1] x^2 + ce[2] x + ce[3]``, or five
    coefficients ``ce[0] x^4 + ... + ce[4]``.  Leading zero
    coefficients reduce the degree; the result may be empty.

    """
    if len(ce) == 4:
        coeffs = [1.0] + [float(c) for c in ce]
    elif len(ce) == 5:
        coeffs = [float(c) for c in ce]
    else:
        raise ValueError('quartic_roots() needs 4 or 5 coefficients')
    scale = max(abs(c) for c in coeffs)
    if scale < tolerance15:
        return []
    ## np.roots strips leading zeros; do it with a tolerance so that a
    ## negligible leading term does not produce huge spurious roots
    while coeffs and abs(coeffs[0]) < tolerance15*scale:
        coeffs.pop(0)
    if len(coeffs) < 2:
        return []
    roots = np.roots(coeffs)
    ret = [ float(r.real) for r in roots
            if abs(r.imag) < _imagtolerance*max(1.0, abs(r.real)) ]
    return sorted(ret)


## Newton-Raphson search for the parametric angle of the point on the
## ellipse x = a cos(t), y = b sin(t) closest to point p, which must be
## expressed in the ellipse's centered, unrotated frame.  The objective
## is the squared distance; its first and second derivatives over t
## are closed form.  Iteration starts at the polar angle of p and may
## land on the maximum rather than the minimum, so callers should test
## the antipodal angle too.  Given a ``seed`` near a simple minimum, a
## few steps polish an approximate root found by other means.

def closest_angle(a,b,p,maxiter=16,seed=None):
    """Newton-Raphson search for the stationary angle of the squared
    distance from ``p`` to the ellipse with semi-axes ``a`` and ``b``,
    starting at ``seed`` or else at the polar angle of ``p``"""
    c2 = b*b - a*a
    ax2 = 2.0*a*p[0]
    by2 = 2.0*b*p[1]

    def d1(t):
        return c2*sin(2.0*t) + ax2*sin(t) - by2*cos(t)

    def d2(t):
        return 2.0*c2*cos(2.0*t) + ax2*cos(t) + by2*sin(t)

    theta = atan2(p[1],p[0]) if seed is None else seed
    for i in range(maxiter):
        f1 = d1(theta)
        f2 = d2(theta)
        if abs(f2) < tolerance or abs(f1) < tolerance:
            break
        theta -= f1/f2
    return theta


def halley_iterate(f, guess, lo, hi, tol=tolerance, maxiter=100):
    """find the root of a monotonic function on ``[lo, hi]`` by Halley
    iteration.

    ``f(x)`` returns the tuple ``(f(x), f'(x), f''(x))``.  The bracket
    shrinks as the sign of ``f`` is sampled; steps that would leave it
    fall back to bisection, so the result always lies in ``[lo, hi]``.

    """
    if lo > hi:
        lo, hi = hi, lo
    x = min(max(guess, lo), hi)
    flo = f(lo)[0]
    increasing = f(hi)[0] >= flo
    for i in range(maxiter):
        f0, f1, f2 = f(x)
        if f0 == 0.0:
            return x
        ## keep the bracket around the root
        if (f0 > 0.0) == increasing:
            hi = x
        else:
            lo = x
        if f1 == 0.0:
            step = False
        else:
            newton = f0/f1
            denom = 2.0*f1*f1 - f0*f2
            if denom == 0.0:
                step = newton
            else:
                step = 2.0*f0*f1/denom
                if step*newton < 0.0:
                    ## Halley overshot into the wrong direction
                    step = newton
        if step is False:
            xnew = 0.5*(lo + hi)
        else:
            xnew = x - step
            if xnew <= lo or xnew >= hi:
                xnew = 0.5*(lo + hi)
        if abs(xnew - x) <= tol*max(1.0, abs(x)) or hi - lo <= tol:
            return xnew
        x = xnew
    logger.debug('halley_iterate() did not converge after %d iterations, x=%g',
                 maxiter, x)
    return x
