"""
MIT License

Copyright (c) 2021 Karl M. Laundal

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.


Schmidt semi-normalized associated Legendre functions

The functions are written in terms of x = cos(theta) and s = sin(theta)
using only arithmetic, so that they accept both numbers and Duals. If s
is not given, it is sqrt(1 - x**2). Pass s = sin(theta) when
differentiating with respect to theta, so that the derivatives stay
finite at the poles.
"""

import numpy as np
from functools import lru_cache

from .dual import sqrt


@lru_cache(maxsize = None)
def schmidt_normalization(n, m):
    """
    Factor that converts Gauss normalized P_n^m to Schmidt semi-normalized

    Calculations based on recursive algorithm found in "Spacecraft Attitude
    Determination and Control" by James Richard Wertz
    """
    if m == 0:
        if n == 0:
            return 1.
        return schmidt_normalization(n - 1, 0) * (2.*n - 1)/n

    return schmidt_normalization(n, m - 1) * float(np.sqrt((n - m + 1)*(int(m == 1) + 1.)/(n + m)))


def _gauss_column(m, nmax, x, s):
    """ Gauss normalized P_n^m for n = m, ..., nmax """

    # P_m^m = sin(theta)^m
    P_this = 1. if m == 0 else s ** m
    yield P_this

    # recursion in degree, with P_{m-1}^m = 0
    P_prev, P_this = P_this, x * P_this
    for k in range(m + 1, nmax + 1):
        if k > m + 1:
            Kkm = ((k - 1)**2 - m**2) / ((2*k - 1)*(2*k - 3))
            P_prev, P_this = P_this, x * P_this - Kkm * P_prev
        yield P_this


def schmidt_semi_normalized(n, m):
    """
    Get Schmidt semi-normalized associated Legendre function of degree n and order m

    No Condon-Shortley phase is included, so that P_1^1(cos(theta)) = sin(theta).

    Parameters
    ----------
    n : int
        degree, >= 0
    m : int
        order, 0 <= m <= n

    Returns
    -------
    P : function
        function P(x, s = None) of x = cos(theta), which can be a number,
        an array or a Dual. s is sin(theta), computed from x if not given
    """

    if not 0 <= m <= n:
        raise ValueError('Legendre function requires 0 <= m <= n, got n={}, m={}'.format(n, m))

    S = schmidt_normalization(n, m)

    def P(x, s = None):
        if s is None and m > 0:
            s = sqrt(1 - x * x)

        for P_nm in _gauss_column(m, n, x, s):
            pass
        return S * P_nm

    return P


def legendre_table(nmax, x, s = None):
    """
    Calculate all Schmidt semi-normalized P_n^m up to degree nmax

    One recursion per order, so the cost is O(nmax**2).

    Parameters
    ----------
    nmax : int
        maximum degree
    x : number, array or Dual
        cos(theta)
    s : number, array or Dual, optional
        sin(theta). Computed from x if not given

    Returns
    -------
    P : dict
        Legendre functions, with keys (n, m)
    """
    if s is None and nmax > 0:
        s = sqrt(1 - x * x)

    P = {}
    for m in range(nmax + 1):
        for n, P_nm in zip(range(m, nmax + 1), _gauss_column(m, nmax, x, s)):
            P[n, m] = schmidt_normalization(n, m) * P_nm

    return P
