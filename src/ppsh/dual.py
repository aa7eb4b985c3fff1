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


Forward mode automatic differentiation with dual numbers.

A Dual carries a value and the partial derivatives of that value with
respect to a fixed set of input variables. Arithmetic on Duals applies
the chain rule, so any function written in terms of +, -, *, /, ** and
the functions below can be differentiated exactly by calling it with
Duals instead of floats.

Example usage:
--------------
r, theta, phi = Dual.variables(6500., 1., 2.)
V = r**2 * cos(theta)
V.value # -> 6500**2 * cos(1)
V.grad  # -> [dV/dr, dV/dtheta, dV/dphi]

Values can be numpy arrays. Then grad has shape (n_variables, ...) where
... is the shape of the value.

Functions
---------
cos  - cosine, for Duals or numbers
sin  - sine, for Duals or numbers
sqrt - square root, for Duals or numbers
"""

import numpy as np


class Dual(object):
    """
    Number with derivative tracking

    Parameters
    ----------
    value : float or array
        value of the number
    grad : array
        partial derivatives of value, shape (n_variables,) + value.shape
    """

    # make numpy defer to our reflected operators, so that
    # np.float64 * Dual gives a Dual rather than an object array
    __array_ufunc__ = None

    def __init__(self, value, grad):
        self.value = np.asarray(value, dtype = np.float64)
        self.grad  = np.asarray(grad , dtype = np.float64)

    @classmethod
    def variables(cls, *values):
        """
        Make independent variables, seeded with unit derivatives

        The values are broadcast to the same shape. Variable i has
        derivative 1 with respect to itself and 0 with respect to the others.

        Parameters
        ----------
        values : floats or arrays
            values of the variables

        Returns
        -------
        variables : list
            list of Duals, one for each value
        """
        values = np.broadcast_arrays(*[np.asarray(v, dtype = np.float64) for v in values])
        N = len(values)

        variables = []
        for i, value in enumerate(values):
            grad = np.zeros((N, ) + value.shape)
            grad[i] = 1.
            variables.append(cls(value, grad))

        return variables

    def __repr__(self):
        return 'Dual({}, {})'.format(self.value, self.grad)

    def __neg__(self):
        return Dual(-self.value, -self.grad)

    def __pos__(self):
        return self

    def __add__(self, other):
        if isinstance(other, Dual):
            return Dual(self.value + other.value, self.grad + other.grad)
        return Dual(self.value + other, self.grad)

    __radd__ = __add__

    def __sub__(self, other):
        if isinstance(other, Dual):
            return Dual(self.value - other.value, self.grad - other.grad)
        return Dual(self.value - other, self.grad)

    def __rsub__(self, other):
        return Dual(other - self.value, -self.grad)

    def __mul__(self, other):
        if isinstance(other, Dual):
            return Dual(self.value * other.value,
                        self.grad * other.value + other.grad * self.value)
        return Dual(self.value * other, self.grad * other)

    __rmul__ = __mul__

    def __truediv__(self, other):
        if isinstance(other, Dual):
            return Dual(self.value / other.value,
                        (self.grad * other.value - other.grad * self.value) / other.value**2)
        return Dual(self.value / other, self.grad / other)

    def __rtruediv__(self, other):
        return Dual(other / self.value, -other * self.grad / self.value**2)

    def __pow__(self, k):
        """ power with a constant exponent """
        if isinstance(k, Dual):
            return NotImplemented

        if k == 0:
            return Dual(np.ones_like(self.value), np.zeros_like(self.grad))

        return Dual(self.value**k, k * self.value**(k - 1) * self.grad)


def cos(x):
    """ cosine of Dual or number """
    if isinstance(x, Dual):
        return Dual(np.cos(x.value), -np.sin(x.value) * x.grad)
    return np.cos(x)


def sin(x):
    """ sine of Dual or number """
    if isinstance(x, Dual):
        return Dual(np.sin(x.value), np.cos(x.value) * x.grad)
    return np.sin(x)


def sqrt(x):
    """ square root of Dual or number

    The derivative is infinite where the value is 0
    """
    if isinstance(x, Dual):
        value = np.sqrt(x.value)
        return Dual(value, x.grad / (2 * value))
    return np.sqrt(x)
