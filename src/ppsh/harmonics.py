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


Spherical harmonic models of scalar functions


Example usage:
--------------
import numpy as np
from ppsh import SphericalHarmonicModel, evaluate, gradient, gradient_in_local_tangent_plane

model = SphericalHarmonicModel(1, 6371.2, [(0, 0), (-29496.5, 0), (-1585.9, 4945.1)])
r, theta, phi = 6500, np.pi/3, np.pi/4 # km, radians, radians
V = evaluate(model, r, theta, phi)
dV_dr, dV_dtheta, dV_dphi = gradient(model, r, theta, phi)
dV_de, dV_dn, dV_du = gradient_in_local_tangent_plane(model, r, theta, phi)


The evaluation is written once, and run either with numbers or with
Duals (see ppsh.dual). Running it with Duals gives exact derivatives
with respect to r, theta and phi.

Here is a list of functions:

Model structure
---------------
triangle                        - Triangular number n(n+1)/2
coefficient_index               - Position of (n, m) in coefficient table
combine                         - Sum of two models
scale                           - Model multiplied by a constant

Evaluation
----------
evaluate                        - Model value
gradient                        - Partial derivatives wrt r, theta, phi
to_local_tangent_plane          - Spherical derivatives to east, north, up
gradient_in_local_tangent_plane - Gradient in east, north, up components
"""

import logging
import numbers
import numpy as np
from dataclasses import dataclass

from .dual import Dual, cos, sin
from .exceptions import DomainError, ModelStructureError
from .legendre import legendre_table

logger = logging.getLogger(__name__)


def triangle(n):
    """ Triangular number n(n + 1)/2 """
    return (n * (n + 1)) // 2


def coefficient_index(n, m):
    """
    Position of degree n, order m coefficients in a coefficient table

    The table is ordered as (0, 0), (1, 0), (1, 1), (2, 0), (2, 1), (2, 2), ...
    """
    if not 0 <= m <= n:
        raise ValueError('coefficient index requires 0 <= m <= n, got n={}, m={}'.format(n, m))
    return triangle(n) + m


@dataclass(frozen = True, eq = False)
class SphericalHarmonicModel:
    """
    Spherical harmonic model of a scalar function

    Parameters
    ----------
    degree : int
        maximum spherical harmonic degree N, >= 0
    reference_radius : float
        reference radius of the model, in the same unit as the radii
        the model is evaluated at
    coefficients : array
        (g, h) pairs for each degree and order, ordered as
        (0, 0), (1, 0), (1, 1), (2, 0), (2, 1), (2, 2), ...
        Must have shape (triangle(N + 1), 2). The array is copied and
        made read-only.
    """
    degree: int
    reference_radius: float
    coefficients: np.ndarray

    def __post_init__(self):
        if isinstance(self.degree, bool) or not isinstance(self.degree, numbers.Integral) or self.degree < 0:
            raise ModelStructureError('degree must be a non-negative integer, got {!r}'.format(self.degree))

        try:
            coefficients = np.array(self.coefficients, dtype = np.float64)
        except (TypeError, ValueError) as e:
            raise ModelStructureError('coefficients must be a table of (g, h) pairs') from e

        K = triangle(self.degree + 1)
        if coefficients.shape != (K, 2):
            raise ModelStructureError('degree {} model needs {} (g, h) pairs, got shape {}'.format(
                                      self.degree, K, coefficients.shape))

        coefficients.setflags(write = False)
        object.__setattr__(self, 'degree', int(self.degree))
        object.__setattr__(self, 'reference_radius', float(self.reference_radius))
        object.__setattr__(self, 'coefficients', coefficients)


@dataclass(frozen = True, eq = False)
class SphericalHarmonicModels:
    """
    Sum of spherical harmonic models

    Parameters
    ----------
    children : iterable
        SphericalHarmonicModel or SphericalHarmonicModels objects. Their
        degrees and reference radii do not have to match.
    """
    children: tuple

    def __post_init__(self):
        children = tuple(self.children)
        for child in children:
            if not isinstance(child, (SphericalHarmonicModel, SphericalHarmonicModels)):
                raise ModelStructureError('cannot sum {!r} with spherical harmonic models'.format(child))
        object.__setattr__(self, 'children', children)


def combine(model1, model2):
    """
    Add two spherical harmonic models

    The models are not required to have the same degree or reference
    radius, and the result is not flattened.
    """
    # TODO: optional check that reference radii agree
    return SphericalHarmonicModels((model1, model2))


def scale(k, model):
    """ Multiply all coefficients of model by k """
    if isinstance(model, SphericalHarmonicModels):
        return SphericalHarmonicModels(tuple(scale(k, child) for child in model.children))

    return SphericalHarmonicModel(model.degree, model.reference_radius, k * model.coefficients)


def _check_radius(r):
    if np.any(np.asarray(r) <= 0):
        raise DomainError('radius must be > 0')


def _check_colatitude(theta):
    if np.any(np.mod(theta, np.pi) == 0):
        raise DomainError('east component is undefined at the poles (theta = 0 or pi)')


def _evaluate(model, r, theta, phi):
    """ model value for numbers, arrays or Duals """

    if isinstance(model, SphericalHarmonicModels):
        return sum(_evaluate(child, r, theta, phi) for child in model.children)

    R = model.reference_radius
    P = legendre_table(model.degree, cos(theta), sin(theta))

    V = 0.
    for n in range(model.degree + 1):
        Vn = 0.
        for m in range(n + 1):
            g, h = model.coefficients[coefficient_index(n, m)]
            if g == 0 and h == 0:
                continue

            Vn = Vn + (g * cos(m * phi) + h * sin(m * phi)) * P[n, m]

        V = V + (R / r) ** (n + 1) * Vn

    return R * V


def evaluate(model, r, theta, phi):
    """
    Calculate model value

    Broadcasting rules apply for coordinate arrays.

    Parameters
    ----------
    model : SphericalHarmonicModel or SphericalHarmonicModels
        the model
    r : array
        radius, same unit as model reference radius. Must be > 0
    theta : array
        colatitude [rad]
    phi : array
        longitude [rad]

    Returns
    -------
    V : array
        model value at (r, theta, phi)
    """
    _check_radius(r)
    return _evaluate(model, r, theta, phi)


def gradient(model, r, theta, phi):
    """
    Calculate partial derivatives of model value

    The derivatives are exact, calculated by evaluating the model
    with dual numbers. They are not negated, so for a magnetic
    potential V, the magnetic field is minus these values.

    The derivatives are finite also at the poles (theta = 0 or pi).

    Parameters
    ----------
    model : SphericalHarmonicModel or SphericalHarmonicModels
        the model
    r : array
        radius, same unit as model reference radius. Must be > 0
    theta : array
        colatitude [rad]
    phi : array
        longitude [rad]

    Returns
    -------
    dV_dr : array
        derivative with respect to radius
    dV_dtheta : array
        derivative with respect to colatitude
    dV_dphi : array
        derivative with respect to longitude
    """
    _check_radius(r)

    r_, theta_, phi_ = Dual.variables(r, theta, phi)
    V = _evaluate(model, r_, theta_, phi_)

    if not isinstance(V, Dual): # all coefficients are zero
        logger.debug('model has no non-zero coefficients, gradient is zero')
        shape = r_.value.shape
        return np.zeros(shape)[()], np.zeros(shape)[()], np.zeros(shape)[()]

    dV_dr, dV_dtheta, dV_dphi = V.grad
    return dV_dr, dV_dtheta, dV_dphi


def to_local_tangent_plane(dV_dr, dV_dtheta, dV_dphi, r, theta):
    """
    Convert spherical partial derivatives to east, north and up components

    Parameters
    ----------
    dV_dr : array
        derivative with respect to radius
    dV_dtheta : array
        derivative with respect to colatitude
    dV_dphi : array
        derivative with respect to longitude
    r : array
        radius. Must be > 0
    theta : array
        colatitude [rad]. Must not be at a pole

    Returns
    -------
    east : array
        eastward component
    north : array
        northward component
    up : array
        upward (radial) component
    """
    _check_radius(r)
    _check_colatitude(theta)

    east  = dV_dphi / (r * np.sin(theta))
    north = -dV_dtheta / r # negated because colatitude increases southward
    up    = dV_dr

    return east, north, up


def gradient_in_local_tangent_plane(model, r, theta, phi):
    """
    Calculate gradient of model value in east, north and up components

    See gradient and to_local_tangent_plane
    """
    _check_colatitude(theta)
    dV_dr, dV_dtheta, dV_dphi = gradient(model, r, theta, phi)
    return to_local_tangent_plane(dV_dr, dV_dtheta, dV_dphi, r, theta)
