"""
Test gradients with automatic differentiation, and conversion to
the local tangent plane
"""
import pytest
import numpy as np
import numpy.testing as npt

from ppsh import (SphericalHarmonicModel, DomainError, evaluate, gradient,
                  gradient_in_local_tangent_plane, igrf11, to_local_tangent_plane)

R = 6371.2
g10, g11, h11 = -29496.5, -1585.9, 4945.1
DIPOLE = SphericalHarmonicModel(1, R, [(0, 0), (g10, 0), (g11, h11)])

POINTS = [
    (R, np.pi / 2, 0.),
    (6500., 0.3, 0.2),
    (7000., 1.2, 4.0),
    (12000., 2.9, -1.0),
]


def dipole_gradient(r, theta, phi):
    """ closed form gradient of the degree 1 model """
    A = R**3 / r**2
    angular = g10 * np.cos(theta) + (g11 * np.cos(phi) + h11 * np.sin(phi)) * np.sin(theta)
    dV_dr = -2 * A / r * angular
    dV_dtheta = A * (-g10 * np.sin(theta) + (g11 * np.cos(phi) + h11 * np.sin(phi)) * np.cos(theta))
    dV_dphi = A * (-g11 * np.sin(phi) + h11 * np.cos(phi)) * np.sin(theta)
    return dV_dr, dV_dtheta, dV_dphi


@pytest.mark.parametrize("r, theta, phi", POINTS)
def test_dipole_closed_form(r, theta, phi):
    npt.assert_allclose(gradient(DIPOLE, r, theta, phi),
                        dipole_gradient(r, theta, phi), rtol=1e-12, atol=1e-8)


@pytest.mark.parametrize("r, theta, phi", POINTS)
def test_finite_differences(r, theta, phi):
    """
    Central differences of the model value agree with the exact gradient
    """
    model = igrf11.field_at_epoch
    steps = (1e-3, 1e-6, 1e-6) # km, rad, rad

    expected = []
    for i, eps in enumerate(steps):
        forward, backward = [r, theta, phi], [r, theta, phi]
        forward[i] += eps
        backward[i] -= eps
        expected.append((evaluate(model, *forward) - evaluate(model, *backward)) / (2 * eps))

    npt.assert_allclose(gradient(model, r, theta, phi), expected, rtol=1e-6, atol=10)


@pytest.mark.parametrize("theta", [0., 1e-9, np.pi])
@pytest.mark.parametrize("phi", [0.3, 2.])
def test_dipole_at_and_near_poles(theta, phi):
    """
    Derivatives with respect to r and theta are finite at the poles
    """
    gradient_ = np.array(gradient(DIPOLE, R, theta, phi))
    assert np.all(np.isfinite(gradient_))
    npt.assert_allclose(gradient_, dipole_gradient(R, theta, phi), rtol=1e-12, atol=1e-6)


def test_dipole_theta_derivative_at_north_pole():
    phi = 0.7
    dV_dr, dV_dtheta, dV_dphi = gradient(DIPOLE, R, 0., phi)
    npt.assert_allclose(dV_dtheta, R * (g11 * np.cos(phi) + h11 * np.sin(phi)))
    npt.assert_allclose(dV_dr, -2 * R * g10)
    npt.assert_allclose(dV_dphi, 0, atol=1e-9)


@pytest.mark.parametrize("theta", [1e-9, np.pi - 1e-9])
def test_igrf11_near_poles(theta):
    east, north, up = gradient_in_local_tangent_plane(igrf11.field_at_epoch, R, theta, 1.)
    assert np.all(np.isfinite([east, north, up]))


def test_local_tangent_plane_near_pole():
    """
    At r = R the dipole gives east = h11 cos(phi) - g11 sin(phi),
    north = -(g11 cos(phi) + h11 sin(phi)) and up = -2 g10 close to
    the north pole
    """
    phi = 0.3
    east, north, up = gradient_in_local_tangent_plane(DIPOLE, R, 1e-9, phi)
    npt.assert_allclose(east, h11 * np.cos(phi) - g11 * np.sin(phi), rtol=1e-6)
    npt.assert_allclose(north, -(g11 * np.cos(phi) + h11 * np.sin(phi)), rtol=1e-6)
    npt.assert_allclose(up, -2 * g10, rtol=1e-6)


def test_gradient_is_not_negated():
    """
    Degree 0 model V = R**2 g / r has dV/dr = -R**2 g / r**2
    """
    model = SphericalHarmonicModel(0, R, [(10., 0)])
    dV_dr, dV_dtheta, dV_dphi = gradient(model, 2 * R, 1., 1.)
    npt.assert_allclose(dV_dr, -10. / 4)
    npt.assert_allclose([dV_dtheta, dV_dphi], 0)


def test_zero_model():
    model = SphericalHarmonicModel(2, R, np.zeros((6, 2)))
    npt.assert_equal(gradient(model, R, 1., 1.), [0, 0, 0])


def test_gradient_arrays():
    theta = np.linspace(0.2, 2.9, 4)
    dV_dr, dV_dtheta, dV_dphi = gradient(DIPOLE, 7000., theta, 1.5)
    assert dV_dr.shape == dV_dtheta.shape == dV_dphi.shape == (4, )
    npt.assert_allclose(np.array([dV_dr, dV_dtheta, dV_dphi]),
                        np.array(dipole_gradient(7000., theta, 1.5)), rtol=1e-12)


def test_gradient_radius_domain():
    with pytest.raises(DomainError):
        gradient(DIPOLE, 0., 1., 1.)


def test_local_tangent_plane():
    east, north, up = to_local_tangent_plane(3., 4., 5., 2., np.pi / 6)
    npt.assert_allclose([east, north, up], [5. / (2. * 0.5), -4. / 2., 3.])


def test_dipole_at_equator():
    """
    At r = R, theta = 90 deg, phi = 0: east = h11, north = g10, up = -2 g11
    """
    east, north, up = gradient_in_local_tangent_plane(DIPOLE, R, np.pi / 2, 0.)
    npt.assert_allclose([east, north, up], [h11, g10, -2 * g11], rtol=1e-12, atol=1e-9)


@pytest.mark.parametrize("theta", [0., np.pi, np.array([1., 0.])])
def test_pole_domain(theta):
    with pytest.raises(DomainError):
        to_local_tangent_plane(1., 1., 1., R, theta)

    with pytest.raises(DomainError):
        gradient_in_local_tangent_plane(DIPOLE, R, theta, 0.)


def test_tangent_plane_radius_domain():
    with pytest.raises(DomainError):
        to_local_tangent_plane(1., 1., 1., -R, 1.)
