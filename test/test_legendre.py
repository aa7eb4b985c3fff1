"""
Test Schmidt semi-normalized associated Legendre functions
"""
import pytest
import numpy as np
import numpy.testing as npt

from ppsh import Dual, schmidt_semi_normalized
from ppsh.dual import cos, sin
from ppsh.legendre import legendre_table


THETA = np.linspace(0.1, np.pi - 0.1, 11)
X = np.cos(THETA)
S = np.sin(THETA)


@pytest.mark.parametrize(
    "n, m, expected",
    [
        (0, 0, np.ones_like(X)),
        (1, 0, X),
        (1, 1, S),
        (2, 0, 1.5 * X**2 - 0.5),
        (2, 1, np.sqrt(3) * X * S),
        (2, 2, np.sqrt(3) / 2 * S**2),
        (3, 0, 2.5 * X**3 - 1.5 * X),
        (3, 1, np.sqrt(3 / 8) * (5 * X**2 - 1) * S),
    ],
)
def test_closed_forms(n, m, expected):
    """
    Compare with closed form expressions
    """
    P = schmidt_semi_normalized(n, m)
    npt.assert_allclose(P(X) * np.ones_like(X), expected, rtol=1e-12, atol=1e-14)


@pytest.mark.parametrize("n", [1, 4, 13])
def test_sum_of_squares(n):
    """
    Schmidt semi-normalized functions of degree n have squares that sum to 1
    """
    total = sum(schmidt_semi_normalized(n, m)(X) ** 2 for m in range(n + 1))
    npt.assert_allclose(total, 1, rtol=1e-12)


@pytest.mark.parametrize("n, m", [(1, 2), (0, 1), (3, -1)])
def test_invalid_order(n, m):
    with pytest.raises(ValueError):
        schmidt_semi_normalized(n, m)


def test_dual_argument():
    """
    Derivative of P_2^0(x) = 1.5 x**2 - 0.5 is 3 x
    """
    (x, ) = Dual.variables(0.3)
    P = schmidt_semi_normalized(2, 0)(x)
    npt.assert_allclose(P.value, 1.5 * 0.3**2 - 0.5)
    npt.assert_allclose(P.grad, [3 * 0.3])


def test_sine_argument():
    """
    Passing sin(theta) gives the same values as computing it from x
    """
    for n, m in [(1, 1), (4, 2), (7, 7)]:
        P = schmidt_semi_normalized(n, m)
        npt.assert_allclose(P(X, S), P(X), rtol=1e-12, atol=1e-14)


@pytest.mark.parametrize("nmax", [0, 1, 6, 13])
def test_table(nmax):
    P = legendre_table(nmax, X, S)
    assert len(P) == (nmax + 1) * (nmax + 2) // 2
    for (n, m), P_nm in P.items():
        npt.assert_allclose(P_nm, schmidt_semi_normalized(n, m)(X), rtol=1e-12, atol=1e-14)


@pytest.mark.parametrize("theta0", [0., 1e-9, np.pi])
def test_table_derivatives_at_poles(theta0):
    """
    With s = sin(theta), the theta derivatives are finite at the poles

    dP_1^1/dtheta = cos(theta)
    """
    (theta, ) = Dual.variables(theta0)
    P = legendre_table(6, cos(theta), sin(theta))
    for key, P_nm in P.items():
        if key != (0, 0): # constant
            assert np.all(np.isfinite(P_nm.grad))
    npt.assert_allclose(P[1, 1].grad, [np.cos(theta0)])
