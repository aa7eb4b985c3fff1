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


Time dependent magnetic field models, and the International Geomagnetic
Reference Field (IGRF), 11th generation


Example usage:
--------------
import numpy as np
from datetime import datetime
import ppsh

model = ppsh.field_at_date(ppsh.igrf11, datetime(2012, 3, 28))
r, theta, phi = 6371.2, np.radians(30), np.radians(4)
dV_de, dV_dn, dV_du = ppsh.gradient_in_local_tangent_plane(model, r, theta, phi)
Be, Bn, Bu = -dV_de, -dV_dn, -dV_du # nT


Here is a list of functions:

Helper functions
----------------
is_leapyear             - Check if year is leapyear
yearfrac_to_datetime    - Convert fraction of year to datetime
datetime_to_yearfrac    - Convert datetime to fraction of year
read_shc                - Read spherical harmonic coefficient file

Main functions
--------------
field_at_time           - Model at time offset from epoch
field_at_date           - Model at date
magnetic_model_from_shc - Magnetic model from spherical harmonic coefficient file
"""

import logging
import numpy as np
import pandas as pd
from dataclasses import dataclass
from datetime import datetime

from .exceptions import ModelStructureError
from .harmonics import (SphericalHarmonicModel, combine, coefficient_index,
                        scale, triangle)

logger = logging.getLogger(__name__)

# Geomagnetic reference radius:
RE = 6371.2 # km

# Number of years covered by the IGRF secular variation:
SV_INTERVAL = 5.

IGRF11_EPOCH = 2010.


@dataclass(frozen = True, eq = False)
class MagneticModel:
    """
    Spherical harmonic model of a magnetic field with secular variation

    Parameters
    ----------
    field_at_epoch : SphericalHarmonicModel or SphericalHarmonicModels
        magnetic potential at epoch, in nT, reference radius in km
    secular_variation : SphericalHarmonicModel or SphericalHarmonicModels
        rate of change of magnetic potential, in nT / yr, reference radius in km
    epoch : float, optional
        model epoch as fraction of year. Only needed for field_at_date
    """
    field_at_epoch: object
    secular_variation: object
    epoch: float = None


def field_at_time(model, t):
    """
    Get spherical harmonic model at time t years after model epoch

    The secular variation is extrapolated linearly, with no limit on t.
    """
    return combine(model.field_at_epoch, scale(t, model.secular_variation))


def is_leapyear(year):
    """ Check for leapyear (handles arrays and preserves shape)

    """

    # if array:
    if type(year) is np.ndarray:
        out = np.full_like(year, False, dtype = bool)

        out[ year % 4   == 0] = True
        out[ year % 100 == 0] = False
        out[ year % 400 == 0] = True

        return out

    # if scalar:
    if year % 400 == 0:
        return True

    if year % 100 == 0:
        return False

    return year % 4 == 0


def yearfrac_to_datetime(fracyear):
    """
    Convert fraction of year to datetime

    Parameters
    ----------
    fracyear : iterable
        Date(s) in decimal year. E.g., 2021-03-28 is 2021.2377
        Must be an array, list or similar.

    Returns
    -------
    datetimes : array
        Array of datetimes
    """

    fracyear = np.asarray(fracyear, dtype = np.float64)
    year = np.uint16(fracyear) # truncate fracyear to get year
    # use pandas to_timedelta to represent time since beginning of year:
    delta_year = pd.to_timedelta((fracyear - year)*(365 + is_leapyear(year)), unit = 'D')
    # and DatetimeIndex to represent beginning of years:
    start_year = pd.DatetimeIndex(list(map(str, year)))

    # adding them produces the datetime:
    return (start_year + delta_year).to_pydatetime()


def datetime_to_yearfrac(date):
    """
    Convert datetime to fraction of year

    Inverse of yearfrac_to_datetime, for a single date
    """
    start_year = datetime(date.year, 1, 1, tzinfo = date.tzinfo)
    days_in_year = 365 + is_leapyear(date.year)
    return date.year + (date - start_year).total_seconds() / (days_in_year * 86400.)


def field_at_date(model, date):
    """
    Get spherical harmonic model at date

    Parameters
    ----------
    model : MagneticModel
        magnetic field model with epoch
    date : datetime
        date to evaluate the model

    Returns
    -------
    model : SphericalHarmonicModels
        magnetic potential at date
    """
    if model.epoch is None:
        raise ValueError('model has no epoch, use field_at_time instead')

    t = datetime_to_yearfrac(date) - model.epoch
    if t < 0 or t > SV_INTERVAL:
        logger.warning('date %s is not within %s years after model epoch %s', date, SV_INTERVAL, model.epoch)

    return field_at_time(model, t)


def read_shc(filename):
    """
    Read .shc (spherical harmonic coefficient) file

    The function produces data frames that have time as index and
    spherical harmonic degree and order as columns. In the case of IGRF,
    the times will correspond to the different models 5 years apart

    Parameters
    ----------
    filename : string
        filename of .shc file

    Returns
    -------
    g : DataFrame
        pandas DataFrame of gauss coefficients for cos terms.
    h : DataFrame
        pandas DataFrame of gauss coefficients for sin terms.
    """

    header = 2
    coeffdict = {}
    with open(filename, 'r') as f:
        for line in f.readlines():

            if line.startswith('#') or not line.strip(): # skip comments
                continue

            if header == 2: # parameters, N_MIN, N_MAX, NTIMES, SP_ORDER, N_STEPS (not used)
                 header -= 1
                 continue

            if header == 1: # read years
                 times = yearfrac_to_datetime(list(map(float, line.split())))
                 header -= 1
                 continue

            key = tuple(map(int, line.split()[:2]))
            coeffdict[key] = np.array(list(map(float, line.split()[2:])))

    g = {key:coeffdict[key] for key in coeffdict.keys() if key[1] >= 0}
    h = {(key[0], -key[1]):coeffdict[key] for key in coeffdict.keys() if key[1] < 0 }
    for key in [k for k in g.keys() if k[1] == 0]: # add zero coefficients for m = 0 in h dictionary
        h[key] = 0

    if len(g.keys()) != len(h.keys()):
        raise ModelStructureError('{}: g and h coefficients do not match'.format(filename))

    gdf = pd.DataFrame(g, index = times)
    hdf = pd.DataFrame(h, index = times)

    # make sure that the column keys of h are in same order as in g:
    hdf = hdf[gdf.columns]

    return gdf, hdf


def _coefficient_table(keys, g, h):
    """ (g, h) table in triangular order, with zeros for missing terms """
    N = max(n for n, m in keys)
    table = np.zeros((triangle(N + 1), 2))
    for (n, m), g_nm, h_nm in zip(keys, g, h):
        table[coefficient_index(n, m)] = g_nm, h_nm

    return N, table


def magnetic_model_from_shc(filename, epoch, reference_radius = RE):
    """
    Make magnetic field model from .shc file

    The field at epoch is interpolated linearly between the models in
    the file, and the secular variation is the slope of the interval
    that contains epoch. Epochs outside the file are extrapolated from
    the first or last interval.

    Parameters
    ----------
    filename : string
        filename of .shc file, with at least two models
    epoch : float
        epoch of returned model, as fraction of year
    reference_radius : float, optional
        reference radius [km]. Default is geomagnetic reference radius

    Returns
    -------
    model : MagneticModel
        magnetic field model with epoch
    """

    g, h = read_shc(filename)

    times = np.array([datetime_to_yearfrac(t) for t in g.index])
    if times.size < 2:
        raise ModelStructureError('{}: at least two models are needed to get secular variation'.format(filename))

    if epoch < times[0] or epoch > times[-1]:
        logger.warning('epoch %s not covered by coefficient file (%s to %s)', epoch, times[0], times[-1])

    # interval containing epoch:
    i = int(np.clip(np.searchsorted(times, epoch, side = 'right') - 1, 0, times.size - 2))
    dt = times[i + 1] - times[i]

    gv, hv = g.values, h.values
    dg, dh = (gv[i + 1] - gv[i]) / dt, (hv[i + 1] - hv[i]) / dt
    g0, h0 = gv[i] + dg * (epoch - times[i]), hv[i] + dh * (epoch - times[i])

    keys = list(g.columns)
    N, field = _coefficient_table(keys, g0, h0)
    N, sv    = _coefficient_table(keys, dg, dh)
    logger.debug('read degree %d model from %s at epoch %s', N, filename, epoch)

    return MagneticModel(SphericalHarmonicModel(N, reference_radius, field),
                         SphericalHarmonicModel(N, reference_radius, sv),
                         epoch = epoch)


# IGRF, 11th generation. Epoch is January 1st, 2010
_igrf11_field = [(0, 0),
    (-29496.5, 0), (-1585.9, 4945.1),
    (-2396.6, 0), (3026.0, -2707.7), (1668.6, -575.4),
    (1339.7, 0), (-2326.3, -160.5), (1231.7, 251.7), (634.2, -536.8),
    (912.6, 0), (809.0, 286.5), (166.6, -211.2), (-357.1, 164.4), (89.7, -309.2),
    (-231.1, 0), (357.2, 44.7), (200.3, 188.9), (-141.2, -118.1), (-163.1, 0.1), (-7.7, 100.9),
    (72.8, 0), (68.6, -20.8), (76.0, 44.2), (-141.4, 61.5), (-22.9, -66.3), (13.1, 3.1), (-77.9, 54.9),
    (80.4, 0), (-75.0, -57.8), (-4.7, -21.2), (45.3, 6.6), (14.0, 24.9), (10.4, 7.0), (1.6, -27.7), (4.9, -3.4),
    (24.3, 0), (8.2, 10.9), (-14.5, -20.0), (-5.7, 11.9), (-19.3, -17.4), (11.6, 16.7), (10.9, 7.1), (-14.1, -10.8), (-3.7, 1.7),
    (5.4, 0), (9.4, -20.5), (3.4, 11.6), (-5.3, 12.8), (3.1, -7.2), (-12.4, -7.4), (-0.8, 8.0), (8.4, 2.2), (-8.4, -6.1), (-10.1, 7.0),
    (-2.0, 0), (-6.3, 2.8), (0.9, -0.1), (-1.1, 4.7), (-0.2, 4.4), (2.5, -7.2), (-0.3, -1.0), (2.2, -4.0), (3.1, -2.0), (-1.0, -2.0), (-2.8, -8.3),
    (3.0, 0), (-1.5, 0.1), (-2.1, 1.7), (1.6, -0.6), (-0.5, -1.8), (0.5, 0.9), (-0.8, -0.4), (0.4, -2.5), (1.8, -1.3), (0.2, -2.1), (0.8, -1.9), (3.8, -1.8),
    (-2.1, 0), (-0.2, -0.8), (0.3, 0.3), (1.0, 2.2), (-0.7, -2.5), (0.9, 0.5), (-0.1, 0.6), (0.5, 0.0), (-0.4, 0.1), (-0.4, 0.3), (0.2, -0.9), (-0.8, -0.2), (0.0, 0.8),
    (-0.2, 0), (-0.9, -0.8), (0.3, 0.3), (0.4, 1.7), (-0.4, -0.6), (1.1, -1.2), (-0.3, -0.1), (0.8, 0.5), (-0.2, 0.1), (0.4, 0.5), (0.0, 0.4), (0.4, -0.2), (-0.3, -0.5), (-0.3, -0.8),
]

_igrf11_sv = [(0, 0),
    (11.4, 0), (16.7, -28.8),
    (-11.3, 0), (-3.9, -23.0), (2.7, -12.9),
    (1.3, 0), (-3.9, 8.6), (-2.9, -2.9), (-8.1, -2.1),
    (-1.4, 0), (2.0, 0.4), (-8.9, 3.2), (4.4, 3.6), (-2.3, -0.8),
    (-0.5, 0), (0.5, 0.5), (-1.5, 1.5), (-0.7, 0.9), (1.3, 3.7), (1.4, -0.6),
    (-0.3, 0), (-0.3, -0.1), (-0.3, -2.1), (1.9, -0.4), (-1.6, -0.5), (-0.2, 0.8), (1.8, 0.5),
    (0.2, 0), (-0.1, 0.6), (-0.6, 0.3), (1.4, -0.2), (0.3, -0.1), (0.1, -0.8), (-0.8, -0.3), (0.4, 0.2),
    (-0.1, 0), (0.1, 0.0), (-0.5, 0.2), (0.3, 0.5), (-0.3, 0.4), (0.3, 0.1), (0.2, -0.1), (-0.5, 0.4), (0.2, 0.4),
]

igrf11 = MagneticModel(SphericalHarmonicModel(13, RE, _igrf11_field),
                       SphericalHarmonicModel(8, RE, _igrf11_sv),
                       epoch = IGRF11_EPOCH)
