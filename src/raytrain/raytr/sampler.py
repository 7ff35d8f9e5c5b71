#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2020 Michael J. Hayford
"""Various generators and utilities for producing 2d distributions

    The generators yield (y, z) offsets in the transverse plane of a light
    source, or unit directions around the source's +X axis.

.. Created on Tue Mar 24 21:14:31 2020

.. codeauthor: Michael J. Hayford
"""

import math
import numpy as np


def line_generator(num, width, dial=0.):
    """Generator function for `num` points evenly spaced along a line.

    arguments:
        num: number of points
        width: full length of the line
        dial: clockwise angle of the line from +z, in degrees
    """
    dial_rad = math.radians(dial + 90.)
    dy, dz = math.cos(dial_rad), math.sin(dial_rad)
    for i in range(num):
        t = 2*i/(num - 1) - 1 if num > 1 else 0.
        offset = t*width/2
        yield np.array([offset*dy, offset*dz])


def ring_generator(num, radius, aspect=1., dial=0.):
    """Generator function for `num` points on an elliptical ring.

    arguments:
        num: number of points
        radius: semi-major axis of the ring
        aspect: width/height ratio; the larger axis has length `radius`
        dial: rotation of the ring, in degrees
    """
    w, h = 1., 1.
    if aspect > 1.:
        h /= aspect
    elif aspect < 1.:
        w *= aspect
    c, s = math.cos(math.radians(dial)), math.sin(math.radians(dial))
    for i in range(num):
        theta = 2*math.pi*i/num
        y = radius*w*math.cos(theta)
        z = radius*h*math.sin(theta)
        yield np.array([y*c - z*s, y*s + z*c])


# Using the above nested radical formula for g=phi_d
# or you could just hard-code it.
# phi(1) = 1.61803398874989484820458683436563
# phi(2) = 1.32471795724474602596090885447809
def phi(d):
    x = 2.0000
    for i in range(10):
        x = pow(1+x, 1/(d+1))
    return x


def R_2_quasi_random_generator(n):
    """A 2d sequence based on a R**2 quasi-random sequence

    See `The Unreasonable Effectiveness of Quasirandom Sequences
    <http://extremelearning.com.au/unreasonable-effectiveness-of-quasirandom-sequences/ >`
    """
    d = 2
    g = phi(d)
    alpha = np.array([pow(1/g, j+1) % 1 for j in range(d)])
    seed = 0.5
    for i in range(n):
        yield (seed + alpha*(i+1)) % 1


def concentric_sample_disk(u, offset=True):
    """Map a 2d unit square sample to the unit disk."""
    if offset:
        uOffset = 2*u - np.array([1, 1])
    else:
        uOffset = u

    if uOffset[0] == 0 and uOffset[1] == 0:
        return np.array([0., 0.])

    if abs(uOffset[0]) > abs(uOffset[1]):
        r = uOffset[0]
        theta = np.pi/4 * (uOffset[1]/uOffset[0])
    else:
        r = uOffset[1]
        theta = np.pi/2 - np.pi/4 * (uOffset[0]/uOffset[1])

    return r*np.array([math.cos(theta), math.sin(theta)])


def uniform_disk_generator(num, radius):
    """Generator function for `num` quasi-random points filling a disk.

    The first point is the center of the disk.
    """
    if num > 0:
        yield np.array([0., 0.])
    for u in R_2_quasi_random_generator(num - 1):
        yield radius*concentric_sample_disk(u)


def gaussian_generator(num, half_e_sqr, rng):
    """Generator function for `num` normally distributed points.

    arguments:
        num: number of points
        half_e_sqr: radius at which the intensity falls to 1/e**2 of peak
        rng: a :class:`numpy.random.Generator`
    """
    sigma = half_e_sqr/2
    for yz in rng.normal(0., sigma, size=(num, 2)):
        yield yz


def cone_dir_generator(num, divergence, rng):
    """Generator function for `num` directions filling a cone about +X.

    arguments:
        num: number of directions
        divergence: cone half angle in radians; 0 gives +X only
        rng: a :class:`numpy.random.Generator`
    """
    for i in range(num):
        if divergence <= 0.:
            yield np.array([1., 0., 0.])
            continue
        theta = 2*math.pi*rng.random()
        cos_phi = 1 - rng.random()*(1 - math.cos(divergence))
        sin_phi = math.sqrt(1 - cos_phi*cos_phi)
        yield np.array([cos_phi,
                        sin_phi*math.cos(theta),
                        sin_phi*math.sin(theta)])
