#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2017 Michael J. Hayford
""" Module for different surface profile shapes

    The profiles module captures the geometric shape aspect of a surface.
    The :class:`~.SurfaceProfile` base class specifies an api that
    subclasses implement to provide different shapes.

    All profiles work in the surface's local frame: the vertex is at the
    origin, +X is the optical axis and (y, z) are the transverse
    coordinates. A curved profile has its center of curvature at (R, 0, 0),
    so a positive radius is convex toward light arriving from -X.

.. Created on Tue Aug  1 13:18:57 2017

.. codeauthor: Michael J. Hayford
"""
import numpy as np
from math import sqrt

from raytrain.raytr.traceerror import TraceMissedSurfaceError


def _roots(a, b, c):
    """ the real roots of a*t**2 + 2*b*t + c = 0, unsorted

    Uses the c/(-b -/+ sqrt(b*b - a*c)) form, which stays well behaved as
    `a` goes to zero.
    """
    disc = b*b - a*c
    if disc < 0.0:
        return []
    sqrt_disc = sqrt(disc)
    roots = []
    for den in (-b - sqrt_disc, -b + sqrt_disc):
        if den != 0.0:
            roots.append(c/den)
    return roots


class SurfaceProfile:
    """Base class for surface profiles. """

    def __repr__(self):
        return "{!s}()".format(type(self).__name__)

    def listobj_str(self):
        return f"profile: {type(self).__name__}\n"

    def intersect(self, p, d, eps=1.0e-12):
        """ Intersect the profile with a ray.

        Args:
            p: start point of the ray in the profile's coordinate system
            d: direction cosines of the ray in the profile's coordinate system
            eps: smallest distance along the ray accepted as a hit

        Returns:
            (**s1**, **p1**)

            - **s1** - distance along the ray to the intersection point
            - **p1** - intersection point, local coordinates

        Raises:
            TraceMissedSurfaceError
        """
        raise NotImplementedError

    def normal(self, p):
        """Returns the unit normal of the profile at point `p`. """
        raise NotImplementedError

    def sag(self, y, z):
        """Returns the axial (x) coordinate of the profile at (`y`, `z`). """
        raise NotImplementedError


class Planar(SurfaceProfile):
    """ A flat profile, the local x = 0 plane """

    def intersect(self, p, d, eps=1.0e-12):
        if abs(d[0]) < eps:
            raise TraceMissedSurfaceError
        s = -p[0]/d[0]
        if s <= eps:
            raise TraceMissedSurfaceError
        p1 = p + s*d
        p1[0] = 0.
        return s, p1

    def normal(self, p):
        return np.array([-1., 0., 0.])

    def sag(self, y, z):
        return 0.0*np.asarray(y, dtype=float)


class Spherical(SurfaceProfile):
    """ Spherical surface profile parameterized by curvature.

    The sag :math:`x` is given by:

    :math:`x = R - \\sqrt{R^2 - y^2 - z^2}`

    where :math:`R = 1/c`
    """

    def __init__(self, c=0.0, r=None):
        """ initialize a Spherical profile.

        Args:
            c: curvature
            r: radius of curvature. If zero, taken as planar. If r is
                specified, it overrides any input for c (curvature).
        """
        if r is not None:
            self.r = r
        else:
            self.cv = c

    @property
    def r(self):
        if self.cv != 0.0:
            return 1.0/self.cv
        else:
            return 0.0

    @r.setter
    def r(self, radius):
        if radius:
            self.cv = 1.0/radius
        else:
            self.cv = 0.0

    def __repr__(self):
        return "{!s}(c={})".format(type(self).__name__, self.cv)

    def listobj_str(self):
        o_str = f"profile: {type(self).__name__}\n"
        o_str += f"c={self.cv},   r={self.r}\n"
        return o_str

    def _coefs(self, p, d):
        # cv*|q|**2 - 2*q.x = 0 on the surface, with q = p + s*d
        a = self.cv
        b = self.cv*np.dot(d, p) - d[0]
        c = self.cv*np.dot(p, p) - 2.0*p[0]
        return a, b, c

    def intersect(self, p, d, eps=1.0e-12):
        ''' Intersection with the vertex side cap of the sphere. '''
        hits = []
        for s in _roots(*self._coefs(p, d)):
            if s > eps:
                p1 = p + s*d
                # reject the far half of the sphere
                if self.cv*p1[0] < 1.0:
                    hits.append((s, p1))
        if len(hits) == 0:
            raise TraceMissedSurfaceError
        return min(hits, key=lambda h: h[0])

    def normal(self, p):
        return np.array([self.cv*p[0] - 1.0, self.cv*p[1], self.cv*p[2]])

    def sag(self, y, z):
        rho_sqr = np.asarray(y, dtype=float)**2 + np.asarray(z)**2
        return self.cv*rho_sqr/(1.0 + np.sqrt(1.0 - self.cv**2*rho_sqr))


class Cylindrical(Spherical):
    """ Cylindrical profile, curved in the x-y plane, straight along z.

    The sag :math:`x` is given by:

    :math:`x = R - \\sqrt{R^2 - y^2}`
    """

    def _coefs(self, p, d):
        a = self.cv*(d[0]*d[0] + d[1]*d[1])
        b = self.cv*(d[0]*p[0] + d[1]*p[1]) - d[0]
        c = self.cv*(p[0]*p[0] + p[1]*p[1]) - 2.0*p[0]
        return a, b, c

    def normal(self, p):
        return np.array([self.cv*p[0] - 1.0, self.cv*p[1], 0.])

    def sag(self, y, z):
        y_sqr = np.asarray(y, dtype=float)**2
        return self.cv*y_sqr/(1.0 + np.sqrt(1.0 - self.cv**2*y_sqr))


def create_profile(shape, radius=None):
    """ return a profile instance for `shape`, or None if it's unknown """
    if shape in ('plano', 'flat') or not radius:
        return Planar() if shape in profile_types else None
    if shape == 'spherical':
        return Spherical(r=radius)
    if shape == 'cylindrical':
        return Cylindrical(r=radius)
    return None


profile_types = ('plano', 'flat', 'spherical', 'cylindrical')
