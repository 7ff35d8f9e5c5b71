#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2017 Michael J. Hayford
""" Module for optical surface related classes

    Surface
        Immutable record of the shape, aperture, placement, interaction mode
        and material description of one surface in an optical train

    Aperture
        - Circular
        - Rectangular

.. Created on Sat Sep 16 09:22:05 2017

.. codeauthor: Michael J. Hayford
"""
import logging
from math import sqrt

import attr
import numpy as np

from raytrain.elem.profiles import SurfaceProfile
from raytrain.elem.transform import Tfm4d
from raytrain.raytr.traceerror import TraceMissedSurfaceError
from raytrain.typing import ShapeType, InteractMode, MaterialSpec
from raytrain.coord_geometry_types import Vec3d, Dir3d

logger = logging.getLogger(__name__)


class Aperture():
    """ Base class for apertures in the local transverse (y, z) plane """

    def dimension(self):
        pass

    def max_dimension(self):
        y, z = self.dimension()
        return sqrt(y*y + z*z)

    def point_inside(self, y: float, z: float, fuzz: float = 1e-5) -> bool:
        pass

    def corners(self):
        """ the (y, z) corners of the aperture's bounding rectangle """
        hy, hz = self.dimension()
        return np.array([[hy, hz], [-hy, hz], [-hy, -hz], [hy, -hz]])

    def edge_points(self, num_pts: int = 36):
        """ closed list of (y, z) points around the aperture boundary """
        pass


@attr.s(frozen=True)
class Circular(Aperture):
    radius: float = attr.ib(converter=float)

    def listobj_str(self):
        return f"ca: radius={self.radius}\n"

    def dimension(self):
        return (self.radius, self.radius)

    def max_dimension(self):
        return self.radius

    def point_inside(self, y: float, z: float, fuzz: float = 1e-5) -> bool:
        return sqrt(y*y + z*z) <= self.radius + fuzz

    def edge_points(self, num_pts: int = 36):
        theta = np.linspace(0., 2*np.pi, num_pts + 1)
        return np.column_stack((self.radius*np.cos(theta),
                                self.radius*np.sin(theta)))


@attr.s(frozen=True)
class Rectangular(Aperture):
    y_half_width: float = attr.ib(converter=float)
    z_half_width: float = attr.ib(converter=float)

    def listobj_str(self):
        return (f"ca: {type(self).__name__}: y_half_width={self.y_half_width}"
                f"   z_half_width={self.z_half_width}\n")

    def dimension(self):
        return (self.y_half_width, self.z_half_width)

    def point_inside(self, y: float, z: float, fuzz: float = 1e-5) -> bool:
        return (abs(y) <= self.y_half_width + fuzz
                and abs(z) <= self.z_half_width + fuzz)

    def edge_points(self, num_pts: int = 36):
        # distribute the points along the 4 sides, corners included
        n_side = max(1, num_pts//4)
        crnrs = np.vstack((self.corners(), self.corners()[:1]))
        pts = []
        for c0, c1 in zip(crnrs[:-1], crnrs[1:]):
            for f in np.linspace(0., 1., n_side, endpoint=False):
                pts.append(c0 + f*(c1 - c0))
        pts.append(crnrs[-1])
        return np.array(pts)


def parse_wvl_sel(sel: str | None):
    """ parse a wavelength selector, e.g. 'o488-x532-o633'

    Returns:
        (**only**, **excluded**) tuples of wavelengths in nm. An `o` token
        restricts the surface to the listed wavelengths, an `x` token makes
        the surface transparent to that wavelength.
    """
    only, excluded = [], []
    if not sel:
        return (), ()
    for tok in str(sel).split('-'):
        tok = tok.strip()
        if len(tok) < 2 or tok[0] not in 'ox':
            logger.warning("ignoring wavelength selector token '%s'", tok)
            continue
        try:
            wvl = float(tok[1:])
        except ValueError:
            logger.warning("ignoring wavelength selector token '%s'", tok)
            continue
        (only if tok[0] == 'o' else excluded).append(wvl)
    return tuple(only), tuple(excluded)


def _wvl_in(wvl, wvls, tol=1e-6):
    return any(abs(wvl - w) <= tol for w in wvls)


@attr.s(frozen=True, eq=False)
class Surface():
    """ Container of shape, aperture, placement and interaction data.

    A Surface is created by :class:`~.factory.SurfaceFactory` and not
    modified afterward. The transform pair is always computed together: the
    forward transform is the matrix inverse of the inverse transform.

    Attributes:
        label: the surface id string
        num_id: insertion order numeric id, assigned once by the factory
        shape: 'plano', 'flat', 'spherical' or 'cylindrical'
        profile: :class:`~.profiles.SurfaceProfile`
        aperture: :class:`Circular` or :class:`Rectangular`
        interact_mode: 'refraction', 'reflection', 'absorption', 'aperture',
            'partial' or 'block'
        position: world position of the vertex
        normal: unit surface normal at the vertex, world coordinates
        tfrm_fwd: world -> local :class:`~.transform.Tfm4d`
        tfrm_inv: local -> world :class:`~.transform.Tfm4d`
        radius: signed radius of curvature, None if flat
        dial: rotation of the aperture about the normal, degrees; for an
            assembly member, relative to the assembly frame
        angles: (azimuth, elevation) in degrees, if the normal came from them;
            for an assembly member, relative to the assembly frame
        n1: material spec before the surface, a number or a material name
        n2: material spec after the surface
        transmission: transmitted fraction for 'partial' surfaces
        wvl_only: wavelengths this surface is restricted to, if any
        wvl_excluded: wavelengths this surface doesn't interact with
        assembly: name of the assembly this surface came from, if any
        element_index: position of the surface within its assembly
        assembly_dial: dial of the assembly this surface came from
    """
    label: str = attr.ib()
    num_id: int = attr.ib()
    shape: ShapeType = attr.ib()
    profile: SurfaceProfile = attr.ib()
    aperture: Aperture = attr.ib()
    interact_mode: InteractMode = attr.ib()
    position: Vec3d = attr.ib()
    normal: Dir3d = attr.ib()
    tfrm_fwd: Tfm4d = attr.ib()
    tfrm_inv: Tfm4d = attr.ib()
    radius: float | None = attr.ib(default=None)
    dial: float | None = attr.ib(default=None)
    angles: tuple | None = attr.ib(default=None)
    n1: MaterialSpec = attr.ib(default=None)
    n2: MaterialSpec = attr.ib(default=None)
    transmission: float | None = attr.ib(default=None)
    wvl_only: tuple = attr.ib(default=())
    wvl_excluded: tuple = attr.ib(default=())
    assembly: str | None = attr.ib(default=None)
    element_index: int | None = attr.ib(default=None)
    assembly_dial: float | None = attr.ib(default=None)

    def __attrs_post_init__(self):
        for a in (self.position, self.normal):
            a.flags.writeable = False

    def __repr__(self):
        return ("{!s}(lbl={!r}, num_id={}, profile={!r}, interact_mode='{!s}')"
                .format(type(self).__name__, self.label, self.num_id,
                        self.profile, self.interact_mode))

    def listobj_str(self):
        o_str = f"{self.num_id}: {self.label}  {self.shape}  "
        o_str += f"{self.interact_mode}\n"
        o_str += self.profile.listobj_str()
        o_str += self.aperture.listobj_str()
        p, n = self.position, self.normal
        o_str += f"position: {p[0]:.6g} {p[1]:.6g} {p[2]:.6g}\n"
        o_str += f"normal: {n[0]:.6g} {n[1]:.6g} {n[2]:.6g}"
        if self.dial:
            o_str += f"   dial={self.dial}"
        o_str += "\n"
        if self.assembly is not None:
            o_str += f"assembly: {self.assembly}[{self.element_index}]"
            if self.assembly_dial:
                o_str += f"   dial={self.assembly_dial}"
            o_str += "\n"
        return o_str

    def interacts_with(self, wvl: float) -> bool:
        """ True unless the wavelength selector excludes `wvl` """
        if self.wvl_only and not _wvl_in(wvl, self.wvl_only):
            return False
        return not _wvl_in(wvl, self.wvl_excluded)

    def point_inside(self, y: float, z: float, fuzz: float = 1e-5) -> bool:
        return self.aperture.point_inside(y, z, fuzz=fuzz)

    def to_local(self, pt, d):
        """ transform a world point and direction into the local frame """
        return (self.tfrm_fwd.transform_point(pt),
                self.tfrm_fwd.transform_vector(d))

    def intersect(self, pt, d, eps=1.0e-12):
        """ intersect a world space ray with the surface's profile

        Returns:
            (**s**, **p_lcl**, **d_lcl**, **n_lcl**): distance along the ray,
            local hit point, local direction and local unit normal

        Raises:
            TraceMissedSurfaceError: if the profile isn't hit
        """
        p0, d0 = self.to_local(pt, d)
        try:
            s, p1 = self.profile.intersect(p0, d0, eps=eps)
        except TraceMissedSurfaceError as tmse:
            tmse.sur = self
            raise tmse
        return s, p1, d0, self.profile.normal(p1)
