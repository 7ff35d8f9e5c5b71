#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2020 Michael J. Hayford
""" Light sources that generate finite lists of rays

    A :class:`LightSource` lays out ray starting points, or directions for
    a point source, in its own frame, where +X is the emission direction,
    and maps them to world space.

.. Created on Wed Apr  8 16:31:45 2020

.. codeauthor: Michael J. Hayford
"""
import logging

import attr
import numpy as np

from raytrain.raytr import Ray
from raytrain.raytr import sampler
from raytrain.typing import LOCAL_AXIS
from raytrain.util.misc_math import normalize, upright_rot
from raytrain.util.spectral_lines import get_wavelength

logger = logging.getLogger(__name__)

source_types = ('point', 'linear', 'ring', 'uniform', 'gaussian')


def angles2dir(az, el):
    """ emission direction for azimuth `az` and elevation `el` in degrees """
    az_r, el_r = np.deg2rad(az), np.deg2rad(el)
    return np.array([np.cos(az_r)*np.cos(el_r),
                     np.sin(az_r)*np.cos(el_r),
                     np.sin(el_r)])


def _param_list(param):
    if param is None:
        return []
    if isinstance(param, (list, tuple)):
        return list(param)
    return [param]


@attr.s
class LightSource():
    """ a source of rays at one wavelength

    Attributes:
        lid: light source id, carried by every ray generated
        position: world position of the source
        direction: emission direction, world coordinates
        wvl: wavelength in nm; spectral line names are accepted
        number: number of rays to generate
        src_type: one of 'point', 'linear', 'ring', 'uniform', 'gaussian'
        param: pattern parameters, see :meth:`local_rays`
        intensity: intensity of each generated ray
        seed: seed for the random patterns, 'gaussian' and 'point'
    """
    lid = attr.ib()
    position = attr.ib(converter=lambda p: np.array(p, dtype=float))
    direction = attr.ib(converter=normalize)
    wvl: float = attr.ib(converter=get_wavelength)
    number: int = attr.ib(default=1)
    src_type: str = attr.ib(default='linear')
    param = attr.ib(factory=list, converter=_param_list)
    intensity: float = attr.ib(default=1.0)
    seed: int = attr.ib(default=0)

    @src_type.validator
    def _check_type(self, attribute, value):
        if value not in source_types:
            raise ValueError(f"light source {self.lid}: unknown type "
                             f"'{value}'")

    @classmethod
    def from_spec(cls, spec, lid=None):
        """ create a light source from a request `dict`

        The keys are **lid**, **position**, **vector** or **angles**,
        **wavelength**, **number**, **type**, **param**, **intensity** and
        **seed**.
        """
        lid = spec.get('lid', lid)
        if 'vector' in spec:
            direction = spec['vector']
        elif 'angles' in spec:
            direction = angles2dir(*spec['angles'])
        else:
            direction = (1., 0., 0.)
        return cls(lid, spec.get('position', (0., 0., 0.)), direction,
                   spec.get('wavelength', 'd'),
                   number=int(spec.get('number', 1)),
                   src_type=spec.get('type', 'linear'),
                   param=spec.get('param'),
                   intensity=float(spec.get('intensity', 1.0)),
                   seed=int(spec.get('seed', 0)))

    def rot(self):
        """ rotation taking the source's +X axis onto `direction` """
        return upright_rot(-self.direction)

    def local_rays(self):
        """ return the (points, directions) of the rays in the source frame

        The `param` list is interpreted per `src_type`:

            - linear: [width, dial], defaults [20, 0]
            - ring: [radius, aspect, dial], defaults [20, 1, 0]
            - uniform: [radius], default [20]
            - gaussian: [1/e**2 radius], default [20]
            - point: [divergence half angle in radians], default [0]
        """
        p = self.param
        num = self.number
        rng = np.random.default_rng(self.seed)
        dirs = None
        if self.src_type == 'linear':
            gen = sampler.line_generator(num, *(p + [20., 0.][len(p):]))
        elif self.src_type == 'ring':
            gen = sampler.ring_generator(num, *(p + [20., 1., 0.][len(p):]))
        elif self.src_type == 'uniform':
            gen = sampler.uniform_disk_generator(num, (p + [20.])[0])
        elif self.src_type == 'gaussian':
            gen = sampler.gaussian_generator(num, (p + [20.])[0], rng)
        else:
            gen = (np.zeros(2) for i in range(num))
            dirs = np.array(list(
                sampler.cone_dir_generator(num, (p + [0.])[0], rng)))
        yz = np.array(list(gen)).reshape(-1, 2)
        pts = np.column_stack((np.zeros(len(yz)), yz))
        if dirs is None:
            dirs = np.tile(LOCAL_AXIS, (len(yz), 1))
        return pts, dirs

    def generate_rays(self) -> list[Ray]:
        """ return the rays of this source in world coordinates """
        rot = self.rot()
        pts, dirs = self.local_rays()
        world_pts = pts @ rot.T + self.position
        world_dirs = dirs @ rot.T
        rays = [Ray(pt, d, self.wvl, light_id=self.lid,
                    intensity=self.intensity, ray_id=f"{self.lid}-{i}")
                for i, (pt, d) in enumerate(zip(world_pts, world_dirs))]
        logger.debug("light source %s: %d %s rays at %s nm", self.lid,
                     len(rays), self.src_type, self.wvl)
        return rays
