#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2020 Michael J. Hayford
"""Evaluation and spot analysis of traced systems

    The following are implemented in this module:

        - :func:`~.evaluate`: trace a system and return the valid hits on
          target surfaces; the entry point used by outer optimizers
        - :class:`~.SpotDiagram`: the transverse hit pattern on a surface
        - :func:`~.best_focus`: search a scalar system parameter for the
          smallest RMS spot

    Every evaluation traces with a freshly created collector; nothing is
    carried from one evaluation to the next.

.. Created on Sat Feb 22 22:01:56 2020

.. codeauthor: Michael J. Hayford
"""
import logging

import attr
import numpy as np
from scipy.optimize import minimize_scalar

from raytrain.raytr.collector import HitCollector, RayAccounting

logger = logging.getLogger(__name__)


@attr.s(frozen=True, eq=False)
class TargetHits():
    """ the unblocked hits on one target surface

    Attributes:
        num_id: surface numeric id
        label: surface id string
        pts: (N, 3) hit points, world coordinates
        nrmls: (N, 3) unit normals at **pts**, world coordinates
        local_pts: (N, 3) hit points, local coordinates of the surface
        wvls: (N,) wavelengths of the hitting rays
        light_ids: list of light source ids of the hitting rays
    """
    num_id: int = attr.ib()
    label: str = attr.ib()
    pts = attr.ib()
    nrmls = attr.ib()
    local_pts = attr.ib()
    wvls = attr.ib()
    light_ids: list = attr.ib()

    def __len__(self):
        return len(self.pts)

    def cross_sections(self):
        """ (N, 2) local transverse (y, z) coordinates of the hits """
        return self.local_pts[:, 1:]


def target_hits(collector, sur) -> TargetHits:
    """ gather the unblocked hits on `sur` from `collector` """
    hits = collector.hits_at(sur.num_id)
    return TargetHits(sur.num_id, sur.label,
                      np.array([h.pt for h in hits]).reshape(-1, 3),
                      np.array([h.nrml for h in hits]).reshape(-1, 3),
                      np.array([h.local_pt for h in hits]).reshape(-1, 3),
                      np.array([h.wvl for h in hits]),
                      [h.light_id for h in hits])


def evaluate(system, rays=None, targets=None) -> dict[int, TargetHits]:
    """ trace `rays` through `system`, returning the valid hits per target

    Args:
        system: an :class:`~.OpticalSystem`
        rays: the rays to trace, by default those of the light sources
        targets: surface num_ids or labels; by default the last surface

    Returns:
        `dict` of surface num_id -> :class:`TargetHits`
    """
    if targets is None:
        targets = [system.surfaces[-1].num_id]
    collector = HitCollector()
    accounting = RayAccounting()
    system.trace(rays, collector=collector, accounting=accounting)
    results = {}
    for key in targets:
        sur = system.surface(key)
        results[sur.num_id] = target_hits(collector, sur)
    logger.debug("evaluate: %s", {k: len(v) for k, v in results.items()})
    return results


def spot_centroid(pts):
    """ centroid of an (N, 2) or (N, 3) array of points """
    pts = np.asarray(pts, dtype=float)
    if len(pts) == 0:
        raise ValueError("no points to compute a centroid of")
    return pts.mean(axis=0)


def rms_spot_size(pts, centroid=None):
    """ RMS distance of `pts` from `centroid`, the centroid by default """
    pts = np.asarray(pts, dtype=float)
    if centroid is None:
        centroid = spot_centroid(pts)
    return float(np.sqrt(np.mean(np.sum((pts - centroid)**2, axis=1))))


class SpotDiagram():
    """The transverse hit pattern of a system on one surface.

    Attributes:
        system: :class:`~.OpticalSystem` instance
        target: num_id or label of the surface to collect hits on
        rays: the rays to trace, or None to use the light sources
        wvl: restrict the spot to this wavelength, if given
    """

    def __init__(self, system, target=None, rays=None, wvl=None):
        self.system = system
        self.target = (target if target is not None
                       else system.surfaces[-1].num_id)
        self.rays = rays
        self.wvl = wvl
        self.update_data()

    def update_data(self, **kwargs):
        """Trace the rays and gather the spot. """
        sur = self.system.surface(self.target)
        hits = evaluate(self.system, self.rays, [sur.num_id])[sur.num_id]
        yz = hits.cross_sections()
        if self.wvl is not None:
            yz = yz[np.isclose(hits.wvls, self.wvl)]
        self.spot = yz
        return self

    def centroid(self):
        return spot_centroid(self.spot)

    def rms(self):
        return rms_spot_size(self.spot)


def best_focus(build_system, bounds, rays=None, target=None, **kwargs):
    """ find the parameter value that minimizes the RMS spot on `target`

    Args:
        build_system: callable taking the scalar parameter and returning a
            freshly built :class:`~.OpticalSystem`
        bounds: (lower, upper) limits of the parameter
        rays: the rays to trace, or None to use the light sources
        target: surface num_id or label; defaults to the last surface
        kwargs: passed to :func:`scipy.optimize.minimize_scalar`

    Returns:
        (**x**, **rms**) the best parameter value and its RMS spot size
    """
    def rms_at(x):
        sys = build_system(x)
        tgt = target if target is not None else sys.surfaces[-1].num_id
        hits = evaluate(sys, rays, [tgt])
        yz = next(iter(hits.values())).cross_sections()
        if len(yz) == 0:
            return np.inf
        return rms_spot_size(yz)

    options = kwargs.pop('options', {'xatol': 1e-6})
    res = minimize_scalar(rms_at, bounds=bounds, method='bounded',
                          options=options, **kwargs)
    return res.x, res.fun
