#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2017 Michael J. Hayford
""" Functions to support sequential ray tracing through a list of surfaces

    Rays visit the surfaces strictly in the order given, the optical train
    order, regardless of which surface is geometrically nearest.

.. Created on Thu Jan 25 11:01:04 2017

.. codeauthor: Michael J. Hayford
"""
import logging
from math import sqrt, copysign

import numpy as np
from numpy.linalg import norm

from raytrain.raytr import Ray, RaySeg, RayPath, TraceState
from raytrain.raytr.collector import HitRecord
from raytrain.raytr.traceerror import (TraceMissedSurfaceError, TraceTIRError,
                                       TraceRayBlockedError)
from raytrain.util.misc_math import normalize

logger = logging.getLogger(__name__)

# surface modes that end a ray at a valid hit
_stop_states = {'absorption': TraceState.Absorbed,
                'block': TraceState.Blocked}


def bend(d_in, normal, n_in, n_out):
    """ refract incoming direction, d_in, about normal """
    try:
        normal_len = norm(normal)
        cosI = np.dot(d_in, normal)/normal_len
        sinI_sqr = 1.0 - cosI*cosI
        n_cosIp = copysign(sqrt(n_out*n_out - n_in*n_in*sinI_sqr), cosI)
        alpha = n_cosIp - n_in*cosI
        d_out = (n_in*d_in + alpha*normal/normal_len)/n_out
        return d_out
    except ValueError:
        raise TraceTIRError(d_in, normal, n_in, n_out)


def reflect(d_in, normal):
    """ reflect incoming direction, d_in, about normal """
    normal_len = norm(normal)
    cosI = np.dot(d_in, normal)/normal_len
    d_out = d_in - 2.0*cosI*normal/normal_len
    return d_out


def _hit(sur, ray, intensity, p_lcl, p_wld, n_wld, d_in, d_out, event,
         blocked=False):
    return HitRecord(sur.label, sur.num_id, ray.light_id, ray.ray_id,
                     ray.wvl, intensity, p_wld, n_wld, d_in, d_out, p_lcl,
                     event, blocked=blocked)


def trace_ray(surfaces, ray: Ray, rndx, collector=None, accounting=None,
              eps=1.0e-12, fuzz=1.0e-5) -> list[RayPath]:
    """ trace a ray through `surfaces`, in order

    Args:
        surfaces: list of :class:`~.surface.Surface`, in optical train order
        ray: the :class:`~.Ray` to trace
        rndx: :class:`~.medium.RefractiveIndexTable` for the surfaces
        collector: :class:`~.collector.HitCollector` receiving hit records
        accounting: :class:`~.collector.RayAccounting` receiving counts
        eps: smallest distance accepted as an intersection
        fuzz: tolerance on aperture boundaries

    Returns:
        list of :class:`~.RayPath`. The first is the path of `ray`; any
        others are branches created at partial surfaces.

    A miss, an aperture clip or a blocking surface ends the path as
    Blocked, an absorbing surface ends it as Absorbed, and a path that
    passes every surface ends as Exited. None of these raise. A missing
    index table entry does raise :class:`~.builderror.MissingWavelengthEntry`.

    A ray that meets a surface from behind refracts from the n2 side into
    the n1 side.
    """
    path = RayPath(ray, segs=[RaySeg(ray.pt, ray.dir, 0., None)])
    paths = [path]
    intensity = ray.intensity
    pt, d = ray.pt, ray.dir
    if accounting is not None:
        accounting.add_emitted(ray.light_id)

    for sur in surfaces:
        if not sur.interacts_with(ray.wvl):
            continue
        try:
            s, p_lcl, d_lcl, n_lcl = sur.intersect(pt, d, eps=eps)
            p_wld = sur.tfrm_inv.transform_point(p_lcl)
            n_wld = normalize(sur.tfrm_inv.transform_vector(n_lcl))
            path.segs[-1] = path.segs[-1]._replace(dst=s)

            if not sur.point_inside(p_lcl[1], p_lcl[2], fuzz=fuzz):
                raise TraceRayBlockedError(sur, p_wld)

        except TraceMissedSurfaceError as ray_miss:
            logger.debug("ray %s: missed surface '%s'", ray.ray_id,
                         ray_miss.sur.label)
            path.events.append((sur.num_id, TraceState.Blocked))
            path.state, path.stop_surf = TraceState.Blocked, sur.num_id
            break

        except TraceRayBlockedError as ray_blocked:
            path.segs.append(RaySeg(ray_blocked.int_pt, d, 0., n_wld))
            path.events.append((sur.num_id, TraceState.Blocked))
            path.state, path.stop_surf = TraceState.Blocked, sur.num_id
            if collector is not None:
                collector.record(_hit(sur, ray, intensity, p_lcl,
                                      ray_blocked.int_pt, n_wld, d, None,
                                      TraceState.Blocked, blocked=True))
            break

        n1, n2 = rndx.indices(sur.num_id, ray.wvl)
        if np.dot(d_lcl, n_lcl) > 0.0:
            # arriving from the n2 side
            n1, n2 = n2, n1
        mode = sur.interact_mode

        if mode in _stop_states:
            state = _stop_states[mode]
            path.segs.append(RaySeg(p_wld, d, 0., n_wld))
            path.events.append((sur.num_id, state))
            path.state, path.stop_surf = state, sur.num_id
            if collector is not None:
                collector.record(_hit(sur, ray, intensity, p_lcl, p_wld,
                                      n_wld, d, None, state,
                                      blocked=state == TraceState.Blocked))
            break

        if mode == 'aperture':
            d_out_lcl, event = d_lcl, TraceState.Hit
        elif mode == 'reflection':
            d_out_lcl, event = reflect(d_lcl, n_lcl), TraceState.Reflected
        else:
            try:
                d_out_lcl = bend(d_lcl, n_lcl, n1, n2)
                event = TraceState.Refracted
            except TraceTIRError as ray_tir:
                d_out_lcl = reflect(d_lcl, n_lcl)
                event = TraceState.Reflected
                logger.debug("ray %s: TIR at surface %d, n %.4f -> %.4f",
                             ray.ray_id, sur.num_id, ray_tir.prev_indx,
                             ray_tir.follow_indx)

        d_out = normalize(sur.tfrm_inv.transform_vector(d_out_lcl))
        out_intensity = intensity

        if mode == 'partial' and event == TraceState.Refracted:
            d_rfl = normalize(sur.tfrm_inv.transform_vector(
                reflect(d_lcl, n_lcl)))
            tau = sur.transmission
            child = ray.branch(p_wld, d_rfl, f"r{sur.num_id}",
                               intensity*(1.0 - tau))
            child_path = RayPath(child,
                                 segs=[RaySeg(p_wld, d_rfl, 0., n_wld)],
                                 events=[(sur.num_id, TraceState.Reflected)],
                                 state=TraceState.Exited,
                                 stop_surf=sur.num_id)
            paths.append(child_path)
            if collector is not None:
                collector.record(_hit(sur, child, intensity, p_lcl, p_wld,
                                      n_wld, d, d_rfl, TraceState.Reflected))
            if accounting is not None:
                accounting.add_branch(ray.light_id)
            out_intensity = intensity*tau

        if collector is not None:
            collector.record(_hit(sur, ray, intensity, p_lcl, p_wld, n_wld,
                                  d, d_out, event))
        intensity = out_intensity
        path.segs.append(RaySeg(p_wld, d_out, 0., n_wld))
        path.events.append((sur.num_id, event))
        pt, d = p_wld, d_out
    else:
        path.state = TraceState.Exited

    if accounting is not None:
        for p in paths:
            accounting.add_terminal(p.light_id, p.state)
    logger.debug("ray %s: %s at %s", ray.ray_id, path.state.name,
                 path.stop_surf)
    return paths


def trace_rays(surfaces, rays, rndx, collector=None, accounting=None,
               **kwargs) -> list[RayPath]:
    """ trace each of `rays` through `surfaces`; returns all paths """
    paths = []
    for ray in rays:
        paths.extend(trace_ray(surfaces, ray, rndx, collector=collector,
                               accounting=accounting, **kwargs))
    return paths
