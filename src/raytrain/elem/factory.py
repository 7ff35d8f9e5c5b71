#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2018 Michael J. Hayford
""" Construction of surfaces and assemblies from declarative requests

    A surface request is a `dict`, typically loaded from a YAML or JSON
    system description. The keys used are:

        - **label**: surface id string
        - **shape**: 'plano' (or 'flat'), 'spherical' or 'cylindrical'
        - **semidia**, or **width** and **height**: the aperture
        - **radius**: signed radius of curvature, curved shapes only
        - **mode**: interaction mode, see :data:`mode_aliases`
        - **n1**, **n2** (or **n1_material**, **n2_material**): material
          before and after the surface, a number or a material name
        - **transmission**: transmitted fraction for partial surfaces
        - **sel**: wavelength selector, e.g. 'o488-x532'

    Placement keys are **position**, **normal** or **angles** and **dial**.
    Assembly members use **relative** in place of **position**.

.. Created on Thu Oct 11 10:34:18 2018

.. codeauthor: Michael J. Hayford
"""
import itertools
import logging

import numpy as np

from raytrain.elem import profiles
from raytrain.elem.builderror import (UnknownSurfaceShape, UnknownInteractMode,
                                      MissingAperture,
                                      UnresolvedTemplateReference)
from raytrain.elem.surface import (Surface, Circular, Rectangular,
                                   parse_wvl_sel)
from raytrain.elem.transform import Tfm4d, local_to_world, tfrm_pair
from raytrain.typing import LOCAL_NORMAL
from raytrain.util.misc_math import normalize, angles2normal, isanumber

logger = logging.getLogger(__name__)

mode_aliases = {
    'refraction': 'refraction',
    'refract': 'refraction',
    'reflection': 'reflection',
    'reflect': 'reflection',
    'mirror': 'reflection',
    'absorption': 'absorption',
    'absorb': 'absorption',
    'detector': 'absorption',
    'aperture': 'aperture',
    'stop': 'aperture',
    'partial': 'partial',
    'beamsplitter': 'partial',
    'block': 'block',
    'inactive': 'block',
    }

def resolve_normal(normal=None, angles=None, label=None):
    """ return the unit normal from an explicit vector or an angle pair

    An explicit normal takes precedence over angles. With neither, the
    canonical normal (-1, 0, 0) is returned.
    """
    if normal is not None:
        n = normalize(np.array(normal, dtype=float))
        if np.linalg.norm(n) == 0.0:
            logger.warning("surface '%s': zero length normal, using default",
                           label)
            return np.array(LOCAL_NORMAL)
        return n
    if angles is not None:
        az, el = angles
        return angles2normal(float(az), float(el))
    return np.array(LOCAL_NORMAL)


def resolve_template(element, templates, key, where):
    """ merge a train element or assembly member with its referenced template

    Keys in `element` override those of the template. Elements without
    `key` are returned unchanged.

    Raises:
        UnresolvedTemplateReference: if the reference isn't in `templates`
    """
    if key not in element:
        return element
    ref = element[key]
    if templates is None or ref not in templates:
        raise UnresolvedTemplateReference(where, key, ref)
    merged = dict(templates[ref])
    merged.update({k: v for k, v in element.items() if k != key})
    merged.setdefault('label', str(ref))
    return merged


def _as_aperture(spec, shape, label):
    semidia = spec.get('semidia')
    if semidia is not None:
        return Circular(semidia)
    width, height = spec.get('width'), spec.get('height')
    if width is not None and height is not None:
        return Rectangular(width/2, height/2)
    raise MissingAperture(label, shape)


def _material(spec, side):
    n = spec.get(side)
    if n is None:
        n = spec.get(side + '_material')
    if n is not None and not isinstance(n, str) and isanumber(n):
        return float(n)
    return n


class SurfaceFactory():
    """ Builds :class:`~.surface.Surface` instances and assigns numeric ids.

    Numeric ids are drawn from a running counter, in creation order, and are
    never reused. One factory is used for the construction of a whole
    system.
    """

    def __init__(self, start_id=0, det_tol=1.0e-15):
        self._ids = itertools.count(start_id)
        self.det_tol = det_tol

    def next_id(self) -> int:
        return next(self._ids)

    def _make(self, spec, label, tfrm_inv: Tfm4d, normal,
              angles=None, dial=None, assembly=None, element_index=None,
              assembly_dial=None):
        shape = spec.get('shape', 'plano')
        radius = spec.get('radius')
        profile = profiles.create_profile(shape, radius)
        if profile is None:
            raise UnknownSurfaceShape(label, shape)
        aperture = _as_aperture(spec, shape, label)

        mode_key = str(spec.get('mode', 'refraction')).lower()
        if mode_key not in mode_aliases:
            raise UnknownInteractMode(label, spec.get('mode'))
        mode = mode_aliases[mode_key]

        transmission = None
        if mode == 'partial':
            transmission = float(spec.get('transmission', 0.5))
            if not 0.0 <= transmission <= 1.0:
                raise ValueError(f"surface '{label}': transmission "
                                 f"{transmission} is outside [0, 1]")
        wvl_only, wvl_excluded = parse_wvl_sel(spec.get('sel'))

        tfrm_fwd, tfrm_inv = tfrm_pair(tfrm_inv, det_tol=self.det_tol,
                                       label=label)
        num_id = self.next_id()
        sur = Surface(label, num_id, shape, profile, aperture, mode,
                      position=tfrm_inv.transform_point(np.zeros(3)),
                      normal=np.array(normal, dtype=float),
                      tfrm_fwd=tfrm_fwd, tfrm_inv=tfrm_inv,
                      radius=radius if radius else None,
                      dial=dial, angles=angles,
                      n1=_material(spec, 'n1'), n2=_material(spec, 'n2'),
                      transmission=transmission,
                      wvl_only=wvl_only, wvl_excluded=wvl_excluded,
                      assembly=assembly, element_index=element_index,
                      assembly_dial=assembly_dial)
        logger.debug("created surface %d '%s': %s %s at %s", num_id, label,
                     shape, mode, sur.position)
        return sur

    def create_surface(self, spec, position=None, normal=None, angles=None,
                       dial=None, label=None) -> Surface:
        """ create a single surface

        Placement arguments override the corresponding keys in `spec`.

        Args:
            spec: surface request `dict`
            position: world position of the vertex
            normal: explicit surface normal, takes precedence over angles
            angles: (azimuth, elevation) in degrees
            dial: rotation of the aperture about the normal, degrees
            label: surface id, defaults to spec['label']

        Raises:
            UnknownSurfaceShape, MissingAperture, UnknownInteractMode,
            SingularMatrix
        """
        label = label if label is not None else spec.get('label', '')
        position = position if position is not None else spec.get(
            'position', (0., 0., 0.))
        if normal is None and angles is None:
            normal, angles = spec.get('normal'), spec.get('angles')
        dial = dial if dial is not None else spec.get('dial')
        n = resolve_normal(normal, angles, label)
        tfrm_inv = local_to_world(np.array(position, dtype=float), n, dial)
        angles = tuple(angles) if normal is None and angles is not None \
            else None
        return self._make(spec, label, tfrm_inv, n, angles=angles, dial=dial)

    def create_assembly(self, asm_spec, position=None, normal=None,
                        angles=None, dial=None, label=None,
                        templates=None) -> list[Surface]:
        """ expand an assembly into a flat list of placed surfaces

        The members of `asm_spec['elements']` are positioned relative to one
        another in the assembly's local frame. A `relative` value that is a
        number advances along the local axis, a 3 vector advances by that
        offset. The chain is then placed as a rigid unit:

            world_i = T(position) . R_orient . R_dial . T(local_i)
                      . R_orient_i . R_dial_i

        Args:
            asm_spec: `dict` with an 'elements' list of member requests
            position, normal, angles, dial: placement of the assembly
            label: assembly name, defaults to asm_spec['label'] or 'aid'
            templates: surface templates for members that reference a 'sid'
        """
        label = label if label is not None else asm_spec.get(
            'label', asm_spec.get('aid', ''))
        position = position if position is not None else asm_spec.get(
            'position', (0., 0., 0.))
        if normal is None and angles is None:
            normal, angles = asm_spec.get('normal'), asm_spec.get('angles')
        dial = dial if dial is not None else asm_spec.get('dial')
        asm_tfrm = local_to_world(np.array(position, dtype=float),
                                  resolve_normal(normal, angles, label),
                                  dial)

        surfs = []
        local_pos = np.zeros(3)
        for i, member in enumerate(asm_spec.get('elements', [])):
            member = resolve_template(member, templates, 'sid',
                                      f"{label}[{i}]")
            rel = member.get('relative', 0.)
            if isanumber(rel) and not isinstance(rel, str):
                local_pos = local_pos + np.array([float(rel), 0., 0.])
            else:
                local_pos = local_pos + np.array(rel, dtype=float)
            mbr_lbl = f"{label}.{member.get('label', i)}"
            mbr_normal = resolve_normal(member.get('normal'),
                                        member.get('angles'), mbr_lbl)
            mbr_dial = member.get('dial')
            mbr_angles = member.get('angles')
            if member.get('normal') is not None or mbr_angles is None:
                mbr_angles = None
            else:
                mbr_angles = tuple(mbr_angles)
            tfrm_inv = asm_tfrm @ local_to_world(local_pos, mbr_normal,
                                                 mbr_dial)
            n = normalize(tfrm_inv.transform_vector(LOCAL_NORMAL))
            surfs.append(self._make(member, mbr_lbl, tfrm_inv, n,
                                    angles=mbr_angles, dial=mbr_dial,
                                    assembly=label, element_index=i,
                                    assembly_dial=dial))
        logger.debug("assembly '%s' expanded into %d surfaces", label,
                     len(surfs))
        return surfs