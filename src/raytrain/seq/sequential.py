#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2018 Michael J. Hayford
""" Manager class for a sequential optical system

.. codeauthor: Michael J. Hayford
"""

import logging

from raytrain.elem.builderror import (MissingWavelengthEntry,
                                      UnresolvedTemplateReference)
from raytrain.elem.factory import SurfaceFactory, resolve_template
from raytrain.raytr import raytrace as rt
from raytrain.raytr.lightsource import LightSource
from raytrain.seq.medium import RefractiveIndexTable

logger = logging.getLogger(__name__)


def _labeled_entries(entries):
    """ yield (label, spec) from a list of single key mappings, or a dict

    System descriptions list their surfaces, sources and train elements as
    `- label: {spec}` items; a plain mapping is accepted as well.
    """
    if entries is None:
        return
    if isinstance(entries, dict):
        entries = [entries]
    for entry in entries:
        for label, spec in entry.items():
            yield label, spec


def _assembly_templates(assemblies):
    asm_tmpls = {}
    for asm in assemblies or []:
        aid = asm.get('aid')
        if 'elements' in asm:
            members = [dict(m) for m in asm['elements']]
        else:
            members = []
            for key, spec in asm.items():
                if key in ('aid', 'label', 'position', 'normal', 'angles',
                           'dial'):
                    continue
                member = dict(spec)
                member.setdefault('label', key)
                members.append(member)
        asm_tmpls[aid] = {**{k: v for k, v in asm.items()
                             if k in ('label', 'position', 'normal',
                                      'angles', 'dial')},
                          'aid': aid, 'elements': members}
    return asm_tmpls


class OpticalSystem:
    """ Manager class for a sequential optical system

    An optical system is an ordered tuple of surfaces, the optical train,
    plus the refractive index table for the wavelengths that will be traced.
    Rays visit the surfaces in train order.

    Attributes:
        label: name of the system
        surfaces: tuple of :class:`~.surface.Surface`, in train order
        rndx: :class:`~.medium.RefractiveIndexTable` for **surfaces**
        light_sources: list of :class:`~.lightsource.LightSource` in the train
    """

    def __init__(self, surfaces, wvls, lookup=None, default_index=1.0,
                 light_sources=None, label=''):
        self.label = label
        self.surfaces = tuple(surfaces)
        self.light_sources = list(light_sources) if light_sources else []
        self._by_num = {}
        self._by_label = {}
        for sur in self.surfaces:
            if sur.num_id in self._by_num:
                raise ValueError(f"duplicate surface num_id {sur.num_id}")
            self._by_num[sur.num_id] = sur
            if sur.label in self._by_label:
                logger.warning("duplicate surface label '%s'", sur.label)
            self._by_label.setdefault(sur.label, sur)
        self.rndx = RefractiveIndexTable(self.surfaces, wvls, lookup=lookup,
                                         default_index=default_index)
        logger.info("system '%s': %d surfaces, %d light sources", label,
                    len(self.surfaces), len(self.light_sources))

    def __len__(self):
        return len(self.surfaces)

    def __iter__(self):
        return iter(self.surfaces)

    def __getitem__(self, key):
        return self.surfaces[key]

    @property
    def wvls(self):
        return self.rndx.wvls

    def surface(self, key):
        """ return the surface with num_id `key` (int) or label `key` (str) """
        if isinstance(key, str):
            return self._by_label[key]
        return self._by_num[key]

    def index_of(self, key) -> int:
        """ position in the optical train of the surface `key` """
        return self.surfaces.index(self.surface(key))

    def listobj_str(self):
        o_str = f"{type(self).__name__}: {self.label}\n"
        for sur in self.surfaces:
            o_str += sur.listobj_str()
        return o_str

    @classmethod
    def from_requests(cls, requests, wvls, lookup=None, templates=None,
                      assemblies=None, factory=None, **kwargs):
        """ build a system from an ordered list of element requests

        Each request is a surface request `dict` (inline, or referencing a
        surface template by 'sid'), or an assembly, either inline with an
        'elements' list or referencing an assembly template by 'aid'.
        Placement keys in a request override the template's.

        Raises:
            UnresolvedTemplateReference, UnknownSurfaceShape,
            MissingAperture, SingularMatrix, MissingWavelengthEntry
        """
        factory = factory if factory is not None else SurfaceFactory()
        surfaces = []
        for i, req in enumerate(requests):
            where = req.get('label', i)
            if 'aid' in req or 'elements' in req:
                asm = resolve_template(req, assemblies, 'aid', where)
                surfaces.extend(factory.create_assembly(asm,
                                                        templates=templates))
            else:
                spec = resolve_template(req, templates, 'sid', where)
                surfaces.append(factory.create_surface(spec))
        return cls(surfaces, wvls, lookup=lookup, **kwargs)

    @classmethod
    def from_spec(cls, system_data, train=0, wvls=None, lookup=None,
                  **kwargs):
        """ build a system from a structured system description

        `system_data` is a `dict` as loaded from a system file, with the
        keys:

            - **surfaces**: surface templates, each with a 'sid'
            - **assemblies**: assembly templates, each with an 'aid'
            - **light_sources**: light source requests, each with a 'lid'
            - **optical_trains**: list of trains; each maps element names
              to 'lid', 'sid' or 'aid' references plus placement

        Args:
            system_data: the system description
            train: index of the optical train to build
            wvls: wavelengths to tabulate; defaults to those of the light
                sources in the train
            lookup: material lookup, see :class:`~.RefractiveIndexTable`
        """
        templates = {}
        for label, spec in _labeled_entries(system_data.get('surfaces')):
            templates[spec.get('sid', label)] = {'label': label, **spec}
        asm_tmpls = _assembly_templates(system_data.get('assemblies'))
        src_tmpls = {}
        for label, spec in _labeled_entries(system_data.get('light_sources')):
            src_tmpls[spec.get('lid', label)] = spec

        trains = system_data.get('optical_trains', [])
        if isinstance(trains, dict):
            trains = [trains]
        train_data = trains[train]

        requests = []
        sources = []
        for name, elem in _labeled_entries(train_data):
            if 'lid' in elem:
                lid = elem['lid']
                if lid not in src_tmpls:
                    raise UnresolvedTemplateReference(name, 'lid', lid)
                src = {**src_tmpls[lid],
                       **{k: v for k, v in elem.items() if k != 'lid'}}
                sources.append(LightSource.from_spec(src, lid=lid))
            else:
                req = dict(elem)
                req.setdefault('label', str(name))
                requests.append(req)

        if wvls is None:
            wvls = sorted({src.wvl for src in sources})
        return cls.from_requests(requests, wvls, lookup=lookup,
                                 templates=templates, assemblies=asm_tmpls,
                                 light_sources=sources,
                                 label=system_data.get('label', ''),
                                 **kwargs)

    def generate_rays(self):
        """ the rays of all light sources, in source order """
        rays = []
        for src in self.light_sources:
            rays.extend(src.generate_rays())
        return rays

    def check_wavelengths(self, rays):
        """ raise MissingWavelengthEntry if a ray's wavelength isn't tabulated
        """
        for wvl in {ray.wvl for ray in rays}:
            for sur in self.surfaces:
                if (sur.num_id, wvl) not in self.rndx:
                    raise MissingWavelengthEntry(sur.label, None, wvl)

    def trace(self, rays=None, collector=None, accounting=None, **kwargs):
        """ trace `rays`, or the rays of the light sources, through the system

        All wavelengths are checked against the index table before the first
        ray is traced.

        Returns:
            list of :class:`~.RayPath`
        """
        rays = list(rays) if rays is not None else self.generate_rays()
        self.check_wavelengths(rays)
        return rt.trace_rays(self.surfaces, rays, self.rndx,
                             collector=collector, accounting=accounting,
                             **kwargs)
