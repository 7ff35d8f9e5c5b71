#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2017 Michael J. Hayford
""" Module building on :mod:`opticalglass` for material support

    Materials are resolved once, when an optical system is built, into a
    :class:`RefractiveIndexTable`. The tracer only reads the table.

.. Created on Fri Sep 15 17:06:17 2017

.. codeauthor: Michael J. Hayford
"""
import logging
from math import isfinite

import numpy as np

from opticalglass import glassfactory as gfact
from opticalglass import opticalmedium as om
from opticalglass import glasserror

from raytrain.elem.builderror import MissingWavelengthEntry
from raytrain.util.misc_math import isanumber

logger = logging.getLogger(__name__)

default_cat_list = ['Schott', 'Ohara', 'Hoya', 'CDGM', 'Hikari', 'Sumita']


def decode_medium(*inputs, cat_list=None) -> om.OpticalMedium:
    """ Input utility for parsing various forms of material input.

    The **inputs** can have several forms:

        - **refractive_index**: float -> :class:`opticalglass.opticalmedium.ConstantIndex`
        - **glass_name, catalog_name** as 1 or 2 strings
        - **glass_name** only, searched in `cat_list`
        - an instance with a `rindex` attribute
        - **air**: str -> :class:`opticalglass.opticalmedium.Air`
        - blank -> defaults to :class:`opticalglass.opticalmedium.Air`

    Raises:
        GlassNotFoundError: if a named glass isn't in the catalogs
    """
    if len(inputs) == 0 or inputs[0] is None:
        return om.Air()

    if isanumber(inputs[0]):
        n = float(inputs[0])
        if n == 1.0:
            return om.Air()
        return om.ConstantIndex(n, f"n:{n:.3f}")

    if isinstance(inputs[0], str):
        strs = [tkn.strip() for tkn in inputs
                if isinstance(tkn, str) and len(tkn.strip()) > 0]
        if len(strs) == 0 or (len(strs) == 1 and strs[0].upper() == 'AIR'):
            return om.Air()
        if len(strs) == 2:
            name, cat = strs
        elif ',' in strs[0]:
            name, cat = (tkn.strip() for tkn in strs[0].split(',', 1))
        else:
            name = strs[0]
            cat = cat_list if cat_list is not None else default_cat_list
        mat = gfact.create_glass(name, cat)
        logger.debug("material %s resolved to %s, %s", name, mat.name(),
                     mat.catalog_name())
        return mat

    # glass instance args. if they respond to `rindex`, they're in
    if hasattr(inputs[0], 'rindex'):
        return inputs[0]

    raise ValueError(f"can't interpret material input {inputs[0]!r}")


class MaterialLookup():
    """ `lookup(material, wvl) -> index`, using :mod:`opticalglass`

    Numbers pass through unchanged. Decoded materials are cached by name.
    """

    def __init__(self, cat_list=None):
        self.cat_list = cat_list
        self._media = {}

    def __call__(self, material, wvl: float) -> float:
        if not isinstance(material, str) and isanumber(material):
            return float(material)
        if material not in self._media:
            self._media[material] = decode_medium(material,
                                                  cat_list=self.cat_list)
        return float(self._media[material].rindex(wvl))


def _wvl_key(wvl):
    return round(float(wvl), 6)


class RefractiveIndexTable():
    """ read-only (surface num_id, wavelength) -> (n1, n2) table

    The table is filled completely on construction, calling `lookup` for
    every material and wavelength; no lookups occur afterward.

    Args:
        surfaces: the surfaces of the system
        wvls: the wavelengths, in nm, that will be traced
        lookup: callable `lookup(material, wvl) -> index`; defaults to a
            :class:`MaterialLookup`
        default_index: index used for a side with no material given

    Raises:
        MissingWavelengthEntry: if any material can't be resolved at any
            wavelength
    """

    def __init__(self, surfaces, wvls, lookup=None, default_index=1.0):
        lookup = lookup if lookup is not None else MaterialLookup()
        self._wvls = tuple(float(w) for w in wvls)
        self._col = {_wvl_key(w): j for j, w in enumerate(self._wvls)}
        self._row = {}
        self._labels = {}
        tbl = np.empty((len(surfaces), len(self._wvls), 2))
        for i, sur in enumerate(surfaces):
            self._row[sur.num_id] = i
            self._labels[sur.num_id] = sur.label
            for k, material in enumerate((sur.n1, sur.n2)):
                for j, wvl in enumerate(self._wvls):
                    tbl[i, j, k] = self._resolve(lookup, sur.label, material,
                                                 wvl, default_index)
        tbl.flags.writeable = False
        self._tbl = tbl
        logger.info("index table built: %d surfaces x %d wavelengths",
                    len(surfaces), len(self._wvls))

    @staticmethod
    def _resolve(lookup, label, material, wvl, default_index):
        if material is None:
            return default_index
        try:
            n = lookup(material, wvl)
        except (glasserror.GlassNotFoundError, KeyError, ValueError) as err:
            raise MissingWavelengthEntry(label, material, wvl) from err
        if n is None or not isfinite(n):
            raise MissingWavelengthEntry(label, material, wvl)
        return n

    @property
    def wvls(self):
        return self._wvls

    @property
    def table(self):
        """ the (surface, wavelength, side) index array, read-only """
        return self._tbl

    def __contains__(self, key):
        num_id, wvl = key
        return num_id in self._row and _wvl_key(wvl) in self._col

    def indices(self, num_id: int, wvl: float) -> tuple[float, float]:
        """ return (n1, n2) for surface `num_id` at `wvl`

        Raises:
            MissingWavelengthEntry: if there is no entry for the pair
        """
        try:
            n1, n2 = self._tbl[self._row[num_id], self._col[_wvl_key(wvl)]]
        except KeyError:
            raise MissingWavelengthEntry(self._labels.get(num_id, num_id),
                                         None, wvl) from None
        return float(n1), float(n2)

    def listobj_str(self):
        o_str = "num_id  wvl       n1          n2\n"
        for num_id, i in self._row.items():
            for j, wvl in enumerate(self._wvls):
                n1, n2 = self._tbl[i, j]
                o_str += f"{num_id:5d}  {wvl:8.3f}  {n1:.6f}  {n2:.6f}\n"
        return o_str
