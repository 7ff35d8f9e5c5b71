#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2019 Michael J. Hayford
""" Support for spectral line and laser line names

.. codeauthor: Michael J. Hayford
"""
from raytrain.util.misc_math import isanumber

spectra = {'C': 656.2725,
           'He-Ne': 632.8,
           'D': 589.2938,
           'd': 587.5618,
           'e': 546.074,
           'F': 486.1327,
           'g': 435.8343,
           'Nd:YAG-2': 532.0,
           'Ar-488': 488.0,
           'Ar-514': 514.5}


spectra_uc = {key.upper(): val for key, val in spectra.items()}


def get_wavelength(wvl) -> float:
    """Return wvl in nm, where wvl can be a spectral line name or a number

    Example::

        In [1]: get_wavelength('d')
        Out[1]: 587.5618

        In [2]: get_wavelength(633)
        Out[2]: 633.0

    Lookup of line names falls back to a case-insensitive match. A name
    that is not known raises KeyError.
    """
    if isanumber(wvl):
        return float(wvl)
    if wvl in spectra:
        return spectra[wvl]
    return spectra_uc[wvl.upper()]
