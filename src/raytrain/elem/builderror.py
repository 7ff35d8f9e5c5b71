#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2018 Michael J. Hayford
""" Exceptions raised while building an optical system

    All of these are fatal: a system that fails to build can't be traced.

.. Created on Wed Oct 24 15:22:40 2018

.. codeauthor: Michael J. Hayford
"""


class BuildError(Exception):
    """ Exception raised when constructing surfaces or a system """


class UnknownSurfaceShape(BuildError):
    """ Exception raised when a surface request names an unsupported shape """
    def __init__(self, label, shape):
        self.label = label
        self.shape = shape
        super().__init__(f"surface '{label}': unknown shape '{shape}'")


class UnknownInteractMode(BuildError):
    """ Exception raised when a surface request names an unsupported mode """
    def __init__(self, label, mode):
        self.label = label
        self.mode = mode
        super().__init__(f"surface '{label}': unknown mode '{mode}'")


class MissingAperture(BuildError):
    """ Exception raised when a surface request has no usable aperture """
    def __init__(self, label, shape):
        self.label = label
        self.shape = shape
        super().__init__(f"surface '{label}': {shape} surface needs a "
                         "semidia or a width and height")


class UnresolvedTemplateReference(BuildError):
    """ Exception raised when an optical train names an undefined template """
    def __init__(self, element, key, ref):
        self.element = element
        self.key = key
        self.ref = ref
        super().__init__(f"train element {element}: {key} '{ref}' "
                         "is not defined")


class SingularMatrix(BuildError):
    """ Exception raised when a transform can't be inverted """
    def __init__(self, det, label=None):
        self.det = det
        self.label = label
        super().__init__(f"surface '{label}': singular transform, "
                         f"det={det:.3g}")


class MissingWavelengthEntry(BuildError):
    """ Exception raised when a refractive index can't be resolved """
    def __init__(self, label, material, wvl):
        self.label = label
        self.material = material
        self.wvl = wvl
        super().__init__(f"surface '{label}': no index for material "
                         f"'{material}' at {wvl} nm")
