# -*- coding: utf-8 -*-
""" The **raytrain** surface placement and sequential ray tracing package

    An optical system is a flat, ordered list of surfaces, the optical
    train, built from declarative requests. It is supported by the
    following subpackages:

        - :mod:`~.elem`: surface records, placement transforms, intersection
          profiles, the surface factory and boundary/mesh generation
        - :mod:`~.seq`: the sequential :class:`~.OpticalSystem` and the
          read-only refractive index table
        - :mod:`~.raytr`: ray tracing, hit collection, light sources and
          analysis entry points for optimizers

        - :mod:`opticalglass`: this package interfaces with glass manufacturer
          optical data and is used to resolve material names

    The :mod:`~.util` subpackage provides vector math and spectral line
    support.
"""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version(__name__)
except PackageNotFoundError:
    __version__ = 'unknown'


def listobj(obj):
    """ Print wrapper function for listobj_str() method of `obj`.

    listobj() is designed to be used in scripting environments where detailed,
    textual output is supported. It is a wrapper to a call of `listobj_str` on
    `obj`.

    Classes may implement the `listobj_str` method that returns a string
    containing a formatted description of the object. Examples include
    :meth:`.Surface.listobj_str` and :meth:`.OpticalSystem.listobj_str`.
    """
    try:
        print(obj.listobj_str())
    except AttributeError:
        print(repr(obj))
