""" Package for the sequential optical system

    The :mod:`~.seq` subpackage provides the :class:`~.sequential.OpticalSystem`,
    which builds surfaces from structured requests in optical train order,
    and the :mod:`~.medium` module, which resolves materials into a
    read-only table of refractive indices before any ray is traced.
"""
