""" Package for surface descriptions, placement and geometry

    The :mod:`~.elem` subpackage provides the immutable
    :class:`~.surface.Surface` record and the pieces used to build it:

        - 4x4 homogeneous placement transforms, :mod:`~.transform`
        - intersection geometry for planar, spherical and cylindrical
          shapes, :mod:`~.profiles`
        - construction of single surfaces and assemblies,
          :mod:`~.factory`
        - world space boundary corners, rim polygons and meshes,
          :mod:`~.layout`
        - construction-time exceptions, :mod:`~.builderror`
"""
