""" package supplying utility functions for math and numpy support

    The :mod:`~raytrain.util` subpackage provides miscellaneous functions for
    geometric calculations and anything else that doesn't have an obvious
    home. These include:

        - vector and rotation helpers, :mod:`~.misc_math`
        - spectral line conversion with :func:`~.spectral_lines.get_wavelength`
          in :mod:`~.spectral_lines`
"""
