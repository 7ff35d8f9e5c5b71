#!/usr/bin/env python3
# -*- coding: utf-8 -*-
""" type hints and model constants for raytrain

.. Created on Tue Dec  7 10:48:54 2021

.. codeauthor: Michael J. Hayford
"""
from typing import Literal
from typing import Union

ShapeType = Literal['plano', 'flat', 'spherical', 'cylindrical']
InteractMode = Literal['refraction', 'reflection', 'absorption', 'aperture',
                       'partial', 'block']

MaterialSpec = Union[float, int, str, None]

# the local optical axis is +X; the vertex normal faces the incoming light
LOCAL_AXIS = (1., 0., 0.)
LOCAL_NORMAL = (-1., 0., 0.)
