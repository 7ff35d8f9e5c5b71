#!/usr/bin/env python3
# -*- coding: utf-8 -*-
""" type hints for vectors and matrices

These type hints distinguish between numpy arrays and array-like inputs.

Vec3d is used for coordinates
Dir3d is used for vector directions, unit length
Mat3d is a 3 x 3 matrix
Mat4d is a 4 x 4 homogeneous matrix
Tfm3d is used to package together a rotation matrix and translation vector

.. Created on Mon Jun  2 10:48:54 2025

.. codeauthor: Michael J. Hayford
"""
import numpy.typing as npt

Vec3d = npt.NDArray
Dir3d = npt.NDArray
Mat3d = npt.NDArray
Tfm3d = tuple[Mat3d, Vec3d]

Mat4d = npt.NDArray

V3d = npt.ArrayLike
