#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2018 Michael J. Hayford
""" miscellaneous functions for working with numpy vectors and rotations

.. Created on Wed May 23 15:27:06 2018

.. codeauthor: Michael J. Hayford
"""
import numpy as np
from numpy.linalg import norm
from math import sin, cos, radians
import transforms3d as t3d

Z_AXIS = np.array([0., 0., 1.])
Y_AXIS = np.array([0., 1., 0.])


def normalize(v):
    """ return normalized version of input vector v """
    v = np.asarray(v, dtype=float)
    length = norm(v)
    if length == 0.0:
        return v
    else:
        return v/length


def isanumber(a):
    """ returns true if input a can be converted to floating point number """
    try:
        float(a)
        bool_a = True
    except ValueError:
        bool_a = False
    except TypeError:
        bool_a = False

    return bool_a


def angles2normal(az, el):
    """ return the unit surface normal for azimuth `az` and elevation `el`.

    Angles are in degrees. The angle pair (0, 0) gives the canonical
    normal (-1, 0, 0), i.e. a surface facing light traveling along +X.
    """
    az_r = radians(az)
    el_r = radians(el)
    return np.array([-cos(el_r)*cos(az_r),
                     -cos(el_r)*sin(az_r),
                     sin(el_r)])


def axis_angle_rot(axis, angle):
    """ right-handed rotation of `angle` degrees about `axis` """
    return t3d.axangles.axangle2mat(np.asarray(axis, dtype=float),
                                    radians(angle))


def upright_rot(normal, up_tol=1e-9):
    """ rotation matrix taking the canonical normal (-1, 0, 0) onto `normal`.

    The columns of the result are the local x, y, z axes in world
    coordinates. Local x is the propagation axis, i.e. -normal. Local z is
    kept as close to world +Z as possible so that the surface stays
    "upright"; if the normal is parallel to Z, local y is taken as world +Y.
    """
    x_axis = -normalize(normal)
    z_ref = Z_AXIS - np.dot(Z_AXIS, x_axis)*x_axis
    if norm(z_ref) < up_tol:
        y_axis = Y_AXIS.copy()
        z_axis = np.cross(x_axis, y_axis)
    else:
        z_axis = normalize(z_ref)
        y_axis = np.cross(z_axis, x_axis)
    return np.column_stack((x_axis, y_axis, z_axis))


def rot_mat_is_proper(rot, tol=1e-9):
    """ True if `rot` is orthonormal with determinant +1 """
    rot = np.asarray(rot)
    return (np.allclose(rot.T @ rot, np.eye(3), atol=tol) and
            abs(np.linalg.det(rot) - 1.0) < tol)
