#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2018 Michael J. Hayford
""" Homogeneous transforms for placing surfaces in world space

    Each surface carries a transform pair:

        - **tfrm_inv**: local -> world, used to place local geometry, e.g.
          boundary corners and meshes
        - **tfrm_fwd**: world -> local, used to bring rays into the frame
          where intersections are computed

    Only the local -> world transform is ever composed from the placement
    values. The world -> local transform is always its matrix inverse.

.. Created on Sun Aug 19 19:50:48 2018

.. codeauthor: Michael J. Hayford
"""
import numpy as np

from raytrain.coord_geometry_types import Mat3d, Mat4d, Tfm3d, V3d
from raytrain.elem.builderror import SingularMatrix
from raytrain.typing import LOCAL_NORMAL
from raytrain.util.misc_math import axis_angle_rot, upright_rot


class Tfm4d:
    """ a 4x4 homogeneous transform

    The underlying array is read-only; composition and inversion return new
    instances.
    """

    def __init__(self, mat: Mat4d | None = None):
        m = np.identity(4) if mat is None else np.array(mat, dtype=float)
        if m.shape != (4, 4):
            raise ValueError(f"expected a 4x4 matrix, got {m.shape}")
        m.flags.writeable = False
        self._mat = m

    def __repr__(self):
        return f"{type(self).__name__}({self._mat.tolist()!r})"

    @property
    def mat(self) -> Mat4d:
        return self._mat

    @property
    def rot(self) -> Mat3d:
        return self._mat[:3, :3].copy()

    @property
    def trns(self):
        return self._mat[:3, 3].copy()

    @classmethod
    def from_rot_trns(cls, rot: Mat3d | None = None, trns: V3d | None = None):
        m = np.identity(4)
        if rot is not None:
            m[:3, :3] = rot
        if trns is not None:
            m[:3, 3] = trns
        return cls(m)

    @classmethod
    def translation(cls, trns: V3d):
        return cls.from_rot_trns(trns=trns)

    @classmethod
    def rotation(cls, rot: Mat3d):
        return cls.from_rot_trns(rot=rot)

    def to_rt(self) -> Tfm3d:
        """ return the (rotation, translation) tuple form of the transform """
        return self.rot, self.trns

    def __matmul__(self, other):
        if not isinstance(other, Tfm4d):
            return NotImplemented
        return Tfm4d(self._mat @ other._mat)

    def transform_point(self, pt: V3d):
        """ apply the transform to a point, or an (N, 3) array of points """
        pts = np.asarray(pt, dtype=float)
        homog = np.concatenate((pts, np.ones(pts.shape[:-1] + (1,))),
                               axis=-1)
        out = homog @ self._mat.T
        w = out[..., 3:]
        if np.any(w == 0.0):
            raise ZeroDivisionError("homogeneous coordinate w is zero")
        return out[..., :3]/w

    def transform_vector(self, v: V3d):
        """ apply the rotation part only, e.g. to a direction or normal """
        return np.asarray(v, dtype=float) @ self._mat[:3, :3].T

    def det(self) -> float:
        return float(np.linalg.det(self._mat))

    def inverse(self, det_tol=1.0e-15, label=None):
        """ return the inverse transform

        Raises:
            SingularMatrix: if abs(det) < det_tol
        """
        det = self.det()
        if abs(det) < det_tol:
            raise SingularMatrix(det, label=label)
        return Tfm4d(np.linalg.inv(self._mat))

    def isclose(self, other, tol=1.0e-9) -> bool:
        return np.allclose(self._mat, other.mat, rtol=0., atol=tol)


def dial_rot(dial: float) -> Mat3d:
    """ rotation of `dial` degrees about the canonical local normal.

    Applied after the orientation rotation, this is a right-handed rotation
    about the oriented surface normal.
    """
    return axis_angle_rot(LOCAL_NORMAL, dial)


def local_to_world(position: V3d, normal: V3d,
                   dial: float | None = None) -> Tfm4d:
    """ compose translate . orient . dial into the local -> world transform """
    tfrm = Tfm4d.translation(position) @ Tfm4d.rotation(upright_rot(normal))
    if dial:
        tfrm = tfrm @ Tfm4d.rotation(dial_rot(dial))
    return tfrm


def tfrm_pair(tfrm_inv: Tfm4d, det_tol=1.0e-15,
              label=None) -> tuple[Tfm4d, Tfm4d]:
    """ return (forward, inverse), deriving forward by inverting `tfrm_inv` """
    tfrm_fwd = tfrm_inv.inverse(det_tol=det_tol, label=label)
    return tfrm_fwd, tfrm_inv


def placement_tfrms(position: V3d, normal: V3d, dial: float | None = None,
                    det_tol=1.0e-15, label=None) -> tuple[Tfm4d, Tfm4d]:
    """ return the (forward, inverse) transform pair for a placement

    Args:
        position: world position of the surface vertex
        normal: unit surface normal in world coordinates
        dial: rotation in degrees of the aperture about the normal
        det_tol: determinant threshold for inverting the transform
        label: surface label, for error reporting

    Returns:
        tfrm_fwd (world -> local), tfrm_inv (local -> world)
    """
    return tfrm_pair(local_to_world(position, normal, dial),
                     det_tol=det_tol, label=label)
