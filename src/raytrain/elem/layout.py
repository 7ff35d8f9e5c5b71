#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2018 Michael J. Hayford
""" World space boundary geometry for surfaces

    The boundary geometry of a surface is produced by creating points in the
    surface's local frame and mapping them with the surface's
    `tfrm_inv`, the same transform the tracer inverts to bring rays into the
    local frame. Visualization and validation geometry thus agree with the
    traced geometry.

    The functions here return numpy arrays and `dict` mesh data; rendering
    is left to the caller.

.. Created on Tue Sep 18 14:23:28 2018

.. codeauthor: Michael J. Hayford
"""
import numpy as np

from raytrain.elem.surface import Surface


def local_corners(sur: Surface):
    """ the aperture corners in local coordinates, at local depth zero

    For a rectangular aperture these are (0, +/-hw, +/-hh); a circular
    aperture uses its bounding square.
    """
    yz = sur.aperture.corners()
    return np.column_stack((np.zeros(len(yz)), yz))


def boundary_corners(sur: Surface):
    """ the aperture corners in world coordinates """
    return sur.tfrm_inv.transform_point(local_corners(sur))


def local_rim(sur: Surface, num_pts=36):
    """ closed polygon around the aperture edge, on the profile, local """
    yz = sur.aperture.edge_points(num_pts)
    x = sur.profile.sag(yz[:, 0], yz[:, 1])
    return np.column_stack((x, yz))


def boundary_polygon(sur: Surface, num_pts=36):
    """ closed polygon around the aperture edge, on the profile, world """
    return sur.tfrm_inv.transform_point(local_rim(sur, num_pts))


def bbox_from_poly(poly):
    """ return the (min, max) corners of the box enclosing `poly` """
    poly = np.asarray(poly)
    return poly.min(axis=0), poly.max(axis=0)


def surface_mesh(sur: Surface, num_rings=6, num_pts=36):
    """ triangle mesh of the clear aperture, in world coordinates

    The mesh is built from scaled copies of the aperture edge, from the
    vertex out to the rim, each lifted onto the surface profile.

    Returns:
        `dict` with keys:

            - **vertices**: (N, 3) array of world points
            - **faces**: (M, 3) array of vertex indices
            - **label**, **num_id**: identification of the surface
    """
    edge = sur.aperture.edge_points(num_pts)[:-1]
    n_edge = len(edge)
    pts = [np.zeros(2)]
    for k in range(1, num_rings + 1):
        pts.extend((k/num_rings)*edge)
    yz = np.array(pts)
    x = sur.profile.sag(yz[:, 0], yz[:, 1])
    vertices = sur.tfrm_inv.transform_point(np.column_stack((x, yz)))

    faces = []
    # fan around the vertex
    for j in range(n_edge):
        faces.append((0, 1 + j, 1 + (j + 1) % n_edge))
    for k in range(1, num_rings):
        inner = 1 + (k - 1)*n_edge
        outer = 1 + k*n_edge
        for j in range(n_edge):
            j1 = (j + 1) % n_edge
            faces.append((inner + j, outer + j, outer + j1))
            faces.append((inner + j, outer + j1, inner + j1))

    return {'label': sur.label,
            'num_id': sur.num_id,
            'vertices': vertices,
            'faces': np.array(faces, dtype=int)}
