#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Wed Sep 19 15:02:31 2018

@author: Mike
"""

import unittest
import numpy as np
import numpy.testing as npt
from pytest import approx

from raytrain.elem import layout
from raytrain.elem.factory import SurfaceFactory
from raytrain.elem.transform import Tfm4d
from raytrain.util.misc_math import (axis_angle_rot, upright_rot, normalize,
                                     angles2normal)


def composed_tfrm(position, normal, dial):
    """ local -> world transform, composed directly from the primitives """
    rot = axis_angle_rot(normal, dial) @ upright_rot(normal)
    return Tfm4d.from_rot_trns(rot, position)


class BoundaryCornersTestCase(unittest.TestCase):

    def setUp(self):
        self.factory = SurfaceFactory()
        self.spec = {'shape': 'plano', 'width': 10., 'height': 4.}

    def test_untransformed(self):
        sur = self.factory.create_surface(self.spec)
        crnrs = layout.boundary_corners(sur)
        npt.assert_allclose(crnrs, [[0., 5., 2.], [0., -5., 2.],
                                    [0., -5., -2.], [0., 5., -2.]])

    def test_circular_bounding_square(self):
        sur = self.factory.create_surface({'shape': 'plano', 'semidia': 3.},
                                          position=[5., 0., 0.])
        crnrs = layout.boundary_corners(sur)
        npt.assert_allclose(np.abs(crnrs[:, 1:]), 3.)
        npt.assert_allclose(crnrs[:, 0], 5.)

    def test_dial_invariance_of_normal(self):
        dials = (0., 25., 50., 75.)
        surfs = [self.factory.create_surface(
                     self.spec, position=[20., -3., -5.], angles=[5., -10.],
                     dial=dial) for dial in dials]
        for s in surfs[1:]:
            npt.assert_array_equal(s.normal, surfs[0].normal)
        crnrs0 = layout.boundary_corners(surfs[0])
        for s in surfs[1:]:
            diff = np.linalg.norm(layout.boundary_corners(s) - crnrs0, axis=1)
            self.assertGreater(diff.max(), 1e-6)

    def test_corner_tracer_agreement(self):
        rng = np.random.default_rng(11)
        for i in range(20):
            pos = rng.uniform(-50., 50., 3)
            n = normalize(rng.normal(size=3))
            dial = rng.uniform(-180., 180.)
            sur = self.factory.create_surface(self.spec, position=pos,
                                              normal=n, dial=dial)
            crnrs = layout.boundary_corners(sur)
            expected = composed_tfrm(pos, n, dial).transform_point(
                layout.local_corners(sur))
            npt.assert_allclose(crnrs, expected, rtol=0., atol=1e-6)

            # rays aimed along -normal at each corner hit it, in local coords
            for crnr, lcl in zip(crnrs, layout.local_corners(sur)):
                s, p_lcl, _, _ = sur.intersect(crnr + 10.*sur.normal,
                                               -sur.normal)
                assert s == approx(10.)
                npt.assert_allclose(p_lcl, lcl, atol=1e-6)
                self.assertTrue(sur.point_inside(p_lcl[1], p_lcl[2]))

                outside = crnr + 0.01*(crnr - sur.position)
                s, p_lcl, _, _ = sur.intersect(outside + 10.*sur.normal,
                                               -sur.normal)
                self.assertFalse(sur.point_inside(p_lcl[1], p_lcl[2]))


class PolygonMeshTestCase(unittest.TestCase):

    def setUp(self):
        self.factory = SurfaceFactory()

    def test_rim_on_sphere(self):
        sur = self.factory.create_surface(
            {'shape': 'spherical', 'radius': 40., 'semidia': 12.},
            position=[3., 4., 5.], angles=[20., 30.], dial=15.)
        center = sur.tfrm_inv.transform_point([40., 0., 0.])
        poly = layout.boundary_polygon(sur, num_pts=24)
        self.assertEqual(len(poly), 25)
        npt.assert_allclose(poly[0], poly[-1], atol=1e-12)
        npt.assert_allclose(np.linalg.norm(poly - center, axis=1), 40.,
                            atol=1e-9)

    def test_rectangular_rim(self):
        sur = self.factory.create_surface(
            {'shape': 'plano', 'width': 4., 'height': 2.})
        poly = layout.boundary_polygon(sur, num_pts=8)
        lo, hi = layout.bbox_from_poly(poly)
        npt.assert_allclose(lo, [0., -2., -1.])
        npt.assert_allclose(hi, [0., 2., 1.])
        assert sur.aperture.max_dimension() == approx(np.sqrt(5.))

    def test_mesh(self):
        sur = self.factory.create_surface(
            {'shape': 'cylindrical', 'radius': -30., 'semidia': 5.},
            position=[0., 0., 10.], normal=angles2normal(0., 0.))
        mesh = layout.surface_mesh(sur, num_rings=3, num_pts=12)
        self.assertEqual(mesh['num_id'], sur.num_id)
        self.assertEqual(mesh['vertices'].shape, (1 + 3*12, 3))
        self.assertEqual(mesh['faces'].shape, (12 + 2*12*2, 3))
        self.assertEqual(mesh['faces'].max(), len(mesh['vertices']) - 1)
        npt.assert_allclose(mesh['vertices'][0], [0., 0., 10.])


if __name__ == '__main__':
    unittest.main(verbosity=3)
