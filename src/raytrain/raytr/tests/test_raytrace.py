#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Wed Oct 18 10:59:29 2017

@author: Mike
"""

import unittest
import numpy as np
import numpy.testing as npt
from math import sin, cos, radians, asin
from pytest import approx

from raytrain.raytr import Ray, TraceState
from raytrain.raytr.collector import HitCollector, RayAccounting
from raytrain.raytr.raytrace import bend, reflect, trace_ray
from raytrain.raytr.traceerror import TraceTIRError
from raytrain.seq.sequential import OpticalSystem
from raytrain.util.misc_math import normalize


class BendReflectTestCase(unittest.TestCase):

    def test_normal_incidence(self):
        d = np.array([1., 0., 0.])
        n = np.array([-1., 0., 0.])
        npt.assert_allclose(bend(d, n, 1.0, 1.5), d)
        npt.assert_allclose(reflect(d, n), -d)

    def test_snells_law(self):
        ang = radians(30.)
        d = np.array([cos(ang), sin(ang), 0.])
        for n in (np.array([-1., 0., 0.]), np.array([1., 0., 0.])):
            d_out = bend(d, n, 1.0, 1.5)
            assert np.linalg.norm(d_out) == approx(1.)
            assert asin(d_out[1]) == approx(asin(sin(ang)/1.5))
            assert d_out[0] > 0.

    def test_tir(self):
        ang = radians(60.)
        d = np.array([cos(ang), sin(ang), 0.])
        with self.assertRaises(TraceTIRError):
            bend(d, np.array([-1., 0., 0.]), 1.5, 1.0)

    def test_reflect_angle(self):
        d = normalize(np.array([1., 1., 0.]))
        npt.assert_allclose(reflect(d, np.array([-1., 0., 0.])),
                            normalize(np.array([-1., 1., 0.])))


def plano(label, x, mode='refraction', **kwargs):
    return {'label': label, 'shape': 'plano', 'semidia': 20.,
            'position': [x, 0., 0.], 'mode': mode, **kwargs}


class SequentialTraceTestCase(unittest.TestCase):

    def test_snell_round_trip(self):
        angles = [20., 10.]
        sys = OpticalSystem.from_requests(
            [{**plano('in', 10., n2=1.5), 'angles': angles},
             {**plano('out', 15., n1=1.5), 'angles': angles}],
            wvls=[550.])
        d0 = normalize(np.array([1., 0.2, -0.1]))
        path = sys.trace([Ray([0., 0., 0.], d0, 550.)])[0]
        self.assertEqual(path.state, TraceState.Exited)
        self.assertEqual([e[1] for e in path.events],
                         [TraceState.Refracted, TraceState.Refracted])
        self.assertGreater(np.linalg.norm(path.segs[1].d - d0), 1e-3)
        npt.assert_allclose(path.end_dir(), d0, rtol=0., atol=1e-9)

    def test_train_order_governs(self):
        # B is nearer the ray start than A, but A is traced first
        sys = OpticalSystem.from_requests(
            [plano('A', 30., mode='reflection'),
             {**plano('B', 10., mode='reflection'), 'angles': [180., 0.]},
             plano('C', 50., mode='absorption')],
            wvls=[550.])
        collector = HitCollector()
        d0 = normalize(np.array([1., 0.05, 0.]))
        path = sys.trace([Ray([0., 0., 0.], d0, 550.)],
                         collector=collector)[0]
        self.assertEqual([h.label for h in collector], ['A', 'B', 'C'])
        self.assertEqual([e[0] for e in path.events], [0, 1, 2])
        self.assertEqual(path.state, TraceState.Absorbed)
        npt.assert_allclose([s.p[0] for s in path.segs], [0., 30., 10., 50.],
                            atol=1e-12)
        assert path.segs[0].dst == approx(30./d0[0])

    def test_blocked_and_continue(self):
        sys = OpticalSystem.from_requests(
            [plano('stop', 10., mode='aperture', semidia=2.),
             plano('det', 20., mode='absorption')],
            wvls=[550.])
        collector = HitCollector()
        accounting = RayAccounting()
        rays = [Ray([0., 5., 0.], [1., 0., 0.], 550., ray_id='0-0'),
                Ray([0., 1., 0.], [1., 0., 0.], 550., ray_id='0-1')]
        paths = sys.trace(rays, collector=collector, accounting=accounting)
        self.assertEqual(paths[0].state, TraceState.Blocked)
        self.assertEqual(paths[0].stop_surf, 0)
        self.assertEqual(paths[1].state, TraceState.Absorbed)
        self.assertEqual(len(collector.hits_at(0, include_blocked=True)), 2)
        self.assertEqual(len(collector.hits_at(0)), 1)
        self.assertTrue(collector.hits_at(0, include_blocked=True)[0].blocked)
        npt.assert_allclose(paths[1].segs[1].d, [1., 0., 0.])
        self.assertEqual(accounting.totals(0)['blocked'], 1)
        self.assertEqual(accounting.totals(0)['absorbed'], 1)
        self.assertTrue(accounting.is_reconciled())

    def test_miss_is_blocked(self):
        sys = OpticalSystem.from_requests([plano('s', 10.)], wvls=[550.])
        collector = HitCollector()
        path = sys.trace([Ray([0., 0., 0.], [0., 1., 0.], 550.)],
                         collector=collector)[0]
        self.assertEqual(path.state, TraceState.Blocked)
        self.assertEqual(len(collector), 0)

    def test_absorption_terminates(self):
        sys = OpticalSystem.from_requests(
            [plano('det', 10., mode='absorption'), plano('after', 20.)],
            wvls=[550.])
        path = sys.trace([Ray([0., 0., 0.], [1., 0., 0.], 550.)])[0]
        self.assertEqual(path.state, TraceState.Absorbed)
        self.assertEqual(path.events, [(0, TraceState.Absorbed)])

    def test_tir_becomes_reflection(self):
        sys = OpticalSystem.from_requests(
            [plano('exit', 10., n1=1.5, n2=1.0),
             plano('back', 0., semidia=50.)],
            wvls=[550.])
        ang = radians(60.)
        d0 = np.array([cos(ang), sin(ang), 0.])
        path = sys.trace([Ray([0., 0., 0.], d0, 550.)])[0]
        self.assertEqual(path.events[0], (0, TraceState.Reflected))
        npt.assert_allclose(path.segs[1].d, [-cos(ang), sin(ang), 0.],
                            atol=1e-12)
        # the reflected ray meets 'back' from behind and goes on
        self.assertEqual(path.state, TraceState.Exited)

    def test_back_side_refraction(self):
        sys = OpticalSystem.from_requests(
            [plano('face', 0., n1=1.0, n2=1.5)], wvls=[550.])
        # leaving the glass toward -X, from the n2 side of the surface
        ang = radians(30.)
        d0 = np.array([-cos(ang), sin(ang), 0.])
        path = sys.trace([Ray([10., 0., 0.], d0, 550.)])[0]
        self.assertEqual(path.events, [(0, TraceState.Refracted)])
        assert path.end_dir()[1] == approx(0.75)
        self.assertLess(path.end_dir()[0], 0.)

        ang = radians(60.)
        d0 = np.array([-cos(ang), sin(ang), 0.])
        path = sys.trace([Ray([10., 0., 0.], d0, 550.)])[0]
        self.assertEqual(path.events, [(0, TraceState.Reflected)])
        npt.assert_allclose(path.end_dir(), [cos(ang), sin(ang), 0.],
                            atol=1e-12)

    def test_blocking_surface(self):
        for mode in ('block', 'inactive'):
            sys = OpticalSystem.from_requests(
                [plano('baffle', 10., mode=mode),
                 plano('det', 20., mode='absorption')],
                wvls=[550.])
            collector = HitCollector()
            accounting = RayAccounting()
            path = sys.trace([Ray([0., 1., 0.], [1., 0., 0.], 550.)],
                             collector=collector, accounting=accounting)[0]
            self.assertEqual(path.state, TraceState.Blocked)
            self.assertEqual(path.stop_surf, 0)
            npt.assert_allclose(path.end_point(), [10., 1., 0.])
            hits = collector.hits_at(0, include_blocked=True)
            self.assertEqual(len(hits), 1)
            self.assertTrue(hits[0].blocked)
            self.assertEqual(collector.hits_at(1), [])
            self.assertEqual(accounting.totals(0)['blocked'], 1)
            self.assertTrue(accounting.is_reconciled())

    def test_wavelength_selection(self):
        sys = OpticalSystem.from_requests(
            [plano('filter', 10., mode='absorption', sel='x532'),
             plano('det', 20., mode='absorption')],
            wvls=[532., 633.])
        paths = sys.trace([Ray([0., 0., 0.], [1., 0., 0.], 532.),
                           Ray([0., 0., 0.], [1., 0., 0.], 633.)])
        self.assertEqual(paths[0].stop_surf, 1)
        self.assertEqual(paths[1].stop_surf, 0)

    def test_partial_branch(self):
        sys = OpticalSystem.from_requests(
            [{**plano('bs', 10., mode='partial', transmission=0.7),
              'angles': [45., 0.]},
             plano('det', 30., mode='absorption')],
            wvls=[550.])
        collector = HitCollector()
        accounting = RayAccounting()
        ray = Ray([0., 0., 0.], [1., 0., 0.], 550., light_id=3,
                  ray_id='3-0')
        paths = trace_ray(sys.surfaces, ray, sys.rndx, collector=collector,
                          accounting=accounting)
        self.assertEqual(len(paths), 2)
        main, child = paths
        self.assertEqual(main.state, TraceState.Absorbed)
        self.assertEqual(child.state, TraceState.Exited)
        self.assertEqual(child.ray.parent_id, '3-0')
        self.assertEqual(child.ray.ray_id, '3-0.r0')
        self.assertEqual(child.light_id, 3)
        assert child.ray.intensity == approx(0.3)
        npt.assert_allclose(child.segs[0].d, [0., -1., 0.], atol=1e-12)
        det_hit = collector.hits_at(1)[0]
        assert det_hit.intensity == approx(0.7)
        self.assertEqual(accounting.totals(3),
                         {'emitted': 1, 'branched': 1, 'absorbed': 1,
                          'blocked': 0, 'exited': 1})
        self.assertTrue(accounting.is_reconciled(3))


if __name__ == '__main__':
    unittest.main(verbosity=3)
