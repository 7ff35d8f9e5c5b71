#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Sun Mar 15 14:02:11 2020

@author: Mike
"""

import unittest
import numpy as np
import numpy.testing as npt

from raytrain.raytr import TraceState
from raytrain.raytr.collector import HitRecord, HitCollector, RayAccounting


def make_hit(num_id, y=0., blocked=False, light_id=0, ray_id='0-0'):
    pt = np.array([10.*num_id, y, 0.])
    event = TraceState.Blocked if blocked else TraceState.Refracted
    return HitRecord(f"s{num_id}", num_id, light_id, ray_id, 550., 1.0,
                     pt, np.array([-1., 0., 0.]), np.array([1., 0., 0.]),
                     None if blocked else np.array([1., 0., 0.]),
                     np.array([0., y, 0.5]), event, blocked=blocked)


class HitCollectorTestCase(unittest.TestCase):

    def setUp(self):
        self.collector = HitCollector()
        self.collector.record(make_hit(0, y=1.))
        self.collector.record(make_hit(1, y=2.))
        self.collector.record(make_hit(1, y=9., blocked=True, ray_id='0-1'))

    def test_hits_at(self):
        self.assertEqual(len(self.collector), 3)
        self.assertEqual(len(self.collector.hits_at(1)), 1)
        self.assertEqual(len(self.collector.hits_at(1, include_blocked=True)),
                         2)
        self.assertEqual(self.collector.hits_at(5), [])
        npt.assert_allclose(self.collector.points_at(1), [[10., 2., 0.]])
        self.assertEqual(self.collector.points_at(5).shape, (0, 3))

    def test_cross_section(self):
        hit = self.collector.hits_at(0)[0]
        self.assertEqual(hit.cross_section, (1., 0.5))

    def test_snapshot_is_detached(self):
        snap = self.collector.snapshot()
        self.collector.record(make_hit(0, y=3.))
        self.assertEqual(len(snap[0]), 1)
        self.assertIsInstance(snap[1], tuple)
        self.assertEqual(len(self.collector.hits_at(0)), 2)

    def test_clear(self):
        self.collector.clear()
        self.assertEqual(len(self.collector), 0)
        self.assertEqual(self.collector.hits_at(0), [])

    def test_merge(self):
        other = HitCollector()
        other.record(make_hit(2, light_id=1))
        self.collector.merge(other)
        self.assertEqual(len(self.collector), 4)
        self.assertEqual([h.num_id for h in self.collector], [0, 1, 1, 2])
        self.assertEqual(len(other), 1)

    def test_dataframe(self):
        df = self.collector.to_dataframe()
        self.assertEqual(len(df), 3)
        self.assertEqual(list(df['num_id']), [0, 1, 1])
        self.assertEqual(list(df['blocked']), [False, False, True])
        self.assertEqual(df['event'].iloc[0], 'Refracted')
        self.assertIn('cross_z', df.columns)
        self.assertEqual(len(HitCollector().to_dataframe().columns),
                         len(df.columns))


class RayAccountingTestCase(unittest.TestCase):

    def test_reconcile(self):
        acct = RayAccounting()
        acct.add_emitted(0, 3)
        acct.add_branch(0)
        acct.add_terminal(0, TraceState.Absorbed)
        acct.add_terminal(0, TraceState.Blocked)
        acct.add_terminal(0, TraceState.Exited)
        self.assertFalse(acct.is_reconciled())
        acct.add_terminal(0, TraceState.Exited)
        self.assertTrue(acct.is_reconciled(0))
        self.assertEqual(acct.totals(0)['exited'], 2)

    def test_non_terminal_state(self):
        acct = RayAccounting()
        with self.assertRaises(ValueError):
            acct.add_terminal(0, TraceState.Refracted)
        self.assertEqual(acct.light_ids(), [])

    def test_merge_and_clear(self):
        a, b = RayAccounting(), RayAccounting()
        a.add_emitted('red')
        a.add_terminal('red', TraceState.Absorbed)
        b.add_emitted('red', 2)
        b.add_terminal('red', TraceState.Exited)
        b.add_emitted('blue')
        b.add_terminal('blue', TraceState.Blocked)
        a.merge(b)
        self.assertEqual(sorted(a.light_ids()), ['blue', 'red'])
        self.assertEqual(a.totals('red')['emitted'], 3)
        self.assertFalse(a.is_reconciled('red'))
        self.assertTrue(a.is_reconciled('blue'))
        self.assertIn('red', a.listobj_str())
        a.clear()
        self.assertEqual(a.light_ids(), [])


if __name__ == '__main__':
    unittest.main(verbosity=3)
