#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Sun Sep 17 10:12:55 2017

@author: Mike
"""

import unittest
from pytest import approx

from opticalglass import opticalmedium as om

from raytrain.elem.builderror import MissingWavelengthEntry
from raytrain.elem.factory import SurfaceFactory
from raytrain.seq.medium import (decode_medium, MaterialLookup,
                                 RefractiveIndexTable)


def dict_lookup(indices):
    """ a material lookup backed by a {(name, wvl): index} dict """
    def lookup(material, wvl):
        if isinstance(material, float):
            return material
        return indices[(material, wvl)]
    return lookup


class DecodeMediumTestCase(unittest.TestCase):

    def test_numbers(self):
        self.assertIsInstance(decode_medium(1.0), om.Air)
        mat = decode_medium(1.6)
        assert mat.rindex(550.) == approx(1.6)
        self.assertIsInstance(decode_medium('air'), om.Air)
        self.assertIsInstance(decode_medium(None), om.Air)

    def test_passthrough(self):
        mat = om.ConstantIndex(1.7, 'n17')
        self.assertIs(decode_medium(mat), mat)

    def test_catalog_glass(self):
        lookup = MaterialLookup()
        assert lookup('N-BK7,Schott', 587.5618) == approx(1.5168, abs=1e-4)
        assert lookup(1.5, 587.5618) == 1.5


class IndexTableTestCase(unittest.TestCase):

    def setUp(self):
        factory = SurfaceFactory()
        self.s0 = factory.create_surface({'label': 'front', 'shape': 'plano',
                                          'semidia': 5., 'n2': 'glass'})
        self.s1 = factory.create_surface({'label': 'back', 'shape': 'plano',
                                          'semidia': 5., 'n1': 'glass',
                                          'n2': 1.33})
        self.lookup = dict_lookup({('glass', 532.): 1.52,
                                   ('glass', 633.): 1.51})

    def test_lookup(self):
        rndx = RefractiveIndexTable([self.s0, self.s1], [532., 633.],
                                    lookup=self.lookup)
        self.assertEqual(rndx.indices(self.s0.num_id, 532.), (1.0, 1.52))
        self.assertEqual(rndx.indices(self.s1.num_id, 633.), (1.51, 1.33))
        self.assertIn((self.s1.num_id, 633.), rndx)
        self.assertNotIn((self.s1.num_id, 488.), rndx)
        self.assertEqual(rndx.wvls, (532., 633.))

    def test_default_index(self):
        rndx = RefractiveIndexTable([self.s0], [532.], lookup=self.lookup,
                                    default_index=1.0003)
        assert rndx.indices(self.s0.num_id, 532.)[0] == approx(1.0003)

    def test_read_only(self):
        rndx = RefractiveIndexTable([self.s0, self.s1], [532.],
                                    lookup=self.lookup)
        with self.assertRaises(ValueError):
            rndx.table[0, 0, 0] = 2.0

    def test_missing_wavelength(self):
        rndx = RefractiveIndexTable([self.s0, self.s1], [532.],
                                    lookup=self.lookup)
        with self.assertRaises(MissingWavelengthEntry) as cm:
            rndx.indices(self.s1.num_id, 488.)
        self.assertEqual(cm.exception.label, 'back')

    def test_unresolvable_material(self):
        with self.assertRaises(MissingWavelengthEntry) as cm:
            RefractiveIndexTable([self.s0, self.s1], [532., 488.],
                                 lookup=self.lookup)
        self.assertEqual(cm.exception.label, 'front')
        self.assertEqual(cm.exception.material, 'glass')
        self.assertEqual(cm.exception.wvl, 488.)

    def test_unknown_glass(self):
        factory = SurfaceFactory()
        sur = factory.create_surface({'label': 'odd', 'shape': 'plano',
                                      'semidia': 5.,
                                      'n2': 'NOT-A-GLASS,Schott'})
        with self.assertRaises(MissingWavelengthEntry) as cm:
            RefractiveIndexTable([sur], [587.6])
        self.assertEqual(cm.exception.material, 'NOT-A-GLASS,Schott')


if __name__ == '__main__':
    unittest.main(verbosity=3)
