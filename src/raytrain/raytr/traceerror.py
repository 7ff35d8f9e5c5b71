#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2018 Michael J. Hayford
""" Support for ray trace exception handling

    These are per-ray conditions. The sequential tracer catches them and
    records the outcome; they never abort tracing of other rays.

.. Created on Wed Oct 24 15:22:40 2018

.. codeauthor: Michael J. Hayford
"""


class TraceError(Exception):
    """ Exception raised when ray tracing a model """


class TraceMissedSurfaceError(TraceError):
    """ Exception raised when ray misses a surface """
    def __init__(self, sur=None):
        self.sur = sur


class TraceTIRError(TraceError):
    """ Exception raised when ray TIRs at a surface """
    def __init__(self, inc_dir, normal, prev_indx, follow_indx):
        self.inc_dir = inc_dir
        self.normal = normal
        self.prev_indx = prev_indx
        self.follow_indx = follow_indx


class TraceRayBlockedError(TraceError):
    """ Exception raised when ray is blocked by the aperture of a surface """
    def __init__(self, sur, int_pt):
        self.sur = sur
        self.int_pt = int_pt
