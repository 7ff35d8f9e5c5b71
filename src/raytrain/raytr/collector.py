#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2020 Michael J. Hayford
""" Intersection records and ray accounting

    A :class:`HitCollector` and a :class:`RayAccounting` are owned by the
    caller and passed to each trace. Neither is shared implicitly: reuse
    requires an explicit :meth:`~HitCollector.clear`, and results from
    independent traces, e.g. one per worker, are combined with `merge()`.

.. Created on Sat Mar 14 11:08:29 2020

.. codeauthor: Michael J. Hayford
"""
from collections import Counter, defaultdict

import attr
import numpy as np
import pandas as pd

from raytrain.raytr import TraceState, TERMINAL_STATES


@attr.s(frozen=True, eq=False)
class HitRecord():
    """ a ray surface intersection

    Attributes:
        label: surface id string
        num_id: surface numeric id
        light_id: light source the ray is attributed to
        ray_id: lineage id of the ray
        wvl: wavelength in nm
        intensity: intensity of the ray arriving at the surface
        pt: intersection point, world coordinates
        nrml: unit surface normal at **pt**, world coordinates
        inc_dir: incident direction, world coordinates
        exit_dir: outgoing direction, None if the ray stopped here
        local_pt: intersection point, local coordinates
        event: the :class:`~.TraceState` at this surface
        blocked: True if the ray was stopped by the aperture
    """
    label: str = attr.ib()
    num_id: int = attr.ib()
    light_id = attr.ib()
    ray_id: str = attr.ib()
    wvl: float = attr.ib()
    intensity: float = attr.ib()
    pt = attr.ib()
    nrml = attr.ib()
    inc_dir = attr.ib()
    exit_dir = attr.ib()
    local_pt = attr.ib()
    event: TraceState = attr.ib()
    blocked: bool = attr.ib(default=False)

    @property
    def cross_section(self):
        """ the local transverse (y, z) coordinates of the hit """
        return self.local_pt[1], self.local_pt[2]


class HitCollector():
    """ accumulates :class:`HitRecord` instances from one or more traces """

    def __init__(self):
        self._hits = []
        self._by_surf = defaultdict(list)

    def __len__(self):
        return len(self._hits)

    def __iter__(self):
        return iter(self._hits)

    def record(self, hit: HitRecord):
        self._hits.append(hit)
        self._by_surf[hit.num_id].append(hit)

    def clear(self):
        self._hits = []
        self._by_surf = defaultdict(list)

    def merge(self, other: 'HitCollector'):
        """ append the records of `other`, keeping their order """
        for hit in other:
            self.record(hit)
        return self

    def hits_at(self, num_id: int, include_blocked=False) -> list[HitRecord]:
        """ the hits on surface `num_id`, by default only unblocked ones """
        hits = self._by_surf.get(num_id, [])
        if include_blocked:
            return list(hits)
        return [h for h in hits if not h.blocked]

    def snapshot(self) -> dict[int, tuple[HitRecord, ...]]:
        """ an immutable view of the records, keyed by surface numeric id """
        return {num_id: tuple(hits) for num_id, hits in self._by_surf.items()}

    def points_at(self, num_id: int):
        """ (N, 3) array of the unblocked hit points on `num_id` """
        pts = [h.pt for h in self.hits_at(num_id)]
        return np.array(pts).reshape(-1, 3)

    def to_dataframe(self) -> pd.DataFrame:
        """ return the records as a :class:`pandas.DataFrame` """
        rows = []
        for h in self._hits:
            rows.append({
                'num_id': h.num_id, 'label': h.label,
                'light_id': h.light_id, 'ray_id': h.ray_id, 'wvl': h.wvl,
                'intensity': h.intensity,
                'x': h.pt[0], 'y': h.pt[1], 'z': h.pt[2],
                'l': h.inc_dir[0], 'm': h.inc_dir[1], 'n': h.inc_dir[2],
                'cross_y': h.local_pt[1], 'cross_z': h.local_pt[2],
                'event': h.event.name, 'blocked': h.blocked,
                })
        columns = ['num_id', 'label', 'light_id', 'ray_id', 'wvl',
                   'intensity', 'x', 'y', 'z', 'l', 'm', 'n',
                   'cross_y', 'cross_z', 'event', 'blocked']
        return pd.DataFrame(rows, columns=columns)


_terminal_keys = {TraceState.Absorbed: 'absorbed',
                  TraceState.Blocked: 'blocked',
                  TraceState.Exited: 'exited'}


class RayAccounting():
    """ per light source counts of emitted, branched and terminated rays

    Every emitted ray and every branch ends in exactly one terminal state,
    so for each light source::

        emitted + branched == absorbed + blocked + exited
    """

    def __init__(self):
        self.counts = defaultdict(Counter)

    def add_emitted(self, light_id, n=1):
        self.counts[light_id]['emitted'] += n

    def add_branch(self, light_id, n=1):
        self.counts[light_id]['branched'] += n

    def add_terminal(self, light_id, state: TraceState):
        if state not in TERMINAL_STATES:
            raise ValueError(f"{state.name} is not a terminal state")
        self.counts[light_id][_terminal_keys[state]] += 1

    def clear(self):
        self.counts = defaultdict(Counter)

    def merge(self, other: 'RayAccounting'):
        for light_id, cnt in other.counts.items():
            self.counts[light_id].update(cnt)
        return self

    def light_ids(self):
        return list(self.counts.keys())

    def totals(self, light_id) -> dict[str, int]:
        cnt = self.counts[light_id]
        return {key: cnt[key] for key in ('emitted', 'branched', 'absorbed',
                                          'blocked', 'exited')}

    def is_reconciled(self, light_id=None) -> bool:
        """ True if the terminal counts account for every ray """
        ids = self.light_ids() if light_id is None else [light_id]
        for lid in ids:
            t = self.totals(lid)
            if (t['emitted'] + t['branched'] !=
                    t['absorbed'] + t['blocked'] + t['exited']):
                return False
        return True

    def listobj_str(self):
        o_str = "light  emitted  branched  absorbed  blocked  exited\n"
        for lid in self.light_ids():
            t = self.totals(lid)
            o_str += (f"{lid!s:>5}  {t['emitted']:7d}  {t['branched']:8d}  "
                      f"{t['absorbed']:8d}  {t['blocked']:7d}  "
                      f"{t['exited']:6d}\n")
        return o_str
