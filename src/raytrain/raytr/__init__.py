""" Package for sequential ray tracing and analysis

    The :mod:`~.raytr` subpackage provides the value types shared by the
    ray tracer and its consumers:

        - :class:`~.Ray`, a starting ray: point, direction, wavelength,
          light source id, intensity and lineage
        - :class:`~.RaySeg`, one hop of a traced ray
        - :class:`~.RayPath`, the ordered hops of a ray plus its outcome

    The sequential tracer is in :mod:`~.raytrace`. Intersection records and
    per light source accounting are kept in :mod:`~.collector`. Rays are
    generated with :mod:`~.lightsource` and :mod:`~.sampler`. Evaluation
    and spot analysis entry points are in :mod:`~.analyses`.
"""

from collections import namedtuple
from enum import Enum, auto

import attr
import numpy as np


class TraceState(Enum):
    """ states of a ray during, and at the end of, a sequential trace """
    Traveling = auto()
    Hit = auto()
    Refracted = auto()
    Reflected = auto()
    Absorbed = auto()
    Blocked = auto()
    Exited = auto()


TERMINAL_STATES = (TraceState.Absorbed, TraceState.Blocked, TraceState.Exited)


RaySeg = namedtuple('RaySeg', ['p', 'd', 'dst', 'nrml'])
RaySeg.p.__doc__ = "the point of incidence, world coordinates"
RaySeg.d.__doc__ = "ray direction cosine following the surface, world coordinates"
RaySeg.dst.__doc__ = "geometric distance to next point, 0 for the last point"
RaySeg.nrml.__doc__ = "surface normal at **p**, or None at the ray start"


def _as_vec3(v):
    a = np.array(v, dtype=float)
    if a.shape != (3,):
        raise ValueError(f"expected a 3 vector, got shape {a.shape}")
    return a


def _as_dir3(v):
    a = _as_vec3(v)
    length = np.linalg.norm(a)
    if length == 0.0:
        raise ValueError("ray direction has zero length")
    return a/length


@attr.s(frozen=True, eq=False)
class Ray():
    """ a ray as launched by a light source, or created by a branch

    Attributes:
        pt: starting point, world coordinates
        dir: unit direction, world coordinates
        wvl: wavelength in nm
        light_id: id of the light source the ray is attributed to
        intensity: relative power carried by the ray
        ray_id: lineage id, unique within a trace
        parent_id: lineage id of the ray this one branched from, or None
    """
    pt = attr.ib(converter=_as_vec3)
    dir = attr.ib(converter=_as_dir3)
    wvl: float = attr.ib(converter=float)
    light_id = attr.ib(default=0)
    intensity: float = attr.ib(default=1.0, converter=float)
    ray_id: str = attr.ib(default=None)
    parent_id: str = attr.ib(default=None)

    def __attrs_post_init__(self):
        if self.ray_id is None:
            object.__setattr__(self, 'ray_id', f"{self.light_id}-0")

    def branch(self, pt, dir, tag, intensity):
        """ return a child ray starting at `pt`, tagged with `tag` """
        return Ray(pt, dir, self.wvl, light_id=self.light_id,
                   intensity=intensity, ray_id=f"{self.ray_id}.{tag}",
                   parent_id=self.ray_id)


@attr.s(eq=False)
class RayPath():
    """ the traced path of one ray

    Attributes:
        ray: the :class:`Ray` that was traced
        segs: list of :class:`RaySeg`, starting with the ray's origin
        events: list of (surface num_id, :class:`TraceState`) per surface
            encountered
        state: the terminal :class:`TraceState`
        stop_surf: num_id of the surface where the ray terminated, or None
            if it exited the train
    """
    ray: Ray = attr.ib()
    segs: list = attr.ib(factory=list)
    events: list = attr.ib(factory=list)
    state: TraceState = attr.ib(default=TraceState.Traveling)
    stop_surf: int | None = attr.ib(default=None)

    @property
    def ray_id(self):
        return self.ray.ray_id

    @property
    def light_id(self):
        return self.ray.light_id

    @property
    def wvl(self):
        return self.ray.wvl

    def end_point(self):
        return self.segs[-1].p

    def end_dir(self):
        return self.segs[-1].d

    def listobj_str(self):
        o_str = (f"ray {self.ray_id}: light {self.light_id}, "
                 f"wvl={self.wvl}, {self.state.name}\n")
        for i, seg in enumerate(self.segs):
            o_str += (f"{i:3d}: {seg.p[0]:12.6f} {seg.p[1]:12.6f} "
                      f"{seg.p[2]:12.6f}  {seg.dst:12.6f}\n")
        return o_str
