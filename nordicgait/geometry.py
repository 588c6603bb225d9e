"""Planar geometry helpers on landmark coordinates.

All functions accept any objects exposing ``x`` and ``y`` attributes
(``Landmark`` or :class:`Point`) and are pure. Angles are in degrees.
Denominators carry a small epsilon so coincident points yield a
finite (if imprecise) angle rather than a division fault.
"""

from dataclasses import dataclass

import numpy as np

from .constants import EPSILON


@dataclass(frozen=True)
class Point:
    x: float
    y: float


def distance(p1, p2) -> float:
    """Euclidean distance between two points in the image plane."""
    return float(np.hypot(p1.x - p2.x, p1.y - p2.y))


def midpoint(p1, p2) -> Point:
    return Point((p1.x + p2.x) / 2, (p1.y + p2.y) / 2)


def vertical_angle(p_from, p_to) -> float:
    """Angle between ``p_to - p_from`` and the downward vertical, in [0, 180].

    Image y grows downward, so a vector pointing straight down gives 0
    and one pointing straight up gives 180.
    """
    dx = p_to.x - p_from.x
    dy = p_to.y - p_from.y
    cos_a = dy / (np.hypot(dx, dy) + EPSILON)
    return float(np.degrees(np.arccos(np.clip(cos_a, -1.0, 1.0))))


def included_angle(a, b, c) -> float:
    """Angle at vertex *b* between rays b->a and b->c, in [0, 180].

    Law of cosines on the three pairwise distances.
    """
    ab = distance(a, b)
    bc = distance(b, c)
    ac = distance(a, c)
    cos_b = (ab * ab + bc * bc - ac * ac) / (2 * ab * bc + EPSILON)
    return float(np.degrees(np.arccos(np.clip(cos_b, -1.0, 1.0))))
