"""Core building blocks.

Components:
    ray: Ray data structure, parametric evaluation and vector helpers
    aabb: Axis-aligned bounding boxes and the BoxRecord query result

All routines are Taichi functions for use inside kernels.
"""

from .aabb import (
    AABB,
    BoxRecord,
    hit_aabb,
    make_aabb,
    make_box_record,
    make_no_box_record,
    surrounding_box,
)
from .ray import Ray, dot, length_squared, make_ray, normalize, ray_at, vec3

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "dot",
    "length_squared",
    "normalize",
    "AABB",
    "BoxRecord",
    "make_aabb",
    "make_box_record",
    "make_no_box_record",
    "surrounding_box",
    "hit_aabb",
]
