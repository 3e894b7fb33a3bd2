"""Axis-aligned bounding boxes.

Bounding boxes are the currency of acceleration-structure construction:
every primitive reports either a conservative box or "no finite box" (the
infinite plane). The result is a BoxRecord whose valid flag plays the same
role as HitRecord.hit.

Example:
    >>> box = make_aabb(vec3(0, 0, 0), vec3(1, 1, 1))
    >>> rec = make_box_record(box)
    >>> # Use hit_aabb(ray, rec.box, t_min, t_max) within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from .ray import Ray

vec3 = tm.vec3


@ti.dataclass
class AABB:
    """An axis-aligned box given by its minimum and maximum corners.

    Attributes:
        minimum: The corner with the smallest coordinate on every axis.
        maximum: The corner with the largest coordinate on every axis.
    """

    minimum: vec3
    maximum: vec3


@ti.dataclass
class BoxRecord:
    """Result of a bounding-box query.

    Attributes:
        valid: 1 if the primitive has a finite bounding box, 0 otherwise.
        box: The bounding box. Only meaningful if valid == 1.
    """

    valid: ti.i32
    box: AABB


@ti.func
def make_aabb(a: vec3, b: vec3) -> AABB:
    """Create a box from two corner points.

    The corners are stored as given; callers pass (min, max).
    """
    return AABB(minimum=a, maximum=b)


@ti.func
def make_box_record(box: AABB) -> BoxRecord:
    """Wrap a finite box in a valid BoxRecord."""
    return BoxRecord(valid=1, box=box)


@ti.func
def make_no_box_record() -> BoxRecord:
    """Create a BoxRecord reporting that no finite box exists."""
    return BoxRecord(
        valid=0,
        box=AABB(minimum=vec3(0.0, 0.0, 0.0), maximum=vec3(0.0, 0.0, 0.0)),
    )


@ti.func
def surrounding_box(box0: AABB, box1: AABB) -> AABB:
    """Compute the smallest box enclosing both boxes."""
    return AABB(
        minimum=ti.min(box0.minimum, box1.minimum),
        maximum=ti.max(box0.maximum, box1.maximum),
    )


@ti.func
def hit_aabb(ray: Ray, box: AABB, t_min: ti.f32, t_max: ti.f32) -> ti.i32:
    """Slab test for ray-box overlap.

    For each axis the ray's entry and exit parameters through the slab are
    intersected with the running [t_min, t_max] interval. A box with zero
    width on an axis the ray travels along yields an empty interval, which
    is why flat primitives pad their boxes.

    Args:
        ray: The ray to test.
        box: The box to test against.
        t_min: Start of the parametric interval.
        t_max: End of the parametric interval.

    Returns:
        1 if the ray overlaps the box within the interval, 0 otherwise.
    """
    lo = t_min
    hi = t_max
    for a in ti.static(range(3)):
        inv_d = 1.0 / ray.direction[a]
        t0 = (box.minimum[a] - ray.origin[a]) * inv_d
        t1 = (box.maximum[a] - ray.origin[a]) * inv_d
        if inv_d < 0.0:
            temp = t0
            t0 = t1
            t1 = temp
        if t0 > lo:
            lo = t0
        if t1 < hi:
            hi = t1
    result = 0
    if hi > lo:
        result = 1
    return result
