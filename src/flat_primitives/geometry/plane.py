"""Infinite plane primitive.

A plane is defined by:
- center: Any point on the plane
- normal: The plane normal (unit length by convention, not enforced)
- material_id: Opaque material handle reported on a hit

Ray-plane intersection solves dot(origin + t * direction - center, normal) = 0:
    t = dot(center - origin, normal) / dot(normal, direction)

Rays within PLANE_EPSILON of parallel are treated as misses, and so are
intersections closer than PLANE_EPSILON along the ray (self-intersection
guard). Hits follow the planar surface policy (see hit_record).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from flat_primitives.geometry.plane import Plane, hit_plane
    >>> ground = Plane(center=vec3(0, 0, 0), normal=vec3(0, 1, 0), material_id=0)
    >>> # Use hit_plane(ray, ground, t_min, t_max) within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from flat_primitives.core.aabb import BoxRecord, make_no_box_record
from flat_primitives.core.ray import Ray

from .hit_record import HitRecord, make_miss_record, planar_surface_hit

vec3 = tm.vec3

# Threshold for both the parallel-ray test and the minimum accepted t
PLANE_EPSILON = 1e-4


@ti.dataclass
class Plane:
    """An infinite plane through a point with a given normal.

    Attributes:
        center: A point on the plane (vec3).
        normal: The plane normal (vec3), reported unmodified on hits.
        material_id: Opaque material handle.
    """

    center: vec3
    normal: vec3
    material_id: ti.i32


@ti.func
def plane_parameter(ray: Ray, plane: Plane):
    """Solve for the ray parameter at which the ray crosses the plane.

    Args:
        ray: The ray to intersect.
        plane: The plane to intersect.

    Returns:
        Tuple of (crosses, t). crosses is 0 when the ray is within
        PLANE_EPSILON of parallel, in which case t is 0.
    """
    crosses = 0
    t = 0.0
    denom = tm.dot(plane.normal, ray.direction)
    if ti.abs(denom) > PLANE_EPSILON:
        crosses = 1
        t = tm.dot(plane.center - ray.origin, plane.normal) / denom
    return crosses, t


@ti.func
def hit_plane(ray: Ray, plane: Plane, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
    """Test for ray-plane intersection.

    A hit requires a non-parallel ray, t >= PLANE_EPSILON and
    t_min <= t <= t_max. The reported normal is the plane's stored normal
    (no front-face correction) and (u, v) is the hit point's world (x, z).

    Args:
        ray: The ray to test.
        plane: The plane to test against.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        A HitRecord; the canonical miss record if there is no valid hit.
    """
    result = make_miss_record()
    crosses, t = plane_parameter(ray, plane)
    if crosses == 1:
        if t >= PLANE_EPSILON and t >= t_min and t <= t_max:
            result = planar_surface_hit(ray, t, plane.normal, plane.material_id)
    return result


@ti.func
def plane_bounding_box(plane: Plane, time0: ti.f32, time1: ti.f32) -> BoxRecord:
    """An infinite plane has no finite bounding box.

    Args:
        plane: The plane (unused).
        time0: Start of the shutter interval (unused; planes are static).
        time1: End of the shutter interval (unused).

    Returns:
        A BoxRecord with valid == 0.
    """
    return make_no_box_record()


@ti.func
def make_plane(center: vec3, normal: vec3, material_id: ti.i32) -> Plane:
    """Create a plane within a Taichi kernel."""
    return Plane(center=center, normal=normal, material_id=material_id)
