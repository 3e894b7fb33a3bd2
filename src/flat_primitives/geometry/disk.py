"""Disk primitive: a circular region of a plane.

A disk is a Plane plus a radius. Intersection delegates to hit_plane and
then keeps the hit only if it lies within the radius of the plane's center;
the plane already enforces the parametric interval, so the disk applies no
further t clamping. Hits follow the planar surface policy.

Two bounding-box routines are provided:

disk_bounding_box:
    A true enclosing box for any normal orientation. Along each axis the
    half-extent is radius * sqrt(1 - n_i^2) for the unit normal n, floored
    at DISK_SLAB_HALF_THICKNESS so the box keeps positive volume.

disk_bounding_box_legacy:
    The historical box kept for parity with existing scenes. It picks the
    thin axis with exact ``== 1`` tests on the normal's x and then y
    component, and every other normal falls through to a Z slab whose two
    corners are both ``center - (r, r, 0.01)``, a zero-volume box.

Both routines agree exactly for the +X and +Y normals; a +Z disk already
lands in the legacy fallback.
"""

import taichi as ti
import taichi.math as tm

from flat_primitives.core.aabb import BoxRecord, make_aabb, make_box_record
from flat_primitives.core.ray import Ray, length_squared, normalize

from .hit_record import HitRecord, make_miss_record
from .plane import Plane, hit_plane

vec3 = tm.vec3

# Half thickness of the slab along the disk's normal axis
DISK_SLAB_HALF_THICKNESS = 0.01


@ti.dataclass
class Disk:
    """A disk given by its supporting plane and a radius.

    Attributes:
        plane: The supporting plane; its center is the disk center and its
            material_id is the disk's material.
        radius: The disk radius (positive float).
    """

    plane: Plane
    radius: ti.f32


@ti.func
def hit_disk(ray: Ray, disk: Disk, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
    """Test for ray-disk intersection.

    Args:
        ray: The ray to test.
        disk: The disk to test against.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        A HitRecord; the canonical miss record if the supporting plane is
        missed or the plane hit lies outside the radius.
    """
    result = make_miss_record()
    rec = hit_plane(ray, disk.plane, t_min, t_max)
    if rec.hit == 1:
        p = ray.direction * rec.t + ray.origin
        d2 = length_squared(p - disk.plane.center)
        if d2 <= disk.radius * disk.radius:
            result = rec
    return result


@ti.func
def disk_bounding_box(disk: Disk, time0: ti.f32, time1: ti.f32) -> BoxRecord:
    """Compute an enclosing box for a disk of any orientation.

    Args:
        disk: The disk to bound.
        time0: Start of the shutter interval (unused; disks are static).
        time1: End of the shutter interval (unused).

    Returns:
        A valid BoxRecord.
    """
    n = normalize(disk.plane.normal)
    extent = disk.radius * ti.sqrt(ti.max(1.0 - n * n, 0.0))
    extent = ti.max(extent, DISK_SLAB_HALF_THICKNESS)
    c = disk.plane.center
    return make_box_record(make_aabb(c - extent, c + extent))


@ti.func
def disk_bounding_box_legacy(disk: Disk, time0: ti.f32, time1: ti.f32) -> BoxRecord:
    """Compute the historical disk box, including its fallback defect.

    Only axis-aligned disks with a +X or +Y normal get a correct box; every
    other normal gets the degenerate Z-slab fallback.

    Args:
        disk: The disk to bound.
        time0: Start of the shutter interval (unused).
        time1: End of the shutter interval (unused).

    Returns:
        A BoxRecord with valid == 1 in every case.
    """
    c = disk.plane.center
    n = disk.plane.normal
    r = disk.radius
    h = DISK_SLAB_HALF_THICKNESS
    box = make_aabb(c - vec3(r, r, h), c - vec3(r, r, h))
    if n.x == 1.0:
        box = make_aabb(c - vec3(h, r, r), c + vec3(h, r, r))
    elif n.y == 1.0:
        box = make_aabb(c - vec3(r, h, r), c + vec3(r, h, r))
    return make_box_record(box)


@ti.func
def make_disk(center: vec3, normal: vec3, radius: ti.f32, material_id: ti.i32) -> Disk:
    """Create a disk within a Taichi kernel."""
    return Disk(
        plane=Plane(center=center, normal=normal, material_id=material_id),
        radius=radius,
    )
