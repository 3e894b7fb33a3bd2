"""Axis-aligned rectangle primitives.

Three rectangle types, one per coordinate plane, each lying at a fixed
offset k along its normal axis:

    RectXY: [x0, x1] x [y0, y1] at z = k, outward normal +Z
    RectXZ: [x0, x1] x [z0, z1] at y = k, outward normal +Y
    RectYZ: [y0, y1] x [z0, z1] at x = k, outward normal +X

Intersection solves t = (k - origin[axis]) / direction[axis], keeps t only
inside [t_min, t_max], and keeps the in-plane point only inside the
rectangle's bounds. Every comparison is written as an acceptance test, so a
NaN t (ray lying in the rectangle's plane) or an infinite t (ray parallel
to it) always yields a miss. Hits follow the rectangle surface policy (see
hit_record).

Bounding boxes pad the zero-width normal axis by RECT_PADDING on each side
so that slab-based acceleration structures see a box of positive volume.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from flat_primitives.geometry.rect import RectXY, hit_rect_xy
    >>> back_wall = RectXY(x0=0, x1=555, y0=0, y1=555, k=555, material_id=2)
    >>> # Use hit_rect_xy(ray, back_wall, t_min, t_max) within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from flat_primitives.core.aabb import BoxRecord, make_aabb, make_box_record
from flat_primitives.core.ray import Ray

from .hit_record import HitRecord, make_miss_record, rect_surface_hit, rect_uv

vec3 = tm.vec3

# Half thickness added along the normal axis of a rectangle's bounding box
RECT_PADDING = 1e-4

# Axis indices
X, Y, Z = 0, 1, 2


@ti.dataclass
class RectXY:
    """A rectangle in the plane z = k.

    Attributes:
        x0, x1: Extent along X (x0 < x1).
        y0, y1: Extent along Y (y0 < y1).
        k: Offset along Z.
        material_id: Opaque material handle.
    """

    x0: ti.f32
    x1: ti.f32
    y0: ti.f32
    y1: ti.f32
    k: ti.f32
    material_id: ti.i32


@ti.dataclass
class RectXZ:
    """A rectangle in the plane y = k.

    Attributes:
        x0, x1: Extent along X (x0 < x1).
        z0, z1: Extent along Z (z0 < z1).
        k: Offset along Y.
        material_id: Opaque material handle.
    """

    x0: ti.f32
    x1: ti.f32
    z0: ti.f32
    z1: ti.f32
    k: ti.f32
    material_id: ti.i32


@ti.dataclass
class RectYZ:
    """A rectangle in the plane x = k.

    Attributes:
        y0, y1: Extent along Y (y0 < y1).
        z0, z1: Extent along Z (z0 < z1).
        k: Offset along X.
        material_id: Opaque material handle.
    """

    y0: ti.f32
    y1: ti.f32
    z0: ti.f32
    z1: ti.f32
    k: ti.f32
    material_id: ti.i32


@ti.func
def _hit_axis_rect(
    ray: Ray,
    a0: ti.f32,
    a1: ti.f32,
    b0: ti.f32,
    b1: ti.f32,
    k: ti.f32,
    material_id: ti.i32,
    t_min: ti.f32,
    t_max: ti.f32,
    axis: ti.template(),
    axis_a: ti.template(),
    axis_b: ti.template(),
) -> HitRecord:
    """Shared intersection for a rectangle normal to ``axis``.

    Args:
        ray: The ray to test.
        a0, a1: Extent along ``axis_a`` (the u direction).
        b0, b1: Extent along ``axis_b`` (the v direction).
        k: Offset of the rectangle along ``axis``.
        material_id: Material handle reported on a hit.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.
        axis: Compile-time index of the normal axis.
        axis_a: Compile-time index of the u axis.
        axis_b: Compile-time index of the v axis.

    Returns:
        A HitRecord; the canonical miss record if there is no valid hit.
    """
    result = make_miss_record()
    t = (k - ray.origin[axis]) / ray.direction[axis]
    if t >= t_min and t <= t_max:
        a = ray.origin[axis_a] + t * ray.direction[axis_a]
        b = ray.origin[axis_b] + t * ray.direction[axis_b]
        if a >= a0 and a <= a1 and b >= b0 and b <= b1:
            u, v = rect_uv(a, b, a0, a1, b0, b1)
            outward_normal = vec3(0.0, 0.0, 0.0)
            outward_normal[axis] = 1.0
            result = rect_surface_hit(ray, t, outward_normal, u, v, material_id)
    return result


@ti.func
def hit_rect_xy(ray: Ray, rect: RectXY, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
    """Test for ray intersection with a rectangle in the plane z = k.

    u runs along X and v along Y; the outward normal is +Z.
    """
    return _hit_axis_rect(
        ray, rect.x0, rect.x1, rect.y0, rect.y1, rect.k, rect.material_id, t_min, t_max, Z, X, Y
    )


@ti.func
def hit_rect_xz(ray: Ray, rect: RectXZ, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
    """Test for ray intersection with a rectangle in the plane y = k.

    u runs along X and v along Z; the outward normal is +Y.
    """
    return _hit_axis_rect(
        ray, rect.x0, rect.x1, rect.z0, rect.z1, rect.k, rect.material_id, t_min, t_max, Y, X, Z
    )


@ti.func
def hit_rect_yz(ray: Ray, rect: RectYZ, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
    """Test for ray intersection with a rectangle in the plane x = k.

    u runs along Y and v along Z; the outward normal is +X.
    """
    return _hit_axis_rect(
        ray, rect.y0, rect.y1, rect.z0, rect.z1, rect.k, rect.material_id, t_min, t_max, X, Y, Z
    )


# =============================================================================
# Bounding Boxes
# =============================================================================


@ti.func
def rect_xy_bounding_box(rect: RectXY, time0: ti.f32, time1: ti.f32) -> BoxRecord:
    """Bounding box of an XY rectangle, padded along Z.

    time0 and time1 are unused; rectangles are static.
    """
    return make_box_record(
        make_aabb(
            vec3(rect.x0, rect.y0, rect.k - RECT_PADDING),
            vec3(rect.x1, rect.y1, rect.k + RECT_PADDING),
        )
    )


@ti.func
def rect_xz_bounding_box(rect: RectXZ, time0: ti.f32, time1: ti.f32) -> BoxRecord:
    """Bounding box of an XZ rectangle, padded along Y."""
    return make_box_record(
        make_aabb(
            vec3(rect.x0, rect.k - RECT_PADDING, rect.z0),
            vec3(rect.x1, rect.k + RECT_PADDING, rect.z1),
        )
    )


@ti.func
def rect_yz_bounding_box(rect: RectYZ, time0: ti.f32, time1: ti.f32) -> BoxRecord:
    """Bounding box of a YZ rectangle, padded along X."""
    return make_box_record(
        make_aabb(
            vec3(rect.k - RECT_PADDING, rect.y0, rect.z0),
            vec3(rect.k + RECT_PADDING, rect.y1, rect.z1),
        )
    )


@ti.func
def make_rect_xy(
    x0: ti.f32, x1: ti.f32, y0: ti.f32, y1: ti.f32, k: ti.f32, material_id: ti.i32
) -> RectXY:
    """Create an XY rectangle within a Taichi kernel."""
    return RectXY(x0=x0, x1=x1, y0=y0, y1=y1, k=k, material_id=material_id)


@ti.func
def make_rect_xz(
    x0: ti.f32, x1: ti.f32, z0: ti.f32, z1: ti.f32, k: ti.f32, material_id: ti.i32
) -> RectXZ:
    """Create an XZ rectangle within a Taichi kernel."""
    return RectXZ(x0=x0, x1=x1, z0=z0, z1=z1, k=k, material_id=material_id)


@ti.func
def make_rect_yz(
    y0: ti.f32, y1: ti.f32, z0: ti.f32, z1: ti.f32, k: ti.f32, material_id: ti.i32
) -> RectYZ:
    """Create a YZ rectangle within a Taichi kernel."""
    return RectYZ(y0=y0, y1=y1, z0=z0, z1=z1, k=k, material_id=material_id)
