"""Scene-level primitive storage and dispatch.

Primitives are stored as a closed tagged variant: every slot carries a
PrimitiveKind tag plus the union of the parameters any kind needs, laid out
as Structure-of-Arrays Taichi fields. One dispatch function exists per
operation:

    hit_primitive(ray, i, t_min, t_max)         -> HitRecord
    primitive_bounding_box(i, time0, time1)     -> BoxRecord

On top of dispatch, intersect_scene returns the closest hit over all
primitives and intersect_scene_any answers shadow-ray queries.

Slot parameter usage per kind:
    PLANE:   center, normal
    DISK:    center, normal, radius
    RECT_XY: extents = (x0, x1, y0, y1), offset = k (z)
    RECT_XZ: extents = (x0, x1, z0, z1), offset = k (y)
    RECT_YZ: extents = (y0, y1, z0, z1), offset = k (x)

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from flat_primitives.scene.intersection import (
    ...     add_plane, add_rect_xy, intersect_scene, clear_scene
    ... )
    >>> clear_scene()
    >>> add_plane(vec3(0, 0, 0), vec3(0, 1, 0), material_id=0)
    >>> add_rect_xy(-1, 1, -1, 1, -5, material_id=1)
    >>> # Use intersect_scene(ray, t_min, t_max) within a Taichi kernel
"""

from enum import IntEnum
from typing import Any

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from flat_primitives.core.aabb import BoxRecord, make_no_box_record
from flat_primitives.core.ray import Ray
from flat_primitives.geometry.disk import (
    Disk,
    disk_bounding_box,
    disk_bounding_box_legacy,
    hit_disk,
)
from flat_primitives.geometry.hit_record import HitRecord, make_miss_record
from flat_primitives.geometry.plane import Plane, hit_plane, plane_bounding_box
from flat_primitives.geometry.rect import (
    RectXY,
    RectXZ,
    RectYZ,
    hit_rect_xy,
    hit_rect_xz,
    hit_rect_yz,
    rect_xy_bounding_box,
    rect_xz_bounding_box,
    rect_yz_bounding_box,
)

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


class PrimitiveKind(IntEnum):
    """Tag of a stored primitive."""

    PLANE = 0
    DISK = 1
    RECT_XY = 2
    RECT_XZ = 3
    RECT_YZ = 4


# Plain int tags for use inside Taichi functions
KIND_PLANE = int(PrimitiveKind.PLANE)
KIND_DISK = int(PrimitiveKind.DISK)
KIND_RECT_XY = int(PrimitiveKind.RECT_XY)
KIND_RECT_XZ = int(PrimitiveKind.RECT_XZ)
KIND_RECT_YZ = int(PrimitiveKind.RECT_YZ)

# Maximum number of primitives supported in the scene
MAX_PRIMITIVES = 1024

# Primitive storage: Structure of Arrays layout for GPU efficiency
prim_kinds = ti.field(dtype=ti.i32, shape=MAX_PRIMITIVES)
prim_material_ids = ti.field(dtype=ti.i32, shape=MAX_PRIMITIVES)
prim_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PRIMITIVES)
prim_normals = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PRIMITIVES)
prim_radii = ti.field(dtype=ti.f32, shape=MAX_PRIMITIVES)
prim_extents = ti.Vector.field(4, dtype=ti.f32, shape=MAX_PRIMITIVES)
prim_offsets = ti.field(dtype=ti.f32, shape=MAX_PRIMITIVES)
num_primitives = ti.field(dtype=ti.i32, shape=())

# Scratch output for host-side bounding box export
_box_valid = ti.field(dtype=ti.i32, shape=MAX_PRIMITIVES)
_box_min = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PRIMITIVES)
_box_max = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PRIMITIVES)


def clear_scene() -> None:
    """Clear all primitives from the scene.

    Resets the primitive count to zero. The field data is not cleared but
    will be overwritten when new primitives are added.
    """
    num_primitives[None] = 0


def _add_primitive(
    kind: PrimitiveKind,
    material_id: int,
    center: Any = (0.0, 0.0, 0.0),
    normal: Any = (0.0, 0.0, 0.0),
    radius: float = 0.0,
    extents: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0),
    offset: float = 0.0,
) -> int:
    """Write one tagged slot and return its index.

    Raises:
        RuntimeError: If the maximum number of primitives is exceeded.
    """
    idx = num_primitives[None]
    if idx >= MAX_PRIMITIVES:
        raise RuntimeError(f"Maximum number of primitives ({MAX_PRIMITIVES}) exceeded")
    prim_kinds[idx] = int(kind)
    prim_material_ids[idx] = material_id
    prim_centers[idx] = center
    prim_normals[idx] = normal
    prim_radii[idx] = radius
    prim_extents[idx] = extents
    prim_offsets[idx] = offset
    num_primitives[None] = idx + 1
    return idx


def add_plane(center: vec3, normal: vec3, material_id: int = 0) -> int:
    """Add an infinite plane to the scene.

    Args:
        center: A point on the plane.
        normal: The plane normal.
        material_id: The material handle to associate with this plane.

    Returns:
        The index of the added primitive.

    Raises:
        RuntimeError: If the maximum number of primitives is exceeded.
    """
    return _add_primitive(PrimitiveKind.PLANE, material_id, center=center, normal=normal)


def add_disk(center: vec3, normal: vec3, radius: float, material_id: int = 0) -> int:
    """Add a disk to the scene.

    Args:
        center: The center of the disk.
        normal: The normal of the disk's supporting plane.
        radius: The disk radius.
        material_id: The material handle to associate with this disk.

    Returns:
        The index of the added primitive.

    Raises:
        RuntimeError: If the maximum number of primitives is exceeded.
    """
    return _add_primitive(
        PrimitiveKind.DISK, material_id, center=center, normal=normal, radius=radius
    )


def add_rect_xy(
    x0: float, x1: float, y0: float, y1: float, k: float, material_id: int = 0
) -> int:
    """Add a rectangle spanning [x0, x1] x [y0, y1] at z = k.

    Returns:
        The index of the added primitive.
    """
    return _add_primitive(PrimitiveKind.RECT_XY, material_id, extents=(x0, x1, y0, y1), offset=k)


def add_rect_xz(
    x0: float, x1: float, z0: float, z1: float, k: float, material_id: int = 0
) -> int:
    """Add a rectangle spanning [x0, x1] x [z0, z1] at y = k.

    Returns:
        The index of the added primitive.
    """
    return _add_primitive(PrimitiveKind.RECT_XZ, material_id, extents=(x0, x1, z0, z1), offset=k)


def add_rect_yz(
    y0: float, y1: float, z0: float, z1: float, k: float, material_id: int = 0
) -> int:
    """Add a rectangle spanning [y0, y1] x [z0, z1] at x = k.

    Returns:
        The index of the added primitive.
    """
    return _add_primitive(PrimitiveKind.RECT_YZ, material_id, extents=(y0, y1, z0, z1), offset=k)


def get_primitive_count() -> int:
    """Get the number of primitives in the scene."""
    return int(num_primitives[None])


def get_primitive_kind(index: int) -> PrimitiveKind:
    """Get the tag of a stored primitive.

    Raises:
        IndexError: If index does not refer to a stored primitive.
    """
    if not 0 <= index < num_primitives[None]:
        raise IndexError(f"Primitive index {index} out of range")
    return PrimitiveKind(int(prim_kinds[index]))


# =============================================================================
# Slot Loading
# =============================================================================


@ti.func
def _load_plane(i: ti.i32) -> Plane:
    return Plane(center=prim_centers[i], normal=prim_normals[i], material_id=prim_material_ids[i])


@ti.func
def _load_disk(i: ti.i32) -> Disk:
    return Disk(plane=_load_plane(i), radius=prim_radii[i])


@ti.func
def _load_rect_xy(i: ti.i32) -> RectXY:
    e = prim_extents[i]
    return RectXY(
        x0=e[0], x1=e[1], y0=e[2], y1=e[3], k=prim_offsets[i], material_id=prim_material_ids[i]
    )


@ti.func
def _load_rect_xz(i: ti.i32) -> RectXZ:
    e = prim_extents[i]
    return RectXZ(
        x0=e[0], x1=e[1], z0=e[2], z1=e[3], k=prim_offsets[i], material_id=prim_material_ids[i]
    )


@ti.func
def _load_rect_yz(i: ti.i32) -> RectYZ:
    e = prim_extents[i]
    return RectYZ(
        y0=e[0], y1=e[1], z0=e[2], z1=e[3], k=prim_offsets[i], material_id=prim_material_ids[i]
    )


# =============================================================================
# Dispatch
# =============================================================================


@ti.func
def hit_primitive(ray: Ray, i: ti.i32, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
    """Intersect a ray with the primitive stored in slot i.

    Args:
        ray: The ray to test.
        i: The primitive index.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        The HitRecord of the primitive's own intersection routine.
    """
    result = make_miss_record()
    kind = prim_kinds[i]
    if kind == KIND_PLANE:
        result = hit_plane(ray, _load_plane(i), t_min, t_max)
    elif kind == KIND_DISK:
        result = hit_disk(ray, _load_disk(i), t_min, t_max)
    elif kind == KIND_RECT_XY:
        result = hit_rect_xy(ray, _load_rect_xy(i), t_min, t_max)
    elif kind == KIND_RECT_XZ:
        result = hit_rect_xz(ray, _load_rect_xz(i), t_min, t_max)
    elif kind == KIND_RECT_YZ:
        result = hit_rect_yz(ray, _load_rect_yz(i), t_min, t_max)
    return result


@ti.func
def primitive_bounding_box(i: ti.i32, time0: ti.f32, time1: ti.f32) -> BoxRecord:
    """Bounding box of the primitive stored in slot i.

    Disks use the orientation-correct box; see primitive_bounding_box_legacy
    for the historical disk box.
    """
    result = make_no_box_record()
    kind = prim_kinds[i]
    if kind == KIND_PLANE:
        result = plane_bounding_box(_load_plane(i), time0, time1)
    elif kind == KIND_DISK:
        result = disk_bounding_box(_load_disk(i), time0, time1)
    elif kind == KIND_RECT_XY:
        result = rect_xy_bounding_box(_load_rect_xy(i), time0, time1)
    elif kind == KIND_RECT_XZ:
        result = rect_xz_bounding_box(_load_rect_xz(i), time0, time1)
    elif kind == KIND_RECT_YZ:
        result = rect_yz_bounding_box(_load_rect_yz(i), time0, time1)
    return result


@ti.func
def primitive_bounding_box_legacy(i: ti.i32, time0: ti.f32, time1: ti.f32) -> BoxRecord:
    """Like primitive_bounding_box, but disks report the historical box."""
    result = primitive_bounding_box(i, time0, time1)
    if prim_kinds[i] == KIND_DISK:
        result = disk_bounding_box_legacy(_load_disk(i), time0, time1)
    return result


# =============================================================================
# Scene Queries
# =============================================================================


@ti.func
def intersect_scene(ray: Ray, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
    """Test ray against all primitives in the scene.

    Iterates through all primitives, narrowing t_max to the closest hit
    found so far.

    Args:
        ray: The ray to test.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        The closest HitRecord, or the miss record if nothing was hit.
    """
    closest_t = t_max
    result = make_miss_record()

    n = num_primitives[None]
    ti.loop_config(serialize=True)
    for i in range(n):
        rec = hit_primitive(ray, i, t_min, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            result = rec

    return result


@ti.func
def intersect_scene_any(ray: Ray, t_min: ti.f32, t_max: ti.f32) -> ti.i32:
    """Test if ray hits any primitive in the scene (shadow ray query).

    Args:
        ray: The ray to test.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        1 if any primitive was hit, 0 otherwise.
    """
    hit_any = 0

    n = num_primitives[None]
    ti.loop_config(serialize=True)
    for i in range(n):
        if hit_any == 0:
            rec = hit_primitive(ray, i, t_min, t_max)
            if rec.hit == 1:
                hit_any = 1

    return hit_any


# =============================================================================
# Host-side Bounding Box Export
# =============================================================================


@ti.kernel
def _compute_bounding_boxes_kernel(time0: ti.f32, time1: ti.f32, legacy: ti.i32):
    for i in range(num_primitives[None]):
        rec = make_no_box_record()
        if legacy == 1:
            rec = primitive_bounding_box_legacy(i, time0, time1)
        else:
            rec = primitive_bounding_box(i, time0, time1)
        _box_valid[i] = rec.valid
        _box_min[i] = rec.box.minimum
        _box_max[i] = rec.box.maximum


def compute_bounding_boxes(
    time0: float = 0.0,
    time1: float = 1.0,
    legacy_disk_boxes: bool = False,
) -> tuple[npt.NDArray[np.bool_], npt.NDArray[np.float32]]:
    """Compute the bounding boxes of all stored primitives.

    Intended for building acceleration structures on the host.

    Args:
        time0: Start of the shutter interval (passed through, unused by
            the static primitives).
        time1: End of the shutter interval.
        legacy_disk_boxes: Report disks with disk_bounding_box_legacy.

    Returns:
        Tuple of (valid, boxes) where valid has shape (N,) and is False for
        primitives without a finite box (planes), and boxes has shape
        (N, 2, 3) holding [minimum, maximum] per primitive.
    """
    n = get_primitive_count()
    if n == 0:
        return np.zeros(0, dtype=np.bool_), np.zeros((0, 2, 3), dtype=np.float32)

    _compute_bounding_boxes_kernel(time0, time1, int(legacy_disk_boxes))
    valid = _box_valid.to_numpy()[:n].astype(np.bool_)
    boxes = np.stack([_box_min.to_numpy()[:n], _box_max.to_numpy()[:n]], axis=1)
    return valid, boxes.astype(np.float32)
