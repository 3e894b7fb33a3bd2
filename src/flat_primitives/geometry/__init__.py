"""Geometry module for flat primitives.

Components:
    hit_record: HitRecord and the planar / rectangle surface policies
    plane: Infinite plane
    disk: Disk (a plane plus a radius)
    rect: Axis-aligned rectangles in the XY, XZ and YZ planes

All intersection and bounding-box routines are Taichi functions (@ti.func)
returning records by value:
    rec = hit_shape(ray, shape, t_min, t_max)        # rec.hit in {0, 1}
    box = shape_bounding_box(shape, time0, time1)    # box.valid in {0, 1}
"""

from .disk import (
    DISK_SLAB_HALF_THICKNESS,
    Disk,
    disk_bounding_box,
    disk_bounding_box_legacy,
    hit_disk,
    make_disk,
)
from .hit_record import (
    HitRecord,
    make_miss_record,
    planar_surface_hit,
    planar_uv,
    rect_surface_hit,
    rect_uv,
    set_face_normal,
)
from .plane import PLANE_EPSILON, Plane, hit_plane, make_plane, plane_bounding_box
from .rect import (
    RECT_PADDING,
    RectXY,
    RectXZ,
    RectYZ,
    hit_rect_xy,
    hit_rect_xz,
    hit_rect_yz,
    make_rect_xy,
    make_rect_xz,
    make_rect_yz,
    rect_xy_bounding_box,
    rect_xz_bounding_box,
    rect_yz_bounding_box,
)

__all__ = [
    "HitRecord",
    "make_miss_record",
    "planar_uv",
    "planar_surface_hit",
    "rect_uv",
    "set_face_normal",
    "rect_surface_hit",
    "PLANE_EPSILON",
    "Plane",
    "hit_plane",
    "make_plane",
    "plane_bounding_box",
    "DISK_SLAB_HALF_THICKNESS",
    "Disk",
    "hit_disk",
    "make_disk",
    "disk_bounding_box",
    "disk_bounding_box_legacy",
    "RECT_PADDING",
    "RectXY",
    "RectXZ",
    "RectYZ",
    "hit_rect_xy",
    "hit_rect_xz",
    "hit_rect_yz",
    "make_rect_xy",
    "make_rect_xz",
    "make_rect_yz",
    "rect_xy_bounding_box",
    "rect_xz_bounding_box",
    "rect_yz_bounding_box",
]
