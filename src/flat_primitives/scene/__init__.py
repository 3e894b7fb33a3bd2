"""Scene module for primitive storage, dispatch and scene building.

Components:
    intersection: Tagged-variant primitive storage, per-operation dispatch,
        closest-hit and any-hit scene queries, bounding box export
    manager: SceneManager with material handles, validation and serialization
    cornell_box: The classic Cornell box built from axis-aligned rectangles

Scene data is organized for efficient GPU access:
    - Structure-of-Arrays layout for primitive parameters
    - One kind tag per slot, dispatched inside Taichi functions
"""

from .cornell_box import (
    BOX_SIZE,
    CornellBoxParams,
    create_cornell_box_scene,
    get_cornell_box_bounds,
    get_light_rect_info,
)
from .intersection import (
    MAX_PRIMITIVES,
    PrimitiveKind,
    add_disk,
    add_plane,
    add_rect_xy,
    add_rect_xz,
    add_rect_yz,
    clear_scene,
    compute_bounding_boxes,
    get_primitive_count,
    get_primitive_kind,
    hit_primitive,
    intersect_scene,
    intersect_scene_any,
    primitive_bounding_box,
    primitive_bounding_box_legacy,
)
from .manager import (
    MAX_MATERIALS,
    DiskInfo,
    MaterialInfo,
    PlaneInfo,
    RectInfo,
    SceneConfig,
    SceneManager,
)

__all__ = [
    # Intersection module
    "PrimitiveKind",
    "add_plane",
    "add_disk",
    "add_rect_xy",
    "add_rect_xz",
    "add_rect_yz",
    "clear_scene",
    "get_primitive_count",
    "get_primitive_kind",
    "hit_primitive",
    "primitive_bounding_box",
    "primitive_bounding_box_legacy",
    "intersect_scene",
    "intersect_scene_any",
    "compute_bounding_boxes",
    "MAX_PRIMITIVES",
    # Manager module
    "SceneManager",
    "MaterialInfo",
    "PlaneInfo",
    "DiskInfo",
    "RectInfo",
    "SceneConfig",
    "MAX_MATERIALS",
    # Cornell box module
    "create_cornell_box_scene",
    "get_cornell_box_bounds",
    "get_light_rect_info",
    "CornellBoxParams",
    "BOX_SIZE",
]
