"""Taichi ray intersection for flat primitives.

This package provides the per-primitive intersection layer of a ray tracer
for flat shapes, with support for:
- Infinite planes and disks (planar surface policy)
- Axis-aligned rectangles in the XY, XZ and YZ planes (rectangle surface policy)
- Conservative bounding boxes for acceleration structure construction
- A tagged-variant scene store with closest-hit and any-hit queries

Subpackages:
    core: Ray structure, vector helpers and axis-aligned bounding boxes
    geometry: Hit records, surface policies and the flat primitives
    scene: Primitive storage, dispatch, scene manager and the Cornell box

Modules:
    config: Taichi runtime configuration
"""

__version__ = "0.1.0"
