"""Hit records and the two surface policies of the flat primitives.

Every primitive returns a HitRecord by value. A miss is always the canonical
miss record: no field of a miss carries data from a partially completed
intersection.

Two surface policies coexist and are kept deliberately distinct, because
scenes built against these primitives depend on both:

Planar policy (Plane, Disk):
    - normal is the primitive's stored normal, never flipped
    - front_face records whether the ray approaches against that normal
    - (u, v) is the world-space (x, z) of the hit point, unnormalized and
      independent of the plane's orientation

Rectangle policy (RectXY, RectXZ, RectYZ):
    - normal is the outward axis normal flipped to oppose the ray
    - front_face records whether the flip was unnecessary
    - (u, v) is the hit position normalized to the rectangle's extents
"""

import taichi as ti
import taichi.math as tm

from flat_primitives.core.ray import Ray, ray_at

vec3 = tm.vec3


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: Whether the ray intersected the primitive (1 if hit, 0 if miss).
        t: The ray parameter at the intersection. Only valid if hit == 1.
        point: The 3D intersection point. Only valid if hit == 1.
        normal: The surface normal at the intersection, oriented according
            to the primitive's surface policy. Only valid if hit == 1.
        front_face: 1 if the ray hit the side the stored/outward normal
            points to, 0 otherwise. Only valid if hit == 1.
        u: First texture coordinate. Only valid if hit == 1.
        v: Second texture coordinate. Only valid if hit == 1.
        material_id: Opaque material handle of the hit primitive.
            -1 for a miss.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32
    u: ti.f32
    v: ti.f32
    material_id: ti.i32


@ti.func
def make_miss_record() -> HitRecord:
    """Create the canonical HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        u=0.0,
        v=0.0,
        material_id=-1,
    )


# =============================================================================
# Planar Policy
# =============================================================================


@ti.func
def planar_uv(point: vec3):
    """World (x, z) texture coordinates of a point on a plane or disk.

    Only a meaningful parameterization for horizontal planes; for any other
    orientation the texture is smeared along the plane's projection onto
    the XZ plane.

    Returns:
        Tuple of (u, v).
    """
    return point.x, point.z


@ti.func
def planar_surface_hit(
    ray: Ray, t: ti.f32, stored_normal: vec3, material_id: ti.i32
) -> HitRecord:
    """Build a hit record under the planar policy.

    Args:
        ray: The incoming ray.
        t: The accepted ray parameter.
        stored_normal: The primitive's normal, reported unmodified.
        material_id: The primitive's material handle.

    Returns:
        A populated HitRecord with hit == 1.
    """
    point = ray_at(ray, t)
    u, v = planar_uv(point)
    is_front_face = 0
    if tm.dot(ray.direction, stored_normal) < 0.0:
        is_front_face = 1
    return HitRecord(
        hit=1,
        t=t,
        point=point,
        normal=stored_normal,
        front_face=is_front_face,
        u=u,
        v=v,
        material_id=material_id,
    )


# =============================================================================
# Rectangle Policy
# =============================================================================


@ti.func
def rect_uv(a: ti.f32, b: ti.f32, a0: ti.f32, a1: ti.f32, b0: ti.f32, b1: ti.f32):
    """Texture coordinates normalized to a rectangle's extents.

    Returns:
        Tuple of (u, v) with u = (a - a0) / (a1 - a0), v = (b - b0) / (b1 - b0).
    """
    return (a - a0) / (a1 - a0), (b - b0) / (b1 - b0)


@ti.func
def set_face_normal(ray_direction: vec3, outward_normal: vec3):
    """Orient an outward normal against the incoming ray.

    Returns:
        Tuple of (front_face, normal) where front_face is 1 if the ray
        approaches from the side the outward normal points to, and normal
        is the outward normal flipped if necessary so that
        dot(normal, ray_direction) <= 0.
    """
    is_front_face = 1
    normal = outward_normal
    if tm.dot(outward_normal, ray_direction) > 0.0:
        is_front_face = 0
        normal = -outward_normal
    return is_front_face, normal


@ti.func
def rect_surface_hit(
    ray: Ray,
    t: ti.f32,
    outward_normal: vec3,
    u: ti.f32,
    v: ti.f32,
    material_id: ti.i32,
) -> HitRecord:
    """Build a hit record under the rectangle policy.

    Args:
        ray: The incoming ray.
        t: The accepted ray parameter.
        outward_normal: The rectangle's axis normal before correction.
        u: Normalized first texture coordinate.
        v: Normalized second texture coordinate.
        material_id: The rectangle's material handle.

    Returns:
        A populated HitRecord with hit == 1.
    """
    is_front_face, normal = set_face_normal(ray.direction, outward_normal)
    return HitRecord(
        hit=1,
        t=t,
        point=ray_at(ray, t),
        normal=normal,
        front_face=is_front_face,
        u=u,
        v=v,
        material_id=material_id,
    )
