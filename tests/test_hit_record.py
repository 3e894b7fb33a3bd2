"""Unit tests for hit records and the surface policies.

Tests cover:
- The canonical miss record
- set_face_normal orientation
- Planar and rectangle texture coordinates
- Planar policy keeps the stored normal
"""

import taichi as ti


class TestMissRecord:
    """Tests for make_miss_record."""

    def test_miss_record_fields(self):
        """Test that every field of the miss record is reset."""
        from flat_primitives.geometry.hit_record import make_miss_record

        hit = ti.field(dtype=ti.i32, shape=())
        t = ti.field(dtype=ti.f32, shape=())
        point = ti.field(dtype=ti.math.vec3, shape=())
        normal = ti.field(dtype=ti.math.vec3, shape=())
        front_face = ti.field(dtype=ti.i32, shape=())
        uv = ti.field(dtype=ti.math.vec2, shape=())
        material_id = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            rec = make_miss_record()
            hit[None] = rec.hit
            t[None] = rec.t
            point[None] = rec.point
            normal[None] = rec.normal
            front_face[None] = rec.front_face
            uv[None] = ti.math.vec2(rec.u, rec.v)
            material_id[None] = rec.material_id

        test_kernel()
        assert hit[None] == 0
        assert t[None] == 0.0
        assert point[None].to_numpy().tolist() == [0.0, 0.0, 0.0]
        assert normal[None].to_numpy().tolist() == [0.0, 0.0, 0.0]
        assert front_face[None] == 0
        assert uv[None].to_numpy().tolist() == [0.0, 0.0]
        assert material_id[None] == -1


class TestSetFaceNormal:
    """Tests for set_face_normal."""

    def test_ray_against_normal_is_front_face(self):
        """Test that a ray opposing the outward normal keeps it."""
        from flat_primitives.geometry.hit_record import set_face_normal, vec3

        front_face = ti.field(dtype=ti.i32, shape=())
        normal = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ff, n = set_face_normal(vec3(0.0, 0.0, -1.0), vec3(0.0, 0.0, 1.0))
            front_face[None] = ff
            normal[None] = n

        test_kernel()
        assert front_face[None] == 1
        assert normal[None].to_numpy().tolist() == [0.0, 0.0, 1.0]

    def test_ray_along_normal_flips_it(self):
        """Test that a ray travelling with the outward normal flips it."""
        from flat_primitives.geometry.hit_record import set_face_normal, vec3

        front_face = ti.field(dtype=ti.i32, shape=())
        normal = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ff, n = set_face_normal(vec3(0.3, 0.5, 1.0), vec3(0.0, 0.0, 1.0))
            front_face[None] = ff
            normal[None] = n

        test_kernel()
        assert front_face[None] == 0
        assert normal[None].to_numpy().tolist() == [0.0, 0.0, -1.0]

    def test_grazing_ray_keeps_normal(self):
        """Test that a perpendicular ray (dot == 0) is treated as front face."""
        from flat_primitives.geometry.hit_record import set_face_normal, vec3

        front_face = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            ff, _n = set_face_normal(vec3(1.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0))
            front_face[None] = ff

        test_kernel()
        assert front_face[None] == 1


class TestTextureCoordinates:
    """Tests for planar_uv and rect_uv."""

    def test_planar_uv_is_world_xz(self):
        """Test that planar coordinates are the point's x and z."""
        from flat_primitives.geometry.hit_record import planar_uv, vec3

        result = ti.field(dtype=ti.math.vec2, shape=())

        @ti.kernel
        def test_kernel():
            u, v = planar_uv(vec3(3.5, -7.0, -2.25))
            result[None] = ti.math.vec2(u, v)

        test_kernel()
        assert abs(result[None][0] - 3.5) < 1e-6
        assert abs(result[None][1] + 2.25) < 1e-6

    def test_rect_uv_normalizes_to_extents(self):
        """Test that rectangle coordinates are normalized to [0, 1]."""
        from flat_primitives.geometry.hit_record import rect_uv

        result = ti.field(dtype=ti.math.vec2, shape=())

        @ti.kernel
        def test_kernel():
            u, v = rect_uv(1.5, 7.0, 1.0, 3.0, 4.0, 8.0)
            result[None] = ti.math.vec2(u, v)

        test_kernel()
        assert abs(result[None][0] - 0.25) < 1e-6
        assert abs(result[None][1] - 0.75) < 1e-6


class TestPlanarSurfaceHit:
    """Tests for planar_surface_hit."""

    def test_stored_normal_is_not_flipped(self):
        """Test that a ray from the back side reports the stored normal."""
        from flat_primitives.core.ray import Ray
        from flat_primitives.geometry.hit_record import planar_surface_hit, vec3

        normal = ti.field(dtype=ti.math.vec3, shape=())
        front_face = ti.field(dtype=ti.i32, shape=())
        material_id = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(0.0, -5.0, 0.0), direction=vec3(0.0, 1.0, 0.0))
            rec = planar_surface_hit(ray, 5.0, vec3(0.0, 1.0, 0.0), 9)
            normal[None] = rec.normal
            front_face[None] = rec.front_face
            material_id[None] = rec.material_id

        test_kernel()
        assert normal[None].to_numpy().tolist() == [0.0, 1.0, 0.0]
        assert front_face[None] == 0
        assert material_id[None] == 9
