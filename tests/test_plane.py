"""Unit tests for the infinite plane primitive.

Tests cover:
- Hits from above and below a horizontal plane
- Parallel, near-parallel and receding rays
- The self-intersection guard and the [t_min, t_max] interval
- Absence of a bounding box
- Repeated calls returning identical records
"""

import taichi as ti


class TestPlaneHit:
    """Tests for hit_plane on a ground plane y = 0."""

    def test_hit_from_above(self):
        """Test a downward ray hitting the ground plane."""
        from flat_primitives.core.ray import Ray
        from flat_primitives.geometry.plane import Plane, hit_plane, vec3

        hit = ti.field(dtype=ti.i32, shape=())
        t = ti.field(dtype=ti.f32, shape=())
        point = ti.field(dtype=ti.math.vec3, shape=())
        normal = ti.field(dtype=ti.math.vec3, shape=())
        front_face = ti.field(dtype=ti.i32, shape=())
        uv = ti.field(dtype=ti.math.vec2, shape=())
        material_id = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            plane = Plane(center=vec3(0.0, 0.0, 0.0), normal=vec3(0.0, 1.0, 0.0), material_id=3)
            ray = Ray(origin=vec3(2.0, 5.0, 3.0), direction=vec3(0.0, -1.0, 0.0))
            rec = hit_plane(ray, plane, 0.0, 100.0)
            hit[None] = rec.hit
            t[None] = rec.t
            point[None] = rec.point
            normal[None] = rec.normal
            front_face[None] = rec.front_face
            uv[None] = ti.math.vec2(rec.u, rec.v)
            material_id[None] = rec.material_id

        test_kernel()
        assert hit[None] == 1
        assert abs(t[None] - 5.0) < 1e-5
        p = point[None]
        assert abs(p[0] - 2.0) < 1e-5
        assert abs(p[1]) < 1e-5
        assert abs(p[2] - 3.0) < 1e-5
        assert normal[None].to_numpy().tolist() == [0.0, 1.0, 0.0]
        assert front_face[None] == 1
        assert abs(uv[None][0] - 2.0) < 1e-5
        assert abs(uv[None][1] - 3.0) < 1e-5
        assert material_id[None] == 3

    def test_hit_from_below_keeps_stored_normal(self):
        """Test that a hit from the back side does not flip the normal."""
        from flat_primitives.core.ray import Ray
        from flat_primitives.geometry.plane import Plane, hit_plane, vec3

        hit = ti.field(dtype=ti.i32, shape=())
        normal = ti.field(dtype=ti.math.vec3, shape=())
        front_face = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            plane = Plane(center=vec3(0.0, 0.0, 0.0), normal=vec3(0.0, 1.0, 0.0), material_id=0)
            ray = Ray(origin=vec3(0.0, -2.0, 0.0), direction=vec3(0.0, 1.0, 0.0))
            rec = hit_plane(ray, plane, 0.0, 100.0)
            hit[None] = rec.hit
            normal[None] = rec.normal
            front_face[None] = rec.front_face

        test_kernel()
        assert hit[None] == 1
        assert normal[None].to_numpy().tolist() == [0.0, 1.0, 0.0]
        assert front_face[None] == 0

    def test_oblique_hit_uv_follows_world_xz(self):
        """Test that (u, v) of a vertical plane is still the hit's world (x, z)."""
        from flat_primitives.core.ray import Ray
        from flat_primitives.geometry.plane import Plane, hit_plane, vec3

        hit = ti.field(dtype=ti.i32, shape=())
        uv = ti.field(dtype=ti.math.vec2, shape=())

        @ti.kernel
        def test_kernel():
            plane = Plane(center=vec3(0.0, 0.0, -4.0), normal=vec3(0.0, 0.0, 1.0), material_id=0)
            ray = Ray(origin=vec3(1.5, 0.5, 0.0), direction=vec3(0.0, 0.0, -1.0))
            rec = hit_plane(ray, plane, 0.0, 100.0)
            hit[None] = rec.hit
            uv[None] = ti.math.vec2(rec.u, rec.v)

        test_kernel()
        assert hit[None] == 1
        assert abs(uv[None][0] - 1.5) < 1e-5
        assert abs(uv[None][1] + 4.0) < 1e-5


class TestPlaneMiss:
    """Tests for rays that must miss the ground plane."""

    def test_parallel_ray_misses(self):
        """Test that a ray parallel to the plane misses."""
        from flat_primitives.core.ray import Ray
        from flat_primitives.geometry.plane import Plane, hit_plane, vec3

        hit = ti.field(dtype=ti.i32, shape=())
        material_id = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel(dy: ti.f32):
            plane = Plane(center=vec3(0.0, 0.0, 0.0), normal=vec3(0.0, 1.0, 0.0), material_id=4)
            ray = Ray(origin=vec3(0.0, 1.0, 0.0), direction=vec3(1.0, dy, 0.0))
            rec = hit_plane(ray, plane, 0.0, 100.0)
            hit[None] = rec.hit
            material_id[None] = rec.material_id

        test_kernel(0.0)
        assert hit[None] == 0
        assert material_id[None] == -1

    def test_near_parallel_ray_misses(self):
        """Test that a ray within the epsilon of parallel misses."""
        from flat_primitives.core.ray import Ray
        from flat_primitives.geometry.plane import Plane, hit_plane, vec3

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel(dy: ti.f32):
            plane = Plane(center=vec3(0.0, 0.0, 0.0), normal=vec3(0.0, 1.0, 0.0), material_id=0)
            ray = Ray(origin=vec3(0.0, 1e-3, 0.0), direction=vec3(1.0, dy, 0.0))
            rec = hit_plane(ray, plane, 0.0, 1e9)
            hit[None] = rec.hit

        test_kernel(-5e-5)
        assert hit[None] == 0

    def test_receding_ray_misses(self):
        """Test that a ray moving away from the plane misses."""
        from flat_primitives.core.ray import Ray
        from flat_primitives.geometry.plane import Plane, hit_plane, vec3

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            plane = Plane(center=vec3(0.0, 0.0, 0.0), normal=vec3(0.0, 1.0, 0.0), material_id=0)
            ray = Ray(origin=vec3(0.0, 1.0, 0.0), direction=vec3(0.0, 1.0, 0.0))
            rec = hit_plane(ray, plane, -100.0, 100.0)
            hit[None] = rec.hit

        test_kernel()
        assert hit[None] == 0

    def test_hit_closer_than_epsilon_misses(self):
        """Test that a crossing closer than the epsilon is rejected."""
        from flat_primitives.core.ray import Ray
        from flat_primitives.geometry.plane import Plane, hit_plane, vec3

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            plane = Plane(center=vec3(0.0, 0.0, 0.0), normal=vec3(0.0, 1.0, 0.0), material_id=0)
            ray = Ray(origin=vec3(0.0, 5e-5, 0.0), direction=vec3(0.0, -1.0, 0.0))
            rec = hit_plane(ray, plane, 0.0, 100.0)
            hit[None] = rec.hit

        test_kernel()
        assert hit[None] == 0

    def test_hit_beyond_t_max_misses(self):
        """Test that a crossing past t_max is rejected."""
        from flat_primitives.core.ray import Ray
        from flat_primitives.geometry.plane import Plane, hit_plane, vec3

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            plane = Plane(center=vec3(0.0, 0.0, 0.0), normal=vec3(0.0, 1.0, 0.0), material_id=0)
            ray = Ray(origin=vec3(0.0, 5.0, 0.0), direction=vec3(0.0, -1.0, 0.0))
            rec = hit_plane(ray, plane, 0.0, 4.0)
            hit[None] = rec.hit

        test_kernel()
        assert hit[None] == 0

    def test_hit_before_t_min_misses(self):
        """Test that a crossing before t_min is rejected."""
        from flat_primitives.core.ray import Ray
        from flat_primitives.geometry.plane import Plane, hit_plane, vec3

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            plane = Plane(center=vec3(0.0, 0.0, 0.0), normal=vec3(0.0, 1.0, 0.0), material_id=0)
            ray = Ray(origin=vec3(0.0, 5.0, 0.0), direction=vec3(0.0, -1.0, 0.0))
            rec = hit_plane(ray, plane, 6.0, 100.0)
            hit[None] = rec.hit

        test_kernel()
        assert hit[None] == 0


class TestPlaneBoundingBox:
    """Tests for plane_bounding_box."""

    def test_plane_has_no_bounding_box(self):
        """Test that an infinite plane reports no box."""
        from flat_primitives.geometry.plane import Plane, plane_bounding_box, vec3

        valid = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            plane = Plane(center=vec3(1.0, 2.0, 3.0), normal=vec3(0.0, 1.0, 0.0), material_id=0)
            valid[None] = plane_bounding_box(plane, 0.0, 1.0).valid

        test_kernel()
        assert valid[None] == 0


class TestPlaneConstruction:
    """Tests for make_plane."""

    def test_make_plane(self):
        """Test make_plane builds a plane that behaves like the struct literal."""
        from flat_primitives.core.ray import Ray
        from flat_primitives.geometry.plane import hit_plane, make_plane, vec3

        material_id = ti.field(dtype=ti.i32, shape=())
        t = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            plane = make_plane(vec3(0.0, 0.0, 2.0), vec3(0.0, 0.0, -1.0), 8)
            ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, 1.0))
            rec = hit_plane(ray, plane, 0.0, 10.0)
            material_id[None] = rec.material_id
            t[None] = rec.t

        test_kernel()
        assert material_id[None] == 8
        assert abs(t[None] - 2.0) < 1e-6


class TestPlaneIdempotence:
    """Tests that plane intersection has no hidden state."""

    def test_repeated_calls_identical(self):
        """Test two identical queries produce identical records."""
        from flat_primitives.core.ray import Ray
        from flat_primitives.geometry.plane import Plane, hit_plane, vec3

        hit = ti.field(dtype=ti.i32, shape=2)
        t = ti.field(dtype=ti.f32, shape=2)
        point = ti.Vector.field(3, dtype=ti.f32, shape=2)
        normal = ti.Vector.field(3, dtype=ti.f32, shape=2)
        uv = ti.Vector.field(2, dtype=ti.f32, shape=2)

        @ti.kernel
        def test_kernel():
            plane = Plane(center=vec3(0.0, -1.0, 0.0), normal=vec3(0.0, 1.0, 0.0), material_id=2)
            ray = Ray(origin=vec3(0.3, 2.0, -0.7), direction=vec3(0.2, -1.0, 0.1))
            for i in ti.static(range(2)):
                rec = hit_plane(ray, plane, 0.0, 100.0)
                hit[i] = rec.hit
                t[i] = rec.t
                point[i] = rec.point
                normal[i] = rec.normal
                uv[i] = ti.math.vec2(rec.u, rec.v)

        test_kernel()
        assert hit.to_numpy().tolist() == [1, 1]
        for field in (t, point, normal, uv):
            values = field.to_numpy()
            assert values[0].tolist() == values[1].tolist()
