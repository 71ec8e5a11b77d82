"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside (front face)
- Ray missing sphere
- Ray starting inside sphere (back face)
- Root selection against the interval bounds
- Degenerate rays and spheres
"""

import pytest
import taichi as ti


def _make_query():
    """Build a kernel running hit_sphere and the fields it writes to."""
    from lenscast.core.interval import Interval
    from lenscast.core.ray import Ray
    from lenscast.geometry.sphere import Sphere, hit_sphere, vec3

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    point = ti.field(dtype=ti.math.vec3, shape=())
    normal = ti.field(dtype=ti.math.vec3, shape=())
    front_face = ti.field(dtype=ti.i32, shape=())
    material_id = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def query(
        origin: vec3,
        direction: vec3,
        center: vec3,
        radius: ti.f32,
        t_min: ti.f32,
        t_max: ti.f32,
    ):
        ray = Ray(origin=origin, direction=direction)
        sphere = Sphere(center=center, radius=radius, material_id=7)
        record = hit_sphere(ray, Interval(lo=t_min, hi=t_max), sphere)
        hit[None] = record.hit
        t_val[None] = record.t
        point[None] = record.point
        normal[None] = record.normal
        front_face[None] = record.front_face
        material_id[None] = record.material_id

    def run(origin, direction, center=(0.0, 0.0, 0.0), radius=1.0, t_min=0.001, t_max=1000.0):
        query(vec3(*origin), vec3(*direction), vec3(*center), radius, t_min, t_max)
        return {
            "hit": hit[None],
            "t": t_val[None],
            "point": point[None],
            "normal": normal[None],
            "front_face": front_face[None],
            "material_id": material_id[None],
        }

    return run


class TestSphereBasics:
    """Tests for Sphere dataclass and basic operations."""

    def test_make_sphere(self):
        from lenscast.geometry.sphere import make_sphere, vec3

        center_result = ti.field(dtype=ti.math.vec3, shape=())
        radius_result = ti.field(dtype=ti.f32, shape=())
        id_result = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = make_sphere(vec3(1.0, 2.0, 3.0), 0.5, 4)
            center_result[None] = sphere.center
            radius_result[None] = sphere.radius
            id_result[None] = sphere.material_id

        test_kernel()
        c = center_result[None]
        assert abs(c[0] - 1.0) < 1e-6
        assert abs(c[1] - 2.0) < 1e-6
        assert abs(c[2] - 3.0) < 1e-6
        assert abs(radius_result[None] - 0.5) < 1e-6
        assert id_result[None] == 4

    def test_make_sphere_clamps_negative_radius(self):
        from lenscast.geometry.sphere import make_sphere, vec3

        radius_result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            radius_result[None] = make_sphere(vec3(0.0, 0.0, 0.0), -2.0, 0).radius

        test_kernel()
        assert radius_result[None] == 0.0


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def test_direct_hit(self):
        """Test ray hitting sphere head-on from outside."""
        record = _make_query()((0.0, 0.0, 5.0), (0.0, 0.0, -1.0))

        assert record["hit"] == 1
        assert abs(record["t"] - 4.0) < 1e-5
        p = record["point"]
        assert abs(p[2] - 1.0) < 1e-5
        n = record["normal"]
        assert abs(n[0]) < 1e-5
        assert abs(n[1]) < 1e-5
        assert abs(n[2] - 1.0) < 1e-5
        assert record["front_face"] == 1
        assert record["material_id"] == 7

    def test_unnormalized_direction(self):
        """t is measured in units of the direction vector."""
        record = _make_query()((0.0, 0.0, 5.0), (0.0, 0.0, -2.0))

        assert record["hit"] == 1
        assert abs(record["t"] - 2.0) < 1e-5
        assert abs(record["point"][2] - 1.0) < 1e-5

    def test_miss(self):
        record = _make_query()((5.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert record["hit"] == 0
        assert record["material_id"] == -1

    def test_sphere_behind_ray(self):
        record = _make_query()((0.0, 0.0, 5.0), (0.0, 0.0, 1.0))
        assert record["hit"] == 0

    def test_inside_back_face(self):
        """Test ray starting inside sphere (back face hit)."""
        record = _make_query()((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))

        assert record["hit"] == 1
        assert abs(record["t"] - 1.0) < 1e-5
        # Stored normal opposes the ray
        n = record["normal"]
        assert abs(n[2] - (-1.0)) < 1e-5
        assert record["front_face"] == 0

    def test_far_root_when_near_root_excluded(self):
        """With the near root below t_min the far root is returned."""
        record = _make_query()((0.0, 0.0, 5.0), (0.0, 0.0, -1.0), t_min=4.5)

        assert record["hit"] == 1
        assert abs(record["t"] - 6.0) < 1e-5
        assert record["front_face"] == 0

    @pytest.mark.parametrize(
        "t_min,t_max",
        [
            (0.001, 4.0),  # near root equals t_max
            (4.0, 6.0),  # both roots on the bounds
            (0.001, 3.0),  # both roots past t_max
        ],
    )
    def test_interval_bounds_are_exclusive(self, t_min, t_max):
        record = _make_query()((0.0, 0.0, 5.0), (0.0, 0.0, -1.0), t_min=t_min, t_max=t_max)
        assert record["hit"] == 0

    def test_normal_is_unit_length(self):
        record = _make_query()(
            (0.3, 0.2, 10.0), (0.0, 0.0, -1.0), center=(0.0, 0.0, 0.0), radius=2.0
        )

        assert record["hit"] == 1
        n = record["normal"]
        assert abs((n[0] ** 2 + n[1] ** 2 + n[2] ** 2) ** 0.5 - 1.0) < 1e-5

    def test_zero_radius_never_hit(self):
        """A ray passing exactly through a zero-radius sphere misses."""
        record = _make_query()((0.0, 0.0, 5.0), (0.0, 0.0, -1.0), radius=0.0)
        assert record["hit"] == 0

    def test_zero_direction_never_hits(self):
        record = _make_query()((0.0, 0.0, 5.0), (0.0, 0.0, 0.0))
        assert record["hit"] == 0


class TestFaceNormal:
    """Tests for the face-orientation rule."""

    def test_front_and_back_face(self):
        from lenscast.geometry.hittable import face_normal, vec3

        front = ti.field(dtype=ti.i32, shape=2)
        normals = ti.field(dtype=ti.math.vec3, shape=2)

        @ti.kernel
        def test_kernel():
            outward = vec3(0.0, 1.0, 0.0)
            f0, n0 = face_normal(vec3(0.0, -1.0, 0.0), outward)
            f1, n1 = face_normal(vec3(0.0, 1.0, 0.0), outward)
            front[0] = f0
            normals[0] = n0
            front[1] = f1
            normals[1] = n1

        test_kernel()
        assert front[0] == 1
        assert abs(normals[0][1] - 1.0) < 1e-6
        assert front[1] == 0
        assert abs(normals[1][1] - (-1.0)) < 1e-6
