"""Unit tests for the ray and interval modules.

Tests cover:
- Ray dataclass and ray_at function
- Vector utility functions (dot, cross, normalize, length, reflect, refract)
- Open interval membership
- Host-side conversion of scalars and 3-vectors
"""

import numpy as np
import pytest
import taichi as ti


class TestRayBasics:
    """Tests for Ray dataclass and basic operations."""

    def test_ray_at_origin(self):
        """Test ray_at returns origin when t=0."""
        from lenscast.core.ray import Ray, ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(1.0, 2.0, 3.0), direction=vec3(0.0, 0.0, -1.0))
            result[None] = ray_at(ray, 0.0)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 2.0) < 1e-6
        assert abs(r[2] - 3.0) < 1e-6

    def test_ray_at_unnormalized_direction(self):
        """Test ray_at scales by the full direction vector."""
        from lenscast.core.ray import make_ray, ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(1.0, 1.0, 1.0), vec3(0.0, 0.0, 2.0))
            result[None] = ray_at(ray, 1.5)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 1.0) < 1e-6
        assert abs(r[2] - 4.0) < 1e-6

    def test_ray_at_negative_t(self):
        """Test ray_at handles negative t (behind origin)."""
        from lenscast.core.ray import Ray, ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 1.0, 0.0))
            result[None] = ray_at(ray, -3.0)

        test_kernel()
        r = result[None]
        assert abs(r[1] - (-3.0)) < 1e-6


class TestVectorUtilities:
    """Tests for vector utility functions."""

    def test_length_and_length_squared(self):
        from lenscast.core.ray import length, length_squared, vec3

        result_len = ti.field(dtype=ti.f32, shape=())
        result_sq = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            v = vec3(3.0, 4.0, 0.0)
            result_len[None] = length(v)
            result_sq[None] = length_squared(v)

        test_kernel()
        assert abs(result_len[None] - 5.0) < 1e-6
        assert abs(result_sq[None] - 25.0) < 1e-6

    def test_normalize(self):
        """Test vector normalization."""
        from lenscast.core.ray import normalize, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = normalize(vec3(3.0, 4.0, 0.0))

        test_kernel()
        assert abs(result[None][0] - 0.6) < 1e-6
        assert abs(result[None][1] - 0.8) < 1e-6

    def test_dot_and_cross(self):
        from lenscast.core.ray import cross, dot, vec3

        result_dot = ti.field(dtype=ti.f32, shape=())
        result_cross = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result_dot[None] = dot(vec3(1.0, 2.0, 3.0), vec3(4.0, 5.0, 6.0))
            result_cross[None] = cross(vec3(1.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        # 1*4 + 2*5 + 3*6
        assert abs(result_dot[None] - 32.0) < 1e-6
        c = result_cross[None]
        assert abs(c[0]) < 1e-6
        assert abs(c[1]) < 1e-6
        assert abs(c[2] - 1.0) < 1e-6

    def test_reflect(self):
        """Test reflection about a normal."""
        from lenscast.core.ray import normalize, reflect, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            incident = normalize(vec3(1.0, -1.0, 0.0))
            result[None] = reflect(incident, vec3(0.0, 1.0, 0.0))

        test_kernel()
        r = result[None]
        expected = 1.0 / (2.0**0.5)
        assert abs(r[0] - expected) < 1e-5
        assert abs(r[1] - expected) < 1e-5
        assert abs(r[2]) < 1e-6

    def test_refract_head_on(self):
        """Test head-on refraction keeps the direction."""
        from lenscast.core.ray import refract, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = refract(vec3(0.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0), 1.0 / 1.5)

        test_kernel()
        # eta * (0, -1, 0) + (eta - 1) * (0, 1, 0) = (0, -1, 0)
        r = result[None]
        assert abs(r[0]) < 1e-5
        assert abs(r[1] - (-1.0)) < 1e-5
        assert abs(r[2]) < 1e-5

    def test_refract_obeys_snell(self):
        """Test sin(theta_t) = eta * sin(theta_i) for an oblique ray."""
        from lenscast.core.ray import normalize, refract, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            incident = normalize(vec3(1.0, -1.0, 0.0))
            result[None] = refract(incident, vec3(0.0, 1.0, 0.0), 1.0 / 1.5)

        test_kernel()
        r = result[None]
        sin_i = 1.0 / (2.0**0.5)
        assert abs(r[0] - sin_i / 1.5) < 1e-5
        assert r[1] < 0.0
        assert abs(r[0] ** 2 + r[1] ** 2 - 1.0) < 1e-5

    def test_refract_tir(self):
        """Test total internal reflection returns zero vector."""
        from lenscast.core.ray import normalize, refract, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            incident = normalize(vec3(0.9, -0.1, 0.0))
            result[None] = refract(incident, vec3(0.0, 1.0, 0.0), 1.5)

        test_kernel()
        r = result[None]
        assert abs(r[0]) < 1e-5
        assert abs(r[1]) < 1e-5
        assert abs(r[2]) < 1e-5

    def test_schlick_fresnel(self):
        """Test Schlick's approximation at grazing and normal incidence."""
        from lenscast.core.ray import schlick_fresnel

        grazing = ti.field(dtype=ti.f32, shape=())
        normal = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            grazing[None] = schlick_fresnel(0.0, 1.5)
            normal[None] = schlick_fresnel(1.0, 1.5)

        test_kernel()
        assert abs(grazing[None] - 1.0) < 1e-5
        # r0 = ((1-1.5)/(1+1.5))^2
        assert abs(normal[None] - 0.04) < 1e-5

    def test_near_zero(self):
        """Test near_zero detection."""
        from lenscast.core.ray import near_zero, vec3

        result_zero = ti.field(dtype=ti.i32, shape=())
        result_nonzero = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            result_zero[None] = near_zero(vec3(1e-9, -1e-9, 1e-9))
            result_nonzero[None] = near_zero(vec3(0.1, 0.0, 0.0))

        test_kernel()
        assert result_zero[None] == 1
        assert result_nonzero[None] == 0


class TestInterval:
    """Tests for open interval membership."""

    def test_surrounds_excludes_endpoints(self):
        from lenscast.core.interval import Interval, surrounds

        results = ti.field(dtype=ti.i32, shape=4)

        @ti.kernel
        def test_kernel():
            interval = Interval(lo=0.001, hi=10.0)
            results[0] = surrounds(interval, 5.0)
            results[1] = surrounds(interval, 0.001)
            results[2] = surrounds(interval, 10.0)
            results[3] = surrounds(interval, -1.0)

        test_kernel()
        assert results.to_numpy().tolist() == [1, 0, 0, 0]

    def test_surrounds_unbounded(self):
        from lenscast.core.interval import INFINITY, Interval, surrounds

        result = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = surrounds(Interval(lo=0.001, hi=INFINITY), 1e30)

        test_kernel()
        assert result[None] == 1


class TestHostConversion:
    """Tests for converting description values to floats and 3-tuples."""

    def test_to_vec3_tuple_accepts_sequences(self):
        from lenscast.core.ray import to_vec3_tuple

        assert to_vec3_tuple([1, 2, 3], "center") == (1.0, 2.0, 3.0)
        assert to_vec3_tuple(np.array([0.5, -1.0, 2.0], dtype=np.float32), "center") == (
            0.5,
            -1.0,
            2.0,
        )

    @pytest.mark.parametrize("value", [5, None, "abc", [1, 2], [1, 2, 3, 4], [1, None, 3], [1, "2", 3]])
    def test_to_vec3_tuple_rejects(self, value):
        from lenscast.core.ray import to_vec3_tuple

        with pytest.raises(ValueError, match="center"):
            to_vec3_tuple(value, "center")

    def test_to_float(self):
        from lenscast.core.ray import to_float

        assert to_float(2, "radius") == 2.0
        assert to_float(np.float32(0.25), "radius") == pytest.approx(0.25)

    @pytest.mark.parametrize("value", [True, "1.0", None, [1.0]])
    def test_to_float_rejects(self, value):
        from lenscast.core.ray import to_float

        with pytest.raises(ValueError, match="radius"):
            to_float(value, "radius")
