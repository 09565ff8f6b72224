# -*- coding: utf-8 -*-
"""
Mat4: раскладка column‑major, умножение, обращение, TRS, Эйлер, проекции.
"""

import math

import numpy as np
import pytest

from rendermath.math import math_utils
from rendermath.math.mat4 import Mat4
from rendermath.math.quat import Quat
from rendermath.math.vec3 import Vec3
from rendermath.math.vec4 import Vec4


def approx_vec(vec, expected, atol=1e-5):
    return np.allclose(vec.as_np(), np.array(expected, dtype=np.float64), atol=atol)


def sample_trs():
    return Mat4().set_trs(Vec3(1, 2, 3), Quat.from_euler(10, 20, 30), Vec3(2, 3, 4))


# ----------------------------------------------------------------------
# раскладка и базовые операции
# ----------------------------------------------------------------------
def test_default_is_identity_column_major():
    m = Mat4()
    assert m.data.shape == (16,)
    assert m.data.dtype == math_utils.FLOAT_DTYPE
    assert m.is_identity()
    assert np.array_equal(m.as_np(), np.eye(4))


def test_translation_lives_in_elements_12_to_14():
    m = Mat4().set_translate(1, 2, 3)
    assert m.data.tolist()[12:16] == [1.0, 2.0, 3.0, 1.0]
    assert m.get_translation().to_tuple() == (1.0, 2.0, 3.0)
    assert np.array_equal(m.to_gl(), m.data)


def test_set_copy_clone_equals():
    values = list(range(16))
    a = Mat4().set(values)
    assert a.data.tolist() == [float(v) for v in values]
    b = Mat4().copy(a)
    c = a.clone()
    assert b.equals(a) and c.equals(a)
    a.set_identity()
    assert not b.equals(a)
    assert c.data.tolist()[5] == 5.0


def test_add_and_add2():
    a = Mat4.translate(1, 2, 3)
    s = Mat4().add2(a, Mat4.IDENTITY)
    assert s.data.tolist()[0] == 2.0
    assert s.data.tolist()[12] == 1.0
    a.add(a)
    assert a.data.tolist()[14] == 6.0


def test_identity_multiplication():
    m = sample_trs()
    assert Mat4().mul2(m, Mat4.IDENTITY).equals_approx(m)
    assert Mat4().mul2(Mat4.IDENTITY, m).equals_approx(m)


def test_mul2_matches_numpy_and_aliasing():
    a = sample_trs()
    b = Mat4.perspective(45, 1.5, 0.5, 50)
    expected = a.as_np() @ b.as_np()
    assert np.allclose(Mat4().mul2(a, b).as_np(), expected, atol=1e-5)

    lhs = a.clone()
    lhs.mul2(lhs, b)
    assert np.allclose(lhs.as_np(), expected, atol=1e-5)

    rhs = b.clone()
    rhs.mul2(a, rhs)
    assert np.allclose(rhs.as_np(), expected, atol=1e-5)

    a.mul(b)
    assert np.allclose(a.as_np(), expected, atol=1e-5)


def test_composition_order():
    t = Mat4.translate(10, 0, 0)
    s = Mat4.scale(2, 2, 2)
    # (T · S) p = T(S(p))
    p = (t @ s).transform_point(Vec3(1, 1, 1))
    assert p.to_tuple() == (12.0, 2.0, 2.0)


def test_mul_affine2_equals_mul2_for_affine():
    a = sample_trs()
    b = Mat4().set_trs(Vec3(-4, 0.5, 2), Quat.from_axis_angle(Vec3(1, 1, 0), 40), Vec3(1, 1, 2))
    full = Mat4().mul2(a, b)
    fast = Mat4().mul_affine2(a, b)
    assert np.allclose(fast.data, full.data, atol=1e-5)
    a.mul_affine2(a, b)
    assert np.allclose(a.data, full.data, atol=1e-5)


# ----------------------------------------------------------------------
# обращение / транспонирование
# ----------------------------------------------------------------------
def test_invert_gives_identity_product():
    m = sample_trs()
    inv = m.clone().invert()
    assert np.allclose((m @ inv).as_np(), np.eye(4), atol=1e-5)
    assert np.allclose((inv @ m).as_np(), np.eye(4), atol=1e-5)


def test_double_invert_restores_matrix():
    m = sample_trs()
    back = m.clone().invert().invert()
    assert np.allclose(back.data, m.data, atol=1e-4)


def test_invert_matches_numpy_general_matrix():
    rng = np.random.default_rng(7)
    a = rng.uniform(-1, 1, (4, 4)) + 4 * np.eye(4)
    m = Mat4.from_np(a)
    dst = Mat4().invert(m)
    assert np.allclose(dst.as_np(), np.linalg.inv(a), atol=1e-5)
    # источник не изменился
    assert np.allclose(m.as_np(), a, atol=1e-6)


def test_invert_singular_gives_identity():
    assert Mat4.scale(0, 1, 1).invert().is_identity()
    assert Mat4.ZERO.clone().invert().is_identity()


def test_invert_nan_propagates():
    m = Mat4()
    m.data[0] = float("nan")
    m.invert()
    assert np.isnan(m.data).all()


def test_transpose():
    a = np.arange(16, dtype=np.float64).reshape(4, 4)
    m = Mat4.from_np(a)
    t = Mat4().transpose(m)
    assert np.array_equal(t.as_np(), a.T)
    assert np.array_equal(m.as_np(), a)
    m.transpose()
    assert np.array_equal(m.as_np(), a.T)


# ----------------------------------------------------------------------
# применение к векторам
# ----------------------------------------------------------------------
def test_transform_point_vector_vec4():
    m = Mat4().set_trs(Vec3(1, 2, 3), Quat(), Vec3(2, 2, 2))
    assert m.transform_point(Vec3(1, 1, 1)).to_tuple() == (3.0, 4.0, 5.0)
    assert m.transform_vector(Vec3(1, 1, 1)).to_tuple() == (2.0, 2.0, 2.0)
    assert m.transform_vec4(Vec4(1, 1, 1, 1)).to_tuple() == (3.0, 4.0, 5.0, 1.0)
    assert m.transform_vec4(Vec4(1, 1, 1, 0)).to_tuple() == (2.0, 2.0, 2.0, 0.0)


def test_transform_point_into_source():
    m = Mat4.translate(1, 0, 0)
    v = Vec3(1, 2, 3)
    assert m.transform_point(v, v) is v
    assert v.to_tuple() == (2.0, 2.0, 3.0)


# ----------------------------------------------------------------------
# проекции и камера
# ----------------------------------------------------------------------
def test_perspective_near_and_far_planes():
    m = Mat4().set_perspective(60, 16 / 9, 0.1, 1000)
    p = m.transform_point(Vec3(0, 0, -0.1))
    assert p.z == pytest.approx(-0.1, abs=1e-6)

    clip = m.transform_vec4(Vec4(0, 0, -0.1, 1))
    assert clip.w == pytest.approx(0.1, abs=1e-7)
    assert clip.z / clip.w == pytest.approx(-1.0, abs=1e-5)

    far = m.transform_vec4(Vec4(0, 0, -1000, 1))
    assert far.z / far.w == pytest.approx(1.0, abs=1e-4)


def test_perspective_fov_axis():
    fov = 60.0
    vertical = Mat4().set_perspective(fov, 2.0, 1, 100)
    f = 1 / math.tan(math.radians(fov) / 2)
    assert vertical.data[5] == pytest.approx(f, rel=1e-6)
    assert vertical.data[0] == pytest.approx(f / 2.0, rel=1e-6)

    horizontal = Mat4().set_perspective(fov, 2.0, 1, 100, fov_is_horizontal=True)
    assert horizontal.data[0] == pytest.approx(f, rel=1e-6)
    assert horizontal.data[5] == pytest.approx(f * 2.0, rel=1e-6)


def test_frustum_layout():
    m = Mat4().set_frustum(-1, 1, -1, 1, 1, 10)
    d = m.data.tolist()
    assert d[0] == 1.0 and d[5] == 1.0
    assert d[11] == -1.0 and d[15] == 0.0
    assert d[10] == pytest.approx(-11 / 9)
    assert d[14] == pytest.approx(-20 / 9)


def test_degenerate_frustum_is_ieee_not_exception():
    m = Mat4().set_frustum(1, 1, -1, 1, 1, 10)
    assert math.isinf(m.data[0])


def test_ortho_maps_box_to_ndc():
    m = Mat4().set_ortho(-2, 2, -1, 1, 0.1, 100)
    assert approx_vec(m.transform_point(Vec3(2, 1, -0.1)), (1, 1, -1))
    assert approx_vec(m.transform_point(Vec3(-2, -1, -100)), (-1, -1, 1))


def test_viewport():
    m = Mat4().set_viewport(0, 0, 800, 600)
    assert m.transform_point(Vec3(-1, -1, -1)).to_tuple() == (0.0, 0.0, 0.0)
    assert m.transform_point(Vec3(1, 1, 1)).to_tuple() == (800.0, 600.0, 1.0)


def test_look_at_camera_world_matrix():
    m = Mat4().set_look_at(Vec3(0, 0, 5), Vec3(0, 0, 0), Vec3(0, 1, 0))
    assert m.get_translation().to_tuple() == (0.0, 0.0, 5.0)
    assert approx_vec(m.get_z(), (0, 0, 1))

    side = Mat4.look_at(Vec3(5, 0, 0), Vec3.ZERO, Vec3.UP)
    assert approx_vec(side.get_x(), (0, 0, -1))
    assert approx_vec(side.get_y(), (0, 1, 0))
    # камера смотрит вдоль своей -Z
    assert approx_vec(side.transform_vector(Vec3.FORWARD), (-1, 0, 0))
    view = side.clone().invert()
    assert approx_vec(view.transform_point(Vec3.ZERO), (0, 0, -5))


# ----------------------------------------------------------------------
# вращения, отражение, TRS
# ----------------------------------------------------------------------
def test_axis_angle_rotation():
    m = Mat4().set_from_axis_angle(Vec3.UP, 90)
    assert approx_vec(m.transform_vector(Vec3.RIGHT), (0, 0, -1))
    assert approx_vec(Mat4.rotate_x(90).transform_vector(Vec3.UP), (0, 0, 1))
    assert approx_vec(Mat4.rotate_z(90).transform_vector(Vec3.RIGHT), (0, 1, 0))


def test_axis_angle_matches_quaternion():
    axis = Vec3(1, 2, 3).normalize()
    m = Mat4().set_from_axis_angle(axis, 70)
    q = Quat().set_from_axis_angle(axis, 70)
    trs = Mat4().set_trs(Vec3.ZERO, q, Vec3.ONE)
    assert np.allclose(m.data, trs.data, atol=1e-6)


def test_reflection():
    m = Mat4().set_reflection(Vec3(0, 1, 0), 0)
    assert m.transform_point(Vec3(1, 2, 3)).to_tuple() == (1.0, -2.0, 3.0)
    shifted = Mat4().set_reflection(Vec3(0, 1, 0), 1)
    assert shifted.transform_point(Vec3.ZERO).to_tuple() == (0.0, -2.0, 0.0)
    assert m.scale_sign == -1


def test_trs_composition_and_decomposition():
    t = Vec3(1, 2, 3)
    q = Quat.from_euler(10, 20, 30)
    s = Vec3(2, 3, 4)
    m = Mat4().set_trs(t, q, s)

    assert approx_vec(m.get_translation(), (1, 2, 3))
    assert approx_vec(m.get_scale(), (2, 3, 4))
    assert m.scale_sign == 1
    expected = q.transform_vector(Vec3(2, 0, 0)).add(t)
    assert approx_vec(m.transform_point(Vec3(1, 0, 0)), expected.to_tuple())

    back = Quat().set_from_mat4(m)
    assert back.equals_approx(q, 1e-5)
    assert approx_vec(m.get_euler_angles(), (10, 20, 30), atol=1e-3)


def test_scale_sign_negative_for_mirror():
    assert Mat4.scale(-1, 1, 1).scale_sign == -1
    assert Mat4.scale(1, 1, 1).scale_sign == 1
    assert Mat4.scale(-1, -1, 1).scale_sign == 1


def test_axes_getters():
    m = Mat4.scale(2, 3, 4)
    assert m.get_x().to_tuple() == (2.0, 0.0, 0.0)
    assert m.get_y().to_tuple() == (0.0, 3.0, 0.0)
    assert m.get_z().to_tuple() == (0.0, 0.0, 4.0)
    out = Vec3()
    assert m.get_scale(out) is out


# ----------------------------------------------------------------------
# углы Эйлера
# ----------------------------------------------------------------------
@pytest.mark.parametrize("angles", [
    (0, 0, 0),
    (10, 20, 30),
    (-45, 60, 170),
    (90, -30, -90),
    (-120, 89, 5),
])
def test_euler_round_trip(angles):
    m = Mat4().set_from_euler_angles(*angles)
    assert approx_vec(m.get_euler_angles(), angles, atol=1e-3)


def test_euler_matches_quaternion():
    m = Mat4().set_from_euler_angles(15, -40, 75)
    q = Quat().set_from_euler_angles(15, -40, 75)
    assert np.allclose(m.data, Mat4().set_trs(Vec3.ZERO, q, Vec3.ONE).data, atol=1e-6)


def test_euler_gimbal_lock_positive_pitch():
    # при pitch = +90 крен сворачивается в x, z = 0
    m = Mat4().set_from_euler_angles(30, 90, 20)
    assert approx_vec(m.get_euler_angles(), (10, 90, 0), atol=1e-3)


def test_euler_gimbal_lock_negative_pitch():
    m = Mat4().set_from_euler_angles(30, -90, 20)
    assert approx_vec(m.get_euler_angles(), (50, -90, 0), atol=1e-3)


def test_euler_ignores_scale():
    m = Mat4().set_trs(Vec3(5, 5, 5), Quat.from_euler(20, 30, 40), Vec3(3, 0.5, 2))
    assert approx_vec(m.get_euler_angles(), (20, 30, 40), atol=1e-3)


def test_euler_zero_scale_gives_zero():
    m = Mat4.scale(0, 1, 1)
    out = Vec3(7, 7, 7)
    assert m.get_euler_angles(out) is out
    assert out.to_tuple() == (0.0, 0.0, 0.0)


# ----------------------------------------------------------------------
# константы и фабрики
# ----------------------------------------------------------------------
def test_constants_are_frozen():
    with pytest.raises(ValueError):
        Mat4.IDENTITY.set_translate(1, 2, 3)
    with pytest.raises(ValueError):
        Mat4.ZERO.data[0] = 1
    assert Mat4.IDENTITY.is_identity()
    assert not Mat4.ZERO.data.any()
    m = Mat4.IDENTITY.clone().set_scale(2, 2, 2)
    assert m.data[0] == 2.0


def test_static_factories():
    assert Mat4.identity().is_identity()
    assert Mat4.from_euler(10, 20, 30).equals(Mat4().set_from_euler_angles(10, 20, 30))
    assert Mat4.ortho(-1, 1, -1, 1, 1, 2).equals(Mat4().set_ortho(-1, 1, -1, 1, 1, 2))
    q = Quat.from_euler(1, 2, 3)
    assert Mat4.from_trs(Vec3.ONE, q, Vec3.ONE).equals(Mat4().set_trs(Vec3.ONE, q, Vec3.ONE))


def test_repr_and_str():
    text = str(Mat4())
    assert text.startswith("[1.0, 0.0")
    assert repr(Mat4()).startswith("Mat4(1.000")


@pytest.mark.filterwarnings("error")
def test_overflow_gives_inf_without_warnings():
    big = float(np.finfo(math_utils.FLOAT_DTYPE).max)
    m = Mat4.scale(big, 1, 1)
    assert math.isinf(m.transform_point(Vec3(big, 0, 0)).x)
    assert math.isinf(m.transform_vec4(Vec4(2, 0, 0, 1)).x)
    assert math.isinf(Mat4().mul2(m, m).data[0])
    assert math.isinf(Mat4().add2(m, m).data[0])
    assert math.isinf(Mat4().set_translate(big * 2, 0, 0).data[12])
    assert math.isinf(Mat4([big * 2] + [0.0] * 15).data[0])
