# rendermath/math/mat4.py
"""
Матрица 4×4 для трансформаций.

``data`` – 16 чисел подряд в порядке по столбцам (column‑major), ровно
так, как их ждёт uniform‑буфер GPU: ``data[12:15]`` – перенос.
Векторы умножаются справа (столбцы): p' = M · p.

Мутирующие методы возвращают self.  Аргументы сначала полностью
читаются в локальные переменные, поэтому ``m.mul2(m, m)`` и
``m.invert(m)`` безопасны.  Углы везде в градусах.
"""

import math

import numpy as np

from rendermath.math.math_utils import (
    DEG_TO_RAD, RAD_TO_DEG, FLOAT_DTYPE, clamp, fdiv, ieee,
)
from rendermath.math.vec3 import Vec3
from rendermath.math.vec4 import Vec4

_IDENTITY = (1.0, 0.0, 0.0, 0.0,
             0.0, 1.0, 0.0, 0.0,
             0.0, 0.0, 1.0, 0.0,
             0.0, 0.0, 0.0, 1.0)


class Mat4:
    __slots__ = ("data",)

    @ieee
    def __init__(self, data=None):
        """data – 16 значений column‑major; по умолчанию единичная матрица."""
        if data is None:
            data = _IDENTITY
        self.data = np.array(data, dtype=FLOAT_DTYPE).reshape(16)

    @classmethod
    @ieee
    def _wrap(cls, arr) -> "Mat4":
        m = cls.__new__(cls)
        m.data = np.asarray(arr, dtype=FLOAT_DTYPE).reshape(16)
        return m

    def _freeze(self) -> "Mat4":
        self.data.flags.writeable = False
        return self

    # -----------------------------------------------------------------
    # фабрики (возвращают новую матрицу)
    # -----------------------------------------------------------------
    @staticmethod
    def identity():
        return Mat4()

    @staticmethod
    def from_np(array: np.ndarray) -> "Mat4":
        """Из 4×4 ndarray в математическом порядке (строка, столбец)."""
        return Mat4._wrap(np.asarray(array).T.copy())

    @staticmethod
    def translate(x: float, y: float, z: float):
        return Mat4().set_translate(x, y, z)

    @staticmethod
    def scale(sx: float, sy: float, sz: float):
        return Mat4().set_scale(sx, sy, sz)

    @staticmethod
    def rotate_x(angle_deg: float):
        return Mat4().set_from_axis_angle(Vec3.RIGHT, angle_deg)

    @staticmethod
    def rotate_y(angle_deg: float):
        return Mat4().set_from_axis_angle(Vec3.UP, angle_deg)

    @staticmethod
    def rotate_z(angle_deg: float):
        return Mat4().set_from_axis_angle(Vec3.BACK, angle_deg)

    @staticmethod
    def from_euler(pitch: float, yaw: float, roll: float):
        return Mat4().set_from_euler_angles(pitch, yaw, roll)

    @staticmethod
    def from_trs(t, r, s):
        return Mat4().set_trs(t, r, s)

    @staticmethod
    def perspective(fov_deg: float, aspect: float,
                    z_near: float, z_far: float):
        return Mat4().set_perspective(fov_deg, aspect, z_near, z_far)

    @staticmethod
    def ortho(left, right, bottom, top, z_near, z_far):
        return Mat4().set_ortho(left, right, bottom, top, z_near, z_far)

    @staticmethod
    def look_at(eye: Vec3, target: Vec3, up: Vec3) -> "Mat4":
        """
        Мировая матрица камеры в eye, смотрящей на target.
        Матрица вида – её обратная: ``Mat4.look_at(...).invert()``.
        """
        return Mat4().set_look_at(eye, target, up)

    # -----------------------------------------------------------------
    # присваивание / сравнение
    # -----------------------------------------------------------------
    @ieee
    def set(self, src) -> "Mat4":
        """Скопировать 16 значений (column‑major) из последовательности."""
        self.data[:] = np.asarray(src, dtype=FLOAT_DTYPE).reshape(16)
        return self

    def copy(self, rhs: "Mat4") -> "Mat4":
        self.data[:] = rhs.data
        return self

    def clone(self) -> "Mat4":
        return Mat4._wrap(self.data.copy())

    def set_identity(self) -> "Mat4":
        self.data[:] = _IDENTITY
        return self

    def is_identity(self) -> bool:
        return bool(np.array_equal(self.data, _IDENTITY))

    def equals(self, rhs: "Mat4") -> bool:
        return bool(np.array_equal(self.data, rhs.data))

    @ieee
    def equals_approx(self, rhs: "Mat4", epsilon: float = 1e-6) -> bool:
        return bool(np.all(np.abs(self.data - rhs.data) < epsilon))

    # -----------------------------------------------------------------
    # арифметика
    # -----------------------------------------------------------------
    @ieee
    def add2(self, lhs: "Mat4", rhs: "Mat4") -> "Mat4":
        np.add(lhs.data, rhs.data, out=self.data)
        return self

    def add(self, rhs: "Mat4") -> "Mat4":
        return self.add2(self, rhs)

    @ieee
    def mul2(self, lhs: "Mat4", rhs: "Mat4") -> "Mat4":
        """self = lhs · rhs (сначала применяется rhs)."""
        # в column‑major раскладке строки reshape(4, 4) – это столбцы,
        # поэтому (A·B)^T = B^T · A^T
        a = lhs.data.reshape(4, 4)
        b = rhs.data.reshape(4, 4)
        self.data[:] = np.dot(b, a).reshape(16)
        return self

    def mul(self, rhs: "Mat4") -> "Mat4":
        return self.mul2(self, rhs)

    @ieee
    def mul_affine2(self, lhs: "Mat4", rhs: "Mat4") -> "Mat4":
        """
        Быстрое lhs · rhs для аффинных матриц: нижняя строка обоих
        операндов считается равной (0, 0, 0, 1) и не читается.
        """
        a = lhs.data.reshape(4, 4)
        b = rhs.data.reshape(4, 4)
        a3 = a[:3, :3]
        r = np.empty((4, 4), dtype=self.data.dtype)
        r[:3, :3] = np.dot(b[:3, :3], a3)
        r[3, :3] = np.dot(b[3, :3], a3) + a[3, :3]
        r[:, 3] = (0.0, 0.0, 0.0, 1.0)
        self.data[:] = r.reshape(16)
        return self

    def __matmul__(self, other: "Mat4") -> "Mat4":
        return Mat4().mul2(self, other)

    # -----------------------------------------------------------------
    # применение к векторам
    # -----------------------------------------------------------------
    @ieee
    def transform_point(self, vec: Vec3, res: Vec3 = None) -> Vec3:
        """Точка (w = 1): вращение, масштаб и перенос. Деления на w нет."""
        if res is None:
            res = Vec3()
        m = self.data.tolist()
        x, y, z = vec.x, vec.y, vec.z
        return res.set(x * m[0] + y * m[4] + z * m[8] + m[12],
                       x * m[1] + y * m[5] + z * m[9] + m[13],
                       x * m[2] + y * m[6] + z * m[10] + m[14])

    @ieee
    def transform_vector(self, vec: Vec3, res: Vec3 = None) -> Vec3:
        """Направление (w = 0): перенос не применяется."""
        if res is None:
            res = Vec3()
        m = self.data.tolist()
        x, y, z = vec.x, vec.y, vec.z
        return res.set(x * m[0] + y * m[4] + z * m[8],
                       x * m[1] + y * m[5] + z * m[9],
                       x * m[2] + y * m[6] + z * m[10])

    @ieee
    def transform_vec4(self, vec: Vec4, res: Vec4 = None) -> Vec4:
        if res is None:
            res = Vec4()
        m = self.data.tolist()
        x, y, z, w = vec.x, vec.y, vec.z, vec.w
        return res.set(x * m[0] + y * m[4] + z * m[8] + w * m[12],
                       x * m[1] + y * m[5] + z * m[9] + w * m[13],
                       x * m[2] + y * m[6] + z * m[10] + w * m[14],
                       x * m[3] + y * m[7] + z * m[11] + w * m[15])

    # -----------------------------------------------------------------
    # камера и проекции
    # -----------------------------------------------------------------
    @ieee
    def set_look_at(self, position: Vec3, target: Vec3, up: Vec3) -> "Mat4":
        """
        Мировая матрица наблюдателя: ось -Z смотрит из position на target,
        перенос равен position.
        """
        z = Vec3().sub2(position, target).normalize()
        y = up.clone().normalize()
        x = Vec3().cross(y, z).normalize()
        y.cross(z, x)
        self.data[:] = (x.x, x.y, x.z, 0.0,
                        y.x, y.y, y.z, 0.0,
                        z.x, z.y, z.z, 0.0,
                        position.x, position.y, position.z, 1.0)
        return self

    @ieee
    def set_frustum(self, left, right, bottom, top, znear, zfar) -> "Mat4":
        """Перспективная проекция по границам ближней плоскости (OpenGL, NDC z ∈ [-1, 1])."""
        t1 = 2.0 * znear
        t2 = right - left
        t3 = top - bottom
        t4 = zfar - znear
        self.data[:] = (fdiv(t1, t2), 0.0, 0.0, 0.0,
                        0.0, fdiv(t1, t3), 0.0, 0.0,
                        fdiv(right + left, t2), fdiv(top + bottom, t3),
                        fdiv(-zfar - znear, t4), -1.0,
                        0.0, 0.0, fdiv(-t1 * zfar, t4), 0.0)
        return self

    @ieee
    def set_perspective(self, fov, aspect, znear, zfar,
                        fov_is_horizontal: bool = False) -> "Mat4":
        """
        Симметричная перспектива.  fov – полный угол в градусах, по
        вертикали или (fov_is_horizontal=True) по горизонтали.
        """
        half = znear * math.tan(fov * math.pi / 360.0)
        if fov_is_horizontal:
            half_x = half
            half_y = fdiv(half, aspect)
        else:
            half_y = half
            half_x = half * aspect
        return self.set_frustum(-half_x, half_x, -half_y, half_y, znear, zfar)

    @ieee
    def set_ortho(self, left, right, bottom, top, near, far) -> "Mat4":
        self.data[:] = (fdiv(2.0, right - left), 0.0, 0.0, 0.0,
                        0.0, fdiv(2.0, top - bottom), 0.0, 0.0,
                        0.0, 0.0, fdiv(-2.0, far - near), 0.0,
                        -fdiv(right + left, right - left),
                        -fdiv(top + bottom, top - bottom),
                        -fdiv(far + near, far - near), 1.0)
        return self

    @ieee
    def set_viewport(self, x, y, width, height) -> "Mat4":
        """NDC [-1, 1] -> окно; глубина отображается в [0, 1]."""
        self.data[:] = (width * 0.5, 0.0, 0.0, 0.0,
                        0.0, height * 0.5, 0.0, 0.0,
                        0.0, 0.0, 0.5, 0.0,
                        x + width * 0.5, y + height * 0.5, 0.5, 1.0)
        return self

    # -----------------------------------------------------------------
    # базовые преобразования
    # -----------------------------------------------------------------
    @ieee
    def set_from_axis_angle(self, axis: Vec3, angle: float) -> "Mat4":
        """Вращение вокруг единичной оси axis на angle градусов."""
        angle *= DEG_TO_RAD
        x, y, z = axis.x, axis.y, axis.z
        c = math.cos(angle)
        s = math.sin(angle)
        t = 1 - c
        tx = t * x
        ty = t * y
        self.data[:] = (tx * x + c, tx * y + s * z, tx * z - s * y, 0.0,
                        tx * y - s * z, ty * y + c, ty * z + s * x, 0.0,
                        tx * z + s * y, ty * z - x * s, t * z * z + c, 0.0,
                        0.0, 0.0, 0.0, 1.0)
        return self

    @ieee
    def set_translate(self, x, y, z) -> "Mat4":
        self.data[:] = (1.0, 0.0, 0.0, 0.0,
                        0.0, 1.0, 0.0, 0.0,
                        0.0, 0.0, 1.0, 0.0,
                        x, y, z, 1.0)
        return self

    @ieee
    def set_scale(self, x, y, z) -> "Mat4":
        self.data[:] = (x, 0.0, 0.0, 0.0,
                        0.0, y, 0.0, 0.0,
                        0.0, 0.0, z, 0.0,
                        0.0, 0.0, 0.0, 1.0)
        return self

    @ieee
    def set_reflection(self, normal: Vec3, distance: float) -> "Mat4":
        """Отражение относительно плоскости dot(normal, p) + distance = 0."""
        a, b, c = normal.x, normal.y, normal.z
        self.data[:] = (1.0 - 2 * a * a, -2 * a * b, -2 * a * c, 0.0,
                        -2 * a * b, 1.0 - 2 * b * b, -2 * b * c, 0.0,
                        -2 * a * c, -2 * b * c, 1.0 - 2 * c * c, 0.0,
                        -2 * a * distance, -2 * b * distance, -2 * c * distance, 1.0)
        return self

    @ieee
    def set_trs(self, t: Vec3, r, s: Vec3) -> "Mat4":
        """
        self = T · R · S.  r – единичный кватернион (любой объект с x, y, z, w).
        """
        qx, qy, qz, qw = r.x, r.y, r.z, r.w
        sx, sy, sz = s.x, s.y, s.z

        x2 = qx + qx
        y2 = qy + qy
        z2 = qz + qz
        xx = qx * x2
        xy = qx * y2
        xz = qx * z2
        yy = qy * y2
        yz = qy * z2
        zz = qz * z2
        wx = qw * x2
        wy = qw * y2
        wz = qw * z2

        self.data[:] = ((1 - (yy + zz)) * sx, (xy + wz) * sx, (xz - wy) * sx, 0.0,
                        (xy - wz) * sy, (1 - (xx + zz)) * sy, (yz + wx) * sy, 0.0,
                        (xz + wy) * sz, (yz - wx) * sz, (1 - (xx + yy)) * sz, 0.0,
                        t.x, t.y, t.z, 1.0)
        return self

    # -----------------------------------------------------------------
    # обращение и транспонирование
    # -----------------------------------------------------------------
    @ieee
    def invert(self, src: "Mat4" = None) -> "Mat4":
        """
        Обратная матрица через кофакторы (2×2 миноры).
        Вырожденная матрица (det == 0) даёт единичную.
        """
        if src is None:
            src = self
        (a00, a01, a02, a03,
         a10, a11, a12, a13,
         a20, a21, a22, a23,
         a30, a31, a32, a33) = src.data.tolist()

        b00 = a00 * a11 - a01 * a10
        b01 = a00 * a12 - a02 * a10
        b02 = a00 * a13 - a03 * a10
        b03 = a01 * a12 - a02 * a11
        b04 = a01 * a13 - a03 * a11
        b05 = a02 * a13 - a03 * a12
        b06 = a20 * a31 - a21 * a30
        b07 = a20 * a32 - a22 * a30
        b08 = a20 * a33 - a23 * a30
        b09 = a21 * a32 - a22 * a31
        b10 = a21 * a33 - a23 * a31
        b11 = a22 * a33 - a23 * a32

        det = b00 * b11 - b01 * b10 + b02 * b09 + b03 * b08 - b04 * b07 + b05 * b06
        if det == 0:
            return self.set_identity()

        inv_det = 1.0 / det
        self.data[:] = (
            (a11 * b11 - a12 * b10 + a13 * b09) * inv_det,
            (-a01 * b11 + a02 * b10 - a03 * b09) * inv_det,
            (a31 * b05 - a32 * b04 + a33 * b03) * inv_det,
            (-a21 * b05 + a22 * b04 - a23 * b03) * inv_det,
            (-a10 * b11 + a12 * b08 - a13 * b07) * inv_det,
            (a00 * b11 - a02 * b08 + a03 * b07) * inv_det,
            (-a30 * b05 + a32 * b02 - a33 * b01) * inv_det,
            (a20 * b05 - a22 * b02 + a23 * b01) * inv_det,
            (a10 * b10 - a11 * b08 + a13 * b06) * inv_det,
            (-a00 * b10 + a01 * b08 - a03 * b06) * inv_det,
            (a30 * b04 - a31 * b02 + a33 * b00) * inv_det,
            (-a20 * b04 + a21 * b02 - a23 * b00) * inv_det,
            (-a10 * b09 + a11 * b07 - a12 * b06) * inv_det,
            (a00 * b09 - a01 * b07 + a02 * b06) * inv_det,
            (-a30 * b03 + a31 * b01 - a32 * b00) * inv_det,
            (a20 * b03 - a21 * b01 + a22 * b00) * inv_det,
        )
        return self

    @ieee
    def transpose(self, src: "Mat4" = None) -> "Mat4":
        if src is None:
            src = self
        self.data[:] = src.data.reshape(4, 4).T.reshape(16)
        return self

    # -----------------------------------------------------------------
    # разбор матрицы
    # -----------------------------------------------------------------
    def get_translation(self, t: Vec3 = None) -> Vec3:
        if t is None:
            t = Vec3()
        return t.set(*self.data[12:15].tolist())

    def get_x(self, x: Vec3 = None) -> Vec3:
        """Первый столбец (базисная ось X с масштабом)."""
        if x is None:
            x = Vec3()
        return x.set(*self.data[0:3].tolist())

    def get_y(self, y: Vec3 = None) -> Vec3:
        if y is None:
            y = Vec3()
        return y.set(*self.data[4:7].tolist())

    def get_z(self, z: Vec3 = None) -> Vec3:
        if z is None:
            z = Vec3()
        return z.set(*self.data[8:11].tolist())

    def get_scale(self, scale: Vec3 = None) -> Vec3:
        """Длины трёх базисных столбцов."""
        if scale is None:
            scale = Vec3()
        m = self.data.tolist()
        return scale.set(math.sqrt(m[0] * m[0] + m[1] * m[1] + m[2] * m[2]),
                         math.sqrt(m[4] * m[4] + m[5] * m[5] + m[6] * m[6]),
                         math.sqrt(m[8] * m[8] + m[9] * m[9] + m[10] * m[10]))

    @property
    def scale_sign(self) -> int:
        """-1, если базис левый (отражение), иначе 1."""
        x = self.get_x()
        x.cross(x, self.get_y())
        return -1 if x.dot(self.get_z()) < 0 else 1

    @ieee
    def set_from_euler_angles(self, ex, ey, ez) -> "Mat4":
        """Вращение из углов Эйлера (градусы), порядок применения Z, затем Y, затем X."""
        ex *= DEG_TO_RAD
        ey *= DEG_TO_RAD
        ez *= DEG_TO_RAD

        s1, c1 = math.sin(-ex), math.cos(-ex)
        s2, c2 = math.sin(-ey), math.cos(-ey)
        s3, c3 = math.sin(-ez), math.cos(-ez)

        self.data[:] = (c2 * c3, -c2 * s3, s2, 0.0,
                        c1 * s3 + c3 * s1 * s2, c1 * c3 - s1 * s2 * s3, -c2 * s1, 0.0,
                        s1 * s3 - c1 * c3 * s2, c3 * s1 + c1 * s2 * s3, c1 * c2, 0.0,
                        0.0, 0.0, 0.0, 1.0)
        return self

    def get_euler_angles(self, eulers: Vec3 = None) -> Vec3:
        """
        Углы Эйлера (градусы), обратные set_from_euler_angles.

        При нулевом масштабе любой оси возвращается (0, 0, 0).  При
        pitch = ±90° (gimbal lock) крен переносится в x, а z = 0.
        """
        if eulers is None:
            eulers = Vec3()
        sx, sy, sz = self.get_scale().to_tuple()
        if sx == 0 or sy == 0 or sz == 0:
            return eulers.set(0, 0, 0)

        m = self.data.tolist()
        # округление float может вывести отношение за [-1, 1]
        y = math.asin(clamp(-m[2] / sx, -1.0, 1.0))
        half_pi = math.pi * 0.5

        if y < half_pi:
            if y > -half_pi:
                x = math.atan2(m[6] / sy, m[10] / sz)
                z = math.atan2(m[1] / sx, m[0] / sx)
            else:
                z = 0.0
                x = -math.atan2(m[4] / sy, m[5] / sy)
        else:
            z = 0.0
            x = math.atan2(m[4] / sy, m[5] / sy)

        return eulers.set(x * RAD_TO_DEG, y * RAD_TO_DEG, z * RAD_TO_DEG)

    # -----------------------------------------------------------------
    # представление / конвертация
    # -----------------------------------------------------------------
    def as_np(self) -> np.ndarray:
        """4×4 ndarray в математическом порядке (строка, столбец)."""
        return self.data.reshape(4, 4).T.copy()

    def to_gl(self) -> np.ndarray:
        """Плоская копия column‑major (для glUniformMatrix4fv без транспонирования)."""
        return self.data.copy()

    def __repr__(self):
        return "Mat4(" + ", ".join(f"{v:.3f}" for v in self.data.tolist()) + ")"

    def __str__(self):
        return "[" + ", ".join(str(v) for v in self.data.tolist()) + "]"


Mat4.IDENTITY = Mat4()._freeze()
Mat4.ZERO = Mat4([0.0] * 16)._freeze()
