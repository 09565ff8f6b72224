# rendermath/math/quat.py
# ---------------------------------------------------------------
# Кватернион (x, y, z, w) – только то, что нужно матрицам:
# - создание из оси/угла, углов Эйлера и матрицы,
# - умножение, сопряжение, нормализация,
# - вращение вектора, slerp.
# Все углы в градусах.
# ---------------------------------------------------------------

import math
import numbers

from rendermath.math.math_utils import DEG_TO_RAD, RAD_TO_DEG, fdiv
from rendermath.math.vec3 import Vec3


def _sqrt(value):
    # отрицательный аргумент (не ортонормированная матрица) -> nan
    return math.sqrt(value) if value >= 0 else math.nan


class Quat:
    __slots__ = ("x", "y", "z", "w")

    def __init__(self, x=0.0, y=0.0, z=0.0, w=1.0):
        if not isinstance(x, numbers.Real):
            x, y, z, w = x
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)
        self.w = float(w)

    # -----------------------------------------------------------
    #  Конструкторы
    # -----------------------------------------------------------
    @staticmethod
    def from_axis_angle(axis, angle_deg):
        """axis – Vec3 или 3‑элементный iterable (нормализуется), angle – в градусах."""
        ax = Vec3(axis).normalize()
        return Quat().set_from_axis_angle(ax, angle_deg)

    @staticmethod
    def from_euler(pitch, yaw, roll):
        """Эйлеровы углы в градусах (порядок как в Mat4.set_from_euler_angles)."""
        return Quat().set_from_euler_angles(pitch, yaw, roll)

    # -----------------------------------------------------------
    #  Присваивание
    # -----------------------------------------------------------
    def set(self, x, y, z, w):
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)
        self.w = float(w)
        return self

    def copy(self, rhs):
        return self.set(rhs.x, rhs.y, rhs.z, rhs.w)

    def clone(self):
        return Quat(self.x, self.y, self.z, self.w)

    def set_from_axis_angle(self, axis, angle):
        """axis должен быть единичным."""
        angle *= 0.5 * DEG_TO_RAD
        sa = math.sin(angle)
        return self.set(sa * axis.x, sa * axis.y, sa * axis.z, math.cos(angle))

    def set_from_euler_angles(self, ex, ey=None, ez=None):
        if ey is None:
            ex, ey, ez = ex
        half = 0.5 * DEG_TO_RAD
        ex *= half
        ey *= half
        ez *= half
        sx, cx = math.sin(ex), math.cos(ex)
        sy, cy = math.sin(ey), math.cos(ey)
        sz, cz = math.sin(ez), math.cos(ez)
        return self.set(sx * cy * cz - cx * sy * sz,
                        cx * sy * cz + sx * cy * sz,
                        cx * cy * sz - sx * sy * cz,
                        cx * cy * cz + sx * sy * sz)

    def set_from_mat4(self, m):
        """
        Вращение из верхнего 3×3 блока матрицы.  Масштаб предварительно
        убирается; при нулевой оси кватернион не меняется.
        """
        d = m.data.tolist()
        m00, m01, m02 = d[0], d[1], d[2]
        m10, m11, m12 = d[4], d[5], d[6]
        m20, m21, m22 = d[8], d[9], d[10]

        lx = m00 * m00 + m01 * m01 + m02 * m02
        if lx == 0:
            return self
        ly = m10 * m10 + m11 * m11 + m12 * m12
        if ly == 0:
            return self
        lz = m20 * m20 + m21 * m21 + m22 * m22
        if lz == 0:
            return self
        lx = 1.0 / math.sqrt(lx)
        ly = 1.0 / math.sqrt(ly)
        lz = 1.0 / math.sqrt(lz)
        m00, m01, m02 = m00 * lx, m01 * lx, m02 * lx
        m10, m11, m12 = m10 * ly, m11 * ly, m12 * ly
        m20, m21, m22 = m20 * lz, m21 * lz, m22 * lz

        tr = m00 + m11 + m22
        if tr >= 0:
            s = math.sqrt(tr + 1)
            w = s * 0.5
            s = 0.5 / s
            return self.set((m12 - m21) * s, (m20 - m02) * s, (m01 - m10) * s, w)

        # доминирующий диагональный элемент
        if m00 > m11:
            if m00 > m22:
                rs = _sqrt(m00 - (m11 + m22) + 1)
                x = rs * 0.5
                rs = fdiv(0.5, rs)
                return self.set(x, (m01 + m10) * rs, (m02 + m20) * rs, (m12 - m21) * rs)
        elif m11 > m22:
            rs = _sqrt(m11 - (m22 + m00) + 1)
            y = rs * 0.5
            rs = fdiv(0.5, rs)
            return self.set((m10 + m01) * rs, y, (m12 + m21) * rs, (m20 - m02) * rs)
        rs = _sqrt(m22 - (m00 + m11) + 1)
        z = rs * 0.5
        rs = fdiv(0.5, rs)
        return self.set((m20 + m02) * rs, (m21 + m12) * rs, z, (m01 - m10) * rs)

    # -----------------------------------------------------------
    #  Алгебра
    # -----------------------------------------------------------
    def mul(self, rhs):
        return self.mul2(self, rhs)

    def mul2(self, lhs, rhs):
        """Произведение Гамильтона lhs * rhs."""
        q1x, q1y, q1z, q1w = lhs.x, lhs.y, lhs.z, lhs.w
        q2x, q2y, q2z, q2w = rhs.x, rhs.y, rhs.z, rhs.w
        return self.set(q1w * q2x + q1x * q2w + q1y * q2z - q1z * q2y,
                        q1w * q2y + q1y * q2w + q1z * q2x - q1x * q2z,
                        q1w * q2z + q1z * q2w + q1x * q2y - q1y * q2x,
                        q1w * q2w - q1x * q2x - q1y * q2y - q1z * q2z)

    def conjugate(self, src=None):
        src = self if src is None else src
        return self.set(-src.x, -src.y, -src.z, src.w)

    def invert(self, src=None):
        return self.conjugate(src).normalize()

    def length_sq(self):
        return self.x * self.x + self.y * self.y + self.z * self.z + self.w * self.w

    def length(self):
        return math.sqrt(self.length_sq())

    def normalize(self, src=None):
        """Нулевой кватернион превращается в единичный."""
        src = self if src is None else src
        n = src.length()
        if n == 0:
            return self.set(0.0, 0.0, 0.0, 1.0)
        inv = 1.0 / n
        return self.set(src.x * inv, src.y * inv, src.z * inv, src.w * inv)

    def slerp(self, lhs, rhs, alpha):
        lx, ly, lz, lw = lhs.x, lhs.y, lhs.z, lhs.w
        rx, ry, rz, rw = rhs.x, rhs.y, rhs.z, rhs.w

        cos_half = lw * rw + lx * rx + ly * ry + lz * rz
        if cos_half < 0:
            rx, ry, rz, rw = -rx, -ry, -rz, -rw
            cos_half = -cos_half
        if abs(cos_half) >= 1:
            return self.set(lx, ly, lz, lw)

        half_theta = math.acos(cos_half)
        sin_half = math.sqrt(1 - cos_half * cos_half)
        if abs(sin_half) < 0.001:
            return self.set(lx * 0.5 + rx * 0.5, ly * 0.5 + ry * 0.5,
                            lz * 0.5 + rz * 0.5, lw * 0.5 + rw * 0.5)

        ra = math.sin((1 - alpha) * half_theta) / sin_half
        rb = math.sin(alpha * half_theta) / sin_half
        return self.set(lx * ra + rx * rb, ly * ra + ry * rb,
                        lz * ra + rz * rb, lw * ra + rw * rb)

    # -----------------------------------------------------------
    #  Запросы
    # -----------------------------------------------------------
    def equals(self, rhs):
        return (self.x == rhs.x and self.y == rhs.y
                and self.z == rhs.z and self.w == rhs.w)

    def equals_approx(self, rhs, epsilon=1e-6):
        return (abs(self.x - rhs.x) < epsilon and abs(self.y - rhs.y) < epsilon
                and abs(self.z - rhs.z) < epsilon and abs(self.w - rhs.w) < epsilon)

    def transform_vector(self, vec, res=None):
        """Повернуть Vec3 (результат в res или новом векторе)."""
        if res is None:
            res = Vec3()
        x, y, z = vec.x, vec.y, vec.z
        qx, qy, qz, qw = self.x, self.y, self.z, self.w

        ix = qw * x + qy * z - qz * y
        iy = qw * y + qz * x - qx * z
        iz = qw * z + qx * y - qy * x
        iw = -qx * x - qy * y - qz * z

        return res.set(ix * qw + iw * -qx + iy * -qz - iz * -qy,
                       iy * qw + iw * -qy + iz * -qx - ix * -qz,
                       iz * qw + iw * -qz + ix * -qy - iy * -qx)

    def get_euler_angles(self, eulers=None):
        """Углы Эйлера в градусах; у полюсов (|sin pitch| ~ 1) z = 0."""
        if eulers is None:
            eulers = Vec3()
        qx, qy, qz, qw = self.x, self.y, self.z, self.w
        a2 = 2 * (qw * qy - qx * qz)
        if a2 <= -0.99999:
            x, y, z = 2 * math.atan2(qx, qw), -math.pi / 2, 0.0
        elif a2 >= 0.99999:
            x, y, z = 2 * math.atan2(qx, qw), math.pi / 2, 0.0
        else:
            x = math.atan2(2 * (qw * qx + qy * qz), 1 - 2 * (qx * qx + qy * qy))
            y = math.asin(a2)
            z = math.atan2(2 * (qw * qz + qx * qy), 1 - 2 * (qy * qy + qz * qz))
        return eulers.set(x * RAD_TO_DEG, y * RAD_TO_DEG, z * RAD_TO_DEG)

    # -----------------------------------------------------------
    #  Операторы
    # -----------------------------------------------------------
    def __mul__(self, other: "Quat") -> "Quat":
        return Quat().mul2(self, other)

    def normalized(self) -> "Quat":
        return Quat().normalize(self)

    def __repr__(self):
        return f"Quat({self.x:.3f}, {self.y:.3f}, {self.z:.3f}, {self.w:.3f})"


class _FrozenQuat(Quat):
    """Неизменяемый кватернион для констант класса."""
    __slots__ = ()

    def __init__(self, x, y, z, w):
        for name, value in zip(Quat.__slots__, (x, y, z, w)):
            object.__setattr__(self, name, float(value))

    def __setattr__(self, name, value):
        raise AttributeError("Quat constants are read-only")


Quat.IDENTITY = _FrozenQuat(0, 0, 0, 1)
Quat.ZERO = _FrozenQuat(0, 0, 0, 0)
