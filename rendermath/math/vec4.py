# rendermath/math/vec4.py
"""
4‑мерный вектор. Используется для однородных координат и RGBA‑цветов.
Соглашения те же, что у Vec3: мутирующие методы возвращают self.
"""

import math
from typing import Tuple

import numpy as np

from rendermath.math.math_utils import FLOAT_DTYPE, ieee, round_half_up_array


class Vec4:
    """Короткий и быстрый вектор‑4."""

    __slots__ = ("_v",)

    @ieee
    def __init__(self, x=0.0, y=0.0, z=0.0, w=0.0):
        if not np.isscalar(x):
            x, y, z, w = x
        self._v = np.array([x, y, z, w], dtype=FLOAT_DTYPE)

    @classmethod
    @ieee
    def _wrap(cls, arr) -> "Vec4":
        v = cls.__new__(cls)
        v._v = np.asarray(arr, dtype=FLOAT_DTYPE)
        return v

    def _freeze(self) -> "Vec4":
        self._v.flags.writeable = False
        return self

    # -----------------------------------------------------------------
    # свойства (c‑сеттерами)
    # -----------------------------------------------------------------
    @property
    def x(self) -> float:
        return float(self._v[0])

    @x.setter
    @ieee
    def x(self, value: float) -> None:
        self._v[0] = value

    @property
    def y(self) -> float:
        return float(self._v[1])

    @y.setter
    @ieee
    def y(self, value: float) -> None:
        self._v[1] = value

    @property
    def z(self) -> float:
        return float(self._v[2])

    @z.setter
    @ieee
    def z(self, value: float) -> None:
        self._v[2] = value

    @property
    def w(self) -> float:
        return float(self._v[3])

    @w.setter
    @ieee
    def w(self, value: float) -> None:
        self._v[3] = value

    # -----------------------------------------------------------------
    # присваивание
    # -----------------------------------------------------------------
    @ieee
    def set(self, x: float, y: float, z: float, w: float) -> "Vec4":
        self._v[:] = (x, y, z, w)
        return self

    def copy(self, rhs: "Vec4") -> "Vec4":
        self._v[:] = rhs._v
        return self

    def clone(self) -> "Vec4":
        return Vec4._wrap(self._v.copy())

    # -----------------------------------------------------------------
    # арифметика на месте
    # -----------------------------------------------------------------
    @ieee
    def add(self, rhs: "Vec4") -> "Vec4":
        np.add(self._v, rhs._v, out=self._v)
        return self

    @ieee
    def add2(self, lhs: "Vec4", rhs: "Vec4") -> "Vec4":
        np.add(lhs._v, rhs._v, out=self._v)
        return self

    @ieee
    def add_scalar(self, scalar: float) -> "Vec4":
        self._v += scalar
        return self

    @ieee
    def add_scaled(self, rhs: "Vec4", scalar: float) -> "Vec4":
        self._v += rhs._v * scalar
        return self

    @ieee
    def sub(self, rhs: "Vec4") -> "Vec4":
        np.subtract(self._v, rhs._v, out=self._v)
        return self

    @ieee
    def sub2(self, lhs: "Vec4", rhs: "Vec4") -> "Vec4":
        np.subtract(lhs._v, rhs._v, out=self._v)
        return self

    @ieee
    def sub_scalar(self, scalar: float) -> "Vec4":
        self._v -= scalar
        return self

    @ieee
    def mul(self, rhs: "Vec4") -> "Vec4":
        np.multiply(self._v, rhs._v, out=self._v)
        return self

    @ieee
    def mul2(self, lhs: "Vec4", rhs: "Vec4") -> "Vec4":
        np.multiply(lhs._v, rhs._v, out=self._v)
        return self

    @ieee
    def mul_scalar(self, scalar: float) -> "Vec4":
        self._v *= scalar
        return self

    @ieee
    def div(self, rhs: "Vec4") -> "Vec4":
        np.divide(self._v, rhs._v, out=self._v)
        return self

    @ieee
    def div2(self, lhs: "Vec4", rhs: "Vec4") -> "Vec4":
        np.divide(lhs._v, rhs._v, out=self._v)
        return self

    @ieee
    def div_scalar(self, scalar: float) -> "Vec4":
        self._v /= scalar
        return self

    @ieee
    def normalize(self, src: "Vec4" = None) -> "Vec4":
        """Единичный вектор; нулевая длина оставляет self как есть."""
        if src is None:
            src = self
        x, y, z, w = src._v.tolist()
        length_sq = x * x + y * y + z * z + w * w
        if length_sq > 0:
            inv = 1.0 / math.sqrt(length_sq)
            self._v[:] = (x * inv, y * inv, z * inv, w * inv)
        return self

    @ieee
    def lerp(self, lhs: "Vec4", rhs: "Vec4", alpha: float) -> "Vec4":
        a = lhs._v
        self._v[:] = a + alpha * (rhs._v - a)
        return self

    def floor(self, src: "Vec4" = None) -> "Vec4":
        np.floor((self if src is None else src)._v, out=self._v)
        return self

    def ceil(self, src: "Vec4" = None) -> "Vec4":
        np.ceil((self if src is None else src)._v, out=self._v)
        return self

    @ieee
    def round(self, src: "Vec4" = None) -> "Vec4":
        src_v = (self if src is None else src)._v
        self._v[:] = round_half_up_array(src_v)
        return self

    def min(self, rhs: "Vec4") -> "Vec4":
        self._v[:] = np.where(rhs._v < self._v, rhs._v, self._v)
        return self

    def max(self, rhs: "Vec4") -> "Vec4":
        self._v[:] = np.where(rhs._v > self._v, rhs._v, self._v)
        return self

    # -----------------------------------------------------------------
    # запросы
    # -----------------------------------------------------------------
    def dot(self, rhs: "Vec4") -> float:
        """Скалярное произведение."""
        ax, ay, az, aw = self._v.tolist()
        bx, by, bz, bw = rhs._v.tolist()
        return ax * bx + ay * by + az * bz + aw * bw

    def length_sq(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        return math.sqrt(self.length_sq())

    def equals(self, rhs: "Vec4") -> bool:
        return bool(np.all(self._v == rhs._v))

    @ieee
    def equals_approx(self, rhs: "Vec4", epsilon: float = 1e-6) -> bool:
        return bool(np.all(np.abs(self._v - rhs._v) < epsilon))

    def normalized(self) -> "Vec4":
        return self.clone().normalize()

    # -----------------------------------------------------------------
    # операторы (возвращают новый объект)
    # -----------------------------------------------------------------
    @ieee
    def __add__(self, other: "Vec4") -> "Vec4":
        return Vec4._wrap(self._v + other._v)

    @ieee
    def __sub__(self, other: "Vec4") -> "Vec4":
        return Vec4._wrap(self._v - other._v)

    @ieee
    def __mul__(self, other) -> "Vec4":
        if isinstance(other, Vec4):
            return Vec4._wrap(self._v * other._v)
        return Vec4._wrap(self._v * other)

    __rmul__ = __mul__

    @ieee
    def __truediv__(self, scalar: float) -> "Vec4":
        return Vec4._wrap(self._v / scalar)

    @ieee
    def __neg__(self) -> "Vec4":
        return Vec4._wrap(-self._v)

    def __iter__(self):
        return iter(self._v.tolist())

    def __getitem__(self, idx: int) -> float:
        return float(self._v[idx])

    def __len__(self) -> int:
        return 4

    # -----------------------------------------------------------------
    # представление
    # -----------------------------------------------------------------
    def as_np(self) -> np.ndarray:
        """Копия 4‑компонентного ndarray."""
        return self._v.copy()

    # приведение к кортежу (удобно для передачи в шейдер)
    def to_tuple(self) -> Tuple[float, float, float, float]:
        return tuple(self._v.tolist())

    def __repr__(self) -> str:
        return f"Vec4({self.x:.3f}, {self.y:.3f}, {self.z:.3f}, {self.w:.3f})"


Vec4.ZERO = Vec4(0, 0, 0, 0)._freeze()
Vec4.ONE = Vec4(1, 1, 1, 1)._freeze()
