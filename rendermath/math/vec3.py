# rendermath/math/vec3.py
"""
3‑мерный вектор на numpy‑хранилище.

Методы вида ``add``/``mul2``/``normalize`` изменяют объект на месте и
возвращают ``self`` (можно строить цепочки).  Операнды сначала читаются,
затем пишется результат, поэтому ``a.cross(a, b)`` корректен.
Операторы ``+ - * /`` возвращают новый вектор.
"""

import math
from typing import Tuple

import numpy as np

from rendermath.math.math_utils import FLOAT_DTYPE, fdiv, ieee, round_half_up_array


class Vec3:
    """Короткий и быстрый вектор‑3."""

    __slots__ = ("_v",)

    @ieee
    def __init__(self, x=0.0, y=0.0, z=0.0):
        # Vec3([1, 2, 3]) – из последовательности длины 3
        if not np.isscalar(x):
            x, y, z = x
        self._v = np.array([x, y, z], dtype=FLOAT_DTYPE)

    @classmethod
    @ieee
    def _wrap(cls, arr) -> "Vec3":
        v = cls.__new__(cls)
        v._v = np.asarray(arr, dtype=FLOAT_DTYPE)
        return v

    def _freeze(self) -> "Vec3":
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

    # -----------------------------------------------------------------
    # присваивание
    # -----------------------------------------------------------------
    @ieee
    def set(self, x: float, y: float, z: float) -> "Vec3":
        self._v[:] = (x, y, z)
        return self

    def copy(self, rhs: "Vec3") -> "Vec3":
        """Скопировать компоненты rhs в этот вектор."""
        self._v[:] = rhs._v
        return self

    def clone(self) -> "Vec3":
        """Новый (изменяемый) вектор с теми же компонентами."""
        return Vec3._wrap(self._v.copy())

    # -----------------------------------------------------------------
    # арифметика на месте
    # -----------------------------------------------------------------
    @ieee
    def add(self, rhs: "Vec3") -> "Vec3":
        np.add(self._v, rhs._v, out=self._v)
        return self

    @ieee
    def add2(self, lhs: "Vec3", rhs: "Vec3") -> "Vec3":
        np.add(lhs._v, rhs._v, out=self._v)
        return self

    @ieee
    def add_scalar(self, scalar: float) -> "Vec3":
        self._v += scalar
        return self

    @ieee
    def add_scaled(self, rhs: "Vec3", scalar: float) -> "Vec3":
        """self += rhs * scalar"""
        self._v += rhs._v * scalar
        return self

    @ieee
    def sub(self, rhs: "Vec3") -> "Vec3":
        np.subtract(self._v, rhs._v, out=self._v)
        return self

    @ieee
    def sub2(self, lhs: "Vec3", rhs: "Vec3") -> "Vec3":
        np.subtract(lhs._v, rhs._v, out=self._v)
        return self

    @ieee
    def sub_scalar(self, scalar: float) -> "Vec3":
        self._v -= scalar
        return self

    @ieee
    def mul(self, rhs: "Vec3") -> "Vec3":
        """Покомпонентное умножение."""
        np.multiply(self._v, rhs._v, out=self._v)
        return self

    @ieee
    def mul2(self, lhs: "Vec3", rhs: "Vec3") -> "Vec3":
        np.multiply(lhs._v, rhs._v, out=self._v)
        return self

    @ieee
    def mul_scalar(self, scalar: float) -> "Vec3":
        self._v *= scalar
        return self

    @ieee
    def div(self, rhs: "Vec3") -> "Vec3":
        """Покомпонентное деление (деление на 0 даёт inf/nan)."""
        np.divide(self._v, rhs._v, out=self._v)
        return self

    @ieee
    def div2(self, lhs: "Vec3", rhs: "Vec3") -> "Vec3":
        np.divide(lhs._v, rhs._v, out=self._v)
        return self

    @ieee
    def div_scalar(self, scalar: float) -> "Vec3":
        self._v /= scalar
        return self

    @ieee
    def cross(self, lhs: "Vec3", rhs: "Vec3") -> "Vec3":
        """Векторное произведение lhs × rhs (правая тройка)."""
        lx, ly, lz = lhs._v.tolist()
        rx, ry, rz = rhs._v.tolist()
        self._v[:] = (ly * rz - ry * lz,
                      lz * rx - rz * lx,
                      lx * ry - rx * ly)
        return self

    @ieee
    def normalize(self, src: "Vec3" = None) -> "Vec3":
        """
        Записать в self единичный вектор направления src (по умолчанию self).
        Вектор нулевой длины оставляет self без изменений.
        """
        if src is None:
            src = self
        x, y, z = src._v.tolist()
        length_sq = x * x + y * y + z * z
        if length_sq > 0:
            inv = 1.0 / math.sqrt(length_sq)
            self._v[:] = (x * inv, y * inv, z * inv)
        return self

    @ieee
    def lerp(self, lhs: "Vec3", rhs: "Vec3", alpha: float) -> "Vec3":
        """lhs + alpha * (rhs - lhs); alpha не ограничивается."""
        a = lhs._v
        self._v[:] = a + alpha * (rhs._v - a)
        return self

    def floor(self, src: "Vec3" = None) -> "Vec3":
        np.floor((self if src is None else src)._v, out=self._v)
        return self

    def ceil(self, src: "Vec3" = None) -> "Vec3":
        np.ceil((self if src is None else src)._v, out=self._v)
        return self

    @ieee
    def round(self, src: "Vec3" = None) -> "Vec3":
        """Округление половин вверх (как Math.round)."""
        src_v = (self if src is None else src)._v
        self._v[:] = round_half_up_array(src_v)
        return self

    def min(self, rhs: "Vec3") -> "Vec3":
        self._v[:] = np.where(rhs._v < self._v, rhs._v, self._v)
        return self

    def max(self, rhs: "Vec3") -> "Vec3":
        self._v[:] = np.where(rhs._v > self._v, rhs._v, self._v)
        return self

    @ieee
    def project(self, rhs: "Vec3") -> "Vec3":
        """Проекция self на направление rhs."""
        scale = fdiv(self.dot(rhs), rhs.dot(rhs))
        self._v[:] = rhs._v * scale
        return self

    # -----------------------------------------------------------------
    # запросы
    # -----------------------------------------------------------------
    def dot(self, rhs: "Vec3") -> float:
        """Скалярное произведение."""
        ax, ay, az = self._v.tolist()
        bx, by, bz = rhs._v.tolist()
        return ax * bx + ay * by + az * bz

    def length_sq(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        """Евклидова длина."""
        return math.sqrt(self.length_sq())

    def distance(self, rhs: "Vec3") -> float:
        ax, ay, az = self._v.tolist()
        bx, by, bz = rhs._v.tolist()
        dx, dy, dz = ax - bx, ay - by, az - bz
        return math.sqrt(dx * dx + dy * dy + dz * dz)

    def equals(self, rhs: "Vec3") -> bool:
        return bool(np.all(self._v == rhs._v))

    @ieee
    def equals_approx(self, rhs: "Vec3", epsilon: float = 1e-6) -> bool:
        """Абсолютная покомпонентная разница строго меньше epsilon."""
        return bool(np.all(np.abs(self._v - rhs._v) < epsilon))

    def normalized(self) -> "Vec3":
        """Нормализованная копия."""
        return self.clone().normalize()

    # -----------------------------------------------------------------
    # операторы (возвращают новый объект)
    # -----------------------------------------------------------------
    @ieee
    def __add__(self, other: "Vec3") -> "Vec3":
        return Vec3._wrap(self._v + other._v)

    @ieee
    def __sub__(self, other: "Vec3") -> "Vec3":
        return Vec3._wrap(self._v - other._v)

    @ieee
    def __mul__(self, other) -> "Vec3":
        if isinstance(other, Vec3):
            return Vec3._wrap(self._v * other._v)
        return Vec3._wrap(self._v * other)

    __rmul__ = __mul__

    @ieee
    def __truediv__(self, scalar: float) -> "Vec3":
        return Vec3._wrap(self._v / scalar)

    @ieee
    def __neg__(self) -> "Vec3":
        return Vec3._wrap(-self._v)

    def __iter__(self):
        return iter(self._v.tolist())

    def __getitem__(self, idx: int) -> float:
        return float(self._v[idx])

    def __len__(self) -> int:
        return 3

    # -----------------------------------------------------------------
    # представление / конвертация
    # -----------------------------------------------------------------
    def as_np(self) -> np.ndarray:
        """Копия 3‑компонентного ndarray."""
        return self._v.copy()

    def to_tuple(self) -> Tuple[float, float, float]:
        return tuple(self._v.tolist())

    def __repr__(self) -> str:
        return f"Vec3({self.x:.3f}, {self.y:.3f}, {self.z:.3f})"


# Константы только для чтения: попытка изменить их бросит ValueError.
Vec3.ZERO = Vec3(0, 0, 0)._freeze()
Vec3.ONE = Vec3(1, 1, 1)._freeze()
Vec3.UP = Vec3(0, 1, 0)._freeze()
Vec3.DOWN = Vec3(0, -1, 0)._freeze()
Vec3.RIGHT = Vec3(1, 0, 0)._freeze()
Vec3.LEFT = Vec3(-1, 0, 0)._freeze()
Vec3.FORWARD = Vec3(0, 0, -1)._freeze()
Vec3.BACK = Vec3(0, 0, 1)._freeze()
