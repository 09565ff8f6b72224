# rendermath/math/math_utils.py
"""
Скалярные помощники: clamp/lerp, степени двойки, smoothstep,
упаковка целых в байты.  Все функции чистые и потокобезопасные.
"""

import functools
import math

import numpy as np

from rendermath.utils.config import Config
from rendermath.utils.logger import logger

DEG_TO_RAD = math.pi / 180.0
RAD_TO_DEG = 180.0 / math.pi

_SUPPORTED_PRECISION = ("float32", "float64")


def _storage_dtype():
    name = Config()["precision"]
    if name not in _SUPPORTED_PRECISION:
        logger.error(f"[Math] Unsupported precision {name!r}, falling back to float32")
        name = "float32"
    return np.dtype(name)


# dtype хранилища векторов и матриц
FLOAT_DTYPE = _storage_dtype()


# -----------------------------------------------------------------
# интерполяция и ограничения
# -----------------------------------------------------------------
def clamp(value, lo, hi):
    """Ограничить value отрезком [lo, hi]. NaN проходит без изменений."""
    if value >= hi:
        return hi
    if value <= lo:
        return lo
    return value


def lerp(a, b, alpha):
    """Линейная интерполяция, alpha ограничивается [0, 1]."""
    return a + (b - a) * clamp(alpha, 0, 1)


def lerp_angle(a, b, alpha):
    """Интерполяция углов (градусы) по кратчайшей дуге."""
    if b - a > 180:
        b -= 360
    if b - a < -180:
        b += 360
    return lerp(a, b, clamp(alpha, 0, 1))


def smoothstep(lo, hi, x):
    if x <= lo:
        return 0
    if x >= hi:
        return 1
    x = (x - lo) / (hi - lo)
    return x * x * (3 - 2 * x)


def smootherstep(lo, hi, x):
    """Вариант Кена Перлина с нулевыми второй производной на концах."""
    if x <= lo:
        return 0
    if x >= hi:
        return 1
    x = (x - lo) / (hi - lo)
    return x * x * x * (x * (x * 6 - 15) + 10)


def between(num, a, b, inclusive=False):
    """Лежит ли num между a и b (порядок границ не важен)."""
    lo, hi = (a, b) if a <= b else (b, a)
    if inclusive:
        return lo <= num <= hi
    return lo < num < hi


def fdiv(a, b):
    """IEEE‑деление: x/0 -> ±inf, 0/0 -> nan, без исключений."""
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        return float(np.float64(a) / np.float64(b))


def round_up(n, multiple):
    if multiple == 0:
        return n
    return math.ceil(n / multiple) * multiple


def round_half_up(x):
    """
    Округление как Math.round в JS: половины всегда вверх.
    Сравнивается дробная часть, а не floor(x + 0.5): сумма теряет точность
    у 0.49999999999999994 и у целых больше 2^52.  inf и nan возвращаются как есть.
    """
    if not math.isfinite(x):
        return x
    r = math.floor(x)
    return r + 1 if x - r >= 0.5 else r


def round_half_up_array(values):
    """round_half_up для ndarray; считается в float64."""
    v = np.asarray(values, dtype=np.float64)
    with np.errstate(invalid="ignore"):
        r = np.floor(v)
        return np.where(v - r >= 0.5, r + 1.0, r)


def ieee(func):
    """
    Декоратор для методов над numpy‑хранилищем: переполнение, деление
    на ноль и nan не дают RuntimeWarning, значения inf/nan проходят как есть.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        with np.errstate(all="ignore"):
            return func(*args, **kwargs)
    return wrapper


# -----------------------------------------------------------------
# степени двойки
# -----------------------------------------------------------------
def power_of_two(x):
    x = int(x)
    return x != 0 and not (x & (x - 1))


def next_power_of_two(val):
    """Наименьшая степень двойки >= val (32‑битные целые)."""
    val = (int(val) - 1) & 0xFFFFFFFF
    val |= val >> 1
    val |= val >> 2
    val |= val >> 4
    val |= val >> 8
    val |= val >> 16
    return (val + 1) & 0xFFFFFFFF


def nearest_power_of_two(val):
    """Ближайшая степень двойки в логарифмической шкале: 0 -> 0, val < 0 -> nan."""
    if val != val or val < 0:
        return math.nan
    if val == 0:
        return 0
    if math.isinf(val):
        return math.inf
    return 2 ** round_half_up(math.log2(val))


# -----------------------------------------------------------------
# целые <-> байты (big‑endian)
# -----------------------------------------------------------------
def int_to_bytes24(i):
    i = int(i)
    return [(i >> 16) & 0xFF, (i >> 8) & 0xFF, i & 0xFF]


def int_to_bytes32(i):
    i = int(i)
    return [(i >> 24) & 0xFF, (i >> 16) & 0xFF, (i >> 8) & 0xFF, i & 0xFF]


def bytes_to_int24(r, g=None, b=None):
    """Принимает три байта либо одну последовательность из трёх."""
    if g is None:
        r, g, b = r[0], r[1], r[2]
    return (int(r) << 16) | (int(g) << 8) | int(b)


def bytes_to_int32(r, g=None, b=None, a=None):
    """Результат всегда беззнаковый."""
    if g is None:
        r, g, b, a = r[0], r[1], r[2], r[3]
    return ((int(r) << 24) | (int(g) << 16) | (int(b) << 8) | int(a)) & 0xFFFFFFFF
