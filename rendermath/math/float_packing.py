# rendermath/math/float_packing.py
"""
Упаковка float в компактные представления для GPU.

* ``float2half``               – IEEE‑754 binary16 (1 знак, 5 экспонента, 10 мантисса).
* ``float2bytes``              – значение из [0, 1) в 1..4 байта.
* ``float2bytes_range``        – то же для произвольного [min, max].
* ``float2mantissa_exponent``  – мантисса в n‑1 байтах + байт экспоненты.

Декодирование выполняется на стороне шейдера; контракт такой:

    float2bytes:              v ≈ Σ b[i] / 255^(i+1)
    float2bytes_range:        value ≈ min + v · (max − min)
    float2mantissa_exponent:  value ≈ (2·v − 1) · 2^(b[n−1] − 127),
                              где v декодируется из первых n−1 байт.

Байты пишутся с насыщением в [0, 255] (NaN -> 0), как в
Uint8ClampedArray.  Буфер – bytearray, ndarray uint8 или list.
"""

import math
import threading

import numpy as np

from rendermath.math.math_utils import clamp, fdiv, round_half_up
from rendermath.utils.config import Config
from rendermath.utils.logger import logger

ONE_DIV_255 = 1.0 / 255.0


class RangeWarningLimiter:
    """
    Счётчик предупреждений «значение вне диапазона».  После исчерпания
    бюджета предупреждения молча подавляются.  Потокобезопасен.
    """

    def __init__(self, budget: int):
        self._lock = threading.Lock()
        self.remaining = max(0, int(budget))

    def consume(self) -> bool:
        """True, если предупреждение ещё разрешено (и бюджет уменьшен)."""
        with self._lock:
            if self.remaining <= 0:
                return False
            self.remaining -= 1
            return True

    def reset(self, budget: int) -> None:
        with self._lock:
            self.remaining = max(0, int(budget))


def _default_budget():
    section = Config()["float_packing"]
    budget = section.get("range_warnings", 5) if isinstance(section, dict) else section
    try:
        return int(budget)
    except (TypeError, ValueError):
        logger.error(f"[FloatPacking] Invalid range_warnings {budget!r}, using 5")
        return 5


# общий лимитер по умолчанию; можно передать свой через limiter=
range_warnings = RangeWarningLimiter(_default_budget())


def _frac(value):
    # остаток как оператор % в JS: знак делимого, inf -> nan
    if not math.isfinite(value):
        return math.nan
    return math.fmod(value, 1.0)


def _byte(value):
    """Math.round + насыщение в [0, 255]; NaN -> 0."""
    if value != value:
        return 0
    if value >= 255:
        return 255
    if value <= 0:
        return 0
    return min(255, round_half_up(value))


class FloatPacking:
    """Статические функции упаковки; общего изменяемого состояния нет."""

    @staticmethod
    def float2half(value: float) -> int:
        """
        16‑битный half‑float с округлением к ближайшему.

        Слишком маленькие по модулю значения -> ±0, денормали half
        формируются, переполнение -> ±inf (0x7C00 | знак), NaN -> 0x7C01 | знак.
        """
        # переполнение при приведении к float32 даёт inf, это ожидаемо
        with np.errstate(over="ignore"):
            x = int(np.float32(value).view(np.uint32))

        bits = (x >> 16) & 0x8000       # знак
        m = (x >> 12) & 0x07FF          # мантисса + бит округления
        e = (x >> 23) & 0xFF

        # ноль, денормаль float32 или слишком мелко даже для денормали half
        if e < 103:
            return bits

        # inf / переполнение экспоненты / NaN
        if e > 142:
            bits |= 0x7C00
            if e == 255 and (x & 0x007FFFFF):
                bits |= 1
            return bits

        # денормаль half; округление может перейти в наименьшую нормаль
        if e < 113:
            m |= 0x0800
            bits |= (m >> (114 - e)) + ((m >> (113 - e)) & 1)
            return bits

        bits |= ((e - 112) << 10) | (m >> 1)
        # перенос при округлении корректно увеличивает экспоненту
        bits += m & 1
        return bits

    @staticmethod
    def float2bytes(value: float, array, offset: int, num_bytes: int) -> None:
        """
        Упаковать value из [0, 1) в num_bytes (1..4) байт,
        начиная с array[offset].
        """
        value = float(value)
        enc1 = _frac(255.0 * value)
        array[offset] = _byte((_frac(value) - ONE_DIV_255 * enc1) * 255)
        if num_bytes > 1:
            enc2 = _frac(65025.0 * value)
            array[offset + 1] = _byte((enc1 - ONE_DIV_255 * enc2) * 255)
            if num_bytes > 2:
                enc3 = _frac(16581375.0 * value)
                array[offset + 2] = _byte((enc2 - ONE_DIV_255 * enc3) * 255)
                if num_bytes > 3:
                    array[offset + 3] = _byte(enc3 * 255)

    @staticmethod
    def float2bytes_range(value: float, array, offset: int,
                          min_: float, max_: float, num_bytes: int,
                          limiter: RangeWarningLimiter = None) -> None:
        """
        Нормализовать value из [min_, max_] в [0, 1] и упаковать.
        Значения вне диапазона обрезаются; о первых нескольких пишется
        предупреждение в лог.
        """
        if limiter is None:
            limiter = range_warnings
        if (value < min_ or value > max_) and limiter.consume():
            logger.warning(
                f"[FloatPacking] value {value} to pack is out of range "
                f"[{min_}, {max_}], clamping")
        value = clamp(fdiv(value - min_, max_ - min_), 0, 1)
        FloatPacking.float2bytes(value, array, offset, num_bytes)

    @staticmethod
    def float2mantissa_exponent(value: float, array, offset: int,
                                num_bytes: int,
                                limiter: RangeWarningLimiter = None) -> None:
        """
        Мантисса в [-1, 1] занимает первые num_bytes − 1 байт,
        последний байт – смещённая экспонента (exponent + 127).

        0 и NaN дают нулевые байты, ±inf – нулевую мантиссу и байт
        экспоненты 255.
        """
        value = float(value)
        last = offset + num_bytes - 1
        if value == 0 or value != value:
            for i in range(offset, last + 1):
                array[i] = 0
            return
        if math.isinf(value):
            for i in range(offset, last):
                array[i] = 0
            array[last] = 255
            return

        exponent = math.floor(math.log2(abs(value))) + 1
        value = math.ldexp(value, -exponent)
        FloatPacking.float2bytes_range(value, array, offset, -1, 1,
                                       num_bytes - 1, limiter)
        array[last] = _byte(exponent + 127)
