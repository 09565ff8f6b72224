"""
rendermath – линейная алгебра и упаковка чисел для real‑time рендеринга.
Векторы 3/4, матрица 4×4 (column‑major, как в uniform‑буферах GPU),
кватернион для TRS и кодеки half‑float / N‑байт.
"""

from rendermath.utils import logger, Config
from rendermath.math import (
    Vec3, Vec4, Mat4, Quat, FloatPacking, RangeWarningLimiter, BitPacking,
    math_utils,
)

__version__ = "1.0.0"

__all__ = [
    "logger",
    "Config",
    "Vec3",
    "Vec4",
    "Mat4",
    "Quat",
    "FloatPacking",
    "RangeWarningLimiter",
    "BitPacking",
    "math_utils",
]
