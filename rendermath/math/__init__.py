"""
Математический суб‑пакет: Vec3, Vec4, Mat4, Quat, упаковка float и битов.
"""

from rendermath.math import math_utils
from rendermath.math.vec3 import Vec3
from rendermath.math.vec4 import Vec4
from rendermath.math.quat import Quat
from rendermath.math.mat4 import Mat4
from rendermath.math.float_packing import FloatPacking, RangeWarningLimiter
from rendermath.math.bit_packing import BitPacking

__all__ = ["Vec3", "Vec4", "Mat4", "Quat", "FloatPacking",
           "RangeWarningLimiter", "BitPacking", "math_utils"]
