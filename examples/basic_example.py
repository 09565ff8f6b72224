#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Пример «Вращающийся куб» без окна: считаем матрицы камеры и проекции,
проводим вершины куба до NDC и упаковываем результат так, как его
положили бы в вершинный буфер / текстуру глубины.
"""

import numpy as np

from rendermath import Vec3, Vec4, Mat4, Quat, FloatPacking
from rendermath.utils import logger, Profiler


# --------------------------------------------------------------
# 1️⃣  Утилита – 8 углов куба со стороной 2
# --------------------------------------------------------------
def make_cube() -> np.ndarray:
    """(8, 3) float32 – вершины куба с центром в начале координат."""
    corners = [(x, y, z) for x in (-1, 1) for y in (-1, 1) for z in (-1, 1)]
    return np.array(corners, dtype=np.float32)


def main(frames: int = 3) -> None:
    # --------------------------------------------------------------
    # 2️⃣  Камера и проекция
    # --------------------------------------------------------------
    camera_world = Mat4.look_at(Vec3(0, 2, 6), Vec3.ZERO, Vec3.UP)
    view = camera_world.clone().invert()
    proj = Mat4.perspective(60.0, 16 / 9, 0.1, 100.0)
    view_proj = proj @ view

    vertices = make_cube()
    rotation = Quat()
    depth = bytearray(4 * len(vertices))
    frame_timer = Profiler("transform+pack", ops=len(vertices))

    for frame in range(frames):
        # --------------------------------------------------------------
        # 3️⃣  Модель: вращение вокруг Y + небольшой масштаб
        # --------------------------------------------------------------
        rotation.set_from_euler_angles(0.0, 30.0 * frame, 0.0)
        model = Mat4().set_trs(Vec3(0, 0, 0), rotation, Vec3(1.5, 1.5, 1.5))
        mvp = Mat4().mul2(view_proj, model)

        with frame_timer:
            clip = Vec4()
            for i, (x, y, z) in enumerate(vertices):
                mvp.transform_vec4(Vec4(x, y, z, 1.0), clip)
                ndc_z = clip.z / clip.w
                # глубина [-1, 1] -> [0, 1] -> 4 байта RGBA
                FloatPacking.float2bytes_range(ndc_z, depth, i * 4, -1.0, 1.0, 4)

        normal = model.transform_vector(Vec3.FORWARD).normalize()
        half_normal = [hex(FloatPacking.float2half(c)) for c in normal]
        logger.info(f"[Example] frame {frame}: euler={model.get_euler_angles()} "
                    f"normal={normal} half={half_normal}")

    logger.info(f"[Example] packed depth: {list(depth[:8])} ...")
    logger.info(frame_timer.summary())


if __name__ == "__main__":
    main()
