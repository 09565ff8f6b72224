"""
Замер стоимости вычислительных ядер (упаковка, трансформации вершин).

Один объект Profiler можно входить многократно: прогоны накапливаются,
а в лог пишется время прогона и, если задано число операций, цена
одной операции в микросекундах.
"""

import time
from rendermath.utils.logger import logger


class Profiler:
    """Контекст‑менеджер: время блока, лучший прогон и среднее на операцию."""
    def __init__(self, name: str, ops: int = 0):
        self.name = name
        self.ops = ops
        self.runs = 0
        self.total_ms = 0.0
        self.best_ms = float("inf")
        self.elapsed_ms = 0.0
        self._start = 0.0

    @property
    def mean_ms(self) -> float:
        return self.total_ms / self.runs if self.runs else 0.0

    @property
    def us_per_op(self) -> float:
        """Средняя цена одной операции по всем прогонам (0, если ops не задан)."""
        if not self.ops or not self.runs:
            return 0.0
        return self.mean_ms * 1000.0 / self.ops

    def __enter__(self):
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000.0
        self.runs += 1
        self.total_ms += self.elapsed_ms
        self.best_ms = min(self.best_ms, self.elapsed_ms)
        if self.ops:
            per_op = self.elapsed_ms * 1000.0 / self.ops
            logger.debug(f"[Profiler] {self.name}: {self.elapsed_ms:.2f} ms "
                         f"({self.ops} ops, {per_op:.3f} us/op)")
        else:
            logger.debug(f"[Profiler] {self.name}: {self.elapsed_ms:.2f} ms")

    def summary(self) -> str:
        text = (f"[Profiler] {self.name}: {self.runs} runs, "
                f"mean {self.mean_ms:.2f} ms, best {self.best_ms:.2f} ms")
        if self.ops:
            text += f", {self.us_per_op:.3f} us/op"
        return text
