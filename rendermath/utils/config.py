# rendermath/utils/config.py
"""
Простой загрузчик/сохранитель конфигурации в формате JSON.

Путь берётся из аргумента, затем из переменной окружения RENDERMATH_CONFIG,
иначе ``rendermath.json`` в текущем каталоге. Если файла нет, используются
настройки по‑умолчанию (файл при этом не создаётся).
"""

import copy
import json
import os
from pathlib import Path

from rendermath.utils.logger import logger

DEFAULT_PATH = "rendermath.json"

DEFAULT_CONFIG = {
    # dtype хранилища Vec3/Vec4/Mat4
    "precision": "float32",
    "float_packing": {
        # сколько раз предупреждать о значении вне диапазона
        "range_warnings": 5,
    },
}


class Config:
    """Singleton‑подобный объект конфигурации."""
    _instance = None

    def __new__(cls, path: str = None):
        if cls._instance is None:
            if path is None:
                path = os.environ.get("RENDERMATH_CONFIG", DEFAULT_PATH)
            cls._instance = super().__new__(cls)
            cls._instance.path = Path(path)
            cls._instance._load()
        return cls._instance

    @classmethod
    def reset(cls):
        """Сбросить singleton (следующий Config() перечитает файл)."""
        cls._instance = None

    def _load(self):
        if self.path.is_file():
            try:
                with self.path.open("r", encoding="utf-8") as f:
                    self.data = json.load(f)
                logger.info(f"[Config] Loaded configuration from {self.path}.")
            except (OSError, ValueError) as exc:
                logger.error(f"[Config] Failed to read config: {exc}")
                self.data = copy.deepcopy(DEFAULT_CONFIG)
        else:
            logger.debug(f"[Config] No config file at {self.path} – using defaults.")
            self.data = copy.deepcopy(DEFAULT_CONFIG)

    def save(self):
        try:
            with self.path.open("w", encoding="utf-8") as f:
                json.dump(self.data, f, indent=4)
            logger.info("[Config] Configuration saved.")
        except OSError as exc:
            logger.error(f"[Config] Unable to save config: {exc}")

    def __getitem__(self, key):
        value = self.data.get(key, DEFAULT_CONFIG.get(key))
        default = DEFAULT_CONFIG.get(key)
        # вложенные секции дополняем значениями по‑умолчанию
        if isinstance(value, dict) and isinstance(default, dict):
            merged = copy.deepcopy(default)
            merged.update(value)
            return merged
        return value

    def __setitem__(self, key, value):
        self.data[key] = value
        self.save()

    def get(self, key, default=None):
        return self.data.get(key, default)
