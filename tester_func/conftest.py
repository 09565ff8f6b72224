# -*- coding: utf-8 -*-
"""
conftest.py – общие фикстуры для тестов rendermath.
"""

import sys
from pathlib import Path

import pytest

# корень репозитория в sys.path (запуск без установки пакета)
sys.path.insert(0, str(Path(__file__).parent.parent))

from rendermath.math.float_packing import RangeWarningLimiter
from rendermath.utils.config import Config


@pytest.fixture
def fresh_config(monkeypatch, tmp_path):
    """
    Сбрасывает singleton Config и направляет его на файл во временном
    каталоге.  Возвращает путь к (пока не существующему) файлу.
    """
    path = tmp_path / "rendermath.json"
    monkeypatch.setenv("RENDERMATH_CONFIG", str(path))
    Config.reset()
    yield path
    Config.reset()


@pytest.fixture
def limiter():
    """Отдельный лимитер предупреждений с бюджетом 5."""
    return RangeWarningLimiter(5)
