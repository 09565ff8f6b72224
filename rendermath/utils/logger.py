# rendermath/utils/logger.py
# ---------------------------------------------------------------
# Минимальный логгер пакета.
# Уровень можно переопределить переменной окружения RENDERMATH_LOG_LEVEL.
# ---------------------------------------------------------------

import logging
import os

LOGGER_NAME = "rendermath"


def init_logger():
    level_name = os.environ.get("RENDERMATH_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(level)
    return log


logger = init_logger()
