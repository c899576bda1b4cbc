"""
日志配置模块
在应用启动时调用一次 setup_logging()
"""

import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """配置根日志记录器，重复调用不会叠加处理器"""
    root = logging.getLogger()
    if root.handlers:
        return

    level_value = getattr(logging, str(level).upper(), logging.INFO)
    root.setLevel(level_value)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level_value)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s",
        datefmt="%H:%M:%S",
    ))
    root.addHandler(handler)

    # 第三方库保持安静
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("fastapi").setLevel(logging.INFO)
    logging.getLogger("httpx").setLevel(logging.WARNING)
