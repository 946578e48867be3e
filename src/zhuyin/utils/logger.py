"""
日誌與計時工具

所有 logger 都掛在 `zhuyin` 命名空間之下，預設不輸出任何東西，
由使用者透過標準 logging 或 `enable_debug_logging()` 控制。

使用方式:
    from zhuyin.utils.logger import get_logger, TimingContext

    logger = get_logger("key_handler")
    with TimingContext("KeyHandler.walk", logger, logging.DEBUG):
        ...
"""

from __future__ import annotations

import functools
import logging
import time
from typing import Callable, Optional

ROOT_LOGGER_NAME = "zhuyin"
DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_handler: Optional[logging.Handler] = None

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str = "") -> logging.Logger:
    """
    取得 zhuyin 命名空間下的 logger

    Args:
        name: 子 logger 名稱，例如 "lattice.grid"；
              若已經以 "zhuyin" 開頭則直接使用

    Returns:
        logging.Logger
    """
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logger(level: int = logging.INFO, fmt: str = DEFAULT_FORMAT) -> logging.Logger:
    """
    為 zhuyin 根 logger 安裝一個 StreamHandler（重複呼叫只會調整等級）

    Args:
        level: 日誌等級
        fmt: 輸出格式

    Returns:
        logging.Logger: zhuyin 根 logger
    """
    global _handler

    root = logging.getLogger(ROOT_LOGGER_NAME)
    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(_handler)
    _handler.setLevel(level)
    root.setLevel(level)
    return root


def enable_debug_logging() -> logging.Logger:
    """開啟 DEBUG 等級輸出（包含鍵盤事件與狀態轉移）"""
    return setup_logger(level=logging.DEBUG)


def enable_timing_logging() -> logging.Logger:
    """只開啟計時相關輸出"""
    setup_logger(level=logging.DEBUG)
    timing_logger = get_logger("timing")
    timing_logger.setLevel(logging.DEBUG)
    return timing_logger


class TimingContext:
    """
    計時 context manager

    離開區塊時以指定等級輸出耗時，並呼叫選擇性的回呼
    callback(operation, elapsed_seconds)。

    範例:
        >>> with TimingContext("Walker.walk", logger, logging.DEBUG):
        ...     walker.walk()
    """

    def __init__(
        self,
        operation: str,
        logger: Optional[logging.Logger] = None,
        level: int = logging.DEBUG,
        callback: Optional[Callable[[str, float], None]] = None,
    ):
        self.operation = operation
        self.logger = logger or get_logger("timing")
        self.level = level
        self.callback = callback
        self.elapsed = 0.0
        self._start = 0.0

    def __enter__(self) -> "TimingContext":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.elapsed = time.perf_counter() - self._start
        if self.logger.isEnabledFor(self.level):
            self.logger.log(self.level, f"[Timing] {self.operation}: {self.elapsed * 1000:.3f} ms")
        if self.callback is not None:
            self.callback(self.operation, self.elapsed)
        return False


def log_timing(operation: Optional[str] = None, level: int = logging.DEBUG):
    """
    函式計時裝飾器

    Args:
        operation: 顯示名稱，預設為函式的 __qualname__
        level: 日誌等級
    """

    def decorator(func: Callable) -> Callable:
        name = operation or func.__qualname__
        logger = get_logger("timing")

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with TimingContext(name, logger, level):
                return func(*args, **kwargs)

        return wrapper

    return decorator
