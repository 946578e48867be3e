"""
工具模組

提供日誌、計時、延遲導入等通用工具。
"""

from .lazy_imports import (
    CONVERTER_INSTALL_HINT,
    PINYIN_INSTALL_HINT,
    check_converter_dependencies,
    check_pinyin_dependencies,
    is_converter_available,
    is_pinyin_available,
)
from .logger import (
    TimingContext,
    enable_debug_logging,
    enable_timing_logging,
    get_logger,
    log_timing,
    setup_logger,
)

__all__ = [
    # 日誌工具
    "get_logger",
    "setup_logger",
    "enable_debug_logging",
    "enable_timing_logging",
    "log_timing",
    "TimingContext",

    # 依賴檢查
    "is_pinyin_available",
    "is_converter_available",
    "check_pinyin_dependencies",
    "check_converter_dependencies",
    "PINYIN_INSTALL_HINT",
    "CONVERTER_INSTALL_HINT",
]
