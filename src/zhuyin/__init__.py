"""
zhuyin - 注音輸入法解碼核心 (Zhuyin / Bopomofo Input Method Core)

核心概念：
- 使用者逐鍵輸入注音，讀音緩衝區組合出音節
- 音節送進組字格，向語言模型查詢所有可能的字詞節點
- 以動態規劃找出分數最高的節點序列作為組字結果
- 使用者在候選窗改字時，記錄選字習慣並影響之後的解碼

官方入口（穩定 API）：
- `zhuyin.ZhuyinEngine`
- `zhuyin.KeyHandler`
"""

# =============================================================================
# Engine 層（官方入口）
# =============================================================================
from zhuyin.config import DEFAULT_CONFIG, KeyHandlerConfig
from zhuyin.engine import ZhuyinEngine
from zhuyin.key_handler import KeyHandler

# =============================================================================
# 按鍵、狀態與結果
# =============================================================================
from zhuyin.core import (
    ChoosingCandidate,
    Committing,
    Empty,
    EmptyIgnoringPrevious,
    InputState,
    InputStateKind,
    Inputting,
    Key,
    KeyHandlerError,
    KeyHandlerResult,
    KeyName,
    Marking,
)

# =============================================================================
# 語言模型
# =============================================================================
from zhuyin.core.language_model import LanguageModel, Unigram
from zhuyin.lm import (
    InputMethodLanguageModel,
    LanguageModelLoader,
    LanguageModelSession,
    LookupOptions,
    UserOverrideModel,
    to_simplified_chinese,
)

# =============================================================================
# 日誌工具
# =============================================================================
from zhuyin.utils.logger import enable_debug_logging, enable_timing_logging, get_logger

# =============================================================================
# 依賴檢查工具
# =============================================================================
from zhuyin.utils.lazy_imports import (
    check_converter_dependencies,
    check_pinyin_dependencies,
    is_converter_available,
    is_pinyin_available,
)

# =============================================================================
# Protocol（進階用途）
# =============================================================================
from zhuyin.core.protocols import LanguageModelLoaderProtocol

__all__ = [
    # Engine
    "ZhuyinEngine",
    "KeyHandler",
    "KeyHandlerConfig",
    "DEFAULT_CONFIG",
    # Keys / states / results
    "Key",
    "KeyName",
    "KeyHandlerResult",
    "KeyHandlerError",
    "InputState",
    "InputStateKind",
    "Empty",
    "EmptyIgnoringPrevious",
    "Committing",
    "Inputting",
    "ChoosingCandidate",
    "Marking",
    # Language model
    "LanguageModel",
    "Unigram",
    "InputMethodLanguageModel",
    "LanguageModelLoader",
    "LanguageModelSession",
    "LookupOptions",
    "UserOverrideModel",
    "to_simplified_chinese",
    # Logging
    "get_logger",
    "enable_debug_logging",
    "enable_timing_logging",
    # Dependency checks
    "is_pinyin_available",
    "is_converter_available",
    "check_pinyin_dependencies",
    "check_converter_dependencies",
    # Protocols (advanced)
    "LanguageModelLoaderProtocol",
]

__version__ = "0.1.0"
