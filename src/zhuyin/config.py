"""
全域配置模組

提供 KeyHandler 的配置類別，控制鍵盤配置、選字行為、日誌與計時。

使用方式:
    from zhuyin import ZhuyinEngine, KeyHandlerConfig

    # 簡單開啟 verbose 模式
    engine = ZhuyinEngine(verbose=True)

    # 進階: 指定鍵盤與選字行為
    config = KeyHandlerConfig(keyboard_layout="eten", select_phrase_after_cursor=True)
    handler = engine.create_key_handler(config=config)

    # 或使用標準 logging 控制
    import logging
    logging.getLogger("zhuyin").setLevel(logging.DEBUG)
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .mandarin.layouts import LAYOUTS
from .utils.logger import setup_logger


def configure_logging(verbose: bool = False) -> None:
    """
    根據 verbose 設定配置 logging

    Args:
        verbose: 是否開啟詳細日誌
    """
    if verbose:
        setup_logger(level=logging.DEBUG)


@dataclass
class KeyHandlerConfig:
    """
    按鍵處理器配置

    屬性:
        keyboard_layout: 鍵盤配置名稱（standard / eten / ibm / hsu / et26 / hanyupinyin）
        select_phrase_after_cursor: 候選窗列出游標之後的詞（預設為游標之前）
        move_cursor_after_selection: 選字後把游標移到該詞之後
        phrase_replacement_enabled: 啟用字詞替換表
        external_converter_enabled: 啟用外部轉換器
        external_converter: 轉換函數 (str) -> str，例如 to_simplified_chinese
        composing_buffer_size: 組字區讀音數上限，超過時送出最前面的詞
        user_override_capacity: 選字習慣的上下文數上限
        observed_override_half_life: 選字習慣的半衰期（秒）
        no_override_threshold: 語言模型分數不高於此值的字詞不記錄選字習慣
        verbose: 是否開啟詳細日誌
        on_timing: 計時回呼函數 (operation: str, elapsed: float) -> None
    """

    keyboard_layout: str = "standard"
    select_phrase_after_cursor: bool = False
    move_cursor_after_selection: bool = False
    phrase_replacement_enabled: bool = False
    external_converter_enabled: bool = False
    external_converter: Optional[Callable[[str], str]] = None

    composing_buffer_size: int = 10
    user_override_capacity: int = 500
    observed_override_half_life: float = 5400.0
    no_override_threshold: float = -8.0

    # 日誌控制
    verbose: bool = False
    on_timing: Optional[Callable[[str, float], None]] = None

    def __post_init__(self):
        if self.keyboard_layout not in LAYOUTS:
            raise ValueError(
                f"未知的鍵盤配置: {self.keyboard_layout!r}，可用: {', '.join(LAYOUTS)}"
            )
        if self.composing_buffer_size < 1:
            raise ValueError(f"composing_buffer_size 必須 >= 1，收到 {self.composing_buffer_size}")
        if self.user_override_capacity < 1:
            raise ValueError(f"user_override_capacity 必須 >= 1，收到 {self.user_override_capacity}")
        if self.observed_override_half_life <= 0:
            raise ValueError(
                f"observed_override_half_life 必須 > 0，收到 {self.observed_override_half_life}"
            )
        configure_logging(self.verbose)


# 預設配置實例 (靜默模式)
DEFAULT_CONFIG = KeyHandlerConfig(verbose=False)
