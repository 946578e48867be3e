"""
注音模組

提供注音音節、鍵盤配置與讀音緩衝區。

主要類別:
- BopomofoSyllable: 注音音節（聲母/介音/韻母/聲調）
- BopomofoKeyboardLayout: 鍵盤配置
- BopomofoReadingBuffer: 讀音緩衝區

漢語拼音鍵盤需要 pypinyin:
    pip install pypinyin
"""

from .layouts import (
    ETEN,
    ETEN26,
    HANYU_PINYIN,
    HSU,
    IBM,
    LAYOUTS,
    STANDARD,
    BopomofoKeyboardLayout,
    get_keyboard_layout,
)
from .reading_buffer import BopomofoReadingBuffer
from .syllable import BopomofoSyllable, ComponentCategory, category_of

__all__ = [
    "BopomofoSyllable",
    "ComponentCategory",
    "category_of",
    "BopomofoKeyboardLayout",
    "BopomofoReadingBuffer",
    "get_keyboard_layout",
    "LAYOUTS",
    "STANDARD",
    "ETEN",
    "HSU",
    "ETEN26",
    "HANYU_PINYIN",
    "IBM",
]
