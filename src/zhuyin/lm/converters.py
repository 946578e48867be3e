"""
外部轉換器

輸入法預設以繁體輸出；啟用外部轉換器時，候選字詞在去重之前先經過轉換。
"""

from __future__ import annotations

from functools import lru_cache

from zhuyin.utils.lazy_imports import _get_hanziconv


@lru_cache(maxsize=4096)
def to_simplified_chinese(text: str) -> str:
    """
    繁體轉簡體（使用 hanziconv）

    Args:
        text: 繁體字詞

    Returns:
        str: 簡體字詞
    """
    return _get_hanziconv().toSimplified(text)

