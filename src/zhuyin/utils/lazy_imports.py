"""
延遲導入與依賴檢查

pypinyin（漢語拼音鍵盤）與 hanziconv（繁簡轉換）只有在對應功能被使用時
才會載入，避免啟動輸入法時付出不必要的匯入成本。
"""

from __future__ import annotations

from typing import Any, Optional

PINYIN_INSTALL_HINT = (
    "缺少漢語拼音鍵盤依賴。請執行:\n"
    "  pip install pypinyin"
)
CONVERTER_INSTALL_HINT = (
    "缺少繁簡轉換依賴。請執行:\n"
    "  pip install hanziconv"
)

_pypinyin: Optional[Any] = None
_hanziconv: Optional[Any] = None


def _get_pypinyin() -> Any:
    """延遲載入 pypinyin 模組（連同 pypinyin.style 的拼音風格轉換）"""
    global _pypinyin
    if _pypinyin is None:
        try:
            import pypinyin
            import pypinyin.style

            _pypinyin = pypinyin
        except ImportError as e:
            raise ImportError(PINYIN_INSTALL_HINT) from e
    return _pypinyin


def _get_hanziconv() -> Any:
    """延遲載入 hanziconv.HanziConv"""
    global _hanziconv
    if _hanziconv is None:
        try:
            from hanziconv import HanziConv
        except ImportError as e:
            raise ImportError(CONVERTER_INSTALL_HINT) from e
        _hanziconv = HanziConv
    return _hanziconv


def is_pinyin_available() -> bool:
    try:
        _get_pypinyin()
        return True
    except ImportError:
        return False


def is_converter_available() -> bool:
    try:
        _get_hanziconv()
        return True
    except ImportError:
        return False


def check_pinyin_dependencies() -> None:
    """缺少 pypinyin 時拋出帶安裝提示的 ImportError"""
    _get_pypinyin()


def check_converter_dependencies() -> None:
    """缺少 hanziconv 時拋出帶安裝提示的 ImportError"""
    _get_hanziconv()
