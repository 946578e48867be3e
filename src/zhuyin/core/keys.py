"""
按鍵模型

宿主（fcitx、ibus、測試程式）把鍵盤事件轉成 `Key` 再交給 KeyHandler。
可列印的 ASCII 字元放在 `char`，功能鍵放在 `name`；空白鍵兩者皆有。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class KeyName(Enum):
    SPACE = "space"
    ESCAPE = "escape"
    RETURN = "return"
    BACKSPACE = "backspace"
    DELETE = "delete"
    LEFT = "left"
    RIGHT = "right"
    HOME = "home"
    END = "end"


CURSOR_KEYS = frozenset({KeyName.LEFT, KeyName.RIGHT, KeyName.HOME, KeyName.END})
DELETE_KEYS = frozenset({KeyName.BACKSPACE, KeyName.DELETE})


@dataclass(frozen=True)
class Key:
    """
    一個邏輯按鍵

    Attributes:
        char: 可列印 ASCII 字元，功能鍵為空字串
        name: 功能鍵名稱
        shift: 是否按住 Shift
        ctrl: 是否按住 Ctrl
    """
    char: str = ""
    name: Optional[KeyName] = None
    shift: bool = False
    ctrl: bool = False

    @classmethod
    def from_char(cls, char: str, shift: bool = False, ctrl: bool = False) -> "Key":
        if len(char) != 1:
            raise ValueError(f"Key.from_char 需要單一字元，收到 {char!r}")
        name = KeyName.SPACE if char == " " else None
        return cls(char=char, name=name, shift=shift, ctrl=ctrl)

    @classmethod
    def named(cls, name: KeyName, shift: bool = False, ctrl: bool = False) -> "Key":
        char = " " if name is KeyName.SPACE else ""
        return cls(char=char, name=name, shift=shift, ctrl=ctrl)

    @property
    def ascii_char(self) -> str:
        """簡單按鍵（可列印 ASCII 且沒有 Ctrl）回傳字元，否則回傳空字串"""
        if self.ctrl or len(self.char) != 1:
            return ""
        if not (" " <= self.char <= "~"):
            return ""
        return self.char

    @property
    def is_cursor_key(self) -> bool:
        return self.name in CURSOR_KEYS

    @property
    def is_delete_key(self) -> bool:
        return self.name in DELETE_KEYS
