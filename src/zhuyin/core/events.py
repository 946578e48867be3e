"""
按鍵處理結果 (Key Handler Result)

KeyHandler 不使用回呼；每次處理按鍵都回傳一個結果物件：
- absorbed: 按鍵是否被輸入法吃掉（False 表示要交還給應用程式）
- states: 依序進入的新狀態（可能為 0 個、1 個或多個）
- error: 錯誤類別，宿主通常以提示音回應 error_signal
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .states import InputState, Inputting


class KeyHandlerError(Enum):
    # 不是輸入法處理的按鍵，交還給應用程式
    INVALID_KEY = "invalid_key"
    # 吃掉按鍵但不做事：游標已在邊界、讀音未完成時按 Delete 等
    INVALID_OPERATION = "invalid_operation"
    # 標記長度不對或詞已存在，只以 tooltip 呈現
    INVALID_MARKING = "invalid_marking"
    # 語言模型沒有這個音節
    MODEL_UNAVAILABLE = "model_unavailable"


SIGNALLED_ERRORS = frozenset({KeyHandlerError.INVALID_OPERATION, KeyHandlerError.MODEL_UNAVAILABLE})


@dataclass(frozen=True)
class KeyHandlerResult:
    absorbed: bool
    states: Tuple[InputState, ...] = field(default_factory=tuple)
    error: Optional[KeyHandlerError] = None

    @classmethod
    def not_absorbed(cls) -> "KeyHandlerResult":
        return cls(absorbed=False, error=KeyHandlerError.INVALID_KEY)

    @property
    def state(self) -> Optional[InputState]:
        """最後進入的狀態"""
        return self.states[-1] if self.states else None

    @property
    def error_signal(self) -> bool:
        return self.error in SIGNALLED_ERRORS

    @property
    def evicted_text(self) -> str:
        for state in self.states:
            if isinstance(state, Inputting) and state.evicted_text:
                return state.evicted_text
        return ""
