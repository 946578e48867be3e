"""
輸入狀態 (Input States)

輸入法的每一次按鍵都會產生新的狀態物件。狀態為不可變的 dataclass，
以 `kind` 標記變體，方便以集合判斷某個按鍵類別在目前狀態是否有效。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Tuple


class InputStateKind(Enum):
    EMPTY = "empty"
    EMPTY_IGNORING_PREVIOUS = "empty_ignoring_previous"
    COMMITTING = "committing"
    INPUTTING = "inputting"
    CHOOSING_CANDIDATE = "choosing_candidate"
    MARKING = "marking"


NOT_EMPTY_KINDS = frozenset(
    {InputStateKind.INPUTTING, InputStateKind.CHOOSING_CANDIDATE, InputStateKind.MARKING}
)


@dataclass(frozen=True)
class InputState:
    kind: ClassVar[InputStateKind]

    @property
    def is_not_empty(self) -> bool:
        return self.kind in NOT_EMPTY_KINDS


@dataclass(frozen=True)
class Empty(InputState):
    """空狀態，沒有任何組字中的內容"""
    kind: ClassVar[InputStateKind] = InputStateKind.EMPTY


@dataclass(frozen=True)
class EmptyIgnoringPrevious(InputState):
    """
    空狀態，但要求宿主捨棄前一個狀態的組字內容而不送出
    （例如把組字區的字全部刪光）
    """
    kind: ClassVar[InputStateKind] = InputStateKind.EMPTY_IGNORING_PREVIOUS


@dataclass(frozen=True)
class Committing(InputState):
    """送出文字"""
    kind: ClassVar[InputStateKind] = InputStateKind.COMMITTING
    text: str = ""


@dataclass(frozen=True)
class NotEmpty(InputState):
    """
    組字中的狀態

    Attributes:
        composing_buffer: 組字區字串
        cursor_index: 游標位置（以 code point 計）
    """
    composing_buffer: str = ""
    cursor_index: int = 0


@dataclass(frozen=True)
class Inputting(NotEmpty):
    """
    輸入中

    Attributes:
        tooltip: 提示文字
        evicted_text: 因組字區過長而被擠出、需要直接送出的文字
    """
    kind: ClassVar[InputStateKind] = InputStateKind.INPUTTING
    tooltip: str = ""
    evicted_text: str = ""


@dataclass(frozen=True)
class ChoosingCandidate(NotEmpty):
    kind: ClassVar[InputStateKind] = InputStateKind.CHOOSING_CANDIDATE
    candidates: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Marking(NotEmpty):
    """
    標記中（使用者以 Shift + 方向鍵選取一段讀音，準備加入自訂詞）

    Attributes:
        tooltip: 標記狀態說明
        mark_start_grid_cursor_index: 標記起點（組字格游標）
        head: 標記前的文字
        marked_text: 被標記的文字
        tail: 標記後的文字
        reading: 被標記的讀音，以 "-" 連接
        acceptable: 是否可以按 Enter 加入
    """
    kind: ClassVar[InputStateKind] = InputStateKind.MARKING
    tooltip: str = ""
    mark_start_grid_cursor_index: int = 0
    head: str = ""
    marked_text: str = ""
    tail: str = ""
    reading: str = ""
    acceptable: bool = False
