"""
按鍵處理器 (KeyHandler)

輸入法的狀態機：接收一個按鍵與目前的狀態，回傳 KeyHandlerResult。
KeyHandler 自己持有讀音緩衝區、組字格與最近一次的解碼路徑；
語言模型與選字習慣模型可以由多個 KeyHandler 共用（見 ZhuyinEngine）。

按鍵處理順序:
1. 注音按鍵: 組合讀音；有聲調（或按空白鍵）時送進組字格
2. 空白鍵: 開啟候選窗
3. Esc: 清除讀音
4. 方向鍵 / Home / End: 移動游標，按住 Shift 時進入標記模式
5. Backspace / Delete
6. Enter: 送出組字區，或在標記模式加入自訂詞
7. ` 鍵: 標點符號列表
8. 其他可列印字元: 標點符號
9. 其餘按鍵: 組字中時吃掉並報錯，否則交還給應用程式
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from .config import KeyHandlerConfig
from .core.events import KeyHandlerError, KeyHandlerResult
from .core.keys import Key, KeyName
from .core.language_model import LanguageModel
from .core.protocols import LanguageModelLoaderProtocol
from .core.states import (
    ChoosingCandidate,
    Committing,
    Empty,
    EmptyIgnoringPrevious,
    InputState,
    InputStateKind,
    Inputting,
    Marking,
    NotEmpty,
)
from .lattice.grid import JOIN_SEPARATOR, Grid
from .lattice.node import NodeAnchor
from .lattice.walker import WalkedPath, Walker
from .lm.converters import to_simplified_chinese
from .lm.facade import InputMethodLanguageModel, LookupOptions
from .lm.user_override_model import UserOverrideModel
from .mandarin.layouts import BopomofoKeyboardLayout, get_keyboard_layout
from .mandarin.reading_buffer import BopomofoReadingBuffer
from .utils.logger import TimingContext, get_logger

PUNCTUATION_LIST_KEY = "_punctuation_list"
PUNCTUATION_KEY_PREFIX = "_punctuation_"
PUNCTUATION_LIST_TRIGGER = "`"

MIN_VALID_MARKING_READING_COUNT = 2
MAX_VALID_MARKING_READING_COUNT = 6

# 套用選字習慣時，在最高分之上再加的分數
EPSILON = 0.000001

CURSOR_TOOLTIP = "Cursor is between syllables {0} and {1}"
MARKING_TOOLTIP = "Marked: {0}, syllables: {1}, {2}"
MARKING_TOO_SHORT = "{0} syllables required"
MARKING_TOO_LONG = "{0} syllables maximum"
MARKING_EXISTS = "phrase already exists"
MARKING_ACCEPTABLE = "press Enter to add the phrase"

CURSOR_KINDS = frozenset({InputStateKind.INPUTTING, InputStateKind.MARKING})


@dataclass(frozen=True)
class ComposedString:
    head: str
    tail: str
    tooltip: str = ""


def _find_highest_score(anchors: List[NodeAnchor], epsilon: float) -> float:
    highest = 0.0
    for anchor in anchors:
        score = anchor.node.highest_unigram_score()
        if score > highest:
            highest = score
    return highest + epsilon


class KeyHandler:
    """
    使用範例:
        >>> handler = engine.create_key_handler()
        >>> state = Empty()
        >>> for ch in "g4":
        ...     state = handler.handle(Key.from_char(ch), state).state
        >>> state.composing_buffer
        '是'
        >>> handler.handle(Key.named(KeyName.RETURN), state).state
        Committing(text='是')
    """

    def __init__(
        self,
        language_model: LanguageModel,
        loader: Optional[LanguageModelLoaderProtocol] = None,
        config: Optional[KeyHandlerConfig] = None,
        user_override_model: Optional[UserOverrideModel] = None,
        clock: Callable[[], float] = time.time,
        on_timing: Optional[Callable[[str, float], None]] = None,
    ):
        self._config = config if config is not None else KeyHandlerConfig()
        self._lm = self._session_language_model(language_model)
        self._loader = loader
        self._clock = clock
        self._timing_callback = on_timing or self._config.on_timing
        if user_override_model is None:
            user_override_model = UserOverrideModel(
                capacity=self._config.user_override_capacity,
                half_life=self._config.observed_override_half_life,
                no_override_threshold=self._config.no_override_threshold,
            )
        self._user_override_model = user_override_model
        self._reading = BopomofoReadingBuffer(get_keyboard_layout(self._config.keyboard_layout))
        self._grid = Grid(self._lm, join_separator=JOIN_SEPARATOR)
        self._walked_path: WalkedPath = []
        self._select_phrase_after_cursor = self._config.select_phrase_after_cursor
        self._move_cursor_after_selection = self._config.move_cursor_after_selection
        self._composing_buffer_size = self._config.composing_buffer_size
        self._logger = get_logger("key_handler")

    def _session_language_model(self, language_model: LanguageModel) -> LanguageModel:
        """共用的 facade 換成此輸入情境自己的查詢視圖，轉換選項取自配置"""
        if not isinstance(language_model, InputMethodLanguageModel):
            return language_model
        converter = self._config.external_converter
        if converter is None and self._config.external_converter_enabled:
            converter = to_simplified_chinese
        return language_model.session_view(
            LookupOptions(
                phrase_replacement_enabled=self._config.phrase_replacement_enabled,
                external_converter_enabled=self._config.external_converter_enabled,
                external_converter=converter,
            )
        )

    # ========== 屬性與設定 ==========

    @property
    def config(self) -> KeyHandlerConfig:
        return self._config

    @property
    def grid(self) -> Grid:
        return self._grid

    @property
    def reading_buffer(self) -> BopomofoReadingBuffer:
        return self._reading

    @property
    def walked_path(self) -> WalkedPath:
        return list(self._walked_path)

    @property
    def user_override_model(self) -> UserOverrideModel:
        return self._user_override_model

    @property
    def keyboard_layout(self) -> BopomofoKeyboardLayout:
        return self._reading.keyboard_layout

    def set_keyboard_layout(self, layout: Union[str, BopomofoKeyboardLayout]) -> None:
        """切換鍵盤配置（會清除輸入中的讀音）"""
        if isinstance(layout, str):
            layout = get_keyboard_layout(layout)
        self._reading.keyboard_layout = layout

    @property
    def select_phrase_after_cursor(self) -> bool:
        return self._select_phrase_after_cursor

    @select_phrase_after_cursor.setter
    def select_phrase_after_cursor(self, flag: bool) -> None:
        self._select_phrase_after_cursor = flag

    @property
    def move_cursor_after_selection(self) -> bool:
        return self._move_cursor_after_selection

    @move_cursor_after_selection.setter
    def move_cursor_after_selection(self, flag: bool) -> None:
        self._move_cursor_after_selection = flag

    # ========== 主要入口 ==========

    def handle(self, key: Key, state: InputState) -> KeyHandlerResult:
        """
        處理一個按鍵

        Args:
            key: 按鍵
            state: 宿主目前的輸入狀態

        Returns:
            KeyHandlerResult: absorbed 為 False 時按鍵應交還給應用程式
        """
        self._logger.debug(f"[Key] {key} state={state.kind.value}")
        char = key.ascii_char

        if char and self._reading.is_valid_key(char):
            self._reading.combine_key(char)
            # 還沒有聲調就只更新組字區
            if not self._reading.has_tone_marker():
                return self._absorbed(self._build_inputting_state())

        is_space = key.name is KeyName.SPACE
        if self._reading.has_tone_marker() or (not self._reading.is_empty() and is_space):
            return self._compose_reading()

        if is_space and state.is_not_empty and self._reading.is_empty() and self._grid.length:
            return self._absorbed(self._build_choosing_candidate_state(state))

        if key.name is KeyName.ESCAPE:
            return self._handle_escape(state)

        if key.is_cursor_key:
            return self._handle_cursor_keys(key, state)

        if key.is_delete_key:
            return self._handle_delete_keys(key, state)

        if key.name is KeyName.RETURN:
            return self._handle_enter(state)

        if char == PUNCTUATION_LIST_TRIGGER and self._lm.has_unigrams_for_key(PUNCTUATION_LIST_KEY):
            return self._handle_punctuation_list()

        if char:
            layout_key = f"{PUNCTUATION_KEY_PREFIX}{self._reading.keyboard_layout.display_name}_{char}"
            result = self._handle_punctuation(layout_key)
            if result is not None:
                return result
            result = self._handle_punctuation(f"{PUNCTUATION_KEY_PREFIX}{char}")
            if result is not None:
                return result

        if state.is_not_empty:
            return self._error(KeyHandlerError.INVALID_OPERATION, self._build_inputting_state())

        return KeyHandlerResult.not_absorbed()

    def candidate_selected(self, candidate: str) -> KeyHandlerResult:
        """候選窗選了 candidate"""
        self._pin_node(candidate)
        return self._absorbed(self._build_inputting_state())

    def candidate_panel_cancelled(self) -> KeyHandlerResult:
        return self._absorbed(self._build_inputting_state())

    def reset(self) -> None:
        self._reading.clear()
        self._grid.clear()
        self._walked_path = []

    # ========== 各類按鍵 ==========

    def _compose_reading(self) -> KeyHandlerResult:
        syllable = self._reading.syllable().composed_string()
        self._reading.clear()

        if not self._lm.has_unigrams_for_key(syllable):
            self._logger.debug(f"[Compose] 語言模型沒有 {syllable!r}")
            return self._error(KeyHandlerError.MODEL_UNAVAILABLE, self._build_inputting_state())

        self._grid.insert_reading_at_cursor(syllable)
        evicted_text = self._pop_evicted_text_and_walk()
        self._apply_override_suggestion()
        return self._absorbed(self._build_inputting_state(evicted_text))

    def _handle_escape(self, state: InputState) -> KeyHandlerResult:
        if not state.is_not_empty:
            return KeyHandlerResult.not_absorbed()

        if not self._reading.is_empty():
            self._reading.clear()
            if not self._grid.length:
                return self._absorbed(Empty())
        return self._absorbed(self._build_inputting_state())

    def _handle_cursor_keys(self, key: Key, state: InputState) -> KeyHandlerResult:
        if state.kind not in CURSOR_KINDS:
            return KeyHandlerResult.not_absorbed()

        mark_begin = self._grid.cursor
        if isinstance(state, Marking):
            mark_begin = state.mark_start_grid_cursor_index

        if not self._reading.is_empty():
            return self._error(KeyHandlerError.INVALID_OPERATION, self._build_inputting_state())

        cursor = self._grid.cursor
        is_valid_move = False
        if key.name is KeyName.LEFT:
            if cursor > 0:
                self._grid.cursor = cursor - 1
                is_valid_move = True
        elif key.name is KeyName.RIGHT:
            if cursor < self._grid.length:
                self._grid.cursor = cursor + 1
                is_valid_move = True
        elif key.name is KeyName.HOME:
            self._grid.cursor = 0
            is_valid_move = True
        elif key.name is KeyName.END:
            self._grid.cursor = self._grid.length
            is_valid_move = True

        error = None if is_valid_move else KeyHandlerError.INVALID_OPERATION
        if key.shift and self._grid.cursor != mark_begin:
            new_state: InputState = self._build_marking_state(mark_begin)
        else:
            new_state = self._build_inputting_state()
        return self._result(new_state, error=error)

    def _handle_delete_keys(self, key: Key, state: InputState) -> KeyHandlerResult:
        if not state.is_not_empty:
            return KeyHandlerResult.not_absorbed()

        error = None
        if self._reading.is_empty():
            if key.name is KeyName.BACKSPACE:
                is_valid_delete = self._grid.delete_reading_before_cursor()
            else:
                is_valid_delete = self._grid.delete_reading_after_cursor()
            if not is_valid_delete:
                return self._error(KeyHandlerError.INVALID_OPERATION, self._build_inputting_state())
            self._walk()
        elif key.name is KeyName.BACKSPACE:
            self._reading.backspace()
        else:
            # 輸入讀音時不支援 Delete
            error = KeyHandlerError.INVALID_OPERATION

        if self._reading.is_empty() and not self._grid.length:
            return self._result(EmptyIgnoringPrevious(), error=error)
        return self._result(self._build_inputting_state(), error=error)

    def _handle_enter(self, state: InputState) -> KeyHandlerResult:
        if not state.is_not_empty:
            return KeyHandlerResult.not_absorbed()

        if not self._reading.is_empty():
            return self._error(KeyHandlerError.INVALID_OPERATION, self._build_inputting_state())

        if isinstance(state, Marking):
            if state.acceptable and self._loader is not None:
                self._loader.add_user_phrase(state.reading, state.marked_text)
                self._logger.info(f"[Marking] 加入自訂詞 {state.reading} {state.marked_text}")
                return self._absorbed(self._build_inputting_state())
            if state.acceptable:
                self._logger.warning("[Marking] 沒有詞庫載入者，無法加入自訂詞")
            return self._error(
                KeyHandlerError.INVALID_OPERATION,
                self._build_marking_state(state.mark_start_grid_cursor_index),
            )

        text = self._build_inputting_state().composing_buffer
        self.reset()
        return self._absorbed(Committing(text))

    def _handle_punctuation_list(self) -> KeyHandlerResult:
        if not self._reading.is_empty():
            # 輸入讀音時忽略標點
            return self._result(error=KeyHandlerError.INVALID_OPERATION)

        self._grid.insert_reading_at_cursor(PUNCTUATION_LIST_KEY)
        evicted_text = self._pop_evicted_text_and_walk()
        inputting = self._build_inputting_state(evicted_text)
        return self._absorbed(inputting, self._build_choosing_candidate_state(inputting))

    def _handle_punctuation(self, unigram_key: str) -> Optional[KeyHandlerResult]:
        if not self._lm.has_unigrams_for_key(unigram_key):
            return None

        if not self._reading.is_empty():
            return self._error(KeyHandlerError.INVALID_OPERATION, self._build_inputting_state())

        self._grid.insert_reading_at_cursor(unigram_key)
        evicted_text = self._pop_evicted_text_and_walk()
        return self._absorbed(self._build_inputting_state(evicted_text))

    # ========== 狀態建構 ==========

    def _composed_string(self, builder_cursor: int) -> ComposedString:
        """
        把解碼結果依組字格游標切成前後兩段

        節點的字數少於讀音數時（例如一個字對應兩個讀音），游標落在節點中間
        只能放在可對應的字數之後，並以 tooltip 提示游標在哪兩個讀音之間。
        """
        running_cursor = 0
        composed_cursor = 0
        values: List[str] = []
        tooltip = ""
        readings = self._grid.readings

        for anchor in self._walked_path:
            value = anchor.node.current_value
            values.append(value)

            if running_cursor == builder_cursor:
                continue

            spanning_length = anchor.spanning_length
            if running_cursor + spanning_length <= builder_cursor:
                composed_cursor += len(value)
                running_cursor += spanning_length
                continue

            distance = builder_cursor - running_cursor
            composed_cursor += min(distance, len(value))
            running_cursor += distance

            if len(value) < spanning_length:
                tooltip = CURSOR_TOOLTIP.format(readings[builder_cursor - 1], readings[builder_cursor])

        composed = "".join(values)
        return ComposedString(composed[:composed_cursor], composed[composed_cursor:], tooltip)

    def _build_inputting_state(self, evicted_text: str = "") -> Inputting:
        composed = self._composed_string(self._grid.cursor)
        reading = self._reading.composed_string()
        return Inputting(
            composing_buffer=composed.head + reading + composed.tail,
            cursor_index=len(composed.head) + len(reading),
            tooltip=composed.tooltip,
            evicted_text=evicted_text,
        )

    def _build_choosing_candidate_state(self, state: NotEmpty) -> ChoosingCandidate:
        anchors = self._grid.nodes_crossing_or_ending_at(self._actual_candidate_cursor_index())
        # 長的詞排在前面；sorted() 為穩定排序
        anchors = sorted(anchors, key=lambda a: a.spanning_length, reverse=True)
        candidates = tuple(value for anchor in anchors for value in anchor.node.candidates)
        return ChoosingCandidate(
            composing_buffer=state.composing_buffer,
            cursor_index=state.cursor_index,
            candidates=candidates,
        )

    def _build_marking_state(self, begin_cursor_index: int) -> Marking:
        cursor = self._grid.cursor
        from_composed = self._composed_string(begin_cursor_index)
        to_composed = self._composed_string(cursor)
        composed_cursor_index = len(to_composed.head)
        composed = to_composed.head + to_composed.tail
        from_index, to_index = begin_cursor_index, cursor

        if begin_cursor_index > cursor:
            from_composed, to_composed = to_composed, from_composed
            from_index, to_index = to_index, from_index

        head = from_composed.head
        marked = to_composed.head[len(from_composed.head):]
        tail = to_composed.tail

        readings = self._grid.readings[from_index:to_index]
        reading_value = JOIN_SEPARATOR.join(readings)
        reading_ui_text = " ".join(readings)

        acceptable = False
        if len(readings) < MIN_VALID_MARKING_READING_COUNT:
            status = MARKING_TOO_SHORT.format(MIN_VALID_MARKING_READING_COUNT)
        elif len(readings) > MAX_VALID_MARKING_READING_COUNT:
            status = MARKING_TOO_LONG.format(MAX_VALID_MARKING_READING_COUNT)
        elif self._marked_phrase_exists(reading_value, marked):
            status = MARKING_EXISTS
        else:
            status = MARKING_ACCEPTABLE
            acceptable = True

        if not acceptable:
            self._logger.debug(f"[Marking] {KeyHandlerError.INVALID_MARKING.value}: {status}")

        return Marking(
            composing_buffer=composed,
            cursor_index=composed_cursor_index,
            tooltip=MARKING_TOOLTIP.format(marked, reading_ui_text, status),
            mark_start_grid_cursor_index=begin_cursor_index,
            head=head,
            marked_text=marked,
            tail=tail,
            reading=reading_value,
            acceptable=acceptable,
        )

    def _marked_phrase_exists(self, reading: str, value: str) -> bool:
        return any(u.value == value for u in self._lm.unigrams_for_key(reading))

    # ========== 組字格操作 ==========

    def _actual_candidate_cursor_index(self) -> int:
        cursor = self._grid.cursor
        if self._select_phrase_after_cursor:
            if cursor < self._grid.length:
                cursor += 1
        elif cursor == 0 and self._grid.length > 0:
            # 游標必須在節點中間或之後
            cursor += 1
        return cursor

    def _walk(self) -> None:
        with TimingContext("KeyHandler.walk", self._logger, logging.DEBUG, self._timing_callback):
            self._walked_path = Walker(self._grid).walk()

    def _pop_evicted_text_and_walk(self) -> str:
        """組字區超過上限時，移除最前面的節點並回傳它的文字"""
        self._walk()
        evicted_text = ""
        if self._grid.width > self._composing_buffer_size and self._walked_path:
            anchor = self._walked_path[0]
            evicted_text = anchor.node.current_value
            self._grid.remove_head_readings(anchor.spanning_length)
            self._logger.debug(f"[Evict] {evicted_text!r} ({anchor.spanning_length} 個讀音)")
            self._walk()
        return evicted_text

    def _apply_override_suggestion(self) -> None:
        value = self._user_override_model.suggest(self._walked_path, self._grid.cursor, self._clock())
        if value is None:
            return
        cursor_index = self._actual_candidate_cursor_index()
        anchors = self._grid.nodes_crossing_or_ending_at(cursor_index)
        score = _find_highest_score(anchors, EPSILON)
        self._grid.override_node_score_for_selected_candidate(cursor_index, value, score)
        self._logger.debug(f"[Override] {value!r} at {cursor_index} score={score}")
        self._walk()

    def _pin_node(self, candidate: str) -> None:
        cursor_index = self._actual_candidate_cursor_index()
        anchor = self._grid.fix_node_selected_candidate(cursor_index, candidate)
        if anchor is not None:
            score = anchor.node.score_for_candidate(candidate)
            self._user_override_model.observe(
                self._walked_path, cursor_index, candidate, self._clock(), candidate_score=score
            )

        self._walk()

        if self._move_cursor_after_selection:
            next_position = 0
            for walked in self._walked_path:
                if next_position >= cursor_index:
                    break
                next_position += walked.spanning_length
            if next_position <= self._grid.length:
                self._grid.cursor = next_position

    # ========== 結果 ==========

    def _result(self, *states: InputState, error: Optional[KeyHandlerError] = None) -> KeyHandlerResult:
        if error is not None:
            self._logger.debug(f"[Error] {error.value}")
        return KeyHandlerResult(absorbed=True, states=tuple(states), error=error)

    def _absorbed(self, *states: InputState) -> KeyHandlerResult:
        return self._result(*states)

    def _error(self, error: KeyHandlerError, *states: InputState) -> KeyHandlerResult:
        return self._result(*states, error=error)
