"""
注音讀音緩衝區 (Reading Accumulator)

負責把使用者逐鍵輸入的按鍵組合成一個注音音節。
音節帶有聲調（或使用者按下空白鍵強制組字）時，即可送進組字格 (Grid)。
"""

from __future__ import annotations

from .layouts import STANDARD, BopomofoKeyboardLayout
from .pinyin import PINYIN_TONE_DIGITS, syllable_from_pinyin_sequence
from .syllable import BopomofoSyllable


class BopomofoReadingBuffer:
    """
    注音讀音緩衝區

    範例:
        >>> buffer = BopomofoReadingBuffer()
        >>> for key in "g4":
        ...     buffer.combine_key(key)
        >>> buffer.has_tone_marker()
        True
        >>> buffer.syllable().composed_string()
        'ㄕˋ'
    """

    def __init__(self, layout: BopomofoKeyboardLayout = STANDARD):
        self._layout = layout
        self._syllable = BopomofoSyllable()
        self._pinyin_sequence = ""

    @property
    def keyboard_layout(self) -> BopomofoKeyboardLayout:
        return self._layout

    @keyboard_layout.setter
    def keyboard_layout(self, layout: BopomofoKeyboardLayout) -> None:
        self._layout = layout
        self.clear()

    def is_valid_key(self, key: str) -> bool:
        if not key or len(key) != 1:
            return False

        if not self._layout.is_pinyin:
            return bool(self._layout.key_to_components(key))

        lower = key.lower()
        if "a" <= lower <= "z":
            # 已經輸入聲調就不能再接字母
            return not (self._pinyin_sequence and self._pinyin_sequence[-1] in PINYIN_TONE_DIGITS)
        return bool(self._pinyin_sequence) and lower in PINYIN_TONE_DIGITS

    def combine_key(self, key: str) -> bool:
        """加入一個按鍵；無效的按鍵不做任何事並回傳 False"""
        if not self.is_valid_key(key):
            return False

        if self._layout.is_pinyin:
            self._pinyin_sequence += key.lower()
            self._syllable = syllable_from_pinyin_sequence(self._pinyin_sequence)
            return True

        sequence = self._layout.key_sequence_from_syllable(self._syllable) + key
        self._syllable = self._layout.syllable_from_key_sequence(sequence)
        return True

    def clear(self) -> None:
        self._syllable = BopomofoSyllable()
        self._pinyin_sequence = ""

    def backspace(self) -> None:
        """刪除最後一個按鍵（拼音模式）或最後一個注音符號"""
        if self._layout.is_pinyin:
            self._pinyin_sequence = self._pinyin_sequence[:-1]
            self._syllable = syllable_from_pinyin_sequence(self._pinyin_sequence)
            return

        sequence = self._layout.key_sequence_from_syllable(self._syllable)
        if sequence:
            self._syllable = self._layout.syllable_from_key_sequence(sequence[:-1])

    def is_empty(self) -> bool:
        if self._layout.is_pinyin:
            return not self._pinyin_sequence
        return self._syllable.is_empty()

    def has_tone_marker(self) -> bool:
        return self._syllable.has_tone_marker()

    def has_tone_marker_only(self) -> bool:
        return self._syllable.has_tone_marker_only()

    def composed_string(self) -> str:
        """顯示用字串；拼音模式下顯示原始拼音"""
        if self._layout.is_pinyin:
            return self._pinyin_sequence
        return self._syllable.composed_string()

    def syllable(self) -> BopomofoSyllable:
        """查詢語言模型用的標準音節"""
        return self._syllable
