"""
注音鍵盤配置 (Bopomofo Keyboard Layouts)

集中管理各種注音鍵盤的按鍵對應表。

- 標準（大千）、倚天、IBM：一鍵一符號
- 許氏、倚天26鍵：一鍵多符號，依目前音節狀態決定
- 漢語拼音：以拉丁字母輸入，數字 2-5 為聲調，轉換交給 pypinyin
"""

from __future__ import annotations

from typing import Dict, Optional, Sequence, Tuple

from .syllable import (
    CONSONANTS,
    STANDALONE_CONSONANTS,
    TONES,
    BopomofoSyllable,
    ComponentCategory,
    category_of,
)

PALATALS = "ㄐㄑㄒ"
PALATAL_MEDIALS = "ㄧㄩ"


class BopomofoKeyboardLayout:
    """
    注音鍵盤配置

    Attributes:
        name: 設定檔使用的名稱，如 "standard"
        display_name: 標點符號 key 使用的名稱，如 "Standard"
        is_pinyin: 是否為漢語拼音模式
    """

    def __init__(
        self,
        name: str,
        display_name: str,
        key_map: Optional[Dict[str, Sequence[str]]] = None,
        is_pinyin: bool = False,
    ):
        self.name = name
        self.display_name = display_name
        self.is_pinyin = is_pinyin
        self._key_map: Dict[str, Tuple[str, ...]] = {
            key: tuple(components) for key, components in (key_map or {}).items()
        }
        self._component_to_key: Dict[str, str] = {}
        for key, components in self._key_map.items():
            for component in components:
                self._component_to_key.setdefault(component, key)

    def __repr__(self) -> str:
        return f"BopomofoKeyboardLayout({self.name!r})"

    def key_to_components(self, key: str) -> Tuple[str, ...]:
        return self._key_map.get(key, ())

    def key_sequence_from_syllable(self, syllable: BopomofoSyllable) -> str:
        """以每個槽位對應的第一個按鍵重建按鍵序列"""
        keys = []
        for component in (syllable.consonant, syllable.medial, syllable.vowel, syllable.tone):
            if component and component in self._component_to_key:
                keys.append(self._component_to_key[component])
        return "".join(keys)

    def syllable_from_key_sequence(self, keys: str) -> BopomofoSyllable:
        """
        將按鍵序列解析為音節

        一鍵多符號的按鍵依下列順序決定：
        1. 音節非空且按鍵帶有聲調 → 聲調
        2. 音節為空 → 該鍵的第一個聲母
        3. 其他 → 第一個槽位仍空著的非聲調符號，否則第一個介音/韻母
        之後再依介音修正捲舌/舌面聲母，並把無法單獨成音的聲母換成韻母。
        """
        syllable = BopomofoSyllable()
        consonant_key = ""
        for key in keys:
            components = self.key_to_components(key)
            if not components:
                continue
            component = components[0] if len(components) == 1 else self._resolve(syllable, components)

            if category_of(component) is ComponentCategory.TONE:
                syllable = self._vowel_for_lone_consonant(syllable, consonant_key)
            syllable = syllable.combine(component)
            if category_of(component) is ComponentCategory.CONSONANT:
                consonant_key = key

        return self._resolve_palatal(syllable, consonant_key)

    @staticmethod
    def _resolve(syllable: BopomofoSyllable, components: Tuple[str, ...]) -> str:
        if not syllable.is_empty():
            for component in components:
                if component in TONES:
                    return component
        else:
            for component in components:
                if component in CONSONANTS:
                    return component
            return components[0]

        for component in components:
            category = category_of(component)
            if category in (ComponentCategory.MEDIAL, ComponentCategory.VOWEL) and not syllable.slot(category):
                return component
        for component in components:
            if category_of(component) in (ComponentCategory.MEDIAL, ComponentCategory.VOWEL):
                return component
        return components[0]

    def _vowel_for_lone_consonant(self, syllable: BopomofoSyllable, consonant_key: str) -> BopomofoSyllable:
        if not consonant_key or syllable.medial or syllable.vowel:
            return syllable
        if syllable.consonant in STANDALONE_CONSONANTS:
            return syllable
        vowels = [c for c in self.key_to_components(consonant_key) if category_of(c) is ComponentCategory.VOWEL]
        if not vowels:
            return syllable
        return BopomofoSyllable(vowel=vowels[-1], tone=syllable.tone)

    def _resolve_palatal(self, syllable: BopomofoSyllable, consonant_key: str) -> BopomofoSyllable:
        if not consonant_key or not syllable.consonant:
            return syllable
        consonants = [c for c in self.key_to_components(consonant_key) if c in CONSONANTS]
        if len(consonants) < 2:
            return syllable
        palatal = [c for c in consonants if c in PALATALS]
        other = [c for c in consonants if c not in PALATALS]
        if not palatal or not other:
            return syllable
        wanted = palatal[0] if syllable.medial and syllable.medial in PALATAL_MEDIALS else other[0]
        return syllable.combine(wanted)


# =============================================================================
# 按鍵對應表
# =============================================================================

STANDARD_KEY_MAP = {
    "1": "ㄅ", "q": "ㄆ", "a": "ㄇ", "z": "ㄈ",
    "2": "ㄉ", "w": "ㄊ", "s": "ㄋ", "x": "ㄌ",
    "e": "ㄍ", "d": "ㄎ", "c": "ㄏ",
    "r": "ㄐ", "f": "ㄑ", "v": "ㄒ",
    "5": "ㄓ", "t": "ㄔ", "g": "ㄕ", "b": "ㄖ",
    "y": "ㄗ", "h": "ㄘ", "n": "ㄙ",
    "u": "ㄧ", "j": "ㄨ", "m": "ㄩ",
    "8": "ㄚ", "i": "ㄛ", "k": "ㄜ", ",": "ㄝ",
    "9": "ㄞ", "o": "ㄟ", "l": "ㄠ", ".": "ㄡ",
    "0": "ㄢ", "p": "ㄣ", ";": "ㄤ", "/": "ㄥ", "-": "ㄦ",
    "6": "ˊ", "3": "ˇ", "4": "ˋ", "7": "˙",
}

ETEN_KEY_MAP = {
    "b": "ㄅ", "p": "ㄆ", "m": "ㄇ", "f": "ㄈ",
    "d": "ㄉ", "t": "ㄊ", "n": "ㄋ", "l": "ㄌ",
    "v": "ㄍ", "k": "ㄎ", "h": "ㄏ",
    "g": "ㄐ", "7": "ㄑ", "c": "ㄒ",
    ",": "ㄓ", ".": "ㄔ", "/": "ㄕ", "j": "ㄖ",
    ";": "ㄗ", "'": "ㄘ", "s": "ㄙ",
    "e": "ㄧ", "x": "ㄨ", "u": "ㄩ",
    "a": "ㄚ", "o": "ㄛ", "r": "ㄜ", "w": "ㄝ",
    "i": "ㄞ", "q": "ㄟ", "z": "ㄠ", "y": "ㄡ",
    "8": "ㄢ", "9": "ㄣ", "0": "ㄤ", "-": "ㄥ", "=": "ㄦ",
    "2": "ˊ", "3": "ˇ", "4": "ˋ", "1": "˙",
}

IBM_KEY_MAP = {
    "1": "ㄅ", "2": "ㄆ", "3": "ㄇ", "4": "ㄈ",
    "5": "ㄉ", "6": "ㄊ", "7": "ㄋ", "8": "ㄌ",
    "9": "ㄍ", "0": "ㄎ", "-": "ㄏ",
    "q": "ㄐ", "w": "ㄑ", "e": "ㄒ",
    "r": "ㄓ", "t": "ㄔ", "y": "ㄕ", "u": "ㄖ",
    "i": "ㄗ", "o": "ㄘ", "p": "ㄙ",
    "a": "ㄧ", "s": "ㄨ", "d": "ㄩ",
    "f": "ㄚ", "g": "ㄛ", "h": "ㄜ", "j": "ㄝ",
    "k": "ㄞ", "l": "ㄟ", ";": "ㄠ", "z": "ㄡ",
    "x": "ㄢ", "c": "ㄣ", "v": "ㄤ", "b": "ㄥ", "n": "ㄦ",
    "m": "ˊ", ",": "ˇ", ".": "ˋ", "/": "˙",
}

HSU_KEY_MAP = {
    "b": "ㄅ", "p": "ㄆ", "m": "ㄇㄢ", "f": "ㄈˇ",
    "d": "ㄉˊ", "t": "ㄊ", "n": "ㄋㄣ", "l": "ㄌㄥㄦ",
    "g": "ㄍㄜ", "k": "ㄎㄤ", "h": "ㄏㄛ",
    "j": "ㄓㄐˋ", "v": "ㄔㄑ", "c": "ㄕㄒ", "r": "ㄖ",
    "z": "ㄗ", "a": "ㄘㄟ", "s": "ㄙ˙",
    "e": "ㄧㄝ", "x": "ㄨ", "u": "ㄩ",
    "y": "ㄚ", "i": "ㄞ", "w": "ㄠ", "o": "ㄡ",
}

ETEN26_KEY_MAP = {
    "b": "ㄅ", "p": "ㄆㄡ", "m": "ㄇㄢ", "f": "ㄈˊ",
    "d": "ㄉ˙", "t": "ㄊㄤ", "n": "ㄋㄣ", "l": "ㄌㄥ",
    "v": "ㄍㄑ", "k": "ㄎˋ", "h": "ㄏㄦ",
    "g": "ㄓㄐ", "y": "ㄔ", "c": "ㄕㄒ", "j": "ㄖˇ",
    "q": "ㄗㄟ", "w": "ㄘㄝ", "s": "ㄙ",
    "e": "ㄧ", "x": "ㄨ", "u": "ㄩ",
    "a": "ㄚ", "o": "ㄛ", "r": "ㄜ",
    "i": "ㄞ", "z": "ㄠ",
}

STANDARD = BopomofoKeyboardLayout("standard", "Standard", STANDARD_KEY_MAP)
ETEN = BopomofoKeyboardLayout("eten", "ETen", ETEN_KEY_MAP)
HSU = BopomofoKeyboardLayout("hsu", "Hsu", HSU_KEY_MAP)
ETEN26 = BopomofoKeyboardLayout("et26", "ETen26", ETEN26_KEY_MAP)
HANYU_PINYIN = BopomofoKeyboardLayout("hanyupinyin", "HanyuPinyin", is_pinyin=True)
IBM = BopomofoKeyboardLayout("ibm", "IBM", IBM_KEY_MAP)

LAYOUTS: Dict[str, BopomofoKeyboardLayout] = {
    layout.name: layout for layout in (STANDARD, ETEN, HSU, ETEN26, HANYU_PINYIN, IBM)
}


def get_keyboard_layout(name: str) -> BopomofoKeyboardLayout:
    """
    依設定名稱取得鍵盤配置

    Raises:
        ValueError: 名稱不存在
    """
    try:
        return LAYOUTS[name.lower()]
    except KeyError:
        raise ValueError(f"未知的鍵盤配置: {name!r}，可用: {sorted(LAYOUTS)}") from None
