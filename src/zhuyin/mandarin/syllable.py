"""
注音音節 (Bopomofo Syllable)

一個音節由四個槽位組成：聲母、介音、韻母、聲調。
加入新的注音符號時，會取代同類別槽位中原本的符號。
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

CONSONANTS = "ㄅㄆㄇㄈㄉㄊㄋㄌㄍㄎㄏㄐㄑㄒㄓㄔㄕㄖㄗㄘㄙ"
MEDIALS = "ㄧㄨㄩ"
VOWELS = "ㄚㄛㄜㄝㄞㄟㄠㄡㄢㄣㄤㄥㄦ"
TONES = "ˊˇˋ˙"

# 可以單獨成音節的聲母（知、吃、詩、日、資、次、思）
STANDALONE_CONSONANTS = "ㄓㄔㄕㄖㄗㄘㄙ"


class ComponentCategory(Enum):
    CONSONANT = "consonant"
    MEDIAL = "medial"
    VOWEL = "vowel"
    TONE = "tone"


def category_of(component: str) -> Optional[ComponentCategory]:
    """回傳注音符號的類別；非注音符號回傳 None"""
    if len(component) != 1:
        return None
    if component in CONSONANTS:
        return ComponentCategory.CONSONANT
    if component in MEDIALS:
        return ComponentCategory.MEDIAL
    if component in VOWELS:
        return ComponentCategory.VOWEL
    if component in TONES:
        return ComponentCategory.TONE
    return None


@dataclass(frozen=True)
class BopomofoSyllable:
    """
    注音音節

    Attributes:
        consonant: 聲母 (ㄅ…ㄙ)
        medial: 介音 (ㄧㄨㄩ)
        vowel: 韻母 (ㄚ…ㄦ)
        tone: 聲調 (ˊˇˋ˙)，一聲不標
    """
    consonant: str = ""
    medial: str = ""
    vowel: str = ""
    tone: str = ""

    @classmethod
    def from_composed_string(cls, text: str) -> "BopomofoSyllable":
        """
        由注音字串建立音節，例如 "ㄓㄨㄥ" 或 "ㄇㄚ˙"

        無法辨識的字元會被忽略。
        """
        syllable = cls()
        for ch in text:
            if category_of(ch) is not None:
                syllable = syllable.combine(ch)
        return syllable

    def combine(self, component: str) -> "BopomofoSyllable":
        """加入一個注音符號，取代同類別的既有符號"""
        category = category_of(component)
        if category is ComponentCategory.CONSONANT:
            return replace(self, consonant=component)
        if category is ComponentCategory.MEDIAL:
            return replace(self, medial=component)
        if category is ComponentCategory.VOWEL:
            return replace(self, vowel=component)
        if category is ComponentCategory.TONE:
            return replace(self, tone=component)
        raise ValueError(f"不是注音符號: {component!r}")

    def __add__(self, component: str) -> "BopomofoSyllable":
        return self.combine(component)

    def slot(self, category: ComponentCategory) -> str:
        return getattr(self, category.value)

    def is_empty(self) -> bool:
        return not (self.consonant or self.medial or self.vowel or self.tone)

    def has_consonant(self) -> bool:
        return bool(self.consonant)

    def has_medial(self) -> bool:
        return bool(self.medial)

    def has_vowel(self) -> bool:
        return bool(self.vowel)

    def has_tone_marker(self) -> bool:
        return bool(self.tone)

    def has_tone_marker_only(self) -> bool:
        return self.has_tone_marker() and not (self.consonant or self.medial or self.vowel)

    def composed_string(self) -> str:
        return self.consonant + self.medial + self.vowel + self.tone

    def __str__(self) -> str:
        return self.composed_string()
