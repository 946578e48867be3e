"""
漢語拼音 → 注音

漢語拼音鍵盤模式下，使用者輸入的是拉丁字母（ü 以 v 表示）與聲調數字 2-5，
此模組透過 pypinyin 的注音風格轉換取得對應的注音音節。

注意：此模組使用延遲導入，只有在切換到漢語拼音鍵盤時才會載入 pypinyin。
"""

from __future__ import annotations

from functools import lru_cache

from zhuyin.utils.lazy_imports import _get_pypinyin

from .syllable import CONSONANTS, MEDIALS, VOWELS, BopomofoSyllable

PINYIN_TONE_DIGITS = {"2": "ˊ", "3": "ˇ", "4": "ˋ", "5": "˙"}
_COMPONENTS = CONSONANTS + MEDIALS + VOWELS


@lru_cache(maxsize=4096)
def pinyin_to_bopomofo(letters: str) -> str:
    """
    快取版拼音（不含聲調）→ 注音轉換

    Args:
        letters: 拼音字母，例如 "zhong"、"lv"

    Returns:
        str: 不含聲調的注音，例如 "ㄓㄨㄥ"；無法轉換時回傳空字串
    """
    if not letters or not letters.isascii() or not letters.isalpha():
        return ""

    pypinyin = _get_pypinyin()
    converted = pypinyin.style.convert(letters.lower() + "1", style=pypinyin.Style.BOPOMOFO, strict=True)
    if not converted:
        return ""

    bare = "".join(ch for ch in converted if ch in _COMPONENTS)
    leftover = [ch for ch in converted if ch not in _COMPONENTS and ch not in "ˊˇˋ˙" and not ch.isdigit()]
    if leftover or not bare:
        return ""

    # 同類別符號出現兩次代表拼音不合法
    if BopomofoSyllable.from_composed_string(bare).composed_string() != bare:
        return ""
    return bare


def syllable_from_pinyin_sequence(sequence: str) -> BopomofoSyllable:
    """
    將拼音輸入序列（可能以聲調數字結尾）解析為注音音節

    範例:
        >>> syllable_from_pinyin_sequence("ni3").composed_string()
        'ㄋㄧˇ'
    """
    if not sequence:
        return BopomofoSyllable()

    tone = ""
    letters = sequence
    if sequence[-1] in PINYIN_TONE_DIGITS:
        tone = PINYIN_TONE_DIGITS[sequence[-1]]
        letters = sequence[:-1]

    syllable = BopomofoSyllable.from_composed_string(pinyin_to_bopomofo(letters))
    if tone:
        syllable = syllable.combine(tone)
    return syllable
