"""
詞庫資料表

外部載入器負責解析檔案，這裡只接收已解析好的資料列：
- 主詞庫: (讀音, 字詞, 分數)
- 使用者詞 / 排除詞: (讀音, 字詞)
- 替換表: (原字詞, 新字詞)

資料表建好之後不再修改；重新載入時整個換掉。
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from zhuyin.core.language_model import Unigram

UnigramRow = Tuple[str, str, float]
PhraseRow = Tuple[str, str]
ReplacementRow = Tuple[str, str]

# 使用者詞一律使用此分數
USER_PHRASE_SCORE = 0.0


class UnigramTable:
    """
    主詞庫

    同一讀音的條目維持載入順序，分數排序交給組字格節點處理。
    """

    def __init__(self, rows: Iterable[UnigramRow] = ()):
        table: Dict[str, List[Unigram]] = {}
        for reading, value, score in rows:
            table.setdefault(reading, []).append(Unigram(reading, value, float(score)))
        self._table = table

    def __len__(self) -> int:
        return sum(len(v) for v in self._table.values())

    def unigrams_for_key(self, key: str) -> List[Unigram]:
        return list(self._table.get(key, ()))


class UserPhraseTable(UnigramTable):
    """使用者詞或排除詞，分數固定為 USER_PHRASE_SCORE"""

    def __init__(self, rows: Iterable[PhraseRow] = ()):
        super().__init__((reading, value, USER_PHRASE_SCORE) for reading, value in rows)

    def values_for_key(self, key: str) -> List[str]:
        return [u.value for u in self.unigrams_for_key(key)]


class PhraseReplacementMap:
    """
    字詞替換表

    後出現的同名條目覆蓋先前的條目；沒有對應時回傳原字詞。
    """

    def __init__(self, rows: Iterable[ReplacementRow] = ()):
        self._map: Dict[str, str] = {}
        for source, target in rows:
            self._map[source] = target

    def __len__(self) -> int:
        return len(self._map)

    def value_for_key(self, value: str) -> str:
        return self._map.get(value, value)
